"""Application use cases (orchestrate domain rules over repository ports)."""
