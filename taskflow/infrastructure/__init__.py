"""Infrastructure layer: persistence, security and stats implementations of the application ports."""
