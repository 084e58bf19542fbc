"""Built-in workflow definitions shipped with the service.

The social media pipeline is the agency's standard flow and is what the seed
script installs as the default workflow on a fresh database.
"""

from __future__ import annotations

from taskflow.application.dtos.workflow import StepInput, WorkflowCreate
from taskflow.domain.entities.workflow import StepSettings

SOCIAL_MEDIA_WORKFLOW_NAME = "Social Media - Fluxo Completo"


def social_media_workflow() -> WorkflowCreate:
    """Return the eight-step social media content workflow."""
    return WorkflowCreate(
        name=SOCIAL_MEDIA_WORKFLOW_NAME,
        description="Fluxo de trabalho completo para criação de conteúdo de redes sociais",
        steps=[
            StepInput(
                name="Briefing",
                description="Coleta de informações e requisitos do cliente",
                color="#10B981",
                icon="document-text",
            ),
            StepInput(
                name="Estratégia",
                description="Planejamento estratégico do conteúdo",
                color="#8B5CF6",
                icon="light-bulb",
            ),
            StepInput(
                name="Criação",
                description="Desenvolvimento do conteúdo visual e textual",
                color="#F59E0B",
                icon="paint-brush",
            ),
            StepInput(
                name="Revisão Interna",
                description="Revisão e ajustes internos antes da apresentação",
                color="#EF4444",
                icon="eye",
                settings=StepSettings(requires_approval=True),
            ),
            StepInput(
                name="Aprovação Cliente",
                description="Apresentação ao cliente para aprovação",
                color="#3B82F6",
                icon="check-circle",
                settings=StepSettings(
                    allow_client_access=True,
                    requires_approval=True,
                    allow_multiple_files=False,
                    is_client_approval_step=True,
                ),
            ),
            StepInput(
                name="Ajustes",
                description="Implementação de ajustes solicitados pelo cliente",
                color="#F97316",
                icon="wrench",
            ),
            StepInput(
                name="Publicação",
                description="Publicação do conteúdo nas redes sociais",
                color="#06B6D4",
                icon="share",
            ),
            StepInput(
                name="Relatório",
                description="Análise de performance e relatório final",
                color="#84CC16",
                icon="chart-bar",
                settings=StepSettings(allow_client_access=True),
            ),
        ],
    )
