"""Tests for the built-in social media workflow."""

from taskflow.application.services.default_workflows import (
    SOCIAL_MEDIA_WORKFLOW_NAME,
    social_media_workflow,
)
from taskflow.domain.entities.workflow import WorkflowEntity


def test_social_media_workflow_has_eight_valid_steps() -> None:
    """The definition builds into a valid workflow with eight ordered steps."""
    data = social_media_workflow()
    wf = WorkflowEntity.new(data.name, data.description, [s.to_step() for s in data.steps])
    assert wf.name == SOCIAL_MEDIA_WORKFLOW_NAME
    assert wf.step_count == 8
    assert [s.order for s in wf.steps] == list(range(1, 9))
    assert wf.steps[0].name == "Briefing"
    assert wf.steps[3].name == "Revisão Interna"


def test_client_approval_step_is_fifth() -> None:
    """Only the fifth step is a client approval step, and it is visible to clients."""
    steps = social_media_workflow().steps
    approval = [i for i, s in enumerate(steps) if s.settings.is_client_approval_step]
    assert approval == [4]
    assert steps[4].settings.allow_client_access
    assert steps[4].settings.requires_approval
    assert steps[3].settings.requires_approval
    assert not steps[3].settings.allow_client_access
