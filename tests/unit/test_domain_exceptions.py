"""Tests for domain exceptions (error_code, message, details)."""

from taskflow.domain.exceptions import (
    AuthorizationException,
    AwaitingApprovalError,
    ConcurrentModificationError,
    DuplicateWorkflowNameError,
    InvalidPermutationError,
    InvalidStepError,
    LastStepError,
    ReferencedStepError,
    ResourceNotFoundException,
    TaskflowException,
    ValidationException,
)


def test_taskflow_exception_default_error_code() -> None:
    """Base TaskflowException uses class name as error_code when not provided."""
    exc = TaskflowException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "TaskflowException"
    assert exc.details == {}


def test_to_dict_shape() -> None:
    """to_dict returns the JSON error body."""
    exc = TaskflowException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_validation_exception_field_and_value() -> None:
    """ValidationException sets VALIDATION_ERROR and includes field/value when given."""
    exc = ValidationException("Bad name", field="name", value="")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "name", "value": ""}


def test_validation_exception_without_field() -> None:
    """ValidationException without field has empty details."""
    assert ValidationException("Invalid").details == {}


def test_duplicate_name_is_validation_error() -> None:
    """Duplicate workflow names surface as a validation error on the name field."""
    exc = DuplicateWorkflowNameError("Social")
    assert isinstance(exc, ValidationException)
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details["field"] == "name"


def test_invalid_step_error_code() -> None:
    """InvalidStepError keeps ValidationException's shape with its own code."""
    exc = InvalidStepError("Bad color", field="color", value="red")
    assert isinstance(exc, ValidationException)
    assert exc.error_code == "INVALID_STEP"
    assert exc.details == {"field": "color", "value": "red"}


def test_resource_not_found() -> None:
    """ResourceNotFoundException carries type and id."""
    exc = ResourceNotFoundException("workflow", "wf1")
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.details == {"resource_type": "workflow", "resource_id": "wf1"}
    assert "wf1" in exc.message


def test_authorization_exception_message_from_resource_and_action() -> None:
    """AuthorizationException builds its message from resource and action."""
    exc = AuthorizationException(resource="workflow", action="create")
    assert exc.error_code == "PERMISSION_DENIED"
    assert exc.message == "Permission denied: create on workflow"


def test_step_edit_errors() -> None:
    """Step-edit errors carry the workflow and step order."""
    assert LastStepError("wf1", 1).details == {"workflow_id": "wf1", "order": 1}
    ref = ReferencedStepError("wf1", 3, 2)
    assert ref.error_code == "REFERENCED_STEP"
    assert ref.details["task_count"] == 2


def test_invalid_permutation_lists_problems() -> None:
    """InvalidPermutationError reports missing, unknown and duplicated ids."""
    exc = InvalidPermutationError("wf1", missing=["a"], unknown=["z"])
    assert exc.error_code == "INVALID_PERMUTATION"
    assert exc.details["missing"] == ["a"]
    assert exc.details["unknown"] == ["z"]
    assert exc.details["duplicates"] == []


def test_awaiting_approval_and_concurrency() -> None:
    """Progression conflicts carry enough context for the caller to retry."""
    assert AwaitingApprovalError("t1", 4, "reject").details["order"] == 4
    exc = ConcurrentModificationError("task", "t1", 3)
    assert exc.error_code == "CONCURRENT_MODIFICATION"
    assert exc.details["expected_version"] == 3
