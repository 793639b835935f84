"""Three-step form state.

The lead form collects basic info, then project details, then consent.
State is an immutable value: every transition returns a new ``FormState``
and never mutates the old one.
"""

from dataclasses import dataclass, field, replace
from typing import Any

from leadpages.services.validator import validate_step
from leadpages.utils.exceptions import ValidationFailed

TOTAL_STEPS = 3


@dataclass(frozen=True)
class FormState:
    """Where the visitor is in the form and what they entered so far."""

    step: int = 1
    fields: dict[str, Any] = field(default_factory=dict)
    errors: list[dict] = field(default_factory=list)
    complete: bool = False

    @property
    def progress(self) -> float:
        """Fraction of steps passed, for the progress bar."""
        if self.complete:
            return 1.0
        return (self.step - 1) / TOTAL_STEPS


def start() -> FormState:
    """Initial state: step 1, nothing entered."""
    return FormState()


def advance(state: FormState, data: dict[str, Any]) -> FormState:
    """Merge the step's input and move forward if it validates.

    On failure the state stays on the same step and carries the errors.
    Passing the last step marks the form complete.
    """
    if state.complete:
        return state

    fields = {**state.fields, **data}
    try:
        normalized = validate_step(state.step, fields)
    except ValidationFailed as e:
        return replace(state, fields=fields, errors=e.errors)

    fields.update(normalized)
    if state.step >= TOTAL_STEPS:
        return replace(state, fields=fields, errors=[], complete=True)
    return replace(state, step=state.step + 1, fields=fields, errors=[])


def back(state: FormState) -> FormState:
    """Go to the previous step, keeping entered values."""
    return replace(state, step=max(1, state.step - 1), errors=[], complete=False)


def to_submission(state: FormState, **extra: Any) -> dict[str, Any]:
    """Build the submit-lead request body from a completed form.

    Args:
        state: A completed form state.
        **extra: Additional body keys (``landingPageUrl``, attribution).

    Raises:
        ValueError: If the form is not complete.
    """
    if not state.complete:
        raise ValueError("Form is not complete")
    return {**state.fields, **extra}
