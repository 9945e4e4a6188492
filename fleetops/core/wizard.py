"""
Trip creation wizard state machine

States run Basic -> Inbound -> Outbound -> Done. Completed steps only
accumulate; once Basic is complete the leg steps can be entered in any
order and revisited without re-submitting earlier steps.
"""
import enum
import time
from typing import Iterable, List, Optional, Tuple


class WizardStep(str, enum.Enum):
    BASIC = "basic"
    INBOUND = "inbound"
    OUTBOUND = "outbound"
    DONE = "done"


STEP_ORDER = [WizardStep.BASIC, WizardStep.INBOUND, WizardStep.OUTBOUND]


class WizardStepError(Exception):
    """Raised when a step is entered before its guard is satisfied"""


class TripWizard:
    def __init__(self, completed_steps: Optional[Iterable[str]] = None):
        self.completed_steps = {WizardStep(step) for step in (completed_steps or [])}

    @property
    def current_step(self) -> WizardStep:
        if WizardStep.OUTBOUND in self.completed_steps:
            return WizardStep.DONE
        for step in STEP_ORDER:
            if step not in self.completed_steps:
                return step
        return WizardStep.DONE

    def can_enter(self, step: WizardStep) -> bool:
        step = WizardStep(step)
        if step == WizardStep.BASIC:
            return True
        if step == WizardStep.DONE:
            return WizardStep.OUTBOUND in self.completed_steps
        return WizardStep.BASIC in self.completed_steps

    @property
    def navigable_steps(self) -> List[WizardStep]:
        return [step for step in STEP_ORDER if self.can_enter(step)]

    def enter(self, step: WizardStep) -> WizardStep:
        step = WizardStep(step)
        if not self.can_enter(step):
            raise WizardStepError(
                f"Cannot open the {step.value} step before the basic details are saved"
            )
        return step

    def complete(self, step: WizardStep) -> WizardStep:
        """Mark step complete and return the step the wizard moves to"""
        step = self.enter(step)
        if step == WizardStep.DONE:
            raise WizardStepError("The done state has no form to submit")
        self.completed_steps.add(step)
        return self.current_step

    def to_list(self) -> List[str]:
        return [step.value for step in STEP_ORDER if step in self.completed_steps]


def generate_trip_number(now_ms: Optional[int] = None) -> str:
    """Default trip number: TR- plus the last six digits of epoch millis"""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"TR-{str(now_ms)[-6:]}"


def prefill_outbound_route(
    inbound_source: Optional[str],
    inbound_destination: Optional[str],
    source: Optional[str] = None,
    destination: Optional[str] = None,
) -> Tuple[str, str]:
    """Return leg defaults to the inbound leg reversed"""
    return (
        source or inbound_destination or "",
        destination or inbound_source or "",
    )
