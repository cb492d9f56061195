"""
app/flow/states.py

Purpose: Defines the persisted conversation steps

- Enum for each step a user can be parked in between events
- Metadata for the five visible wizard pages (labels, numbering)
- State transition validation
"""

from enum import Enum
from typing import Dict, List, Optional
from dataclasses import dataclass


class Step(str, Enum):
    """
    Persisted step of a user's in-progress conversation.

    A user without a stored state has no step at all; that case is
    represented by ``None`` rather than by a member of this enum.
    """

    # Waiting for "ministry sutra_name name"
    REGISTERING = "registering"

    # Multi-select of practice items (wizard page 4)
    SELECT_ITEMS = "4"

    # Waiting for the free-text description (wizard page 5)
    DESCRIBE = "5"

    @classmethod
    def parse(cls, value) -> "Step":
        """Accepts enum members, their values, and legacy integer steps."""
        if isinstance(value, cls):
            return value
        return cls(str(value))


@dataclass(frozen=True)
class WizardPage:
    """
    Metadata for one page of the report wizard.
    """
    number: int
    title: str
    alt_text: str
    total_pages: int = 5

    @property
    def header(self) -> str:
        return f"步驟 {self.number}/{self.total_pages}：{self.title}"


WIZARD_PAGES: Dict[str, WizardPage] = {
    "location": WizardPage(number=1, title="請選擇參加地點", alt_text="請選擇地點"),
    "date": WizardPage(number=2, title="請選擇實踐日期", alt_text="請選擇日期"),
    "category": WizardPage(number=3, title="請選擇登錄項目", alt_text="請選擇項目"),
    "items": WizardPage(number=4, title="實踐項目 (可複選)", alt_text="請選擇細項"),
}


# Valid step changes. None is "no stored state".
# Pages 1-3 never write state, so a new run may start from any step.
STEP_TRANSITIONS: Dict[Optional[Step], List[Optional[Step]]] = {
    None: [
        None,
        Step.REGISTERING,
        Step.SELECT_ITEMS,
    ],
    Step.REGISTERING: [
        None,  # Registration completed
        Step.REGISTERING,
        Step.SELECT_ITEMS,
    ],
    Step.SELECT_ITEMS: [
        Step.SELECT_ITEMS,  # Toggle or category chosen again
        Step.DESCRIBE,
        Step.REGISTERING,
    ],
    Step.DESCRIBE: [
        None,  # Record submitted
        Step.DESCRIBE,
        Step.SELECT_ITEMS,
        Step.REGISTERING,
    ],
}


def is_valid_transition(from_step: Optional[Step], to_step: Optional[Step]) -> bool:
    """
    Checks if a step transition is valid.

    Args:
        from_step: Current step (None when no state is stored)
        to_step: Target step (None when the state is deleted)

    Returns:
        True if transition is allowed, False otherwise
    """
    return to_step in STEP_TRANSITIONS.get(from_step, [])


def get_wizard_page(name: str) -> WizardPage:
    """
    Retrieves metadata for a wizard page.

    Raises:
        KeyError: If the page name is unknown
    """
    return WIZARD_PAGES[name]
