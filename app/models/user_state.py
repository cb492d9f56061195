"""
app/models/user_state.py

Purpose: In-progress wizard state document

- One document per user in the `states` collection
- Step decides which of the other fields are meaningful
- Deleted when registration or a report submission finishes
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any

from app.flow.states import Step


class UserState(BaseModel):
    """
    Stored conversation state for one user.

    Absence of a state is modelled by the store returning None, so a
    UserState always carries a step.
    """

    step: Step
    location: Optional[str] = None
    date: Optional[str] = None
    category: Optional[str] = None
    temp_items: List[str] = Field(default_factory=list)
    final_items: Optional[str] = None

    @field_validator("step", mode="before")
    @classmethod
    def coerce_step(cls, v):
        # Older documents store the numeric steps as integers
        return Step.parse(v)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "UserState":
        data = {k: v for k, v in document.items() if k not in ("_id", "user_id")}
        return cls.model_validate(data)

    def to_document(self, user_id: str) -> Dict[str, Any]:
        document = self.model_dump(mode="json", exclude_none=True)
        document["user_id"] = user_id
        return document
