"""
app/models/user.py

Purpose: Registered user profile

- LINE user ID
- Ministry, sutra name and display name given at registration
- Registration timestamp
- Existence of the document is the registration gate
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Dict, Any


class UserProfile(BaseModel):
    """Profile created once by the registration flow and never updated."""

    user_id: str
    ministry: str
    sutra_name: str
    name: str
    registered_at: datetime = Field(default_factory=datetime.utcnow)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump()
