"""
app/models/record.py

Purpose: Submitted report record

- One document per completed wizard run
- Items are the comma-joined selection snapshot (or the "none" sentinel)
- Append-only: never updated or deleted
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Dict, Any


class Record(BaseModel):
    user_id: str
    location: str
    date: str
    category: str
    items: str
    description: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump()
