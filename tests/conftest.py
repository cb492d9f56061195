from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import pytest

from app.core.exceptions import StateNotFoundError
from app.flow.engine import ConversationEngine
from app.flow.events import ActionKind, ButtonAction, InboundEvent, TextMessage
from app.models.record import Record
from app.models.user import UserProfile
from app.models.user_state import UserState
from app.services.session_service import encode_fields

USER_ID = "U1234567890abcdef"

# 2024-01-01 02:00 UTC is 10:00 on the same day at UTC+8
FIXED_NOW = datetime(2024, 1, 1, 2, 0, 0)


class FakeStateStore:
    def __init__(self):
        self.documents: Dict[str, Dict[str, Any]] = {}

    async def get(self, user_id: str) -> Optional[UserState]:
        document = self.documents.get(user_id)
        if document is None:
            return None
        return UserState.from_document(document)

    async def set(self, user_id: str, state: UserState) -> None:
        self.documents[user_id] = state.to_document(user_id)

    async def merge(self, user_id: str, fields: Dict[str, Any]) -> None:
        if user_id not in self.documents:
            raise StateNotFoundError(user_id)
        self.documents[user_id].update(encode_fields(fields))

    async def delete(self, user_id: str) -> None:
        self.documents.pop(user_id, None)


class FakeProfileStore:
    def __init__(self):
        self.profiles: Dict[str, UserProfile] = {}

    async def exists(self, user_id: str) -> bool:
        return user_id in self.profiles

    async def create(self, profile: UserProfile) -> bool:
        if profile.user_id in self.profiles:
            return False
        self.profiles[profile.user_id] = profile
        return True


class FakeRecordStore:
    def __init__(self):
        self.records: List[Record] = []

    async def add(self, record: Record) -> str:
        self.records.append(record)
        return str(len(self.records))


class FakeReplier:
    def __init__(self):
        self.replies: List[Tuple[str, List[Dict[str, Any]]]] = []

    async def reply(self, reply_token: str, messages: List[Dict[str, Any]]) -> None:
        self.replies.append((reply_token, messages))

    @property
    def last_messages(self) -> List[Dict[str, Any]]:
        return self.replies[-1][1]


@pytest.fixture
def state_store():
    return FakeStateStore()


@pytest.fixture
def profile_store():
    return FakeProfileStore()


@pytest.fixture
def record_store():
    return FakeRecordStore()


@pytest.fixture
def replier():
    return FakeReplier()


@pytest.fixture
def engine(state_store, profile_store, record_store, replier):
    return ConversationEngine(
        states=state_store,
        profiles=profile_store,
        records=record_store,
        replier=replier,
        timezone_offset_hours=8,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def registered(profile_store):
    profile_store.profiles[USER_ID] = UserProfile(
        user_id=USER_ID,
        ministry="青年部",
        sutra_name="經親",
        name="王小明",
    )
    return profile_store


def text_event(text: str, user_id: str = USER_ID, reply_token: str = "token") -> InboundEvent:
    return InboundEvent(user_id=user_id, reply_token=reply_token, event=TextMessage(text=text))


def button_event(
    kind: ActionKind,
    user_id: str = USER_ID,
    reply_token: str = "token",
    params: Optional[Dict[str, str]] = None,
    **payload: str
) -> InboundEvent:
    payload = {"action": kind.value, **payload}
    return InboundEvent(
        user_id=user_id,
        reply_token=reply_token,
        event=ButtonAction(kind=kind, payload=payload, params=params or {}),
    )
