from __future__ import annotations

import time
from typing import Any

from aptshift.application.ports.conversation_store import ConversationStorePort
from aptshift.application.ports.document_store import DocumentStorePort
from aptshift.core.constants import CONVERSATIONS_COLLECTION
from aptshift.domain.entities.conversation_state import ConversationState


class DocumentConversationStore(ConversationStorePort):
    """Conversation state kept in the `conversations` collection, keyed by user id."""

    def __init__(self, store: DocumentStorePort) -> None:
        self._store = store

    def _serialize_state(self, state: ConversationState) -> dict[str, Any]:
        return {
            "userId": state.user_id,
            "lastMessage": state.last_message,
            "lastContext": dict(state.last_context),
            "lastUpdated": state.last_updated,
            "messageCount": state.message_count,
        }

    def _deserialize_state(self, user_id: str, data: dict[str, Any]) -> ConversationState:
        context = data.get("lastContext")
        return ConversationState(
            user_id=user_id,
            last_message=data.get("lastMessage"),
            last_context=context if isinstance(context, dict) else {},
            last_updated=data.get("lastUpdated"),
            message_count=int(data.get("messageCount") or 0),
        )

    def load(self, user_id: str) -> ConversationState:
        data = self._store.get(CONVERSATIONS_COLLECTION, user_id)
        if data is None:
            return ConversationState(user_id=user_id)
        return self._deserialize_state(user_id, data)

    def save(self, user_id: str, last_message: str, last_context: dict[str, Any]) -> ConversationState:
        previous = self.load(user_id)
        state = ConversationState(
            user_id=user_id,
            last_message=last_message,
            last_context=dict(last_context or {}),
            last_updated=time.time(),
            message_count=previous.message_count + 1,
        )
        self._store.set(CONVERSATIONS_COLLECTION, user_id, self._serialize_state(state))
        return state

    def reset(self, user_id: str) -> None:
        self._store.delete(CONVERSATIONS_COLLECTION, user_id)
