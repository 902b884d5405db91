from abc import ABC, abstractmethod
from typing import Any

from aptshift.domain.entities.conversation_state import ConversationState


class ConversationStorePort(ABC):
    @abstractmethod
    def load(self, user_id: str) -> ConversationState:
        """
        Load the user's conversation state.
        Never fails on a missing record: returns a fresh state with message_count=0.
        """
        raise NotImplementedError

    @abstractmethod
    def save(self, user_id: str, last_message: str, last_context: dict[str, Any]) -> ConversationState:
        """
        Overwrite last_message/last_context, increment message_count and stamp last_updated.
        Last write wins.
        """
        raise NotImplementedError

    @abstractmethod
    def reset(self, user_id: str) -> None:
        raise NotImplementedError
