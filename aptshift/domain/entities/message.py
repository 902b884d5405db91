from dataclasses import dataclass


@dataclass(frozen=True)
class Message:
    user_id: str
    chat_id: str
    text: str
