from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class MessageRequestSchema(_Schema):
    text: str = Field(min_length=1)
    user_id: str = Field(alias="userId", min_length=1)
    chat_id: str | None = Field(None, alias="chatId")


class MessageResponseSchema(_Schema):
    replies: list[str]
    outcome: str


class AssignmentRequestSchema(_Schema):
    action: Literal["add", "remove"]
    apartment_ids: list[str] = Field(alias="apartmentIds", min_length=1)


class AssignmentResponseSchema(_Schema):
    user_id: str = Field(alias="userId")
    apartment_ids: list[str] = Field(alias="apartmentIds")
    message: str


class BookingInfoRequestSchema(_Schema):
    sum_to_collect: float | None = Field(None, alias="sumToCollect")
    keys_count: int | None = Field(None, alias="keysCount")


class BookingInfoResponseSchema(_Schema):
    booking_id: str = Field(alias="bookingId")
    message: str
