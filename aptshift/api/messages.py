from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from aptshift.api.schemas import MessageRequestSchema, MessageResponseSchema
from aptshift.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from aptshift.domain.entities.message import Message
from aptshift.wiring.dependencies import get_handle_incoming_message_use_case


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/messages", response_model=MessageResponseSchema)
def handle_message(
    req: MessageRequestSchema,
    uc: HandleIncomingMessageUseCase = Depends(get_handle_incoming_message_use_case),
) -> MessageResponseSchema:
    message = Message(user_id=req.user_id, chat_id=req.chat_id or req.user_id, text=req.text)
    reply = uc.handle(message)
    logger.info("Message handled", extra={"user_id": req.user_id, "outcome": reply.outcome})
    return MessageResponseSchema(replies=reply.texts, outcome=reply.outcome)
