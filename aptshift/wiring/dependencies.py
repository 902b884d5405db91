from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from aptshift.application.ports.document_store import DocumentStorePort
from aptshift.application.ports.interpreter import InterpreterPort
from aptshift.application.use_cases.apply_time_change import ApplyTimeChangeUseCase
from aptshift.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from aptshift.application.use_cases.manage_assignments import ManageAssignmentsUseCase
from aptshift.application.use_cases.permissions import PermissionGuard
from aptshift.application.use_cases.update_booking_info import UpdateBookingInfoUseCase
from aptshift.core.config import settings
from aptshift.infrastructure.llm.mock_interpreter import MockInterpreter
from aptshift.infrastructure.llm.openai_interpreter import OpenAIInterpreter
from aptshift.infrastructure.store.access_store import DocumentAccessStore
from aptshift.infrastructure.store.booking_store import DocumentBookingStore
from aptshift.infrastructure.store.conversation_store import DocumentConversationStore
from aptshift.infrastructure.store.json_store import JsonDocumentStore
from aptshift.infrastructure.store.memory_store import MemoryDocumentStore


_document_store: DocumentStorePort | None = None


@lru_cache
def get_interpreter() -> InterpreterPort:
    logger = logging.getLogger(__name__)
    if settings.OPENAI_API_KEY and settings.OPENAI_API_KEY.strip():
        logger.info("Using OpenAIInterpreter", extra={"model": settings.OPENAI_MODEL_INTERPRET})
        return OpenAIInterpreter()
    logger.info("Using MockInterpreter (OPENAI_API_KEY not set)")
    return MockInterpreter()


def get_document_store() -> DocumentStorePort:
    global _document_store
    if _document_store is None:
        if settings.STORE_PROVIDER.lower() == "memory":
            _document_store = MemoryDocumentStore(max_attempts=settings.STORE_TRANSACTION_ATTEMPTS)
        else:
            _document_store = JsonDocumentStore(
                data_dir=settings.STORE_DATA_DIR,
                max_attempts=settings.STORE_TRANSACTION_ATTEMPTS,
            )
    return _document_store


def get_conversation_store() -> DocumentConversationStore:
    return DocumentConversationStore(get_document_store())


def get_booking_store() -> DocumentBookingStore:
    return DocumentBookingStore(get_document_store())


def get_permission_guard() -> PermissionGuard:
    return PermissionGuard(DocumentAccessStore(get_document_store()))


def get_handle_incoming_message_use_case() -> HandleIncomingMessageUseCase:
    return HandleIncomingMessageUseCase(
        conversation_store=get_conversation_store(),
        booking_store=get_booking_store(),
        permission_guard=get_permission_guard(),
        interpreter=get_interpreter(),
        applier=ApplyTimeChangeUseCase(store=get_document_store()),
        timezone=ZoneInfo(settings.BUSINESS_TIMEZONE),
        window_days=settings.CANDIDATE_WINDOW_DAYS,
    )


def get_update_booking_info_use_case() -> UpdateBookingInfoUseCase:
    return UpdateBookingInfoUseCase(store=get_document_store(), permission_guard=get_permission_guard())


def get_manage_assignments_use_case() -> ManageAssignmentsUseCase:
    store = get_document_store()
    access_store = DocumentAccessStore(store)
    return ManageAssignmentsUseCase(access_store=access_store, permission_guard=PermissionGuard(access_store))
