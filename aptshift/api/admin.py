from fastapi import APIRouter, Depends, Header, HTTPException

from aptshift.api.schemas import (
    AssignmentRequestSchema,
    AssignmentResponseSchema,
    BookingInfoRequestSchema,
    BookingInfoResponseSchema,
)
from aptshift.application.exceptions import PermissionDeniedError
from aptshift.application.ports.conversation_store import ConversationStorePort
from aptshift.application.use_cases.manage_assignments import AssignmentResult, ManageAssignmentsUseCase
from aptshift.application.use_cases.permissions import PermissionGuard
from aptshift.application.use_cases.update_booking_info import UpdateBookingInfoUseCase
from aptshift.wiring.dependencies import (
    get_conversation_store,
    get_manage_assignments_use_case,
    get_permission_guard,
    get_update_booking_info_use_case,
)

router = APIRouter()

_INFO_STATUS = {"invalid": 400, "permission_denied": 403, "not_found": 404, "transient_conflict": 409}


def _assignment_response(user_id: str, result: AssignmentResult) -> AssignmentResponseSchema:
    if not result.success:
        raise HTTPException(status_code=404, detail=result.message)
    return AssignmentResponseSchema(user_id=user_id, apartment_ids=list(result.apartment_ids), message=result.message)


@router.post("/assignments/{user_id}", response_model=AssignmentResponseSchema, response_model_by_alias=True)
def change_assignments(
    user_id: str,
    req: AssignmentRequestSchema,
    x_user_id: str = Header(..., alias="X-User-Id"),
    uc: ManageAssignmentsUseCase = Depends(get_manage_assignments_use_case),
):
    try:
        if req.action == "add":
            result = uc.add(x_user_id, user_id, req.apartment_ids)
        else:
            result = uc.remove(x_user_id, user_id, req.apartment_ids)
    except PermissionDeniedError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return _assignment_response(user_id, result)


@router.get("/assignments/{user_id}", response_model=AssignmentResponseSchema, response_model_by_alias=True)
def show_assignments(
    user_id: str,
    x_user_id: str = Header(..., alias="X-User-Id"),
    uc: ManageAssignmentsUseCase = Depends(get_manage_assignments_use_case),
):
    try:
        result = uc.show(x_user_id, user_id)
    except PermissionDeniedError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return _assignment_response(user_id, result)


@router.patch("/bookings/{booking_id}/info", response_model=BookingInfoResponseSchema, response_model_by_alias=True)
def update_booking_info(
    booking_id: str,
    req: BookingInfoRequestSchema,
    x_user_id: str = Header(..., alias="X-User-Id"),
    uc: UpdateBookingInfoUseCase = Depends(get_update_booking_info_use_case),
):
    result = uc.execute(
        booking_id=booking_id,
        actor_id=x_user_id,
        sum_to_collect=req.sum_to_collect,
        keys_count=req.keys_count,
    )
    if not result.success:
        raise HTTPException(status_code=_INFO_STATUS.get(result.error_kind, 500), detail=result.message)
    return BookingInfoResponseSchema(booking_id=booking_id, message=result.message)


@router.delete("/conversations/{user_id}", status_code=204)
def reset_conversation(
    user_id: str,
    x_user_id: str = Header(..., alias="X-User-Id"),
    store: ConversationStorePort = Depends(get_conversation_store),
    guard: PermissionGuard = Depends(get_permission_guard),
) -> None:
    # Users may reset their own conversation; admins may reset anyone's.
    if x_user_id != user_id and not guard.load_access(x_user_id).is_admin:
        raise HTTPException(status_code=403, detail="Forbidden")
    store.reset(user_id)
