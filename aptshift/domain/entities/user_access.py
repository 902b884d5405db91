from dataclasses import dataclass

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class UserAccess:
    user_id: str
    is_admin: bool = False
    assigned_apartment_ids: tuple[str, ...] = ()

    @staticmethod
    def from_documents(user_id: str, user_doc: dict | None, assignment_doc: dict | None) -> "UserAccess":
        role = str((user_doc or {}).get("role") or "").strip().lower()
        apartment_ids = tuple(
            dict.fromkeys(str(a).strip() for a in (assignment_doc or {}).get("apartmentIds") or [] if str(a).strip())
        )
        return UserAccess(user_id=user_id, is_admin=role == ADMIN_ROLE, assigned_apartment_ids=apartment_ids)
