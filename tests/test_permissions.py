from aptshift.application.use_cases.permissions import PermissionGuard
from aptshift.infrastructure.store.access_store import DocumentAccessStore


def test_admin_is_allowed_everywhere(store, add_user):
    add_user("boss", role="admin")
    guard = PermissionGuard(DocumentAccessStore(store))

    access = guard.load_access("boss")

    assert access.is_admin
    assert guard.authorize(access, "432")


def test_cleaner_limited_to_assigned_apartments(store, add_user):
    add_user("cleaner_1", apartments=("598", "562", "598"))
    guard = PermissionGuard(DocumentAccessStore(store))

    access = guard.load_access("cleaner_1")

    assert access.assigned_apartment_ids == ("598", "562")
    assert guard.authorize(access, "598")
    assert not guard.authorize(access, "432")
    assert not guard.authorize(access, None)


def test_unknown_user_has_no_access(store):
    guard = PermissionGuard(DocumentAccessStore(store))

    access = guard.load_access("stranger")

    assert not access.is_admin
    assert not guard.can_view(access, "598")
