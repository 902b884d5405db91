from abc import ABC, abstractmethod

from aptshift.domain.entities.user_access import UserAccess


class AccessStorePort(ABC):
    @abstractmethod
    def get_access(self, user_id: str) -> UserAccess:
        """Role flag from `users` plus apartment ids from `cleaningAssignments`. Unknown users get no access."""
        raise NotImplementedError

    @abstractmethod
    def set_assigned_apartments(self, user_id: str, apartment_ids: list[str]) -> None:
        raise NotImplementedError

    @abstractmethod
    def user_exists(self, user_id: str) -> bool:
        raise NotImplementedError
