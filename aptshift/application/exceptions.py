class LLMUpstreamError(RuntimeError):
    """Raised when the interpreter provider fails (timeouts, network errors, service unavailable)."""
    pass


class LLMContractError(RuntimeError):
    """Raised when the interpreter adapter violates its contract (bad format or missing data)."""
    pass


class StoreContentionError(RuntimeError):
    """Raised when a store transaction keeps losing to concurrent writers after its retry."""
    pass


class BookingNotFoundError(LookupError):
    """Raised inside a transaction when the target booking document does not exist."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(f"Booking {booking_id} not found")
        self.booking_id = booking_id


class TypeMismatchError(ValueError):
    """Raised when a change type cannot be applied to the booking's type."""

    def __init__(self, change_type: str, booking_type: str) -> None:
        super().__init__(f"Cannot apply {change_type} change to {booking_type} booking")
        self.change_type = change_type
        self.booking_type = booking_type


class PermissionDeniedError(PermissionError):
    """Raised by admin-only operations invoked by a non-admin."""
    pass
