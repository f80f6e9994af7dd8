"""Error kinds raised by the booking core and rendered by the HTTP layer."""


class BookingError(Exception):
    status_code = 400

    def __init__(self, message: str, status_code: int = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class NotFound(BookingError):
    status_code = 404


class Forbidden(BookingError):
    status_code = 403


class BadRequest(BookingError):
    status_code = 400


class Conflict(BookingError):
    # Constraint violations are reported to clients as bad requests
    status_code = 400


class Internal(BookingError):
    status_code = 500


class BoothCapExceeded(BadRequest):
    """Raised when a user's booths for one exhibition would pass the cap."""
