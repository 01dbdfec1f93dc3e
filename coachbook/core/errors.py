class BookingSiteError(Exception):
    """Base for errors raised by the booking services."""

    public_message = "Something went wrong. Please try again."


class StoreConfigurationError(BookingSiteError):
    """Record store credentials are missing."""

    public_message = "Booking is temporarily unavailable. Please contact us directly."


class StoreUnavailableError(BookingSiteError):
    """The record store could not be reached or rejected the request."""

    public_message = "We could not reach our booking system. Please try again shortly."


class InvalidBookingInput(BookingSiteError):
    """Malformed visitor input. The message is safe to show."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.public_message = message
