"""Error kinds raised by the identity and messaging use cases."""


class MessagelyError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConflictError(MessagelyError):
    """A user with the requested username already exists."""


class NotFoundError(MessagelyError):
    """The operation targets a user or message that does not exist."""


class InvalidInputError(MessagelyError):
    """A required field is missing or malformed."""


class IntegrityError(MessagelyError):
    """A stored message points at a user that cannot be resolved."""
