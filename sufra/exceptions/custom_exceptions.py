"""Custom exception classes.

Defines application-specific exceptions used to handle error cases with meaningful
messages. Services raise these; ``sufra.exceptions.handlers`` maps them to HTTP
responses.
"""


class SufraError(Exception):
    """Base class for all domain errors raised by the application."""

    def __init__(self, message: str) -> None:
        """Initialize the exception with a human readable message.

        Args:
            message: Description of what went wrong.
        """
        self.message = message
        super().__init__(message)

    def get_message(self) -> str:
        """Get the error message.

        Returns:
            str: The error message.
        """
        return self.message


class ValidationError(SufraError):
    """Raised when input is malformed or violates a business rule.

    Carries field level detail so the caller can point at the offending input.
    """

    def __init__(
        self,
        message: str,
        errors: dict[str, list[str]] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Summary of the validation failure.
            errors: Mapping of field name to the messages for that field.
        """
        self.errors = errors or {}
        super().__init__(message)

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        """Build a validation error about a single field."""
        return cls(message, {field: [message]})

    def get_errors(self) -> dict[str, list[str]]:
        """Get the field level errors.

        Returns:
            dict[str, list[str]]: Messages keyed by field name.
        """
        return self.errors


class AuthenticationRequiredError(SufraError):
    """Raised when an endpoint needs a known user and none was supplied."""

    def __init__(self, message: str = "Authentication required.") -> None:
        """Initialize the exception."""
        super().__init__(message)


class AuthorizationError(SufraError):
    """Raised when a role or ownership check fails.

    The message is logged but never returned to the client.
    """

    def __init__(self, message: str = "This action is unauthorized.") -> None:
        """Initialize the exception.

        Args:
            message: Internal description of the failed check.
        """
        super().__init__(message)


class NotFoundError(SufraError):
    """Raised when an entity is missing or not visible to the actor.

    Hidden content is reported exactly like absent content.
    """

    def __init__(self, resource: str, identifier: object) -> None:
        """Initialize the exception.

        Args:
            resource: Human readable entity name, e.g. ``"Recipe"``.
            identifier: The id or slug that was looked up.
        """
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found.")

    def get_resource(self) -> str:
        """Get the entity name that could not be found.

        Returns:
            str: The entity name.
        """
        return self.resource


class ConflictError(SufraError):
    """Raised when an operation conflicts with existing state."""


class InvalidStateTransitionError(ConflictError):
    """Raised when a moderation transition is not legal from the current state."""

    def __init__(self, entity: str, from_state: str, transition: str) -> None:
        """Initialize the exception.

        Args:
            entity: ``"recipe"`` or ``"list"``.
            from_state: The current status value.
            transition: The attempted transition name.
        """
        self.entity = entity
        self.from_state = from_state
        self.transition = transition
        super().__init__(f"Cannot {transition} a {from_state} {entity}.")


class ConfigurationError(SufraError):
    """Raised when required server side configuration is missing."""


class UpstreamError(SufraError):
    """Raised when a call to an external API fails.

    ``status_code`` is the upstream HTTP status, or None for transport failures.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Error message reported by the upstream service.
            status_code: Upstream HTTP status code, if a response was received.
        """
        self.status_code = status_code
        super().__init__(message)

    def get_status_code(self) -> int | None:
        """Get the upstream status code.

        Returns:
            int | None: The upstream HTTP status, if any.
        """
        return self.status_code


class RateLimitedError(UpstreamError):
    """Raised when the external API answers with HTTP 429."""

    def __init__(
        self,
        message: str = (
            "The AI service is receiving too many requests. "
            "Please wait a minute and try again."
        ),
    ) -> None:
        """Initialize the exception."""
        super().__init__(message, status_code=429)


class ParseError(SufraError):
    """Raised when an upstream reply cannot be parsed into the expected shape."""

    def __init__(self, message: str, raw: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: What was wrong with the reply.
            raw: The raw reply text, kept for logging.
        """
        self.raw = raw
        super().__init__(message)
