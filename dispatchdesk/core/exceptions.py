"""
Application-wide exception hierarchy.

Services raise these; blueprints register handlers against them once and
map them to consistent HTTP status codes.

Usage:
    from dispatchdesk.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="Project", resource_id=42)
    raise ValidationError("content is required", details={"content": "empty"})

The gateway family (GatewayError and subclasses) never reaches HTTP
clients: AI features catch it and substitute their fallback value.
"""


class NotFoundError(Exception):
    """Raised when a requested resource does not exist.

    Args:
        resource: Human-readable entity name (e.g. "Project", "LogEntry").
        resource_id: The key that was looked up.
    """

    def __init__(self, resource: str, resource_id: int | str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" id={resource_id}"
        msg += " not found"
        super().__init__(msg)


class ValidationError(Exception):
    """Raised when input is well-formed but violates a business rule.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown (field name → description).
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


# ── Text-generation gateway ──────────────────────────────────────────────────

class GatewayError(Exception):
    """Base class for classified text-generation failures."""


class ProviderUnavailable(GatewayError):
    """No provider credential is configured; no request was attempted."""


class RequestFailed(GatewayError):
    """The provider or the network failed to produce a response."""


class MalformedResponse(GatewayError):
    """Structured output was expected but did not parse or match its schema."""
