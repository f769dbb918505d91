"""Error taxonomy for content generation.

Transport-level failures (network, timeout, HTTP status) surface to the
caller unchanged. Data-level partial failures (unparsable tool arguments,
garbage stream lines) are recovered locally and never reach this module.
"""

from __future__ import annotations


class ContentGenerationError(Exception):
    """Base error for all content-generation failures."""


class NetworkError(ContentGenerationError):
    """The backend could not be reached (DNS, refused connection, reset)."""

    def __init__(self, provider: str, detail: str = "") -> None:
        self.provider = provider
        self.detail = detail
        msg = f"Network error: Unable to connect to {provider} API."
        if detail:
            msg += f" {detail}"
        super().__init__(msg)


class RequestTimeoutError(ContentGenerationError):
    """The request exceeded its timeout or was cancelled by the caller."""

    def __init__(self, provider: str, timeout: float | None = None, *, aborted: bool = False) -> None:
        self.provider = provider
        self.timeout = timeout
        self.aborted = aborted
        if aborted:
            msg = f"Request timeout: {provider} request was aborted."
        elif timeout is not None:
            msg = f"Request timeout: {provider} API did not respond within {timeout:g}s."
        else:
            msg = f"Request timeout: {provider} API did not respond in time."
        super().__init__(msg)


class HttpError(ContentGenerationError):
    """The backend answered with a non-2xx status."""

    def __init__(self, provider: str, status: int, body: str = "", guidance: str | None = None) -> None:
        self.provider = provider
        self.status = status
        self.body = body
        self.guidance = guidance
        msg = f"{provider} API error {status}"
        if guidance:
            msg += f": {guidance}"
        elif body:
            msg += f": {body}"
        super().__init__(msg)


class ConversionError(ContentGenerationError):
    """A request or response could not be translated."""


class UnsupportedProviderError(ContentGenerationError):
    """No generator is built in or registered for the provider id."""

    def __init__(self, provider_id: str) -> None:
        self.provider_id = provider_id
        super().__init__(f"No content generator available for provider: {provider_id}")


class UnsupportedOperationError(ContentGenerationError):
    """The backend does not implement the requested operation."""

    def __init__(self, operation: str, provider: str) -> None:
        self.operation = operation
        self.provider = provider
        super().__init__(f"{provider} does not support {operation}")


class ConfigurationError(ContentGenerationError):
    """Generator configuration is missing or invalid."""


class ToolDiscoveryError(ContentGenerationError):
    """The tool discovery command failed or produced unusable output."""

    def __init__(self, command: str, detail: str) -> None:
        self.command = command
        self.detail = detail
        super().__init__(f"Tool discovery failed for {command!r}: {detail}")
