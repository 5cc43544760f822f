class ExtractionError(Exception):
    """Base exception for recognition-service failures."""


class ConfigurationError(ExtractionError):
    """Raised when service credentials or provider settings are missing or rejected."""


class SizeLimitError(ExtractionError):
    """Raised when the service (or the local guard) refuses a payload for its size."""


class RateLimitError(ExtractionError):
    """Raised when the service rejects a call with a rate-limit or quota response."""


class ExtractionTimeoutError(ExtractionError):
    """Raised when a call exceeds its wall-clock timeout."""


class UpstreamError(ExtractionError):
    """Raised on network failures, server errors, or malformed service responses."""


class EmptyResponseError(ExtractionError):
    """Raised when the service answers with no usable text."""


class ProtocolParseError(ExtractionError):
    """Structural violation of the sentinel protocol.

    Never raised by the parser, which downgrades violations to the
    body-only fallback. Kept so callers can name the condition.
    """
