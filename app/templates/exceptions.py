class TemplateError(Exception):
    """Base exception for template rule handling."""


class InvalidTemplateError(TemplateError):
    """Raised when a template rule definition fails validation."""


class TemplateNotFoundError(TemplateError):
    """Raised when a template rule set cannot be found or is inactive."""
