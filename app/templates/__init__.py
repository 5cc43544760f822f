from app.templates.engine import TemplateEngine
from app.templates.loader import load_template_rule, validate_template_definition
from app.templates.models import ExtractedFieldSet, PageRules, TemplateResult, TemplateRule

__all__ = [
    "ExtractedFieldSet",
    "PageRules",
    "TemplateEngine",
    "TemplateResult",
    "TemplateRule",
    "load_template_rule",
    "validate_template_definition",
]
