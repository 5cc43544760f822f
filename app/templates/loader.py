"""Builds TemplateRule objects from stored JSON definitions."""

import json
from typing import Any

from app.templates.exceptions import InvalidTemplateError
from app.templates.models import PageRules, TemplateRule

_RULE_BLOCKS = ("metadataRules", "pageRules", "coverPage")


def validate_template_definition(json_definition: str) -> bool:
    """Return True if the definition is usable as a template rule set."""
    try:
        load_template_rule(json_definition)
    except InvalidTemplateError:
        return False
    return True


def load_template_rule(
    json_definition: str,
    rule_id: int | None = None,
    name: str = "",
) -> TemplateRule:
    """Parse and validate a template JSON definition.

    A definition needs at least one of ``metadataRules``, ``pageRules`` or
    ``coverPage``. ``coverPage`` is accepted for old definitions and ignored.

    Raises:
        InvalidTemplateError: on malformed JSON or a failed check.
    """
    try:
        data = json.loads(json_definition)
    except (TypeError, json.JSONDecodeError) as exc:
        raise InvalidTemplateError(f"Template definition is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise InvalidTemplateError("Template definition must be a JSON object")
    if not any(data.get(block) is not None for block in _RULE_BLOCKS):
        raise InvalidTemplateError(
            f"Template definition needs at least one of: {list(_RULE_BLOCKS)}"
        )

    return TemplateRule(
        id=rule_id,
        name=name,
        metadata_rules=_build_metadata_rules(data.get("metadataRules")),
        page_rules=_build_page_rules(data.get("pageRules")),
    )


def _build_metadata_rules(raw: Any) -> dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise InvalidTemplateError("'metadataRules' must be an object")
    rules: dict[str, str] = {}
    for field_name, pattern in raw.items():
        if not isinstance(pattern, str):
            raise InvalidTemplateError(f"'metadataRules.{field_name}' must be a string")
        rules[str(field_name)] = pattern
    return rules


def _build_page_rules(raw: Any) -> PageRules:
    if raw is None:
        return PageRules()
    if not isinstance(raw, dict):
        raise InvalidTemplateError("'pageRules' must be an object")
    footer_text = raw.get("footerText")
    if footer_text is not None and not isinstance(footer_text, str):
        raise InvalidTemplateError("'pageRules.footerText' must be a string")
    return PageRules(footer_text=footer_text or None)
