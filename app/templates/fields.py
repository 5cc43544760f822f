import re

from app.logging.logger import Log
from app.templates.models import ExtractedFieldSet


def extract_fields(text: str, metadata_rules: dict[str, str]) -> ExtractedFieldSet:
    """Apply each field's regex to ``text`` and capture group 1.

    Patterns are case-insensitive. An invalid pattern, a pattern without a
    first group, or no match yields None for that field only.
    """
    extracted: ExtractedFieldSet = {}
    for field_name, pattern in metadata_rules.items():
        try:
            match = re.search(pattern, text, re.IGNORECASE)
            extracted[field_name] = match.group(1) if match else None
        except (re.error, IndexError) as exc:
            Log.warning(f"Failed to extract field {field_name}: {exc}")
            extracted[field_name] = None
    return extracted
