"""Parser for the three-section sentinel protocol.

A response is expected to look like::

    ===TITLE===
    ...
    ===MAIN_DATA===
    ...
    ===CONTACT_INFO===
    ...

Anything that does not follow this shape still parses: if no marker is
present the whole text becomes the body.
"""

import re

from app.extraction.models import StructuredText

TITLE_MARKER = "===TITLE==="
MAIN_DATA_MARKER = "===MAIN_DATA==="
CONTACT_INFO_MARKER = "===CONTACT_INFO==="

_MARKER_PATTERN = re.compile(
    r"===(TITLE|MAIN_DATA|CONTACT_INFO)===",
    re.IGNORECASE,
)


def parse_structured_response(text: str) -> StructuredText:
    """Split service output into title, main data and contact info.

    Each section runs from the end of its marker to the start of the next
    marker (or end of text). Only the first occurrence of a marker counts.
    """
    first_seen: dict[str, re.Match[str]] = {}
    for match in _MARKER_PATTERN.finditer(text):
        first_seen.setdefault(match.group(1).upper(), match)

    if not first_seen:
        return StructuredText(main_data=text)

    ordered = sorted(first_seen.items(), key=lambda item: item[1].start())
    sections: dict[str, str] = {}
    for position, (name, match) in enumerate(ordered):
        end = ordered[position + 1][1].start() if position + 1 < len(ordered) else len(text)
        sections[name] = text[match.end():end].strip()

    return StructuredText(
        title=sections.get("TITLE", ""),
        main_data=sections.get("MAIN_DATA", ""),
        contact_info=sections.get("CONTACT_INFO", ""),
    )
