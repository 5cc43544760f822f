from dataclasses import dataclass, field

ExtractedFieldSet = dict[str, str | None]


@dataclass(frozen=True)
class PageRules:
    footer_text: str | None = None


@dataclass(frozen=True)
class TemplateRule:
    """Administrator-authored rule set applied to processed documents."""

    id: int | None = None
    name: str = ""
    metadata_rules: dict[str, str] = field(default_factory=dict)
    page_rules: PageRules = field(default_factory=PageRules)


@dataclass(frozen=True)
class TemplateResult:
    pdf_bytes: bytes
    extracted_fields: ExtractedFieldSet = field(default_factory=dict)
