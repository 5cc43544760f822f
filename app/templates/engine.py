from datetime import datetime, timezone

from app.extraction.models import AggregatedDocument
from app.logging.logger import Log
from app.templates.fields import extract_fields
from app.templates.footer import FooterStamper, build_footer_line
from app.templates.models import TemplateResult, TemplateRule


class TemplateEngine:
    """Applies a template rule set to an original PDF.

    Field rules run against flat text; the footer rule stamps every page.
    Pages are never added or removed.
    """

    def __init__(self, stamper: FooterStamper | None = None) -> None:
        self._stamper = stamper or FooterStamper()

    def process(
        self,
        pdf_bytes: bytes,
        flat_text: str,
        rule: TemplateRule,
        aggregated: AggregatedDocument | None,
        user_identifier: str | None,
        now: datetime | None = None,
    ) -> TemplateResult:
        extracted_fields = extract_fields(flat_text, rule.metadata_rules)
        Log.info(
            f"Template {rule.id}: extracted "
            f"{sum(v is not None for v in extracted_fields.values())}/"
            f"{len(extracted_fields)} field(s)"
        )

        if not rule.page_rules.footer_text:
            return TemplateResult(pdf_bytes=pdf_bytes, extracted_fields=extracted_fields)

        line = build_footer_line(
            now or datetime.now(timezone.utc),
            user_identifier,
            aggregated.contact_info if aggregated else "",
        )
        stamped = self._stamper.stamp(pdf_bytes, line)
        Log.info(f"Template {rule.id}: footer added to all pages")
        return TemplateResult(pdf_bytes=stamped, extracted_fields=extracted_fields)
