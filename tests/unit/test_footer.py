from collections.abc import Callable
from datetime import datetime, timezone

import pymupdf
import pytest

from app.pdf.exceptions import MalformedDocumentError
from app.templates.footer import FooterStamper, build_footer_line

TIMESTAMP = datetime(2026, 3, 1, 12, 30, tzinfo=timezone.utc)


def _page_texts(pdf_bytes: bytes) -> list[str]:
    with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:
        return [page.get_text() for page in doc]


class TestBuildFooterLine:
    def test_with_user_and_contact(self) -> None:
        line = build_footer_line(TIMESTAMP, "ana@example.com", "555-0100")
        assert line == (
            "Documento procesado el 2026-03-01T12:30:00+00:00 por ana@example.com 555-0100"
        )

    def test_timestamp_is_printed_to_the_second(self) -> None:
        precise = datetime(2026, 3, 1, 12, 30, 5, 123456, tzinfo=timezone.utc)
        line = build_footer_line(precise, "u")
        assert line == "Documento procesado el 2026-03-01T12:30:05+00:00 por u"

    def test_without_contact(self) -> None:
        line = build_footer_line(TIMESTAMP, "ana@example.com")
        assert line.endswith("por ana@example.com")

    def test_unknown_user(self) -> None:
        assert build_footer_line(TIMESTAMP, None).endswith("por unknown")

    def test_contact_is_cut_to_thirty_characters(self) -> None:
        contact = "a" * 29 + "bcdef"
        line = build_footer_line(TIMESTAMP, "u", contact)
        assert line.endswith(" " + "a" * 29 + "b")

    def test_short_contact_is_untouched(self) -> None:
        line = build_footer_line(TIMESTAMP, "u", "x@y.z")
        assert line.endswith(" x@y.z")


class TestFooterStamper:
    def test_stamps_every_page_without_changing_page_count(
        self, make_pdf: Callable[[int], bytes]
    ) -> None:
        stamped = FooterStamper().stamp(make_pdf(3), "Documento procesado el hoy")

        texts = _page_texts(stamped)
        assert len(texts) == 3
        for index, text in enumerate(texts):
            assert "Documento procesado el hoy" in text
            assert f"Page {index + 1}" in text

    def test_line_sits_near_bottom_right(self, sample_pdf_bytes: bytes) -> None:
        stamped = FooterStamper(margin=50, baseline=30).stamp(sample_pdf_bytes, "FOOTER")

        with pymupdf.open(stream=stamped, filetype="pdf") as doc:
            page = doc[0]
            hits = page.search_for("FOOTER")
            assert hits
            assert hits[0].x1 == pytest.approx(page.rect.width - 50, abs=2)
            assert hits[0].y1 > page.rect.height - 40

    def test_original_buffer_is_not_modified(self, sample_pdf_bytes: bytes) -> None:
        original = bytes(sample_pdf_bytes)
        FooterStamper().stamp(sample_pdf_bytes, "FOOTER")
        assert sample_pdf_bytes == original

    def test_rejects_non_pdf(self) -> None:
        with pytest.raises(MalformedDocumentError):
            FooterStamper().stamp(b"not a pdf", "FOOTER")
