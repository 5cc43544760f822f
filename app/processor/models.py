from dataclasses import dataclass


@dataclass(frozen=True)
class Document:
    """Domain model for an uploaded document (subset of DB columns)."""

    id: int
    user_id: int
    user_email: str
    original_key: str
    mime_type: str
    template_id: int | None = None
    company_name: str | None = None
    send_copy: bool = False

    @property
    def is_pdf(self) -> bool:
        return self.mime_type.lower() == "application/pdf"
