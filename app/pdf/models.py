import base64
from dataclasses import dataclass, field


@dataclass(frozen=True)
class PageImage:
    """One page's image payload, ready to be sent to the recognition service."""

    page_index: int
    payload: bytes
    mime_type: str
    size_bytes: int

    def base64_payload(self) -> str:
        return base64.b64encode(self.payload).decode("ascii")

    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64_payload()}"


@dataclass(frozen=True)
class SplitResult:
    """Single-page PDF buffers in page order, plus truncation bookkeeping."""

    pages: list[bytes] = field(default_factory=list)
    total_pages: int = 0

    @property
    def processed_pages(self) -> int:
        return len(self.pages)

    @property
    def truncated(self) -> bool:
        return self.total_pages > self.processed_pages
