from dataclasses import dataclass, field
from enum import Enum


class ErrorCause(str, Enum):
    """Classification of a failed page extraction."""

    CONFIGURATION = "configuration"
    SIZE_LIMIT = "size_limit"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    UPSTREAM = "upstream"
    EMPTY_RESPONSE = "empty_response"
    EMPTY_SECTIONS = "empty_sections"


class RunState(str, Enum):
    RUNNING = "running"
    TRIPPED = "tripped"
    COMPLETED = "completed"


@dataclass(frozen=True)
class StructuredText:
    """The three protocol sections parsed out of one service response."""

    title: str = ""
    main_data: str = ""
    contact_info: str = ""

    def is_empty(self) -> bool:
        return not (self.title or self.main_data or self.contact_info)


@dataclass(frozen=True)
class PageExtraction:
    """Outcome of one page attempt. Failed attempts carry an error cause."""

    page_index: int
    title: str = ""
    main_data: str = ""
    contact_info: str = ""
    succeeded: bool = False
    error: ErrorCause | None = None

    @classmethod
    def success(cls, page_index: int, structured: StructuredText) -> "PageExtraction":
        return cls(
            page_index=page_index,
            title=structured.title,
            main_data=structured.main_data,
            contact_info=structured.contact_info,
            succeeded=True,
        )

    @classmethod
    def failure(cls, page_index: int, error: ErrorCause) -> "PageExtraction":
        return cls(page_index=page_index, succeeded=False, error=error)


@dataclass(frozen=True)
class PageError:
    page_index: int
    cause: ErrorCause


@dataclass(frozen=True)
class AggregatedDocument:
    """Document-level fold of all page extractions in one run."""

    title: str = ""
    main_data: str = ""
    contact_info: str = ""
    pages_attempted: int = 0
    pages_succeeded: int = 0
    pages_skipped: int = 0
    state: RunState = RunState.COMPLETED
    halt_cause: ErrorCause | None = None
    errors: list[PageError] = field(default_factory=list)

    @property
    def pages_failed(self) -> int:
        return self.pages_attempted - self.pages_succeeded

    def flat_text(self) -> str:
        """Title, body and contact sections joined for regex field rules."""
        return "\n\n".join(
            part for part in (self.title, self.main_data, self.contact_info) if part
        )
