from dataclasses import dataclass
from datetime import datetime


@dataclass
class JobRecord:
    """Represents a row from the document_jobs table."""

    id: int
    document_id: int
    status: str
    attempts: int
    error_message: str | None = None
    locked_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class TemplateRuleRecord:
    """Represents a row from the template_rule_sets table."""

    id: int
    name: str
    json_definition: str
    is_active: bool = True
