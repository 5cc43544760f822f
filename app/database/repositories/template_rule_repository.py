from psycopg.rows import dict_row

from app.database.connection import get_connection
from app.database.models import TemplateRuleRecord
from app.templates.exceptions import TemplateNotFoundError
from app.templates.loader import load_template_rule
from app.templates.models import TemplateRule


class TemplateRuleRepository:
    """Read-only access to the template_rule_sets table."""

    def find_record(self, template_id: int) -> TemplateRuleRecord:
        """Find an active template rule set row.

        Raises:
            TemplateNotFoundError: if the row is missing or inactive.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, name, json_definition, is_active
                    FROM template_rule_sets
                    WHERE id = %s
                    """,
                    (template_id,),
                )
                row = cur.fetchone()

        if row is None or not row["is_active"]:
            raise TemplateNotFoundError(f"Template {template_id} not found or inactive")

        return TemplateRuleRecord(
            id=row["id"],
            name=row["name"],
            json_definition=row["json_definition"],
            is_active=row["is_active"],
        )

    def get(self, template_id: int) -> TemplateRule:
        """Load and validate an active template rule set.

        Raises:
            TemplateNotFoundError: if the row is missing or inactive.
            InvalidTemplateError: if its definition fails validation.
        """
        record = self.find_record(template_id)
        return load_template_rule(record.json_definition, rule_id=record.id, name=record.name)
