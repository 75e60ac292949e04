"""activity logs append only

Revision ID: 7e2d41b0c9a5
Revises: 3c1f7a9d2b40
Create Date: 2026-10-20 10:12:44.503117

"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '7e2d41b0c9a5'
down_revision: Union[str, Sequence[str], None] = '3c1f7a9d2b40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    # --- DB-level immutability: activity trail rows are never changed or removed ---
    op.execute(
        """
        CREATE OR REPLACE FUNCTION prevent_activity_log_mutation()
        RETURNS trigger AS $$
        BEGIN
            RAISE EXCEPTION 'activity_logs is append-only (% rejected).', TG_OP;
        END;
        $$ LANGUAGE plpgsql;
        """
    )
    op.execute(
        """
        DROP TRIGGER IF EXISTS trg_activity_logs_append_only ON activity_logs;
        CREATE TRIGGER trg_activity_logs_append_only
        BEFORE UPDATE OR DELETE ON activity_logs
        FOR EACH ROW
        EXECUTE FUNCTION prevent_activity_log_mutation();
        """
    )


def downgrade():
    op.execute("DROP TRIGGER IF EXISTS trg_activity_logs_append_only ON activity_logs;")
    op.execute("DROP FUNCTION IF EXISTS prevent_activity_log_mutation();")
