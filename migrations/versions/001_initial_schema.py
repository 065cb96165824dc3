"""Initial schema for subnetsearch.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # gen_random_uuid()
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    op.create_table(
        "subnet_records",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            primary_key=True,
        ),
        sa.Column("cluster_id", sa.String(255), nullable=True),
        sa.Column("cidr", sa.String(64), nullable=True),
        sa.Column("cidr_ipv4", sa.String(64), nullable=True),
        sa.Column("ipv4", sa.String(45), nullable=True),
        sa.Column("ip", sa.String(45), nullable=True),
        sa.Column("site", sa.String(255), nullable=True),
        sa.Column("description", sa.String(4000), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=True),
        sa.Column("username", sa.String(255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_subnet_records"),
    )
    op.create_index("ix_subnet_records_cluster_id", "subnet_records", ["cluster_id"])
    op.create_index("ix_subnet_records_site", "subnet_records", ["site"])

    # Publish every row change on subnet_record_changes for the change feed.
    # NOTIFY rejects payloads of 8000 bytes or more, so rows that do not fit
    # are announced by id only and re-read by the consumer.
    op.execute("""
        CREATE OR REPLACE FUNCTION notify_subnet_record_change() RETURNS trigger AS $$
        DECLARE
            payload text;
        BEGIN
            IF TG_OP = 'DELETE' THEN
                PERFORM pg_notify(
                    'subnet_record_changes',
                    json_build_object('op', 'delete', 'id', OLD.id)::text
                );
                RETURN OLD;
            END IF;
            payload := json_build_object(
                'op', lower(TG_OP),
                'id', NEW.id,
                'record', row_to_json(NEW)
            )::text;
            IF octet_length(payload) >= 7900 THEN
                payload := json_build_object('op', lower(TG_OP), 'id', NEW.id)::text;
            END IF;
            PERFORM pg_notify('subnet_record_changes', payload);
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TRIGGER subnet_records_notify
        AFTER INSERT OR UPDATE OR DELETE ON subnet_records
        FOR EACH ROW EXECUTE FUNCTION notify_subnet_record_change();
    """)


def downgrade() -> None:
    op.execute("DROP TRIGGER IF EXISTS subnet_records_notify ON subnet_records")
    op.execute("DROP FUNCTION IF EXISTS notify_subnet_record_change()")
    op.drop_index("ix_subnet_records_site", table_name="subnet_records")
    op.drop_index("ix_subnet_records_cluster_id", table_name="subnet_records")
    op.drop_table("subnet_records")
