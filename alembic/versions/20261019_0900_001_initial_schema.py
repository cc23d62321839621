"""Initial schema - Users, Cases, Epics and Audit Logs

Revision ID: 001
Revises:
Create Date: 2026-10-19 09:00:00

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
    # Create Gender enum using raw SQL for clean idempotency
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE gender AS ENUM ('MALE', 'FEMALE', 'OTHER');
        EXCEPTION WHEN duplicate_object THEN null;
        END $$;
    """)

    # Create AuditAction enum
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE auditaction AS ENUM ('CREATE', 'UPDATE', 'DELETE');
        EXCEPTION WHEN duplicate_object THEN null;
        END $$;
    """)

    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    # Create cases table
    op.create_table(
        "cases",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    # Create epics table
    op.create_table(
        "epics",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, index=True),
        sa.Column(
            "gender",
            postgresql.ENUM("MALE", "FEMALE", "OTHER", name="gender", create_type=False),
            nullable=True,
        ),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("birthdate", sa.Date, nullable=True),
        sa.Column(
            "assign_case_id",
            sa.String(36),
            sa.ForeignKey("cases.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("created_by_id", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("updated_by_id", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
    )

    # Create audit_logs table
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("entity_name", sa.String(255), nullable=False),
        sa.Column("entity_id", sa.String(255), nullable=False),
        sa.Column(
            "action",
            postgresql.ENUM("CREATE", "UPDATE", "DELETE", name="auditaction", create_type=False),
            nullable=False,
        ),
        sa.Column("values", postgresql.JSONB, nullable=True),
        sa.Column("created_by_id", sa.String(36), nullable=True),
        sa.Column("created_by_email", sa.String(255), nullable=True),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
            index=True,
        ),
    )
    op.create_index("ix_audit_logs_entity", "audit_logs", ["entity_name", "entity_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_logs_entity", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_table("epics")
    op.drop_table("cases")
    op.drop_table("users")

    # Drop enums
    op.execute("DROP TYPE IF EXISTS auditaction")
    op.execute("DROP TYPE IF EXISTS gender")
