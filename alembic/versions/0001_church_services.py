"""churches, rosters and scheduled services

Revision ID: 0001
Revises:
Create Date: 2024-01-07 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "churches",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("time_offset", sa.Integer(), nullable=False),
        sa.Column("status", sa.Integer(), nullable=False, server_default="2"),
        *_timestamps(),
        sa.UniqueConstraint("name", name="uq_churches_name"),
    )
    op.create_index("ix_churches_code", "churches", ["code"], unique=True)

    op.create_table(
        "church_admins",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("church_id", sa.Integer(), sa.ForeignKey("churches.id", ondelete="CASCADE"), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("church_id", "email", name="uq_church_admins_church_email"),
    )
    op.create_index("ix_church_admins_church_id", "church_admins", ["church_id"])
    op.create_index("ix_church_admins_email", "church_admins", ["email"])

    op.create_table(
        "church_servants",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("church_id", sa.Integer(), sa.ForeignKey("churches.id", ondelete="CASCADE"), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=True),
        sa.Column("status", sa.Integer(), nullable=False, server_default="1"),
        *_timestamps(),
        sa.UniqueConstraint("church_id", "email", name="uq_church_servants_church_email"),
    )
    op.create_index("ix_church_servants_church_id", "church_servants", ["church_id"])

    op.create_table(
        "church_locations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("church_id", sa.Integer(), sa.ForeignKey("churches.id", ondelete="CASCADE"), nullable=False),
        sa.Column("code", sa.String(), nullable=False),
        sa.Column("location", sa.String(), nullable=False),
        sa.Column("status", sa.Integer(), nullable=False, server_default="1"),
        *_timestamps(),
        sa.UniqueConstraint("church_id", "code", name="uq_church_locations_church_code"),
    )
    op.create_index("ix_church_locations_church_id", "church_locations", ["church_id"])

    op.create_table(
        "church_services",
        sa.Column("id", sa.UUID(as_uuid=True), primary_key=True),
        sa.Column("church_code", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=True),
        sa.Column("status", sa.Integer(), nullable=False, server_default="2"),
        sa.Column("datetime_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("datetime_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location_code", sa.String(), nullable=False),
        sa.Column("location_name", sa.String(), nullable=False),
        sa.Column("reflection", sa.Text(), nullable=True),
        sa.Column("remarks", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("datetime_start < datetime_end", name="ck_church_services_interval"),
    )
    op.create_index("ix_church_services_church_code", "church_services", ["church_code"])
    op.create_index("ix_church_services_status", "church_services", ["status"])
    op.create_index(
        "ix_church_services_schedule", "church_services", ["church_code", "location_code", "datetime_start"]
    )

    # No two services at the same church location may share any instant.
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    op.execute(
        "ALTER TABLE church_services ADD CONSTRAINT ex_church_services_no_overlap "
        "EXCLUDE USING gist ("
        "church_code WITH =, "
        "location_code WITH =, "
        "tstzrange(datetime_start, datetime_end, '[)') WITH &&)"
    )

    for table, extra in (
        ("service_liturgy", [
            sa.Column("title", sa.String(), nullable=False),
            sa.Column("title_link", sa.String(), nullable=False, server_default=""),
            sa.Column("content", sa.Text(), nullable=False, server_default=""),
            sa.Column("content_link", sa.String(), nullable=False, server_default=""),
        ]),
        ("service_news", [
            sa.Column("title", sa.String(), nullable=False),
            sa.Column("content", sa.Text(), nullable=False),
            sa.Column("link", sa.String(), nullable=False, server_default=""),
        ]),
        ("service_servants", [
            sa.Column("service_role", sa.String(), nullable=False),
            sa.Column("servant_role", sa.String(), nullable=False),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("email", sa.String(), nullable=False),
        ]),
    ):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column(
                "service_id",
                sa.UUID(as_uuid=True),
                sa.ForeignKey("church_services.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("position", sa.Integer(), nullable=False),
            *extra,
        )
        op.create_index(f"ix_{table}_service_id", table, ["service_id"])


def downgrade() -> None:
    for table in ("service_servants", "service_news", "service_liturgy"):
        op.drop_table(table)
    op.drop_table("church_services")
    op.drop_table("church_locations")
    op.drop_table("church_servants")
    op.drop_table("church_admins")
    op.drop_table("churches")
