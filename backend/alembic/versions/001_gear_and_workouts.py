"""Gear, workouts, gear-workout assignments and key-value app settings.

Revision ID: 001
Revises:
Create Date: 2025-12-15

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("created_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_updated_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
    ]


def upgrade() -> None:
    op.create_table(
        "gear",
        *_audit_columns(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(32), nullable=False, server_default="shoes"),
        sa.Column("current_distance", sa.Float(), nullable=False, server_default="0"),
        sa.Column("max_distance", sa.Float(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("workout_types", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_gear_is_deleted", "gear", ["is_deleted"], unique=False)
    op.create_index("ix_gear_is_active", "gear", ["is_active"], unique=False)

    op.create_table(
        "workouts",
        *_audit_columns(),
        sa.Column("external_id", sa.String(64), nullable=False),
        sa.Column("activity_type", sa.String(64), nullable=True),
        sa.Column("is_indoor", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("total_distance", sa.Float(), nullable=False, server_default="0"),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_workouts_is_deleted", "workouts", ["is_deleted"], unique=False)
    op.create_index("ix_workouts_external_id", "workouts", ["external_id"], unique=True)
    op.create_index("ix_workouts_start_date", "workouts", ["start_date"], unique=False)

    op.create_table(
        "gear_workouts",
        sa.Column("gear_id", sa.String(36), nullable=False),
        sa.Column("workout_id", sa.String(36), nullable=False),
        sa.ForeignKeyConstraint(["gear_id"], ["gear.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["workout_id"], ["workouts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("gear_id", "workout_id"),
    )

    op.create_table(
        "app_settings",
        sa.Column("key", sa.String(128), nullable=False),
        sa.Column("value", sa.JSON(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("key"),
    )


def downgrade() -> None:
    op.drop_table("app_settings")
    op.drop_table("gear_workouts")
    op.drop_index("ix_workouts_start_date", table_name="workouts")
    op.drop_index("ix_workouts_external_id", table_name="workouts")
    op.drop_index("ix_workouts_is_deleted", table_name="workouts")
    op.drop_table("workouts")
    op.drop_index("ix_gear_is_active", table_name="gear")
    op.drop_index("ix_gear_is_deleted", table_name="gear")
    op.drop_table("gear")
