from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "0001_create_travel_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if not inspector.has_table("users"):
        op.create_table(
            "users",
            sa.Column("id", sa.String(length=36), primary_key=True),
            sa.Column("email", sa.String(length=255), nullable=False),
            sa.Column("password_hash", sa.String(length=255), nullable=False),
            sa.Column("role", sa.String(length=20), nullable=False),
            sa.Column("first_name", sa.String(length=100), nullable=False),
            sa.Column("last_name", sa.String(length=100), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        )
        op.create_index("ix_users_email", "users", ["email"], unique=True)
        op.create_index("ix_users_role", "users", ["role"], unique=False)

    inspector = sa.inspect(bind)
    if not inspector.has_table("tourists"):
        op.create_table(
            "tourists",
            sa.Column("id", sa.String(length=36), primary_key=True),
            sa.Column("first_name", sa.String(length=100), nullable=False),
            sa.Column("last_name", sa.String(length=100), nullable=False),
            sa.Column("email", sa.String(length=255), nullable=False),
            sa.Column("phone", sa.String(length=20), nullable=True),
            sa.Column("date_of_birth", sa.Date(), nullable=False),
            sa.Column("nationality", sa.String(length=100), nullable=False),
            sa.Column("passport_number", sa.String(length=50), nullable=True),
            sa.Column("emergency_contact", sa.Text(), nullable=True),
            sa.Column(
                "user_id",
                sa.String(length=36),
                sa.ForeignKey("users.id", ondelete="SET NULL"),
                nullable=True,
            ),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        )
        op.create_index("ix_tourists_email", "tourists", ["email"], unique=False)
        op.create_index("ix_tourists_user_id", "tourists", ["user_id"], unique=True)

    inspector = sa.inspect(bind)
    if not inspector.has_table("trips"):
        op.create_table(
            "trips",
            sa.Column("id", sa.String(length=36), primary_key=True),
            sa.Column(
                "tourist_id",
                sa.String(length=36),
                sa.ForeignKey("tourists.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
            sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
            sa.Column("destination", sa.Text(), nullable=False),
            sa.Column("status", sa.String(length=20), server_default="planned", nullable=False),
            sa.Column("total_cost", sa.Numeric(10, 2), nullable=True),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        )
        op.create_index("ix_trips_tourist_id", "trips", ["tourist_id"], unique=False)
        op.create_index("ix_trips_status", "trips", ["status"], unique=False)
        op.create_index("ix_trips_dates", "trips", ["start_date", "end_date"], unique=False)


def downgrade() -> None:
    op.drop_table("trips")
    op.drop_table("tourists")
    op.drop_table("users")
