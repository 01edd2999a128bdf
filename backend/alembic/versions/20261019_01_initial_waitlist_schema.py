"""initial waitlist schema

Revision ID: 20261019_01
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261019_01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "organizers",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_organizers_email"), "organizers", ["email"], unique=True)

    op.create_table(
        "organizer_social_providers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("organizer_id", sa.String(length=32), nullable=False),
        sa.Column("provider", sa.String(length=20), nullable=False),
        sa.Column("provider_id", sa.String(length=255), nullable=False),
        sa.Column("linked_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["organizer_id"], ["organizers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("provider", "provider_id", name="uq_social_providers_provider_identity"),
        sa.UniqueConstraint("organizer_id", "provider", name="uq_social_providers_organizer_provider"),
    )
    op.create_index(
        op.f("ix_organizer_social_providers_organizer_id"),
        "organizer_social_providers",
        ["organizer_id"],
        unique=False,
    )

    op.create_table(
        "services",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("organizer_id", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("slug", sa.String(length=50), nullable=False),
        sa.Column("waitlist_title", sa.String(length=100), nullable=True),
        sa.Column("waitlist_description", sa.String(length=500), nullable=True),
        sa.Column("waitlist_background", sa.String(length=200), nullable=True),
        sa.Column("image", sa.String(length=200), nullable=True),
        sa.Column("icon", sa.String(length=200), nullable=True),
        sa.Column("category", sa.String(length=50), nullable=True),
        sa.Column("tagline", sa.String(length=200), nullable=True),
        sa.Column("full_description", sa.Text(), nullable=True),
        sa.Column("developer", sa.String(length=100), nullable=True),
        sa.Column("language", sa.String(length=50), nullable=True),
        sa.Column("platform", sa.String(length=100), nullable=True),
        sa.Column("launch_date", sa.String(length=40), nullable=True),
        sa.Column("screenshots", sa.JSON(), nullable=False),
        sa.Column("rating", sa.Float(), server_default="0", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["organizer_id"], ["organizers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_services_id"), "services", ["id"], unique=False)
    op.create_index(op.f("ix_services_organizer_id"), "services", ["organizer_id"], unique=False)
    op.create_index(op.f("ix_services_slug"), "services", ["slug"], unique=True)

    op.create_table(
        "waitlist_participants",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("service_id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("service_id", "email", name="uq_waitlist_participants_service_id_email"),
    )
    op.create_index(op.f("ix_waitlist_participants_id"), "waitlist_participants", ["id"], unique=False)
    op.create_index(
        op.f("ix_waitlist_participants_service_id"), "waitlist_participants", ["service_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_waitlist_participants_service_id"), table_name="waitlist_participants")
    op.drop_index(op.f("ix_waitlist_participants_id"), table_name="waitlist_participants")
    op.drop_table("waitlist_participants")

    op.drop_index(op.f("ix_services_slug"), table_name="services")
    op.drop_index(op.f("ix_services_organizer_id"), table_name="services")
    op.drop_index(op.f("ix_services_id"), table_name="services")
    op.drop_table("services")

    op.drop_index(op.f("ix_organizer_social_providers_organizer_id"), table_name="organizer_social_providers")
    op.drop_table("organizer_social_providers")

    op.drop_index(op.f("ix_organizers_email"), table_name="organizers")
    op.drop_table("organizers")
