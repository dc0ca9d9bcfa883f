"""initial schema

Revision ID: 5c1e9a7d2b40
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "5c1e9a7d2b40"
down_revision = None
branch_labels = None
depends_on = None


def _document_columns():
    return [
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("quotation_number", sa.String(32), nullable=False),
        sa.Column("owner_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("client_name", sa.String(200), nullable=False),
        sa.Column("client_phone", sa.String(50)),
        sa.Column("client_email", sa.String(320)),
        sa.Column("client_address", sa.String(500)),
        sa.Column("notes", sa.Text),
        sa.Column("status", sa.String(20), nullable=False, server_default="DRAFT"),
        sa.Column("total_amount", sa.Float, nullable=False, server_default="0"),
        sa.Column("finalized_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _document_indexes(table):
    op.create_index(f"ix_{table}_quotation_number", table, ["quotation_number"], unique=True)
    op.create_index(f"ix_{table}_owner_id", table, ["owner_id"])
    op.create_index(f"ix_{table}_status", table, ["status"])
    op.create_index(f"ix_{table}_created_at", table, ["created_at"])


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(200)),
        sa.Column("email", sa.String(320)),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "document_counters",
        sa.Column("kind", sa.String(16), primary_key=True),
        sa.Column("year", sa.Integer, primary_key=True),
        sa.Column("last_seq", sa.Integer, nullable=False, server_default="0"),
    )

    op.create_table(
        "quotations",
        *_document_columns(),
        sa.CheckConstraint(
            "(status = 'FINALIZED') = (finalized_at IS NOT NULL)",
            name="ck_quotations_finalized_at",
        ),
    )
    _document_indexes("quotations")

    op.create_table(
        "quotation_items",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "quotation_id",
            sa.String(36),
            sa.ForeignKey("quotations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
        sa.Column("room_type", sa.String(50), nullable=False),
        sa.Column("custom_room_type", sa.String(200)),
        sa.Column("length", sa.Float, nullable=False),
        sa.Column("width", sa.Float, nullable=False),
        sa.Column("area", sa.Float, nullable=False),
        sa.Column("price_per_sqft", sa.Float, nullable=False),
        sa.Column("total_price", sa.Float, nullable=False),
        sa.Column("price_source", sa.String(20), nullable=False, server_default="CUSTOM"),
        sa.Column("description", sa.Text),
    )
    op.create_index("ix_quotation_items_quotation_id", "quotation_items", ["quotation_id"])

    op.create_table(
        "quotation_progress",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "quotation_id",
            sa.String(36),
            sa.ForeignKey("quotations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("status", sa.String(20), nullable=False, server_default="NOT_STARTED"),
        sa.Column("percentage", sa.Integer, nullable=False, server_default="0"),
        sa.Column("updated_by", sa.String(200), nullable=False),
        sa.Column("note", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_quotation_progress_quotation_id", "quotation_progress", ["quotation_id"])

    op.create_table(
        "pop_quotations",
        *_document_columns(),
        sa.CheckConstraint(
            "(status = 'FINALIZED') = (finalized_at IS NOT NULL)",
            name="ck_pop_quotations_finalized_at",
        ),
    )
    _document_indexes("pop_quotations")

    op.create_table(
        "pop_items",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "pop_quotation_id",
            sa.String(36),
            sa.ForeignKey("pop_quotations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("length", sa.Float),
        sa.Column("width", sa.Float),
        sa.Column("area", sa.Float),
        sa.Column("price_per_sqft", sa.Float),
        sa.Column("quantity", sa.Float),
        sa.Column("unit_price", sa.Float),
        sa.Column("total_price", sa.Float, nullable=False),
    )
    op.create_index("ix_pop_items_pop_quotation_id", "pop_items", ["pop_quotation_id"])

    op.create_table(
        "predefined_pricing",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("owner_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("type", sa.String(100), nullable=False),
        sa.Column("price_per_sqft", sa.Float, nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("owner_id", "type", name="uq_predefined_pricing_owner_type"),
    )
    op.create_index("ix_predefined_pricing_owner_id", "predefined_pricing", ["owner_id"])
    op.create_index("ix_predefined_pricing_created_at", "predefined_pricing", ["created_at"])

    op.create_table(
        "materials",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("owner_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("price", sa.Float, nullable=False),
        sa.Column("unit", sa.String(50), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_materials_owner_id", "materials", ["owner_id"])
    op.create_index("ix_materials_created_at", "materials", ["created_at"])


def downgrade():
    op.drop_table("materials")
    op.drop_table("predefined_pricing")
    op.drop_table("pop_items")
    op.drop_table("pop_quotations")
    op.drop_table("quotation_progress")
    op.drop_table("quotation_items")
    op.drop_table("quotations")
    op.drop_table("document_counters")
    op.drop_table("users")
