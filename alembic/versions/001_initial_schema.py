"""initial schema - parties, catalog, RFQs/inquiries and both quotation tables

Revision ID: 001_initial
Revises: None
Create Date: 2026-09-28

For NEW databases: run `alembic upgrade head`.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id():
    return sa.Column("id", sa.String(36), primary_key=True)


def _created_at():
    return sa.Column("created_at", sa.DateTime())


def upgrade() -> None:
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("first_name", sa.String(100)),
        sa.Column("last_name", sa.String(100)),
        sa.Column("role", sa.String(20), nullable=False, server_default="buyer"),
        sa.Column("password_hash", sa.String(255)),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.Column("last_login_at", sa.DateTime()),
        _created_at(),
    )
    op.create_table(
        "buyers",
        _id(),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("company_name", sa.String(255)),
        sa.Column("industry", sa.String(100)),
        _created_at(),
    )
    op.create_index("ix_buyers_user", "buyers", ["user_id"])
    op.create_table(
        "suppliers",
        _id(),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("business_name", sa.String(255), nullable=False),
        sa.Column("verification_status", sa.String(20), server_default="pending"),
        _created_at(),
    )
    op.create_index("ix_suppliers_user", "suppliers", ["user_id"])

    # ── Catalog ──────────────────────────────────────────────────────
    op.create_table(
        "categories",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
    )
    op.create_table(
        "products",
        _id(),
        sa.Column("supplier_id", sa.String(36), sa.ForeignKey("suppliers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("category_id", sa.String(36), sa.ForeignKey("categories.id")),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("is_published", sa.Boolean(), server_default=sa.true()),
        _created_at(),
    )
    op.create_index("ix_products_supplier", "products", ["supplier_id"])
    op.create_index("ix_products_category", "products", ["category_id"])

    # ── Sourcing ─────────────────────────────────────────────────────
    op.create_table(
        "rfqs",
        _id(),
        sa.Column("buyer_id", sa.String(36), sa.ForeignKey("buyers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("category_id", sa.String(36), sa.ForeignKey("categories.id")),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("target_price", sa.Numeric(12, 2)),
        sa.Column("status", sa.String(20), server_default="open"),
        sa.Column("expires_at", sa.DateTime()),
        _created_at(),
    )
    op.create_index("ix_rfqs_status", "rfqs", ["status"])
    op.create_index("ix_rfqs_buyer", "rfqs", ["buyer_id"])
    op.create_index("ix_rfqs_category", "rfqs", ["category_id"])
    op.create_table(
        "inquiries",
        _id(),
        sa.Column("buyer_id", sa.String(36), sa.ForeignKey("buyers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("supplier_id", sa.String(36), sa.ForeignKey("suppliers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("product_id", sa.String(36), sa.ForeignKey("products.id")),
        sa.Column("subject", sa.String(255), nullable=False),
        sa.Column("message", sa.Text()),
        sa.Column("quantity", sa.Integer()),
        sa.Column("target_price", sa.Numeric(12, 2)),
        sa.Column("status", sa.String(20), server_default="pending"),
        _created_at(),
    )
    op.create_index("ix_inquiries_supplier", "inquiries", ["supplier_id"])
    op.create_index("ix_inquiries_buyer", "inquiries", ["buyer_id"])

    # ── Quotations ───────────────────────────────────────────────────
    op.create_table(
        "quotations",
        _id(),
        sa.Column("rfq_id", sa.String(36), sa.ForeignKey("rfqs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("supplier_id", sa.String(36), sa.ForeignKey("suppliers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(14, 2), nullable=False),
        sa.Column("moq", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("lead_time", sa.String(255)),
        sa.Column("payment_terms", sa.String(255)),
        sa.Column("validity_period", sa.Integer()),
        sa.Column("valid_until", sa.DateTime()),
        sa.Column("terms_conditions", sa.Text()),
        sa.Column("message", sa.Text()),
        sa.Column("attachments", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(20), server_default="sent"),
        _created_at(),
        sa.Column("updated_at", sa.DateTime()),
    )
    op.create_index("ix_quotations_supplier", "quotations", ["supplier_id"])
    op.create_index("ix_quotations_rfq", "quotations", ["rfq_id"])
    op.create_index("ix_quotations_status", "quotations", ["status"])
    op.create_index("ix_quotations_rfq_supplier", "quotations", ["rfq_id", "supplier_id"], unique=True)
    op.create_table(
        "inquiry_quotations",
        _id(),
        sa.Column("inquiry_id", sa.String(36), sa.ForeignKey("inquiries.id", ondelete="CASCADE"), nullable=False),
        sa.Column("price_per_unit", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(14, 2), nullable=False),
        sa.Column("moq", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("lead_time", sa.String(255)),
        sa.Column("payment_terms", sa.String(255)),
        sa.Column("valid_until", sa.DateTime()),
        sa.Column("message", sa.Text()),
        sa.Column("attachments", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(20), server_default="pending"),
        _created_at(),
        sa.Column("updated_at", sa.DateTime()),
    )
    op.create_index("ix_inquiry_quotations_inquiry", "inquiry_quotations", ["inquiry_id"])
    op.create_index("ix_inquiry_quotations_status", "inquiry_quotations", ["status"])


def downgrade() -> None:
    """Drop all tables. ⚠️ DESTRUCTIVE — only for dev/test environments."""
    for table in (
        "inquiry_quotations", "quotations", "inquiries", "rfqs",
        "products", "categories", "suppliers", "buyers", "users",
    ):
        op.drop_table(table)
