"""Initial schema - catalog, settings, calculators, inbox, billing, wishlists.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-16

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def _billing_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("client_id", sa.String(128), nullable=True),
        sa.Column("client", sa.JSON, nullable=False),
        sa.Column("line_items", sa.JSON, nullable=False),
        sa.Column("subtotal", sa.Float, nullable=False, server_default="0"),
        sa.Column("tax_config", sa.JSON, nullable=True),
        sa.Column("tax_amount", sa.Float, nullable=False, server_default="0"),
        sa.Column("discount", sa.JSON, nullable=True),
        sa.Column("discount_amount", sa.Float, nullable=False, server_default="0"),
        sa.Column("total", sa.Float, nullable=False, server_default="0"),
        sa.Column("processing_fee_config", sa.JSON, nullable=True),
        sa.Column("payment_method_discount", sa.JSON, nullable=True),
        sa.Column("title", sa.String(300), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("terms", sa.Text, nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("viewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.String(128), nullable=True),
        *_timestamps(),
    ]


def upgrade() -> None:
    op.create_table(
        "categories",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(500), nullable=False),
        sa.Column("image", sa.String(1000), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("parent_id", sa.String(36), sa.ForeignKey("categories.id"), nullable=True),
        sa.Column("product_count", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
        sa.CheckConstraint("product_count >= 0", name="ck_categories_product_count"),
    )
    op.create_index("ix_categories_slug", "categories", ["slug"])
    op.create_index("ix_categories_parent_id", "categories", ["parent_id"])

    op.create_table(
        "products",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(300), nullable=False),
        sa.Column("slug", sa.String(300), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("price", sa.Float, nullable=False),
        sa.Column("sale_price", sa.Float, nullable=True),
        sa.Column("on_sale", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("stock", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("category_id", sa.String(36), nullable=True),
        sa.Column("category_name", sa.String(200), nullable=False, server_default=""),
        sa.Column("category_slug", sa.String(500), nullable=False, server_default=""),
        sa.Column("vendor_id", sa.String(36), nullable=True),
        sa.Column("vendor_name", sa.String(200), nullable=False, server_default=""),
        sa.Column("images", sa.JSON, nullable=False),
        sa.Column("tags", sa.JSON, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_products_category_id", "products", ["category_id"])

    op.create_table(
        "seo_settings",
        sa.Column("id", sa.String(20), primary_key=True),
        sa.Column("global_config", sa.JSON, nullable=False),
        sa.Column("pages", sa.JSON, nullable=False),
        sa.Column("patterns", sa.JSON, nullable=False),
        sa.Column("templates", sa.JSON, nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "store_settings",
        sa.Column("id", sa.String(20), primary_key=True),
        sa.Column("business_name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("admin_notification_email", sa.String(320), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("default_tax_rate", sa.Float, nullable=False, server_default="0"),
        sa.Column("tax_label", sa.String(50), nullable=False, server_default="Tax"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "calculators",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("header_copy", sa.Text, nullable=True),
        sa.Column("footer_copy", sa.Text, nullable=True),
        sa.Column("default_hourly_rate", sa.Float, nullable=False),
        sa.Column("min_hourly_rate", sa.Float, nullable=True),
        sa.Column("max_hourly_rate", sa.Float, nullable=True),
        sa.Column("steps", sa.JSON, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("created_by", sa.String(128), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "calculator_submissions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("calculator_id", sa.String(36), nullable=False),
        sa.Column("calculator_name", sa.String(200), nullable=False),
        sa.Column("selections", sa.JSON, nullable=False),
        sa.Column("config", sa.JSON, nullable=False),
        sa.Column("breakdown", sa.JSON, nullable=False),
        sa.Column("total_hours", sa.Float, nullable=False),
        sa.Column("total_price", sa.Float, nullable=False),
        sa.Column("hourly_rate", sa.Float, nullable=False),
        sa.Column("contact_info", sa.JSON, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_calculator_submissions_calculator_id", "calculator_submissions", ["calculator_id"],
    )

    op.create_table(
        "contact_messages",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("subject", sa.String(300), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("source", sa.String(20), nullable=False, server_default="contact_form"),
        sa.Column("metadata", sa.JSON, nullable=False),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("is_archived", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("read_by", sa.String(128), nullable=True),
    )

    op.create_table(
        "proposals",
        *_billing_columns(),
        sa.Column("proposal_number", sa.String(30), nullable=False, unique=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("valid_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("converted_to_invoice_id", sa.String(36), nullable=True),
    )
    op.create_index("ix_proposals_status", "proposals", ["status"])

    op.create_table(
        "invoices",
        *_billing_columns(),
        sa.Column("invoice_number", sa.String(30), nullable=False, unique=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("amount_paid", sa.Float, nullable=False, server_default="0"),
        sa.Column("amount_due", sa.Float, nullable=False, server_default="0"),
        sa.Column("payments", sa.JSON, nullable=False),
        sa.Column("issue_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("proposal_id", sa.String(36), nullable=True),
        sa.Column("purchase_order_number", sa.String(100), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_invoices_status", "invoices", ["status"])
    op.create_index("ix_invoices_proposal_id", "invoices", ["proposal_id"])

    op.create_table(
        "document_counters",
        sa.Column("key", sa.String(40), primary_key=True),
        sa.Column("value", sa.Integer, nullable=False, server_default="0"),
    )

    op.create_table(
        "wishlists",
        sa.Column("user_id", sa.String(128), primary_key=True),
        sa.Column("user_email", sa.String(320), nullable=False, server_default=""),
        sa.Column("user_name", sa.String(200), nullable=False, server_default=""),
        sa.Column("items", sa.JSON, nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    for table in (
        "wishlists", "document_counters", "invoices", "proposals", "contact_messages",
        "calculator_submissions", "calculators", "store_settings", "seo_settings",
        "products", "categories",
    ):
        op.drop_table(table)
