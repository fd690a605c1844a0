"""initial_schema

Revision ID: a1f3c5e7b9d2
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "a1f3c5e7b9d2"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONEY = sa.Numeric(precision=20, scale=4)

invoice_type = sa.Enum("A", "B", "X", name="invoicetype")
discount_type = sa.Enum("PERCENTAGE", "FIXED", name="discounttype")
order_status = sa.Enum(
    "PLACED", "IN_PRODUCTION", "READY", "DELIVERED", "CANCELLED", name="orderstatus"
)
po_status = sa.Enum("PENDING", "RECEIVED", "CANCELLED", name="postatus")
user_role = sa.Enum("OWNER", "EMPLOYEE", name="userrole")


def _snapshot_columns() -> list[sa.Column]:
    return [
        sa.Column("product_id", sa.String(50), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("unit_price", MONEY, nullable=False),
        sa.Column("supplier_price", MONEY, nullable=False),
        sa.Column("supplier", sa.String(255), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
    ]


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now())


def upgrade() -> None:
    op.create_table(
        "products",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("unit_price", MONEY, nullable=False),
        sa.Column("supplier_price", MONEY, nullable=False),
        sa.Column("current_stock", sa.Integer(), nullable=False),
        sa.Column("supplier", sa.String(255), nullable=True),
        _created_at(),
        sa.CheckConstraint("unit_price >= 0", name="ck_product_unit_price_non_negative"),
        sa.CheckConstraint("supplier_price >= 0", name="ck_product_supplier_price_non_negative"),
        sa.CheckConstraint("current_stock >= 0", name="ck_product_stock_non_negative"),
    )
    op.create_index("ix_products_name", "products", ["name"])
    op.create_index("ix_products_category", "products", ["category"])

    op.create_table(
        "clients",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("first_name", sa.String(255), nullable=False),
        sa.Column("last_name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_clients_last_name", "clients", ["last_name"])
    op.create_index("ix_clients_email", "clients", ["email"])

    op.create_table(
        "suppliers",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_suppliers_name", "suppliers", ["name"])

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(100), nullable=False, unique=True),
        sa.Column("role", user_role, nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=True),
        sa.Column("failed_attempts", sa.Integer(), nullable=False),
        sa.Column("blocked", sa.Boolean(), nullable=False),
        _created_at(),
    )

    op.create_table(
        "discounts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("discount_type", discount_type, nullable=False),
        sa.Column("value", MONEY, nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_discounts_active", "discounts", ["active"])

    op.create_table(
        "sales",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=False),
        _created_at(),
        sa.Column("subtotal", MONEY, nullable=False),
        sa.Column("total", MONEY, nullable=False),
        sa.Column("client", sa.String(255), nullable=False),
        sa.Column("payment_method", sa.String(50), nullable=False),
        sa.Column("invoice_type", invoice_type, nullable=False),
        sa.Column("discount_name", sa.String(255), nullable=True),
        sa.Column("discount_amount", MONEY, nullable=True),
        sa.Column("surcharge", MONEY, nullable=False),
        sa.CheckConstraint("total >= 0", name="ck_sale_total_non_negative"),
        sa.CheckConstraint("surcharge >= 0", name="ck_sale_surcharge_non_negative"),
    )
    op.create_index("ix_sales_created_at", "sales", ["created_at"])
    op.create_index("ix_sales_client", "sales", ["client"])

    op.create_table(
        "sale_lines",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("sale_id", sa.Integer(), sa.ForeignKey("sales.id"), nullable=False),
        *_snapshot_columns(),
        sa.CheckConstraint("quantity > 0", name="ck_sale_line_qty_positive"),
    )
    op.create_index("ix_sale_lines_sale", "sale_lines", ["sale_id"])
    op.create_index("ix_sale_lines_product", "sale_lines", ["product_id"])

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _created_at(),
        sa.Column("client", sa.String(255), nullable=False),
        sa.Column("client_email", sa.String(255), nullable=True),
        sa.Column("status", order_status, nullable=False),
        sa.Column("total", MONEY, nullable=False),
        sa.Column("observations", sa.Text(), nullable=True),
    )
    op.create_index("ix_orders_status", "orders", ["status"])
    op.create_index("ix_orders_created_at", "orders", ["created_at"])

    op.create_table(
        "order_services",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("price", MONEY, nullable=False),
    )
    op.create_index("ix_order_services_order", "order_services", ["order_id"])

    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id"), nullable=False),
        *_snapshot_columns(),
        sa.CheckConstraint("quantity > 0", name="ck_order_item_qty_positive"),
    )
    op.create_index("ix_order_items_order", "order_items", ["order_id"])

    op.create_table(
        "order_payments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id"), nullable=False),
        _created_at(),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("method", sa.String(50), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_order_payment_amount_positive"),
    )
    op.create_index("ix_order_payments_order", "order_payments", ["order_id"])

    op.create_table(
        "purchase_orders",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("supplier_id", sa.String(50), nullable=False),
        sa.Column("status", po_status, nullable=False),
        sa.Column("total", MONEY, nullable=False),
        _created_at(),
    )
    op.create_index("ix_po_supplier", "purchase_orders", ["supplier_id"])
    op.create_index("ix_po_status", "purchase_orders", ["status"])

    op.create_table(
        "purchase_order_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("po_id", sa.String(50), sa.ForeignKey("purchase_orders.id"), nullable=False),
        *_snapshot_columns(),
        sa.CheckConstraint("quantity > 0", name="ck_po_item_qty_positive"),
    )
    op.create_index("ix_po_items_po", "purchase_order_items", ["po_id"])
    op.create_index("ix_po_items_product", "purchase_order_items", ["product_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("table_name", sa.String(100), nullable=False),
        sa.Column("record_id", sa.String(255), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("actor", sa.String(100), nullable=True),
        sa.Column("new_values", sa.JSON(), nullable=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        _created_at(),
    )
    op.create_index("ix_audit_table_record", "audit_logs", ["table_name", "record_id"])
    op.create_index("ix_audit_created_at", "audit_logs", ["created_at"])
    op.create_index("ix_audit_action", "audit_logs", ["action"])


def downgrade() -> None:
    for table in (
        "audit_logs",
        "purchase_order_items",
        "purchase_orders",
        "order_payments",
        "order_items",
        "order_services",
        "orders",
        "sale_lines",
        "sales",
        "discounts",
        "users",
        "suppliers",
        "clients",
        "products",
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_type in (invoice_type, discount_type, order_status, po_status, user_role):
        enum_type.drop(bind, checkfirst=True)
