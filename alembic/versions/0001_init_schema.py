"""init schema

Revision ID: 0001_init_schema
Revises:
Create Date: 2026-10-18
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa


revision: str = "0001_init_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "classes",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("description", sa.String(length=512), nullable=True),
        sa.Column("student_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("student_count >= 0", name="ck_classes_student_count_non_negative"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_classes_created_at", "classes", ["created_at"], unique=False)

    op.create_table(
        "students",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("student_number", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("class_id", sa.String(length=36), nullable=False),
        sa.Column("class_name", sa.String(length=128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("points >= 0", name="ck_students_points_non_negative"),
        sa.ForeignKeyConstraint(["class_id"], ["classes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_students_class_id", "students", ["class_id"], unique=False)
    op.create_index("ix_students_created_at", "students", ["created_at"], unique=False)

    op.create_table(
        "products",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("class_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("points >= 0", name="ck_products_points_non_negative"),
        sa.CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        sa.ForeignKeyConstraint(["class_id"], ["classes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_products_class_id", "products", ["class_id"], unique=False)
    op.create_index("ix_products_created_at", "products", ["created_at"], unique=False)

    op.create_table(
        "purchase_records",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("product_id", sa.String(length=36), nullable=False),
        sa.Column("product_name", sa.String(length=128), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("student_id", sa.String(length=36), nullable=False),
        sa.Column("student_name", sa.String(length=128), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("class_id", sa.String(length=36), nullable=False),
        sa.Column("shipping_status", sa.String(length=16), nullable=False, server_default="pending"),
        sa.Column("idempotency_key", sa.String(length=128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("quantity >= 1", name="ck_purchase_records_quantity_positive"),
        sa.CheckConstraint(
            "shipping_status IN ('pending', 'shipped', 'delivered')",
            name="ck_purchase_records_shipping_status",
        ),
        sa.ForeignKeyConstraint(["class_id"], ["classes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("idempotency_key"),
    )
    op.create_index("ix_purchase_records_class_id", "purchase_records", ["class_id"], unique=False)
    op.create_index("ix_purchase_records_product_id", "purchase_records", ["product_id"], unique=False)
    op.create_index("ix_purchase_records_student_id", "purchase_records", ["student_id"], unique=False)
    op.create_index("ix_purchase_records_shipping_status", "purchase_records", ["shipping_status"], unique=False)
    op.create_index("ix_purchase_records_created_at", "purchase_records", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_purchase_records_created_at", table_name="purchase_records")
    op.drop_index("ix_purchase_records_shipping_status", table_name="purchase_records")
    op.drop_index("ix_purchase_records_student_id", table_name="purchase_records")
    op.drop_index("ix_purchase_records_product_id", table_name="purchase_records")
    op.drop_index("ix_purchase_records_class_id", table_name="purchase_records")
    op.drop_table("purchase_records")

    op.drop_index("ix_products_created_at", table_name="products")
    op.drop_index("ix_products_class_id", table_name="products")
    op.drop_table("products")

    op.drop_index("ix_students_created_at", table_name="students")
    op.drop_index("ix_students_class_id", table_name="students")
    op.drop_table("students")

    op.drop_index("ix_classes_created_at", table_name="classes")
    op.drop_table("classes")
