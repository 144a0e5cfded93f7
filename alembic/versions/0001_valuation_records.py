"""users, services, receipts, valuation records, audit log

Revision ID: 0001_valuation_records
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_valuation_records"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("email", sa.String(length=256), nullable=True),
        sa.Column("phone_number", sa.String(length=32), nullable=True),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(length=256), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_role", "users", ["role"])

    op.create_table(
        "services",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(14, 2), nullable=True),
    )

    op.create_table(
        "receipts",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("receipt_number", sa.String(length=64), nullable=False, unique=True),
        sa.Column("customer_id", sa.Uuid(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("customer_name", sa.String(length=256), nullable=False),
        sa.Column("phone_number", sa.String(length=32), nullable=True),
        sa.Column("email", sa.String(length=256), nullable=True),
        sa.Column("consultant_id", sa.Uuid(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("service_id", sa.Uuid(as_uuid=True), sa.ForeignKey("services.id"), nullable=False),
        sa.Column("appointment_date", sa.Date(), nullable=True),
        sa.Column("appointment_time", sa.String(length=32), nullable=True),
        sa.Column("issue_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "valuation_records",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("record_number", sa.String(length=32), nullable=False),

        sa.Column("customer_id", sa.Uuid(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("customer_name", sa.String(length=256), nullable=False),
        sa.Column("phone_number", sa.String(length=32), nullable=True),
        sa.Column("email", sa.String(length=256), nullable=True),
        sa.Column("consultant_id", sa.Uuid(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("appraiser_id", sa.Uuid(as_uuid=True), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("receipt_id", sa.Uuid(as_uuid=True), sa.ForeignKey("receipts.id"), nullable=False),
        sa.Column("service_id", sa.Uuid(as_uuid=True), sa.ForeignKey("services.id"), nullable=False),

        sa.Column("appointment_date", sa.Date(), nullable=True),
        sa.Column("appointment_time", sa.String(length=32), nullable=True),

        sa.Column("shape_and_cut", sa.String(length=64), nullable=True),
        sa.Column("carat_weight", sa.Numeric(8, 3), nullable=True),
        sa.Column("clarity", sa.String(length=32), nullable=True),
        sa.Column("cut_grade", sa.String(length=32), nullable=True),
        sa.Column("measurements", sa.String(length=128), nullable=True),
        sa.Column("polish", sa.String(length=32), nullable=True),
        sa.Column("symmetry", sa.String(length=32), nullable=True),
        sa.Column("fluorescence", sa.String(length=32), nullable=True),
        sa.Column("estimated_value", sa.Numeric(16, 2), nullable=True),
        sa.Column("valuation_method", sa.String(length=64), nullable=True),
        sa.Column("certificate_number", sa.String(length=64), nullable=True),

        sa.Column("status", sa.String(length=32), nullable=False, server_default="in-progress"),
        sa.Column("commitment_requested", sa.Boolean(), nullable=False, server_default=sa.false()),

        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("validated_at", sa.DateTime(timezone=True), nullable=True),

        sa.UniqueConstraint("record_number", name="uq_valuation_record_number"),
        sa.UniqueConstraint("sequence", name="uq_valuation_record_sequence"),
    )
    op.create_index("ix_valuation_records_status", "valuation_records", ["status"])
    op.create_index("ix_valuation_records_customer", "valuation_records", ["customer_id"])
    op.create_index("ix_valuation_records_receipt", "valuation_records", ["receipt_id"])

    op.create_table(
        "audit_log_records",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("request_id", sa.String(length=128), nullable=False),
        sa.Column("route", sa.String(length=256), nullable=False),
        sa.Column("method", sa.String(length=16), nullable=False),
        sa.Column("actor_user_id", sa.String(length=128), nullable=False),
        sa.Column("actor_role", sa.String(length=32), nullable=False),
        sa.Column("record_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="ok"),
        sa.Column("payload_hash", sa.String(length=128), nullable=False),
        sa.Column("payload_summary_json", sa.JSON(), nullable=False),
        sa.Column("ref_id", sa.String(length=128), nullable=True),
    )
    op.create_index("ix_audit_log_records_request_id", "audit_log_records", ["request_id"])
    op.create_index("ix_audit_record", "audit_log_records", ["record_id"])
    op.create_index("ix_audit_action", "audit_log_records", ["action"])
    op.create_index("ix_audit_created", "audit_log_records", ["created_at"])


def downgrade():
    op.drop_index("ix_audit_created", table_name="audit_log_records")
    op.drop_index("ix_audit_action", table_name="audit_log_records")
    op.drop_index("ix_audit_record", table_name="audit_log_records")
    op.drop_index("ix_audit_log_records_request_id", table_name="audit_log_records")
    op.drop_table("audit_log_records")

    op.drop_index("ix_valuation_records_receipt", table_name="valuation_records")
    op.drop_index("ix_valuation_records_customer", table_name="valuation_records")
    op.drop_index("ix_valuation_records_status", table_name="valuation_records")
    op.drop_table("valuation_records")

    op.drop_table("receipts")
    op.drop_table("services")
    op.drop_index("ix_users_role", table_name="users")
    op.drop_table("users")
