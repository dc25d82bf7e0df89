"""create billing tables

Revision ID: a7c3e9f1b2d4
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "a7c3e9f1b2d4"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "plans",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("code", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("interval", sa.String(length=20), nullable=False, server_default="monthly"),
        sa.Column(
            "frequency",
            sa.String(length=30),
            nullable=False,
            server_default="beginning_of_period",
        ),
        sa.Column("pay_in_advance", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("amount_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="USD"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_index(op.f("ix_plans_code"), "plans", ["code"], unique=True)

    op.create_table(
        "taxes",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("code", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("rate", sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("applied_by_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_index(op.f("ix_taxes_code"), "taxes", ["code"], unique=True)

    op.create_table(
        "subscriptions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("external_id", sa.String(length=255), nullable=False),
        sa.Column("plan_id", sa.String(length=36), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("anniversary_date", sa.Date(), nullable=True),
        sa.Column("previous_subscription_id", sa.String(length=36), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("terminated_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["plan_id"], ["plans.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(
            ["previous_subscription_id"], ["subscriptions.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("external_id"),
    )
    op.create_index(
        op.f("ix_subscriptions_external_id"), "subscriptions", ["external_id"], unique=True
    )
    op.create_index(op.f("ix_subscriptions_plan_id"), "subscriptions", ["plan_id"], unique=False)
    op.create_index(op.f("ix_subscriptions_status"), "subscriptions", ["status"], unique=False)
    op.create_index(
        op.f("ix_subscriptions_previous_subscription_id"),
        "subscriptions",
        ["previous_subscription_id"],
        unique=False,
    )

    op.create_table(
        "invoices",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("invoice_number", sa.String(length=50), nullable=False),
        sa.Column("subscription_id", sa.String(length=36), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="draft"),
        sa.Column("from_date", sa.Date(), nullable=False),
        sa.Column("to_date", sa.Date(), nullable=False),
        sa.Column("issuing_date", sa.Date(), nullable=False),
        sa.Column("fees_amount_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("taxes_amount_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_amount_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("taxes_rate", sa.Numeric(precision=5, scale=2), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="USD"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["subscription_id"], ["subscriptions.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("invoice_number"),
        sa.UniqueConstraint(
            "subscription_id", "from_date", "to_date", name="uq_invoices_subscription_period"
        ),
    )
    op.create_index(op.f("ix_invoices_invoice_number"), "invoices", ["invoice_number"], unique=True)
    op.create_index(
        op.f("ix_invoices_subscription_id"), "invoices", ["subscription_id"], unique=False
    )

    op.create_table(
        "fees",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("invoice_id", sa.String(length=36), nullable=False),
        sa.Column("subscription_id", sa.String(length=36), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("kind", sa.String(length=20), nullable=False, server_default="subscription"),
        sa.Column("amount_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("taxes_amount_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("taxes_rate", sa.Numeric(precision=5, scale=2), nullable=False, server_default="0"),
        sa.Column("description", sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["invoice_id"], ["invoices.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["subscription_id"], ["subscriptions.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_fees_invoice_id"), "fees", ["invoice_id"], unique=False)
    op.create_index(op.f("ix_fees_subscription_id"), "fees", ["subscription_id"], unique=False)
    op.create_index(op.f("ix_fees_kind"), "fees", ["kind"], unique=False)

    op.create_table(
        "fee_applied_taxes",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("fee_id", sa.String(length=36), nullable=False),
        sa.Column("tax_id", sa.String(length=36), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tax_rate", sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(["fee_id"], ["fees.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["tax_id"], ["taxes.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("fee_id", "tax_id", name="uq_fee_applied_taxes_fee_tax"),
    )
    op.create_index(
        op.f("ix_fee_applied_taxes_fee_id"), "fee_applied_taxes", ["fee_id"], unique=False
    )
    op.create_index(
        op.f("ix_fee_applied_taxes_tax_id"), "fee_applied_taxes", ["tax_id"], unique=False
    )

    op.create_table(
        "invoice_applied_taxes",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("invoice_id", sa.String(length=36), nullable=False),
        sa.Column("tax_id", sa.String(length=36), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tax_code", sa.String(length=255), nullable=False),
        sa.Column("tax_name", sa.String(length=255), nullable=False),
        sa.Column("tax_description", sa.Text(), nullable=True),
        sa.Column("tax_rate", sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("amount_currency", sa.String(length=3), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(["invoice_id"], ["invoices.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["tax_id"], ["taxes.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("invoice_id", "tax_id", name="uq_invoice_applied_taxes_invoice_tax"),
    )
    op.create_index(
        op.f("ix_invoice_applied_taxes_invoice_id"),
        "invoice_applied_taxes",
        ["invoice_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_invoice_applied_taxes_tax_id"),
        "invoice_applied_taxes",
        ["tax_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_invoice_applied_taxes_tax_id"), table_name="invoice_applied_taxes")
    op.drop_index(op.f("ix_invoice_applied_taxes_invoice_id"), table_name="invoice_applied_taxes")
    op.drop_table("invoice_applied_taxes")
    op.drop_index(op.f("ix_fee_applied_taxes_tax_id"), table_name="fee_applied_taxes")
    op.drop_index(op.f("ix_fee_applied_taxes_fee_id"), table_name="fee_applied_taxes")
    op.drop_table("fee_applied_taxes")
    op.drop_index(op.f("ix_fees_kind"), table_name="fees")
    op.drop_index(op.f("ix_fees_subscription_id"), table_name="fees")
    op.drop_index(op.f("ix_fees_invoice_id"), table_name="fees")
    op.drop_table("fees")
    op.drop_index(op.f("ix_invoices_subscription_id"), table_name="invoices")
    op.drop_index(op.f("ix_invoices_invoice_number"), table_name="invoices")
    op.drop_table("invoices")
    op.drop_index(op.f("ix_subscriptions_previous_subscription_id"), table_name="subscriptions")
    op.drop_index(op.f("ix_subscriptions_status"), table_name="subscriptions")
    op.drop_index(op.f("ix_subscriptions_plan_id"), table_name="subscriptions")
    op.drop_index(op.f("ix_subscriptions_external_id"), table_name="subscriptions")
    op.drop_table("subscriptions")
    op.drop_index(op.f("ix_taxes_code"), table_name="taxes")
    op.drop_table("taxes")
    op.drop_index(op.f("ix_plans_code"), table_name="plans")
    op.drop_table("plans")
