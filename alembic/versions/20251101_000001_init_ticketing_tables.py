"""Initial ticketing tables

Revision ID: 20251101_000001
Revises: 
Create Date: 2025-11-01 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20251101_000001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.func.now(),
            onupdate=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_user"),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)
    op.create_index("ix_user_role", "user", ["role"])

    op.create_table(
        "customer",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("default_bill_rate", sa.Numeric(10, 2), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_customer"),
    )
    op.create_index("ix_customer_name", "customer", ["name"], unique=True)

    op.create_table(
        "driver",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("default_pay_rate", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("pin_hash", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["user_id"], ["user.id"], name="fk_driver_user_id_user", ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_driver"),
    )
    op.create_index("ix_driver_user_id", "driver", ["user_id"])
    op.create_index("ix_driver_code", "driver", ["code"], unique=True)
    op.create_index("ix_driver_name", "driver", ["name"])

    op.create_table(
        "ticket",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("driver_id", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("truck_number", sa.String(length=50), nullable=True),
        sa.Column("customer", sa.String(length=255), nullable=False),
        sa.Column("job_type", sa.String(length=255), nullable=True),
        sa.Column("equipment_type", sa.String(length=255), nullable=True),
        sa.Column("ticket_number", sa.String(length=100), nullable=False),
        sa.Column("photo_path", sa.String(length=500), nullable=True),
        sa.Column("quantity", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("bill_rate", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("pay_rate", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("total_bill", sa.Numeric(14, 4), nullable=False, server_default="0"),
        sa.Column("total_pay", sa.Numeric(14, 4), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="Pending"),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["driver_id"], ["driver.id"], name="fk_ticket_driver_id_driver", ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_ticket"),
    )
    op.create_index("ix_ticket_driver_id", "ticket", ["driver_id"])
    op.create_index("ix_ticket_date", "ticket", ["date"])
    op.create_index("ix_ticket_customer", "ticket", ["customer"])
    op.create_index("ix_ticket_equipment_type", "ticket", ["equipment_type"])
    op.create_index("ix_ticket_ticket_number", "ticket", ["ticket_number"])
    op.create_index("ix_ticket_status", "ticket", ["status"])


def downgrade() -> None:
    op.drop_table("ticket")
    op.drop_table("driver")
    op.drop_table("customer")
    op.drop_table("user")
