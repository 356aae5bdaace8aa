"""Initial schema: users, cars, bookings and the booking overlap guard.

Revision ID: 001
Create Date: 2026-02-06
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Needed for "car_id WITH =" inside a GiST exclusion constraint
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")

    # ── users ─────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )

    # ── cars ──────────────────────────────────────────────────────────
    op.create_table(
        "cars",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "owner_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(120), nullable=False, server_default=""),
        sa.Column(
            "state",
            sa.Enum("LOCKED", "UNLOCKED", "DECOMMISSIONED", name="carstate"),
            nullable=False,
            server_default="LOCKED",
        ),
        sa.Column("license_plate", sa.String(20), unique=True, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_cars_owner", "cars", ["owner_id"])

    # ── bookings ──────────────────────────────────────────────────────
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "car_id",
            sa.Integer,
            sa.ForeignKey("cars.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "renter_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "state",
            sa.Enum(
                "PENDING",
                "CONFIRMED",
                "PICKED_UP",
                "RETURNED",
                "CANCELED",
                name="bookingstate",
            ),
            nullable=False,
            server_default="PENDING",
        ),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("start_date < end_date", name="bookings_dates_ordered"),
    )
    op.create_index("idx_bookings_car", "bookings", ["car_id"])
    op.create_index("idx_bookings_renter", "bookings", ["renter_id"])
    op.create_index("idx_bookings_state", "bookings", ["state"])

    # Storage-level backstop: no two live bookings of a car may overlap
    # on the half-open interval [start_date, end_date).
    op.execute(
        """
        ALTER TABLE bookings
        ADD CONSTRAINT bookings_no_overlap
        EXCLUDE USING gist (
            car_id WITH =,
            tstzrange(start_date, end_date, '[)') WITH &&
        )
        WHERE (state <> 'CANCELED')
        """
    )


def downgrade() -> None:
    op.drop_table("bookings")
    op.drop_table("cars")
    op.drop_table("users")
    op.execute("DROP TYPE IF EXISTS bookingstate")
    op.execute("DROP TYPE IF EXISTS carstate")
