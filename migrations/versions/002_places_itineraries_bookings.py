"""Attraction catalogue, itineraries with stops, bookings and saved places.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "002"
down_revision = "001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── places ────────────────────────────────────────────────────────
    op.create_table(
        "places",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("location", sa.String(120), nullable=False),
        sa.Column(
            "category",
            sa.Enum(
                "monument",
                "temple",
                "heritage",
                "nature",
                "winery",
                "beach",
                "landmark",
                "spiritual",
                name="placecategory",
            ),
            nullable=False,
        ),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("rating", sa.Float, nullable=True),
        sa.Column("opening_hours", sa.String(120), nullable=True),
        sa.Column("entry_fee", sa.String(120), nullable=True),
        sa.Column("best_time_to_visit", sa.String(120), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
    )
    op.create_index("idx_places_category", "places", ["category"])

    # ── itineraries + stops ───────────────────────────────────────────
    op.create_table(
        "itineraries",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
    )
    op.create_index("idx_itineraries_user", "itineraries", ["user_id"])

    op.create_table(
        "itinerary_places",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "itinerary_id", sa.Integer, sa.ForeignKey("itineraries.id"), nullable=False
        ),
        sa.Column("place_id", sa.Integer, sa.ForeignKey("places.id"), nullable=False),
        sa.Column("position", sa.Integer, nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
        sa.UniqueConstraint(
            "itinerary_id", "position", name="uq_itinerary_places_position"
        ),
    )

    # ── bookings ──────────────────────────────────────────────────────
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("tourist_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("guide_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("place_id", sa.Integer, sa.ForeignKey("places.id"), nullable=True),
        sa.Column("tour_date", sa.Date, nullable=False),
        sa.Column(
            "status",
            sa.Enum("pending", "confirmed", "cancelled", name="bookingstatus"),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column(
            "resolved_by", sa.Integer, sa.ForeignKey("users.id"), nullable=True
        ),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
    )
    op.create_index("idx_bookings_tourist", "bookings", ["tourist_id"])
    op.create_index("idx_bookings_guide", "bookings", ["guide_id"])

    # ── saved_places ──────────────────────────────────────────────────
    op.create_table(
        "saved_places",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("place_id", sa.Integer, sa.ForeignKey("places.id"), nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
        sa.UniqueConstraint("user_id", "place_id", name="uq_saved_places_user_place"),
    )


def downgrade() -> None:
    op.drop_table("saved_places")
    op.drop_table("bookings")
    op.drop_table("itinerary_places")
    op.drop_table("itineraries")
    op.drop_table("places")
    op.execute("DROP TYPE IF EXISTS bookingstatus")
    op.execute("DROP TYPE IF EXISTS placecategory")
