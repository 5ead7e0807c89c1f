"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations:
    python seed.py

Creates:
  - 8 guides across Maharashtra, each with a guide profile and a location
  - 3 tourists (one with a location in Mumbai)
  - 3 sample connections (pending, accepted, declined)
  - 9 attractions, one itinerary with stops, one booking and one saved place
"""

import asyncio
from datetime import date, datetime, timedelta, timezone

from sqlalchemy import text

from wanderer.config import settings
from wanderer.domain.enums import (
    BookingStatus,
    ConnectionStatus,
    PlaceCategory,
    UserRole,
)
from wanderer.domain.spatial import location_h3_cell
from wanderer.infrastructure.database import async_session_factory, engine
from wanderer.infrastructure.models import (
    BookingModel,
    ConnectionModel,
    GuideProfileModel,
    ItineraryModel,
    ItineraryPlaceModel,
    PlaceModel,
    SavedPlaceModel,
    UserModel,
)


GUIDES = [
    {
        "name": "Ravi Maharaj", "email": "ravi.maharaj@example.com",
        "lat": 18.9220, "lng": 72.8347,  # Gateway of India
        "profile": {
            "bio": "Mumbai heritage walks, from the Fort precinct to Crawford Market.",
            "languages": ["English", "Hindi", "Marathi"],
            "specialties": ["Heritage", "Architecture", "Food Tours"],
            "location": "Mumbai", "rating": 4.8, "experience_years": 7,
        },
    },
    {
        "name": "Priya Kulkarni", "email": "priya.kulkarni@example.com",
        "lat": 18.5196, "lng": 73.8553,  # Shaniwar Wada
        "profile": {
            "bio": "Pune-based guide for Peshwa-era monuments and local cuisine.",
            "languages": ["English", "Hindi", "Marathi"],
            "specialties": ["History", "Food Tours", "Cultural Tours"],
            "location": "Pune", "rating": 4.7, "experience_years": 5,
        },
    },
    {
        "name": "Amol Patil", "email": "amol.patil@example.com",
        "lat": 20.0258, "lng": 75.1780,  # Ellora
        "profile": {
            "bio": "Ajanta and Ellora caves with an archaeologist's eye.",
            "languages": ["English", "Hindi", "Marathi"],
            "specialties": ["Archaeology", "Buddhist Art", "History"],
            "location": "Aurangabad", "rating": 4.9, "experience_years": 8,
        },
    },
    {
        "name": "Sangeeta Sharma", "email": "sangeeta.sharma@example.com",
        "lat": 19.9975, "lng": 73.7898,
        "profile": {
            "bio": "Wine country and the temple circuits around Nashik.",
            "languages": ["English", "Hindi", "Marathi"],
            "specialties": ["Wine Tours", "Temple Circuits", "Food Tours"],
            "location": "Nashik", "rating": 4.7, "experience_years": 4,
        },
    },
    {
        "name": "Vikram Jadhav", "email": "vikram.jadhav@example.com",
        "lat": 16.7050, "lng": 74.2433,
        "profile": {
            "bio": "Royal Kolhapur: Maratha forts, temples and misal pav.",
            "languages": ["English", "Hindi", "Marathi", "Kannada"],
            "specialties": ["Historical Forts", "Temple Tours", "Local Cuisine"],
            "location": "Kolhapur", "rating": 4.5, "experience_years": 6,
        },
    },
    {
        "name": "Anita Desai", "email": "anita.desai@example.com",
        "lat": 18.7546, "lng": 73.4062,
        "profile": {
            "bio": "Monsoon hikes through the Western Ghats around Lonavala.",
            "languages": ["English", "Hindi", "Marathi"],
            "specialties": ["Scenic Hill Stations", "Hiking", "Monsoon Specials"],
            "location": "Lonavala", "rating": 4.4, "experience_years": 3,
        },
    },
    {
        "name": "Deepak Chavan", "email": "deepak.chavan@example.com",
        "lat": 18.6414, "lng": 72.8722,
        "profile": {
            "bio": "Konkan coast beaches, sea forts and water sports.",
            "languages": ["English", "Hindi", "Marathi", "Konkani"],
            "specialties": ["Beach Tours", "Coastal Forts", "Water Sports"],
            "location": "Alibaug", "rating": 4.6, "experience_years": 5,
        },
    },
    {
        "name": "Neha Shinde", "email": "neha.shinde@example.com",
        "lat": 19.0760, "lng": 72.8777,  # Mumbai suburbs, no fixed spot
        "profile": {
            "bio": "Street food crawls and Bollywood studio visits.",
            "languages": ["English", "Hindi", "Marathi"],
            "specialties": ["Street Food", "Film City", "Markets"],
            "location": "Mumbai", "rating": 4.3, "experience_years": 2,
        },
    },
]

TOURISTS = [
    {"name": "Aarav Sharma", "email": "aarav@example.com", "lat": 19.0760, "lng": 72.8777},
    {"name": "Emma Clarke", "email": "emma@example.com", "lat": None, "lng": None},
    {"name": "Kenji Watanabe", "email": "kenji@example.com", "lat": None, "lng": None},
]

PLACES = [
    ("Gateway of India", "Mumbai, Maharashtra", PlaceCategory.MONUMENT, 18.9219, 72.8347,
     "Arch monument built in 1924 on the Apollo Bunder waterfront."),
    ("Elephanta Caves", "Mumbai, Maharashtra", PlaceCategory.HERITAGE, 18.9633, 72.9315,
     "Rock-cut cave temples dedicated to Shiva, a short ferry ride from Mumbai."),
    ("Marine Drive", "Mumbai, Maharashtra", PlaceCategory.LANDMARK, 18.9548, 72.8224,
     "3.6 km promenade along the Arabian Sea, known as the Queen's Necklace."),
    ("Ellora Caves", "Aurangabad, Maharashtra", PlaceCategory.HERITAGE, 20.0258, 75.1780,
     "Buddhist, Hindu and Jain rock-cut monasteries and temples."),
    ("Ajanta Caves", "Aurangabad, Maharashtra", PlaceCategory.HERITAGE, 20.5526, 75.7033,
     "Buddhist cave monuments with ancient murals."),
    ("Shaniwar Wada", "Pune, Maharashtra", PlaceCategory.MONUMENT, 18.5195, 73.8553,
     "18th-century fortification and seat of the Peshwas."),
    ("Lonavala", "Lonavala, Maharashtra", PlaceCategory.NATURE, 18.7546, 73.4062,
     "Hill station in the Sahyadri range, lush in the monsoon."),
    ("Shirdi Sai Baba Temple", "Shirdi, Maharashtra", PlaceCategory.SPIRITUAL, 19.7645, 74.4771,
     "Shrine of Sai Baba, visited by millions of pilgrims each year."),
    ("Raigad Fort", "Raigad, Maharashtra", PlaceCategory.MONUMENT, 18.2349, 73.4482,
     "Hill fort and capital of Chhatrapati Shivaji Maharaj."),
]


def _located(model: UserModel, lat, lng) -> UserModel:
    if lat is not None and lng is not None:
        model.current_lat = lat
        model.current_lng = lng
        model.h3_cell = location_h3_cell(lat, lng, settings.h3_resolution)
        model.last_location_update = datetime.now(timezone.utc)
    return model


async def seed():
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM users"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        # ── Guides ────────────────────────────────────────────────────
        guide_models = []
        for g in GUIDES:
            m = _located(
                UserModel(name=g["name"], email=g["email"], role=UserRole.GUIDE),
                g["lat"], g["lng"],
            )
            session.add(m)
            guide_models.append(m)
        await session.flush()

        for m, g in zip(guide_models, GUIDES):
            session.add(GuideProfileModel(user_id=m.id, **g["profile"]))
        await session.flush()
        print(f"  Created {len(guide_models)} guides")

        # ── Tourists ──────────────────────────────────────────────────
        tourist_models = []
        for t in TOURISTS:
            m = _located(
                UserModel(name=t["name"], email=t["email"], role=UserRole.TOURIST),
                t["lat"], t["lng"],
            )
            session.add(m)
            tourist_models.append(m)
        await session.flush()
        print(f"  Created {len(tourist_models)} tourists")

        # ── Connections ───────────────────────────────────────────────
        connections = [
            ConnectionModel(
                from_user_id=tourist_models[0].id,
                to_user_id=guide_models[0].id,
                status=ConnectionStatus.PENDING,
                message="Hi! Could you show us around Colaba this Saturday?",
                trip_details="2 adults, half day",
                budget=2500.0,
            ),
            ConnectionModel(
                from_user_id=tourist_models[1].id,
                to_user_id=guide_models[2].id,
                status=ConnectionStatus.ACCEPTED,
                message="Looking for a full-day Ellora tour.",
                budget=4000.0,
                resolved_by=guide_models[2].id,
            ),
            ConnectionModel(
                from_user_id=tourist_models[2].id,
                to_user_id=guide_models[1].id,
                status=ConnectionStatus.DECLINED,
                message="Pune food walk next week?",
                resolved_by=guide_models[1].id,
            ),
        ]
        session.add_all(connections)
        await session.flush()
        print(f"  Created {len(connections)} connections")

        # ── Attractions ───────────────────────────────────────────────
        place_models = [
            PlaceModel(
                name=name, location=location, category=category,
                latitude=lat, longitude=lng, description=description,
            )
            for name, location, category, lat, lng, description in PLACES
        ]
        session.add_all(place_models)
        await session.flush()
        print(f"  Created {len(place_models)} attractions")

        # ── Trip planning ─────────────────────────────────────────────
        start = date.today() + timedelta(days=14)
        trip = ItineraryModel(
            user_id=tourist_models[0].id,
            title="Mumbai in two days",
            description="Heritage on day one, the sea front on day two.",
            start_date=start,
            end_date=start + timedelta(days=1),
        )
        session.add(trip)
        await session.flush()
        session.add_all([
            ItineraryPlaceModel(itinerary_id=trip.id, place_id=place_models[0].id, position=1),
            ItineraryPlaceModel(
                itinerary_id=trip.id, place_id=place_models[1].id, position=2,
                notes="First ferry leaves at 9:00",
            ),
            ItineraryPlaceModel(itinerary_id=trip.id, place_id=place_models[2].id, position=3),
        ])
        session.add(BookingModel(
            tourist_id=tourist_models[0].id,
            guide_id=guide_models[0].id,
            place_id=place_models[1].id,
            tour_date=start,
            status=BookingStatus.PENDING,
            notes="Half-day Elephanta tour",
        ))
        session.add(SavedPlaceModel(
            user_id=tourist_models[1].id, place_id=place_models[3].id,
            notes="Must see before leaving",
        ))
        await session.flush()
        print("  Created 1 itinerary, 1 booking, 1 saved place")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
