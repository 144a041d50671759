#!/usr/bin/env python3
"""
Database management script.
Creates, drops and resets tables, creates admin accounts and seeds demo data.
"""

import asyncio
import sys
import argparse
import logging
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Add the app directory to the Python path
sys.path.insert(0, str(Path(__file__).parent))

from app.config import settings
from app.database import AsyncSessionLocal, create_tables, drop_tables, close_db_connection
from app.models.user import UserRole
from app.models.listing import Gender
from app.repositories.user import UserRepository
from app.repositories.listing import ListingRepository
from app.utils.validators import ValidationUtils

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEMO_LISTINGS = [
    {
        "title": "Furnished 1BHK near Koregaon Park",
        "description": "Bright flat with balcony, walking distance to cafes.",
        "rent": Decimal("15000.00"),
        "address": "Lane 5, Koregaon Park",
        "city": "Pune",
        "gender": Gender.ANY,
        "furnished": True,
        "amenities": "WiFi, Parking, Power Backup",
    },
    {
        "title": "Girls PG in Kothrud",
        "description": "Twin sharing rooms with meals included.",
        "rent": Decimal("8500.00"),
        "address": "Paud Road, Kothrud",
        "city": "Pune",
        "gender": Gender.FEMALE,
        "furnished": True,
        "amenities": "Meals, Laundry, WiFi",
    },
    {
        "title": "2BHK Sea View Apartment",
        "description": "Spacious unfurnished flat in a gated society.",
        "rent": Decimal("45000.00"),
        "address": "Carter Road, Bandra West",
        "city": "Mumbai",
        "gender": Gender.ANY,
        "furnished": False,
        "amenities": "Gym, Security, Lift",
    },
    {
        "title": "Boys Hostel near Andheri Station",
        "description": "Single occupancy rooms for working professionals.",
        "rent": Decimal("12000.00"),
        "address": "JP Road, Andheri West",
        "city": "Mumbai",
        "gender": Gender.MALE,
        "furnished": True,
        "amenities": "WiFi, Housekeeping",
    },
]


class MigrationManager:
    """Manages schema creation and initial data."""

    async def create(self) -> None:
        await create_tables()

    async def drop(self) -> None:
        logger.warning("Dropping all tables - all data will be lost!")
        await drop_tables()

    async def reset(self) -> None:
        """Drop and recreate every table."""
        if settings.is_production:
            raise RuntimeError("Database reset is not allowed in production")

        await drop_tables()
        await create_tables()
        logger.info("Database reset completed")

    async def create_admin(self, name: str, email: str, phone: str, password: str) -> None:
        """Create an admin account; admins cannot sign up through the API."""
        email = ValidationUtils.validate_email_address(email)
        phone = ValidationUtils.validate_phone_number(phone)
        password = ValidationUtils.validate_password(password, settings.password_min_length)

        async with AsyncSessionLocal() as session:
            user_repo = UserRepository(session)
            if await user_repo.get_by_email(email):
                raise RuntimeError(f"Email already registered: {email}")

            admin = await user_repo.create_user({
                "name": name.strip(),
                "email": email,
                "phone": phone,
                "password": password,
                "role": UserRole.ADMIN,
            })
            logger.info(f"Admin user created: {admin.email} (ID: {admin.id})")

    async def seed(self) -> None:
        """Insert a demo landlord, a demo tenant and a few listings."""
        async with AsyncSessionLocal() as session:
            user_repo = UserRepository(session)
            listing_repo = ListingRepository(session)

            if await user_repo.get_by_email("landlord@example.com"):
                logger.info("Demo data already present, skipping seed")
                return

            landlord = await user_repo.create_user({
                "name": "Demo Landlord",
                "email": "landlord@example.com",
                "phone": "9876543210",
                "password": DEMO_PASSWORD,
                "role": UserRole.LANDLORD,
            })
            await user_repo.create_user({
                "name": "Demo Tenant",
                "email": "tenant@example.com",
                "phone": "9123456780",
                "password": DEMO_PASSWORD,
                "role": UserRole.TENANT,
            })

            for offset, listing_data in enumerate(DEMO_LISTINGS):
                await listing_repo.create_listing({
                    **listing_data,
                    "user_id": landlord.id,
                    "available_from": date.today() + timedelta(days=7 * offset),
                })

            logger.info(f"Seeded 2 users and {len(DEMO_LISTINGS)} listings")
            logger.info(f"Demo accounts: landlord@example.com / tenant@example.com, password {DEMO_PASSWORD}")
            logger.warning("Do not seed demo accounts in production!")


async def run(args: argparse.Namespace) -> None:
    manager = MigrationManager()
    try:
        if args.command == "create":
            await manager.create()
        elif args.command == "drop":
            await manager.drop()
        elif args.command == "reset":
            await manager.reset()
        elif args.command == "create-admin":
            await manager.create_admin(args.name, args.email, args.phone, args.password)
        elif args.command == "seed":
            await manager.seed()
    finally:
        await close_db_connection()


def main():
    """Main CLI interface for database management."""
    parser = argparse.ArgumentParser(description="Rental Listing API database management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create", help="Create all tables")

    drop_parser = subparsers.add_parser("drop", help="Drop all tables")
    drop_parser.add_argument("--confirm", action="store_true", help="Confirm dropping tables")

    reset_parser = subparsers.add_parser("reset", help="Drop and recreate all tables")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm database reset")

    admin_parser = subparsers.add_parser("create-admin", help="Create an admin account")
    admin_parser.add_argument("name")
    admin_parser.add_argument("email")
    admin_parser.add_argument("phone")
    admin_parser.add_argument("password")

    subparsers.add_parser("seed", help="Seed demo users and listings")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    if args.command in ("drop", "reset") and not args.confirm:
        print(f"Database {args.command} requires --confirm flag")
        return

    try:
        asyncio.run(run(args))
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
