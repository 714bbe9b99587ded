#!/usr/bin/env python3
"""Create an admin user with properly hashed password."""

import asyncio

from sqlalchemy import select

from app.core.permissions import UserRole
from app.core.security import get_password_hash
from app.database import AsyncSessionLocal
from app.models.user import User


async def create_admin(
    email: str = "admin@example.com",
    password: str = "Admin@123",
    name: str = "Administrator",
) -> None:
    """Create an admin user, or promote and reset an existing account."""
    email = email.lower()
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).where(User.email == email))
        existing = result.scalar_one_or_none()

        if existing:
            existing.password_hash = get_password_hash(password)
            existing.role = UserRole.ADMIN.value
            existing.is_active = True
            existing.name = name
            await session.commit()
            print(f"Updated existing admin user: {email}")
        else:
            admin = User(
                email=email,
                name=name,
                password_hash=get_password_hash(password),
                role=UserRole.ADMIN.value,
                is_active=True,
            )
            session.add(admin)
            await session.commit()
            print(f"Created admin user: {email}")

        print(f"Email: {email}")
        print("Role: admin")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Create an admin user")
    parser.add_argument("--email", default="admin@example.com", help="Admin email")
    parser.add_argument("--password", default="Admin@123", help="Admin password")
    parser.add_argument("--name", default="Administrator", help="Display name")

    args = parser.parse_args()

    asyncio.run(create_admin(email=args.email, password=args.password, name=args.name))
