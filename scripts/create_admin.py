#!/usr/bin/env python3
"""Create an admin user with properly hashed password."""

import asyncio

from sqlalchemy import select

from hallbook.core.permissions import UserRole
from hallbook.core.security import get_password_hash
from hallbook.database import AsyncSessionLocal, close_db
from hallbook.models.user import User


async def create_admin(
    email: str = "admin@hallbook.local",
    password: str = "Admin@123",
    name: str = "Hall Administrator",
    department: str | None = None,
) -> None:
    """Create an admin user, or promote and reset an existing account."""
    email = email.strip().lower()
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).where(User.email == email))
        existing = result.scalar_one_or_none()

        if existing:
            existing.password_hash = get_password_hash(password)
            existing.role = UserRole.ADMIN.value
            existing.is_active = True
            existing.name = name
            if department:
                existing.department = department
            await session.commit()
            print(f"Updated existing admin user: {email}")
        else:
            admin = User(
                email=email,
                password_hash=get_password_hash(password),
                role=UserRole.ADMIN.value,
                name=name,
                department=department,
                is_active=True,
            )
            session.add(admin)
            await session.commit()
            print(f"Created admin user: {email}")

        print(f"Email: {email}")
        print("Role: admin")

    await close_db()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Create an admin user")
    parser.add_argument("--email", default="admin@hallbook.local", help="Admin email")
    parser.add_argument("--password", default="Admin@123", help="Admin password")
    parser.add_argument("--name", default="Hall Administrator", help="Display name")
    parser.add_argument("--department", default=None, help="Department")

    args = parser.parse_args()

    asyncio.run(
        create_admin(
            email=args.email,
            password=args.password,
            name=args.name,
            department=args.department,
        )
    )
