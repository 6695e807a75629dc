#!/usr/bin/env python3
"""
CLI script to create a platform admin user and issue an access token.

Usage (interactive):
    python scripts/create_admin.py

Usage (non-interactive, for deployments):
    python scripts/create_admin.py --email admin@example.com --name "Site Admin"
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from pkasla.database import async_session_factory, engine
from pkasla.models import Role, User
from pkasla.utils.security import create_access_token


async def create_admin(email: str | None = None, name: str | None = None) -> bool:
    """Create an admin user (or reuse an existing one) and print a token."""
    print("\n" + "=" * 50)
    print("PKASLA - Admin Setup")
    print("=" * 50 + "\n")

    if not email:
        while True:
            email = input("Enter email address: ").strip().lower()
            if "@" in email and "." in email:
                break
            print("Please enter a valid email address.")
    else:
        email = email.strip().lower()
        if "@" not in email or "." not in email:
            print("Invalid email address.")
            return False

    if not name:
        name = input("Enter display name: ").strip() or "Admin"

    async with async_session_factory() as session:
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user and not user.is_admin:
            print(f"\nUser with email {email} already exists and is not an admin.")
            return False

        if user is None:
            user = User(email=email, name=name, role=Role.ADMIN.value, is_active=True)
            session.add(user)
            await session.commit()
            await session.refresh(user)
            print("Admin created.")
        else:
            print("Admin already exists, issuing a new token.")

        token = create_access_token(user.id, role=user.role)

        print("\n" + "=" * 50)
        print(f"  Email: {user.email}")
        print(f"  ID: {user.id}")
        print(f"  Token: {token}")
        print("=" * 50 + "\n")

        return True


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Create a PKASLA admin user")
    parser.add_argument("--email", "-e", help="Admin email address")
    parser.add_argument("--name", "-n", help="Display name", default=None)

    args = parser.parse_args()

    try:
        success = await create_admin(email=args.email, name=args.name)
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print("\n\nAborted by user.")
        sys.exit(1)
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
