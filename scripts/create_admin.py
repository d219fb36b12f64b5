"""Script to create a platform administrator account.

Usage:
    python scripts/create_admin.py --email admin@pharmacare.com \
        --password secret123 --first-name Site --last-name Admin
"""

import argparse
import asyncio
import sys

from app.database import AsyncSessionLocal, engine
from app.schemas.auth import RoleName
from app.schemas.users import UserCreate
from app.services.user_service import UserService, seed_roles


async def create_admin(email: str, password: str, first_name: str, last_name: str) -> int:
    """Create a user holding ROLE_USER and ROLE_ADMIN."""
    service = UserService()

    async with AsyncSessionLocal() as session:
        await seed_roles(session)

        if await service.email_exists(session, email):
            print(f"✗ A user with email {email} already exists", file=sys.stderr)
            return 1

        user = await service.create_user(
            session,
            UserCreate(
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
            ),
            [RoleName.USER, RoleName.ADMIN],
        )

    await engine.dispose()
    print(f"✓ Admin user created: {user['email']} ({user['id']})")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a PharmaCare admin user")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--first-name", default="Admin")
    parser.add_argument("--last-name", default="User")
    args = parser.parse_args()

    sys.exit(
        asyncio.run(create_admin(args.email, args.password, args.first_name, args.last_name))
    )


if __name__ == "__main__":
    main()
