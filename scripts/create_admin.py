#!/usr/bin/env python3
"""
Create an ADMIN account (needed for /api/v1/password/force-change).
Run with: python -m scripts.create_admin <username> <email> <password> [first] [last]
"""

import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.database import SessionLocal
from app.models import Role
from app.services.user_service import UserService


def create_admin(
    username: str,
    email: str,
    password: str,
    first_name: str = "Admin",
    last_name: str = "User",
) -> None:
    """Create the admin user unless the username or email is already taken."""
    db = SessionLocal()

    try:
        if UserService.user_exists(db, username) or UserService.user_exists_by_email(db, email):
            print(f"User {username} / {email} already exists. Skipping.")
            return

        UserService.create_user(
            db,
            username=username,
            email=email.lower(),
            password=password,
            first_name=first_name,
            last_name=last_name,
            role=Role.ADMIN,
        )
        print(f"Created admin user {username}")
    except Exception as e:
        db.rollback()
        print(f"Error creating admin user: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) < 4:
        print(__doc__)
        sys.exit(1)
    create_admin(*sys.argv[1:6])
