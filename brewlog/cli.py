"""CLI commands for Brewlog."""

import argparse
import getpass
import sys

from sqlalchemy.orm import Session

from brewlog.database import SessionLocal
from brewlog.models.user import User
from brewlog.seed_mappings import seed_mappings_for_user
from brewlog.services.auth.local_provider import hash_password


def create_user(email: str, password: str | None = None) -> None:
    """Create a user that can log in and own experiments."""
    db: Session = SessionLocal()

    try:
        # Check if email already exists
        existing = db.query(User).filter(User.email == email.lower()).first()
        if existing:
            print(f"Error: User with email '{email}' already exists.")
            sys.exit(1)

        # Get password if not provided
        if not password:
            password = getpass.getpass("Password: ")
            password_confirm = getpass.getpass("Confirm password: ")
            if password != password_confirm:
                print("Error: Passwords do not match.")
                sys.exit(1)

        if len(password) < 8:
            print("Error: Password must be at least 8 characters.")
            sys.exit(1)

        user = User(email=email.lower(), password_hash=hash_password(password))
        db.add(user)
        db.commit()

        print(f"User created successfully: {email}")

    finally:
        db.close()


def seed_mappings(email: str) -> None:
    """Give an existing user the default effect-mapping catalog."""
    db: Session = SessionLocal()

    try:
        user = db.query(User).filter(User.email == email.lower()).first()
        if not user:
            print(f"Error: No user with email '{email}'.")
            sys.exit(1)

        created = seed_mappings_for_user(db, user)
        if created == 0:
            print(f"User '{email}' already has effect mappings. Skipping.")
        else:
            print(f"Seeded {created} effect mappings for {email}")

    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Brewlog CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # create-user command
    create_user_parser = subparsers.add_parser("create-user", help="Create a user")
    create_user_parser.add_argument("--email", required=True, help="User email address")
    create_user_parser.add_argument(
        "--password", help="User password (will prompt if not provided)"
    )

    # seed-mappings command
    seed_parser = subparsers.add_parser(
        "seed-mappings", help="Seed the default effect-mapping catalog for a user"
    )
    seed_parser.add_argument("--email", required=True, help="Email of the catalog owner")

    args = parser.parse_args()

    if args.command == "create-user":
        create_user(args.email, args.password)
    elif args.command == "seed-mappings":
        seed_mappings(args.email)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
