"""MediStock management CLI.

Creates and drops database schemas for the configured SQL providers and
bootstraps admin accounts. Select the database with PROTEAN_ENV.

Usage:
    PROTEAN_ENV=sqlite python src/manage.py setup-db
    PROTEAN_ENV=sqlite python src/manage.py drop-db
    PROTEAN_ENV=sqlite python src/manage.py create-admin --username admin \\
        --email admin@example.com --password change-me
"""

import argparse
import sys


def setup_databases():
    """Create database schemas for the medistock domain."""
    from medistock.domain import medistock
    from medistock.utils.db import setup_db

    print("Initializing medistock domain...")
    medistock.init()
    print("Creating database schema...")
    touched = setup_db(medistock)
    if touched:
        print(f"  schema ready for: {', '.join(touched)}.")
    else:
        print("  no SQL database configured; nothing to create.")

    print("Done.")


def drop_databases():
    """Drop database schemas for the medistock domain."""
    from medistock.domain import medistock
    from medistock.utils.db import drop_db

    print("Initializing medistock domain...")
    medistock.init()
    print("Dropping database schema...")
    touched = drop_db(medistock)
    if touched:
        print(f"  schema dropped for: {', '.join(touched)}.")
    else:
        print("  no SQL database configured; nothing to drop.")

    print("Done.")


def create_admin(username, email, password):
    """Register an account and promote it to admin. Returns the new user's id."""
    from protean.exceptions import ValidationError

    from medistock.domain import medistock
    from medistock.identity.administration import UpdateUser
    from medistock.identity.registration import register

    medistock.init()
    with medistock.domain_context():
        try:
            user_id = register(username=username, email=email, password=password)
        except ValidationError as exc:
            print(f"Could not create admin: {exc.messages}")
            sys.exit(1)
        medistock.process(UpdateUser(user_id=user_id, changes={"role": "admin"}), asynchronous=False)

    print(f"Admin {username} created with id {user_id}.")
    return user_id


def main():
    parser = argparse.ArgumentParser(description="MediStock management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    admin_parser = subparsers.add_parser("create-admin", help="Create an admin account")
    admin_parser.add_argument("--username", required=True)
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", required=True)

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    elif args.command == "create-admin":
        create_admin(args.username, args.email, args.password)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
