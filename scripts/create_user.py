#!/usr/bin/env python3
"""
Script to create a new user interactively.

Usage:
    python scripts/create_user.py

    # Or with name and email as arguments:
    python scripts/create_user.py --name "Alice" --email alice@example.com
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from friendship.errors import FriendshipError
from friendship.services import create_services


def main():
    parser = argparse.ArgumentParser(description="Create a new user")
    parser.add_argument("--name", "-n", help="User's name")
    parser.add_argument("--email", "-e", help="User's email")
    parser.add_argument("--friend", "-f", action="append", default=[], help="Id of an existing user to befriend (repeatable)")
    args = parser.parse_args()

    context, users = create_services()

    name = args.name
    if not name:
        name = input("Name: ").strip()

    email = args.email
    if not email:
        email = input("Email: ").strip()

    if not name or not email:
        print("❌ Name and email are required!")
        sys.exit(1)

    try:
        # friends must exist before the user is created
        for friend_id in args.friend:
            users.find_one(friend_id)

        user = users.create(name=name, email=email)
    except FriendshipError as e:
        print(f"❌ Failed to create user: {e.message}")
        context.close()
        sys.exit(1)

    try:
        for friend_id in args.friend:
            users.add_friend(user.id, friend_id)
    except FriendshipError as e:
        print(f"⚠️  User {user.id} was created, but linking friends failed: {e.message}")
        sys.exit(1)
    finally:
        context.close()

    print()
    print("✅ User created successfully!")
    print(f"   User ID: {user.id}")
    print(f"   Name: {user.name}")
    print(f"   Email: {user.email}")
    if args.friend:
        print(f"   Friends: {', '.join(args.friend)}")


if __name__ == "__main__":
    main()
