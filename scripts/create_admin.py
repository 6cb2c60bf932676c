#!/usr/bin/env python3
"""
Create the first admin account (signup only offers provider/seeker roles).

Usage: python scripts/create_admin.py
"""
import getpass
import sys
sys.path.insert(0, '.')

from jobboard.core.auth import hash_password
from jobboard.db.mongodb import init_mongo_indexes
from jobboard.schemas.schemas import UserRole
from jobboard.services.mongo_service import UserService


def create_admin_user():
    print("--- Create Admin User ---")
    users = UserService()

    name = input("Enter admin's name: ").strip()
    email = input("Enter admin's email address: ").strip()

    existing = users.get_by_email(email)
    if existing:
        print(f"\nError: A user with the email '{email}' already exists.")
        promote = input("Do you want to promote this user to an admin? (y/n): ").lower()
        if promote == 'y':
            users.update_by_id(existing["_id"], {"role": UserRole.admin.value})
            print(f"Success! User '{email}' has been promoted to an admin.")
        return

    password = getpass.getpass("Enter a password for the admin: ")
    password_confirm = getpass.getpass("Confirm the password: ")

    if password != password_confirm:
        print("\nError: Passwords do not match. Please try again.")
        return

    if not all([name, email, password]):
        print("\nError: Name, email, and password cannot be empty.")
        return

    users.create(name, email, hash_password(password), UserRole.admin.value)
    print(f"\nSuccess! Admin user '{name}' with email '{email}' created.")


if __name__ == "__main__":
    init_mongo_indexes()
    create_admin_user()
