#!/usr/bin/env python3
"""
Script to create or reset an admin panel account.

Usage:
    python scripts/create_admin.py <username>

The password is read from ADMIN_PASSWORD or prompted for.
"""

import getpass
import sys
import os

# Add the parent directory to the path so we can import the app
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app, db
from app.models.user import User


def main():
    if len(sys.argv) != 2:
        print("Usage: python scripts/create_admin.py <username>")
        sys.exit(1)

    username = sys.argv[1].strip()
    password = os.environ.get('ADMIN_PASSWORD') or getpass.getpass('Password: ')
    if len(password) < 8:
        print("Password must be at least 8 characters")
        sys.exit(1)

    app = create_app()

    with app.app_context():
        user = User.query.filter_by(username=username).first()
        if user:
            print(f"Resetting password for {username}")
        else:
            user = User(username=username)
            db.session.add(user)
            print(f"Creating admin {username}")
        user.set_password(password)
        db.session.commit()
        print("Done")


if __name__ == '__main__':
    main()
