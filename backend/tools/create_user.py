#!/usr/bin/env python3
"""Create a backend user that can sign in to the admin frontend.

Usage:
  python tools/create_user.py --username alice --email alice@example.org
  python tools/create_user.py --username alice --password secret --first-name Alice
"""
import argparse
import getpass
import sys

from sqlalchemy import select

from rasclat.core.db import Base, SessionLocal, engine
from rasclat.models.radio import User
from rasclat.services.users import create_user


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument('--username', required=True)
    parser.add_argument('--email')
    parser.add_argument('--password', help='prompted for when omitted')
    parser.add_argument('--first-name')
    parser.add_argument('--last-name')
    args = parser.parse_args()

    password = args.password or getpass.getpass('Password: ')
    if not password.strip():
        print('empty password, aborting')
        return 1

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        username = args.username.strip().lower()
        if db.execute(select(User).where(User.username == username)).scalar_one_or_none():
            print(f'user {username} already exists')
            return 1
        user = create_user(db, username, password, email=args.email,
                           first_name=args.first_name, last_name=args.last_name)
        print(f'created user {user.username} ({user.id})')
        return 0
    finally:
        db.close()


if __name__ == '__main__':
    sys.exit(main())
