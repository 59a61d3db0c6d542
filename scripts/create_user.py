# scripts/create_user.py
"""
Create an operator account and print its API token.

Usage:
    python -m scripts.create_user owner@allure-boutique.com
"""

import secrets
import sys

from boutique.api.deps import hash_token
from boutique.db.engine import get_engine
from boutique.db.schema import users


def create_user(engine, email: str) -> str:
    token = secrets.token_urlsafe(32)
    with engine.begin() as conn:
        conn.execute(users.insert().values(email=email, api_token=hash_token(token)))
    return token


def main():
    if len(sys.argv) != 2:
        print("usage: python -m scripts.create_user <email>")
        sys.exit(2)

    token = create_user(get_engine(), sys.argv[1].strip())

    print(f"User created: {sys.argv[1].strip()}")
    print(f"API token (shown once): {token}")


if __name__ == "__main__":
    main()
