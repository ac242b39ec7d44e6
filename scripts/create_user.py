#!/usr/bin/env python3
from __future__ import annotations

import argparse
import getpass

from dotenv import load_dotenv
from fastapi import HTTPException

from autosales.db import SessionLocal, init_db
from autosales.services.auth import DEFAULT_ROLE, ROLE_DESCRIPTIONS, create_user, seed_roles


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a user and assign a role.")
    parser.add_argument("username", help="Login name for the new user.")
    parser.add_argument("--email", default=None, help="Email address.")
    parser.add_argument("--first-name", required=True, help="Given name.")
    parser.add_argument("--last-name", required=True, help="Family name.")
    parser.add_argument(
        "--role",
        default=DEFAULT_ROLE,
        choices=sorted(ROLE_DESCRIPTIONS),
        help=f"Role to assign (default: {DEFAULT_ROLE}).",
    )
    parser.add_argument(
        "--password",
        default=None,
        help="Password for the account; prompted for when omitted.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    password = args.password or getpass.getpass("Password: ")

    init_db()
    db = SessionLocal()
    try:
        seed_roles(db)
        try:
            user = create_user(
                db,
                username=args.username,
                password=password,
                first_name=args.first_name,
                last_name=args.last_name,
                email=args.email,
                role=args.role,
            )
        except HTTPException as exc:
            db.rollback()
            print(f"Could not create user: {exc.detail}")
            return 1
        print(f"Created user {user.username} ({user.id}) with role {args.role}")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
