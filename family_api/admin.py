"""CLI admin tool for schema setup and seeding.

Usage:
    python -m family_api.admin init-schema --variant=harmony
    python -m family_api.admin init-schema --variant=legacy
    python -m family_api.admin create-user --name="Ann Lee" --email=ann@example.com --password=secret
    python -m family_api.admin list-users
    python -m family_api.admin create-family --code=LEE2024 --user-name=Ann
    python -m family_api.admin list-families
"""

from __future__ import annotations

import argparse
import sys

import psycopg
from psycopg.rows import dict_row

from .config import VARIANTS, get_database_url, get_sslmode
from .passwords import hash_password
from .routes.legacy.families import ROLE_ADMIN
from .schema import ensure_schema


def _connect() -> psycopg.Connection:
    try:
        url = get_database_url()
    except RuntimeError as exc:
        raise SystemExit(str(exc)) from None
    return psycopg.connect(url, sslmode=get_sslmode(), row_factory=dict_row)


def cmd_init_schema(args: argparse.Namespace) -> None:
    with _connect() as conn:
        ensure_schema(conn, args.variant)
    print(f"Schema '{args.variant}' is up to date.")


def cmd_create_user(args: argparse.Namespace) -> None:
    pw_hash = hash_password(args.password)
    with _connect() as conn:
        try:
            row = conn.execute(
                """
                INSERT INTO "User" ("Name", "Email", "Password_Hash", "Role", "Status")
                VALUES (%s, %s, %s, %s, %s)
                RETURNING "UserID"
                """,
                (args.name, args.email, pw_hash, args.role, args.status),
            ).fetchone()
        except psycopg.errors.UniqueViolation:
            raise SystemExit(f"A user with email '{args.email}' already exists.") from None
        conn.commit()
    print(f"User '{args.email}' created (id={row['UserID']}).")


def cmd_list_users(args: argparse.Namespace) -> None:
    with _connect() as conn:
        rows = conn.execute(
            'SELECT "UserID", "Name", "Email", "Role", "Status" FROM "User" ORDER BY "UserID"'
        ).fetchall()
    if not rows:
        print("No users found.")
        return
    print(f"{'ID':>5}  {'Email':<32}  {'Role':<10}  {'Status':<10}  Name")
    print("-" * 80)
    for r in rows:
        print(f"{r['UserID']:>5}  {r['Email']:<32}  {r['Role']:<10}  {r['Status']:<10}  {r['Name']}")


def cmd_create_family(args: argparse.Namespace) -> None:
    with _connect() as conn:
        try:
            with conn.transaction():
                conn.execute("INSERT INTO families (family_code) VALUES (%s)", (args.code,))
                conn.execute(
                    "INSERT INTO family_members (family_code, name, role) VALUES (%s, %s, %s)",
                    (args.code, args.user_name, ROLE_ADMIN),
                )
        except psycopg.errors.UniqueViolation:
            raise SystemExit(f"Family code '{args.code}' is already taken.") from None
    print(f"Family '{args.code}' created with admin '{args.user_name}'.")


def cmd_list_families(args: argparse.Namespace) -> None:
    with _connect() as conn:
        rows = conn.execute(
            """
            SELECT f.family_code, f.created_at, COUNT(m.id) AS members
            FROM families f
            LEFT JOIN family_members m ON m.family_code = f.family_code
            GROUP BY f.family_code, f.created_at
            ORDER BY f.family_code
            """
        ).fetchall()
    if not rows:
        print("No families found.")
        return
    print(f"{'Code':<20}  {'Members':>7}  Created")
    print("-" * 60)
    for r in rows:
        print(f"{r['family_code']:<20}  {r['members']:>7}  {r['created_at']}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Family records admin tool")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init-schema", help="Create tables for a variant")
    p.add_argument("--variant", choices=VARIANTS, required=True)
    p.set_defaults(func=cmd_init_schema)

    p = sub.add_parser("create-user", help="Create a Harmony user")
    p.add_argument("--name", required=True)
    p.add_argument("--email", required=True)
    p.add_argument("--password", required=True)
    p.add_argument("--role", default="Member")
    p.add_argument("--status", default="Pending")
    p.set_defaults(func=cmd_create_user)

    p = sub.add_parser("list-users", help="List Harmony users")
    p.set_defaults(func=cmd_list_users)

    p = sub.add_parser("create-family", help="Create a Legacy family and its admin member")
    p.add_argument("--code", required=True)
    p.add_argument("--user-name", required=True)
    p.set_defaults(func=cmd_create_family)

    p = sub.add_parser("list-families", help="List Legacy families with member counts")
    p.set_defaults(func=cmd_list_families)

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main(sys.argv[1:])
