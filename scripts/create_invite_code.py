"""Create an invite code.

Usage:
    uv run python -m scripts.create_invite_code [code] [--description TEXT]
        [--expires-in-days N] [--created-by EMAIL]

If code is omitted a random 12-character code is generated. Prints the code.
"""

import argparse
import asyncio
import secrets
import sys
from datetime import timedelta

from tokengate.application.dtos.invite_code import InviteCodeCreate
from tokengate.domain.exceptions import ConstraintViolationException, TokenGateException
from tokengate.infrastructure.supabase import close_supabase, get_supabase_client, init_supabase
from tokengate.infrastructure.supabase.repositories import SupabaseCredentialStore
from tokengate.shared.utils.datetime import utc_now
from tokengate.shared.utils.sanitization import validate_invite_code

_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


def generate_invite_code(length: int = 12) -> str:
    """Random code without look-alike characters (0/O, 1/I)."""
    return "".join(secrets.choice(_CODE_ALPHABET) for _ in range(length))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create an invite code")
    parser.add_argument("code", nargs="?", help="literal code (default: random)")
    parser.add_argument("--description", default=None)
    parser.add_argument("--expires-in-days", type=int, default=None)
    parser.add_argument("--created-by", default="script")
    args = parser.parse_args(argv)
    if args.expires_in_days is not None and args.expires_in_days <= 0:
        parser.error("--expires-in-days must be positive")
    try:
        args.code = validate_invite_code(args.code) if args.code else generate_invite_code()
    except ValueError as exc:
        parser.error(str(exc))
    return args


async def create_invite_code(args: argparse.Namespace) -> str:
    if not init_supabase():
        raise SystemExit("Supabase client could not be initialized; check SUPABASE_URL")
    try:
        store = SupabaseCredentialStore(get_supabase_client())
        expires_at = (
            utc_now() + timedelta(days=args.expires_in_days) if args.expires_in_days else None
        )
        invite = await store.insert_invite_code(
            InviteCodeCreate(
                code=args.code,
                created_by=args.created_by,
                expires_at=expires_at,
                description=args.description,
            )
        )
        return invite.code
    finally:
        await close_supabase()


def main() -> None:
    args = parse_args()
    try:
        code = asyncio.run(create_invite_code(args))
    except ConstraintViolationException:
        print(f"Invite code {args.code!r} already exists", file=sys.stderr)
        sys.exit(1)
    except TokenGateException as exc:
        print(f"Creating invite code failed: {exc}", file=sys.stderr)
        sys.exit(1)
    print(code)


if __name__ == "__main__":
    main()
