"""Create an administrator: a confirmed auth user plus an admins row.

Usage:
    uv run python -m scripts.setup_admin <email> <password>

Requires SUPABASE_URL, SUPABASE_ANON_KEY and SUPABASE_SERVICE_KEY (the
auth admin API only accepts the service key). An existing auth user with
the same email is kept and only granted admin.
"""

import asyncio
import sys

from tokengate.core.config import get_settings
from tokengate.domain.exceptions import ConstraintViolationException, TokenGateException
from tokengate.infrastructure.supabase import (
    close_supabase,
    get_auth_client,
    get_supabase_client,
    init_supabase,
)
from tokengate.infrastructure.supabase.repositories import SupabaseCredentialStore
from tokengate.shared.utils.sanitization import normalize_email


async def setup_admin(email: str, password: str) -> None:
    email = normalize_email(email)
    if not init_supabase():
        raise SystemExit("Supabase client could not be initialized; check SUPABASE_URL")
    try:
        auth = get_auth_client()
        store = SupabaseCredentialStore(get_supabase_client())
        try:
            user = await auth.create_user(email, password, email_confirm=True)
            print(f"Created auth user {user.user_id} ({email})")
        except ConstraintViolationException:
            print(f"Auth user {email} already exists; granting admin only")
        if await store.is_admin(email):
            print(f"{email} is already an admin")
            return
        await store.insert_admin(email)
        print(f"Granted admin to {email}")
    finally:
        await close_supabase()


def main() -> None:
    if len(sys.argv) != 3:
        print("Usage: uv run python -m scripts.setup_admin <email> <password>", file=sys.stderr)
        sys.exit(1)
    settings = get_settings()
    if not settings.supabase_service_key:
        print("SUPABASE_SERVICE_KEY is required to create users", file=sys.stderr)
        sys.exit(1)
    try:
        asyncio.run(setup_admin(sys.argv[1], sys.argv[2]))
    except TokenGateException as exc:
        print(f"Admin setup failed: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
