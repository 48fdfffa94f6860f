import asyncio
import logging
from functools import lru_cache

from ..domain.repositories import AdminRepository
from ..models import Admin
from ..utils.auth import hash_password, verify_password

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    # Compared against for unknown usernames so both paths cost one PBKDF2 run.
    return hash_password("unknown-admin-placeholder")


async def authenticate_admin(
    admin_repo: AdminRepository,
    *,
    username: str,
    password: str,
) -> Admin | None:
    admin = await admin_repo.get_by_username(username)
    if admin is None:
        await asyncio.to_thread(lambda: verify_password(password, _dummy_hash()))
        return None
    if not await asyncio.to_thread(verify_password, password, admin.password_hash):
        return None
    return admin


async def ensure_default_admin(
    admin_repo: AdminRepository,
    *,
    username: str,
    password: str | None,
) -> Admin | None:
    """Create the bootstrap admin account when it does not exist yet."""
    existing = await admin_repo.get_by_username(username)
    if existing is not None:
        return existing
    if not password:
        logger.warning("no admin %r and DEFAULT_ADMIN_PASSWORD unset; skipping bootstrap", username)
        return None
    password_hash = await asyncio.to_thread(hash_password, password)
    admin = await admin_repo.create(username=username, password_hash=password_hash)
    logger.info("default admin account %r created", username)
    return admin
