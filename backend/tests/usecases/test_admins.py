import asyncio
import threading
import time
from datetime import datetime
from typing import Optional

import pytest
from pitch_booking.models import Admin
from pitch_booking.usecases import admins as uc
from pitch_booking.utils.auth import hash_password


class FakeAdminRepo:
    def __init__(self, admins: Optional[list[Admin]] = None) -> None:
        self.admins = list(admins or [])

    async def get_by_id(self, admin_id: str) -> Admin | None:  # pragma: no cover - unused here
        return next((a for a in self.admins if a.id == admin_id), None)

    async def get_by_username(self, username: str) -> Admin | None:
        return next((a for a in self.admins if a.username == username), None)

    async def create(self, *, username: str, password_hash: str) -> Admin:
        admin = Admin(id=f"adm-{len(self.admins) + 1}", username=username, password_hash=password_hash, created_at=datetime(2025, 1, 1))
        self.admins.append(admin)
        return admin


def _admin(password: str = "s3cret-pass") -> Admin:
    return Admin(id="adm-1", username="admin", password_hash=hash_password(password, iterations=1_000), created_at=datetime(2025, 1, 1))


@pytest.mark.asyncio
async def test_authenticate_accepts_correct_password() -> None:
    repo = FakeAdminRepo([_admin()])
    admin = await uc.authenticate_admin(repo, username="admin", password="s3cret-pass")
    assert admin is not None
    assert admin.id == "adm-1"


@pytest.mark.asyncio
async def test_authenticate_rejects_wrong_password() -> None:
    repo = FakeAdminRepo([_admin()])
    assert await uc.authenticate_admin(repo, username="admin", password="nope") is None


@pytest.mark.asyncio
async def test_authenticate_rejects_unknown_user() -> None:
    assert await uc.authenticate_admin(FakeAdminRepo(), username="ghost", password="x") is None


@pytest.mark.asyncio
async def test_authenticate_unknown_user_still_checks_a_hash(monkeypatch: pytest.MonkeyPatch) -> None:
    checked: list[tuple[str, str]] = []

    def fake_verify(password: str, password_hash: str) -> bool:
        checked.append((password, password_hash))
        return True

    monkeypatch.setattr(uc, "verify_password", fake_verify)
    monkeypatch.setattr(uc, "_dummy_hash", lambda: "pbkdf2_sha256$1000$salt$hash")

    assert await uc.authenticate_admin(FakeAdminRepo(), username="ghost", password="guess") is None
    assert checked == [("guess", "pbkdf2_sha256$1000$salt$hash")]


@pytest.mark.asyncio
async def test_authenticate_does_not_block_event_loop(monkeypatch: pytest.MonkeyPatch) -> None:
    def slow_verify(password: str, password_hash: str) -> bool:
        time.sleep(0.3)
        return True

    monkeypatch.setattr(uc, "verify_password", slow_verify)
    ticks: list[float] = []
    done = asyncio.Event()

    async def heartbeat() -> None:
        while not done.is_set():
            ticks.append(time.perf_counter())
            await asyncio.sleep(0.01)

    beat = asyncio.create_task(heartbeat())
    await asyncio.sleep(0)
    try:
        admin = await uc.authenticate_admin(FakeAdminRepo([_admin()]), username="admin", password="s3cret-pass")
    finally:
        done.set()
        await beat

    assert admin is not None
    gaps = [b - a for a, b in zip(ticks, ticks[1:])]
    assert len(ticks) > 5
    assert max(gaps) < 0.1


@pytest.mark.asyncio
async def test_ensure_default_admin_hashes_off_the_event_loop(monkeypatch: pytest.MonkeyPatch) -> None:
    loop_thread = threading.get_ident()
    hashed_on: list[int] = []

    def fake_hash(password: str) -> str:
        hashed_on.append(threading.get_ident())
        return hash_password(password, iterations=1_000)

    monkeypatch.setattr(uc, "hash_password", fake_hash)
    admin = await uc.ensure_default_admin(FakeAdminRepo(), username="admin", password="bootstrap-pw")

    assert admin is not None
    assert len(hashed_on) == 1
    assert hashed_on[0] != loop_thread


@pytest.mark.asyncio
async def test_ensure_default_admin_creates_once() -> None:
    repo = FakeAdminRepo()
    first = await uc.ensure_default_admin(repo, username="admin", password="bootstrap-pw")
    second = await uc.ensure_default_admin(repo, username="admin", password="other")
    assert first is not None
    assert second is first
    assert len(repo.admins) == 1
    assert await uc.authenticate_admin(repo, username="admin", password="bootstrap-pw") is first


@pytest.mark.asyncio
async def test_ensure_default_admin_skips_without_password() -> None:
    repo = FakeAdminRepo()
    assert await uc.ensure_default_admin(repo, username="admin", password=None) is None
    assert repo.admins == []
