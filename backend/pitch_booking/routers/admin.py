import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..deps import get_current_admin_id, get_session
from ..infrastructure.repositories import SqlAlchemyAdminRepository
from ..schemas import AdminLogin, AdminMeRead, AdminTokenRead
from ..usecases import admins as admin_usecase
from ..utils.auth import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/login", response_model=AdminTokenRead)
async def login(
    payload: AdminLogin,
    session: AsyncSession = Depends(get_session),
) -> AdminTokenRead:
    admin_repo = SqlAlchemyAdminRepository(session)
    admin = await admin_usecase.authenticate_admin(admin_repo, username=payload.username, password=payload.password)
    if admin is None:
        logger.info("failed admin login for %r", payload.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    settings = get_settings()
    ttl = timedelta(minutes=settings.admin_token_ttl_minutes)
    token = create_access_token(
        admin_id=admin.id,
        secret=settings.auth_secret,
        algorithm=settings.auth_algorithm,
        expires_delta=ttl,
    )
    return AdminTokenRead(
        access_token=token,
        expires_in=int(ttl.total_seconds()),
        admin_id=admin.id,
        username=admin.username,
    )


@router.get("/me", response_model=AdminMeRead)
async def me(admin_id: str = Depends(get_current_admin_id)) -> AdminMeRead:
    return AdminMeRead(admin_id=admin_id)
