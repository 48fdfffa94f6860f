import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from .config import get_settings
from .database import async_session, create_tables
from .infrastructure.repositories import SqlAlchemyAdminRepository
from .routers import admin, availability, bookings
from .usecases import admins as admin_usecase
from .utils.request_id import request_id_middleware

__all__ = ["app", "request_id_middleware"]

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    await create_tables()
    async with async_session() as session:
        async with session.begin():
            await admin_usecase.ensure_default_admin(
                SqlAlchemyAdminRepository(session),
                username=settings.default_admin_username,
                password=settings.default_admin_password,
            )
    yield


app = FastAPI(title="Pitch Booking API", lifespan=lifespan)
app.middleware("http")(request_id_middleware)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(bookings.router)
app.include_router(bookings.admin_router)
app.include_router(availability.router)
app.include_router(admin.router)
