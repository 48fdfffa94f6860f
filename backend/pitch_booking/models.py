from __future__ import annotations

import uuid
from datetime import date, datetime
from enum import StrEnum
from typing import Optional

from sqlalchemy import JSON, CheckConstraint, Enum, Index, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql.sqltypes import Date, DateTime, Integer, String, Text


class Base(DeclarativeBase):
    pass


class BookingStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"


class PitchType(StrEnum):
    SINGLE_COURT = "single_court"
    FULL_PITCH = "full_pitch"


class BookingFrequency(StrEnum):
    ONE_OFF = "one_off"
    WEEKLY = "weekly"
    FORTNIGHTLY = "fortnightly"
    MONTHLY = "monthly"


def _new_id() -> str:
    return str(uuid.uuid4())


def _str_enum(enum_cls: type[StrEnum]) -> Enum:
    return Enum(
        enum_cls,
        values_callable=lambda cls: [e.value for e in cls],
        native_enum=False,
    )


class BookingRequest(Base):
    __tablename__ = "booking_requests"
    __table_args__ = (
        CheckConstraint("estimated_attendees >= 1", name="chk_booking_attendees"),
        CheckConstraint("age >= 16", name="chk_booking_age"),
        Index("idx_booking_date_status", "booking_date", "status"),
        Index("idx_booking_created", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    estimated_attendees: Mapped[int] = mapped_column(Integer, nullable=False)
    pitch_type: Mapped[PitchType] = mapped_column(_str_enum(PitchType), nullable=False)
    booking_date: Mapped[date] = mapped_column(Date, nullable=False)
    time_slots: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    frequency: Mapped[BookingFrequency] = mapped_column(
        _str_enum(BookingFrequency),
        nullable=False,
        default=BookingFrequency.ONE_OFF,
    )
    status: Mapped[BookingStatus] = mapped_column(
        _str_enum(BookingStatus),
        nullable=False,
        default=BookingStatus.PENDING,
    )
    admin_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)


class Admin(Base):
    __tablename__ = "admins"
    __table_args__ = (UniqueConstraint("username", name="uq_admins_username"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
