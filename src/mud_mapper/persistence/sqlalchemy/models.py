from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class Zone(TimestampMixin, Base):
    __tablename__ = "zones"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    name_normalized: Mapped[str] = mapped_column(String(128), nullable=False)
    alias: Mapped[str | None] = mapped_column(String(128), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (
        UniqueConstraint("name_normalized", name="uq_zones_name_normalized"),
    )


class Room(TimestampMixin, Base):
    __tablename__ = "rooms"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    room_key: Mapped[str] = mapped_column(String(160), nullable=False)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    zone_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("zones.id"), nullable=True)
    zone_exit: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    visit_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    npcs_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    items_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    exits_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")

    __table_args__ = (
        UniqueConstraint("room_key", name="uq_rooms_room_key"),
    )


Index("ix_rooms_zone_id", Room.zone_id)


class RoomExit(TimestampMixin, Base):
    __tablename__ = "room_exits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    from_room_id: Mapped[int] = mapped_column(Integer, ForeignKey("rooms.id"), nullable=False)
    to_room_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("rooms.id"), nullable=True)
    direction: Mapped[str] = mapped_column(String(16), nullable=False)

    is_door: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    door_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    is_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_zone_exit: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    look_description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("from_room_id", "direction", name="uq_room_exits_from_direction"),
    )


Index("ix_room_exits_to_room_id", RoomExit.to_room_id)
