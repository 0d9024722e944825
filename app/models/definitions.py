from sqlalchemy import ForeignKey, Integer, LargeBinary, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.security import HASH_LENGTH, SALT_LENGTH

from .base import Base, TimestampMixin

# --- CORE IDENTITY ENTITY ---


class User(Base, TimestampMixin):
    """
    The User table.
    Username is the unique login identifier. Profile fields are free text and optional.

    `total_xp` is the user's own score, maintained outside of guild aggregation, and is
    the source of the per-user ranking.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, comment="Unique User ID.")

    username: Mapped[str] = mapped_column(
        String(50), nullable=False, unique=True, index=True, comment="Unique login name."
    )

    email: Mapped[str | None] = mapped_column(String(100), nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(30), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    password_hash: Mapped[bytes] = mapped_column(
        LargeBinary(HASH_LENGTH), nullable=False, comment="HMAC-SHA512 of the password."
    )
    password_salt: Mapped[bytes] = mapped_column(
        LargeBinary(SALT_LENGTH), nullable=False, comment="Random key used for password_hash."
    )

    guild_id: Mapped[int | None] = mapped_column(
        ForeignKey("guilds.id", ondelete="SET NULL"), nullable=True, index=True, comment="Guild the user currently belongs to."
    )

    total_xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
