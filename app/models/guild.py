from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin
from .definitions import User


class Guild(Base, TimestampMixin):
    """
    The Guild table.

    `total_xp` is a cached aggregate: the sum of the XP of every workout of every
    current member, as of the last recomputation. Nothing updates it implicitly when
    workouts or memberships change.
    """

    __tablename__ = "guilds"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, comment="Unique Guild ID.")
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    total_xp: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, comment="Cached sum of member workout XP."
    )


class Workout(Base, TimestampMixin):
    """A single recorded activity and the XP it earned."""

    __tablename__ = "workouts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey(User.id, ondelete="CASCADE"), nullable=False, index=True)
    xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
