from collections.abc import Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.utils import apply_dict_updates
from app.models.definitions import User


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: int) -> User | None:
        """Retrieves a User by their primary ID."""
        return await self.session.get(User, user_id)

    async def get_by_username(self, username: str) -> User | None:
        """Retrieves a User by their unique username (login ID)."""
        stmt = select(User).where(User.username == username)
        return (await self.session.scalars(stmt)).one_or_none()

    async def username_exists(self, username: str) -> bool:
        stmt = select(User.id).where(User.username == username).limit(1)
        return (await self.session.scalar(stmt)) is not None

    async def get_all(self) -> Sequence[User]:
        stmt = select(User).order_by(User.id)
        return (await self.session.scalars(stmt)).all()

    async def get_by_guild(self, guild_id: int) -> Sequence[User]:
        """All users whose current guild is `guild_id`."""
        stmt = select(User).where(User.guild_id == guild_id).order_by(User.id)
        return (await self.session.scalars(stmt)).all()

    async def get_ranking(self) -> Sequence[User]:
        """All users by total_xp, highest first; equal scores keep id order."""
        stmt = select(User).order_by(User.total_xp.desc(), User.id)
        return (await self.session.scalars(stmt)).all()

    async def create(self, create_data: dict[str, Any]) -> User:
        """Adds a new User to the session; the ID is assigned when the caller commits."""
        sensitive_fields = {"id", "created_at", "updated_at"}
        user = User()
        apply_dict_updates(user, create_data, sensitive_fields)
        self.session.add(user)
        return user

    async def update(self, user: User, update_data: dict[str, Any]) -> User:
        """
        Applies the supplied profile fields to an already loaded user, relying on ORM
        change tracking. Credential columns are never written through this path.
        """
        sensitive_fields = {"id", "password_hash", "password_salt", "total_xp", "created_at", "updated_at"}
        apply_dict_updates(entity=user, update_data=update_data, excluded_attrs=sensitive_fields)
        return user

    async def update_password(self, user: User, new_hash: bytes, new_salt: bytes) -> None:
        user.password_hash = new_hash
        user.password_salt = new_salt

    async def delete(self, user: User) -> None:
        await self.session.delete(user)
