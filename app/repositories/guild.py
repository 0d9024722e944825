from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.guild import Guild


class GuildRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, guild_id: int) -> Guild | None:
        return await self.session.get(Guild, guild_id)

    async def get_by_name(self, name: str) -> Guild | None:
        stmt = select(Guild).where(func.lower(Guild.name) == name.lower())
        return (await self.session.scalars(stmt)).one_or_none()

    async def get_leaderboard(self) -> Sequence[Guild]:
        """Guilds by their cached total_xp, highest first."""
        stmt = select(Guild).order_by(Guild.total_xp.desc(), Guild.id)
        return (await self.session.scalars(stmt)).all()

    async def create(self, name: str) -> Guild:
        guild = Guild(name=name, total_xp=0)
        self.session.add(guild)
        await self.session.flush()
        return guild

    async def set_total_xp(self, guild: Guild, total_xp: int) -> Guild:
        """Overwrites the cached aggregate; the caller commits."""
        guild.total_xp = total_xp
        await self.session.flush()
        return guild
