import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.utils import commit_or_raise
from app.exceptions.http import NotFoundError, ValidationError
from app.repositories import GuildRepository, UserRepository, WorkoutRepository
from app.schemas import GuildRequest, GuildResponse, WorkoutRequest, WorkoutResponse

logger = logging.getLogger(__name__)


class GuildService:
    """
    Guild records and the guild XP aggregate.

    A guild's `total_xp` is a cache. It is only rewritten by
    `update_guild_with_total_xp`, which callers invoke after changing membership or
    when a fresh leaderboard is needed; recording a workout does not touch it.
    """

    def __init__(
        self,
        session: AsyncSession,
        guild_repo: GuildRepository,
        user_repo: UserRepository,
        workout_repo: WorkoutRepository,
    ):
        self._session = session
        self._guild_repo = guild_repo
        self._user_repo = user_repo
        self._workout_repo = workout_repo

    # --- 1. AGGREGATE RECALCULATION ---

    async def compute_guild_xp_total(self, guild_id: int) -> int:
        """
        Sums the XP of every workout of every user currently in the guild.
        Always computed from scratch; 0 for a guild without members or workouts.
        """
        total = 0
        for member in await self._user_repo.get_by_guild(guild_id):
            total += await self._workout_repo.total_xp_for_user(member.id)
        return total

    async def update_guild_with_total_xp(self, guild_id: int | None) -> GuildResponse:
        """
        Recomputes and stores the guild's total XP.

        Raises:
            NotFoundError: guild_id is None or no such guild exists.
        """
        guild = await self._guild_repo.get_by_id(guild_id) if guild_id is not None else None
        if not guild:
            logger.warning("XP recomputation requested for unknown guild id=%s", guild_id)
            raise NotFoundError("Guild not found")

        total_xp = await self.compute_guild_xp_total(guild.id)
        previous = guild.total_xp
        await self._guild_repo.set_total_xp(guild, total_xp)
        await commit_or_raise(self._session)
        await self._session.refresh(guild)

        logger.info("Guild id=%s total_xp recomputed: %s -> %s", guild.id, previous, total_xp)
        return GuildResponse.model_validate(guild)

    # --- 2. GUILD RECORDS ---

    async def create_guild(self, data: GuildRequest) -> GuildResponse:
        if await self._guild_repo.get_by_name(data.name):
            raise ValidationError(f'Guild "{data.name}" already exists.')

        guild = await self._guild_repo.create(data.name)
        await commit_or_raise(self._session)
        logger.info("Created guild id=%s name=%r", guild.id, guild.name)
        return GuildResponse.model_validate(guild)

    async def get_by_id(self, guild_id: int) -> GuildResponse | None:
        guild = await self._guild_repo.get_by_id(guild_id)
        return GuildResponse.model_validate(guild) if guild else None

    async def get_leaderboard(self) -> list[GuildResponse]:
        """Guilds by their cached total XP. Stale until each guild is recomputed."""
        return [GuildResponse.model_validate(g) for g in await self._guild_repo.get_leaderboard()]

    # --- 3. WORKOUTS ---

    async def record_workout(self, data: WorkoutRequest) -> WorkoutResponse:
        if not await self._user_repo.get_by_id(data.user_id):
            raise NotFoundError("User not found")

        workout = await self._workout_repo.create(data.user_id, data.xp)
        await commit_or_raise(self._session)
        return WorkoutResponse.model_validate(workout)
