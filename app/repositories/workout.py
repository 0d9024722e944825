from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.guild import Workout


class WorkoutRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def total_xp_for_user(self, user_id: int) -> int:
        """Sum of XP over every workout of the user; 0 when there are none."""
        stmt = select(func.coalesce(func.sum(Workout.xp), 0)).where(Workout.user_id == user_id)
        return int(await self.session.scalar(stmt) or 0)

    async def create(self, user_id: int, xp: int) -> Workout:
        workout = Workout(user_id=user_id, xp=xp)
        self.session.add(workout)
        await self.session.flush()
        return workout
