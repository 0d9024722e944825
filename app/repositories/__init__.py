from .guild import GuildRepository
from .user import UserRepository
from .workout import WorkoutRepository

__all__ = ["GuildRepository", "UserRepository", "WorkoutRepository"]
