from .guild import GuildService
from .user import UserService

__all__ = ["GuildService", "UserService"]
