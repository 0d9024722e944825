from .base import Base
from .definitions import User
from .guild import Guild, Workout

__all__ = ["Base", "User", "Guild", "Workout"]
