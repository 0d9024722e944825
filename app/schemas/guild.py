from datetime import datetime

from pydantic import BaseModel, Field


class GuildRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Unique guild name")


class WorkoutRequest(BaseModel):
    user_id: int = Field(..., description="Owner of the workout")
    xp: int = Field(..., ge=0, description="XP earned by the workout")


class GuildResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    total_xp: int = Field(..., description="Cached member XP total as of the last recomputation")
    updated_at: datetime


class WorkoutResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    user_id: int
    xp: int
    created_at: datetime
