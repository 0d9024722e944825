import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security.password import check_password, hash_password
from app.db.utils import commit_or_raise
from app.exceptions.http import MalformedCredentialError, NotFoundError, ValidationError
from app.repositories import GuildRepository, UserRepository
from app.schemas import LoginRequest, PasswordChangeRequest, UserRequest, UserResponse, UserUpdateRequest

logger = logging.getLogger(__name__)


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


class UserService:
    def __init__(self, session: AsyncSession, user_repo: UserRepository, guild_repo: GuildRepository):
        self._session = session
        self._user_repo = user_repo
        self._guild_repo = guild_repo

    # --- 1. USER REGISTRATION ---

    async def create(self, data: UserRequest) -> UserResponse:
        """
        Registers a new user: validates the password and username, derives the
        credential and persists the row.
        """

        if _is_blank(data.password):
            raise ValidationError("Password is required.")

        if _is_blank(data.username):
            raise ValidationError("Username cannot be empty.")

        if await self._user_repo.username_exists(data.username):
            logger.warning("Registration rejected, username %r already taken", data.username)
            raise ValidationError(f'Username "{data.username}" is already taken.')

        if data.guild_id is not None:
            await self._require_guild(data.guild_id)

        credential = hash_password(data.password)

        new_user_data = data.model_dump(exclude={"password"})
        new_user_data["password_hash"] = credential.hash
        new_user_data["password_salt"] = credential.salt
        created_user = await self._user_repo.create(new_user_data)

        await commit_or_raise(self._session)
        logger.info("Created user id=%s username=%r", created_user.id, created_user.username)

        return UserResponse.model_validate(created_user)

    # --- 2. USER AUTHENTICATION ---

    async def authenticate(self, credentials: LoginRequest) -> UserResponse | None:
        """
        Authenticates a user by username and password.

        Unknown users and wrong passwords are expected outcomes and yield None.
        Corrupted stored credentials are a system fault and raise.
        """
        if _is_blank(credentials.username) or _is_blank(credentials.password):
            return None

        user_orm = await self._user_repo.get_by_username(credentials.username)
        if not user_orm:
            return None

        try:
            verified = check_password(credentials.password, user_orm.password_hash, user_orm.password_salt)
        except MalformedCredentialError:
            logger.error("Stored credential for user id=%s is malformed", user_orm.id)
            raise

        if not verified:
            return None

        return UserResponse.model_validate(user_orm)

    # --- 3. READS ---

    async def get_all(self) -> list[UserResponse]:
        return [UserResponse.model_validate(u) for u in await self._user_repo.get_all()]

    async def get_by_id(self, user_id: int) -> UserResponse | None:
        user_orm = await self._user_repo.get_by_id(user_id)
        return UserResponse.model_validate(user_orm) if user_orm else None

    async def get_users_from_guild(self, guild_id: int) -> list[UserResponse]:
        return [UserResponse.model_validate(u) for u in await self._user_repo.get_by_guild(guild_id)]

    async def get_ranking(self) -> list[UserResponse]:
        """All users ordered by their own total XP, highest first."""
        return [UserResponse.model_validate(u) for u in await self._user_repo.get_ranking()]

    async def get_user_guild_id(self, user_id: int) -> int | None:
        """
        Returns the user's current guild id, or None when the user has no guild.

        Raises:
            NotFoundError: no user with this id.
        """
        user_orm = await self._user_repo.get_by_id(user_id)
        if not user_orm:
            raise NotFoundError("User not found")
        return user_orm.guild_id

    # --- 4. PROFILE AND PASSWORD MANAGEMENT ---

    async def update(self, user_id: int, data: UserUpdateRequest) -> UserResponse:
        """
        Partially updates a user. Only the fields explicitly set on `data` are
        applied; explicitly sending None clears an optional field. A non-blank
        `password` replaces the credential.
        """
        user_orm = await self._user_repo.get_by_id(user_id)
        if not user_orm:
            raise NotFoundError("User not found")

        update_data = data.model_dump(exclude_unset=True)
        password = update_data.pop("password", None)

        if "username" in update_data:
            new_username = update_data["username"]
            if _is_blank(new_username):
                raise ValidationError("Username cannot be empty.")
            if new_username == user_orm.username:
                del update_data["username"]
            elif await self._user_repo.username_exists(new_username):
                logger.warning("Rename of user id=%s rejected, username %r already taken", user_id, new_username)
                raise ValidationError(f'Username "{new_username}" is already taken.')

        if update_data.get("guild_id") is not None:
            await self._require_guild(update_data["guild_id"])

        await self._user_repo.update(user_orm, update_data)

        if not _is_blank(password):
            credential = hash_password(password)
            await self._user_repo.update_password(user_orm, credential.hash, credential.salt)

        await commit_or_raise(self._session)
        await self._session.refresh(user_orm)

        return UserResponse.model_validate(user_orm)

    async def change_password(self, user_id: int, data: PasswordChangeRequest) -> bool:
        """
        Changes the user's password after verifying the old password.
        """
        user_orm = await self._user_repo.get_by_id(user_id)

        if not user_orm:
            return False

        if _is_blank(data.old_password):
            return False

        if not check_password(data.old_password, user_orm.password_hash, user_orm.password_salt):
            return False

        credential = hash_password(data.new_password)
        await self._user_repo.update_password(user_orm, credential.hash, credential.salt)
        await commit_or_raise(self._session)

        return True

    # --- 5. DELETION ---

    async def delete(self, user_id: int) -> None:
        """Removes the user if present. Deleting an unknown id is a no-op."""
        user_orm = await self._user_repo.get_by_id(user_id)
        if not user_orm:
            return

        await self._user_repo.delete(user_orm)
        await commit_or_raise(self._session)
        logger.info("Deleted user id=%s", user_id)

    async def _require_guild(self, guild_id: int) -> None:
        if not await self._guild_repo.get_by_id(guild_id):
            logger.warning("Guild id=%s referenced but not found", guild_id)
            raise NotFoundError("Guild not found")
