import pytest

from app.exceptions import MalformedCredentialError, NotFoundError, ValidationError
from app.models import User
from app.schemas import GuildRequest, LoginRequest, PasswordChangeRequest, UserRequest, UserUpdateRequest
from app.services import GuildService, UserService


async def _register(user_service: UserService, username: str = "alice", password: str = "s3cret", **fields):
    return await user_service.create(UserRequest(username=username, password=password, **fields))


# --- Registration ---


async def test_create_user_persists_and_hides_credentials(user_service: UserService, session):
    created = await _register(user_service, email="alice@example.com", country="NL", city="Utrecht")

    assert created.id is not None
    assert created.username == "alice"
    assert created.email == "alice@example.com"
    assert not hasattr(created, "password_hash")

    stored = await session.get(User, created.id)
    assert len(stored.password_hash) == 64
    assert len(stored.password_salt) == 128


@pytest.mark.parametrize("password", [None, "", "   "])
async def test_create_user_requires_password(user_service: UserService, password):
    with pytest.raises(ValidationError, match="Password is required"):
        await user_service.create(UserRequest(username="bob", password=password))


@pytest.mark.parametrize("username", ["   ", "\t"])
async def test_create_user_rejects_blank_username(user_service: UserService, username):
    with pytest.raises(ValidationError, match="Username cannot be empty"):
        await user_service.create(UserRequest(username=username, password="pw"))

    assert await user_service.get_all() == []


async def test_create_user_rejects_duplicate_username(user_service: UserService):
    await _register(user_service, "alice")

    with pytest.raises(ValidationError, match="already taken"):
        await _register(user_service, "alice", "another")


async def test_create_user_with_unknown_guild_fails(user_service: UserService):
    with pytest.raises(NotFoundError):
        await _register(user_service, guild_id=999)


# --- Authentication ---


async def test_authenticate_success(user_service: UserService):
    created = await _register(user_service, "alice", "s3cret")

    result = await user_service.authenticate(LoginRequest(username="alice", password="s3cret"))

    assert result is not None
    assert result.id == created.id


async def test_authenticate_wrong_password_returns_none(user_service: UserService):
    await _register(user_service, "alice", "s3cret")

    assert await user_service.authenticate(LoginRequest(username="alice", password="wrong")) is None


async def test_authenticate_unknown_user_returns_none(user_service: UserService):
    assert await user_service.authenticate(LoginRequest(username="nobody", password="s3cret")) is None


@pytest.mark.parametrize("username,password", [("", "s3cret"), ("alice", ""), ("alice", "   ")])
async def test_authenticate_blank_arguments_return_none(user_service: UserService, username, password):
    await _register(user_service, "alice", "s3cret")

    assert await user_service.authenticate(LoginRequest(username=username, password=password)) is None


async def test_authenticate_malformed_stored_credential_raises(user_service: UserService, session):
    created = await _register(user_service, "alice", "s3cret")
    stored = await session.get(User, created.id)
    stored.password_salt = b"short"
    await session.commit()

    with pytest.raises(MalformedCredentialError):
        await user_service.authenticate(LoginRequest(username="alice", password="s3cret"))


# --- Updates ---


async def test_update_unknown_user_raises_not_found(user_service: UserService):
    with pytest.raises(NotFoundError):
        await user_service.update(42, UserUpdateRequest(email="x@example.com"))


async def test_update_only_email_leaves_other_fields(user_service: UserService):
    created = await _register(
        user_service, "alice", email="old@example.com", country="NL", city="Utrecht", description="runner"
    )

    updated = await user_service.update(created.id, UserUpdateRequest(email="new@example.com"))

    assert updated.email == "new@example.com"
    assert updated.username == "alice"
    assert updated.country == "NL"
    assert updated.city == "Utrecht"
    assert updated.description == "runner"


async def test_update_explicit_none_clears_field(user_service: UserService):
    created = await _register(user_service, "alice", city="Utrecht", country="NL")

    updated = await user_service.update(created.id, UserUpdateRequest(city=None))

    assert updated.city is None
    assert updated.country == "NL"


async def test_update_rename_to_taken_username_fails(user_service: UserService):
    await _register(user_service, "alice")
    bob = await _register(user_service, "bob")

    with pytest.raises(ValidationError, match="already taken"):
        await user_service.update(bob.id, UserUpdateRequest(username="alice"))


async def test_update_rename_to_same_username_is_allowed(user_service: UserService):
    alice = await _register(user_service, "alice")

    updated = await user_service.update(alice.id, UserUpdateRequest(username="alice", city="Delft"))

    assert updated.username == "alice"
    assert updated.city == "Delft"


@pytest.mark.parametrize("username", [None, "", "  "])
async def test_update_username_cannot_be_blanked(user_service: UserService, username):
    alice = await _register(user_service, "alice")

    with pytest.raises(ValidationError):
        await user_service.update(alice.id, UserUpdateRequest(username=username))


async def test_update_password_rederives_credential(user_service: UserService):
    alice = await _register(user_service, "alice", "old-pass")

    await user_service.update(alice.id, UserUpdateRequest(password="new-pass"))

    assert await user_service.authenticate(LoginRequest(username="alice", password="old-pass")) is None
    assert await user_service.authenticate(LoginRequest(username="alice", password="new-pass")) is not None


async def test_update_blank_password_keeps_credential(user_service: UserService):
    alice = await _register(user_service, "alice", "old-pass")

    await user_service.update(alice.id, UserUpdateRequest(password="  ", city="Delft"))

    assert await user_service.authenticate(LoginRequest(username="alice", password="old-pass")) is not None


async def test_update_guild_membership(user_service: UserService, guild_service: GuildService):
    guild = await guild_service.create_guild(GuildRequest(name="Iron Lifters"))
    alice = await _register(user_service, "alice")

    await user_service.update(alice.id, UserUpdateRequest(guild_id=guild.id))

    assert await user_service.get_user_guild_id(alice.id) == guild.id


async def test_update_to_unknown_guild_fails(user_service: UserService):
    alice = await _register(user_service, "alice")

    with pytest.raises(NotFoundError, match="Guild"):
        await user_service.update(alice.id, UserUpdateRequest(guild_id=123))


async def test_change_password(user_service: UserService):
    alice = await _register(user_service, "alice", "old-pass")

    assert await user_service.change_password(alice.id, PasswordChangeRequest(old_password="nope", new_password="x")) is False
    assert await user_service.change_password(999, PasswordChangeRequest(old_password="old-pass", new_password="x")) is False
    assert (
        await user_service.change_password(alice.id, PasswordChangeRequest(old_password="old-pass", new_password="new-pass"))
        is True
    )
    assert await user_service.authenticate(LoginRequest(username="alice", password="new-pass")) is not None


# --- Deletion and reads ---


async def test_delete_user(user_service: UserService):
    alice = await _register(user_service, "alice")

    await user_service.delete(alice.id)

    assert await user_service.get_by_id(alice.id) is None


async def test_delete_unknown_user_is_noop(user_service: UserService):
    await user_service.delete(12345)

    assert await user_service.get_all() == []


async def test_get_ranking_orders_by_total_xp_desc(user_service: UserService, session):
    for name, xp in [("five", 5), ("twenty", 20), ("one", 1)]:
        created = await _register(user_service, name)
        (await session.get(User, created.id)).total_xp = xp
    await session.commit()

    ranking = await user_service.get_ranking()

    assert [u.total_xp for u in ranking] == [20, 5, 1]
    assert [u.username for u in ranking] == ["twenty", "five", "one"]


async def test_get_users_from_guild(user_service: UserService, guild_service: GuildService):
    guild = await guild_service.create_guild(GuildRequest(name="Runners"))
    alice = await _register(user_service, "alice", guild_id=guild.id)
    await _register(user_service, "bob")

    members = await user_service.get_users_from_guild(guild.id)

    assert [m.id for m in members] == [alice.id]


async def test_get_user_guild_id(user_service: UserService):
    alice = await _register(user_service, "alice")

    assert await user_service.get_user_guild_id(alice.id) is None
    with pytest.raises(NotFoundError):
        await user_service.get_user_guild_id(999)
