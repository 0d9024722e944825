"""
Maintenance commands.

    guild-accounts init-db
    guild-accounts recompute-guilds [GUILD_ID ...]

`recompute-guilds` without ids refreshes every guild, e.g. before publishing a
leaderboard.
"""

import argparse
import asyncio
import logging
import sys

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import get_settings
from app.core.logging import configure_logging
from app.exceptions.http import AppError
from app.models import Guild
from app.repositories import GuildRepository, UserRepository, WorkoutRepository
from app.schemas import GuildResponse
from app.services import GuildService

logger = logging.getLogger(__name__)


async def recompute_guilds(
    session_factory: async_sessionmaker[AsyncSession], guild_ids: list[int] | None = None
) -> list[GuildResponse]:
    """Recomputes the cached XP total of the given guilds (all guilds when empty)."""
    async with session_factory() as session:
        if not guild_ids:
            guild_ids = list((await session.scalars(select(Guild.id).order_by(Guild.id))).all())

        service = GuildService(session, GuildRepository(session), UserRepository(session), WorkoutRepository(session))
        return [await service.update_guild_with_total_xp(guild_id) for guild_id in guild_ids]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="guild-accounts", description="Guild accounts maintenance")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create all tables")

    recompute = subparsers.add_parser("recompute-guilds", help="Recompute cached guild XP totals")
    recompute.add_argument("guild_ids", nargs="*", type=int, help="Guild ids (default: all guilds)")

    return parser


async def _run(args: argparse.Namespace) -> None:
    # Imported here so the engine is only built for commands that need it
    from app.db.session import SessionLocal, engine, init_db

    try:
        if args.command == "init-db":
            await init_db(engine)
        elif args.command == "recompute-guilds":
            for guild in await recompute_guilds(SessionLocal, args.guild_ids):
                print(f"{guild.id}\t{guild.name}\t{guild.total_xp}")
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(get_settings().log_level)
    try:
        asyncio.run(_run(args))
    except AppError as exc:
        logger.error("%s failed: %s", args.command, exc.message)
        sys.exit(1)


if __name__ == "__main__":
    main()
