"""
Command-line interface for what2play.

Provides commands to look up users and list the multiplayer
games a group of friends has in common.
"""

import asyncio
import json
import sys
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from what2play.config import get_settings
from what2play.logger import get_logger, setup_logging

logger = get_logger(__name__, component="cli")


class CLIOutput(BaseModel):
    """Structured output for CLI commands."""

    success: bool
    command: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    data: dict[str, Any] | list[Any] | None = None
    error: str | None = None


def print_json(output: CLIOutput) -> None:
    """Print output as formatted JSON."""
    print(json.dumps(output.model_dump(), indent=2, default=str))


async def cmd_show_config() -> None:
    """Show the effective configuration, secrets excluded."""
    settings = get_settings()

    output = CLIOutput(
        success=True,
        command="show-config",
        data={
            "environment": settings.environment,
            "steam_base_url": settings.steam.base_url,
            "steam_store_url": settings.steam.store_url,
            "steam_requests_per_minute": settings.steam.requests_per_minute,
            "database_url": settings.database.url,
            "category_concurrency": settings.fetch.category_concurrency,
            "page_size": settings.fetch.page_size,
            "api_key_configured": bool(settings.steam.api_key.get_secret_value()),
        },
    )
    print_json(output)


async def cmd_lookup_user(identifier: str) -> None:
    """Find a user by Steam ID or vanity name."""
    from what2play.app import Application

    logger.info("Looking up user", identifier=identifier)

    async with await Application.create() as app:
        user = await app.games.lookup_user(identifier)

    output = CLIOutput(
        success=user is not None,
        command="lookup-user",
        data=asdict(user) if user else None,
        error=None if user else "Not found",
    )
    print_json(output)


async def cmd_friends(steam_id: str) -> None:
    """List a user's friends."""
    from what2play.app import Application

    async with await Application.create() as app:
        overview = await app.games.friends_overview(steam_id)

    output = CLIOutput(success=True, command="friends", data=asdict(overview))
    print_json(output)


async def cmd_games(steam_id: str, companions_str: str, page: int = 0) -> None:
    """
    List multiplayer games in common.

    Args:
        steam_id: User the list is built for
        companions_str: Comma-separated companion Steam IDs
        page: Zero-based page number
    """
    from what2play.app import Application

    companion_ids = [x.strip() for x in companions_str.split(",") if x.strip()]

    async with await Application.create() as app:
        games_page = await app.games.games_page(steam_id, companion_ids, page)

    output = CLIOutput(success=True, command="games", data=asdict(games_page))
    print_json(output)


def print_usage() -> None:
    """Print CLI usage information."""
    usage = """
what2play CLI
=============

Usage: what2play <command> [arguments]

Commands:
  show-config                          Show effective configuration
  lookup-user <identifier>             Find a user by Steam ID or vanity name
  friends <steam_id>                   List a user's friends
  games <steam_id> <companion_ids>     List multiplayer games in common

Options:
  --page <n>                           Page of the games list (default 0)

Examples:
  what2play games 76561197960287930 76561197960265728,76561197960265729 --page 1
"""
    print(usage)


def main() -> None:
    """Main CLI entry point."""
    setup_logging()

    if len(sys.argv) < 2:
        print_usage()
        sys.exit(1)

    command = sys.argv[1]

    try:
        if command == "show-config":
            asyncio.run(cmd_show_config())

        elif command == "lookup-user":
            if len(sys.argv) < 3:
                print("Error: identifier required")
                sys.exit(1)
            asyncio.run(cmd_lookup_user(sys.argv[2]))

        elif command == "friends":
            if len(sys.argv) < 3:
                print("Error: steam_id required")
                sys.exit(1)
            asyncio.run(cmd_friends(sys.argv[2]))

        elif command == "games":
            if len(sys.argv) < 4:
                print("Error: steam_id and companion_ids required")
                sys.exit(1)

            page = 0
            if "--page" in sys.argv:
                idx = sys.argv.index("--page")
                if idx + 1 < len(sys.argv):
                    page = int(sys.argv[idx + 1])

            asyncio.run(cmd_games(sys.argv[2], sys.argv[3], page))

        elif command in ("help", "--help", "-h"):
            print_usage()

        else:
            print(f"Unknown command: {command}")
            print_usage()
            sys.exit(1)

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception("CLI error", error=str(e))
        output = CLIOutput(
            success=False,
            command=command,
            error=str(e),
        )
        print_json(output)
        sys.exit(1)


if __name__ == "__main__":
    main()
