"""Framework-wide configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from botframe.command import Command
from botframe.prefix import PrefixFrameworkOptions

logger = logging.getLogger(__name__)


@dataclass
class AllowedMentions:
    """Which mentions in outgoing messages may actually ping."""

    parse: list[str] = field(default_factory=list)
    users: list[int] = field(default_factory=list)
    roles: list[int] = field(default_factory=list)
    replied_user: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form of these settings."""
        data: dict[str, Any] = {"parse": list(self.parse)}
        if self.users:
            data["users"] = list(self.users)
        if self.roles:
            data["roles"] = list(self.roles)
        if self.replied_user is not None:
            data["replied_user"] = self.replied_user
        return data


async def default_on_error(error: Any) -> None:
    """Report an error that no command-specific handler dealt with."""
    cause = error if isinstance(error, BaseException) else None
    logger.error("Unhandled framework error: %s", error, exc_info=cause)


async def _noop_hook(ctx: Any) -> None:
    return None


async def _noop_event_handler(
    serenity_context: Any, event: Any, framework: Any, data: Any
) -> None:
    return None


def _users_only() -> AllowedMentions:
    return AllowedMentions(parse=["users"])


@dataclass
class FrameworkOptions:
    """Configuration of the whole framework."""

    commands: list[Command] = field(default_factory=list)
    on_error: Callable[[Any], Awaitable[None]] = default_on_error
    pre_command: Callable[[Any], Awaitable[None]] = _noop_hook
    post_command: Callable[[Any], Awaitable[None]] = _noop_hook
    command_check: Callable[[Any], Awaitable[bool]] | None = None
    skip_checks_for_owners: bool = False
    allowed_mentions: AllowedMentions | None = field(default_factory=_users_only)
    reply_callback: Callable[[Any, Any], None] | None = None
    manual_cooldowns: bool = False
    require_cache_for_guild_check: bool = False
    event_handler: Callable[[Any, Any, Any, Any], Awaitable[None]] = _noop_event_handler
    prefix_options: PrefixFrameworkOptions = field(default_factory=PrefixFrameworkOptions)
    owners: set[int] = field(default_factory=set)

    def add_command(self, command: Command) -> None:
        """Register another command with the framework."""
        self.commands.append(command)