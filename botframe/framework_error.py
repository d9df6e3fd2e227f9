"""Errors raised while the bot runs, by user code or by the framework itself."""

from __future__ import annotations

import json
from abc import ABCMeta, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from botframe.prefix import MessageDispatchTrigger


def _debug_str(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _format_duration(duration: timedelta | float) -> str:
    seconds = (
        duration.total_seconds() if isinstance(duration, timedelta) else float(duration)
    )
    return f"{seconds:g}s"


def _full_command_name(context: Any) -> str:
    return f"{context.prefix()}{context.command().qualified_name}"


def _event_name(event: Any) -> str:
    name = getattr(event, "name", None)
    if callable(name):
        name = name()
    return str(name) if name is not None else type(event).__name__


class FrameworkError(Exception, metaclass=ABCMeta):
    """Any error that can occur while the bot runs.

    Errors thrown by user code keep it in an ``error`` field, which is also
    the exception's ``__cause__``.
    """

    @abstractmethod
    def serenity_context(self) -> Any:
        """Return the chat client context this error happened in."""

    def ctx(self) -> Any:
        """Return the command context of this error, or None if it has none."""
        return None

    def _chain(self, error: Any) -> None:
        if isinstance(error, BaseException):
            self.__cause__ = error

    async def handle(self, framework_options: Any) -> None:
        """Pass this error to the command's ``on_error`` or else the global one."""
        context = self.ctx()
        on_error = None
        if context is not None:
            on_error = getattr(context.command(), "on_error", None)
        if on_error is None:
            on_error = framework_options.on_error
        await on_error(self)


@dataclass(eq=False, kw_only=True)
class _CommandContextError(FrameworkError):
    """An error that carries a full command context."""

    context: Any

    def serenity_context(self) -> Any:
        return self.context.serenity_context()

    def ctx(self) -> Any:
        return self.context


@dataclass(eq=False, kw_only=True)
class SetupError(FrameworkError):
    """User code failed while setting up the user data."""

    error: Any
    framework: Any = None
    data_about_bot: Any = None
    serenity_ctx: Any = None

    def __post_init__(self) -> None:
        self._chain(self.error)

    def serenity_context(self) -> Any:
        return self.serenity_ctx

    def __str__(self) -> str:
        return "framework setup error"


@dataclass(eq=False, kw_only=True)
class EventHandlerError(FrameworkError):
    """User code failed in the generic event handler."""

    error: Any
    event: Any
    serenity_ctx: Any = None
    framework: Any = None

    def __post_init__(self) -> None:
        self._chain(self.error)

    def serenity_context(self) -> Any:
        return self.serenity_ctx

    def __str__(self) -> str:
        return f"error in {_event_name(self.event)} event event handler"


@dataclass(eq=False, kw_only=True)
class CommandError(_CommandContextError):
    """User code failed while executing a command."""

    error: Any

    def __post_init__(self) -> None:
        self._chain(self.error)

    def __str__(self) -> str:
        return f"error in command `{_full_command_name(self.context)}`"


@dataclass(eq=False, kw_only=True)
class ArgumentParseError(_CommandContextError):
    """A command argument could not be parsed from the message or interaction."""

    error: Any
    input: str | None = None

    def __post_init__(self) -> None:
        self._chain(self.error)

    def __str__(self) -> str:
        shown = "None" if self.input is None else _debug_str(self.input)
        return (
            f"failed to parse argument in command "
            f"`{_full_command_name(self.context)}` on input {shown}"
        )


@dataclass(eq=False, kw_only=True)
class CommandStructureMismatchError(FrameworkError):
    """The received application command had an unexpected argument structure.

    ``context`` is the application context of the invocation.
    """

    description: str
    context: Any

    def serenity_context(self) -> Any:
        return self.context.serenity_context

    def ctx(self) -> Any:
        from botframe.context import Context

        return Context.application(self.context)

    def __str__(self) -> str:
        name = f"/{self.context.command.qualified_name}"
        return (
            f"unexpected application command structure in command `{name}`: "
            f"{self.description}"
        )


@dataclass(eq=False, kw_only=True)
class CooldownHit(_CommandContextError):
    """A command was invoked before its cooldown expired."""

    remaining_cooldown: timedelta | float

    def __str__(self) -> str:
        return (
            f"cooldown hit in command `{_full_command_name(self.context)}` "
            f"({_format_duration(self.remaining_cooldown)} remaining)"
        )


@dataclass(eq=False, kw_only=True)
class MissingBotPermissions(_CommandContextError):
    """The bot lacks permissions the command requires."""

    missing_permissions: Any

    def __str__(self) -> str:
        return (
            f"bot is missing permisions ({self.missing_permissions}) to execute "
            f"command `{_full_command_name(self.context)}`"
        )


@dataclass(eq=False, kw_only=True)
class MissingUserPermissions(_CommandContextError):
    """The user lacks, or may lack, permissions the command requires.

    ``missing_permissions`` is None if the user's permissions could not be fetched.
    """

    missing_permissions: Any = None

    def __str__(self) -> str:
        return (
            f"user is or may be missing permisions ({self.missing_permissions}) to "
            f"execute command `{_full_command_name(self.context)}`"
        )


@dataclass(eq=False, kw_only=True)
class NotAnOwner(_CommandContextError):
    """A non-owner invoked an owners-only command."""

    def __str__(self) -> str:
        return (
            f"owner-only command `{_full_command_name(self.context)}` "
            "cannot be run by non-owners"
        )


@dataclass(eq=False, kw_only=True)
class GuildOnly(_CommandContextError):
    """A guild-only command was invoked in a DM."""

    def __str__(self) -> str:
        return f"guild-only command `{_full_command_name(self.context)}` cannot run in DMs"


@dataclass(eq=False, kw_only=True)
class DmOnly(_CommandContextError):
    """A DM-only command was invoked in a guild."""

    def __str__(self) -> str:
        return f"DM-only command `{_full_command_name(self.context)}` cannot run in guilds"


@dataclass(eq=False, kw_only=True)
class NsfwOnly(_CommandContextError):
    """An NSFW-only command was invoked in a non-NSFW channel."""

    def __str__(self) -> str:
        return (
            f"nsfw-only command `{_full_command_name(self.context)}` "
            "cannot run in non-nsfw channels"
        )


@dataclass(eq=False, kw_only=True)
class CommandCheckFailed(_CommandContextError):
    """A pre-command check errored, or denied access when ``error`` is None."""

    error: Any = None

    def __post_init__(self) -> None:
        self._chain(self.error)

    def __str__(self) -> str:
        return (
            f"pre-command check for command `{_full_command_name(self.context)}` "
            "either denied access or errored"
        )


@dataclass(eq=False, kw_only=True)
class DynamicPrefixError(FrameworkError):
    """A dynamic prefix callback failed; ``context`` is a partial context."""

    error: Any
    context: Any
    msg: Any

    def __post_init__(self) -> None:
        self._chain(self.error)

    def serenity_context(self) -> Any:
        return self.context.serenity_context

    def __str__(self) -> str:
        return (
            "dynamic prefix callback errored on message "
            f"{_debug_str(self.msg.content)}"
        )


@dataclass(eq=False, kw_only=True)
class UnknownCommand(FrameworkError):
    """A message had a valid prefix but named no known command."""

    msg: Any
    prefix: str
    msg_content: str
    serenity_ctx: Any = None
    framework: Any = None
    invocation_data: Any = None
    trigger: MessageDispatchTrigger = MessageDispatchTrigger.MESSAGE_CREATE

    def serenity_context(self) -> Any:
        return self.serenity_ctx

    def __str__(self) -> str:
        return f"unknown command `{self.msg_content}`"


@dataclass(eq=False, kw_only=True)
class UnknownInteraction(FrameworkError):
    """An interaction named a command the framework does not know."""

    interaction: Any
    serenity_ctx: Any = None
    framework: Any = None

    def serenity_context(self) -> Any:
        return self.serenity_ctx

    def __str__(self) -> str:
        return f"unknown interaction `{self.interaction.name}`"