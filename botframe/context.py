"""The command invocation context shared by prefix and application commands."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Mapping, Sequence, TypeVar, Union

from botframe.framework_error import CommandError, FrameworkError
from botframe.prefix import PrefixContext
from botframe.slash import ApplicationContext

T = TypeVar("T")

_EPOCH_MILLIS = 1420070400000
_U64_MASK = (1 << 64) - 1
_CHAT_INPUT = 1
_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _snowflake_time(snowflake: int) -> datetime:
    millis = (snowflake >> 22) + _EPOCH_MILLIS
    return _UNIX_EPOCH + timedelta(milliseconds=millis)


def _unix_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - _UNIX_EPOCH) // timedelta(milliseconds=1)


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return value
    return ""


def _option_fields(arg: Any) -> tuple[str, Any]:
    if isinstance(arg, Mapping):
        return arg["name"], arg.get("value")
    return arg.name, getattr(arg, "value", None)


Inner = Union[ApplicationContext, PrefixContext]


@dataclass(frozen=True)
class Context:
    """Either an application command context or a prefix command context."""

    inner: Inner

    @classmethod
    def application(cls, ctx: ApplicationContext) -> Context:
        """Wrap an application command context."""
        return cls(ctx)

    @classmethod
    def prefix_context(cls, ctx: PrefixContext) -> Context:
        """Wrap a prefix command context."""
        return cls(ctx)

    @property
    def is_application(self) -> bool:
        return isinstance(self.inner, ApplicationContext)

    @property
    def is_prefix(self) -> bool:
        return isinstance(self.inner, PrefixContext)

    async def defer(self) -> None:
        """Defer the response publicly; does nothing for prefix commands."""
        if isinstance(self.inner, ApplicationContext):
            await self.inner.defer_response(False)

    async def defer_ephemeral(self) -> None:
        """Defer the response ephemerally; does nothing for prefix commands."""
        if isinstance(self.inner, ApplicationContext):
            await self.inner.defer_response(True)

    def serenity_context(self) -> Any:
        """Return the chat client context."""
        return self.inner.serenity_context

    def framework(self) -> Any:
        """Return the framework view stored in the context."""
        return self.inner.framework

    def data(self) -> Any:
        """Return the custom user data."""
        return self.inner.data

    def channel_id(self) -> int:
        """Return the channel the command was invoked in."""
        if isinstance(self.inner, ApplicationContext):
            return self.inner.interaction.channel_id
        return self.inner.msg.channel_id

    def guild_id(self) -> int | None:
        """Return the guild the command was invoked in, or None in DMs."""
        if isinstance(self.inner, ApplicationContext):
            return self.inner.interaction.guild_id
        return self.inner.msg.guild_id

    def created_at(self) -> datetime:
        """Return when the invoking message or interaction was created."""
        if isinstance(self.inner, ApplicationContext):
            return _snowflake_time(self.inner.interaction.id)
        return self.inner.msg.timestamp

    def author(self) -> Any:
        """Return the user who invoked the command."""
        if isinstance(self.inner, ApplicationContext):
            return self.inner.interaction.user
        return self.inner.msg.author

    def id(self) -> int:
        """Return an ID unique to this invocation, distinct across message edits."""
        if isinstance(self.inner, ApplicationContext):
            return self.inner.interaction.id
        msg = self.inner.msg
        identifier = msg.id
        if msg.edited_timestamp is not None:
            # Replace the 42 time bits with the edit time so edits get a new ID.
            identifier &= _U64_MASK >> 42
            millis = _unix_millis(msg.edited_timestamp) - _EPOCH_MILLIS
            identifier |= ((millis & _U64_MASK) << 22) & _U64_MASK
        return identifier

    def parent_commands(self) -> Sequence[Any]:
        """Return the parent commands of a subcommand, top-level first."""
        return self.inner.parent_commands

    def command(self) -> Any:
        """Return the command being run."""
        return self.inner.command

    def prefix(self) -> str:
        """Return the prefix used, or ``/`` for application commands."""
        if isinstance(self.inner, ApplicationContext):
            return "/"
        return self.inner.prefix

    def invoked_command_name(self) -> str:
        """Return the command name as the user typed it."""
        if isinstance(self.inner, ApplicationContext):
            return self.inner.interaction.name
        return self.inner.invoked_command_name

    async def rerun(self) -> None:
        """Run the command code again, skipping checks.

        An error raised by the command itself is re-raised as is.
        """
        try:
            await self._rerun_inner()
        except CommandError as failure:
            error = failure.error
            if isinstance(error, BaseException):
                raise error from None
            raise
        except FrameworkError as failure:
            raise RuntimeError("unexpected error before entering command") from failure

    async def _rerun_inner(self) -> None:
        inner = self.inner
        if isinstance(inner, PrefixContext):
            action = getattr(inner.command, "prefix_action", None)
            if action is not None:
                await action(inner)
            return

        interaction = inner.interaction
        if interaction.is_autocomplete:
            return
        command = inner.command
        if interaction.command_type == _CHAT_INPUT:
            action = getattr(command, "slash_action", None)
            if action is not None:
                await action(inner)
            return

        menu_action = getattr(command, "context_menu_action", None)
        target = interaction.target
        if menu_action is None or target is None:
            return
        if menu_action.target == "user":
            if target.is_user:
                await menu_action.action(inner, copy.deepcopy(target.user))
        elif target.is_message:
            await menu_action.action(inner, copy.deepcopy(target.message))

    def invocation_string(self) -> str:
        """Return the text this command was invoked with.

        For application commands this looks like ``/command sub arg1:value1``.
        """
        inner = self.inner
        if isinstance(inner, PrefixContext):
            return inner.msg.content
        parts = ["/"]
        parts.extend(f"{parent.name} " for parent in inner.parent_commands)
        parts.append(inner.command.name)
        for arg in inner.args:
            name, value = _option_fields(arg)
            if value is not None:
                parts.append(f" {name}:{_format_value(value)}")
        return "".join(parts)

    async def set_invocation_data(self, data: Any) -> None:
        """Store data carried across checks, hooks and the command itself."""
        self.inner.invocation_data = data

    async def invocation_data(self, kind: type[T]) -> T | None:
        """Return the stored invocation data if it is an instance of ``kind``."""
        data = self.inner.invocation_data
        return data if isinstance(data, kind) else None

    def locale(self) -> str | None:
        """Return the invoking user's locale, if known."""
        if isinstance(self.inner, ApplicationContext):
            return self.inner.interaction.locale
        return None


@dataclass(frozen=True)
class PartialContext:
    """A reduced context holding only what is known before a command is found."""

    channel_id: int
    author: Any
    guild_id: int | None = None
    serenity_context: Any = None
    framework: Any = None
    data: Any = None

    @classmethod
    def from_context(cls, ctx: Context) -> PartialContext:
        """Take the general fields out of a full context."""
        return cls(
            guild_id=ctx.guild_id(),
            channel_id=ctx.channel_id(),
            author=ctx.author(),
            serenity_context=ctx.serenity_context(),
            framework=ctx.framework(),
            data=ctx.data(),
        )