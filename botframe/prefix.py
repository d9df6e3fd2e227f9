"""Definitions for prefix commands: triggers, prefixes, contexts and options."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Sequence

from botframe.track_edits import EditTracker, Message


class MessageDispatchTrigger(Enum):
    """The event that caused a prefix command to run."""

    MESSAGE_CREATE = "message_create"
    MESSAGE_EDIT = "message_edit"
    MESSAGE_EDIT_FROM_INVALID = "message_edit_from_invalid"


@dataclass(frozen=True)
class Prefix:
    """A command prefix: either a case-sensitive literal or a regular expression."""

    value: str | re.Pattern[str]

    @classmethod
    def literal(cls, text: str) -> Prefix:
        """A prefix matched verbatim at the start of a message."""
        return cls(text)

    @classmethod
    def regex(cls, pattern: str | re.Pattern[str]) -> Prefix:
        """A prefix matched by ``pattern`` at the start of a message."""
        return cls(re.compile(pattern))

    @property
    def is_regex(self) -> bool:
        return isinstance(self.value, re.Pattern)

    def strip(self, content: str) -> tuple[str, str] | None:
        """Split ``content`` into the matched prefix and the rest, or None if no match."""
        if isinstance(self.value, re.Pattern):
            match = self.value.match(content)
            if match is None:
                return None
            return match.group(0), content[match.end():]
        if content.startswith(self.value):
            return self.value, content[len(self.value):]
        return None


@dataclass
class PrefixContext:
    """Context passed to prefix command invocations."""

    msg: Message
    serenity_context: Any = None
    prefix: str = ""
    invoked_command_name: str = ""
    args: str = ""
    framework: Any = None
    parent_commands: Sequence[Any] = ()
    command: Any = None
    data: Any = None
    invocation_data: Any = None
    trigger: MessageDispatchTrigger = MessageDispatchTrigger.MESSAGE_CREATE
    action: Callable[[PrefixContext], Awaitable[None]] | None = None


@dataclass
class PrefixFrameworkOptions:
    """Configuration specific to prefix commands."""

    prefix: str | None = None
    additional_prefixes: list[Prefix] = field(default_factory=list)
    dynamic_prefix: Callable[[Any], Awaitable[str | None]] | None = None
    stripped_dynamic_prefix: (
        Callable[[Any, Message, Any], Awaitable[tuple[str, str] | None]] | None
    ) = None
    mention_as_prefix: bool = True
    edit_tracker: EditTracker | None = None
    execute_untracked_edits: bool = True
    ignore_edits_if_not_yet_responded: bool = False
    execute_self_messages: bool = False
    ignore_bots: bool = True
    case_insensitive_commands: bool = True