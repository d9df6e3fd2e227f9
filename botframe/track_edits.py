"""Automatic edit tracking: re-running commands when the user edits their invocation."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Message:
    """A chat message as seen by the framework."""

    id: int = 0
    channel_id: int = 0
    guild_id: int | None = None
    kind: Any = 0
    content: str = ""
    tts: bool = False
    pinned: bool = False
    timestamp: datetime = field(default_factory=_utcnow)
    edited_timestamp: datetime | None = None
    author: Any = None
    mention_everyone: bool = False
    mentions: list = field(default_factory=list)
    mention_roles: list = field(default_factory=list)
    attachments: list = field(default_factory=list)
    embeds: list = field(default_factory=list)


@dataclass
class MessageUpdateEvent:
    """A partial message update; fields left as None were not changed."""

    id: int
    channel_id: int
    guild_id: int | None = None
    kind: Any = None
    content: str | None = None
    tts: bool | None = None
    pinned: bool | None = None
    timestamp: datetime | None = None
    edited_timestamp: datetime | None = None
    author: Any = None
    mention_everyone: bool | None = None
    mentions: list | None = None
    mention_roles: list | None = None
    attachments: list | None = None
    embeds: list | None = None


_OPTIONAL_FIELDS = (
    "kind",
    "content",
    "tts",
    "pinned",
    "timestamp",
    "edited_timestamp",
    "author",
    "mention_everyone",
    "mentions",
    "mention_roles",
    "attachments",
)


def update_message(message: Message, update: MessageUpdateEvent) -> None:
    """Apply ``update`` to ``message`` in place.

    Identity fields are always taken over; the others only when present. Embeds
    are left untouched.
    """
    message.id = update.id
    message.channel_id = update.channel_id
    message.guild_id = update.guild_id
    for name in _OPTIONAL_FIELDS:
        value = getattr(update, name)
        if value is not None:
            setattr(message, name, copy.deepcopy(value))


@dataclass
class _CachedInvocation:
    user_msg: Message
    bot_response: Message | None
    track_deletion: bool


class EditTracker:
    """Caches invocation messages together with the bot's responses to them."""

    def __init__(self, max_duration: timedelta) -> None:
        self.max_duration = max_duration
        self._cache: list[_CachedInvocation] = []

    @classmethod
    def for_timespan(cls, duration: timedelta | float) -> EditTracker:
        """Create a tracker remembering messages for ``duration``.

        Old messages are only dropped when :meth:`purge` is called.
        """
        if not isinstance(duration, timedelta):
            duration = timedelta(seconds=duration)
        return cls(duration)

    def _find(self, message_id: int) -> _CachedInvocation | None:
        return next(
            (inv for inv in self._cache if inv.user_msg.id == message_id), None
        )

    def process_message_update(
        self,
        user_msg_update: MessageUpdateEvent,
        ignore_edits_if_not_yet_responded: bool,
    ) -> tuple[Message, bool] | None:
        """Return the updated message and whether it was tracked, or None to skip re-running."""
        invocation = self._find(user_msg_update.id)
        if invocation is not None:
            if ignore_edits_if_not_yet_responded and invocation.bot_response is None:
                return None
            # Content present but identical still counts: the user edited explicitly.
            if user_msg_update.content is None:
                return None
            update_message(invocation.user_msg, user_msg_update)
            return copy.deepcopy(invocation.user_msg), True

        if ignore_edits_if_not_yet_responded:
            return None
        user_msg = Message()
        update_message(user_msg, user_msg_update)
        return user_msg, False

    def process_message_delete(self, deleted_message_id: int) -> Message | None:
        """Forget the invocation and return its response if deletion is tracked."""
        invocation = self._find(deleted_message_id)
        if invocation is None:
            return None
        self._cache.remove(invocation)
        return invocation.bot_response if invocation.track_deletion else None

    def purge(self) -> None:
        """Forget every invocation last updated longer ago than the tracked duration."""
        now = int(_utcnow().timestamp())
        max_secs = int(self.max_duration.total_seconds())

        def fresh(inv: _CachedInvocation) -> bool:
            last_update = inv.user_msg.edited_timestamp or inv.user_msg.timestamp
            return now - int(last_update.timestamp()) < max_secs

        self._cache = [inv for inv in self._cache if fresh(inv)]

    def find_bot_response(self, user_msg_id: int) -> Message | None:
        """Return the cached bot response to the given user message, if any."""
        invocation = self._find(user_msg_id)
        return None if invocation is None else invocation.bot_response

    def set_bot_response(
        self, user_msg: Message, bot_response: Message, track_deletion: bool
    ) -> None:
        """Associate ``bot_response`` with ``user_msg``, replacing any earlier response."""
        invocation = self._find(user_msg.id)
        if invocation is not None:
            invocation.bot_response = bot_response
        else:
            self._cache.append(
                _CachedInvocation(copy.deepcopy(user_msg), bot_response, track_deletion)
            )

    def track_command(self, user_msg: Message, track_deletion: bool) -> None:
        """Record a running command so its own edits are not treated as untracked."""
        if self._find(user_msg.id) is None:
            self._cache.append(
                _CachedInvocation(copy.deepcopy(user_msg), None, track_deletion)
            )

    def __len__(self) -> int:
        return len(self._cache)