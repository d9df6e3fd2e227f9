import re
from datetime import timedelta

import pytest

from botframe.prefix import (
    MessageDispatchTrigger,
    Prefix,
    PrefixContext,
    PrefixFrameworkOptions,
)
from botframe.track_edits import EditTracker, Message


def test_literal_strip_splits_prefix():
    assert Prefix.literal("!").strip("!ping now") == ("!", "ping now")


def test_literal_is_case_sensitive():
    assert Prefix.literal("bot.").strip("BOT.ping") is None


def test_literal_requires_start():
    assert Prefix.literal("!").strip("ping !") is None


def test_literal_round_trip():
    prefix = Prefix.literal("~")
    content = "~help me"
    matched, rest = prefix.strip(content)
    assert matched + rest == content
    assert prefix.is_regex is False


@pytest.mark.parametrize("content", ["hey bot, ping", "hello bot, ping"])
def test_regex_strip(content):
    prefix = Prefix.regex(r"(hey|hello) bot, ")
    matched, rest = prefix.strip(content)
    assert rest == "ping"
    assert matched + rest == content
    assert prefix.is_regex is True


def test_regex_must_match_at_start():
    assert Prefix.regex(r"bot ").strip("hey bot ping") is None


def test_regex_accepts_compiled_pattern():
    prefix = Prefix.regex(re.compile(r"\$+"))
    assert prefix.strip("$$$cmd") == ("$$$", "cmd")


def test_prefix_equality():
    assert Prefix.literal("!") == Prefix.literal("!")
    assert Prefix.literal("!") != Prefix.literal("?")


def test_framework_options_defaults():
    options = PrefixFrameworkOptions()
    assert options.prefix is None
    assert options.additional_prefixes == []
    assert options.dynamic_prefix is None
    assert options.stripped_dynamic_prefix is None
    assert options.mention_as_prefix is True
    assert options.edit_tracker is None
    assert options.execute_untracked_edits is True
    assert options.ignore_edits_if_not_yet_responded is False
    assert options.execute_self_messages is False
    assert options.ignore_bots is True
    assert options.case_insensitive_commands is True


def test_framework_options_lists_not_shared():
    first = PrefixFrameworkOptions()
    second = PrefixFrameworkOptions()
    first.additional_prefixes.append(Prefix.literal("!"))
    assert second.additional_prefixes == []


def test_framework_options_hold_edit_tracker():
    tracker = EditTracker.for_timespan(timedelta(minutes=5))
    options = PrefixFrameworkOptions(prefix="!", edit_tracker=tracker)
    assert options.edit_tracker is tracker
    assert options.edit_tracker.max_duration == timedelta(minutes=5)


def test_prefix_context_defaults_and_fields():
    msg = Message(id=11, content="!ping")
    ctx = PrefixContext(msg=msg, prefix="!", invoked_command_name="ping")
    assert ctx.msg is msg
    assert ctx.prefix + ctx.invoked_command_name == msg.content
    assert ctx.trigger is MessageDispatchTrigger.MESSAGE_CREATE
    assert ctx.args == ""


def test_prefix_context_keeps_given_trigger():
    msg = Message(id=12, content="!ping")
    ctx = PrefixContext(
        msg=msg,
        prefix="!",
        invoked_command_name="ping",
        trigger=MessageDispatchTrigger.MESSAGE_EDIT,
    )
    assert ctx.trigger is MessageDispatchTrigger.MESSAGE_EDIT
    assert ctx.trigger != MessageDispatchTrigger.MESSAGE_EDIT_FROM_INVALID