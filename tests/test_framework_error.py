from datetime import timedelta

import pytest

from botframe.command import Command
from botframe.framework_error import (
    ArgumentParseError,
    CommandCheckFailed,
    CommandError,
    CommandStructureMismatchError,
    CooldownHit,
    DmOnly,
    DynamicPrefixError,
    EventHandlerError,
    FrameworkError,
    GuildOnly,
    MissingBotPermissions,
    MissingUserPermissions,
    NotAnOwner,
    NsfwOnly,
    SetupError,
    UnknownCommand,
    UnknownInteraction,
)
from botframe.framework_options import FrameworkOptions
from botframe.slash import ApplicationContext, CommandInteraction
from botframe.track_edits import Message


class FakeContext:
    def __init__(self, serenity, command, prefix="~"):
        self._serenity = serenity
        self._command = command
        self._prefix = prefix

    def serenity_context(self):
        return self._serenity

    def command(self):
        return self._command

    def prefix(self):
        return self._prefix


class FakePartialContext:
    def __init__(self, serenity):
        self.serenity_context = serenity


class FakeEvent:
    name = "MessageCreate"


SERENITY = object()


@pytest.fixture
def ctx():
    return FakeContext(SERENITY, Command(name="ping"))


def test_command_error_message_and_cause(ctx):
    cause = ValueError("boom")
    err = CommandError(context=ctx, error=cause)
    assert str(err) == "error in command `~ping`"
    assert err.__cause__ is cause
    assert err.ctx() is ctx
    assert err.serenity_context() is SERENITY


@pytest.mark.parametrize(
    "cls, needle",
    [
        (NotAnOwner, "owner-only command `~ping`"),
        (GuildOnly, "guild-only command `~ping`"),
        (DmOnly, "DM-only command `~ping`"),
        (NsfwOnly, "nsfw-only command `~ping`"),
    ],
)
def test_context_only_variants(ctx, cls, needle):
    err = cls(context=ctx)
    assert needle in str(err)
    assert err.ctx() is ctx
    assert err.serenity_context() is SERENITY


def test_argument_parse_error_shows_input(ctx):
    err = ArgumentParseError(context=ctx, error=ValueError("bad"), input="abc")
    assert '"abc"' in str(err)
    assert "`~ping`" in str(err)
    assert isinstance(err.__cause__, ValueError)


def test_argument_parse_error_without_input(ctx):
    err = ArgumentParseError(context=ctx, error=ValueError("bad"))
    assert str(err).endswith("on input None")


def test_cooldown_and_permissions_mention_command(ctx):
    cooldown = CooldownHit(context=ctx, remaining_cooldown=timedelta(seconds=3))
    assert "`~ping`" in str(cooldown)
    assert "3s remaining" in str(cooldown)
    bot = MissingBotPermissions(context=ctx, missing_permissions=8)
    assert "(8)" in str(bot)
    user = MissingUserPermissions(context=ctx)
    assert "(None)" in str(user)


def test_command_check_failed_without_error(ctx):
    err = CommandCheckFailed(context=ctx)
    assert err.__cause__ is None
    assert err.error is None
    assert err.ctx() is ctx


def test_setup_and_event_handler_have_no_ctx():
    cause = RuntimeError("x")
    setup = SetupError(error=cause, serenity_ctx=SERENITY)
    assert setup.ctx() is None
    assert setup.serenity_context() is SERENITY
    assert setup.__cause__ is cause
    event = EventHandlerError(error=cause, event=FakeEvent(), serenity_ctx=SERENITY)
    assert str(event) == "error in MessageCreate event event handler"
    assert event.ctx() is None


def test_dynamic_prefix_error():
    msg = Message(content="hi")
    err = DynamicPrefixError(
        error=KeyError("k"), context=FakePartialContext(SERENITY), msg=msg
    )
    assert str(err) == 'dynamic prefix callback errored on message "hi"'
    assert err.serenity_context() is SERENITY
    assert err.ctx() is None


def test_unknown_command_and_interaction():
    msg = Message(content="~foo bar")
    unknown = UnknownCommand(
        msg=msg, prefix="~", msg_content="foo bar", serenity_ctx=SERENITY
    )
    assert str(unknown) == "unknown command `foo bar`"
    assert unknown.ctx() is None
    interaction = UnknownInteraction(
        interaction=CommandInteraction(name="weather"), serenity_ctx=SERENITY
    )
    assert str(interaction) == "unknown interaction `weather`"
    assert interaction.serenity_context() is SERENITY


def test_command_structure_mismatch():
    app = ApplicationContext(
        interaction=CommandInteraction(name="ping"),
        serenity_context=SERENITY,
        command=Command(name="ping"),
    )
    err = CommandStructureMismatchError(description="expected integer", context=app)
    assert str(err) == (
        "unexpected application command structure in command `/ping`: expected integer"
    )
    assert err.serenity_context() is SERENITY


def test_errors_can_be_raised_and_caught(ctx):
    with pytest.raises(FrameworkError) as info:
        raise GuildOnly(context=ctx)
    assert info.value.ctx() is ctx


@pytest.mark.asyncio
async def test_handle_prefers_command_on_error():
    seen = []

    async def command_handler(error):
        seen.append(("command", error))

    async def global_handler(error):
        seen.append(("global", error))

    ctx = FakeContext(SERENITY, Command(name="ping", on_error=command_handler))
    err = NotAnOwner(context=ctx)
    await err.handle(FrameworkOptions(on_error=global_handler))
    assert seen == [("command", err)]


@pytest.mark.asyncio
async def test_handle_falls_back_to_global(ctx):
    seen = []

    async def global_handler(error):
        seen.append(error)

    err = CommandError(context=ctx, error=ValueError("x"))
    await err.handle(FrameworkOptions(on_error=global_handler))
    unknown = UnknownCommand(msg=Message(), prefix="~", msg_content="zz")
    await unknown.handle(FrameworkOptions(on_error=global_handler))
    assert seen == [err, unknown]