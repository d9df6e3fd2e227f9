import logging

import pytest

from botframe.command import Command
from botframe.framework_options import AllowedMentions, FrameworkOptions, default_on_error
from botframe.prefix import PrefixFrameworkOptions


def test_defaults():
    options = FrameworkOptions()
    assert options.commands == []
    assert options.on_error is default_on_error
    assert options.command_check is None
    assert options.skip_checks_for_owners is False
    assert options.manual_cooldowns is False
    assert options.owners == set()
    assert options.prefix_options == PrefixFrameworkOptions()
    assert options.prefix_options.mention_as_prefix is True


def test_allowed_mentions_only_users_by_default():
    mentions = FrameworkOptions().allowed_mentions
    assert mentions.parse == ["users"]
    assert mentions.to_dict() == {"parse": ["users"]}


def test_allowed_mentions_to_dict():
    mentions = AllowedMentions(parse=[], users=[1, 2], replied_user=False)
    assert mentions.to_dict() == {"parse": [], "users": [1, 2], "replied_user": False}


def test_add_command_appends_in_order():
    options = FrameworkOptions()
    first, second = Command(name="a"), Command(name="b")
    options.add_command(first)
    options.add_command(second)
    assert [c.name for c in options.commands] == ["a", "b"]


def test_instances_do_not_share_state():
    one, two = FrameworkOptions(), FrameworkOptions()
    one.add_command(Command(name="a"))
    one.owners.add(5)
    assert two.commands == []
    assert two.owners == set()


@pytest.mark.asyncio
async def test_default_on_error_logs(caplog):
    with caplog.at_level(logging.ERROR):
        await default_on_error(RuntimeError("boom"))
    assert any("boom" in record.getMessage() for record in caplog.records)


@pytest.mark.asyncio
async def test_default_hooks_return_nothing():
    options = FrameworkOptions()
    results = [
        await options.pre_command(None),
        await options.post_command(None),
        await options.event_handler(None, None, None, None),
    ]
    assert results == [None, None, None]