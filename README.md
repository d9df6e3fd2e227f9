# botframe

Building blocks for a chat bot command framework: the data structures and
bookkeeping that sit between a chat gateway client and your command code.
Everything is plain Python; the package needs only the standard library and
supports Python 3.10 and later.

## What is in it

- `botframe.command` – `Command` describes a command: name, description,
  parameters, subcommands, checks, permissions and its prefix, slash and
  context menu actions. `Command.create_as_slash_command()` and
  `Command.create_as_context_menu_command()` return an
  `ApplicationCommandBuilder` whose `to_dict()` gives the registration
  payload. Commands compare equal only to themselves.
- `botframe.slash` – `CommandParameter` and `CommandParameterChoice` describe
  slash command parameters; `CommandInteraction` and `ApplicationContext`
  describe an application command or autocomplete invocation;
  `ContextMenuCommandAction.user()` / `.message()` wrap context menu callbacks.
- `botframe.slash_argument` – `extract_slash_argument` and `parse_slash_args`
  turn raw option values into Python values, and `create_slash_argument` fills
  in the option type (and, for integer kinds, the min/max bounds) of a
  `CommandOptionBuilder`. Problems raise `SlashArgError`: either
  `CommandStructureMismatch` (the value does not have the registered shape) or
  `SlashArgParseError` (a converter failed on a string).
- `botframe.prefix` – `Prefix.literal()` / `Prefix.regex()` and
  `Prefix.strip()`, `PrefixContext`, `MessageDispatchTrigger` and
  `PrefixFrameworkOptions`.
- `botframe.context` – `Context` wraps either an `ApplicationContext` or a
  `PrefixContext` and gives one view of author, channel, guild, command,
  locale, invocation string and per-invocation data; `Context.rerun()` runs the
  command code again. `PartialContext.from_context()` keeps only the general
  fields.
- `botframe.track_edits` – `EditTracker` keeps invocation `Message`s with the
  bot's responses, so a bot can rerun a command when the user edits the
  message and remove its response when the message is deleted.
- `botframe.framework_options` – `FrameworkOptions` (with `AllowedMentions`
  defaulting to user pings only) and `default_on_error`, which logs.
- `botframe.framework_error` – `FrameworkError` and its subclasses
  (`CommandError`, `ArgumentParseError`, `CooldownHit`,
  `MissingBotPermissions`, `NotAnOwner`, `UnknownCommand` and the others).
  `FrameworkError.handle()` sends an error to the command's own `on_error`, or
  to `FrameworkOptions.on_error` if the command has none.
- `botframe.autocomplete` – `AutocompleteChoice` and `into_stream`, which turns
  an iterable or async iterable into an async iterator.
- `botframe.ordered_map` – `OrderedMap`, an insertion-ordered mapping whose
  keys only need `==`.

## Installing

```
pip install .
```

## Registering a slash command

```python
from botframe.command import Command
from botframe.slash import CommandParameter
from botframe.slash_argument import SlashArgumentKind, create_slash_argument


async def ping(ctx):
    await ctx.defer_response(False)


command = Command(
    name="ping",
    description="Check that the bot is alive",
    slash_action=ping,
    parameters=[
        CommandParameter(
            name="times",
            description="How often to reply",
            type_setter=lambda b: create_slash_argument(SlashArgumentKind.U8, b),
        ),
    ],
)

print(command.create_as_slash_command().to_dict())
```

`create_as_slash_command()` returns `None` when the command has no slash
action, or when one of its parameters has no `type_setter` and so cannot be a
slash command option.

## Parsing received arguments

```python
import asyncio

from botframe.slash_argument import SlashArgumentKind, parse_slash_args

options = [{"name": "text", "value": "hi"}, {"name": "times", "value": 3}]
spec = [
    ("text", SlashArgumentKind.STRING),
    ("times", SlashArgumentKind.U8, "optional"),
    ("loud", SlashArgumentKind.BOOL, "flag"),
]
print(asyncio.run(parse_slash_args(options, spec)))  # ('hi', 3, False)
```

Model kinds such as `USER` or `ROLE` need a `converter(kind, text)` callable,
which may be async.

## Tracking edits

```python
from datetime import timedelta

from botframe.track_edits import EditTracker, Message, MessageUpdateEvent

tracker = EditTracker.for_timespan(timedelta(minutes=10))
user_msg = Message(id=1, channel_id=10, content="!ping")
tracker.set_bot_response(user_msg, Message(id=2, channel_id=10), track_deletion=True)

updated, was_tracked = tracker.process_message_update(
    MessageUpdateEvent(id=1, channel_id=10, content="!ping 2"), False
)
response = tracker.process_message_delete(1)  # the bot's message with id 2
```

Old entries are dropped only when `tracker.purge()` is called.

## What it does not do

botframe does not connect to a chat service. It has no gateway client, no
message dispatcher that matches prefixes and runs commands, no code that sends
or edits replies, no cooldown bookkeeping (`Command.cooldowns` is just a slot)
and no built-in help command. `ApplicationContext.defer_response()` sends its
payload through the `responder` callable you put on the `CommandInteraction`.

## Running the tests

```
pip install ".[test]"
pytest
```