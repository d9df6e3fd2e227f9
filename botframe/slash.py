"""Application command interactions, contexts, context menu actions and parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Literal, Mapping, Sequence

from botframe.slash_argument import Attachment, CommandOptionBuilder

_DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE = 5
_EPHEMERAL_FLAG = 1 << 6
_CHAT_INPUT = 1

Responder = Callable[[dict], Awaitable[Any]]


class InteractionKind(Enum):
    """Whether an interaction invokes a command or asks for autocomplete suggestions."""

    APPLICATION_COMMAND = "application_command"
    AUTOCOMPLETE = "autocomplete"


@dataclass(frozen=True)
class ContextMenuTarget:
    """The user or message that a context menu command was invoked on."""

    user: Any = None
    member: Any = None
    message: Any = None

    @property
    def is_user(self) -> bool:
        return self.user is not None

    @property
    def is_message(self) -> bool:
        return self.message is not None


@dataclass
class CommandInteraction:
    """An application command or autocomplete interaction.

    ``responder`` is an async callable that sends an interaction response
    payload to the chat service.
    """

    kind: InteractionKind = InteractionKind.APPLICATION_COMMAND
    id: int = 0
    name: str = ""
    guild_id: int | None = None
    channel_id: int = 0
    user: Any = None
    member: Any = None
    locale: str = "en-US"
    options: list[Any] = field(default_factory=list)
    resolved_attachments: dict[int, Attachment] = field(default_factory=dict)
    command_type: int = _CHAT_INPUT
    target: ContextMenuTarget | None = None
    responder: Responder | None = None

    @property
    def is_autocomplete(self) -> bool:
        return self.kind is InteractionKind.AUTOCOMPLETE

    def unwrap(self) -> CommandInteraction:
        """Return self if this is an application command interaction, raise otherwise."""
        if self.is_autocomplete:
            raise ValueError(
                "expected application command interaction, got autocomplete interaction"
            )
        return self


@dataclass
class ApplicationContext:
    """Context passed to application command invocations."""

    interaction: CommandInteraction
    serenity_context: Any = None
    args: Sequence[Any] = ()
    framework: Any = None
    parent_commands: Sequence[Any] = ()
    command: Any = None
    data: Any = None
    invocation_data: Any = None
    has_sent_initial_response: bool = False

    async def defer_response(self, ephemeral: bool) -> None:
        """Acknowledge the interaction so the bot may answer later.

        Does nothing for autocomplete interactions or once an initial
        response has been sent.
        """
        if self.interaction.is_autocomplete or self.has_sent_initial_response:
            return
        responder = self.interaction.responder
        if responder is None:
            raise RuntimeError("interaction has no responder to send the deferral")
        await responder(
            {
                "type": _DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE,
                "data": {"flags": _EPHEMERAL_FLAG if ephemeral else 0},
            }
        )
        self.has_sent_initial_response = True


ContextMenuAction = Callable[[ApplicationContext, Any], Awaitable[None]]


@dataclass(frozen=True)
class ContextMenuCommandAction:
    """The callback of a context menu entry and the kind of item it works on."""

    target: Literal["user", "message"]
    action: ContextMenuAction

    @classmethod
    def user(cls, action: ContextMenuAction) -> ContextMenuCommandAction:
        """An entry shown on users; the action receives the user."""
        return cls("user", action)

    @classmethod
    def message(cls, action: ContextMenuAction) -> ContextMenuCommandAction:
        """An entry shown on messages; the action receives the message."""
        return cls("message", action)


@dataclass
class CommandParameterChoice:
    """One fixed drop-down choice of a choice parameter."""

    name: str
    localizations: dict[str, str] = field(default_factory=dict)


AutocompleteCallback = Callable[[ApplicationContext, str], Awaitable[Any]]


@dataclass
class CommandParameter:
    """A single parameter of a command."""

    name: str
    name_localizations: dict[str, str] = field(default_factory=dict)
    description: str | None = None
    description_localizations: dict[str, str] = field(default_factory=dict)
    required: bool = False
    channel_types: list[Any] | None = None
    choices: list[CommandParameterChoice] = field(default_factory=list)
    type_setter: Callable[[CommandOptionBuilder], Any] | None = None
    autocomplete_callback: AutocompleteCallback | None = None

    def create_as_slash_command_option(self) -> CommandOptionBuilder | None:
        """Build the option used to register this parameter.

        Returns None when the parameter has no slash type, i.e. cannot be
        used in a slash command.
        """
        if self.type_setter is None:
            return None
        builder = CommandOptionBuilder(
            name=self.name,
            description=self.description or "A slash command parameter",
            required=self.required,
            autocomplete=self.autocomplete_callback is not None,
        )
        builder.name_localizations.update(self.name_localizations)
        builder.description_localizations.update(self.description_localizations)
        if self.channel_types is not None:
            builder.channel_types = list(self.channel_types)
        for index, choice in enumerate(self.choices):
            builder.add_int_choice_localized(choice.name, index, choice.localizations)
        self.type_setter(builder)
        return builder


def _localized(mapping: Mapping[str, str]) -> dict[str, str]:
    return dict(mapping)