"""The Command type: everything known about a single framework command."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable

from botframe.slash import CommandParameter, ContextMenuCommandAction
from botframe.slash_argument import CommandOptionBuilder, CommandOptionType

_DEFAULT_DESCRIPTION = "A slash command"


class CommandType(Enum):
    """Kinds of application command as numbered on the wire."""

    CHAT_INPUT = 1
    USER = 2
    MESSAGE = 3


@dataclass
class ApplicationCommandBuilder:
    """Description of a top-level application command, ready for registration."""

    name: str = ""
    description: str | None = None
    kind: CommandType | None = None
    name_localizations: dict[str, str] = field(default_factory=dict)
    description_localizations: dict[str, str] = field(default_factory=dict)
    default_member_permissions: int | None = None
    dm_permission: bool | None = None
    options: list[CommandOptionBuilder] = field(default_factory=list)

    def add_option(self, option: CommandOptionBuilder) -> ApplicationCommandBuilder:
        """Append a top-level option and return self."""
        self.options.append(option)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form of this command."""
        data: dict[str, Any] = {"name": self.name}
        if self.description is not None:
            data["description"] = self.description
        if self.kind is not None:
            data["type"] = self.kind.value
        if self.name_localizations:
            data["name_localizations"] = dict(self.name_localizations)
        if self.description_localizations:
            data["description_localizations"] = dict(self.description_localizations)
        if self.default_member_permissions is not None:
            data["default_member_permissions"] = str(self.default_member_permissions)
        if self.dm_permission is not None:
            data["dm_permission"] = self.dm_permission
        if self.options:
            data["options"] = [option.to_dict() for option in self.options]
        return data


Action = Callable[[Any], Awaitable[None]]
Check = Callable[[Any], Awaitable[bool]]


@dataclass(eq=False)
class Command:
    """A command usable as a prefix command, slash command and/or context menu entry.

    Commands compare equal only to themselves.
    """

    name: str = ""
    prefix_action: Action | None = None
    slash_action: Action | None = None
    context_menu_action: ContextMenuCommandAction | None = None
    subcommands: list[Command] = field(default_factory=list)
    name_localizations: dict[str, str] = field(default_factory=dict)
    qualified_name: str = ""
    identifying_name: str = ""
    category: str | None = None
    hide_in_help: bool = False
    description: str | None = None
    description_localizations: dict[str, str] = field(default_factory=dict)
    help_text: Callable[[], str] | None = None
    cooldowns: Any = None
    reuse_response: bool = False
    default_member_permissions: int = 0
    required_permissions: int = 0
    required_bot_permissions: int = 0
    owners_only: bool = False
    guild_only: bool = False
    dm_only: bool = False
    nsfw_only: bool = False
    on_error: Callable[[Any], Awaitable[None]] | None = None
    checks: list[Check] = field(default_factory=list)
    parameters: list[CommandParameter] = field(default_factory=list)
    custom_data: Any = None
    aliases: tuple[str, ...] = ()
    invoke_on_edit: bool = False
    track_deletion: bool = False
    broadcast_typing: bool = False
    context_menu_name: str | None = None
    ephemeral: bool = False

    def __post_init__(self) -> None:
        if not self.qualified_name:
            self.qualified_name = self.name
        if not self.identifying_name:
            self.identifying_name = self.name

    def _create_as_subcommand(self) -> CommandOptionBuilder | None:
        if self.slash_action is None:
            return None
        builder = CommandOptionBuilder(
            name=self.name,
            description=self.description or _DEFAULT_DESCRIPTION,
        )
        builder.name_localizations.update(self.name_localizations)
        builder.description_localizations.update(self.description_localizations)

        if not self.subcommands:
            builder.kind = CommandOptionType.SUB_COMMAND
            for param in self.parameters:
                # A slash-incompatible parameter makes the whole command unregistrable.
                option = param.create_as_slash_command_option()
                if option is None:
                    return None
                builder.add_sub_option(option)
        else:
            builder.kind = CommandOptionType.SUB_COMMAND_GROUP
            for subcommand in self.subcommands:
                option = subcommand._create_as_subcommand()
                if option is not None:
                    builder.add_sub_option(option)
        return builder

    def create_as_slash_command(self) -> ApplicationCommandBuilder | None:
        """Build the registration form of this command as a slash command.

        Returns None if the command has no slash action or a parameter cannot
        be used in a slash command.
        """
        if self.slash_action is None:
            return None
        builder = ApplicationCommandBuilder(
            name=self.name,
            description=self.description or _DEFAULT_DESCRIPTION,
        )
        builder.name_localizations.update(self.name_localizations)
        builder.description_localizations.update(self.description_localizations)

        # Empty permissions would be read as "admin only", so they are left out.
        if self.default_member_permissions:
            builder.default_member_permissions = self.default_member_permissions
        if self.guild_only:
            builder.dm_permission = False

        if not self.subcommands:
            for param in self.parameters:
                option = param.create_as_slash_command_option()
                if option is None:
                    return None
                builder.add_option(option)
        else:
            for subcommand in self.subcommands:
                option = subcommand._create_as_subcommand()
                if option is not None:
                    builder.add_option(option)
        return builder

    def create_as_context_menu_command(self) -> ApplicationCommandBuilder | None:
        """Build the registration form of this command as a context menu entry."""
        action = self.context_menu_action
        if action is None:
            return None
        builder = ApplicationCommandBuilder(
            name=self.context_menu_name or self.name,
            kind=CommandType.USER if action.target == "user" else CommandType.MESSAGE,
        )
        if self.guild_only:
            builder.dm_permission = False
        return builder

    def add_subcommand(self, subcommand: Command) -> Command:
        """Append a subcommand and return self."""
        self.subcommands.append(subcommand)
        return self