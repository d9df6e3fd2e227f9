"""Extraction of slash command arguments and construction of their option builders."""

from __future__ import annotations

import inspect
import math
import struct
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, Mapping, Sequence, Union

_JS_SAFE_INTEGER = 9007199254740991
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1

Converter = Callable[["SlashArgumentKind", str], Union[Any, Awaitable[Any]]]


class SlashArgError(Exception):
    """Failure while turning a received slash command argument into a value."""


class CommandStructureMismatch(SlashArgError):
    """The received argument had an unexpected shape.

    Usually the command registered with the chat service is outdated.
    """

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return f"Bot author did not register their commands correctly ({self.detail})"


class SlashArgParseError(SlashArgError):
    """A string argument was received but could not be converted to the target type."""

    def __init__(self, error: BaseException, input: str) -> None:
        super().__init__(error, input)
        self.error = error
        self.input = input
        self.__cause__ = error

    def __str__(self) -> str:
        return f"Failed to parse `{self.input}` as argument: {self.error}"


class CommandOptionType(Enum):
    """Application command option types as numbered on the wire."""

    SUB_COMMAND = 1
    SUB_COMMAND_GROUP = 2
    STRING = 3
    INTEGER = 4
    BOOLEAN = 5
    USER = 6
    CHANNEL = 7
    ROLE = 8
    MENTIONABLE = 9
    NUMBER = 10
    ATTACHMENT = 11


@dataclass
class CommandOptionBuilder:
    """Description of one application command option, ready for registration."""

    name: str = ""
    description: str = ""
    kind: CommandOptionType | None = None
    required: bool = False
    autocomplete: bool = False
    name_localizations: dict[str, str] = field(default_factory=dict)
    description_localizations: dict[str, str] = field(default_factory=dict)
    channel_types: list[Any] | None = None
    choices: list[dict[str, Any]] = field(default_factory=list)
    options: list[CommandOptionBuilder] = field(default_factory=list)
    min_value: float | None = None
    max_value: float | None = None

    def add_sub_option(self, option: CommandOptionBuilder) -> CommandOptionBuilder:
        """Append a nested option and return self."""
        self.options.append(option)
        return self

    def add_int_choice_localized(
        self,
        name: str,
        value: int,
        localizations: Mapping[str, str] | Iterable[tuple[str, str]],
    ) -> CommandOptionBuilder:
        """Append an integer choice with localized labels and return self."""
        if isinstance(localizations, Mapping):
            localizations = localizations.items()
        self.choices.append(
            {"name": name, "value": value, "name_localizations": dict(localizations)}
        )
        return self

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form of this option."""
        data: dict[str, Any] = {"name": self.name, "description": self.description}
        if self.kind is not None:
            data["type"] = self.kind.value
        if self.required:
            data["required"] = True
        if self.autocomplete:
            data["autocomplete"] = True
        if self.name_localizations:
            data["name_localizations"] = dict(self.name_localizations)
        if self.description_localizations:
            data["description_localizations"] = dict(self.description_localizations)
        if self.channel_types is not None:
            data["channel_types"] = [
                t.value if isinstance(t, Enum) else t for t in self.channel_types
            ]
        if self.choices:
            data["choices"] = [dict(choice) for choice in self.choices]
        if self.options:
            data["options"] = [option.to_dict() for option in self.options]
        if self.min_value is not None:
            data["min_value"] = self.min_value
        if self.max_value is not None:
            data["max_value"] = self.max_value
        return data


class SlashArgumentKind(Enum):
    """Target types that a slash command argument can be extracted into."""

    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    ISIZE = "isize"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    USIZE = "usize"
    F32 = "f32"
    F64 = "f64"
    BOOL = "bool"
    STRING = "string"
    ATTACHMENT = "attachment"
    MEMBER = "member"
    USER = "user"
    CHANNEL = "channel"
    GUILD_CHANNEL = "guild_channel"
    ROLE = "role"

    @property
    def is_integer(self) -> bool:
        return self in _INTEGER_RANGES

    @property
    def option_type(self) -> CommandOptionType:
        """The option type used when registering a parameter of this kind."""
        return _OPTION_TYPES[self]


_K = SlashArgumentKind

_INTEGER_RANGES: dict[SlashArgumentKind, tuple[int, int]] = {
    _K.I8: (-(2**7), 2**7 - 1),
    _K.I16: (-(2**15), 2**15 - 1),
    _K.I32: (-(2**31), 2**31 - 1),
    _K.I64: (_I64_MIN, _I64_MAX),
    _K.ISIZE: (_I64_MIN, _I64_MAX),
    _K.U8: (0, 2**8 - 1),
    _K.U16: (0, 2**16 - 1),
    _K.U32: (0, 2**32 - 1),
    _K.U64: (0, 2**64 - 1),
    _K.USIZE: (0, 2**64 - 1),
}

_FLOAT_KINDS = frozenset({_K.F32, _K.F64})

_CONVERTED_KINDS = frozenset(
    {_K.STRING, _K.MEMBER, _K.USER, _K.CHANNEL, _K.GUILD_CHANNEL, _K.ROLE}
)

_OPTION_TYPES: dict[SlashArgumentKind, CommandOptionType] = {
    **{kind: CommandOptionType.INTEGER for kind in _INTEGER_RANGES},
    _K.F32: CommandOptionType.NUMBER,
    _K.F64: CommandOptionType.NUMBER,
    _K.BOOL: CommandOptionType.BOOLEAN,
    _K.STRING: CommandOptionType.STRING,
    _K.ATTACHMENT: CommandOptionType.ATTACHMENT,
    _K.MEMBER: CommandOptionType.USER,
    _K.USER: CommandOptionType.USER,
    _K.CHANNEL: CommandOptionType.CHANNEL,
    _K.GUILD_CHANNEL: CommandOptionType.CHANNEL,
    _K.ROLE: CommandOptionType.ROLE,
}


@dataclass
class Attachment:
    """A file attached to an interaction."""

    id: int
    filename: str = ""
    size: int = 0
    url: str = ""
    content_type: str | None = None


def integer_bounds(kind: SlashArgumentKind) -> tuple[float, float]:
    """Return the registered min/max for an integer kind, clamped to the JS-safe range."""
    if kind not in _INTEGER_RANGES:
        raise ValueError(f"{kind.value} is not an integer kind")
    low, high = _INTEGER_RANGES[kind]
    return (
        max(float(low), -float(_JS_SAFE_INTEGER)),
        min(float(high), float(_JS_SAFE_INTEGER)),
    )


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _to_f32(value: float) -> float:
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


async def _convert(kind: SlashArgumentKind, text: str, converter: Converter | None) -> Any:
    if converter is None:
        if kind is _K.STRING:
            return text
        raise ValueError(f"a converter is required to extract {kind.value} arguments")
    try:
        result = converter(kind, text)
        if inspect.isawaitable(result):
            result = await result
    except Exception as error:
        raise SlashArgParseError(error, text) from error
    return result


async def extract_slash_argument(
    kind: SlashArgumentKind,
    value: Any,
    resolved_attachments: Mapping[int, Attachment] | None = None,
    converter: Converter | None = None,
) -> Any:
    """Extract a value of ``kind`` from a received JSON argument value.

    ``converter(kind, text)`` turns strings into model values; it may be async.
    Without one, string arguments are returned as they are.
    """
    if kind in _INTEGER_RANGES:
        if not _is_integer(value) or not _I64_MIN <= value <= _I64_MAX:
            raise CommandStructureMismatch("expected integer")
        low, high = _INTEGER_RANGES[kind]
        if not low <= value <= high:
            raise CommandStructureMismatch("received out of bounds integer")
        return value

    if kind in _FLOAT_KINDS:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise CommandStructureMismatch("expected float")
        number = float(value)
        return _to_f32(number) if kind is _K.F32 else number

    if kind is _K.BOOL:
        if not isinstance(value, bool):
            raise CommandStructureMismatch("expected bool")
        return value

    if kind is _K.ATTACHMENT:
        if not isinstance(value, str):
            raise CommandStructureMismatch("expected attachment id")
        if not value.isascii() or not value.isdigit():
            raise CommandStructureMismatch("improper attachment id passed")
        attachment_id = int(value)
        if attachment_id >= 2**64:
            raise CommandStructureMismatch("improper attachment id passed")
        attachment = (resolved_attachments or {}).get(attachment_id)
        if attachment is None:
            raise CommandStructureMismatch("attachment id with no attachment")
        return attachment

    if kind in _CONVERTED_KINDS:
        if not isinstance(value, str):
            raise CommandStructureMismatch("expected string")
        return await _convert(kind, value, converter)

    raise ValueError(f"unsupported argument kind: {kind!r}")


def create_slash_argument(
    kind: SlashArgumentKind, builder: CommandOptionBuilder
) -> CommandOptionBuilder:
    """Fill in the type fields of ``builder`` for a parameter of ``kind``."""
    if kind in _INTEGER_RANGES:
        builder.min_value, builder.max_value = integer_bounds(kind)
    builder.kind = kind.option_type
    return builder


def _option_fields(arg: Any) -> tuple[str, Any]:
    if isinstance(arg, Mapping):
        return arg["name"], arg.get("value")
    return arg.name, getattr(arg, "value", None)


_MODES = frozenset({"required", "optional", "list", "flag"})


async def parse_slash_args(
    args: Sequence[Any],
    spec: Sequence[tuple],
    resolved_attachments: Mapping[int, Attachment] | None = None,
    converter: Converter | None = None,
) -> tuple:
    """Extract the arguments described by ``spec`` from the received options.

    ``args`` holds options with ``name`` and ``value`` (objects or mappings).
    Each ``spec`` entry is ``(name, kind)`` or ``(name, kind, mode)``, where mode
    is ``"required"`` (default), ``"optional"``, ``"list"`` or ``"flag"``.
    """
    options = [_option_fields(arg) for arg in args]

    async def optional(name: str, kind: SlashArgumentKind) -> Any:
        found = next((value for opt_name, value in options if opt_name == name), _MISSING)
        if found is _MISSING:
            return None
        if found is None:
            raise CommandStructureMismatch("expected argument value")
        return await extract_slash_argument(kind, found, resolved_attachments, converter)

    results = []
    for entry in spec:
        name, kind, *rest = entry
        mode = rest[0] if rest else "required"
        if mode not in _MODES:
            raise ValueError(f"unknown argument mode: {mode!r}")
        if mode == "flag":
            value = await optional(name, _K.BOOL)
            results.append(False if value is None else value)
            continue
        value = await optional(name, kind)
        if mode == "optional":
            results.append(value)
        elif mode == "list":
            results.append([] if value is None else [value])
        else:
            if value is None:
                raise CommandStructureMismatch("a required argument is missing")
            results.append(value)
    return tuple(results)


_MISSING = object()