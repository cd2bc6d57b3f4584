"""Reduced, transport-independent view of an inbound command request.

The transport layer populates these types; the pipeline and the constraint
engine only ever read them.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
import dataclasses
from enum import StrEnum
from types import MappingProxyType
import typing

from rendezvous.core.exceptions import InvalidRequestError, MissingOptionError


class OptionKind(StrEnum):
    USER = "USER"
    CHANNEL = "CHANNEL"
    ROLE = "ROLE"
    STRING = "STRING"
    INTEGER = "INTEGER"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"
    MENTIONABLE = "MENTIONABLE"
    ATTACHMENT = "ATTACHMENT"


SCALAR_OPTION_KINDS = frozenset(
    {OptionKind.STRING, OptionKind.INTEGER, OptionKind.NUMBER, OptionKind.BOOLEAN}
)


@dataclasses.dataclass(frozen=True, slots=True)
class LimitedUser:
    id: str
    bot: bool = False


@dataclasses.dataclass(frozen=True, slots=True)
class LimitedChannel:
    id: str


@dataclasses.dataclass(frozen=True, slots=True)
class LimitedRole:
    id: str


@dataclasses.dataclass(frozen=True, slots=True)
class LimitedMember:
    """The requesting member and the permissions they hold in the workspace."""

    id: str
    user: LimitedUser
    permissions: frozenset[str] = frozenset()

    def has_permission(self, permission: str) -> bool:
        return permission in self.permissions


@dataclasses.dataclass(frozen=True, slots=True)
class MessageRef:
    """Reference to an existing message targeted by a message command."""

    id: str
    author_id: str
    content: str = ""


@dataclasses.dataclass(frozen=True, slots=True)
class RequestOption:
    """A single option supplied with the request.

    Only the attribute matching `kind` is meaningful: `user`, `channel` and
    `role` for reference kinds, `value` for scalar kinds.
    """

    name: str
    kind: OptionKind
    value: str | int | float | bool | None = None
    user: LimitedUser | None = None
    channel: LimitedChannel | None = None
    role: LimitedRole | None = None


class RequestOptions(Mapping[str, RequestOption]):
    """Read-only, name-indexed collection of supplied options."""

    __slots__ = ("_options",)

    def __init__(self, options: typing.Iterable[RequestOption] = ()) -> None:
        self._options: Mapping[str, RequestOption] = MappingProxyType(
            {option.name: option for option in options}
        )

    @typing.overload
    def get(self, name: str, required: typing.Literal[True]) -> RequestOption: ...
    @typing.overload
    def get(self, name: str, required: bool = False) -> RequestOption | None: ...

    def get(self, name: str, required: bool = False) -> RequestOption | None:  # type: ignore[override]
        """Return the named option, or None when the requester omitted it.

        Raises:
            MissingOptionError: If ``required`` is True and the option is absent.
        """
        option = self._options.get(name)
        if option is None and required:
            raise MissingOptionError(f"Required option {name!r} was not supplied.")
        return option

    def value_of(self, name: str, default: typing.Any = None) -> typing.Any:
        """Return the scalar value of the named option, or ``default``."""
        option = self._options.get(name)
        return default if option is None or option.value is None else option.value

    def __getitem__(self, name: str) -> RequestOption:
        return self._options[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._options)

    def __len__(self) -> int:
        return len(self._options)

    def __repr__(self) -> str:
        return f"RequestOptions({list(self._options.values())!r})"


@dataclasses.dataclass(frozen=True, slots=True)
class LimitedRequest:
    """Stable view of a command request handed to validators.

    Attributes:
        id: Identifier of the inbound request.
        command_id: Identifier of the invoked command.
        guild_id: Workspace the request was issued in.
        member: The requester with their permissions.
        options: Options supplied with the request.
        target_message: Message the command acts on (message commands only).
    """

    id: str
    command_id: str
    guild_id: str | None
    member: LimitedMember | None
    options: RequestOptions = dataclasses.field(default_factory=RequestOptions)
    target_message: MessageRef | None = None

    @property
    def sender_id(self) -> str:
        if self.member is None:
            raise InvalidRequestError("Request has no member.")
        return self.member.user.id


def limit_request(request: LimitedRequest) -> LimitedRequest:
    """Default reducer: accept only requests issued by a member of a workspace.

    Raises:
        InvalidRequestError: If the request lacks a workspace id or a member.
    """
    if not request.guild_id or request.member is None:
        raise InvalidRequestError(
            "Command request is missing a workspace id or member; "
            "only requests inside a workspace are supported."
        )
    return request
