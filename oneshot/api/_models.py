"""Account domain models and response envelopes."""

from dataclasses import dataclass, field
from typing import Annotated

from pydantic import Field


@dataclass(frozen=True, slots=True)
class Credential:
    token: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class Record:
    id: int
    email: str
    first_name: str
    last_name: str
    avatar: str


type RecordList = tuple[Record, ...]


# Envelopes — unknown keys are ignored, missing or mistyped ones fail decoding.


@dataclass(frozen=True, slots=True)
class LoginReply:
    token: Annotated[str, Field(min_length=1)]


@dataclass(frozen=True, slots=True)
class UsersPage:
    data: tuple[Record, ...]
