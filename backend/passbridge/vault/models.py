"""Retrieval request and result types."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class Property(str, Enum):
    """Which field of a vault entry to retrieve."""
    USERNAME = "username"
    PASSWORD = "password"
    TOTP = "totp"

    @classmethod
    def parse(cls, value: Union[str, "Property"]) -> "Property":
        """Accept a member, its value, or a button label such as "TOTP"."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown property: {value!r}") from None

    @property
    def label(self) -> str:
        return "TOTP" if self is Property.TOTP else self.value.capitalize()


@dataclass(frozen=True)
class RetrievalRequest:
    """One user-triggered fetch. The session token is a snapshot taken at request time."""
    property: Property
    source: str
    session_token: str = field(repr=False)
    binary_path: str
    timeout_ms: int

    def __post_init__(self):
        object.__setattr__(self, "property", Property.parse(self.property))
        if self.timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive, got {self.timeout_ms}")

    def argv(self) -> list[str]:
        """Command line for the CLI. The token is a plain process argument."""
        return [
            self.binary_path,
            "--raw",
            "--session",
            self.session_token,
            "get",
            self.property.value,
            self.source,
        ]


@dataclass(frozen=True)
class Secret:
    value: str = field(repr=False)


@dataclass(frozen=True)
class Failure:
    reason: str


RetrievalResult = Union[Secret, Failure]
