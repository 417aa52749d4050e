"""
Sample classes used by the walker, CLI and API tests.

Kept in their own module so they can be resolved by "sample_types:Name".
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, ClassVar, Final, Protocol, final

from typereflect.encoder import Int64
from typereflect.walker import attributes


@dataclass
class Obsolete:
    message: str = ""
    is_error: bool = False


@dataclass
class Range:
    low: int
    high: int


class Color(Enum):
    RED = 1
    GREEN = 2


class Named(Protocol):
    def get_name(self) -> str:
        ...


@attributes(Obsolete("Use Employee"))
class Person:
    MAX_AGE: Final[int] = 150
    species: ClassVar[str] = "human"
    age: Annotated[int, Range(0, 150)]
    _nickname: str = "bobby"
    count = 0

    def __init__(self, name: str = "Bob", age: int = 30):
        self.name = name
        self.age = age
        self._title = "Mr"

    @property
    def upper_name(self) -> str:
        return self.name.upper()

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, value: str) -> None:
        self._title = value

    def get_name(self) -> str:
        return self.name

    def greet(self, other: str, punctuation: str = "!") -> str:
        return f"Hello {other}{punctuation}"

    @staticmethod
    def default_age() -> int:
        return 30

    def explode(self) -> int:
        raise RuntimeError("boom")

    def __secret(self) -> None:
        pass


@final
class Sealed:
    pass


class Shape(ABC):
    @abstractmethod
    def area(self) -> float:
        ...


@dataclass(frozen=True)
class Point:
    x: float = 0.0
    y: float = 0.0


class Base:
    pass


class Derived(Base, Named):
    def get_name(self) -> str:
        return "derived"


class Counter:
    total: Int64 = Int64(42)

    def __init__(self):
        raise RuntimeError("cannot construct")


class Tally:
    calls = 0

    @staticmethod
    def bump() -> int:
        Tally.calls += 1
        return Tally.calls


class Quitter:
    def shutdown(self) -> int:
        raise SystemExit(3)
