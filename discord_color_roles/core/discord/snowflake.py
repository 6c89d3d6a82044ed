"""Discord Snowflake type - a hashable, ordered 64-bit ID."""

from __future__ import annotations

from functools import total_ordering
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema


@total_ordering
class Snowflake:
    """Immutable, hashable Discord snowflake ID."""

    __slots__ = ("_value",)

    def __init__(self, value: int) -> None:
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    @classmethod
    def try_parse(cls, value: str | int | None) -> Snowflake | None:
        """Try to parse a decimal string (or int) as a snowflake."""
        if value is None:
            return None
        if isinstance(value, int):
            return cls(value) if value >= 0 else None

        text = value.strip()
        # isdigit() alone also accepts digits int() rejects, such as "²".
        if not (text.isascii() and text.isdigit()):
            return None
        return cls(int(text))

    @classmethod
    def parse(cls, value: str | int) -> Snowflake:
        """Parse a string as a snowflake, raising on failure."""
        result = cls.try_parse(value)
        if result is None:
            raise ValueError(f"Invalid snowflake: {value!r}")
        return result

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Snowflake):
            return self._value == other._value
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, Snowflake):
            return self._value < other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"Snowflake({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._pydantic_validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda v: str(v._value), info_arg=False
            ),
        )

    @classmethod
    def _pydantic_validate(cls, value: Any) -> Snowflake:
        if isinstance(value, Snowflake):
            return value
        if isinstance(value, (int, str)):
            return cls.parse(value)
        raise ValueError(f"Cannot convert {type(value)} to Snowflake")

    ZERO: Snowflake


Snowflake.ZERO = Snowflake(0)
