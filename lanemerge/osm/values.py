"""
Typed OSM tag values

OpenStreetMap stores every tag value as a string. The containers in this
module import those strings into typed values and write them back out in
their canonical OSM form:

- OsmBoolean: "yes" / "no"
- OsmUnsignedInteger: "0", "1", "2", ...
- OsmString: any string
- OsmArray: "a;b;c" (delimiter configurable)
- OsmDoubleArray: "a;b|c||d" (rows split on "|", cells on ";")

OsmMaybe distinguishes a tag that is absent from a tag that is present.
"""

import re
from typing import Any, Callable, Generic, Iterator, List, Optional, Type, TypeVar, Union

from ..errors import InvalidTagValueError, UnsetValueError

T = TypeVar("T", bound="OsmValue")
Out = TypeVar("Out", bound="OsmValue")

_UINT_PATTERN = re.compile(r"\d+", re.ASCII)


class OsmValue:
    """
    Base container for a value with an OpenStreetMap string representation

    Subclasses implement parse() (string -> inner value) and to_string()
    (inner value -> canonical string).
    """

    type_name = "OsmValue"

    def __init__(self, value: Any):
        self.inner = value

    def get(self) -> Any:
        """Retrieve the underlying value"""
        return self.inner

    def maybe(self) -> "OsmMaybe":
        """Wrap this value in a set OsmMaybe"""
        return OsmMaybe(self)

    def eq(self, other: Any) -> bool:
        """
        Compare against another container or a raw inner value

        Args:
            other: Either an OsmValue or a value of the inner type

        Returns:
            Whether both hold the same value
        """
        if isinstance(other, OsmValue):
            return self.inner == other.inner
        return self.inner == other

    def to_string(self) -> str:
        raise NotImplementedError

    @classmethod
    def parse(cls, value: str) -> "OsmValue":
        """
        Import an OSM string into this container type

        Raises:
            InvalidTagValueError: If the string is not valid for this type
        """
        return cls(value)

    @classmethod
    def from_string(cls, value: Optional[str]) -> "OsmMaybe":
        """Import an optional OSM string; None gives an unset OsmMaybe"""
        if value is None:
            return OsmMaybe.unset()
        return cls.parse(value).maybe()

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_string()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OsmValue):
            return NotImplemented
        return type(self) is type(other) and self.inner == other.inner

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.inner))


class OsmBoolean(OsmValue):
    """OSM boolean: "yes" is True, "no" is False"""

    type_name = "OsmBoolean"

    TRUE: "OsmBoolean"
    FALSE: "OsmBoolean"

    def __init__(self, value: Union[bool, str]):
        if isinstance(value, bool):
            super().__init__(value)
        elif value == "yes":
            super().__init__(True)
        elif value == "no":
            super().__init__(False)
        else:
            raise InvalidTagValueError(self.type_name, value)

    def to_string(self) -> str:
        return "yes" if self.inner else "no"


OsmBoolean.TRUE = OsmBoolean(True)
OsmBoolean.FALSE = OsmBoolean(False)


class OsmUnsignedInteger(OsmValue):
    """
    OSM non-negative integer

    Arithmetic never modifies the operands; every operation returns a new
    container. A result that is not a non-negative integer raises
    InvalidTagValueError.
    """

    type_name = "OsmUnsignedInteger"

    def __init__(self, value: Union[int, str]):
        if isinstance(value, bool):
            raise InvalidTagValueError(self.type_name, value)
        if isinstance(value, int):
            if value < 0:
                raise InvalidTagValueError(self.type_name, value)
            super().__init__(value)
        elif isinstance(value, str) and _UINT_PATTERN.fullmatch(value.strip()):
            super().__init__(int(value.strip()))
        else:
            raise InvalidTagValueError(self.type_name, value)

    def to_string(self) -> str:
        return str(self.inner)

    @staticmethod
    def _operand(other: Union["OsmUnsignedInteger", int]) -> int:
        return other.inner if isinstance(other, OsmUnsignedInteger) else other

    def add(self, other: Union["OsmUnsignedInteger", int]) -> "OsmUnsignedInteger":
        return OsmUnsignedInteger(self.inner + self._operand(other))

    def subtract(self, other: Union["OsmUnsignedInteger", int]) -> "OsmUnsignedInteger":
        return OsmUnsignedInteger(self.inner - self._operand(other))

    def multiply(self, other: Union["OsmUnsignedInteger", int]) -> "OsmUnsignedInteger":
        return OsmUnsignedInteger(self.inner * self._operand(other))

    def divide(self, other: Union["OsmUnsignedInteger", int]) -> "OsmUnsignedInteger":
        divisor = self._operand(other)
        quotient, remainder = divmod(self.inner, divisor)
        if remainder:
            raise InvalidTagValueError(self.type_name, f"{self.inner}/{divisor}")
        return OsmUnsignedInteger(quotient)

    def mod(self, other: Union["OsmUnsignedInteger", int]) -> "OsmUnsignedInteger":
        return OsmUnsignedInteger(self.inner % self._operand(other))


class OsmString(OsmValue):
    """OSM free-form string"""

    type_name = "OsmString"

    def __init__(self, value: str):
        if not isinstance(value, str):
            raise InvalidTagValueError(self.type_name, value)
        super().__init__(value)

    def to_string(self) -> str:
        return self.inner


class OsmArray(OsmValue, Generic[T]):
    """
    OSM array of values separated by a delimiter (";" by default)

    Every element is an OsmValue of the same inner type.
    """

    type_name = "OsmArray"
    __hash__ = None  # mutable

    def __init__(
        self,
        value: Union[List[T], str],
        inner_type: Type[T] = OsmString,
        delimiter: str = ";"
    ):
        self.inner_type = inner_type
        self.delimiter = delimiter
        if isinstance(value, str):
            super().__init__([inner_type.parse(part) for part in value.split(delimiter)])
        else:
            super().__init__(list(value))

    @classmethod
    def from_string(
        cls,
        value: Optional[str],
        inner_type: Type[T] = OsmString,
        delimiter: str = ";"
    ) -> "OsmMaybe":
        if value is None:
            return OsmMaybe.unset()
        return cls(value, inner_type, delimiter).maybe()

    @property
    def length(self) -> int:
        return len(self.inner)

    def __len__(self) -> int:
        return len(self.inner)

    def __iter__(self) -> Iterator[T]:
        return iter(self.inner)

    def __getitem__(self, index: int) -> T:
        return self.inner[index]

    def push(self, value: T) -> None:
        """Append a value to the end of this array"""
        self.inner.append(value)

    def map(self, map_fn: Callable[[T], Out], inner_type: Type[Out]) -> "OsmArray[Out]":
        """
        Map every element into a new array

        This array is left untouched.

        Args:
            map_fn: Function applied to each element
            inner_type: The element type of the new array

        Returns:
            New OsmArray holding the mapped elements
        """
        return OsmArray([map_fn(v) for v in self.inner], inner_type, self.delimiter)

    def fill(self, creator: Union[Callable[[], T], T]) -> None:
        """Overwrite every slot with a value, or with the result of a factory"""
        for i in range(len(self.inner)):
            self.inner[i] = creator() if callable(creator) else creator

    @classmethod
    def of_length(cls, length: int, value: str, inner_type: Type[T] = OsmString) -> "OsmArray[T]":
        """
        Create an array of a fixed length

        Args:
            length: Number of elements
            value: OSM string for every element
            inner_type: Element type
        """
        return cls([inner_type.parse(value) for _ in range(length)], inner_type)

    def eq(self, other: Any) -> bool:
        if isinstance(other, OsmValue):
            return self == other
        return [v.get() for v in self.inner] == list(other)

    def to_string(self) -> str:
        return self.delimiter.join(v.to_string() for v in self.inner)


class OsmDoubleArray(OsmValue, Generic[T]):
    """
    OSM two-dimensional array, e.g. turn:lanes

    Rows are split on the outer delimiter ("|") and each row on the inner
    delimiter (";"), so "left|through;right" is [[left], [through, right]].
    An empty string is one row holding one empty cell.
    """

    type_name = "OsmDoubleArray"
    __hash__ = None  # mutable

    def __init__(
        self,
        value: Union[List[OsmArray[T]], str],
        inner_type: Type[T] = OsmString,
        inner_delimiter: str = ";",
        outer_delimiter: str = "|"
    ):
        self.inner_type = inner_type
        self.inner_delimiter = inner_delimiter
        self.outer_delimiter = outer_delimiter
        if isinstance(value, str):
            super().__init__([
                OsmArray(row, inner_type, inner_delimiter)
                for row in value.split(outer_delimiter)
            ])
        else:
            super().__init__(list(value))

    @classmethod
    def from_string(
        cls,
        value: Optional[str],
        inner_type: Type[T] = OsmString,
        inner_delimiter: str = ";",
        outer_delimiter: str = "|"
    ) -> "OsmMaybe":
        if value is None:
            return OsmMaybe.unset()
        return cls(value, inner_type, inner_delimiter, outer_delimiter).maybe()

    @classmethod
    def empty(cls, inner_type: Type[T] = OsmString) -> "OsmDoubleArray[T]":
        """Create a double-array with no rows"""
        return cls([], inner_type)

    @property
    def length(self) -> int:
        return len(self.inner)

    def __len__(self) -> int:
        return len(self.inner)

    def __iter__(self) -> Iterator[OsmArray[T]]:
        return iter(self.inner)

    def __getitem__(self, index: int) -> OsmArray[T]:
        return self.inner[index]

    def get_both(self, map_fn: Callable[[T], Any]) -> List[List[Any]]:
        """Retrieve the rows as plain lists, mapping every cell"""
        return [[map_fn(v) for v in row] for row in self.inner]

    def push(self, value: OsmArray[T]) -> None:
        self.inner.append(value)

    def map(
        self,
        map_fn: Callable[[OsmArray[T]], OsmArray[Out]],
        inner_type: Type[Out]
    ) -> "OsmDoubleArray[Out]":
        """Map every row into a new double-array, leaving this one untouched"""
        return OsmDoubleArray(
            [map_fn(row) for row in self.inner],
            inner_type,
            self.inner_delimiter,
            self.outer_delimiter
        )

    def fill(self, creator: Union[Callable[[], OsmArray[T]], OsmArray[T]]) -> None:
        for i in range(len(self.inner)):
            self.inner[i] = creator() if callable(creator) else creator

    @classmethod
    def of_length(
        cls,
        length: int,
        value: str,
        inner_type: Type[T] = OsmString
    ) -> "OsmDoubleArray[T]":
        """Create a double-array of `length` rows, each holding a single `value`"""
        return cls([OsmArray.of_length(1, value, inner_type) for _ in range(length)], inner_type)

    def eq(self, other: Any) -> bool:
        if isinstance(other, OsmValue):
            return self == other
        return self.get_both(lambda v: v.get()) == [list(row) for row in other]

    def to_string(self) -> str:
        return self.outer_delimiter.join(
            self.inner_delimiter.join(v.to_string() for v in row)
            for row in self.inner
        )


class OsmMaybe(Generic[T]):
    """
    A tag value that may or may not be present

    Always check is_set() before get(); unwrapping an unset value is a
    programming error and raises UnsetValueError.
    """

    __slots__ = ("_inner",)

    def __init__(self, value: Optional[T] = None):
        self._inner = value

    def is_set(self) -> bool:
        return self._inner is not None

    def get(self) -> T:
        if self._inner is None:
            raise UnsetValueError("OsmMaybe.get() called on an unset value")
        return self._inner

    def get_or(self, default: Optional[T] = None) -> Optional[T]:
        return default if self._inner is None else self._inner

    @classmethod
    def unset(cls) -> "OsmMaybe":
        return cls(None)

    @classmethod
    def of(cls, value: T) -> "OsmMaybe[T]":
        return cls(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OsmMaybe):
            return NotImplemented
        return self._inner == other._inner

    def __repr__(self) -> str:
        if self._inner is None:
            return "OsmMaybe.unset()"
        return f"OsmMaybe({self._inner!r})"
