"""
Unit identifier model.

This module defines the identifiers used to reference game entities from
generated code. Custom entities are identified by a user-chosen uid and get a
derived SCREAMING_SNAKE_CASE constant name; stock entities are identified by
their raw engine code.
"""
# [CTX:PBI-1:1-1:IDS]

import re
from dataclasses import dataclass, field
from enum import Enum

_SEPARATOR_RE = re.compile(r"[\W_]+")


class WrongVariantError(TypeError):
    """Raised when a variant-only accessor is called on the other variant."""


class IdentifierKind(Enum):
    """Identifier variants."""
    UID = "uid"        # Custom entity defined by the map author
    RAWID = "rawid"    # Stock entity referenced by its raw code


def _split_words(chunk: str) -> list[str]:
    """Split an alphanumeric run on case boundaries."""
    words = []
    start = 0
    mode = None

    for index, char in enumerate(chunk):
        next_char = chunk[index + 1] if index + 1 < len(chunk) else ""

        if char.islower():
            next_mode = "lower"
        elif char.isupper():
            next_mode = "upper"
        else:
            next_mode = mode

        if next_mode == "lower" and next_char.isupper():
            # fooBar -> foo | Bar
            words.append(chunk[start:index + 1])
            start = index + 1
            mode = None
        elif mode == "upper" and char.isupper() and next_char.islower():
            # HTTPServer -> HTTP | Server
            words.append(chunk[start:index])
            start = index
            mode = next_mode
        else:
            mode = next_mode

    words.append(chunk[start:])
    return [word for word in words if word]


def to_shouty_snake_case(text: str) -> str:
    """
    Convert arbitrary text to SCREAMING_SNAKE_CASE.

    Words are separated by runs of non-alphanumeric characters and by case
    changes inside alphanumeric runs.

    Args:
        text: Input text (any string, including empty)

    Returns:
        Uppercased words joined with underscores
    """
    words = []
    for chunk in _SEPARATOR_RE.split(text):
        words.extend(_split_words(chunk))
    return "_".join(word.upper() for word in words)


# [CTX:PBI-1:1-1:IDS] Identifier value type
@dataclass(frozen=True)
class UnitIdentifier:
    """
    Identifier of a custom or stock game entity.

    Equality and hashing only consider the variant and the underlying string;
    the derived constant name is a pure function of the uid.

    Attributes:
        kind: Which variant this identifier is
        value: The uid (custom) or the raw code (stock)
        constant_name: Derived SCREAMING_SNAKE_CASE name, empty for stock ids
    """
    kind: IdentifierKind
    value: str
    constant_name: str = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        constant_name = to_shouty_snake_case(self.value) if self.kind is IdentifierKind.UID else ""
        object.__setattr__(self, "constant_name", constant_name)

    @classmethod
    def new_custom(cls, uid: str) -> "UnitIdentifier":
        """Create an identifier for a custom entity."""
        return cls(IdentifierKind.UID, uid)

    @classmethod
    def new_stock(cls, rawid: str) -> "UnitIdentifier":
        """Create an identifier for a stock entity."""
        return cls(IdentifierKind.RAWID, rawid)

    def is_uid(self) -> bool:
        return self.kind is IdentifierKind.UID

    def is_rawid(self) -> bool:
        return self.kind is IdentifierKind.RAWID

    def uid(self) -> str:
        """
        Return the uid of a custom identifier.

        Raises:
            WrongVariantError: If this is a stock identifier
        """
        if not self.is_uid():
            raise WrongVariantError("cannot call .uid() on non-UID variant")
        return self.value

    def rawid(self) -> str:
        """
        Return the raw code of a stock identifier.

        Raises:
            WrongVariantError: If this is a custom identifier
        """
        if not self.is_rawid():
            raise WrongVariantError("cannot call .rawid() on non-RawID variant")
        return self.value

    def constant(self) -> str:
        """
        Textual form to embed in generated code.

        Returns:
            The constant name for custom ids, a single-quoted raw code for stock ids
        """
        if self.is_uid():
            return self.constant_name
        return f"'{self.value}'"
