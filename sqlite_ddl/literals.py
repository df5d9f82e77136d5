"""
Literal values and closed enumerations shared by the DDL model.

This module provides:
- LiteralValue: tagged SQL literal used by DEFAULT constraints
- ConflictResolution: ON CONFLICT dispositions
- ForeignKeyTrigger / ActionDisposition: foreign-key referential actions
- SortOrder / InitialTiming: small keyword enums used by constraints
"""

from dataclasses import dataclass
from enum import Enum, auto


class LiteralType(Enum):
    """Kinds of literal that may appear after DEFAULT"""
    NULL = auto()
    INTEGER = auto()
    REAL = auto()
    STRING = auto()
    BLOB = auto()
    CURRENT_TIME = auto()
    CURRENT_DATE = auto()
    CURRENT_TIMESTAMP = auto()
    EXPRESSION = auto()  # DEFAULT ( expr ), kept as raw text


@dataclass(frozen=True)
class LiteralValue:
    """
    SQL literal.

    ``value`` holds the payload as text. Strings are stored without their
    delimiting quotes and with '' escapes already collapsed; blobs store only
    the hex digits; numbers keep the numeral (and sign) exactly as written.
    """
    type: LiteralType
    value: str = ''

    @classmethod
    def null(cls) -> 'LiteralValue':
        return cls(LiteralType.NULL)

    @classmethod
    def string(cls, text: str) -> 'LiteralValue':
        return cls(LiteralType.STRING, text)

    @classmethod
    def number(cls, numeral: str) -> 'LiteralValue':
        """Classify a numeral as INTEGER or REAL the way SQLite does"""
        digits = numeral.lstrip('+-')
        if digits[:2].lower() == '0x':
            return cls(LiteralType.INTEGER, numeral)
        if '.' in digits or 'e' in digits.lower():
            return cls(LiteralType.REAL, numeral)
        return cls(LiteralType.INTEGER, numeral)

    @classmethod
    def blob(cls, hex_digits: str) -> 'LiteralValue':
        return cls(LiteralType.BLOB, hex_digits)

    @classmethod
    def expression(cls, text: str) -> 'LiteralValue':
        return cls(LiteralType.EXPRESSION, text)


# Keyword spelling of the current-time literals
CURRENT_TIME_KEYWORDS = {
    LiteralType.CURRENT_TIME: 'CURRENT_TIME',
    LiteralType.CURRENT_DATE: 'CURRENT_DATE',
    LiteralType.CURRENT_TIMESTAMP: 'CURRENT_TIMESTAMP',
}


class ConflictResolution(Enum):
    """ON CONFLICT disposition. NONE means the clause is absent."""
    NONE = ''
    ROLLBACK = 'ROLLBACK'
    ABORT = 'ABORT'
    FAIL = 'FAIL'
    IGNORE = 'IGNORE'
    REPLACE = 'REPLACE'


class ForeignKeyTrigger(Enum):
    """Event a referential action is attached to"""
    ON_DELETE = 'ON DELETE'
    ON_UPDATE = 'ON UPDATE'
    MATCH = 'MATCH'


class ActionDisposition(Enum):
    """What happens to referencing rows when the referenced row changes"""
    NO_ACTION = 'NO ACTION'
    SET_NULL = 'SET NULL'
    SET_DEFAULT = 'SET DEFAULT'
    CASCADE = 'CASCADE'
    RESTRICT = 'RESTRICT'


class SortOrder(Enum):
    ASC = 'ASC'
    DESC = 'DESC'


class InitialTiming(Enum):
    """INITIALLY DEFERRED / INITIALLY IMMEDIATE of a deferrable foreign key"""
    DEFERRED = 'DEFERRED'
    IMMEDIATE = 'IMMEDIATE'
