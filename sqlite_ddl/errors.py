"""
Error types raised while reading DDL text.

Both errors derive from SyntaxError so callers that already guard parsing
with ``except SyntaxError`` keep working.
"""

from typing import Optional

from .config import PARSER_DETAILED_ERRORS


class DDLError(SyntaxError):
    """Base class for lexing and parsing failures"""

    def __init__(self, message: str, position: int, line: Optional[int] = None,
                 column: Optional[int] = None):
        self.message = message
        self.position = position  # UTF-8 byte offset into the source
        self.line = line
        self.column = column
        super().__init__(self._format())

    def _format(self) -> str:
        if PARSER_DETAILED_ERRORS and self.line is not None:
            return f"{self.message} at line {self.line}, column {self.column} (offset {self.position})"
        return f"{self.message} at offset {self.position}"


class LexError(DDLError):
    """Malformed token: unterminated literal or a character that starts no token"""

    def __init__(self, message: str, position: int, char: str,
                 line: Optional[int] = None, column: Optional[int] = None):
        self.char = char
        super().__init__(message, position, line, column)


class ParseError(DDLError):
    """Token sequence does not match the CREATE TABLE grammar"""

    def __init__(self, position: int, expected: str, found: str,
                 line: Optional[int] = None, column: Optional[int] = None):
        self.expected = expected
        self.found = found
        super().__init__(f"Expected {expected}, got {found}", position, line, column)
