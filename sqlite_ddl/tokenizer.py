"""
DDL Tokenizer - lexical analysis of CREATE TABLE text

Converts SQL text into a lazy, restartable stream of tokens: keywords,
identifiers, quoted identifiers, literals, operators and punctuation,
terminated by a single EOF token.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Iterator, List

from .config import ERROR_EXCERPT_LENGTH
from .errors import LexError


class TokenType(Enum):
    """Token types for DDL lexical analysis"""
    # Keywords
    ABORT = auto()
    ACTION = auto()
    ASC = auto()
    AUTOINCREMENT = auto()
    CASCADE = auto()
    CHECK = auto()
    COLLATE = auto()
    CONFLICT = auto()
    CONSTRAINT = auto()
    CREATE = auto()
    CURRENT_DATE = auto()
    CURRENT_TIME = auto()
    CURRENT_TIMESTAMP = auto()
    DEFAULT = auto()
    DEFERRABLE = auto()
    DEFERRED = auto()
    DELETE = auto()
    DESC = auto()
    EXISTS = auto()
    FAIL = auto()
    FOREIGN = auto()
    IF = auto()
    IGNORE = auto()
    IMMEDIATE = auto()
    INITIALLY = auto()
    KEY = auto()
    MATCH = auto()
    NO = auto()
    NOT = auto()
    NULL = auto()
    ON = auto()
    PRIMARY = auto()
    REFERENCES = auto()
    REPLACE = auto()
    RESTRICT = auto()
    ROLLBACK = auto()
    SET = auto()
    TABLE = auto()
    TEMP = auto()
    TEMPORARY = auto()
    UNIQUE = auto()
    UPDATE = auto()
    WITHOUT = auto()

    # Literals
    NUMBER = auto()
    STRING = auto()
    BLOB = auto()

    # Identifiers
    IDENTIFIER = auto()
    QUOTED_IDENTIFIER = auto()

    # Expression operators (only meaningful inside CHECK / DEFAULT expressions)
    OPERATOR = auto()

    # Punctuation
    LPAREN = auto()      # (
    RPAREN = auto()      # )
    COMMA = auto()       # ,
    SEMICOLON = auto()   # ;
    DOT = auto()         # .

    # Special
    EOF = auto()


# Keyword text -> token type (case-insensitive lookup on the upper-cased word)
KEYWORDS = {
    tt.name: tt for tt in TokenType
    if TokenType.ABORT.value <= tt.value <= TokenType.WITHOUT.value
}

# Keywords SQLite accepts as ordinary names (its %fallback ID list)
FALLBACK_KEYWORDS = frozenset({
    TokenType.ABORT, TokenType.ACTION, TokenType.ASC, TokenType.CASCADE,
    TokenType.CONFLICT, TokenType.DEFERRED, TokenType.DESC, TokenType.FAIL,
    TokenType.IF, TokenType.IGNORE, TokenType.IMMEDIATE, TokenType.INITIALLY,
    TokenType.KEY, TokenType.MATCH, TokenType.NO, TokenType.REPLACE,
    TokenType.RESTRICT, TokenType.ROLLBACK, TokenType.TEMP, TokenType.WITHOUT,
})

# Closing delimiter for each identifier quoting style
IDENTIFIER_QUOTES = {'"': '"', '`': '`', '[': ']'}

TWO_CHAR_OPERATORS = ('||', '<=', '>=', '==', '!=', '<>', '<<', '>>', '->')
ONE_CHAR_OPERATORS = '+-*/%<>=&|~'

HEX_DIGITS = '0123456789abcdefABCDEF'

PUNCTUATION = {
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    ',': TokenType.COMMA,
    ';': TokenType.SEMICOLON,
}


@dataclass
class Token:
    """Represents a single token in DDL input"""
    type: TokenType
    value: Any
    position: int  # Character index of the first character
    end: int       # Character index just past the last character
    offset: int    # UTF-8 byte offset of the first character
    line: int      # Line number (for error messages)
    column: int    # Column number (for error messages)

    def __repr__(self):
        return f"Token({self.type.name}, {self.value!r}, pos={self.position})"

    def describe(self) -> str:
        """Short human-readable form for error messages"""
        if self.type == TokenType.EOF:
            return 'end of input'
        text = str(self.value)
        if len(text) > ERROR_EXCERPT_LENGTH:
            text = text[:ERROR_EXCERPT_LENGTH] + '...'
        if self.type in (TokenType.IDENTIFIER, TokenType.QUOTED_IDENTIFIER):
            return f"identifier '{text}'"
        if self.type == TokenType.STRING:
            return f"string '{text}'"
        if self.type in KEYWORDS.values():
            return self.type.name
        return f"'{text}'"


def _is_identifier_start(char: str) -> bool:
    return char.isalpha() or char == '_' or ord(char) > 127


def _is_identifier_char(char: str) -> bool:
    return char.isalnum() or char in '_$' or ord(char) > 127


class Tokenizer:
    """Lexical analyzer - converts DDL text to tokens"""

    def __init__(self, sql: str):
        self.sql = sql
        self._reset()

    def _reset(self):
        self.position = 0
        self.offset = 0
        self.line = 1
        self.column = 1

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens lazily; every new iteration starts from the beginning"""
        self._reset()
        while True:
            token = self._next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def tokenize(self) -> List[Token]:
        """Convert DDL string to list of tokens"""
        return list(self)

    # ========================================================================
    # Character navigation
    # ========================================================================

    def _current_char(self) -> str:
        """Get current character"""
        if self.position >= len(self.sql):
            return '\0'
        return self.sql[self.position]

    def _peek(self, offset: int = 1) -> str:
        """Look ahead at next character"""
        pos = self.position + offset
        if pos >= len(self.sql):
            return '\0'
        return self.sql[pos]

    def _at_end(self) -> bool:
        return self.position >= len(self.sql)

    def _advance(self) -> str:
        """Move to next character"""
        char = self._current_char()
        self.position += 1
        self.offset += len(char.encode('utf-8'))
        if char == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def _error(self, message: str, start: tuple) -> LexError:
        position, offset, line, column = start
        char = self.sql[position] if position < len(self.sql) else ''
        return LexError(message, offset, char, line, column)

    # ========================================================================
    # Token readers
    # ========================================================================

    def _next_token(self) -> Token:
        self._skip_whitespace_and_comments()
        start = (self.position, self.offset, self.line, self.column)

        if self._at_end():
            return self._make(TokenType.EOF, None, start)

        char = self._current_char()

        if char in 'xX' and self._peek() == "'":
            return self._read_blob(start)

        if _is_identifier_start(char):
            return self._read_identifier_or_keyword(start)

        if char.isdigit() or (char == '.' and self._peek().isdigit()):
            return self._read_number(start)

        if char == "'":
            value = self._read_quoted("'", start, 'string literal')
            return self._make(TokenType.STRING, value, start)

        if char in IDENTIFIER_QUOTES:
            value = self._read_quoted(IDENTIFIER_QUOTES[char], start, 'quoted identifier')
            return self._make(TokenType.QUOTED_IDENTIFIER, value, start)

        if char == '.':
            self._advance()
            return self._make(TokenType.DOT, '.', start)

        if char in PUNCTUATION:
            self._advance()
            return self._make(PUNCTUATION[char], char, start)

        pair = char + self._peek()
        if pair in TWO_CHAR_OPERATORS:
            self._advance()
            self._advance()
            return self._make(TokenType.OPERATOR, pair, start)
        if char in ONE_CHAR_OPERATORS:
            self._advance()
            return self._make(TokenType.OPERATOR, char, start)

        raise self._error(f"Unexpected character {char!r}", start)

    def _make(self, token_type: TokenType, value: Any, start: tuple) -> Token:
        position, offset, line, column = start
        return Token(token_type, value, position, self.position, offset, line, column)

    def _skip_whitespace_and_comments(self):
        while not self._at_end():
            char = self._current_char()
            if char.isspace():
                self._advance()
            elif char == '-' and self._peek() == '-':
                while not self._at_end() and self._current_char() != '\n':
                    self._advance()
            elif char == '/' and self._peek() == '*':
                self._advance()
                self._advance()
                # An unterminated block comment runs to the end of input
                while not self._at_end() and not (self._current_char() == '*' and self._peek() == '/'):
                    self._advance()
                if not self._at_end():
                    self._advance()
                    self._advance()
            else:
                return

    def _read_quoted(self, closing: str, start: tuple, what: str) -> str:
        """Read text up to the closing delimiter; a doubled delimiter is an escape"""
        self._advance()  # Skip opening delimiter
        value = ''
        while True:
            if self._at_end():
                raise self._error(f"Unterminated {what}", start)
            char = self._advance()
            if char == closing:
                if closing != ']' and self._current_char() == closing:
                    value += self._advance()
                    continue
                return value
            value += char

    def _read_blob(self, start: tuple) -> Token:
        """Read X'hex' blob literal"""
        self._advance()  # Skip X
        digits = self._read_quoted("'", start, 'blob literal')
        if len(digits) % 2 or any(c not in HEX_DIGITS for c in digits):
            raise self._error("Malformed blob literal", start)
        return self._make(TokenType.BLOB, digits, start)

    def _read_number(self, start: tuple) -> Token:
        """Read integer, real or hex numeral; the token value is the text as written"""
        if self._current_char() == '0' and self._peek() in 'xX':
            self._advance()
            self._advance()
            if self._current_char() not in HEX_DIGITS:
                raise self._error("Malformed number", start)
            while self._current_char() in HEX_DIGITS:
                self._advance()
        else:
            while self._current_char().isdigit():
                self._advance()
            if self._current_char() == '.':
                self._advance()
                while self._current_char().isdigit():
                    self._advance()
            if self._current_char() in 'eE':
                sign = 1 if self._peek() in '+-' else 0
                if self._peek(1 + sign).isdigit():
                    for _ in range(1 + sign):
                        self._advance()
                    while self._current_char().isdigit():
                        self._advance()

        if _is_identifier_char(self._current_char()):
            raise self._error("Malformed number", start)

        text = self.sql[start[0]:self.position]
        return self._make(TokenType.NUMBER, text, start)

    def _read_identifier_or_keyword(self, start: tuple) -> Token:
        """Read identifier or keyword"""
        while not self._at_end() and _is_identifier_char(self._current_char()):
            self._advance()

        value = self.sql[start[0]:self.position]
        token_type = KEYWORDS.get(value.upper(), TokenType.IDENTIFIER)
        return self._make(token_type, value, start)
