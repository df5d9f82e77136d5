"""
sqlite_ddl - SQLite CREATE TABLE front end

Parses CREATE TABLE text into a structured model and renders the model
back into executable DDL.
"""

__version__ = '0.1.0'

from sqlite_ddl.errors import DDLError, LexError, ParseError
from sqlite_ddl.literals import (
    LiteralType, LiteralValue, ConflictResolution, ForeignKeyTrigger,
    ActionDisposition, SortOrder, InitialTiming
)
from sqlite_ddl.constraints import (
    ForeignKeyAction, ForeignKeyClause, ColumnConstraint, ColumnConstraintKind,
    PrimaryKeyColumnConstraint, NotNullColumnConstraint, UniqueColumnConstraint,
    CheckColumnConstraint, DefaultColumnConstraint, CollateColumnConstraint,
    ForeignKeyColumnConstraint, TableConstraint, PrimaryKeyTableConstraint,
    UniqueTableConstraint, CheckTableConstraint, ForeignKeyTableConstraint, IndexedColumn
)
from sqlite_ddl.schema import ColumnDef, TableDef
from sqlite_ddl.tokenizer import Tokenizer, Token, TokenType
from sqlite_ddl.parser import Parser, parse_table
from sqlite_ddl.serializer import serialize_table, quote_identifier

__all__ = [
    'DDLError', 'LexError', 'ParseError',
    'LiteralType', 'LiteralValue', 'ConflictResolution', 'ForeignKeyTrigger',
    'ActionDisposition', 'SortOrder', 'InitialTiming',
    'ForeignKeyAction', 'ForeignKeyClause', 'ColumnConstraint', 'ColumnConstraintKind',
    'PrimaryKeyColumnConstraint', 'NotNullColumnConstraint', 'UniqueColumnConstraint',
    'CheckColumnConstraint', 'DefaultColumnConstraint', 'CollateColumnConstraint',
    'ForeignKeyColumnConstraint', 'TableConstraint', 'PrimaryKeyTableConstraint',
    'UniqueTableConstraint', 'CheckTableConstraint', 'ForeignKeyTableConstraint', 'IndexedColumn',
    'ColumnDef', 'TableDef',
    'Tokenizer', 'Token', 'TokenType',
    'Parser', 'parse_table',
    'serialize_table', 'quote_identifier',
]
