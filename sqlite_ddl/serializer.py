"""
DDL Serializer - renders a TableDef back into executable CREATE TABLE text

Every renderer is a pure function of its argument. Output is canonical:
keywords upper-case, identifiers quoted only when needed, one column or
table constraint per line.
"""

import re
from typing import List

from .config import INDENT, IDENTIFIER_QUOTE, COLUMN_LIST_SEPARATOR
from .constraints import (
    ForeignKeyAction, ForeignKeyClause, ColumnConstraint, TableConstraint, IndexedColumn,
    PrimaryKeyColumnConstraint, NotNullColumnConstraint, UniqueColumnConstraint,
    CheckColumnConstraint, DefaultColumnConstraint, CollateColumnConstraint,
    ForeignKeyColumnConstraint, PrimaryKeyTableConstraint, UniqueTableConstraint,
    CheckTableConstraint, ForeignKeyTableConstraint
)
from .literals import (
    LiteralType, LiteralValue, ConflictResolution, ForeignKeyTrigger,
    CURRENT_TIME_KEYWORDS
)
from .schema import ColumnDef, TableDef
from .tokenizer import KEYWORDS


# Every SQLite keyword; a bare identifier spelled like one must be quoted
SQLITE_KEYWORDS = frozenset("""
    ABORT ACTION ADD AFTER ALL ALTER ALWAYS ANALYZE AND AS ASC ATTACH
    AUTOINCREMENT BEFORE BEGIN BETWEEN BY CASCADE CASE CAST CHECK COLLATE
    COLUMN COMMIT CONFLICT CONSTRAINT CREATE CROSS CURRENT CURRENT_DATE
    CURRENT_TIME CURRENT_TIMESTAMP DATABASE DEFAULT DEFERRABLE DEFERRED DELETE
    DESC DETACH DISTINCT DO DROP EACH ELSE END ESCAPE EXCEPT EXCLUDE EXCLUSIVE
    EXISTS EXPLAIN FAIL FILTER FIRST FOLLOWING FOR FOREIGN FROM FULL GENERATED
    GLOB GROUP GROUPS HAVING IF IGNORE IMMEDIATE IN INDEX INDEXED INITIALLY
    INNER INSERT INSTEAD INTERSECT INTO IS ISNULL JOIN KEY LAST LEFT LIKE LIMIT
    MATCH MATERIALIZED NATURAL NO NOT NOTHING NOTNULL NULL NULLS OF OFFSET ON
    OR ORDER OTHERS OUTER OVER PARTITION PLAN PRAGMA PRECEDING PRIMARY QUERY
    RAISE RANGE RECURSIVE REFERENCES REGEXP REINDEX RELEASE RENAME REPLACE
    RESTRICT RETURNING RIGHT ROLLBACK ROW ROWS SAVEPOINT SELECT SET TABLE TEMP
    TEMPORARY THEN TIES TO TRANSACTION TRIGGER UNBOUNDED UNION UNIQUE UPDATE
    USING VACUUM VALUES VIEW VIRTUAL WHEN WHERE WINDOW WITH WITHOUT
""".split())

BARE_IDENTIFIER = re.compile(r'[A-Za-z_][A-Za-z0-9_$]*')


def quote_identifier(name: str) -> str:
    """Return name unchanged if it is a plain, non-keyword identifier, else quoted"""
    if BARE_IDENTIFIER.fullmatch(name) and name.upper() not in SQLITE_KEYWORDS:
        return name
    return _quote(name)


def _quote(name: str) -> str:
    escaped = name.replace(IDENTIFIER_QUOTE, IDENTIFIER_QUOTE * 2)
    return f"{IDENTIFIER_QUOTE}{escaped}{IDENTIFIER_QUOTE}"


def quote_type_word(word: str) -> str:
    """Quote a declared-type word unless it reads back as a plain identifier"""
    if BARE_IDENTIFIER.fullmatch(word) and word.upper() not in KEYWORDS:
        return word
    return _quote(word)


def render_type_name(column: ColumnDef) -> str:
    """Declared type; parsed columns are rebuilt word by word so each word re-lexes as one"""
    if not column.type_words:
        return column.type
    sql = ' '.join(quote_type_word(word) for word in column.type_words)
    if column.type_size:
        sql += '(' + ', '.join(column.type_size) + ')'
    return sql


def render_name_list(names: List[str]) -> str:
    return '(' + COLUMN_LIST_SEPARATOR.join(quote_identifier(n) for n in names) + ')'


def render_indexed_columns(names: List[str], indexed: List[IndexedColumn],
                           autoincrement: bool = False) -> str:
    """(name [COLLATE x] [ASC|DESC], ... [AUTOINCREMENT])"""
    items = []
    for column in indexed or [IndexedColumn(name) for name in names]:
        sql = quote_identifier(column.name)
        if column.collation is not None:
            sql += f" COLLATE {quote_identifier(column.collation)}"
        if column.order is not None:
            sql += f" {column.order.value}"
        items.append(sql)
    if autoincrement and items:
        items[-1] += ' AUTOINCREMENT'
    return '(' + COLUMN_LIST_SEPARATOR.join(items) + ')'


def render_literal(literal: LiteralValue) -> str:
    """Render a literal; embedded single quotes in strings are doubled"""
    if literal.type == LiteralType.STRING:
        return "'" + literal.value.replace("'", "''") + "'"
    if literal.type == LiteralType.BLOB:
        return f"X'{literal.value}'"
    if literal.type == LiteralType.EXPRESSION:
        return f"({literal.value})"
    if literal.type == LiteralType.NULL:
        return 'NULL'
    if literal.type in CURRENT_TIME_KEYWORDS:
        return CURRENT_TIME_KEYWORDS[literal.type]
    return literal.value


def render_conflict(conflict: ConflictResolution) -> str:
    """' ON CONFLICT <KEYWORD>', or nothing for ConflictResolution.NONE"""
    if conflict == ConflictResolution.NONE:
        return ''
    return f" ON CONFLICT {conflict.value}"


def render_foreign_key_action(action: ForeignKeyAction) -> str:
    """Render one action with its leading space"""
    if action.trigger == ForeignKeyTrigger.MATCH:
        return f" MATCH {quote_identifier(action.match_name)}"
    return f" {action.trigger.value} {action.disposition.value}"


def render_foreign_key_clause(clause: ForeignKeyClause) -> str:
    """REFERENCES table [(columns)] [actions] [[NOT] DEFERRABLE [INITIALLY ...]]"""
    sql = f"REFERENCES {quote_identifier(clause.table)}"
    if clause.columns:
        sql += ' ' + render_name_list(clause.columns)
    sql += ''.join(render_foreign_key_action(action) for action in clause.actions)
    if clause.deferrable is not None:
        sql += ' DEFERRABLE' if clause.deferrable else ' NOT DEFERRABLE'
        if clause.initially is not None:
            sql += f" INITIALLY {clause.initially.value}"
    return sql


def _constraint_name_prefix(constraint) -> str:
    if constraint.name:
        return f"CONSTRAINT {quote_identifier(constraint.name)} "
    return ''


def render_column_constraint(constraint: ColumnConstraint) -> str:
    """Render a column constraint variant"""
    prefix = _constraint_name_prefix(constraint)

    if isinstance(constraint, PrimaryKeyColumnConstraint):
        sql = 'PRIMARY KEY'
        if constraint.order is not None:
            sql += f" {constraint.order.value}"
        # SQLite only accepts the conflict clause before AUTOINCREMENT
        sql += render_conflict(constraint.conflict)
        if constraint.autoincrement:
            sql += ' AUTOINCREMENT'
    elif isinstance(constraint, NotNullColumnConstraint):
        sql = 'NOT NULL'
    elif isinstance(constraint, UniqueColumnConstraint):
        sql = 'UNIQUE' + render_conflict(constraint.conflict)
    elif isinstance(constraint, CheckColumnConstraint):
        sql = f"CHECK ({constraint.expression})"
    elif isinstance(constraint, DefaultColumnConstraint):
        sql = f"DEFAULT {render_literal(constraint.value)}"
    elif isinstance(constraint, CollateColumnConstraint):
        sql = f"COLLATE {quote_identifier(constraint.collation)}"
    elif isinstance(constraint, ForeignKeyColumnConstraint):
        sql = render_foreign_key_clause(constraint.clause)
    else:
        raise TypeError(f"Unknown column constraint: {type(constraint).__name__}")

    return prefix + sql


def render_table_constraint(constraint: TableConstraint) -> str:
    """Render a table constraint variant"""
    prefix = _constraint_name_prefix(constraint)

    if isinstance(constraint, PrimaryKeyTableConstraint):
        sql = ('PRIMARY KEY '
               + render_indexed_columns(constraint.columns, constraint.indexed, constraint.autoincrement)
               + render_conflict(constraint.conflict))
    elif isinstance(constraint, UniqueTableConstraint):
        sql = ('UNIQUE ' + render_indexed_columns(constraint.columns, constraint.indexed)
               + render_conflict(constraint.conflict))
    elif isinstance(constraint, CheckTableConstraint):
        sql = f"CHECK ({constraint.expression})"
    elif isinstance(constraint, ForeignKeyTableConstraint):
        sql = ('FOREIGN KEY ' + render_name_list(constraint.columns) + ' '
               + render_foreign_key_clause(constraint.clause))
    else:
        raise TypeError(f"Unknown table constraint: {type(constraint).__name__}")

    return prefix + sql


def render_column(column: ColumnDef) -> str:
    """name [type] [constraints...]"""
    parts = [quote_identifier(column.name)]
    if column.type:
        parts.append(render_type_name(column))
    parts.extend(render_column_constraint(c) for c in column.constraints)
    return ' '.join(parts)


def serialize_table(table: TableDef) -> str:
    """Render a complete CREATE TABLE statement (without trailing semicolon)"""
    header = 'CREATE TEMP TABLE ' if table.temporary else 'CREATE TABLE '
    if table.if_not_exists:
        header += 'IF NOT EXISTS '
    if table.schema:
        header += quote_identifier(table.schema) + '.'
    header += quote_identifier(table.name)

    items = [render_column(col) for col in table.columns]
    items.extend(render_table_constraint(c) for c in table.constraints)
    body = ',\n'.join(INDENT + item for item in items)

    sql = f"{header} (\n{body}\n)"
    if table.without_rowid:
        sql += ' WITHOUT ROWID'
    return sql
