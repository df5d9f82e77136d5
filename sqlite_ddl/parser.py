"""
DDL Parser - recursive descent parser for SQLite CREATE TABLE statements

This module provides:
- Parser: Syntax analysis (tokens -> TableDef)
- parse_table: Convenience entry point (text -> TableDef)
"""

import logging
from typing import List, Optional

from .constraints import (
    ForeignKeyAction, ForeignKeyClause, ColumnConstraint, TableConstraint, IndexedColumn,
    PrimaryKeyColumnConstraint, NotNullColumnConstraint, UniqueColumnConstraint,
    CheckColumnConstraint, DefaultColumnConstraint, CollateColumnConstraint,
    ForeignKeyColumnConstraint, PrimaryKeyTableConstraint, UniqueTableConstraint,
    CheckTableConstraint, ForeignKeyTableConstraint
)
from .errors import ParseError
from .literals import (
    LiteralType, LiteralValue, ConflictResolution, ForeignKeyTrigger,
    ActionDisposition, SortOrder, InitialTiming
)
from .schema import ColumnDef, TableDef
from .tokenizer import Token, TokenType, Tokenizer, FALLBACK_KEYWORDS

logger = logging.getLogger(__name__)


# Keywords that open a table constraint slot instead of a column definition
TABLE_CONSTRAINT_START = (
    TokenType.CONSTRAINT, TokenType.PRIMARY, TokenType.UNIQUE,
    TokenType.CHECK, TokenType.FOREIGN,
)

CONFLICT_KEYWORDS = {
    TokenType.ROLLBACK: ConflictResolution.ROLLBACK,
    TokenType.ABORT: ConflictResolution.ABORT,
    TokenType.FAIL: ConflictResolution.FAIL,
    TokenType.IGNORE: ConflictResolution.IGNORE,
    TokenType.REPLACE: ConflictResolution.REPLACE,
}

CURRENT_TIME_LITERALS = {
    TokenType.CURRENT_TIME: LiteralType.CURRENT_TIME,
    TokenType.CURRENT_DATE: LiteralType.CURRENT_DATE,
    TokenType.CURRENT_TIMESTAMP: LiteralType.CURRENT_TIMESTAMP,
}

BOOLEAN_LITERALS = {'TRUE': '1', 'FALSE': '0'}

NAME_TOKENS = (TokenType.IDENTIFIER, TokenType.QUOTED_IDENTIFIER)


class Parser:
    """Syntax analyzer - converts tokens to a TableDef"""

    def __init__(self, tokens: List[Token], source: str = ''):
        self.tokens = tokens
        self.source = source
        self.position = 0

    def parse(self) -> TableDef:
        """Main entry point - parse one CREATE TABLE statement"""
        table = self._parse_create_table()
        logger.debug("Parsed table %s: %d columns, %d table constraints",
                     table.name, len(table.columns), len(table.constraints))
        return table

    # ========================================================================
    # Helper methods for token navigation
    # ========================================================================

    def _current(self) -> Token:
        """Get current token"""
        if self.position >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[self.position]

    def _peek(self, offset: int = 1) -> Token:
        """Look ahead at token"""
        pos = self.position + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[pos]

    def _advance(self) -> Token:
        """Move to next token and return current"""
        token = self._current()
        if not self._at_end():
            self.position += 1
        return token

    def _at_end(self) -> bool:
        """Check if at end of tokens"""
        return self._current().type == TokenType.EOF

    def _error(self, expected: str, token: Optional[Token] = None) -> ParseError:
        token = token or self._current()
        return ParseError(token.offset, expected, token.describe(), token.line, token.column)

    def _expect(self, token_type: TokenType, expected: str = None) -> Token:
        """Consume token of expected type or raise error"""
        if self._current().type != token_type:
            raise self._error(expected or token_type.name)
        return self._advance()

    def _match(self, *token_types: TokenType) -> bool:
        """Check if current token matches any of the given types"""
        return self._current().type in token_types

    def _consume_if(self, token_type: TokenType) -> bool:
        """Consume token if it matches, return True if consumed"""
        if self._match(token_type):
            self._advance()
            return True
        return False

    def _is_name(self, token: Token) -> bool:
        return token.type in NAME_TOKENS or token.type in FALLBACK_KEYWORDS

    def _expect_name(self, what: str) -> str:
        """Consume an identifier, quoted identifier or fallback keyword"""
        if not self._is_name(self._current()):
            raise self._error(what)
        return self._advance().value

    def _parse_name_list(self, what: str) -> List[str]:
        """Parse '(' name [, name]* ')'"""
        self._expect(TokenType.LPAREN, f"'(' before {what} list")
        names = [self._expect_name(what)]
        while self._consume_if(TokenType.COMMA):
            names.append(self._expect_name(what))
        self._expect(TokenType.RPAREN, f"',' or ')' in {what} list")
        return names

    def _raw_text(self, first: Token, last: Token) -> str:
        """Source text spanning first..last inclusive"""
        if self.source:
            return self.source[first.position:last.end]
        tokens = self.tokens[self.tokens.index(first):self.tokens.index(last) + 1]
        return ' '.join(self._token_text(t) for t in tokens)

    @staticmethod
    def _token_text(token: Token) -> str:
        if token.type == TokenType.STRING:
            return "'" + token.value.replace("'", "''") + "'"
        if token.type == TokenType.QUOTED_IDENTIFIER:
            return '"' + token.value.replace('"', '""') + '"'
        if token.type == TokenType.BLOB:
            return f"X'{token.value}'"
        return str(token.value)

    def _parse_parenthesized_text(self, what: str) -> str:
        """Consume '( ... )' with balanced nesting and return the inner raw text"""
        self._expect(TokenType.LPAREN, f"'(' before {what}")
        if self._match(TokenType.RPAREN):
            raise self._error(what)

        first = self._current()
        last = first
        depth = 0
        while True:
            token = self._current()
            if token.type == TokenType.EOF:
                raise self._error(f"')' closing {what}")
            if token.type == TokenType.RPAREN:
                if depth == 0:
                    break
                depth -= 1
            elif token.type == TokenType.LPAREN:
                depth += 1
            last = self._advance()

        self._advance()  # Skip closing parenthesis
        return self._raw_text(first, last)

    # ========================================================================
    # CREATE TABLE
    # ========================================================================

    def _parse_create_table(self) -> TableDef:
        """Parse CREATE [TEMP] TABLE [IF NOT EXISTS] [schema.]name (...) [WITHOUT ROWID]"""
        self._expect(TokenType.CREATE, "CREATE")

        temporary = self._consume_if(TokenType.TEMP) or self._consume_if(TokenType.TEMPORARY)
        self._expect(TokenType.TABLE, "TABLE")

        if_not_exists = False
        if self._match(TokenType.IF) and self._peek().type == TokenType.NOT:
            self._advance()
            self._expect(TokenType.NOT, "NOT after IF")
            self._expect(TokenType.EXISTS, "EXISTS after IF NOT")
            if_not_exists = True

        schema = ''
        name = self._expect_name("table name")
        if self._consume_if(TokenType.DOT):
            schema = name
            name = self._expect_name("table name after schema")

        table = TableDef(name, temporary=temporary, schema=schema, if_not_exists=if_not_exists)

        self._expect(TokenType.LPAREN, "'(' after table name")
        self._parse_table_body(table)
        self._expect(TokenType.RPAREN, "',' or ')' after table definition")

        if self._match(TokenType.WITHOUT):
            self._advance()
            token = self._current()
            if token.type != TokenType.IDENTIFIER or token.value.upper() != 'ROWID':
                raise self._error("ROWID after WITHOUT")
            self._advance()
            table.without_rowid = True

        self._consume_if(TokenType.SEMICOLON)
        if not self._at_end():
            raise self._error("end of statement")

        return table

    def _parse_table_body(self, table: TableDef):
        """Parse the comma separated column definitions and table constraints"""
        seen_columns = set()
        first = self._current()

        while True:
            if self._match(*TABLE_CONSTRAINT_START):
                table.constraints.append(self._parse_table_constraint())
            elif table.constraints:
                raise self._error("table constraint")
            elif self._is_name(self._current()):
                name_token = self._current()
                column = self._parse_column_def()
                if column.name.lower() in seen_columns:
                    raise ParseError(name_token.offset, "unique column name",
                                     f"duplicate column '{column.name}'",
                                     name_token.line, name_token.column)
                seen_columns.add(column.name.lower())
                table.columns.append(column)
            else:
                raise self._error("column definition")

            if not self._consume_if(TokenType.COMMA):
                break

        if not table.columns:
            raise self._error("column definition", first)

    # ========================================================================
    # Column definitions
    # ========================================================================

    def _parse_column_def(self) -> ColumnDef:
        """Parse name [type-name] [column-constraint]*"""
        column = ColumnDef(self._expect_name("column name"))
        self._parse_type_name(column)

        while not self._match(TokenType.COMMA, TokenType.RPAREN):
            column.constraints.append(self._parse_column_constraint())

        return column

    def _parse_type_name(self, column: ColumnDef):
        """Parse word+ [( signed-number [, signed-number] )]; absent leaves the type empty"""
        while self._match(*NAME_TOKENS):
            column.type_words.append(self._advance().value)

        if not column.type_words:
            return

        if self._consume_if(TokenType.LPAREN):
            column.type_size.append(self._parse_signed_number())
            if self._consume_if(TokenType.COMMA):
                column.type_size.append(self._parse_signed_number())
            self._expect(TokenType.RPAREN, "')' after type size")

        column.type = ' '.join(column.type_words)
        if column.type_size:
            column.type += '(' + ', '.join(column.type_size) + ')'

    def _parse_signed_number(self) -> str:
        sign = ''
        if self._match(TokenType.OPERATOR) and self._current().value in ('+', '-'):
            sign = self._advance().value
        return sign + self._expect(TokenType.NUMBER, "number").value

    def _parse_constraint_name(self) -> Optional[str]:
        if self._consume_if(TokenType.CONSTRAINT):
            return self._expect_name("constraint name")
        return None

    def _parse_column_constraint(self) -> ColumnConstraint:
        """Parse a single column constraint, with optional CONSTRAINT name"""
        name = self._parse_constraint_name()

        if self._match(TokenType.PRIMARY):
            return self._parse_column_primary_key(name)

        if self._consume_if(TokenType.NOT):
            self._expect(TokenType.NULL, "NULL after NOT")
            return NotNullColumnConstraint(name=name)

        if self._consume_if(TokenType.UNIQUE):
            return UniqueColumnConstraint(conflict=self._parse_conflict_clause(), name=name)

        if self._consume_if(TokenType.CHECK):
            return CheckColumnConstraint(self._parse_parenthesized_text("CHECK expression"), name=name)

        if self._consume_if(TokenType.DEFAULT):
            return DefaultColumnConstraint(self._parse_default_value(), name=name)

        if self._consume_if(TokenType.COLLATE):
            return CollateColumnConstraint(self._expect_name("collation name"), name=name)

        if self._match(TokenType.REFERENCES):
            return ForeignKeyColumnConstraint(self._parse_foreign_key_clause(), name=name)

        if self._match(TokenType.ON):
            raise self._error("at most one ON CONFLICT clause per constraint")

        raise self._error("column constraint, ',' or ')'")

    def _parse_column_primary_key(self, name: Optional[str]) -> PrimaryKeyColumnConstraint:
        """PRIMARY KEY [ASC|DESC] [ON CONFLICT ...] [AUTOINCREMENT], clauses in either order"""
        self._expect(TokenType.PRIMARY)
        self._expect(TokenType.KEY, "KEY after PRIMARY")
        constraint = PrimaryKeyColumnConstraint(name=name)

        if self._match(TokenType.ASC, TokenType.DESC):
            constraint.order = SortOrder(self._advance().type.name)

        seen_conflict = False
        while True:
            if self._match(TokenType.ON) and self._peek().type == TokenType.CONFLICT:
                if seen_conflict:
                    raise self._error("at most one ON CONFLICT clause per constraint")
                constraint.conflict = self._parse_conflict_clause()
                seen_conflict = True
            elif self._match(TokenType.AUTOINCREMENT) and not constraint.autoincrement:
                self._advance()
                constraint.autoincrement = True
            else:
                return constraint

    def _parse_conflict_clause(self) -> ConflictResolution:
        """Parse optional ON CONFLICT <resolution>"""
        if not self._match(TokenType.ON):
            return ConflictResolution.NONE
        self._advance()
        self._expect(TokenType.CONFLICT, "CONFLICT after ON")
        token = self._current()
        if token.type not in CONFLICT_KEYWORDS:
            raise self._error("ROLLBACK, ABORT, FAIL, IGNORE or REPLACE")
        self._advance()
        return CONFLICT_KEYWORDS[token.type]

    def _parse_default_value(self) -> LiteralValue:
        """Parse literal, signed number or ( expression ) after DEFAULT"""
        token = self._current()

        if token.type == TokenType.LPAREN:
            return LiteralValue.expression(self._parse_parenthesized_text("DEFAULT expression"))
        if token.type == TokenType.NUMBER or (token.type == TokenType.OPERATOR and token.value in ('+', '-')):
            return LiteralValue.number(self._parse_signed_number())
        if token.type == TokenType.STRING:
            return LiteralValue.string(self._advance().value)
        if token.type == TokenType.BLOB:
            return LiteralValue.blob(self._advance().value)
        if token.type == TokenType.NULL:
            self._advance()
            return LiteralValue.null()
        if token.type in CURRENT_TIME_LITERALS:
            self._advance()
            return LiteralValue(CURRENT_TIME_LITERALS[token.type])
        if token.type == TokenType.IDENTIFIER and token.value.upper() in BOOLEAN_LITERALS:
            # SQLite stores TRUE and FALSE defaults as the integers 1 and 0
            self._advance()
            return LiteralValue.number(BOOLEAN_LITERALS[token.value.upper()])

        raise self._error("literal value after DEFAULT")

    # ========================================================================
    # Foreign-key clause
    # ========================================================================

    def _parse_foreign_key_clause(self) -> ForeignKeyClause:
        """Parse REFERENCES table [(columns)] [actions...] [deferrable]"""
        self._expect(TokenType.REFERENCES, "REFERENCES")
        clause = ForeignKeyClause(self._expect_name("referenced table name"))

        if self._match(TokenType.LPAREN):
            clause.columns = self._parse_name_list("referenced column")

        while True:
            if self._match(TokenType.ON) and self._peek().type in (TokenType.DELETE, TokenType.UPDATE):
                self._advance()
                if self._advance().type == TokenType.DELETE:
                    trigger = ForeignKeyTrigger.ON_DELETE
                else:
                    trigger = ForeignKeyTrigger.ON_UPDATE
                clause.actions.append(ForeignKeyAction(trigger, self._parse_action_disposition()))
            elif self._consume_if(TokenType.MATCH):
                clause.actions.append(ForeignKeyAction(
                    ForeignKeyTrigger.MATCH, match_name=self._expect_name("name after MATCH")))
            else:
                break

        self._parse_deferrable(clause)
        return clause

    def _parse_action_disposition(self) -> ActionDisposition:
        """SET NULL | SET DEFAULT | CASCADE | RESTRICT | NO ACTION"""
        if self._consume_if(TokenType.SET):
            if self._consume_if(TokenType.NULL):
                return ActionDisposition.SET_NULL
            self._expect(TokenType.DEFAULT, "NULL or DEFAULT after SET")
            return ActionDisposition.SET_DEFAULT
        if self._consume_if(TokenType.CASCADE):
            return ActionDisposition.CASCADE
        if self._consume_if(TokenType.RESTRICT):
            return ActionDisposition.RESTRICT
        if self._consume_if(TokenType.NO):
            self._expect(TokenType.ACTION, "ACTION after NO")
            return ActionDisposition.NO_ACTION
        raise self._error("SET NULL, SET DEFAULT, CASCADE, RESTRICT or NO ACTION")

    def _parse_deferrable(self, clause: ForeignKeyClause):
        """Parse optional [NOT] DEFERRABLE [INITIALLY DEFERRED|IMMEDIATE]"""
        if self._match(TokenType.NOT) and self._peek().type == TokenType.DEFERRABLE:
            self._advance()
            clause.deferrable = False
        elif self._match(TokenType.DEFERRABLE):
            clause.deferrable = True
        else:
            return
        self._advance()  # DEFERRABLE

        if self._consume_if(TokenType.INITIALLY):
            if self._consume_if(TokenType.DEFERRED):
                clause.initially = InitialTiming.DEFERRED
            else:
                self._expect(TokenType.IMMEDIATE, "DEFERRED or IMMEDIATE after INITIALLY")
                clause.initially = InitialTiming.IMMEDIATE

    # ========================================================================
    # Table constraints
    # ========================================================================

    def _parse_table_constraint(self) -> TableConstraint:
        """Parse [CONSTRAINT name] PRIMARY KEY | UNIQUE | CHECK | FOREIGN KEY"""
        name = self._parse_constraint_name()

        if self._consume_if(TokenType.PRIMARY):
            self._expect(TokenType.KEY, "KEY after PRIMARY")
            constraint = PrimaryKeyTableConstraint(name=name)
            self._parse_indexed_columns(constraint, allow_autoincrement=True)
            constraint.conflict = self._parse_conflict_clause()
            return constraint

        if self._consume_if(TokenType.UNIQUE):
            constraint = UniqueTableConstraint(name=name)
            self._parse_indexed_columns(constraint)
            constraint.conflict = self._parse_conflict_clause()
            return constraint

        if self._consume_if(TokenType.CHECK):
            return CheckTableConstraint(self._parse_parenthesized_text("CHECK expression"), name=name)

        if self._consume_if(TokenType.FOREIGN):
            self._expect(TokenType.KEY, "KEY after FOREIGN")
            columns = self._parse_name_list("column")
            return ForeignKeyTableConstraint(columns, self._parse_foreign_key_clause(), name=name)

        raise self._error("PRIMARY KEY, UNIQUE, CHECK or FOREIGN KEY")

    def _parse_indexed_columns(self, constraint, allow_autoincrement: bool = False):
        """Parse '(' name [COLLATE name] [ASC|DESC] [, ...] [AUTOINCREMENT] ')'"""
        self._expect(TokenType.LPAREN, "'(' before indexed column list")
        indexed = []
        while True:
            column = IndexedColumn(self._expect_name("indexed column"))
            if self._consume_if(TokenType.COLLATE):
                column.collation = self._expect_name("collation name")
            if self._match(TokenType.ASC, TokenType.DESC):
                column.order = SortOrder(self._advance().type.name)
            indexed.append(column)
            if not self._consume_if(TokenType.COMMA):
                break

        if allow_autoincrement and self._consume_if(TokenType.AUTOINCREMENT):
            constraint.autoincrement = True
        self._expect(TokenType.RPAREN, "',' or ')' in indexed column list")

        constraint.columns = [column.name for column in indexed]
        if any(column.collation is not None or column.order is not None for column in indexed):
            constraint.indexed = indexed


# ============================================================================
# Convenience function
# ============================================================================

def parse_table(sql: str) -> TableDef:
    """Parse CREATE TABLE text to a TableDef"""
    tokens = Tokenizer(sql).tokenize()
    return Parser(tokens, sql).parse()
