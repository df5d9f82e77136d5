"""
REPL - Read-Eval-Print Loop for inspecting CREATE TABLE statements

Provides interactive command-line interface with:
- CREATE TABLE parsing (tables are kept for the session)
- Meta-commands (\\dt, \\d table, \\s table, \\q)
- Multi-line input support
"""

import logging
from typing import Dict, List

from .config import PROMPT, CONTINUATION_PROMPT
from .errors import DDLError
from .constraints import DefaultColumnConstraint
from .parser import parse_table
from .schema import TableDef
from .serializer import serialize_table, render_literal, render_foreign_key_clause, quote_identifier
from .tokenizer import Tokenizer, TokenType

logger = logging.getLogger(__name__)


def split_statements(sql: str) -> List[str]:
    """Split text on top-level semicolons; semicolons inside literals are kept"""
    statements = []
    start = None
    for token in Tokenizer(sql):
        if token.type in (TokenType.SEMICOLON, TokenType.EOF):
            if start is not None:
                statements.append(sql[start:token.position].strip())
            start = None
        elif start is None:
            start = token.position
    return statements


def describe_table(table: TableDef) -> str:
    """Tabular summary of a table's columns and keys"""
    primary_key = [name.lower() for name in table.primary_key()]
    foreign = {cols[0].lower() for cols, _ in table.foreign_keys() if len(cols) == 1}

    title = f"Table: {quote_identifier(table.name)}"
    if table.temporary:
        title += " (temporary)"
    lines = [title, "-" * 72,
             f"{'Column':20} {'Type':16} {'Nullable':9} {'Key':5} {'Default':20}",
             "-" * 72]

    for col in table.columns:
        nullable = "YES" if table.is_nullable(col.name) else "NO"
        if col.name.lower() in primary_key:
            key = "PRI"
        elif col.unique:
            key = "UNI"
        elif col.name.lower() in foreign:
            key = "FK"
        else:
            key = ""
        default = col.find_constraint(DefaultColumnConstraint)
        default_text = render_literal(default.value) if default else ""
        lines.append(f"  {col.name:18} {col.type:16} {nullable:9} {key:5} {default_text:20}".rstrip())

    lines.append("-" * 72)
    if primary_key:
        lines.append(f"Primary Key: {', '.join(table.primary_key())}")
    for columns, clause in table.foreign_keys():
        lines.append(f"Foreign Key: ({', '.join(columns)}) {render_foreign_key_clause(clause)}")
    if table.without_rowid:
        lines.append("WITHOUT ROWID")
    return "\n".join(lines)


class REPL:
    """Interactive shell for CREATE TABLE statements"""

    def __init__(self):
        self.tables: Dict[str, TableDef] = {}
        self.running = False

    def start(self):
        """Main command loop"""
        self.running = True

        print("=" * 60)
        print("sqlite-ddl - CREATE TABLE inspector")
        print("=" * 60)
        print("Type CREATE TABLE statements ending in ';' or meta-commands:")
        print("  \\dt          - List parsed tables")
        print("  \\d <table>   - Describe table")
        print("  \\s <table>   - Show canonical DDL")
        print("  \\q           - Quit")
        print("=" * 60)
        print()

        while self.running:
            try:
                command = self._read_command()

                if not command.strip():
                    continue

                if command.startswith('\\'):
                    self._handle_meta_command(command)
                else:
                    self.execute(command)

            except KeyboardInterrupt:
                print("\nUse \\q to quit")
            except EOFError:
                print("\nGoodbye!")
                break

    def _read_command(self) -> str:
        """Read command (possibly multi-line)"""
        lines = []
        prompt = PROMPT

        while True:
            if lines:
                prompt = CONTINUATION_PROMPT
            lines.append(input(prompt))

            combined = '\n'.join(lines).strip()
            if combined.startswith('\\') or combined.endswith(';'):
                return combined

    def execute(self, sql: str) -> str:
        """Parse one statement, remember the table and print its canonical form"""
        try:
            table = parse_table(sql)
        except DDLError as e:
            output = f"Syntax Error: {e}"
        else:
            self.tables[table.name.lower()] = table
            logger.info("Stored table %s", table.name)
            output = serialize_table(table) + ';'
        print(output)
        return output

    def _handle_meta_command(self, command: str):
        """Process backslash commands"""
        parts = command.rstrip(';').split()
        cmd = parts[0].lower()

        if cmd in ('\\q', '\\quit'):
            print("Goodbye!")
            self.running = False
        elif cmd == '\\dt':
            self._list_tables()
        elif cmd in ('\\d', '\\s'):
            if len(parts) < 2:
                print(f"Usage: {cmd} <table_name>")
                return
            table = self.tables.get(parts[1].lower())
            if table is None:
                print(f"Error: Table '{parts[1]}' has not been parsed")
            elif cmd == '\\d':
                print(describe_table(table))
            else:
                print(serialize_table(table) + ';')
        elif cmd == '\\?':
            self._print_help()
        else:
            print(f"Unknown command: {cmd}")
            print("Type \\? for help")

    def _list_tables(self):
        if not self.tables:
            print("No tables parsed")
            return

        print("\nList of tables:")
        print("-" * 40)
        for table in sorted(self.tables.values(), key=lambda t: t.name.lower()):
            print(f"  {table.name:20} ({len(table.columns)} columns)")
        print()

    def _print_help(self):
        print("\nMeta-commands:")
        print("  \\dt              - List parsed tables")
        print("  \\d <table>       - Describe table")
        print("  \\s <table>       - Show canonical DDL")
        print("  \\?               - Show this help")
        print("  \\q               - Quit")
        print()
