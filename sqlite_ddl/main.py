"""
Main entry point for sqlite-ddl

Usage:
    python -m sqlite_ddl.main [--execute SQL | --file FILE] [--describe]

Example:
    python -m sqlite_ddl.main -e "create table t (id integer primary key)"
"""

import argparse
import logging
import sys
from typing import Optional

from . import config
from .errors import DDLError
from .parser import parse_table
from .repl import REPL, describe_table, split_statements
from .serializer import serialize_table


def configure_logging(verbose: bool = config.VERBOSE, debug: bool = config.DEBUG,
                      log_file: Optional[str] = config.LOG_FILE):
    """Attach a single handler to the package logger"""
    logger = logging.getLogger('sqlite_ddl')
    if debug:
        logger.setLevel(logging.DEBUG)
    elif verbose:
        logger.setLevel(logging.INFO)
    else:
        logger.setLevel(logging.WARNING)

    if log_file:
        handler = logging.FileHandler(log_file, encoding='utf-8')
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(config.LOG_FORMAT))
    for old in logger.handlers:
        old.close()
    logger.handlers = [handler]


def main(argv=None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description='sqlite-ddl - parse and reformat SQLite CREATE TABLE statements',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive session
  python -m sqlite_ddl.main

  # Canonicalize one statement
  python -m sqlite_ddl.main --execute "create table t (a int not null)"

  # Describe every table in a schema dump
  python -m sqlite_ddl.main --file schema.sql --describe
        """
    )

    parser.add_argument(
        '--execute', '-e',
        metavar='SQL',
        help='Parse a CREATE TABLE statement and print it'
    )

    parser.add_argument(
        '--file', '-f',
        metavar='FILE',
        help='Parse every CREATE TABLE statement in a file'
    )

    parser.add_argument(
        '--describe', '-d',
        action='store_true',
        help='Print a column summary instead of DDL'
    )

    parser.add_argument('--verbose', '-v', action='store_true', default=config.VERBOSE,
                        help='Log progress messages')
    parser.add_argument('--debug', action='store_true', default=config.DEBUG,
                        help='Log parser debug messages')
    parser.add_argument('--log-file', default=config.LOG_FILE,
                        help='Write log messages to this file instead of stderr')

    args = parser.parse_args(argv)
    configure_logging(args.verbose, args.debug, args.log_file)

    if args.execute:
        return execute_sql(args.execute, args.describe)

    if args.file:
        return execute_file(args.file, args.describe)

    repl = REPL()
    repl.start()

    return 0


def render(sql: str, describe: bool = False) -> str:
    """Parse one statement and return either its canonical DDL or its description"""
    table = parse_table(sql)
    if describe:
        return describe_table(table)
    return serialize_table(table) + ';'


def execute_sql(sql: str, describe: bool = False) -> int:
    """Parse a single statement"""
    try:
        print(render(sql, describe))
        return 0
    except DDLError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def execute_file(filename: str, describe: bool = False) -> int:
    """Parse every statement in a file"""
    try:
        with open(filename, 'r', encoding='utf-8') as f:
            sql = f.read()

        statements = split_statements(sql)
        logging.getLogger(__name__).info("Read %d statements from %s", len(statements), filename)

        for statement in statements:
            try:
                print(render(statement, describe))
                print()
            except DDLError as e:
                print(f"Error parsing: {statement[:50]}...", file=sys.stderr)
                print(f"  {e}", file=sys.stderr)
                return 1

        return 0

    except FileNotFoundError:
        print(f"Error: File not found: {filename}", file=sys.stderr)
        return 1
    except DDLError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
