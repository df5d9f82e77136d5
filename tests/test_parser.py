"""
Tests for parser.py: CREATE TABLE productions, constraints and rejections
"""

import unittest

from sqlite_ddl.constraints import (
    PrimaryKeyColumnConstraint, NotNullColumnConstraint, UniqueColumnConstraint,
    CheckColumnConstraint, DefaultColumnConstraint, CollateColumnConstraint,
    ForeignKeyColumnConstraint, PrimaryKeyTableConstraint, UniqueTableConstraint,
    CheckTableConstraint, ForeignKeyTableConstraint, ForeignKeyAction, IndexedColumn
)
from sqlite_ddl.errors import ParseError, LexError
from sqlite_ddl.literals import (
    LiteralType, LiteralValue, ConflictResolution, ForeignKeyTrigger,
    ActionDisposition, SortOrder, InitialTiming
)
from sqlite_ddl.parser import Parser, parse_table
from sqlite_ddl.tokenizer import Tokenizer


def column_sql(definition: str) -> str:
    return f"CREATE TABLE t ({definition})"


class TestCreateTable(unittest.TestCase):
    """Statement-level grammar"""

    def test_users_example(self):
        table = parse_table(
            "CREATE TABLE users (id INTEGER PRIMARY KEY AUTOINCREMENT, "
            "name TEXT NOT NULL, "
            "parent_id INTEGER REFERENCES users(id) ON DELETE CASCADE)"
        )
        self.assertEqual(table.name, 'users')
        self.assertEqual(len(table.columns), 3)

        pk = table.columns[0].constraints
        self.assertEqual(len(pk), 1)
        self.assertIsInstance(pk[0], PrimaryKeyColumnConstraint)
        self.assertTrue(pk[0].autoincrement)
        self.assertEqual(pk[0].conflict, ConflictResolution.NONE)

        fk = table.columns[2].constraints
        self.assertEqual(len(fk), 1)
        self.assertIsInstance(fk[0], ForeignKeyColumnConstraint)
        self.assertEqual(fk[0].clause.table, 'users')
        self.assertEqual(fk[0].clause.columns, ['id'])
        self.assertEqual(fk[0].clause.actions,
                         [ForeignKeyAction(ForeignKeyTrigger.ON_DELETE, ActionDisposition.CASCADE)])

    def test_temporary_if_not_exists_and_schema(self):
        table = parse_table("CREATE TEMPORARY TABLE IF NOT EXISTS main.t (a)")
        self.assertTrue(table.temporary)
        self.assertTrue(table.if_not_exists)
        self.assertEqual(table.schema, 'main')
        self.assertEqual(table.name, 't')
        self.assertEqual(table.columns[0].type, '')

        self.assertTrue(parse_table("create temp table t (a)").temporary)
        self.assertFalse(parse_table("CREATE TABLE t (a)").temporary)

    def test_quoted_names(self):
        table = parse_table('CREATE TABLE "my table" ([first col] TEXT, `order` INT)')
        self.assertEqual(table.name, 'my table')
        self.assertEqual(table.column_names(), ['first col', 'order'])

    def test_keywords_usable_as_names(self):
        table = parse_table("CREATE TABLE match (key TEXT, action INT, no INT)")
        self.assertEqual(table.name, 'match')
        self.assertEqual(table.column_names(), ['key', 'action', 'no'])

    def test_without_rowid(self):
        table = parse_table("CREATE TABLE t (a TEXT PRIMARY KEY) WITHOUT ROWID;")
        self.assertTrue(table.without_rowid)
        self.assertFalse(parse_table("CREATE TABLE t (a);").without_rowid)

    def test_type_names(self):
        table = parse_table(
            "CREATE TABLE t (a VARCHAR(255), b DECIMAL(10,2), c UNSIGNED BIG INT, "
            "d DOUBLE PRECISION NOT NULL, e, f NUMERIC(-5))"
        )
        self.assertEqual([c.type for c in table.columns],
                         ['VARCHAR(255)', 'DECIMAL(10, 2)', 'UNSIGNED BIG INT',
                          'DOUBLE PRECISION', '', 'NUMERIC(-5)'])
        self.assertIsInstance(table.columns[3].constraints[0], NotNullColumnConstraint)
        self.assertEqual(table.columns[1].type_words, ['DECIMAL'])
        self.assertEqual(table.columns[1].type_size, ['10', '2'])

    def test_quoted_type_words(self):
        table = parse_table('CREATE TABLE t (a "my-type", b "key", c [int unsigned] NOT NULL)')
        self.assertEqual([c.type for c in table.columns], ['my-type', 'key', 'int unsigned'])
        self.assertEqual(table.columns[2].type_words, ['int unsigned'])


class TestColumnConstraints(unittest.TestCase):
    """Column constraint variants"""

    def constraints(self, definition: str):
        return parse_table(column_sql(definition)).columns[0].constraints

    def test_order_is_preserved(self):
        constraints = self.constraints(
            "a INT UNIQUE NOT NULL DEFAULT 0 CHECK (a > 0) COLLATE NOCASE")
        self.assertEqual([type(c) for c in constraints], [
            UniqueColumnConstraint, NotNullColumnConstraint, DefaultColumnConstraint,
            CheckColumnConstraint, CollateColumnConstraint,
        ])
        self.assertEqual(constraints[2].value, LiteralValue(LiteralType.INTEGER, '0'))
        self.assertEqual(constraints[3].expression, 'a > 0')
        self.assertEqual(constraints[4].collation, 'NOCASE')

    def test_conflict_defaults_to_none(self):
        for constraint in self.constraints("a INT PRIMARY KEY UNIQUE NOT NULL"):
            self.assertEqual(constraint.conflict, ConflictResolution.NONE)

    def test_conflict_clauses(self):
        pk, unique = self.constraints("a INT PRIMARY KEY ON CONFLICT REPLACE UNIQUE ON CONFLICT IGNORE")
        self.assertEqual(pk.conflict, ConflictResolution.REPLACE)
        self.assertEqual(unique.conflict, ConflictResolution.IGNORE)

    def test_primary_key_clauses_in_either_order(self):
        for definition in ("id INTEGER PRIMARY KEY DESC ON CONFLICT FAIL AUTOINCREMENT",
                           "id INTEGER PRIMARY KEY DESC AUTOINCREMENT ON CONFLICT FAIL"):
            pk = self.constraints(definition)[0]
            self.assertTrue(pk.autoincrement)
            self.assertEqual(pk.conflict, ConflictResolution.FAIL)
            self.assertEqual(pk.order, SortOrder.DESC)

    def test_second_conflict_clause_fails(self):
        for definition in ("a INT UNIQUE ON CONFLICT IGNORE ON CONFLICT FAIL",
                           "a INT PRIMARY KEY ON CONFLICT ABORT AUTOINCREMENT ON CONFLICT FAIL"):
            with self.assertRaises(ParseError):
                parse_table(column_sql(definition))

    def test_named_constraints(self):
        nn, pk = self.constraints("a INT CONSTRAINT nn NOT NULL CONSTRAINT \"pk a\" PRIMARY KEY")
        self.assertEqual(nn.name, 'nn')
        self.assertEqual(pk.name, 'pk a')

    def test_default_literals(self):
        cases = [
            ("'it''s'", LiteralValue(LiteralType.STRING, "it's")),
            ("-1", LiteralValue(LiteralType.INTEGER, '-1')),
            ("+2", LiteralValue(LiteralType.INTEGER, '+2')),
            ("1.5", LiteralValue(LiteralType.REAL, '1.5')),
            ("1e3", LiteralValue(LiteralType.REAL, '1e3')),
            ("0xFE", LiteralValue(LiteralType.INTEGER, '0xFE')),
            ("X'00FF'", LiteralValue(LiteralType.BLOB, '00FF')),
            ("NULL", LiteralValue(LiteralType.NULL)),
            ("CURRENT_TIME", LiteralValue(LiteralType.CURRENT_TIME)),
            ("current_date", LiteralValue(LiteralType.CURRENT_DATE)),
            ("CURRENT_TIMESTAMP", LiteralValue(LiteralType.CURRENT_TIMESTAMP)),
            ("(datetime('now'))", LiteralValue(LiteralType.EXPRESSION, "datetime('now')")),
            ("TRUE", LiteralValue(LiteralType.INTEGER, '1')),
            ("false", LiteralValue(LiteralType.INTEGER, '0')),
        ]
        for text, expected in cases:
            default = self.constraints(f"a DEFAULT {text}")[0]
            self.assertEqual(default.value, expected, text)

    def test_default_requires_literal(self):
        with self.assertRaises(ParseError):
            parse_table(column_sql("a DEFAULT some_name"))

    def test_check_expression_keeps_nested_parentheses(self):
        check = self.constraints("a INT CHECK (length(a) > 0 AND (a IN (1, 2)))")[0]
        self.assertEqual(check.expression, 'length(a) > 0 AND (a IN (1, 2))')

    def test_check_expression_without_source_text(self):
        tokens = Tokenizer(column_sql("a INT CHECK (a > 0)")).tokenize()
        table = Parser(tokens).parse()
        self.assertEqual(table.columns[0].constraints[0].expression, 'a > 0')

    def test_foreign_key_without_columns(self):
        fk = self.constraints("a INT REFERENCES parent")[0]
        self.assertEqual(fk.clause.table, 'parent')
        self.assertEqual(fk.clause.columns, [])
        self.assertEqual(fk.clause.actions, [])
        self.assertIsNone(fk.clause.deferrable)

    def test_foreign_key_match_and_deferrable(self):
        fk = self.constraints(
            "a INT REFERENCES p MATCH SIMPLE ON DELETE NO ACTION NOT DEFERRABLE INITIALLY IMMEDIATE")[0]
        self.assertEqual(fk.clause.actions, [
            ForeignKeyAction(ForeignKeyTrigger.MATCH, match_name='SIMPLE'),
            ForeignKeyAction(ForeignKeyTrigger.ON_DELETE, ActionDisposition.NO_ACTION),
        ])
        self.assertIs(fk.clause.deferrable, False)
        self.assertEqual(fk.clause.initially, InitialTiming.IMMEDIATE)

    def test_not_null_after_deferrable_foreign_key(self):
        fk, nn = self.constraints("a INT REFERENCES p(id) DEFERRABLE INITIALLY DEFERRED NOT NULL")
        self.assertIs(fk.clause.deferrable, True)
        self.assertEqual(fk.clause.initially, InitialTiming.DEFERRED)
        self.assertIsInstance(nn, NotNullColumnConstraint)

    def test_all_dispositions(self):
        fk = self.constraints(
            "a REFERENCES p ON DELETE SET NULL ON UPDATE SET DEFAULT ON DELETE RESTRICT ON UPDATE CASCADE")[0]
        self.assertEqual([a.disposition for a in fk.clause.actions], [
            ActionDisposition.SET_NULL, ActionDisposition.SET_DEFAULT,
            ActionDisposition.RESTRICT, ActionDisposition.CASCADE,
        ])


class TestTableConstraints(unittest.TestCase):
    """Table constraint variants"""

    def test_action_order_is_preserved(self):
        table = parse_table(
            "CREATE TABLE c (a INT, FOREIGN KEY (a) REFERENCES t(b) ON UPDATE CASCADE ON DELETE SET NULL)")
        fk = table.constraints[0]
        self.assertIsInstance(fk, ForeignKeyTableConstraint)
        self.assertEqual(fk.columns, ['a'])
        self.assertEqual(fk.clause.columns, ['b'])
        self.assertEqual(fk.clause.actions, [
            ForeignKeyAction(ForeignKeyTrigger.ON_UPDATE, ActionDisposition.CASCADE),
            ForeignKeyAction(ForeignKeyTrigger.ON_DELETE, ActionDisposition.SET_NULL),
        ])

    def test_primary_key_unique_check(self):
        table = parse_table(
            "CREATE TABLE t (a INT, b INT, c TEXT, "
            "CONSTRAINT pk PRIMARY KEY (a, b) ON CONFLICT ROLLBACK, "
            "UNIQUE (c), CHECK (a <> b))")
        pk, unique, check = table.constraints
        self.assertIsInstance(pk, PrimaryKeyTableConstraint)
        self.assertEqual(pk.columns, ['a', 'b'])
        self.assertEqual(pk.conflict, ConflictResolution.ROLLBACK)
        self.assertEqual(pk.name, 'pk')
        self.assertIsInstance(unique, UniqueTableConstraint)
        self.assertEqual(unique.conflict, ConflictResolution.NONE)
        self.assertIsInstance(check, CheckTableConstraint)
        self.assertEqual(check.expression, 'a <> b')
        self.assertEqual(pk.indexed, [])
        self.assertFalse(pk.autoincrement)

    def test_indexed_columns(self):
        table = parse_table(
            "CREATE TABLE t (a TEXT, b INT, "
            "PRIMARY KEY (a COLLATE NOCASE, b DESC), UNIQUE (b ASC) ON CONFLICT FAIL)")
        pk, unique = table.constraints
        self.assertEqual(pk.columns, ['a', 'b'])
        self.assertEqual(pk.indexed, [IndexedColumn('a', 'NOCASE'),
                                      IndexedColumn('b', order=SortOrder.DESC)])
        self.assertEqual(unique.columns, ['b'])
        self.assertEqual(unique.indexed, [IndexedColumn('b', order=SortOrder.ASC)])
        self.assertEqual(unique.conflict, ConflictResolution.FAIL)

    def test_autoincrement_in_primary_key_list(self):
        table = parse_table('CREATE TABLE t ("id" INTEGER, PRIMARY KEY("id" AUTOINCREMENT))')
        pk = table.constraints[0]
        self.assertEqual(pk.columns, ['id'])
        self.assertTrue(pk.autoincrement)
        self.assertEqual(table.primary_key(), ['id'])


class TestRejections(unittest.TestCase):
    """Statements that must fail"""

    def assertParseError(self, sql: str) -> ParseError:
        with self.assertRaises(ParseError) as ctx:
            parse_table(sql)
        return ctx.exception

    def test_trailing_comma(self):
        error = self.assertParseError("CREATE TABLE t (a INT,)")
        self.assertEqual(error.position, 22)
        self.assertEqual(error.expected, 'column definition')
        self.assertEqual(error.found, "')'")
        self.assertIsInstance(error, SyntaxError)

    def test_no_columns(self):
        self.assertParseError("CREATE TABLE t ()")
        self.assertParseError("CREATE TABLE t (PRIMARY KEY (a))")

    def test_unknown_constraint(self):
        self.assertParseError("CREATE TABLE t (a INT NOT NULL BOGUS)")
        self.assertParseError("CREATE TABLE t (a INT NOT NULL ON CONFLICT FAIL)")

    def test_duplicate_column(self):
        error = self.assertParseError("CREATE TABLE t (a INT, A TEXT)")
        self.assertIn("duplicate column", error.found)

    def test_column_after_table_constraint(self):
        self.assertParseError("CREATE TABLE t (a INT, PRIMARY KEY (a), b INT)")

    def test_without_rowid_placement(self):
        self.assertParseError("CREATE TABLE t (a) WITHOUT")
        self.assertParseError("CREATE TABLE t (a) WITHOUT OID")
        self.assertParseError("CREATE TABLE t (a) WITHOUT ROWID extra")
        self.assertParseError("CREATE TABLE t (a); CREATE TABLE u (b)")

    def test_other_statements(self):
        self.assertParseError("CREATE TABLE t AS SELECT 1")
        self.assertParseError("CREATE INDEX i ON t (a)")
        self.assertParseError("")

    def test_unbalanced_check(self):
        self.assertParseError("CREATE TABLE t (a CHECK (a > (1)")
        self.assertParseError("CREATE TABLE t (a CHECK ())")

    def test_autoincrement_only_in_primary_key_list(self):
        self.assertParseError("CREATE TABLE t (a, UNIQUE (a AUTOINCREMENT))")
        self.assertParseError("CREATE TABLE t (a, PRIMARY KEY (a AUTOINCREMENT AUTOINCREMENT))")

    def test_empty_name_lists(self):
        self.assertParseError("CREATE TABLE t (a, UNIQUE ())")
        self.assertParseError("CREATE TABLE t (a REFERENCES p ())")

    def test_lex_errors_propagate(self):
        with self.assertRaises(LexError):
            parse_table("CREATE TABLE t (a DEFAULT 'x)")


if __name__ == '__main__':
    unittest.main()
