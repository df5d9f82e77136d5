"""
Constraint model - column constraints, table constraints and the
foreign-key clause they share.

Constraints form two closed families of dataclasses. Code that needs to
tell variants apart dispatches with isinstance() on the concrete classes.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from .literals import (
    LiteralValue, ConflictResolution, ForeignKeyTrigger, ActionDisposition,
    SortOrder, InitialTiming
)


# ============================================================================
# Foreign-key clause
# ============================================================================

@dataclass
class ForeignKeyAction:
    """ON DELETE <disposition> | ON UPDATE <disposition> | MATCH <name>"""
    trigger: ForeignKeyTrigger
    disposition: Optional[ActionDisposition] = None  # None for MATCH
    match_name: str = ''  # only for MATCH


@dataclass
class ForeignKeyClause:
    """REFERENCES table [(columns)] [actions...] [[NOT] DEFERRABLE ...]"""
    table: str
    columns: List[str] = field(default_factory=list)  # empty: use the parent's primary key
    actions: List[ForeignKeyAction] = field(default_factory=list)
    deferrable: Optional[bool] = None  # None: clause absent, False: NOT DEFERRABLE
    initially: Optional[InitialTiming] = None

    def actions_for(self, trigger: ForeignKeyTrigger) -> List[ForeignKeyAction]:
        return [action for action in self.actions if action.trigger == trigger]


# ============================================================================
# Column constraints
# ============================================================================

class ColumnConstraintKind:
    """String tags for the column constraint variants"""
    PRIMARY_KEY = 'PRIMARY KEY'
    NOT_NULL = 'NOT NULL'
    UNIQUE = 'UNIQUE'
    CHECK = 'CHECK'
    DEFAULT = 'DEFAULT'
    COLLATE = 'COLLATE'
    FOREIGN_KEY = 'FOREIGN KEY'


class ColumnConstraint:
    """Base class for column constraint variants"""
    kind = ''
    # Only PRIMARY KEY and UNIQUE override this with a real field
    conflict = ConflictResolution.NONE


@dataclass
class PrimaryKeyColumnConstraint(ColumnConstraint):
    kind = ColumnConstraintKind.PRIMARY_KEY
    autoincrement: bool = False
    conflict: ConflictResolution = ConflictResolution.NONE
    order: Optional[SortOrder] = None
    name: Optional[str] = None


@dataclass
class NotNullColumnConstraint(ColumnConstraint):
    kind = ColumnConstraintKind.NOT_NULL
    name: Optional[str] = None


@dataclass
class UniqueColumnConstraint(ColumnConstraint):
    kind = ColumnConstraintKind.UNIQUE
    conflict: ConflictResolution = ConflictResolution.NONE
    name: Optional[str] = None


@dataclass
class CheckColumnConstraint(ColumnConstraint):
    kind = ColumnConstraintKind.CHECK
    expression: str = ''  # raw text between the parentheses
    name: Optional[str] = None


@dataclass
class DefaultColumnConstraint(ColumnConstraint):
    kind = ColumnConstraintKind.DEFAULT
    value: LiteralValue = field(default_factory=LiteralValue.null)
    name: Optional[str] = None


@dataclass
class CollateColumnConstraint(ColumnConstraint):
    kind = ColumnConstraintKind.COLLATE
    collation: str = 'BINARY'
    name: Optional[str] = None


@dataclass
class ForeignKeyColumnConstraint(ColumnConstraint):
    kind = ColumnConstraintKind.FOREIGN_KEY
    clause: ForeignKeyClause
    name: Optional[str] = None


AnyColumnConstraint = Union[
    PrimaryKeyColumnConstraint, NotNullColumnConstraint, UniqueColumnConstraint,
    CheckColumnConstraint, DefaultColumnConstraint, CollateColumnConstraint,
    ForeignKeyColumnConstraint,
]


# ============================================================================
# Table constraints
# ============================================================================

@dataclass
class IndexedColumn:
    """Column of a table PRIMARY KEY or UNIQUE list with its COLLATE and ASC/DESC"""
    name: str
    collation: Optional[str] = None
    order: Optional[SortOrder] = None


class TableConstraint:
    """Base class for table constraint variants"""
    kind = ''
    conflict = ConflictResolution.NONE


@dataclass
class PrimaryKeyTableConstraint(TableConstraint):
    """PRIMARY KEY (columns) [ON CONFLICT ...]"""
    kind = ColumnConstraintKind.PRIMARY_KEY
    columns: List[str] = field(default_factory=list)
    conflict: ConflictResolution = ConflictResolution.NONE
    name: Optional[str] = None
    # Per-column COLLATE and ASC/DESC; empty when every column is a bare name
    indexed: List[IndexedColumn] = field(default_factory=list)
    autoincrement: bool = False


@dataclass
class UniqueTableConstraint(TableConstraint):
    """UNIQUE (columns) [ON CONFLICT ...]"""
    kind = ColumnConstraintKind.UNIQUE
    columns: List[str] = field(default_factory=list)
    conflict: ConflictResolution = ConflictResolution.NONE
    name: Optional[str] = None
    indexed: List[IndexedColumn] = field(default_factory=list)


@dataclass
class CheckTableConstraint(TableConstraint):
    """CHECK (expression)"""
    kind = ColumnConstraintKind.CHECK
    expression: str = ''
    name: Optional[str] = None


@dataclass
class ForeignKeyTableConstraint(TableConstraint):
    """FOREIGN KEY (columns) REFERENCES ..."""
    kind = ColumnConstraintKind.FOREIGN_KEY
    columns: List[str]
    clause: ForeignKeyClause
    name: Optional[str] = None


AnyTableConstraint = Union[
    PrimaryKeyTableConstraint, UniqueTableConstraint, CheckTableConstraint,
    ForeignKeyTableConstraint,
]
