"""
Schema model - column and table definitions produced by the parser and
consumed by the serializer.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .constraints import (
    ColumnConstraint, TableConstraint, ForeignKeyClause,
    PrimaryKeyColumnConstraint, NotNullColumnConstraint, UniqueColumnConstraint,
    ForeignKeyColumnConstraint, PrimaryKeyTableConstraint, UniqueTableConstraint,
    ForeignKeyTableConstraint
)


@dataclass
class ColumnDef:
    """Column definition: name, declared type and constraints in source order"""
    name: str
    type: str = ''  # free-form declared type, e.g. 'VARCHAR(255)'
    constraints: List[ColumnConstraint] = field(default_factory=list)
    # Declared type split into its words and size arguments, as parsed
    type_words: List[str] = field(default_factory=list, compare=False)
    type_size: List[str] = field(default_factory=list, compare=False)

    def find_constraint(self, constraint_type) -> Optional[ColumnConstraint]:
        """First constraint of the given variant, or None"""
        for constraint in self.constraints:
            if isinstance(constraint, constraint_type):
                return constraint
        return None

    @property
    def is_primary_key(self) -> bool:
        return self.find_constraint(PrimaryKeyColumnConstraint) is not None

    @property
    def not_null(self) -> bool:
        return self.find_constraint(NotNullColumnConstraint) is not None

    @property
    def unique(self) -> bool:
        return self.find_constraint(UniqueColumnConstraint) is not None

    def __repr__(self):
        kinds = " ".join(c.kind for c in self.constraints)
        return " ".join(part for part in (self.name, self.type, kinds) if part)


@dataclass
class TableDef:
    """Table definition - the root of the model"""
    name: str
    columns: List[ColumnDef] = field(default_factory=list)
    constraints: List[TableConstraint] = field(default_factory=list)
    temporary: bool = False
    without_rowid: bool = False
    schema: str = ''  # 'main', 'temp' or an attached database; empty if unqualified
    if_not_exists: bool = False

    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]

    def get_column(self, name: str) -> Optional[ColumnDef]:
        """Get column by name (case-insensitive, like SQLite)"""
        wanted = name.lower()
        for col in self.columns:
            if col.name.lower() == wanted:
                return col
        return None

    def get_column_index(self, name: str) -> int:
        """Get column position by name"""
        wanted = name.lower()
        for i, col in enumerate(self.columns):
            if col.name.lower() == wanted:
                return i
        raise ValueError(f"Column '{name}' not found in table '{self.name}'")

    def primary_key(self) -> List[str]:
        """Primary key column names, from a column or a table constraint"""
        for col in self.columns:
            if col.is_primary_key:
                return [col.name]
        for constraint in self.constraints:
            if isinstance(constraint, PrimaryKeyTableConstraint):
                return list(constraint.columns)
        return []

    def unique_keys(self) -> List[List[str]]:
        keys = [[col.name] for col in self.columns if col.unique]
        keys.extend(list(c.columns) for c in self.constraints
                    if isinstance(c, UniqueTableConstraint))
        return keys

    def foreign_keys(self) -> List[Tuple[List[str], ForeignKeyClause]]:
        """(referencing columns, clause) pairs, column-level ones first"""
        keys = []
        for col in self.columns:
            for constraint in col.constraints:
                if isinstance(constraint, ForeignKeyColumnConstraint):
                    keys.append(([col.name], constraint.clause))
        for constraint in self.constraints:
            if isinstance(constraint, ForeignKeyTableConstraint):
                keys.append((list(constraint.columns), constraint.clause))
        return keys

    def is_nullable(self, name: str) -> bool:
        """
        Check whether a column accepts NULL.

        A PRIMARY KEY alone does not forbid NULL in SQLite, except in
        WITHOUT ROWID tables.
        """
        col = self.columns[self.get_column_index(name)]
        if col.not_null:
            return False
        return not (self.without_rowid and name.lower() in
                    (pk.lower() for pk in self.primary_key()))
