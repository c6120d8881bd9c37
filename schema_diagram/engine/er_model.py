"""
Schema Model Classes - Represent tables, columns, and relationships
"""
from typing import List, Optional, Dict, Any, Tuple, Iterable


class Column:
    """Represents a column of a table. Read-only once its table joins a Schema."""

    _frozen = False

    def __init__(self, name: str, data_type: str, is_primary_key: bool = False,
                 is_foreign_key: bool = False, is_nullable: bool = True,
                 references: Optional[Tuple[str, str]] = None):
        self.name = name
        self.data_type = data_type
        self.is_primary_key = is_primary_key
        self.is_foreign_key = is_foreign_key or references is not None
        # 主键列永远不可为空
        self.is_nullable = is_nullable and not is_primary_key
        self.references = tuple(references) if references else None

    def __setattr__(self, name, value):
        if self._frozen:
            raise AttributeError(f"Column {self.name} is read-only")
        super().__setattr__(name, value)

    def freeze(self):
        object.__setattr__(self, '_frozen', True)

    def mark_primary_key(self):
        """Mark this column as (part of) the primary key."""
        self.is_primary_key = True
        self.is_nullable = False

    def mark_foreign_key(self, table: str, column: str):
        """Mark this column as referencing table.column."""
        self.is_foreign_key = True
        self.references = (table, column)

    def to_dict(self) -> Dict[str, Any]:
        """Converts the column to a dictionary."""
        data = {
            "name": self.name,
            "type": self.data_type,
            "isPrimaryKey": self.is_primary_key,
            "isForeignKey": self.is_foreign_key,
            "isNullable": self.is_nullable,
        }
        if self.references:
            data["references"] = {"table": self.references[0], "column": self.references[1]}
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Column':
        references = None
        ref = data.get("references")
        if ref:
            references = (ref["table"], ref["column"])
        return cls(
            name=data["name"],
            data_type=data.get("type", "text"),
            is_primary_key=bool(data.get("isPrimaryKey", False)),
            is_foreign_key=bool(data.get("isForeignKey", False)),
            is_nullable=bool(data.get("isNullable", True)),
            references=references,
        )

    def __eq__(self, other):
        if not isinstance(other, Column):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        pk_str = " [PK]" if self.is_primary_key else ""
        fk_str = f" -> {self.references[0]}.{self.references[1]}" if self.references else ""
        return f"Column(name={self.name}{pk_str}, type={self.data_type}{fk_str})"


class Table:
    """Represents a table (entity) in the diagram"""

    _frozen = False

    def __init__(self, name: str, columns: Optional[Iterable[Column]] = None):
        self.name = name
        self.id = name.lower()
        # 解析过程中可追加列，freeze() 之后变为元组
        self.columns: List[Column] = list(columns or [])

    def __setattr__(self, name, value):
        if self._frozen:
            raise AttributeError(f"Table {self.name} is read-only")
        super().__setattr__(name, value)

    def freeze(self):
        """Make the table and its columns read-only; calling it again is a no-op"""
        if self._frozen:
            return
        self.columns = tuple(self.columns)
        for column in self.columns:
            column.freeze()
        object.__setattr__(self, '_frozen', True)

    def get_column(self, name: str) -> Optional[Column]:
        """Case-insensitive column lookup"""
        wanted = name.lower()
        for column in self.columns:
            if column.name.lower() == wanted:
                return column
        return None

    def column_index(self, name: str) -> int:
        """Position of a column in declaration order, -1 when absent"""
        wanted = name.lower()
        for index, column in enumerate(self.columns):
            if column.name.lower() == wanted:
                return index
        return -1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "columns": [column.to_dict() for column in self.columns],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Table':
        return cls(data["name"], [Column.from_dict(c) for c in data.get("columns", [])])

    def __eq__(self, other):
        if not isinstance(other, Table):
            return NotImplemented
        return self.name == other.name and tuple(self.columns) == tuple(other.columns)

    def __repr__(self):
        return f"Table(name={self.name}, columns={len(self.columns)})"


class Relationship:
    """Represents a foreign-key edge between two columns"""

    def __init__(self, from_table: str, from_column: str,
                 to_table: str, to_column: str):
        self.from_table = from_table
        self.from_column = from_column
        self.to_table = to_table
        self.to_column = to_column
        self.id = f"{from_table}_{from_column}_{to_table}_{to_column}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "fromTable": self.from_table,
            "fromColumn": self.from_column,
            "toTable": self.to_table,
            "toColumn": self.to_column,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Relationship':
        return cls(data["fromTable"], data["fromColumn"], data["toTable"], data["toColumn"])

    def __eq__(self, other):
        if not isinstance(other, Relationship):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"Relationship({self.from_table}.{self.from_column} -> "
                f"{self.to_table}.{self.to_column})")


class Schema:
    """Tables plus relationships, as produced by one parse call; tables are frozen on construction"""

    def __init__(self, tables: Iterable[Table] = (), relationships: Iterable[Relationship] = ()):
        self.tables: Tuple[Table, ...] = tuple(tables)
        self.relationships: Tuple[Relationship, ...] = tuple(relationships)
        for table in self.tables:
            table.freeze()

    @classmethod
    def empty(cls) -> 'Schema':
        return cls()

    def is_empty(self) -> bool:
        return not self.tables and not self.relationships

    def get_table(self, name: str) -> Optional[Table]:
        """Look a table up by display name or id; names are compared lowercased"""
        table_id = name.lower()
        for table in self.tables:
            if table.id == table_id:
                return table
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tables": [table.to_dict() for table in self.tables],
            "relationships": [rel.to_dict() for rel in self.relationships],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Schema':
        """
        Rebuild a schema from its dictionary form

        Raises:
            KeyError, TypeError: when the dictionary does not have the expected shape
        """
        return cls(
            [Table.from_dict(t) for t in data["tables"]],
            [Relationship.from_dict(r) for r in data.get("relationships", [])],
        )

    def __eq__(self, other):
        if not isinstance(other, Schema):
            return NotImplemented
        return self.tables == other.tables and self.relationships == other.relationships

    def __repr__(self):
        return f"Schema(tables={len(self.tables)}, relationships={len(self.relationships)})"
