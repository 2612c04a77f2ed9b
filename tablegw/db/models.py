from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class GatewayOperationType(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    SELECT = "select"


@dataclass(frozen=True)
class TableMeta:
    """
    Column roles derived from an entity's declared fields.
    """
    primary_name: str  # attribute name on the entity
    primary_db: str  # column name in the table
    insert_cols: tuple[str, ...]
    update_cols: tuple[str, ...]
    # column -> attribute for every declared field, used to map rows back
    columns: Mapping[str, str] = field(default_factory=dict)
    uses_write: bool = False  # declared with the deprecated "write" role

    def attr_for(self, column: str) -> str:
        return self.columns.get(column, column)

    @property
    def caller_keyed(self) -> bool:
        """The primary column is inserted from the entity, not generated."""
        return self.primary_db in self.insert_cols


@dataclass(frozen=True)
class Statement:
    """
    SQL text plus its binds: named ``params`` for :name placeholders or
    positional ``args`` for ? placeholders.
    """
    sql: str
    params: Mapping[str, Any] = field(default_factory=dict)
    args: tuple[Any, ...] = ()
