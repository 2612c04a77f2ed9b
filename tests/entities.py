from __future__ import annotations

from dataclasses import dataclass, field

from tablegw import column


@dataclass
class User:
    id: int = column("id", "primary", default=0)
    name: str = column("name", "insert", "update", default="")
    age: int = column("age", "insert", "update", default=0)
    status: str = column("status", "insert", default="active")
    created_at: int = column("created_at", "insert", default=0)
    # read-only column, filled by read/select
    note: str | None = column("note", default=None)


@dataclass
class LegacyUser:
    """Same table, declared with the deprecated 'write' role."""

    id: int = field(default=0, metadata={"db": "id", "tgw": "primary"})
    name: str = field(default="", metadata={"db": "name", "tgw": "write"})
    age: int = field(default=0, metadata={"db": "age", "tgw": "write"})
    status: str = field(default="active", metadata={"db": "status"})
