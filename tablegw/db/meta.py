from __future__ import annotations

import dataclasses
import functools
import logging
import warnings
from typing import Any

from ..config import TagScheme
from ..errors import MultiplePrimaryKeysError, NoPrimaryKeyError, StructConfigError
from .helpers import _validate_identifier
from .models import TableMeta

logger = logging.getLogger(__name__)

# Field metadata keys
TAG_DB = "db"
TAG_TGW = "tgw"

# Roles
PRIMARY = "primary"
INSERT = "insert"
UPDATE = "update"
WRITE = "write"

_SCHEME_ROLES = {
    TagScheme.SPLIT: frozenset({PRIMARY, INSERT, UPDATE}),
    TagScheme.WRITE: frozenset({PRIMARY, WRITE}),
    TagScheme.AUTO: frozenset({PRIMARY, INSERT, UPDATE, WRITE}),
}


def column(name: str | None = None, *roles: str, **kwargs: Any) -> Any:
    """
    Declare a mapped dataclass field.

    ``name`` is the column name (the field name when omitted) and ``roles``
    are drawn from ``primary``, ``insert`` and ``update``. Remaining keyword
    arguments go to :func:`dataclasses.field`.

    Usage:
        @dataclass
        class User:
            id: int = column("id", "primary", default=0)
            name: str = column("name", "insert", "update", default="")
            created_at: datetime | None = column("created_at", default=None)
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    if name is not None:
        metadata[TAG_DB] = name
    metadata[TAG_TGW] = ",".join(roles)
    return dataclasses.field(metadata=metadata, **kwargs)


def entity_type(entity: Any) -> type:
    cls = entity if isinstance(entity, type) else type(entity)
    if not dataclasses.is_dataclass(cls):
        raise StructConfigError(
            f"{cls.__name__} is not a dataclass; declare entities with @dataclass",
            entity=cls.__name__,
        )
    return cls


def parse_meta(
    entity: Any,
    scheme: TagScheme = TagScheme.SPLIT,
    stacklevel: int = 2,
) -> TableMeta:
    """
    Return the TableMeta of an entity instance or type.

    Metadata is derived once per entity type. Types using the deprecated
    ``write`` role trigger a DeprecationWarning on every call; ``stacklevel``
    is passed to :func:`warnings.warn` so wrappers can point it at their own
    caller.

    Raises:
        MultiplePrimaryKeysError: more than one field is marked primary
        NoPrimaryKeyError: no field is marked primary
        StructConfigError: no insert columns, unknown roles, unsafe column
            names, ``write`` combined with ``insert``/``update``
    """
    meta = _parse_type(entity_type(entity), TagScheme(scheme))
    if meta.uses_write:
        warnings.warn(
            f"{entity_type(entity).__name__} uses the 'write' role, which is deprecated. "
            "Declare 'insert' and 'update' roles separately.",
            DeprecationWarning,
            stacklevel=stacklevel,
        )
    return meta


@functools.lru_cache(maxsize=None)
def _parse_type(cls: type, scheme: TagScheme) -> TableMeta:
    allowed = _SCHEME_ROLES[scheme]
    entity = cls.__name__

    primary_name = ""
    primary_db = ""
    insert_cols: list[str] = []
    update_cols: list[str] = []
    columns: dict[str, str] = {}
    uses_write = False

    for f in dataclasses.fields(cls):
        dbname = f.metadata.get(TAG_DB) or f.name
        roles = [r.strip() for r in (f.metadata.get(TAG_TGW) or "").split(",") if r.strip()]
        columns[dbname] = f.name

        unknown = [r for r in roles if r not in allowed]
        if unknown:
            raise StructConfigError(
                f"{entity}.{f.name}: unknown role(s) {unknown} for tag scheme "
                f"{scheme.value!r}; allowed: {sorted(allowed)}",
                entity=entity,
            )

        if roles:
            try:
                _validate_identifier(dbname, "column")
            except ValueError as exc:
                raise StructConfigError(f"{entity}.{f.name}: {exc}", entity=entity) from exc

        # Mark only once as primary
        if PRIMARY in roles:
            if primary_name:
                raise MultiplePrimaryKeysError(
                    f"{entity} marks both {primary_name!r} and {f.name!r} as primary; "
                    "multiple primary keys are not supported",
                    entity=entity,
                )
            primary_name = f.name
            primary_db = dbname

        if WRITE in roles:
            if INSERT in roles or UPDATE in roles:
                raise StructConfigError(
                    f"{entity}.{f.name}: 'write' cannot be combined with 'insert' or 'update'",
                    entity=entity,
                )
            uses_write = True
            if PRIMARY not in roles:
                insert_cols.append(dbname)
                update_cols.append(dbname)

        if INSERT in roles:
            insert_cols.append(dbname)
        if UPDATE in roles:
            update_cols.append(dbname)

    if not primary_name:
        raise NoPrimaryKeyError(f"{entity} has no primary key column", entity=entity)

    if not insert_cols:
        raise StructConfigError(
            f"{entity} has no insertable columns; invalid or incomplete tags",
            entity=entity,
        )

    meta = TableMeta(
        primary_name=primary_name,
        primary_db=primary_db,
        insert_cols=tuple(insert_cols),
        update_cols=tuple(update_cols),
        columns=columns,
        uses_write=uses_write,
    )
    logger.debug("Parsed table metadata for %s: %s", entity, meta)
    return meta
