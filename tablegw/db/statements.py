from __future__ import annotations

from typing import Any, Mapping, Sequence, Tuple, Union

from .helpers import (
    _validate_identifier,
    quote_idents,
    quote_named_values,
    quote_select_set,
    quote_update_set,
)
from .models import Statement, TableMeta

Selectors = Union[Mapping[str, Any], Sequence[Tuple[str, Any]]]
OrderBy = Union[Mapping[str, str], Sequence[Tuple[str, str]]]

_DIRECTIONS = ("asc", "desc")


def _pairs(items: Selectors | OrderBy | None) -> list[tuple[str, Any]]:
    if not items:
        return []
    if isinstance(items, Mapping):
        return list(items.items())
    return [(k, v) for k, v in items]


def _field_value(entity: Any, meta: TableMeta, column: str) -> Any:
    return getattr(entity, meta.attr_for(column))


def primary_value(entity: Any, meta: TableMeta) -> Any:
    return getattr(entity, meta.primary_name)


def build_insert(table: str, meta: TableMeta, entity: Any) -> Statement:
    sql = "INSERT INTO `%s` (%s) VALUES (%s)" % (
        table,
        ",".join(quote_idents(meta.insert_cols)),
        ",".join(quote_named_values(meta.insert_cols)),
    )
    params = {col: _field_value(entity, meta, col) for col in meta.insert_cols}
    return Statement(sql, params)


def build_read(table: str, meta: TableMeta, entity: Any) -> Statement:
    sql = "SELECT * FROM `%s` WHERE `%s` = ?" % (table, meta.primary_db)
    return Statement(sql, args=(primary_value(entity, meta),))


def build_update(table: str, meta: TableMeta, entity: Any) -> Statement:
    sql = "UPDATE `%s` SET %s WHERE `%s` = :%s" % (
        table,
        ",".join(quote_update_set(meta.update_cols)),
        meta.primary_db,
        meta.primary_db,
    )
    params = {col: _field_value(entity, meta, col) for col in meta.update_cols}
    params[meta.primary_db] = primary_value(entity, meta)
    return Statement(sql, params)


def build_delete(table: str, meta: TableMeta, entity: Any) -> Statement:
    sql = "DELETE FROM `%s` WHERE `%s` = ?" % (table, meta.primary_db)
    return Statement(sql, args=(primary_value(entity, meta),))


def build_select(
    table: str,
    where: Selectors | None = None,
    order_by: OrderBy | None = None,
) -> Statement:
    """
    SELECT * with ANDed equality filters and an optional ORDER BY.

    Filters and ordering are applied in the order given, so the SQL text is
    deterministic. Column names are validated; values are bound positionally.
    """
    filters = _pairs(where)
    names = [_validate_identifier(col, "filter column") for col, _ in filters]
    args = tuple(value for _, value in filters)

    sql = "SELECT * FROM `%s`" % table
    if names:
        sql += " WHERE " + " AND ".join(quote_select_set(names))

    obs = []
    for col, direction in _pairs(order_by):
        col = _validate_identifier(col, "order column")
        if not isinstance(direction, str) or direction.lower() not in _DIRECTIONS:
            raise ValueError(
                f"Invalid sort direction {direction!r} for {col!r}: expected 'asc' or 'desc'"
            )
        obs.append(f"{col} {direction}")
    if obs:
        sql += " ORDER BY " + ",".join(obs)

    return Statement(sql, args=args)
