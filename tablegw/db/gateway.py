from __future__ import annotations

import dataclasses
import logging
import time
from contextlib import contextmanager
from typing import Any, Iterator, TypeVar, Union

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..config import GatewayConfig
from ..errors import StructConfigError
from .helpers import _validate_identifier, rebind
from .meta import parse_meta
from .metrics import observe_gateway_op
from .models import GatewayOperationType, TableMeta
from .session import DbSession
from .statements import (
    OrderBy,
    Selectors,
    build_delete,
    build_insert,
    build_read,
    build_select,
    build_update,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

Database = Union[Engine, DbSession]


class Gateway:
    """
    CRUD access to a single table for dataclass entities.

    Column roles come from ``tablegw.column`` declarations on the entity.
    The gateway holds no state besides the table name, the config and the
    database handle, which is shared and owned by the caller.

    With an Engine every call runs in its own short DbSession. With an active
    DbSession the call joins it and commit/rollback stays with the caller.

    Usage:
        users = Gateway(engine, "users")
        user = User(name="ada", age=36)
        users.create(user)          # user.id is set from the generated key
        users.read(user)
        user.age = 37
        users.update(user)
        rows = users.select(User, where=[("age", 37)], order_by=[("name", "asc")])
        users.delete(user)
    """

    def __init__(
        self,
        db: Database,
        table: str,
        config: GatewayConfig | None = None,
    ) -> None:
        self.db = db
        self.table = _validate_identifier(table, "table")
        self.config = config or GatewayConfig()

    def create(self, entity: Any) -> None:
        """
        INSERT the entity's insert columns and store the generated key on its
        primary field.
        """
        with self._track(GatewayOperationType.CREATE, entity):
            meta = self._meta(entity)
            stmt = build_insert(self.table, meta, entity)
            logger.debug("create: %s", stmt.sql)
            with self._session() as session:
                insert_id = session.execute_insert(stmt.sql, stmt.params)

        # A key inserted from the entity stays as given; MySQL reports 0 and
        # SQLite the rowid for such tables
        if meta.caller_keyed and _has_key(getattr(entity, meta.primary_name)):
            return
        if insert_id:
            setattr(entity, meta.primary_name, insert_id)

    def read(self, entity: Any) -> None:
        """
        Load the row matching the entity's primary key into the entity.

        Raises sqlalchemy.exc.NoResultFound / MultipleResultsFound when the
        key does not match exactly one row.
        """
        with self._track(GatewayOperationType.READ, entity):
            meta = self._meta(entity)
            stmt = build_read(self.table, meta, entity)
            sql, params = rebind(stmt.sql, stmt.args)
            logger.debug("read: %s", sql)
            with self._session() as session:
                row = session.fetch_exactly_one(sql, params)

        _assign(entity, meta, row)

    def update(self, entity: Any) -> int:
        """
        UPDATE the entity's update columns by primary key.

        Matching zero rows is not an error; the affected row count is returned.
        """
        with self._track(GatewayOperationType.UPDATE, entity):
            meta = self._meta(entity)
            if not meta.update_cols:
                raise StructConfigError(
                    f"{type(entity).__name__} has no updatable columns",
                    entity=type(entity).__name__,
                )
            stmt = build_update(self.table, meta, entity)
            logger.debug("update: %s", stmt.sql)
            with self._session() as session:
                return session.execute(stmt.sql, stmt.params)

    def delete(self, entity: Any) -> int:
        """DELETE the row matching the entity's primary key."""
        with self._track(GatewayOperationType.DELETE, entity):
            meta = self._meta(entity)
            stmt = build_delete(self.table, meta, entity)
            sql, params = rebind(stmt.sql, stmt.args)
            logger.debug("delete: %s", sql)
            with self._session() as session:
                return session.execute(sql, params)

    def select(
        self,
        entity_type: type[T],
        where: Selectors | None = None,
        order_by: OrderBy | None = None,
    ) -> list[T]:
        """
        SELECT * with equality filters and ordering, one entity per row.

        ``where`` and ``order_by`` are (column, value) / (column, "asc"|"desc")
        pairs, or mappings used in iteration order. No filters scans the
        whole table.
        """
        with self._track(GatewayOperationType.SELECT, entity_type):
            meta = self._meta(entity_type)
            stmt = build_select(self.table, where, order_by)
            sql, params = rebind(stmt.sql, stmt.args)
            logger.debug("select: %s", sql)
            with self._session() as session:
                rows = session.fetch_all(sql, params)

        return [_from_row(entity_type, meta, row) for row in rows]

    def _meta(self, entity: Any) -> TableMeta:
        # warn at the code calling create/read/update/delete/select
        return parse_meta(entity, self.config.tag_scheme, stacklevel=4)

    @contextmanager
    def _session(self) -> Iterator[DbSession]:
        if isinstance(self.db, DbSession):
            if not self.db.active:
                raise RuntimeError("Gateway was given a DbSession that is not active")
            yield self.db
            return

        with DbSession(self.db) as session:
            yield session

    @contextmanager
    def _track(self, op: GatewayOperationType, entity: Any) -> Iterator[None]:
        start_time = time.monotonic()
        status = "success"
        try:
            yield
        except SQLAlchemyError as exc:
            status = "error"
            if self.config.log_failures and op is not GatewayOperationType.SELECT:
                logger.warning(
                    "%s on %s failed for %s: %s",
                    op.value,
                    self.table,
                    _entity_name(entity),
                    exc,
                )
            raise
        except Exception:
            status = "error"
            raise
        finally:
            if self.config.metrics_enabled:
                latency = time.monotonic() - start_time
                try:
                    observe_gateway_op(self.table, op.value, status, latency)
                except Exception:
                    # metrics must not mask the operation's own outcome
                    logger.debug("Failed to record gateway metrics", exc_info=True)


def new_gateway(db: Database, table: str) -> Gateway:
    """Return a Gateway bound to ``table`` with the default config."""
    return Gateway(db, table)


def _has_key(value: Any) -> bool:
    return value is not None and value != "" and value != 0


def _entity_name(entity: Any) -> str:
    cls = entity if isinstance(entity, type) else type(entity)
    return cls.__name__


def _assign(entity: Any, meta: TableMeta, row: dict[str, Any]) -> None:
    for col, value in row.items():
        attr = meta.columns.get(col)
        if attr is not None:
            setattr(entity, attr, value)


def _from_row(entity_type: type[T], meta: TableMeta, row: dict[str, Any]) -> T:
    init_fields = {f.name for f in dataclasses.fields(entity_type) if f.init}
    kwargs: dict[str, Any] = {}
    late: dict[str, Any] = {}
    for col, value in row.items():
        attr = meta.columns.get(col)
        if attr is None:
            continue
        if attr in init_fields:
            kwargs[attr] = value
        else:
            late[attr] = value

    entity = entity_type(**kwargs)
    for attr, value in late.items():
        setattr(entity, attr, value)
    return entity
