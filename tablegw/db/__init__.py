from .gateway import Gateway, new_gateway
from .meta import column, parse_meta
from .models import GatewayOperationType, Statement, TableMeta
from .session import DbSession
from .statements import OrderBy, Selectors

__all__ = [
    "Gateway",
    "new_gateway",
    "column",
    "parse_meta",
    "DbSession",
    "TableMeta",
    "Statement",
    "GatewayOperationType",
    "Selectors",
    "OrderBy",
]
