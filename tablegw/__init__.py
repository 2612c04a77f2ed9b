from .config import GatewayConfig, TagScheme
from .db.gateway import Gateway, new_gateway
from .db.meta import column
from .db.session import DbSession
from .errors import (
    GatewayErrorKind,
    MultiplePrimaryKeysError,
    NoPrimaryKeyError,
    StructConfigError,
    TableGatewayError,
)

__all__ = [
    "Gateway",
    "new_gateway",
    "column",
    "DbSession",
    "GatewayConfig",
    "TagScheme",
    "TableGatewayError",
    "StructConfigError",
    "NoPrimaryKeyError",
    "MultiplePrimaryKeysError",
    "GatewayErrorKind",
]
