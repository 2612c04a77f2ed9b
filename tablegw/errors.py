from enum import Enum


class GatewayErrorKind(str, Enum):
    STRUCT_CONFIG = "struct_config"
    NO_PRIMARY = "no_primary"
    MULTI_PRIMARY = "multi_primary"


class TableGatewayError(Exception):
    """Base exception for tablegw validation errors."""

    kind: GatewayErrorKind

    def __init__(self, message: str, entity: str | None = None) -> None:
        super().__init__(message)
        self.entity = entity


class StructConfigError(TableGatewayError):
    """Invalid or incomplete column metadata for the given entity."""

    kind = GatewayErrorKind.STRUCT_CONFIG


class NoPrimaryKeyError(TableGatewayError):
    """Entity declares no primary key column."""

    kind = GatewayErrorKind.NO_PRIMARY


class MultiplePrimaryKeysError(TableGatewayError):
    """Entity declares more than one primary key column."""

    kind = GatewayErrorKind.MULTI_PRIMARY
