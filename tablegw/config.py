from dataclasses import dataclass
from enum import Enum


class TagScheme(str, Enum):
    SPLIT = "split"
    WRITE = "write"
    AUTO = "auto"


@dataclass
class GatewayConfig:
    tag_scheme: TagScheme = TagScheme.SPLIT
    log_failures: bool = True
    metrics_enabled: bool = True

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        try:
            self.tag_scheme = TagScheme(self.tag_scheme)
        except ValueError:
            raise ValueError(
                f"tag_scheme must be one of {[s.value for s in TagScheme]}, "
                f"got {self.tag_scheme!r}"
            ) from None
