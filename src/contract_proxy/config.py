from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from contract_proxy.errors import DirectoryUnavailable, InvalidConfiguration

logger = logging.getLogger(__name__)

_LATENCY_PATTERN = re.compile(r"^\s*(\d+)\s*-\s*(\d+)\s*$")

ParserName = Literal["regex", "tree-sitter"]


class LatencyRange(BaseModel):
    min_ms: int = Field(ge=0)
    max_ms: int = Field(ge=0)


class ServerConfig(BaseModel):
    contracts_dir: Path = Path("contracts")
    external_dirs: list[Path] = []
    host: str = "127.0.0.1"
    port: int = 8080
    target_url: str | None = None
    latency: LatencyRange | None = None
    hot_reload: bool = True
    cache: bool = True
    verbose: bool = False
    parser: ParserName = "regex"

    @property
    def all_directories(self) -> list[Path]:
        """Contract directories in priority order, local contracts first."""
        return [self.contracts_dir, *self.external_dirs]

    def prepare_directories(self) -> None:
        """Create a missing local contracts directory; fail on a missing external one."""
        if not self.contracts_dir.exists():
            logger.warning("Contracts directory not found: %s, creating it", self.contracts_dir)
            self.contracts_dir.mkdir(parents=True, exist_ok=True)
        for directory in self.external_dirs:
            if not directory.is_dir():
                raise DirectoryUnavailable(str(directory), role="external")

    def summary(self) -> dict[str, object]:
        return {
            "contracts_dir": str(self.contracts_dir),
            "external_dirs": [str(d) for d in self.external_dirs],
            "port": self.port,
            "target_url": self.target_url,
            "hot_reload": self.hot_reload,
            "cache": self.cache,
            "parser": self.parser,
        }


def parse_latency(value: str) -> LatencyRange:
    """Parse ``"500-2000"`` into a latency range in milliseconds."""
    match = _LATENCY_PATTERN.match(value)
    if match is None:
        raise InvalidConfiguration("latency", value, 'format "min-max" (e.g., "500-2000")')
    low, high = int(match.group(1)), int(match.group(2))
    if low > high:
        raise InvalidConfiguration("latency", value, "min to be lower than or equal to max")
    return LatencyRange(min_ms=low, max_ms=high)


def latency_or_none(value: str | None) -> LatencyRange | None:
    """Like :func:`parse_latency`, but an invalid range is logged and ignored."""
    if not value:
        return None
    try:
        return parse_latency(value)
    except InvalidConfiguration as exc:
        logger.warning("%s; latency simulation disabled", exc)
        return None
