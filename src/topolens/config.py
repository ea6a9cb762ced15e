"""
Global Configuration and Safety Defaults.

Path enumeration is exponential in the worst case; these limits keep a
single query bounded in both time and memory. They can be tuned per project
through `.topolens/config.yaml` or environment variables.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

# --- Search Limits ---
# Default hop limit for path and reachability queries
DEFAULT_MAX_HOPS = 5

# Completed paths kept for a single (start, end) pair
MAX_PATHS_PER_PAIR = 20

# Completed paths kept across all pairs of one query
MAX_TOTAL_PATHS = 100

# Pending path prefixes before a pair's search is abandoned
MAX_FRONTIER_SIZE = 10_000

DEFAULT_CONFIG_PATH = Path(".topolens/config.yaml")

ENV_OVERRIDES: Dict[str, str] = {
    "TOPOLENS_MAX_HOPS": "default_max_hops",
    "TOPOLENS_MAX_PATHS_PER_PAIR": "max_paths_per_pair",
    "TOPOLENS_MAX_TOTAL_PATHS": "max_total_paths",
    "TOPOLENS_MAX_FRONTIER": "max_frontier",
}


class SearchConfig(BaseModel):
    """The `search:` section of the config file."""
    default_max_hops: int = Field(default=DEFAULT_MAX_HOPS, ge=0)
    max_paths_per_pair: int = Field(default=MAX_PATHS_PER_PAIR, ge=1)
    max_total_paths: int = Field(default=MAX_TOTAL_PATHS, ge=1)
    max_frontier: int = Field(default=MAX_FRONTIER_SIZE, ge=1)


class TopolensConfig(BaseModel):
    search: SearchConfig = Field(default_factory=SearchConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "TopolensConfig":
        """
        Load configuration from YAML, then apply environment overrides.

        A missing file yields defaults. An unreadable or invalid file is
        logged and also yields defaults.
        """
        path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        raw: Dict[str, Any] = {}

        if path.exists():
            try:
                with open(path, "r") as f:
                    raw = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to read config {path}: {e}")
                raw = {}

        if not isinstance(raw, dict):
            logger.warning(f"Ignoring config {path}: expected a mapping")
            raw = {}

        search = raw.get("search") or {}
        if not isinstance(search, dict):
            logger.warning(f"Ignoring config {path}: 'search' must be a mapping")
            search = {}
        search = dict(search)
        for env_name, key in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value is not None:
                search[key] = value

        try:
            return cls(search=SearchConfig(**search))
        except ValidationError as e:
            logger.warning(f"Invalid search configuration, using defaults: {e}")
            return cls()
