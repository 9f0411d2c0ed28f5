"""
cflagsdb User Configuration

Hierarchical config system with global defaults + local overrides:
- Global: ~/.cflagsdb/config.json (cross-project settings)
- Local: .cflagsdb/config.json (project-specific overrides)

Config structure:
{
  "store": {
    "path": ".cflagsdb/cflags.db",   // Flags database, relative to project root
    "busy_timeout_ms": 1000          // Lock wait before a write fails
  }
}
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from cflagsdb.exceptions import ConfigError
from cflagsdb.logging_config import logger
from cflagsdb.paths import CflagsPaths
from cflagsdb.storage.sqlite.config import BUSY_TIMEOUT_MS


DEFAULT_CONFIG = {
    "store": {
        "path": f"{CflagsPaths.DATA_DIR}/{CflagsPaths.DB_NAME}",
        "busy_timeout_ms": BUSY_TIMEOUT_MS,
    }
}


class UserConfig:
    """
    Manages hierarchical user configuration.

    Load order (with override):
    1. Default config (hardcoded)
    2. Global config (~/.cflagsdb/config.json)
    3. Local config (.cflagsdb/config.json)
    """

    def __init__(self, project_root: Optional[Path] = None, global_config_path: Optional[Path] = None):
        paths = CflagsPaths(project_root or Path.cwd())
        self.project_root = paths.project_root
        self.global_config_path = global_config_path or paths.global_config
        self.local_config_path = paths.local_config

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        config = self._deep_merge({}, DEFAULT_CONFIG)

        for label, path in (("global", self.global_config_path), ("local", self.local_config_path)):
            if not path.exists():
                continue
            try:
                with open(path, 'r') as f:
                    loaded = json.load(f)
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to load {label} config: {e}")
                continue
            if not isinstance(loaded, dict):
                logger.warning(f"Ignoring {label} config at {path}: top level must be an object")
                continue
            config = self._deep_merge(config, loaded)
            logger.debug(f"Loaded {label} config from {path}")

        return config

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        """
        Deep merge two dictionaries, with override taking precedence.
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            elif isinstance(value, dict):
                result[key] = self._deep_merge({}, value)
            else:
                result[key] = value

        return result

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a config value by dot-separated key.

        Examples:
            config.get("store.path")             # ".cflagsdb/cflags.db"
            config.get("store.busy_timeout_ms")  # 1000
        """
        value = self._config

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    @property
    def db_path(self) -> Path:
        """Configured flags database path, resolved against the project root."""
        raw = self.get("store.path")
        if not isinstance(raw, str) or not raw:
            raise ConfigError(f"store.path must be a non-empty string, got {raw!r}")
        path = Path(raw).expanduser()
        if not path.is_absolute():
            path = self.project_root / path
        return path

    @property
    def busy_timeout_ms(self) -> int:
        raw = self.get("store.busy_timeout_ms")
        if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
            raise ConfigError(f"store.busy_timeout_ms must be a non-negative integer, got {raw!r}")
        return raw
