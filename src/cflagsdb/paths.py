"""
cflagsdb Path Configuration

Two concerns live here:

1. Resolving the file references handed to ``record`` into the canonical
   absolute paths used as database keys.
2. Locating cflagsdb's own data files. All project paths are relative to the
   project root (current working directory).

Directory Structure:
.cflagsdb/
├── cflags.db            # Flags database
├── config.json          # Local config overrides (optional)
└── logs/                # Log files (opt-in)
"""

import os
from pathlib import Path
from typing import Optional, Union

PathRef = Union[str, "os.PathLike[str]"]

# Characters with special meaning in an SQLite GLOB pattern
_GLOB_SPECIAL = "*?["


def _as_text(value) -> Optional[str]:
    if isinstance(value, os.PathLike):
        value = os.fspath(value)
    if not isinstance(value, str) or not value or "\x00" in value:
        return None
    return value


def resolve_path(base_dir: PathRef, ref: PathRef) -> Optional[str]:
    """
    Normalize a file reference into an absolute path.

    Absolute references are returned normalized; relative ones are joined onto
    ``base_dir`` first. Nothing on disk is consulted.

    Args:
        base_dir: Directory relative references are resolved against
        ref: File reference as given by the caller

    Returns:
        The absolute path, or None if the reference cannot be resolved.
    """
    ref_text = _as_text(ref)
    if ref_text is None:
        return None

    if os.path.isabs(ref_text):
        return os.path.normpath(ref_text)

    base_text = _as_text(base_dir)
    if base_text is None or not os.path.isabs(base_text):
        return None

    return os.path.normpath(os.path.join(base_text, ref_text))


def normalize_dir(base_dir: PathRef) -> Optional[str]:
    """Absolute, normalized form of a base directory (relative input is taken against the CWD)."""
    base_text = _as_text(base_dir)
    if base_text is None:
        return None
    return os.path.normpath(os.path.abspath(base_text))


def glob_escape(text: str) -> str:
    """Escape a literal string so an SQLite GLOB matches it exactly."""
    return "".join(f"[{ch}]" if ch in _GLOB_SPECIAL else ch for ch in text)


class CflagsPaths:
    """
    Centralized path configuration for cflagsdb.

    All paths are lazily resolved relative to project_root.
    Default project_root is current working directory.
    """

    DATA_DIR = ".cflagsdb"
    GLOBAL_DIR = Path.home() / ".cflagsdb"

    DB_NAME = "cflags.db"
    CONFIG_NAME = "config.json"
    LOGS_DIR = "logs"

    def __init__(self, project_root: Optional[Path] = None):
        self._project_root = project_root

    @property
    def project_root(self) -> Path:
        """Get the project root directory."""
        if self._project_root is None:
            return Path.cwd()
        return self._project_root

    @property
    def data_dir(self) -> Path:
        return self.project_root / self.DATA_DIR

    @property
    def flags_db(self) -> Path:
        """Get the default flags database path."""
        return self.data_dir / self.DB_NAME

    @property
    def local_config(self) -> Path:
        return self.data_dir / self.CONFIG_NAME

    @property
    def global_config(self) -> Path:
        return self.GLOBAL_DIR / self.CONFIG_NAME

    @property
    def logs_dir(self) -> Path:
        return self.data_dir / self.LOGS_DIR

    def ensure_dirs(self) -> None:
        """Create all necessary directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.logs_dir.mkdir(exist_ok=True)


_default_paths: Optional[CflagsPaths] = None


def get_paths(project_root: Optional[Path] = None) -> CflagsPaths:
    """
    Get paths configuration.

    Args:
        project_root: Optional project root. If None, uses the cached CWD-based instance.
    """
    global _default_paths

    if project_root is not None:
        return CflagsPaths(project_root)

    if _default_paths is None:
        _default_paths = CflagsPaths()
    return _default_paths
