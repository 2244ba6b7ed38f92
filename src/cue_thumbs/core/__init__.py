"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Logging and terminal output (Loguru, Rich)
- The pipeline's exception hierarchy
"""

from .config import (
    Config,
    LoggingConfig,
    PathsConfig,
    PipelineConfig,
    create_default_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    load_config,
    write_default_config,
)
from .errors import (
    CatalogError,
    CueDatabaseError,
    OutputRootError,
    PipelineError,
    PublishError,
    SnapshotError,
    SnapshotLinkError,
    SnapshotMissingError,
)
from .output import get_console, log, setup_loguru

__all__ = [
    # Config
    "Config",
    "LoggingConfig",
    "PathsConfig",
    "PipelineConfig",
    "create_default_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "load_config",
    "write_default_config",
    # Errors
    "CatalogError",
    "CueDatabaseError",
    "OutputRootError",
    "PipelineError",
    "PublishError",
    "SnapshotError",
    "SnapshotLinkError",
    "SnapshotMissingError",
    # Output
    "get_console",
    "log",
    "setup_loguru",
]
