"""
Configuration management for the cue-thumbs pipeline
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from loguru import logger


@dataclass
class PathsConfig:
    """Locations of the snapshot inputs and the output trees.

    Relative directories are resolved against ``design_root``.
    """

    design_root: str = field(default_factory=lambda: str(Path.cwd()))
    data_repo: str = field(
        default_factory=lambda: str(Path.home() / "Sites" / "retroverse-data")
    )
    snapshots_dir: str = "snapshots"
    thumbnails_dir: str = "output/thumbnails"
    public_dir: str = "public/thumbnails"
    reports_dir: str = "output/reports"

    def resolve(self, value: str) -> Path:
        """Resolve a configured directory against the design root."""
        path = Path(value).expanduser()
        if path.is_absolute():
            return path
        return Path(self.design_root).expanduser() / path

    @property
    def snapshots_path(self) -> Path:
        return self.resolve(self.snapshots_dir)

    @property
    def thumbnails_path(self) -> Path:
        return self.resolve(self.thumbnails_dir)

    @property
    def public_path(self) -> Path:
        return self.resolve(self.public_dir)

    @property
    def reports_path(self) -> Path:
        return self.resolve(self.reports_dir)

    @property
    def report_file(self) -> Path:
        return self.reports_path / "thumbnails.report.json"


@dataclass
class PipelineConfig:
    """Configuration for thumbnail decisions and frame extraction."""

    priority_cue_index: int = 8
    ffmpeg_binary: str = "ffmpeg"
    timeout_seconds: float = 30.0
    jpeg_quality: int = 2  # ffmpeg -q:v scale, 2 (best) .. 31 (worst)
    thumbnail_extension: str = ".jpg"
    workers: int = 1
    progress_interval: int = 100

    def validate(self) -> None:
        """Validate pipeline configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.progress_interval < 1:
            raise ValueError(
                f"progress_interval must be >= 1, got {self.progress_interval}"
            )
        if not 2 <= self.jpeg_quality <= 31:
            raise ValueError(f"jpeg_quality must be in 2..31, got {self.jpeg_quality}")
        if not self.thumbnail_extension.startswith("."):
            raise ValueError(
                f"thumbnail_extension must start with '.', got {self.thumbnail_extension!r}"
            )


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/cue-thumbs/cue-thumbs.log)
    )
    console_output: bool = False  # Also mirror loguru records to stderr


@dataclass
class Config:
    """Main configuration object."""

    paths: PathsConfig = field(default_factory=PathsConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "cue-thumbs"
    return Path.home() / ".config" / "cue-thumbs"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "cue-thumbs"
    return Path.home() / ".local" / "share" / "cue-thumbs"


def _find_project_config() -> Optional[Path]:
    """Find config.toml in the project root by looking for pyproject.toml.

    Returns:
        Path to config.toml in project root, or None if not found
    """
    current = Path(__file__).resolve().parent
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            config_path = parent / "config.toml"
            if config_path.exists():
                return config_path
            return None
    return None


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Project root (detected via pyproject.toml) - for development
    2. Current working directory
    3. XDG_CONFIG_HOME/cue-thumbs (or ~/.config/cue-thumbs)
    """
    project_config = _find_project_config()
    if project_config:
        return project_config

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# cue-thumbs Configuration

[paths]
# Repository the thumbnails and reports are written into (default: cwd)
# design_root = "~/Sites/retroverse-design"

# Data authority that owns the frozen snapshots
data_repo = "~/Sites/retroverse-data"

# Directories below are relative to design_root unless absolute
snapshots_dir = "snapshots"
thumbnails_dir = "output/thumbnails"
public_dir = "public/thumbnails"
reports_dir = "output/reports"

[pipeline]
# VirtualDJ cue slot treated as the representative frame
priority_cue_index = 8

# Frame extraction
ffmpeg_binary = "ffmpeg"
timeout_seconds = 30
jpeg_quality = 2
thumbnail_extension = ".jpg"

# Parallel ffmpeg invocations (report order is always catalog order)
workers = 1

# Log progress every N tracks
progress_interval = 100

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/cue-thumbs/cue-thumbs.log)
# log_file = "/path/to/custom/cue-thumbs.log"

# Also output logs to console (useful for debugging)
console_output = false
""".strip()


def _apply_env_overrides(config: Config) -> None:
    data_repo = os.environ.get("RETROVERSE_DATA_REPO")
    if data_repo:
        config.paths.data_repo = data_repo

    design_root = os.environ.get("CUE_THUMBS_DESIGN_ROOT")
    if design_root:
        config.paths.design_root = design_root

    workers = os.environ.get("CUE_THUMBS_WORKERS")
    if workers:
        try:
            config.pipeline.workers = int(workers)
        except ValueError:
            logger.warning(f"Ignoring non-integer CUE_THUMBS_WORKERS={workers!r}")


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file, falling back to defaults.

    Environment variables override TOML values:
    - RETROVERSE_DATA_REPO
    - CUE_THUMBS_DESIGN_ROOT
    - CUE_THUMBS_WORKERS

    Raises:
        ValueError: If the file exists but holds invalid pipeline settings
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    if config_path is None:
        config_path = get_config_path()

    config = Config()

    if not config_path.exists():
        logger.debug(f"No configuration at {config_path}, using defaults")
        _apply_env_overrides(config)
        config.pipeline.validate()
        return config

    with open(config_path, "rb") as f:
        toml_data = tomllib.load(f)

    if "paths" in toml_data:
        paths_data = toml_data["paths"]
        config.paths = PathsConfig(
            design_root=str(
                Path(paths_data.get("design_root", config.paths.design_root)).expanduser()
            ),
            data_repo=str(
                Path(paths_data.get("data_repo", config.paths.data_repo)).expanduser()
            ),
            snapshots_dir=paths_data.get("snapshots_dir", config.paths.snapshots_dir),
            thumbnails_dir=paths_data.get("thumbnails_dir", config.paths.thumbnails_dir),
            public_dir=paths_data.get("public_dir", config.paths.public_dir),
            reports_dir=paths_data.get("reports_dir", config.paths.reports_dir),
        )

    if "pipeline" in toml_data:
        pipeline_data = toml_data["pipeline"]
        config.pipeline = PipelineConfig(
            priority_cue_index=pipeline_data.get(
                "priority_cue_index", config.pipeline.priority_cue_index
            ),
            ffmpeg_binary=pipeline_data.get(
                "ffmpeg_binary", config.pipeline.ffmpeg_binary
            ),
            timeout_seconds=float(
                pipeline_data.get("timeout_seconds", config.pipeline.timeout_seconds)
            ),
            jpeg_quality=pipeline_data.get("jpeg_quality", config.pipeline.jpeg_quality),
            thumbnail_extension=pipeline_data.get(
                "thumbnail_extension", config.pipeline.thumbnail_extension
            ),
            workers=pipeline_data.get("workers", config.pipeline.workers),
            progress_interval=pipeline_data.get(
                "progress_interval", config.pipeline.progress_interval
            ),
        )

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        log_file = logging_data.get("log_file")
        if log_file:
            log_file = str(Path(log_file).expanduser())
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level).upper(),
            log_file=log_file,
            console_output=logging_data.get(
                "console_output", config.logging.console_output
            ),
        )

    _apply_env_overrides(config)
    config.pipeline.validate()

    return config


def write_default_config(config_path: Optional[Path] = None) -> Path:
    """Write the default configuration template.

    Raises:
        FileExistsError: If a configuration file already exists at the target
    """
    if config_path is None:
        config_path = get_config_dir() / "config.toml"
    if config_path.exists():
        raise FileExistsError(f"Configuration already exists at {config_path}")

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        f.write(create_default_config() + "\n")
    return config_path
