"""
Configuration for tasktrack.

Settings come from an optional YAML file, then environment overrides:

    tasks_dir: tasks      # project records (relative to the config file)
    plans_dir: plans      # companion plan documents
    strict: false         # raise on malformed records instead of skipping them
"""
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from .data.io import load_yaml_file
from .data.store import ProjectStore
from .logs import get_logger
from .recovery import ConfigError, CorruptionError, FileOperationError

log = get_logger("config")

BASE_DIR = Path.home() / ".local" / "share" / "tasktrack"
DEFAULT_CONFIG_FILE = Path.home() / ".config" / "tasktrack" / "config.yml"

class TasksConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    tasks_dir: Path = Field(
        default=Path("tasks"),
        validation_alias=AliasChoices("tasks_dir", "tasksDir"),
        description="Directory holding one JSON record per project"
    )
    plans_dir: Path = Field(
        default=Path("plans"),
        validation_alias=AliasChoices("plans_dir", "plansDir"),
        description="Directory holding the Markdown plan of each project"
    )
    strict: bool = Field(default=False, description="Raise CorruptionError for malformed records")

    def resolve(self, base: Path) -> "TasksConfig":
        """Return a copy with relative directories anchored at ``base``."""
        return self.model_copy(update={
            "tasks_dir": base / self.tasks_dir.expanduser(),
            "plans_dir": base / self.plans_dir.expanduser(),
        })

    def build_store(self) -> ProjectStore:
        return ProjectStore(self.tasks_dir, self.plans_dir, strict=self.strict)

def _config_path(path: Optional[Union[Path, str]]) -> Optional[Path]:
    if path:
        return Path(path).expanduser()
    env_path = os.getenv("TASKTRACK_CONFIG", "")
    if env_path:
        return Path(env_path).expanduser()
    if DEFAULT_CONFIG_FILE.exists():
        return DEFAULT_CONFIG_FILE
    return None

def load_config(path: Optional[Union[Path, str]] = None) -> TasksConfig:
    """
    Load the configuration.

    Args:
        path: Explicit config file. Falls back to $TASKTRACK_CONFIG, then the
            per-user config file, then built-in defaults.

    Raises:
        ConfigError: The file is missing (when named explicitly), unreadable or invalid
    """
    config_path = _config_path(path)
    base = BASE_DIR
    data = {}

    if config_path is not None:
        try:
            loaded = load_yaml_file(config_path)
        except (CorruptionError, FileOperationError) as e:
            raise ConfigError(f"Cannot read config {config_path}: {e}") from e
        if loaded is None:
            raise ConfigError(f"Config file not found: {config_path}")
        data = loaded
        base = config_path.parent
        log.debug(f"Loaded config from {config_path}")

    try:
        config = TasksConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {config_path}: {e}") from e

    env_tasks = os.getenv("TASKTRACK_TASKS_DIR", "")
    env_plans = os.getenv("TASKTRACK_PLANS_DIR", "")
    if env_tasks:
        config.tasks_dir = Path(env_tasks).expanduser().absolute()
    if env_plans:
        config.plans_dir = Path(env_plans).expanduser().absolute()

    return config.resolve(base)
