"""
ProjectStore - durable storage for project records.

Each project lives in one JSON record under ``tasks_dir`` named after the
project. Records are always read and written whole; a companion Markdown plan
is kept in ``plans_dir``.
"""
import threading
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from tasktrack.logs import get_logger
from tasktrack.models import Project, ProjectStatus
from tasktrack.recovery import CorruptionError, FatalError, FileOperationError
from .io import atomic_write, load_model, DATA_JSON, DATA_TEXT

log = get_logger("store")

RECORD_SUFFIX = ".json"
PLAN_SUFFIX = ".md"

PLAN_TEMPLATE = """# {name}

**Status:** active
**Started:** {today}
**Last Updated:** {today}

## Goal
[Describe the objective]

## Phases

### Phase 1: [Name]
- [ ] Step 1
- [ ] Step 2

## Notes
[Context, decisions, blockers]
"""

class ProjectStore:
    """Reads and writes whole project records, keyed by project name."""

    def __init__(self, tasks_dir: Union[Path, str], plans_dir: Union[Path, str],
                 clock: Callable[[], date] = date.today, strict: bool = False):
        self.tasks_dir = Path(tasks_dir)
        self.plans_dir = Path(plans_dir)
        self.clock = clock
        self.strict = strict
        # name -> [lock, number of holders and waiters]; entries go away when unused
        self._locks: Dict[str, list] = {}
        self._registry_lock = threading.Lock()

    def __enter__(self):
        self.ensure_ready()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False

    def ensure_ready(self):
        """Create the record and plan directories if they are missing."""
        for directory in (self.tasks_dir, self.plans_dir):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                error_msg = f"Cannot create directory {directory}: {e}"
                log.error(error_msg)
                raise FileOperationError(error_msg) from e

    @staticmethod
    def _check_name(name: str):
        if (not name or not name.strip() or name.startswith(".")
                or "/" in name or "\\" in name or "\x00" in name):
            raise ValueError(f"Invalid project name: {name!r}")

    def project_path(self, name: str) -> Path:
        self._check_name(name)
        return self.tasks_dir / f"{name}{RECORD_SUFFIX}"

    def plan_path(self, name: str) -> Path:
        self._check_name(name)
        return self.plans_dir / f"{name}{PLAN_SUFFIX}"

    @contextmanager
    def lock(self, name: str):
        """Hold the per-project lock for a load-mutate-save sequence."""
        with self._registry_lock:
            entry = self._locks.setdefault(name, [threading.RLock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._registry_lock:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[name]

    def list(self) -> List[str]:
        """Names of all stored projects. Empty when the directory is missing or unreadable."""
        try:
            names = [
                entry.name[:-len(RECORD_SUFFIX)]
                for entry in self.tasks_dir.iterdir()
                if entry.is_file() and entry.name.endswith(RECORD_SUFFIX) and not entry.name.startswith(".")
            ]
        except OSError as e:
            log.debug(f"Cannot list {self.tasks_dir}: {e}")
            return []
        return sorted(names)

    def load(self, name: str) -> Optional[Project]:
        """
        Load a project record.

        Returns None when the record does not exist. Unreadable or malformed
        records are also reported as None unless the store is strict, in which
        case the CorruptionError or FileOperationError propagates.
        """
        try:
            path = self.project_path(name)
        except ValueError:
            return None

        try:
            project = load_model(Project, path)
        except (CorruptionError, FileOperationError) as e:
            if self.strict:
                raise
            log.warning(f"Treating project '{name}' as absent: {e}")
            return None

        # The file name is the key; saves must go back to the record that was loaded
        if project is not None and project.name != name:
            log.warning(f"Record {path} names project '{project.name}', using '{name}'")
            project.name = name
        return project

    def save(self, project: Project):
        """Stamp the update day and atomically replace the project's record."""
        path = self.project_path(project.name)
        project.updated = self.clock()
        atomic_write(DATA_JSON, path, project.to_dict(), create_dirs=True)
        log.debug(f"Saved project '{project.name}' ({len(project.tasks)} tasks)")

    def create(self, name: str) -> Project:
        """Create, persist and return a new active project with an empty task list."""
        self.project_path(name)
        today = self.clock()
        project = Project(name=name, status=ProjectStatus.ACTIVE, created=today, updated=today)
        with self.lock(name):
            self.save(project)
        self._write_plan(name, today)
        log.info(f"Created project '{name}'")
        return project

    def _write_plan(self, name: str, today: date):
        # Best effort: the plan is not part of the record's consistency
        path = self.plan_path(name)
        if path.exists():
            log.debug(f"Keeping existing plan {path}")
            return
        try:
            atomic_write(DATA_TEXT, path, PLAN_TEMPLATE.format(name=name, today=today.isoformat()), create_dirs=True)
        except (FileOperationError, FatalError) as e:
            log.warning(f"Could not write plan for project '{name}': {e}")

    def list_active(self) -> List[Project]:
        """All loadable projects whose status is active."""
        active = []
        for name in self.list():
            try:
                project = self.load(name)
            except (CorruptionError, FileOperationError) as e:
                log.warning(f"Skipping project '{name}': {e}")
                continue
            if project is not None and project.status == ProjectStatus.ACTIVE:
                active.append(project)
        return active
