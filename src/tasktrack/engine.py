"""
TaskGraphEngine - task mutations and blocker bookkeeping.

Every operation loads the whole project, changes it in memory and saves it
once, while holding the store's lock for that project.
"""
from typing import List, NamedTuple, Optional, Union

from .data.store import ProjectStore
from .logs import get_logger
from .models import Project, ProjectStatus, Task, TaskStatus
from .recovery import NotFoundError

log = get_logger("engine")

class StatusChange(NamedTuple):
    """Result of a status update: the updated task and the ids it unblocked."""
    task: Task
    unblocked: List[str]

class TaskGraphEngine:

    def __init__(self, store: ProjectStore):
        self.store = store

    def _require_project(self, name: str) -> Project:
        project = self.store.load(name)
        if project is None:
            raise NotFoundError(f"Project '{name}' not found", project=name)
        return project

    @staticmethod
    def _require_task(project: Project, task_id: str) -> Task:
        task = project.find_task(task_id)
        if task is None:
            raise NotFoundError(f"Task '{task_id}' not found in project '{project.name}'",
                                project=project.name, task_id=task_id)
        return task

    def create_task(self, project: str, subject: str) -> Task:
        """Append a pending task, creating the project first if it does not exist."""
        with self.store.lock(project):
            data = self.store.load(project)
            if data is None:
                data = self.store.create(project)

            task = Task(id=data.next_task_id(), subject=subject)
            data.tasks.append(task)
            self.store.save(data)

        log.info(f"Created task #{task.id} in project '{project}'")
        return task

    def link_blocker(self, project: str, task_id: str, blocker_id: str) -> Task:
        """
        Record that ``blocker_id`` must complete before ``task_id``.

        Adding a new blocker always moves the task to blocked, whatever its
        previous status. Linking an existing pair changes nothing.
        """
        with self.store.lock(project):
            data = self._require_project(project)
            task = self._require_task(data, task_id)
            blocker = self._require_task(data, blocker_id)

            if blocker_id not in task.blocked_by:
                task.blocked_by.append(blocker_id)
                task.status = TaskStatus.BLOCKED
            if task_id not in blocker.blocks:
                blocker.blocks.append(task_id)

            self.store.save(data)

        log.debug(f"Task #{task_id} in '{project}' blocked by #{blocker_id}")
        return task

    def set_status(self, project: str, task_id: str, status: Union[TaskStatus, str]) -> StatusChange:
        """
        Set a task's status.

        Completing a task removes it from the blocker lists of the tasks it
        blocks. A dependent whose list becomes empty while it is blocked goes
        back to pending and is reported in ``unblocked``. Only direct
        dependents are touched.
        """
        status = TaskStatus(status)
        with self.store.lock(project):
            data = self._require_project(project)
            task = self._require_task(data, task_id)

            task.status = status
            unblocked = []

            if status == TaskStatus.COMPLETED:
                for other in data.tasks:
                    if other is task or task_id not in other.blocked_by:
                        continue
                    other.blocked_by.remove(task_id)
                    if not other.blocked_by and other.status == TaskStatus.BLOCKED:
                        other.status = TaskStatus.PENDING
                        unblocked.append(other.id)

            self.store.save(data)

        for other_id in unblocked:
            log.info(f"Task #{other_id} in '{project}' unblocked by #{task_id}")
        return StatusChange(task, unblocked)

    def set_notes(self, project: str, task_id: str, notes: str) -> Task:
        with self.store.lock(project):
            data = self._require_project(project)
            task = self._require_task(data, task_id)
            task.notes = notes
            self.store.save(data)
        return task

    def set_project_status(self, project: str, status: Union[ProjectStatus, str]) -> Project:
        status = ProjectStatus(status)
        with self.store.lock(project):
            data = self._require_project(project)
            data.status = status
            self.store.save(data)
        log.info(f"Project '{project}' is now {status.value}")
        return data

    def get_task(self, project: str, task_id: str) -> Optional[Task]:
        """Look up a task without raising for a missing project or task."""
        data = self.store.load(project)
        if data is None:
            return None
        return data.find_task(task_id)

    def list_active(self) -> List[Project]:
        return self.store.list_active()
