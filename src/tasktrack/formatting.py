"""Plain text rendering of projects and tasks for the CLI."""
from typing import Iterable, List, Optional

from .models import Project, Task, TaskStatus

STATUS_ICONS = {
    TaskStatus.COMPLETED: "✓",
    TaskStatus.IN_PROGRESS: "→",
    TaskStatus.BLOCKED: "⊘",
}

def format_task_list(project: Project, tasks: Optional[Iterable[Task]] = None) -> str:
    """One header line, then one line per task. ``tasks`` narrows the listing."""
    if tasks is None:
        tasks = project.tasks

    lines = [f"=== {project.name} ==="]
    for task in tasks:
        icon = STATUS_ICONS.get(task.status, " ")
        line = f"[{icon}] #{task.id}: {task.subject}"
        if task.blocked_by:
            line += f" (blocked by: {', '.join(task.blocked_by)})"
        lines.append(line)
    return "\n".join(lines)

def format_active_summary(projects: List[Project]) -> str:
    if not projects:
        return ""

    lines = ["<active-tasks>", "Active task projects for context:"]
    for project in projects:
        in_progress = project.tasks_with_status(TaskStatus.IN_PROGRESS)
        pending = project.tasks_with_status(TaskStatus.PENDING)
        blocked = project.tasks_with_status(TaskStatus.BLOCKED)

        lines.append(f"\n## {project.name}")
        if in_progress:
            lines.append("In Progress:")
            for task in in_progress:
                lines.append(f"  - #{task.id}: {task.subject}")
        if pending:
            lines.append(f"Pending: {len(pending)} tasks")
        if blocked:
            lines.append(f"Blocked: {len(blocked)} tasks")

    lines.append("</active-tasks>")
    return "\n".join(lines)

def format_task_detail(task: Task) -> str:
    lines = [
        f"Task #{task.id}: {task.subject}",
        f"Status: {task.status.value}",
    ]
    if task.blocked_by:
        lines.append(f"Blocked by: {', '.join(task.blocked_by)}")
    if task.blocks:
        lines.append(f"Blocks: {', '.join(task.blocks)}")
    if task.notes:
        lines.append(f"Notes: {task.notes}")
    return "\n".join(lines)

def format_project_summary(project: Project) -> str:
    return f"{project.name} [{project.status.value}]: {project.completed_count()}/{len(project.tasks)} completed"
