"""
Command Line Interface for tasktrack.
"""

import click
from contextlib import contextmanager
from pathlib import Path
from .version import VERSION
from .config import load_config
from .engine import TaskGraphEngine
from .formatting import format_active_summary, format_project_summary, format_task_detail, format_task_list
from .logs import get_logger
from .models import ProjectStatus, TaskStatus
from .recovery import NotFoundError, TaskTrackError

log = get_logger("cli")

TASK_STATUSES = [s.value for s in TaskStatus]
PROJECT_STATUSES = [s.value for s in ProjectStatus]


@contextmanager
def _errors_to_click():
    """Report core errors as click errors (message on stderr, exit code 1)."""
    try:
        yield
    except (TaskTrackError, ValueError) as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version=VERSION, prog_name="tasktrack")
@click.option('--config', 'config_path', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help='Config file (default: $TASKTRACK_CONFIG or ~/.config/tasktrack/config.yml)')
@click.option('--tasks-dir', type=click.Path(file_okay=False, path_type=Path), default=None,
              help='Directory for project records')
@click.option('--plans-dir', type=click.Path(file_okay=False, path_type=Path), default=None,
              help='Directory for project plans')
@click.pass_context
def main(ctx, config_path, tasks_dir, plans_dir):
    """
    tasktrack - persistent projects and tasks with blocking dependencies.
    """
    with _errors_to_click():
        config = load_config(config_path)
        updates = {}
        if tasks_dir is not None:
            updates["tasks_dir"] = tasks_dir
        if plans_dir is not None:
            updates["plans_dir"] = plans_dir
        config = config.model_copy(update=updates)

        store = config.build_store()
        store.ensure_ready()

    log.debug(f"Using tasks: {config.tasks_dir}, plans: {config.plans_dir}")
    ctx.obj = TaskGraphEngine(store)


@main.command()
@click.argument('name')
@click.pass_obj
def init(engine, name):
    """Create a new project and its plan."""
    with _errors_to_click():
        if engine.store.load(name) is not None:
            raise click.ClickException(f"Project '{name}' already exists")
        engine.store.create(name)
    click.echo(f"Created project '{name}'")
    click.echo(f"Plan: {engine.store.plan_path(name)}")


@main.command(name="list")
@click.argument('project', required=False)
@click.option('--status', type=click.Choice(TASK_STATUSES), default=None, help='Only show tasks with this status')
@click.pass_obj
def list_command(engine, project, status):
    """List all projects or the tasks in one project."""
    store = engine.store

    if project:
        data = store.load(project)
        if data is None:
            click.echo(f"Project '{project}' not found")
            return
        tasks = data.tasks
        if status:
            tasks = data.tasks_with_status(TaskStatus(status))
        click.echo(format_task_list(data, tasks))
        return

    names = store.list()
    if not names:
        click.echo("No projects found")
        return
    for name in names:
        data = store.load(name)
        if data is None:
            click.echo(f"{name}: (error reading)")
        else:
            click.echo(format_project_summary(data))


@main.command()
@click.pass_obj
def active(engine):
    """Show active projects with in-progress tasks."""
    click.echo(format_active_summary(engine.list_active()) or "No active projects")


@main.command()
@click.argument('project')
@click.argument('subject')
@click.option('--blocked-by', 'blocked_by', multiple=True, help='Id of a task this one waits for (repeatable)')
@click.pass_obj
def add(engine, project, subject, blocked_by):
    """Add a task to a project, creating the project if needed."""
    with _errors_to_click():
        task = engine.create_task(project, subject)
        for blocker_id in blocked_by:
            try:
                engine.link_blocker(project, task.id, blocker_id)
            except NotFoundError as e:
                log.warning(f"Skipping blocker #{blocker_id}: {e}")
                click.echo(f"Skipped unknown blocker #{blocker_id}", err=True)
    click.echo(f"Created task #{task.id}: {subject}")


@main.command()
@click.argument('project')
@click.argument('task_id')
@click.option('--status', type=click.Choice(TASK_STATUSES), default=None, help='New status')
@click.option('--notes', default=None, help='Replace the task notes')
@click.pass_obj
def update(engine, project, task_id, status, notes):
    """Update a task's status or notes. Completing a task unblocks its dependents."""
    if status is None and notes is None:
        raise click.UsageError("Nothing to update: pass --status and/or --notes")

    with _errors_to_click():
        if status is not None:
            change = engine.set_status(project, task_id, status)
            click.echo(f"Task #{task_id} status: {status}")
            for other_id in change.unblocked:
                click.echo(f"Task #{other_id} unblocked!")

        if notes is not None:
            engine.set_notes(project, task_id, notes)
            click.echo(f"Notes updated for task #{task_id}")


@main.command()
@click.argument('project')
@click.argument('task_id')
@click.pass_obj
def get(engine, project, task_id):
    """Show one task."""
    if engine.store.load(project) is None:
        raise click.ClickException(f"Project '{project}' not found")
    task = engine.get_task(project, task_id)
    if task is None:
        raise click.ClickException(f"Task '{task_id}' not found in project '{project}'")
    click.echo(format_task_detail(task))


@main.command()
@click.argument('project')
@click.argument('task_id')
@click.argument('blocker_id')
@click.pass_obj
def block(engine, project, task_id, blocker_id):
    """Mark TASK_ID as waiting for BLOCKER_ID."""
    with _errors_to_click():
        engine.link_blocker(project, task_id, blocker_id)
    click.echo(f"Task #{task_id} blocked by #{blocker_id}")


@main.command()
@click.argument('project')
@click.argument('status', type=click.Choice(PROJECT_STATUSES))
@click.pass_obj
def status(engine, project, status):
    """Set a project's lifecycle status."""
    with _errors_to_click():
        engine.set_project_status(project, status)
    click.echo(f"Project '{project}' is now {status}")


if __name__ == "__main__":
    main()
