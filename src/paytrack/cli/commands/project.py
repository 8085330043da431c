"""Project management commands."""

import click

from paytrack.cli.display import rule, short_id
from paytrack.cli.error_handling import handle_domain_error, require_result, require_tracker
from paytrack.cli.resolution import resolve_project_or_exit
from paytrack.domain.errors import ValidationError


@click.group()
def project_group():
    """Manage construction projects."""
    pass


@project_group.command("list")
@click.pass_context
def list_projects(ctx):
    """List projects, newest first."""
    tracker = require_tracker(ctx)

    if not tracker.projects:
        click.echo("No projects found.")
        return

    click.echo("\nProjects:")
    rule(60)
    for project in tracker.projects:
        created = project.created_at.strftime("%Y-%m-%d") if project.created_at else ""
        click.echo(f"ID: {short_id(project.id):8s} | {project.name:30s} | {created}")


@project_group.command("create")
@click.argument("name", metavar="PROJECT_NAME")
@click.pass_context
def create_project(ctx, name: str):
    """Create a new project.

    Examples:
        paytrack project create "Site A"
    """
    tracker = require_tracker(ctx)

    try:
        result = tracker.save_project({"name": name})
    except ValidationError as e:
        handle_domain_error(ctx, e)
    project_id = require_result(ctx, result)
    click.echo(f"Created project '{name.strip()}' (ID: {project_id})")


@project_group.command("delete")
@click.argument("project", metavar="PROJECT")
@click.pass_context
def delete_project(ctx, project: str):
    """Delete a project.

    PROJECT can be a project name or ID. Payments that reference the project
    keep showing the project name they were saved with.
    """
    tracker = require_tracker(ctx)
    project_obj = resolve_project_or_exit(ctx, tracker, project)

    if not click.confirm(f"Are you sure you want to delete project '{project_obj.name}'?"):
        click.echo("Deletion cancelled.")
        return

    require_result(ctx, tracker.delete_project(project_obj.id))
    click.echo(f"Deleted project '{project_obj.name}'")


def register_commands(cli):
    """Register project commands with main CLI."""
    cli.add_command(project_group, name="project")
