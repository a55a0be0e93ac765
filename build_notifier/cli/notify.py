"""Notification commands."""

from typing import Optional, Tuple

import click

from ..environment import OsEnvironmentResolver
from ..errors import BuildNotifierError
from ..models.build import BuildRecord
from ..monitoring.slack import SlackSink
from ..notify.classifier import build_status, classify_build, effective_previous_result
from ..notify.dispatcher import BuildCompleted, BuildStarted, create_dispatcher
from ..notify.sink import NotificationSink
from ..repository import InMemoryBuildRepository, load_history

COLOR_STYLES = {"good": "green", "danger": "red", "warning": "yellow"}


class ConsoleSink(NotificationSink):
    """Prints notifications instead of delivering them."""

    def publish(self, text: str, color: str) -> bool:
        click.echo(click.style(f"[{color}]", fg=COLOR_STYLES.get(color)) + f" {text}")
        return True


def _fail(message: str):
    click.echo(click.style(f"Error: {message}", fg="red"))
    raise SystemExit(1)


def _load_build(
    history_file: str,
    project: Optional[str],
    build_number: Optional[int],
) -> Tuple[InMemoryBuildRepository, BuildRecord]:
    """Load the history and pick the requested build (default: newest of the first project)."""
    repository = load_history(history_file)
    projects = repository.project_names()
    if not projects:
        raise BuildNotifierError(f"{history_file} contains no builds")

    project = project or projects[0]
    if build_number is None:
        return repository, repository.get_last_build(project)
    return repository, repository.get_build(project, build_number)


def _run(ctx, event_type, history_file, project, build_number, dry_run):
    config = ctx.obj['config']

    if not dry_run and not config.slack_enabled:
        _fail("SLACK_WEBHOOK_URL is not set (use --dry-run to print messages instead)")

    try:
        repository, build = _load_build(history_file, project, build_number)
        preferences = config.preferences()
        sink = ConsoleSink() if dry_run else SlackSink(config)
        dispatcher = create_dispatcher(
            preferences,
            repository,
            sink,
            resolver=OsEnvironmentResolver(preferences.build_server_url),
        )
        messages = dispatcher.dispatch(event_type(build))
    except BuildNotifierError as e:
        _fail(str(e))

    if not messages:
        click.echo(f"No notification for {build.project_full_name} {build.display_name}")
    elif not dry_run:
        click.echo(f"Published {len(messages)} message(s) for {build.project_full_name} {build.display_name}")


def _build_options(func):
    func = click.option('--build', 'build_number', type=int, help='Build number (default: newest)')(func)
    func = click.option('--project', help='Project full name (default: first in file)')(func)
    func = click.argument('history_file', type=click.Path(exists=True, dir_okay=False))(func)
    return func


@click.command()
@_build_options
@click.option('--dry-run', is_flag=True, help='Print messages instead of posting to Slack')
@click.pass_context
def started(ctx, history_file, project, build_number, dry_run):
    """Announce a started build."""
    _run(ctx, BuildStarted, history_file, project, build_number, dry_run)


@click.command()
@_build_options
@click.option('--dry-run', is_flag=True, help='Print messages instead of posting to Slack')
@click.pass_context
def completed(ctx, history_file, project, build_number, dry_run):
    """Report a completed build (and its commits, if enabled)."""
    _run(ctx, BuildCompleted, history_file, project, build_number, dry_run)


@click.command()
@_build_options
@click.pass_context
def classify(ctx, history_file, project, build_number):
    """Show how a completed build would be classified, without publishing."""
    config = ctx.obj['config']

    try:
        _, build = _load_build(history_file, project, build_number)
    except BuildNotifierError as e:
        _fail(str(e))

    previous = effective_previous_result(build)
    message_type = classify_build(build, config.preferences())
    result = build.result.value if build.result else "IN PROGRESS"

    click.echo(f"{build.project_full_name} {build.display_name}: {result}")
    click.echo(f"  Previous result: {previous.value}")
    click.echo(f"  Notification:    {message_type.name}")
    click.echo(f"  Status:          {build_status(build).value}")
