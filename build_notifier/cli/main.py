"""
Build Notifier CLI

Command-line interface for sending build notifications from a history file.

Usage:
    build-notify [OPTIONS] COMMAND [ARGS]...

Commands:
    started    Announce a started build
    completed  Report a completed build
    classify   Show how a completed build would be classified
"""

import logging
import sys

import click
from dotenv import load_dotenv

from ..config import NotifierConfig
from ..errors import ConfigError
from ..monitoring.sentry import init_sentry

# Load .env file
load_dotenv()


def setup_logging(verbose: bool):
    """Configure logging to output to stderr."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Verbose output (show DEBUG logs)')
@click.option('-q', '--quiet', is_flag=True, help='Quiet mode (only show warnings/errors)')
@click.pass_context
def cli(ctx, verbose, quiet):
    """Build Notifier - Slack notifications for build lifecycle events."""
    if quiet:
        logging.basicConfig(level=logging.WARNING, format='%(message)s')
    else:
        setup_logging(verbose)

    try:
        config = NotifierConfig.from_env()
    except ConfigError as e:
        click.echo(click.style(f"Configuration error: {e}", fg="red"))
        raise SystemExit(1)

    init_sentry(config)

    ctx.ensure_object(dict)
    ctx.obj['config'] = config
    ctx.obj['verbose'] = verbose


# Import and register commands
from .notify import started, completed, classify  # noqa: E402

cli.add_command(started)
cli.add_command(completed)
cli.add_command(classify)


if __name__ == '__main__':
    cli()
