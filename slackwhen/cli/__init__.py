"""slackwhen CLI — command line interface."""

import sys

import click

from slackwhen import __version__
from .shared import console


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="slackwhen")
@click.pass_context
def cli(ctx):
    """slackwhen — Slack messages by human date and time"""
    if ctx.invoked_subcommand is None:
        _show_help()


def _show_help():
    """Show all available commands."""
    console.print(f"[bold]slackwhen v{__version__}[/bold] — Slack messages by human date and time\n")

    commands = [
        ("serve", "Start the HTTP API"),
        ("send", "Send a message now"),
        ("schedule", "Schedule a message for dd/mm/yyyy hh:mm[:ss]"),
        ("messages", "Show the 10 most recent messages"),
        ("edit", "Edit the message posted nearest a date and time"),
        ("delete", "Delete the message posted nearest a date and time"),
    ]
    for name, desc in commands:
        console.print(f"    [bold]slackwhen {name:10s}[/bold] {desc}")
    console.print()
    console.print("[dim]Run 'slackwhen <command> --help' for details on a specific command.[/dim]")


# Import all command modules (registers commands onto cli group)
from . import cmd_serve  # noqa: E402, F401
from . import cmd_messages  # noqa: E402, F401


def main():
    """CLI entry point."""
    try:
        cli(standalone_mode=False)
    except click.UsageError as e:
        if e.ctx:
            click.echo(e.ctx.command.get_usage(e.ctx), err=True)
        click.echo("Try 'slackwhen --help' for help.\n", err=True)
        click.echo(f"Error: {e.format_message()}", err=True)
        sys.exit(2)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.exceptions.Exit as e:
        sys.exit(e.code)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
