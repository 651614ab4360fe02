"""Message commands: send, schedule, messages, edit, delete."""

import click
from rich.table import Table

from slackwhen.datetime_resolver import format_epoch

from . import cli
from .shared import console, _run_operation

channel_option = click.option(
    "--channel", "-c", default=None,
    help="Channel ID (C…, G… or D…). Defaults to SLACKWHEN_DEFAULT_CHANNEL.",
)


def _print_result(title: str, result: dict):
    response = result.get("response", {})
    console.print(f"[green]✓ {title}[/green]")
    for key in ("channel", "ts", "scheduled_message_id", "post_at",
                "human_readable_schedule", "human_readable_time"):
        if response.get(key) is not None:
            console.print(f"  [bold]{key}[/bold]: {response[key]}")


@cli.command()
@click.argument("text")
@channel_option
def send(text, channel):
    """Send TEXT to a channel now."""
    result = _run_operation(lambda ops: ops.send(channel, text))
    _print_result("Message sent", result)


@cli.command()
@click.argument("text")
@click.argument("date")
@click.argument("time")
@channel_option
def schedule(text, date, time, channel):
    """Schedule TEXT for DATE (dd/mm/yyyy) at TIME (hh:mm[:ss])."""
    result = _run_operation(lambda ops: ops.schedule(channel, text, date, time))
    _print_result("Message scheduled", result)


@cli.command()
@channel_option
def messages(channel):
    """Show the most recent messages in a channel."""
    result = _run_operation(lambda ops: ops.list(channel))
    history = result.get("response", {}).get("messages") or []

    if not history:
        console.print("[dim]No messages.[/dim]")
        return

    t = Table(title="Recent messages")
    t.add_column("Date")
    t.add_column("Time")
    t.add_column("ts", style="dim")
    t.add_column("Text")
    for msg in history:
        date_str, time_str = format_epoch(float(msg["ts"]))
        text = msg.get("text") or ""
        text = text[:60] + "..." if len(text) > 60 else text
        t.add_row(date_str, time_str, msg["ts"], text)
    console.print(t)


@cli.command()
@click.argument("date")
@click.argument("time")
@click.argument("new_text")
@channel_option
def edit(date, time, new_text, channel):
    """Replace the text of the message posted nearest DATE TIME."""
    result = _run_operation(lambda ops: ops.edit(channel, date, time, new_text))
    _print_result("Message edited", result)


@cli.command()
@click.argument("date")
@click.argument("time")
@channel_option
def delete(date, time, channel):
    """Delete the message posted nearest DATE TIME."""
    result = _run_operation(lambda ops: ops.delete(channel, date, time))
    _print_result("Message deleted", result)
