# ABOUTME: The `bookscout gdebug` command: show exactly what the extraction model returned.
# ABOUTME: Prints the raw text, finish reason, usage, and what JSON recovery made of it.

import json

import click
from rich.console import Console
from rich.text import Text

from bookscout.cli.session import create_finder
from bookscout.config import Settings
from bookscout.errors import ConfigurationError, ExtractionServiceError
from bookscout.extraction.recovery import RecoveryFailure


@click.command("gdebug")
@click.argument("description", nargs=-1, required=True)
@click.pass_obj
def gdebug(settings: Settings, description: tuple[str, ...]) -> None:
    """Show the raw extraction for DESCRIPTION and the recovered JSON."""
    console = Console()
    finder = create_finder(settings)
    try:
        response, recovered = finder.debug_text(" ".join(description))
    except (ConfigurationError, ExtractionServiceError) as exc:
        raise click.ClickException(str(exc)) from exc

    usage = json.dumps(response.usage, ensure_ascii=False) if response.usage else "-"
    console.print(f"[bold]finish_reason:[/bold] {response.finish_reason or '-'}")
    console.print(Text.assemble(("usage: ", "bold"), usage))
    console.print("[bold]text:[/bold]")
    console.print(Text(response.text or "<empty>"))

    if isinstance(recovered, RecoveryFailure):
        console.print(f"\n[red]Recovery failed:[/red] {recovered.reason.value}")
        return
    console.print("\n[green]Recovered JSON:[/green]")
    console.print(Text(json.dumps(recovered, ensure_ascii=False, indent=2)))
