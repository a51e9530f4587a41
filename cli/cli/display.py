"""Rich output formatting for licensectl.

All functions write to a :class:`rich.console.Console` instance (typically
bound to *stderr*) so that machine-readable output on *stdout* is never
polluted with human-readable decoration.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from license_engine.signature import Signature


def display_license(console: Console, signature: Signature, *, source: Path | None = None) -> None:
    """Render the attributes carried by a signature document.

    Parameters
    ----------
    console:
        Rich console to write to (typically stderr).
    signature:
        The signature document whose license attributes are shown.
    source:
        File the document was read from, shown in the title.
    """
    if not signature.license:
        console.print("[yellow]Signature carries no attributes.[/yellow]")
        return

    title = f"License attributes ({source.name})" if source is not None else "License attributes"
    table = Table(title=title, show_lines=False)
    table.add_column("Attribute", style="cyan", no_wrap=True)
    table.add_column("Value")

    for key in sorted(signature.license):
        table.add_row(Text(key), Text(signature.license[key]))

    console.print(table)


def display_keypair(console: Console, private_path: Path, public_path: Path, key_size: int) -> None:
    """Summarise a freshly written key pair."""
    body = (
        f"[bold]Key size:[/bold]    {key_size} bits\n"
        f"[bold]Private key:[/bold] {private_path}  [dim](keep secret)[/dim]\n"
        f"[bold]Public key:[/bold]  {public_path}"
    )
    console.print(Panel(body, title="RSA key pair", border_style="green"))


def display_verification(console: Console, valid: bool) -> None:
    if valid:
        console.print("[green]✓[/green] Valid signature")
    else:
        console.print("[red]✗[/red] Invalid signature")
