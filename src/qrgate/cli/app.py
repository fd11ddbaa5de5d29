from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from qrgate.config.settings import settings
from qrgate.ratelimit.limiter import RateLimiter
from qrgate.services.qr_render import render_png
from qrgate.services.url_validation import InvalidUrlError, sanitize_url, validate_url

app = typer.Typer(help="QRGate CLI (validate URLs, render QR codes, inspect rate limits).")
console = Console()


@app.command("validate-url")
def validate_url_cmd(url: str = typer.Argument(..., help="URL to check.")) -> None:
    result = validate_url(url)
    if not result.valid:
        console.print(f"[red]✗ {result.reason}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✓ {result.reason}[/green]")


@app.command("generate")
def generate_cmd(
    url: str = typer.Argument(..., help="URL to encode."),
    out: Path = typer.Option(Path("qr-code.png"), "--out", "-o", help="PNG output path."),
    box_size: int = typer.Option(settings.qr_box_size, help="Pixels per module."),
    border: int = typer.Option(settings.qr_border, help="Quiet zone width in modules."),
) -> None:
    """
    Render a QR code for URL and write it as a PNG.
    """
    try:
        clean = sanitize_url(url)
    except InvalidUrlError as e:
        console.print(f"[red]✗ {e.reason}[/red]")
        raise typer.Exit(1)

    png = render_png(clean, box_size=box_size, border=border)
    out.write_bytes(png)
    typer.echo(f"✅ Wrote {len(png)} bytes to {out}")


@app.command("limits")
def limits_cmd() -> None:
    """Show the effective rate limit configuration."""
    table = Table(title="Rate Limit")
    table.add_column("setting", style="cyan")
    table.add_column("value", style="green")
    table.add_row("protected_prefix", settings.protected_prefix)
    table.add_row("window_ms", str(settings.rate_limit_window_ms))
    table.add_row("max_tokens", str(settings.rate_limit_max_tokens))
    table.add_row("carry_partial_window", str(settings.rate_limit_carry_partial_window))
    table.add_row("idle_windows", str(settings.rate_limit_idle_windows))
    table.add_row("trust_forwarded_for", str(settings.trust_forwarded_for))
    console.print(table)


@app.command("simulate")
def simulate_cmd(
    requests: int = typer.Option(7, min=1, help="Number of calls to replay."),
    spacing_ms: int = typer.Option(0, min=0, help="Milliseconds between calls."),
    identity: str = typer.Option("1.2.3.4", help="Client identity."),
    window_ms: int = typer.Option(settings.rate_limit_window_ms, min=1),
    max_tokens: int = typer.Option(settings.rate_limit_max_tokens, min=1),
    carry: bool = typer.Option(settings.rate_limit_carry_partial_window, help="Keep partial-window time."),
) -> None:
    """
    Replay calls against a fresh limiter starting at t=0 and print each decision.
    """
    limiter = RateLimiter(window_ms=window_ms, max_tokens=max_tokens, carry_partial_window=carry)

    table = Table(title=f"Simulated requests for {identity}")
    table.add_column("#", style="cyan")
    table.add_column("t_ms", style="cyan")
    table.add_column("allowed")
    table.add_column("remaining", style="magenta")
    table.add_column("reset_at", style="magenta")

    admitted = 0
    for i in range(requests):
        now = i * spacing_ms
        d = limiter.check_and_consume(identity, now)
        admitted += int(d.allowed)
        table.add_row(
            str(i + 1),
            str(now),
            "[green]yes[/green]" if d.allowed else "[red]429[/red]",
            str(d.remaining),
            str(d.reset_at),
        )

    console.print(table)
    typer.echo(f"admitted={admitted} rejected={requests - admitted}")


if __name__ == "__main__":
    app()
