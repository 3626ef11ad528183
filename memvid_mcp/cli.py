"""CLI for running and inspecting the memvid MCP server."""

from __future__ import annotations

import asyncio

from rich.console import Console
from rich.table import Table
import typer

app = typer.Typer(
    name="memvid-mcp",
    help="memvid MCP server (stdio) and diagnostics",
    add_completion=False,
)
console = Console()
# stdout belongs to the MCP protocol while serving
err_console = Console(stderr=True)


@app.callback(invoke_without_command=True)
def _default(ctx: typer.Context) -> None:
    # MCP clients usually launch the bare command
    if ctx.invoked_subcommand is None:
        serve(config_path=None, log_level=None)


@app.command()
def serve(
    config_path: str | None = typer.Option(None, "--config", "-c", help="Path to memvid-mcp.toml"),
    log_level: str | None = typer.Option(None, "--log-level", "-l", help="Override log level"),
) -> None:
    """Run the MCP server on stdin/stdout."""
    from memvid_mcp.config import load_config
    from memvid_mcp.server import serve as run_server

    try:
        config = load_config(config_path)
        if log_level:
            config.server.log_level = log_level.lower()
            config.server.validate()
    except ValueError as e:
        err_console.print(f"[red]✗[/] Invalid configuration: {e}")
        raise typer.Exit(2) from None

    run_server(config)


@app.command()
def check(
    config_path: str | None = typer.Option(None, "--config", "-c", help="Path to memvid-mcp.toml"),
) -> None:
    """Show the effective configuration and check the memvid binary."""
    from memvid_mcp.config import load_config
    from memvid_mcp.executor import MemvidExecutor

    try:
        config = load_config(config_path)
    except ValueError as e:
        console.print(f"[red]✗[/] Invalid configuration: {e}")
        raise typer.Exit(2) from None

    table = Table(show_header=False)
    table.add_row("Binary:", config.binary.path)
    table.add_row("Verbose:", str(config.binary.verbose))
    table.add_row("Retries:", f"{config.binary.max_retries} (delay {config.binary.retry_delay:g}s)")
    table.add_row(
        "Timeouts:",
        f"default={config.timeouts.default:g}s heavy={config.timeouts.heavy:g}s rag={config.timeouts.rag:g}s",
    )
    table.add_row("Character limit:", str(config.limits.character_limit))
    table.add_row("Log:", f"{config.server.log_level} ({config.server.log_format})")
    console.print(table)

    executor = MemvidExecutor.from_config(config.binary, config.timeouts.default)
    if not executor.verify_path():
        console.print(f"[red]✗[/] memvid binary not found: {config.binary.path} (set MEMVID_PATH)")
        raise typer.Exit(1)

    result = asyncio.run(executor.execute(["version"], skip_json=True))
    if not result.success:
        console.print(f"[red]✗[/] memvid version failed: {result.error}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/] {str(result.data).strip() or 'memvid responded'}")


@app.command()
def tools() -> None:
    """List the tool catalogue."""
    from memvid_mcp.tools import ALL_TOOLS

    table = Table(title=f"memvid MCP tools ({len(ALL_TOOLS)})")
    table.add_column("Tool", style="cyan")
    table.add_column("Title")
    table.add_column("Timeout")
    table.add_column("Hints", style="dim")

    for spec in ALL_TOOLS:
        hints = ", ".join(k.removesuffix("Hint") for k, v in (spec.hints or {}).items() if v)
        table.add_row(spec.name, spec.title, spec.timeout, hints or "-")

    console.print(table)


def main() -> None:
    """Entry point for memvid-mcp CLI."""
    app()


if __name__ == "__main__":
    main()
