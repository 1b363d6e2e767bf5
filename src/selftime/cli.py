# SPDX-License-Identifier: MIT
"""
selftime command line.

Commands:
  demo      run the nested total/outer/inner/innest scenario and print its report
  overhead  measure the cost of one fork+join pair
  version   print the package version
"""
from __future__ import annotations

import time
from pathlib import Path
from typing import List, Optional

import typer

from . import __version__
from .config import ProfilerConfig, load_config
from .exceptions import SelfTimeError
from .logging import LoggingConfig, get_logger, init_logging
from .report import Report
from .session import Session

logger = get_logger(__name__)

app = typer.Typer(add_completion=False, no_args_is_help=True, help="selftime: hierarchical self-time profiler")


def _config(ctx: typer.Context) -> ProfilerConfig:
    obj = ctx.obj or {}
    return obj.get("config") or ProfilerConfig()


def _emit(report: Report, cfg: ProfilerConfig, markdown: bool) -> None:
    if markdown:
        if cfg.table_title:
            typer.echo(f"### {cfg.table_title}\n")
        typer.echo(report.to_markdown(ascii_units=cfg.ascii_units))
    else:
        typer.echo(report.to_table(ascii_units=cfg.ascii_units, title=cfg.table_title))


@app.callback()
def cli_root(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML profiler config"),
    override: List[str] = typer.Option(None, "--override", "-o", help="key=value config override"),
    log_level: str = typer.Option("WARNING", "--log-level", help="DEBUG|INFO|WARNING|ERROR"),
):
    """Root selftime CLI with global options."""
    init_logging(LoggingConfig(log_level=log_level))
    try:
        cfg = load_config(config, overrides=override or [])
    except (SelfTimeError, FileNotFoundError) as e:
        typer.echo(f"[ERROR] {e}", err=True)
        raise typer.Exit(2)
    ctx.obj = {"config": cfg}
    logger.debug("config: %s", cfg.to_dict())


@app.command("demo")
def demo(
    ctx: typer.Context,
    scale: float = typer.Option(1.0, "--scale", "-s", min=0.0, help="Milliseconds per unit of simulated work"),
    inner: int = typer.Option(3, "--inner", min=1, help="Number of inner scopes"),
    innest: int = typer.Option(4, "--innest", min=1, help="Innest scopes per inner scope"),
    markdown: bool = typer.Option(False, "--markdown", help="Render a Markdown table"),
    ascii_units: bool = typer.Option(False, "--ascii", help="Use 'us' instead of 'µs'"),
):
    """
    Profile a small nested workload: total -> outer -> inner x N -> innest x M.
    """
    cfg = _config(ctx)
    if ascii_units:
        cfg.ascii_units = True
    unit = scale / 1000.0
    try:
        with Session("total", config=cfg) as session:
            with session.fork("outer") as outer:
                for _ in range(inner):
                    with outer.fork("inner") as inn:
                        time.sleep(2 * unit)
                        for _ in range(innest):
                            with inn.fork("innest"):
                                time.sleep(unit)
    except SelfTimeError as e:
        typer.echo(f"[ERROR] {e}", err=True)
        raise typer.Exit(1)
    _emit(session.report, cfg, markdown)


@app.command("overhead")
def overhead(
    ctx: typer.Context,
    iterations: int = typer.Option(100_000, "--iterations", "-n", min=1, help="fork+join pairs to time"),
    markdown: bool = typer.Option(False, "--markdown", help="Render a Markdown table"),
):
    """
    Fork and join an empty child scope N times; the child's total divided by N
    is the per-pair bookkeeping cost.
    """
    cfg = _config(ctx)
    try:
        session = Session("overhead", config=cfg)
        with session.fork("loop") as loop:
            for _ in range(iterations):
                loop.fork("fork+join").join()
        report = session.finish()
    except SelfTimeError as e:
        typer.echo(f"[ERROR] {e}", err=True)
        raise typer.Exit(1)
    _emit(report, cfg, markdown)
    entry = report.get("fork+join")
    if entry is not None:
        typer.echo(f"~{entry.total_ns / entry.occurrences:.1f}ns per fork+join")


@app.command("version")
def version():
    """Print the selftime version."""
    typer.echo(__version__)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
