"""
disktrend.main
------------
AUTHOR: carter-vin

CLI driver for the trend engine

Key contract:
- `disktrend --help` shows a Commands section.
- `disktrend oneshot` samples once and prints a report.
- `disktrend run` samples at a fixed interval until Ctrl+C (or --max-ticks).

The engine holds no timer state; this module is the scheduler.
"""

from __future__ import annotations

import platform
import sys
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import typer

from disktrend.collectors.volumes import collect_volumes
from disktrend.config import DEFAULT_CONFIG_PATH, MonitorConfig, load_config
from disktrend.engine import TrendEngine
from disktrend.errors import ConfigError
from disktrend.logging import emit_event
from disktrend.model import report_to_json, utc_now
from disktrend.render import render_table
from disktrend.sampler import Sampler

# Explicit multi-command CLI
app = typer.Typer(
    add_completion=False,
    help="disktrend: disk-capacity trend and forecast monitor",
)

VERSION = "0.1.0"
OUTPUT_FORMATS = ("text", "json")


# -----------------------------
# DATA CLASSES
# -----------------------------
@dataclass(frozen=True)
class EnvironmentInfo:
    """
    Snapshot of the runtime environment
    """

    python_version: str
    os: str
    machine: str
    utc_now: str


def collect_environment_info() -> EnvironmentInfo:
    return EnvironmentInfo(
        python_version=sys.version.split()[0],
        os=f"{platform.system()} {platform.release()}",
        machine=platform.machine(),
        utc_now=datetime.now(timezone.utc).isoformat(),
    )


# -----------------------------
# HELPERS
# -----------------------------
def _resolve_config(config_path: str | None, **overrides) -> MonitorConfig:
    """
    File values first, then CLI overrides; ConfigError -> usage error
    """
    try:
        config = load_config(Path(config_path) if config_path else None)
        window_hours = overrides.get("window_hours")
        if window_hours is not None and window_hours > config.retention_hours:
            # a wider window needs matching retention
            overrides["retention_hours"] = window_hours
        return config.with_overrides(**overrides)
    except ConfigError as e:
        raise typer.BadParameter(str(e), param_hint="--config")


def _check_format(output_format: str) -> None:
    if output_format not in OUTPUT_FORMATS:
        raise typer.BadParameter(f"must be one of: {', '.join(OUTPUT_FORMATS)}", param_hint="--format")


def _print_report(engine: TrendEngine, output_format: str) -> None:
    report = engine.report(utc_now(), version=VERSION)
    if output_format == "json":
        typer.echo(report_to_json(report))
    else:
        typer.echo(render_table(report))


# -----------------------------
# ROOT COMMAND BEHAVIOR
# -----------------------------
@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """
    Root command behavior: print a short hint when no subcommand is given
    """
    if ctx.invoked_subcommand is None:
        typer.echo("No command provided. Try: disktrend --help")


# -----------------------------
# CLI COMMANDS
# -----------------------------
@app.command()
def version() -> None:
    """
    Print version & runtime env
    """
    env = collect_environment_info()

    typer.echo(f"disktrend v{VERSION}")
    typer.echo(f"python={env.python_version}")
    typer.echo(f"os={env.os}")
    typer.echo(f"machine={env.machine}")
    typer.echo(f"utc_now={env.utc_now}")


@app.command("oneshot")
def oneshot(
    output_format: str = typer.Option(
        "text",
        "--format",
        help="Output format: text or json.",
    ),
    config_path: str | None = typer.Option(
        None,
        "--config",
        help=f"Path to JSON config file (default: ./{DEFAULT_CONFIG_PATH}).",
    ),
) -> None:
    """
    Sample all volumes once and print status

    A single sample never yields a trend; use `run` to accumulate history.
    """
    _check_format(output_format)
    config = _resolve_config(config_path)

    emit_event("monitor_start", version=VERSION, mode="oneshot")

    engine = TrendEngine(config)
    sampler = Sampler(engine, collect_volumes, version=VERSION)

    try:
        sampler.sample()
        _print_report(engine, output_format)
    finally:
        emit_event("monitor_shutdown", version=VERSION, mode="oneshot")


@app.command("run")
def run(
    interval: int | None = typer.Option(
        None,
        help="Seconds between samples (default from config: 30).",
        min=1,
    ),
    window_hours: float | None = typer.Option(
        None,
        "--window-hours",
        help="Trend window in hours (default from config: 24).",
        min=0.001,
    ),
    output_format: str = typer.Option(
        "text",
        "--format",
        help="Output format: text or json.",
    ),
    config_path: str | None = typer.Option(
        None,
        "--config",
        help=f"Path to JSON config file (default: ./{DEFAULT_CONFIG_PATH}).",
    ),
    max_ticks: int = typer.Option(
        0,
        "--max-ticks",
        help="Stop after N ticks (0 = run until interrupted).",
        min=0,
    ),
) -> None:
    """
    Run the periodic sampling loop.
    """
    _check_format(output_format)
    config = _resolve_config(config_path, poll_interval_s=interval, window_hours=window_hours)

    emit_event(
        "monitor_start",
        version=VERSION,
        mode="run",
        interval_s=config.poll_interval_s,
        window_hours=config.window_hours,
    )

    engine = TrendEngine(config)
    sampler = Sampler(engine, collect_volumes, version=VERSION)
    ticks = 0

    try:
        while True:
            start = time.monotonic()

            result = sampler.sample()
            _print_report(engine, output_format)
            ticks += 1

            elapsed = time.monotonic() - start
            sleep_s = max(0.0, config.poll_interval_s - elapsed)

            emit_event(
                "monitor_tick",
                version=VERSION,
                mode="run",
                tick=ticks,
                source_ok=result.ok,
                volumes_recorded=len(result.recorded),
                tick_elapsed_ms=int(elapsed * 1000),
                sleep_ms=int(sleep_s * 1000),
                overrun=elapsed > config.poll_interval_s,
            )

            if max_ticks and ticks >= max_ticks:
                break

            time.sleep(sleep_s)

    except KeyboardInterrupt:
        # Graceful shutdown on Ctrl+C
        pass

    finally:
        emit_event("monitor_shutdown", version=VERSION, mode="run", ticks=ticks)


if __name__ == "__main__":
    app()
