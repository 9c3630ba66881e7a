from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
import yaml

sys.path.append(str(Path(__file__).resolve().parents[1]))

from throwaway.availability import docker_exists
from throwaway.errors import ThrowawayError
from throwaway.launcher import start_container
from throwaway.logger import EventLogger
from throwaway.models import ContainerLaunchRequest, HarnessConfig, RunReport
from throwaway.report import RunRecorder


app = typer.Typer(add_completion=False, help="throwaway container CLI")


def load_run_file(cfg_path: Path) -> dict:
    data = yaml.safe_load(cfg_path.read_text()) or {}
    if not data.get("request"):
        raise typer.BadParameter(f"No request defined in {cfg_path}")
    return data


def build_run_dir(artifacts_root: Path, prefix: str) -> Path:
    run_id = f"{prefix}-{datetime.now().isoformat().replace(':', '-')}"
    run_dir = artifacts_root / run_id
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


@app.command()
def ping() -> None:
    """Check that docker is installed and its daemon answers."""
    if docker_exists():
        typer.secho("docker is available", fg=typer.colors.GREEN)
    else:
        typer.secho("docker is not available", fg=typer.colors.RED)
        raise typer.Exit(code=1)


@app.command()
def run(
    config: Path = typer.Option(..., "--config", help="Path to run YAML with a `request` mapping."),
    artifacts_dir: Optional[Path] = typer.Option(Path("artifacts"), help="Root artifacts directory"),
    level: str = typer.Option("info", help="Minimum event log level."),
) -> None:
    """Launch a container, wait for readiness, print its ports and tear it down."""
    if not config.is_file():
        typer.secho(f"Config not found: {config}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    data = load_run_file(config)
    request = ContainerLaunchRequest(**data["request"])
    harness_cfg = HarnessConfig(**(data.get("config") or {}))
    prefix = data.get("prefix") or "throwaway"
    timeout = float(data.get("timeout_sec", 10))

    run_dir = build_run_dir(artifacts_dir, prefix)
    events_path = run_dir / "events.log"
    logger = EventLogger(events_path, name="throwaway", echo=True, level=level)

    report = RunReport(request=request.model_dump())
    with RunRecorder(run_dir) as recorder:
        handle = None
        try:
            handle = start_container(request, prefix, config=harness_cfg, logger=logger)
            report.container_id = handle.id
            report.container_name = handle.name
            report.port_mapping = dict(handle.port_mappings)
            if data.get("wait_port"):
                handle.wait_for_port_to_open(handle.port_mapping(int(data["wait_port"])), timeout)
            if data.get("wait_log"):
                handle.wait_for_log_line(str(data["wait_log"]), timeout)
            report.ready = True
            for container_port, host_port in handle.port_mappings.items():
                typer.echo(f"{container_port}/tcp -> {harness_cfg.host}:{host_port}")
        except ThrowawayError as exc:
            report.error = str(exc)
        finally:
            if handle is not None:
                report.shutdown = handle.close()
            report.completed_at = datetime.now().astimezone()
            report_path = recorder.save(report, events_path=events_path)

    if report.ready:
        typer.secho(f"SUCCESS: see {report_path}", fg=typer.colors.GREEN)
    else:
        typer.secho(f"FAILURE: {report.error} (see {report_path})", fg=typer.colors.RED)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
