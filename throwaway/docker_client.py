from __future__ import annotations

import csv
import io
import math
import shlex
import subprocess
import time
from typing import List, Optional, Union

from throwaway.engine import ContainerSpec, ImageRemoveOptions, LogOptions, RemoveOptions
from throwaway.errors import EngineClosedError, EngineError, EngineUnavailableError
from throwaway.logger import EventLogger
from throwaway.models import CommandResult


def _mount_arg(source: str, target: str) -> str:
    # docker parses --mount as one CSV record; quote fields holding , or "
    buf = io.StringIO()
    csv.writer(buf, lineterminator="").writerow(["type=bind", f"source={source}", f"target={target}"])
    return buf.getvalue()


def _as_text(value: Union[str, bytes, None]) -> str:
    if not value:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


class DockerClient:
    """Engine implementation that drives the docker CLI, one process per call.

    Every launch creates its own client; ``close`` only affects this instance.
    """

    def __init__(
        self,
        timeout_sec: int = 120,
        logger: Optional[EventLogger] = None,
        binary: str = "docker",
    ):
        self.timeout_sec = timeout_sec
        self.logger = logger
        self.binary = binary
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _run(
        self,
        args: List[str],
        timeout: Optional[int] = None,
        merge_stderr: bool = False,
    ) -> CommandResult:
        if self._closed:
            raise EngineClosedError()
        args = [self.binary] + args
        command = " ".join(shlex.quote(a) for a in args)
        start = time.time()
        proc = None
        try:
            proc = subprocess.run(
                args,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
                text=True,
                errors="replace",
                timeout=timeout or self.timeout_sec,
            )
            return CommandResult(
                command=command,
                exit_code=proc.returncode,
                stdout=proc.stdout or "",
                stderr=proc.stderr or "",
                duration_sec=time.time() - start,
                timed_out=False,
            )
        except subprocess.TimeoutExpired as exc:
            return CommandResult(
                command=command,
                exit_code=None,
                stdout=_as_text(exc.stdout),
                stderr=_as_text(exc.stderr),
                duration_sec=time.time() - start,
                timed_out=True,
            )
        except FileNotFoundError as exc:
            raise EngineUnavailableError(f"{self.binary} executable not found") from exc
        finally:
            if self.logger:
                self.logger.debug(
                    "docker command finished",
                    stage="docker",
                    data={
                        "command": command,
                        "exit_code": proc.returncode if proc else None,
                        "duration_sec": round(time.time() - start, 3),
                    },
                )

    def _check(self, res: CommandResult, what: str) -> CommandResult:
        if res.ok:
            return res
        if res.timed_out:
            raise EngineError(f"{what} timed out after {res.duration_sec:.1f}s", result=res)
        detail = (res.stderr or res.stdout).strip()
        raise EngineError(f"{what} failed (exit {res.exit_code}): {detail}", result=res)

    def ping(self) -> None:
        res = self._run(["version", "--format", "{{.Server.Version}}"])
        if not res.ok:
            raise EngineUnavailableError(
                f"docker daemon did not answer: {(res.stderr or res.stdout).strip()}", result=res
            )

    def image_inspect(self, name: str) -> bool:
        res = self._run(["image", "inspect", "--format", "{{.Id}}", name])
        if res.timed_out:
            self._check(res, f"image inspect {name}")
        return res.exit_code == 0

    def image_pull(self, name: str) -> str:
        res = self._check(self._run(["pull", name]), f"pull {name}")
        return res.stdout

    def container_create(self, spec: ContainerSpec, name: str) -> str:
        args = ["create", "--name", name]
        for entry in spec.env:
            args += ["--env", entry]
        for port in spec.exposed_ports:
            args += ["--expose", port]
        for container_port, host_port in spec.port_bindings.items():
            args += ["--publish", f"{host_port}:{container_port}"]
        for mount in spec.mounts:
            args += ["--mount", _mount_arg(mount.source, mount.target)]
        args.append(spec.image)
        args += spec.args
        res = self._check(self._run(args), f"create {name}")
        lines = res.stdout.strip().splitlines()
        if not lines:
            raise EngineError(f"create {name} returned no container id", result=res)
        return lines[-1]

    def container_start(self, container_id: str) -> None:
        self._check(self._run(["start", container_id]), f"start {container_id}")

    def container_stop(self, container_id: str, timeout: float) -> None:
        grace = int(math.ceil(timeout))
        self._check(self._run(["stop", "--time", str(grace), container_id]), f"stop {container_id}")

    def container_kill(self, container_id: str, signal: str = "KILL") -> None:
        self._check(self._run(["kill", "--signal", signal, container_id]), f"kill {container_id}")

    def container_remove(self, container_id: str, options: RemoveOptions) -> None:
        args = ["rm"]
        if options.force:
            args.append("--force")
        if options.remove_volumes:
            args.append("--volumes")
        # docker rm --link removes a named legacy link, not the container; our
        # containers never carry legacy links, so remove_links needs no flag.
        args.append(container_id)
        self._check(self._run(args), f"remove {container_id}")

    def container_logs(self, container_id: str, options: LogOptions) -> str:
        both = options.stdout and options.stderr
        res = self._check(
            self._run(["logs", container_id], merge_stderr=both), f"logs {container_id}"
        )
        if both or options.stdout:
            return res.stdout
        if options.stderr:
            return res.stderr
        return ""

    def image_remove(self, name: str, options: ImageRemoveOptions) -> None:
        args = ["rmi"]
        if options.force:
            args.append("--force")
        if not options.prune_children:
            args.append("--no-prune")
        args.append(name)
        self._check(self._run(args), f"remove image {name}")

    def close(self) -> None:
        if self._closed:
            raise EngineClosedError("engine client already closed")
        self._closed = True
