from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, computed_field


class StepStatus(str, Enum):
    success = "success"
    failed = "failed"
    skipped = "skipped"


class CommandResult(BaseModel):
    command: str = Field(description="Command string executed.")
    exit_code: Optional[int] = Field(default=None, description="Exit code (None if timeout).")
    stdout: str = Field(default="", description="Captured stdout.")
    stderr: str = Field(default="", description="Captured stderr.")
    duration_sec: float = Field(default=0.0, description="Duration in seconds.")
    started_at: datetime = Field(default_factory=datetime.utcnow, description="Start timestamp.")
    timed_out: bool = Field(default=False, description="True if command timed out.")

    @property
    def ok(self) -> bool:
        return self.exit_code == 0 and not self.timed_out


class ShutdownStep(BaseModel):
    name: str = Field(description="Step name (stop, kill, remove, close).")
    status: StepStatus = Field(default=StepStatus.success, description="Step status.")
    error: Optional[str] = Field(default=None, description="Error summary, if any.")


class ShutdownReport(BaseModel):
    container_id: str = Field(description="Engine-assigned container id.")
    steps: List[ShutdownStep] = Field(default_factory=list, description="Ordered step outcomes.")
    started_at: datetime = Field(default_factory=datetime.utcnow, description="Shutdown start time.")
    completed_at: Optional[datetime] = Field(default=None, description="Shutdown end time.")

    @computed_field
    @property
    def clean(self) -> bool:
        return all(step.status != StepStatus.failed for step in self.steps)

    def step(self, name: str) -> Optional[ShutdownStep]:
        for s in self.steps:
            if s.name == name:
                return s
        return None


class RunReport(BaseModel):
    request: dict = Field(default_factory=dict, description="ContainerLaunchRequest as dict.")
    container_id: Optional[str] = Field(default=None, description="Launched container id.")
    container_name: Optional[str] = Field(default=None, description="Launched container name.")
    port_mapping: Dict[int, int] = Field(default_factory=dict, description="Container port -> host port.")
    ready: bool = Field(default=False, description="True if every readiness check passed.")
    error: Optional[str] = Field(default=None, description="Launch or readiness error, if any.")
    shutdown: Optional[ShutdownReport] = Field(default=None, description="Teardown outcome.")
    started_at: datetime = Field(default_factory=datetime.utcnow, description="Run start time.")
    completed_at: Optional[datetime] = Field(default=None, description="Run end time.")
