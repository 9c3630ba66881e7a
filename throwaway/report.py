from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

from throwaway.models import RunReport


class RunRecorder:
    def __init__(self, artifacts_dir: Path):
        # artifacts_dir is the run-specific directory (e.g., artifacts/<prefix>-<ts>)
        self.artifacts_dir = artifacts_dir
        self.artifacts_dir.mkdir(parents=True, exist_ok=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def save(self, report: RunReport, events_path: Optional[Path] = None, name: str = "run_report.json") -> Path:
        data = report.model_dump()
        if events_path is None:
            events_path = self.artifacts_dir / "events.log"
        data["artifacts"] = {"events_log": str(events_path)}
        out_path = self.artifacts_dir / name

        def default(o):
            if isinstance(o, datetime):
                return o.isoformat()
            return str(o)

        out_path.write_text(json.dumps(data, indent=2, default=default))
        return out_path
