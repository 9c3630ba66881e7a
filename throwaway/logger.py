from __future__ import annotations

import json
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

LEVELS = {"debug": 10, "info": 20, "warning": 30, "error": 40}


class EventLogger:
    """JSON-lines event log shared by the launcher, poller and shutdown sequencer."""

    def __init__(
        self,
        path: Optional[Path] = None,
        name: str = "throwaway",
        echo: bool = True,
        level: str = "info",
    ) -> None:
        if level.lower() not in LEVELS:
            raise ValueError(f"unknown log level: {level}")
        self.path = path
        self.name = name
        self.echo = echo
        self.level = level.lower()
        self._lock = threading.Lock()
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)

    def enabled_for(self, level: str) -> bool:
        return LEVELS[level.lower()] >= LEVELS[self.level]

    def emit(
        self,
        level: str,
        message: str,
        stage: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> None:
        if not self.enabled_for(level):
            return
        payload = {
            "ts": datetime.utcnow().isoformat() + "Z",
            "logger": self.name,
            "level": level.lower(),
            "stage": stage,
            "message": message,
            "context": context or {},
            "data": data or {},
        }
        line = json.dumps(payload, ensure_ascii=True, default=str)
        with self._lock:
            if self.path is not None:
                with self.path.open("a", encoding="utf-8") as fh:
                    fh.write(line + "\n")
            if self.echo:
                print(line, file=sys.stderr)

    def debug(self, message: str, stage: Optional[str] = None, context: Optional[Dict[str, Any]] = None, data: Optional[Dict[str, Any]] = None) -> None:
        self.emit("debug", message, stage=stage, context=context, data=data)

    def info(self, message: str, stage: Optional[str] = None, context: Optional[Dict[str, Any]] = None, data: Optional[Dict[str, Any]] = None) -> None:
        self.emit("info", message, stage=stage, context=context, data=data)

    def warning(self, message: str, stage: Optional[str] = None, context: Optional[Dict[str, Any]] = None, data: Optional[Dict[str, Any]] = None) -> None:
        self.emit("warning", message, stage=stage, context=context, data=data)

    def error(self, message: str, stage: Optional[str] = None, context: Optional[Dict[str, Any]] = None, data: Optional[Dict[str, Any]] = None) -> None:
        self.emit("error", message, stage=stage, context=context, data=data)
