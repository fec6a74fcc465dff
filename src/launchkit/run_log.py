"""JSONL run log.

Appends one JSON object per orchestration event:
- Run start/end
- Status snapshots
- Step start/end with outcome

Lines are flushed and fsynced as they are written, so a run that is
interrupted mid-stage still leaves a readable trail.
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from .models import RunLogEntryType, StageStatus, StepOutcome, SetupStage


class RunLogger:
    """Append-only JSONL logger for one orchestration run.

    Example output:
        {"type": "run_start", "timestamp": "...", "project": "blog", "mode": "automatic"}
        {"type": "status", "timestamp": "...", "scaffolded": false, ...}
        {"type": "step_end", "timestamp": "...", "stage": "scaffold", "status": "success"}
        {"type": "run_end", "timestamp": "...", "exit_code": 0, "aborted": false}
    """

    def __init__(self, log_file: Path, project: str):
        """Initialize run logger.

        Args:
            log_file: Path of the JSONL file (created with its parent on first write)
            project: Project name stamped on every entry
        """
        self.log_file = Path(log_file)
        self.project = project
        self._file_handle: Optional[Any] = None

    def _write_entry(self, entry: dict) -> None:
        """Write a log entry with immediate flush."""
        entry.setdefault("timestamp", datetime.now().isoformat())
        entry.setdefault("project", self.project)

        if self._file_handle is None:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            self._file_handle = open(self.log_file, "a", encoding="utf-8")

        self._file_handle.write(json.dumps(entry, default=str) + "\n")
        self._file_handle.flush()

        try:
            os.fsync(self._file_handle.fileno())
        except (OSError, AttributeError):
            pass  # Some systems don't support fsync

    def log_run_start(self, mode: str, project_path: Path) -> None:
        self._write_entry({
            "type": RunLogEntryType.RUN_START.value,
            "mode": mode,
            "project_path": str(project_path),
        })

    def log_status(self, status: StageStatus) -> None:
        self._write_entry({
            "type": RunLogEntryType.STATUS.value,
            **status.model_dump(),
        })

    def log_step_start(self, stage: SetupStage) -> None:
        self._write_entry({
            "type": RunLogEntryType.STEP_START.value,
            "stage": stage.value,
        })

    def log_step_end(self, outcome: StepOutcome) -> None:
        self._write_entry({
            "type": RunLogEntryType.STEP_END.value,
            **outcome.model_dump(mode="json"),
        })

    def log_run_end(self, exit_code: int, aborted: bool) -> None:
        """Log the end of the run and close the file."""
        self._write_entry({
            "type": RunLogEntryType.RUN_END.value,
            "exit_code": exit_code,
            "aborted": aborted,
        })
        self.close()

    def close(self) -> None:
        if self._file_handle is not None:
            self._file_handle.close()
            self._file_handle = None


def read_run_log(log_path: Path) -> list[dict]:
    """Read all entries from a run log file, skipping corrupt lines."""
    entries = []
    if not log_path.exists():
        return entries

    with open(log_path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                try:
                    entries.append(json.loads(line))
                except json.JSONDecodeError:
                    continue

    return entries
