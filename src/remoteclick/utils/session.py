"""Run recording utilities for remoteclick.

This module keeps a per-request record of the interaction pipeline:
- StageTransition dataclass for recording state machine transitions
- RunRecorder class collecting the record and, when an artifacts directory
  is configured, persisting it as JSON next to an optional HTML dump
"""

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

logger = logging.getLogger(__name__)


@dataclass
class StageTransition:
    """Records a stage change during one request.

    Attributes:
        timestamp: ISO format timestamp of when the transition occurred.
        event: The state machine event that fired (e.g. navigate, click).
        from_stage: The stage before the transition.
        to_stage: The stage after the transition.
    """

    timestamp: str
    event: str
    from_stage: str
    to_stage: str


class RunRecorder:
    """Records one pipeline run, optionally writing it to disk.

    Without an output directory the record only lives in memory and nothing
    touches the filesystem. With one, ``run.json`` is rewritten after each
    transition so a crashed host still leaves a trail.

    Attributes:
        run_id: Unique identifier for this run.
        run_dir: Directory where run data is stored, or None.
        data: Dictionary containing all run data.
    """

    def __init__(
        self, output_dir: Path | None, operation: str, request: dict[str, Any]
    ) -> None:
        """Initialize a new run recorder.

        Args:
            output_dir: Parent directory for run folders, or None to disable
                persistence.
            operation: Name of the operation ("run" or "info").
            request: The request parameters, already in wire form.
        """
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.run_id = f"{operation}_{stamp}_{uuid4().hex[:8]}"
        self.run_dir: Path | None = None
        if output_dir is not None:
            run_dir = output_dir / self.run_id
            try:
                run_dir.mkdir(parents=True, exist_ok=True)
                self.run_dir = run_dir
            except OSError as e:
                logger.warning(
                    "Run recording disabled, cannot create %s: %s", run_dir, e
                )

        self.data: dict[str, Any] = {
            "run_id": self.run_id,
            "operation": operation,
            "request": request,
            "started_at": datetime.now().isoformat(),
            "completed_at": None,
            "result": None,
            "final_stage": None,
            "transitions": [],
            "error": None,
        }

    def log_transition(self, event: str, from_stage: str, to_stage: str) -> None:
        """Log a stage transition."""
        transition = StageTransition(
            timestamp=datetime.now().isoformat(),
            event=event,
            from_stage=from_stage,
            to_stage=to_stage,
        )
        self.data["transitions"].append(asdict(transition))
        self._save()

    def complete(
        self, result: str, final_stage: str, error: dict[str, Any] | None = None
    ) -> None:
        """Mark the run complete.

        Args:
            result: "success" or "failed".
            final_stage: The terminal stage reached.
            error: Optional failure payload.
        """
        self.data["completed_at"] = datetime.now().isoformat()
        self.data["result"] = result
        self.data["final_stage"] = final_stage
        self.data["error"] = error
        self._save()

    def save_html(self, html: str) -> Path | None:
        """Write a page HTML dump for a failed run.

        Returns:
            The dump path, or None when persistence is disabled.
        """
        if self.run_dir is None:
            return None
        html_path = self.run_dir / "failure.html"
        html_path.write_text(html, encoding="utf-8")
        return html_path

    @property
    def transitions(self) -> list[dict[str, Any]]:
        return self.data["transitions"]

    def _save(self) -> None:
        """Write run data to JSON file."""
        if self.run_dir is None:
            return
        log_path = self.run_dir / "run.json"
        try:
            with open(log_path, "w") as f:
                json.dump(self.data, f, indent=2, default=str)
        except OSError as e:
            logger.warning("Could not write run record %s: %s", log_path, e)
