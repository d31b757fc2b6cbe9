"""File-based persistence helpers for plan run outputs."""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..config import settings

_UNSAFE_CHARS = re.compile(r"[^a-z0-9-]+")


def run_label_slug(label: str) -> str:
    """Lower-case ``label`` and collapse anything outside ``[a-z0-9-]`` to ``_``."""
    return _UNSAFE_CHARS.sub("_", label.strip().lower()).strip("_")


class FileStorage:
    """Writes one directory per exported plan run under ``<data_root>/outputs``.

    A run directory holds ``summary.json`` and ``stops.csv``.
    """

    SUMMARY_FILE = "summary.json"
    STOPS_FILE = "stops.csv"

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.output_root = self.root / "outputs"
        self.output_root.mkdir(parents=True, exist_ok=True)

    def make_run_directory(self, plan_id: str, label: str | None = None) -> Path:
        """Create ``plan_<plan_id>_<UTC timestamp>[_<label slug>]``."""
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        name = f"plan_{plan_id}_{timestamp}"
        slug = run_label_slug(label) if label else ""
        if slug:
            name = f"{name}_{slug}"
        path = self.output_root / name
        path.mkdir(parents=True, exist_ok=False)
        return path

    def write_run(self, plan_id: str, summary: dict, stops_csv: str, label: str | None = None) -> Path:
        run_dir = self.make_run_directory(plan_id, label)
        self.write_json(run_dir / self.SUMMARY_FILE, summary)
        self.write_csv(run_dir / self.STOPS_FILE, stops_csv)
        return run_dir

    def write_json(self, path: Path, data: Any, *, indent: int = 2) -> None:
        with path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=indent)

    def write_csv(self, path: Path, content: str) -> None:
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)
