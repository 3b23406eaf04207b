"""Logging helpers for exploration sessions."""
from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence


class ExplorationLogger:
    """Buffered logger that stores pointer events and star selections to CSV files.

    Parameters
    ----------
    root_dir:
        Root directory where session folders should be created.
    session_id:
        Optional custom session identifier. If omitted a timestamp based
        identifier in the form ``YYYYmmdd_HHMMSS_session`` is used.
    events_flush_threshold:
        Number of buffered event rows before an automatic flush to disk
        is triggered.
    selections_flush_threshold:
        Number of buffered selection rows before an automatic flush.
    """

    EVENTS_HEADER = ["t", "type", "screen_x", "screen_y", "details"]
    SELECTIONS_HEADER = [
        "t",
        "tile_x",
        "tile_y",
        "star_id",
        "seed",
        "category",
        "hue",
        "ocean",
        "has_rings",
    ]

    def __init__(
        self,
        root_dir: str | Path = "data/sessions",
        session_id: Optional[str] = None,
        *,
        events_flush_threshold: int = 100,
        selections_flush_threshold: int = 10,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        def make_candidate(suffix: Optional[int] = None) -> str:
            base = session_id or f"{timestamp}_session"
            if suffix is None:
                return base
            if session_id:
                return f"{session_id}_{suffix}"
            return f"{base}_{suffix:02d}"

        candidate_id = make_candidate()
        suffix = 1
        while (self.root_dir / candidate_id).exists():
            candidate_id = make_candidate(suffix)
            suffix += 1

        self.session_id = candidate_id
        self.session_dir = self.root_dir / self.session_id
        self.session_dir.mkdir(parents=True, exist_ok=False)

        self.events_path = self.session_dir / "events.csv"
        self.selections_path = self.session_dir / "selections.csv"
        self.meta_path = self.session_dir / "meta.json"

        self._ev_file = self.events_path.open("w", newline="")
        self._ev_file.write(",".join(self.EVENTS_HEADER) + "\n")
        self._sel_file = self.selections_path.open("w", newline="")
        self._sel_file.write(",".join(self.SELECTIONS_HEADER) + "\n")
        # headers hit the disk right away so a live session can be inspected
        self._ev_file.flush()
        self._sel_file.flush()

        self._ev_buffer: list[str] = []
        self._sel_buffer: list[str] = []
        self._ev_threshold = max(1, events_flush_threshold)
        self._sel_threshold = max(1, selections_flush_threshold)
        self._closed = False

        last_session_marker = self.root_dir / "last_session.txt"
        last_session_marker.write_text(self.session_id, encoding="utf-8")

    @property
    def closed(self) -> bool:
        return self._closed

    def write_meta(self, meta: dict) -> None:
        with self.meta_path.open("w", encoding="utf-8") as fh:
            json.dump(meta, fh, indent=2, sort_keys=True, default=list)

    def log_event(self, values: Sequence[object]) -> None:
        self._ev_buffer.append(",".join(self._format_value(v) for v in values))
        if len(self._ev_buffer) >= self._ev_threshold:
            self._flush_events()

    def log_selection(self, values: Sequence[object]) -> None:
        self._sel_buffer.append(",".join(self._format_value(v) for v in values))
        if len(self._sel_buffer) >= self._sel_threshold:
            self._flush_selections()

    def flush(self) -> None:
        self._flush_events()
        self._flush_selections()

    def close(self) -> None:
        if self._closed:
            return
        self.flush()
        self._ev_file.close()
        self._sel_file.close()
        self._closed = True

    def _flush_events(self) -> None:
        if self._ev_buffer:
            self._ev_file.write("\n".join(self._ev_buffer) + "\n")
            self._ev_file.flush()
            self._ev_buffer.clear()

    def _flush_selections(self) -> None:
        if self._sel_buffer:
            self._sel_file.write("\n".join(self._sel_buffer) + "\n")
            self._sel_file.flush()
            self._sel_buffer.clear()

    @staticmethod
    def _format_value(value: object) -> str:
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, float):
            return f"{value:.10g}"
        text = str(value)
        # details may carry JSON; keep it in a single CSV cell
        if "," in text or '"' in text:
            return '"' + text.replace('"', '""') + '"'
        return text

    def __enter__(self) -> "ExplorationLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None


__all__ = ["ExplorationLogger"]
