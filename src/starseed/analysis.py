"""Analyze a recorded exploration session and generate summary figures."""
from __future__ import annotations

import argparse
import csv
import json
from collections import Counter
from pathlib import Path
from typing import Dict, List, Sequence

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt


EVENTS_FILENAME = "events.csv"
SELECTIONS_FILENAME = "selections.csv"
META_FILENAME = "meta.json"
FIGS_SUBDIR = "figs"
DEFAULT_SESSIONS_DIR = Path("data") / "sessions"


def load_events(path: Path) -> List[dict]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        events: List[dict] = []
        for row in reader:
            if not row:
                continue
            event = {
                "t": float(row["t"]),
                "type": row["type"],
                "screen_x": float(row["screen_x"]),
                "screen_y": float(row["screen_y"]),
            }
            details_raw = row.get("details", "")
            if details_raw:
                try:
                    event["details"] = json.loads(details_raw)
                except json.JSONDecodeError:
                    event["details"] = details_raw
            events.append(event)
    return events


def load_selections(path: Path) -> Dict[str, np.ndarray]:
    """Selection columns; ``category`` stays textual, the rest are numeric."""
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        columns: Dict[str, list] = {name: [] for name in reader.fieldnames or []}
        for row in reader:
            for key, value in row.items():
                if key is None:
                    continue
                columns.setdefault(key, []).append(value if key == "category" else float(value))
    return {key: np.asarray(values) for key, values in columns.items()}


def ensure_fig_dir(session_dir: Path) -> Path:
    fig_dir = session_dir / FIGS_SUBDIR
    fig_dir.mkdir(parents=True, exist_ok=True)
    return fig_dir


def summarize_events(events: List[dict]) -> Dict[str, int]:
    summary: Dict[str, int] = {"click": 0, "drag": 0, "wheel": 0, "zoom": 0, "select": 0}
    for event in events:
        if event["type"] in summary:
            summary[event["type"]] += 1
    return summary


def plot_category_counts(fig_dir: Path, selections: Dict[str, np.ndarray]) -> Path:
    counts = Counter(str(value) for value in selections.get("category", []))
    labels = ["rocky", "gaseous"]
    fig, ax = plt.subplots(figsize=(5, 4))
    ax.bar(labels, [counts.get(label, 0) for label in labels], color=["#c08552", "#6bc5c0"])
    ax.set_ylabel("Selections")
    ax.set_title("Planet categories")
    fig.tight_layout()
    path = fig_dir / "categories.png"
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path


def plot_hue_histogram(fig_dir: Path, selections: Dict[str, np.ndarray]) -> Path:
    hues = selections.get("hue", np.array([]))
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.hist(hues, bins=12, range=(0.0, 360.0), color="#9775fa", edgecolor="#343a40")
    ax.set_xlabel("Hue [deg]")
    ax.set_ylabel("Selections")
    ax.set_title("Base hue of selected planets")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    path = fig_dir / "hue_histogram.png"
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path


def plot_selection_tiles(fig_dir: Path, selections: Dict[str, np.ndarray]) -> Path:
    tile_x = selections.get("tile_x", np.array([]))
    tile_y = selections.get("tile_y", np.array([]))
    hues = selections.get("hue", np.array([]))
    fig, ax = plt.subplots(figsize=(6, 6))
    if tile_x.size:
        points = ax.scatter(tile_x, tile_y, c=hues, cmap="hsv", vmin=0.0, vmax=360.0, s=40)
        fig.colorbar(points, ax=ax, label="Hue [deg]")
    ax.invert_yaxis()
    ax.set_xlabel("tile x")
    ax.set_ylabel("tile y")
    ax.set_title("Where stars were selected")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    path = fig_dir / "selection_tiles.png"
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path


def print_summary(session_dir: Path, meta: dict, selections: Dict[str, np.ndarray], event_summary: Dict[str, int]) -> None:
    config = meta.get("config", {})
    categories = Counter(str(value) for value in selections.get("category", []))
    rings = selections.get("has_rings", np.array([]))
    print(f"Session: {session_dir.name}")
    print(f" World seed: {config.get('seed', 'unknown')}")
    print(f" Selections: {len(selections.get('seed', []))}")
    print(f" Rocky: {categories.get('rocky', 0)}, gaseous: {categories.get('gaseous', 0)}")
    if rings.size:
        print(f" Ringed: {int(rings.sum())}")
    print(" Events:" + ",".join(f" {etype}: {count}" for etype, count in event_summary.items()))


def resolve_session_dir(parser: argparse.ArgumentParser, session: str | None, base_dir: Path) -> Path:
    if session:
        session_path = Path(session)
        if not session_path.is_dir():
            session_path = base_dir / session
    else:
        marker = base_dir / "last_session.txt"
        if not marker.exists():
            parser.error("No session given and last_session.txt is missing.")
        session_path = base_dir / marker.read_text(encoding="utf-8").strip()
    if not session_path.is_dir():
        parser.error(f"Session directory not found: {session_path}")
    return session_path


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Summarize a recorded exploration session.")
    parser.add_argument("session_dir", nargs="?", help="Path to a session folder (defaults to the last one)")
    parser.add_argument("--sessions-root", type=Path, default=DEFAULT_SESSIONS_DIR, help="Root of the session folders")
    args = parser.parse_args(argv)

    session_path = resolve_session_dir(parser, args.session_dir, args.sessions_root)
    meta_path = session_path / META_FILENAME
    ev_path = session_path / EVENTS_FILENAME
    sel_path = session_path / SELECTIONS_FILENAME
    if not ev_path.exists() or not sel_path.exists():
        parser.error("Session folder is missing events.csv or selections.csv.")

    meta: dict = {}
    if meta_path.exists():
        with meta_path.open("r", encoding="utf-8") as fh:
            meta = json.load(fh)

    events = load_events(ev_path)
    selections = load_selections(sel_path)
    fig_dir = ensure_fig_dir(session_path)

    plot_category_counts(fig_dir, selections)
    plot_hue_histogram(fig_dir, selections)
    plot_selection_tiles(fig_dir, selections)

    print_summary(session_path, meta, selections, summarize_events(events))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
