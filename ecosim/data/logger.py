"""SQLite-backed run metadata and per-tick population metrics logging."""

from __future__ import annotations

import hashlib
import json
import platform
import sqlite3
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Mapping


@dataclass(frozen=True)
class TickMetrics:
    """Structured per-tick population payload."""

    tick: int
    prey: int = 0
    predators: int = 0
    mean_prey_energy: float = 0.0
    mean_predator_energy: float = 0.0
    moves: int = 0
    predations: int = 0
    births: int = 0
    deaths: int = 0

    @classmethod
    def from_metrics(cls, tick: int, metrics: Mapping[str, float]) -> "TickMetrics":
        return cls(
            tick=int(tick),
            prey=int(metrics.get("prey", 0)),
            predators=int(metrics.get("predators", 0)),
            mean_prey_energy=float(metrics.get("mean_prey_energy", 0.0)),
            mean_predator_energy=float(metrics.get("mean_predator_energy", 0.0)),
            moves=int(metrics.get("event_moves", 0)),
            predations=int(metrics.get("event_predations", 0)),
            births=int(metrics.get("event_births", 0)),
            deaths=int(metrics.get("event_deaths", 0)),
        )


class SimulationLogger:
    """Persist run metadata and per-tick population counts in SQLite."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.connection = sqlite3.connect(self.db_path)
        self.connection.row_factory = sqlite3.Row
        self._ensure_schema()

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> "SimulationLogger":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _ensure_schema(self) -> None:
        self.connection.executescript(
            """
            CREATE TABLE IF NOT EXISTS run_metadata (
                run_id TEXT PRIMARY KEY,
                config_hash TEXT NOT NULL,
                seed INTEGER NOT NULL,
                config_json TEXT NOT NULL,
                runtime_metadata TEXT NOT NULL,
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS tick_metrics (
                run_id TEXT NOT NULL,
                tick INTEGER NOT NULL,
                prey INTEGER NOT NULL,
                predators INTEGER NOT NULL,
                mean_prey_energy REAL NOT NULL,
                mean_predator_energy REAL NOT NULL,
                moves INTEGER NOT NULL,
                predations INTEGER NOT NULL,
                births INTEGER NOT NULL,
                deaths INTEGER NOT NULL,
                PRIMARY KEY (run_id, tick),
                FOREIGN KEY (run_id)
                    REFERENCES run_metadata (run_id)
                    ON DELETE CASCADE
            );
            """
        )
        self.connection.commit()

    def start_run(self, config: Mapping[str, Any], seed: int, metadata: Mapping[str, Any] | None = None) -> str:
        """Register a run and return its id.

        The id mixes a key derived from the config and seed with a time nonce,
        so repeated runs of one config get distinct rows sharing
        ``deterministic_key``.
        """
        config_json = json.dumps(dict(config), sort_keys=True)
        runtime_metadata: dict[str, Any] = {
            "python_version": platform.python_version(),
            "platform": platform.platform(),
        }
        if metadata:
            runtime_metadata.update(dict(metadata))
        config_hash = hashlib.sha256(config_json.encode("utf-8")).hexdigest()
        deterministic_key = hashlib.sha256(f"{config_hash}:{seed}".encode("utf-8")).hexdigest()
        run_nonce = str(time.time_ns())
        run_id = hashlib.sha256(f"{deterministic_key}:{run_nonce}".encode("utf-8")).hexdigest()[:16]
        runtime_metadata["deterministic_key"] = deterministic_key
        metadata_json = json.dumps(runtime_metadata, sort_keys=True)

        self.connection.execute(
            """
            INSERT OR IGNORE INTO run_metadata (
                run_id, config_hash, seed, config_json, runtime_metadata
            ) VALUES (?, ?, ?, ?, ?)
            """,
            (run_id, config_hash, seed, config_json, metadata_json),
        )
        self.connection.commit()
        return run_id

    def log_metrics(self, run_id: str, tick: int, metrics: Mapping[str, float]) -> None:
        row = TickMetrics.from_metrics(tick, metrics)
        payload = asdict(row)
        columns = ", ".join(["run_id", *payload])
        placeholders = ", ".join("?" for _ in range(len(payload) + 1))
        self.connection.execute(
            f"INSERT OR REPLACE INTO tick_metrics ({columns}) VALUES ({placeholders})",
            (run_id, *payload.values()),
        )
        self.connection.commit()

    def fetch_metrics(self, run_id: str) -> list[dict[str, float]]:
        """Return ordered tick metrics for plotting/analysis."""
        rows = self.connection.execute(
            """
            SELECT tick, prey, predators, mean_prey_energy, mean_predator_energy,
                   moves, predations, births, deaths
            FROM tick_metrics
            WHERE run_id = ?
            ORDER BY tick ASC
            """,
            (run_id,),
        ).fetchall()
        return [dict(row) for row in rows]

    def latest_run_id(self) -> str | None:
        """Return most recently created run id, if any."""
        row = self.connection.execute(
            """
            SELECT run_id
            FROM run_metadata
            ORDER BY created_at DESC, rowid DESC
            LIMIT 1
            """
        ).fetchone()
        return str(row[0]) if row is not None else None
