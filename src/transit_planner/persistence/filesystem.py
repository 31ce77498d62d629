"""File-based persistence for the network snapshot and line schedules."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from ..config import settings
from ..models.domain import VehicleSchedule
from ..schemas.network import NetworkSnapshot
from ..schemas.schedule import ScheduleSnapshot


def schedule_key(route_id: int) -> str:
    return f"schedule-line-{route_id}"


class FileStorage:
    """Thin wrapper around the data root for storing JSON snapshots."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.snapshot_path = self.root / settings.snapshot_file
        self.schedules_root = self.root / settings.schedules_dirname
        self.schedules_root.mkdir(parents=True, exist_ok=True)

    def write_json(self, path: Path, data: Any, *, indent: int = 2) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=indent)

    def read_json(self, path: Path) -> Any:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    def load_network_snapshot(self) -> NetworkSnapshot:
        """Read the network snapshot; a missing or malformed file yields an empty network."""

        if not self.snapshot_path.exists():
            logging.info(f"No network snapshot at {self.snapshot_path}; starting with an empty network")
            return NetworkSnapshot()
        try:
            return NetworkSnapshot.model_validate(self.read_json(self.snapshot_path))
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as exc:
            logging.warning(f"Malformed network snapshot at {self.snapshot_path}, using an empty network: {exc}")
            return NetworkSnapshot()

    def save_network_snapshot(self, snapshot: NetworkSnapshot) -> None:
        self.write_json(self.snapshot_path, snapshot.to_json_dict())

    def schedule_path(self, route_id: int) -> Path:
        return self.schedules_root / f"{schedule_key(route_id)}.json"

    def load_schedule(self, route_id: int) -> Optional[VehicleSchedule]:
        path = self.schedule_path(route_id)
        if not path.exists():
            return None
        try:
            return ScheduleSnapshot.model_validate(self.read_json(path)).to_domain()
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as exc:
            logging.warning(f"Malformed schedule for line {route_id}, it will be regenerated: {exc}")
            return None

    def save_schedule(self, schedule: VehicleSchedule) -> None:
        self.write_json(self.schedule_path(schedule.route_id), ScheduleSnapshot.from_domain(schedule).to_json_dict())

    def delete_schedule(self, route_id: int) -> None:
        self.schedule_path(route_id).unlink(missing_ok=True)

    def schedule_route_ids(self) -> list[int]:
        ids = []
        for path in self.schedules_root.glob("schedule-line-*.json"):
            suffix = path.stem.rsplit("-", 1)[-1]
            if suffix.isdigit():
                ids.append(int(suffix))
        return sorted(ids)

    def clear(self) -> None:
        self.snapshot_path.unlink(missing_ok=True)
        for path in self.schedules_root.glob("schedule-line-*.json"):
            path.unlink()
