"""Durable, newest-first store of completed runs."""

import json
from typing import List, Optional

import structlog
from pydantic import ValidationError

from . import metrics
from .errors import ArchiveCorrupted
from .formatting import STEP_LENGTH_M
from .models import Run, RunDetail, RunSummary
from .storage import KeyValueStore

logger = structlog.get_logger(__name__)

DEFAULT_KEY = "pedometer_runs"


class RunArchive:
    """Run history kept as one serialized collection.

    Every mutation reads the whole collection, changes it and writes it
    back. A single writer is assumed.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = DEFAULT_KEY,
        step_length_m: float = STEP_LENGTH_M,
    ):
        self.store = store
        self.key = key
        self.step_length_m = step_length_m

    def _load(self) -> List[Run]:
        try:
            raw = self.store.read(self.key)
            if raw is None or not raw.strip():
                return []
            items = json.loads(raw)
            if not isinstance(items, list):
                raise ValueError("archive root is not a list")
            return [Run.model_validate(item) for item in items]
        except (ValueError, ValidationError) as e:
            logger.error("Failed to decode run archive", key=self.key, error=str(e))
            raise ArchiveCorrupted(f"run archive {self.key!r} is unreadable") from e

    def _save(self, runs: List[Run]) -> None:
        payload = json.dumps([r.model_dump(mode="json", by_alias=True) for r in runs])
        self.store.write(self.key, payload)

    def append(self, run: Run) -> Run:
        """Insert ``run`` as the newest entry and persist. Returns the stored run."""
        runs = self._load()
        taken = {r.id for r in runs}
        if run.id in taken:
            new_id = max(taken) + 1
            logger.warning("Run id already archived, reassigning", run_id=run.id, new_id=new_id)
            run = run.model_copy(update={"id": new_id})
        runs.insert(0, run)
        self._save(runs)
        metrics.runs_archived.inc()
        logger.info("Run archived", run_id=run.id, steps=run.steps, points=len(run.path))
        return run

    def list(self) -> List[Run]:
        return self._load()

    def get(self, run_id: int) -> Optional[Run]:
        for run in self._load():
            if run.id == run_id:
                return run
        return None

    def delete(self, run_id: int) -> bool:
        runs = self._load()
        remaining = [r for r in runs if r.id != run_id]
        if len(remaining) == len(runs):
            logger.debug("Delete of unknown run ignored", run_id=run_id)
            return False
        self._save(remaining)
        metrics.runs_deleted.inc()
        logger.info("Run deleted", run_id=run_id)
        return True

    def summaries(self) -> List[RunSummary]:
        return [RunSummary.from_run(r, self.step_length_m) for r in self._load()]

    def detail(self, run_id: int) -> Optional[RunDetail]:
        run = self.get(run_id)
        if run is None:
            return None
        return RunDetail.from_run(run, self.step_length_m)
