import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Union

from pydantic import TypeAdapter, ValidationError

from wippf_engine.models import AssessmentResult

logger = logging.getLogger(__name__)

_RESULTS_ADAPTER = TypeAdapter(List[AssessmentResult])


def dump_results(results: Iterable[AssessmentResult]) -> bytes:
    """Serializes results to the JSON array stored on disk."""
    return _RESULTS_ADAPTER.dump_json(list(results), indent=2)


def load_results(raw: Union[str, bytes]) -> List[AssessmentResult]:
    return _RESULTS_ADAPTER.validate_json(raw)


class HistoryStore:
    """
    Newest-first collection of assessment results backed by a JSON file.

    The collection only changes by appending whole results or deleting one by
    id, and every change is written to disk before the call returns.
    """
    def __init__(self, path: Optional[Union[str, Path]] = None, results: Optional[List[AssessmentResult]] = None):
        self.path = Path(path) if path else None
        self._results: List[AssessmentResult] = list(results or [])

    @classmethod
    def load(cls, path: Union[str, Path]) -> "HistoryStore":
        """
        Rehydrates the store from disk. A missing file gives an empty store;
        unreadable or corrupt content is logged and also gives an empty store.
        """
        path = Path(path)
        if not path.exists():
            logger.info(f"No history at {path}; starting empty.")
            return cls(path)

        try:
            results = load_results(path.read_bytes())
        except (OSError, ValidationError) as e:
            logger.warning(f"Could not read history from {path}, starting empty: {e}")
            return cls(path)

        logger.info(f"Loaded {len(results)} result(s) from {path}.")
        return cls(path, results)

    def __len__(self) -> int:
        return len(self._results)

    def list(self) -> List[AssessmentResult]:
        return list(self._results)

    def get(self, result_id: str) -> Optional[AssessmentResult]:
        return next((r for r in self._results if r.id == result_id), None)

    def append(self, results: Union[AssessmentResult, Iterable[AssessmentResult]]) -> None:
        """Adds results ahead of existing ones, keeping the batch's own order."""
        if isinstance(results, AssessmentResult):
            results = [results]
        batch = list(results)
        if not batch:
            return
        updated = batch + self._results
        self.flush(updated)
        self._results = updated
        logger.info(f"Stored {len(batch)} result(s); history now holds {len(self._results)}.")

    def delete(self, result_id: str) -> bool:
        remaining = [r for r in self._results if r.id != result_id]
        if len(remaining) == len(self._results):
            return False
        self.flush(remaining)
        self._results = remaining
        logger.info(f"Deleted result {result_id}.")
        return True

    def flush(self, results: Optional[List[AssessmentResult]] = None) -> None:
        """
        Writes the whole collection (or `results`, when given) and replaces the
        file atomically. Callers commit a change in memory only after this returns.
        """
        if results is None:
            results = self._results
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(dump_results(results))
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
