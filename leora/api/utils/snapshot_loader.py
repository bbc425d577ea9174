from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, TypeVar

from leora.api.utils.rpc import DEFAULT_LIST_LIMIT, SnapshotReader
from leora.models.investor_positions import InvestorPosition
from leora.models.metric_values import MetricValue
from leora.models.snapshot_sources import SnapshotSource
from leora.models.snapshots import Snapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class LoadedSnapshotData:
    snapshot_id: str
    position: Optional[InvestorPosition] = None
    metrics: List[MetricValue] = field(default_factory=list)
    sources: List[SnapshotSource] = field(default_factory=list)


def _settled(fut: "Future[T]", fallback: T, what: str, snapshot_id: str) -> T:
    try:
        return fut.result()
    except Exception:
        logger.warning("%s failed for snapshot %s; treating as no data", what, snapshot_id, exc_info=True)
        return fallback


def load_snapshot_data(reader: SnapshotReader, snapshot: Optional[Snapshot]) -> Optional[LoadedSnapshotData]:
    """
    Read position, metrics and sources for one snapshot.

    The three reads run concurrently and settle independently: a failing
    read degrades to None / [] without affecting the other two.
    """
    if snapshot is None or not snapshot.id:
        return None

    sid = snapshot.id
    with ThreadPoolExecutor(max_workers=3) as pool:
        position_f = pool.submit(reader.get_investor_position, sid)
        metrics_f = pool.submit(reader.list_metric_values, sid)
        sources_f = pool.submit(reader.list_snapshot_sources, sid)

        return LoadedSnapshotData(
            snapshot_id=sid,
            position=_settled(position_f, None, "get_investor_position", sid),
            metrics=list(_settled(metrics_f, [], "list_metric_values", sid)),
            sources=list(_settled(sources_f, [], "list_snapshot_sources", sid)),
        )


def find_previous_snapshot(reader: SnapshotReader, current: Optional[Snapshot]) -> Optional[Snapshot]:
    """
    The snapshot of the same kind/project that comes just before `current`.

    Ordering is (snapshot_month, created_at) descending, compared as ISO
    strings. A failed listing means "no previous snapshot".
    """
    if current is None or not current.id:
        return None

    try:
        listed = reader.list_snapshots(
            kind=current.snapshot_kind,
            project_key=current.project_key,
            limit=DEFAULT_LIST_LIMIT,
        )
    except Exception:
        logger.warning("list_snapshots failed while resolving previous of %s", current.id, exc_info=True)
        return None

    ordered = sorted(
        listed,
        key=lambda s: (s.snapshot_month or "", s.created_at or ""),
        reverse=True,
    )
    for idx, s in enumerate(ordered):
        if s.id == current.id:
            return ordered[idx + 1] if idx + 1 < len(ordered) else None
    return None


class SnapshotDataCache:
    """
    Single slot holding the loaded data of the active snapshot.

    Switching the active snapshot empties the slot. A load only lands in the
    slot if the active snapshot did not change while it was in flight.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._active_id: Optional[str] = None
        self._generation = 0
        self._loaded: Optional[LoadedSnapshotData] = None

    @property
    def loaded(self) -> Optional[LoadedSnapshotData]:
        return self._loaded

    def activate(self, snapshot_id: Optional[str]) -> None:
        with self._lock:
            if snapshot_id == self._active_id:
                return
            self._active_id = snapshot_id
            self._generation += 1
            self._loaded = None

    def invalidate(self) -> None:
        with self._lock:
            self._generation += 1
            self._loaded = None

    def ensure_loaded(self, reader: SnapshotReader, snapshot: Optional[Snapshot]) -> Optional[LoadedSnapshotData]:
        if snapshot is None or not snapshot.id:
            return None

        self.activate(snapshot.id)
        with self._lock:
            if self._loaded is not None and self._loaded.snapshot_id == snapshot.id:
                return self._loaded
            generation = self._generation

        loaded = load_snapshot_data(reader, snapshot)

        with self._lock:
            if generation == self._generation:
                self._loaded = loaded
        return loaded
