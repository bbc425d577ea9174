from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import HTTPException, Request

from leora.api.utils.audit_log import AuditLog
from leora.api.utils.demo_data import DemoSnapshotReader
from leora.api.utils.demo_mode import DemoMode
from leora.api.utils.rpc import RpcSnapshotReader, SnapshotReader
from leora.api.utils.snapshot_loader import SnapshotDataCache
from leora.config import Settings
from leora.models.snapshots import Snapshot

logger = logging.getLogger(__name__)

DEMO_ACTOR = "demo"

# Snapshot lookups by id scan one listing this long.
SNAPSHOT_LOOKUP_LIMIT = 500


class LeoraState:
    """
    Process-lifetime stores for one app instance: audit log, demo switch,
    and the active-snapshot cache. Built once in create_app.
    """

    def __init__(self, settings: Settings, rpc_reader: Optional[SnapshotReader] = None) -> None:
        self.settings = settings
        self.audit_log = AuditLog()
        self.demo_mode = DemoMode(available=settings.demo_mode_available)
        self.snapshot_cache = SnapshotDataCache()

        self._rpc_reader: SnapshotReader = rpc_reader or RpcSnapshotReader()
        self._demo_reader: SnapshotReader = DemoSnapshotReader()
        self._user_id: Optional[str] = None

        self.demo_mode.subscribe(self._on_demo_mode_changed)

    @property
    def reader(self) -> SnapshotReader:
        return self._demo_reader if self.demo_mode.enabled else self._rpc_reader

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    def set_session_user(self, user_id: Optional[str]) -> None:
        self._user_id = user_id.strip() if isinstance(user_id, str) and user_id.strip() else None
        self._sync_actor()

    def _sync_actor(self) -> None:
        self.audit_log.set_actor(DEMO_ACTOR if self.demo_mode.enabled else self._user_id)

    def _on_demo_mode_changed(self, enabled: bool) -> None:
        # Cached rows came from the other reader.
        self.snapshot_cache.invalidate()
        self._sync_actor()

    def list_snapshots_soft(self, **kwargs) -> List[Snapshot]:
        try:
            return self.reader.list_snapshots(**kwargs)
        except Exception:
            logger.warning("list_snapshots failed; treating as empty", exc_info=True)
            return []

    def resolve_snapshot(self, snapshot_id: str) -> Snapshot:
        """
        Find a snapshot by id in the newest SNAPSHOT_LOOKUP_LIMIT rows.

        Older snapshots are not reachable by id and get a 404. A failed
        listing is a 503, not a 404.
        """
        sid = (snapshot_id or "").strip()
        if not sid:
            raise HTTPException(400, "snapshot_id is required")
        try:
            listed = self.reader.list_snapshots(limit=SNAPSHOT_LOOKUP_LIMIT)
        except Exception:
            logger.warning("list_snapshots failed while resolving %s", sid, exc_info=True)
            raise HTTPException(503, "Snapshot listing unavailable")
        for s in listed:
            if s.id == sid:
                return s
        raise HTTPException(404, "Snapshot not found")


def get_state(request: Request) -> LeoraState:
    return request.app.state.leora
