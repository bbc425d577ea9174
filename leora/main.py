from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

from leora.api.routes import audit, demo, export, leo, snapshots
from leora.api.state import LeoraState
from leora.api.utils.rpc import SnapshotReader
from leora.config import Settings, get_settings

log = logging.getLogger("leora")
if not log.handlers:
    h = logging.StreamHandler()
    h.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    log.addHandler(h)
log.setLevel(logging.INFO)


def create_app(settings: Optional[Settings] = None, rpc_reader: Optional[SnapshotReader] = None) -> FastAPI:
    s = settings or get_settings()
    if s.leo_diagnostics:
        log.setLevel(logging.DEBUG)

    app = FastAPI(title="Leora Investor OS")
    app.state.leora = LeoraState(s, rpc_reader=rpc_reader)

    app.include_router(snapshots.router, prefix="/api")
    app.include_router(export.router, prefix="/api")
    app.include_router(leo.router, prefix="/api")
    app.include_router(audit.router, prefix="/api")
    app.include_router(demo.router, prefix="/api")
    return app


app = create_app()
