# boundless/routes/diag_routes.py
import logging
from pathlib import Path

from fastapi import APIRouter, Depends

from boundless.config import Settings, config_diag_safe
from boundless.data_client.document_store import COLLECTIONS, DocumentStore
from boundless.routes.deps import get_settings, get_store

logger = logging.getLogger("boundless-api")
router = APIRouter(tags=["diag"])


@router.get("/health")
def health(store: DocumentStore = Depends(get_store)):
    return {"status": "ok", "storage": "file" if store.root else "memory"}


@router.get("/api/diag/config")
def diag_config(settings: Settings = Depends(get_settings)):
    return config_diag_safe(settings)


@router.get("/api/diag/paths")
def diag_paths(store: DocumentStore = Depends(get_store)):
    def _p(x):
        return str(x) if x is not None else None

    files = {name: store.collection_file(name) for name in COLLECTIONS}
    return {
        "cwd": str(Path.cwd()),
        "data_root": _p(store.root),
        "collections": {name: _p(path) for name, path in files.items()},
        "exists": {
            "data_root": bool(store.root and store.root.exists()),
            **{name: bool(path and path.exists()) for name, path in files.items()},
        },
    }
