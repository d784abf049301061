"""
API for reading and updating admin settings (weights, festival mode, manual levels, road closures).
"""
import logging
from typing import Dict, Optional

from fastapi import FastAPI, HTTPException

from .....common.exceptions import DataSourceError, InvalidSettingError
from .....common.schemas import SettingUpdate
from ....application.overrides import validate_setting
from ....domain.protocols import SettingsStore

logger = logging.getLogger(__name__)

app = FastAPI()

# Singleton
_store: Optional[SettingsStore] = None


def init_store(store: SettingsStore):
    global _store
    _store = store


def get_store() -> SettingsStore:
    if _store is None:
        raise HTTPException(status_code=503, detail="Settings store not initialized")
    return _store


@app.get("/admin/settings")
def list_settings() -> Dict[str, str]:
    store = get_store()
    try:
        return store.all()
    except DataSourceError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e


@app.post("/admin/settings")
def update_setting(update: SettingUpdate):
    """
    Validates and stores one setting.

    Body example:
    {
        "key": "CROWD_STATUS_OOTY_LAKE",
        "value": "CRITICAL"
    }
    """
    store = get_store()
    try:
        value = validate_setting(update.key, update.value)
    except InvalidSettingError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    try:
        store.set(update.key, value)
    except DataSourceError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e

    logger.info(f"Setting {update.key} updated to {value!r}")
    return {"status": "updated", "key": update.key, "value": value}
