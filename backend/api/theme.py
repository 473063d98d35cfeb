"""
Admin theme settings endpoints
"""
import logging
from fastapi import APIRouter, Body, Depends
from typing import Any, Dict

from core.errors import ThemeConfigError
from api.responses import ApiMessage, success, failure
from services.theme_config import ThemeConfigStore

logger = logging.getLogger(__name__)

router = APIRouter()


def get_theme_store() -> ThemeConfigStore:
    return ThemeConfigStore()


@router.get("/theme", response_model=ApiMessage)
async def get_theme_settings(store: ThemeConfigStore = Depends(get_theme_store)):
    """Current theme configuration"""
    try:
        config = store.load()
    except ThemeConfigError as e:
        logger.error(str(e))
        return failure(str(e))
    return success("ok", data=config)


@router.post("/theme", response_model=ApiMessage)
async def save_theme_settings(
    form: Dict[str, Any] = Body(..., description='Submitted form, e.g. {"theme": {...}}'),
    store: ThemeConfigStore = Depends(get_theme_store),
):
    """
    Save the theme settings form

    Multi-select fields (fnav.ym, rtnav.ym, show.filter) arrive as lists and
    are stored pipe-joined. The submitted theme section replaces the stored one.
    """
    if not isinstance(form.get("theme"), dict):
        return failure("Missing theme section")

    try:
        config = store.update_theme(form)
    except ThemeConfigError as e:
        logger.error(str(e))
        return failure("Save failed, please retry")

    return success("Saved", data=config)
