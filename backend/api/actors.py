"""
Actor API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.database import get_db
from api.responses import ApiMessage, success
from services.listing import actor_types

router = APIRouter()


@router.get("/types", response_model=ApiMessage)
async def list_actor_types(db: Session = Depends(get_db)):
    """Enabled top-level actor categories, ordered by type_sort (highest first)"""
    return success("ok", data=actor_types(db))
