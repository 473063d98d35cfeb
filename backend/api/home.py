"""
Home page API endpoints
Latest updates per category and the article teaser block
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.config import settings
from core.database import get_db
from api.responses import ApiMessage, success
from services import listing

router = APIRouter()


@router.get("/latest-updates", response_model=ApiMessage)
async def get_latest_updates(db: Session = Depends(get_db)):
    """
    Newest vods of each home-page category (HOME_TYPE_IDS)

    Each section carries the category name, its child categories, up to 9
    newest vods and the number of vods added since yesterday.
    """
    sections = listing.latest_updates(db, settings.HOME_TYPE_IDS)
    return success("ok", data=sections)


@router.get("/articles", response_model=ApiMessage)
async def get_home_articles(db: Session = Depends(get_db)):
    """Article teaser block plus the site announcement"""
    data = listing.latest_articles(db)
    data["tips_text"] = settings.SITE_ANNOUNCEMENT
    return success("ok", data=data)
