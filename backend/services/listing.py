"""
Listing queries for the public pages
Home page feed, article teaser block, actor categories
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.article import Article
from models.video import Category, MediaType, Vod

logger = logging.getLogger(__name__)

LATEST_VOD_LIMIT = 9
ARTICLE_ROWS = 3


def recent_window(now: Optional[datetime] = None) -> Tuple[int, int]:
    """
    Unix-second bounds from yesterday 00:00 to 48 hours later (inclusive)
    """
    now = now or datetime.now()
    start = datetime.combine(now.date() - timedelta(days=1), datetime.min.time())
    start_ts = int(start.timestamp())
    return start_ts, start_ts + 48 * 60 * 60 - 1


def latest_updates(db: Session, type_ids: Sequence[int], now: Optional[datetime] = None) -> List[Dict]:
    """
    Build the "latest updates" block for the configured top-level categories

    For each category the newest vods are taken from its child categories, or
    from the category itself when it has none, together with the number of
    vods added inside the recent window.
    """
    start_ts, end_ts = recent_window(now)

    parents = (
        db.query(Category)
        .filter(Category.type_id.in_(list(type_ids)), Category.type_pid == 0)
        .order_by(Category.type_id)
        .all()
    )

    sections = []
    for parent in parents:
        children = (
            db.query(Category)
            .filter(Category.type_pid == parent.type_id)
            .order_by(Category.type_id)
            .all()
        )
        source_ids = [child.type_id for child in children] or [parent.type_id]

        vods = (
            db.query(Vod)
            .filter(Vod.type_id.in_(source_ids))
            .order_by(Vod.vod_time_add.desc(), Vod.vod_id.desc())
            .limit(LATEST_VOD_LIMIT)
            .all()
        )
        recent_count = (
            db.query(func.count(Vod.vod_id))
            .filter(Vod.type_id.in_(source_ids), Vod.vod_time_add.between(start_ts, end_ts))
            .scalar()
        )

        sections.append({
            "type_id": parent.type_id,
            "vod_type_name": parent.type_name,
            "vod_son_name_list": {child.type_id: child.type_name for child in children},
            "vod_detail_array": [vod.to_dict() for vod in vods],
            "vod_count": recent_count or 0,
        })

    return sections


def latest_articles(db: Session) -> Dict:
    """
    Newest articles from enabled article categories

    The block shows whole rows of three, at most ARTICLE_ROWS rows. With
    fewer than three articles the row count is 0, which means no limit:
    every article is listed.
    """
    total = db.query(func.count(Article.art_id)).scalar() or 0
    rows = min((total // 3) * 3, ARTICLE_ROWS)

    art_type_ids = [
        type_id for (type_id,) in
        db.query(Category.type_id)
        .filter(Category.type_mid == MediaType.ARTICLE.value, Category.type_status == 1)
        .all()
    ]

    articles = []
    if art_type_ids:
        query = (
            db.query(Article)
            .filter(Article.type_id.in_(art_type_ids))
            .order_by(Article.art_time.desc())
        )
        if rows:
            query = query.limit(rows * 3)
        articles = query.all()

    return {
        "total": total,
        "art_type_ids": art_type_ids,
        "articles": [article.to_dict() for article in articles],
    }


def actor_types(db: Session) -> List[Dict]:
    """Enabled top-level actor categories, highest sort first"""
    types = (
        db.query(Category)
        .filter(
            Category.type_mid == MediaType.ACTOR.value,
            Category.type_pid == 0,
            Category.type_status == 1,
        )
        .order_by(Category.type_sort.desc())
        .all()
    )
    return [category.to_dict() for category in types]
