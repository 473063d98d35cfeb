"""
SQLAlchemy Models for the Movie CMS
Mapped onto the existing mac_* tables
"""
from .base import Base
from .video import Category, Vod, Movie, MediaType
from .article import Article

__all__ = [
    "Base",
    "Category",
    "Vod",
    "Movie",
    "MediaType",
    "Article",
]
