"""
Article model
"""
from sqlalchemy import Column, Integer, SmallInteger, String

from .base import Base


class Article(Base):
    """News/blog articles, grouped by article categories (type_mid = 2)"""
    __tablename__ = "mac_art"

    art_id = Column(Integer, primary_key=True, autoincrement=True)
    type_id = Column(SmallInteger, nullable=False, default=0, index=True)
    art_name = Column(String(255), nullable=False, default="")
    art_pic = Column(String(255), nullable=False, default="")
    art_time = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<Article(art_id={self.art_id}, art_name={self.art_name})>"

    def to_dict(self):
        return {
            "art_id": self.art_id,
            "type_id": self.type_id,
            "art_name": self.art_name,
            "art_pic": self.art_pic,
            "art_time": self.art_time,
        }
