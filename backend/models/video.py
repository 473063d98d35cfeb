"""
Video models - Categories, Vods, Movies
Columns follow the existing mac_* schema, timestamps are unix seconds
"""
from sqlalchemy import Column, Integer, SmallInteger, String
import enum

from .base import Base


class MediaType(enum.IntEnum):
    """Values of type_mid, the media-type discriminator on categories"""
    VOD = 1
    ARTICLE = 2
    ACTOR = 8


class Category(Base):
    """
    Categories for every media type, nested one level through type_pid
    """
    __tablename__ = "mac_type"

    type_id = Column(Integer, primary_key=True, autoincrement=True)
    type_name = Column(String(60), nullable=False, default="")
    type_pid = Column(SmallInteger, nullable=False, default=0)  # 0 = top level
    type_mid = Column(SmallInteger, nullable=False, default=MediaType.VOD.value)
    type_sort = Column(SmallInteger, nullable=False, default=0)
    type_status = Column(SmallInteger, nullable=False, default=1)  # 1 = enabled

    def __repr__(self):
        return f"<Category(type_id={self.type_id}, type_name={self.type_name})>"

    def to_dict(self):
        return {
            "type_id": self.type_id,
            "type_name": self.type_name,
            "type_pid": self.type_pid,
            "type_mid": self.type_mid,
            "type_sort": self.type_sort,
            "type_status": self.type_status,
        }


class Vod(Base):
    """
    Video-on-demand entries shown in listings
    """
    __tablename__ = "mac_vod"

    vod_id = Column(Integer, primary_key=True, autoincrement=True)
    type_id = Column(SmallInteger, nullable=False, default=0, index=True)
    vod_name = Column(String(255), nullable=False, default="")
    vod_pic = Column(String(255), nullable=False, default="")
    vod_remarks = Column(String(100), nullable=False, default="")
    vod_time_add = Column(Integer, nullable=False, default=0, index=True)

    def __repr__(self):
        return f"<Vod(vod_id={self.vod_id}, vod_name={self.vod_name})>"

    def to_dict(self):
        return {
            "vod_id": self.vod_id,
            "type_id": self.type_id,
            "vod_name": self.vod_name,
            "vod_pic": self.vod_pic,
            "vod_remarks": self.vod_remarks,
            "vod_time_add": self.vod_time_add,
        }


class Movie(Base):
    """
    Movie titles processed by the translation backfill

    The boolean "translated" column is not declared here: the backfill adds it
    on demand to whatever table it is pointed at.
    """
    __tablename__ = "mac_movie"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=True)

    def __repr__(self):
        return f"<Movie(id={self.id}, name={self.name})>"
