"""
Response envelope shared by the CMS endpoints
{"code": 1|0, "msg": "...", "data": ...}
"""
from pydantic import BaseModel
from typing import Any, Optional


class ApiMessage(BaseModel):
    """code 1 = success, 0 = failure"""
    code: int
    msg: str
    data: Optional[Any] = None


def success(msg: str, data: Any = None) -> ApiMessage:
    return ApiMessage(code=1, msg=msg, data=data)


def failure(msg: str, data: Any = None) -> ApiMessage:
    return ApiMessage(code=0, msg=msg, data=data)
