"""
互动目标（点赞 / 分享的多态目标）
"""

from enum import Enum
from pydantic import BaseModel, Field


class TargetKind(str, Enum):
    """目标类型"""
    POST = "post"
    COMMENT = "comment"    # 顶级评论
    REPLY = "reply"        # 对评论的回复


class ContentTarget(BaseModel):
    """已解析的互动目标：(类型, ID)"""
    kind: TargetKind = Field(..., description="目标类型")
    id: str = Field(..., description="目标ID")

    class Config:
        frozen = True
