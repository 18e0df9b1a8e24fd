"""
Threadline 社交后端

用户、帖子（含嵌套帖子）、评论、点赞、关注、转发与分享
"""

__version__ = "0.1.0"
