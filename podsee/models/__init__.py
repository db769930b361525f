"""
Database models
"""
from podsee.models.user import User
from podsee.models.comment import Comment

__all__ = [
    'User',
    'Comment'
]
