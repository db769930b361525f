"""
Services package
"""
from podsee.services.comment_service import CommentService, AdminCommentService
from podsee.services.comment_store import CommentStore, AdminCommentStore
from podsee.services.centre_catalog import CentreCatalog
from podsee.services.click_tracking import ClickLogger
from podsee.services.comment_section import CommentSectionView

__all__ = [
    'CommentService',
    'AdminCommentService',
    'CommentStore',
    'AdminCommentStore',
    'CentreCatalog',
    'ClickLogger',
    'CommentSectionView'
]
