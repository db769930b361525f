"""
Comment Service: reads and writes of centre reviews and their replies

Every operation returns a (data, error) pair. Failures are printed and
converted to an error message; no exception leaves this module.
"""
from typing import Optional
from podsee.services.comment_store import CommentStore, AdminCommentStore
from podsee.services.sanitizer import sanitize_text, validate_comment

PARENT_NOT_FOUND = 'Parent comment not found'
REPLY_TO_REPLY = 'Cannot reply to a reply. Only top-level comments can be replied to.'
PARENT_OTHER_CENTRE = 'Parent comment belongs to a different centre'
COMMENT_NOT_FOUND = 'Comment not found'


class CommentService:
    """User-facing comment operations over a regular CommentStore"""

    def __init__(self, store: Optional[CommentStore] = None):
        self.store = store or CommentStore()

    def _failed(self, action: str, error: Exception) -> str:
        print(f"[CommentService] Error {action}: {error}")
        try:
            self.store.rollback()
        except Exception as rollback_error:
            print(f"[CommentService] Rollback failed: {rollback_error}")
        return str(error) or error.__class__.__name__

    def fetch_comments(self, centre_id: str, limit: int = 20, offset: int = 0,
                       level: Optional[str] = None, subject: Optional[str] = None) -> tuple:
        """
        Fetch top-level comments for a centre with optional context filtering

        When a level or subject is given the context-aware procedure is tried
        first. Any failure there (including an outage) is treated as the
        procedure being unsupported, and the unfiltered procedure is used.

        Args:
            centre_id: Centre identifier
            limit: Page size
            offset: Rows to skip
            level: Optional level filter
            subject: Optional subject filter

        Returns:
            Tuple (comments: list, error: str or None)
        """
        if level is not None or subject is not None:
            try:
                data = self.store.comments_with_reply_count_by_context(
                    centre_id, level, subject, limit, offset
                )
                return data or [], None
            except Exception as e:
                print(f"[CommentService] Context-aware fetch not available ({e}), using basic fetch")
                try:
                    self.store.rollback()
                except Exception as rollback_error:
                    print(f"[CommentService] Rollback failed: {rollback_error}")

        return self._fetch_comments_basic(centre_id, limit, offset)

    def _fetch_comments_basic(self, centre_id, limit, offset):
        try:
            data = self.store.comments_with_reply_count(centre_id, limit, offset)
            return data or [], None
        except Exception as e:
            return [], self._failed('fetching comments', e)

    def fetch_replies(self, parent_comment_id: str, limit: int = 2, offset: int = 0) -> tuple:
        """Visible replies of a comment, oldest first"""
        try:
            return self.store.replies(parent_comment_id, limit, offset) or [], None
        except Exception as e:
            return [], self._failed('fetching replies', e)

    def get_reply_count(self, parent_comment_id: str) -> tuple:
        try:
            return self.store.reply_count(parent_comment_id), None
        except Exception as e:
            return 0, self._failed('getting reply count', e)

    def create_comment(self, centre_id: str, username: str, text: str,
                       parent_comment_id: Optional[str] = None,
                       level: Optional[str] = None, subject: Optional[str] = None) -> tuple:
        """
        Create a new comment or reply

        Replies may only target top-level comments and always take the
        parent's level and subject, whatever the caller passed.

        Args:
            centre_id: Centre identifier
            username: Author name
            text: Comment text
            parent_comment_id: Parent comment for replies
            level: Level for top-level comments, None for general comments
            subject: Subject for top-level comments, None for general comments

        Returns:
            Tuple (comment: dict or None, error: str or None)
        """
        try:
            sanitized_text = sanitize_text(text)
            sanitized_username = sanitize_text(username)

            errors = validate_comment(sanitized_text, sanitized_username)
            if errors:
                return None, '. '.join(errors)

            final_level = level
            final_subject = subject

            if parent_comment_id:
                parent = self.store.get(parent_comment_id)
                if parent is None:
                    return None, PARENT_NOT_FOUND

                if parent.centre_id != centre_id:
                    return None, PARENT_OTHER_CENTRE

                if parent.parent_comment_id is not None:
                    return None, REPLY_TO_REPLY

                final_level = parent.level
                final_subject = parent.subject

            comment = self.store.insert(
                centre_id=centre_id,
                username=sanitized_username,
                text=sanitized_text,
                parent_comment_id=parent_comment_id or None,
                level=final_level,
                subject=final_subject,
                hidden=False
            )
            print(f"[CommentService] Comment {comment['comment_id']} created for centre {centre_id}")
            return comment, None

        except Exception as e:
            return None, self._failed('creating comment', e)


class AdminCommentService(CommentService):
    """
    Moderation operations. Callers are expected to be gated already;
    no authorization check happens here.
    """

    def __init__(self, store: Optional[AdminCommentStore] = None):
        store = store or AdminCommentStore()
        if not isinstance(store, AdminCommentStore):
            raise TypeError('AdminCommentService requires an AdminCommentStore')
        super().__init__(store)

    def admin_fetch_all_comments(self) -> tuple:
        """All comments including hidden ones, newest first"""
        try:
            return self.store.all_comments() or [], None
        except Exception as e:
            return [], self._failed('fetching all comments', e)

    def admin_toggle_hidden(self, comment_id: str, hidden: bool) -> tuple:
        try:
            comment = self.store.set_hidden(comment_id, hidden)
            if comment is None:
                return None, COMMENT_NOT_FOUND
            print(f"[CommentService] Comment {comment_id} hidden={comment['hidden']}")
            return comment, None
        except Exception as e:
            return None, self._failed('toggling comment visibility', e)

    def admin_delete_comment(self, comment_id: str) -> tuple:
        """
        Permanently delete a comment (and its replies)

        Returns:
            Tuple (None, error: str or None)
        """
        try:
            if not self.store.delete(comment_id):
                return None, COMMENT_NOT_FOUND
            print(f"[CommentService] Comment {comment_id} deleted")
            return None, None
        except Exception as e:
            return None, self._failed('deleting comment', e)
