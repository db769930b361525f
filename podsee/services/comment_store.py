"""
Comment store: the database procedures and table operations behind the comment service

CommentStore is the regular capability used by public surfaces and never
returns hidden rows from its read procedures. AdminCommentStore is the
elevated capability; only the moderation blueprint constructs one.
"""
from sqlalchemy import func
from sqlalchemy.orm import aliased
from podsee import db
from podsee.models.comment import Comment


def _matches(column, value):
    """Equality that treats None as SQL NULL"""
    if value is None:
        return column.is_(None)
    return column == value


class CommentStore:
    """Regular (public) access to the comments table"""

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session or db.session

    def _reply_count_column(self):
        reply = aliased(Comment)
        return (
            db.select(func.count(reply.comment_id))
            .where(reply.parent_comment_id == Comment.comment_id)
            .where(reply.hidden.is_(False))
            .correlate(Comment)
            .scalar_subquery()
            .label('reply_count')
        )

    def _top_level(self, centre_id):
        return (
            db.select(Comment, self._reply_count_column())
            .where(Comment.centre_id == centre_id)
            .where(Comment.parent_comment_id.is_(None))
            .where(Comment.hidden.is_(False))
        )

    def _page(self, stmt, limit, offset):
        stmt = stmt.order_by(Comment.created_at.desc(), Comment.comment_id).limit(limit).offset(offset)
        rows = self.session.execute(stmt).all()
        return [comment.to_dict(reply_count=count or 0) for comment, count in rows]

    def comments_with_reply_count(self, centre_id, limit, offset):
        """Visible top-level comments of a centre, newest first, with reply counts"""
        return self._page(self._top_level(centre_id), limit, offset)

    def comments_with_reply_count_by_context(self, centre_id, level, subject, limit, offset):
        """Same as comments_with_reply_count, scoped to one level/subject"""
        stmt = (
            self._top_level(centre_id)
            .where(_matches(Comment.level, level))
            .where(_matches(Comment.subject, subject))
        )
        return self._page(stmt, limit, offset)

    def replies(self, parent_id, limit, offset):
        stmt = (
            db.select(Comment)
            .where(Comment.parent_comment_id == parent_id)
            .where(Comment.hidden.is_(False))
            .order_by(Comment.created_at.asc(), Comment.comment_id)
            .limit(limit)
            .offset(offset)
        )
        return [comment.to_dict() for comment in self.session.scalars(stmt)]

    def reply_count(self, parent_id):
        stmt = (
            db.select(func.count(Comment.comment_id))
            .where(Comment.parent_comment_id == parent_id)
            .where(Comment.hidden.is_(False))
        )
        return self.session.scalar(stmt) or 0

    def get(self, comment_id):
        return self.session.get(Comment, comment_id)

    def insert(self, **columns):
        comment = Comment(**columns)
        self.session.add(comment)
        self.session.commit()
        return comment.to_dict()

    def rollback(self):
        self.session.rollback()


class AdminCommentStore(CommentStore):
    """Elevated access: sees hidden rows, updates and deletes"""

    def all_comments(self):
        stmt = db.select(Comment).order_by(Comment.created_at.desc(), Comment.comment_id)
        return [comment.to_dict() for comment in self.session.scalars(stmt)]

    def set_hidden(self, comment_id, hidden):
        comment = self.get(comment_id)
        if comment is None:
            return None
        comment.hidden = bool(hidden)
        self.session.commit()
        return comment.to_dict()

    def delete(self, comment_id):
        comment = self.get(comment_id)
        if comment is None:
            return False
        self.session.delete(comment)
        self.session.commit()
        return True
