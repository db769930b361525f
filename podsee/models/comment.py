"""
Comment model
"""
import uuid
from datetime import datetime
from podsee import db


def _new_comment_id():
    return str(uuid.uuid4())


class Comment(db.Model):
    """Parent review of a centre, or a one-deep reply to one"""
    __tablename__ = 'comments'

    comment_id = db.Column(db.String(36), primary_key=True, default=_new_comment_id)
    centre_id = db.Column(db.String(200), nullable=False, index=True)
    username = db.Column(db.String(50), nullable=False)
    text = db.Column(db.String(500), nullable=False)

    # NULL for top-level comments
    parent_comment_id = db.Column(
        db.String(36),
        db.ForeignKey('comments.comment_id', ondelete='CASCADE'),
        nullable=True,
        index=True
    )

    # Class context, NULL for general comments
    level = db.Column(db.String(50), nullable=True)
    subject = db.Column(db.String(100), nullable=True)

    hidden = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    replies = db.relationship(
        'Comment',
        backref=db.backref('parent', remote_side=[comment_id]),
        cascade='all, delete-orphan'
    )

    @property
    def is_top_level(self):
        return self.parent_comment_id is None

    def to_dict(self, reply_count=None):
        data = {
            'comment_id': self.comment_id,
            'centre_id': self.centre_id,
            'username': self.username,
            'text': self.text,
            'parent_comment_id': self.parent_comment_id,
            'level': self.level,
            'subject': self.subject,
            'hidden': self.hidden,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
        if reply_count is not None:
            data['reply_count'] = reply_count
        return data

    def __repr__(self):
        return f'<Comment {self.comment_id} centre={self.centre_id} parent={self.parent_comment_id}>'
