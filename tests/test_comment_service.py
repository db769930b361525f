import pytest

from podsee import db
from podsee.models.comment import Comment
from podsee.services.comment_service import (
    AdminCommentService, CommentService, PARENT_NOT_FOUND, PARENT_OTHER_CENTRE, REPLY_TO_REPLY,
)
from podsee.services.comment_store import AdminCommentStore, CommentStore

from tests.conftest import HUB


def _count():
    return db.session.query(Comment).count()


class ContextUnsupportedStore(CommentStore):
    def __init__(self):
        super().__init__()
        self.basic_calls = 0

    def comments_with_reply_count_by_context(self, *args, **kwargs):
        raise RuntimeError('function get_comments_with_reply_count_by_context does not exist')

    def comments_with_reply_count(self, *args, **kwargs):
        self.basic_calls += 1
        return super().comments_with_reply_count(*args, **kwargs)


class BrokenStore(CommentStore):
    def comments_with_reply_count(self, *args, **kwargs):
        raise ConnectionError('database unreachable')

    def insert(self, **columns):
        raise ConnectionError('database unreachable')


def test_create_top_level_comment(app):
    comment, error = CommentService().create_comment(
        HUB, '  <b>Mum</b> ', ' Very patient <i>teachers</i> ', level='P1', subject='Mathematics'
    )
    assert error is None
    assert comment['username'] == 'Mum'
    assert comment['text'] == 'Very patient teachers'
    assert comment['level'] == 'P1'
    assert comment['subject'] == 'Mathematics'
    assert comment['hidden'] is False
    assert comment['parent_comment_id'] is None
    assert _count() == 1


def test_create_comment_validation_failure_writes_nothing(app):
    comment, error = CommentService().create_comment(HUB, '', 'see www.spam-site.com')
    assert comment is None
    assert error == 'Comments cannot contain URLs or links. Username is required'
    assert _count() == 0


def test_reply_inherits_parent_context(app, make_comment):
    parent_id = make_comment(level='S2', subject='Science')

    reply, error = CommentService().create_comment(
        HUB, 'dad', 'Agree with this', parent_comment_id=parent_id, level='P1', subject='English'
    )
    assert error is None
    assert reply['parent_comment_id'] == parent_id
    assert (reply['level'], reply['subject']) == ('S2', 'Science')


def test_reply_to_general_comment_stays_general(app, make_comment):
    parent_id = make_comment()
    reply, error = CommentService().create_comment(
        HUB, 'dad', 'Same here', parent_comment_id=parent_id, level='P1', subject='Mathematics'
    )
    assert error is None
    assert reply['level'] is None and reply['subject'] is None


def test_cannot_reply_to_a_reply(app, make_comment):
    parent_id = make_comment()
    reply_id = make_comment(parent_id=parent_id)
    before = _count()

    comment, error = CommentService().create_comment(HUB, 'dad', 'Nested', parent_comment_id=reply_id)
    assert comment is None
    assert error == REPLY_TO_REPLY
    assert _count() == before


def test_reply_to_missing_parent(app):
    comment, error = CommentService().create_comment(HUB, 'dad', 'Hello', parent_comment_id='missing-id')
    assert comment is None
    assert error == PARENT_NOT_FOUND
    assert _count() == 0


def test_reply_must_stay_in_parent_centre(app, make_comment):
    parent_id = make_comment(centre_id='katong-science-studio')
    before = _count()

    comment, error = CommentService().create_comment(HUB, 'dad', 'Wrong page', parent_comment_id=parent_id)
    assert comment is None
    assert error == PARENT_OTHER_CENTRE
    assert _count() == before


def test_fetch_comments_top_level_visible_newest_first(app, make_comment):
    older = make_comment(text='older', minutes_ago=10)
    newer = make_comment(text='newer', minutes_ago=1)
    make_comment(text='hidden', hidden=True)
    make_comment(centre_id='other-centre', text='elsewhere')
    make_comment(parent_id=older, text='reply 1')
    make_comment(parent_id=older, text='reply 2')
    make_comment(parent_id=older, text='hidden reply', hidden=True)

    comments, error = CommentService().fetch_comments(HUB)
    assert error is None
    assert [c['comment_id'] for c in comments] == [newer, older]
    assert [c['reply_count'] for c in comments] == [0, 2]


def test_fetch_comments_paginates(app, make_comment):
    ids = [make_comment(text=f'review {i}', minutes_ago=i) for i in range(5)]
    service = CommentService()

    first, _ = service.fetch_comments(HUB, limit=2, offset=0)
    second, _ = service.fetch_comments(HUB, limit=2, offset=2)
    last, _ = service.fetch_comments(HUB, limit=2, offset=4)

    assert [c['comment_id'] for c in first + second + last] == ids


def test_fetch_comments_context_filter(app, make_comment):
    science = make_comment(level='S2', subject='Science')
    make_comment(level='S2', subject='English')
    make_comment()

    comments, error = CommentService().fetch_comments(HUB, level='S2', subject='Science')
    assert error is None
    assert [c['comment_id'] for c in comments] == [science]


def test_fetch_comments_falls_back_when_context_fetch_fails(app, make_comment):
    make_comment(level='S2', subject='Science', minutes_ago=1)
    make_comment(level='S2', subject='English')
    store = ContextUnsupportedStore()

    comments, error = CommentService(store).fetch_comments(HUB, level='S2', subject='Science')
    assert error is None
    assert store.basic_calls == 1
    assert len(comments) == 2


def test_fetch_comments_backend_failure_is_reported(app):
    comments, error = CommentService(BrokenStore()).fetch_comments(HUB)
    assert comments == []
    assert error == 'database unreachable'


def test_create_comment_backend_failure_is_reported(app):
    comment, error = CommentService(BrokenStore()).create_comment(HUB, 'mum', 'Nice')
    assert comment is None
    assert error == 'database unreachable'


def test_fetch_replies_oldest_first_and_ranged(app, make_comment):
    parent_id = make_comment(minutes_ago=60)
    first = make_comment(parent_id=parent_id, text='first', minutes_ago=30)
    second = make_comment(parent_id=parent_id, text='second', minutes_ago=20)
    third = make_comment(parent_id=parent_id, text='third', minutes_ago=10)
    make_comment(parent_id=parent_id, text='hidden', hidden=True, minutes_ago=5)
    service = CommentService()

    replies, error = service.fetch_replies(parent_id)
    assert error is None
    assert [r['comment_id'] for r in replies] == [first, second]

    replies, _ = service.fetch_replies(parent_id, limit=2, offset=2)
    assert [r['comment_id'] for r in replies] == [third]

    assert service.get_reply_count(parent_id) == (3, None)


def test_admin_service_requires_elevated_store(app):
    with pytest.raises(TypeError):
        AdminCommentService(CommentStore())
    assert isinstance(AdminCommentService().store, AdminCommentStore)


def test_admin_fetch_all_includes_hidden(app, make_comment):
    visible = make_comment(minutes_ago=5)
    hidden = make_comment(hidden=True)

    comments, error = AdminCommentService().admin_fetch_all_comments()
    assert error is None
    assert [c['comment_id'] for c in comments] == [hidden, visible]


def test_admin_toggle_hidden(app, make_comment):
    comment_id = make_comment()
    service = AdminCommentService()

    comment, error = service.admin_toggle_hidden(comment_id, True)
    assert error is None and comment['hidden'] is True
    assert CommentService().fetch_comments(HUB) == ([], None)

    comment, _ = service.admin_toggle_hidden(comment_id, False)
    assert comment['hidden'] is False

    assert service.admin_toggle_hidden('missing', True) == (None, 'Comment not found')


def test_admin_delete_removes_comment_and_replies(app, make_comment):
    parent_id = make_comment()
    make_comment(parent_id=parent_id)
    service = AdminCommentService()

    assert service.admin_delete_comment(parent_id) == (None, None)
    assert _count() == 0
    assert service.admin_delete_comment(parent_id) == (None, 'Comment not found')
