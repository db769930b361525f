import pytest

from podsee.services.sanitizer import contains_url, sanitize_text, validate_comment, validate_username


def test_sanitize_strips_tags_and_trims():
    assert sanitize_text('  <b>Great</b> <i>tutor</i>  ') == 'Great tutor'


def test_sanitize_drops_script_content():
    assert sanitize_text('Nice<script>alert("x")</script> place') == 'Nice place'
    assert sanitize_text('<SCRIPT type="text/javascript">steal()</SCRIPT>ok') == 'ok'


def test_sanitize_empty_values():
    assert sanitize_text(None) == ''
    assert sanitize_text('') == ''
    assert sanitize_text('   ') == ''


@pytest.mark.parametrize('raw', [
    '<<b>script>x',
    '<scr<b>ipt>alert(1)</script>',
    ' a < b and c > d ',
    '<p>Hello <script>bad()</script>world</p>',
    '2 < 3',
    'plain text',
])
def test_sanitize_is_idempotent(raw):
    once = sanitize_text(raw)
    assert sanitize_text(once) == once


@pytest.mark.parametrize('text', [
    'see http://spam.example',
    'go to https://x.y',
    'visit www.tuition',
    'mysite.sg/path',
    'email me at tutor.com',
    'ACME.IO is great',
    'check bestcentre.co',
])
def test_contains_url_detects_links(text):
    assert contains_url(text)


@pytest.mark.parametrize('text', [
    'Great teachers, my son improved a lot.',
    'Scores went from B to A. Recommended!',
    '',
    None,
])
def test_contains_url_ignores_plain_text(text):
    assert not contains_url(text)


def test_validate_comment_accepts_valid_input():
    assert validate_comment('Very patient teachers', 'Mum of two') == []


def test_validate_comment_reports_every_violation():
    errors = validate_comment('', '')
    assert 'Comment cannot be empty' in errors
    assert 'Username is required' in errors

    errors = validate_comment('x' * 495 + ' www.spam', 'u' * 51)
    assert 'Comment must be 500 characters or less' in errors
    assert 'Comments cannot contain URLs or links' in errors
    assert 'Username must be 50 characters or less' in errors


def test_validate_comment_length_boundary():
    assert validate_comment('a' * 500, 'parent') == []
    assert validate_comment('a' * 501, 'parent') == ['Comment must be 500 characters or less']


def test_validate_username_rejects_links():
    assert validate_username('www.spam') == ['Username cannot contain URLs or links']
    assert validate_username('Auntie May') == []
