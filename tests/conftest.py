import json
from datetime import datetime, timedelta

import pytest

from podsee import create_app, db
from podsee.models.comment import Comment
from podsee.models.user import User

CENTRES = [
    {
        "name": "Marine Parade Learning Hub",
        "address": "80 Marine Parade Road",
        "postalCode": "449269",
        "contactType": "Whatsapp",
        "whatsappNumber": "+65 9123 4567",
        "websiteUrl": "https://example.com/mplh",
        "offerings": [
            {"level": "S2", "subject": "English"},
            {"level": "P1", "subject": "Mathematics"},
            {"level": "S2", "subject": "Science"},
            {"level": "P1", "subject": "Mathematics"},
        ],
    },
    {
        "name": "Katong Science Studio",
        "address": "112 East Coast Road",
        "postalCode": "428802",
        "contactType": "Call",
        "whatsappNumber": "6345 6789",
        "websiteUrl": "",
        "offerings": [{"level": "JC1", "subject": "Chemistry"}],
    },
    {
        "name": "Parkway Tutors",
        "address": "50 Marine Terrace",
        "postalCode": "440050",
        "contactType": "",
        "whatsappNumber": "",
        "websiteUrl": "",
        "offerings": [],
    },
]

HUB = 'marine-parade-learning-hub'
BASE_TIME = datetime(2026, 3, 1, 9, 0, 0)


@pytest.fixture
def centres_file(tmp_path):
    path = tmp_path / 'centres.json'
    path.write_text(json.dumps(CENTRES), encoding='utf-8')
    return path


@pytest.fixture
def app(centres_file):
    app = create_app('testing')
    app.config['CENTRES_DATA_PATH'] = str(centres_file)
    app.config['SECRET_KEY'] = 'test-secret'

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_comment(app):
    """Insert a comment directly; minutes_ago orders rows by creation time"""
    def _make(centre_id=HUB, text='Helpful teachers', username='parent1', parent_id=None,
              level=None, subject=None, hidden=False, minutes_ago=0):
        comment = Comment(
            centre_id=centre_id,
            username=username,
            text=text,
            parent_comment_id=parent_id,
            level=level,
            subject=subject,
            hidden=hidden,
            created_at=BASE_TIME - timedelta(minutes=minutes_ago),
        )
        db.session.add(comment)
        db.session.commit()
        return comment.comment_id
    return _make


@pytest.fixture
def admin_user(app):
    user = User(username='moderator', role='admin')
    user.set_password('s3cret-pass')
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def admin_client(client, admin_user):
    response = client.post('/auth/login', data={'username': 'moderator', 'password': 's3cret-pass'})
    assert response.status_code == 302
    return client
