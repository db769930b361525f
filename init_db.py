"""
Initialize database and create the moderation account
"""
import os
import sys

# Add app to path
sys.path.insert(0, os.path.dirname(__file__))

from podsee import create_app, db
from podsee.models.user import User
from podsee.models.comment import Comment  # noqa: F401


def init_database():
    """Initialize database and create tables"""
    app = create_app()

    with app.app_context():
        print("Creating database tables...")
        db.create_all()

        username = os.getenv('ADMIN_USERNAME', 'admin')
        password = os.getenv('ADMIN_PASSWORD', 'admin123')

        admin = User.query.filter_by(username=username).first()
        if not admin:
            print(f"Creating admin user '{username}'...")
            admin = User(username=username, role='admin')
            admin.set_password(password)  # Change this in production!
            db.session.add(admin)

        db.session.commit()
        print("\nDatabase initialized successfully!")
        print(f"Admin: username='{username}'")
        if not os.getenv('ADMIN_PASSWORD'):
            print("\nIMPORTANT: Default password 'admin123' in use. Set ADMIN_PASSWORD in production!")


if __name__ == '__main__':
    init_database()
