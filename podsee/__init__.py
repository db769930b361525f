"""
Podsee - Application Factory
"""
import os
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Initialize extensions
db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()


def create_app(config_name=None):
    """Create and configure the Flask application"""
    from podsee.config import config

    app = Flask(__name__)

    # Configuration
    config_name = config_name or os.getenv('FLASK_CONFIG', 'default')
    app.config.from_object(config[config_name])

    # Initialize extensions with app
    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)

    # Configure login manager
    login_manager.login_view = 'auth.login'
    login_manager.login_message = 'Please log in to access the moderation area.'

    # Auto-initialize database on first run
    with app.app_context():
        _auto_initialize_database(app)

    # Register blueprints
    from podsee.auth import auth_bp
    from podsee.admin import admin_bp
    from podsee.main import main_bp
    from podsee.tracking import tracking_bp

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(main_bp)
    app.register_blueprint(tracking_bp, url_prefix='/api')

    return app


def _auto_initialize_database(app):
    """Create tables and the admin account on a fresh database"""
    try:
        from podsee.models.user import User
        from podsee.models.comment import Comment  # noqa: F401
        from sqlalchemy import inspect

        uri = app.config.get('SQLALCHEMY_DATABASE_URI') or ''
        if uri.startswith('sqlite:///') and ':memory:' not in uri:
            os.makedirs(os.path.dirname(uri[len('sqlite:///'):]) or '.', exist_ok=True)

        inspector = inspect(db.engine)
        tables = inspector.get_table_names()

        if 'comments' not in tables or 'users' not in tables:
            print("[Init] New installation detected - creating database tables...")
            db.create_all()

        username = app.config.get('ADMIN_USERNAME')
        password = app.config.get('ADMIN_PASSWORD')
        if username and password and User.query.filter_by(username=username).first() is None:
            print(f"[Init] Creating admin user '{username}'...")
            admin = User(username=username, role='admin')
            admin.set_password(password)
            db.session.add(admin)
            db.session.commit()

    except Exception as e:
        db.session.rollback()
        print(f"[Init] Auto-initialization skipped: {str(e)}")


@login_manager.user_loader
def load_user(user_id):
    """Load user by ID for Flask-Login"""
    from podsee.models.user import User
    return db.session.get(User, int(user_id))
