"""
Configuration settings for Podsee
"""
import os
from dotenv import load_dotenv

load_dotenv()

basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))


class Config:
    """Base configuration"""
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    SQLALCHEMY_DATABASE_URI = os.getenv(
        'DATABASE_URL',
        'sqlite:///' + os.path.join(basedir, 'instance', 'podsee.db')
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Read-only centre reference data
    CENTRES_DATA_PATH = os.getenv('CENTRES_DATA_PATH', os.path.join(basedir, 'data', 'centres.json'))

    # Click tracking: server redirect endpoint and client-side tracking are configured separately
    CLICK_LOG_WEBHOOK_URL = os.getenv('CLICK_LOG_WEBHOOK_URL')
    PUBLIC_CLICK_LOG_WEBHOOK_URL = os.getenv('PUBLIC_CLICK_LOG_WEBHOOK_URL')
    CLICK_LOG_TIMEOUT = float(os.getenv('CLICK_LOG_TIMEOUT', 5))

    # Comments
    COMMENTS_PAGE_SIZE = int(os.getenv('COMMENTS_PAGE_SIZE', 20))

    # Moderation account created on first run
    ADMIN_USERNAME = os.getenv('ADMIN_USERNAME', 'admin')
    ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    FLASK_ENV = 'development'


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    FLASK_ENV = 'production'
    SESSION_COOKIE_SECURE = True


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    CLICK_LOG_WEBHOOK_URL = None
    PUBLIC_CLICK_LOG_WEBHOOK_URL = None
    ADMIN_PASSWORD = None


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
