import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-me'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(BASE_DIR, 'instance', 'repairdesk.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_COOKIE_SECURE = False  # Set to True in production with HTTPS
    REMEMBER_COOKIE_DURATION = timedelta(days=7)
    DEBUG = False
    TESTING = False

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Shop settings
    SHOP_NAME = os.environ.get('SHOP_NAME', 'RepairDesk')
    SHOP_TIMEZONE = os.environ.get('SHOP_TIMEZONE', 'UTC')

    # Created on first start when the admins table is empty
    BOOTSTRAP_DEFAULT_ADMIN = True
    DEFAULT_ADMIN_EMAIL = os.environ.get('DEFAULT_ADMIN_EMAIL', 'admin@example.com')
    DEFAULT_ADMIN_PASSWORD = os.environ.get('DEFAULT_ADMIN_PASSWORD', 'password')

    # Onboarding links (seconds)
    ONBOARDING_TOKEN_MAX_AGE = int(os.environ.get('ONBOARDING_TOKEN_MAX_AGE', 60 * 60 * 24))
    TEMP_PASSWORD_LENGTH = 10

    # Live updates (Server-Sent Events)
    LIVE_RETRY_MS = int(os.environ.get('LIVE_RETRY_MS', 3000))
    LIVE_HEARTBEAT_SECONDS = int(os.environ.get('LIVE_HEARTBEAT_SECONDS', 15))

    # Absolute base for links encoded into QR codes; falls back to the request host
    PUBLIC_BASE_URL = os.environ.get('PUBLIC_BASE_URL')

    INSTANCE_FOLDER = os.path.join(BASE_DIR, 'instance')


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    SESSION_COOKIE_SECURE = True


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    WTF_CSRF_ENABLED = False
    SECRET_KEY = 'test-secret-key'
    SERVER_NAME = 'localhost'
    LIVE_HEARTBEAT_SECONDS = 1
    BOOTSTRAP_DEFAULT_ADMIN = False


config_by_name = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
}


def get_config():
    """Pick the config class from FLASK_ENV (development by default)"""
    env = os.environ.get('FLASK_ENV', 'development').lower()
    return config_by_name.get(env, DevelopmentConfig)


def ensure_directories():
    """Create folders the app writes into"""
    if not os.path.exists(Config.INSTANCE_FOLDER):
        os.makedirs(Config.INSTANCE_FOLDER)


def print_config_summary():
    config = get_config()
    print("=" * 50)
    print(f"Environment:  {os.environ.get('FLASK_ENV', 'development')}")
    print(f"Database:     {config.SQLALCHEMY_DATABASE_URI}")
    print(f"Timezone:     {config.SHOP_TIMEZONE}")
    print(f"Debug:        {config.DEBUG}")
    print("=" * 50)
