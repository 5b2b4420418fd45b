"""
Configuration management

Values come from the environment; a local .env file is loaded first.
"""
import os
import tempfile
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Base configuration"""

    # Flask
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-me')

    # File uploads
    MAX_UPLOAD_SIZE = int(os.environ.get('MAX_UPLOAD_SIZE', 10 * 1024 * 1024))  # 10MB
    # Request body cap, leaves room for the multipart envelope around the file
    MAX_CONTENT_LENGTH = MAX_UPLOAD_SIZE + 64 * 1024
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(tempfile.gettempdir(), 'lexscan_uploads')

    # CORS
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')

    # OpenAI
    OPENAI_API_KEY = os.environ.get('OPENAI_API_KEY', '')
    OPENAI_MODEL = os.environ.get('OPENAI_MODEL', 'gpt-4.1')
    OPENAI_TIMEOUT = float(os.environ.get('OPENAI_TIMEOUT', '60'))
    OPENAI_TEMPERATURE = float(os.environ.get('OPENAI_TEMPERATURE', '0.2'))

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # App Version
    APP_VERSION = os.environ.get('APP_VERSION', '2026.10')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False


class TestingConfig(Config):
    """Testing configuration"""
    DEBUG = True
    TESTING = True
    OPENAI_API_KEY = 'test-key'
    UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), 'lexscan_test_uploads')


# Config dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(env: Optional[str] = None):
    """Get configuration class for environment"""
    env = env or os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])
