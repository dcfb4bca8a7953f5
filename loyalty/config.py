"""
Configuration management for the partner loyalty platform.
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _csv_env(name: str, default: str) -> list:
    return [item.strip() for item in os.getenv(name, default).split(',') if item.strip()]


class BaseConfig:
    """Base configuration."""
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Auth
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY') or SECRET_KEY
    JWT_ALGORITHM = 'HS256'
    JWT_ACCESS_EXPIRY_HOURS = int(os.getenv('JWT_ACCESS_EXPIRY_HOURS', '12'))
    JWT_REFRESH_EXPIRY_DAYS = int(os.getenv('JWT_REFRESH_EXPIRY_DAYS', '30'))
    INVITE_TOKEN_TTL_DAYS = int(os.getenv('INVITE_TOKEN_TTL_DAYS', '7'))
    RESET_TOKEN_TTL_MINUTES = int(os.getenv('RESET_TOKEN_TTL_MINUTES', '60'))

    # Cache (see utils/cache.py)
    REDIS_URL = os.getenv('REDIS_URL')

    CORS_ORIGINS = _csv_env('CORS_ORIGINS', 'http://localhost:5173,http://localhost:5000')

    # Brevo transactional email
    BREVO_API_KEY = os.getenv('BREVO_API_KEY', '')
    FROM_EMAIL = os.getenv('FROM_EMAIL', 'noreply@loyaltyprogram.com')
    FROM_NAME = os.getenv('FROM_NAME', 'Loyalty Program Platform')
    APP_URL = os.getenv('APP_URL', 'http://localhost:5000')

    # EMBlue
    EMBLUE_USERNAME = os.getenv('EMBLUE_USERNAME', '')
    EMBLUE_PASSWORD = os.getenv('EMBLUE_PASSWORD', '')
    EMBLUE_FROM_EMAIL = os.getenv('EMBLUE_FROM_EMAIL', '')
    BASE_URL = os.getenv('BASE_URL', 'https://loyalty-platform.replit.app')

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


class DevelopmentConfig(BaseConfig):
    """Development configuration."""
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv(
        'DATABASE_URL',
        'sqlite:///loyalty_dev.db'
    )


class ProductionConfig(BaseConfig):
    """Production configuration."""
    DEBUG = False

    _db_url = os.getenv('DATABASE_URL', '')
    if _db_url.startswith('postgres://'):
        # SQLAlchemy requires postgresql:// not postgres://
        _db_url = _db_url.replace('postgres://', 'postgresql://', 1)

    SQLALCHEMY_DATABASE_URI = _db_url

    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 5,
        'pool_recycle': 300,
        'pool_pre_ping': True,
    }

    _secret_key = os.getenv('SECRET_KEY', '')

    @classmethod
    def validate_secret_key(cls) -> str:
        """
        Validate SECRET_KEY in production environment.

        Raises:
            RuntimeError: If SECRET_KEY is missing, too short, or looks like a placeholder
        """
        if not cls._secret_key:
            raise RuntimeError(
                "CRITICAL: SECRET_KEY environment variable is not set!\n"
                "Generate one with: python -c \"import secrets; print(secrets.token_hex(32))\""
            )

        insecure_patterns = ['dev', 'change', 'default', 'test', 'secret', 'password']
        lower_key = cls._secret_key.lower()
        for pattern in insecure_patterns:
            if pattern in lower_key:
                raise RuntimeError(
                    f"CRITICAL: SECRET_KEY contains '{pattern}' which suggests it's not secure!"
                )

        if len(cls._secret_key) < 32:
            raise RuntimeError("CRITICAL: SECRET_KEY is too short (minimum 32 characters required)!")

        return cls._secret_key

    SECRET_KEY = _secret_key
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY') or _secret_key


class TestingConfig(BaseConfig):
    """Testing configuration."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SECRET_KEY = 'testing-secret-key-with-enough-length-0123456789'
    JWT_SECRET_KEY = SECRET_KEY
    REDIS_URL = None
    BREVO_API_KEY = ''
    EMBLUE_USERNAME = ''
    EMBLUE_PASSWORD = ''
    APP_URL = 'http://testserver'


config_map = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig
}


def get_config(config_name: str = 'development'):
    """Get configuration class by name."""
    return config_map.get(config_name, DevelopmentConfig)


def validate_config(config_name: str = 'development') -> None:
    """
    Validate configuration before app startup.

    Raises:
        RuntimeError: If validation fails in production
    """
    if config_name == 'production':
        ProductionConfig.validate_secret_key()
