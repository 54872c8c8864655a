# Configuration settings
import os
from datetime import timedelta
from dotenv import load_dotenv

# This line loads the variables from your .env file
load_dotenv()

# Detect if running on Vercel (serverless environment)
IS_VERCEL = os.environ.get('VERCEL', '0') == '1'

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))


def _default_database_url():
    # Use /tmp on Vercel (only writable directory in serverless)
    if IS_VERCEL:
        return 'sqlite:////tmp/studyflow.db'
    return 'sqlite:///' + os.path.join(os.getcwd(), 'studyflow.db')


# This class holds all the configuration variables for your app
class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-change-me')
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY', SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=int(os.environ.get('JWT_EXPIRES_DAYS', 7)))

    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', _default_database_url())
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Vault cipher key derivation
    VAULT_PASSPHRASE = os.environ.get('VAULT_PASSPHRASE', SECRET_KEY)
    VAULT_KDF_ITERATIONS = int(os.environ.get('VAULT_KDF_ITERATIONS', 200_000))

    BCRYPT_ROUNDS = int(os.environ.get('BCRYPT_ROUNDS', 12))
    NOTE_TTL_DAYS = int(os.environ.get('NOTE_TTL_DAYS', 5))

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG').upper()
    FRONTEND_BUILD_DIR = os.environ.get(
        'FRONTEND_BUILD_DIR', os.path.join(PROJECT_ROOT, 'client', 'dist')
    )
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key-with-enough-length-for-hs256'
    JWT_SECRET_KEY = SECRET_KEY
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    VAULT_PASSPHRASE = 'test-vault-passphrase'
    VAULT_KDF_ITERATIONS = 1_000
    BCRYPT_ROUNDS = 4
    LOG_LEVEL = 'WARNING'
    FRONTEND_BUILD_DIR = os.path.join(PROJECT_ROOT, 'does-not-exist')
