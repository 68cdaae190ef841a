import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_SECRET = "dev"


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", DEFAULT_SECRET)
    JWT_SECRET = os.environ.get("JWT_SECRET", os.environ.get("SECRET_KEY", DEFAULT_SECRET))
    JWT_EXPIRES_DAYS = 7
    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", 10))
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///progress.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SUPABASE_URL = os.environ.get("SUPABASE_URL")
    SUPABASE_KEY = os.environ.get("SUPABASE_KEY")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    JWT_SECRET = "test-jwt-secret-padded-to-32-bytes"
    # bcrypt's minimum cost keeps the suite fast
    BCRYPT_ROUNDS = 4
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SUPABASE_URL = None
    SUPABASE_KEY = None
