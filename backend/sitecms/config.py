import os
from dotenv import load_dotenv

load_dotenv()

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Object storage
    STORAGE_PROVIDER = os.getenv("STORAGE_PROVIDER", "local")
    STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "site-media")
    STORAGE_LOCAL_PATH = os.getenv("STORAGE_LOCAL_PATH", "uploads")
    # Unset: local files are served under /media, S3 objects from the bucket host.
    STORAGE_PUBLIC_BASE_URL = os.getenv("STORAGE_PUBLIC_BASE_URL")
    STORAGE_S3_REGION = os.getenv("STORAGE_S3_REGION")
    STORAGE_TIMEOUT_SECONDS = float(os.getenv("STORAGE_TIMEOUT_SECONDS", "30"))

    # Image pipeline
    IMAGE_MAX_SIZE_KB = int(os.getenv("IMAGE_MAX_SIZE_KB", "500"))
    IMAGE_MAX_WIDTH = int(os.getenv("IMAGE_MAX_WIDTH", "1920"))
    IMAGE_MAX_HEIGHT = int(os.getenv("IMAGE_MAX_HEIGHT", "1080"))

    # Business rules
    HOMEPAGE_FEATURE_CAP = int(os.getenv("HOMEPAGE_FEATURE_CAP", "3"))

    # Session recovery
    MEMBERSHIP_FETCH_ATTEMPTS = int(os.getenv("MEMBERSHIP_FETCH_ATTEMPTS", "3"))
    MEMBERSHIP_FETCH_BACKOFF_SECONDS = float(os.getenv("MEMBERSHIP_FETCH_BACKOFF_SECONDS", "0.2"))

class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///sitecms-dev.db")

class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_SECRET_KEY = "testing-secret-key-with-enough-length"
    MEMBERSHIP_FETCH_BACKOFF_SECONDS = 0
    LOG_LEVEL = "DEBUG"

class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")

config_by_name = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig
}
