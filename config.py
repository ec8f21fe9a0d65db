import os

class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "changeme")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///classfolders.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_TYPE = "redis"
    SESSION_PERMANENT = False  # token dies with the browser session
    SERVER_SESSIONS = True
    REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")
    REDIS_MODE = os.environ.get("REDIS_MODE", "local")  # local / remote / none

    # Host role deterrent, compared client-side before any DB call
    HOST_PASSWORD = os.environ.get("HOST_PASSWORD", "changeme-host")

    # Object storage bucket
    STORAGE_DIR = os.environ.get(
        "STORAGE_DIR",
        os.path.join(os.path.dirname(os.path.abspath(__file__)), "uploads", "files"),
    )
    STORAGE_PUBLIC_URL = os.environ.get("STORAGE_PUBLIC_URL", "/storage")
    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_CONTENT_LENGTH", 200 * 1024 * 1024))

    # Folder layout
    TEAM_COUNT = 10
    CLASS_TITLE = os.environ.get("CLASS_TITLE", "Class Files")
    TIMEZONE = os.environ.get("TIMEZONE", "UTC")

    # Change feed -> cache reload
    SYNC_LIVE_RELOAD = True
    SYNC_DEBOUNCE_SECONDS = float(os.environ.get("SYNC_DEBOUNCE_SECONDS", 0.25))
    AUTO_CREATE_TABLES = True

class DevConfig(Config):
    DEBUG = True

class ProdConfig(Config):
    DEBUG = False

class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    REDIS_MODE = "none"
    SERVER_SESSIONS = False
    HOST_PASSWORD = "letmein"
    SYNC_LIVE_RELOAD = False
    SYNC_DEBOUNCE_SECONDS = 0.05
