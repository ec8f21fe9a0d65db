from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_session import Session
import redis
import threading

from sqlalchemy import event
from sqlalchemy.engine import Engine

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()
session = Session()

def init_redis(app):
    mode = app.config.get("REDIS_MODE", "local")
    url  = app.config.get("REDIS_URL")
    if mode == "none" or not url:
        app.redis = None
        return None
    try:
        app.redis = redis.from_url(url)
    except Exception as e:
        app.logger.warning(f"Redis init failed: {e}")
        app.redis = None
    return app.redis


# Apply SQLite pragmas on each new connection to reduce locking
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    from sqlite3 import Connection as SQLite3Connection
    if isinstance(dbapi_connection, SQLite3Connection):
        cursor = dbapi_connection.cursor()
        # WAL allows concurrent readers; busy_timeout makes writes wait instead of failing fast
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA busy_timeout=5000;")  # ms
        cursor.close()


def start_background_workers(app):
    """Start the change-feed listener thread within the app context."""
    feed = getattr(app, "changes", None)
    if feed is None or not app.redis:
        return

    # Check if threads are already running to avoid duplicates during hot-reloads
    if not any(t.name == "listen_changes" for t in threading.enumerate()):
        t = threading.Thread(target=feed.listen, name="listen_changes", daemon=True)
        t.start()
        app.logger.info("✅ Started listen_changes background worker.")
