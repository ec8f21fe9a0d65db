from .backend import Bucket, RemoteBackend, BackendError
from .changes import ChangeFeed
from .store import DataStore


def init_sync(app):
    """Attach the bucket, the data store and the change feed to the app."""
    bucket = Bucket(app.config["STORAGE_DIR"], app.config.get("STORAGE_PUBLIC_URL", "/storage"))
    app.store = DataStore(
        app,
        RemoteBackend(bucket),
        debounce_seconds=app.config.get("SYNC_DEBOUNCE_SECONDS", 0.25),
    )
    app.changes = ChangeFeed(app)
    if app.config.get("SYNC_LIVE_RELOAD", True):
        app.changes.subscribe(app.store.handle_change)
        app.logger.info("✅ Live reload subscribed to change feed.")
    return app.store
