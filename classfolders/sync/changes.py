import json
import time

import redis
from flask import current_app, has_app_context
from sqlalchemy import event
from sqlalchemy.orm import Session

WATCHED_TABLES = ("files", "subfolders", "team_members")
CHANNEL = "changes:public"


class ChangeFeed:
    """Row-level change events for the watched tables.

    With Redis the events travel over pub/sub so every worker process hears
    every commit (its own included). Without Redis they are dispatched in
    the publishing process.
    """

    def __init__(self, app):
        self.app = app
        self.redis = getattr(app, "redis", None)
        self._subscribers = []

    def subscribe(self, callback):
        self._subscribers.append(callback)
        return callback

    def unsubscribe(self, callback):
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def publish(self, table, kind):
        payload = {"table": table, "event": kind, "ts": time.time()}
        if self.redis is None:
            self.dispatch(payload)
            return
        try:
            self.redis.publish(CHANNEL, json.dumps(payload))
        except redis.RedisError as e:
            self.app.logger.warning(f"change publish failed for {table}: {e}")

    def dispatch(self, payload):
        for callback in list(self._subscribers):
            try:
                callback(payload)
            except Exception as e:
                self.app.logger.warning(f"change subscriber {callback!r} failed: {e}")

    def listen(self):
        """Blocking pub/sub loop, run on the listen_changes worker thread."""
        while True:
            try:
                pubsub = self.redis.pubsub(ignore_subscribe_messages=True)
                pubsub.subscribe(CHANNEL)
                for message in pubsub.listen():
                    try:
                        payload = json.loads(message["data"])
                    except (TypeError, ValueError):
                        continue
                    if payload.get("table") in WATCHED_TABLES:
                        self.dispatch(payload)
            except redis.RedisError as e:
                self.app.logger.warning(f"change listener error: {e}")
                time.sleep(1)


@event.listens_for(Session, "after_flush")
def collect_changes(session, flush_context):
    # new/dirty/deleted still hold the pre-flush state here
    pending = session.info.setdefault("changed_tables", [])
    for kind, objs in (("insert", session.new), ("update", session.dirty), ("delete", session.deleted)):
        for obj in objs:
            table = getattr(obj, "__tablename__", None)
            if table in WATCHED_TABLES:
                pending.append((table, kind))


@event.listens_for(Session, "after_commit")
def publish_changes(session):
    changes = session.info.pop("changed_tables", None)
    if not changes or not has_app_context():
        return
    feed = getattr(current_app, "changes", None)
    if feed is None:
        return
    for table, kind in dict.fromkeys(changes):
        feed.publish(table, kind)


@event.listens_for(Session, "after_rollback")
def discard_changes(session):
    session.info.pop("changed_tables", None)
