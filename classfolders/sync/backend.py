import os
import shutil

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import safe_join

from ..extensions import db
from ..files.models import FileRecord, Subfolder
from ..teams.models import TeamMember


class BackendError(Exception):
    """A read or write against the database or the bucket failed."""


class Bucket:
    """Object storage on local disk. Keys look like ``uploads/<name>``."""

    def __init__(self, root, public_base="/storage"):
        self.root = os.path.abspath(root)
        self.public_base = public_base.rstrip("/")

    def path_for(self, key):
        path = safe_join(self.root, key)
        if path is None:
            raise BackendError(f"Invalid storage key: {key}")
        return path

    def upload(self, key, stream):
        path = self.path_for(key)
        if os.path.exists(path):
            raise BackendError(f"Object already exists: {key}")
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, "wb") as out:
                shutil.copyfileobj(stream, out)
        except OSError as e:
            raise BackendError(f"Upload of {key} failed: {e}") from e
        return key

    def public_url(self, key):
        return f"{self.public_base}/{key}"

    def remove(self, keys):
        for key in keys:
            path = self.path_for(key)
            try:
                os.remove(path)
            except OSError as e:
                raise BackendError(f"Removal of {key} failed: {e}") from e


class RemoteBackend:
    """Row CRUD over the watched tables plus the storage bucket.

    Must be called inside an app context. Rows go in and come out as plain
    dicts so nothing outside this class holds ORM instances.
    """

    TABLES = {
        "files": (FileRecord, FileRecord.uploaded_at),
        "subfolders": (Subfolder, Subfolder.created_at),
        "team_members": (TeamMember, TeamMember.created_at),
    }

    def __init__(self, bucket):
        self.bucket = bucket

    def _model(self, table):
        try:
            return self.TABLES[table]
        except KeyError:
            raise BackendError(f"Unknown table {table}")

    def _commit(self):
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise BackendError(str(e)) from e

    def select_all(self, table):
        model, order_col = self._model(table)
        try:
            rows = model.query.order_by(order_col.desc()).all()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise BackendError(str(e)) from e
        return [r.to_dict() for r in rows]

    def insert(self, table, values):
        model, _ = self._model(table)
        row = model(**values)
        db.session.add(row)
        self._commit()
        return row.to_dict()

    def update(self, table, row_id, values):
        model, _ = self._model(table)
        try:
            row = db.session.get(model, row_id)
        except SQLAlchemyError as e:
            db.session.rollback()
            raise BackendError(str(e)) from e
        if row is None:
            raise BackendError(f"{table} row {row_id} not found")
        for key, value in values.items():
            setattr(row, key, value)
        self._commit()
        return row.to_dict()

    def delete(self, table, row_id):
        model, _ = self._model(table)
        try:
            row = db.session.get(model, row_id)
        except SQLAlchemyError as e:
            db.session.rollback()
            raise BackendError(str(e)) from e
        if row is not None:
            db.session.delete(row)
            self._commit()
        current_app.logger.debug(f"Deleted {table} row {row_id}")
