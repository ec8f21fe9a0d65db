import uuid
from datetime import datetime

from flask_login import UserMixin, AnonymousUserMixin

from .extensions import db

ROLES = ("student", "host")


def new_id():
    return str(uuid.uuid4())


class SessionIdentity(UserMixin, db.Model):
    """One row per login; the session token is what Flask-Login stores."""
    __tablename__ = "user_roles"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    session_id = db.Column(db.String(64), unique=True, nullable=False, index=True)
    role = db.Column(db.String(20), nullable=False, default="student")
    name = db.Column(db.String(100), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def get_id(self):
        return self.session_id

    @property
    def is_host(self):
        return self.role == "host"

    @property
    def display_name(self):
        return self.name or ("Host" if self.is_host else "Student")


class Anonymous(AnonymousUserMixin):
    role = None
    name = None
    is_host = False
