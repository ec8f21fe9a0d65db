import random
import string
import time

from flask import session, current_app
from flask_login import login_user, logout_user

from ..extensions import db, login_manager
from ..models import SessionIdentity, ROLES

_BASE36 = string.digits + string.ascii_lowercase


def _base36(n):
    out = ""
    while True:
        n, r = divmod(n, 36)
        out = _BASE36[r] + out
        if not n:
            return out


def generate_session_id(now=None):
    """Opaque per-login token: 9 random base36 chars + base36 epoch-ms. Not a secret."""
    ms = int((now if now is not None else time.time()) * 1000)
    return "".join(random.choices(_BASE36, k=9)) + _base36(ms)


@login_manager.user_loader
def load_identity(session_id):
    identity = SessionIdentity.query.filter_by(session_id=session_id).first()
    if identity is None:
        # stale token from an earlier database; forget it
        current_app.logger.info(f"Discarding unknown session token {session_id}")
        session.pop("_user_id", None)
    return identity


def login_identity(role, name=None):
    """Insert a user_roles row and bind it to this browser session."""
    if role not in ROLES:
        raise ValueError(f"Unknown role {role}")
    identity = SessionIdentity(
        session_id=generate_session_id(),
        role=role,
        name=(name or "").strip() or None,
    )
    db.session.add(identity)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    login_user(identity, remember=False)
    return identity


def logout_identity():
    # the user_roles row is left in place
    logout_user()
    session.pop("nav", None)
