from functools import wraps
from flask import redirect, url_for, flash, request, current_app
from flask_login import current_user

def host_required(f):
    @wraps(f)
    def wrapped(*args, **kwargs):
        if not current_user.is_authenticated:
            flash("Please log in.", "danger")
            return redirect(url_for("auth.login"))

        if not current_user.is_host:
            flash("Access denied: host role required.", "danger")
            current_app.logger.warning(
                f"⚠️ Student session {current_user.get_id()} tried {request.method} {request.path}"
            )
            return redirect(url_for("browser.index"))
        return f(*args, **kwargs)
    return wrapped
