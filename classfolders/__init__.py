import redis
from flask import Flask, render_template
from datetime import datetime
from zoneinfo import ZoneInfo
from werkzeug.utils import import_string

from .extensions import db, login_manager, migrate, session, init_redis, start_background_workers
from .models import Anonymous

# Blueprints
from .auth import auth_bp
from .browser import browser_bp
from .files import files_bp
from .teams import teams_bp
from .notifications import notifications_bp

from .browser.tree import team_ids
from .sync import init_sync


def create_app(config_class="config.DevConfig"):
    app = Flask(__name__)
    if isinstance(config_class, str):
        config_class = import_string(config_class)
    app.config.from_object(config_class)
    app.config["TEAM_IDS"] = tuple(team_ids(app.config.get("TEAM_COUNT", 10)))

    db.init_app(app)

    # Decide the session backend from the Redis mode
    redis_url = app.config.get("REDIS_URL")
    if app.config.get("REDIS_MODE", "local") == "none" or not redis_url:
        app.config["SESSION_TYPE"] = "filesystem"
        app.logger.info("🔧 Session backend configured to: filesystem.")
    else:
        app.config["SESSION_TYPE"] = "redis"
        app.config["SESSION_REDIS"] = redis.from_url(redis_url)
        # Hide password in log for security
        safe_url = redis_url.split('@')[-1]
        app.logger.info(f"✅ Session backend configured to use Redis at: {safe_url}")

    migrate.init_app(app, db)
    login_manager.init_app(app)
    login_manager.login_view = "auth.login"
    login_manager.login_message = "Please choose how to enter."
    login_manager.anonymous_user = Anonymous
    if app.config.get("SERVER_SESSIONS", True):
        session.init_app(app)
    init_redis(app)

    def tz(value, fmt="%Y-%m-%d %H:%M %Z"):
        """Render a stored (naive UTC) datetime in the configured TIMEZONE."""
        if value is None:
            return ""
        if isinstance(value, str):
            try:
                value = datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                return value
        if value.tzinfo is None:
            value = value.replace(tzinfo=ZoneInfo("UTC"))
        try:
            return value.astimezone(ZoneInfo(app.config.get("TIMEZONE", "UTC"))).strftime(fmt)
        except Exception:
            return value.strftime("%Y-%m-%d %H:%M")

    app.add_template_filter(tz, name="tz")

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(browser_bp)
    app.register_blueprint(files_bp)
    app.register_blueprint(teams_bp)
    app.register_blueprint(notifications_bp)

    @app.context_processor
    def inject_globals():
        return dict(class_title=app.config.get("CLASS_TITLE", "Class Files"))

    # Custom error pages
    @app.errorhandler(403)
    def err_403(e):
        return render_template("errors/403.html"), 403

    @app.errorhandler(404)
    def err_404(e):
        return render_template("errors/404.html"), 404

    @app.errorhandler(413)
    def err_413(e):
        return render_template("errors/413.html"), 413

    @app.errorhandler(500)
    def err_500(e):
        return render_template("errors/500.html"), 500

    with app.app_context():
        if app.config.get("AUTO_CREATE_TABLES", True):
            db.create_all()
        init_sync(app)

    # Start the change listener if Redis is enabled
    if app.config.get("REDIS_MODE", "local") != "none":
        start_background_workers(app)

    return app
