from flask import render_template, redirect, url_for, flash, request, current_app
from flask_login import current_user
from . import auth_bp
from .identity import login_identity, logout_identity


@auth_bp.route("/login")
def login():
    if current_user.is_authenticated:
        return redirect(url_for("browser.index"))
    return render_template("auth/login.html", show_host=request.args.get("host") == "1")


@auth_bp.route("/student", methods=["POST"])
def student_login():
    try:
        login_identity("student")
    except Exception as e:
        current_app.logger.warning(f"⚠️ Student login error: {e}")
        flash("Failed to enter as student. Please try again.", "danger")
        return redirect(url_for("auth.login"))
    return redirect(url_for("browser.index"))


@auth_bp.route("/host", methods=["POST"])
def host_login():
    name = request.form.get("name", "").strip()
    password = request.form.get("password", "")

    if not name:
        flash("Please enter your name", "danger")
        return redirect(url_for("auth.login", host=1))
    if password != current_app.config["HOST_PASSWORD"]:
        flash("Incorrect password", "danger")
        return redirect(url_for("auth.login", host=1))

    try:
        login_identity("host", name)
    except Exception as e:
        current_app.logger.warning(f"⚠️ Host login error: {e}")
        flash("Failed to log in as host. Please try again.", "danger")
        return redirect(url_for("auth.login", host=1))
    return redirect(url_for("browser.index"))


@auth_bp.route("/logout")
def logout():
    logout_identity()
    flash("Logged out", "info")
    return redirect(url_for("auth.login"))
