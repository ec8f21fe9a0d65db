from flask import request, redirect, url_for, flash, current_app
from flask_login import login_required
from . import teams_bp
from ..utils.rbac import host_required


@teams_bp.route("/<team_id>/members", methods=["POST"])
@login_required
@host_required
def add_member(team_id):
    name = request.form.get("name", "").strip()
    if team_id not in current_app.config.get("TEAM_IDS", ()):
        flash("Unknown team", "danger")
    elif not name:
        flash("Please enter a name", "danger")
    else:
        current_app.store.add_team_member(name, team_id)
    return redirect(url_for("browser.index"))


@teams_bp.route("/members/<member_id>/rename", methods=["POST"])
@login_required
@host_required
def rename_member(member_id):
    new_name = request.form.get("name", "").strip()
    if new_name:
        current_app.store.update_team_member(member_id, new_name)
    else:
        flash("Name cannot be empty", "danger")
    return redirect(url_for("browser.index"))


@teams_bp.route("/members/<member_id>/delete", methods=["POST"])
@login_required
@host_required
def remove_member(member_id):
    current_app.store.delete_team_member(member_id)
    return redirect(url_for("browser.index"))
