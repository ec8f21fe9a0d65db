from flask import render_template, request, redirect, url_for, session, current_app, jsonify, send_from_directory
from flask_login import login_required, current_user
from . import browser_bp
from .tree import NavState, build_team_folders, resolve, files_in, members_of
from ..utils.rbac import host_required


def _nav():
    return NavState.from_dict(session.get("nav"))


def _set_nav(nav):
    session["nav"] = nav.to_dict()


@browser_bp.route("/")
@login_required
def index():
    store = current_app.store
    store.ensure_loaded()
    data = store.snapshot()

    folders = build_team_folders(data["subfolders"], current_app.config.get("TEAM_COUNT", 10))
    resolved = resolve(_nav(), folders)

    files, members = [], []
    if resolved.view == "folder":
        files = files_in(data["files"], folder_id=resolved.folder.id)
    elif resolved.view == "subfolder":
        if resolved.subfolder.is_roster:
            members = members_of(data["members"], resolved.folder.id)
        else:
            files = files_in(data["files"], subfolder_id=resolved.subfolder.id)

    return render_template(
        "browser/index.html",
        folders=folders,
        resolved=resolved,
        files=files,
        members=members,
        can_edit=current_user.is_host,
        loading=store.loading and resolved.view == "main",
        has_unsaved_changes=store.has_unsaved_changes,
        version=store.version,
    )


# ---------------- Navigation (session state, not URLs) ----------------
@browser_bp.route("/nav/folder", methods=["POST"])
@login_required
def open_folder():
    _set_nav(_nav().open_folder(request.form.get("folder_id")))
    return redirect(url_for("browser.index"))


@browser_bp.route("/nav/subfolder", methods=["POST"])
@login_required
def open_subfolder():
    nav = _nav()
    if request.form.get("folder_id"):
        nav = nav.open_folder(request.form["folder_id"])
    _set_nav(nav.open_subfolder(request.form.get("subfolder_id")))
    return redirect(url_for("browser.index"))


@browser_bp.route("/nav/back", methods=["POST"])
@login_required
def back():
    _set_nav(_nav().back())
    return redirect(url_for("browser.index"))


@browser_bp.route("/nav/home", methods=["POST"])
@login_required
def home():
    _set_nav(NavState())
    return redirect(url_for("browser.index"))


# ---------------- Save / sync ----------------
@browser_bp.route("/save", methods=["POST"])
@login_required
@host_required
def save():
    current_app.store.save_changes()
    return redirect(url_for("browser.index"))


@browser_bp.route("/sync/state")
@login_required
def sync_state():
    store = current_app.store
    return jsonify({
        "version": store.version,
        "loading": store.loading,
        "has_unsaved_changes": store.has_unsaved_changes,
    })


@browser_bp.route("/sync/reload", methods=["POST"])
@login_required
def reload():
    current_app.store.load_all()
    return redirect(url_for("browser.index"))


# ---------------- Bucket objects ----------------
@browser_bp.route("/storage/<path:key>")
def storage_object(key):
    root = current_app.store.backend.bucket.root
    if request.args.get("download"):
        return send_from_directory(root, key, as_attachment=True)
    return send_from_directory(root, key, as_attachment=False)
