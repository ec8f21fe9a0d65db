from flask import request, redirect, url_for, flash, current_app, render_template, abort
from flask_login import login_required
from . import files_bp
from ..utils.rbac import host_required
from ..utils.drive import extract_drive_file_id
from ..utils.filetypes import preview_element


def _back():
    return redirect(url_for("browser.index"))


def _target():
    """(folder_id, subfolder_id) the form was posted from."""
    return request.form.get("folder_id") or None, request.form.get("subfolder_id") or None


# ---------------- Preview ----------------
@files_bp.route("/<file_id>/preview")
@login_required
def preview(file_id):
    store = current_app.store
    store.ensure_loaded()
    record = store.get_file(file_id)
    if record is None:
        abort(404)

    if record.get("is_drive_link"):
        download_url = record.get("original_drive_url") or record["file_url"]
    else:
        download_url = f"{record['file_url']}?download=1"
    return render_template(
        "browser/preview.html",
        file=record,
        element=preview_element(record),
        download_url=download_url,
    )


# ---------------- Upload ----------------
@files_bp.route("/upload", methods=["POST"])
@login_required
@host_required
def upload():
    folder_id, subfolder_id = _target()
    uploads = [f for f in request.files.getlist("files") if f and f.filename]
    if not uploads:
        flash("Please choose at least one file", "danger")
        return _back()

    names = request.form.getlist("display_names")
    for i, upload in enumerate(uploads):
        display_name = names[i] if i < len(names) else ""
        current_app.store.upload_file(upload, display_name or upload.filename, folder_id, subfolder_id)
    return _back()


@files_bp.route("/drive-link", methods=["POST"])
@login_required
@host_required
def add_drive_link():
    folder_id, subfolder_id = _target()
    name = request.form.get("display_name", "").strip()
    drive_url = request.form.get("drive_url", "").strip()

    if not name:
        flash("Please enter a file name", "danger")
        return _back()
    if not drive_url:
        flash("Please enter a Google Drive URL", "danger")
        return _back()
    drive_id = extract_drive_file_id(drive_url)
    if not drive_id:
        flash("Invalid Google Drive URL. Please use a sharing link from Google Drive.", "danger")
        return _back()

    current_app.store.add_drive_link(name, drive_url, drive_id, folder_id, subfolder_id)
    return _back()


@files_bp.route("/<file_id>/rename", methods=["POST"])
@login_required
@host_required
def rename(file_id):
    new_name = request.form.get("name", "").strip()
    if new_name:
        current_app.store.update_file(file_id, new_name)
    else:
        flash("Name cannot be empty", "danger")
    return _back()


@files_bp.route("/<file_id>/delete", methods=["POST"])
@login_required
@host_required
def delete(file_id):
    current_app.store.delete_file(file_id)
    return _back()


# ---------------- Subfolders ----------------
@files_bp.route("/subfolders", methods=["POST"])
@login_required
@host_required
def add_subfolder():
    name = request.form.get("name", "").strip()
    parent = request.form.get("parent_folder_id", "")
    if parent not in current_app.config.get("TEAM_IDS", ()):
        flash("Unknown team folder", "danger")
    elif not name:
        flash("Name cannot be empty", "danger")
    else:
        current_app.store.add_subfolder(name, parent)
    return _back()


@files_bp.route("/subfolders/<subfolder_id>/rename", methods=["POST"])
@login_required
@host_required
def rename_subfolder(subfolder_id):
    new_name = request.form.get("name", "").strip()
    if new_name:
        current_app.store.update_subfolder(subfolder_id, new_name)
    else:
        flash("Name cannot be empty", "danger")
    return _back()


@files_bp.route("/subfolders/<subfolder_id>/delete", methods=["POST"])
@login_required
@host_required
def delete_subfolder(subfolder_id):
    current_app.store.delete_subfolder(subfolder_id)
    return _back()
