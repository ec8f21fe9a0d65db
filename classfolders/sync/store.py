import threading

from ..notifications.utils import toast
from ..utils.drive import drive_preview_url
from ..utils.filetypes import detect_file_type, make_storage_key, storage_key_from_url


class Collection:
    """Ordered id -> row mapping with its own lock.

    Reads hand out copies. The write methods are only called by DataStore,
    one writer per operation.
    """

    def __init__(self, name):
        self.name = name
        self._rows = {}
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._rows)

    def __contains__(self, row_id):
        return row_id in self._rows

    def snapshot(self):
        with self._lock:
            return [dict(r) for r in self._rows.values()]

    def get(self, row_id):
        with self._lock:
            row = self._rows.get(row_id)
            return dict(row) if row is not None else None

    def replace(self, rows):
        fresh = {r["id"]: dict(r) for r in rows}
        with self._lock:
            self._rows = fresh

    def prepend(self, row):
        with self._lock:
            rows = {row["id"]: dict(row)}
            rows.update((k, v) for k, v in self._rows.items() if k != row["id"])
            self._rows = rows

    def append(self, row):
        with self._lock:
            self._rows[row["id"]] = dict(row)

    def patch(self, row_id, **fields):
        with self._lock:
            if row_id in self._rows:
                self._rows[row_id] = {**self._rows[row_id], **fields}

    def discard(self, row_id):
        with self._lock:
            self._rows.pop(row_id, None)


class Debouncer:
    """Collapse a burst of trigger() calls into one callback after `delay`."""

    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self._timer = None
        self._lock = threading.Lock()

    @property
    def pending(self):
        return self._timer is not None

    def trigger(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _fire(self):
        with self._lock:
            self._timer = None
        self.callback()


class DataStore:
    """Cached files / subfolders / team members with write-through CRUD.

    Every mutation writes to the backend first and only patches the cache
    once that write succeeded. Failures are logged, reported once through
    ``notify`` and never raised to the caller.
    """

    def __init__(self, app, backend, notify=toast, debounce_seconds=0.25):
        self.app = app
        self.backend = backend
        self.notify = notify
        self._files = Collection("files")
        self._subfolders = Collection("subfolders")
        self._members = Collection("team_members")
        self._swap_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._loading = False
        self._loaded = False
        self._unsaved = False
        self._version = 0
        self._reloader = Debouncer(debounce_seconds, self._reload_in_context)

    # ---------------- read side ----------------
    @property
    def files(self):
        return self._files.snapshot()

    @property
    def subfolders(self):
        return self._subfolders.snapshot()

    @property
    def members(self):
        return self._members.snapshot()

    @property
    def loading(self):
        return self._loading

    @property
    def loaded(self):
        return self._loaded

    @property
    def has_unsaved_changes(self):
        return self._unsaved

    @property
    def version(self):
        return self._version

    def snapshot(self):
        with self._swap_lock:
            return {
                "files": self._files.snapshot(),
                "subfolders": self._subfolders.snapshot(),
                "members": self._members.snapshot(),
            }

    def get_file(self, file_id):
        return self._files.get(file_id)

    # ---------------- helpers ----------------
    def _changed(self, dirty=True):
        with self._state_lock:
            self._version += 1
            if dirty:
                self._unsaved = True

    def _fail(self, what, message, error):
        self.app.logger.warning(f"⚠️ Error {what}: {error}")
        self.notify(message, title="Error", variant="destructive")

    @staticmethod
    def _clean(name):
        return (name or "").strip()

    # ---------------- loading ----------------
    def load_all(self):
        """Fetch all three collections and swap them in together."""
        self._loading = True
        try:
            files = self.backend.select_all("files")
            members = self.backend.select_all("team_members")
            subfolders = self.backend.select_all("subfolders")
        except Exception as e:
            self._fail("loading data", "Failed to load data from database", e)
            return False
        finally:
            self._loading = False

        with self._swap_lock:
            self._files.replace(files)
            self._members.replace(members)
            self._subfolders.replace(subfolders)
        self._loaded = True
        self._changed(dirty=False)
        return True

    def ensure_loaded(self):
        if not self._loaded:
            self.load_all()
        return self._loaded

    def request_reload(self):
        self._reloader.trigger()

    def handle_change(self, payload):
        self.app.logger.debug(f"change on {payload.get('table')} ({payload.get('event')}), reload queued")
        self.request_reload()

    def cancel_reload(self):
        self._reloader.cancel()

    def _reload_in_context(self):
        with self.app.app_context():
            self.load_all()

    # ---------------- files ----------------
    def upload_file(self, upload, display_name, folder_id=None, subfolder_id=None):
        """Store the blob, insert its row and prepend it. Returns the row or None."""
        display_name = self._clean(display_name) or upload.filename
        try:
            key = make_storage_key(upload.filename)
            self.backend.bucket.upload(key, upload.stream)
            public_url = self.backend.bucket.public_url(key)
            row = self.backend.insert("files", {
                "file_url": public_url,
                "display_name": display_name,
                "file_type": detect_file_type(upload.mimetype, upload.filename),
                "folder_id": folder_id or None,
                "subfolder_id": subfolder_id or None,
            })
        except Exception as e:
            self._fail("uploading file", "Failed to upload file", e)
            return None

        self._files.prepend(row)
        self._changed()
        self.notify(f"{display_name} uploaded successfully")
        return row

    def add_drive_link(self, display_name, original_url, drive_file_id, folder_id=None, subfolder_id=None):
        display_name = self._clean(display_name)
        if not display_name or not drive_file_id:
            return None
        try:
            row = self.backend.insert("files", {
                "file_url": drive_preview_url(drive_file_id),
                "display_name": display_name,
                "file_type": "pdf",
                "folder_id": folder_id or None,
                "subfolder_id": subfolder_id or None,
                "is_drive_link": True,
                "drive_file_id": drive_file_id,
                "original_drive_url": original_url,
            })
        except Exception as e:
            self._fail("adding Google Drive link", "Failed to add Google Drive link", e)
            return None

        self._files.prepend(row)
        self._changed()
        self.notify(f"{display_name} added successfully")
        return row

    def update_file(self, file_id, new_display_name):
        new_display_name = self._clean(new_display_name)
        if not new_display_name:
            return False
        try:
            self.backend.update("files", file_id, {"display_name": new_display_name})
        except Exception as e:
            self._fail("updating file", "Failed to rename file", e)
            return False

        self._files.patch(file_id, display_name=new_display_name)
        self._changed()
        self.notify("File renamed successfully")
        return True

    def delete_file(self, file_id):
        record = self._files.get(file_id)
        if record is None:
            return False

        if not record.get("is_drive_link"):
            try:
                self.backend.bucket.remove([storage_key_from_url(record["file_url"])])
            except Exception as e:
                # orphaned blob is accepted, the row still goes
                self.app.logger.warning(f"Storage deletion error for {file_id}: {e}")

        try:
            self.backend.delete("files", file_id)
        except Exception as e:
            self._fail("deleting file", "Failed to delete file", e)
            return False

        self._files.discard(file_id)
        self._changed()
        self.notify("File deleted successfully")
        return True

    # ---------------- subfolders ----------------
    def add_subfolder(self, name, parent_folder_id):
        name = self._clean(name)
        if not name or not parent_folder_id:
            return None
        try:
            row = self.backend.insert("subfolders", {"name": name, "parent_folder_id": parent_folder_id})
        except Exception as e:
            self._fail("adding subfolder", "Failed to create subfolder", e)
            return None

        self._subfolders.append(row)
        self._changed()
        self.notify(f'Subfolder "{name}" created successfully')
        return row

    def update_subfolder(self, subfolder_id, new_name):
        new_name = self._clean(new_name)
        if not new_name:
            return False
        try:
            self.backend.update("subfolders", subfolder_id, {"name": new_name})
        except Exception as e:
            self._fail("updating subfolder", "Failed to rename subfolder", e)
            return False

        self._subfolders.patch(subfolder_id, name=new_name)
        self._changed()
        self.notify(f'Subfolder renamed to "{new_name}"')
        return True

    def delete_subfolder(self, subfolder_id):
        try:
            self.backend.delete("subfolders", subfolder_id)
        except Exception as e:
            self._fail("deleting subfolder", "Failed to delete subfolder", e)
            return False

        self._subfolders.discard(subfolder_id)
        self._changed()
        self.notify("Subfolder deleted successfully")
        return True

    # ---------------- team members ----------------
    def add_team_member(self, name, team_id):
        name = self._clean(name)
        if not name or not team_id:
            return None
        try:
            row = self.backend.insert("team_members", {"name": name, "team_id": team_id})
        except Exception as e:
            self._fail("adding team member", "Failed to add team member", e)
            return None

        self._members.prepend(row)
        self._changed()
        self.notify("Team member added successfully")
        return row

    def update_team_member(self, member_id, new_name):
        new_name = self._clean(new_name)
        if not new_name:
            return False
        try:
            self.backend.update("team_members", member_id, {"name": new_name})
        except Exception as e:
            self._fail("updating team member", "Failed to update team member", e)
            return False

        self._members.patch(member_id, name=new_name)
        self._changed()
        self.notify("Team member updated successfully")
        return True

    def delete_team_member(self, member_id):
        try:
            self.backend.delete("team_members", member_id)
        except Exception as e:
            self._fail("deleting team member", "Failed to remove team member", e)
            return False

        self._members.discard(member_id)
        self._changed()
        self.notify("Team member removed successfully")
        return True

    # ---------------- save ----------------
    def save_changes(self):
        # Every write above is already committed; this only clears the flag.
        with self._state_lock:
            self._unsaved = False
            self._version += 1
        self.notify("All changes saved successfully")
        return True
