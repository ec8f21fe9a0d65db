from datetime import datetime
from ..extensions import db
from ..models import new_id

FILE_TYPES = ("pdf", "mp4", "img")


class FileRecord(db.Model):
    __tablename__ = "files"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    file_url = db.Column(db.String(1024), nullable=False)
    display_name = db.Column(db.String(255), nullable=False)
    file_type = db.Column(db.String(10), nullable=False, default="pdf")
    folder_id = db.Column(db.String(64), nullable=True, index=True)  # team folder, e.g. "team-3"
    subfolder_id = db.Column(db.String(36), nullable=True, index=True)
    uploaded_at = db.Column(db.DateTime, default=datetime.utcnow)
    is_drive_link = db.Column(db.Boolean, nullable=False, default=False)
    drive_file_id = db.Column(db.String(255), nullable=True)
    original_drive_url = db.Column(db.String(1024), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "file_url": self.file_url,
            "display_name": self.display_name,
            "file_type": self.file_type,
            "folder_id": self.folder_id,
            "subfolder_id": self.subfolder_id,
            "uploaded_at": self.uploaded_at,
            "is_drive_link": bool(self.is_drive_link),
            "drive_file_id": self.drive_file_id,
            "original_drive_url": self.original_drive_url,
        }


class Subfolder(db.Model):
    __tablename__ = "subfolders"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    parent_folder_id = db.Column(db.String(64), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "parent_folder_id": self.parent_folder_id,
            "created_at": self.created_at,
        }
