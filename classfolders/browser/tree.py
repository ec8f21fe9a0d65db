"""Folder tree and navigation, derived from cached rows without any I/O."""
from dataclasses import dataclass, field
from typing import Optional, Union

ROOT_LABEL = "My Files"
ROSTER_NAME = "Team Members"
VIEWS = ("main", "folder", "subfolder")


@dataclass(frozen=True)
class RealSubfolder:
    id: str
    name: str
    parent_folder_id: str
    created_at: object = None
    is_roster = False

    @classmethod
    def from_row(cls, row):
        return cls(row["id"], row["name"], row["parent_folder_id"], row.get("created_at"))


@dataclass(frozen=True)
class RosterPseudoSubfolder:
    """The per-team member roster, listed like a subfolder but backed by no row."""
    team_id: str
    is_roster = True

    @property
    def id(self):
        return f"{self.team_id}-members"

    @property
    def name(self):
        return ROSTER_NAME


SubfolderEntry = Union[RealSubfolder, RosterPseudoSubfolder]


@dataclass
class TeamFolder:
    id: str
    name: str
    subfolders: list = field(default_factory=list)

    def find(self, subfolder_id) -> Optional[SubfolderEntry]:
        return next((sf for sf in self.subfolders if sf.id == subfolder_id), None)


def team_ids(count=10):
    return [f"team-{i}" for i in range(count)]


def build_team_folders(subfolders, count=10):
    """One TeamFolder per fixed team: roster first, then its subfolders in cache order."""
    folders = []
    for i, tid in enumerate(team_ids(count)):
        entries = [RosterPseudoSubfolder(tid)]
        entries.extend(RealSubfolder.from_row(sf) for sf in subfolders if sf["parent_folder_id"] == tid)
        folders.append(TeamFolder(id=tid, name=f"Team {i}", subfolders=entries))
    return folders


@dataclass
class NavState:
    view: str = "main"
    folder_id: Optional[str] = None
    subfolder_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        data = data or {}
        view = data.get("view", "main")
        if view not in VIEWS:
            view = "main"
        return cls(view, data.get("folder_id"), data.get("subfolder_id"))

    def to_dict(self):
        return {"view": self.view, "folder_id": self.folder_id, "subfolder_id": self.subfolder_id}

    def open_folder(self, folder_id):
        return NavState("folder", folder_id, None)

    def open_subfolder(self, subfolder_id):
        return NavState("subfolder", self.folder_id, subfolder_id)

    def back(self):
        if self.view == "subfolder":
            return NavState("folder", self.folder_id, None)
        return NavState()


@dataclass
class ResolvedView:
    view: str
    folder: Optional[TeamFolder]
    subfolder: Optional[SubfolderEntry]
    breadcrumbs: list


def resolve(nav, folders):
    """Pick the folder/subfolder to render and the breadcrumb trail.

    A stale selection (e.g. a subfolder deleted elsewhere) falls back to
    the nearest level that still exists.
    """
    folder = next((f for f in folders if f.id == nav.folder_id), None)
    subfolder = folder.find(nav.subfolder_id) if folder and nav.view == "subfolder" else None

    view = nav.view
    if view == "subfolder" and subfolder is None:
        view = "folder"
    if view == "folder" and folder is None:
        view = "main"

    crumbs = [ROOT_LABEL]
    if view in ("folder", "subfolder"):
        crumbs.append(folder.name)
    if view == "subfolder":
        crumbs.append(subfolder.name)
    return ResolvedView(view, folder if view != "main" else None, subfolder, crumbs)


def files_in(files, folder_id=None, subfolder_id=None):
    if subfolder_id:
        return [f for f in files if f.get("subfolder_id") == subfolder_id]
    if folder_id:
        return [f for f in files if f.get("folder_id") == folder_id and not f.get("subfolder_id")]
    return [f for f in files if not f.get("folder_id") and not f.get("subfolder_id")]


def members_of(members, team_id):
    return [m for m in members if m.get("team_id") == team_id]
