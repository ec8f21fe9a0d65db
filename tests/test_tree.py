from classfolders.browser.tree import (
    NavState, RosterPseudoSubfolder, build_team_folders, files_in, members_of, resolve, team_ids,
)

SUBFOLDERS = [
    {"id": "sf1", "name": "Docs", "parent_folder_id": "team-3"},
    {"id": "sf2", "name": "Team Members", "parent_folder_id": "team-3"},
    {"id": "sf3", "name": "Videos", "parent_folder_id": "team-0"},
]


def test_ten_fixed_team_folders():
    folders = build_team_folders([])
    assert [f.id for f in folders] == team_ids() == [f"team-{i}" for i in range(10)]
    assert folders[4].name == "Team 4"


def test_roster_is_first_and_appears_once():
    folders = {f.id: f for f in build_team_folders(SUBFOLDERS)}
    team3 = folders["team-3"]
    assert isinstance(team3.subfolders[0], RosterPseudoSubfolder)
    assert team3.subfolders[0].id == "team-3-members"
    assert sum(1 for sf in team3.subfolders if sf.is_roster) == 1
    # a real subfolder that happens to be named "Team Members" stays a real subfolder
    assert [sf.id for sf in team3.subfolders[1:]] == ["sf1", "sf2"]
    assert not team3.subfolders[2].is_roster
    assert [sf.id for sf in folders["team-9"].subfolders] == ["team-9-members"]


def test_nav_transitions():
    nav = NavState().open_folder("team-3").open_subfolder("sf1")
    assert nav == NavState("subfolder", "team-3", "sf1")
    assert nav.back() == NavState("folder", "team-3", None)
    assert nav.back().back() == NavState()
    assert NavState.from_dict(nav.to_dict()) == nav
    assert NavState.from_dict({"view": "bogus"}).view == "main"


def test_breadcrumbs_follow_depth():
    folders = build_team_folders(SUBFOLDERS)
    assert resolve(NavState(), folders).breadcrumbs == ["My Files"]
    assert resolve(NavState("folder", "team-3"), folders).breadcrumbs == ["My Files", "Team 3"]
    resolved = resolve(NavState("subfolder", "team-3", "sf1"), folders)
    assert resolved.breadcrumbs == ["My Files", "Team 3", "Docs"]
    roster = resolve(NavState("subfolder", "team-3", "team-3-members"), folders)
    assert roster.subfolder.is_roster
    assert roster.breadcrumbs[-1] == "Team Members"


def test_stale_selection_falls_back():
    folders = build_team_folders(SUBFOLDERS)
    resolved = resolve(NavState("subfolder", "team-3", "gone"), folders)
    assert resolved.view == "folder"
    assert resolved.breadcrumbs == ["My Files", "Team 3"]
    assert resolve(NavState("folder", "team-42"), folders).view == "main"


def test_files_in_narrows_by_placement():
    files = [
        {"id": "a", "folder_id": "team-1", "subfolder_id": None},
        {"id": "b", "folder_id": "team-1", "subfolder_id": "sf1"},
        {"id": "c", "folder_id": None, "subfolder_id": None},
    ]
    assert [f["id"] for f in files_in(files, folder_id="team-1")] == ["a"]
    assert [f["id"] for f in files_in(files, subfolder_id="sf1")] == ["b"]
    assert [f["id"] for f in files_in(files)] == ["c"]


def test_members_of():
    members = [{"id": "m1", "team_id": "team-3"}, {"id": "m2", "team_id": "team-4"}]
    assert members_of(members, "team-3") == [members[0]]
