import click
from faker import Faker
from classfolders import create_app, db
from classfolders.files.models import FileRecord, Subfolder
from classfolders.teams.models import TeamMember
from classfolders.utils.drive import drive_preview_url

fake = Faker()

app = create_app()

@app.cli.command("seed")
@click.option("--members", default=4, show_default=True, help="Members per team.")
@click.option("--subfolders", default=2, show_default=True, help="Subfolders per team.")
def seed(members, subfolders):
    """Wipe DB and seed every team folder with dummy rows."""
    click.echo("➡️ Dropping database...")
    db.drop_all()
    db.session.commit()

    click.echo("➡️ Recreating tables...")
    db.create_all()

    for team_id in app.config["TEAM_IDS"]:
        db.session.add_all([TeamMember(name=fake.name(), team_id=team_id) for _ in range(members)])
        folders = [Subfolder(name=fake.word().title(), parent_folder_id=team_id) for _ in range(subfolders)]
        db.session.add_all(folders)
        db.session.flush()

        # one Drive link per subfolder so the grids are not empty
        for sf in folders:
            drive_id = fake.pystr(min_chars=12, max_chars=20)
            db.session.add(FileRecord(
                file_url=drive_preview_url(drive_id),
                display_name=fake.sentence(nb_words=3).rstrip("."),
                file_type="pdf",
                folder_id=team_id,
                subfolder_id=sf.id,
                is_drive_link=True,
                drive_file_id=drive_id,
                original_drive_url=f"https://drive.google.com/file/d/{drive_id}/view?usp=sharing",
            ))
    db.session.commit()
    click.echo(f"✅ Seeded {len(app.config['TEAM_IDS'])} teams")

    app.store.load_all()
    click.echo(f"🎉 Seed complete — {len(app.store.files)} files, {len(app.store.members)} members cached")
