"""LabTrack CLI tool."""

import typer

from labtrack.core.config import settings
from labtrack.db.session import Database
from labtrack.models.user import UserRole

app = typer.Typer(name="labtrack", help="LabTrack CLI")
db_app = typer.Typer(help="Database management commands")
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init():
    """Create all tables (no-op for tables that already exist)."""
    database = Database.from_settings(settings)
    try:
        database.create_all()
    finally:
        database.dispose()
    typer.echo("✅ Tables created")


@db_app.command("seed")
def db_seed(
    sample: bool = typer.Option(True, help="Also insert the sample region/school/device hierarchy"),
):
    """Seed the default admin and sample data."""
    from labtrack.db.seeds.seed_admin import seed_admin
    from labtrack.db.seeds.seed_sample_data import seed_sample_data

    database = Database.from_settings(settings)
    db = database.session()
    try:
        seed_admin(db, settings)
        if sample:
            seed_sample_data(db)
    finally:
        db.close()
        database.dispose()
    typer.echo("✅ All seeds applied")


@db_app.command("reset")
def db_reset():
    """Drop and recreate all tables (DANGER)."""
    confirm = typer.confirm("⚠️  This will DROP every table, including device logs. Continue?")
    if not confirm:
        raise typer.Abort()
    database = Database.from_settings(settings)
    try:
        database.drop_all()
        database.create_all()
    finally:
        database.dispose()
    typer.echo("✅ Database reset")


@app.command("create-user")
def create_user(
    username: str = typer.Argument(..., help="Display name"),
    email: str = typer.Argument(..., help="Login email"),
    role: UserRole = typer.Option(UserRole.engineer, help="Role"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
):
    """Create a user directly in the database."""
    from labtrack.core.exceptions import LabTrackError
    from labtrack.schemas.schemas import UserCreate
    from labtrack.services.user_service import user_service

    database = Database.from_settings(settings)
    db = database.session()
    try:
        user = user_service.create_user(
            db, UserCreate(username=username, email=email, password=password, role=role),
        )
    except LabTrackError as e:
        typer.echo(f"❌ {e.message}", err=True)
        raise typer.Exit(code=1)
    finally:
        db.close()
        database.dispose()
    typer.echo(f"✅ Created {user.role.value} '{user.name}' (id={user.id})")


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Host"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(False, help="Auto-reload"),
):
    """Start the API server."""
    import uvicorn
    uvicorn.run("labtrack.main:create_app", factory=True, host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
