import click
from flask.cli import AppGroup, with_appcontext

from .extensions import db
from .services import maintenance, voter_registry

votes_cli = AppGroup("votes", help="Election maintenance commands.")


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create all tables (use `flask db upgrade` once migrations exist)."""
    db.create_all()
    click.echo("Database tables created.")


@votes_cli.command("reconcile")
def reconcile_command():
    """Recompute candidate tallies from voter records."""
    changed = maintenance.reconcile_tallies()
    if not changed:
        click.echo("Tallies already match the voter registry.")
    for candidate_id, (old, new) in changed.items():
        click.echo(f"{candidate_id}: {old} -> {new}")


@votes_cli.command("consistency")
def consistency_command():
    """Compare cached tallies with the voter registry."""
    report = maintenance.tally_consistency()
    for key, value in report.items():
        click.echo(f"{key}: {value}")
    if not report["consistent"]:
        raise click.exceptions.Exit(1)


@votes_cli.command("import-tokens")
@click.argument("tokens_file", type=click.File("r", encoding="utf-8"))
def import_tokens_command(tokens_file):
    """Register voter tokens from a file, one token per line."""
    added, duplicates = voter_registry.register_batch(voter_registry.parse_tokens(tokens_file.read()))
    click.echo(f"{added} token(s) added, {duplicates} duplicate(s) skipped.")


@votes_cli.command("reset")
@click.option("--all", "wipe_all", is_flag=True, help="Delete candidates, voters and settings too.")
@click.confirmation_option(prompt="This cannot be undone. Continue?")
def reset_command(wipe_all):
    """Reset votes for a new session, or wipe everything with --all."""
    if wipe_all:
        summary = maintenance.reset_all_data()
    else:
        summary = maintenance.reset_all_votes()
    for key, value in summary.items():
        click.echo(f"{key}: {value}")


def register_cli(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(votes_cli)
