import json
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from realm_sync_config.builder import SyncConfigurationBuilder
from realm_sync_config.collaborators import AuthOrigin, BuilderDefaults, StaticIdentityOwner
from realm_sync_config.errors import SyncConfigError
from realm_sync_config.observability import configure_logging
from realm_sync_config.security import derive_encryption_key, generate_encryption_key, generate_salt

app = typer.Typer(help="Realm Sync configuration tools")
console = Console()


@app.command()
def resolve(
    url: str = typer.Argument(..., help="Remote URL, e.g. /~/default or realms://host/~/default"),
    identity: Optional[str] = typer.Option(None, "--identity", "-u", help="Identity substituted for /~/"),
    auth_url: str = typer.Option("https://localhost", "--auth-url", help="URL the identity authenticated against"),
    root_dir: Optional[str] = typer.Option(None, "--root-dir", "-d", help="Root directory for local files"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Override the local file name"),
    as_json: bool = typer.Option(False, "--json", help="Print the configuration as JSON"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level"),
):
    """Resolve a remote URL to its local path and print the configuration."""
    try:
        configure_logging(level=log_level, json_format=False)
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    try:
        defaults = BuilderDefaults(root_directory=root_dir) if root_dir else BuilderDefaults()
        builder = SyncConfigurationBuilder(
            StaticIdentityOwner(identity),
            url,
            AuthOrigin.from_url(auth_url),
            defaults=defaults,
        )
        if name:
            builder.name(name)
        config = builder.build()
    except SyncConfigError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    info = config.describe()
    if as_json:
        typer.echo(json.dumps(info, indent=2))
        return

    table = Table(title="Sync Configuration")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green", overflow="fold")
    for key, value in info.items():
        table.add_row(key, escape(str(value)))
    console.print(table)


@app.command()
def keygen(
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Derive the key from a password"),
    salt: Optional[str] = typer.Option(None, "--salt", help="Hex salt for --password (random if omitted)"),
):
    """Print a 64-byte encryption key as hex."""
    if password is None:
        typer.echo(generate_encryption_key().hex())
        return

    try:
        salt_bytes = bytes.fromhex(salt) if salt else generate_salt()
    except ValueError:
        console.print("[red]Error: --salt must be hex[/red]")
        raise typer.Exit(code=1)

    try:
        key = derive_encryption_key(password, salt_bytes)
    except SyncConfigError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    typer.echo(f"key:  {key.hex()}")
    typer.echo(f"salt: {salt_bytes.hex()}")


if __name__ == "__main__":
    app()
