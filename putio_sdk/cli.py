"""
Command-line interface for the put.io SDK.

Provides the ``putio`` command for browsing files, managing transfers and
friends, and inspecting the account from a terminal.
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .auth import build_authorization_url, exchange_code
from .client import PutioClient
from .config import ENV_TOKEN, ClientConfig, env_base_url, env_timeout
from .exceptions import ConfigurationError, PutioError
from .models import File
from .utils import format_file_size

# Initialize Rich console
console = Console()


class CLIContext:
    """CLI context object to share state between commands."""

    def __init__(self):
        self.client: Optional[PutioClient] = None
        self.config: Dict[str, Any] = {}
        self.config_file = Path.home() / ".putio" / "config.json"

    def load_config(self):
        """Load configuration from file."""
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r') as f:
                    self.config = json.load(f)
            except (json.JSONDecodeError, IOError):
                self.config = {}

    def save_config(self):
        """Save configuration to file."""
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, 'w') as f:
            json.dump(self.config, f, indent=2)
        self.config_file.chmod(0o600)

    def get_client(self) -> PutioClient:
        """Get authenticated client."""
        if self.client is None:
            token = self.config.get('token') or os.getenv(ENV_TOKEN)
            if not token:
                raise ConfigurationError(
                    f"Access token not configured. Use 'putio config' or set {ENV_TOKEN} environment variable.",
                    config_key="token",
                )
            self.client = PutioClient(config=ClientConfig.from_env(token))

        return self.client


# Create CLI context
cli_context = CLIContext()


def fail(action: str, error: Exception):
    console.print(f"❌ {action} failed: {escape(str(error))}")
    sys.exit(1)


def echo_json(data: Any):
    click.echo(json.dumps(data, indent=2, default=str))


def files_table(title: str, files) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Size", style="yellow")
    table.add_column("Type", style="blue")
    table.add_column("Created", style="magenta")

    for file in files:
        table.add_row(
            str(file.id),
            escape(file.name) + ("/" if file.is_folder else ""),
            "-" if file.is_folder else format_file_size(file.size),
            escape(file.file_type or file.content_type or ""),
            file.created_at.strftime('%Y-%m-%d %H:%M') if file.created_at else 'Unknown',
        )
    return table


def file_details(file: File) -> Table:
    table = Table(title=f"File Information: {escape(file.name)}")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("ID", str(file.id))
    table.add_row("Name", escape(file.name))
    table.add_row("Parent ID", str(file.parent_id))
    table.add_row("Size", format_file_size(file.size))
    table.add_row("Content Type", escape(file.content_type or ""))
    table.add_row("Shared", "Yes" if file.is_shared else "No")
    table.add_row("MP4 Available", "Yes" if file.is_mp4_available else "No")
    table.add_row("CRC32", escape(file.crc32 or ""))
    table.add_row("Created", file.created_at.strftime('%Y-%m-%d %H:%M:%S') if file.created_at else 'Unknown')
    return table


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, debug):
    """put.io CLI - manage files, transfers and friends."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    # Load configuration
    cli_context.load_config()

    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )
        console.print("[dim]Debug mode enabled[/dim]")


@cli.command()
@click.option('--token', prompt=True, hide_input=True, help='OAuth access token')
def config(token):
    """Store the access token used by every command."""
    cli_context.config['token'] = token
    cli_context.save_config()
    console.print("✅ Configuration saved successfully!")


@cli.command(name='authorize-url')
@click.option('--client-id', required=True, help='Application id')
@click.option('--redirect-uri', required=True, help='Registered redirect URI')
def authorize_url(client_id, redirect_uri):
    """Print the URL where a user grants this app access."""
    click.echo(build_authorization_url(client_id, redirect_uri))


@cli.command()
@click.option('--client-id', required=True, help='Application id')
@click.option('--client-secret', required=True, help='Application secret')
@click.option('--redirect-uri', required=True, help='Registered redirect URI')
@click.option('--code', required=True, help='Authorization code from the redirect')
def login(client_id, client_secret, redirect_uri, code):
    """Exchange an authorization code for a token and store it."""
    try:
        token = exchange_code(
            client_id,
            client_secret,
            redirect_uri,
            code,
            base_url=env_base_url(),
            timeout=env_timeout(),
        )
    except PutioError as e:
        fail("Login", e)

    cli_context.config['token'] = token
    cli_context.save_config()
    console.print("✅ Logged in, token saved.")


@cli.group()
def files():
    """Browse and manage files."""


@files.command(name='list')
@click.option('--parent-id', '-p', type=int, default=None, help='Folder to list (root by default)')
@click.option('--json', 'output_json', is_flag=True, help='Output raw JSON')
def list_files(parent_id, output_json):
    """List files in a folder."""
    try:
        result = cli_context.get_client().list_files(parent_id=parent_id)
    except PutioError as e:
        fail("Listing files", e)

    if output_json:
        echo_json(result.raw)
        return
    if not result.files:
        console.print("No files found.")
        return

    title = f"Files in {escape(result.parent.name)}" if result.parent else "Files"
    console.print(files_table(title, result))


@files.command()
@click.argument('query')
@click.option('--page', default=1, help='Result page')
@click.option('--json', 'output_json', is_flag=True, help='Output raw JSON')
def search(query, page, output_json):
    """Search for files by name."""
    try:
        result = cli_context.get_client().search_files(query, page=page)
    except PutioError as e:
        fail("Search", e)

    if output_json:
        echo_json(result.raw)
        return
    if not result.files:
        console.print("No files found matching the search criteria.")
        return

    console.print(files_table(f"Search Results for '{escape(query)}'", result))
    if result.next:
        console.print(f"More results: --page {page + 1}")


@files.command()
@click.argument('file_id', type=int)
@click.option('--json', 'output_json', is_flag=True, help='Output raw JSON')
def info(file_id, output_json):
    """Get detailed information about a file."""
    try:
        file = cli_context.get_client().get_file(file_id)
    except PutioError as e:
        fail("Getting file info", e)

    if output_json:
        echo_json(file.raw)
    else:
        console.print(file_details(file))


@files.command()
@click.argument('name')
@click.option('--parent-id', '-p', type=int, default=0, help='Parent folder id')
def mkdir(name, parent_id):
    """Create a folder."""
    try:
        folder = cli_context.get_client().create_folder(name, parent_id=parent_id)
    except PutioError as e:
        fail("Creating folder", e)
    console.print(f"✅ Created: {escape(folder.name)} (ID: {folder.id})")


@files.command()
@click.argument('file_id', type=int)
@click.confirmation_option(prompt='Are you sure you want to delete this file?')
def delete(file_id):
    """Delete a file."""
    try:
        result = cli_context.get_client().delete_file(file_id)
    except PutioError as e:
        fail("Delete", e)
    console.print(f"Delete {file_id}: {escape(result.status)}")


@files.command()
@click.argument('file_id', type=int)
@click.argument('name')
def rename(file_id, name):
    """Rename a file."""
    try:
        result = cli_context.get_client().rename_file(file_id, name)
    except PutioError as e:
        fail("Rename", e)
    console.print(f"Rename {file_id}: {escape(result.status)}")


@files.command()
@click.argument('file_id', type=int)
@click.argument('parent_id', type=int)
def move(file_id, parent_id):
    """Move a file into another folder."""
    try:
        result = cli_context.get_client().move_file(file_id, parent_id)
    except PutioError as e:
        fail("Move", e)
    console.print(f"Move {file_id}: {escape(result.status)}")


@files.command()
@click.argument('file_id', type=int)
@click.option('--convert', is_flag=True, help='Request conversion instead of showing status')
def mp4(file_id, convert):
    """Show or request the MP4 version of a file."""
    try:
        client = cli_context.get_client()
        if convert:
            result = client.convert_to_mp4(file_id)
            console.print(f"MP4 conversion {file_id}: {escape(result.status)}")
            return
        status = client.get_mp4(file_id)
    except PutioError as e:
        fail("MP4", e)

    table = Table(title=f"MP4 status for {file_id}")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Status", escape(status.status))
    if status.percent_done is not None:
        table.add_row("Progress", f"{status.percent_done}%")
    if status.size:
        table.add_row("Size", format_file_size(status.size))
    if status.stream_url:
        table.add_row("Stream URL", escape(status.stream_url))
    console.print(table)


@files.command(name='download-url')
@click.argument('file_id', type=int)
def download_url(file_id):
    """Print the direct download URL of a file."""
    try:
        url = cli_context.get_client().get_download_url(file_id)
    except PutioError as e:
        fail("Resolving download URL", e)
    click.echo(url)


@cli.group()
def transfers():
    """Manage server-side downloads."""


@transfers.command(name='list')
@click.option('--json', 'output_json', is_flag=True, help='Output raw JSON')
def list_transfers(output_json):
    """List transfers."""
    try:
        result = cli_context.get_client().list_transfers()
    except PutioError as e:
        fail("Listing transfers", e)

    if output_json:
        echo_json(result.raw)
        return
    if not result.transfers:
        console.print("No transfers.")
        return

    table = Table(title="Transfers")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Status", style="yellow")
    table.add_column("Done", style="magenta")
    table.add_column("Speed", style="blue")

    for transfer in result:
        table.add_row(
            str(transfer.id),
            escape(transfer.name or transfer.source or ""),
            escape(transfer.status or ""),
            f"{transfer.percent_done}%",
            f"{format_file_size(transfer.down_speed)}/s",
        )
    console.print(table)


@transfers.command()
@click.argument('url')
@click.option('--parent-id', '-p', type=int, default=0, help='Folder to save into')
@click.option('--extract', is_flag=True, help='Extract archives after download')
def add(url, parent_id, extract):
    """Start a transfer from a URL or magnet link."""
    try:
        transfer = cli_context.get_client().add_transfer(url, save_parent_id=parent_id, extract=extract)
    except PutioError as e:
        fail("Adding transfer", e)
    console.print(f"✅ Transfer added (ID: {transfer.id}, status: {escape(transfer.status or '')})")


@transfers.command()
@click.argument('transfer_id', type=int)
def cancel(transfer_id):
    """Cancel a transfer."""
    try:
        result = cli_context.get_client().cancel_transfer(transfer_id)
    except PutioError as e:
        fail("Cancel", e)
    console.print(f"Cancel {transfer_id}: {escape(result.status)}")


@transfers.command(name='info')
@click.argument('transfer_id', type=int)
@click.option('--json', 'output_json', is_flag=True, help='Output raw JSON')
def transfer_info(transfer_id, output_json):
    """Show a single transfer."""
    try:
        transfer = cli_context.get_client().get_transfer(transfer_id)
    except PutioError as e:
        fail("Getting transfer", e)

    if output_json:
        echo_json(transfer.raw)
        return

    table = Table(title=f"Transfer {transfer.id}")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Name", escape(transfer.name or ""))
    table.add_row("Source", escape(transfer.source or ""))
    table.add_row("Status", escape(transfer.status or ""))
    table.add_row("Done", f"{transfer.percent_done}%")
    table.add_row("Size", format_file_size(transfer.size))
    table.add_row("Peers", str(transfer.peers_connected))
    if transfer.error_message:
        table.add_row("Error", escape(transfer.error_message))
    if transfer.file_id:
        table.add_row("File ID", str(transfer.file_id))
    console.print(table)


@cli.group()
def account():
    """Account information."""


@account.command(name='info')
@click.option('--json', 'output_json', is_flag=True, help='Output raw JSON')
def account_info(output_json):
    """Show user and quota information."""
    try:
        user = cli_context.get_client().account_info()
    except PutioError as e:
        fail("Getting account info", e)

    if output_json:
        echo_json(user.raw)
        return

    table = Table(title="Account")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Username", escape(user.username))
    table.add_row("Mail", escape(user.mail or ""))
    if user.disk:
        table.add_row("Used", format_file_size(user.disk.used))
        table.add_row("Available", format_file_size(user.disk.avail))
        table.add_row("Quota", f"{format_file_size(user.disk.size)} ({user.disk.usage_percentage:.1f}% used)")
    console.print(table)


@account.command()
@click.option('--json', 'output_json', is_flag=True, help='Output raw JSON')
def settings(output_json):
    """Show account settings."""
    try:
        prefs = cli_context.get_client().account_settings()
    except PutioError as e:
        fail("Getting settings", e)

    if output_json:
        echo_json(prefs.raw)
        return

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    for key, value in prefs.to_dict().items():
        table.add_row(key, escape(str(value)))
    console.print(table)


@cli.group()
def friends():
    """Manage friends."""


@friends.command(name='list')
def list_friends():
    """List friends."""
    try:
        result = cli_context.get_client().list_friends()
    except PutioError as e:
        fail("Listing friends", e)

    if not result.friends:
        console.print("No friends yet.")
        return
    for friend in result:
        console.print(escape(friend.name))


@friends.command()
def waiting():
    """List pending friend requests."""
    try:
        result = cli_context.get_client().waiting_friend_requests()
    except PutioError as e:
        fail("Listing friend requests", e)

    if not result.friends:
        console.print("No pending requests.")
        return
    for friend in result:
        console.print(escape(friend.name))


@friends.command()
@click.argument('username')
def request(username):
    """Send a friend request."""
    try:
        result = cli_context.get_client().send_friend_request(username)
    except PutioError as e:
        fail("Friend request", e)
    console.print(f"Friend request to {escape(username)}: {escape(result.status)}")


@friends.command()
@click.argument('username')
def deny(username):
    """Deny a friend request."""
    try:
        result = cli_context.get_client().deny_friend_request(username)
    except PutioError as e:
        fail("Deny", e)
    console.print(f"Deny {escape(username)}: {escape(result.status)}")


if __name__ == '__main__':
    cli()
