"""
Command-line interface for the LCP back-office console.
"""

from __future__ import annotations

import json
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Any, Callable

import click

from lcpconsole.client.domain.entities import (
    rights_from_partial_license,
    rights_summary,
)
from lcpconsole.client.infrastructure.config_loader import ConfigLoader
from lcpconsole.common.exceptions import ResourceError, ValidationError
from lcpconsole.common.models import (
    BUY,
    LOAN,
    ConsoleConfig,
    DeviceRequest,
    PurchaseRequest,
    PurchaseUpdateRequest,
    RenewRequest,
    User,
)
from lcpconsole.server import start_server
from lcpconsole.server.services import ConsoleService

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S"]


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def reports_errors(func: Callable) -> Callable:
    """Turn console and upstream errors into click errors."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (ValidationError, ResourceError) as e:
            raise click.ClickException(str(e)) from e

    return wrapper


def console_service(console_config: ConsoleConfig) -> ConsoleService:
    loader = ConfigLoader(console_config)
    return ConsoleService(loader, loader.logger)


@click.group()
@click.option("--api-url", default=None, help="Resource API base URL")
@click.option("--lsd-url", default=None, help="License status server base URL")
@click.pass_context
def cli(ctx: click.Context, api_url: str | None, lsd_url: str | None) -> None:
    """LCP back-office console CLI"""
    ctx.obj = ConsoleConfig(api_url=api_url, lsd_url=lsd_url)


@cli.command()
@click.option(
    "--host",
    default=None,
    help="Host to bind the console to (default: from LCPCONSOLE_HOST or 127.0.0.1)",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="Port to bind the console to (default: from LCPCONSOLE_PORT or 8080)",
)
@click.pass_obj
def serve(console_config: ConsoleConfig, host: str | None, port: int | None) -> None:
    """Start the console server"""
    console_config.console_host = host
    console_config.console_port = port
    start_server(console_config)


# users


@cli.group()
def users() -> None:
    """Manage users"""


@users.command("list")
@click.option("--page", type=int, default=None)
@click.pass_obj
@reports_errors
def list_users(console_config: ConsoleConfig, page: int | None) -> None:
    """List users"""
    loader = ConfigLoader(console_config)
    per_page = loader.page_size if page is not None else None
    for user in loader.users.list(page, per_page):
        click.echo(f"{user.id}\t{user.name}\t{user.email}")


@users.command("add")
@click.option("--name", required=True)
@click.option("--email", required=True)
@click.option("--password", required=True, help="Passphrase of the user")
@click.option("--hint", default=None, help="Passphrase hint")
@click.pass_obj
@reports_errors
def add_user(
    console_config: ConsoleConfig,
    name: str,
    email: str,
    password: str,
    hint: str | None,
) -> None:
    """Create a user"""
    loader = ConfigLoader(console_config)
    user = User(name=name, email=email, clear_password=password, hint=hint)
    loader.users.add(user)
    click.echo(f"User {email} created")


@users.command("find")
@click.option("--email", required=True)
@click.pass_obj
@reports_errors
def find_user(console_config: ConsoleConfig, email: str) -> None:
    """Find a user by email, across every page"""
    user = ConfigLoader(console_config).users.find_by_email(email)
    if user is None:
        msg = f"No user with email {email}"
        raise click.ClickException(msg)
    click.echo(f"{user.id}\t{user.name}\t{user.email}")


@users.command("delete")
@click.argument("user_id", type=int)
@click.pass_obj
@reports_errors
def delete_user(console_config: ConsoleConfig, user_id: int) -> None:
    """Delete a user"""
    ConfigLoader(console_config).users.delete(user_id)
    click.echo(f"User {user_id} deleted")


# publications


@cli.group()
def publications() -> None:
    """Manage publications"""


@publications.command("list")
@click.option("--page", type=int, default=None)
@click.pass_obj
@reports_errors
def list_publications(console_config: ConsoleConfig, page: int | None) -> None:
    """List publications"""
    loader = ConfigLoader(console_config)
    per_page = loader.page_size if page is not None else None
    for publication in loader.publications.list(page, per_page):
        click.echo(f"{publication.id}\t{publication.title}\t{publication.status or ''}")


@publications.command("upload")
@click.argument(
    "path", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option("--title", required=True)
@click.pass_obj
@reports_errors
def upload_publication(console_config: ConsoleConfig, path: Path, title: str) -> None:
    """Upload an EPUB master file"""
    ConfigLoader(console_config).publications.upload(path, title)
    click.echo(f"Uploaded {path.name}")


# purchases


@cli.group()
def purchases() -> None:
    """Manage purchases and their licenses"""


@purchases.command("list")
@click.option("--page", type=int, default=None)
@click.pass_obj
@reports_errors
def list_purchases(console_config: ConsoleConfig, page: int | None) -> None:
    """List purchases"""
    loader = ConfigLoader(console_config)
    per_page = loader.page_size if page is not None else None
    for purchase in loader.purchases.list(page, per_page):
        rights = rights_summary(rights_from_partial_license(purchase.partial_license))
        click.echo(
            f"{purchase.id}\t{purchase.type}\t{purchase.user.email}\t"
            f"{purchase.publication.title}\t{purchase.license_uuid or '-'}\t{rights}"
        )


@purchases.command("add")
@click.option("--user-id", type=int, required=True)
@click.option("--publication-id", type=int, required=True)
@click.option(
    "--type", "purchase_type", type=click.Choice([BUY, LOAN]), default=LOAN
)
@click.option("--start", type=click.DateTime(DATE_FORMATS), default=None)
@click.option("--end", type=click.DateTime(DATE_FORMATS), default=None)
@click.pass_obj
@reports_errors
def add_purchase(  # noqa: PLR0913
    console_config: ConsoleConfig,
    user_id: int,
    publication_id: int,
    purchase_type: str,
    start: datetime | None,
    end: datetime | None,
) -> None:
    """Create a purchase; its license is built from the user's passphrase"""
    handler = console_service(console_config).purchase_handler
    handler.create(
        PurchaseRequest(
            user_id=user_id,
            publication_id=publication_id,
            type=purchase_type,
            start_date=start,
            end_date=end,
        )
    )
    click.echo(f"{purchase_type} created for user {user_id}")


@purchases.command("update")
@click.argument("purchase_id", type=int)
@click.option("--end", type=click.DateTime(DATE_FORMATS), default=None)
@click.option(
    "--no-end-date",
    is_flag=True,
    help="Clear the end date; the license status server applies its default",
)
@click.pass_obj
@reports_errors
def update_purchase(
    console_config: ConsoleConfig,
    purchase_id: int,
    end: datetime | None,
    no_end_date: bool,
) -> None:
    """Change the end date of a purchase"""
    purchase = console_service(console_config).purchase_handler.update(
        purchase_id, PurchaseUpdateRequest(end_date=end, no_end_date=no_end_date)
    )
    end_date = purchase.end_date.isoformat() if purchase.end_date else "-"
    click.echo(f"Purchase {purchase_id} is {purchase.status}, ends {end_date}")


@purchases.command("renew")
@click.argument("purchase_id", type=int)
@click.option(
    "--end",
    type=click.DateTime(DATE_FORMATS),
    default=None,
    help="New end date (default: decided by the license status server)",
)
@click.pass_obj
@reports_errors
def renew_purchase(
    console_config: ConsoleConfig, purchase_id: int, end: datetime | None
) -> None:
    """Renew a loan"""
    view = console_service(console_config).purchase_handler.renew(
        purchase_id, RenewRequest(end_date=end)
    )
    click.echo(f"Loan {purchase_id} now ends {view.end.isoformat() if view.end else '-'}")


@purchases.command("return")
@click.argument("purchase_id", type=int)
@click.pass_obj
@reports_errors
def return_purchase(console_config: ConsoleConfig, purchase_id: int) -> None:
    """Return a loan"""
    view = console_service(console_config).purchase_handler.return_license(
        purchase_id, DeviceRequest()
    )
    status = view.license_status.status if view.license_status else "-"
    click.echo(f"Loan {purchase_id} returned, license is {status}")


@purchases.command("revoke")
@click.argument("license_id")
@click.pass_obj
@reports_errors
def revoke_license(console_config: ConsoleConfig, license_id: str) -> None:
    """Revoke a license by id or unique id prefix"""
    result = console_service(console_config).purchase_handler.revoke(license_id)
    click.echo(f"{result['license_id']}: {result['message']}")


# license status


@cli.group()
def status() -> None:
    """Inspect license status documents"""


@status.command("show")
@click.argument("license_id")
@click.pass_obj
@reports_errors
def show_status(console_config: ConsoleConfig, license_id: str) -> None:
    """Show the status document of a license"""
    document = ConfigLoader(console_config).license_status.get(license_id)
    echo_json(document.model_dump(mode="json", exclude_none=True))


@cli.command()
@click.pass_obj
@reports_errors
def dashboard(console_config: ConsoleConfig) -> None:
    """Show dashboard figures and best sellers"""
    loader = ConfigLoader(console_config)
    info = loader.dashboard.info()
    echo_json(info.model_dump(by_alias=True))
    for best_seller in loader.dashboard.best_sellers():
        click.echo(f"{best_seller.count}\t{best_seller.title}")


if __name__ == "__main__":
    cli()
