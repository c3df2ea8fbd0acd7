"""Pipecraft CLI — bootstrap and inspect a deployment.

Usage:
    pipecraft init-db                                 # Create missing tables
    pipecraft create-admin -e a@b.co -n "Ada" -p ...  # First admin account
    pipecraft users                                   # List accounts
    pipecraft ping                                    # Check a running server

Registration over HTTP only ever creates plain users, so the first admin
has to come from here.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import os
import sys
from typing import Optional

import click
import httpx

from pipecraft import __version__

DEFAULT_API_URL = "http://localhost:8000"


def _api_url() -> str:
    return os.environ.get("PIPECRAFT_API_URL", DEFAULT_API_URL).rstrip("/")


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Offloads to a thread when a loop is already running (e.g. Click's
    CliRunner inside an async test).
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table. columns: (header, dict_key, width)."""
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k) or "-")[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


# ---------------------------------------------------------------------------
# Database-backed commands
# ---------------------------------------------------------------------------


async def _create_admin(email: str, name: str, password: str, phone: Optional[str]):
    from pipecraft.auth.jwt import TokenCodec
    from pipecraft.config import get_settings
    from pipecraft.db.engine import async_session_factory, engine, init_models
    from pipecraft.services.auth_service import AuthService

    try:
        await init_models()
        async with async_session_factory() as db:
            svc = AuthService(db, TokenCodec(get_settings()))
            return await svc.register(
                email=email, name=name, password=password, phone=phone, role="admin"
            )
    finally:
        await engine.dispose()


async def _list_users():
    from pipecraft.db.engine import async_session_factory, engine
    from pipecraft.services.credential_store import CredentialStore

    try:
        async with async_session_factory() as db:
            return await CredentialStore(db).list_all()
    finally:
        await engine.dispose()


async def _init_db():
    from pipecraft.db.engine import engine, init_models

    try:
        await init_models()
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="pipecraft")
def cli():
    """Pipecraft — administration commands for the website backend."""


@cli.command("init-db")
def init_db():
    """Create any missing tables."""
    _run(_init_db())
    click.secho("Tables ready.", fg="green")


@cli.command("create-admin")
@click.option("--email", "-e", required=True, help="Admin email address")
@click.option("--name", "-n", required=True, help="Display name")
@click.option(
    "--password", "-p",
    prompt=True, hide_input=True, confirmation_prompt=True,
    help="Password (prompted when omitted)",
)
@click.option("--phone", default=None, help="Phone number")
def create_admin(email: str, name: str, password: str, phone: Optional[str]):
    """Create an account with the admin role."""
    from pipecraft.errors import AppError

    if len(password) < 6:
        click.secho("Error: password must be at least 6 characters", fg="red", err=True)
        sys.exit(1)
    try:
        user = _run(_create_admin(email, name, password, phone))
    except AppError as e:
        click.secho(f"Error: {e.message}", fg="red", err=True)
        sys.exit(1)
    click.secho(f"Admin created: {user.id} <{user.email}>", fg="green")


@cli.command()
def users():
    """List registered accounts."""
    rows = [
        {"id": u.id, "email": u.email, "name": u.name, "role": u.role}
        for u in _run(_list_users())
    ]
    if not rows:
        click.echo("No users.")
        return
    _print_table(
        rows,
        [("ID", "id", 20), ("EMAIL", "email", 30), ("NAME", "name", 20), ("ROLE", "role", 6)],
    )


# ---------------------------------------------------------------------------
# HTTP commands
# ---------------------------------------------------------------------------


@cli.command()
def ping():
    """Check that a running server answers (PIPECRAFT_API_URL)."""

    async def _ping():
        async with httpx.AsyncClient(base_url=_api_url(), timeout=10.0) as client:
            resp = await client.get("/api/pingme")
            resp.raise_for_status()
            return resp.json()

    try:
        body = _run(_ping())
    except httpx.HTTPError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    click.secho(body.get("message", "ok"), fg="green")


if __name__ == "__main__":
    cli()
