"""Realfolio CLI — create tables, seed sample data, smoke-test a server.

Usage:
    realfolio init-db                             # Create tables from the ORM models
    realfolio seed                                # Admin user + sample property + sample content
    realfolio smoke --base-url http://localhost:5000
    realfolio serve                               # Run the API with uvicorn
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from typing import Optional

import click
import httpx

DEFAULT_API_URL = "http://localhost:5000"


def _api_url(base_url: Optional[str] = None) -> str:
    return (base_url or os.environ.get("REALFOLIO_API_URL", DEFAULT_API_URL)).rstrip("/")


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Offloads to a thread when a loop is already running (Click CliRunner
    inside an async test).
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


SAMPLE_PROPERTY = {
    "title": "Luxury Modern Villa in Bole",
    "description": "Stunning 5-bedroom villa with panoramic city views, private garden and pool.",
    "price": "3,200,000 ETB",
    "location": "Bole, Addis Ababa",
    "type": "villa",
    "bedrooms": "5",
    "bathrooms": "4",
    "size": "450 sqm",
    "year_built": "2022",
    "parking": "3 cars",
    "amenities": ["wifi", "parking", "garden", "security", "pool"],
    "featured": True,
    "status": "active",
}

SAMPLE_CONTENT = {
    "title": "Top 5 Areas to Buy Property in Addis Ababa 2024",
    "platform": "youtube",
    "duration": "12:45",
    "url": "https://youtube.com/watch?v=example",
    "category": "market-insights",
    "tags": ["addis ababa", "real estate", "investment"],
    "featured": True,
}


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="realfolio")
def cli():
    """Realfolio — real-estate portfolio backend."""


# ---------------------------------------------------------------------------
# init-db
# ---------------------------------------------------------------------------


@cli.command("init-db")
def init_db():
    """Create all tables (safe to run repeatedly)."""
    _run(_init_db_impl())
    click.secho("Tables created.", fg="green")


async def _init_db_impl():
    from realfolio.db.engine import create_tables, engine

    try:
        await create_tables()
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# seed
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--email", help="Admin email (default: REALFOLIO_SEED_ADMIN_EMAIL)")
@click.option("--password", help="Admin password (default: REALFOLIO_SEED_ADMIN_PASSWORD)")
def seed(email: Optional[str], password: Optional[str]):
    """Create an admin user and one sample property and content entry."""
    summary = _run(_seed_impl(email, password))
    for line in summary:
        click.echo(line)


async def _seed_impl(email: Optional[str], password: Optional[str]) -> list[str]:
    from realfolio.db.engine import async_session_factory, create_tables, engine

    try:
        await create_tables()
        async with async_session_factory() as db:
            return await seed_database(db, email, password)
    finally:
        await engine.dispose()


async def seed_database(db, email: Optional[str] = None, password: Optional[str] = None) -> list[str]:
    """Idempotent: existing admin, property (by title) and content (by title) are reused."""
    from sqlalchemy import select

    from realfolio.auth.dependencies import get_token_service
    from realfolio.auth.policy import ADMIN
    from realfolio.config import settings
    from realfolio.db.models import Content, Property
    from realfolio.services.auth_service import AuthService
    from realfolio.services.content_service import ContentService
    from realfolio.services.property_service import PropertyService

    email = email or settings.seed_admin_email
    password = password or settings.seed_admin_password
    summary = []

    auth = AuthService(db, get_token_service())
    admin = await auth.find_by_email(email)
    if admin is None:
        admin = await auth.create_user("Admin", email, password, role=ADMIN)
        summary.append(f"created admin {admin.email}")
    else:
        summary.append(f"admin {admin.email} already exists")

    existing = await db.execute(
        select(Property.id).where(Property.title == SAMPLE_PROPERTY["title"])
    )
    if existing.first() is None:
        await PropertyService(db).create(dict(SAMPLE_PROPERTY), creator_id=admin.id)
        summary.append("created sample property")

    existing = await db.execute(
        select(Content.id).where(Content.title == SAMPLE_CONTENT["title"])
    )
    if existing.first() is None:
        await ContentService(db).create(dict(SAMPLE_CONTENT), creator_id=admin.id)
        summary.append("created sample content")

    return summary


# ---------------------------------------------------------------------------
# smoke
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--base-url", help="Server URL (default: REALFOLIO_API_URL or localhost:5000)")
@click.option("--email", help="Login email (default: seeded admin)")
@click.option("--password", help="Login password (default: seeded admin)")
def smoke(base_url: Optional[str], email: Optional[str], password: Optional[str]):
    """Walk the main endpoints of a running server; exit 1 on the first failure."""
    from realfolio.config import settings

    ok = _run(_smoke_impl(
        _api_url(base_url),
        email or settings.seed_admin_email,
        password or settings.seed_admin_password,
    ))
    if not ok:
        sys.exit(1)


async def _smoke_impl(base_url: str, email: str, password: str) -> bool:
    async with httpx.AsyncClient(base_url=base_url, timeout=30.0) as client:
        return await run_smoke(client, email, password)


def _step(name: str, resp: httpx.Response, expected: int = 200) -> bool:
    if resp.status_code == expected:
        click.secho(f"  ok    {name}", fg="green")
        return True
    click.secho(f"  FAIL  {name}: HTTP {resp.status_code}", fg="red", err=True)
    click.echo(resp.text, err=True)
    return False


async def run_smoke(client: httpx.AsyncClient, email: str, password: str) -> bool:
    """Health → login → properties → content → settings against `client`."""
    if not _step("health", await client.get("/api/health")):
        return False

    resp = await client.post("/api/auth/login", json={"email": email, "password": password})
    if not _step("login", resp):
        return False
    headers = {"Authorization": f"Bearer {resp.json()['data']['token']}"}

    if not _step("list properties", await client.get("/api/properties", params={"flat": "true"})):
        return False

    resp = await client.post(
        "/api/properties",
        json={
            "title": "Smoke Test Listing",
            "price": "1 ETB",
            "location": "Nowhere",
            "type": "land",
        },
        headers=headers,
    )
    if not _step("create property", resp, expected=201):
        return False
    property_id = resp.json()["data"]["id"]
    resp = await client.delete(f"/api/properties/{property_id}", headers=headers)
    if not _step("delete property", resp):
        return False

    if not _step("list content", await client.get("/api/content", params={"flat": "true"})):
        return False

    resp = await client.get("/api/settings", params={"flat": "true"})
    if not _step("get settings", resp):
        return False
    resp = await client.post(
        "/api/settings", json={"phone": resp.json()["phone"]}, headers=headers
    )
    if not _step("update settings", resp):
        return False

    click.secho("Smoke test passed.", fg="green", bold=True)
    return True


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--host", help="Bind address (default: REALFOLIO_HOST)")
@click.option("--port", type=int, help="Port (default: REALFOLIO_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from realfolio.config import settings

    uvicorn.run(
        "realfolio.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


if __name__ == "__main__":
    cli()
