"""Doctor command for configuration diagnostics."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import AppSettings, load_settings, write_user_env_vars
from core.domain.credentials import AppCredential, build_credential
from core.domain.environment import Environment
from core.domain.errors import EbayClientError

app = typer.Typer(no_args_is_help=True, help="Configuration diagnostics and credential setup.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc)


def build_doctor_table(settings: AppSettings, *, check_http: bool = True) -> tuple[Table, bool]:
    """Arma la tabla de diagnóstico; devuelve `(tabla, todo_ok)`."""

    table = Table(title="eBay-D2 Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    ok = True
    try:
        credential = build_credential(settings.credential_config())
    except EbayClientError as exc:
        table.add_row("Credential", "FAIL", f"{type(exc).__name__}: {exc}")
        return table, False

    scheme = "Auth'n'Auth app keys" if isinstance(credential, AppCredential) else "OAuth bearer token"
    table.add_row("Credential", "OK", f"{credential.auth_type.value} ({scheme})")
    table.add_row("Environment", "OK", f"{credential.environment.label()} -> {credential.base_url}")

    if credential.expire is None:
        table.add_row("Token expiry", "UNKNOWN", "No expire configured")
    elif credential.is_expired:
        ok = False
        table.add_row("Token expiry", "EXPIRED", credential.expire.isoformat())
    else:
        table.add_row("Token expiry", "OK", credential.expire.isoformat())

    if check_http:
        ok_http, detail_http = asyncio.run(_check_http(credential.base_url, settings))
        ok = ok and ok_http
        table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)

    return table, ok


@app.command()
def run(
    offline: bool = typer.Option(False, "--offline", help="Skip the connectivity check."),
) -> None:
    """Validate the configured credential and show recommended fixes."""

    try:
        settings = load_settings(AppSettings)
    except EbayClientError as exc:
        _console.print(f"[red]Invalid configuration:[/red] {exc}")
        raise typer.Exit(code=2) from exc

    table, ok = build_doctor_table(settings, check_http=not offline)
    _console.print(table)
    if not ok:
        _console.print(
            "\n[yellow]Note:[/yellow] run `ebay-d2 doctor setup` to store a fresh token."
        )
        raise typer.Exit(code=1)


@app.command(name="setup")
def setup() -> None:
    """Interactive credential setup (stores config in the user config .env)."""

    auth_type = typer.prompt("Auth type (OAUTH/AUTHNAUTH)", default="OAUTH", show_default=True).strip().upper()
    environment = typer.prompt(
        "Environment",
        default=Environment.default().value,
        show_default=True,
    ).strip().lower()
    token = typer.prompt("Token", hide_input=True, confirmation_prompt=False).strip()
    expire = typer.prompt("Token expiry (ISO-8601, blank if unknown)", default="", show_default=False).strip()

    values: dict[str, str | None] = {
        "EBAY_D2_AUTH_TYPE": auth_type,
        "EBAY_D2_ENVIRONMENT": environment,
        "EBAY_D2_TOKEN": token,
        "EBAY_D2_EXPIRE": expire or None,
    }
    if auth_type == "AUTHNAUTH":
        values["EBAY_D2_CLIENT_ID"] = typer.prompt("App ID (clientId)").strip()
        values["EBAY_D2_DEV_ID"] = typer.prompt("Dev ID (devId)").strip()
        values["EBAY_D2_CERT_ID"] = typer.prompt("Cert ID (certId)", hide_input=True).strip()

    if not token:
        raise typer.BadParameter("token is required")

    env_path = write_user_env_vars(values)
    _console.print(f"[green]Saved eBay config to:[/green] {env_path}")
