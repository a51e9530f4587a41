"""licensectl -- Typer-based interface to the license engine.

Provides commands for key generation, license signing and verification,
inspection of signature documents, and running the license server.
Human-readable output goes to *stderr* via Rich; machine-readable output
(signature JSON, attribute JSON) goes to *stdout* so that pipelines can
compose cleanly.

Exit codes: 0 on success, 1 when a signature does not verify, 2 for usage,
input, encoding or key errors.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from license_engine.config import Settings, load_settings
from license_engine.errors import LicenseError, VerificationError
from license_engine.keys import load_private_key, load_public_key, write_keypair
from license_engine.license import License
from license_engine.signature import load_signature
from license_engine.signer import Signer
from license_engine.verifier import Verifier

from cli.display import display_keypair, display_license, display_verification

# ---------------------------------------------------------------------------
# App & global state
# ---------------------------------------------------------------------------

app = typer.Typer(
    name="licensectl",
    help="Issue and verify RSA-signed software licenses.",
    no_args_is_help=True,
)
console = Console(stderr=True)

EXIT_INVALID = 1
EXIT_ERROR = 2


# ---------------------------------------------------------------------------
# Callback -- global options
# ---------------------------------------------------------------------------


@app.callback()
def _global_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging on stderr."),
) -> None:
    """Global options applied to every command."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]{escape(message)}[/red]")
    return typer.Exit(code=EXIT_ERROR)


def _settings() -> Settings:
    try:
        return load_settings()
    except ValueError as exc:
        raise _fail(f"Invalid LICENSE_* configuration: {exc}") from exc


def _parse_attribute(raw: str) -> tuple[str, str]:
    """Split a ``key=value`` option; the value may itself contain ``=``."""
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise _fail(f"Invalid attribute {raw!r}: expected key=value")
    return key, value


def _read_attribute_file(path: Path) -> dict[str, str]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise _fail(f"Failed to read attributes from {path}: {exc}") from exc
    if not isinstance(data, dict) or not all(k and isinstance(v, str) for k, v in data.items()):
        raise _fail(f"{path} must hold a JSON object of non-empty names to string values")
    return data


# ---------------------------------------------------------------------------
# keygen
# ---------------------------------------------------------------------------


@app.command()
def keygen(
    directory: Path = typer.Argument(
        Path("."),
        help="Directory to write private.pem and public.pem into.",
        file_okay=False,
    ),
    bits: int | None = typer.Option(
        None,
        "--bits",
        help="RSA modulus size (default: LICENSE_KEY_SIZE or 2048).",
        min=1024,
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing key pair."),
) -> None:
    """Generate an RSA key pair for an issuing authority."""
    key_size = bits or _settings().key_size
    if not force and ((directory / "private.pem").exists() or (directory / "public.pem").exists()):
        raise _fail(f"Key files already exist in {directory}; pass --force to overwrite")

    try:
        private_path, public_path = write_keypair(directory, key_size)
    except (OSError, ValueError) as exc:
        raise _fail(f"Key generation failed: {exc}") from exc

    display_keypair(console, private_path, public_path, key_size)


# ---------------------------------------------------------------------------
# sign
# ---------------------------------------------------------------------------


@app.command()
def sign(
    private_key: Path | None = typer.Option(
        None,
        "--private-key",
        "-k",
        help="PEM private key (default: LICENSE_PRIVATE_KEY_PATH / LICENSE_PRIVATE_KEY_B64).",
        dir_okay=False,
    ),
    attribute: list[str] | None = typer.Option(
        None,
        "--attribute",
        "-a",
        help="License attribute as key=value; repeatable.",
    ),
    from_json: Path | None = typer.Option(
        None,
        "--from-json",
        help="JSON object of string attributes; -a values override it.",
        exists=True,
        dir_okay=False,
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Where to write the signature document (default: LICENSE_SIGNATURE_PATH or license.json).",
    ),
) -> None:
    """Sign a license and write the signature document."""
    settings = _settings()

    license_data = License()
    if from_json is not None:
        license_data.update(_read_attribute_file(from_json))
    for raw in attribute or []:
        key, value = _parse_attribute(raw)
        license_data.set(key, value)

    if license_data.has_reserved_characters():
        console.print("[yellow]Warning: attributes contain ':' or ','; distinct licenses may share a signature.[/yellow]")

    try:
        signer = Signer(load_private_key(private_key)) if private_key is not None else settings.load_signer()
        signature = signer.sign(license_data)
    except LicenseError as exc:
        raise _fail(str(exc)) from exc

    destination = output or settings.signature_path
    try:
        signature.save(destination)
    except OSError as exc:
        raise _fail(f"Failed to write {destination}: {exc}") from exc

    sys.stdout.write(signature.to_json() + "\n")
    console.print(f"[green]✓[/green] Signed {len(license_data)} attribute(s) -> {destination}")


# ---------------------------------------------------------------------------
# verify
# ---------------------------------------------------------------------------


@app.command()
def verify(
    signature_path: Path = typer.Argument(..., help="Signature document to check.", dir_okay=False),
    public_key: Path | None = typer.Option(
        None,
        "--public-key",
        "-p",
        help="PEM public key (default: LICENSE_PUBLIC_KEY_PATH / LICENSE_PUBLIC_KEY_B64).",
        dir_okay=False,
    ),
) -> None:
    """Verify a signature document against the authority's public key."""
    settings = _settings()
    try:
        verifier = Verifier(load_public_key(public_key)) if public_key is not None else settings.load_verifier()
        signature = load_signature(signature_path)
        verifier.verify(signature)
    except VerificationError as exc:
        display_verification(console, valid=False)
        raise typer.Exit(code=EXIT_INVALID) from exc
    except LicenseError as exc:
        raise _fail(str(exc)) from exc

    display_verification(console, valid=True)


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@app.command()
def show(
    signature_path: Path = typer.Argument(..., help="Signature document to display.", dir_okay=False),
    json_output: bool = typer.Option(False, "--json", help="Print the attributes as JSON on stdout."),
) -> None:
    """Display the attributes carried by a signature document (not verified)."""
    try:
        signature = load_signature(signature_path)
    except LicenseError as exc:
        raise _fail(str(exc)) from exc

    if json_output:
        sys.stdout.write(json.dumps(signature.license, indent=2, sort_keys=True) + "\n")
    else:
        display_license(console, signature, source=signature_path)


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (default: API_HOST or 0.0.0.0)."),
    port: int | None = typer.Option(None, "--port", help="Bind port (default: API_PORT or 8080)."),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes."),
) -> None:
    """Run the license server."""
    try:
        import uvicorn

        from api.config import load_api_settings
    except ImportError as exc:
        console.print(f"[red]Missing dependency: {exc}[/red]")
        raise typer.Exit(code=EXIT_ERROR) from exc

    api_settings = load_api_settings()
    bind_host = host or api_settings.host
    bind_port = port or api_settings.port

    uvicorn_config = uvicorn.Config(
        "api.main:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level="debug" if api_settings.debug else "info",
        access_log=False,
    )
    server = uvicorn.Server(uvicorn_config)

    console.print(f"[green]✓[/green] License server starting on http://{bind_host}:{bind_port}")
    console.print(f"[green]✓[/green] OpenAPI docs at http://{bind_host}:{bind_port}/docs")
    server.run()
