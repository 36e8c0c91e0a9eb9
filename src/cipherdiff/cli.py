"""cipherdiff CLI — Typer application with encrypt, decrypt, status, and init commands."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from cipherdiff import __version__

app = typer.Typer(
    name="cipherdiff",
    help="Encrypt files line by line without wrecking your git diffs.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

_FORMATS = ("terminal", "json")


def _configure_logging(verbose: bool, debug: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=debug, show_time=debug)],
        force=True,
    )


def _load(config: Optional[str]):
    """Load config for the current workspace, exit 2 on failure."""
    from cipherdiff.config.loader import ConfigError, load_config

    workspace = Path.cwd()
    try:
        return workspace, load_config(workspace, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _cipher(cfg):
    from cipherdiff.cipher import CipherError, apply_key_file_encoding, build_cipher
    from cipherdiff.config.loader import ConfigError

    try:
        apply_key_file_encoding(cfg)
        return build_cipher(cfg.cipher)
    except (ConfigError, CipherError) as exc:
        console.print(f"[bold red]Cipher error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _check_format(format: str) -> None:
    if format not in _FORMATS:
        console.print(f"[bold red]Invalid format:[/bold red] {format}")
        raise typer.Exit(code=2)


def _run(
    operation_name: str,
    path: str,
    config: Optional[str],
    format: str,
    verbose: bool,
    debug: bool,
    no_diff: bool = False,
) -> None:
    from cipherdiff.output import json_report, terminal
    from cipherdiff.pipeline import FileProcessor, Operation, ProcessError

    _configure_logging(verbose, debug)
    _check_format(format)
    workspace, cfg = _load(config)
    if no_diff:
        cfg.git.diff_aware = False

    processor = FileProcessor(_cipher(cfg), cfg, workspace)
    operation = Operation(operation_name)

    try:
        result = asyncio.run(processor.process_path(path, operation))
    except ProcessError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if format == "json":
        print(json_report.render(result))
    else:
        terminal.render(result, show_summary=verbose or debug, console=console)

    if not result.ok:
        raise typer.Exit(code=1)


# ── encrypt ───────────────────────────────────────────────────────────────────


@app.command()
def encrypt(
    path: str = typer.Argument(".", help="File or directory to encrypt"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .cipherdiff.toml"),
    format: str = typer.Option("terminal", "--format", "-f", help="Output format: terminal | json"),
    no_diff: bool = typer.Option(False, "--no-diff", help="Re-encrypt every line, ignoring git history"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging"),
) -> None:
    """Encrypt files, reusing committed ciphertext for unchanged lines."""
    _run("encrypt", path, config, format, verbose, debug, no_diff=no_diff)


# ── decrypt ───────────────────────────────────────────────────────────────────


@app.command()
def decrypt(
    path: str = typer.Argument(".", help="File or directory to decrypt"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .cipherdiff.toml"),
    format: str = typer.Option("terminal", "--format", "-f", help="Output format: terminal | json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging"),
) -> None:
    """Decrypt files in place (text) or from their .enc counterparts (binary)."""
    _run("decrypt", path, config, format, verbose, debug)


# ── status ────────────────────────────────────────────────────────────────────


@app.command()
def status(
    file: str = typer.Argument(..., help="Plaintext file to compare against its committed version"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .cipherdiff.toml"),
    format: str = typer.Option("terminal", "--format", "-f", help="Output format: terminal | json"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging"),
) -> None:
    """Show which lines the next encrypt would reuse and which it would re-encrypt."""
    import json

    from cipherdiff.engine import EncryptionContextBuilder
    from cipherdiff.lines import split_lines
    from cipherdiff.output import json_report, terminal
    from cipherdiff.pipeline.paths import normalize_encoding

    _configure_logging(False, debug)
    _check_format(format)
    workspace, cfg = _load(config)
    cipher = _cipher(cfg)
    encoding, _ = normalize_encoding(cfg.files.encoding)

    path = Path(file)
    if not path.is_absolute():
        path = workspace / path
    try:
        content = path.read_bytes().decode(encoding)
    except (OSError, UnicodeDecodeError) as exc:
        console.print(f"[bold red]Error:[/bold red] cannot read {file}: {exc}")
        raise typer.Exit(code=2) from exc

    builder = EncryptionContextBuilder.for_workspace(workspace)
    context = asyncio.run(builder.create_encryption_context(path, content, cipher, encoding))
    lines = split_lines(content)

    if format == "json":
        print(json.dumps(json_report.context_to_dict(file, lines, context), indent=2))
    else:
        terminal.render_context(file, lines, context, console=console)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    ignore: bool = typer.Option(False, "--ignore", help="Also write a starter ignore file"),
) -> None:
    """Generate a starter .cipherdiff.toml in the current directory."""
    from cipherdiff.config.defaults import CONFIG_FILENAME, DEFAULT_IGNORE_PATTERNS, DEFAULT_TOML
    from cipherdiff.config.schema import FilesConfig

    workspace = Path.cwd()
    config_path = workspace / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")

    if ignore:
        ignore_path = workspace / FilesConfig().ignore_file
        if ignore_path.exists():
            console.print(f"[yellow]⚠[/yellow]  {ignore_path.name} already exists, left unchanged")
        else:
            ignore_path.write_text("\n".join(DEFAULT_IGNORE_PATTERNS) + "\n", encoding="utf-8")
            console.print(f"[green]✓[/green] Created {ignore_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"cipherdiff {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """cipherdiff — line-level encryption that keeps git diffs meaningful."""
