#!/usr/bin/env python3
"""
vf: CLI for importing notes vaults

Usage:
    vf import ~/vaults/campaign               # Import into ./vaultflow-store.json
    vf import ~/vaults/campaign --combine-notes --create-index-file
    vf tree ~/vaults/campaign                 # Preview the folder tree
    vf ids page "notes/my-note.md#my-note"   # Show deterministic identities
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, NoReturn

import click
from pydantic import ValidationError

from . import __version__ as VAULTFLOW_VERSION

log = logging.getLogger(__name__)

DEFAULT_STORE = "vaultflow-store.json"
DEFAULT_ASSETS = "vaultflow-assets"

GENERIC_FAILURE = "Unexpected error. Please see the log for more details."

# CLI flag name -> ImportSettings field, for boolean on/off switches.
SETTING_FLAGS = {
    "combine_notes": "Combine the notes of each folder into one entry",
    "combine_notes_no_subfolders": "Only combine folders without subfolders",
    "import_non_markdown": "Upload non-markdown files as assets",
    "overwrite": "Replace the body of pages that already exist",
    "ignore_duplicate": "Keep existing pages untouched instead of adding copies",
    "default_public": "Make new entries visible to everyone",
    "strip_callouts": "Remove callout blocks tagged with --callout-marker",
    "create_index_file": "Write an Index entry listing every note",
    "create_backlinks": "Append a References section with backlinks",
    "skip_duplicate_assets": "Reuse assets already present at the destination",
    "use_remote_storage": "Upload assets to a remote bucket",
    "convert_to_html": "Render pages to HTML after import",
}


def run_async(coro):
    """Run async function synchronously."""
    return asyncio.run(coro)


def _handle_error(ctx: click.Context, error: Exception, exit_code: int = 1) -> NoReturn:
    """Report an error once and exit.

    VaultflowErrors are expected and shown as-is. Anything else is logged
    with its traceback and the user gets a single generic line.
    """
    from .errors import ErrorCode, VaultflowError, format_error_json

    json_errors = ctx.obj.get("json_errors", False) if ctx.obj else False

    if isinstance(error, VaultflowError):
        log.debug("Import failed: %s", error.message)
        if json_errors:
            click.echo(error.to_json(), err=True)
        else:
            click.echo(f"Error: {error.message}", err=True)
    else:
        log.exception("Unexpected error during import")
        if json_errors:
            click.echo(format_error_json(ErrorCode.UNEXPECTED_ERROR, GENERIC_FAILURE), err=True)
        else:
            click.echo(f"Error: {GENERIC_FAILURE}", err=True)

    sys.exit(exit_code)


def _settings_flags(func):
    """Attach a --flag/--no-flag option for every boolean setting."""
    for name, help_text in reversed(SETTING_FLAGS.items()):
        flag = name.replace("_", "-")
        func = click.option(f"--{flag}/--no-{flag}", name, default=None, help=help_text)(func)
    return func


def build_settings(
    vault_dir: Path,
    *,
    config_path: Path | None,
    use_last: bool,
    overrides: dict[str, Any],
):
    """Layer last-used settings, the settings file and CLI overrides.

    Later layers win; options not given on the command line are left to
    the earlier layers.
    """
    from .config import discover_settings_file, load_last_settings, load_settings_file
    from .errors import ErrorCode, VaultflowError
    from .models import ImportSettings
    from .vault import scan_vault

    values: dict[str, Any] = {}
    if use_last:
        values.update(load_last_settings())

    settings_file = config_path or discover_settings_file()
    if settings_file is not None:
        log.debug("Using settings file %s", settings_file)
        values.update(load_settings_file(settings_file))

    values.update({key: value for key, value in overrides.items() if value is not None})
    values["vault_files"] = scan_vault(vault_dir)

    try:
        return ImportSettings.model_validate(values)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            errors.append(f"  - {loc}: {error['msg']}")
        raise VaultflowError(
            "Invalid settings:\n" + "\n".join(errors),
            code=ErrorCode.INVALID_SETTINGS,
        ) from e


# ─────────────────────────────────────────────────────────────────────────────
# Main CLI Group
# ─────────────────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version=VAULTFLOW_VERSION, prog_name="vf")
@click.option(
    "--json-errors",
    "json_errors",
    is_flag=True,
    help="Output errors as JSON (for programmatic use)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    envvar="VAULTFLOW_QUIET",
    help="Suppress progress logging, show only errors and essential output",
)
@click.pass_context
def cli(ctx: click.Context, json_errors: bool, quiet: bool):
    """vf: import a notes vault into a document store.

    \b
    Quick start:
      vf tree ~/vault                  # Preview what will be imported
      vf import ~/vault                # Import notes and assets
      vf import ~/vault --use-last     # Repeat with the previous settings

    \b
    Settings are read from .vaultflow.yaml (searched upward from the
    current directory, or VAULTFLOW_CONFIG) and overridden by flags.
    """
    from ._logging import configure_logging, set_quiet_mode

    configure_logging()

    ctx.ensure_object(dict)
    ctx.obj["json_errors"] = json_errors
    ctx.obj["quiet"] = quiet

    if quiet:
        set_quiet_mode(True)


@cli.command("import")
@click.argument("vault_dir", type=click.Path(path_type=Path))
@click.option(
    "--store",
    "store_path",
    type=click.Path(path_type=Path),
    default=DEFAULT_STORE,
    show_default=True,
    help="JSON file holding the document store",
)
@click.option(
    "--assets",
    "assets_dir",
    type=click.Path(path_type=Path),
    default=DEFAULT_ASSETS,
    show_default=True,
    help="Directory uploads are written to",
)
@click.option("--config", "config_path", type=click.Path(path_type=Path), help="Settings file")
@click.option("--use-last", is_flag=True, help="Start from the settings of the previous run")
@click.option("--root-folder", "root_folder_name", help="Folder every imported document nests under")
@click.option("--media-folder", help="Asset destination inside the asset storage")
@click.option("--callout-marker", help="Callout type removed by --strip-callouts (default: dm)")
@click.option("--remote-bucket", help="Bucket for --use-remote-storage")
@click.option("--remote-region", help="Region for --use-remote-storage")
@_settings_flags
@click.option("--json", "as_json", is_flag=True, help="Output the import report as JSON")
@click.pass_context
def import_cmd(
    ctx: click.Context,
    vault_dir: Path,
    store_path: Path,
    assets_dir: Path,
    config_path: Path | None,
    use_last: bool,
    as_json: bool,
    **overrides: Any,
):
    """Import VAULT_DIR into the document store.

    Re-running an import updates the documents the previous run created
    instead of duplicating them.

    \b
    Examples:
      vf import ~/vault --root-folder Campaign
      vf import ~/vault --combine-notes --no-combine-notes-no-subfolders
      vf import ~/vault --skip-duplicate-assets --media-folder maps
    """
    from .core import import_vault
    from .store import JsonDocumentStore, LocalAssetStorage

    try:
        settings = build_settings(
            vault_dir,
            config_path=config_path,
            use_last=use_last,
            overrides=overrides,
        )
        store = JsonDocumentStore(store_path)
        storage = LocalAssetStorage(assets_dir)
        report = run_async(import_vault(settings, store, storage))
    except Exception as e:
        _handle_error(ctx, e)

    if as_json:
        click.echo(json.dumps(report.model_dump(), indent=2))
    else:
        click.echo(report.message)


@cli.command()
@click.argument("vault_dir", type=click.Path(path_type=Path))
@click.pass_context
def tree(ctx: click.Context, vault_dir: Path):
    """Show the folder tree an import of VAULT_DIR would create.

    Notes are marked '*', other files '-'. Hidden and canvas files are left out.
    """
    from .tree import build_tree
    from .vault import scan_vault

    try:
        root = build_tree(scan_vault(vault_dir))
    except Exception as e:
        _handle_error(ctx, e)

    lines = root.render()
    click.echo("\n".join(lines) if lines else "(empty vault)")


@cli.command()
@click.argument("namespace", type=click.Choice(["folder", "journal", "page"]))
@click.argument("paths", nargs=-1, required=True)
def ids(namespace: str, paths: tuple[str, ...]):
    """Print the deterministic identity of each PATH in NAMESPACE.

    \b
    Examples:
      vf ids journal notes/my-note.md
      vf ids page "notes/my-note.md#my-note"
    """
    from .identity import identity

    for path in paths:
        click.echo(f"{identity(namespace, path)}  {path}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
