#!/usr/bin/env python3

"""Command line front end: docport [OPTIONS] RUST_SRCS..."""

import glob
import json
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from docport.config import DocPortConfig
from docport.console import Console
from docport.models import SymbolKind
from docport.pipeline import run_pipeline

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bk"


def expand_patterns(patterns: tuple[str, ...] | list[str], console: Console) -> list[Path]:
    """Expand glob patterns (``**`` is recursive), keeping first-seen order."""
    paths: list[Path] = []
    seen: set[Path] = set()
    for pattern in patterns:
        if glob.has_magic(pattern):
            matches = [Path(match) for match in sorted(glob.glob(pattern, recursive=True))]
            matches = [match for match in matches if match.is_file()]
            if not matches:
                console.print(f"[yellow]No files match {pattern}[/yellow]")
        else:
            matches = [Path(pattern)]
        for match in matches:
            if match not in seen:
                seen.add(match)
                paths.append(match)
    return paths


def read_sources(paths: list[Path], console: Console) -> dict[str, str]:
    """Read files as UTF-8 without newline translation; unreadable files are skipped."""
    sources: dict[str, str] = {}
    for path in paths:
        try:
            with open(path, encoding="utf-8", newline="") as f:
                sources[str(path)] = f.read()
        except (OSError, UnicodeDecodeError) as e:
            console.print(f"[yellow]Skipping {path}: {e}[/yellow]")
    return sources


def write_source(path: Path, text: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def backup_path(path: Path) -> Path:
    """ffi.rs is backed up as ffi.bk."""
    return path.with_suffix(BACKUP_SUFFIX)


def load_config(config_path: Path | None) -> DocPortConfig:
    try:
        if config_path is not None:
            return DocPortConfig.load_from_file(config_path)
        return DocPortConfig.find_config(Path.cwd()) or DocPortConfig()
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise click.UsageError(f"Invalid configuration: {e}") from e


@click.command()
@click.argument("rust_srcs", nargs=-1, required=True)
@click.option(
    "-c",
    "--c-srcs",
    "c_srcs",
    multiple=True,
    help="C sources to take documentation from (glob, repeatable)",
)
@click.option("-i", "--in-place", is_flag=True, help="Rewrite Rust sources in place")
@click.option("-b", "--backup", is_flag=True, help="Keep the original with a .bk extension (needs -i)")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file (default: nearest docport_config.json)",
)
@click.option(
    "-k",
    "--kind",
    "kinds",
    multiple=True,
    type=click.Choice([kind.value for kind in SymbolKind], case_sensitive=False),
    help="C declaration kind to index (repeatable, overrides the configuration)",
)
@click.option("-j", "--jobs", default=1, type=click.IntRange(min=1), help="Parallel scan threads")
@click.option("--strict", is_flag=True, help="Exit with status 1 if warnings were reported")
@click.option("-v", "--verbose", is_flag=True, help="Show unmatched aliases and debug logs")
def main(
    rust_srcs: tuple[str, ...],
    c_srcs: tuple[str, ...],
    in_place: bool,
    backup: bool,
    config_path: Path | None,
    kinds: tuple[str, ...],
    jobs: int,
    strict: bool,
    verbose: bool,
):
    """Import C doc comments into Rust items annotated with #[doc(alias = "...")]."""
    if backup and not in_place:
        raise click.UsageError("--backup requires --in-place")

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    console = Console()
    config = load_config(config_path).with_kinds([kind.lower() for kind in kinds])
    logger.debug("Using configuration %s", config)

    rust_sources = read_sources(expand_patterns(rust_srcs, console), console)
    c_sources = read_sources(expand_patterns(c_srcs, console), console)

    with console.status("Importing documentation..."):
        report = run_pipeline(rust_sources, c_sources, config, jobs=jobs)

    console.report(report.diagnostics, verbose=verbose)

    for result in report.rewrites:
        if not in_place:
            click.echo(f"{result.file_id}:")
            click.echo(result.text, nl=False)
            continue
        if not result.changed:
            continue
        path = Path(result.file_id)
        if backup:
            write_source(backup_path(path), rust_sources[result.file_id])
        write_source(path, result.text)
        logger.debug("Wrote %s", path)

    console.print(
        f"{report.sites} alias sites, {report.entries} documented C symbols, "
        f"{report.insertions} doc blocks imported into {len(report.changed_files)} files"
    )

    if strict and report.warnings:
        console.print(f"[red]{len(report.warnings)} warnings[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
