from __future__ import annotations

import sys
from pathlib import Path

import typer
from rich.console import Console

from templit.core import CursorQuery
from templit.document import Document, DocumentEditor
from templit.host.handler import ConversionHandler, OutcomeStatus
from templit.host.protocol import serve as serve_json_lines
from templit.literal.locate import locate as locate_literal
from templit.profile import Profile, default_profile, find_config, get_profile, load_profile
from templit.reporting.diagnostics import Emitter, literal_span
from templit.reporting.notify import RichNotifier
from templit.reporting.warnings_bridge import install_warnings_bridge

app = typer.Typer(help="Turn the string literal around the cursor into a template literal")


def parse_cursor(value: str) -> CursorQuery:
    """`L:C`, 1-indexed; column C puts the cursor before the C-th character."""
    line_s, sep, col_s = value.partition(":")
    if not sep or not line_s.isdigit() or not col_s.isdigit():
        raise typer.BadParameter(f"expected LINE:COLUMN, got {value!r}")
    line, col = int(line_s), int(col_s)
    if line < 1 or col < 1:
        raise typer.BadParameter(f"LINE and COLUMN are 1-indexed, got {value!r}")
    return CursorQuery(line - 1, col - 1)


def resolve_profile(file: Path | None, name: str | None, config: Path | None) -> Profile:
    inferred = default_profile(file)
    cfg_path = config or find_config(file.resolve() if file is not None else Path.cwd())
    if cfg_path is None:
        return get_profile(name) if name is not None else inferred
    return load_profile(cfg_path, base=name, fallback=inferred)


def _load(file: Path, at: list[str]) -> Document:
    try:
        doc = Document.from_file(file)
    except ValueError as e:
        # empty file, or not text in the expected encoding
        raise typer.BadParameter(str(e), param_hint="FILE") from None
    cursors = [parse_cursor(s) for s in at]
    for c in cursors:
        if c.line >= len(doc.lines) or c.column > len(doc.lines[c.line]):
            raise typer.BadParameter(
                f"{c.line + 1}:{c.column + 1} is outside {file}", param_hint="--at"
            )
    doc.set_cursors(cursors)
    return doc


@app.command()
def locate(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Source file"),
    at: str = typer.Option(..., "--at", help="Cursor as LINE:COLUMN (1-indexed)"),
    profile: str | None = typer.Option(None, help="Profile name (default: inferred from suffix)"),
    config: Path | None = typer.Option(None, help="Config file (.templit.toml or pyproject.toml)"),
):
    """Show the string literal enclosing the cursor."""
    prof = resolve_profile(file, profile, config)
    doc = _load(file, [at])
    cursor = doc.cursors[0]
    lit = locate_literal(
        doc.line_text(cursor.line),
        cursor.column,
        line=cursor.line,
        quotes=prof.recognized_quotes,
        escape=prof.escape_char,
    )
    if lit is None:
        typer.echo(f"No string literal at {at}", err=True)
        raise typer.Exit(code=1)

    source = doc.source()
    Emitter(Console()).info(
        f"{lit.quote}-quoted string, columns {lit.start + 1}-{lit.end + 1}",
        source,
        literal_span(source, lit),
    )


@app.command()
def convert(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Source file"),
    at: list[str] = typer.Option(..., "--at", help="Cursor as LINE:COLUMN (1-indexed); repeatable"),
    write: bool = typer.Option(False, help="Rewrite FILE in place instead of printing"),
    profile: str | None = typer.Option(None, help="Profile name (default: inferred from suffix)"),
    config: Path | None = typer.Option(None, help="Config file (.templit.toml or pyproject.toml)"),
    frames: bool | None = typer.Option(None, help="Show a code frame per converted literal"),
):
    """Convert the literals around the given cursors to template literals."""
    prof = resolve_profile(file, profile, config)
    if frames is not None:
        prof = prof.evolve(show_frames=frames)

    doc = _load(file, at)
    emitter = Emitter(Console(stderr=True))
    notifier = RichNotifier(emitter, source_of=doc.source if prof.show_frames else None)
    editor = DocumentEditor(doc)
    handler = ConversionHandler(editor, notifier, prof)

    uninstall = install_warnings_bridge(emitter=emitter)
    try:
        outcome = handler.run(editor)
    finally:
        uninstall()

    if outcome.status is OutcomeStatus.NO_LITERAL:
        typer.echo("No convertible string literal at the given cursor(s)", err=True)
        raise typer.Exit(code=1)
    if outcome.status is OutcomeStatus.REJECTED:
        raise typer.Exit(code=2)

    if write:
        doc.write()
    else:
        typer.echo(doc.text, nl=False)


@app.command()
def serve(
    profile: str | None = typer.Option(None, help="Profile for requests that don't name one"),
    config: Path | None = typer.Option(None, help="Config file (.templit.toml or pyproject.toml)"),
):
    """Answer JSON-lines requests on stdin until EOF."""
    prof = resolve_profile(None, profile, config)
    serve_json_lines(sys.stdin.buffer, sys.stdout.buffer, prof)


if __name__ == "__main__":
    app()
