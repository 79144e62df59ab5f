"""
templit.host.protocol
=====================

JSON-lines bridge for hosts that live in another process (an editor plugin
written in another language, a language server, a test harness). One request
per line in, one reply per line out. Requests carry a snapshot of the lines
they need, so the bridge holds no document state between requests.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import BinaryIO, TypeAlias

import msgspec
import msgspec.json

from templit.convert import convert
from templit.core import CursorQuery, LineTextOf, LiteralBoundary
from templit.edits import TextEdit, edits_for_batch
from templit.host.events import ChangeEvent, TextChange
from templit.host.handler import ConversionHandler, OutcomeStatus
from templit.literal.locate import locate
from templit.profile import Profile, default_profile, get_profile
from templit.reporting.notify import CollectingNotifier, conversion_message

# -----------------------------------------------------------------------------
# Messages
# -----------------------------------------------------------------------------


class LocateRequest(msgspec.Struct, tag="locate", frozen=True):
    line_text: str
    column: int
    line: int = 0
    profile: str | None = None


class ConvertRequest(msgspec.Struct, tag="convert", frozen=True):
    cursors: list[CursorQuery]
    lines: dict[int, str]
    profile: str | None = None


class ChangeRequest(msgspec.Struct, tag="change", frozen=True):
    document_id: str
    changes: list[TextChange]
    cursors: list[CursorQuery]
    lines: dict[int, str]
    active_document_id: str | None = None
    profile: str | None = None


class LocateReply(msgspec.Struct, tag="located", frozen=True):
    literal: LiteralBoundary | None


class BatchReply(msgspec.Struct, tag="batch", frozen=True):
    status: OutcomeStatus
    literals: list[LiteralBoundary] = msgspec.field(default_factory=list)
    edits: list[TextEdit] = msgspec.field(default_factory=list)
    message: str | None = None


class ErrorReply(msgspec.Struct, tag="error", frozen=True):
    message: str


Request: TypeAlias = LocateRequest | ConvertRequest | ChangeRequest
Reply: TypeAlias = LocateReply | BatchReply | ErrorReply

_DECODER = msgspec.json.Decoder(Request)
_ENCODER = msgspec.json.Encoder()


# -----------------------------------------------------------------------------
# Snapshot-backed host collaborators
# -----------------------------------------------------------------------------


def _line_lookup(lines: dict[int, str]) -> LineTextOf:
    def line_text(line: int) -> str:
        try:
            return lines[line]
        except KeyError:
            raise KeyError(f"line {line} missing from request snapshot") from None

    return line_text


@dataclass(slots=True)
class SnapshotEditor:
    document_id: str
    lines: dict[int, str]
    cursor_list: list[CursorQuery]

    def line_text(self, line: int) -> str:
        return _line_lookup(self.lines)(line)

    def cursors(self) -> Sequence[CursorQuery]:
        return tuple(self.cursor_list)


@dataclass(slots=True)
class RecordingApplier:
    """Accepts every edit and remembers it; the remote host applies them."""

    applied: list[TextEdit] = field(default_factory=list)

    def apply(self, edits: Sequence[TextEdit]) -> bool:
        self.applied.extend(edits)
        return True


# -----------------------------------------------------------------------------
# Dispatch
# -----------------------------------------------------------------------------


def _profile_for(name: str | None, fallback: Profile | None) -> Profile:
    if name is not None:
        return get_profile(name)
    return fallback or default_profile()


def handle_request(req: Request, profile: Profile | None = None) -> Reply:
    """Answer one request. Raises KeyError/ValueError on inconsistent input."""
    prof = _profile_for(req.profile, profile)

    if isinstance(req, LocateRequest):
        lit = locate(
            req.line_text,
            req.column,
            line=req.line,
            quotes=prof.recognized_quotes,
            escape=prof.escape_char,
        )
        return LocateReply(literal=lit)

    if isinstance(req, ConvertRequest):
        batch = convert(req.cursors, _line_lookup(req.lines), profile=prof)
        return BatchReply(
            status=OutcomeStatus.APPLIED if batch else OutcomeStatus.NO_LITERAL,
            literals=list(batch),
            edits=list(edits_for_batch(batch, prof.target_delimiter)),
            message=conversion_message(len(batch)) if batch else None,
        )

    editor = (
        SnapshotEditor(req.active_document_id, req.lines, req.cursors)
        if req.active_document_id is not None
        else None
    )
    applier = RecordingApplier()
    notifier = CollectingNotifier()
    handler = ConversionHandler(applier, notifier, prof)
    outcome = handler.handle(ChangeEvent(req.document_id, tuple(req.changes)), editor)
    return BatchReply(
        status=outcome.status,
        literals=list(outcome.batch),
        edits=list(outcome.edits),
        message=notifier.messages[-1] if notifier.messages else None,
    )


def decode_request(raw: bytes | str) -> Request:
    return _DECODER.decode(raw)


def encode_reply(reply: Reply) -> bytes:
    return _ENCODER.encode(reply) + b"\n"


def answer(raw: bytes | str, profile: Profile | None = None) -> Reply:
    """Decode and handle one line; any malformed input becomes an ErrorReply."""
    try:
        return handle_request(decode_request(raw), profile)
    except msgspec.DecodeError as e:
        return ErrorReply(message=f"invalid request: {e}")
    except (KeyError, ValueError) as e:
        return ErrorReply(message=str(e.args[0]) if e.args else type(e).__name__)


def serve(reader: BinaryIO | Iterable[bytes], writer: BinaryIO, profile: Profile | None = None) -> int:
    """Answer requests until `reader` is exhausted. Returns the number answered."""
    n = 0
    for raw in reader:
        if not raw.strip():
            continue
        writer.write(encode_reply(answer(raw, profile)))
        writer.flush()
        n += 1
    return n
