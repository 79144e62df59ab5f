from __future__ import annotations

import re
import tomllib
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, fields, replace
from enum import StrEnum
from pathlib import Path
from typing import Any

from templit.core import DEFAULT_QUOTES, ESCAPE_CHAR, QuoteChar

"""
This module defines a data-driven Profile describing which literals get
converted, into what, and on which trigger, for the languages we support.
"""

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ProfileId(StrEnum):
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"


DEFAULT_TRIGGER = "${"

CONFIG_BASENAME = ".templit.toml"
PYPROJECT_BASENAME = "pyproject.toml"
PYPROJECT_TABLE = "templit"  # [tool.templit]


# ---------------------------------------------------------------------------
# Profile dataclass (immutable config bag)
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Profile:
    # --- identity ---
    id: ProfileId

    # --- scanning ---
    recognized_quotes: frozenset[QuoteChar]
    escape_char: str

    # --- conversion ---
    convertible_quotes: frozenset[QuoteChar]
    target_delimiter: QuoteChar
    trigger: str

    # --- reporting ---
    notify_on_convert: bool = True
    show_frames: bool = False

    def __post_init__(self) -> None:
        if len(self.trigger) < 2:
            raise ValueError(
                f"Profile.trigger must be at least two characters (got {self.trigger!r})"
            )
        if len(self.escape_char) != 1:
            raise ValueError(
                f"Profile.escape_char must be a single character (got {self.escape_char!r})"
            )
        if self.target_delimiter in self.convertible_quotes:
            raise ValueError(
                f"Profile.target_delimiter {self.target_delimiter!r} cannot also be convertible"
            )
        if not self.convertible_quotes <= self.recognized_quotes:
            raise ValueError("Profile.convertible_quotes must be a subset of recognized_quotes")

    # Convenience: immutable evolve helper for overrides
    def evolve(self, **overrides: Any) -> Profile:
        _validate_override_keys(Profile, overrides)
        return replace(self, **_coerce_overrides(overrides))

    @property
    def trigger_prefix(self) -> str:
        """Text that must already precede the insertion point."""
        return self.trigger[:-1]

    @property
    def trigger_char(self) -> str:
        """The single character whose insertion fires a conversion."""
        return self.trigger[-1]


# ---------------------------------------------------------------------------
# Override coercion (TOML/JSON give us lists and plain strings)
# ---------------------------------------------------------------------------

def _as_quote_set(value: Iterable[str]) -> frozenset[QuoteChar]:
    if isinstance(value, str):
        value = list(value)
    return frozenset(QuoteChar(v) for v in value)


_COERCERS: dict[str, Callable[[Any], Any]] = {
    "id": ProfileId,
    "recognized_quotes": _as_quote_set,
    "convertible_quotes": _as_quote_set,
    "target_delimiter": QuoteChar,
}


def _coerce_overrides(overrides: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in overrides.items():
        coerce = _COERCERS.get(key)
        out[key] = coerce(value) if coerce is not None else value
    return out


# ---------------------------------------------------------------------------
# Factories (built-ins)
# ---------------------------------------------------------------------------

def make_javascript_profile(overrides: Mapping[str, Any] | None = None) -> Profile:
    base = Profile(
        id=ProfileId.JAVASCRIPT,
        recognized_quotes=frozenset(DEFAULT_QUOTES),
        escape_char=ESCAPE_CHAR,
        convertible_quotes=frozenset(DEFAULT_QUOTES),
        target_delimiter=QuoteChar.BACKTICK,
        trigger=DEFAULT_TRIGGER,
    )
    return base.evolve(**(overrides or {}))


def make_typescript_profile(overrides: Mapping[str, Any] | None = None) -> Profile:
    # Same literal rules as JavaScript; kept separate so users can clone either.
    return make_javascript_profile(overrides).evolve(id=ProfileId.TYPESCRIPT)


# ---------------------------------------------------------------------------
# Registry helpers (clone_profile, get_profile, list, infer, default)
# ---------------------------------------------------------------------------

_FACTORY_BY_ID: dict[ProfileId, Callable[[Mapping[str, Any] | None], Profile]] = {
    ProfileId.JAVASCRIPT: make_javascript_profile,
    ProfileId.TYPESCRIPT: make_typescript_profile,
}

# Lazily-filled registry: built-ins added on first access; customs on clone.
_PROFILE_REGISTRY: dict[str, Profile] = {}
_RESERVED_NAMES: frozenset[str] = frozenset(pid.value for pid in ProfileId)
_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _normalize_name(name: str) -> str:
    return name.strip().lower()


def _validate_custom_name(name: str) -> None:
    if name in _RESERVED_NAMES:
        raise ValueError(
            f"Profile name '{name}' is reserved for built-ins; choose a different name."
        )
    if not _NAME_RE.match(name):
        raise ValueError(
            "Profile names must follow C identifier rules: start with a letter or underscore, "
            "then letters/digits/underscores only."
        )


def _validate_override_keys(cls: type[Profile], overrides: Mapping[str, Any] | None) -> None:
    if not overrides:
        return
    allowed = {f.name for f in fields(cls)}
    unknown = [k for k in overrides.keys() if k not in allowed]
    if unknown:
        raise KeyError("Unknown Profile override keys: " + ", ".join(sorted(unknown)))


def _get_or_create_builtin(pid: ProfileId) -> Profile:
    key = pid.value
    prof = _PROFILE_REGISTRY.get(key)
    if prof is None:
        prof = _FACTORY_BY_ID[pid](None)
        _PROFILE_REGISTRY[key] = prof
    return prof


def get_profile(name_or_id: str | ProfileId) -> Profile:
    """Fetch a profile by custom name or by built-in id (string or enum).

    Built-ins are created lazily on first access and then cached.
    """
    if isinstance(name_or_id, ProfileId):
        return _get_or_create_builtin(name_or_id)

    key = _normalize_name(name_or_id)

    prof = _PROFILE_REGISTRY.get(key)
    if prof is not None:
        return prof

    try:
        pid = ProfileId(key)
    except ValueError:
        raise KeyError(f"Unknown profile: {name_or_id!r}") from None

    return _get_or_create_builtin(pid)


def clone_profile(
    new_name: str, /, *, base: str | ProfileId, overrides: Mapping[str, Any] | None = None
) -> Profile:
    """Create and register a custom profile by cloning an existing one.

    - new_name: must follow C identifier rules (case-insensitive; stored lowercase)
    - base: an existing custom name or a built-in id (e.g., "typescript")
    - overrides: dict of Profile field overrides (validated)
    """
    name = _normalize_name(new_name)
    _validate_custom_name(name)

    if name in _PROFILE_REGISTRY:
        raise ValueError(f"A profile named '{name}' already exists. Choose a different name.")

    prof = get_profile(base).evolve(**(overrides or {}))
    _PROFILE_REGISTRY[name] = prof
    return prof


def list_profiles() -> Iterable[str]:
    """Names currently in the registry (customs + any built-ins that were accessed), sorted."""
    return sorted(_PROFILE_REGISTRY.keys())


# Extension mapping for inference
_EXT_TO_ID: dict[str, ProfileId] = {
    ".js": ProfileId.JAVASCRIPT,
    ".mjs": ProfileId.JAVASCRIPT,
    ".cjs": ProfileId.JAVASCRIPT,
    ".jsx": ProfileId.JAVASCRIPT,
    ".ts": ProfileId.TYPESCRIPT,
    ".mts": ProfileId.TYPESCRIPT,
    ".cts": ProfileId.TYPESCRIPT,
    ".tsx": ProfileId.TYPESCRIPT,
}


def infer_profile(path: Path) -> Profile:
    pid = _EXT_TO_ID.get(path.suffix.lower(), ProfileId.JAVASCRIPT)
    return get_profile(pid)


def default_profile(path: Path | None = None) -> Profile:
    if path is None:
        return get_profile(ProfileId.JAVASCRIPT)
    return infer_profile(path)


# ---------------------------------------------------------------------------
# TOML configuration
# ---------------------------------------------------------------------------

def find_config(start: Path) -> Path | None:
    """
    Walk from `start` up to the filesystem root and return the first
    `.templit.toml`, or `pyproject.toml` carrying a [tool.templit] table.
    """
    here = start if start.is_dir() else start.parent
    for d in (here, *here.parents):
        candidate = d / CONFIG_BASENAME
        if candidate.is_file():
            return candidate
        pyproject = d / PYPROJECT_BASENAME
        if pyproject.is_file() and PYPROJECT_TABLE in _read_toml(pyproject).get("tool", {}):
            return pyproject
    return None


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def read_overrides(path: Path) -> dict[str, Any]:
    """Profile overrides from a config file; `profile` names the base, if present."""
    data = _read_toml(path)
    if path.name == PYPROJECT_BASENAME:
        data = data.get("tool", {}).get(PYPROJECT_TABLE, {})
    if not isinstance(data, dict):
        raise ValueError(f"Expected a table of Profile overrides in {path}")
    return dict(data)


def load_profile(
    path: Path, base: str | ProfileId | None = None, fallback: Profile | None = None
) -> Profile:
    """
    Apply the overrides in `path` to a base profile: `base` if given, else the
    file's own `profile` key, else `fallback`, else the default profile.
    """
    overrides = read_overrides(path)
    file_base = overrides.pop("profile", None)
    base_name = base if base is not None else file_base
    if base_name is not None:
        prof = get_profile(base_name)
    else:
        prof = fallback or default_profile()
    return prof.evolve(**overrides)


__all__ = [
    "Profile",
    "ProfileId",
    "DEFAULT_TRIGGER",
    "make_javascript_profile",
    "make_typescript_profile",
    "get_profile",
    "clone_profile",
    "list_profiles",
    "infer_profile",
    "default_profile",
    "find_config",
    "read_overrides",
    "load_profile",
]
