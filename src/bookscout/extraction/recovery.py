# ABOUTME: Best-effort recovery of a JSON object from raw language-model output.
# ABOUTME: Handles markdown fences, surrounding prose, and responses truncated mid-token.

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

# How much of the original text a failure carries for diagnostics.
_PREVIEW_LIMIT = 1200

_FENCE_OPEN_RE = re.compile(r"^\s*```[A-Za-z0-9_-]*[ \t]*\n?")
_FENCE_CLOSE_RE = re.compile(r"\n?[ \t]*```\s*$")

_CLOSERS = {"{": "}", "[": "]"}
_OPENERS = {"}": "{", "]": "["}
# Characters that can end a complete value or a structural token.
_VALUE_END = frozenset('",:[]{}')


class FailureReason(str, Enum):
    """Why no JSON object could be recovered."""

    NON_OBJECT = "non_object"
    TRUNCATED_UNRECOVERABLE = "truncated_unrecoverable"
    NO_OBJECT_FOUND = "no_object_found"


@dataclass(frozen=True)
class RecoveryFailure:
    """A typed recovery failure with enough context to diagnose the model output.

    Attributes:
        reason: Which stage gave up.
        preview: The first characters of the original text.
        finish_reason: The model's finish reason, when the caller knows it.
        usage: Token usage metadata reported alongside the output, if any.
    """

    reason: FailureReason
    preview: str
    finish_reason: str | None = None
    usage: dict[str, Any] | None = None

    @property
    def output_truncated(self) -> bool:
        """Whether the model itself reported stopping at its token limit."""
        return self.finish_reason == "MAX_TOKENS"


@dataclass
class _Frame:
    """An open bracket seen while scanning, with its structural bookkeeping."""

    opener: str
    position: int
    last_comma: int | None = None
    # Whether a ':' appeared since the opener or the last comma.
    colon_seen: bool = False


@dataclass
class _ScanState:
    stack: list[_Frame] = field(default_factory=list)
    in_string: bool = False
    escaped: bool = False
    closed_at: int | None = None


def strip_code_fence(text: str) -> str:
    """Remove a leading ```lang fence and a trailing ``` fence, if present."""
    cleaned = _FENCE_OPEN_RE.sub("", text.strip(), count=1)
    cleaned = _FENCE_CLOSE_RE.sub("", cleaned, count=1)
    return cleaned.strip()


def _parse_object(text: str) -> dict[str, Any] | None:
    """Parse text as JSON, returning it only when it is an object."""
    try:
        parsed = json.loads(text)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def _scan(text: str) -> _ScanState:
    """Track string/escape state and the bracket stack across text.

    Brackets, commas and colons inside quoted strings are ignored. Scanning
    stops once the outermost container closes.
    """
    state = _ScanState()
    escaped = False
    for i, ch in enumerate(text):
        if state.in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                state.in_string = False
            continue

        if ch == '"':
            state.in_string = True
        elif ch in _CLOSERS:
            state.stack.append(_Frame(opener=ch, position=i))
        elif ch in _OPENERS:
            if state.stack and state.stack[-1].opener == _OPENERS[ch]:
                state.stack.pop()
                if not state.stack:
                    state.closed_at = i
                    return state
        elif ch == "," and state.stack:
            state.stack[-1].last_comma = i
            state.stack[-1].colon_seen = False
        elif ch == ":" and state.stack:
            state.stack[-1].colon_seen = True
    state.escaped = escaped
    return state


def _cut_fragment(text: str, stack: list[_Frame]) -> tuple[str, list[_Frame]]:
    """Discard the trailing fragment back to the innermost usable comma.

    A container with no comma of its own is dropped as a whole and the cut
    moves to its parent, so no partially-built value survives. The outermost
    container is never dropped; without a comma it is emptied instead.
    """
    for depth in range(len(stack) - 1, -1, -1):
        frame = stack[depth]
        if frame.last_comma is not None:
            return text[: frame.last_comma], stack[: depth + 1]
        if depth == 0:
            return text[: frame.position + 1], stack[:1]
    return text, stack


def _repair(text: str, *, drop_tail: bool) -> str | None:
    """Close a truncated JSON object.

    An open string is closed where it was cut. A bare number or literal
    ending the text is discarded, even if it happens to be complete, since
    "0" may be the start of "0.85".

    Args:
        text: Text starting at the first '{'.
        drop_tail: Always discard the trailing fragment instead of keeping
            the last (possibly partial) value.

    Returns:
        The repaired text, or None if there is nothing to repair.
    """
    state = _scan(text)
    if state.closed_at is not None:
        return text[: state.closed_at + 1]
    if not state.stack:
        return None

    body = text
    if state.in_string:
        if state.escaped:
            # A lone trailing backslash would escape the closing quote.
            body = body[:-1]
        body += '"'

    stack = state.stack
    innermost = stack[-1]
    stripped = body.rstrip()
    if drop_tail:
        body, stack = _cut_fragment(body, stack)
    elif stripped.endswith(","):
        body = stripped[:-1]
    elif not state.in_string and stripped[-1:] not in _VALUE_END:
        # A bare number or literal at the cut may be missing digits or letters.
        body, stack = _cut_fragment(body, stack)
    elif innermost.opener == "{" and (stripped.endswith(":") or not innermost.colon_seen):
        # Dangling key: '"key":' with no value, or '"key"' with no colon.
        body, stack = _cut_fragment(body, stack)

    repaired = body.rstrip() + "".join(_CLOSERS[f.opener] for f in reversed(stack))
    if not repaired.endswith("}"):
        repaired += "}"
    return repaired


def recover(
    raw_text: str | None,
    *,
    finish_reason: str | None = None,
    usage: dict[str, Any] | None = None,
) -> dict[str, Any] | RecoveryFailure:
    """Recover a JSON object from raw model output.

    Tries, in order: the fence-stripped text as-is, the slice between the
    first '{' and the last '}', then truncation repair. Never raises for
    malformed input; the caller decides whether a failure is fatal.

    Args:
        raw_text: Model output, possibly fenced, wrapped in prose, or truncated.
        finish_reason: The model's finish reason, carried into failures.
        usage: Token usage metadata, carried into failures.

    Returns:
        The parsed object, or a RecoveryFailure describing why none was found.
    """
    text = raw_text or ""

    def failure(reason: FailureReason) -> RecoveryFailure:
        return RecoveryFailure(
            reason=reason,
            preview=text[:_PREVIEW_LIMIT],
            finish_reason=finish_reason,
            usage=usage,
        )

    if not text.strip():
        return failure(FailureReason.NON_OBJECT)

    cleaned = strip_code_fence(text)
    parsed = _parse_object(cleaned)
    if parsed is not None:
        return parsed

    first = cleaned.find("{")
    if first < 0:
        return failure(FailureReason.NO_OBJECT_FOUND)

    last = cleaned.rfind("}")
    if first < last:
        parsed = _parse_object(cleaned[first : last + 1])
        if parsed is not None:
            return parsed

    for drop_tail in (False, True):
        repaired = _repair(cleaned[first:], drop_tail=drop_tail)
        if repaired is None:
            continue
        parsed = _parse_object(repaired)
        if parsed is not None:
            logger.debug(
                "Repaired truncated model output (finish_reason=%s, drop_tail=%s)",
                finish_reason,
                drop_tail,
            )
            return parsed

    logger.warning(
        "Could not recover JSON from model output (finish_reason=%s, %d chars)",
        finish_reason,
        len(text),
    )
    return failure(FailureReason.TRUNCATED_UNRECOVERABLE)
