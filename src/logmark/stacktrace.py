"""
Stack frames and the sources that supply them.

The formatter only needs an ordered sequence of frames. Anything that
exposes ``frames()`` satisfies it; Python exceptions and traceback
objects are converted on the fly.

Frame order is innermost call first, i.e. the function that raised
comes first and the entry point comes last.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass
from types import FrameType, TracebackType
from typing import Any, Mapping, Optional, Protocol, Sequence, runtime_checkable


@dataclass(frozen=True)
class Frame:
    """One call in a captured stack. Every field is optional."""
    class_name: Optional[str] = None
    call_type: Optional[str] = None
    function: Optional[str] = None
    file: Optional[str] = None
    line: Optional[int] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Frame":
        """Build from a dict-shaped frame: class, type, function, file, line."""
        return cls(
            class_name=data.get("class"),
            call_type=data.get("type"),
            function=data.get("function"),
            file=data.get("file"),
            line=data.get("line"),
        )


@runtime_checkable
class StackTraceSource(Protocol):
    """Anything that can hand over an ordered sequence of frames."""

    def frames(self) -> Sequence[Frame]: ...


class CapturedTrace:
    """A stack trace captured elsewhere, e.g. deserialized from another process."""

    def __init__(self, frames: Sequence[Frame | Mapping[str, Any]] = ()):
        self._frames = tuple(
            f if isinstance(f, Frame) else Frame.from_mapping(f) for f in frames
        )

    def frames(self) -> Sequence[Frame]:
        return self._frames

    def __len__(self) -> int:
        return len(self._frames)

    def __repr__(self) -> str:
        return f"CapturedTrace({len(self._frames)} frames)"


def frames_from_traceback(tb: TracebackType | None) -> list[Frame]:
    """Convert a traceback chain to frames, innermost call first."""
    frames = []
    for frame, lineno in traceback.walk_tb(tb):
        owner, call_type = _frame_owner(frame)
        frames.append(Frame(
            class_name=owner,
            call_type=call_type,
            function=frame.f_code.co_name,
            file=frame.f_code.co_filename,
            line=lineno,
        ))
    frames.reverse()
    return frames


def frames_from_exception(exc: BaseException) -> list[Frame]:
    """Frames of a raised exception. Never-raised exceptions have none."""
    return frames_from_traceback(exc.__traceback__)


def resolve_frames(source: Any) -> Sequence[Frame]:
    """
    Get frames from whatever was stored under the ``exception`` context key.

    Raises TypeError if the object carries no stack trace at all.
    """
    if isinstance(source, StackTraceSource):
        return source.frames()
    if isinstance(source, BaseException):
        return frames_from_exception(source)
    if isinstance(source, TracebackType):
        return frames_from_traceback(source)
    raise TypeError(
        f"Expected an exception, traceback or StackTraceSource, "
        f"got {type(source).__name__}"
    )


def _frame_owner(frame: FrameType) -> tuple[Optional[str], Optional[str]]:
    """
    Class name and call separator for methods, (None, None) for plain functions.

    Uses the code object's qualified name where available (3.11+), which
    names the defining class rather than the runtime type of ``self``.
    """
    qualname = getattr(frame.f_code, "co_qualname", None)
    if qualname is not None:
        owner, _, _ = qualname.rpartition(".")
        if not owner or owner.endswith("<locals>"):
            return None, None
        return owner, "."

    f_locals = frame.f_locals
    if "self" in f_locals:
        return type(f_locals["self"]).__qualname__, "."
    owner = f_locals.get("cls")
    if isinstance(owner, type):
        return owner.__qualname__, "."
    return None, None
