"""
Class-time codec.

A course keeps its weekly meetings in a single text column::

    "Mon at 10:00 in R1, Wed at 14:00"

Each meeting is ``<day> at <time>`` optionally followed by ``in <classroom>``,
and meetings are joined with ``", "``. Values must not contain any of the
delimiters, otherwise the string cannot be read back; :func:`encode` refuses
such values instead of writing an ambiguous row.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Union

from .errors import ValidationError

ENTRY_SEP = ", "
AT = " at "
IN = " in "
DELIMITERS = (ENTRY_SEP, AT, IN)


class MalformedScheduleError(ValidationError):
    def __init__(self, message: str, index: Optional[int] = None, fragment: Optional[str] = None):
        super().__init__(message)
        self.index = index
        self.fragment = fragment


@dataclass(frozen=True)
class ClassTime:
    day: str
    time: str
    classroom: Optional[str] = None

    def to_dict(self) -> dict:
        out = {"day": self.day, "time": self.time}
        if self.classroom:
            out["classroom"] = self.classroom
        return out


def _coerce(entry: Union[ClassTime, Mapping[str, Any]]) -> ClassTime:
    if isinstance(entry, ClassTime):
        return entry
    return ClassTime(
        day=str(entry.get("day") or ""),
        time=str(entry.get("time") or ""),
        classroom=entry.get("classroom") or None,
    )


def encode(entries: Iterable[Union[ClassTime, Mapping[str, Any]]]) -> str:
    parts: List[str] = []
    written: List[ClassTime] = []
    for i, raw in enumerate(entries):
        ct = _coerce(raw)
        ct = ClassTime(ct.day, ct.time, ct.classroom or None)
        for field in (ct.day, ct.time, ct.classroom or ""):
            if any(d in field for d in DELIMITERS):
                raise MalformedScheduleError(
                    f"Class time #{i + 1}: {field!r} contains a reserved separator", i, field
                )
        text = f"{ct.day}{AT}{ct.time}"
        if ct.classroom:
            text += f"{IN}{ct.classroom}"
        # a separator can also form across a field edge, e.g. "Mon," + " at "
        if not _reads_back(text, [ct]):
            raise MalformedScheduleError(
                f"Class time #{i + 1}: {text!r} would not read back as written", i, text
            )
        parts.append(text)
        written.append(ct)
    text = ENTRY_SEP.join(parts)
    if not _reads_back(text, written):
        raise MalformedScheduleError(f"Class times {text!r} would not read back as written", None, text)
    return text


def _reads_back(text: str, expected: List[ClassTime]) -> bool:
    try:
        return decode(text) == expected
    except MalformedScheduleError:
        return False


def decode(text: Optional[str]) -> List[ClassTime]:
    if not text:
        return []
    out: List[ClassTime] = []
    for i, fragment in enumerate(text.split(ENTRY_SEP)):
        classroom = None
        when = fragment
        if IN in fragment:
            when, _, classroom = fragment.rpartition(IN)
        day, sep, time = when.partition(AT)
        if not sep:
            raise MalformedScheduleError(
                f"Class time #{i + 1}: missing '{AT.strip()}' in {fragment!r}", i, fragment
            )
        out.append(ClassTime(day=day, time=time, classroom=classroom or None))
    return out
