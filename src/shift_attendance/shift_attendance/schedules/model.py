from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Sequence


@dataclass(frozen=True)
class Sample:
    """Thực thể miền (domain): one timetable row, an instant plus each person's on/off flag."""

    instant: datetime
    flags: Mapping[str, bool]

    def is_on(self, person: str) -> bool:
        return bool(self.flags.get(person, False))


@dataclass(frozen=True)
class Timeline:
    """Sorted, de-duplicated samples for a whole schedule.

    Immutable; rebuilt from the source on every load.
    """

    people: tuple[str, ...]
    samples: tuple[Sample, ...]
    skipped_rows: int = field(default=0, compare=False)

    @property
    def anchor(self) -> datetime:
        """Earliest sample instant; week 0 starts here."""
        return self.samples[0].instant

    def has_person(self, person: str) -> bool:
        return person in self.people

    def __len__(self) -> int:
        return len(self.samples)


def freeze_flags(flags: Mapping[str, bool]) -> Mapping[str, bool]:
    return MappingProxyType(dict(flags))


def as_samples(rows: Sequence[tuple[datetime, Mapping[str, bool]]]) -> tuple[Sample, ...]:
    return tuple(Sample(instant=t, flags=freeze_flags(f)) for t, f in rows)
