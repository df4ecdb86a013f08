"""
Decoded results and the deduplicating result set.

Payload equality, not identity, is the deduplication key. The first
result carrying a payload wins, so the recorded technique is the first one
(in evaluation order) that decoded it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from preprocessing import Technique


@dataclass(frozen=True)
class DecodedResult:
    """A payload decoded from one source image.

    Attributes:
        source: Identifier of the source, typically its file path.
        payload: Decoded text.
        technique: Candidate representation that first produced the payload.
    """

    source: str
    payload: str
    technique: Technique | None = None

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "payload": self.payload,
            "technique": self.technique.value if self.technique else None,
        }


class ResultSet:
    """Ordered collection of DecodedResults with unique payloads.

    Grows monotonically; callers receive an immutable snapshot via freeze().
    """

    def __init__(self, results: Iterable[DecodedResult] = ()):
        self._results: list[DecodedResult] = []
        self._payloads: set[str] = set()
        for result in results:
            self.add(result)

    def add(self, result: DecodedResult) -> bool:
        """Append result unless its payload is already present.

        Returns:
            True if the payload was new.
        """
        if result.payload in self._payloads:
            return False
        self._payloads.add(result.payload)
        self._results.append(result)
        return True

    def merge(self, other: Iterable[DecodedResult]) -> int:
        """Add every result of other under the same rule; return how many were new."""
        return sum(1 for result in other if self.add(result))

    def __contains__(self, payload: object) -> bool:
        return payload in self._payloads

    @property
    def payloads(self) -> list[str]:
        return [result.payload for result in self._results]

    def freeze(self) -> tuple[DecodedResult, ...]:
        return tuple(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[DecodedResult]:
        return iter(list(self._results))

    def __repr__(self) -> str:
        return f"ResultSet({self.payloads!r})"
