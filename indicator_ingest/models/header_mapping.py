from __future__ import annotations

from dataclasses import dataclass

"""HeaderMapping model: header cell index per semantic role.

Roles are resolved from header text by keyword substring matching. A role
that no header matches is absent (``None``) and is not validated at all.
"""

__all__ = [
    "HeaderMapping",
    "ROLE_KEYWORDS",
]

# Role -> keywords matched as lowercase substrings of the header text
ROLE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "year": ("year",),
    "state": ("state",),
    "value": ("value", "rate"),
}


def _first_match(headers: list[str], keywords: tuple[str, ...]) -> int | None:
    for idx, header in enumerate(headers):
        lowered = header.lower()
        if any(k in lowered for k in keywords):
            return idx
    return None


@dataclass(frozen=True)
class HeaderMapping:
    """Resolved role indices into a header row (``None`` = role absent)."""
    year: int | None = None
    state: int | None = None
    value: int | None = None

    @classmethod
    def from_headers(cls, headers: list[str]) -> HeaderMapping:
        """Resolve every role independently; the first matching header wins.

        A single header may satisfy more than one role (e.g. ``"Rate Year"``).
        """
        return cls(
            year=_first_match(headers, ROLE_KEYWORDS["year"]),
            state=_first_match(headers, ROLE_KEYWORDS["state"]),
            value=_first_match(headers, ROLE_KEYWORDS["value"]),
        )

    @property
    def has_any_role(self) -> bool:
        return any(idx is not None for idx in (self.year, self.state, self.value))

    def describe(self, headers: list[str]) -> dict[str, str | None]:
        """Role -> header text, for inspection output."""
        out: dict[str, str | None] = {}
        for role in ROLE_KEYWORDS:
            idx = getattr(self, role)
            out[role] = headers[idx] if idx is not None else None
        return out
