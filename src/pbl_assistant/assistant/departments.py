"""Static department directory.

Maps each department code to a short description for the assistant's replies.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Department:
    """One academic department."""

    code: str
    description: str


class DepartmentDirectory:
    """Lookup table for the six departments, in display order."""

    DEPARTMENTS: tuple[Department, ...] = (
        Department(
            "CSE",
            "Computer Science & Engineering - Focus on programming, algorithms, "
            "and software development.",
        ),
        Department(
            "EEE",
            "Electrical & Electronic Engineering - Focus on circuits, power systems, "
            "and electronics.",
        ),
        Department(
            "Civil",
            "Civil Engineering - Focus on construction, structures, and infrastructure.",
        ),
        Department(
            "Mechanical",
            "Mechanical Engineering - Focus on machines, thermodynamics, and manufacturing.",
        ),
        Department(
            "English",
            "English Literature & Language - Focus on literature, linguistics, "
            "and communication.",
        ),
        Department(
            "BBA",
            "Business Administration - Focus on management, marketing, and "
            "business operations.",
        ),
    )

    def __init__(self) -> None:
        self._by_code = {d.code: d for d in self.DEPARTMENTS}
        self._by_lower = {d.code.lower(): d for d in self.DEPARTMENTS}

    @property
    def codes(self) -> list[str]:
        """Department codes in display order."""
        return [d.code for d in self.DEPARTMENTS]

    def get(self, code: str | None) -> Department | None:
        """Get a department by its exact code."""
        if code is None:
            return None
        return self._by_code.get(code)

    def canonical(self, code: str) -> str | None:
        """Map any capitalization of a code to its directory spelling."""
        department = self._by_lower.get(code.lower())
        return department.code if department else None

    def describe(self, code: str | None) -> str | None:
        """Get the description for a department code."""
        department = self.get(code)
        return department.description if department else None

    def items(self) -> list[tuple[str, str]]:
        """All (code, description) pairs in display order."""
        return [(d.code, d.description) for d in self.DEPARTMENTS]


__all__ = ["Department", "DepartmentDirectory"]
