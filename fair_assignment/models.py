# fair_assignment/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Category:
    name: str
    max_placements: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "max_placements": self.max_placements}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> Category:
        name = raw["name"]
        max_placements = raw["max_placements"]
        if not isinstance(name, str) or not name:
            raise ValueError(f"Invalid category name: {name!r}")
        if not isinstance(max_placements, int) or isinstance(max_placements, bool) or max_placements <= 0:
            raise ValueError(f"Invalid max_placements for {name!r}: {max_placements!r}")
        return cls(name=name, max_placements=max_placements)


@dataclass
class Student:
    # Students compare by name only.
    name: str
    preferences: List[Category] = field(default_factory=list, compare=False)
    exclude: List[Category] = field(default_factory=list, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "preferences": [c.to_dict() for c in self.preferences],
            "exclude": [c.to_dict() for c in self.exclude],
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> Student:
        name = raw["name"]
        if not isinstance(name, str) or not name:
            raise ValueError(f"Invalid student name: {name!r}")
        return cls(
            name=name,
            preferences=[Category.from_dict(c) for c in raw.get("preferences", [])],
            exclude=[Category.from_dict(c) for c in raw.get("exclude", [])],
        )


@dataclass(frozen=True)
class AssignmentResult:
    """
    Outcome of one matching run.

    placed: category name -> students placed there, in tie-break order
    not_placable: students that fit in no allowed category
    """
    placed: Dict[str, Tuple[Student, ...]]
    not_placable: Tuple[Student, ...] = ()

    def students_in(self, category_name: str) -> Tuple[Student, ...]:
        return self.placed.get(category_name, ())

    def categories_of(self, student_name: str) -> List[str]:
        return [
            cname for cname, students in self.placed.items()
            if any(s.name == student_name for s in students)
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "placed": {
                cname: [s.to_dict() for s in students]
                for cname, students in self.placed.items()
            },
            "not_placable": [s.to_dict() for s in self.not_placable],
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> AssignmentResult:
        return cls(
            placed={
                cname: tuple(Student.from_dict(s) for s in students)
                for cname, students in raw["placed"].items()
            },
            not_placable=tuple(Student.from_dict(s) for s in raw["not_placable"]),
        )


@dataclass
class WorkingState:
    categories: List[Category] = field(default_factory=list)
    students: List[Student] = field(default_factory=list)
    multi_match_mode: bool = False
    result: Optional[AssignmentResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "categories": [c.to_dict() for c in self.categories],
            "students": [s.to_dict() for s in self.students],
            "multi_matches": self.multi_match_mode,
            "match_result": self.result.to_dict() if self.result is not None else None,
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> WorkingState:
        multi = raw["multi_matches"]
        if not isinstance(multi, bool):
            raise ValueError(f"Invalid multi_matches flag: {multi!r}")
        match_result = raw.get("match_result")
        state = cls(
            categories=[Category.from_dict(c) for c in raw["categories"]],
            students=[Student.from_dict(s) for s in raw["students"]],
            multi_match_mode=multi,
            result=AssignmentResult.from_dict(match_result) if match_result is not None else None,
        )
        _check_unique([c.name for c in state.categories], "category")
        _check_unique([s.name for s in state.students], "student")
        for st in state.students:
            _check_references(st, state.categories)
        return state


def _check_unique(names: List[str], kind: str) -> None:
    seen = set()
    for name in names:
        if name in seen:
            raise ValueError(f"Duplicate {kind} name {name!r} in stored state.")
        seen.add(name)


def _check_references(student: Student, categories: List[Category]) -> None:
    """
    Every preference/exclude entry must be value-equal to a stored category,
    appear once, and never sit in both lists.
    """
    listed = student.preferences + student.exclude
    for c in listed:
        if c not in categories:
            raise ValueError(
                f"{student.name!r} references unknown category {c.name!r} "
                f"with {c.max_placements} places."
            )
    if len(set(listed)) != len(listed):
        raise ValueError(f"{student.name!r} lists a category more than once.")
