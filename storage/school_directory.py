"""
Read access to the school records the chat features depend on.

Only the lookups the gateway and the NL-to-query bridge need; the schema
itself (profiles, parents, teachers, students, classes) lives in Supabase.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from supabase import Client

logger = logging.getLogger(__name__)


@dataclass
class Profile:
    """Role-tagged identity record of an authenticated user."""
    user_id: str
    tenant_id: Optional[str]
    role: str
    full_name: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Profile":
        return cls(
            user_id=row.get("user_id"),
            tenant_id=row.get("tenant_id"),
            role=(row.get("role") or "").lower(),
            full_name=row.get("full_name"),
            email=row.get("email"),
        )


class SchoolDirectory:
    """Profiles, parent/teacher links, classes and students."""

    def __init__(self, client: Client):
        self.client = client

    def _first(self, table: str, columns: str, column: str, value: Any) -> Optional[Dict[str, Any]]:
        response = (
            self.client.table(table)
            .select(columns)
            .eq(column, value)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    def _all(self, table: str, columns: str, column: str, value: Any) -> List[Dict[str, Any]]:
        response = self.client.table(table).select(columns).eq(column, value).execute()
        return response.data or []

    def get_profile(self, user_id: str) -> Optional[Profile]:
        row = self._first("profiles", "*", "user_id", user_id)
        return Profile.from_row(row) if row else None

    def get_parent_context(self, user_id: str) -> Dict[str, Any]:
        """``{child, teachers}`` for a parent, or ``{}`` when no child is linked."""
        parent = self._first("parents", "child_id", "user_id", user_id)
        if not parent or not parent.get("child_id"):
            return {}

        child = self._first("students", "*", "id", parent["child_id"])
        teachers: List[Dict[str, Any]] = []
        if child and child.get("class_id"):
            teachers = self._all(
                "teachers", "*, profiles(full_name, email)", "class_id", child["class_id"]
            )
        return {"child": child, "teachers": teachers}

    def get_teacher_context(self, user_id: str) -> Dict[str, Any]:
        """``{class, students}`` for a teacher, or ``{}`` when no class is assigned."""
        teacher = self._first("teachers", "class_id", "user_id", user_id)
        if not teacher or not teacher.get("class_id"):
            return {}

        class_id = teacher["class_id"]
        return {
            "class": self._first("classes", "*", "id", class_id),
            "students": self._all("students", "*", "class_id", class_id),
        }

    def find_class_by_grade(self, grade: str) -> Optional[Dict[str, Any]]:
        """The class with this grade label, or None unless exactly one matches."""
        rows = self._all("classes", "id", "grade", grade)
        return rows[0] if len(rows) == 1 else None

    def student_names(self, class_id: Any) -> List[str]:
        return [row.get("name") for row in self._all("students", "name", "class_id", class_id)]

    def teacher_subjects(self, class_id: Any) -> List[str]:
        return [row.get("subject") for row in self._all("teachers", "subject", "class_id", class_id)]
