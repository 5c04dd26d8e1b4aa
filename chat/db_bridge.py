"""
Natural-language to query bridge.

Recognises exactly two phrasings; anything else gets a fixed refusal:

- "students in class <X>"  -> names of the students of the class with grade X
- "teachers for class <X>" -> subjects taught by the teachers of that class

A class that does not exist yields ``None``.
"""

import re
from typing import Callable, List, Optional, Tuple, Union

from storage.school_directory import SchoolDirectory

REFUSAL = "Sorry, I can only answer questions about students or teachers for a class."

STUDENTS_PATTERN = re.compile(r"students in class ([\w\d]+)", re.IGNORECASE)
TEACHERS_PATTERN = re.compile(r"teachers for class ([\w\d]+)", re.IGNORECASE)

BridgeResult = Union[List[str], str, None]


def _students(directory: SchoolDirectory, grade: str) -> Optional[List[str]]:
    class_row = directory.find_class_by_grade(grade)
    if not class_row:
        return None
    return directory.student_names(class_row["id"])


def _teacher_subjects(directory: SchoolDirectory, grade: str) -> Optional[List[str]]:
    class_row = directory.find_class_by_grade(grade)
    if not class_row:
        return None
    return directory.teacher_subjects(class_row["id"])


TEMPLATES: List[Tuple[re.Pattern, Callable[[SchoolDirectory, str], Optional[List[str]]]]] = [
    (STUDENTS_PATTERN, _students),
    (TEACHERS_PATTERN, _teacher_subjects),
]


def answer_question(directory: SchoolDirectory, question: str) -> BridgeResult:
    for pattern, handler in TEMPLATES:
        match = pattern.search(question or "")
        if match:
            return handler(directory, match.group(1))
    return REFUSAL
