"""Tests for the natural-language to query bridge."""

from chat.db_bridge import REFUSAL, answer_question


def test_students_in_class(directory):
    assert answer_question(directory, "Who are the students in class 5A?") == ["Sam", "Alex"]


def test_teachers_for_class(directory):
    assert answer_question(directory, "list teachers for class 5A") == ["Math", "Science"]


def test_phrases_are_case_insensitive(directory):
    assert answer_question(directory, "STUDENTS IN CLASS 6B") == ["Kim"]


def test_unknown_class_yields_none(directory):
    assert answer_question(directory, "students in class 9Z") is None


def test_unrecognised_question_is_refused(directory):
    assert answer_question(directory, "how many rows are in the database?") == REFUSAL
    assert answer_question(directory, "") == REFUSAL


def test_ambiguous_grade_yields_none(school_tables, directory):
    school_tables["classes"].append({"id": "class-5a-bis", "grade": "5A"})

    assert directory.find_class_by_grade("5A") is None
    assert answer_question(directory, "students in class 5A") is None
