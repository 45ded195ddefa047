"""
Practice module - Answering questions and reporting progress.

Components:
    - session: grading, wrong book, random/exam question picking, summaries
    - report: Markdown learning report export
"""

from .session import (
    ExamSummary,
    OverallSummary,
    draw_exam,
    grade_answer,
    overall_summary,
    pick_random_question,
    pick_wrong_book_question,
    summarize_exam,
    wrong_question_ids,
)
from .report import build_learning_report, export_learning_report

__all__ = [
    "ExamSummary",
    "OverallSummary",
    "draw_exam",
    "grade_answer",
    "overall_summary",
    "pick_random_question",
    "pick_wrong_book_question",
    "summarize_exam",
    "wrong_question_ids",
    "build_learning_report",
    "export_learning_report",
]
