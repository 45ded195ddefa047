"""Shared fixtures for quizpath tests."""

import pytest

from quizcore.knowledge_graph import PrerequisiteGraph
from quizcore.models import AttemptRecord, Question, StudyContext

DAY = 86400
NOW = 1_700_000_000


def make_question(qid, topic="Arrays", difficulty=1, answer=0):
    return Question(
        id=qid,
        text=f"Question {qid}",
        options=("a", "b", "c", "d"),
        answer=answer,
        topic=topic,
        difficulty=difficulty,
    )


def attempt(qid, correct, timestamp=NOW, seconds=10):
    return AttemptRecord(question_id=qid, correct=correct, seconds=seconds, timestamp=timestamp)


@pytest.fixture
def catalog():
    return [
        make_question(1, "Arrays", 1),
        make_question(2, "Arrays", 2),
        make_question(3, "Linked Lists", 3),
        make_question(4, "Stacks", 2),
        make_question(5, "Trees", 4),
    ]


@pytest.fixture
def graph():
    return PrerequisiteGraph.from_mapping({
        "Linked Lists": ["Arrays"],
        "Stacks": ["Arrays", "Linked Lists"],
        "Trees": ["Linked Lists", "Stacks"],
    })


@pytest.fixture
def context(catalog, graph):
    attempts = [
        attempt(1, True, NOW - 2 * DAY),
        attempt(1, True, NOW - DAY),
        attempt(3, False, NOW - 3 * DAY),
        attempt(3, True, NOW - 2 * DAY),
        attempt(3, False, NOW - DAY),
        attempt(4, False, NOW - DAY),
    ]
    return StudyContext.create(catalog, attempts, graph)
