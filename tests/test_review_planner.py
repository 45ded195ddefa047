"""Tests for quizcore/review_planner.py"""

import logging

import pytest

from quizcore.knowledge_graph import PrerequisiteGraph
from quizcore.models import TopicStat
from config import Settings
from quizcore.review_planner import WEAK_THRESHOLD, ReviewPathPlanner, TopicStatus


@pytest.fixture
def planner(graph):
    return ReviewPathPlanner(graph)


def test_annotated_path_statuses(planner):
    stats = {
        "Arrays": TopicStat(attempts=10, correct=8, accuracy=80.0),
        "Linked Lists": TopicStat(attempts=4, correct=1, accuracy=25.0),
    }

    path = planner.build_annotated_path("Stacks", stats)

    assert path.topics == ["Arrays", "Linked Lists", "Stacks"]
    assert [s.status for s in path.steps] == [
        TopicStatus.MASTERED,
        TopicStatus.WEAK,
        TopicStatus.NEEDS_STUDY,
    ]
    assert path.steps[1].accuracy == 25.0
    assert path.steps[2].attempts == 0
    assert not path.has_cycle
    assert path.first_gap.topic == "Linked Lists"


def test_weak_threshold_boundary(planner):
    assert planner.classify(TopicStat(attempts=5, correct=3, accuracy=60.0)) is TopicStatus.MASTERED
    assert planner.classify(TopicStat(attempts=5, correct=2, accuracy=40.0)) is TopicStatus.WEAK
    assert planner.classify(TopicStat()) is TopicStatus.NEEDS_STUDY
    assert planner.classify(None) is TopicStatus.NEEDS_STUDY


def test_custom_weak_threshold(graph):
    strict = ReviewPathPlanner(graph, weak_threshold=90.0)
    assert strict.classify(TopicStat(attempts=10, correct=8, accuracy=80.0)) is TopicStatus.WEAK
    assert strict.weak_threshold == 90.0


def test_weak_threshold_has_one_default(graph):
    assert ReviewPathPlanner(graph).weak_threshold == WEAK_THRESHOLD
    assert Settings().weak_threshold == WEAK_THRESHOLD
    assert not hasattr(ReviewPathPlanner, "WEAK_THRESHOLD")


def test_all_mastered_has_no_gap(planner):
    stats = {"Arrays": TopicStat(attempts=2, correct=2, accuracy=100.0)}
    path = planner.build_annotated_path("Arrays", stats)
    assert path.topics == ["Arrays"]
    assert path.first_gap is None


def test_empty_graph_is_unavailable():
    planner = ReviewPathPlanner(PrerequisiteGraph())
    assert planner.build_annotated_path("Arrays", {}) is None


def test_unknown_target_gives_empty_path(planner):
    path = planner.build_annotated_path("Quantum Sorting", {})
    assert path is not None
    assert path.steps == []
    assert path.target == "Quantum Sorting"


def test_rank_topics_weakest_first(planner):
    stats = {
        "Arrays": TopicStat(attempts=10, correct=9, accuracy=90.0),
        "Linked Lists": TopicStat(attempts=2, correct=1, accuracy=50.0),
        "Stacks": TopicStat(attempts=4, correct=3, accuracy=75.0),
    }

    ranked = planner.rank_topics(stats)

    assert [t.topic for t in ranked] == ["Trees", "Linked Lists", "Stacks", "Arrays"]
    assert ranked[0].accuracy == 0.0
    assert ranked[0].status is TopicStatus.NEEDS_STUDY


def test_rank_topics_covers_unpracticed_graph_nodes(planner):
    ranked = planner.rank_topics({})
    assert [t.topic for t in ranked] == sorted(["Arrays", "Linked Lists", "Stacks", "Trees"])
    assert all(t.status is TopicStatus.NEEDS_STUDY for t in ranked)


def test_cycle_is_flagged_not_rejected(caplog):
    planner = ReviewPathPlanner(PrerequisiteGraph.from_mapping({"A": ["B"], "B": ["A"], "C": ["A"]}))

    with caplog.at_level(logging.WARNING, logger="quizcore.review_planner"):
        path = planner.build_annotated_path("C", {})

    assert path.topics == ["B", "A", "C"]
    assert path.has_cycle
    assert "cycle" in caplog.text


def test_unreachable_cycle_not_flagged():
    kg = PrerequisiteGraph.from_mapping({"A": ["B"], "B": ["A"], "Y": ["X"]})
    path = ReviewPathPlanner(kg).build_annotated_path("Y", {})
    assert path.topics == ["X", "Y"]
    assert not path.has_cycle


def test_plan_uses_context_attempts(context):
    planner = ReviewPathPlanner.from_context(context)

    path = planner.plan(context, "Trees")

    assert path.topics == ["Arrays", "Linked Lists", "Stacks", "Trees"]
    by_topic = {s.topic: s for s in path.steps}
    assert by_topic["Arrays"].status is TopicStatus.MASTERED
    assert by_topic["Linked Lists"].attempts == 3
    assert by_topic["Linked Lists"].status is TopicStatus.WEAK
    assert by_topic["Stacks"].status is TopicStatus.WEAK
    assert by_topic["Trees"].status is TopicStatus.NEEDS_STUDY
