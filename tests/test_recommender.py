"""Tests for quizcore/recommender.py"""

import random

import pytest

from quizcore.models import QuestionStat, StudyContext
from quizcore.recommender import RecommendationScorer, RecommendParams

from conftest import DAY, NOW, attempt, make_question


@pytest.fixture
def scorer():
    return RecommendationScorer()


def test_score_mostly_wrong_and_stale_question(scorer):
    q = make_question(1, difficulty=3)
    stat = QuestionStat(attempts=10, correct=2, total_seconds=100, last_timestamp=NOW)

    assert scorer.error_rate(stat) == pytest.approx(0.8)
    assert scorer.recency_score(stat, NOW + 10 * DAY) == 1.0
    assert scorer.difficulty_score(3) == pytest.approx(0.6)
    assert scorer.score(q, stat, NOW + 10 * DAY) == pytest.approx(0.84)


def test_score_unattempted_question(scorer):
    q = make_question(1, difficulty=1)

    assert scorer.score(q, QuestionStat(), NOW) == pytest.approx(1.12)
    assert scorer.score(q, None, NOW) == pytest.approx(1.12)


def test_recency_scales_with_days(scorer):
    stat = QuestionStat(attempts=1, correct=1, last_timestamp=NOW)

    assert scorer.recency_score(stat, NOW) == 0.0
    assert scorer.recency_score(stat, NOW + 3.5 * DAY) == pytest.approx(0.5)
    assert scorer.recency_score(stat, NOW + 30 * DAY) == 1.0


def test_negative_elapsed_time_clamped(scorer):
    q = make_question(1, difficulty=1)
    stat = QuestionStat(attempts=1, correct=1, last_timestamp=NOW + 5 * DAY)

    assert scorer.recency_score(stat, NOW) == 0.0
    assert scorer.score(q, stat, NOW) == pytest.approx(0.02)


@pytest.mark.parametrize("difficulty", [-3, 0, 1, 3, 5, 6, 50])
@pytest.mark.parametrize("attempts,correct", [(0, 0), (1, 0), (1, 1), (7, 3)])
def test_score_always_within_bounds(scorer, difficulty, attempts, correct):
    q = make_question(1, difficulty=difficulty)
    stat = QuestionStat(attempts=attempts, correct=correct, last_timestamp=NOW if attempts else 0)

    for now in (NOW - DAY, NOW, NOW + 100 * DAY):
        assert 0.0 <= scorer.score(q, stat, now) <= 2.0


def test_difficulty_score_clamped(scorer):
    assert scorer.difficulty_score(0) == pytest.approx(0.2)
    assert scorer.difficulty_score(5) == pytest.approx(1.0)
    assert scorer.difficulty_score(9) == pytest.approx(1.0)


def test_top_k_length_and_order(scorer):
    rng = random.Random(3)
    questions = [make_question(i, difficulty=rng.randint(1, 5)) for i in range(1, 41)]
    stats = {}
    for q in questions[::2]:
        attempts = rng.randint(1, 8)
        stats[q.id] = QuestionStat(
            attempts=attempts,
            correct=rng.randint(0, attempts),
            last_timestamp=NOW - rng.randint(0, 14) * DAY,
        )

    recs = scorer.top_k(questions, stats, now=NOW, k=7)

    assert len(recs) == 7
    scores = [r.score for r in recs]
    assert scores == sorted(scores, reverse=True)

    expected = sorted(questions, key=lambda q: (-scorer.score(q, stats.get(q.id), NOW), q.id))[:7]
    assert [r.question_id for r in recs] == [q.id for q in expected]


def test_top_k_capped_by_catalog_size(scorer):
    questions = [make_question(i) for i in (1, 2, 3)]
    assert len(scorer.top_k(questions, {}, now=NOW, k=5)) == 3


def test_top_k_ties_broken_by_ascending_id(scorer):
    questions = [make_question(i, difficulty=2) for i in (9, 4, 7, 1, 12, 3)]

    recs = scorer.top_k(questions, {}, now=NOW, k=4)

    assert [r.question_id for r in recs] == [1, 3, 4, 7]
    assert len({r.score for r in recs}) == 1


def test_top_k_empty_catalog(scorer):
    assert scorer.top_k([], {}, now=NOW) == []
    assert scorer.top_k([make_question(1)], {}, now=NOW, k=0) == []


def test_default_k_from_params():
    scorer = RecommendationScorer(RecommendParams(default_k=2))
    questions = [make_question(i) for i in range(1, 6)]
    assert len(scorer.top_k(questions, {}, now=NOW)) == 2


def test_recommend_prefers_wrong_and_unseen(scorer):
    questions = [make_question(1), make_question(2), make_question(3)]
    attempts = [
        attempt(1, True, NOW),
        attempt(2, False, NOW - 10 * DAY),
    ]
    ctx = StudyContext.create(questions, attempts)

    recs = scorer.recommend(ctx, now=NOW, k=3)

    assert [r.question_id for r in recs] == [3, 2, 1]
    assert recs[0].score == pytest.approx(1.12)
    assert recs[1].score == pytest.approx(0.92)
    assert recs[2].score == pytest.approx(0.02)


def test_recommend_reflects_new_snapshot(scorer):
    ctx = StudyContext.create([make_question(1), make_question(2)], [])
    assert [r.question_id for r in scorer.recommend(ctx, now=NOW, k=1)] == [1]

    updated = ctx.with_attempt(attempt(1, True, NOW))
    assert [r.question_id for r in scorer.recommend(updated, now=NOW, k=1)] == [2]


def test_recommend_empty_catalog(scorer):
    assert scorer.recommend(StudyContext.create([], []), now=NOW) == []
