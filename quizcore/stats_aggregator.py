"""
Stats Aggregator - Derives per-question and per-topic statistics.

Both functions are pure: they read one snapshot of the attempt log and
return fresh stat objects. Missing data degrades to zero-valued stats.
"""

import logging
from typing import Dict, Iterable, Mapping

from .models import AttemptRecord, Question, QuestionStat, TopicStat

logger = logging.getLogger(__name__)


def compute_question_stats(records: Iterable[AttemptRecord]) -> Dict[int, QuestionStat]:
    """
    Group attempts by question id.

    For each question: attempt count, correct count, cumulative seconds and
    the latest timestamp seen. Input order does not matter.
    """
    stats: Dict[int, QuestionStat] = {}

    for r in records:
        st = stats.get(r.question_id)
        if st is None:
            st = stats[r.question_id] = QuestionStat()
        st.attempts += 1
        if r.correct:
            st.correct += 1
        st.total_seconds += r.seconds
        if r.timestamp > st.last_timestamp:
            st.last_timestamp = r.timestamp

    return stats


def compute_topic_stats(
    records: Iterable[AttemptRecord],
    question_index: Mapping[int, Question],
) -> Dict[str, TopicStat]:
    """
    Join attempts to their question's topic and aggregate per topic.

    Attempts whose question is no longer in the catalog are skipped.
    """
    stats: Dict[str, TopicStat] = {}
    orphaned = 0

    for r in records:
        question = question_index.get(r.question_id)
        if question is None:
            orphaned += 1
            continue
        st = stats.get(question.topic)
        if st is None:
            st = stats[question.topic] = TopicStat()
        st.attempts += 1
        if r.correct:
            st.correct += 1

    for st in stats.values():
        st.accuracy = accuracy_percent(st.correct, st.attempts)

    if orphaned:
        logger.debug("Skipped %d attempts referencing unknown questions", orphaned)

    return stats


def accuracy_percent(correct: int, attempts: int) -> float:
    """correct / attempts * 100, or 0 when there are no attempts."""
    if attempts <= 0:
        return 0.0
    return correct * 100.0 / attempts
