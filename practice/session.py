"""
Practice Session - Question picking, grading and exam summaries.

Features:
    - Grade an answer into an AttemptRecord
    - Wrong book: questions whose latest attempt was wrong
    - Random practice, wrong-book practice and exam draws
    - Overall and per-exam accuracy summaries
"""

import random
import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from quizcore.models import AttemptRecord, Question, StudyContext, TopicStat
from quizcore.stats_aggregator import accuracy_percent, compute_topic_stats


@dataclass
class OverallSummary:
    total: int
    correct: int
    accuracy: float

    @property
    def wrong(self) -> int:
        return self.total - self.correct


@dataclass
class ExamSummary:
    total: int
    correct: int
    accuracy: float
    by_topic: Dict[str, TopicStat] = field(default_factory=dict)


# ==================== Grading ====================

def grade_answer(
    question: Question,
    choice: int,
    elapsed_seconds: float,
    now: Optional[float] = None,
) -> AttemptRecord:
    """Turn one answer into an attempt record (duration at least 1s)."""
    if now is None:
        now = time.time()
    return AttemptRecord(
        question_id=question.id,
        correct=question.is_correct(choice),
        seconds=max(1, int(elapsed_seconds)),
        timestamp=int(now),
    )


# ==================== Wrong Book ====================

def wrong_question_ids(records: Iterable[AttemptRecord]) -> List[int]:
    """
    Ids of questions whose most recent attempt (in log order) was wrong.

    Answering a question correctly takes it out of the wrong book again.
    """
    latest: Dict[int, bool] = {}
    for r in records:
        latest[r.question_id] = r.correct
    return sorted(qid for qid, correct in latest.items() if not correct)


# ==================== Question Picking ====================

def pick_random_question(
    questions: Sequence[Question],
    rng: Optional[random.Random] = None,
) -> Optional[Question]:
    if not questions:
        return None
    rng = rng or random.Random()
    return rng.choice(list(questions))


def pick_wrong_book_question(
    ctx: StudyContext,
    rng: Optional[random.Random] = None,
) -> Optional[Question]:
    """Random question from the wrong book; None when it is empty."""
    candidates = [
        ctx.question_index[qid]
        for qid in wrong_question_ids(ctx.attempts)
        if qid in ctx.question_index
    ]
    if not candidates:
        return None
    rng = rng or random.Random()
    return rng.choice(candidates)


def draw_exam(
    questions: Sequence[Question],
    count: int,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    """Draw distinct questions; count is clamped to [1, catalog size]."""
    if not questions:
        return []
    count = max(1, min(count, len(questions)))
    rng = rng or random.Random()
    return rng.sample(list(questions), count)


# ==================== Summaries ====================

def overall_summary(records: Iterable[AttemptRecord]) -> OverallSummary:
    total = correct = 0
    for r in records:
        total += 1
        if r.correct:
            correct += 1
    return OverallSummary(total=total, correct=correct, accuracy=accuracy_percent(correct, total))


def summarize_exam(
    records: Sequence[AttemptRecord],
    question_index: Mapping[int, Question],
) -> ExamSummary:
    """Summarize the attempts made during one exam."""
    overall = overall_summary(records)
    return ExamSummary(
        total=overall.total,
        correct=overall.correct,
        accuracy=overall.accuracy,
        by_topic=compute_topic_stats(records, question_index),
    )
