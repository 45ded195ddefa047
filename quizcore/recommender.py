"""
Recommender - Priority scoring and top-K question selection.

Score (each signal roughly in [0, 1]):
    0.6 * error_rate        wrong / attempts, 1.0 when never attempted
  + 0.3 * recency_score     days since last attempt / 7, capped at 1.0
  + 0.1 * difficulty_score  difficulty 1..5 mapped to 0.2..1.0
  + unseen_bonus            0.2 for never-attempted questions

The total is clamped to [0, 2]. Selection keeps the K best in a bounded
min-heap; equal scores are ordered by ascending question id.
"""

import heapq
import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .models import Question, QuestionStat, StudyContext
from .stats_aggregator import compute_question_stats

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400.0


@dataclass(frozen=True)
class RecommendParams:
    error_weight: float = 0.6
    recency_weight: float = 0.3
    difficulty_weight: float = 0.1
    unseen_bonus: float = 0.2
    recency_horizon_days: float = 7.0
    default_k: int = 5
    min_score: float = 0.0
    max_score: float = 2.0


@dataclass(frozen=True)
class Recommendation:
    question_id: int
    score: float


class RecommendationScorer:
    """Scores catalog questions against their attempt history."""

    def __init__(self, params: Optional[RecommendParams] = None):
        self.p = params or RecommendParams()

    # ==================== Signals ====================

    @staticmethod
    def error_rate(stat: QuestionStat) -> float:
        if stat.attempts <= 0:
            return 1.0
        return (stat.attempts - stat.correct) / stat.attempts

    def recency_score(self, stat: QuestionStat, now: float) -> float:
        horizon = self.p.recency_horizon_days
        if stat.attempts <= 0 or stat.last_timestamp <= 0:
            days = horizon
        else:
            # Clock skew can put the last attempt in the future
            seconds = max(0.0, now - stat.last_timestamp)
            days = seconds / SECONDS_PER_DAY
        return min(1.0, days / horizon)

    @staticmethod
    def difficulty_score(difficulty: int) -> float:
        return max(0.2, min(1.0, 0.2 + (difficulty - 1) * 0.2))

    def unseen_bonus(self, stat: QuestionStat) -> float:
        return self.p.unseen_bonus if stat.attempts == 0 else 0.0

    # ==================== Scoring ====================

    def score(self, question: Question, stat: Optional[QuestionStat], now: float) -> float:
        """Priority of one question; higher means practice sooner."""
        stat = stat or QuestionStat()

        total = (
            self.p.error_weight * self.error_rate(stat) +
            self.p.recency_weight * self.recency_score(stat, now) +
            self.p.difficulty_weight * self.difficulty_score(question.difficulty) +
            self.unseen_bonus(stat)
        )

        return max(self.p.min_score, min(self.p.max_score, total))

    def top_k(
        self,
        questions: Sequence[Question],
        question_stats: Mapping[int, QuestionStat],
        now: Optional[float] = None,
        k: Optional[int] = None,
    ) -> List[Recommendation]:
        """
        Select the K highest-scoring questions, best first.

        K defaults to the configured value and never exceeds the catalog
        size. An empty catalog yields an empty list.
        """
        if not questions:
            return []

        if now is None:
            now = time.time()
        k = self.p.default_k if k is None else k
        k = min(k, len(questions))
        if k <= 0:
            return []

        # Min-heap of (score, -id): the root is the weakest kept candidate,
        # and among equal scores the larger id is evicted first.
        heap: List[Tuple[float, int]] = []
        for q in questions:
            entry = (self.score(q, question_stats.get(q.id), now), -q.id)
            if len(heap) < k:
                heapq.heappush(heap, entry)
            elif entry > heap[0]:
                heapq.heapreplace(heap, entry)

        ranked = sorted(heap, key=lambda e: (-e[0], -e[1]))
        return [Recommendation(question_id=-neg_id, score=s) for s, neg_id in ranked]

    def recommend(
        self,
        ctx: StudyContext,
        now: Optional[float] = None,
        k: Optional[int] = None,
    ) -> List[Recommendation]:
        """Recompute stats from the context's snapshot and rank its catalog."""
        stats: Dict[int, QuestionStat] = compute_question_stats(ctx.attempts)
        recs = self.top_k(ctx.questions, stats, now=now, k=k)
        if not ctx.questions:
            logger.info("No recommendation available: question catalog is empty")
        return recs
