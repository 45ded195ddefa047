"""
Review Path Planner - Prerequisite-ordered study path with mastery state.

Features:
    - Post-order review path for a target topic
    - Per-topic status: needs-study / weak / mastered
    - Ranking of all known topics, weakest first, for target selection
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping, Optional

from .knowledge_graph import PrerequisiteGraph
from .models import StudyContext, TopicStat
from .stats_aggregator import compute_topic_stats

logger = logging.getLogger(__name__)

WEAK_THRESHOLD = 60.0  # Accuracy (%) below which a practiced topic is weak


class TopicStatus(str, Enum):
    NEEDS_STUDY = "needs-study"
    WEAK = "weak"
    MASTERED = "mastered"


@dataclass(frozen=True)
class TopicMastery:
    """A topic together with its stats and derived status."""
    topic: str
    attempts: int
    correct: int
    accuracy: float
    status: TopicStatus


@dataclass
class ReviewPath:
    target: str
    steps: List[TopicMastery] = field(default_factory=list)
    has_cycle: bool = False

    @property
    def topics(self) -> List[str]:
        return [s.topic for s in self.steps]

    @property
    def first_gap(self) -> Optional[TopicMastery]:
        """Earliest step on the path that is not yet mastered."""
        for step in self.steps:
            if step.status is not TopicStatus.MASTERED:
                return step
        return None


class ReviewPathPlanner:
    """Builds annotated review paths over a prerequisite graph."""

    def __init__(self, graph: PrerequisiteGraph, weak_threshold: Optional[float] = None):
        self.kg = graph
        self.weak_threshold = WEAK_THRESHOLD if weak_threshold is None else weak_threshold

    @classmethod
    def from_context(cls, ctx: StudyContext, weak_threshold: Optional[float] = None) -> "ReviewPathPlanner":
        return cls(ctx.graph, weak_threshold)

    # ==================== Status ====================

    def classify(self, stat: Optional[TopicStat]) -> TopicStatus:
        if stat is None or stat.attempts == 0:
            return TopicStatus.NEEDS_STUDY
        if stat.accuracy < self.weak_threshold:
            return TopicStatus.WEAK
        return TopicStatus.MASTERED

    def _annotate(self, topic: str, topic_stats: Mapping[str, TopicStat]) -> TopicMastery:
        stat = topic_stats.get(topic) or TopicStat()
        return TopicMastery(
            topic=topic,
            attempts=stat.attempts,
            correct=stat.correct,
            accuracy=stat.accuracy if stat.attempts > 0 else 0.0,
            status=self.classify(stat),
        )

    # ==================== Planning ====================

    def build_annotated_path(
        self,
        target: str,
        topic_stats: Mapping[str, TopicStat],
    ) -> Optional[ReviewPath]:
        """
        Prerequisite-first study path ending at target.

        Returns None when the graph has no topics at all, and a path with no
        steps when target is not a known topic.
        """
        if self.kg.is_empty():
            logger.info("Review path unavailable: prerequisite graph is empty")
            return None

        if target not in self.kg:
            return ReviewPath(target=target)

        order = self.kg.post_order_path(target)

        cycle = self.kg.find_cycle(within=order)
        if cycle:
            logger.warning(
                "Prerequisite graph has a cycle (%s); review order for %r may be invalid",
                " -> ".join(cycle), target,
            )

        return ReviewPath(
            target=target,
            steps=[self._annotate(topic, topic_stats) for topic in order],
            has_cycle=bool(cycle),
        )

    def rank_topics(self, topic_stats: Mapping[str, TopicStat]) -> List[TopicMastery]:
        """All graph topics sorted by accuracy ascending (unpracticed = 0)."""
        ranked = [self._annotate(topic, topic_stats) for topic in self.kg.nodes]
        ranked.sort(key=lambda t: (t.accuracy, t.topic))
        return ranked

    def plan(self, ctx: StudyContext, target: str) -> Optional[ReviewPath]:
        """Recompute topic stats from the context and build the path."""
        topic_stats = compute_topic_stats(ctx.attempts, ctx.question_index)
        return self.build_annotated_path(target, topic_stats)
