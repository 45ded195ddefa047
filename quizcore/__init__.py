"""
Quiz core - Statistics, question recommendation and review-path planning.

Components:
    - models: Question, AttemptRecord, derived stats, StudyContext
    - stats_aggregator: Per-question and per-topic statistics
    - recommender: Multi-factor priority score + top-K selection
    - knowledge_graph: Topic prerequisite graph and post-order traversal
    - review_planner: Annotated, prerequisite-first review paths
"""

from .models import Question, AttemptRecord, QuestionStat, TopicStat, StudyContext
from .stats_aggregator import compute_question_stats, compute_topic_stats
from .recommender import RecommendationScorer, RecommendParams, Recommendation
from .knowledge_graph import PrerequisiteGraph
from .review_planner import ReviewPathPlanner, ReviewPath, TopicMastery, TopicStatus

__all__ = [
    "Question",
    "AttemptRecord",
    "QuestionStat",
    "TopicStat",
    "StudyContext",
    "compute_question_stats",
    "compute_topic_stats",
    "RecommendationScorer",
    "RecommendParams",
    "Recommendation",
    "PrerequisiteGraph",
    "ReviewPathPlanner",
    "ReviewPath",
    "TopicMastery",
    "TopicStatus",
]
