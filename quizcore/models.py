"""
Data Model - Shared entities for the recommendation engine.

Entities:
    - Question: one catalog entry (immutable once loaded)
    - AttemptRecord: one answer event from the append-only attempt log
    - QuestionStat / TopicStat: derived statistics, recomputed per call
    - StudyContext: catalog + attempt log snapshot + prerequisite graph
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .knowledge_graph import PrerequisiteGraph


@dataclass(frozen=True)
class Question:
    """A multiple-choice question tagged with a topic."""
    id: int
    text: str
    options: Tuple[str, ...]
    answer: int  # Index of the correct option, 0-based
    topic: str
    difficulty: int  # 1 (easy) .. 5 (hard)

    def is_correct(self, choice: int) -> bool:
        return choice == self.answer

    @property
    def correct_option(self) -> str:
        if 0 <= self.answer < len(self.options):
            return self.options[self.answer]
        return ""


@dataclass(frozen=True)
class AttemptRecord:
    """One recorded answer event."""
    question_id: int
    correct: bool
    seconds: int  # Time spent answering, always >= 1
    timestamp: int  # Unix timestamp (seconds)

    def __post_init__(self):
        # Sub-second answers still count as one second
        if self.seconds < 1:
            object.__setattr__(self, "seconds", 1)


@dataclass
class QuestionStat:
    """Per-question aggregate derived from the attempt log."""
    attempts: int = 0
    correct: int = 0
    total_seconds: int = 0
    last_timestamp: int = 0  # 0 = never attempted

    @property
    def wrong(self) -> int:
        return self.attempts - self.correct


@dataclass
class TopicStat:
    """Per-topic aggregate derived from the attempt log."""
    attempts: int = 0
    correct: int = 0
    accuracy: float = 0.0  # Percentage [0, 100]


def build_question_index(questions: Iterable[Question]) -> Dict[int, Question]:
    """Map question id -> Question. Later duplicates win."""
    return {q.id: q for q in questions}


@dataclass(frozen=True)
class StudyContext:
    """
    Everything one recommendation / review-path call needs.

    The attempt log is frozen as a tuple so stats computed from a context
    always describe exactly one snapshot. Recording a new attempt yields a
    new context instead of mutating this one.
    """
    questions: Tuple[Question, ...]
    attempts: Tuple[AttemptRecord, ...]
    graph: PrerequisiteGraph
    question_index: Dict[int, Question] = field(default_factory=dict)

    def __post_init__(self):
        if not self.question_index and self.questions:
            object.__setattr__(self, "question_index", build_question_index(self.questions))

    @classmethod
    def create(
        cls,
        questions: Iterable[Question],
        attempts: Iterable[AttemptRecord],
        graph: Optional[PrerequisiteGraph] = None,
    ) -> "StudyContext":
        return cls(
            questions=tuple(questions),
            attempts=tuple(attempts),
            graph=graph if graph is not None else PrerequisiteGraph(),
        )

    def get_question(self, question_id: int) -> Optional[Question]:
        return self.question_index.get(question_id)

    def with_attempt(self, record: AttemptRecord) -> "StudyContext":
        """Return a new snapshot that includes one more attempt."""
        return StudyContext(
            questions=self.questions,
            attempts=self.attempts + (record,),
            graph=self.graph,
            question_index=self.question_index,
        )

    def topics(self) -> List[str]:
        """Distinct catalog topics in first-seen order."""
        seen: Dict[str, None] = {}
        for q in self.questions:
            seen.setdefault(q.topic, None)
        return list(seen)
