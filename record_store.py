"""
Record Store - Flat-file loading for the catalog, attempt log and topic graph.

Files (all under the data directory):
    questions.csv          id,text,opt0,opt1,opt2,opt3,answer,topic,difficulty
    records.csv            question_id,correct(1|0),seconds,timestamp
    records_<user>.csv     same as records.csv, one file per user
    knowledge_graph.txt    topic|prereq1,prereq2,...

Malformed rows are logged and skipped here so the core only ever sees clean
data. The attempt log is append-only.
"""

import csv
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from quizcore.knowledge_graph import PrerequisiteGraph
from quizcore.models import AttemptRecord, Question, StudyContext

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

QUESTION_FIELDS = 9
ATTEMPT_FIELDS = 4
OPTION_COUNT = 4


class QuizPathError(Exception):
    """Base class for quizpath errors that are not data-quality problems."""


class CatalogLoadError(QuizPathError):
    """Raised when the question catalog file cannot be read."""

    def __init__(self, path: PathLike, detail: str):
        self.path = str(path)
        self.detail = detail
        super().__init__(f"Cannot load question catalog {self.path}: {detail}")


# ==================== Paths ====================

def attempt_log_path(data_dir: PathLike, user_id: Optional[str] = None) -> Path:
    """records.csv for the anonymous user, records_<user>.csv otherwise."""
    data_dir = Path(data_dir)
    if not user_id:
        return data_dir / "records.csv"
    return data_dir / f"records_{user_id}.csv"


# ==================== Question Catalog ====================

def parse_question_row(fields: List[str]) -> Question:
    """Build a Question from one CSV row. Raises ValueError on bad input."""
    if len(fields) < QUESTION_FIELDS:
        raise ValueError(f"expected {QUESTION_FIELDS} fields, got {len(fields)}")

    answer = int(fields[6])
    if not 0 <= answer < OPTION_COUNT:
        raise ValueError(f"answer index {answer} out of range")

    return Question(
        id=int(fields[0]),
        text=fields[1],
        options=tuple(fields[2:2 + OPTION_COUNT]),
        answer=answer,
        topic=fields[7].strip(),
        difficulty=int(fields[8]),
    )


def load_questions(path: PathLike) -> List[Question]:
    """
    Load the question catalog.

    Rows with too few fields, unparsable numbers or an id already seen are
    skipped. A missing, unreadable or non-UTF-8 file raises CatalogLoadError.
    """
    questions: List[Question] = []
    seen_ids = set()
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            for line_num, fields in enumerate(csv.reader(f), start=1):
                if not fields or not any(x.strip() for x in fields):
                    continue
                try:
                    question = parse_question_row(fields)
                except ValueError as e:
                    logger.warning("questions line %d skipped: %s", line_num, e)
                    continue
                if question.id in seen_ids:
                    logger.warning("questions line %d skipped: duplicate id %d", line_num, question.id)
                    continue
                seen_ids.add(question.id)
                questions.append(question)
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogLoadError(path, str(e)) from e

    logger.info("Loaded %d questions from %s", len(questions), path)
    return questions


# ==================== Attempt Log ====================

def parse_attempt_row(fields: List[str]) -> AttemptRecord:
    if len(fields) < ATTEMPT_FIELDS:
        raise ValueError(f"expected {ATTEMPT_FIELDS} fields, got {len(fields)}")
    return AttemptRecord(
        question_id=int(fields[0]),
        correct=fields[1].strip() == "1",
        seconds=int(fields[2]),
        timestamp=int(fields[3]),
    )


def load_attempts(path: PathLike) -> List[AttemptRecord]:
    """
    Load an attempt log in file order.

    A missing file means the user has not practiced yet and yields [].
    Lines that are not valid UTF-8 are skipped like any other bad row.
    """
    path = Path(path)
    if not path.exists():
        logger.info("No attempt log at %s, starting empty", path)
        return []

    records: List[AttemptRecord] = []
    with open(path, "rb") as f:
        for line_num, raw in enumerate(f, start=1):
            try:
                fields = next(csv.reader([raw.decode("utf-8")]), [])
                if not fields:
                    continue
                records.append(parse_attempt_row(fields))
            except ValueError as e:
                logger.warning("%s line %d skipped: %s", path.name, line_num, e)

    logger.info("Loaded %d attempts from %s", len(records), path)
    return records


def append_attempt(record: AttemptRecord, path: PathLike):
    """Append one attempt to the log, creating the file if needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8", newline="") as f:
        csv.writer(f, lineterminator="\n").writerow([
            record.question_id,
            1 if record.correct else 0,
            record.seconds,
            record.timestamp,
        ])


# ==================== Prerequisite Graph ====================

def parse_graph_lines(lines: Iterable[str]) -> PrerequisiteGraph:
    """
    Build a PrerequisiteGraph from "topic|prereq1,prereq2" lines.

    Lines without a separator are logged and skipped, as are empty topic
    names and empty prerequisite entries.
    """
    kg = PrerequisiteGraph()

    for line_num, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue

        topic, sep, prereq_str = line.partition("|")
        if not sep:
            logger.warning("knowledge graph line %d has no '|' separator, skipped", line_num)
            continue

        topic = topic.strip()
        if not topic:
            continue

        prereqs = [p.strip() for p in prereq_str.split(",")]
        kg.set_prerequisites(topic, [p for p in prereqs if p])

    return kg


def load_prerequisite_graph(path: PathLike) -> PrerequisiteGraph:
    """Load the topic graph. A missing file yields an empty graph."""
    path = Path(path)
    if not path.exists():
        logger.warning("Knowledge graph file %s not found; review paths unavailable", path)
        return PrerequisiteGraph()

    with open(path, "r", encoding="utf-8") as f:
        kg = parse_graph_lines(f)

    logger.info("Loaded knowledge graph with %d topics from %s", len(kg), path)
    return kg


# ==================== Context ====================

def load_context(
    data_dir: PathLike,
    user_id: Optional[str] = None,
    questions_file: str = "questions.csv",
    graph_file: str = "knowledge_graph.txt",
) -> StudyContext:
    """Read catalog, the user's attempt log and the graph into one snapshot."""
    data_dir = Path(data_dir)
    return StudyContext.create(
        questions=load_questions(data_dir / questions_file),
        attempts=load_attempts(attempt_log_path(data_dir, user_id)),
        graph=load_prerequisite_graph(data_dir / graph_file),
    )
