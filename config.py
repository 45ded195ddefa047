"""
Configuration - File locations and recommendation tuning.

Values come from the environment (a local .env file is loaded first):
    QUIZPATH_DATA_DIR       directory holding questions/records/graph files
    QUIZPATH_REPORTS_DIR    where Markdown learning reports are written
    QUIZPATH_RECOMMEND_K    questions per recommendation round
    QUIZPATH_WEAK_THRESHOLD accuracy (%) below which a topic is weak
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from quizcore.recommender import RecommendParams
from quizcore.review_planner import WEAK_THRESHOLD

# Load environment variables from .env
load_dotenv()


@dataclass(frozen=True)
class PathsConfig:
    data_dir: Path = Path("data")
    reports_dir: Path = Path("reports")
    questions_file: str = "questions.csv"
    graph_file: str = "knowledge_graph.txt"


@dataclass(frozen=True)
class Settings:
    paths: PathsConfig = field(default_factory=PathsConfig)
    recommend: RecommendParams = field(default_factory=RecommendParams)
    weak_threshold: float = WEAK_THRESHOLD


def get_settings() -> Settings:
    """Build settings from environment variables, falling back to defaults."""
    paths = PathsConfig(
        data_dir=Path(os.getenv("QUIZPATH_DATA_DIR", "data")),
        reports_dir=Path(os.getenv("QUIZPATH_REPORTS_DIR", "reports")),
    )
    recommend = RecommendParams(
        default_k=int(os.getenv("QUIZPATH_RECOMMEND_K", 5)),
    )
    return Settings(
        paths=paths,
        recommend=recommend,
        weak_threshold=float(os.getenv("QUIZPATH_WEAK_THRESHOLD", WEAK_THRESHOLD)),
    )
