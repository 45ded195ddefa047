"""
Learning Report - Markdown summary of one user's practice history.

Sections:
    1. Overview (attempts, accuracy, wrong-book size)
    2. Per-topic statistics
    3. Wrong-question distribution by topic and difficulty
    4. Review advice (weak topics, suggested next questions)
"""

from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from quizcore.models import StudyContext
from quizcore.recommender import RecommendationScorer
from quizcore.review_planner import WEAK_THRESHOLD
from quizcore.stats_aggregator import compute_topic_stats

from .session import overall_summary, wrong_question_ids


def build_learning_report(
    ctx: StudyContext,
    user_id: str = "",
    generated_at: Optional[datetime] = None,
    scorer: Optional[RecommendationScorer] = None,
    weak_threshold: float = WEAK_THRESHOLD,
) -> str:
    """Render the learning report for one attempt-log snapshot."""
    generated_at = generated_at or datetime.now()
    summary = overall_summary(ctx.attempts)
    wrong_ids = [qid for qid in wrong_question_ids(ctx.attempts) if qid in ctx.question_index]

    lines: List[str] = [
        "# Learning Report",
        "",
        f"**User**: {user_id or 'default'}",
        "",
        f"**Generated**: {generated_at:%Y-%m-%d %H:%M:%S}",
        "",
        "---",
        "",
        "## 1. Overview",
        "",
    ]

    if summary.total == 0:
        lines += ["> No practice records yet, nothing to report.", ""]
        return "\n".join(lines + _footer())

    lines += [
        "| Metric | Value |",
        "|--------|-------|",
        f"| Attempts | {summary.total} |",
        f"| Correct | {summary.correct} |",
        f"| Wrong | {summary.wrong} |",
        f"| Accuracy | {summary.accuracy:.1f}% |",
        f"| Wrong book | {len(wrong_ids)} |",
        "",
    ]

    # Per-topic table, alphabetical
    topic_stats = compute_topic_stats(ctx.attempts, ctx.question_index)
    lines += [
        "## 2. By Topic",
        "",
        "| Topic | Attempts | Correct | Accuracy |",
        "|-------|----------|---------|----------|",
    ]
    for topic in sorted(topic_stats):
        st = topic_stats[topic]
        lines.append(f"| {topic} | {st.attempts} | {st.correct} | {st.accuracy:.1f}% |")
    lines.append("")

    if wrong_ids:
        by_topic = Counter(ctx.question_index[qid].topic for qid in wrong_ids)
        by_difficulty = Counter(ctx.question_index[qid].difficulty for qid in wrong_ids)
        lines += [
            "## 3. Wrong Questions",
            "",
            "### By topic",
            "",
            "| Topic | Wrong |",
            "|-------|-------|",
        ]
        lines += [f"| {t} | {n} |" for t, n in sorted(by_topic.items())]
        lines += [
            "",
            "### By difficulty",
            "",
            "| Difficulty | Wrong |",
            "|------------|-------|",
        ]
        lines += [f"| {d} | {n} |" for d, n in sorted(by_difficulty.items())]
        lines.append("")

    lines += ["## 4. Review Advice", ""]

    weak = [
        (topic, st.accuracy)
        for topic, st in sorted(topic_stats.items())
        if st.attempts > 0 and st.accuracy < weak_threshold
    ]
    if weak:
        lines += [
            "### Weak topics",
            "",
            f"Accuracy below {weak_threshold:.0f}%, review these first:",
            "",
        ]
        lines += [f"- **{topic}**: {acc:.1f}%" for topic, acc in weak]
        lines.append("")
    else:
        lines += [f"Every practiced topic is at or above {weak_threshold:.0f}% accuracy.", ""]

    if wrong_ids:
        lines += [
            "### Wrong book",
            "",
            f"{len(wrong_ids)} question(s) were last answered incorrectly. "
            "Practice them with the wrong-book mode and follow the review path "
            "for their topics.",
            "",
        ]

    recs = (scorer or RecommendationScorer()).recommend(ctx, now=generated_at.timestamp())
    if recs:
        lines += ["### Suggested next questions", ""]
        for rec in recs:
            q = ctx.question_index[rec.question_id]
            lines.append(f"- #{q.id} [{q.topic}] score {rec.score:.2f}")
        lines.append("")

    return "\n".join(lines + _footer())


def _footer() -> List[str]:
    return ["---", "", "*Generated by quizpath*", ""]


def report_filename(user_id: str, generated_at: datetime) -> str:
    return f"report_{user_id or 'default'}_{generated_at:%Y%m%d_%H%M}.md"


def export_learning_report(
    ctx: StudyContext,
    reports_dir: Union[str, Path],
    user_id: str = "",
    generated_at: Optional[datetime] = None,
    scorer: Optional[RecommendationScorer] = None,
    weak_threshold: float = WEAK_THRESHOLD,
) -> Path:
    """Write the report under reports_dir and return its path."""
    generated_at = generated_at or datetime.now()
    reports_dir = Path(reports_dir)
    reports_dir.mkdir(parents=True, exist_ok=True)

    path = reports_dir / report_filename(user_id, generated_at)
    path.write_text(
        build_learning_report(ctx, user_id, generated_at, scorer, weak_threshold),
        encoding="utf-8",
    )
    return path
