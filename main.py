"""
quizpath command line.

Commands:
    stats         overall and per-topic accuracy
    recommend     top-K questions to practice next (optionally answer them)
    review-path   prerequisite-first review path for a topic
    practice      one random question
    wrong-book    one question from the wrong book
    exam          N distinct random questions with a summary
    report        export a Markdown learning report
"""

import logging
import random
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from config import Settings, get_settings
from practice.report import export_learning_report
from practice.session import (
    draw_exam,
    grade_answer,
    overall_summary,
    pick_random_question,
    pick_wrong_book_question,
    summarize_exam,
    wrong_question_ids,
)
from quizcore.models import AttemptRecord, Question, StudyContext
from quizcore.recommender import RecommendationScorer
from quizcore.review_planner import ReviewPathPlanner, TopicStatus
from quizcore.stats_aggregator import compute_topic_stats
from record_store import QuizPathError, append_attempt, attempt_log_path, load_context

console = Console()
app = typer.Typer(help="Self-study quiz tool with adaptive recommendations and review paths.")

STATUS_STYLE = {
    TopicStatus.NEEDS_STUDY: "[red]needs study[/red]",
    TopicStatus.WEAK: "[yellow]weak[/yellow]",
    TopicStatus.MASTERED: "[green]mastered[/green]",
}


@dataclass
class CliState:
    settings: Settings
    user: str


@app.callback()
def main(
    ctx: typer.Context,
    user: str = typer.Option("", "--user", "-u", help="User id; selects records_<user>.csv."),
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Directory with questions, records and graph."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log loader diagnostics."),
) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    settings = get_settings()
    if data_dir is not None:
        settings = replace(settings, paths=replace(settings.paths, data_dir=data_dir))
    ctx.obj = CliState(settings=settings, user=user)


# ==================== Helpers ====================

def _load(state: CliState) -> StudyContext:
    paths = state.settings.paths
    try:
        return load_context(
            paths.data_dir,
            state.user or None,
            questions_file=paths.questions_file,
            graph_file=paths.graph_file,
        )
    except QuizPathError as e:
        console.print(str(e), style="red", markup=False)
        raise typer.Exit(code=1)


def _ask(state: CliState, question: Question) -> AttemptRecord:
    """Present one question, time the answer and append it to the log."""
    console.print(f"Question #{question.id}  [dim]topic:[/dim] {question.topic}  [dim]difficulty:[/dim] {question.difficulty}")
    console.print(question.text)
    for i, option in enumerate(question.options):
        console.print(f"  {i}. {option}")

    start = time.monotonic()
    choice = typer.prompt("Your answer", type=int)
    record = grade_answer(question, choice, time.monotonic() - start)

    if record.correct:
        console.print("[green]Correct![/green]")
    else:
        console.print(f"[red]Wrong.[/red] The answer is {question.answer}: {question.correct_option}")

    append_attempt(record, attempt_log_path(state.settings.paths.data_dir, state.user or None))
    return record


def _topic_table(title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right")
    table.add_column("Topic")
    table.add_column("Attempts", justify="right")
    table.add_column("Accuracy", justify="right")
    table.add_column("Status")
    return table


# ==================== Commands ====================

@app.command()
def stats(ctx: typer.Context) -> None:
    """Show overall and per-topic accuracy."""
    state: CliState = ctx.obj
    study = _load(state)

    summary = overall_summary(study.attempts)
    if summary.total == 0:
        console.print("No practice records yet.")
        return

    console.print(f"[bold]Attempts:[/bold] {summary.total}  [bold]Correct:[/bold] {summary.correct}  "
                  f"[bold]Accuracy:[/bold] {summary.accuracy:.1f}%")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Topic")
    table.add_column("Attempts", justify="right")
    table.add_column("Correct", justify="right")
    table.add_column("Accuracy", justify="right")
    for topic, st in sorted(compute_topic_stats(study.attempts, study.question_index).items()):
        table.add_row(topic, str(st.attempts), str(st.correct), f"{st.accuracy:.1f}%")
    console.print(table)

    wrong = [qid for qid in wrong_question_ids(study.attempts) if qid in study.question_index]
    console.print(f"Wrong book: {len(wrong)} question(s)")


@app.command()
def recommend(
    ctx: typer.Context,
    k: Optional[int] = typer.Option(None, "--k", min=1, help="Number of questions (defaults to QUIZPATH_RECOMMEND_K)."),
    answer: bool = typer.Option(False, "--practice", help="Answer the recommended questions right away."),
) -> None:
    """Rank questions by error rate, time since last practice and difficulty."""
    state: CliState = ctx.obj
    study = _load(state)

    recs = RecommendationScorer(state.settings.recommend).recommend(study, k=k)
    if not recs:
        console.print("[yellow]No recommendation available: the question catalog is empty.[/yellow]")
        return

    table = Table(title=f"Recommended {len(recs)} question(s)", show_header=True, header_style="bold magenta")
    table.add_column("Question", justify="right")
    table.add_column("Topic")
    table.add_column("Difficulty", justify="right")
    table.add_column("Score", justify="right")
    for rec in recs:
        q = study.question_index[rec.question_id]
        table.add_row(str(q.id), q.topic, str(q.difficulty), f"{rec.score:.2f}")
    console.print(table)

    if answer:
        for i, rec in enumerate(recs, start=1):
            console.rule(f"Recommended {i}/{len(recs)}")
            _ask(state, study.question_index[rec.question_id])


@app.command("review-path")
def review_path(
    ctx: typer.Context,
    target: Optional[str] = typer.Argument(None, help="Topic to review; prompts with a ranking when omitted."),
) -> None:
    """Suggest a prerequisite-first review order for a topic."""
    state: CliState = ctx.obj
    study = _load(state)

    planner = ReviewPathPlanner.from_context(study, state.settings.weak_threshold)
    if study.graph.is_empty():
        console.print("[yellow]Knowledge graph not loaded; review paths are unavailable.[/yellow]")
        raise typer.Exit(code=1)

    topic_stats = compute_topic_stats(study.attempts, study.question_index)

    if target is None:
        ranked = planner.rank_topics(topic_stats)
        table = _topic_table("Topic mastery (weakest first)")
        for i, t in enumerate(ranked, start=1):
            table.add_row(str(i), t.topic, str(t.attempts), f"{t.accuracy:.1f}%", STATUS_STYLE[t.status])
        console.print(table)

        choice = typer.prompt(f"Topic to review (1-{len(ranked)})", type=int)
        if not 1 <= choice <= len(ranked):
            console.print("[red]Invalid choice.[/red]")
            raise typer.Exit(code=1)
        target = ranked[choice - 1].topic

    path = planner.build_annotated_path(target, topic_stats)
    if path is None or not path.steps:
        console.print(f"No review path found for {target!r}.")
        return

    table = _topic_table(f"Review path for {target}")
    for i, step in enumerate(path.steps, start=1):
        table.add_row(str(i), step.topic, str(step.attempts), f"{step.accuracy:.1f}%", STATUS_STYLE[step.status])
    console.print(table)

    if path.has_cycle:
        console.print("[yellow]Warning: the knowledge graph has a prerequisite cycle; "
                      "this order may not respect every dependency.[/yellow]")
    gap = path.first_gap
    if gap is not None:
        console.print(f"Start with [bold]{gap.topic}[/bold], then work down the list.")


@app.command()
def practice(ctx: typer.Context) -> None:
    """Answer one random question."""
    state: CliState = ctx.obj
    study = _load(state)

    question = pick_random_question(study.questions)
    if question is None:
        console.print("[yellow]The question catalog is empty.[/yellow]")
        return
    _ask(state, question)


@app.command("wrong-book")
def wrong_book(ctx: typer.Context) -> None:
    """Answer one question you previously got wrong."""
    state: CliState = ctx.obj
    study = _load(state)

    question = pick_wrong_book_question(study)
    if question is None:
        console.print("[green]The wrong book is empty.[/green]")
        return
    _ask(state, question)


@app.command()
def exam(
    ctx: typer.Context,
    count: int = typer.Option(10, "--count", "-n", help="Number of questions (clamped to the catalog size)."),
) -> None:
    """Mock exam of distinct random questions."""
    state: CliState = ctx.obj
    study = _load(state)

    questions = draw_exam(study.questions, count, random.Random())
    if not questions:
        console.print("[yellow]The question catalog is empty.[/yellow]")
        return

    records: List[AttemptRecord] = []
    for i, q in enumerate(questions, start=1):
        console.rule(f"Exam question {i}/{len(questions)}")
        records.append(_ask(state, q))

    result = summarize_exam(records, study.question_index)
    console.rule("Exam result")
    console.print(f"Correct {result.correct}/{result.total} ({result.accuracy:.1f}%)")
    for topic, st in sorted(result.by_topic.items()):
        console.print(f"  {topic}: {st.correct}/{st.attempts} ({st.accuracy:.1f}%)")


@app.command()
def report(ctx: typer.Context) -> None:
    """Export a Markdown learning report."""
    state: CliState = ctx.obj
    study = _load(state)

    path = export_learning_report(
        study,
        state.settings.paths.reports_dir,
        user_id=state.user,
        scorer=RecommendationScorer(state.settings.recommend),
        weak_threshold=state.settings.weak_threshold,
    )
    console.print(f"[bold green]Report written to {path}[/bold green]")


if __name__ == "__main__":
    app()
