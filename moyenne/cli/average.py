"""CLI commands for evaluating averages over a file of grades."""

from __future__ import annotations

import functools
import typing as t
import urllib.parse
from pathlib import Path

import pydantic as p
import yaml

import moyenne.lib.cli as click
import moyenne.lib.json as json
from moyenne.averaging import AveragingEngine, get_strategy
from moyenne.core import di
from moyenne.model import AveragingMethod, Grade, GradeHistory, Target

F = t.TypeVar("F", bound=t.Callable[..., t.Any])

GradeList = p.TypeAdapter(list[Grade])


def load_grades(url: p.AnyUrl) -> list[Grade]:
    """Read grades from a JSON or YAML document.

    The document is either a list of grades or a mapping with a `grades` list.
    Field names may use the portal's camelCase spelling.
    """
    if url.scheme != "file" or url.path is None:
        raise click.BadParameter(f"cannot read grades from {url}")
    with Path(urllib.parse.unquote(url.path)).open(encoding="utf8") as f:
        data = yaml.safe_load(f)
    if isinstance(data, dict) and "grades" in data:
        data = data["grades"]
    try:
        return GradeList.validate_python(data or [])
    except p.ValidationError as ex:
        raise click.ClickException(f"invalid grade file: {ex}") from ex


def engine_options(f: F) -> F:
    f = click.option(
        "-t", "--target", default=None, type=click.EnumType(Target), help="score to average (default from config)"
    )(f)
    f = click.option(
        "-m",
        "--method",
        default=None,
        type=click.EnumType(AveragingMethod),
        help="averaging method (default from config)",
    )(f)
    f = click.option("--use-math", is_flag=True, default=False, help="extended method: average raw weighted values")(f)
    f = click.argument("grades_file", type=click.URIParamType())(f)
    return f


def select_engine(engine: AveragingEngine, method: AveragingMethod | None, use_math: bool) -> AveragingEngine:
    if method is None and not use_math:
        return engine
    method = method or engine.strategy.method
    if use_math and method is not AveragingMethod.Extended:
        raise click.UsageError("--use-math only applies to the extended method")
    options = {"use_math": True} if use_math else {}
    return AveragingEngine(get_strategy(method, **options), target=engine.target, utcnow=engine.utcnow)


def with_engine(f: F) -> F:
    # injection markers are read from this signature, so wrap only after inject
    @di.inject
    def wrapper(
        *args: t.Any,
        method: AveragingMethod | None,
        use_math: bool,
        engine: AveragingEngine = di.Provide["averaging.engine"],
        **kwargs: t.Any,
    ) -> t.Any:
        return f(*args, engine=select_engine(engine, method, use_math), **kwargs)

    return t.cast(F, functools.update_wrapper(wrapper, f))


@click.group("average")
def average():
    """Compute averages from a file of grades."""
    ...


@average.command("subject")
@engine_options
@click.option("-s", "--subject", default=None, help="only average grades of this subject id or name")
@with_engine
def average_subject(grades_file: p.AnyUrl, target: Target | None, subject: str | None, engine: AveragingEngine):
    """Print the average of one subject's grades."""
    grades = load_grades(grades_file)
    if subject is not None:
        grades = [g for g in grades if subject in (g.subject_id, g.subject_name)]
    click.echo(f"{engine.subject_average(grades, target):.2f}")


@average.command("overall")
@engine_options
@with_engine
def average_overall(grades_file: p.AnyUrl, target: Target | None, engine: AveragingEngine):
    """Print the overall average across subjects."""
    grades = load_grades(grades_file)
    click.echo(f"{engine.overall_average(grades, target):.2f}")


@average.command("diff")
@engine_options
@click.option("--grade-id", cls=click.RequiredXOROption, required_xor=["index"], help="id of the grade to measure")
@click.option("--index", type=int, default=None, help="position of the grade to measure in the file")
@with_engine
def average_diff(
    grades_file: p.AnyUrl,
    target: Target | None,
    grade_id: str | None,
    index: int | None,
    engine: AveragingEngine,
):
    """Print how much one grade moves its subject's average, as JSON."""
    grades = load_grades(grades_file)
    if grade_id is not None:
        grade = next((g for g in grades if g.id == grade_id), None)
        if grade is None:
            raise click.BadParameter(f"no grade with id {grade_id!r}", param_hint="--grade-id")
    else:
        assert index is not None
        if not -len(grades) <= index < len(grades):
            raise click.BadParameter(f"index {index} out of range", param_hint="--index")
        grade = grades[index]

    context = [g for g in grades if g.subject_key == grade.subject_key]
    diff = engine.average_diff([grade], context, target)
    click.echo(json.dumps(diff, indent=2))


@average.command("history")
@engine_options
@click.option("--final", type=float, default=None, help="value of the closing point instead of the overall average")
@with_engine
def average_history(grades_file: p.AnyUrl, target: Target | None, final: float | None, engine: AveragingEngine):
    """Print the overall average after each grade, as JSON."""
    grades = load_grades(grades_file)
    history: list[GradeHistory] = engine.averages_history(grades, target, final)
    click.echo(json.dumps(history, indent=2))
