"""Plain-text rendering of a run transcript and its grading history."""

from cert_desk.certification.domain.eligibility import is_eligible
from cert_desk.grading.domain.history import display_order
from cert_desk.regrade.domain.state import RegradeState
from cert_desk.run.domain.run import Run
from cert_desk.run.domain.step import Step

_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"

# Same bands as the console's evaluation badges.
_PASS_BAND = 90
_WARN_BAND = 70


def score_color(score: int) -> str:
    if score >= _PASS_BAND:
        return _GREEN
    if score >= _WARN_BAND:
        return _YELLOW
    return _RED


def render_run(run: Run, regrade: RegradeState | None = None, color: bool = True) -> list[str]:
    """Return the transcript lines for ``run``.

    When ``regrade`` is given, the step being reprocessed is marked ``>>`` and
    queued steps not yet reprocessed are marked ``..``.
    """
    lines = [_header(run, color=color)]
    breakdown = run.category_scores()
    if breakdown:
        lines.append(
            "  "
            + "  ".join(f"{category}: {score}" for category, score in breakdown.items())
        )
    lines.append("")
    for step in run.steps:
        lines.extend(_render_step(step, regrade=regrade, color=color))
    return lines


def _paint(text: str, code: str, color: bool) -> str:
    if not color:
        return text
    return f"{code}{text}{_RESET}"


def _header(run: Run, color: bool) -> str:
    score = run.display_score
    score_text = "--" if score is None else f"{score}/100"
    if score is not None:
        score_text = _paint(score_text, score_color(score), color)
    if run.certificate is not None:
        cert_text = f"certified {run.certificate.id}"
    elif is_eligible(run):
        cert_text = "eligible for certificate"
    else:
        cert_text = "not eligible"
    title = _paint(f"{run.agent_name} [{run.id}]", _BOLD, color)
    return f"{title}  status={run.status}  score={score_text}  {cert_text}"


def _marker(step: Step, regrade: RegradeState | None) -> str:
    if regrade is None:
        return "  "
    if regrade.current_step_id == step.id:
        return ">>"
    if regrade.is_pending(step.id):
        return ".."
    return "  "


def _render_step(step: Step, regrade: RegradeState | None, color: bool) -> list[str]:
    marker = _marker(step, regrade)
    if not step.is_scoreable:
        role = _paint(f"{step.role:<11}", _DIM, color)
        return [f"{marker} {role} {step.content}"]

    score = step.score if step.score is not None else 0
    badge = _paint(f"{score:>3}/100", score_color(score), color)
    source = "human" if step.is_human_graded else "auto"
    lines = [f"{marker} {'evaluation':<11} {badge} ({source}) {step.content}"]
    if step.is_human_graded and step.human_note:
        lines.append(f"{'':<15}note: {step.human_note}")
    for index, entry in display_order(step):
        flag = "*" if entry.is_elected else " "
        lines.append(
            _paint(
                f"{'':<15}{flag}[{index}] {entry.source:<9} {entry.score:>3}"
                f"  {entry.created_at.isoformat(timespec='seconds')}  {entry.reasoning}",
                _DIM,
                color,
            )
        )
    return lines
