"""CLI entrypoint for cert-desk — typer app for grading and certifying runs."""

import asyncio
import sys
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar
from pathlib import Path

import structlog
import typer

from cert_desk.certification.application.gate import CertificationGate
from cert_desk.certification.infrastructure.observer import (
    StructlogCertificationObserver,
)
from cert_desk.cli.output.transcript import render_run
from cert_desk.config.domain.config import AppConfig
from cert_desk.config.infrastructure.observer import StructlogConfigObserver
from cert_desk.config.infrastructure.yaml_loader import load_config
from cert_desk.core.errors import CertDeskError
from cert_desk.grading.application.session import GradingSession
from cert_desk.grading.infrastructure.observer import StructlogGradingObserver
from cert_desk.interview.application.runner import InterviewRunner
from cert_desk.interview.infrastructure.litellm_responder import LiteLLMAgentResponder
from cert_desk.interview.infrastructure.observer import StructlogInterviewObserver
from cert_desk.interview.infrastructure.yaml_template_loader import load_template
from cert_desk.oracle.infrastructure.litellm import LiteLLMGradingOracle
from cert_desk.oracle.infrastructure.observer import StructlogOracleObserver
from cert_desk.persistence.domain.store import RunStore
from cert_desk.persistence.infrastructure.http_store import HttpRunStore
from cert_desk.persistence.infrastructure.json_store import JsonRunStore
from cert_desk.regrade.application.orchestrator import (
    RegradeOrchestrator,
    transcript_context,
)
from cert_desk.regrade.domain.observer import RegradeObserver
from cert_desk.regrade.infrastructure.composite_observer import (
    CompositeRegradeObserver,
)
from cert_desk.regrade.infrastructure.observer import StructlogRegradeObserver
from cert_desk.regrade.infrastructure.progress_observer import (
    ProgressRegradeObserver,
)

app = typer.Typer(add_completion=False)

_DEFAULT_CONFIG = Path("./cert-desk.yaml")

ConfigOption = typer.Option(
    _DEFAULT_CONFIG, "--config", "-c", help="Path to cert-desk config YAML"
)
LogFormatOption = typer.Option(
    "console", "--log-format", help="Log format: 'console' or 'json'"
)


def _configure_structlog(log_format: str) -> None:
    """Configure structlog based on the requested format."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _build_store(config: AppConfig) -> RunStore:
    persistence = config.persistence
    if persistence.kind == "http" and persistence.base_url is not None:
        return HttpRunStore(
            base_url=persistence.base_url,
            api_token=persistence.api_token,
            timeout_seconds=persistence.timeout_seconds,
        )
    if persistence.data_dir is None:
        raise typer.BadParameter("persistence.data_dir is not set")
    return JsonRunStore(data_dir=persistence.data_dir)


T = TypeVar("T")


def _run_command(
    log_format: str, config_path: Path, body: Callable[[AppConfig], Coroutine[Any, Any, T]]
) -> T:
    """Shared setup and error reporting for every command."""
    try:
        _configure_structlog(log_format=log_format)
        config = load_config(path=config_path, observer=StructlogConfigObserver())
        return asyncio.run(body(config))
    except KeyboardInterrupt:
        typer.echo("Interrupted.")
        sys.exit(1)
    except CertDeskError as exc:
        typer.echo(str(exc))
        sys.exit(1)


async def _open_session(config: AppConfig, run_id: str) -> GradingSession:
    store = _build_store(config)
    run = await store.get_run(run_id=run_id)
    return GradingSession(
        run=run,
        store=store,
        observer=StructlogGradingObserver(),
        pass_threshold=config.grading.pass_threshold,
    )


def _print_run(session: GradingSession) -> None:
    color = sys.stdout.isatty()
    for line in render_run(session.run, color=color):
        typer.echo(line)


@app.command()
def show(
    run_id: str = typer.Argument(..., help="Run to display"),
    config_path: Path = ConfigOption,
    log_format: str = LogFormatOption,
) -> None:
    """Print a run's transcript with every step's grading history."""

    async def body(config: AppConfig) -> None:
        _print_run(await _open_session(config, run_id))

    _run_command(log_format, config_path, body)


@app.command()
def review(
    run_id: str = typer.Argument(...),
    step_id: str = typer.Argument(...),
    score: int = typer.Option(..., "--score", "-s", help="Score from 0 to 100"),
    note: str = typer.Option(..., "--note", "-n", help="Reviewer's justification"),
    config_path: Path = ConfigOption,
    log_format: str = LogFormatOption,
) -> None:
    """Add a human review to a step and elect it."""

    async def body(config: AppConfig) -> None:
        session = await _open_session(config, run_id)
        await session.add_human_review(step_id=step_id, score=score, note=note)
        _print_run(session)

    _run_command(log_format, config_path, body)


@app.command()
def elect(
    run_id: str = typer.Argument(...),
    step_id: str = typer.Argument(...),
    entry_index: int = typer.Argument(..., help="History index shown in [brackets]"),
    config_path: Path = ConfigOption,
    log_format: str = LogFormatOption,
) -> None:
    """Elect an existing grade entry as the step's authoritative grade."""

    async def body(config: AppConfig) -> None:
        session = await _open_session(config, run_id)
        await session.elect(step_id=step_id, entry_index=entry_index)
        _print_run(session)

    _run_command(log_format, config_path, body)


@app.command("regrade-step")
def regrade_step(
    run_id: str = typer.Argument(...),
    step_id: str = typer.Argument(...),
    config_path: Path = ConfigOption,
    log_format: str = LogFormatOption,
) -> None:
    """Ask the grading oracle to re-grade a single step."""

    async def body(config: AppConfig) -> None:
        session = await _open_session(config, run_id)
        session.gradable_step(step_id)
        oracle = LiteLLMGradingOracle(config=config.oracle, observer=StructlogOracleObserver())
        question, answer = transcript_context(session.run, step_id)
        verdict = await oracle.re_evaluate(question=question, answer=answer)
        await session.add_automated_review(
            step_id=step_id, score=verdict.score, reasoning=verdict.reasoning
        )
        _print_run(session)

    _run_command(log_format, config_path, body)


@app.command()
def regrade(
    run_id: str = typer.Argument(..., help="Run whose steps are all re-graded"),
    config_path: Path = ConfigOption,
    log_format: str = LogFormatOption,
) -> None:
    """Re-grade every scored step of a run; on failure, retry or discard."""

    async def body(config: AppConfig) -> None:
        session = await _open_session(config, run_id)
        observers: list[RegradeObserver] = [StructlogRegradeObserver()]
        if log_format != "json":
            observers.append(ProgressRegradeObserver())
        orchestrator = RegradeOrchestrator(
            session=session,
            oracle=LiteLLMGradingOracle(
                config=config.oracle, observer=StructlogOracleObserver()
            ),
            observer=CompositeRegradeObserver(observers=observers),
            pacing_seconds=config.regrade.pacing_seconds,
            oracle_timeout_seconds=config.regrade.oracle_timeout_seconds,
        )

        state = await orchestrator.start()
        while state.phase == "failed" and state.failure is not None:
            failure = state.failure
            typer.echo(
                f"Regrade failed at step {failure.step_id}"
                f" ({failure.position + 1}/{state.total}): {failure.message}"
            )
            if typer.confirm("Retry from this step?", default=True):
                state = await orchestrator.retry()
            else:
                state = await orchestrator.discard()
                typer.echo("Regrade discarded; steps restored.")

        _print_run(session)

    _run_command(log_format, config_path, body)


@app.command()
def certify(
    run_id: str = typer.Argument(...),
    config_path: Path = ConfigOption,
    log_format: str = LogFormatOption,
) -> None:
    """Issue a certificate for a passing run."""

    async def body(config: AppConfig) -> None:
        store = _build_store(config)
        run = await store.get_run(run_id=run_id)
        gate = CertificationGate(store=store, observer=StructlogCertificationObserver())
        certified = await gate.issue(run)
        if certified.certificate is not None:
            typer.echo(
                f"Issued {certified.certificate.id} to {certified.agent_name}"
                f" with score {certified.certificate.score}/100"
            )

    _run_command(log_format, config_path, body)


@app.command()
def interview(
    template_path: Path = typer.Argument(..., help="Template YAML file"),
    agent_id: str = typer.Option(..., "--agent-id"),
    agent_name: str = typer.Option(..., "--agent-name"),
    config_path: Path = ConfigOption,
    log_format: str = LogFormatOption,
) -> None:
    """Interview an agent with a template's criteria and record the run."""

    async def body(config: AppConfig) -> None:
        if config.responder is None:
            typer.echo("Config has no 'responder' section; cannot interview.")
            raise typer.Exit(code=1)
        template = load_template(path=template_path)
        runner = InterviewRunner(
            store=_build_store(config),
            oracle=LiteLLMGradingOracle(
                config=config.oracle, observer=StructlogOracleObserver()
            ),
            responder=LiteLLMAgentResponder(config=config.responder, template=template),
            observer=StructlogInterviewObserver(),
            pass_threshold=config.grading.pass_threshold,
            pacing_seconds=config.regrade.pacing_seconds,
        )
        run = await runner.run(template=template, agent_id=agent_id, agent_name=agent_name)
        for line in render_run(run, color=sys.stdout.isatty()):
            typer.echo(line)

    _run_command(log_format, config_path, body)


if __name__ == "__main__":
    app()
