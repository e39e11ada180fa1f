"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from baas_e2e_tester.bootstrap import BootstrapError, bootstrap_project_environment
from baas_e2e_tester.configuration import (
    DEFAULT_CONFIG_FILENAME,
    write_placeholder_configuration,
)
from baas_e2e_tester.results_writing import render_summary
from baas_e2e_tester.run_execution import (
    DEFAULT_OUTPUT_DIR,
    EXIT_CANCELLED,
    RunExecutionError,
    RunRequest,
    execute_listing,
    execute_session_bootstrap,
    execute_suite_run,
)
from baas_e2e_tester.session_bootstrap import AuthenticationFailed

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"


class CliError(Exception):
    """Custom CLI error."""


def _config_option(function):
    return click.option(
        "--config",
        "config_path",
        required=False,
        type=click.Path(path_type=str),
        help="Path to the YAML test configuration file; environment variables override it",
    )(function)


def _tag_option(function):
    return click.option(
        "--tag",
        "tags",
        multiple=True,
        help="Only include groups carrying this tag (repeatable, leading @ optional)",
    )(function)


def _session_options(function):
    function = click.option(
        "--headed",
        is_flag=True,
        default=False,
        help="Show the browser window instead of running headless.",
    )(function)
    return click.option(
        "--session-file",
        "session_file",
        required=False,
        type=click.Path(path_type=str),
        help="Where the authenticated browser session is stored",
    )(function)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="baas-e2e-tester")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging threshold for harness diagnostics on stderr",
)
def cli(log_level: str) -> None:
    """End-to-end test harness for a hosted backend platform."""
    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT, force=True)


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML test configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML test configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="bootstrap")
@click.option(
    "--skip-browsers",
    is_flag=True,
    default=False,
    help="Do not download the Playwright browser binary.",
)
def bootstrap(skip_browsers: bool) -> None:
    """Prepare the local virtual environment, dependencies and browser."""
    repo_root = Path(__file__).resolve().parents[2]
    try:
        venv = bootstrap_project_environment(
            repo_root=repo_root, install_browsers=not skip_browsers
        )
    except BootstrapError as exc:
        raise CliError(str(exc)) from exc
    click.echo(f"local virtual environment ready: {venv.directory}")


@cli.command(name="list")
@_config_option
@_tag_option
def list_groups(config_path: str | None, tags: tuple[str, ...]) -> None:
    """List declared groups and whether the current environment can run them."""
    try:
        groups, plan = execute_listing(config_path, tags)
    except RunExecutionError as exc:
        raise CliError(str(exc)) from exc
    skip_reasons = {result.name: result.reason for result in plan.skipped}
    for group in groups:
        state = f"skip ({skip_reasons[group.name]})" if group.name in skip_reasons else "ready"
        click.echo(f"{group.name}  [{', '.join(group.tags)}]  {len(group.steps)} step(s)  {state}")


@cli.command(name="authenticate")
@_config_option
@_session_options
def authenticate_session(config_path: str | None, session_file: str | None, headed: bool) -> None:
    """Log in to the dashboard once and store the session for later runs."""
    try:
        artifact = execute_session_bootstrap(
            config_path,
            session_file=session_file,
            headless=False if headed else None,
        )
    except (RunExecutionError, AuthenticationFailed) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(artifact.path))


@cli.command(name="run")
@_config_option
@click.option(
    "--group",
    "group_names",
    multiple=True,
    help="Run only the named group (repeatable)",
)
@_tag_option
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    required=False,
    help="Number of groups that may run at the same time",
)
@click.option(
    "--output-dir",
    "output_dir",
    required=False,
    type=click.Path(path_type=str),
    help=f"Directory for the results workbook (default: {DEFAULT_OUTPUT_DIR}/)",
)
@_session_options
@click.option(
    "--reuse-session",
    is_flag=True,
    default=False,
    help="Reuse an existing session file instead of logging in again.",
)
@click.pass_context
def run_tests(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    ctx: click.Context,
    config_path: str | None,
    group_names: tuple[str, ...],
    tags: tuple[str, ...],
    workers: int | None,
    output_dir: str | None,
    session_file: str | None,
    headed: bool,
    reuse_session: bool,
) -> None:
    """Execute the selected test groups and write the results workbook."""
    try:
        outcome = execute_suite_run(
            RunRequest(
                config_path=config_path,
                group_names=group_names,
                tags=tags,
                workers=workers,
                output_dir=output_dir,
                session_file=session_file,
                reuse_session=reuse_session,
                headless=False if headed else None,
            )
        )
    except (RunExecutionError, AuthenticationFailed) as exc:
        raise CliError(str(exc)) from exc
    for line in render_summary(outcome.group_results):
        click.echo(line)
    if outcome.report_path is not None:
        click.echo(str(outcome.report_path))
    if outcome.exit_code:
        ctx.exit(outcome.exit_code)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        result = cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort as exc:
        click.echo("Aborted.", err=True)
        if isinstance(exc.__cause__, KeyboardInterrupt):
            return EXIT_CANCELLED
        return 1
    return result if isinstance(result, int) else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
