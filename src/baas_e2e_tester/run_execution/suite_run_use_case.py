"""Suite run use-case service."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from baas_e2e_tester.configuration import (
    Configuration,
    ConfigurationError,
    EnvironmentResolver,
    HarnessSettings,
    TestConfiguration,
    Unconfigured,
    load_configuration,
)
from baas_e2e_tester.dashboard_ui import PageOpener, open_dashboard_page
from baas_e2e_tester.results_writing import RunMetadata, write_results_workbook
from baas_e2e_tester.scenarios import build_catalog
from baas_e2e_tester.session_bootstrap import (
    SESSION_KEYS,
    SessionArtifact,
    authenticate,
    load_existing_session,
)
from baas_e2e_tester.suite_definition import (
    CarriedState,
    GroupResources,
    StepContext,
    TestGroup,
    default_api_client_factory,
)
from baas_e2e_tester.suite_definition.step_context import ApiClientFactory
from baas_e2e_tester.workflow_sequencing import (
    GroupResult,
    GroupStatus,
    StepResult,
    StepStatus,
    run_group,
)

from .resource_gate import ResourceGate
from .run_contracts import RunnableGroup, RunOutcome, RunPlan, RunRequest

_LOGGER = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = "results"
_WAIT_SLICE_SECONDS = 0.5

Authenticator = Callable[..., SessionArtifact]
ResourcesFactory = Callable[[TestGroup, Configuration, SessionArtifact | None], Any]


class RunExecutionError(Exception):
    """Raised when a run use case cannot be completed."""


def execute_suite_run(
    request: RunRequest,
    *,
    catalog: Sequence[TestGroup] | None = None,
    environ: Mapping[str, str] | None = None,
    authenticator: Authenticator = authenticate,
    page_opener: PageOpener = open_dashboard_page,
    api_client_factory: ApiClientFactory = default_api_client_factory,
    resources_factory: ResourcesFactory | None = None,
    cancel_event: threading.Event | None = None,
) -> RunOutcome:
    """Execute one suite run and return its outcome.

    Groups are selected by name and tag, gated on their required configuration,
    and dispatched to a worker pool. Unconfigured and excluded groups are
    reported as skipped without touching any external system.

    Raises:
      RunExecutionError: If the configuration is invalid, an unknown group is
        requested, or the results workbook cannot be written.
      AuthenticationFailed: If a selected group needs a dashboard session and the
        login flow fails. No group runs in that case.
    """
    test_configuration = _load(request.config_path)
    settings = _apply_overrides(test_configuration.harness, request)
    resolver = _build_resolver(test_configuration, settings, environ)
    groups = select_groups(
        catalog if catalog is not None else build_catalog(), request.group_names, request.tags
    )
    plan = plan_run(groups, resolver, settings)
    _LOGGER.info(
        "selected %d group(s): %d runnable, %d skipped",
        len(groups),
        len(plan.runnable),
        len(plan.skipped),
    )

    session = None
    if plan.needs_session:
        session = _prepare_session(
            resolver,
            settings,
            reuse_session=request.reuse_session,
            authenticator=authenticator,
            page_opener=page_opener,
        )

    factory = resources_factory or _default_resources_factory(
        settings, page_opener, api_client_factory
    )
    cancel = cancel_event or threading.Event()
    run_start = datetime.now(UTC)
    executed, cancelled = _dispatch(plan, session, factory, cancel)
    run_end = datetime.now(UTC)

    skipped_by_name = {result.name: result for result in plan.skipped}
    ordered = tuple(
        executed[name] if name in executed else skipped_by_name[name] for name in plan.order
    )
    report_path = _write_report(
        ordered,
        output_dir=request.output_dir,
        run_start=run_start,
        run_end=run_end,
        resolver=resolver,
        settings=settings,
        session=session,
        cancelled=cancelled,
    )
    return RunOutcome(
        group_results=ordered, report_path=report_path, session=session, cancelled=cancelled
    )


def execute_session_bootstrap(
    config_path: str | None,
    *,
    session_file: str | None = None,
    headless: bool | None = None,
    environ: Mapping[str, str] | None = None,
    authenticator: Authenticator = authenticate,
    page_opener: PageOpener = open_dashboard_page,
) -> SessionArtifact:
    """Log in once and persist the session artifact without running any group."""
    test_configuration = _load(config_path)
    settings = _apply_overrides(
        test_configuration.harness,
        RunRequest(session_file=session_file, headless=headless),
    )
    resolver = _build_resolver(test_configuration, settings, environ)
    return _prepare_session(
        resolver,
        settings,
        reuse_session=False,
        authenticator=authenticator,
        page_opener=page_opener,
    )


def execute_listing(
    config_path: str | None,
    tags: Sequence[str] = (),
    *,
    catalog: Sequence[TestGroup] | None = None,
    environ: Mapping[str, str] | None = None,
) -> tuple[tuple[TestGroup, ...], RunPlan]:
    """Return the tag-filtered catalog and how each group would be gated right now."""
    test_configuration = _load(config_path)
    settings = test_configuration.harness
    resolver = _build_resolver(test_configuration, settings, environ)
    groups = select_groups(catalog if catalog is not None else build_catalog(), (), tags)
    return groups, plan_run(groups, resolver, settings)


def select_groups(
    catalog: Sequence[TestGroup],
    group_names: Sequence[str] = (),
    tags: Sequence[str] = (),
) -> tuple[TestGroup, ...]:
    """Filter the catalog by exact group name and by tag, keeping catalog order."""
    known = {group.name for group in catalog}
    unknown = [name for name in group_names if name not in known]
    if unknown:
        raise RunExecutionError(
            f"Unknown group(s): {', '.join(unknown)}. Use 'list' to see available groups."
        )
    wanted = set(group_names)
    return tuple(
        group
        for group in catalog
        if (not wanted or group.name in wanted) and group.matches_tags(tags)
    )


def plan_run(
    groups: Sequence[TestGroup], resolver: EnvironmentResolver, settings: HarnessSettings
) -> RunPlan:
    """Split selected groups into runnable ones and pre-computed skip results."""
    runnable: list[RunnableGroup] = []
    skipped: list[GroupResult] = []
    for group in groups:
        step_names = tuple(workflow_step.name for workflow_step in group.steps)
        if group.excluded:
            reason = "excluded"
            if group.exclusion_reason:
                reason = f"excluded: {group.exclusion_reason}"
            skipped.append(GroupResult.skipped(group.name, step_names, reason, group.tags))
            continue
        resolution = resolver.resolve(group.effective_required_keys)
        if isinstance(resolution, Unconfigured):
            _LOGGER.warning("skipping group %s: %s", group.name, resolution.reason)
            skipped.append(
                GroupResult.skipped(group.name, step_names, resolution.reason, group.tags)
            )
            continue
        runnable.append(RunnableGroup(group=group, configuration=resolution))
    return RunPlan(
        settings=settings,
        runnable=tuple(runnable),
        skipped=tuple(skipped),
        order=tuple(group.name for group in groups),
    )


def _load(config_path: str | None) -> TestConfiguration:
    try:
        return load_configuration(config_path)
    except (ConfigurationError, OSError) as exc:
        raise RunExecutionError(str(exc)) from exc


def _apply_overrides(settings: HarnessSettings, request: RunRequest) -> HarnessSettings:
    overrides: dict[str, Any] = {}
    if request.workers is not None:
        if request.workers < 1:
            raise RunExecutionError("workers must be at least 1.")
        overrides["workers"] = request.workers
    if request.session_file:
        overrides["session_file"] = Path(request.session_file)
    if request.headless is not None:
        overrides["headless"] = request.headless
    return replace(settings, **overrides)


def _build_resolver(
    test_configuration: TestConfiguration,
    settings: HarnessSettings,
    environ: Mapping[str, str] | None,
) -> EnvironmentResolver:
    return EnvironmentResolver.from_sources(
        environ=environ,
        file_values=test_configuration.environment,
        env_prefix=settings.env_prefix,
    )


def _prepare_session(
    resolver: EnvironmentResolver,
    settings: HarnessSettings,
    *,
    reuse_session: bool,
    authenticator: Authenticator,
    page_opener: PageOpener,
) -> SessionArtifact:
    resolution = resolver.resolve(SESSION_KEYS)
    if isinstance(resolution, Unconfigured):
        raise RunExecutionError(f"Cannot authenticate: {resolution.reason}")
    if reuse_session:
        existing = load_existing_session(settings.session_file, resolution.base_url)
        if existing is not None:
            _LOGGER.info("reusing session artifact %s", existing.path)
            return existing
    return authenticator(
        resolution,
        session_path=settings.session_file,
        open_page=page_opener,
        headless=settings.headless,
        timeout_seconds=settings.login_timeout_seconds,
    )


def _default_resources_factory(
    settings: HarnessSettings,
    page_opener: PageOpener,
    api_client_factory: ApiClientFactory,
) -> ResourcesFactory:
    def _factory(
        group: TestGroup, configuration: Configuration, session: SessionArtifact | None
    ) -> GroupResources:
        del group
        return GroupResources(
            configuration,
            session=session,
            api_client_factory=api_client_factory,
            page_opener=page_opener,
            headless=settings.headless,
            ui_timeout_seconds=settings.login_timeout_seconds,
        )

    return _factory


def _dispatch(
    plan: RunPlan,
    session: SessionArtifact | None,
    factory: ResourcesFactory,
    cancel: threading.Event,
) -> tuple[dict[str, GroupResult], bool]:
    results: dict[str, GroupResult] = {}
    interrupted = False
    if not plan.runnable:
        return results, False
    gate = ResourceGate()
    with ThreadPoolExecutor(
        max_workers=plan.settings.workers, thread_name_prefix="group-worker"
    ) as executor:
        futures = {
            executor.submit(_run_one, item, session, factory, gate, plan.settings, cancel): item
            for item in plan.runnable
        }
        pending = set(futures)
        while pending:
            try:
                done, pending = wait(pending, timeout=_WAIT_SLICE_SECONDS)
            except KeyboardInterrupt:
                _LOGGER.warning("interrupt received, finishing in-flight cleanup")
                cancel.set()
                interrupted = True
                continue
            for future in done:
                item = futures[future]
                results[item.group.name] = future.result()
    return results, interrupted or cancel.is_set()


def _run_one(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    item: RunnableGroup,
    session: SessionArtifact | None,
    factory: ResourcesFactory,
    gate: ResourceGate,
    settings: HarnessSettings,
    cancel: threading.Event,
) -> GroupResult:
    group = item.group
    with gate.hold(group):
        if cancel.is_set():
            return _not_started(group)
        _LOGGER.info("starting group %s", group.name)
        try:
            state = CarriedState(group.seed() if group.seed is not None else None)
            resources = factory(group, item.configuration, session)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            _LOGGER.exception("could not prepare group %s", group.name)
            return _setup_failed(group, exc)
        context = StepContext(
            group_name=group.name,
            configuration=item.configuration,
            state=state,
            resources=resources,
        )
        result = run_group(
            group,
            context,
            cancel_event=cancel,
            step_timeout_seconds=settings.step_timeout_seconds,
            group_timeout_seconds=settings.group_timeout_seconds,
        )
    _LOGGER.info("group %s finished: %s", group.name, result.status.value)
    return result


def _not_started(group: TestGroup) -> GroupResult:
    return GroupResult(
        name=group.name,
        status=GroupStatus.CANCELLED,
        steps=tuple(
            StepResult(name=workflow_step.name, status=StepStatus.NOT_RUN, message="run cancelled")
            for workflow_step in group.steps
        ),
        tags=group.tags,
        reason="run cancelled",
    )


def _setup_failed(group: TestGroup, error: Exception) -> GroupResult:
    reason = f"group setup failed: {error}"
    return GroupResult(
        name=group.name,
        status=GroupStatus.FAILED,
        steps=tuple(
            StepResult(name=workflow_step.name, status=StepStatus.NOT_RUN, message=reason)
            for workflow_step in group.steps
        ),
        tags=group.tags,
        reason=reason,
    )


def _write_report(  # pylint: disable=too-many-arguments
    group_results: tuple[GroupResult, ...],
    *,
    output_dir: str | None,
    run_start: datetime,
    run_end: datetime,
    resolver: EnvironmentResolver,
    settings: HarnessSettings,
    session: SessionArtifact | None,
    cancelled: bool,
) -> Path:
    destination = Path(output_dir or DEFAULT_OUTPUT_DIR)
    output_path = destination / f"e2e-results-{run_start.strftime('%Y%m%d-%H%M%S')}.xlsx"
    snapshot = resolver.resolve(())
    base_url = snapshot.base_url if isinstance(snapshot, Configuration) else ""
    base_api_url = snapshot.base_api_url if isinstance(snapshot, Configuration) else ""
    run_metadata = RunMetadata(
        run_start=run_start,
        run_end=run_end,
        output_path=output_path.resolve(),
        base_url=base_url,
        base_api_url=base_api_url,
        workers=settings.workers,
        session_path=session.path if session is not None else None,
        cancelled=cancelled,
    )
    try:
        write_results_workbook(output_path, group_results, run_metadata)
    except OSError as exc:
        raise RunExecutionError(f"Failed to write results workbook: {exc}") from exc
    _LOGGER.info("results written to %s", output_path)
    return output_path.resolve()
