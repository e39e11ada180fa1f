"""Strictly ordered execution of one test group's steps."""

from __future__ import annotations

import logging
import re
import threading
import time
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any

from baas_e2e_tester.expectations import GroupSkipped, HarnessFailure, StepTimeout
from baas_e2e_tester.suite_definition import StepContext, TestGroup, WorkflowStep

from .step_outcomes import GroupResult, GroupStatus, StepResult, StepStatus

_LOGGER = logging.getLogger(__name__)

DEFAULT_FINALIZE_TIMEOUT_SECONDS = 120.0


def run_group(
    group: TestGroup,
    context: StepContext,
    *,
    cancel_event: threading.Event | None = None,
    step_timeout_seconds: float | None = None,
    group_timeout_seconds: float | None = None,
    finalize_timeout_seconds: float = DEFAULT_FINALIZE_TIMEOUT_SECONDS,
    clock: Callable[[], float] = time.monotonic,
) -> GroupResult:
    """Run ``group``'s steps in declaration order and always finalize.

    The first failing step stops the group; later steps are recorded as not run.
    Every step and the finalization hook execute on one dedicated thread, so
    thread-affine clients (the browser) can be shared between steps. A timed-out
    step cannot be killed: its context gets ``stop_event`` set, and if its thread is
    still busy at the end the hook runs on a separate thread instead.
    """
    started = clock()
    group_budget = group.timeout_seconds or group_timeout_seconds
    deadline = started + group_budget if group_budget else None
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=_thread_prefix(group.name))
    results: list[StepResult] = []
    halt_status: StepStatus | None = None
    halt_message: str | None = None
    skip_reason: str | None = None
    cancelled = False
    cleanup_error: str | None = None
    finalized = False
    busy: Future[None] | None = None
    try:
        for workflow_step in group.steps:
            if halt_status is not None:
                results.append(
                    StepResult(name=workflow_step.name, status=halt_status, message=halt_message)
                )
                continue
            if cancel_event is not None and cancel_event.is_set():
                cancelled = True
                halt_status, halt_message = StepStatus.NOT_RUN, "run cancelled"
                results.append(
                    StepResult(name=workflow_step.name, status=halt_status, message=halt_message)
                )
                continue
            if workflow_step.excluded:
                _LOGGER.info("[%s] %s: excluded", group.name, workflow_step.name)
                results.append(
                    StepResult(
                        name=workflow_step.name,
                        status=StepStatus.EXCLUDED,
                        message=workflow_step.exclusion_reason,
                    )
                )
                continue

            budget = _step_budget(workflow_step, step_timeout_seconds, deadline, clock())
            result, still_running = _execute_step(
                executor, workflow_step, context, budget, group.name
            )
            results.append(result)
            if still_running is not None:
                busy = still_running
            if result.status == StepStatus.FAILED:
                halt_status = StepStatus.NOT_RUN
                halt_message = f"previous step '{workflow_step.name}' failed"
            elif result.status == StepStatus.SKIPPED:
                halt_status, halt_message = StepStatus.SKIPPED, result.message
                skip_reason = result.message
    finally:
        finalized, cleanup_error = _finalize(
            executor, group, context, finalize_timeout_seconds, busy
        )
        executor.shutdown(wait=False, cancel_futures=True)

    status = _group_status(results, skip_reason=skip_reason, cancelled=cancelled)
    reason = skip_reason if status == GroupStatus.SKIPPED else None
    if status == GroupStatus.CANCELLED:
        reason = "run cancelled"
    return GroupResult(
        name=group.name,
        status=status,
        steps=tuple(results),
        tags=group.tags,
        reason=reason,
        cleanup_error=cleanup_error,
        finalized=finalized,
        duration_seconds=clock() - started,
    )


def _execute_step(
    executor: ThreadPoolExecutor,
    workflow_step: WorkflowStep,
    context: StepContext,
    budget: float | None,
    group_name: str,
) -> tuple[StepResult, Future[None] | None]:
    """Run one step; the returned future is set only when the step outlived its budget."""
    _LOGGER.info("[%s] %s: started", group_name, workflow_step.name)
    if budget is not None and budget <= 0:
        exhausted = StepTimeout(step_name=workflow_step.name, timeout_seconds=0)
        return _failed(workflow_step.name, exhausted, 0.0), None

    started = time.monotonic()
    future: Future[None] = executor.submit(workflow_step.action, context)
    done, _ = wait([future], timeout=budget)
    elapsed = time.monotonic() - started
    if not done:
        future.cancel()
        context.stop_event.set()
        _LOGGER.error("[%s] %s: timed out after %.1fs", group_name, workflow_step.name, elapsed)
        timeout = StepTimeout(step_name=workflow_step.name, timeout_seconds=budget or 0)
        return _failed(workflow_step.name, timeout, elapsed), future

    error = future.exception()
    if error is None:
        _LOGGER.info("[%s] %s: passed (%.1fs)", group_name, workflow_step.name, elapsed)
        return (
            StepResult(
                name=workflow_step.name, status=StepStatus.PASSED, duration_seconds=elapsed
            ),
            None,
        )
    if isinstance(error, GroupSkipped):
        _LOGGER.warning("[%s] %s: skipped (%s)", group_name, workflow_step.name, error.reason)
        skipped = StepResult(
            name=workflow_step.name,
            status=StepStatus.SKIPPED,
            message=error.reason,
            duration_seconds=elapsed,
        )
        return skipped, None
    _LOGGER.error("[%s] %s: failed: %s", group_name, workflow_step.name, error)
    return _failed(workflow_step.name, error, elapsed), None


def _failed(step_name: str, error: BaseException, elapsed: float) -> StepResult:
    if isinstance(error, HarnessFailure):
        kind = error.kind
        actual = None if error.actual is None else _render(error.actual)
        expected = None if error.expected is None else _render(error.expected)
    else:
        kind, actual, expected = "error", None, None
    return StepResult(
        name=step_name,
        status=StepStatus.FAILED,
        error_kind=kind,
        message=f"{type(error).__name__}: {error}",
        actual=actual,
        expected=expected,
        duration_seconds=elapsed,
    )


def _finalize(
    executor: ThreadPoolExecutor,
    group: TestGroup,
    context: StepContext,
    timeout_seconds: float,
    busy: Future[None] | None,
) -> tuple[bool, str | None]:
    if busy is not None and not busy.done():
        _LOGGER.warning("[%s] step thread still busy; finalizing on a separate thread", group.name)
        spare = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=f"{_thread_prefix(group.name)}-cleanup"
        )
        future = spare.submit(_run_finalization, group, context)
        spare.shutdown(wait=False)
    else:
        future = executor.submit(_run_finalization, group, context)
    done, _ = wait([future], timeout=timeout_seconds)
    if not done:
        _LOGGER.warning("[%s] finalization did not complete in %.0fs", group.name, timeout_seconds)
        return False, f"finalization did not complete within {timeout_seconds:g}s"
    return True, future.result()


def _run_finalization(group: TestGroup, context: StepContext) -> str | None:
    errors: list[str] = []
    if group.finalize is not None:
        try:
            group.finalize(context)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            _LOGGER.warning("[%s] cleanup failed: %s", group.name, exc)
            errors.append(f"{type(exc).__name__}: {exc}")
    close = getattr(context.resources, "close", None)
    if close is not None:
        try:
            close()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            _LOGGER.warning("[%s] closing group resources failed: %s", group.name, exc)
            errors.append(f"{type(exc).__name__}: {exc}")
    return "; ".join(errors) or None


def _step_budget(
    workflow_step: WorkflowStep,
    default_seconds: float | None,
    deadline: float | None,
    now: float,
) -> float | None:
    candidates = [
        value
        for value in (workflow_step.timeout_seconds or default_seconds, _remaining(deadline, now))
        if value is not None
    ]
    return min(candidates) if candidates else None


def _remaining(deadline: float | None, now: float) -> float | None:
    if deadline is None:
        return None
    return max(0.0, deadline - now)


def _group_status(
    results: list[StepResult], *, skip_reason: str | None, cancelled: bool
) -> GroupStatus:
    if any(result.status == StepStatus.FAILED for result in results):
        return GroupStatus.FAILED
    if cancelled:
        return GroupStatus.CANCELLED
    if skip_reason is not None:
        return GroupStatus.SKIPPED
    return GroupStatus.PASSED


def _render(value: Any) -> str:
    return value if isinstance(value, str) else repr(value)


def _thread_prefix(group_name: str) -> str:
    return "group-" + re.sub(r"[^a-z0-9]+", "-", group_name.lower()).strip("-")
