"""Auth configuration round trip against the Management API."""

from __future__ import annotations

from baas_e2e_tester.expectations import assert_defined, assert_has_key, assert_immediate
from baas_e2e_tester.suite_definition import StepContext, TestGroup, step

from .scenario_support import API_KEYS, DOCS_URL

AUTH_CONFIG_RESOURCE = "auth-config"
TEST_SITE_URL = "https://test-site.example.com"
PREVIOUS_SITE_URL = "previous_site_url"


def _capture_site_url(context: StepContext) -> None:
    response = context.api.get_auth_config(context.project_ref)
    body = assert_defined(response.body, location="auth config body")
    previous = assert_has_key(body, "site_url", location="auth config body")
    context.state.set(PREVIOUS_SITE_URL, previous)


def _update_site_url(context: StepContext) -> None:
    response = context.api.update_auth_config(context.project_ref, {"site_url": TEST_SITE_URL})
    assert_immediate(response.field("site_url"), TEST_SITE_URL, location="patched site_url")


def _verify_site_url(context: StepContext) -> None:
    response = context.api.get_auth_config(context.project_ref)
    assert_immediate(response.field("site_url"), TEST_SITE_URL, location="stored site_url")


def _restore_site_url(context: StepContext) -> None:
    # Nothing was patched when the first step never captured the prior value.
    if PREVIOUS_SITE_URL not in context.state:
        return
    context.api.update_auth_config(
        context.project_ref, {"site_url": context.state.require(PREVIOUS_SITE_URL)}
    )


def build_auth_config_groups() -> tuple[TestGroup, ...]:
    return (
        TestGroup(
            name="Auth Config API",
            steps=(
                step("Get current auth configuration", _capture_site_url),
                step("Update site_url configuration", _update_site_url),
                step("Verify configuration update was applied", _verify_site_url),
            ),
            required_keys=API_KEYS,
            tags=("api", "auth", "config"),
            docs=(DOCS_URL,),
            shared_resources=frozenset({AUTH_CONFIG_RESOURCE}),
            finalize=_restore_site_url,
        ),
    )
