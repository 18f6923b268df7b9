import pytest
from playwright.sync_api import Error as PlaywrightError

from testsuites.ui_testing.framework.element_actions import (
    ElementActions,
    RetryConfig,
    run_with_retry,
    with_retry,
)
from testsuites.ui_testing.framework.exceptions import (
    ElementNotInteractableError,
    InvalidArgumentError,
    WaitTimeoutError,
)
from testsuites.ui_testing.framework.wait_policy import WaitPolicy
from testsuites.unit.fakes import FakeElement, FakePage


def make_actions(page):
    return ElementActions(
        page,
        WaitPolicy(timeout=0.1, poll_interval=0.02),
        retry_config=RetryConfig(max_attempts=3, delay_seconds=0.01),
    )


def test_retry_returns_first_success_without_extra_calls():
    actions = make_actions(FakePage())
    calls = []

    result = actions.retry(lambda: calls.append(1) or "done")

    assert result == "done"
    assert len(calls) == 1


def test_retry_stops_after_attempt_budget_and_reraises_last_failure():
    actions = make_actions(FakePage())
    calls = []

    def always_times_out():
        calls.append(1)
        raise WaitTimeoutError(f"attempt {len(calls)}")

    with pytest.raises(WaitTimeoutError, match="attempt 4"):
        actions.retry(always_times_out, attempts=4, delay=0.0)

    assert len(calls) == 4


def test_retry_sleeps_through_the_page_between_attempts():
    page = FakePage()
    actions = make_actions(page)
    outcomes = [PlaywrightError("flaky"), PlaywrightError("flaky"), "ok"]

    def flaky():
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    assert actions.retry(flaky, delay=0.01) == "ok"
    assert page.ticks == 2


def test_retry_does_not_absorb_programming_errors():
    actions = make_actions(FakePage())
    calls = []

    def broken():
        calls.append(1)
        raise KeyError("bug")

    with pytest.raises(KeyError):
        actions.retry(broken)

    assert len(calls) == 1


def test_retry_config_rejects_zero_attempts():
    with pytest.raises(InvalidArgumentError):
        RetryConfig(max_attempts=0)


def test_run_with_retry_applies_backoff_up_to_max_delay():
    delays = []
    failures = iter([PlaywrightError("x")] * 3)

    def operation():
        error = next(failures, None)
        if error:
            raise error
        return 42

    config = RetryConfig(max_attempts=4, delay_seconds=1.0, backoff_multiplier=3.0, max_delay_seconds=5.0)
    assert run_with_retry(operation, config, sleep=delays.append) == 42
    assert delays == [1.0, 3.0, 5.0]


def test_with_retry_decorator():
    calls = []

    @with_retry(RetryConfig(max_attempts=3, delay_seconds=0.0))
    def read_status():
        calls.append(1)
        if len(calls) < 3:
            raise WaitTimeoutError("not yet")
        return "ready"

    assert read_status() == "ready"
    assert len(calls) == 3
    assert read_status.__name__ == "read_status"


def test_click_on_overlay_covered_button_succeeds_on_third_attempt():
    page = FakePage()
    button = page.add("#save", FakeElement(covered=True))
    actions = make_actions(page)
    attempts = []

    def click_save():
        attempts.append(1)
        if len(attempts) == 3:
            button.covered = False
        actions.click("#save")

    actions.retry(click_save, attempts=3)

    assert len(attempts) == 3
    assert button.clicks == 1


def test_retry_click_absorbs_intercepted_clicks():
    page = FakePage()
    button = page.add("#save", FakeElement())
    button.click_errors = [
        "<div class=\"oxd-form-loader\"> intercepts pointer events",
        "<div class=\"oxd-form-loader\"> intercepts pointer events",
    ]
    actions = make_actions(page)

    actions.retry_click("#save", attempts=3)

    assert button.click_attempts == 3
    assert button.clicks == 1


def test_retry_click_gives_up_with_not_interactable():
    page = FakePage()
    button = page.add("#save", FakeElement(covered=True))
    actions = make_actions(page)

    with pytest.raises(ElementNotInteractableError):
        actions.retry_click("#save", attempts=2)

    assert button.click_attempts == 0
