# ================================================================================
# Element Actions Module
# ================================================================================
#
# Wait-gated element interactions over the synchronous Playwright API.
#
# Every action first establishes a visibility or clickability gate under the
# session's WaitPolicy, then dispatches a single driver call. Driver failures
# are re-raised as the framework's exception taxonomy (see exceptions.py).
#
# Key Features:
#   - Bounded polling waits that survive node replacement (re-resolution)
#   - Fixed-delay retry helper for any operation
#   - Native and autocomplete-style dropdown selection
#   - Keyboard and mouse actions, drag and drop, uploads
#   - Boolean probes that never raise
#   - Allure step integration
#
# ================================================================================

from __future__ import annotations

import time
from functools import wraps
from pathlib import Path
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Union

import allure
from loguru import logger
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from .exceptions import (
    RETRYABLE_ERRORS,
    ActionError,
    ElementNotInteractableError,
    InvalidArgumentError,
    OptionNotFoundError,
    StaleElementError,
    WaitTimeoutError,
    classify_driver_error,
    is_stale_error,
)
from .smart_locator import LocatorSpec, SmartLocator
from .wait_policy import WaitPolicy


# A selector string, a LocatorSpec, a Playwright Locator or ElementHandle
Target = Any

IS_CONNECTED_JS = "el => el.isConnected"
IS_OCCLUDED_JS = """el => {
    const r = el.getBoundingClientRect();
    if (r.width === 0 || r.height === 0) return false;
    const hit = document.elementFromPoint(r.left + r.width / 2, r.top + r.height / 2);
    return !!hit && hit !== el && !el.contains(hit);
}"""
READ_OPTIONS_JS = """el => Array.from(el.options || []).map(o => ({
    text: (o.text || '').trim(), value: o.value, selected: o.selected
}))"""
CLICK_JS = "el => el.click()"
SCROLL_INTO_VIEW_JS = "el => el.scrollIntoView(true)"
SET_STYLE_JS = "(el, style) => el.setAttribute('style', style)"
GET_STYLE_JS = "el => el.getAttribute('style') || ''"

HIGHLIGHT_STYLE = "background: yellow; border: 2px solid red;"

# Probe states
_READY = "ready"
_HIDDEN = "hidden"
_DISABLED = "disabled"
_COVERED = "covered"
_BLOCKED_STATES = (_DISABLED, _COVERED)


class Point(NamedTuple):
    x: float
    y: float


class Size(NamedTuple):
    width: float
    height: float


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(
        self,
        max_attempts: int = 3,
        delay_seconds: float = 0.5,
        backoff_multiplier: float = 1.0,
        max_delay_seconds: float = 10.0
    ):
        """
        Initialize retry configuration.

        Args:
            max_attempts: Maximum number of attempts (first call included)
            delay_seconds: Delay between attempts
            backoff_multiplier: Multiplier applied to the delay after each
                failure; 1.0 keeps the delay fixed
            max_delay_seconds: Maximum delay between attempts
        """
        if max_attempts < 1:
            raise InvalidArgumentError(f"Retry attempts must be at least 1, got {max_attempts}")
        self.max_attempts = max_attempts
        self.delay_seconds = delay_seconds
        self.backoff_multiplier = backoff_multiplier
        self.max_delay_seconds = max_delay_seconds


def run_with_retry(
    operation: Callable[[], Any],
    config: RetryConfig,
    sleep: Callable[[float], None] = time.sleep,
    name: str = "operation",
) -> Any:
    """
    Invoke ``operation`` until it succeeds or the attempt budget is spent.

    Only driver-level failures (``RETRYABLE_ERRORS``) are absorbed; anything
    else propagates immediately. The last failure is re-raised unchanged.

    Returns:
        Whatever ``operation`` returns on its first successful call
    """
    last_exception: Optional[BaseException] = None
    delay = config.delay_seconds

    for attempt in range(config.max_attempts):
        try:
            return operation()
        except RETRYABLE_ERRORS as e:
            last_exception = e
            if attempt < config.max_attempts - 1:
                logger.warning(
                    f"Attempt {attempt + 1}/{config.max_attempts} failed for "
                    f"{name}: {e}. Retrying in {delay}s..."
                )
                sleep(delay)
                delay = min(delay * config.backoff_multiplier, config.max_delay_seconds)

    logger.error(
        f"All {config.max_attempts} attempts failed for {name}: {last_exception}"
    )
    raise last_exception


def with_retry(config: RetryConfig = None):
    """
    Decorator for adding retry logic to any callable.

    Args:
        config: RetryConfig object for controlling retry behavior
    """
    if config is None:
        config = RetryConfig()

    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            return run_with_retry(
                lambda: func(*args, **kwargs),
                config,
                name=func.__name__,
            )

        return wrapper
    return decorator


class ElementActions:
    """
    Wait-gated element interaction layer for one browser session.

    Targets may be selector strings, ``LocatorSpec`` descriptors, Playwright
    ``Locator`` objects (all re-resolved on staleness) or ``ElementHandle``
    objects (fixed references: staleness is reported, not repaired).

    Example:
        actions = ElementActions(page, WaitPolicy(timeout=10))
        actions.type_text("input[name='username']", "Admin")
        actions.click(LocatorSpec("login_button", "//button[@type='submit']"))
    """

    def __init__(
        self,
        page: Any,
        policy: Optional[WaitPolicy] = None,
        highlight: bool = False,
        retry_config: Optional[RetryConfig] = None,
    ):
        """
        Initialize ElementActions with a Playwright page.

        Args:
            page: Playwright Page object
            policy: Wait policy shared by all operations
            highlight: Flash each element before acting on it
            retry_config: Defaults for ``retry``

        Raises:
            InvalidArgumentError: If ``page`` is None
        """
        if page is None:
            raise InvalidArgumentError(
                "Page passed to ElementActions is None. "
                "Ensure the browser session is started before creating page objects."
            )
        self.page = page
        self.policy = policy or WaitPolicy()
        self.highlight_enabled = highlight
        self.retry_config = retry_config or RetryConfig()
        self.smart = SmartLocator()
        # Frame scope for selector resolution; None means the top-level page
        self.scope: Any = None

    # =========================================================================
    # Target Resolution
    # =========================================================================

    @property
    def root(self) -> Any:
        """Page or frame that selector strings are resolved against."""
        return self.scope if self.scope is not None else self.page

    def resolve(self, target: Target) -> Any:
        """Turn a target into a Playwright Locator or ElementHandle."""
        if target is None:
            raise InvalidArgumentError("Element target is None")
        if isinstance(target, str):
            return self.root.locator(target)
        if isinstance(target, LocatorSpec):
            return self.smart.resolve(target, self.root)
        return target

    @staticmethod
    def is_reresolvable(target: Target) -> bool:
        """Locators and descriptors can be resolved again; element handles cannot."""
        return isinstance(target, (str, LocatorSpec)) or hasattr(target, "wait_for")

    @staticmethod
    def describe(target: Target) -> str:
        """Human-readable target description for logs and report steps."""
        if isinstance(target, LocatorSpec):
            return target.name
        if isinstance(target, str):
            return target
        return repr(target)

    def _sleep(self, seconds: float) -> None:
        # Sync Playwright only dispatches page events while a driver call runs
        self.page.wait_for_timeout(seconds * 1000)

    def _probe_kwargs(self, element: Any) -> Dict[str, Any]:
        if hasattr(element, "wait_for"):
            return {"timeout": min(self.policy.timeout_ms, 1000)}
        return {}

    def _action_timeout_ms(self, timeout: Optional[float]) -> int:
        return int((timeout if timeout is not None else self.policy.timeout) * 1000)

    # =========================================================================
    # Waits
    # =========================================================================

    def _visibility_state(self, element: Any) -> str:
        return _READY if element.is_visible() else _HIDDEN

    def _clickable_state(self, element: Any) -> str:
        if not element.is_visible():
            return _HIDDEN
        kwargs = self._probe_kwargs(element)
        if not element.is_enabled(**kwargs):
            return _DISABLED
        if element.evaluate(IS_OCCLUDED_JS, **kwargs):
            return _COVERED
        return _READY

    def _poll(
        self,
        target: Target,
        probe: Callable[[Any], str],
        timeout: Optional[float],
        what: str,
        stale_is_ready: bool = False,
    ) -> Any:
        """
        Poll ``probe`` until it reports ready or the budget runs out.

        Staleness of a re-resolvable target restarts the wait against a fresh
        resolution within the remaining budget. A stale ``ElementHandle``
        raises ``StaleElementError``.
        """
        budget = timeout if timeout is not None else self.policy.timeout
        deadline = time.monotonic() + budget
        description = self.describe(target)
        reresolvable = self.is_reresolvable(target)
        refresh_each_poll = isinstance(target, (str, LocatorSpec))

        element = self.resolve(target)
        last_state = _HIDDEN
        restarts = 0

        while True:
            try:
                if not reresolvable and not element.evaluate(IS_CONNECTED_JS):
                    raise StaleElementError(f"'{description}' is no longer attached to the DOM")
                state = probe(element)
            except StaleElementError:
                if stale_is_ready:
                    return element
                raise
            except PlaywrightError as e:
                if is_stale_error(e):
                    if stale_is_ready:
                        return element
                    if not reresolvable:
                        raise StaleElementError(
                            f"'{description}' is no longer attached to the DOM"
                        ) from e
                    restarts += 1
                    logger.debug(f"'{description}' went stale while waiting, re-resolving ({restarts})")
                    element = self.resolve(target)
                    state = _HIDDEN
                elif isinstance(e, PlaywrightTimeoutError):
                    state = _HIDDEN
                else:
                    error = classify_driver_error(e, description)
                    if error is e:
                        raise
                    raise error from e

            if state == _READY:
                return element
            last_state = state

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            self._sleep(min(self.policy.poll_interval, remaining))
            if refresh_each_poll:
                element = self.resolve(target)

        if last_state in _BLOCKED_STATES:
            raise ElementNotInteractableError(
                f"'{description}' is visible but {last_state} after {budget:.1f}s"
            )
        raise WaitTimeoutError(f"'{description}' was not {what} after {budget:.1f}s")

    def wait_visible(self, target: Target, timeout: Optional[float] = None) -> Any:
        """
        Wait until the element is attached and rendered.

        Args:
            target: Element target
            timeout: Override for the policy timeout, in seconds

        Returns:
            The resolved Locator/ElementHandle

        Raises:
            WaitTimeoutError: Element never became visible
            StaleElementError: Fixed element handle was detached
        """
        element = self._poll(target, self._visibility_state, timeout, "visible")
        self._highlight(element)
        return element

    def wait_clickable(self, target: Target, timeout: Optional[float] = None) -> Any:
        """
        Wait until the element is visible, enabled and not covered.

        Raises:
            WaitTimeoutError: Element never became visible
            ElementNotInteractableError: Element stayed disabled or covered
            StaleElementError: Fixed element handle was detached
        """
        element = self._poll(target, self._clickable_state, timeout, "clickable")
        self._highlight(element)
        return element

    def wait_hidden(self, target: Target, timeout: Optional[float] = None) -> None:
        """Wait until the element is hidden or removed from the DOM."""
        self._poll(
            target,
            lambda el: _HIDDEN if el.is_visible() else _READY,
            timeout,
            "hidden",
            stale_is_ready=True,
        )

    def wait_enabled(self, target: Target, timeout: Optional[float] = None) -> Any:
        """Wait until the element is visible and enabled."""
        def probe(el: Any) -> str:
            if not el.is_visible():
                return _HIDDEN
            return _READY if el.is_enabled(**self._probe_kwargs(el)) else _DISABLED

        return self._poll(target, probe, timeout, "enabled")

    def wait_disabled(self, target: Target, timeout: Optional[float] = None) -> Any:
        """Wait until the element is present and disabled."""
        def probe(el: Any) -> str:
            if not el.is_visible():
                return _HIDDEN
            return _HIDDEN if el.is_enabled(**self._probe_kwargs(el)) else _READY

        return self._poll(target, probe, timeout, "disabled")

    def wait_for_text(self, target: Target, text: str, timeout: Optional[float] = None) -> Any:
        """Wait until the element's rendered text contains ``text``."""
        def probe(el: Any) -> str:
            if not el.is_visible():
                return _HIDDEN
            return _READY if text in (el.inner_text(**self._probe_kwargs(el)) or "") else _HIDDEN

        return self._poll(target, probe, timeout, f"showing text '{text}'")

    def wait_for_attribute(
        self,
        target: Target,
        attribute: str,
        value: str,
        timeout: Optional[float] = None,
    ) -> Any:
        """Wait until ``attribute`` of the element equals ``value``."""
        def probe(el: Any) -> str:
            current = el.get_attribute(attribute, **self._probe_kwargs(el))
            return _READY if current == value else _HIDDEN

        return self._poll(target, probe, timeout, f"having {attribute}='{value}'")

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _dispatch(self, description: str, func: Callable, *args: Any, **kwargs: Any) -> Any:
        """Run one driver call, translating its failure into the taxonomy."""
        try:
            return func(*args, **kwargs)
        except PlaywrightError as e:
            error = classify_driver_error(e, description)
            if error is e:
                raise
            raise error from e

    def _highlight(self, element: Any) -> None:
        if not self.highlight_enabled:
            return
        try:
            original_style = element.evaluate(GET_STYLE_JS)
            element.evaluate(SET_STYLE_JS, HIGHLIGHT_STYLE)
            self._sleep(0.5)
            element.evaluate(SET_STYLE_JS, original_style)
        except PlaywrightError as e:
            logger.debug(f"Highlight skipped: {e}")

    def highlight_element(self, target: Target) -> None:
        """Flash the element regardless of the session highlight setting."""
        element = self.wait_visible(target)
        enabled, self.highlight_enabled = self.highlight_enabled, True
        try:
            self._highlight(element)
        finally:
            self.highlight_enabled = enabled

    # =========================================================================
    # Mouse Actions
    # =========================================================================

    def click(self, target: Target, timeout: Optional[float] = None, force: bool = False) -> None:
        """
        Click an element once it is clickable.

        Raises:
            WaitTimeoutError: Element never became visible
            ElementNotInteractableError: Element disabled, hidden or covered
        """
        description = self.describe(target)
        with allure.step(f"Click: {description}"):
            logger.info(f"Clicking element: {description}")
            element = self.wait_clickable(target, timeout)
            self._dispatch(
                description, element.click,
                timeout=self._action_timeout_ms(timeout), force=force,
            )
            logger.debug(f"Successfully clicked: {description}")

    def double_click(self, target: Target, timeout: Optional[float] = None) -> None:
        """Double-click an element."""
        description = self.describe(target)
        with allure.step(f"Double click: {description}"):
            element = self.wait_clickable(target, timeout)
            self._dispatch(description, element.dblclick, timeout=self._action_timeout_ms(timeout))

    def right_click(self, target: Target, timeout: Optional[float] = None) -> None:
        """Open the context menu of an element."""
        description = self.describe(target)
        with allure.step(f"Right click: {description}"):
            element = self.wait_clickable(target, timeout)
            self._dispatch(
                description, element.click,
                button="right", timeout=self._action_timeout_ms(timeout),
            )

    def hover(self, target: Target, timeout: Optional[float] = None) -> None:
        """Move the mouse over an element."""
        description = self.describe(target)
        with allure.step(f"Hover: {description}"):
            element = self.wait_visible(target, timeout)
            self._dispatch(description, element.hover, timeout=self._action_timeout_ms(timeout))

    def click_with_javascript(self, target: Target, timeout: Optional[float] = None) -> None:
        """Click through ``HTMLElement.click()``, bypassing hit testing."""
        description = self.describe(target)
        with allure.step(f"JS click: {description}"):
            element = self.wait_visible(target, timeout)
            self._dispatch(description, element.evaluate, CLICK_JS)

    def retry_click(self, target: Target, attempts: Optional[int] = None) -> None:
        """Click with the retry helper around the whole wait-and-click."""
        self.retry(lambda: self.click(target), attempts, description=f"click {self.describe(target)}")

    def drag_and_drop(self, source: Target, destination: Target, timeout: Optional[float] = None) -> None:
        """Drag ``source`` and drop it onto ``destination``."""
        source_desc, target_desc = self.describe(source), self.describe(destination)
        with allure.step(f"Drag and drop: {source_desc} -> {target_desc}"):
            logger.info(f"Dragging from {source_desc} to {target_desc}")
            source_el = self.wait_visible(source, timeout)
            target_el = self.wait_visible(destination, timeout)
            if hasattr(source_el, "drag_to") and hasattr(target_el, "wait_for"):
                self._dispatch(source_desc, source_el.drag_to, target_el)
                return
            start, end = source_el.bounding_box(), target_el.bounding_box()
            if not start or not end:
                raise ElementNotInteractableError(f"Cannot drag {source_desc}: element has no box")
            mouse = self.page.mouse
            mouse.move(start["x"] + start["width"] / 2, start["y"] + start["height"] / 2)
            mouse.down()
            mouse.move(end["x"] + end["width"] / 2, end["y"] + end["height"] / 2)
            mouse.up()

    # =========================================================================
    # Keyboard and Form Actions
    # =========================================================================

    def type_text(
        self,
        target: Target,
        text: str,
        clear: bool = False,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Type text into an element once it is visible.

        Args:
            target: Input element target
            text: Text to type
            clear: Clear existing content first
            timeout: Override for the policy timeout, in seconds
        """
        description = self.describe(target)
        shown = "*" * len(text) if "password" in description.lower() else text
        with allure.step(f"Type into {description}: {shown}"):
            logger.info(f"Typing into: {description}")
            element = self.wait_visible(target, timeout)
            if clear:
                self._dispatch(description, element.fill, "")
            typer = getattr(element, "press_sequentially", None) or element.type
            self._dispatch(description, typer, text)
            logger.debug(f"Successfully typed into: {description}")

    def clear_and_type(self, target: Target, text: str, timeout: Optional[float] = None) -> None:
        """Clear the element, then type ``text``."""
        self.type_text(target, text, clear=True, timeout=timeout)

    def clear(self, target: Target, timeout: Optional[float] = None) -> None:
        """Clear an input field."""
        description = self.describe(target)
        element = self.wait_visible(target, timeout)
        self._dispatch(description, element.fill, "")

    def press_key(self, key: str, target: Optional[Target] = None) -> None:
        """
        Press a keyboard key.

        Args:
            key: Key to press (e.g., "Enter", "Tab", "Escape")
            target: Optional element to focus before pressing
        """
        if target is not None:
            element = self.wait_visible(target)
            self._dispatch(self.describe(target), element.press, key)
        else:
            self.page.keyboard.press(key)
        logger.debug(f"Pressed key: {key}")

    def upload_file(self, target: Target, file_path: Union[str, Path, List[str]]) -> None:
        """Set files on a file input."""
        description = self.describe(target)
        with allure.step(f"Upload file: {description}"):
            logger.info(f"Uploading file to: {description}")
            element = self.resolve(target)
            self._dispatch(description, element.set_input_files, file_path)

    def check(self, target: Target) -> None:
        """Select a checkbox if it is not already selected."""
        element = self.wait_clickable(target)
        if not element.is_checked():
            self._dispatch(self.describe(target), element.check)

    def uncheck(self, target: Target) -> None:
        """Deselect a checkbox if it is selected."""
        element = self.wait_clickable(target)
        if element.is_checked():
            self._dispatch(self.describe(target), element.uncheck)

    # =========================================================================
    # Dropdowns
    # =========================================================================

    def _read_options(self, element: Any, description: str) -> List[Dict[str, Any]]:
        return self._dispatch(description, element.evaluate, READ_OPTIONS_JS) or []

    def _select_index(self, target: Target, matcher: Callable[[int, Dict[str, Any]], bool], criterion: str) -> None:
        description = self.describe(target)
        with allure.step(f"Select {criterion} in {description}"):
            element = self.wait_visible(target)
            options = self._read_options(element, description)
            for index, option in enumerate(options):
                if matcher(index, option):
                    self._dispatch(description, element.select_option, index=index)
                    logger.debug(f"Selected {criterion} in {description}")
                    return
            available = [option["text"] for option in options]
            raise OptionNotFoundError(
                f"No option matching {criterion} in '{description}'. Available: {available}"
            )

    def select_by_text(self, dropdown: Target, text: str) -> None:
        """Select a native ``<select>`` option by its visible text."""
        expected = text.strip()
        self._select_index(dropdown, lambda _, o: o["text"] == expected, f"text '{text}'")

    def select_by_value(self, dropdown: Target, value: str) -> None:
        """Select a native ``<select>`` option by its value attribute."""
        self._select_index(dropdown, lambda _, o: o["value"] == value, f"value '{value}'")

    def select_by_index(self, dropdown: Target, index: int) -> None:
        """Select a native ``<select>`` option by position."""
        self._select_index(dropdown, lambda i, _: i == index, f"index {index}")

    def get_selected_option(self, dropdown: Target) -> str:
        """Return the text of the first selected option."""
        description = self.describe(dropdown)
        element = self.wait_visible(dropdown)
        for option in self._read_options(element, description):
            if option["selected"]:
                return option["text"]
        raise OptionNotFoundError(f"No option is selected in '{description}'")

    def get_all_options(self, dropdown: Target) -> List[str]:
        """Return the texts of all options, in document order."""
        element = self.wait_visible(dropdown)
        return [option["text"] for option in self._read_options(element, self.describe(dropdown))]

    def _enumerate(self, options: Union[Target, Sequence[Target]]) -> List[Any]:
        if isinstance(options, (list, tuple)):
            return [self.resolve(option) for option in options]
        return self.resolve(options).all()

    def select_from_dynamic_list(
        self,
        trigger: Target,
        options: Union[Target, Sequence[Target]],
        target_text: str,
        timeout: Optional[float] = None,
    ) -> Optional[str]:
        """
        Pick an entry from an autocomplete-style list.

        Opens ``trigger``, waits for at least one option, then clicks the
        first option (document order) whose trimmed text equals
        ``target_text`` ignoring case. With no match, ``target_text`` is typed
        into the trigger and confirmed with Enter.

        Args:
            trigger: Element that opens the list (and accepts free text)
            options: Target matching all options, or a sequence of targets
            target_text: Entry to select
            timeout: Override for the policy timeout, in seconds

        Returns:
            Text of the clicked option, or None when the text was typed
        """
        trigger_desc = self.describe(trigger)
        wanted = target_text.strip().lower()

        with allure.step(f"Select '{target_text}' from {trigger_desc}"):
            self.click(trigger, timeout)

            budget = timeout if timeout is not None else self.policy.timeout
            deadline = time.monotonic() + budget
            found = self._enumerate(options)
            while not found:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise WaitTimeoutError(
                        f"No options appeared for '{trigger_desc}' after {budget:.1f}s"
                    )
                self._sleep(min(self.policy.poll_interval, remaining))
                found = self._enumerate(options)

            logger.debug(f"Dropdown options size: {len(found)}")
            self.wait_visible(found[0], timeout)

            for option in found:
                text = (self._dispatch(trigger_desc, option.inner_text) or "").strip()
                if text.lower() == wanted:
                    self.click(option, timeout)
                    logger.info(f"Selected dropdown option: {text}")
                    return text

            logger.info(f"Option not found in the list. Entering manually: {target_text}")
            element = self.resolve(trigger)
            typer = getattr(element, "press_sequentially", None) or element.type
            self._dispatch(trigger_desc, typer, target_text)
            self._dispatch(trigger_desc, element.press, "Enter")
            return None

    # =========================================================================
    # Reads
    # =========================================================================

    def get_text(self, target: Target, timeout: Optional[float] = None) -> str:
        """Return the rendered text of a visible element."""
        description = self.describe(target)
        element = self.wait_visible(target, timeout)
        text = self._dispatch(description, element.inner_text) or ""
        logger.debug(f"Got text from {description}: '{text}'")
        return text

    def get_attribute(self, target: Target, attribute: str, timeout: Optional[float] = None) -> Optional[str]:
        """Return an attribute value of a visible element, or None."""
        description = self.describe(target)
        element = self.wait_visible(target, timeout)
        return self._dispatch(description, element.get_attribute, attribute)

    def _box(self, target: Target) -> Dict[str, float]:
        description = self.describe(target)
        element = self.wait_visible(target)
        box = self._dispatch(description, element.bounding_box)
        if not box:
            raise ElementNotInteractableError(f"'{description}' has no bounding box")
        return box

    def get_location(self, target: Target) -> Point:
        """Return the element's top-left corner in page pixels."""
        box = self._box(target)
        return Point(box["x"], box["y"])

    def get_size(self, target: Target) -> Size:
        """Return the element's rendered size."""
        box = self._box(target)
        return Size(box["width"], box["height"])

    def capture_element_screenshot(self, target: Target, file_path: Union[str, Path]) -> Path:
        """Save a screenshot of one element."""
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        element = self.wait_visible(target)
        self._dispatch(self.describe(target), element.screenshot, path=str(path))
        return path

    # =========================================================================
    # Probes (never raise)
    # =========================================================================

    def is_displayed(self, target: Target, timeout: Optional[float] = None) -> bool:
        """
        Check whether an element is visible.

        Args:
            target: Element target
            timeout: Wait up to this many seconds; None checks once

        Returns:
            True if visible, False on absence or any driver failure
        """
        try:
            if timeout:
                self.wait_visible(target, timeout)
                return True
            return bool(self.resolve(target).is_visible())
        except (ActionError, PlaywrightError) as e:
            logger.debug(f"{self.describe(target)} not displayed: {e}")
            return False

    def is_enabled(self, target: Target) -> bool:
        """Return True if the element is present and enabled."""
        try:
            element = self.resolve(target)
            return bool(element.is_visible() and element.is_enabled(**self._probe_kwargs(element)))
        except (ActionError, PlaywrightError) as e:
            logger.debug(f"{self.describe(target)} not enabled: {e}")
            return False

    def is_selected(self, target: Target) -> bool:
        """Return True if the checkbox/radio is present and checked."""
        try:
            element = self.resolve(target)
            return bool(element.is_visible() and element.is_checked(**self._probe_kwargs(element)))
        except (ActionError, PlaywrightError) as e:
            logger.debug(f"{self.describe(target)} not selected: {e}")
            return False

    # =========================================================================
    # Retry
    # =========================================================================

    def retry(
        self,
        operation: Callable[[], Any],
        attempts: Optional[int] = None,
        delay: Optional[float] = None,
        description: str = "",
    ) -> Any:
        """
        Re-invoke ``operation`` on driver-level failure.

        Args:
            operation: Zero-argument callable
            attempts: Maximum number of calls (defaults to the retry config)
            delay: Fixed delay between calls in seconds

        Returns:
            Result of the first successful call

        Raises:
            The last failure once all attempts are exhausted
        """
        config = RetryConfig(
            max_attempts=self.retry_config.max_attempts if attempts is None else attempts,
            delay_seconds=self.retry_config.delay_seconds if delay is None else delay,
        )
        name = description or getattr(operation, "__name__", "operation")
        return run_with_retry(operation, config, sleep=self._sleep, name=name)

    # =========================================================================
    # Scrolling and Scripts
    # =========================================================================

    def execute_script(self, script: str, arg: Any = None) -> Any:
        """Evaluate JavaScript in the page."""
        return self._dispatch("script", self.page.evaluate, script, arg)

    def scroll_to_element(self, target: Target) -> None:
        """Scroll an element into view."""
        description = self.describe(target)
        element = self.wait_visible(target)
        self._dispatch(description, element.evaluate, SCROLL_INTO_VIEW_JS)

    def scroll_to_element_and_click(self, target: Target) -> None:
        self.scroll_to_element(target)
        self.click(target)

    def scroll_to_coordinates(self, x: int = 0, y: int = 0) -> None:
        """Scroll the window to an absolute position."""
        self.execute_script("([x, y]) => window.scrollTo(x, y)", [x, y])

    def scroll_to_bottom(self) -> None:
        """Scroll to bottom of page."""
        self.execute_script("() => window.scrollTo(0, document.body.scrollHeight)")


__all__ = [
    "ElementActions",
    "RetryConfig",
    "Point",
    "Size",
    "run_with_retry",
    "with_retry",
]
