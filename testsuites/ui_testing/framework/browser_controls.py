"""
================================================================================
Browser Controls
================================================================================

Browser-level operations that sit beside element actions: frames, windows,
JavaScript dialogs, cookies, viewport, screenshots and console capture.

Every call is a single attempt. Where something can be waited for (a new
window, a pending dialog, a frame element) the session's WaitPolicy bounds it.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from collections import deque
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Deque, Dict, List, Optional, Union

import allure
from loguru import logger
from playwright.sync_api import Error as PlaywrightError

from .element_actions import ElementActions
from .exceptions import InvalidArgumentError, WaitTimeoutError


# Default output directory for screenshots
SCREENSHOT_DIR = Path(__file__).parent.parent / "screenshots"

# Console messages kept per session
MAX_CONSOLE_MESSAGES = 200


class BrowserControls:
    """
    Frame, window, dialog and viewport control for one session.

    Shares the session's ``ElementActions`` so that switching frames or
    windows changes how subsequent element targets are resolved.

    Usage:
        controls = BrowserControls(actions)
        controls.switch_to_frame("iframe#editor")
        actions.type_text("body", "hello")
        controls.switch_to_default_content()
    """

    def __init__(
        self,
        actions: ElementActions,
        screenshot_dir: Optional[Union[str, Path]] = None,
    ):
        self.actions = actions
        self.screenshot_dir = Path(screenshot_dir) if screenshot_dir else SCREENSHOT_DIR
        self._dialogs: Deque[Any] = deque()
        self._console: Deque[Dict[str, str]] = deque(maxlen=MAX_CONSOLE_MESSAGES)
        self._watched: List[Any] = []
        self._watch(actions.page)

    @property
    def page(self) -> Any:
        """Page currently driven by the session."""
        return self.actions.page

    @property
    def policy(self):
        return self.actions.policy

    def _watch(self, page: Any) -> None:
        # Dialogs stay pending until accepted or dismissed through this object
        if any(watched is page for watched in self._watched):
            return
        page.on("dialog", self._dialogs.append)
        page.on("console", self._record_console)
        self._watched.append(page)

    def _record_console(self, message: Any) -> None:
        self._console.append({
            "timestamp": datetime.now().isoformat(),
            "level": message.type,
            "text": message.text,
        })

    def wait_until(self, condition: Callable[[], Any], timeout: Optional[float], what: str) -> Any:
        """Poll ``condition`` until truthy; return its value or raise WaitTimeoutError."""
        budget = timeout if timeout is not None else self.policy.timeout
        deadline = time.monotonic() + budget
        while True:
            result = condition()
            if result:
                return result
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise WaitTimeoutError(f"{what} did not happen within {budget:.1f}s")
            self.page.wait_for_timeout(min(self.policy.poll_interval, remaining) * 1000)

    # =========================================================================
    # Frames
    # =========================================================================

    def switch_to_frame(self, frame: Union[int, str, Any]) -> None:
        """
        Scope element resolution to an iframe.

        Args:
            frame: Frame index, frame name/id, or any element target that
                resolves to the ``<iframe>`` element
        """
        with allure.step(f"Switch to frame: {frame}"):
            root = self.actions.root
            if isinstance(frame, int):
                if frame < 0:
                    raise InvalidArgumentError(f"Frame index must be >= 0, got {frame}")
                selector = "iframe, frame"
                self.wait_until(
                    lambda: root.locator(selector).count() > frame, None, f"frame #{frame}"
                )
                self.actions.scope = root.frame_locator(selector).nth(frame)
            elif isinstance(frame, str) and not frame.startswith(("/", "(")) and not any(
                ch in frame for ch in "[]#.=> :"
            ):
                selector = f"iframe[name='{frame}'], iframe[id='{frame}'], frame[name='{frame}']"
                self.actions.wait_visible(selector)
                self.actions.scope = root.frame_locator(selector).first
            else:
                self.actions.wait_visible(frame)
                if isinstance(frame, str):
                    self.actions.scope = root.frame_locator(frame).first
                else:
                    self.actions.scope = self.actions.resolve(frame).content_frame
            logger.info(f"Switched to frame: {frame}")

    def switch_to_nested_frame(self, parent: Union[int, str, Any], child: Union[int, str, Any]) -> None:
        """Switch into ``parent`` and then into ``child`` inside it."""
        self.switch_to_frame(parent)
        self.switch_to_frame(child)

    def switch_to_default_content(self) -> None:
        """Resolve element targets against the top-level page again."""
        self.actions.scope = None
        logger.info("Switched to default content")

    # =========================================================================
    # Windows
    # =========================================================================

    @property
    def window_handles(self) -> List[Any]:
        """Open pages of the session's browser context, oldest first."""
        return list(self.page.context.pages)

    def _activate(self, page: Any) -> None:
        self.actions.page = page
        self.actions.scope = None
        self._watch(page)
        page.bring_to_front()

    def switch_to_new_window(self, timeout: Optional[float] = None) -> Any:
        """
        Switch to the most recently opened window other than the current one.

        Raises:
            WaitTimeoutError: No second window appeared in time
        """
        current = self.page
        with allure.step("Switch to new window"):
            self.wait_until(lambda: len(self.window_handles) > 1, timeout, "New window")
            others = [page for page in self.window_handles if page is not current]
            target = others[-1]
            target.wait_for_load_state()
            self._activate(target)
            logger.info(f"Switched to new window: {target.url}")
            return target

    def switch_to_window_by_title(self, title: str, timeout: Optional[float] = None) -> Any:
        """Switch to the first window whose title contains ``title``."""
        def find() -> Any:
            for page in self.window_handles:
                try:
                    if title in page.title():
                        return page
                except PlaywrightError as e:
                    logger.debug(f"Could not read window title: {e}")
            return None

        with allure.step(f"Switch to window titled: {title}"):
            target = self.wait_until(find, timeout, f"Window titled '{title}'")
            self._activate(target)
            logger.info(f"Switched to window with title: {title}")
            return target

    def close_current_window_and_switch_back(self, original: Any) -> None:
        """Close the active window and continue on ``original``."""
        if original is None:
            raise InvalidArgumentError("Original window is None")
        with allure.step("Close window and switch back"):
            current = self.page
            if current is not original:
                current.close()
            self._activate(original)
            logger.info("Closed current window and switched back to original")

    # =========================================================================
    # Alerts
    # =========================================================================

    def _pending_dialog(self, timeout: Optional[float] = None) -> Any:
        return self.wait_until(
            lambda: self._dialogs[0] if self._dialogs else None, timeout, "Alert"
        )

    def is_alert_present(self) -> bool:
        """Return True if a dialog is waiting to be handled."""
        try:
            # Let queued dialog events reach the listener
            self.page.wait_for_timeout(0)
        except PlaywrightError as e:
            logger.debug(f"Alert check failed: {e}")
            return False
        return bool(self._dialogs)

    def accept_alert(self, timeout: Optional[float] = None) -> None:
        """Accept the pending dialog."""
        dialog = self._pending_dialog(timeout)
        self._dialogs.popleft()
        dialog.accept()
        logger.info("Alert accepted")

    def dismiss_alert(self, timeout: Optional[float] = None) -> None:
        """Dismiss the pending dialog."""
        dialog = self._pending_dialog(timeout)
        self._dialogs.popleft()
        dialog.dismiss()
        logger.info("Alert dismissed")

    def get_alert_text(self, timeout: Optional[float] = None) -> str:
        """Return the message of the pending dialog without handling it."""
        text = self._pending_dialog(timeout).message
        logger.info(f"Alert text: {text}")
        return text

    def send_keys_to_alert(self, text: str, timeout: Optional[float] = None) -> None:
        """Answer a prompt dialog with ``text``."""
        dialog = self._pending_dialog(timeout)
        self._dialogs.popleft()
        dialog.accept(text)
        logger.info(f"Sent keys to alert: {text}")

    # =========================================================================
    # Cookies and Viewport
    # =========================================================================

    def clear_cookies(self) -> None:
        """Delete all cookies of the session's context."""
        self.page.context.clear_cookies()
        logger.info("All cookies cleared")

    def get_cookies(self) -> List[Dict[str, Any]]:
        return self.page.context.cookies()

    def add_cookies(self, cookies: List[Dict[str, Any]]) -> None:
        self.page.context.add_cookies(cookies)

    def set_window_size(self, width: int, height: int) -> None:
        """Resize the viewport."""
        if width <= 0 or height <= 0:
            raise InvalidArgumentError(f"Window size must be positive, got {width}x{height}")
        self.page.set_viewport_size({"width": width, "height": height})
        logger.info(f"Window size set to: {width}x{height}")

    def maximize_window(self) -> None:
        """Grow the viewport to the screen's available size."""
        size = self.page.evaluate(
            "() => ({width: window.screen.availWidth, height: window.screen.availHeight})"
        )
        self.set_window_size(size["width"], size["height"])

    def set_page_zoom(self, zoom_percentage: int) -> None:
        """Apply a CSS zoom to the document body."""
        if zoom_percentage <= 0:
            raise InvalidArgumentError(f"Zoom must be positive, got {zoom_percentage}")
        self.page.evaluate("zoom => { document.body.style.zoom = zoom + '%'; }", zoom_percentage)
        logger.info(f"Page zoom set to: {zoom_percentage}%")

    # =========================================================================
    # Screenshots
    # =========================================================================

    def capture_screenshot(
        self,
        name: str,
        full_page: bool = False,
        attach_to_allure: bool = True,
    ) -> Path:
        """
        Take screenshot and optionally attach to Allure.

        Args:
            name: Screenshot name (without extension)
            full_page: Capture full scrollable page
            attach_to_allure: Whether to attach to Allure report

        Returns:
            Path to saved screenshot
        """
        self.screenshot_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = self.screenshot_dir / f"{name}_{timestamp}.png"

        self.page.screenshot(path=str(filepath), full_page=full_page)

        if attach_to_allure:
            allure.attach.file(
                str(filepath),
                name=name,
                attachment_type=allure.attachment_type.PNG,
            )

        logger.debug(f"Screenshot saved: {filepath}")
        return filepath

    def capture_failure_screenshot(self, name: str) -> Optional[Path]:
        """Screenshot for a failed test; failures here are logged, not raised."""
        try:
            return self.capture_screenshot(f"FAILED_{name}", full_page=True, attach_to_allure=False)
        except (PlaywrightError, OSError) as e:
            logger.warning(f"Failed to capture failure screenshot for {name}: {e}")
            return None

    # =========================================================================
    # Console Logs
    # =========================================================================

    def get_console_logs(self) -> List[Dict[str, str]]:
        """Console messages seen so far, oldest first."""
        return list(self._console)

    def log_console_messages(self) -> None:
        """Write the collected console messages to the log."""
        for entry in self._console:
            logger.info(f"Browser console [{entry['level']}] {entry['text']}")


__all__ = ["BrowserControls", "SCREENSHOT_DIR"]
