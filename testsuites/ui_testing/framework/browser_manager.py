"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for UI automation.

Features:
    - Browser name mapping (chrome, edge, firefox, safari) onto Playwright
    - One isolated context and page per session
    - Timeouts and viewport taken from the run configuration
    - Deterministic teardown of contexts, browser and driver

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from loguru import logger
from playwright.sync_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Playwright,
    sync_playwright,
)

from .config_loader import UIConfig
from .exceptions import UnsupportedConfigurationError
from .page_base import PageSession


class BrowserTarget(NamedTuple):
    """Playwright launcher name and optional branded channel."""
    engine: str
    channel: Optional[str] = None


# Accepted browser names (case-insensitive)
SUPPORTED_BROWSERS: Dict[str, BrowserTarget] = {
    "chrome": BrowserTarget("chromium"),
    "chromium": BrowserTarget("chromium"),
    "edge": BrowserTarget("chromium", "msedge"),
    "firefox": BrowserTarget("firefox"),
    "safari": BrowserTarget("webkit"),
    "webkit": BrowserTarget("webkit"),
}


def resolve_browser(name: str) -> BrowserTarget:
    """
    Map a configured browser name onto a Playwright engine.

    Raises:
        UnsupportedConfigurationError: Unknown browser name
    """
    key = (name or "").strip().lower()
    if key not in SUPPORTED_BROWSERS:
        raise UnsupportedConfigurationError(
            f"Browser not supported: {name!r}. "
            f"Choose one of: {', '.join(sorted(SUPPORTED_BROWSERS))}"
        )
    return SUPPORTED_BROWSERS[key]


class BrowserManager:
    """
    Manages the browser instance and per-test sessions.

    Usage:
        with BrowserManager(config) as manager:
            session = manager.new_session()
            session.navigate(config.login_url)
    """

    # Default browser launch options
    DEFAULT_LAUNCH_OPTIONS: Dict[str, Any] = {
        "args": [
            "--ignore-certificate-errors",
            "--disable-notifications",
        ],
    }

    # Default context options
    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1920, "height": 1080},
        "ignore_https_errors": True,
    }

    def __init__(self, config: UIConfig):
        """
        Initialize browser manager.

        Args:
            config: Run configuration

        Raises:
            UnsupportedConfigurationError: Unknown browser name
        """
        self.config = config
        self.target = resolve_browser(config.browser)

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    def __enter__(self) -> "BrowserManager":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def start(self) -> None:
        """Start Playwright and launch browser."""
        self._playwright = sync_playwright().start()
        launcher = getattr(self._playwright, self.target.engine)

        launch_options: Dict[str, Any] = {"headless": self.config.headless}
        if self.target.engine == "chromium":
            launch_options.update(self.DEFAULT_LAUNCH_OPTIONS)
            if self.config.maximize_window and not self.config.headless:
                launch_options["args"] = [*launch_options["args"], "--start-maximized"]
        if self.target.channel:
            launch_options["channel"] = self.target.channel

        try:
            self._browser = launcher.launch(**launch_options)
        except PlaywrightError:
            self._playwright.stop()
            self._playwright = None
            raise
        logger.info(
            f"Browser started: {self.config.browser} -> {self.target.engine} "
            f"(headless={self.config.headless})"
        )

    def close(self) -> None:
        """Close all contexts, browser and driver; every step runs."""
        for context in list(self._contexts):
            try:
                context.close()
            except PlaywrightError as e:
                logger.debug(f"Context already closed: {e}")
        self._contexts.clear()

        try:
            if self._browser:
                self._browser.close()
        finally:
            self._browser = None
            if self._playwright:
                self._playwright.stop()
                self._playwright = None

        logger.info("Browser closed")

    def new_context(self, **options: Any) -> BrowserContext:
        """
        Create new browser context.

        Each context is isolated - separate cookies, localStorage, etc.
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context_options = {**self.DEFAULT_CONTEXT_OPTIONS, **options}
        if self.config.maximize_window and not self.config.headless and self.target.engine == "chromium":
            # Let --start-maximized size the window
            context_options.pop("viewport", None)
            context_options["no_viewport"] = True

        context = self._browser.new_context(**context_options)
        context.set_default_timeout(self.config.implicit_wait * 1000)
        context.set_default_navigation_timeout(self.config.page_load_timeout * 1000)
        self._contexts.append(context)
        context.on("close", self._forget_context)
        return context

    def _forget_context(self, context: BrowserContext) -> None:
        if context in self._contexts:
            self._contexts.remove(context)

    def new_session(self, **context_options: Any) -> PageSession:
        """
        Open an isolated context with one page and wrap it in a session.

        Returns:
            PageSession owning the new page
        """
        context = self.new_context(**context_options)
        page = context.new_page()
        logger.debug(f"New session opened on {self.config.browser}")
        return PageSession(page, self.config)

    @property
    def browser(self) -> Optional[Browser]:
        """Get browser instance."""
        return self._browser

    @property
    def contexts(self) -> Tuple[BrowserContext, ...]:
        """Contexts opened by this manager and not yet closed."""
        return tuple(self._contexts)


__all__ = [
    "BrowserManager",
    "BrowserTarget",
    "SUPPORTED_BROWSERS",
    "resolve_browser",
]
