"""
In-memory stand-ins for the synchronous Playwright objects the action layer
touches: Page, Locator, ElementHandle, FrameLocator, BrowserContext and
Dialog.

A ``FakePage`` keeps a ``selector -> [FakeElement]`` table. Locators query
that table on every call, like real Playwright locators, so tests can add,
replace or detach nodes while an action is waiting. ``wait_for_timeout``
really sleeps and then runs the page's ``on_tick`` callbacks.
"""

import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from testsuites.ui_testing.framework.element_actions import (
    CLICK_JS,
    GET_STYLE_JS,
    IS_CONNECTED_JS,
    IS_OCCLUDED_JS,
    READ_OPTIONS_JS,
    SCROLL_INTO_VIEW_JS,
    SET_STYLE_JS,
)

DETACHED_MESSAGE = "Element is not attached to the DOM"


class FakeElement:
    """One DOM node."""

    def __init__(
        self,
        text: str = "",
        visible: bool = True,
        enabled: bool = True,
        covered: bool = False,
        attributes: Optional[Dict[str, str]] = None,
        options: Sequence[Tuple[str, str]] = (),
        selected_index: int = -1,
        checked: bool = False,
        box: Optional[Dict[str, float]] = None,
        on_click: Optional[Callable[["FakeElement"], None]] = None,
    ):
        self.text = text
        self.visible = visible
        self.enabled = enabled
        self.covered = covered
        self.attributes = dict(attributes or {})
        self.options = list(options)
        self.selected_index = selected_index
        self.checked = checked
        self.box = box if box is not None else {"x": 10.0, "y": 20.0, "width": 100.0, "height": 30.0}
        self.on_click = on_click

        self.attached = True
        # Messages raised (one per call) by the next click attempts
        self.click_errors: List[str] = []
        # Error raised by every call, e.g. a crashed page
        self.broken: Optional[str] = None

        self.value = ""
        self.keys: List[str] = []
        self.click_attempts = 0
        self.clicks = 0
        self.js_clicks = 0
        self.double_clicks = 0
        self.right_clicks = 0
        self.hovers = 0
        self.scrolled = False
        self.files: Any = None
        self.dropped_on: Optional["FakeElement"] = None

    def check_alive(self) -> None:
        if self.broken:
            raise PlaywrightError(self.broken)
        if not self.attached:
            raise PlaywrightError(DETACHED_MESSAGE)

    def evaluate(self, script: str, arg: Any = None) -> Any:
        if script == IS_CONNECTED_JS:
            return self.attached
        self.check_alive()
        if script == IS_OCCLUDED_JS:
            return self.covered
        if script == READ_OPTIONS_JS:
            return [
                {"text": text.strip(), "value": value, "selected": index == self.selected_index}
                for index, (text, value) in enumerate(self.options)
            ]
        if script == CLICK_JS:
            self.js_clicks += 1
            return None
        if script == SCROLL_INTO_VIEW_JS:
            self.scrolled = True
            return None
        if script == GET_STYLE_JS:
            return self.attributes.get("style", "")
        if script == SET_STYLE_JS:
            self.attributes["style"] = arg
            return None
        return None

    def click(self, button: str = "left", **_: Any) -> None:
        self.check_alive()
        self.click_attempts += 1
        if self.click_errors:
            raise PlaywrightError(self.click_errors.pop(0))
        if button == "right":
            self.right_clicks += 1
            return
        self.clicks += 1
        if self.on_click:
            self.on_click(self)


class _Queryable:
    """Anything selectors can be resolved against (page or frame)."""

    def __init__(self) -> None:
        self.elements: Dict[str, List[FakeElement]] = {}
        self.frames: Dict[str, List["FakeFrame"]] = {}

    def add(self, selector: str, *nodes: FakeElement) -> FakeElement:
        """Append nodes under ``selector``; returns the first one."""
        self.elements.setdefault(selector, []).extend(nodes)
        return nodes[0]

    def replace(self, selector: str, *nodes: FakeElement) -> None:
        self.elements[selector] = list(nodes)

    def remove(self, selector: str) -> None:
        self.elements.pop(selector, None)

    def query(self, selector: str) -> List[FakeElement]:
        return list(self.elements.get(selector, []))

    def locator(self, selector: str) -> "FakeLocator":
        return FakeLocator(self, selector)

    def frame_locator(self, selector: str) -> "FakeFrameLocator":
        return FakeFrameLocator(self, selector)


class FakeLocator:
    """Lazily re-queried element reference, like ``playwright.sync_api.Locator``."""

    def __init__(self, root: _Queryable, selector: str, index: Optional[int] = None):
        self.root = root
        self.selector = selector
        self.index = index

    def __repr__(self) -> str:
        suffix = f" >> nth={self.index}" if self.index is not None else ""
        return f"<FakeLocator {self.selector}{suffix}>"

    def _node(self) -> Optional[FakeElement]:
        nodes = self.root.query(self.selector)
        position = self.index or 0
        return nodes[position] if position < len(nodes) else None

    def _require(self) -> FakeElement:
        node = self._node()
        if node is None:
            raise PlaywrightTimeoutError(f"Timeout exceeded waiting for locator('{self.selector}')")
        node.check_alive()
        return node

    @property
    def element(self) -> FakeElement:
        return self._require()

    # Query

    def count(self) -> int:
        return len(self.root.query(self.selector))

    def all(self) -> List["FakeLocator"]:
        return [FakeLocator(self.root, self.selector, i) for i in range(self.count())]

    def nth(self, index: int) -> "FakeLocator":
        return FakeLocator(self.root, self.selector, index)

    @property
    def first(self) -> "FakeLocator":
        return self.nth(0)

    def wait_for(self, state: str = "visible", timeout: Optional[float] = None) -> None:
        self._require()

    # State

    def is_visible(self) -> bool:
        node = self._node()
        if node is None:
            return False
        node.check_alive()
        return node.visible

    def is_enabled(self, timeout: Optional[float] = None) -> bool:
        return self._require().enabled

    def is_checked(self, timeout: Optional[float] = None) -> bool:
        return self._require().checked

    def inner_text(self, timeout: Optional[float] = None) -> str:
        return self._require().text

    def get_attribute(self, name: str, timeout: Optional[float] = None) -> Optional[str]:
        return self._require().attributes.get(name)

    def bounding_box(self) -> Optional[Dict[str, float]]:
        return self._require().box

    def evaluate(self, script: str, arg: Any = None, timeout: Optional[float] = None) -> Any:
        return self._require().evaluate(script, arg)

    # Actions

    def click(self, timeout: Optional[float] = None, force: bool = False, button: str = "left") -> None:
        self._require().click(button=button)

    def dblclick(self, timeout: Optional[float] = None) -> None:
        self._require().double_clicks += 1

    def hover(self, timeout: Optional[float] = None) -> None:
        self._require().hovers += 1

    def fill(self, value: str) -> None:
        self._require().value = value

    def press_sequentially(self, text: str) -> None:
        self._require().value += text

    def press(self, key: str) -> None:
        self._require().keys.append(key)

    def select_option(self, index: Optional[int] = None) -> None:
        self._require().selected_index = index

    def set_input_files(self, files: Any) -> None:
        self._require().files = files

    def check(self) -> None:
        self._require().checked = True

    def uncheck(self) -> None:
        self._require().checked = False

    def drag_to(self, target: "FakeLocator") -> None:
        self._require().dropped_on = target.element

    def screenshot(self, path: str) -> bytes:
        self._require()
        Path(path).write_bytes(b"\x89PNG")
        return b"\x89PNG"

    @property
    def content_frame(self) -> "FakeFrame":
        frames = self.root.frames.get(self.selector, [])
        return frames[self.index or 0]


class FakeHandle:
    """Fixed node reference, like ``ElementHandle`` (no ``wait_for``)."""

    def __init__(self, node: FakeElement):
        self.node = node

    def __repr__(self) -> str:
        return f"<FakeHandle {self.node.text!r}>"

    def evaluate(self, script: str, arg: Any = None) -> Any:
        return self.node.evaluate(script, arg)

    def is_visible(self) -> bool:
        self.node.check_alive()
        return self.node.visible

    def is_enabled(self) -> bool:
        self.node.check_alive()
        return self.node.enabled

    def is_checked(self) -> bool:
        self.node.check_alive()
        return self.node.checked

    def inner_text(self) -> str:
        self.node.check_alive()
        return self.node.text

    def click(self, timeout: Optional[float] = None, force: bool = False, button: str = "left") -> None:
        self.node.click(button=button)

    def bounding_box(self) -> Optional[Dict[str, float]]:
        self.node.check_alive()
        return self.node.box


class FakeFrame(_Queryable):
    """Element scope inside an iframe."""

    def __init__(self, name: str = ""):
        super().__init__()
        self.name = name


class FakeFrameLocator:
    def __init__(self, root: _Queryable, selector: str):
        self.root = root
        self.selector = selector

    def nth(self, index: int) -> FakeFrame:
        return self.root.frames[self.selector][index]

    @property
    def first(self) -> FakeFrame:
        return self.nth(0)


class FakeKeyboard:
    def __init__(self) -> None:
        self.pressed: List[str] = []

    def press(self, key: str) -> None:
        self.pressed.append(key)


class FakeMouse:
    def __init__(self) -> None:
        self.events: List[Tuple[Any, ...]] = []

    def move(self, x: float, y: float) -> None:
        self.events.append(("move", x, y))

    def down(self) -> None:
        self.events.append(("down",))

    def up(self) -> None:
        self.events.append(("up",))


class FakeDialog:
    def __init__(self, message: str, dialog_type: str = "alert"):
        self.message = message
        self.type = dialog_type
        self.accepted = False
        self.dismissed = False
        self.prompt_text: Optional[str] = None

    def accept(self, prompt_text: Optional[str] = None) -> None:
        self.accepted = True
        self.prompt_text = prompt_text

    def dismiss(self) -> None:
        self.dismissed = True


class FakeConsoleMessage:
    def __init__(self, message_type: str, text: str):
        self.type = message_type
        self.text = text


class FakeContext:
    """Browser context holding the open pages."""

    def __init__(self) -> None:
        self.pages: List["FakePage"] = []
        self.cookies_list: List[Dict[str, Any]] = []
        self.closed = False
        self.handlers: Dict[str, List[Callable[[Any], None]]] = {}
        self.default_timeout: Optional[float] = None
        self.navigation_timeout: Optional[float] = None

    def on(self, event: str, handler: Callable[[Any], None]) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def set_default_timeout(self, timeout: float) -> None:
        self.default_timeout = timeout

    def set_default_navigation_timeout(self, timeout: float) -> None:
        self.navigation_timeout = timeout

    def new_page(self, **kwargs: Any) -> "FakePage":
        return FakePage(context=self, **kwargs)

    def cookies(self) -> List[Dict[str, Any]]:
        return list(self.cookies_list)

    def add_cookies(self, cookies: List[Dict[str, Any]]) -> None:
        self.cookies_list.extend(cookies)

    def clear_cookies(self) -> None:
        self.cookies_list.clear()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        for handler in self.handlers.get("close", []):
            handler(self)


class FakeBrowser:
    """Launched browser handing out contexts."""

    def __init__(self) -> None:
        self.contexts: List[FakeContext] = []
        self.context_options: List[Dict[str, Any]] = []
        self.closed = False

    def new_context(self, **options: Any) -> FakeContext:
        self.context_options.append(options)
        context = FakeContext()
        self.contexts.append(context)
        return context

    def close(self) -> None:
        self.closed = True


class FakePage(_Queryable):
    """Top-level page."""

    def __init__(
        self,
        url: str = "about:blank",
        title: str = "",
        context: Optional[FakeContext] = None,
    ):
        super().__init__()
        self.url = url
        self._title = title
        self.context = context or FakeContext()
        self.context.pages.append(self)

        self.keyboard = FakeKeyboard()
        self.mouse = FakeMouse()
        self.handlers: Dict[str, List[Callable[[Any], None]]] = {}
        # Called with the tick count after every wait_for_timeout
        self.on_tick: List[Callable[[int], None]] = []
        self.ticks = 0
        self.slept_ms = 0.0
        self.history: List[str] = []
        self.evaluated: List[Tuple[str, Any]] = []
        self.evaluate_result: Any = None
        self.viewport: Optional[Dict[str, int]] = None
        self.screenshot_error: Optional[str] = None
        self.closed = False
        self.brought_to_front = 0

    # Events

    def on(self, event: str, handler: Callable[[Any], None]) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def emit(self, event: str, payload: Any) -> None:
        for handler in self.handlers.get(event, []):
            handler(payload)

    def wait_for_timeout(self, timeout: float) -> None:
        time.sleep(timeout / 1000)
        self.slept_ms += timeout
        self.ticks += 1
        for callback in list(self.on_tick):
            callback(self.ticks)

    # Navigation

    def goto(self, url: str, wait_until: str = "load") -> None:
        self.url = url
        self.history.append(url)

    def reload(self) -> None:
        self.history.append("reload")

    def go_back(self) -> None:
        self.history.append("back")

    def go_forward(self) -> None:
        self.history.append("forward")

    def wait_for_load_state(self, state: str = "load") -> None:
        pass

    def title(self) -> str:
        return self._title

    def content(self) -> str:
        return f"<html><head><title>{self._title}</title></head></html>"

    def bring_to_front(self) -> None:
        self.brought_to_front += 1

    def close(self) -> None:
        self.closed = True
        if self in self.context.pages:
            self.context.pages.remove(self)

    # Scripts and viewport

    def evaluate(self, script: str, arg: Any = None) -> Any:
        self.evaluated.append((script, arg))
        return self.evaluate_result

    def set_viewport_size(self, size: Dict[str, int]) -> None:
        self.viewport = dict(size)

    def screenshot(self, path: str, full_page: bool = False) -> bytes:
        if self.screenshot_error:
            raise PlaywrightError(self.screenshot_error)
        Path(path).write_bytes(b"\x89PNG")
        return b"\x89PNG"
