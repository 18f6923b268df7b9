"""
================================================================================
Smart Locator
================================================================================

Named element locators with fallback strategies, resolved lazily.

Page objects declare a mapping of logical element names to ``LocatorSpec``
descriptors at construction time. Nothing touches the browser until an
action asks for the element; each access resolves the descriptor again, so
a node that was replaced by the application is simply found anew.

Resolution order per element:
    1. primary selector
    2. fallback selectors, in declaration order
    3. primary again (no match yet: the caller's wait will poll on it)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from loguru import logger
from playwright.sync_api import Error as PlaywrightError

from .exceptions import ElementNotFoundError


@dataclass(frozen=True)
class LocatorSpec:
    """
    Descriptor for one logical element.

    Attributes:
        name: Human-readable element name used in logs and report steps
        primary: Preferred selector (CSS, ``text=``, or XPath starting with ``//``)
        fallbacks: Selectors tried when the primary matches nothing
    """
    name: str
    primary: str
    fallbacks: Tuple[str, ...] = ()

    @property
    def selectors(self) -> Tuple[str, ...]:
        """All selectors in resolution order."""
        return (self.primary, *self.fallbacks)

    def __str__(self) -> str:
        return self.name


@dataclass
class LocatorHealth:
    """
    Tracks which selector resolved an element.

    Attributes:
        element_name: Human-readable element name
        primary_selector: The preferred selector
        used_fallback: Whether a fallback was used
        fallback_selector: The fallback selector used (if any)
    """
    element_name: str
    primary_selector: str
    used_fallback: bool = False
    fallback_selector: Optional[str] = None


class LocatorMap(Mapping[str, LocatorSpec]):
    """
    Immutable ``name -> LocatorSpec`` mapping owned by a page object.

    Usage:
        >>> locators = LocatorMap({
        ...     "username_input": "input[name='username']",
        ...     "login_button": ("//button[@type='submit']", "button:has-text('Login')"),
        ... })
        >>> locators["login_button"].primary
        "//button[@type='submit']"
    """

    def __init__(self, definitions: Mapping[str, Any]):
        specs: Dict[str, LocatorSpec] = {}
        for name, definition in definitions.items():
            specs[name] = self._to_spec(name, definition)
        self._specs = specs

    @staticmethod
    def _to_spec(name: str, definition: Any) -> LocatorSpec:
        if isinstance(definition, LocatorSpec):
            return definition
        if isinstance(definition, str):
            return LocatorSpec(name=name, primary=definition)
        if isinstance(definition, (list, tuple)) and definition:
            return LocatorSpec(name=name, primary=definition[0], fallbacks=tuple(definition[1:]))
        raise ElementNotFoundError(f"No locators defined for element: {name}")

    def __getitem__(self, name: str) -> LocatorSpec:
        try:
            return self._specs[name]
        except KeyError:
            raise ElementNotFoundError(f"No locators defined for element: {name}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __iter__(self) -> Iterator[str]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)


class SmartLocator:
    """
    Resolves ``LocatorSpec`` descriptors against a page or frame scope.

    Keeps a record of elements that needed a fallback so stale primary
    selectors can be spotted after a run.
    """

    def __init__(self) -> None:
        self._fallback_used: Dict[str, LocatorHealth] = {}

    def resolve(self, spec: LocatorSpec, root: Any):
        """
        Resolve a descriptor to a Playwright ``Locator``.

        Args:
            spec: Element descriptor
            root: ``Page`` or ``FrameLocator`` to search in

        Returns:
            Locator for the first selector that currently matches, or the
            primary selector's locator when none match yet
        """
        if not spec.fallbacks:
            return root.locator(spec.primary)

        for selector in spec.selectors:
            locator = root.locator(selector)
            try:
                matched = locator.count() > 0
            except PlaywrightError as e:
                logger.debug(f"Selector check failed for '{spec.name}' ({selector}): {e}")
                continue
            if matched:
                self._record(spec, selector)
                return locator

        return root.locator(spec.primary)

    def _record(self, spec: LocatorSpec, selector: str) -> None:
        # One entry per element; resolve runs on every poll tick
        if selector == spec.primary:
            return
        if spec.name not in self._fallback_used:
            logger.warning(f"Element '{spec.name}' used fallback: {selector}")
        self._fallback_used[spec.name] = LocatorHealth(
            element_name=spec.name,
            primary_selector=spec.primary,
            used_fallback=True,
            fallback_selector=selector,
        )

    @property
    def fallbacks_used(self) -> Dict[str, LocatorHealth]:
        """Elements resolved through a fallback selector, by name."""
        return dict(self._fallback_used)

    def get_health_report(self) -> str:
        """
        Generate locator health report.

        Returns:
            Formatted report listing elements that needed a fallback selector
        """
        if not self._fallback_used:
            return "All elements used primary locators. No maintenance needed."

        report_lines = [
            "Locator Health Report - Fallbacks Used:",
            "",
        ]
        for element_name, health in self._fallback_used.items():
            report_lines.extend([
                f"  [{element_name}]",
                f"    Failed primary: {health.primary_selector}",
                f"    Used: {health.fallback_selector}",
                "",
            ])
        return "\n".join(report_lines)


__all__ = [
    "LocatorSpec",
    "LocatorMap",
    "LocatorHealth",
    "SmartLocator",
]
