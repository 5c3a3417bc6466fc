"""Flow directory used to resolve restriction flow names."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from loguru import logger

from flowbot.flows.models import Flow


@runtime_checkable
class FlowDirectory(Protocol):
    """Lookup surface needed by the restriction resolver."""

    def lookup_by_name(self, pattern: str) -> Flow | None:
        """First flow whose name or parameterized name matches the regex ``pattern``."""

    def list_all(self) -> list[Flow]:
        """Every known flow."""


def find_flow(flows: Iterable[Flow], pattern: str) -> Flow | None:
    """Search ``flows`` for the first name or parameterized-name regex match."""
    try:
        matcher = re.compile(pattern)
    except re.error as e:
        logger.warning(f"Invalid flow name pattern {pattern!r}: {e}")
        return None

    for flow in flows:
        if matcher.search(flow.name) or matcher.search(flow.parameterized_name):
            return flow
    return None


class StaticFlowDirectory:
    """In-memory flow directory."""

    def __init__(self, flows: Iterable[Flow] = ()):
        self._flows = list(flows)

    def lookup_by_name(self, pattern: str) -> Flow | None:
        return find_flow(self._flows, pattern)

    def list_all(self) -> list[Flow]:
        return list(self._flows)

    def replace(self, flows: Iterable[Flow]) -> None:
        self._flows = list(flows)
