"""Shared helpers for engine tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from nodemod.engine.locator import get_module_dependencies
from nodemod.engine.types import ImportSite
from nodemod.syntax.tree import SourceFile, parse_source


@pytest.fixture
def sites_of() -> Callable[..., tuple[SourceFile, list[ImportSite]]]:
    """Parse code and return it with the import sites of one module."""

    def _sites_of(code: str, module: str, filename: str = "input.mjs") -> tuple[SourceFile, list[ImportSite]]:
        source = parse_source(code, filename)
        return source, get_module_dependencies(source, module)

    return _sites_of
