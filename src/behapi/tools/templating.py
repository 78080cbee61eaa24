"""Jinja2 environment used to render request payloads.

jinja2 is optional: this module is only imported by registry factories that
the composition root registers when the library is available.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemBytecodeCache

logger = logging.getLogger(__name__)


def create_loader(*loaders: BaseLoader) -> ChoiceLoader:
    """Chain loader other extensions can append their own loaders to."""
    return ChoiceLoader(list(loaders))


def create_template_environment(
    loader: BaseLoader,
    *,
    debug: bool,
    cache_dir: Path | str,
    autoescape: bool = False,
    **options: Any,
) -> Environment:
    """Create the jinja2 environment.

    Args:
        loader: Template loader
        debug: Reload templates when their source changes
        cache_dir: Directory holding the compiled bytecode cache
        autoescape: Whether to autoescape rendered values
        **options: Extra jinja2.Environment options

    """
    cache_path = Path(cache_dir)
    cache_path.mkdir(parents=True, exist_ok=True)
    logger.debug("Creating template environment (debug=%s, cache=%s)", debug, cache_path)
    return Environment(
        loader=loader,
        auto_reload=debug,
        autoescape=autoescape,
        bytecode_cache=FileSystemBytecodeCache(str(cache_path)),
        **options,
    )
