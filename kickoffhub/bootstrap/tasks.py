"""Startup tasks declared by module manifests."""

import inspect
import logging
from collections.abc import Sequence
from typing import Optional

from .module_loader import ModuleManifest


async def run_module_tasks(
    manifests: Sequence[ModuleManifest], logger: Optional[logging.Logger] = None
) -> int:
    """Run every manifest's tasks in order; each task finishes before the next starts.

    A failing task aborts the bootstrap.
    """
    log = logger or logging.getLogger(__name__)
    executed = 0
    for manifest in manifests:
        for task in manifest.tasks:
            task_name = getattr(task, "__name__", repr(task))
            try:
                result = task()
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                log.error(f"Startup task {manifest.name}.{task_name} failed: {e}")
                raise
            executed += 1
            log.debug(f"Startup task {manifest.name}.{task_name} done")
    return executed
