"""Writing export files and handing them to the platform share mechanism."""
from __future__ import annotations
import inspect
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

log = logging.getLogger(__name__)

# Receives the written file; may be sync or async. Returns truthy on success.
ShareHook = Callable[[Path], Any]


@dataclass
class ExportResult:
    path: Path
    shared: bool


async def write_and_share(path: Path, content: str, share: Optional[ShareHook] = None) -> ExportResult:
    """Write ``content`` atomically, then offer it to ``share``.

    Sharing is best-effort: a failing hook is logged and reported as
    ``shared=False``; the written file stays in place.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    tmp_path.write_text(content, encoding="utf-8")
    os.replace(tmp_path, path)
    log.info("Wrote export %s (%d bytes)", path, len(content.encode("utf-8")))

    if share is None:
        return ExportResult(path=path, shared=False)
    try:
        result = share(path)
        if inspect.isawaitable(result):
            result = await result
    except Exception:
        log.exception("Share of %s failed; file kept", path)
        return ExportResult(path=path, shared=False)
    return ExportResult(path=path, shared=result is not False)
