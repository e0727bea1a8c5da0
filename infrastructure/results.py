"""Persist the ordered scan results for the dashboard."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Iterable, Optional, Union

from automation.shared.scan_contracts import ScanResult

logger = logging.getLogger(__name__)


def results_payload(results: Iterable[ScanResult]) -> list:
    return [result.to_dict() for result in results]


def write_results(results: Iterable[ScanResult], path: Union[str, Path]) -> Path:
    """Atomically write ``results`` as indented JSON to ``path``.

    ``OSError`` is propagated: without the artifact the run has failed.
    """

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = results_payload(results)

    tmp_path: Optional[Path] = None
    try:
        with NamedTemporaryFile(
            "w", encoding="utf-8", dir=target.parent, suffix=".tmp", delete=False
        ) as handle:
            tmp_path = Path(handle.name)
            json.dump(payload, handle, indent=2, ensure_ascii=False)
            handle.write("\n")
            handle.flush()
        tmp_path.replace(target)
    except OSError:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise

    logger.info("Wrote %s result(s) to %s", len(payload), target)
    return target
