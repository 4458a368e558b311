"""Writing the finished index to disk.

The index file is replaced atomically: it is written to a temporary file
in the target directory first and renamed over the old file only once the
write completed. A failed run never leaves a partial or truncated index.
"""

import os
import tempfile
from pathlib import Path

from roomsearch.logging import get_logger
from roomsearch.models import Index

log = get_logger(__name__)


def write_index(index: Index, path: str | Path) -> Path:
    """Serialize ``index`` as JSON to ``path``.

    Returns:
        The path the index was written to.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    payload = index.model_dump_json()

    fd, tmp_name = tempfile.mkstemp(
        dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    log.info("index_stored", path=str(target), size=len(payload))
    return target
