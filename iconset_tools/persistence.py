"""Writing icon sets to disk."""

import logging
from pathlib import Path
from typing import Optional

from .iconset import IconSet, icon_set_to_json
from .types import DEFAULT_OUTPUT_DIR, AssemblyResult, PersistenceError

logger = logging.getLogger(__name__)


def get_target_path(icon_set: IconSet, output_dir=DEFAULT_OUTPUT_DIR, filename: Optional[str] = None) -> Path:
    """Return <output_dir>/<filename or prefix>.json."""
    return Path(output_dir) / f"{filename or icon_set.prefix}.json"


def save_icon_set(
    icon_set: IconSet,
    output_dir=DEFAULT_OUTPUT_DIR,
    filename: Optional[str] = None,
    enable_logs: bool = True,
) -> AssemblyResult:
    """Serialize an icon set and write it as JSON.

    An existing target file is replaced.

    Args:
        icon_set: Icon set to save
        output_dir: Output directory, created if missing
        filename: File name stem (defaults to the set prefix)
        enable_logs: Log a line describing the saved file

    Returns:
        AssemblyResult with icon count, target path and byte size

    Raises:
        PersistenceError: If the directory cannot be created or the
            file cannot be written
    """
    output = icon_set_to_json(icon_set)
    data = output.encode("utf-8")

    output_dir = Path(output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except FileExistsError as e:
        # exist_ok only covers directories; a file is in the way
        raise PersistenceError(f"Output path is not a directory: {output_dir}") from e
    except OSError as e:
        raise PersistenceError(f"Cannot create output directory {output_dir}: {e}") from e

    target = get_target_path(icon_set, output_dir, filename)
    try:
        target.write_bytes(data)
    except OSError as e:
        raise PersistenceError(f"Cannot write {target}: {e}") from e

    result = AssemblyResult(
        prefix=icon_set.prefix,
        count=icon_set.count(),
        target=str(target),
        size=len(data),
    )
    if enable_logs:
        logger.info(f"Saved {result.count} icons to {result.target} ({result.size} bytes)")
    return result
