import logging
import os

from kmzpoints.errors import FilesystemError


logger = logging.getLogger(__name__)


def _raise_walk_error(exc: OSError) -> None:
    raise exc


def discover_archives(root_path: str, suffix: str = ".kmz") -> list[str]:
    """Return every path under ``root_path`` whose name ends with ``suffix``.

    The root is visited first, then each directory's entries in name order.
    Unreadable directories abort the walk with ``FilesystemError``.
    """
    if not os.path.exists(root_path):
        raise FilesystemError(f"root path not found: {root_path}")

    paths: list[str] = []
    if os.path.basename(os.path.normpath(root_path)).endswith(suffix):
        paths.append(root_path)
    if not os.path.isdir(root_path):
        return paths

    try:
        for dirpath, dirnames, filenames in os.walk(root_path, onerror=_raise_walk_error):
            dirnames.sort()
            for name in sorted([*dirnames, *filenames]):
                if name.endswith(suffix):
                    paths.append(os.path.join(dirpath, name))
    except OSError as exc:
        raise FilesystemError(f"cannot walk {root_path}: {exc}") from exc

    logger.info("archives discovered", extra={"root_path": root_path, "archive_count": len(paths)})
    return paths
