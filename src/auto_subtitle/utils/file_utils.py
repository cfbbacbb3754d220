"""File system utilities."""

import os
from pathlib import Path


def get_file_size(path: Path) -> int:
    """Get file size in bytes.

    Args:
        path: Path to file.

    Returns:
        File size in bytes.

    Raises:
        OSError: If file cannot be accessed.
    """
    return path.stat().st_size


def is_hidden_file(path: Path) -> bool:
    """Check if file is hidden.

    Args:
        path: Path to check.

    Returns:
        True if file is hidden.
    """
    # Unix-style hidden files (start with dot)
    if path.name.startswith("."):
        return True

    # Windows hidden files
    if os.name == "nt":
        try:
            import stat

            return bool(path.stat().st_file_attributes & stat.FILE_ATTRIBUTE_HIDDEN)
        except (AttributeError, OSError):
            pass

    return False


def ensure_directory(path: Path) -> None:
    """Ensure directory exists, create if necessary.

    Args:
        path: Directory path to ensure.
    """
    path.mkdir(parents=True, exist_ok=True)


def with_language_suffix(path: Path, language: str) -> Path:
    """Insert a language code before the file extension.

    ``Movie.en.srt`` with ``zh-CN`` becomes ``Movie.en.zh-CN.srt``.

    Args:
        path: Original file path.
        language: Language code to insert.

    Returns:
        Sibling path carrying the language code.
    """
    return path.with_name(f"{path.stem}.{language}{path.suffix}")


def relative_depth(path: Path, root: Path) -> int:
    """Get how many levels below root a path sits.

    Args:
        path: Path inside root.
        root: Root directory.

    Returns:
        0 for direct children of root, 1 for grandchildren and so on,
        -1 if path is root itself or outside of it.
    """
    try:
        parts = path.relative_to(root).parts
    except ValueError:
        return -1
    return len(parts) - 1
