"""Text processing utilities."""

import re
from typing import Iterable, Optional, Tuple
from urllib.parse import unquote, urlparse

DEFAULT_SAMPLE_KEYWORDS = ("sample", "trailer", "preview", "teaser", "promo")

# Subtitle filename markers that indicate a Chinese subtitle is already present
LANGUAGE_MARKERS = ("chinese", "zh", "cn")

_SIZE_TOKEN_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(mb|gb)", re.IGNORECASE)


def extract_size_token(filename: str) -> Optional[Tuple[float, str]]:
    """Extract an embedded size token such as ``45MB`` or ``1.4 GB``.

    Args:
        filename: Filename to parse.

    Returns:
        Tuple of (size, lowercase unit) for the first token found, or None.
    """
    match = _SIZE_TOKEN_PATTERN.search(filename)
    if not match:
        return None
    return float(match.group(1)), match.group(2).lower()


def is_sample_file(
    filename: str,
    keywords: Iterable[str] = DEFAULT_SAMPLE_KEYWORDS,
    max_sample_mb: float = 50,
    max_sample_gb: float = 0.1,
) -> bool:
    """Check if filename indicates a sample file.

    A file is a sample when its name contains one of the sample keywords
    (``movie.sample.mkv``, ``trailer.mp4``...) or when it carries a size token
    below the sample thresholds.

    Args:
        filename: Filename to check.
        keywords: Sample keywords, matched case-insensitively as substrings.
        max_sample_mb: Sizes below this many MB mark a sample.
        max_sample_gb: Sizes below this many GB mark a sample.

    Returns:
        True if appears to be a sample file.
    """
    filename_lower = filename.lower()
    if any(keyword.lower() in filename_lower for keyword in keywords):
        return True

    size_token = extract_size_token(filename_lower)
    if size_token:
        size, unit = size_token
        if unit == "mb" and size < max_sample_mb:
            return True
        if unit == "gb" and size < max_sample_gb:
            return True

    return False


def names_overlap(first: str, second: str) -> bool:
    """Check whether one name contains the other, ignoring case.

    Args:
        first: First name.
        second: Second name.

    Returns:
        True if either lowercase name is a substring of the other.
    """
    first_lower = first.lower()
    second_lower = second.lower()
    return first_lower in second_lower or second_lower in first_lower


def has_language_marker(name: str, markers: Iterable[str] = LANGUAGE_MARKERS) -> bool:
    """Check if a subtitle name carries a language marker token."""
    name_lower = name.lower()
    return any(marker in name_lower for marker in markers)


def filename_from_url(url: str) -> Optional[str]:
    """Extract the decoded file name from the path component of a URL.

    Args:
        url: URL to parse.

    Returns:
        Decoded last path segment, or None if the URL has none.
    """
    path = urlparse(url).path
    name = unquote(path.rsplit("/", 1)[-1])
    # Decoded names may contain separators again
    name = name.replace("\\", "/").rsplit("/", 1)[-1].strip()
    if not name or name in (".", ".."):
        return None
    return name


def clean_completion(text: str) -> str:
    """Clean an LLM completion down to a single plain line.

    Args:
        text: Raw completion text.

    Returns:
        First non-empty line without surrounding quotes or whitespace.
    """
    for line in text.strip().splitlines():
        line = line.strip().strip("\"'`").strip()
        if line:
            return line
    return ""
