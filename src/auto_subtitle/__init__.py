"""Auto Subtitle.

Watches a movie download folder, identifies newly arrived movies and
fetches the best matching subtitle for them from OpenSubtitles, with
optional AI translation when only English subtitles are available.
"""

__version__ = "0.1.0"
