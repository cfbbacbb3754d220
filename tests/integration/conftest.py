"""Integration test fixtures and configuration."""

import os
from datetime import datetime, timezone
from pathlib import Path

import pytest
import yaml

from auto_subtitle.config import ConfigManager
from auto_subtitle.core.interfaces import ILLMService, IMetadataService, ISubtitleService
from auto_subtitle.core.models import MovieRecord, MovieSearchResult, SubtitleRecord
from auto_subtitle.infrastructure import Container

SUBTITLE_BODY = b"1\n00:00:01,000 --> 00:00:03,000\nHello\n"


class MockLLMService:
    """Mock LLM service for integration tests."""

    def __init__(self):
        self.simplified = []
        self.translated = []

    async def complete(self, prompt, max_tokens=None, temperature=None):
        return prompt

    async def simplify_movie_name(self, raw_name):
        """Keep only the words before the first year-like token."""
        self.simplified.append(raw_name)
        words = []
        for word in raw_name.replace(".", " ").split():
            if word.isdigit() and len(word) == 4:
                break
            words.append(word)
        return " ".join(words)

    async def translate_subtitle(self, content, target_language):
        self.translated.append(target_language)
        return f"[{target_language}] {content}"


class MockTMDbService:
    """Mock TMDb service that knows a small catalog."""

    def __init__(self):
        self.catalog = {
            "the matrix": MovieRecord(external_id="603", title="The Matrix", year=1999),
            "heat": MovieRecord(external_id="949", title="Heat", year=1995),
        }
        self.queries = []

    async def search(self, query):
        """Return the catalog entry for an exact title."""
        self.queries.append(query)
        movie = self.catalog.get(query.lower())
        if movie is None:
            return []
        return [
            MovieSearchResult(external_id=movie.external_id, title=movie.title, year=movie.year)
        ]

    async def get_details(self, external_id):
        for movie in self.catalog.values():
            if movie.external_id == external_id:
                return movie
        raise KeyError(external_id)


class MockOpenSubtitlesService:
    """Mock OpenSubtitles service serving canned subtitles."""

    def __init__(self):
        self.subtitles = {
            ("603", "zh-CN"): [
                SubtitleRecord(
                    id=101,
                    file_name="The.Matrix.zh-CN.srt",
                    language="zh-CN",
                    download_count=5000,
                    rating=8.0,
                    hd=True,
                    upload_date=datetime(2022, 5, 1, tzinfo=timezone.utc),
                ),
                SubtitleRecord(
                    id=102,
                    file_name="The.Matrix.zh-CN.ai.srt",
                    language="zh-CN",
                    download_count=90000,
                    rating=9.0,
                    ai_translated=True,
                ),
            ],
        }
        self.logins = 0
        self.links = []

    async def search_by_id(self, external_id, language):
        return list(self.subtitles.get((external_id, language), []))

    async def search_by_title(self, title, year, language):
        return []

    async def authenticate(self):
        self.logins += 1
        return f"token-{self.logins}"

    async def request_link(self, file_id, token):
        self.links.append((file_id, token))
        return f"https://dl.example.com/download/{file_id}/The.Matrix.zh-CN.srt"

    async def fetch(self, url):
        return SUBTITLE_BODY


@pytest.fixture
def movies_root(tmp_path):
    """Watched root directory for integration tests."""
    path = tmp_path / "library"
    path.mkdir()
    return path


@pytest.fixture
def integration_config(tmp_path, movies_root):
    """Create integration test configuration."""
    config_content = {
        "llm": {
            "provider": "deepseek",
            "model": "deepseek-chat",
            "api_key": os.getenv("DEEPSEEK_API_KEY", "test-key-integration"),
            "timeout": 30,
        },
        "tmdb": {
            "api_key": os.getenv("TMDB_API_KEY", "test-tmdb-key"),
            "language": "en-US",
            "timeout": 10,
        },
        "opensubtitles": {
            "api_key": "test-os-key",
            "username": "integration-user",
            "password": "integration-pass",
        },
        "watcher": {
            "watch_dir": str(movies_root),
            "scan_depth": 1,
            "stability_threshold_ms": 200,
            "poll_interval_ms": 50,
            "processing_delay_ms": 100,
        },
        "subtitles": {
            "preferred_languages": ["zh-CN", "zh", "en"],
            "target_language": "zh-CN",
            "download_dir": str(tmp_path / "downloads"),
        },
        "logging": {
            "level": "DEBUG",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
    }

    config_file = tmp_path / "integration_config.yaml"
    with open(config_file, "w") as f:
        yaml.dump(config_content, f, default_flow_style=False, indent=2)

    return config_file


@pytest.fixture
def integration_container(integration_config):
    """Create container with integration configuration (external services mocked)."""
    config_manager = ConfigManager(integration_config)
    container = Container(config_manager)
    container.configure_default_services()

    container.register_instance(ILLMService, MockLLMService())
    container.register_instance(IMetadataService, MockTMDbService())
    container.register_instance(ISubtitleService, MockOpenSubtitlesService())

    return container


@pytest.fixture
def make_movie(movies_root):
    """Factory creating a movie directory with one video file."""

    def _make_movie(dir_name: str, file_name: str, size_bytes: int = 200 * 1024 * 1024) -> Path:
        movie_dir = movies_root / dir_name
        movie_dir.mkdir(parents=True, exist_ok=True)
        movie_file = movie_dir / file_name
        with open(movie_file, "wb") as f:
            f.truncate(size_bytes)
        return movie_file

    return _make_movie


@pytest.fixture
def subtitle_body():
    """Content served by the mock subtitle provider."""
    return SUBTITLE_BODY
