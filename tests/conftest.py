"""Pytest configuration and fixtures."""

from datetime import datetime
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import aiohttp
import pytest

from auto_subtitle.config import ConfigManager
from auto_subtitle.core.interfaces import ILLMService, IMetadataService, ISubtitleService
from auto_subtitle.core.models import MovieRecord, MovieSearchResult, SubtitleRecord
from auto_subtitle.infrastructure import Container

MB = 1024 * 1024


class FakeResponse:
    """Minimal aiohttp response stand-in."""

    def __init__(self, status=200, data=None, body=b""):
        self.status = status
        self._data = data
        self._body = body

    def raise_for_status(self):
        if self.status >= 400:
            raise aiohttp.ClientError(f"HTTP {self.status}")

    async def json(self):
        return self._data

    async def read(self):
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        return None


class FakeSession:
    """Records requests and replays queued responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def _request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        return self.responses.pop(0)

    def get(self, url, **kwargs):
        return self._request("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._request("POST", url, **kwargs)


def _make_file(path: Path, size_bytes: int = 1024) -> Path:
    """Create a sparse file of the given size."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        f.truncate(size_bytes)
    return path


def _make_subtitle(file_id: int = 1, **overrides) -> SubtitleRecord:
    """Build a subtitle record with sensible defaults."""
    values = {
        "id": file_id,
        "file_name": f"subtitle-{file_id}.srt",
        "language": "zh-CN",
        "download_count": 100,
        "rating": 5.0,
        "upload_date": datetime(2023, 1, 1),
    }
    values.update(overrides)
    return SubtitleRecord(**values)


@pytest.fixture
def watch_dir(tmp_path):
    """Create the watched root directory."""
    path = tmp_path / "movies"
    path.mkdir()
    return path


@pytest.fixture
def temp_config_file(tmp_path, watch_dir):
    """Create a temporary configuration file."""
    config_content = f"""
llm:
  provider: "deepseek"
  model: "deepseek-chat"
  api_key: "test-key"

tmdb:
  api_key: "test-tmdb-key"

opensubtitles:
  api_key: "test-os-key"
  username: "test-user"
  password: "test-pass"

watcher:
  watch_dir: "{watch_dir}"
  stability_threshold_ms: 0
  poll_interval_ms: 1
  processing_delay_ms: 0

subtitles:
  preferred_languages: ["zh-CN", "zh", "en"]
  download_dir: "{tmp_path / 'downloads'}"
"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(config_content)
    return config_file


@pytest.fixture
def config_manager(temp_config_file):
    """Create a configuration manager with test config."""
    return ConfigManager(temp_config_file)


@pytest.fixture
def config(config_manager):
    """Load test configuration."""
    return config_manager.load_config()


@pytest.fixture
def container(config_manager):
    """Create a test container."""
    container = Container(config_manager)
    return container


@pytest.fixture
def movie_record():
    """Resolved movie metadata."""
    return MovieRecord(external_id="603", title="The Matrix", year=1999)


@pytest.fixture
def mock_llm_service():
    """Mock LLM service."""
    service = Mock(spec=ILLMService)
    service.simplify_movie_name = AsyncMock(return_value="The Matrix")
    service.translate_subtitle = AsyncMock(return_value="translated")
    service.complete = AsyncMock(return_value="completion")
    return service


@pytest.fixture
def mock_metadata_service(movie_record):
    """Mock metadata service that finds The Matrix."""
    service = Mock(spec=IMetadataService)
    service.search = AsyncMock(
        return_value=[MovieSearchResult(external_id="603", title="The Matrix", year=1999)]
    )
    service.get_details = AsyncMock(return_value=movie_record)
    return service


@pytest.fixture
def mock_subtitle_service():
    """Mock subtitle provider."""
    service = Mock(spec=ISubtitleService)
    service.search_by_id = AsyncMock(return_value=[])
    service.search_by_title = AsyncMock(return_value=[])
    service.authenticate = AsyncMock(return_value="token-1")
    service.request_link = AsyncMock(
        return_value="https://dl.example.com/download/abc/The%20Matrix.zh-CN.srt"
    )
    service.fetch = AsyncMock(return_value=b"1\n00:00:01,000 --> 00:00:03,000\nHello\n")
    return service


@pytest.fixture
def sample_movie_dir(watch_dir):
    """Create a movie directory with a main file and a sample."""
    movie_dir = watch_dir / "The Matrix (1999)"
    _make_file(movie_dir / "The.Matrix.1999.1080p.BluRay.x264-GROUP.mkv", 800 * MB)
    _make_file(movie_dir / "The.Matrix.Sample.mkv", 40 * MB)
    return movie_dir


@pytest.fixture
def make_file():
    """Factory creating sparse files of a given size."""
    return _make_file


@pytest.fixture
def make_subtitle():
    """Factory building subtitle records."""
    return _make_subtitle


@pytest.fixture
def fake_response():
    """Factory for canned HTTP responses."""
    return FakeResponse


@pytest.fixture
def fake_session():
    """Factory for recording HTTP sessions."""
    return FakeSession
