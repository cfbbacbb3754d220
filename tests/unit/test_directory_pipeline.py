"""Test directory pipeline service."""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from auto_subtitle.core.interfaces import ICandidateSelector
from auto_subtitle.core.models import PipelineStatus
from auto_subtitle.core.services import (
    CandidateSelector,
    DirectoryPipeline,
    DownloadManager,
    QualityRanker,
    SubtitleResolver,
    TitleResolver,
    TranslationFallback,
)
from auto_subtitle.utils import LLMServiceError, MetadataServiceError

MB = 1024 * 1024


def build_pipeline(config, llm, metadata, subtitles, candidate_selector=None):
    """Wire a pipeline around mocked external services."""
    return DirectoryPipeline(
        config,
        candidate_selector or CandidateSelector(config),
        TitleResolver(config, llm, metadata),
        SubtitleResolver(config, subtitles),
        QualityRanker(),
        DownloadManager(config, subtitles),
        TranslationFallback(config, llm),
    )


@pytest.fixture
def pipeline(config, mock_llm_service, mock_metadata_service, mock_subtitle_service):
    """Pipeline with mocked LLM, metadata and subtitle services."""
    return build_pipeline(config, mock_llm_service, mock_metadata_service, mock_subtitle_service)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_process_directory_success(
    pipeline, sample_movie_dir, mock_subtitle_service, make_subtitle
):
    """Test a full run downloads the best subtitle next to the movie."""
    mock_subtitle_service.search_by_id.return_value = [
        make_subtitle(1, download_count=10),
        make_subtitle(2, download_count=500),
    ]

    result = await pipeline.process_directory(sample_movie_dir)

    assert result.status == PipelineStatus.SUCCESS
    assert result.is_successful
    assert result.movie_file.name == "The.Matrix.1999.1080p.BluRay.x264-GROUP.mkv"
    assert result.movie.external_id == "603"
    assert result.subtitle.id == 2
    assert result.subtitle_path.parent == sample_movie_dir
    assert result.subtitle_path.exists()
    assert result.translated_path is None
    assert result.processing_time_seconds is not None
    mock_subtitle_service.request_link.assert_awaited_once_with(2, "token-1")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_samples_only_never_download(pipeline, watch_dir, make_file, mock_subtitle_service):
    """Test that a directory holding only samples triggers no download."""
    movie_dir = watch_dir / "Trailers"
    make_file(movie_dir / "Movie.Sample.mkv", 40 * MB)
    make_file(movie_dir / "movie-trailer.mp4", 900 * MB)

    result = await pipeline.process_directory(movie_dir)

    assert result.status == PipelineStatus.NO_CANDIDATE
    assert result.is_benign
    mock_subtitle_service.search_by_id.assert_not_awaited()
    mock_subtitle_service.request_link.assert_not_awaited()
    mock_subtitle_service.fetch.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_overlapping_runs_execute_once(
    config, mock_llm_service, mock_metadata_service, mock_subtitle_service, tmp_path
):
    """Test that concurrent calls for one directory run the pipeline once."""
    gate = asyncio.Event()

    async def slow_select(directory):
        await gate.wait()
        return None

    selector = Mock(spec=ICandidateSelector)
    selector.select_candidate = AsyncMock(side_effect=slow_select)
    pipeline = build_pipeline(
        config, mock_llm_service, mock_metadata_service, mock_subtitle_service, selector
    )

    first = asyncio.create_task(pipeline.process_directory(tmp_path))
    await asyncio.sleep(0)
    assert pipeline.is_processing(tmp_path)

    second = await pipeline.process_directory(tmp_path)
    third = await pipeline.process_directory(tmp_path)
    gate.set()
    first_result = await first

    assert first_result.status == PipelineStatus.NO_CANDIDATE
    assert second.status == PipelineStatus.BUSY
    assert third.status == PipelineStatus.BUSY
    assert selector.select_candidate.await_count == 1
    assert not pipeline.is_processing(tmp_path)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_lock_released_after_failure(pipeline, sample_movie_dir, mock_metadata_service):
    """Test that a failing run reports failure and frees the directory."""
    mock_metadata_service.search.side_effect = MetadataServiceError("down")

    result = await pipeline.process_directory(sample_movie_dir)

    assert result.status == PipelineStatus.FAILED
    assert "down" in result.error_message
    assert not pipeline.is_processing(sample_movie_dir)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_no_metadata(pipeline, sample_movie_dir, mock_metadata_service, mock_subtitle_service):
    """Test that an unknown movie ends the run without searching subtitles."""
    mock_metadata_service.search.return_value = []

    result = await pipeline.process_directory(sample_movie_dir)

    assert result.status == PipelineStatus.NO_METADATA
    assert result.working_title == "The Matrix"
    mock_subtitle_service.search_by_id.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_no_subtitle(pipeline, sample_movie_dir, mock_subtitle_service):
    """Test that a movie without subtitles ends the run benignly."""
    result = await pipeline.process_directory(sample_movie_dir)

    assert result.status == PipelineStatus.NO_SUBTITLE
    assert result.is_benign
    mock_subtitle_service.request_link.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_existing_subtitle_skips_download(
    pipeline, sample_movie_dir, mock_subtitle_service, make_subtitle
):
    """Test that an existing subtitle makes the run a no-op download."""
    (sample_movie_dir / "The.Matrix.1999.1080p.BluRay.x264-GROUP.srt").write_text("existing")
    mock_subtitle_service.search_by_id.return_value = [make_subtitle(1)]

    result = await pipeline.process_directory(sample_movie_dir)

    assert result.status == PipelineStatus.SUBTITLE_EXISTS
    mock_subtitle_service.request_link.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_english_subtitle_translated(
    config, pipeline, sample_movie_dir, mock_subtitle_service, mock_llm_service, make_subtitle
):
    """Test that an English subtitle is translated when English is not preferred."""
    config.subtitles.preferred_languages = ["zh-CN", "zh"]
    mock_subtitle_service.search_by_title.return_value = [make_subtitle(1, language="en")]
    mock_subtitle_service.request_link.return_value = "https://dl.example.com/x/Matrix.srt"

    result = await pipeline.process_directory(sample_movie_dir)

    assert result.status == PipelineStatus.SUCCESS
    assert result.translated_path == sample_movie_dir / "Matrix.zh-CN.srt"
    assert result.translated_path.read_text(encoding="utf-8") == "translated"
    mock_llm_service.translate_subtitle.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_translation_failure_keeps_download(
    config, pipeline, sample_movie_dir, mock_subtitle_service, mock_llm_service, make_subtitle
):
    """Test that a translation error is reported without losing the subtitle."""
    config.subtitles.preferred_languages = ["zh-CN"]
    mock_subtitle_service.search_by_title.return_value = [make_subtitle(1, language="en")]
    mock_llm_service.translate_subtitle.side_effect = LLMServiceError("quota")

    result = await pipeline.process_directory(sample_movie_dir)

    assert result.status == PipelineStatus.SUCCESS
    assert result.subtitle_path.exists()
    assert result.translated_path is None
    assert "quota" in result.error_message


@pytest.mark.unit
@pytest.mark.asyncio
async def test_process_file_skips_selection(
    pipeline, watch_dir, make_file, mock_subtitle_service, make_subtitle
):
    """Test that a given movie file is used even if it looks like a sample."""
    movie_file = make_file(watch_dir / "Clip" / "Movie.Sample.mkv", 10 * MB)
    mock_subtitle_service.search_by_id.return_value = [make_subtitle(1)]

    result = await pipeline.process_file(movie_file)

    assert result.status == PipelineStatus.SUCCESS
    assert result.movie_file == movie_file
    assert result.directory == movie_file.parent
    assert not pipeline.is_processing(movie_file.parent)


@pytest.mark.unit
def test_register_file_once(pipeline, tmp_path):
    """Test that each file is registered only once."""
    path = tmp_path / "movie.mkv"

    assert pipeline.register_file(path)
    assert not pipeline.register_file(path)
    assert pipeline.processed_files_count == 1
