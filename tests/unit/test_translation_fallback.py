"""Test translation fallback service."""

import pytest

from auto_subtitle.core.services import TranslationFallback
from auto_subtitle.utils import LLMServiceError

SRT = "1\n00:00:01,000 --> 00:00:03,000\nHello there\n"


@pytest.mark.unit
def test_should_translate_only_unwanted_english(config, mock_llm_service):
    """Test that English is translated only when not preferred."""
    fallback = TranslationFallback(config, mock_llm_service)
    assert not fallback.should_translate("en")
    assert not fallback.should_translate("zh-CN")

    config.subtitles.preferred_languages = ["zh-CN", "zh"]
    assert fallback.should_translate("en")
    assert not fallback.should_translate("fr")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_translate_file_writes_sibling(config, mock_llm_service, tmp_path):
    """Test that the translation is written next to the original."""
    source = tmp_path / "Movie.en.srt"
    source.write_text(SRT, encoding="utf-8")
    mock_llm_service.translate_subtitle.return_value = "1\n00:00:01,000 --> 00:00:03,000\n你好\n"
    fallback = TranslationFallback(config, mock_llm_service)

    output = await fallback.translate_file(source)

    assert output == tmp_path / "Movie.en.zh-CN.srt"
    assert "你好" in output.read_text(encoding="utf-8")
    assert source.read_text(encoding="utf-8") == SRT
    mock_llm_service.translate_subtitle.assert_awaited_once_with(SRT, "zh-CN")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_translate_file_custom_target(config, mock_llm_service, tmp_path):
    """Test translating into an explicit language."""
    source = tmp_path / "Movie.srt"
    source.write_text(SRT, encoding="utf-8")
    fallback = TranslationFallback(config, mock_llm_service)

    output = await fallback.translate_file(source, "ja")

    assert output.name == "Movie.ja.srt"
    mock_llm_service.translate_subtitle.assert_awaited_once_with(SRT, "ja")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_maybe_translate(config, mock_llm_service, make_subtitle, tmp_path):
    """Test that only English subtitles are translated."""
    config.subtitles.preferred_languages = ["zh-CN"]
    source = tmp_path / "Movie.srt"
    source.write_text(SRT, encoding="utf-8")
    fallback = TranslationFallback(config, mock_llm_service)

    assert await fallback.maybe_translate(make_subtitle(1, language="zh-CN"), source) is None
    mock_llm_service.translate_subtitle.assert_not_awaited()

    output = await fallback.maybe_translate(make_subtitle(2, language="en"), source)
    assert output == tmp_path / "Movie.zh-CN.srt"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_translation_error_leaves_no_file(config, mock_llm_service, tmp_path):
    """Test that a failing LLM call writes nothing."""
    source = tmp_path / "Movie.srt"
    source.write_text(SRT, encoding="utf-8")
    mock_llm_service.translate_subtitle.side_effect = LLMServiceError("quota")
    fallback = TranslationFallback(config, mock_llm_service)

    with pytest.raises(LLMServiceError):
        await fallback.translate_file(source)

    assert not (tmp_path / "Movie.zh-CN.srt").exists()
