"""OpenSubtitles service implementation."""

from datetime import datetime
from typing import Any, Dict, List, Optional

import aiohttp

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import ConfigurationError, SubtitleServiceError
from ..interfaces import ISubtitleService
from ..models import SubtitleRecord


class OpenSubtitlesService(ISubtitleService, LoggerMixin):
    """Subtitle search and download against the OpenSubtitles REST API."""

    def __init__(self, config: Config) -> None:
        """Initialize OpenSubtitles service.

        Args:
            config: Application configuration.

        Raises:
            ConfigurationError: If the API key is not configured.
        """
        self._config = config
        self._os_config = config.opensubtitles
        self._session: Optional[aiohttp.ClientSession] = None

        if not self._os_config.api_key:
            raise ConfigurationError("OpenSubtitles API key is not configured")

        if self._os_config.proxy:
            self.logger.info(f"OpenSubtitles requests use proxy: {self._os_config.proxy}")

    async def search_by_id(self, external_id: str, language: str) -> List[SubtitleRecord]:
        """Search subtitles by TMDb movie ID.

        Args:
            external_id: TMDb movie ID.
            language: Language code.

        Returns:
            Subtitles found.

        Raises:
            SubtitleServiceError: If search fails.
        """
        self.logger.info(f"Searching subtitles by movie ID: {external_id} [{language}]")
        return await self._search({"tmdb_id": external_id, "languages": language})

    async def search_by_title(
        self, title: str, year: Optional[int], language: str
    ) -> List[SubtitleRecord]:
        """Search subtitles by title and year.

        Args:
            title: Movie title.
            year: Release year, if known.
            language: Language code.

        Returns:
            Subtitles found.

        Raises:
            SubtitleServiceError: If search fails.
        """
        self.logger.info(f"Searching subtitles by title: {title} ({year or '?'}) [{language}]")
        params = {"query": title, "languages": language}
        if year:
            params["year"] = str(year)
        return await self._search(params)

    async def authenticate(self) -> str:
        """Log in with the configured account.

        Returns:
            Bearer token.

        Raises:
            SubtitleServiceError: If login fails.
        """
        self.logger.info("Logging in to OpenSubtitles")
        url = f"{self._os_config.base_url}/login"
        payload = {"username": self._os_config.username, "password": self._os_config.password}

        try:
            async with self._get_session().post(
                url, json=payload, headers=self._api_headers(), proxy=self._os_config.proxy
            ) as response:
                response.raise_for_status()
                data = await response.json()
        except Exception as e:
            error_msg = f"OpenSubtitles login failed: {e}"
            self.logger.error(error_msg)
            raise SubtitleServiceError(error_msg) from e

        token = data.get("token")
        if not token:
            raise SubtitleServiceError("OpenSubtitles login returned no token")
        return str(token)

    async def request_link(self, file_id: int, token: str) -> str:
        """Request a one-time download link.

        Args:
            file_id: Subtitle file identifier.
            token: Bearer token.

        Returns:
            Download URL.

        Raises:
            SubtitleServiceError: If the request fails or returns no link.
        """
        url = f"{self._os_config.base_url}/download"
        headers = self._api_headers()
        headers["Authorization"] = f"Bearer {token}"
        payload = {"file_id": file_id, "force_download": 1}

        try:
            async with self._get_session().post(
                url, json=payload, headers=headers, proxy=self._os_config.proxy
            ) as response:
                response.raise_for_status()
                data = await response.json()
        except Exception as e:
            error_msg = f"Failed to get download link for file {file_id}: {e}"
            self.logger.error(error_msg)
            raise SubtitleServiceError(error_msg) from e

        link = data.get("link")
        if not link:
            raise SubtitleServiceError(f"No download link returned for file {file_id}")

        self.logger.info(f"Got download link: {link}")
        return str(link)

    async def fetch(self, url: str) -> bytes:
        """Fetch a subtitle file from its download link.

        Only the User-Agent header is sent; the link itself is the credential.

        Args:
            url: Download URL.

        Returns:
            File content.

        Raises:
            SubtitleServiceError: If the fetch fails.
        """
        timeout = aiohttp.ClientTimeout(total=self._os_config.download_timeout)
        headers = {"User-Agent": self._os_config.user_agent}

        try:
            async with self._get_session().get(
                url, headers=headers, timeout=timeout, proxy=self._os_config.proxy
            ) as response:
                response.raise_for_status()
                return await response.read()
        except Exception as e:
            error_msg = f"Subtitle fetch failed: {e}"
            self.logger.error(error_msg)
            raise SubtitleServiceError(error_msg) from e

    async def _search(self, params: Dict[str, str]) -> List[SubtitleRecord]:
        """Run a subtitle search.

        Args:
            params: Query parameters.

        Returns:
            Parsed subtitles.

        Raises:
            SubtitleServiceError: If search fails.
        """
        url = f"{self._os_config.base_url}/subtitles"

        try:
            async with self._get_session().get(
                url, params=params, headers=self._api_headers(), proxy=self._os_config.proxy
            ) as response:
                response.raise_for_status()
                data = await response.json()
        except Exception as e:
            error_msg = f"OpenSubtitles search failed: {e}"
            self.logger.error(error_msg)
            raise SubtitleServiceError(error_msg) from e

        subtitles = []
        for item in data.get("data") or []:
            try:
                record = self._parse_subtitle(item)
            except (TypeError, ValueError, AttributeError) as e:
                error_msg = f"Malformed OpenSubtitles search row {item!r}: {e}"
                self.logger.error(error_msg)
                raise SubtitleServiceError(error_msg) from e
            if record is not None:
                subtitles.append(record)

        self.logger.info(f"Found {len(subtitles)} subtitles")
        return subtitles

    def _parse_subtitle(self, item: Dict[str, Any]) -> Optional[SubtitleRecord]:
        """Parse an OpenSubtitles search row into SubtitleRecord.

        Args:
            item: Search row.

        Returns:
            SubtitleRecord object, or None if the row has no downloadable file.
        """
        attributes = item.get("attributes") or {}
        files = attributes.get("files") or []
        if not files or files[0].get("file_id") is None:
            self.logger.debug(f"Skipping subtitle without file: {item.get('id')}")
            return None

        first_file = files[0]
        return SubtitleRecord(
            id=int(first_file["file_id"]),
            file_name=first_file.get("file_name") or "",
            language=attributes.get("language") or "",
            download_count=(
                attributes.get("download_count") or attributes.get("new_download_count") or 0
            ),
            rating=attributes.get("ratings") or 0.0,
            release=attributes.get("release") or "",
            size=first_file.get("file_size"),
            upload_date=self._parse_upload_date(attributes.get("upload_date")),
            hd=bool(attributes.get("hd")),
            fps=attributes.get("fps") or None,
            comments=attributes.get("comments") or "",
            ai_translated=bool(attributes.get("ai_translated")),
            machine_translated=bool(attributes.get("machine_translated")),
            format=attributes.get("format"),
            subtitle_id=(
                str(attributes["subtitle_id"]) if attributes.get("subtitle_id") else None
            ),
        )

    @staticmethod
    def _parse_upload_date(value: Optional[str]) -> Optional[datetime]:
        """Parse an ISO-8601 upload timestamp."""
        if not value:
            return None
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None

    def _api_headers(self) -> Dict[str, str]:
        """Headers for authenticated API calls."""
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Api-Key": self._os_config.api_key,
            "User-Agent": self._os_config.user_agent,
        }

    def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session.

        Returns:
            HTTP session.
        """
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._os_config.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "OpenSubtitlesService":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
