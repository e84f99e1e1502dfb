"""
HTTP client for the external profile fetch API.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Optional

import requests

from config.settings import Settings, get_settings
from models.raw_profile import RawProfile
from services.errors import MalformedInput
from services.domain_utils import extract_linkedin_id, normalize_linkedin_profile_url
from sources.base import ProfileSource, to_raw_profile
from sources.registry import register


logger = logging.getLogger(__name__)

FETCH_PATH = "/functions/v1/fetch-linkedin-profile"


class ProfileFetchError(RuntimeError):
    """A single profile could not be fetched from the API."""


class ProfileApiClient:
    """Fetches single profiles by URL from the profile API."""

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        if not self.settings.profile_api_url:
            raise ValueError("PROFILE_API_URL must be set to fetch profiles")
        self.endpoint = self.settings.profile_api_url.rstrip("/") + FETCH_PATH
        self.session = session or requests.Session()
        self.api_calls_made = 0
        self.errors: List[Dict[str, str]] = []

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.settings.profile_api_token:
            headers["Authorization"] = f"Bearer {self.settings.profile_api_token}"
        return headers

    def fetch_profile(self, profile_url: str) -> RawProfile:
        if not extract_linkedin_id(profile_url):
            raise ProfileFetchError(f"Invalid LinkedIn URL: {profile_url}")

        last_error: Optional[str] = None
        for attempt in range(self.settings.max_retries):
            try:
                response = self.session.post(
                    self.endpoint,
                    json={"profileUrl": profile_url},
                    headers=self._headers(),
                    timeout=self.settings.http_timeout_seconds,
                )
                self.api_calls_made += 1
            except requests.exceptions.RequestException as e:
                last_error = str(e)
                logger.error(f"Request error on attempt {attempt + 1}: {e}", extra={"step": "fetch", "status": "error"})
            else:
                if response.status_code == 200:
                    return self._to_profile(response, profile_url)
                if response.status_code < 500:
                    raise ProfileFetchError(self._error_message(response))
                last_error = self._error_message(response)
                logger.warning(
                    f"API request failed with status {response.status_code}",
                    extra={"step": "fetch", "status": response.status_code},
                )
            if attempt < self.settings.max_retries - 1:
                time.sleep(2 ** attempt)  # Exponential backoff

        raise ProfileFetchError(last_error or "Failed to fetch profile")

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and payload.get("error"):
            return str(payload["error"])
        return f"Failed to fetch profile (HTTP {response.status_code})"

    @staticmethod
    def _to_profile(response: requests.Response, profile_url: str) -> RawProfile:
        try:
            payload = response.json()
        except ValueError as e:
            raise ProfileFetchError(f"Response for {profile_url} is not JSON") from e
        if not isinstance(payload, dict):
            raise ProfileFetchError(f"Unexpected response for {profile_url}")
        try:
            return to_raw_profile(payload)
        except MalformedInput as e:
            raise ProfileFetchError(str(e)) from e

    def fetch_multiple(
        self,
        profile_urls: List[str],
        on_progress: Optional[Callable[[int, int], None]] = None,
    ) -> List[RawProfile]:
        """Fetch each URL in order; failures are logged and skipped."""
        results: List[RawProfile] = []
        errors: List[Dict[str, str]] = []
        total = len(profile_urls)
        for i, url in enumerate(profile_urls, start=1):
            try:
                results.append(self.fetch_profile(url))
            except ProfileFetchError as e:
                errors.append({"url": url, "error": str(e)})
            if on_progress:
                on_progress(i, total)
            if i < total:
                time.sleep(self.settings.fetch_delay_seconds)

        if errors:
            logger.warning(f"Some profiles failed to fetch: {errors}", extra={"step": "fetch", "status": "partial"})
        self.errors = errors
        return results


class ProfileApiSource(ProfileSource):
    source_name = "api"
    import_type = "api"

    def __init__(self, urls: List[str], client: Optional[ProfileApiClient] = None) -> None:
        # Dedupe on the canonical URL while keeping input order
        seen = set()
        self.urls: List[str] = []
        for url in urls:
            key = normalize_linkedin_profile_url(url) or url
            if key not in seen:
                seen.add(key)
                self.urls.append(url)
        self._client = client
        self.errors: List[Dict[str, str]] = []

    def load(self) -> List[RawProfile]:
        if self._client is None:
            self._client = ProfileApiClient()
        profiles = self._client.fetch_multiple(self.urls)
        self.errors = list(self._client.errors)
        return profiles


def _register():
    register(ProfileApiSource.source_name, ProfileApiSource)


_register()
