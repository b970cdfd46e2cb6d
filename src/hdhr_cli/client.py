"""
HTTP client for the HDHomeRun DVR engine.

Every call is synchronous and bounded by a single timeout. Failures are
reported as one of the hdhr_cli.errors exceptions, with the underlying
httpx or JSON error chained as the cause.
"""
import dataclasses
from typing import Literal, Self

import httpx
from loguru import logger

from hdhr_cli.errors import (
    CommandError,
    DiscoveryError,
    FetchError,
    HdhrError,
    SizeQueryError,
)
from hdhr_cli.models import WIRE_NAME, DiscoveryResult, Episode, Recording

DISCOVER_URL: Literal['http://hdhomerun.local/discover.json'] = (
    'http://hdhomerun.local/discover.json'
)
DEFAULT_TIMEOUT = 5.0
HTTP_OK = 200


class DvrClient(object):
    """Client for the HDHomeRun discovery and DVR storage APIs."""

    def __init__(
        self,
        discover_url: str = DISCOVER_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Remember where to discover the device; connect on enter."""
        self.discover_url = discover_url
        self.timeout = timeout
        self.client: httpx.Client | None = None

    def __enter__(self) -> Self:
        """Open the shared HTTP client."""
        self.client = httpx.Client(
            follow_redirects=True,
            timeout=self.timeout,
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close the shared HTTP client."""
        if self.client:
            self.client.close()
            self.client = None

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        if not self.client:
            raise RuntimeError('Client must be used as context manager')
        logger.debug(f'{method} {url}')
        response = self.client.request(method, url, **kwargs)
        logger.debug(f'{method} {url} -> {response.status_code}')
        return response

    def _get_json(
        self,
        url: str,
        error_cls: type[HdhrError],
        what: str,
    ) -> object:
        """GET `url` and decode its JSON body, raising error_cls on failure."""
        try:
            response = self._request('GET', url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise error_cls(f'failed to fetch {what} from {url}: {exc}') from exc

        if response.status_code != HTTP_OK:
            raise error_cls(
                f'{what} at {url} returned status {response.status_code}',
            )

        try:
            return response.json()
        except ValueError as exc:
            raise error_cls(f'failed to parse {what} JSON: {exc}') from exc

    def discover(self) -> DiscoveryResult:
        """Locate the DVR engine and return its storage URL."""
        logger.info('Searching for HDHomeRun devices on the local network...')
        payload = self._get_json(
            self.discover_url,
            DiscoveryError,
            'discovery API',
        )
        if not isinstance(payload, dict):
            raise DiscoveryError(
                'failed to parse discovery JSON: expected an object',
            )

        discovery = _decode(
            DiscoveryResult,
            payload,
            DiscoveryError,
            'discovery',
        )
        if not discovery.storage_url:
            raise DiscoveryError('discovery response has no StorageURL')

        logger.info(
            f'Found device {discovery.device_id or "?"} ' +
            f'with storage at {discovery.storage_url}',
        )
        return discovery

    def fetch_recordings(self, storage_url: str) -> list[Recording]:
        """Return the recorded programs listed at storage_url."""
        payload = self._get_json(storage_url, FetchError, 'recording list')
        recordings = [
            _decode(Recording, entry, FetchError, 'recording list')
            for entry in _json_objects(payload, 'recording list')
        ]
        logger.info(f'Fetched {len(recordings)} recordings')
        return recordings

    def fetch_episodes(self, episodes_url: str) -> list[Episode]:
        """Return the episodes currently stored for one series."""
        if not episodes_url:
            raise FetchError('recording has no EpisodesURL')
        payload = self._get_json(episodes_url, FetchError, 'episode list')
        return [
            _decode(Episode, entry, FetchError, 'episode list')
            for entry in _json_objects(payload, 'episode list')
        ]

    def episode_size(self, play_url: str) -> int:
        """Size in bytes of an episode, read from a HEAD request."""
        if not play_url:
            raise SizeQueryError('episode has no PlayURL')
        try:
            response = self._request('HEAD', play_url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise SizeQueryError(f'failed to fetch {play_url}: {exc}') from exc

        if response.status_code != HTTP_OK:
            raise SizeQueryError(
                f'{play_url} returned status {response.status_code}',
            )

        content_length = response.headers.get('Content-Length')
        if content_length is None:
            logger.warning(f'No Content-Length for {play_url}, counting as 0')
            return 0

        try:
            return int(content_length)
        except ValueError as exc:
            raise SizeQueryError(
                f'{play_url} returned a bad Content-Length: {content_length}',
            ) from exc

    def delete_episode(self, episode: Episode, rerecord: bool) -> None:
        """Ask the DVR to delete an episode, optionally allowing rerecord."""
        if not episode.command_url:
            raise CommandError(f'no command URL for {episode.describe()}')

        params = {'cmd': 'delete', 'rerecord': '1' if rerecord else '0'}
        try:
            # keep the id=... query the command URL already carries
            url = httpx.URL(episode.command_url).copy_merge_params(params)
            response = self._request('POST', str(url))
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise CommandError(
                f'failed to delete {episode.describe()}: {exc}',
            ) from exc

        if response.status_code != HTTP_OK:
            raise CommandError(
                f'delete of {episode.describe()} returned status ' +
                f'{response.status_code}',
            )


def _json_objects(payload: object, what: str) -> list[dict]:
    """Check that payload is a JSON array of objects."""
    if payload is None:
        # the DVR answers `null` when a list is empty
        return []
    if not isinstance(payload, list):
        raise FetchError(f'failed to parse {what} JSON: expected an array')
    if not all(isinstance(entry, dict) for entry in payload):
        raise FetchError(
            f'failed to parse {what} JSON: expected an array of objects',
        )
    return payload


def _decode(record_cls, entry: dict, error_cls: type[HdhrError], what: str):
    """Build record_cls from a JSON object, rejecting mistyped fields."""
    for wire_field in dataclasses.fields(record_cls):
        key = wire_field.metadata[WIRE_NAME]
        value = entry.get(key)
        # null decodes to the field's empty value
        if value is not None and not isinstance(value, wire_field.type):
            raise error_cls(
                f'failed to parse {what} JSON: {key} should be ' +
                f'{wire_field.type.__name__}, got {value!r}',
            )

    entry = {key: value for key, value in entry.items() if value is not None}
    try:
        return record_cls.from_dict(entry)
    except (TypeError, ValueError, KeyError) as exc:
        raise error_cls(f'failed to parse {what} JSON: {exc}') from exc
