"""
Group recordings by series and total up their storage.

Grouping gives one SeriesStat per SeriesID with a provisional episode
count (one per recording). The true count and size come from asking
the DVR for every episode list and the size of every episode in it.
"""
from collections.abc import Iterable

from loguru import logger

from hdhr_cli.client import DvrClient
from hdhr_cli.models import Recording, SeriesStat


def collect_recordings(recordings: Iterable[Recording]) -> dict[str, SeriesStat]:
    """Group recordings into SeriesStat entries keyed by series id."""
    series_map: dict[str, SeriesStat] = {}
    for rec in recordings:
        series = series_map.get(rec.series_id)
        if series is None:
            series = SeriesStat(series_id=rec.series_id, title=rec.title)
            series_map[rec.series_id] = series
        series.episode_count += 1
        series.episode_urls.append(rec.episodes_url)
    return series_map


def aggregate_stats(client: DvrClient, stat: SeriesStat) -> SeriesStat:
    """Recount the episodes of one series and sum their sizes."""
    stat.reset()
    for url in stat.episode_urls:
        for episode in client.fetch_episodes(url):
            stat.add_episode(client.episode_size(episode.play_url))
    logger.debug(
        f'{stat.title}: {stat.episode_count} episodes, ' +
        f'{stat.total_bytes} bytes',
    )
    return stat


def aggregate_all(
    client: DvrClient,
    series_map: dict[str, SeriesStat],
) -> dict[str, SeriesStat]:
    """Resolve every series in turn; the first error aborts the lot."""
    for count, stat in enumerate(series_map.values()):
        logger.info(
            f'Sizing "{stat.title}" ({count + 1} of {len(series_map)})',
        )
        aggregate_stats(client, stat)
    return series_map
