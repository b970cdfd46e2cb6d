"""
Data types exchanged with the HDHomeRun DVR engine.

The DVR answers with JSON objects whose keys are PascalCase, with
acronyms kept upper-case (StorageURL, SeriesID, ...). Every wire field
therefore carries an explicit field_name. Keys the device adds that we
do not model are ignored, and keys it leaves out fall back to an empty
value.
"""
from dataclasses import dataclass, field

from dataclasses_json import Undefined, config, dataclass_json

WIRE_NAME = 'wire_name'


def wire(name: str, default=''):
    """Declare a dataclass field that maps to the JSON key `name`."""
    metadata = config(field_name=name)
    metadata[WIRE_NAME] = name
    return field(default=default, metadata=metadata)


@dataclass_json(undefined=Undefined.EXCLUDE)
@dataclass(frozen=True, kw_only=True)
class DiscoveryResult(object):
    """Answer from the discover.json endpoint."""

    device_id: str = wire('DeviceID')
    storage_url: str = wire('StorageURL')


@dataclass_json(undefined=Undefined.EXCLUDE)
@dataclass(frozen=True, kw_only=True)
class Recording(object):
    """One entry of the recorded programs list."""

    episodes_url: str = wire('EpisodesURL')
    start_time: int = wire('StartTime', default=0)
    category: str = wire('Category')
    title: str = wire('Title')
    series_id: str = wire('SeriesID')


@dataclass_json(undefined=Undefined.EXCLUDE)
@dataclass(frozen=True, kw_only=True)
class Episode(object):
    """A playable episode from a series' episode list."""

    play_url: str = wire('PlayURL')
    command_url: str = wire('CmdURL')
    title: str = wire('Title')
    episode_number: str = wire('EpisodeNumber')
    episode_title: str = wire('EpisodeTitle')

    def describe(self) -> str:
        """Short human-readable label, e.g. 'Title S01E02 "Pilot"'."""
        label = ' '.join(
            part for part in (self.title, self.episode_number) if part
        )
        if self.episode_title:
            label = f'{label} "{self.episode_title}"'
        return label or self.play_url


@dataclass(kw_only=True)
class SeriesStat(object):
    """Episode count and storage used by one series."""

    series_id: str
    title: str
    episode_count: int = 0
    total_bytes: int = 0
    episode_urls: list[str] = field(default_factory=list)

    def reset(self) -> None:
        """Zero the counters before sizes are resolved."""
        self.episode_count = 0
        self.total_bytes = 0

    def add_episode(self, size: int) -> None:
        """Account for one more episode occupying `size` bytes."""
        self.episode_count += 1
        self.total_bytes += size
