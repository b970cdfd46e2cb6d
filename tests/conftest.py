"""Shared pytest fixtures: a mocked HDHomeRun DVR API."""
import httpx
import pytest
import respx

DISCOVER_URL = 'http://hdhomerun.local/discover.json'
STORAGE_URL = 'http://10.0.0.5/recorded_files.json'
GIB = 1073741824


def recording(series_id: str, title: str, episodes_path: str) -> dict:
    """A recorded_files.json entry as the device sends it."""
    return {
        'SeriesID': series_id,
        'Title': title,
        'Category': 'series',
        'ImageURL': f'http://img.hdhomerun.com/titles/{series_id}.jpg',
        'StartTime': 1591570800,
        'EpisodesURL': f'http://10.0.0.5{episodes_path}',
        'UpdateID': 3033907720,
    }


def episode(file_id: str, title: str = 'Show', number: str = 'S01E01') -> dict:
    """An entry from a series' episode list."""
    return {
        'Title': title,
        'EpisodeNumber': number,
        'EpisodeTitle': f'Episode {file_id}',
        'PlayURL': f'http://10.0.0.5/recorded/play?id={file_id}',
        'CmdURL': f'http://10.0.0.5/recorded/cmd?id={file_id}',
        'ChannelName': 'WFAADT',
        'Resume': 1610,
    }


@pytest.fixture
def dvr_api():
    """Mock the DVR with a device that discovers successfully."""
    with respx.mock(assert_all_called=False) as router:
        router.get(DISCOVER_URL).mock(
            return_value=httpx.Response(
                200,
                json={'DeviceID': '1234ABCD', 'StorageURL': STORAGE_URL},
            ),
        )
        yield router


@pytest.fixture
def two_series_dvr(dvr_api):
    """Series A has two 1 GiB episodes, series B one 0.5 GiB episode."""
    dvr_api.get(STORAGE_URL).mock(
        return_value=httpx.Response(
            200,
            json=[
                recording('A', 'Alpha Show', '/episodes/a1'),
                recording('B', 'Beta Show', '/episodes/b1'),
                recording('A', 'Alpha Show', '/episodes/a2'),
            ],
        ),
    )
    sizes = {'a1': GIB, 'a2': GIB, 'b1': GIB // 2}
    for file_id, size in sizes.items():
        dvr_api.get(f'http://10.0.0.5/episodes/{file_id}').mock(
            return_value=httpx.Response(200, json=[episode(file_id)]),
        )
        dvr_api.head(f'http://10.0.0.5/recorded/play?id={file_id}').mock(
            return_value=httpx.Response(
                200,
                headers={'Content-Length': str(size)},
            ),
        )
    return dvr_api
