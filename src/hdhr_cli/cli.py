"""
Command-line front end for an HDHomeRun DVR.

`list` reports how many episodes of each recorded series are stored and
how much space they take. `delete-series` removes every stored episode
of one series.
"""
import argparse
import importlib.metadata
import sys
from typing import Optional

from loguru import logger

from hdhr_cli.aggregate import aggregate_all, collect_recordings
from hdhr_cli.client import DEFAULT_TIMEOUT, DISCOVER_URL, DvrClient
from hdhr_cli.errors import DiscoveryError, HdhrError
from hdhr_cli.models import Recording, SeriesStat
from hdhr_cli.report import render_table


def _build_parser() -> argparse.ArgumentParser:  # noqa: WPS213
    parser = argparse.ArgumentParser(
        prog='hdhr-cli',
        description='Report and manage recordings on an HDHomeRun DVR.',
        epilog='Sizes are gathered with one request per stored episode, ' +
               'so listing a large DVR can take a while.',
    )
    parser.add_argument(
        '-v',
        '--verbose',
        action='store_true',
        help='show progress',
    )
    parser.add_argument(
        '-d',
        '--debug',
        action='store_true',
        help='show debug messages',
    )
    version_str = importlib.metadata.version('hdhr-cli')
    parser.add_argument(
        '-V',
        '--version',
        action='version',
        version=f'%(prog)s {version_str}',  # noqa: F821,WPS323
    )
    parser.add_argument(
        '--discover-url',
        metavar='URL',
        default=DISCOVER_URL,
        help=f'device discovery endpoint (default: {DISCOVER_URL})',
    )
    parser.add_argument(
        '--timeout',
        metavar='SECONDS',
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f'timeout for each HTTP request (default: {DEFAULT_TIMEOUT:g})',
    )

    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.add_parser(
        'list',
        help='show episode count and storage used per series',
    )
    delete_parser = subparsers.add_parser(
        'delete-series',
        help='delete every stored episode of a series',
    )
    delete_parser.add_argument(
        '--title',
        metavar='PREFIX',
        required=True,
        help='a unique prefix of the title of the series to delete',
    )
    delete_parser.add_argument(
        '--forever',
        action='store_true',
        help='never attempt to rerecord the episodes being deleted',
    )
    return parser


def _parse_cli(cli_args: list[str]) -> argparse.Namespace:
    parser = _build_parser()
    args = parser.parse_args(cli_args)
    if not args.command:
        parser.print_usage()
        parser.exit(1)

    logger.remove()  # remove the old handler or the both handlers will be used
    if args.debug:
        logger.add(sys.stdout, level='DEBUG')
    elif args.verbose:
        logger.add(sys.stdout, level='INFO')
    else:
        logger.add(sys.stdout, level='SUCCESS')

    return args


def list_recordings(client: DvrClient, storage_url: str) -> bool:
    """Print the per-series storage table."""
    recordings = client.fetch_recordings(storage_url)
    series_map = aggregate_all(client, collect_recordings(recordings))
    for line in render_table(series_map):
        print(line)
    return True


def find_series(
    recordings: list[Recording],
    title_prefix: str,
) -> Optional[SeriesStat]:
    """Pick the one series whose title starts with title_prefix."""
    matches = [
        stat for stat in collect_recordings(recordings).values()
        if stat.title.startswith(title_prefix)
    ]
    if not matches:
        print(f"Nothing matches '{title_prefix}'")
        return None
    if len(matches) > 1:
        print(
            f"More than one title matches '{title_prefix}':\n" +
            f'{matches[0].title}\n{matches[1].title}',
        )
        return None
    return matches[0]


def delete_series(
    client: DvrClient,
    storage_url: str,
    title_prefix: str,
    forever: bool,
) -> bool:
    """Delete all stored episodes of the series matching title_prefix."""
    stat = find_series(client.fetch_recordings(storage_url), title_prefix)
    if stat is None:
        return False

    episodes = [
        episode
        for url in stat.episode_urls
        for episode in client.fetch_episodes(url)
    ]
    rerecord = not forever
    logger.info(
        f'Deleting {len(episodes)} episodes of "{stat.title}" ' +
        f'(rerecord={rerecord})',
    )
    for episode in episodes:
        client.delete_episode(episode, rerecord=rerecord)
        print(f'Deleted: {episode.describe()}')

    print(f"Deleted {len(episodes)} episodes of '{stat.title}'")
    return True


def real_main(opts: argparse.Namespace) -> bool:
    """Actual workhorse function for the hdhr cli."""
    with DvrClient(opts.discover_url, opts.timeout) as client:
        storage_url = client.discover().storage_url
        if opts.command == 'delete-series':
            return delete_series(client, storage_url, opts.title, opts.forever)
        return list_recordings(client, storage_url)


def main(cli_args: Optional[list[str]] = None) -> int:
    """Main entry point for the hdhr cli."""
    if cli_args is None:
        cli_args = sys.argv[1:]

    try:
        return 0 if real_main(_parse_cli(cli_args)) else 1

    except SystemExit as exc:
        # argparse: --help/--version exit 0, usage errors map to 1
        return 1 if exc.code else 0

    except DiscoveryError as exc:
        print(f'Discovery Error: {exc}')
        return 1

    except HdhrError as exc:
        print(f'Error: {exc}')
        return 1

    except KeyboardInterrupt:
        logger.error('Aborted manually.')
        return 1

    except Exception:
        logger.exception('Unhandled exception, exiting.')
        return 1


def run() -> None:
    """Console-script wrapper around main()."""
    sys.exit(main(sys.argv[1:]))


if __name__ == '__main__':
    run()
