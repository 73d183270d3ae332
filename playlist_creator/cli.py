"""
Command-line interface for playlist-creator.

This module implements the CLI using rich-click. It takes the songs
extracted from a piece of content (a JSON file), matches them against
the Apple Music catalog, lets the user review the ambiguous matches
card by card and writes the resulting playlist.

Commands:
    playlist-creator <songs.json>                 Match, review, create playlist
    playlist-creator <songs.json> --auto-only     Skip review, keep auto matches only
    playlist-creator --resume <request-id>        Continue an interrupted review
    playlist-creator --list                       Show stored requests

Usage:
    # Full run with interactive review
    playlist-creator episode-42.json --name "Episode 42"

    # Tell the playlist where the songs came from
    playlist-creator episode-42.json --source "https://example.com/ep42.mp3"

    # Pick up a review that was quit halfway
    playlist-creator --resume 0b7c1c1e-...

Configuration:
    The CLI reads config.yaml from the current directory (or --config):
    - output.directory (required): logs, requests.db and playlists/
    - matching: auto-select and review batch thresholds
    - search: storefront country, result limit, rate-limit delay, timeout

Review Commands:
    a  accept          r  reject          u  undo
    A  accept all      R  reject all
    h  accept high     l  reject low      x  reset
    q  quit (progress is saved, continue later with --resume)
"""

import sys
from pathlib import Path
from typing import Optional

import rich_click as click

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100
click.rich_click.OPTION_GROUPS = {
    "cli": [
        {
            "name": "Playlist",
            "options": ["--name", "--source", "--auto-only"],
        },
        {
            "name": "Requests",
            "options": ["--resume", "--list"],
        },
        {
            "name": "Advanced Options",
            "options": ["--config"],
        },
        {
            "name": "Info",
            "options": ["--version", "--help"],
        },
    ],
}

from playlist_creator.catalog import CatalogSearcher, ITunesSearchClient
from playlist_creator.core import (
    Config,
    ConfigError,
    DatabaseError,
    MusicSearchError,
    PlaylistCreatorError,
    WorkflowError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from playlist_creator.core.database import DATABASE_FILENAME, Database
from playlist_creator.matching import MatchedSong, SearchResult, match_explanation
from playlist_creator.playlist import (
    PLAYLISTS_SUBDIRECTORY,
    CreatedPlaylist,
    JSONPlaylistExporter,
    PlaylistSubmitter,
)
from playlist_creator.review import ReviewSession
from playlist_creator.utils import ensure_directory, load_extracted_songs
from playlist_creator.workflow import PlaylistRequest, PlaylistWorkflow

logger = get_logger(__name__)


__version__ = "0.1.0"


REVIEW_COMMANDS = {
    "a": "accept",
    "r": "reject",
    "u": "undo",
    "A": "accept all remaining",
    "R": "reject all remaining",
    "h": "accept all high confidence",
    "l": "reject all low confidence",
    "x": "reset",
    "q": "quit and save",
}


@click.command()
@click.argument(
    "songs_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    metavar="<songs.json>"
)
@click.option(
    "--name",
    type=str,
    default=None,
    metavar="<name>",
    help="Playlist name (default: 'Playlist Creator - <date>')"
)
@click.option(
    "--source",
    type=str,
    default=None,
    metavar="<url-or-path>",
    help="Where the songs were mentioned (shown in the description)"
)
@click.option(
    "--auto-only",
    is_flag=True,
    help="Skip review: only auto-selected matches go in the playlist"
)
@click.option(
    "--resume",
    type=str,
    default=None,
    metavar="<request-id>",
    help="Continue reviewing a stored request"
)
@click.option(
    "--list", "list_requests",
    is_flag=True,
    help="List stored requests and exit"
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml)"
)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.pass_context
def cli(
    ctx: click.Context,
    songs_file: Optional[Path],
    name: Optional[str],
    source: Optional[str],
    auto_only: bool,
    resume: Optional[str],
    list_requests: bool,
    config_path: Optional[Path],
    version: bool
) -> None:
    """
    playlist-creator: Turn songs mentioned in content into a playlist.

    Matches extracted song mentions against the Apple Music catalog.
    Confident matches are selected automatically; the rest are shown
    one card at a time for you to accept or reject.

    \b
    BASIC USAGE:
        playlist-creator episode-42.json                # Match + review
        playlist-creator episode-42.json --auto-only    # No review

    \b
    REQUESTS:
        playlist-creator --list                         # Stored requests
        playlist-creator --resume <request-id>          # Continue a review
    """
    if version:
        click.echo(f"playlist-creator {__version__}")
        ctx.exit(0)

    if not songs_file and not resume and not list_requests:
        click.echo(ctx.get_help())
        ctx.exit(0)

    if songs_file and resume:
        raise click.UsageError("Cannot use both <songs.json> and --resume")
    if list_requests and (songs_file or resume):
        raise click.UsageError("--list cannot be combined with other inputs")
    if source and resume:
        raise click.UsageError("--source can only be used with <songs.json>")

    ctx.ensure_object(dict)
    ctx.obj["songs_file"] = songs_file
    ctx.obj["name"] = name
    ctx.obj["source"] = source
    ctx.obj["auto_only"] = auto_only
    ctx.obj["resume"] = resume
    ctx.obj["list_requests"] = list_requests
    ctx.obj["config_path"] = config_path

    _run(ctx.obj)


def _run(options: dict) -> None:
    """
    Execute the playlist workflow based on CLI options.

    Steps:
    1. Loads configuration
    2. Sets up logging
    3. Opens the request database
    4. Matches songs (or loads a stored request)
    5. Runs the review and creates the playlist

    Args:
        options: ctx.obj as filled in by cli().

    Raises:
        SystemExit: 1 config or unexpected, 2 database, 3 search,
                    4 other application error, 130 interrupt.
    """
    database: Database | None = None

    try:
        config = load_config(options["config_path"])

        ensure_directory(config.output.directory)
        setup_logging(config.output.directory)
        logger.info("playlist-creator starting")

        database = _initialize_database(config.output.directory)

        if options["list_requests"]:
            _print_requests(database)
            return

        workflow = _build_workflow(config)

        if options["resume"]:
            request = _load_request(database, options["resume"])
        else:
            request = _match_new_request(
                database, workflow, options["songs_file"], options["source"]
            )

        if not options["auto_only"]:
            request.matched_songs, completed = _review(workflow, request.matched_songs, config)
            database.update_match_statuses(request.id, request.matched_songs)
            if not completed:
                click.echo(f"\nReview saved. Continue with: playlist-creator --resume {request.id}")
                logger.info(f"Review of request {request.id} paused")
                return

        try:
            playlist = workflow.create_playlist(request, request.matched_songs, options["name"])
        finally:
            database.save_request(request)

        _print_final_stats(request, playlist)
        logger.info("playlist-creator completed successfully")

    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    except DatabaseError as e:
        click.echo(f"Database error: {e.message}", err=True)
        logger.error(f"Database error: {e.message}", exc_info=True)
        sys.exit(2)

    except MusicSearchError as e:
        click.echo(f"Search error: {e.message}", err=True)
        logger.error(f"Search error: {e.message}", exc_info=True)
        sys.exit(3)

    except PlaylistCreatorError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.error(f"Error: {e.message}", exc_info=True)
        sys.exit(4)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        sys.exit(130)

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        sys.exit(1)

    finally:
        if database is not None:
            database.close()
        shutdown_logging()


def _initialize_database(output_dir: Path) -> Database:
    """
    Open the request database in the output directory.

    Raises:
        DatabaseError: If database cannot be initialized.
    """
    return Database(output_dir / DATABASE_FILENAME)


def _build_workflow(config: Config) -> PlaylistWorkflow:
    """Wire the iTunes catalog client and the JSON playlist backend."""
    client = ITunesSearchClient(
        country=config.search.country,
        limit=config.search.limit,
        timeout=config.search.timeout
    )
    searcher = CatalogSearcher(
        client,
        minimum_confidence=config.matching.minimum_confidence,
        rate_limit_delay=config.search.rate_limit_delay
    )
    exporter = JSONPlaylistExporter(config.output.directory / PLAYLISTS_SUBDIRECTORY)

    return PlaylistWorkflow(
        searcher,
        PlaylistSubmitter(exporter),
        auto_select_threshold=config.matching.auto_select_threshold
    )


def _load_request(database: Database, request_id: str) -> PlaylistRequest:
    """
    Fetch a stored request that can still be reviewed.

    Raises:
        WorkflowError: If the request is unknown or already finished.
    """
    request = database.get_request(request_id)
    if request is None:
        raise WorkflowError(
            f"No stored request with id {request_id}",
            details={"request_id": request_id}
        )
    if request.is_finished:
        raise WorkflowError(
            f"Request {request_id} is already {request.status.display_description.lower()}",
            details={"request_id": request_id, "status": str(request.status)}
        )

    logger.info(f"Resuming request {request.id} ({request.pending_song_count} pending)")
    return request


def _match_new_request(
    database: Database,
    workflow: PlaylistWorkflow,
    songs_file: Path,
    source: str | None
) -> PlaylistRequest:
    """
    Load a songs file, search the catalog and store the new request.

    Raises:
        WorkflowError: If the file is invalid or nothing could be matched.
    """
    logger.info("=" * 60)
    logger.info("Matching songs against the catalog")
    logger.info("=" * 60)

    extracted = load_extracted_songs(songs_file)
    source = source or extracted.source

    request = PlaylistRequest(
        transcript=extracted.transcript,
        extracted_songs=list(extracted.songs)
    )
    if source and source.startswith(("http://", "https://")):
        request.source_url = source
    else:
        request.source_file_path = source or str(songs_file)

    logger.info(f"Loaded {len(extracted.songs)} songs from {songs_file.name}")

    outcome = workflow.process(request)

    if not outcome.matches:
        request.mark_failed("No catalog matches found")
        database.save_request(request)
        raise WorkflowError(
            "No catalog matches found for any song",
            details={"request_id": request.id, "unmatched": len(outcome.unmatched)}
        )

    database.save_request(request)

    summary = outcome.summary
    click.echo(
        f"\nMatched {summary.total_matches} of {len(request.extracted_songs)} songs: "
        f"{summary.auto_selected} auto-selected, {summary.requires_review} to review"
    )
    return request


def _review(
    workflow: PlaylistWorkflow,
    matches: list[MatchedSong],
    config: Config
) -> tuple[list[MatchedSong], bool]:
    """
    Interactive card review of the pending matches.

    Returns:
        (full match list with the decisions applied, True if every card
        was decided or False if the user quit).
    """
    session = workflow.start_review(matches)
    if session.is_complete:
        return list(matches), True

    click.echo(f"\n{len(session.matches)} matches need your review.")
    click.echo("  " + "   ".join(f"{key}={label}" for key, label in REVIEW_COMMANDS.items()))

    while not session.is_complete:
        _print_card(session, config)
        command = click.prompt(
            "Decision",
            type=click.Choice(list(REVIEW_COMMANDS)),
            default="a",
            show_choices=False
        )

        if command == "q":
            return workflow.apply_review(matches, session), False
        _apply_command(session, command, config)

    return workflow.apply_review(matches, session), True


def _apply_command(session: ReviewSession, command: str, config: Config) -> None:
    if command == "a":
        session.accept_current_match()
    elif command == "r":
        session.reject_current_match()
    elif command == "u":
        if not session.can_undo:
            click.echo("Nothing to undo.")
        session.undo()
    elif command == "A":
        session.accept_all()
    elif command == "R":
        session.reject_all()
    elif command == "h":
        session.accept_all_high_confidence(config.matching.high_confidence_threshold)
    elif command == "l":
        session.reject_all_low_confidence(config.matching.low_confidence_threshold)
    elif command == "x":
        session.reset()


def _print_card(session: ReviewSession, config: Config) -> None:
    match = session.current_match
    if match is None:
        return

    position = session.current_index + 1
    click.echo()
    click.echo(click.style(
        f"[{position}/{len(session.matches)}] {match.quality_indicator} {match.display_title}",
        bold=True
    ))
    click.echo(f"    by {match.display_artist}")
    if match.match_status.has_user_decision:
        click.echo(f"    Currently: {match.match_status.display_description}")

    explanation = match_explanation(
        match.original_song,
        _as_search_result(match),
        config.matching.auto_select_threshold
    )
    for line in explanation.splitlines():
        click.echo(f"    {line}")
    if match.preview_url:
        click.echo(f"    Preview: {match.preview_url}")


def _as_search_result(match: MatchedSong) -> SearchResult:
    return SearchResult(
        song=match.catalog_song,
        match_confidence=match.confidence,
        catalog_id=match.catalog_id or "",
        preview_url=match.preview_url
    )


def _print_requests(database: Database) -> None:
    """Print one line per stored request, most recent first."""
    requests = database.list_requests()
    if not requests:
        click.echo("No stored requests.")
        return

    for entry in requests:
        source = entry["source_url"] or entry["source_file_path"] or "-"
        name = entry["playlist_name"] or ""
        click.echo(
            f"{entry['id']}  {entry['created_at'][:19]}  {entry['status']:<10}  "
            f"{entry['match_count']:>3} matches  {entry['pending_count']:>3} pending  "
            f"{source}  {name}".rstrip()
        )


def _print_final_stats(request: PlaylistRequest, playlist: CreatedPlaylist) -> None:
    """Log the outcome of a completed request."""
    duration = request.processing_duration

    logger.info("=" * 60)
    logger.info("PLAYLIST CREATED")
    logger.info("=" * 60)
    logger.info(f"Name:              {playlist.name}")
    logger.info(f"Songs:             {playlist.song_count}")
    logger.info(f"Matches reviewed:  {len(request.matched_songs)}")
    if duration is not None:
        logger.info(f"Duration:          {duration:.1f}s")
    if playlist.url:
        logger.info(f"Location:          {playlist.url}")
    logger.info("=" * 60)


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `playlist-creator` from the
    command line.
    """
    cli()


if __name__ == "__main__":
    main()
