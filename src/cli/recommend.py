# =============================================================================
# src/cli/recommend.py - CLI Recommend / Match Command
# =============================================================================
#
# Runs the recommendation engine from the command line, bypassing the API
# server.  Uses the same object graph as the web app (src.main.build_engine)
# and the same SQLite database, so results computed here show up in the API.
#
# Typical usage:
#   python -m src.cli.recommend alice 4Z8W4fKeB5YxbusRsdQVPb            # 1 seed
#   python -m src.cli.recommend alice ID1 ID2 ID3 --json                # JSON
#   python -m src.cli.recommend alice ID1 --token "$SPOTIFY_USER_TOKEN"
#   python -m src.cli.recommend --matches alice                         # matches
#
# Exit codes:
#   0 - success (including an empty recommendation or match list)
#   1 - engine or storage failure
#   2 - invalid arguments or seed list
#
# Logs always go to stderr.  --json implies --quiet (WARNING+ only).
# =============================================================================

"""Standalone CLI for computing recommendations and matches.

Usage::

    python -m src.cli.recommend USER_ID SEED [SEED ...] [--json]
    python -m src.cli.recommend --matches USER_ID [--json]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import time
from collections.abc import Sequence

from src.models.recommendation import MatchCandidate, RecommendationResult
from src.utils.errors import InvalidSeedSetError, TasteGraphError

_EXIT_OK = 0
_EXIT_FAILURE = 1
_EXIT_USAGE = 2


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_recommendations_text(result: RecommendationResult) -> str:
    """Render a recommendation result as a human-readable report."""
    lines = [
        f"Recommendations for {result.user_id}",
        "=" * 60,
        "Seeds: " + ", ".join(f"{a.display_name} ({a.artist_id})" for a in result.seed_artists),
        f"Graph: {result.graph_nodes} artists, {result.graph_edges} relations",
        "",
    ]
    if not result.recommendations:
        lines.append("No recommendations could be produced for these seeds.")
        return "\n".join(lines)

    for rank, artist in enumerate(result.recommendations, start=1):
        lines.append(f"{rank:>2}. {artist.display_name:<40} {artist.score:.4f}  [{artist.artist_id}]")
    return "\n".join(lines)


def format_matches_text(user_id: str, candidates: Sequence[MatchCandidate]) -> str:
    """Render match candidates as a human-readable report."""
    lines = [f"Matches for {user_id}", "=" * 60]
    if not candidates:
        lines.append("No users share a seed artist with you yet.")
        return "\n".join(lines)

    for candidate in candidates:
        name = candidate.profile.nickname if candidate.profile else candidate.user_id
        lines.append(
            f"{name:<30} {candidate.score} shared: {', '.join(candidate.shared_artists)}"
        )
    return "\n".join(lines)


def format_recommendations_json(result: RecommendationResult) -> str:
    return json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False)


def format_matches_json(user_id: str, candidates: Sequence[MatchCandidate]) -> str:
    payload = {
        "user_id": user_id,
        "matches": [c.model_dump(mode="json") for c in candidates],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Command execution
# ---------------------------------------------------------------------------


async def _run(args: argparse.Namespace) -> int:
    """Build the engine, run the requested command and print the result."""
    # Deferred: src.main loads settings and config at import time.
    import httpx

    from src.main import build_engine, config, settings
    from src.utils.logging import configure_logging

    # Logs go to stderr so stdout holds only the report.
    configure_logging(
        log_level="WARNING" if args.quiet or args.json_output else settings.log_level,
        stream=sys.stderr,
    )

    async with httpx.AsyncClient(timeout=settings.spotify_timeout) as http_client:
        components = build_engine(settings, config, http_client)
        try:
            await components["artist_store"].initialize()

            if args.matches:
                candidates = await components["match_service"].compute_matches(args.user_id)
                text = (
                    format_matches_json(args.user_id, candidates)
                    if args.json_output
                    else format_matches_text(args.user_id, candidates)
                )
            else:
                start = time.monotonic()
                result = await asyncio.wait_for(
                    components["recommendation_service"].compute_recommendations(
                        args.user_id,
                        args.seeds,
                        user_token=args.token,
                    ),
                    timeout=components["recommendation_timeout"],
                )
                print(f"Done in {time.monotonic() - start:.1f}s", file=sys.stderr)
                text = (
                    format_recommendations_json(result)
                    if args.json_output
                    else format_recommendations_text(result)
                )
        except InvalidSeedSetError as exc:
            print(f"Error: {exc.message}", file=sys.stderr)
            return _EXIT_USAGE
        except asyncio.TimeoutError:
            print("Error: recommendation timed out", file=sys.stderr)
            return _EXIT_FAILURE
        except TasteGraphError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return _EXIT_FAILURE

    print(text)
    return _EXIT_OK


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the recommend CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m src.cli.recommend",
        description=(
            "Recommend artists from 1-3 seed artists, or list users who share "
            "seed artists with USER_ID (--matches)."
        ),
    )
    parser.add_argument("user_id", type=str, help="User the results belong to.")
    parser.add_argument(
        "seeds",
        nargs="*",
        metavar="SEED",
        help="Spotify artist ids to seed the graph with (1-3).",
    )
    parser.add_argument(
        "--matches",
        action="store_true",
        help="List matching users instead of computing recommendations.",
    )
    parser.add_argument(
        "--token",
        type=str,
        default=None,
        help="Spotify user access token; enables the top-artists fallback.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON instead of formatted text.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress log output (implied by --json).",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point: parse arguments and run the command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.matches and args.seeds:
        parser.error("--matches takes only USER_ID")
    if not args.matches and not args.seeds:
        parser.error("at least one SEED is required")

    sys.exit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
