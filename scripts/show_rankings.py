#!/usr/bin/env python3
"""Show an organization's rankings or one player's statistics."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from cli_support import fail, open_ledger
from db import DB_URL_ENVVAR, DEFAULT_DB_URL
from domain.errors import OrganizationNotFound, PlayerNotFound
from domain.common import MatchRecord
from domain.ledger import history, player_report, rankings

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Query rankings, match history and player statistics.",
)


def _format_match(match: MatchRecord) -> str:
    changes = " ".join(
        f"{name}={delta:+d}" for name, delta in (match.rating_changes or {}).items()
    )
    return (
        f"match_id={match.match_id} played_at={match.date.isoformat()}T{match.time:%H:%M} "
        f"team1={','.join(match.team1)} team2={','.join(match.team2)} "
        f"score={match.team1_score}-{match.team2_score} winner={match.winner} "
        f"rating_changes {changes}"
    )


@app.command("rankings")
def show_rankings(
    organization_id: Annotated[int, typer.Option("--organization-id")],
    top_n: Annotated[
        int,
        typer.Option("--top-n", help="Number of players to return."),
    ] = 20,
    min_matches: Annotated[
        int,
        typer.Option("--min-matches", help="Hide players with fewer matches than this."),
    ] = 0,
    db_url: Annotated[
        str,
        typer.Option("--db-url", envvar=DB_URL_ENVVAR, help="Database URL."),
    ] = DEFAULT_DB_URL,
) -> None:
    """Print players by rating, highest first."""
    if top_n <= 0:
        raise typer.BadParameter("--top-n must be greater than 0")
    if min_matches < 0:
        raise typer.BadParameter("--min-matches must be >= 0")

    session_factory = open_ledger(db_url)
    try:
        players = rankings(session_factory, organization_id=organization_id)
    except OrganizationNotFound as exc:
        fail(str(exc))

    players = [player for player in players if player.matches_played >= min_matches][:top_n]
    if not players:
        typer.echo(f"No players found for organization_id={organization_id}.")
        return

    typer.echo(f"organization_id={organization_id} top_n={top_n} min_matches={min_matches}")
    for rank, player in enumerate(players, start=1):
        typer.echo(
            f"{rank:>3}. {player.name:<24} rating={player.rating:>5} "
            f"matches={player.matches_played:>4} wins={player.wins:>4} "
            f"losses={player.losses:>4} win_rate={player.win_rate:.1f}%"
        )


@app.command("player")
def show_player(
    organization_id: Annotated[int, typer.Option("--organization-id")],
    name: Annotated[str, typer.Argument(help="Player name (case-insensitive).")],
    db_url: Annotated[
        str,
        typer.Option("--db-url", envvar=DB_URL_ENVVAR, help="Database URL."),
    ] = DEFAULT_DB_URL,
) -> None:
    """Print one player's record, pair records and matches in played order."""
    session_factory = open_ledger(db_url)
    try:
        stats = player_report(session_factory, organization_id=organization_id, name=name)
    except (OrganizationNotFound, PlayerNotFound) as exc:
        fail(str(exc))

    player = stats.player
    typer.echo(
        f"{player.name} rating={player.rating} matches={player.matches_played} "
        f"wins={player.wins} losses={player.losses} win_rate={stats.win_rate:.1f}%"
    )
    typer.echo("teammates:")
    for record in stats.teammates:
        typer.echo(
            f"  {record.name:<24} wins={record.wins} losses={record.losses} "
            f"win_rate={record.win_rate:.1f}%"
        )
    typer.echo("opponents:")
    for record in stats.opponents:
        typer.echo(
            f"  {record.name:<24} wins_against={record.wins} losses_against={record.losses} "
            f"win_rate={record.win_rate:.1f}%"
        )
    typer.echo("matches:")
    for match in stats.matches:
        typer.echo(f"  {_format_match(match)}")


@app.command("history")
def show_history(
    organization_id: Annotated[int, typer.Option("--organization-id")],
    player: Annotated[
        str | None,
        typer.Option("--player", help="Only matches this player took part in (case-insensitive)."),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", help="Show at most this many matches."),
    ] = None,
    db_url: Annotated[
        str,
        typer.Option("--db-url", envvar=DB_URL_ENVVAR, help="Database URL."),
    ] = DEFAULT_DB_URL,
) -> None:
    """Print matches newest first with scores and rating changes."""
    if limit is not None and limit <= 0:
        raise typer.BadParameter("--limit must be greater than 0")

    session_factory = open_ledger(db_url)
    try:
        result = history(session_factory, organization_id=organization_id, player=player)
    except (OrganizationNotFound, PlayerNotFound) as exc:
        fail(str(exc))

    if result.player is None:
        typer.echo(f"organization_id={organization_id} matches={result.total_matches}")
    else:
        typer.echo(
            f"organization_id={organization_id} player={result.player} "
            f"matches={len(result.matches)} total_matches={result.total_matches} "
            f"wins={result.wins} losses={result.losses} win_rate={result.win_rate:.1f}%"
        )
    for match in result.matches[:limit]:
        typer.echo(_format_match(match))


if __name__ == "__main__":
    app()
