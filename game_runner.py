"""
Play Meridian games end to end with bots.

    python game_runner.py --players 6 --seed 7
    python game_runner.py --games 5 --ticks 40 --save

Every seat is taken by a registered bot (RandomAgent by default). The
first living player to find the hull complete triggers the launch; the
game ends when the ship leaves or the tick limit is reached.
"""

from __future__ import annotations

import argparse
from typing import Any, Dict, List, Optional

from agents import AgentSpec, BaseAgent, available_agents, create_agent_from_spec
from engine.core.errors import LaunchError
from infra.logger import configure_logging, get_logger
from infra.paths import LOG_DIR
from infra.settings import get_settings
from runtime import GameSession, SnapshotStore

log = get_logger(__name__)

BOT_NAMES = [
    "Vega", "Orin", "Sable", "Juno", "Kestrel", "Mira", "Talon", "Rook", "Ember", "Lyra",
    "Cobalt", "Wren", "Flint", "Nova", "Quill", "Ash", "Dune", "Sol", "Pike", "Rhea",
]


def seat_bots(session: GameSession, count: int, seed: Optional[int] = None, bot: str = "random") -> List[BaseAgent]:
    """Join ``count`` bots to the lobby and build one ``bot`` agent per seat."""
    agents: List[BaseAgent] = []
    for index in range(count):
        player = session.join(BOT_NAMES[index] if index < len(BOT_NAMES) else f"Bot{index}")
        spec = AgentSpec(
            type=bot,
            player_id=player.id,
            name=player.name,
            init_params={"seed": None if seed is None else seed + index},
        )
        agents.append(create_agent_from_spec(spec))
    return agents


def _try_launch(session: GameSession) -> None:
    world = session.world
    if world.launch_in_progress or world.parts_installed < world.parts_required:
        return
    living = world.living_players()
    if not living:
        return
    try:
        session.trigger_launch(living[0].id)
    except LaunchError as exc:
        log.debug("Launch not triggered: %s", exc)


def run_single_game(
        players: int = 6,
        seed: Optional[int] = None,
        max_ticks: Optional[int] = None,
        store: Optional[SnapshotStore] = None,
        verbose: bool = False,
        bot: str = "random",
) -> Dict[str, Any]:
    """
    Play one game with bots and return a summary.

    Args:
        players: Number of bot players (3-20)
        seed: Seed for both the world and the bots
        max_ticks: Tick limit (defaults to the rules' total_ticks)
        store: Snapshot sink attached as a commit hook
        verbose: Print every report narrative
        bot: Registered agent kind seated in every slot
    """
    session = GameSession.from_settings(name="Bot Match", seed=seed)
    if store is not None:
        session.add_commit_hook(store)

    agents = seat_bots(session, players, seed, bot)
    session.start()
    limit = max_ticks or session.world.rules.total_ticks

    while session.world.is_active and session.world.tick_number <= limit:
        for agent in agents:
            session.submit_intents(agent.get_intents(session.world))
        _try_launch(session)
        result = session.resolve_tick()

        if verbose:
            for report in result.reports:
                player = result.world.get_player(report.player_id)
                print(f"[tick {report.tick_number}] {player.name} ({report.report_type}): {report.narrative}")

    world = session.world
    summary = {
        "code": world.code,
        "status": world.status.value,
        "ticks": world.tick_number - 1,
        "hostility": round(world.hostility, 3),
        "parts": f"{world.parts_installed}/{world.parts_required}",
        "winners": [p.name for p in world.players if p.is_winner],
        "alive": len(world.living_players()),
    }
    log.info("Game %s done: %s", world.code, summary)
    return summary


def run_multiple_games(games: int, **kwargs: Any) -> List[Dict[str, Any]]:
    seed = kwargs.pop("seed", None)
    return [
        run_single_game(seed=None if seed is None else seed + 1000 * index, **kwargs)
        for index in range(games)
    ]


def main() -> None:
    parser = argparse.ArgumentParser(description="Meridian bot simulation")
    parser.add_argument("--players", type=int, default=6, help="Bot players per game (3-20)")
    parser.add_argument("--games", type=int, default=1, help="Number of games to play")
    parser.add_argument("--seed", type=int, default=None, help="Base random seed")
    parser.add_argument("--ticks", type=int, default=None, help="Tick limit per game")
    parser.add_argument("--bot", choices=available_agents(), default="random", help="Agent kind for every seat")
    parser.add_argument("--save", action="store_true", help="Write JSON snapshots under storage/games")
    parser.add_argument("--verbose", action="store_true", help="Print every tick report")
    parser.add_argument("--logfire", action="store_true", help="Send traces to logfire (needs LOGFIRE_TOKEN)")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level, json=settings.log_json, logfile=LOG_DIR / "game_runner.log")
    if args.logfire:
        from infra.observability import configure_logfire
        configure_logfire("meridian-game-runner")

    store = SnapshotStore() if args.save else None
    summaries = run_multiple_games(
        args.games,
        players=args.players,
        seed=args.seed,
        max_ticks=args.ticks,
        store=store,
        verbose=args.verbose,
        bot=args.bot,
    )
    for summary in summaries:
        print(summary)


if __name__ == "__main__":
    main()
