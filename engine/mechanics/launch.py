"""
Launch / endgame.

Survivors repair the launch module at the hull one ship part at a time.
Once enough parts are installed anyone may trigger the launch; a short
countdown follows, and when it ends the living players at the hull
compete for too few seats, settled by ejection votes when needed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Sequence

from ..core.catalog import SHIP_PARTS
from ..core.errors import (
    InsufficientParts,
    LaunchError,
    LaunchInProgress,
    NoShipParts,
    NotAtHull,
    VoteRejected,
)
from ..core.types import GameStatus
from ..world.world import LaunchVote
from infra.logger import get_logger

if TYPE_CHECKING:
    from ..world.player import Player
    from ..world.world import WorldState

log = get_logger(__name__)


@dataclass
class VoteResult:
    ejected: List[str]
    tallies: Dict[str, int]


@dataclass
class CountdownResult:
    """
    State of the launch after one countdown step.

    ``winners``/``losers``/``ejected`` are only filled once ``launched``.
    """
    countdown: int
    launched: bool
    winners: List[str] = field(default_factory=list)
    losers: List[str] = field(default_factory=list)
    ejected: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "countdown": self.countdown,
            "launched": self.launched,
            "winners": list(self.winners),
            "losers": list(self.losers),
            "ejected": list(self.ejected),
        }


def install_part(world: WorldState, player: Player) -> int:
    """
    Install one ship part from the player's inventory.

    Returns:
        The new parts_installed count

    Raises:
        NotAtHull: Player is not standing on the hull hex
        NoShipParts: Player carries no ship parts
        LaunchError: Every required part is already installed
    """
    if player.position != world.hull:
        raise NotAtHull("Must be at the hull hex to install parts")
    if player.quantity(SHIP_PARTS) <= 0:
        raise NoShipParts("No ship_parts in inventory")
    if world.parts_installed >= world.parts_required:
        raise LaunchError("All required ship parts are already installed")

    player.remove_item(SHIP_PARTS, 1)
    world.parts_installed += 1
    log.info("Ship part installed by %s (%d/%d)", player.id, world.parts_installed, world.parts_required)
    return world.parts_installed


def trigger_launch(world: WorldState) -> int:
    """
    Start the launch countdown.

    Returns:
        The countdown length in ticks

    Raises:
        InsufficientParts: Not enough parts installed
        LaunchInProgress: A countdown is already running
    """
    if world.parts_installed < world.parts_required:
        raise InsufficientParts(
            f"Not enough parts installed ({world.parts_installed}/{world.parts_required})"
        )
    if world.launch_in_progress:
        raise LaunchInProgress(f"Launch already in progress ({world.launch_countdown} ticks left)")

    world.launch_countdown = world.rules.launch_countdown_ticks
    world.votes = []
    return world.launch_countdown


def _at_hull(world: WorldState, player: Player | None) -> bool:
    return player is not None and player.is_alive and player.position == world.hull


def cast_vote(world: WorldState, voter_id: str, target_id: str) -> LaunchVote:
    """
    Record an ejection ballot. A voter's latest ballot replaces any earlier one.

    Raises:
        VoteRejected: No countdown, self-vote, or voter/target not alive at the hull
    """
    if not world.launch_in_progress:
        raise VoteRejected("Voting is only open during the launch countdown")
    if voter_id == target_id:
        raise VoteRejected("Cannot vote to eject yourself")
    if not _at_hull(world, world.get_player(voter_id)):
        raise VoteRejected("Only living players at the hull may vote")
    if not _at_hull(world, world.get_player(target_id)):
        raise VoteRejected("Target must be alive at the hull")

    ballot = LaunchVote(voter_id=voter_id, target_id=target_id, tick_number=world.tick_number)
    world.votes = [v for v in world.votes if v.voter_id != voter_id]
    world.votes.append(ballot)
    return ballot


def resolve_votes(votes: Sequence[LaunchVote], seats: int) -> VoteResult:
    """
    Tally ballots and pick who gets ejected.

    Targets are ranked by votes received (ties keep first-tallied order);
    the top (distinct voters - seats) are ejected.
    """
    tallies: Dict[str, int] = {}
    for vote in votes:
        tallies[vote.target_id] = tallies.get(vote.target_id, 0) + 1

    ranked = sorted(tallies.items(), key=lambda item: item[1], reverse=True)
    voter_count = len({vote.voter_id for vote in votes})
    to_eject = max(0, voter_count - seats)

    return VoteResult(ejected=[target for target, _ in ranked[:to_eject]], tallies=tallies)


def advance_countdown(world: WorldState) -> CountdownResult:
    """
    Step the countdown by one tick and launch when it reaches zero.

    On launch every player gets is_winner set and the game finishes.
    Dead players always lose.
    """
    if world.launch_countdown is None:
        raise LaunchError("No launch countdown is running")

    world.launch_countdown = max(0, world.launch_countdown - 1)
    if world.launch_countdown > 0:
        return CountdownResult(countdown=world.launch_countdown, launched=False)

    pool = [p for p in world.players if _at_hull(world, p)]
    ejected: List[str] = []
    if len(pool) <= world.seats:
        boarded = pool
    else:
        pool_ids = {p.id for p in pool}
        ballots = [v for v in world.votes if v.voter_id in pool_ids and v.target_id in pool_ids]
        ejected = resolve_votes(ballots, world.seats).ejected
        boarded = [p for p in pool if p.id not in ejected][: world.seats]

    winner_ids = {p.id for p in boarded}
    for player in world.players:
        player.is_winner = player.id in winner_ids

    world.status = GameStatus.FINISHED
    winners = [p.id for p in world.players if p.is_winner]
    losers = [p.id for p in world.players if not p.is_winner]
    log.info("Launch! winners=%s ejected=%s", winners, ejected)
    return CountdownResult(countdown=0, launched=True, winners=winners, losers=losers, ejected=ejected)
