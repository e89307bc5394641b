from datetime import datetime, timedelta, timezone

from agents import RandomAgent
from engine.tick import TickResult
from runtime import GameRunner, GameSession

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _session(seed, start_at=NOW):
    session = GameSession(seed=seed, tick_interval=timedelta(hours=1))
    for name in ("Ada", "Bo", "Cy"):
        session.join(name, player_id=name.lower())
    session.start(now=start_at)
    return session


def test_only_due_games_resolve():
    early, late = _session(1), _session(2, start_at=NOW + timedelta(hours=5))
    runner = GameRunner([early, late])

    results = runner.run_due(NOW + timedelta(hours=1))

    assert list(results) == [early.game_id]
    assert isinstance(results[early.game_id], TickResult)
    assert early.world.tick_number == 2
    assert late.world.tick_number == 1
    assert early.next_tick_at == NOW + timedelta(hours=2)


def test_failing_game_does_not_block_others():
    healthy, broken = _session(1), _session(2)
    before = broken.world

    async def crash(*args, **kwargs):
        raise RuntimeError("narrator exploded")

    broken.resolver.resolve_async = crash
    runner = GameRunner([healthy, broken])
    results = runner.run_due(NOW + timedelta(hours=1))

    assert isinstance(results[healthy.game_id], TickResult)
    assert isinstance(results[broken.game_id], RuntimeError)
    assert broken.world is before
    assert healthy.world.tick_number == 2


def test_agents_queue_before_resolution():
    session = _session(3)
    agents = [RandomAgent(pid, seed=i) for i, pid in enumerate(("ada", "bo", "cy"))]
    runner = GameRunner()
    runner.add(session, agents)

    result = runner.run_due(NOW + timedelta(hours=1))[session.game_id]
    assert result.resolved_actions
    assert {a.player_id for a in result.resolved_actions} <= {"ada", "bo", "cy"}


def test_registry_lookups():
    session = _session(4)
    runner = GameRunner()
    runner.add(session)

    assert runner.get(session.game_id) is session
    assert runner.find_by_code(session.code.lower()) is session
    assert runner.sessions == [session]
    assert runner.due(NOW) == []
    assert runner.remove(session.game_id) is session
    assert runner.get(session.game_id) is None
    assert runner.run_due(NOW + timedelta(hours=1)) == {}
