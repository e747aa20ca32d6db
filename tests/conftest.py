import os
import random
import sys
import pytest

# Ensure engine modules can be imported
sys.path.append(os.getcwd())

@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from engine.core.events import EventBus
    return EventBus()

@pytest.fixture
def tasks():
    """Fresh TaskRegistry for each test."""
    from engine.core.tasks import TaskRegistry
    return TaskRegistry()

@pytest.fixture
def rng():
    """Seeded random source for deterministic tests."""
    return random.Random(1234)

@pytest.fixture
def player_card():
    """Player card from the end-to-end battle scenario."""
    from framework.components.card import BattleMove, Card, CardStats
    return Card(
        id="player-1",
        name="Sparky",
        stats=CardStats(attack=60, defense=50, speed=55, hp=80),
        moves=[
            BattleMove(name="Thunder Paw", power=50, type="electric"),
            BattleMove(name="Tackle", power=40),
        ],
    )

@pytest.fixture
def opponent_card():
    """Opponent card from the end-to-end battle scenario."""
    from framework.components.card import BattleMove, Card, CardStats
    return Card(
        id="wild-1",
        name="Mossback",
        stats=CardStats(attack=55, defense=60, speed=40, hp=75),
        moves=[BattleMove(name="Vine Whip", power=45, type="grass")],
    )

@pytest.fixture
def battle(event_bus, tasks, rng):
    """BattleSystem wired to the fresh bus and registry."""
    from framework.battle.config import BattleConfig
    from framework.battle.system import BattleSystem
    return BattleSystem(BattleConfig(), events=event_bus, tasks=tasks, rng=rng)

@pytest.fixture
def started_battle(battle, player_card, opponent_card):
    """Battle already in the BATTLE phase with the scenario cards."""
    battle.select_player_creature(player_card)
    battle.select_opponent_creature([player_card, opponent_card], player_card.id)
    battle.start_battle()
    return battle
