import random
import pytest
from unittest.mock import MagicMock
from framework.components.card import Card, CardStats
from framework.battle.actor import create_battle_creature
from framework.battle.rewards import (
    NETWORK_FAILURE_MESSAGE,
    SAVE_FAILURE_MESSAGE,
    RewardOrchestrator,
)
from framework.battle.state import PostBattleRewards
from framework.progression.experience import ProgressionCalculator, StatIncreases
from framework.save.progress import NetworkError, PersistenceError, apply_progression

@pytest.fixture
def creatures(player_card, opponent_card):
    return create_battle_creature(player_card), create_battle_creature(opponent_card)

def test_compute_scenario_rewards(creatures):
    rewards = RewardOrchestrator().compute(*creatures)

    # Even match: 97 xp at level 1, 12 gems for an AI win
    assert rewards.experience_gained == 97
    assert rewards.gems_earned == 12
    assert rewards.gems_stolen == 0
    assert not rewards.level_up
    assert rewards.stat_increases is None

def test_compute_pvp_steals(creatures):
    rewards = RewardOrchestrator().compute(*creatures, is_pvp=True, opponent_gems=100)

    assert rewards.gems_earned == 0
    assert rewards.gems_stolen == 15

def test_compute_level_up(player_card, opponent_card):
    close_to_level = player_card.model_copy(update={"xp": 90})
    orchestrator = RewardOrchestrator(progression=ProgressionCalculator(random.Random(5)))

    rewards = orchestrator.compute(
        create_battle_creature(close_to_level), create_battle_creature(opponent_card),
    )

    assert rewards.level_up
    assert rewards.stat_increases.previous_level == 1
    assert rewards.stat_increases.new_level == 2

def test_calculator_failure_uses_fallback(creatures):
    calculator = MagicMock()
    calculator.compute_experience.side_effect = RuntimeError("calculator down")

    rewards = RewardOrchestrator(calculator=calculator).compute(*creatures)

    assert rewards == PostBattleRewards(
        experience_gained=5, gems_earned=1, gems_stolen=0, level_up=False,
    )

def test_grant_applies_rewards_to_card(creatures):
    player, opponent = creatures
    grant = RewardOrchestrator().grant(player, opponent)

    assert grant.card.xp == player.card.xp + 97
    assert grant.messages == ("Gained 97 experience points!", "Earned 12 gems!")

def test_grant_reports_level_up(player_card, opponent_card):
    card = player_card.model_copy(update={"xp": 90})
    grant = RewardOrchestrator(progression=ProgressionCalculator(random.Random(5))).grant(
        create_battle_creature(card), create_battle_creature(opponent_card),
    )

    assert grant.messages[-1] == "Sparky leveled up to level 2!"
    assert grant.card.stats.attack > card.stats.attack
    assert grant.card.stats.speed == card.stats.speed

def test_persist_without_gateway_is_noop(player_card):
    result = RewardOrchestrator().persist(player_card, PostBattleRewards(10, 2, 0, False))

    assert result.messages == ()
    assert not result.failed

def test_persist_success(player_card):
    gateway = MagicMock()
    gateway.save_progression.side_effect = apply_progression
    gateway.add_currency.return_value = 62
    rewards = PostBattleRewards(
        97, 12, 0, True,
        StatIncreases(hp=4, attack=2, defense=2, previous_level=1, new_level=2),
    )

    result = RewardOrchestrator(persistence=gateway).persist(player_card, rewards, "ash")

    gateway.save_progression.assert_called_once_with(player_card, 97, rewards.stat_increases)
    gateway.add_currency.assert_called_once_with("ash", 12, 0)
    assert result.card.xp == 97
    assert result.total_gems == 62
    assert result.messages == (
        "Sparky gained 97 experience!",
        "Sparky leveled up! Stats increased!",
        "Earned 12 gems from victory!",
        "Total gems: 62",
    )

def test_persist_reports_stolen_gems(player_card):
    gateway = MagicMock()
    gateway.add_currency.return_value = 65

    result = RewardOrchestrator(persistence=gateway).persist(
        player_card, PostBattleRewards(0, 0, 15, False),
    )

    gateway.save_progression.assert_not_called()
    assert result.messages == ("Stole 15 gems from opponent!", "Total gems: 65")

@pytest.mark.parametrize("error,message", [
    (NetworkError("offline"), NETWORK_FAILURE_MESSAGE),
    (ConnectionError("reset by peer"), NETWORK_FAILURE_MESSAGE),
    (RuntimeError("fetch failed"), NETWORK_FAILURE_MESSAGE),
    (PersistenceError("disk full"), SAVE_FAILURE_MESSAGE),
])
def test_persist_failure_is_classified(player_card, error, message):
    gateway = MagicMock()
    gateway.save_progression.side_effect = error
    gateway.add_currency.return_value = 62

    result = RewardOrchestrator(persistence=gateway).persist(
        player_card, PostBattleRewards(97, 12, 0, False),
    )

    assert result.failed
    assert result.card is None
    assert result.messages[-1] == message
    # Currency still saved
    assert "Total gems: 62" in result.messages
