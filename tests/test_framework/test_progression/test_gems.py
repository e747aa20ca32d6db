import pytest
from framework.components.card import CardStats
from framework.progression.experience import Difficulty
from framework.progression.gems import (
    MAX_GEMS_PER_BATTLE,
    GemRewards,
    RewardCalculator,
    determine_gem_difficulty,
    fallback_rewards,
    trainer_level_multiplier,
    validate_gem_reward,
)

@pytest.fixture
def calculator():
    return RewardCalculator()

def test_experience_for_victory(calculator):
    assert calculator.compute_experience(1, Difficulty.NORMAL, True).total_experience == 97
    assert calculator.compute_experience(5, Difficulty.EXPERT, True).total_experience == 225

def test_experience_for_loss(calculator):
    result = calculator.compute_experience(1, Difficulty.EASY, False)

    assert result.victory_bonus == 0
    assert result.total_experience == 60

def test_ai_gem_reward(calculator):
    assert calculator.compute_gem_reward(1, Difficulty.NORMAL, 1) == 12
    assert calculator.compute_gem_reward(10, Difficulty.EXPERT, 5) == 64

def test_trainer_level_multiplier_is_clamped():
    assert trainer_level_multiplier(0) == 1.0
    assert trainer_level_multiplier(1) == 1.0
    assert trainer_level_multiplier(10) == 2.0
    assert trainer_level_multiplier(42) == 2.0

@pytest.mark.parametrize("opponent_gems,difficulty,expected", [
    (100, Difficulty.NORMAL, 15),
    (10, Difficulty.NORMAL, 5),
    (3, Difficulty.NORMAL, 3),
    (0, Difficulty.NORMAL, 0),
    (1000, Difficulty.EXPERT, 100),
])
def test_gem_theft(calculator, opponent_gems, difficulty, expected):
    assert calculator.compute_gem_theft(opponent_gems, 1, difficulty) == expected

def test_pvp_rewards_only_steal(calculator):
    rewards = calculator.compute_gem_rewards(True, True, 1, Difficulty.NORMAL, 100, 1)

    assert rewards == GemRewards(victory_gems=0, stolen_gems=15)
    assert rewards.total_gems == 15

def test_ai_rewards_only_pay(calculator):
    rewards = calculator.compute_gem_rewards(True, False, 1, Difficulty.NORMAL, 100, 1)
    assert rewards == GemRewards(victory_gems=12, stolen_gems=0)

def test_loss_pays_nothing(calculator):
    rewards = calculator.compute_gem_rewards(False, True, 5, Difficulty.EXPERT, 500, 5)
    assert rewards.total_gems == 0

def test_validate_gem_reward():
    assert validate_gem_reward(250) == MAX_GEMS_PER_BATTLE
    assert validate_gem_reward(-3) == 0
    assert validate_gem_reward(float("nan")) == 0
    assert validate_gem_reward(12.7) == 12

def test_gem_difficulty_weights_attack():
    player = CardStats(attack=60, defense=50, hp=80)
    assert determine_gem_difficulty(player, CardStats(attack=55, defense=60, hp=75)) == Difficulty.NORMAL
    assert determine_gem_difficulty(player, CardStats(attack=100, defense=50, hp=80)) == Difficulty.HARD

@pytest.mark.parametrize("level,expected", [(1, (5, 1)), (10, (20, 5)), (None, (5, 1)), (0, (5, 1))])
def test_fallback_rewards(level, expected):
    assert fallback_rewards(level) == expected
