"""
Progression module - experience, levels and battle rewards.

Provides:
- Level curve and level-up resolution
- Stat growth on level-up
- Experience and gem payouts for battles
"""

from framework.progression.experience import (
    MAX_LEVEL,
    Difficulty,
    LevelProgression,
    ProgressionCalculator,
    StatIncreases,
    determine_difficulty,
    experience_for_level,
    experience_in_current_level,
    level_from_experience,
    total_experience_for_level,
)
from framework.progression.gems import (
    ExperienceCalculation,
    GemRewards,
    RewardCalculator,
    determine_gem_difficulty,
    fallback_rewards,
    trainer_level_multiplier,
    validate_gem_reward,
)

__all__ = [
    # Experience
    "MAX_LEVEL",
    "Difficulty",
    "LevelProgression",
    "ProgressionCalculator",
    "StatIncreases",
    "determine_difficulty",
    "experience_for_level",
    "experience_in_current_level",
    "level_from_experience",
    "total_experience_for_level",
    # Rewards
    "ExperienceCalculation",
    "GemRewards",
    "RewardCalculator",
    "determine_gem_difficulty",
    "fallback_rewards",
    "trainer_level_multiplier",
    "validate_gem_reward",
]
