import json
import pytest
from framework.components.card import Card, CardStats
from framework.progression.experience import StatIncreases
from framework.save.progress import (
    STARTING_GEMS,
    NetworkError,
    PersistenceError,
    ProgressStore,
    apply_progression,
    is_network_error,
)

@pytest.fixture
def store(tmp_path):
    return ProgressStore(tmp_path / "progress")

def gains(hp=4, attack=2, defense=3):
    return StatIncreases(hp=hp, attack=attack, defense=defense, previous_level=1, new_level=2)

def test_apply_progression_adds_xp_and_stats(player_card):
    updated = apply_progression(player_card, 40, gains())

    assert updated.xp == 40
    assert updated.stats.hp == 84
    assert updated.stats.attack == 62
    assert updated.stats.defense == 53
    assert updated.stats.speed == player_card.stats.speed
    # Source card untouched
    assert player_card.xp == 0

def test_apply_progression_without_stats():
    card = Card(id="x", name="Statless")
    updated = apply_progression(card, 15, gains())

    assert updated.xp == 15
    assert updated.stats is None

def test_new_wallet_starts_with_starting_gems(store):
    assert store.get_currency("ash") == STARTING_GEMS

def test_add_currency(store):
    assert store.add_currency("ash", 12, 0) == STARTING_GEMS + 12
    assert store.add_currency("ash", 0, 5) == STARTING_GEMS + 17
    assert store.get_currency("ash") == STARTING_GEMS + 17

def test_negative_amounts_are_ignored(store):
    assert store.add_currency("ash", -10, -3) == STARTING_GEMS

def test_save_progression_round_trip(store, player_card):
    saved = store.save_progression(player_card, 97, None)

    assert saved.xp == 97
    assert store.load_card(player_card.id) == saved

def test_load_missing_card(store):
    assert store.load_card("nobody") is None

def test_checksum_mismatch_is_reported(store, tmp_path):
    store.add_currency("ash", 10, 0)
    wallet = tmp_path / "progress" / "wallets" / "ash.json"

    data = json.loads(wallet.read_text())
    data["total_gems"] = 99999
    wallet.write_text(json.dumps(data))

    with pytest.raises(PersistenceError):
        store.get_currency("ash")

def test_corrupted_file_is_reported(store, tmp_path):
    (tmp_path / "progress" / "wallets" / "ash.json").write_text("{broken")

    with pytest.raises(PersistenceError):
        store.get_currency("ash")

def test_unsafe_ids_stay_inside_store(store, tmp_path):
    store.add_currency("../escape", 1, 0)

    assert not (tmp_path / "escape.json").exists()
    assert store.get_currency("../escape") == STARTING_GEMS + 1

@pytest.mark.parametrize("error,expected", [
    (NetworkError("offline"), True),
    (ConnectionError("reset"), True),
    (TimeoutError(), True),
    (RuntimeError("Failed to fetch"), True),
    (RuntimeError("request timeout"), True),
    (PersistenceError("disk full"), False),
    (ValueError("bad data"), False),
])
def test_is_network_error(error, expected):
    assert is_network_error(error) is expected
