"""Tests for the built-in play calls."""

import pytest

from scrimmage.core.entities import Role, WR_ROLES
from scrimmage.plays.playbook import PLAYBOOK, PlayType, get_play, list_plays


# =============================================================================
# Lookup
# =============================================================================

class TestLookup:
    """Tests for get_play and list_plays."""

    @pytest.mark.parametrize("name", ["four_verts", "Four Verts", " four-verts "])
    def test_key_or_display_name(self, name):
        assert get_play(name) is PLAYBOOK["four_verts"]

    def test_unknown_play(self):
        assert get_play("hail_mary") is None

    def test_list_plays(self):
        assert list_plays() == list(PLAYBOOK)
        assert len(list_plays()) == 6


# =============================================================================
# Call shape
# =============================================================================

class TestCalls:
    """Every call carries what its type needs."""

    @pytest.mark.parametrize("key", [k for k, c in PLAYBOOK.items() if c.is_run])
    def test_run_calls_have_a_path(self, key):
        call = PLAYBOOK[key]
        assert call.type == PlayType.RUN
        assert call.rb_path
        assert call.primary is None

    @pytest.mark.parametrize("key", [k for k, c in PLAYBOOK.items() if c.is_pass])
    def test_pass_calls_have_routes_and_a_read(self, key):
        call = PLAYBOOK[key]
        assert call.primary in (*WR_ROLES, Role.TE)
        assert set(call.wr_routes) == set(WR_ROLES)
        assert call.te_route
        assert call.rb_checkdown
        assert call.qb_drop

    def test_quick_game_drops_short(self):
        quick = PLAYBOOK["quick_slants"]
        assert quick.quick_game
        assert quick.qb_drop < PLAYBOOK["four_verts"].qb_drop

    def test_play_action(self):
        assert PLAYBOOK["pa_crossers"].play_action
        assert PLAYBOOK["pa_crossers"].primary == Role.WR2
