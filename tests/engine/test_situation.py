"""
Tokyo Dice - Situation Analyzer Tests

Tests for threat scoring, opportunity detection and game phase.
"""

import pytest
from tokyo_dice.config.ai_config import OpportunitySettings, ThreatThresholds
from tokyo_dice.engine.base import GamePhase, GameStateSnapshot, OpportunityType
from tokyo_dice.engine.situation import SituationAnalyzer


@pytest.fixture
def analyzer():
    return SituationAnalyzer()


class TestThreats:
    """Tests for opponent threat scoring."""

    def test_healthy_opponents_are_no_threat(self, analyzer, make_player, make_game):
        player = make_player()
        situation = analyzer.analyze(player, make_game(player))
        assert situation.threats == ()
        assert situation.has_threats is False

    def test_all_factors(self, analyzer, make_player):
        threat = analyzer.score_threat(
            make_player("p2", victory_points=16, energy=9, is_in_tokyo=True)
        )
        assert threat.level == 6
        assert threat.reasons == ("16 victory points", "occupying Tokyo", "9 energy")

    def test_thresholds_are_inclusive(self, analyzer, make_player):
        threat = analyzer.score_threat(make_player("p2", victory_points=15, energy=8))
        assert threat.level == 4

    def test_sorted_highest_first(self, analyzer, make_player, make_game):
        player = make_player()
        energy = make_player("p2", energy=10)
        tokyo = make_player("p3", is_in_tokyo=True)
        points = make_player("p4", victory_points=15)
        situation = analyzer.analyze(player, make_game(player, energy, tokyo, points))
        assert [t.player.id for t in situation.threats] == ["p4", "p3", "p2"]
        assert [t.level for t in situation.threats] == [3, 2, 1]

    def test_ties_keep_turn_order(self, analyzer, make_player, make_game):
        player = make_player()
        first = make_player("p2", energy=8)
        second = make_player("p3", energy=9)
        situation = analyzer.analyze(player, make_game(player, first, second))
        assert [t.player.id for t in situation.threats] == ["p2", "p3"]

    def test_self_and_eliminated_excluded(self, analyzer, make_player, make_game):
        player = make_player(victory_points=19, energy=12)
        dead = make_player("p2", health=0, victory_points=19, is_eliminated=True)
        situation = analyzer.analyze(player, make_game(player, dead, make_player("p3")))
        assert situation.threats == ()

    def test_tokyo_threat_disabled(self, make_player):
        analyzer = SituationAnalyzer(ThreatThresholds(tokyoThreat=False))
        assert analyzer.score_threat(make_player("p2", is_in_tokyo=True)).level == 0


class TestOpportunities:
    """Tests for opportunity detection."""

    def test_enter_tokyo_when_empty_and_healthy(self, analyzer, make_player, make_game):
        player = make_player(health=6)
        situation = analyzer.analyze(player, make_game(player))
        opportunity = situation.opportunity(OpportunityType.ENTER_TOKYO)
        assert opportunity is not None
        assert opportunity.value == 2

    def test_no_enter_tokyo_at_entry_health(self, analyzer, make_player, make_game):
        player = make_player(health=5)
        situation = analyzer.analyze(player, make_game(player))
        assert situation.has_opportunity(OpportunityType.ENTER_TOKYO) is False

    def test_no_enter_tokyo_when_occupied(self, analyzer, make_player, make_game):
        player = make_player()
        occupant = make_player("p2", is_in_tokyo=True)
        situation = analyzer.analyze(player, make_game(player, occupant, make_player("p3")))
        assert situation.has_opportunity(OpportunityType.ENTER_TOKYO) is False

    def test_own_tokyo_counts_as_occupied(self, analyzer, make_player, make_game):
        player = make_player(is_in_tokyo=True)
        situation = analyzer.analyze(player, make_game(player))
        assert situation.has_opportunity(OpportunityType.ENTER_TOKYO) is False

    def test_eliminate(self, analyzer, make_player, make_game):
        player = make_player()
        weak = make_player("p2", health=3)
        weaker = make_player("p3", health=1)
        situation = analyzer.analyze(player, make_game(player, weak, weaker, make_player("p4")))
        opportunity = situation.opportunity(OpportunityType.ELIMINATE)
        assert opportunity.value == 3
        assert opportunity.description == "2 vulnerable opponents in reach"

    def test_eliminate_single(self, analyzer, make_player, make_game):
        player = make_player()
        weak = make_player("p2", health=2)
        situation = analyzer.analyze(player, make_game(player, weak, make_player("p3")))
        assert situation.opportunity(OpportunityType.ELIMINATE).description == (
            "1 vulnerable opponent in reach"
        )

    def test_custom_values(self, make_player, make_game):
        analyzer = SituationAnalyzer(
            opportunities=OpportunitySettings(tokyoEntryHealth=8, enterTokyoValue=4)
        )
        player = make_player(health=9)
        situation = analyzer.analyze(player, make_game(player))
        assert situation.opportunity(OpportunityType.ENTER_TOKYO).value == 4


class TestDegenerateStates:
    """Tests for states with no live opponents."""

    def test_acting_player_only(self, analyzer, make_player):
        player = make_player()
        situation = analyzer.analyze(player, GameStateSnapshot(players=(player,)))
        assert situation.threats == ()
        assert situation.has_opportunity(OpportunityType.ELIMINATE) is False
        assert situation.game_phase is GamePhase.END

    def test_all_opponents_eliminated(self, analyzer, make_player, make_game):
        player = make_player()
        game = make_game(
            player,
            make_player("p2", health=0, victory_points=16, is_eliminated=True),
            make_player("p3", health=0, energy=12, is_eliminated=True),
        )
        situation = analyzer.analyze(player, game)
        assert situation.threats == ()
        assert situation.has_opportunity(OpportunityType.ELIMINATE) is False
        assert situation.game_phase is GamePhase.END

    def test_empty_state(self, analyzer, make_player):
        situation = analyzer.analyze(make_player(), GameStateSnapshot())
        assert situation.threats == ()
        assert situation.has_opportunity(OpportunityType.ELIMINATE) is False
        assert situation.game_phase is GamePhase.END


class TestGamePhase:
    """Tests for game phase classification."""

    @pytest.mark.parametrize("victory_points,expected", [
        (0, GamePhase.EARLY),
        (9, GamePhase.EARLY),
        (10, GamePhase.MID),
        (14, GamePhase.MID),
        (15, GamePhase.END),
    ])
    def test_by_victory_points(self, make_player, victory_points, expected):
        state = GameStateSnapshot(players=(
            make_player("a", victory_points=victory_points),
            make_player("b"),
            make_player("c"),
        ))
        assert SituationAnalyzer.game_phase(state) is expected

    def test_two_alive_is_endgame(self, make_player):
        state = GameStateSnapshot(players=(
            make_player("a"),
            make_player("b"),
            make_player("c", health=0, is_eliminated=True),
        ))
        assert SituationAnalyzer.game_phase(state) is GamePhase.END
