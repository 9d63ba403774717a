"""
Tokyo Dice - Situation Analyzer

Derives threats, opportunities and the game phase from the visible state of
every player. Nothing is cached: opponents' stats change between the acting
player's rolls, so the analysis is rebuilt on every call.
"""

from tokyo_dice.config.ai_config import OpportunitySettings, ThreatThresholds
from tokyo_dice.engine.base import (
    GamePhase,
    GameStateSnapshot,
    Opportunity,
    OpportunityType,
    PlayerSnapshot,
    Situation,
    Threat,
)


class SituationAnalyzer:
    """
    Stateless analysis of the shared game state.

    Thresholds are fixed at construction; analyze() only reads its inputs.
    """

    # Threat weights
    VICTORY_POINT_WEIGHT = 3
    TOKYO_WEIGHT = 2
    ENERGY_WEIGHT = 1

    # Game phase boundaries
    ENDGAME_VICTORY_POINTS = 15
    MIDGAME_VICTORY_POINTS = 10
    ENDGAME_MAX_ALIVE = 2

    def __init__(
        self,
        thresholds: ThreatThresholds | None = None,
        opportunities: OpportunitySettings | None = None
    ) -> None:
        self.thresholds = thresholds or ThreatThresholds()
        self.opportunity_settings = opportunities or OpportunitySettings()

    def analyze(self, player: PlayerSnapshot, game_state: GameStateSnapshot) -> Situation:
        """
        Analyze the state from ``player``'s point of view.

        Args:
            player: The acting player
            game_state: Every player, in turn order

        Returns:
            Situation with sorted threats, opportunities and the game phase
        """
        opponents = game_state.opponents_of(player)
        return Situation(
            threats=self.find_threats(opponents),
            opportunities=self.find_opportunities(player, game_state, opponents),
            game_phase=self.game_phase(game_state),
        )

    def score_threat(self, opponent: PlayerSnapshot) -> Threat:
        """Score one opponent; the reasons follow the scoring order."""
        level = 0
        reasons: list[str] = []

        if opponent.victory_points >= self.thresholds.victory_point_threat:
            level += self.VICTORY_POINT_WEIGHT
            reasons.append(f"{opponent.victory_points} victory points")

        if self.thresholds.tokyo_threat and opponent.is_in_tokyo:
            level += self.TOKYO_WEIGHT
            reasons.append("occupying Tokyo")

        if opponent.energy >= self.thresholds.energy_threat:
            level += self.ENERGY_WEIGHT
            reasons.append(f"{opponent.energy} energy")

        return Threat(player=opponent, level=level, reasons=tuple(reasons))

    def find_threats(self, opponents: tuple[PlayerSnapshot, ...]) -> tuple[Threat, ...]:
        """Threats with a positive level, highest first (stable on ties)."""
        threats = [self.score_threat(opponent) for opponent in opponents]
        threats = [threat for threat in threats if threat.level > 0]
        threats.sort(key=lambda threat: threat.level, reverse=True)
        return tuple(threats)

    def find_opportunities(
        self,
        player: PlayerSnapshot,
        game_state: GameStateSnapshot,
        opponents: tuple[PlayerSnapshot, ...]
    ) -> tuple[Opportunity, ...]:
        """Detect the enterTokyo and eliminate opportunities."""
        settings = self.opportunity_settings
        opportunities: list[Opportunity] = []

        if not game_state.tokyo_occupied and player.health > settings.tokyo_entry_health:
            opportunities.append(Opportunity(
                type=OpportunityType.ENTER_TOKYO,
                value=settings.enter_tokyo_value,
                description="Tokyo is empty and health allows entering",
            ))

        vulnerable = [
            opponent for opponent in opponents
            if opponent.health <= self.thresholds.health_threat
        ]
        if vulnerable:
            count = len(vulnerable)
            opportunities.append(Opportunity(
                type=OpportunityType.ELIMINATE,
                value=settings.eliminate_value,
                description=f"{count} vulnerable opponent{'s' if count > 1 else ''} in reach",
            ))

        return tuple(opportunities)

    @classmethod
    def game_phase(cls, game_state: GameStateSnapshot) -> GamePhase:
        """Classify the game as early, mid or end game."""
        max_vp = game_state.max_victory_points
        if max_vp >= cls.ENDGAME_VICTORY_POINTS or game_state.alive_count <= cls.ENDGAME_MAX_ALIVE:
            return GamePhase.END
        if max_vp >= cls.MIDGAME_VICTORY_POINTS:
            return GamePhase.MID
        return GamePhase.EARLY
