"""Typed domain exceptions for scoresheet rule and edit violations.

The hand resolver itself never raises: incomplete or inconsistent input
resolves to zero ranks/scores. These exceptions are for callers that edit
hands or accept rule configurations and want to reject bad input early.
"""


class ScoringRuleError(Exception):
    """Base exception for scoresheet rule violations."""


class UnsupportedRulesError(ScoringRuleError):
    """Rule configuration contains values the engine cannot score with."""


class InvalidHandEditError(ScoringRuleError):
    """Hand edit targets an inactive slot or an impossible rank.

    Attributes:
        slot: The slot the edit was aimed at.
        reason: Human-readable explanation of why the edit was rejected.

    """

    def __init__(self, *, slot: str, reason: str) -> None:
        self.slot = slot
        self.reason = reason
        super().__init__(f"invalid edit for slot {slot}: {reason}")
