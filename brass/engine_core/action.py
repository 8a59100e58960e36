"""
Action System - Actions, payloads, and results.

Actions represent the seven player moves:
1. Build, Network, Sell, Develop (board actions)
2. Loan, Scout (hand/economy actions)
3. Pass

Every action names the acting player and the card played for it.
Payloads are one dataclass per kind; the orchestrator dispatches on
ActionType and rejects anything outside the closed set.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from .enums import IndustryType


class ActionType(Enum):
    """Types of player actions."""
    BUILD = "build"
    NETWORK = "network"
    SELL = "sell"
    DEVELOP = "develop"
    LOAN = "loan"
    SCOUT = "scout"
    PASS = "pass"


class StateChangeType(Enum):
    MONEY = "money"
    INCOME = "income"
    VP = "vp"
    TILE_PLACED = "tile_placed"
    TILE_FLIPPED = "tile_flipped"
    TILE_REMOVED = "tile_removed"
    LINK_PLACED = "link_placed"
    CARD_DRAWN = "card_drawn"
    CARD_DISCARDED = "card_discarded"
    RESOURCE_CONSUMED = "resource_consumed"
    RESOURCE_ADDED = "resource_added"
    MARKET_CHANGED = "market_changed"


# Error codes carried on validations and results
INVALID_ACTION = "INVALID_ACTION"
NOT_YOUR_TURN = "NOT_YOUR_TURN"
GAME_NOT_ACTIVE = "GAME_NOT_ACTIVE"
UNKNOWN_ACTION = "UNKNOWN_ACTION"
HANDLER_ERROR = "HANDLER_ERROR"


# =============================================================================
# Payloads
# =============================================================================

@dataclass(frozen=True)
class BuildPayload:
    location: str
    industry_type: IndustryType


@dataclass(frozen=True)
class LinkRequest:
    from_location: str
    to_location: str


@dataclass(frozen=True)
class NetworkPayload:
    links: tuple[LinkRequest, ...]


@dataclass(frozen=True)
class Sale:
    """
    One tile sold to one merchant.

    `beer_sources` optionally nominates where the beer comes from, as
    source keys ("tile:<id>" or "merchant:<id>"); when omitted the
    engine picks by priority.
    """
    tile_id: str
    merchant_id: str
    beer_sources: tuple[str, ...] | None = None


@dataclass(frozen=True)
class SellPayload:
    sales: tuple[Sale, ...]


@dataclass(frozen=True)
class DevelopPayload:
    tile_ids: tuple[str, ...]


@dataclass(frozen=True)
class ScoutPayload:
    additional_card_ids: tuple[str, ...]


@dataclass(frozen=True)
class EmptyPayload:
    """Loan and Pass carry nothing beyond the card."""


ActionPayload = Union[
    BuildPayload, NetworkPayload, SellPayload, DevelopPayload, ScoutPayload, EmptyPayload,
]


@dataclass
class Action:
    """
    A complete action submitted by a player.

    Actions are:
    - Validated against the current state
    - Executed atomically by the engine
    """
    action_type: ActionType
    player_id: str
    card_id: str
    payload: ActionPayload = field(default_factory=EmptyPayload)
    action_id: str | None = None

    @classmethod
    def build(cls, player_id: str, card_id: str, location: str,
              industry_type: IndustryType) -> Action:
        """Factory for build action."""
        return cls(
            action_type=ActionType.BUILD,
            player_id=player_id,
            card_id=card_id,
            payload=BuildPayload(location=location, industry_type=industry_type),
        )

    @classmethod
    def network(cls, player_id: str, card_id: str,
                links: list[tuple[str, str]]) -> Action:
        """Factory for network action. `links` are (from, to) location pairs."""
        return cls(
            action_type=ActionType.NETWORK,
            player_id=player_id,
            card_id=card_id,
            payload=NetworkPayload(
                links=tuple(LinkRequest(a, b) for a, b in links),
            ),
        )

    @classmethod
    def sell(cls, player_id: str, card_id: str, sales: list[Sale]) -> Action:
        """Factory for sell action."""
        return cls(
            action_type=ActionType.SELL,
            player_id=player_id,
            card_id=card_id,
            payload=SellPayload(sales=tuple(sales)),
        )

    @classmethod
    def develop(cls, player_id: str, card_id: str, tile_ids: list[str]) -> Action:
        """Factory for develop action."""
        return cls(
            action_type=ActionType.DEVELOP,
            player_id=player_id,
            card_id=card_id,
            payload=DevelopPayload(tile_ids=tuple(tile_ids)),
        )

    @classmethod
    def loan(cls, player_id: str, card_id: str) -> Action:
        return cls(action_type=ActionType.LOAN, player_id=player_id, card_id=card_id)

    @classmethod
    def scout(cls, player_id: str, card_id: str,
              additional_card_ids: list[str]) -> Action:
        """Factory for scout action."""
        return cls(
            action_type=ActionType.SCOUT,
            player_id=player_id,
            card_id=card_id,
            payload=ScoutPayload(additional_card_ids=tuple(additional_card_ids)),
        )

    @classmethod
    def pass_turn(cls, player_id: str, card_id: str) -> Action:
        return cls(action_type=ActionType.PASS, player_id=player_id, card_id=card_id)


# =============================================================================
# Results
# =============================================================================

@dataclass
class StateChange:
    """One observable effect of an executed action."""
    type: StateChangeType
    player_id: str
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class ActionValidation:
    valid: bool
    errors: list[str] = field(default_factory=list)
    error_code: str | None = None

    @classmethod
    def from_errors(cls, errors: list[str],
                    error_code: str = INVALID_ACTION) -> ActionValidation:
        """Valid when `errors` is empty, otherwise invalid with the given code."""
        if not errors:
            return cls(valid=True)
        return cls(valid=False, errors=list(errors), error_code=error_code)


@dataclass
class ActionResult:
    """
    Result of executing an action.

    Contains:
    - Whether the action succeeded
    - Errors (if failed)
    - State changes (for clients and logs)
    """
    success: bool
    errors: list[str] = field(default_factory=list)
    state_changes: list[StateChange] = field(default_factory=list)
    error_code: str | None = None

    @classmethod
    def failure(cls, errors: str | list[str],
                error_code: str | None = INVALID_ACTION) -> ActionResult:
        """Create a failure result."""
        if isinstance(errors, str):
            errors = [errors]
        return cls(success=False, errors=list(errors), error_code=error_code)

    @classmethod
    def from_validation(cls, validation: ActionValidation) -> ActionResult:
        return cls.failure(validation.errors, error_code=validation.error_code)

    @classmethod
    def succeeded(cls, changes: list[StateChange] | None = None) -> ActionResult:
        """Create a success result."""
        return cls(success=True, state_changes=changes or [])
