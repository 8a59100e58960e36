"""
Network - place canal or rail links between adjacent locations.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..action import (
    Action, ActionResult, ActionValidation, NetworkPayload, StateChange, StateChangeType,
)
from ..enums import Era, LinkType
from ..network import are_adjacent, player_network
from ..resources import (
    ResourceSource, consume_resources, find_beer_sources, find_coal_sources, total_cost,
)
from ..state import GameState, Link, PlayerState
from .common import common_errors, discard_card, pay, use_action


CANAL_LINK_COST = 3


@dataclass(frozen=True)
class LinkCost:
    money: int
    coal: int = 0
    beer: int = 0


RAIL_LINK_COSTS = {
    1: LinkCost(money=5, coal=1),
    2: LinkCost(money=15, coal=2, beer=1),
}


def link_cost(era: Era, count: int) -> LinkCost | None:
    if era == Era.CANAL:
        return LinkCost(money=CANAL_LINK_COST * count) if count == 1 else None
    return RAIL_LINK_COSTS.get(count)


@dataclass
class _NetworkPlan:
    player: PlayerState
    payload: NetworkPayload
    cost: LinkCost
    coal: list[ResourceSource]
    beer: list[ResourceSource]

    @property
    def money(self) -> int:
        return self.cost.money + total_cost(self.coal)


def _plan(state: GameState, action: Action) -> tuple[_NetworkPlan | None, list[str]]:
    player, errors = common_errors(state, action)
    if player is None:
        return None, errors
    payload = action.payload
    if not isinstance(payload, NetworkPayload):
        return None, errors + ["Network action needs links"]

    count = len(payload.links)
    cost = link_cost(state.era, count)
    if cost is None:
        if state.era == Era.CANAL:
            errors.append("Can only place 1 link in Canal era")
        else:
            errors.append("Can place 1 or 2 rail links in Rail era")
        return None, errors

    if player.link_tiles_remaining < count:
        errors.append(f"Not enough link tiles (need {count}, have {player.link_tiles_remaining})")

    # A second rail link may extend from the first
    network = player_network(state, player.player_id) if state.tiles_of(player.player_id) else None
    seen: set[frozenset[str]] = set()
    for request in payload.links:
        a, b = request.from_location, request.to_location
        if a not in state.board.locations or b not in state.board.locations:
            errors.append(f"Unknown location in link {a}-{b}")
            continue
        if not are_adjacent(state, a, b):
            errors.append(f"{a} and {b} are not adjacent")
        pair = frozenset((a, b))
        if pair in seen:
            errors.append(f"Link {a}-{b} listed twice")
        seen.add(pair)
        if state.board.link_between(a, b):
            errors.append(f"Link already exists between {a} and {b}")
        if network is not None:
            if a not in network and b not in network:
                errors.append("At least one end of link must be in your network")
            network |= {a, b}

    if errors:
        return None, errors

    # Coal must reach the new link from one of its ends; take the cheaper end
    first = payload.links[0]
    coal_options = [
        find_coal_sources(state, player.player_id, end, cost.coal)
        for end in (first.from_location, first.to_location)
    ]
    coal = min(coal_options, key=total_cost)
    beer = find_beer_sources(state, player.player_id, first.from_location, cost.beer)
    if cost.beer and len(beer) < cost.beer:
        beer = find_beer_sources(state, player.player_id, first.to_location, cost.beer)

    if len(coal) < cost.coal:
        errors.append(f"Need {cost.coal} coal for this network action")
    if len(beer) < cost.beer:
        errors.append(f"Need {cost.beer} beer for this network action")

    plan = _NetworkPlan(player=player, payload=payload, cost=cost, coal=coal, beer=beer)
    if player.money < plan.money:
        errors.append(f"Not enough money (need £{plan.money}, have £{player.money})")
    return (None, errors) if errors else (plan, [])


def validate_network(state: GameState, action: Action) -> ActionValidation:
    _, errors = _plan(state, action)
    return ActionValidation.from_errors(errors)


def execute_network(state: GameState, action: Action) -> ActionResult:
    plan, errors = _plan(state, action)
    if plan is None:
        return ActionResult.failure(errors)

    player = plan.player
    changes: list[StateChange] = []

    if plan.coal:
        coal_cost = consume_resources(state, plan.coal, changes)
        changes.append(StateChange(
            StateChangeType.RESOURCE_CONSUMED, player.player_id,
            {"resource": "coal", "quantity": len(plan.coal), "cost": coal_cost},
        ))
    if plan.beer:
        consume_resources(state, plan.beer, changes)
        changes.append(StateChange(
            StateChangeType.RESOURCE_CONSUMED, player.player_id,
            {"resource": "beer", "quantity": len(plan.beer), "cost": 0},
        ))
    pay(player, plan.money, changes, reason="network")

    link_type = LinkType.CANAL if state.era == Era.CANAL else LinkType.RAIL
    for request in plan.payload.links:
        link = Link(
            link_id=state.id_generator.next_id("link"),
            from_location=request.from_location,
            to_location=request.to_location,
            link_type=link_type,
            player_id=player.player_id,
        )
        state.board.add_link(link)
        player.placed_links.append(link.link_id)
        player.link_tiles_remaining -= 1
        changes.append(StateChange(
            StateChangeType.LINK_PLACED, player.player_id,
            {
                "link_id": link.link_id,
                "from": link.from_location,
                "to": link.to_location,
                "link_type": link_type.value,
            },
        ))

    discard_card(state, player, action.card_id, changes)
    use_action(player)
    return ActionResult.succeeded(changes)
