"""
Era transitions, scoring, income and the final result.

The Canal era ends with scoring, removal of obsolete tiles and a fresh
deal; the Rail era ends the game. Income collection is not triggered
from here: callers invoke collect_income() at round boundaries.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from .action import StateChange, StateChangeType
from .enums import Era, GamePhase, IndustryType
from .state import GameState, HAND_SIZE


logger = logging.getLogger(__name__)

RAIL_BREWERY_BEER = 2


def score_links(state: GameState, remove: bool) -> dict[str, int]:
    """
    Award each link owner the adjacency count of both ends.

    With `remove` the scored links leave the board and the owner's list.
    Returns VP awarded per player.
    """
    awarded: dict[str, int] = {}
    for player in state.players:
        vp = 0
        for link_id in list(player.placed_links):
            link = state.board.get_link(link_id)
            if link is None:
                continue
            for end in (link.from_location, link.to_location):
                location = state.board.locations.get(end)
                if location:
                    vp += len(location.adjacent_locations)
            if remove:
                state.board.remove_link(link_id)
                player.placed_links.remove(link_id)
        player.victory_points += vp
        player.link_vp_scored += vp
        awarded[player.player_id] = vp
    return awarded


def score_flipped_tiles(state: GameState) -> dict[str, int]:
    """Award the VP printed on every flipped tile to its owner."""
    awarded: dict[str, int] = {p.player_id: 0 for p in state.players}
    for tile in state.placed_industries.values():
        if not tile.is_flipped:
            continue
        owner = state.get_player(tile.player_id)
        if owner:
            owner.victory_points += tile.victory_points
            owner.tile_vp_scored += tile.victory_points
            awarded[owner.player_id] += tile.victory_points
    return awarded


def end_era(state: GameState) -> None:
    if state.era == Era.CANAL:
        transition_to_rail(state)
    else:
        end_game(state)


def transition_to_rail(state: GameState) -> None:
    state.phase = GamePhase.ERA_TRANSITION
    logger.info("Game %s: Canal era over, scoring", state.game_id)

    score_links(state, remove=True)
    score_flipped_tiles(state)

    obsolete = [
        tile_id for tile_id, tile in state.placed_industries.items()
        if tile.level == 1 and tile.industry_type != IndustryType.POTTERY
    ]
    for tile_id in obsolete:
        state.remove_placed_tile(tile_id)

    for merchant in state.board.merchants:
        if merchant.has_beer_space:
            merchant.current_beer = 1

    # Every played card goes back into a single reshuffled deck
    deck = state.card_deck
    pile = list(deck.draw_pile) + list(deck.discard_pile)
    for player in state.players:
        pile.extend(player.discard_pile)
        pile.extend(player.hand)
        player.discard_pile = []
        player.hand = []
    state.rng.shuffle(pile)
    deck.draw_pile = pile
    deck.discard_pile = []

    for player in state.players:
        while len(player.hand) < HAND_SIZE:
            card = deck.draw()
            if card is None:
                break
            player.hand.append(card)

    for tile in state.placed_industries.values():
        if tile.industry_type == IndustryType.BREWERY and not tile.is_flipped:
            tile.current_resources = RAIL_BREWERY_BEER

    state.era = Era.RAIL
    state.current_round = 1
    state.is_first_round = True
    state.current_player_index = 0
    state.reset_action_budgets()
    state.phase = GamePhase.PLAYING


def end_game(state: GameState) -> None:
    score_links(state, remove=False)
    score_flipped_tiles(state)
    state.phase = GamePhase.FINISHED
    logger.info("Game %s finished, winner %s", state.game_id, determine_winner(state))


def collect_income(state: GameState) -> list[StateChange]:
    """
    Pay every player their income level.

    Negative income is paid from money; a shortfall is covered by
    force-selling the player's unflipped tiles for half their money
    cost (placement order), and whatever is still owed costs 1 VP per £1.
    """
    changes: list[StateChange] = []
    for player in state.players:
        income = player.income
        if income >= 0:
            player.money += income
            changes.append(StateChange(
                StateChangeType.MONEY, player.player_id,
                {"amount": income, "new_total": player.money, "reason": "income"},
            ))
            continue

        owed = -income
        if player.money >= owed:
            player.money -= owed
            changes.append(StateChange(
                StateChangeType.MONEY, player.player_id,
                {"amount": -owed, "new_total": player.money, "reason": "income"},
            ))
            continue

        shortfall = owed - player.money
        player.money = 0
        raised = 0
        for tile_id in list(player.placed_industries):
            if raised >= shortfall:
                break
            tile = state.placed_industries.get(tile_id)
            if tile is None or tile.is_flipped:
                continue
            raised += tile.definition.money_cost // 2
            state.remove_placed_tile(tile_id)
            changes.append(StateChange(
                StateChangeType.TILE_REMOVED, player.player_id,
                {"tile_id": tile_id, "reason": "forced_sale"},
            ))

        if raised >= shortfall:
            player.money = raised - shortfall
        else:
            lost = shortfall - raised
            player.victory_points -= lost
            changes.append(StateChange(
                StateChangeType.VP, player.player_id, {"change": -lost, "new_vp": player.victory_points},
            ))
        changes.append(StateChange(
            StateChangeType.MONEY, player.player_id,
            {"amount": -owed, "new_total": player.money, "reason": "income"},
        ))
        logger.info("Player %s could not cover income of %d; raised %d from tiles",
                    player.player_id, income, raised)
    return changes


def determine_winner(state: GameState) -> str | None:
    """Highest VP, then income, then money. Earlier seat wins a full tie."""
    if not state.players:
        return None
    best = state.players[0]
    for player in state.players[1:]:
        if (player.victory_points, player.income, player.money) > \
                (best.victory_points, best.income, best.money):
            best = player
    return best.player_id


@dataclass
class Standing:
    player_id: str
    placement: int
    victory_points: int
    income: int
    money: int
    tile_vp: int
    link_vp: int


def final_standings(state: GameState) -> list[Standing]:
    """Players ranked with the winner's tie-breaks, placement starting at 1."""
    ranked = sorted(
        state.players,
        key=lambda p: (p.victory_points, p.income, p.money),
        reverse=True,
    )
    # sorted() with reverse keeps seat order among full ties
    return [
        Standing(
            player_id=p.player_id,
            placement=index + 1,
            victory_points=p.victory_points,
            income=p.income,
            money=p.money,
            tile_vp=p.tile_vp_scored,
            link_vp=p.link_vp_scored,
        )
        for index, p in enumerate(ranked)
    ]
