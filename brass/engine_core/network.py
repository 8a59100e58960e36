"""
Network connectivity over placed links.

The static board graph says which locations may be linked; the dynamic
graph is the links actually placed. Reachability ignores link
ownership. Connected components of the dynamic graph are cached on the
board and rebuilt whenever its `link_version` changes.
"""

from __future__ import annotations
from collections import deque

from .state import BoardState, GameState


def _components(board: BoardState) -> dict[str, int]:
    """Location -> component id, for every location touched by a link."""
    if board._components is not None and board._components_version == board.link_version:
        return board._components

    parent: dict[str, str] = {}

    def find(x: str) -> str:
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    for link in board.links:
        for end in (link.from_location, link.to_location):
            parent.setdefault(end, end)
        root_a, root_b = find(link.from_location), find(link.to_location)
        if root_a != root_b:
            parent[root_b] = root_a

    roots: dict[str, int] = {}
    components: dict[str, int] = {}
    for location in parent:
        components[location] = roots.setdefault(find(location), len(roots))

    board._components = components
    board._components_version = board.link_version
    return components


def are_connected(state: GameState, a: str, b: str) -> bool:
    """True when a and b are joined by placed links of any owner. Reflexive."""
    if a == b:
        return True
    components = _components(state.board)
    component = components.get(a)
    return component is not None and component == components.get(b)


def reachable_locations(state: GameState, start: str) -> set[str]:
    """Every location reachable from `start` over placed links, `start` included."""
    components = _components(state.board)
    component = components.get(start)
    if component is None:
        return {start}
    return {location for location, c in components.items() if c == component}


def player_network(state: GameState, player_id: str) -> set[str]:
    """
    Locations in a player's network.

    Seeds are the locations of the player's built tiles and the ends of
    the player's own links; each seed is then expanded through any
    placed link.
    """
    seeds: set[str] = {tile.location for tile in state.tiles_of(player_id)}
    for link in state.board.links:
        if link.player_id == player_id:
            seeds.add(link.from_location)
            seeds.add(link.to_location)

    network: set[str] = set()
    for seed in seeds:
        if seed not in network:
            network |= reachable_locations(state, seed)
    return network


def buildable_locations(state: GameState, player_id: str) -> set[str]:
    """The whole board before a player's first tile, their network afterwards."""
    if not state.tiles_of(player_id):
        return set(state.board.locations)
    return player_network(state, player_id)


def are_adjacent(state: GameState, a: str, b: str) -> bool:
    """Static board adjacency."""
    location = state.board.locations.get(a)
    return location is not None and b in location.adjacent_locations


def find_path(state: GameState, a: str, b: str) -> list[str] | None:
    """Shortest path over placed links by edge count, or None."""
    if a == b:
        return [a]
    if not are_connected(state, a, b):
        return None

    neighbours: dict[str, list[str]] = {}
    for link in state.board.links:
        neighbours.setdefault(link.from_location, []).append(link.to_location)
        neighbours.setdefault(link.to_location, []).append(link.from_location)

    previous: dict[str, str | None] = {a: None}
    queue = deque([a])
    while queue:
        current = queue.popleft()
        if current == b:
            break
        for nxt in neighbours.get(current, []):
            if nxt not in previous:
                previous[nxt] = current
                queue.append(nxt)

    path: list[str] = []
    node: str | None = b
    while node is not None:
        path.append(node)
        node = previous[node]
    path.reverse()
    return path
