"""
Games module - Game-specific data.

Each game has its own subpackage with its board, tile catalogue, deck
and a factory that builds the initial GameState.
"""
