"""
Brass - Rules engine for Brass: Birmingham

A deterministic engine that owns the game state and enforces the rules:
- Validation of every player action against the full rule set
- Atomic execution with rollback on failure
- Turn, round and era progression to a final score
- Resource sourcing and network connectivity
"""

__version__ = "0.1.0"
