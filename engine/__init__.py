"""
Meridian survival engine.

Subpackages:
- core: enums, catalog tables, rules, actions, validation, errors
- world: hex math, hexes, players, world state, fog, factions
- mechanics: map generation and the per-phase resolvers
- tick: the phase-ordered TickResolver
"""
