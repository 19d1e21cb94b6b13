"""Local HTTP API for SpellBound."""
