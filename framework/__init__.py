"""
Battle Framework module.

Provides gameplay systems built on top of the engine:
- Components (creature cards, Pydantic models)
- Battle (turn-based combat state machine)
- Progression (levels, stat growth, rewards)
- Save (progression and gem persistence)
"""
