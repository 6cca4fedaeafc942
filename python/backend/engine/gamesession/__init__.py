from backend.engine.gamesession.effects import Effect, EffectListener
from backend.engine.gamesession.session import LevelSession

__all__ = ["Effect", "EffectListener", "LevelSession"]
