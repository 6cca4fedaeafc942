from backend.engine.gamestate.completion import CompletionChecker
from backend.engine.gamestate.state import PlayStats

__all__ = ["CompletionChecker", "PlayStats"]
