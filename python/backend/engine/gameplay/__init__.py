from backend.engine.gameplay.resolver import MoveOutcome, MoveResolver

__all__ = ["MoveOutcome", "MoveResolver"]
