from backend.engine.levelreader.reader import LevelReader

__all__ = ["LevelReader"]
