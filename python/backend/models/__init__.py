from backend.models.grid import Grid, Position
from backend.models.level import LevelSnapshot, LevelState
from backend.models.savegame import SaveGameManager, decode_state, encode_state
from backend.models.tiles import Direction, EntityKind, Occupant, TileKind

__all__ = [
    "Direction",
    "EntityKind",
    "Grid",
    "LevelSnapshot",
    "LevelState",
    "Occupant",
    "Position",
    "SaveGameManager",
    "TileKind",
    "decode_state",
    "encode_state",
]
