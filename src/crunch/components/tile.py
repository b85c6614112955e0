from dataclasses import dataclass

@dataclass(slots=True)
class Tile:
    """Marks a grid cell as part of the playable shape.

    Carries no state; tiles are created once from the layout and never change.
    """
    pass
