"""
Star Invaders entities
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from star_invaders.constants import (
    CANVAS_BOTTOM_BOUNDARY,
    CANVAS_LEFT_BOUNDARY,
    CANVAS_RIGHT_BOUNDARY,
    CANVAS_TOP_BOUNDARY,
    CANVAS_WIDTH,
    DESCEND_DEPTH,
    SPRITE_COLLISION_RADIUS,
    SPRITE_SIZE,
    SWEEP_START,
    SWEEP_WIDTH,
)


class Direction(Enum):
    """
    Unit vectors of the four directions.
    """

    LEFT = (-1, 0)
    RIGHT = (1, 0)
    UP = (0, -1)
    DOWN = (0, 1)

    @property
    def x(self) -> int:
        return self.value[0]

    @property
    def y(self) -> int:
        return self.value[1]

    @property
    def horizontal(self) -> bool:
        return self.y == 0


class EnemyType(Enum):
    """
    Enemy kinds. Declaration order is the order of the spawn buckets.
    """

    AT_AT = ("at-at", 0.2, 0.2, 200)
    FIGHTER = ("fighter", 0.1, 0.4, 150)
    ASTEROID = ("asteroid", 0.0, 0.3, 100)
    NONE = (None, 0.0, 0.1, 0)

    def __init__(
        self, sprite: str | None, fire_prob: float, spawn_prob: float, score: int
    ):
        self.sprite = sprite
        self.fire_prob = fire_prob
        self.spawn_prob = spawn_prob
        self.score = score


@dataclass
class Ship:
    """
    Player controlled ship
    """

    left: float
    top: float
    size: int = SPRITE_SIZE
    sprite: str = "x-wing"

    @classmethod
    def at_start(cls) -> Ship:
        return cls(
            CANVAS_WIDTH / 2 - SPRITE_SIZE / 2,
            CANVAS_BOTTOM_BOUNDARY - SPRITE_SIZE / 2,
        )


@dataclass(eq=False)
class Enemy:
    """
    Enemy entity. Compared by identity so two enemies on the same spot stay
    distinct.
    """

    left: float
    top: float
    type: EnemyType
    size: int = SPRITE_SIZE

    @property
    def sprite(self) -> str | None:
        return self.type.sprite


@dataclass(eq=False)
class Shot:
    """
    Shot flying across the battlefield
    """

    left: float
    top: float
    direction: Direction

    def move(self, distance: float) -> None:
        """
        Move vertically; shots are never clamped.

        :param distance: Pixels to move
        :type distance: float
        """
        self.top += self.direction.y * distance


def bound(low: float, value: float, high: float) -> float:
    """Clamp ``value`` into ``[low, high]``."""
    if value < low:
        return low
    if value > high:
        return high
    return value


def move_object(obj: Ship | Enemy, direction: Direction, distance: float) -> None:
    """
    Move a sprite and keep it inside the playfield.

    The horizontal range keeps the whole sprite between the side boundaries;
    vertically the sprite may poke half its size above the top boundary.

    :param obj: Ship or enemy to move
    :param direction: Direction to move in
    :param distance: Pixels to move
    """
    radius = obj.size / 2
    obj.left = bound(
        CANVAS_LEFT_BOUNDARY + radius,
        obj.left + distance * direction.x,
        CANVAS_RIGHT_BOUNDARY - radius,
    )
    obj.top = bound(
        CANVAS_TOP_BOUNDARY - radius,
        obj.top + distance * direction.y,
        CANVAS_BOTTOM_BOUNDARY - radius,
    )


def has_collided(shot: Shot, obj: Ship | Enemy) -> bool:
    """True when the shot lies strictly inside the collision circle."""
    dx = obj.left - shot.left
    dy = obj.top - shot.top
    return dx * dx + dy * dy < SPRITE_COLLISION_RADIUS**2


@dataclass(frozen=True)
class SweepStep:
    """
    Outcome of one formation advance.
    """

    descending: bool = False
    spawn_row: bool = False


@dataclass
class Formation:
    """
    Sweep-and-descend timer of the enemy formation.

    The formation sweeps horizontally for ``SWEEP_WIDTH`` pixels, descends half
    an enemy step and sweeps back the other way. ``timer`` counts pixels moved
    in the current leg and ``limit`` is the length of the leg.
    """

    direction: Direction = Direction.RIGHT
    previous_direction: Direction = Direction.LEFT
    timer: float = SWEEP_START
    limit: float = SWEEP_WIDTH

    def advance(self, moved: float) -> SweepStep:
        """
        Update the leg before moving ``moved`` pixels.

        :param moved: Pixels the formation is about to move
        :type moved: float

        :return: Whether the formation is descending and whether a new row
            must be spawned
        :rtype: SweepStep
        """
        if self.direction.horizontal and self.timer >= self.limit:
            self.limit = DESCEND_DEPTH
            self.timer = 0.0
            self.previous_direction = self.direction
            self.direction = Direction.DOWN

        descending = False
        spawn_row = False
        if self.direction is Direction.DOWN:
            descending = True
            if self.timer >= self.limit:
                self.limit = SWEEP_WIDTH
                self.timer = 0.0
                if self.previous_direction is Direction.LEFT:
                    self.direction = Direction.RIGHT
                    spawn_row = True
                else:
                    self.direction = Direction.LEFT

        self.timer += moved
        return SweepStep(descending=descending, spawn_row=spawn_row)
