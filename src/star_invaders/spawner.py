"""
Enemy spawner.

Enemy kinds are picked with cumulative probability buckets: a uniform draw in
``[0, 1)`` falls into the first :class:`EnemyType` whose running total of
``spawn_prob`` reaches it. ``EnemyType.NONE`` leaves the slot empty.
"""

from __future__ import annotations

import random

from star_invaders.constants import (
    CANVAS_LEFT_BOUNDARY,
    CANVAS_TOP_BOUNDARY,
    CANVAS_WIDTH,
    ENEMY_COLUMN_SIZE,
    ENEMY_ROW_SIZE,
    ENEMY_STEP,
    ROW_SPAN,
    SPRITE_SIZE,
)
from star_invaders.entities import Enemy, EnemyType
from mini_arcade_core.utils import logger


def next_enemy_type(rng: random.Random) -> EnemyType:
    draw = rng.random()
    cap = 0.0
    for enemy_type in EnemyType:
        cap += enemy_type.spawn_prob
        if draw <= cap:
            return enemy_type
    return EnemyType.NONE


def create_enemy(rng: random.Random, left: float, top: float) -> Enemy | None:
    """
    Create an enemy of a random kind, or nothing.

    :return: The new enemy, or ``None`` when the draw picked an empty slot
    """
    enemy_type = next_enemy_type(rng)
    if enemy_type is EnemyType.NONE:
        return None
    return Enemy(left, top, enemy_type)


def _row(rng: random.Random, first_left: float, top: float) -> list[Enemy]:
    """
    Roll ``ENEMY_ROW_SIZE`` slots. Empty draws do not advance ``left``, so the
    row packs towards its first column.
    """
    enemies = []
    left = first_left
    for _ in range(ENEMY_ROW_SIZE):
        enemy = create_enemy(rng, left, top)
        if enemy is None:
            continue
        enemies.append(enemy)
        left += ENEMY_STEP
    return enemies


def initiate_enemies(rng: random.Random) -> list[Enemy]:
    """
    Build the starting formation, centred horizontally below the top boundary.
    """
    first_left = CANVAS_WIDTH / 2 - ROW_SPAN / 2 + SPRITE_SIZE / 2
    enemies: list[Enemy] = []
    for row in range(ENEMY_COLUMN_SIZE):
        enemies.extend(_row(rng, first_left, CANVAS_TOP_BOUNDARY + row * ENEMY_STEP))
    logger.debug(f"Initial formation: {len(enemies)} enemies")
    return enemies


def spawn_row(rng: random.Random) -> list[Enemy]:
    """
    Build a new row at the upper-left corner, where the formation stands after
    a leftward sweep.
    """
    enemies = _row(rng, CANVAS_LEFT_BOUNDARY + SPRITE_SIZE / 2, CANVAS_TOP_BOUNDARY)
    logger.debug(f"Spawned a row of {len(enemies)} enemies")
    return enemies
