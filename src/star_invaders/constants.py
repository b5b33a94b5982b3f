"""
Constants for the game.
"""

from __future__ import annotations

FPS = 60

# Canvas dimensions
CANVAS_WIDTH = 1200
CANVAS_HEIGHT = 800
WINDOW_SIZE = (CANVAS_WIDTH, CANVAS_HEIGHT)

CANVAS_PADDING = 50

CANVAS_LEFT_BOUNDARY = CANVAS_PADDING
CANVAS_RIGHT_BOUNDARY = CANVAS_WIDTH - CANVAS_PADDING
CANVAS_TOP_BOUNDARY = CANVAS_PADDING
CANVAS_BOTTOM_BOUNDARY = CANVAS_HEIGHT - CANVAS_PADDING

SPRITE_SIZE = 64
SPRITE_COLLISION_RADIUS = 24

SHOT_LENGTH = 4

# Enemy placement
ENEMY_PADDING = 2
ENEMY_GAP = 2 * ENEMY_PADDING
ENEMY_ROW_SIZE = 8
ENEMY_COLUMN_SIZE = 5
ENEMY_STEP = SPRITE_SIZE + ENEMY_GAP
ROW_SPAN = ENEMY_ROW_SIZE * ENEMY_STEP - ENEMY_GAP

# Formation sweep
SWEEP_WIDTH = CANVAS_WIDTH - 2 * CANVAS_PADDING - ROW_SPAN
SWEEP_START = (CANVAS_WIDTH - 2 * CANVAS_PADDING) / 2 - ROW_SPAN / 2
DESCEND_DEPTH = ENEMY_STEP / 2

# Frames between enemy volleys
ENEMY_SHOT_COOLDOWN = 30

MAX_PLAYER_LIVES = 4

# Speeds in pixels per second
PLAYER_SPEED = 200.0
ENEMY_SPEED = 100.0
SHOT_SPEED = 800.0

# Colors
BACKGROUND_COLOR = (8, 8, 24)
SHOT_COLOR = (60, 120, 255)
TEXT_COLOR = (200, 200, 255)
END_SCREEN_OVERLAY = (128, 128, 128, 128)
END_SCREEN_TEXT_COLOR = (255, 255, 255)
