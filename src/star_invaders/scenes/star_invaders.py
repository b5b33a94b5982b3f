"""
Star Invaders Scene
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from mini_arcade_core.backend import Backend
from mini_arcade_core.backend.config import FontSettings
from mini_arcade_core.backend.keys import Key
from mini_arcade_core.engine.commands import QuitCommand
from mini_arcade_core.scenes.autoreg import (  # pyright: ignore[reportMissingImports]
    register_scene,
)
from mini_arcade_core.scenes.sim_scene import (  # pyright: ignore[reportMissingImports]
    BaseIntent,
    BaseTickContext,
    BaseWorld,
    Drawable,
    DrawCall,
    SimScene,
)
from mini_arcade_core.scenes.systems.builtins import (
    BaseRenderSystem,
    InputIntentSystem,
)
from mini_arcade_core.scenes.systems.phases import SystemPhase
from mini_arcade_core.utils import logger

from star_invaders.config import GameSettings
from star_invaders.constants import (
    CANVAS_BOTTOM_BOUNDARY,
    CANVAS_HEIGHT,
    CANVAS_TOP_BOUNDARY,
    CANVAS_WIDTH,
    ENEMY_GAP,
    ENEMY_PADDING,
    ENEMY_SHOT_COOLDOWN,
    ENEMY_SPEED,
    MAX_PLAYER_LIVES,
    PLAYER_SPEED,
    SHOT_LENGTH,
    SHOT_SPEED,
    SPRITE_SIZE,
)
from star_invaders.entities import (
    Direction,
    Enemy,
    EnemyType,
    Formation,
    Ship,
    Shot,
    has_collided,
    move_object,
)
from star_invaders.exceptions import AssetError
from star_invaders.spawner import initiate_enemies, spawn_row
from star_invaders.utils import assets_root

SPRITES = ("x-wing",) + tuple(t.sprite for t in EnemyType if t.sprite)


@dataclass
class StarInvadersWorld(BaseWorld):
    """
    Star Invaders World
    """

    ship: Ship
    settings: GameSettings = field(default_factory=GameSettings)
    rng: random.Random = field(default_factory=random.Random)
    enemies: list[Enemy] = field(default_factory=list)
    shots: list[Shot] = field(default_factory=list)
    formation: Formation = field(default_factory=Formation)
    score: int = 0
    lives: int = MAX_PLAYER_LIVES
    finished: bool = False
    enemy_fire_cooldown: int = ENEMY_SHOT_COOLDOWN
    fresh_start: bool = True  # next tick runs with dt = 0
    textures: dict[str, int] = field(default_factory=dict)

    def nearest_enemy(self) -> Enemy | None:
        """The enemy closest to the ship, i.e. the lowest one."""
        return max(self.enemies, key=lambda e: e.top, default=None)

    def finish(self, reason: str) -> None:
        if not self.finished:
            logger.info(f"Game over ({reason}), final score {self.score}")
        self.finished = True

    def reset(self) -> None:
        """
        Put everything back to the opening position with a fresh formation.
        """
        self.enemies = initiate_enemies(self.rng)
        self.shots = []
        self.formation = Formation()
        self.score = 0
        self.lives = MAX_PLAYER_LIVES
        self.finished = False
        self.enemy_fire_cooldown = ENEMY_SHOT_COOLDOWN
        self.fresh_start = True
        start = Ship.at_start()
        self.ship.left = start.left
        self.ship.top = start.top


@dataclass
class StarInvadersIntent(BaseIntent):
    """
    Star Invaders Intent
    """

    move_left: float = 0.0
    move_right: float = 0.0
    fire: bool = False
    restart: bool = False


@dataclass
class StarInvadersTickContext(BaseTickContext[StarInvadersWorld, StarInvadersIntent]):
    """
    Star Invaders Tick Context
    """


@dataclass
class StarInvadersInputSystem(InputIntentSystem):
    """
    Process input and update intent.
    """

    name: str = "star_invaders_input"

    def build_intent(self, ctx: StarInvadersTickContext) -> StarInvadersIntent:
        down = ctx.input_frame.keys_down
        pressed = ctx.input_frame.keys_pressed
        return StarInvadersIntent(
            move_left=1.0 if Key.LEFT in down or Key.A in down else 0.0,
            move_right=1.0 if Key.RIGHT in down or Key.D in down else 0.0,
            fire=Key.SPACE in pressed,
            restart=Key.S in pressed,
        )


@dataclass
class FrameLimitSystem:
    """
    Ask the engine to quit once ``max_frames`` ticks have run.
    """

    max_frames: int
    frames: int = 0
    name: str = "star_invaders_frame_limit"
    phase: int = SystemPhase.CONTROL
    order: int = 5

    def step(self, ctx: StarInvadersTickContext):
        self.frames += 1
        if self.frames == self.max_frames:
            logger.info(f"Stopping after {self.frames} frames")
            ctx.commands.push(QuitCommand())


@dataclass
class RestartSystem:
    name: str = "star_invaders_restart"
    phase: int = SystemPhase.CONTROL
    order: int = 11

    def step(self, ctx: StarInvadersTickContext):
        w = ctx.world
        if not w.finished or ctx.intent is None or not ctx.intent.restart:
            return
        logger.info("Restarting the game")
        w.reset()
        # the frame that restarts the game does not advance it
        ctx.dt = 0.0
        w.fresh_start = False


@dataclass
class FormationSystem:
    """
    Move enemies as a formation:
    - sweep sideways across the free width
    - descend half a step and sweep back
    - after each leftward sweep a new row enters at the top left
    """

    name: str = "star_invaders_formation"
    order: int = 20

    def step(self, ctx: StarInvadersTickContext):
        w = ctx.world
        if w.finished:
            return

        moved = ENEMY_SPEED * ctx.dt
        previous = w.formation.direction
        sweep = w.formation.advance(moved)
        if w.formation.direction is not previous:
            logger.debug(f"Formation turns {w.formation.direction.name}")

        if sweep.descending:
            nearest = w.nearest_enemy()
            if nearest is not None and nearest.top + SPRITE_SIZE > w.ship.top:
                w.finish("the enemy reached the ship")

        if sweep.spawn_row:
            w.enemies.extend(spawn_row(w.rng))

        for enemy in w.enemies:
            move_object(enemy, w.formation.direction, moved)


@dataclass
class ShotMoveSystem:
    name: str = "star_invaders_shot_move"
    order: int = 30

    def step(self, ctx: StarInvadersTickContext):
        if ctx.world.finished:
            return
        distance = SHOT_SPEED * ctx.dt
        for shot in ctx.world.shots:
            shot.move(distance)


@dataclass
class ShipSystem:
    """
    Fire on a fresh SPACE press, then move the ship.
    """

    name: str = "star_invaders_ship"
    order: int = 40

    def step(self, ctx: StarInvadersTickContext):
        w = ctx.world
        if w.finished or ctx.intent is None:
            return

        ship = w.ship
        if ctx.intent.fire:
            offset = SPRITE_SIZE / 2 - ENEMY_PADDING
            top = ship.top - SPRITE_SIZE / 2
            w.shots.append(Shot(ship.left - offset, top, Direction.UP))
            w.shots.append(Shot(ship.left + offset, top, Direction.UP))

        distance = PLAYER_SPEED * ctx.dt
        if ctx.intent.move_left:
            move_object(ship, Direction.LEFT, distance * ctx.intent.move_left)
        if ctx.intent.move_right:
            move_object(ship, Direction.RIGHT, distance * ctx.intent.move_right)


@dataclass
class EnemyFireSystem:
    """
    Every ``cooldown`` frames each enemy rolls against its fire probability.
    """

    name: str = "star_invaders_enemy_fire"
    order: int = 50
    cooldown: int = ENEMY_SHOT_COOLDOWN

    def step(self, ctx: StarInvadersTickContext):
        w = ctx.world
        if w.finished:
            return

        if w.enemy_fire_cooldown != 0:
            w.enemy_fire_cooldown -= 1
            return

        fired = 0
        for enemy in w.enemies:
            if w.rng.random() < enemy.type.fire_prob:
                top = enemy.top - SPRITE_SIZE / 2
                w.shots.append(Shot(enemy.left, top, Direction.DOWN))
                fired += 1
        if fired:
            logger.debug(f"Enemies fired {fired} shots")

        w.enemy_fire_cooldown = self.cooldown


@dataclass
class ShotCollisionSystem:
    """
    Player shots destroy the first enemy they touch and score its points;
    enemy shots cost the ship a life. Shots that leave the playfield go away.
    """

    name: str = "star_invaders_shot_collision"
    order: int = 60

    def step(self, ctx: StarInvadersTickContext):
        w = ctx.world
        if w.finished or not w.shots:
            return

        remaining: list[Shot] = []
        for shot in w.shots:
            if shot.direction is Direction.UP:
                hit = next((e for e in w.enemies if has_collided(shot, e)), None)
                if hit is not None:
                    w.enemies.remove(hit)
                    w.score += hit.type.score
                    logger.debug(f"Hit {hit.type.name}, score {w.score}")
                    continue
                if shot.top < CANVAS_TOP_BOUNDARY:
                    continue
            elif has_collided(shot, w.ship):
                w.lives -= 1
                logger.debug(f"Ship hit, {w.lives} lives left")
                if w.lives < 0:
                    w.finish("no lives left")
                continue
            elif shot.top > CANVAS_BOTTOM_BOUNDARY:
                continue
            remaining.append(shot)

        w.shots = remaining


def _draw_placeholder(backend: Backend, name: str, x: int, y: int, size: int):
    """
    Draw a stand-in for a sprite with no image, inside the box at ``(x, y)``.
    """
    render = backend.render
    k = size / SPRITE_SIZE

    def at(px: float, py: float) -> tuple[int, int]:
        return int(x + px * k), int(y + py * k)

    if name == "x-wing":
        render.draw_poly([at(32, 2), at(24, 56), at(40, 56)], color=(220, 220, 230))
        for wing in (32, 52):
            render.draw_line(*at(4, wing), *at(59, wing), color=(200, 60, 60), thickness=3)
    elif name == "at-at":
        render.draw_rect(*at(8, 12), int(48 * k), int(22 * k), color=(170, 170, 160))
        render.draw_rect(*at(46, 6), int(14 * k), int(12 * k), color=(150, 150, 140))
        for leg in (12, 22, 40, 50):
            render.draw_line(*at(leg, 34), *at(leg, 60), color=(130, 130, 120), thickness=4)
    elif name == "fighter":
        render.draw_rect(*at(4, 8), int(8 * k), int(48 * k), color=(60, 60, 70))
        render.draw_rect(*at(52, 8), int(8 * k), int(48 * k), color=(60, 60, 70))
        render.draw_line(*at(10, 32), *at(54, 32), color=(90, 90, 100), thickness=3)
        render.draw_circle(*at(32, 32), int(10 * k), color=(120, 120, 130))
    elif name == "asteroid":
        render.draw_circle(*at(32, 32), int(26 * k), color=(110, 90, 70))
        render.draw_circle(*at(24, 26), int(6 * k), color=(80, 65, 50))
        render.draw_circle(*at(41, 40), int(4 * k), color=(80, 65, 50))
    else:
        render.draw_rect(x, y, size, size, color=(255, 0, 255))


def draw_sprite(
    backend: Backend,
    ctx: StarInvadersTickContext,
    name: str,
    center_x: float,
    center_y: float,
    size: int = SPRITE_SIZE,
):
    x, y = int(center_x - size / 2), int(center_y - size / 2)
    texture = ctx.world.textures.get(name)
    if texture is not None:
        backend.render.draw_texture(texture, x, y, size, size)
    else:
        _draw_placeholder(backend, name, x, y, size)


def draw_text(
    backend: Backend,
    text: str,
    x: float,
    bottom: float,
    font: FontSettings,
    color,
    align: str = "left",
):
    """
    Draw ``text`` with its bottom edge at ``bottom``; ``x`` is the left edge,
    the centre or the right edge depending on ``align``.
    """
    width, height = backend.text.measure(text, font_size=font.size, font_name=font.name)
    if align == "center":
        x -= width / 2
    elif align == "right":
        x -= width
    backend.text.draw(
        int(x), int(bottom - height), text, color,
        font_size=font.size, font_name=font.name,
    )


class DrawShip(Drawable):
    """
    Drawable Ship
    """

    def draw(self, backend: Backend, ctx: StarInvadersTickContext):
        ship = ctx.world.ship
        draw_sprite(backend, ctx, ship.sprite, ship.left, ship.top, ship.size)


class DrawEnemies(Drawable):
    """
    Drawable Enemies
    """

    def draw(self, backend: Backend, ctx: StarInvadersTickContext):
        for enemy in ctx.world.enemies:
            draw_sprite(backend, ctx, enemy.sprite, enemy.left, enemy.top, enemy.size)


class DrawShots(Drawable):
    def draw(self, backend: Backend, ctx: StarInvadersTickContext):
        color = ctx.world.settings.renderer.shot_color
        half = SHOT_LENGTH / 2
        for shot in ctx.world.shots:
            x = int(shot.left)
            backend.render.draw_line(
                x, int(shot.top - half), x, int(shot.top + half), color, thickness=1
            )


class DrawScore(Drawable):
    def draw(self, backend: Backend, ctx: StarInvadersTickContext):
        settings = ctx.world.settings
        draw_text(
            backend,
            f"SCORE: {ctx.world.score}",
            ENEMY_GAP,
            CANVAS_HEIGHT - ENEMY_GAP,
            settings.font("hud"),
            settings.renderer.text_color,
        )


class DrawLives(Drawable):
    """
    ``LIVES:`` label followed by a half-size ship per remaining life,
    filled from the right edge.
    """

    def draw(self, backend: Backend, ctx: StarInvadersTickContext):
        settings = ctx.world.settings
        size = SPRITE_SIZE // 2
        label_x = CANVAS_WIDTH - 4 * ENEMY_GAP - MAX_PLAYER_LIVES * (size + ENEMY_GAP)
        draw_text(
            backend,
            "LIVES: ",
            label_x,
            CANVAS_HEIGHT - ENEMY_GAP,
            settings.font("hud"),
            settings.renderer.text_color,
            align="right",
        )

        top = CANVAS_HEIGHT - size / 2
        left = CANVAS_WIDTH - ENEMY_GAP - size
        for _ in range(max(0, ctx.world.lives)):
            draw_sprite(backend, ctx, ctx.world.ship.sprite, left, top, size)
            left -= size + ENEMY_GAP


class DrawEndScreen(Drawable):
    """
    Grey veil over the playfield with the final score and how to restart.
    """

    def draw(self, backend: Backend, ctx: StarInvadersTickContext):
        if not ctx.world.finished:
            return
        settings = ctx.world.settings
        renderer = settings.renderer
        backend.render.draw_rect(
            0, 0, CANVAS_WIDTH, CANVAS_HEIGHT, color=renderer.overlay_color
        )

        cx = CANVAS_WIDTH / 2
        cy = CANVAS_HEIGHT / 2
        lines = (
            ("GAME OVER", cx, cy - 48, "title"),
            (f"Final score: {ctx.world.score}", cx + 100, cy, "subtitle"),
            ("To play again press 'S'", cx, CANVAS_HEIGHT * 3 / 4, "subtitle"),
        )
        for text, x, y, font in lines:
            draw_text(
                backend, text, x, y, settings.font(font),
                renderer.end_text_color, align="center",
            )


@dataclass
class StarInvadersRenderSystem(BaseRenderSystem):
    """
    Render the Star Invaders world.
    """

    name: str = "star_invaders_render"
    order: int = 100

    def step(self, ctx: StarInvadersTickContext):
        ctx.draw_ops = [
            DrawCall(DrawShip(), ctx=ctx),
            DrawCall(DrawShots(), ctx=ctx),
            DrawCall(DrawEnemies(), ctx=ctx),
            DrawCall(DrawScore(), ctx=ctx),
            DrawCall(DrawLives(), ctx=ctx),
            DrawCall(DrawEndScreen(), ctx=ctx),
        ]
        super().step(ctx)


@register_scene("star_invaders")
class StarInvadersScene(SimScene[StarInvadersTickContext, StarInvadersWorld]):
    """
    The game: one formation, one ship, until the ship falls.
    """

    world: StarInvadersWorld
    tick_context_type = StarInvadersTickContext

    def on_enter(self):
        runtime = self.scene_runtime_settings()
        data = runtime.get("settings", {}) if runtime is not None else {}
        max_frames = runtime.get("max_frames") if runtime is not None else None
        settings = GameSettings.from_dict(data)

        self.world = StarInvadersWorld(
            entities=[],
            ship=Ship.at_start(),
            settings=settings,
            rng=random.Random(settings.seed),
            textures=self._load_sprites(),
        )
        self.world.reset()
        logger.info(
            f"Star Invaders scene ready "
            f"(seed={settings.seed}, enemies={len(self.world.enemies)})"
        )

        self.systems.extend(
            [
                StarInvadersInputSystem(),
                RestartSystem(),
                FormationSystem(),
                ShotMoveSystem(),
                ShipSystem(),
                EnemyFireSystem(),
                ShotCollisionSystem(),
                StarInvadersRenderSystem(),
            ]
        )
        if max_frames:
            self.systems.add(FrameLimitSystem(max_frames=int(max_frames)))

    def _load_sprites(self) -> dict[str, int]:
        """
        Load ``<assets>/img/<name>.png`` for every sprite that has a file.

        :raise AssetError: If an image exists but cannot be decoded
        """
        root = assets_root()
        if root is None:
            logger.debug("No assets directory, sprites will be drawn")
            return {}

        textures = {}
        for name in SPRITES:
            path = root / "img" / f"{name}.png"
            if not path.is_file():
                logger.debug(f"Sprite {name!r} not found, using placeholder")
                continue
            try:
                textures[name] = self._load_texture(str(path))
            except OSError as exc:
                raise AssetError(f"cannot load sprite {path}: {exc}") from exc
        return textures

    def _get_tick_context(
        self, input_frame, dt: float
    ) -> StarInvadersTickContext:
        if self.world.fresh_start:
            dt = 0.0
            self.world.fresh_start = False
        return StarInvadersTickContext(
            input_frame=input_frame,
            dt=dt,
            world=self.world,
            commands=self.context.command_queue,
        )
