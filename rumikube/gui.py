from __future__ import annotations

"""
Compact single-player Rummikube window: board on top, hand below.

Interaction model:
- Double-click a hand tile to lay it on the board.
- Double-click a board tile placed this turn to take it back (fixed tiles stay).
- Validate with Enter/V, Pass with P, Draw with D, next turn with E,
  take back the whole placement with R, new game with N.

Buttons are enabled from the engine's own phase accessors; the status line
shows the message of the last reported outcome.
"""

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple
import argparse
import os
import traceback

from .cli import ruleset_from_args
from .engine import Outcome, TileEngine
from .logging_config import get_game_logger, setup_logging
from .rules import Ruleset
from .state import TurnPhase, Zone
from .tiles import Tile

try:
    import pygame  # type: ignore
except Exception:  # pragma: no cover
    pygame = None  # type: ignore

logger = get_game_logger(__name__)

SCREENSHOT_ENV = "RUMIKUBE_GUI_SCREENSHOT_PATH"
DOUBLE_CLICK_MS = 400

Rect = Tuple[int, int, int, int]


# --- Theme --------------------------------------------------------------------

BG = (22, 27, 34)
PANEL = (30, 36, 46)
PANEL_LINE = (54, 63, 77)
TEXT = (220, 226, 235)
SUB = (164, 174, 187)
ERR = (235, 99, 99)
OK = (110, 200, 140)
TILE_BG = (242, 238, 226)
TILE_FIXED_BG = (205, 200, 188)
TILE_NEW_LINE = (250, 200, 60)

COLOR_RGB = {
    "red": (200, 40, 40),
    "blue": (40, 90, 200),
    "yellow": (210, 150, 0),
    "black": (25, 25, 25),
    "joker": (150, 60, 170),
}

TILE_W = 44
TILE_H = 60
TILE_GAP = 8


# --- Pure helpers ---------------------------------------------------------------

def tile_label(tile: Tile) -> str:
    return tile.label()


def tile_rgb(tile: Tile) -> Tuple[int, int, int]:
    return COLOR_RGB.get(tile.color, TEXT)


def layout_row(
    count: int, origin: Tuple[int, int], max_width: int, tile_w: int = TILE_W, tile_h: int = TILE_H, gap: int = TILE_GAP
) -> List[Rect]:
    """Lay ``count`` tiles left to right, wrapping when ``max_width`` is reached."""
    per_line = max(1, (max_width + gap) // (tile_w + gap))
    x0, y0 = origin
    rects: List[Rect] = []
    for idx in range(count):
        line, col = divmod(idx, per_line)
        rects.append((x0 + col * (tile_w + gap), y0 + line * (tile_h + gap), tile_w, tile_h))
    return rects


def hit_test(rects: Sequence[Rect], pos: Tuple[int, int]) -> Optional[int]:
    px, py = pos
    for idx, (x, y, w, h) in enumerate(rects):
        if x <= px < x + w and y <= py < y + h:
            return idx
    return None


def control_states(engine: TileEngine) -> Dict[str, bool]:
    return {
        "validate": engine.can_validate(),
        "pass": engine.can_move(),
        "retract": engine.can_move() and bool(engine.new_tiles()),
        "draw": engine.can_draw(),
        "end": not engine.won and engine.phase == TurnPhase.END_TURN,
        "new": True,
    }


def status_text(engine: TileEngine, outcome: Optional[Outcome]) -> str:
    if engine.won:
        return "You won the game!"
    if outcome is not None and outcome.message:
        return outcome.message
    if not engine.initial_move_made:
        return f"Your first play must be worth at least {engine.ruleset.initial_meld_min_points} points."
    return f"Phase {engine.phase.value.lower()}, {engine.deck_count} tiles left in deck."


def resolve_screenshot_path() -> Optional[Path]:
    raw = os.environ.get(SCREENSHOT_ENV)
    if not raw:
        return None
    return Path(raw).expanduser()


# --- Drawing ------------------------------------------------------------------

def draw_panel(surface, rect: pygame.Rect, title: Optional[str], font):
    pygame.draw.rect(surface, PANEL, rect, border_radius=10)
    pygame.draw.rect(surface, PANEL_LINE, rect, width=2, border_radius=10)
    if title:
        surface.blit(font.render(title, True, SUB), (rect.x + 12, rect.y + 8))


def draw_button(surface, rect: pygame.Rect, label: str, font, enabled: bool = True):
    pygame.draw.rect(surface, PANEL_LINE if enabled else PANEL, rect, border_radius=8)
    pygame.draw.rect(surface, SUB, rect, width=1, border_radius=8)
    text = font.render(label, True, TEXT if enabled else SUB)
    surface.blit(text, text.get_rect(center=rect.center))


def draw_tile(surface, rect: pygame.Rect, tile: Tile, font):
    pygame.draw.rect(surface, TILE_FIXED_BG if tile.is_fixed else TILE_BG, rect, border_radius=6)
    outline = TILE_NEW_LINE if tile.is_new else PANEL_LINE
    pygame.draw.rect(surface, outline, rect, width=3 if tile.is_new else 1, border_radius=6)
    text = font.render(tile_label(tile), True, tile_rgb(tile))
    surface.blit(text, text.get_rect(center=rect.center))


# --- GUI entry ----------------------------------------------------------------

BUTTONS = [
    ("Validate (V)", "validate"),
    ("Pass (P)", "pass"),
    ("Take back (R)", "retract"),
    ("Draw (D)", "draw"),
    ("Next turn (E)", "end"),
    ("New game (N)", "new"),
]

KEYS = {
    "validate": ("K_v", "K_RETURN"),
    "pass": ("K_p",),
    "retract": ("K_r",),
    "draw": ("K_d",),
    "end": ("K_e",),
    "new": ("K_n",),
}


def launch_gui(seed: Optional[int] = None, ruleset: Optional[Ruleset] = None) -> None:  # pragma: no cover
    if pygame is None:
        raise ImportError("pygame is required for the GUI. Install it with `pip install rumikube[gui]`.")

    pygame.init()
    pygame.display.set_caption("Rummikube")
    screen = pygame.display.set_mode((1100, 640), pygame.RESIZABLE)
    clock = pygame.time.Clock()

    font = pygame.font.SysFont("arial", 18)
    title_font = pygame.font.SysFont("arial", 24, bold=True)
    tile_font = pygame.font.SysFont("arial", 26, bold=True)

    engine = TileEngine(ruleset=ruleset, seed=seed)
    last_outcome: Optional[Outcome] = None
    last_click: Tuple[Optional[Zone], Optional[int], int] = (None, None, 0)
    screenshot_path = resolve_screenshot_path()

    def trigger(action: str) -> None:
        nonlocal last_outcome
        if not control_states(engine)[action]:
            return
        if action == "validate":
            last_outcome = engine.validate_turn()
        elif action == "pass":
            last_outcome = engine.pass_turn()
        elif action == "retract":
            count = engine.retract_new_tiles()
            last_outcome = Outcome.success(f"{count} tile(s) taken back")
        elif action == "draw":
            last_outcome = engine.draw_tile()
        elif action == "end":
            last_outcome = engine.end_turn()
        elif action == "new":
            engine.new_game()
            last_outcome = None
        logger.debug(f"{action}: {last_outcome}")

    def run_loop():
        nonlocal screen, last_click, last_outcome
        running = True
        while running:
            W, H = screen.get_size()
            screen.fill(BG)
            margin = 10

            header = pygame.Rect(margin, margin, W - 2 * margin, 56)
            status = pygame.Rect(margin, H - margin - 32, W - 2 * margin, 32)
            body_h = status.y - header.bottom - 2 * margin
            board_panel = pygame.Rect(margin, header.bottom + margin, W - 2 * margin, int(body_h * 0.55))
            hand_panel = pygame.Rect(margin, board_panel.bottom + margin, W - 2 * margin, body_h - board_panel.height - margin)

            draw_panel(screen, header, None, font)
            screen.blit(title_font.render("Rummikube", True, TEXT), (header.x + 12, header.y + 14))
            states = control_states(engine)
            btn_rects: Dict[str, pygame.Rect] = {}
            bx = header.x + 170
            for label, key in BUTTONS:
                r = pygame.Rect(bx, header.y + 10, 140, 36)
                btn_rects[key] = r
                draw_button(screen, r, label, font, enabled=states[key])
                bx += r.width + 8

            draw_panel(screen, board_panel, f"Board ({len(engine.board)})", font)
            draw_panel(screen, hand_panel, f"Hand ({len(engine.hand)}), deck {engine.deck_count}", font)
            zone_rects: Dict[Zone, List[Rect]] = {
                Zone.BOARD: layout_row(len(engine.board), (board_panel.x + 12, board_panel.y + 36), board_panel.width - 24),
                Zone.HAND: layout_row(len(engine.hand), (hand_panel.x + 12, hand_panel.y + 36), hand_panel.width - 24),
            }
            for zone, tiles in ((Zone.BOARD, engine.board), (Zone.HAND, engine.hand)):
                for tile, rect in zip(tiles, zone_rects[zone]):
                    draw_tile(screen, pygame.Rect(rect), tile, tile_font)

            pygame.draw.rect(screen, PANEL, status, border_radius=8)
            failed = last_outcome is not None and not last_outcome.ok
            text = font.render(status_text(engine, last_outcome), True, ERR if failed else (OK if engine.won else SUB))
            screen.blit(text, (status.x + 10, status.y + 6))

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.VIDEORESIZE:
                    screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    for action, key_names in KEYS.items():
                        if any(event.key == getattr(pygame, name) for name in key_names):
                            trigger(action)
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    for key, r in btn_rects.items():
                        if r.collidepoint(event.pos):
                            trigger(key)
                            break
                    else:
                        now = pygame.time.get_ticks()
                        for zone, rects in zone_rects.items():
                            idx = hit_test(rects, event.pos)
                            if idx is None:
                                continue
                            prev_zone, prev_idx, prev_time = last_click
                            if prev_zone == zone and prev_idx == idx and now - prev_time <= DOUBLE_CLICK_MS:
                                target = Zone.BOARD if zone == Zone.HAND else Zone.HAND
                                if engine.move_tile(zone, target, idx):
                                    last_outcome = None
                                last_click = (None, None, 0)
                            else:
                                last_click = (zone, idx, now)
                            break

            pygame.display.flip()
            clock.tick(60)

        if screenshot_path is not None:
            pygame.image.save(screen, str(screenshot_path))
        pygame.quit()

    try:
        run_loop()
    except Exception:
        # Keep window open and display the traceback to avoid "silent close"
        tb = traceback.format_exc()
        logger.error(tb)
        lines = tb.splitlines()[-30:]
        W, H = screen.get_size()
        while True:
            screen.fill((15, 18, 23))
            screen.blit(title_font.render("GUI crashed, traceback:", True, ERR), (20, 20))
            y = 60
            for ln in lines:
                screen.blit(font.render(ln[:160], True, TEXT), (20, y))
                y += font.get_height() + 2
                if y > H - 40:
                    break
            pygame.display.flip()
            for e in pygame.event.get():
                if e.type == pygame.QUIT or (e.type == pygame.KEYDOWN and e.key == pygame.K_ESCAPE):
                    pygame.quit()
                    return


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Open the Rummikube window.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible deck order.")
    parser.add_argument("--same-color-runs", action="store_true", help="Runs must share one color.")
    parser.add_argument(
        "--partition-board", action="store_true", help="Accept a board made of several runs and sets."
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...).")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:  # pragma: no cover
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    launch_gui(seed=args.seed, ruleset=ruleset_from_args(args))


if __name__ == "__main__":  # allows standalone execution
    main()
