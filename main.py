"""
CHIP-8 host: pygame window, keyboard polling and 60 Hz pacing
"""

import sys

import hydra
import jax
import pygame
from omegaconf import DictConfig

from chip8vm import (
    Chip8Error, NO_KEY, SCREEN_HEIGHT, SCREEN_WIDTH, create_state, load_rom_file, run_frame, run_frames,
)
from chip8vm.logging import logger, set_log_level
from chip8vm.rendering import create_color_scheme, display_to_rgb, format_display

# COSMAC VIP keypad mapped onto the left side of a QWERTY keyboard:
#   1 2 3 C      1 2 3 4
#   4 5 6 D  ->  Q W E R
#   7 8 9 E      A S D F
#   A 0 B F      Z X C V
# Order matters: the first held key wins.
KEY_MAP = [
    (pygame.K_1, 0x1), (pygame.K_2, 0x2), (pygame.K_3, 0x3), (pygame.K_4, 0xC),
    (pygame.K_q, 0x4), (pygame.K_w, 0x5), (pygame.K_e, 0x6), (pygame.K_r, 0xD),
    (pygame.K_a, 0x7), (pygame.K_s, 0x8), (pygame.K_d, 0x9), (pygame.K_f, 0xE),
    (pygame.K_z, 0xA), (pygame.K_x, 0x0), (pygame.K_c, 0xB), (pygame.K_v, 0xF),
]


def poll_key() -> int:
    """Return the logical key currently held, or NO_KEY."""
    pressed = pygame.key.get_pressed()
    for physical, logical in KEY_MAP:
        if pressed[physical]:
            return logical
    return NO_KEY


def create_machine(cfg: DictConfig):
    state = create_state(jax.random.PRNGKey(cfg.seed), stack_limit=cfg.stack_limit)
    return load_rom_file(state, cfg.rom)


def run_headless(cfg: DictConfig) -> int:
    """Run a fixed number of frames without a window and print the screen."""
    try:
        state = create_machine(cfg)
        state = run_frames(
            state, cfg.frames, instructions_per_frame=cfg.instructions_per_frame, progress=True
        )
    except (Chip8Error, OSError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    print(format_display(state.display))
    if state.unknown_opcodes:
        logger.warning(f"{state.unknown_opcodes} unknown opcodes executed")
    return 0


def run_emulator(cfg: DictConfig) -> int:
    """Main emulator loop."""
    try:
        state = create_machine(cfg)
    except (Chip8Error, OSError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    on_color, off_color = create_color_scheme(cfg.color_scheme)

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH * cfg.scale, SCREEN_HEIGHT * cfg.scale))
    pygame.display.set_caption(f"CHIP-8 - {cfg.rom}")
    clock = pygame.time.Clock()

    running = True
    paused = False
    logger.info("Controls: ESC=Quit, P=Pause, R=Reset")

    while running:
        clock.tick(cfg.fps)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_p:
                    paused = not paused
                    logger.info("Paused" if paused else "Resumed")
                elif event.key == pygame.K_r:
                    state = create_machine(cfg)
                    paused = False
                    logger.info("Reset")

        if not paused:
            try:
                state = run_frame(state, poll_key(), cfg.instructions_per_frame)
            except Chip8Error as e:
                logger.error(f"{type(e).__name__}: {e} (R to reset)")
                paused = True

        frame = display_to_rgb(state.display, cfg.scale, on_color, off_color)
        # pygame surfaces are indexed [x, y]
        pygame.surfarray.blit_array(screen, frame.swapaxes(0, 1))
        pygame.display.flip()

    pygame.quit()
    return 0


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> None:
    set_log_level(cfg.log_level)
    status = run_headless(cfg) if cfg.headless else run_emulator(cfg)
    if status:
        sys.exit(status)


if __name__ == "__main__":
    main()
