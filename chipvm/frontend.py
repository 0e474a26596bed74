"""pygame collaborators: window, keyboard and beeper."""

import contextlib
import os
from typing import Iterator, List, Tuple

import jax.numpy as jnp
import numpy as np
import pygame

from chipvm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, NUM_KEYS
from chipvm.rendering import chip8_display_to_rgb

# Host key for each CHIP-8 key 0x0..0xF
KEYMAP = [
    pygame.K_x,  # 0
    pygame.K_1,  # 1
    pygame.K_2,  # 2
    pygame.K_3,  # 3
    pygame.K_q,  # 4
    pygame.K_w,  # 5
    pygame.K_e,  # 6
    pygame.K_a,  # 7
    pygame.K_s,  # 8
    pygame.K_d,  # 9
    pygame.K_z,  # A
    pygame.K_c,  # B
    pygame.K_4,  # C
    pygame.K_r,  # D
    pygame.K_f,  # E
    pygame.K_v,  # F
]
KEY_INDEX = {key: index for index, key in enumerate(KEYMAP)}

SAMPLE_RATE = 44100
TONE_HZ = 440
BEEP_SECONDS = 0.1


class PygameKeys:
    """Tracks host key events as 16 pressed/released flags."""

    def __init__(self):
        self.pressed: List[bool] = [False] * NUM_KEYS
        self._quit = False

    def handle_event(self, event) -> None:
        if event.type == pygame.QUIT:
            self._quit = True
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self._quit = True
            elif event.key in KEY_INDEX:
                self.pressed[KEY_INDEX[event.key]] = True
        elif event.type == pygame.KEYUP:
            if event.key in KEY_INDEX:
                self.pressed[KEY_INDEX[event.key]] = False

    def poll(self) -> List[bool]:
        for event in pygame.event.get():
            self.handle_event(event)
        return list(self.pressed)

    def quit_requested(self) -> bool:
        if not self._quit:
            for event in pygame.event.get(pygame.QUIT):
                self.handle_event(event)
        return self._quit


class PygameDisplay:
    """Window showing the 64x32 display upscaled by ``scale``."""

    def __init__(
        self,
        title: str,
        scale: int,
        on_color: Tuple[int, int, int],
        off_color: Tuple[int, int, int],
    ):
        self.scale = scale
        self.on_color = on_color
        self.off_color = off_color
        self.screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
        pygame.display.set_caption(f"CHIP-8 Emu: {title}")

    def present(self, display: jnp.ndarray) -> None:
        frame = chip8_display_to_rgb(display, self.scale, self.on_color, self.off_color)
        # surfarray expects (width, height, 3)
        surface = pygame.surfarray.make_surface(frame.swapaxes(0, 1))
        self.screen.blit(surface, (0, 0))
        pygame.display.flip()


def make_beep_wave(
    sample_rate: int = SAMPLE_RATE,
    tone_hz: int = TONE_HZ,
    duration: float = BEEP_SECONDS,
    volume: float = 0.2,
    channels: int = 1,
) -> np.ndarray:
    """Square wave samples as int16, shaped for the mixer's channel count."""
    n_samples = int(sample_rate * duration)
    t = np.arange(n_samples) / sample_rate
    wave = np.where(np.sin(2 * np.pi * tone_hz * t) >= 0, 1.0, -1.0)
    samples = (wave * volume * 32767).astype(np.int16)
    if channels > 1:
        samples = np.repeat(samples[:, None], channels, axis=1)
    return samples


class PygameSound:
    """Plays a short beep through the pygame mixer."""

    def __init__(self):
        _, _, channels = pygame.mixer.get_init()
        self.sound = pygame.sndarray.make_sound(make_beep_wave(channels=channels))

    def beep(self) -> None:
        self.sound.play()


@contextlib.contextmanager
def open_frontend(
    rom_path: str,
    scale: int,
    on_color: Tuple[int, int, int],
    off_color: Tuple[int, int, int],
) -> Iterator[Tuple[PygameKeys, PygameDisplay, PygameSound]]:
    """Initialize pygame and yield keys, display and sound; always quits pygame."""
    pygame.init()
    try:
        pygame.mixer.init(frequency=SAMPLE_RATE, size=-16)
        keys = PygameKeys()
        display = PygameDisplay(os.path.basename(rom_path), scale, on_color, off_color)
        sound = PygameSound()
        yield keys, display, sound
    finally:
        pygame.quit()
