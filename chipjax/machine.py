"""Stateful CHIP-8 machine for interactive drivers.

Wraps the functional core (``EmulatorState`` plus ``step``) behind the small
interface a front end needs: load a program, forward key transitions, step,
and pick up frames when the redraw flag is raised.
"""

from typing import Optional

import jax
import numpy as np

from chipjax.emulator import StepResult, step, run
from chipjax.errors import Chip8Error, MachineHalted
from chipjax.instructions.memory import RandomSource
from chipjax.logging import EmulatorLogger, get_logger
from chipjax.state import (
    EmulatorState, Quirks, ProgramData, create_state, reset, load_program,
    set_key, clear_redraw,
)


class Chip8:
    """CHIP-8 machine holding its own state between calls.

    Args:
        rng: PRNG key used for CXNN when no ``random_source`` is given
        quirks: Behaviour switches for ambiguous opcodes
        random_source: Optional zero-argument callable returning random bytes
        logger: Logger for loads, unknown opcodes and faults
    """

    def __init__(
        self,
        rng: Optional[jax.random.PRNGKey] = None,
        quirks: Quirks = Quirks(),
        random_source: Optional[RandomSource] = None,
        logger: Optional[EmulatorLogger] = None,
    ):
        if rng is None:
            rng = jax.random.PRNGKey(0)
        self.random_source = random_source
        self.logger = logger if logger is not None else get_logger()
        self.state: EmulatorState = create_state(rng, quirks)
        self.fault: Optional[Chip8Error] = None
        self.cycles = 0

    def reset(self):
        """Power-cycle the machine; clears any recorded fault."""
        self.state = reset(self.state)
        self.fault = None
        self.cycles = 0

    def load_program(self, data: ProgramData):
        """Copy program bytes to 0x200. On CapacityExceeded nothing changes."""
        self.state = load_program(self.state, data)
        self.logger.log_rom_loaded(len(data))

    def load_rom(self, filename: str):
        with open(filename, 'rb') as f:
            rom_data = f.read()
        self.state = load_program(self.state, rom_data)
        self.logger.log_rom_loaded(len(rom_data), filename)

    def set_key(self, index: int, pressed: bool):
        self.state = set_key(self.state, index, pressed)

    def _check_running(self):
        if self.fault is not None:
            raise MachineHalted(self.fault)

    def step(self) -> StepResult:
        """Execute one cycle.

        Raises:
            MachineHalted: if an earlier step faulted and ``reset`` was not called.
            Chip8Error: the fault itself, the first time it happens.
        """
        self._check_running()
        try:
            self.state, result = step(self.state, self.random_source, self.logger)
        except Chip8Error as error:
            self.fault = error
            self.logger.log_fault(error)
            raise
        if result is not StepResult.WAITING_FOR_KEY:
            self.cycles += 1
        return result

    def run(self, cycles: int, progress: bool = False) -> StepResult:
        """Execute up to ``cycles`` steps without a driver loop."""
        self._check_running()
        try:
            self.state, result, executed = run(
                self.state, cycles, progress, self.random_source, self.logger
            )
        except Chip8Error as error:
            self.fault = error
            self.logger.log_fault(error)
            raise
        self.cycles += executed
        return result

    @property
    def framebuffer(self) -> np.ndarray:
        """Read-only (32, 64) array of 0/1 pixels, indexed [row, column]."""
        pixels = np.asarray(self.state.display, dtype=np.uint8).T.copy()
        pixels.setflags(write=False)
        return pixels

    @property
    def redraw(self) -> bool:
        return bool(self.state.draw_flag)

    def consume_frame(self) -> np.ndarray:
        """Return the framebuffer and clear the redraw flag."""
        frame = self.framebuffer
        self.state = clear_redraw(self.state)
        return frame

    @property
    def sound_active(self) -> bool:
        return int(self.state.sound_timer) > 0

    @property
    def pc(self) -> int:
        return int(self.state.pc)
