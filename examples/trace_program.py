"""Trace a small built-in program instruction by instruction."""

from chipjax import Chip8, display_to_text
from chipjax.logging import EmulatorLogger

# Counts V0 from 0 to 9, drawing each digit with the built-in font.
PROGRAM = [
    0x6000,  # 0x200: LD V0, 0x00
    0x6108,  # 0x202: LD V1, 0x08     x
    0x6208,  # 0x204: LD V2, 0x08     y
    0xF029,  # 0x206: LD F, V0
    0x00E0,  # 0x208: CLS
    0xD125,  # 0x20A: DRW V1, V2, 5
    0x7001,  # 0x20C: ADD V0, 0x01
    0x300A,  # 0x20E: SE V0, 0x0A
    0x1206,  # 0x210: JP 0x206
    0x1212,  # 0x212: JP 0x212
]


if __name__ == "__main__":
    logger = EmulatorLogger(log_level="DEBUG")
    machine = Chip8(logger=logger)
    machine.load_program(b"".join(word.to_bytes(2, "big") for word in PROGRAM))

    for _ in range(60):
        machine.step()
        if machine.redraw:
            machine.consume_frame()

    print(display_to_text(machine.state.display))
