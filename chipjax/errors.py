"""CHIP-8 emulator error types."""

from typing import Optional


class Chip8Error(Exception):
    """Base class for all emulator errors."""


class CapacityExceeded(Chip8Error):
    """Program does not fit in the memory above PROGRAM_START."""

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(f"Program of {size} bytes exceeds capacity of {capacity} bytes")


class OutOfBounds(Chip8Error):
    """Memory access outside the 4 KiB address space."""

    def __init__(self, address: int, pc: Optional[int] = None):
        self.address = address
        self.pc = pc
        location = f" at pc=0x{pc:03X}" if pc is not None else ""
        super().__init__(f"Memory access out of bounds: 0x{address:04X}{location}")


class DecodeError(Chip8Error):
    """Instruction word does not map to any CHIP-8 opcode."""

    def __init__(self, opcode: int, pc: Optional[int] = None):
        self.opcode = opcode
        self.pc = pc
        location = f" at pc=0x{pc:03X}" if pc is not None else ""
        super().__init__(f"Unknown opcode 0x{opcode:04X}{location}")


class StackOverflow(Chip8Error):
    """CALL with all stack frames in use."""

    def __init__(self, pc: Optional[int] = None):
        self.pc = pc
        location = f" at pc=0x{pc:03X}" if pc is not None else ""
        super().__init__(f"Call stack overflow{location}")


class StackUnderflow(Chip8Error):
    """RET with an empty call stack."""

    def __init__(self, pc: Optional[int] = None):
        self.pc = pc
        location = f" at pc=0x{pc:03X}" if pc is not None else ""
        super().__init__(f"Return with empty call stack{location}")


class MachineHalted(Chip8Error):
    """Machine stopped by an earlier fatal fault."""

    def __init__(self, fault: Chip8Error):
        self.fault = fault
        super().__init__(f"Machine halted after fault: {fault}")
