"""CHIP-8 instruction decoding."""

import enum

from chex import dataclass

from chipjax.errors import DecodeError


class Op(enum.Enum):
    """Every instruction of the classic CHIP-8 instruction set."""
    CLS = enum.auto()        # 00E0
    RET = enum.auto()        # 00EE
    JP = enum.auto()         # 1NNN
    CALL = enum.auto()       # 2NNN
    SE_VX_NN = enum.auto()   # 3XNN
    SNE_VX_NN = enum.auto()  # 4XNN
    SE_VX_VY = enum.auto()   # 5XY0
    LD_VX_NN = enum.auto()   # 6XNN
    ADD_VX_NN = enum.auto()  # 7XNN
    LD_VX_VY = enum.auto()   # 8XY0
    OR = enum.auto()         # 8XY1
    AND = enum.auto()        # 8XY2
    XOR = enum.auto()        # 8XY3
    ADD_VX_VY = enum.auto()  # 8XY4
    SUB = enum.auto()        # 8XY5
    SHR = enum.auto()        # 8XY6
    SUBN = enum.auto()       # 8XY7
    SHL = enum.auto()        # 8XYE
    SNE_VX_VY = enum.auto()  # 9XY0
    LD_I = enum.auto()       # ANNN
    JP_V0 = enum.auto()      # BNNN
    RND = enum.auto()        # CXNN
    DRW = enum.auto()        # DXYN
    SKP = enum.auto()        # EX9E
    SKNP = enum.auto()       # EXA1
    LD_VX_DT = enum.auto()   # FX07
    LD_VX_K = enum.auto()    # FX0A
    LD_DT_VX = enum.auto()   # FX15
    LD_ST_VX = enum.auto()   # FX18
    ADD_I_VX = enum.auto()   # FX1E
    LD_F_VX = enum.auto()    # FX29
    LD_B_VX = enum.auto()    # FX33
    LD_I_VX = enum.auto()    # FX55
    LD_VX_I = enum.auto()    # FX65


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: Op
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


_SYSTEM_OPS = {0x00E0: Op.CLS, 0x00EE: Op.RET}

_FAMILY_OPS = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_VX_NN,
    0x4: Op.SNE_VX_NN,
    0x6: Op.LD_VX_NN,
    0x7: Op.ADD_VX_NN,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}

# 5XY0 and 9XY0 only exist with a zero low nibble
_REGISTER_SKIP_OPS = {0x5: Op.SE_VX_VY, 0x9: Op.SNE_VX_VY}

_ALU_OPS = {
    0x0: Op.LD_VX_VY,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_VX_VY,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

_KEY_OPS = {0x9E: Op.SKP, 0xA1: Op.SKNP}

_MISC_OPS = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I_VX,
    0x29: Op.LD_F_VX,
    0x33: Op.LD_B_VX,
    0x55: Op.LD_I_VX,
    0x65: Op.LD_VX_I,
}


def _lookup_op(instruction: int, family: int, n: int, nn: int) -> Op | None:
    if family == 0x0:
        return _SYSTEM_OPS.get(instruction)
    if family in _FAMILY_OPS:
        return _FAMILY_OPS[family]
    if family in _REGISTER_SKIP_OPS:
        return _REGISTER_SKIP_OPS[family] if n == 0 else None
    if family == 0x8:
        return _ALU_OPS.get(n)
    if family == 0xE:
        return _KEY_OPS.get(nn)
    return _MISC_OPS.get(nn)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components.

    Raises:
        DecodeError: if the word is not one of the CHIP-8 opcodes.
    """
    instruction = int(instruction) & 0xFFFF
    family = (instruction & 0xF000) >> 12
    n = instruction & 0x000F
    nn = instruction & 0x00FF

    op = _lookup_op(instruction, family, n, nn)
    if op is None:
        raise DecodeError(instruction)

    return DecodedInstruction(
        raw=instruction,
        op=op,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=n,
        nn=nn,
        nnn=instruction & 0x0FFF
    )


_MNEMONICS = {
    Op.CLS: "CLS",
    Op.RET: "RET",
    Op.JP: "JP 0x{nnn:03X}",
    Op.CALL: "CALL 0x{nnn:03X}",
    Op.SE_VX_NN: "SE V{x:X}, 0x{nn:02X}",
    Op.SNE_VX_NN: "SNE V{x:X}, 0x{nn:02X}",
    Op.SE_VX_VY: "SE V{x:X}, V{y:X}",
    Op.LD_VX_NN: "LD V{x:X}, 0x{nn:02X}",
    Op.ADD_VX_NN: "ADD V{x:X}, 0x{nn:02X}",
    Op.LD_VX_VY: "LD V{x:X}, V{y:X}",
    Op.OR: "OR V{x:X}, V{y:X}",
    Op.AND: "AND V{x:X}, V{y:X}",
    Op.XOR: "XOR V{x:X}, V{y:X}",
    Op.ADD_VX_VY: "ADD V{x:X}, V{y:X}",
    Op.SUB: "SUB V{x:X}, V{y:X}",
    Op.SHR: "SHR V{x:X}, V{y:X}",
    Op.SUBN: "SUBN V{x:X}, V{y:X}",
    Op.SHL: "SHL V{x:X}, V{y:X}",
    Op.SNE_VX_VY: "SNE V{x:X}, V{y:X}",
    Op.LD_I: "LD I, 0x{nnn:03X}",
    Op.JP_V0: "JP V0, 0x{nnn:03X}",
    Op.RND: "RND V{x:X}, 0x{nn:02X}",
    Op.DRW: "DRW V{x:X}, V{y:X}, {n}",
    Op.SKP: "SKP V{x:X}",
    Op.SKNP: "SKNP V{x:X}",
    Op.LD_VX_DT: "LD V{x:X}, DT",
    Op.LD_VX_K: "LD V{x:X}, K",
    Op.LD_DT_VX: "LD DT, V{x:X}",
    Op.LD_ST_VX: "LD ST, V{x:X}",
    Op.ADD_I_VX: "ADD I, V{x:X}",
    Op.LD_F_VX: "LD F, V{x:X}",
    Op.LD_B_VX: "LD B, V{x:X}",
    Op.LD_I_VX: "LD [I], V{x:X}",
    Op.LD_VX_I: "LD V{x:X}, [I]",
}


def disassemble(instruction: int) -> str:
    """Render a 16-bit word as an assembly mnemonic; unknown words become data."""
    try:
        decoded = decode(instruction)
    except DecodeError:
        return f"DW 0x{int(instruction) & 0xFFFF:04X}"
    return _MNEMONICS[decoded.op].format(
        x=decoded.x, y=decoded.y, n=decoded.n, nn=decoded.nn, nnn=decoded.nnn
    )
