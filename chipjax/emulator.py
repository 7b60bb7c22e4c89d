"""Main CHIP-8 emulator execution engine."""

import enum
import time
from typing import Optional, Union

import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction, Op, decode
from chipjax.constants import MEMORY_SIZE
from chipjax.errors import DecodeError, OutOfBounds
from chipjax.logging import EmulatorLogger, get_logger, build_progress_bar
from chipjax.instructions.system import execute_clear_screen, execute_return
from chipjax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chipjax.instructions.alu import execute_alu_operation
from chipjax.instructions.memory import (
    RandomSource, execute_set, execute_add, execute_set_index, execute_random
)
from chipjax.instructions.display import execute_display
from chipjax.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers,
    key_is_pressed
)


class StepResult(enum.Enum):
    """Outcome of a single ``step``."""
    EXECUTED = "executed"
    WAITING_FOR_KEY = "waiting_for_key"
    UNKNOWN_OPCODE = "unknown_opcode"


_HANDLERS = {
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_VX_NN: execute_skip_if_equal_immediate,
    Op.SNE_VX_NN: execute_skip_if_not_equal_immediate,
    Op.SE_VX_VY: execute_skip_if_equal_register,
    Op.LD_VX_NN: execute_set,
    Op.ADD_VX_NN: execute_add,
    Op.LD_VX_VY: execute_alu_operation,
    Op.OR: execute_alu_operation,
    Op.AND: execute_alu_operation,
    Op.XOR: execute_alu_operation,
    Op.ADD_VX_VY: execute_alu_operation,
    Op.SUB: execute_alu_operation,
    Op.SHR: execute_alu_operation,
    Op.SUBN: execute_alu_operation,
    Op.SHL: execute_alu_operation,
    Op.SNE_VX_VY: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key,
    Op.SKNP: execute_skip_if_key,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_VX_K: execute_wait_for_key,
    Op.LD_DT_VX: execute_set_delay_timer,
    Op.LD_ST_VX: execute_set_sound_timer,
    Op.ADD_I_VX: execute_add_to_index,
    Op.LD_F_VX: execute_font_character,
    Op.LD_B_VX: execute_bcd_conversion,
    Op.LD_I_VX: execute_store_registers,
    Op.LD_VX_I: execute_load_registers,
}


def execute(
    state: EmulatorState,
    instruction: Union[int, DecodedInstruction],
    random_source: Optional[RandomSource] = None,
) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    Handlers expect ``state.pc`` to already point past the instruction, as
    left by ``fetch``.

    Raises:
        DecodeError: if ``instruction`` is a raw word that is not an opcode.
    """
    if not isinstance(instruction, DecodedInstruction):
        instruction = decode(instruction)

    if instruction.op is Op.RND:
        return execute_random(state, instruction, random_source)
    return _HANDLERS[instruction.op](state, instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory.

    Raises:
        OutOfBounds: if the instruction word would extend past the end of memory.
    """
    pc = int(state.pc)
    if pc + 1 >= MEMORY_SIZE:
        raise OutOfBounds(pc + 1, pc=pc)
    instruction = _pack_u16(state.memory[pc], state.memory[pc + 1])
    return state.replace(pc=state.pc + 2), instruction


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement the delay and sound timers by one, stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def step(
    state: EmulatorState,
    random_source: Optional[RandomSource] = None,
    logger: Optional[EmulatorLogger] = None,
) -> tuple[EmulatorState, StepResult]:
    """Run one fetch/decode/execute cycle and tick the timers.

    An FX0A with no key down returns the input state untouched together with
    ``StepResult.WAITING_FOR_KEY``. Unknown opcodes are logged and skipped.

    Raises:
        OutOfBounds: on fetches or operand addresses outside memory.
        StackOverflow, StackUnderflow: on CALL/RET beyond the 16 stack frames.
    """
    if logger is None:
        logger = get_logger()

    pc = int(state.pc)
    fetched_state, word = fetch(state)
    word = int(word)
    logger.log_trace(pc, word)

    try:
        instruction = decode(word)
    except DecodeError:
        logger.log_decode_error(DecodeError(word, pc))
        return tick_timers(fetched_state), StepResult.UNKNOWN_OPCODE

    if instruction.op is Op.LD_VX_K and not key_is_pressed(state):
        return state, StepResult.WAITING_FOR_KEY

    new_state = execute(fetched_state, instruction, random_source)
    return tick_timers(new_state), StepResult.EXECUTED


def run(
    state: EmulatorState,
    cycles: int,
    progress: bool = False,
    random_source: Optional[RandomSource] = None,
    logger: Optional[EmulatorLogger] = None,
) -> tuple[EmulatorState, StepResult, int]:
    """Run up to ``cycles`` steps, stopping early when the program waits for a key.

    Returns the final state, the result of the last step and the number of
    cycles executed.
    """
    if logger is None:
        logger = get_logger()

    result = StepResult.EXECUTED
    executed = 0
    start = time.time()
    progress_bar = build_progress_bar(cycles) if progress else None
    try:
        for _ in range(cycles):
            state, result = step(state, random_source, logger)
            if result is StepResult.WAITING_FOR_KEY:
                break
            executed += 1
            if progress_bar is not None:
                progress_bar.update(1)
    finally:
        if progress_bar is not None:
            progress_bar.close()

    logger.log_run_summary(executed, time.time() - start, waiting=result is StepResult.WAITING_FOR_KEY)
    return state, result, executed
