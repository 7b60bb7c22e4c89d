"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chipjax.constants import ADDRESS_MASK, STACK_SIZE
from chipjax.errors import StackOverflow, StackUnderflow
from chipjax.state import StackState


def depth(stack: StackState) -> int:
    """Number of return addresses currently on the stack."""
    return int(stack.pointer)


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack."""
    if depth(stack) >= STACK_SIZE:
        raise StackOverflow(int(address))
    masked_address = address & ADDRESS_MASK
    new_data = stack.data.at[stack.pointer].set(masked_address)
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    if depth(stack) <= 0:
        raise StackUnderflow()
    new_pointer = stack.pointer - 1
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
