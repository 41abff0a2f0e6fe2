"""CHIP-8 stack operations."""

from chip8vm.constants import ADDRESS_MASK
from chip8vm.errors import StackOverflow, StackUnderflow
from chip8vm.state import StackState


def push(stack: StackState, address: int, pc: int = 0) -> StackState:
    """Push address onto stack, honouring the stack's depth limit."""
    if stack.limit is not None and stack.depth >= stack.limit:
        raise StackOverflow(pc, stack.limit)
    return stack.replace(frames=stack.frames + (int(address) & ADDRESS_MASK,))


def pop(stack: StackState, pc: int = 0) -> tuple[StackState, int]:
    """Pop address from stack."""
    if not stack.frames:
        raise StackUnderflow(pc)
    return stack.replace(frames=stack.frames[:-1]), stack.frames[-1]
