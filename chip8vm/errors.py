"""CHIP-8 machine errors."""


class Chip8Error(Exception):
    """Base class for conditions that stop an instruction from completing."""


class StackUnderflow(Chip8Error):
    """00EE executed with an empty call stack."""

    def __init__(self, pc: int):
        self.pc = pc
        super().__init__(f"Return with empty stack at 0x{pc:03X}")


class StackOverflow(Chip8Error):
    """2NNN executed with the call stack at its configured limit."""

    def __init__(self, pc: int, limit: int):
        self.pc = pc
        self.limit = limit
        super().__init__(f"Call at 0x{pc:03X} exceeds stack limit of {limit}")


class LoadOverflow(Chip8Error):
    """ROM does not fit between the program start and the end of memory."""

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(f"ROM of {size} bytes exceeds available {capacity} bytes")
