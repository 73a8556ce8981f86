import string

from bytecode import (
    BytecodeProgram,
    FETCH, STORE, PUSH, POP, ADD, SUB, LT, JZ, JNZ, JMP, HALT,
)
from errors import TinyCError, TinyCRuntimeError


GLOBAL_NAMES = string.ascii_lowercase


class VM:
    """Stack machine for compiled Tiny-C programs.

    The 26 globals (a..z) live as long as the VM does, so successive calls
    to run() see each other's assignments. The operand stack, instruction
    list and ip are reset at the start of every run.
    """

    def __init__(self):
        self.globals = [0] * len(GLOBAL_NAMES)

        self.ip = 0                 # instruction pointer (where we are)
        self.stack = []             # stack for values
        self.instructions = []
        self.debug = []

        self.trace_enabled = False

    def trace_on(self):
        self.trace_enabled = True

    def reset(self):
        self.globals = [0] * len(GLOBAL_NAMES)

    def load(self, program):
        if isinstance(program, BytecodeProgram):
            self.instructions = list(program.instructions)
            self.debug = list(program.debug)
        else:
            self.instructions = list(program)
            self.debug = [None] * len(self.instructions)
        self.ip = 0
        self.stack = []

    def _debug_at_ip(self, ip: int):
        if ip < 0 or ip >= len(self.debug):
            return None
        return self.debug[ip]

    def error(self, message: str, ip: int | None = None) -> TinyCRuntimeError:
        if ip is None:
            ip = self.ip
        dbg = self._debug_at_ip(ip) or {}
        return TinyCRuntimeError(message, ip=ip, line=dbg.get("line"), column=dbg.get("column"))

    def check_ip(self, target, context: str):
        if not isinstance(target, int) or isinstance(target, bool):
            raise Exception(f"Invalid jump target for {context}: {target}")
        if target < 0 or target >= len(self.instructions):
            raise Exception(f"Invalid jump target for {context}: {target}")

    def check_global(self, index):
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < len(self.globals):
            raise Exception(f"Global index out of range: {index}")
        return index

    def pop(self):
        if not self.stack:
            raise Exception("Stack underflow")
        return self.stack.pop()

    def top(self):
        if not self.stack:
            raise Exception("Stack underflow")
        return self.stack[-1]

    def step(self) -> bool:
        if self.ip < 0 or self.ip >= len(self.instructions):
            raise Exception("ran past end of code without HALT")
        opcode, arg = self.instructions[self.ip]

        if self.trace_enabled:
            print(f"TRACE ip={self.ip:04d} {(opcode, arg)!r} stack={self.stack}")

        self.ip += 1

        if opcode == PUSH:
            if not isinstance(arg, int):
                raise Exception(f"PUSH expects an integer operand, got {arg!r}")
            self.stack.append(arg)
            return False

        if opcode == POP:
            self.pop()
            return False

        if opcode == FETCH:
            self.stack.append(self.globals[self.check_global(arg)])
            return False

        if opcode == STORE:
            # assignment is an expression: the value stays on the stack
            self.globals[self.check_global(arg)] = self.top()
            return False

        if opcode in (ADD, SUB, LT):
            b = self.pop()
            a = self.pop()
            if opcode == ADD:
                self.stack.append(a + b)
            elif opcode == SUB:
                self.stack.append(a - b)
            else:
                self.stack.append(1 if a < b else 0)
            return False

        if opcode == JMP:
            self.check_ip(arg, "JMP")
            self.ip = arg
            return False

        if opcode in (JZ, JNZ):
            self.check_ip(arg, opcode)
            v = self.pop()
            if (v == 0) == (opcode == JZ):
                self.ip = arg
            return False

        if opcode == HALT:
            if self.stack:
                raise Exception(f"Stack not empty at HALT: {self.stack}")
            return True

        raise Exception(f"Unknown opcode: {opcode}")

    def run(self, program):
        self.load(program)
        try:
            while True:
                halted = self.step()
                if halted:
                    break
        except TinyCError:
            raise
        except Exception as e:
            # the failing instruction is the one before the advanced ip
            raise self.error(str(e), ip=max(self.ip - 1, 0))

    # -------- output --------
    def nonzero_globals(self):
        return [(name, value) for name, value in zip(GLOBAL_NAMES, self.globals) if value != 0]

    def format_globals(self):
        return [f"{name} = {value}" for name, value in self.nonzero_globals()]
