FETCH = "FETCH"
STORE = "STORE"
PUSH = "PUSH"
POP = "POP"
ADD = "ADD"
SUB = "SUB"
LT = "LT"
JZ = "JZ"
JNZ = "JNZ"
JMP = "JMP"
HALT = "HALT"

OPCODES = (FETCH, STORE, PUSH, POP, ADD, SUB, LT, JZ, JNZ, JMP, HALT)
JUMPS = (JZ, JNZ, JMP)


class BytecodeProgram:
    def __init__(self):
        self.instructions = []   # list of (OPCODE, arg)
        self.debug = []          # list of debug dicts ({"line": int, "column": int}) aligned with instructions

    def here(self):
        return len(self.instructions)

    def emit(self, opcode, arg=None, debug=None):
        # returns instruction index (useful for jumps)
        self.instructions.append((opcode, arg))
        self.debug.append(debug)
        return len(self.instructions) - 1

    def patch(self, index, arg):
        opcode, _ = self.instructions[index]
        self.instructions[index] = (opcode, arg)

    def __len__(self):
        return len(self.instructions)
