from bytecode import (
    BytecodeProgram,
    FETCH, STORE, PUSH, POP, ADD, SUB, LT, JZ, JNZ, JMP, HALT,
)
from ast_nodes import (
    Program, Var, Const, Binary, LessThan, Assign,
    If, While, DoWhile, Empty, Seq, ExprStmt,
    seq_statements,
)
from errors import TinyCSyntaxError
from parser import parse


class Compiler:
    def __init__(self):
        self.bc = BytecodeProgram()

    def _debug_for(self, node):
        line = getattr(node, "line", None)
        if line is None:
            return None
        return {"line": line, "column": getattr(node, "column", None)}

    def emit(self, opcode, arg=None, node=None):
        return self.bc.emit(opcode, arg, debug=self._debug_for(node))

    def error(self, message, node):
        raise TinyCSyntaxError(message, getattr(node, "line", None), getattr(node, "column", None))

    def global_index(self, node):
        name = node.name
        if len(name) != 1 or not ("a" <= name <= "z"):
            self.error(f"unsupported variable '{name}'", node)
        return ord(name) - ord("a")

    def compile(self, node):
        # entry point
        if not isinstance(node, Program):
            self.error("compiler expects a Program node at the top", node)

        try:
            self.compile_stmt(node.body)
        except RecursionError:
            self.error("program nested too deeply", node)
        self.emit(HALT, node=node)
        return self.bc

    # -------- statements --------
    def compile_stmt(self, node):
        if isinstance(node, ExprStmt):
            # every expression leaves exactly one value; a statement nets to zero
            self.compile_expr(node.expr)
            self.emit(POP, node=node)
            return

        if isinstance(node, Seq):
            for stmt in seq_statements(node):
                self.compile_stmt(stmt)
            return

        if isinstance(node, Empty):
            return

        if isinstance(node, If):
            self.compile_if(node)
            return

        if isinstance(node, While):
            self.compile_while(node)
            return

        if isinstance(node, DoWhile):
            self.compile_do_while(node)
            return

        self.error(f"unknown statement node: {node.__class__.__name__}", node)

    def compile_if(self, node):
        self.compile_expr(node.condition)
        jz_i = self.emit(JZ, None, node)

        self.compile_stmt(node.then_branch)

        if node.else_branch is None:
            self.bc.patch(jz_i, self.bc.here())
            return

        jmp_end_i = self.emit(JMP, None, node)
        self.bc.patch(jz_i, self.bc.here())

        self.compile_stmt(node.else_branch)
        self.bc.patch(jmp_end_i, self.bc.here())

    def compile_while(self, node):
        loop_start = self.bc.here()

        self.compile_expr(node.condition)
        jz_i = self.emit(JZ, None, node)

        self.compile_stmt(node.body)
        self.emit(JMP, loop_start, node)

        self.bc.patch(jz_i, self.bc.here())

    def compile_do_while(self, node):
        loop_start = self.bc.here()

        self.compile_stmt(node.body)
        self.compile_expr(node.condition)
        self.emit(JNZ, loop_start, node)

    # -------- expressions --------
    def compile_expr(self, node):
        if isinstance(node, Const):
            self.emit(PUSH, node.value, node)
            return

        if isinstance(node, Var):
            self.emit(FETCH, self.global_index(node), node)
            return

        if isinstance(node, Assign):
            if not isinstance(node.target, Var):
                self.error("cannot assign to this expression", node.target)
            index = self.global_index(node.target)
            self.compile_expr(node.value)
            self.emit(STORE, index, node)
            return

        if isinstance(node, Binary):
            self.compile_expr(node.left)
            self.compile_expr(node.right)
            if node.op == "+":
                self.emit(ADD, node=node)
            elif node.op == "-":
                self.emit(SUB, node=node)
            else:
                self.error(f"unknown binary operator: {node.op}", node)
            return

        if isinstance(node, LessThan):
            self.compile_expr(node.left)
            self.compile_expr(node.right)
            self.emit(LT, node=node)
            return

        self.error(f"unknown expression node: {node.__class__.__name__}", node)


def compile_source(text):
    return Compiler().compile(parse(text))
