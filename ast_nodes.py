class ASTNode:
    # Optional source position (1-based). Parser sets these.
    line: int | None = None
    column: int | None = None


class Program(ASTNode):
    def __init__(self, body):
        self.body = body  # the single top-level statement


class Var(ASTNode):
    def __init__(self, name):
        self.name = name


class Const(ASTNode):
    def __init__(self, value):
        self.value = value


class Binary(ASTNode):
    def __init__(self, left, op, right):
        self.left = left
        self.op = op  # "+" or "-"
        self.right = right


class LessThan(ASTNode):
    def __init__(self, left, right):
        self.left = left
        self.right = right


class Assign(ASTNode):
    def __init__(self, target, value):
        # target is whatever the parser built; the compiler requires a Var
        self.target = target
        self.value = value


class If(ASTNode):
    def __init__(self, condition, then_branch, else_branch=None):
        self.condition = condition
        self.then_branch = then_branch
        self.else_branch = else_branch


class While(ASTNode):
    def __init__(self, condition, body):
        self.condition = condition
        self.body = body


class DoWhile(ASTNode):
    def __init__(self, body, condition):
        self.body = body
        self.condition = condition


class Empty(ASTNode):
    pass


class Seq(ASTNode):
    def __init__(self, first, second):
        self.first = first
        self.second = second


class ExprStmt(ASTNode):
    def __init__(self, expr):
        self.expr = expr


def seq_statements(node):
    # Blocks build left-leaning Seq chains; walk the `first` spine instead of recursing.
    tail = []
    while isinstance(node, Seq):
        tail.append(node.second)
        node = node.first
    tail.append(node)
    tail.reverse()
    return tail
