from ast_nodes import (
    Program, Var, Const, Binary, LessThan, Assign,
    If, While, DoWhile, Empty, Seq, ExprStmt,
)
from errors import TinyCSyntaxError
from lexer import Lexer


TOKEN_TEXT = {
    "DO": "'do'",
    "ELSE": "'else'",
    "IF": "'if'",
    "WHILE": "'while'",
    "LBRACE": "'{'",
    "RBRACE": "'}'",
    "LPAREN": "'('",
    "RPAREN": "')'",
    "PLUS": "'+'",
    "MINUS": "'-'",
    "LT": "'<'",
    "SEMI": "';'",
    "EQUAL": "'='",
    "INT": "integer",
    "IDENT": "identifier",
    "EOI": "end of input",
}


class Parser:
    # Grammar (EBNF):
    #   program    ::= statement EOI
    #   statement  ::= "if" paren_expr statement ["else" statement]
    #                | "while" paren_expr statement
    #                | "do" statement "while" paren_expr ";"
    #                | "{" {statement} "}"
    #                | expr ";"
    #                | ";"
    #   paren_expr ::= "(" expr ")"
    #   expr       ::= cond | id "=" expr
    #   cond       ::= sum ["<" sum]
    #   sum        ::= term {("+" | "-") term}
    #   term       ::= id | int | paren_expr

    def __init__(self, lexer):
        self.lexer = lexer
        self.current_token = self.lexer.get_next_token()

    # move to next token, but only if it matches what we expect
    def eat(self, token_type):
        if self.current_token.type != token_type:
            self.error_here(f"expected {TOKEN_TEXT.get(token_type, token_type)}")
        tok = self.current_token
        self.current_token = self.lexer.get_next_token()
        return tok

    def error_here(self, message):
        tok = self.current_token
        raise TinyCSyntaxError(message, tok.line, tok.column)

    @staticmethod
    def located(node, tok):
        node.line = tok.line
        node.column = tok.column
        return node

    # ---------- TOP LEVEL ----------
    def parse(self):
        tok = self.current_token
        try:
            body = self.statement()
        except RecursionError:
            self.error_here("program nested too deeply")
        if self.current_token.type != "EOI":
            self.error_here("expected end of input")
        return self.located(Program(body), tok)

    # ---------- STATEMENTS ----------
    def statement(self):
        kind = self.current_token.type

        if kind == "IF":
            return self.if_statement()
        if kind == "WHILE":
            return self.while_statement()
        if kind == "DO":
            return self.do_statement()
        if kind == "LBRACE":
            return self.block()

        if kind == "SEMI":
            tok = self.eat("SEMI")
            return self.located(Empty(), tok)

        tok = self.current_token
        expr = self.expr()
        self.eat("SEMI")
        return self.located(ExprStmt(expr), tok)

    def if_statement(self):
        tok = self.eat("IF")
        condition = self.paren_expr()
        then_branch = self.statement()

        else_branch = None
        if self.current_token.type == "ELSE":
            self.eat("ELSE")
            else_branch = self.statement()

        return self.located(If(condition, then_branch, else_branch), tok)

    def while_statement(self):
        tok = self.eat("WHILE")
        condition = self.paren_expr()
        body = self.statement()
        return self.located(While(condition, body), tok)

    def do_statement(self):
        tok = self.eat("DO")
        body = self.statement()
        self.eat("WHILE")
        condition = self.paren_expr()
        self.eat("SEMI")
        return self.located(DoWhile(body, condition), tok)

    def block(self):
        # "{" {statement} "}" chained left-associatively; "{}" is the empty statement
        tok = self.eat("LBRACE")
        node = None
        while self.current_token.type != "RBRACE":
            stmt = self.statement()
            if node is None:
                node = stmt
            else:
                node = self.located(Seq(node, stmt), tok)
        self.eat("RBRACE")

        if node is None:
            return self.located(Empty(), tok)
        return node

    # ---------- EXPRESSIONS ----------
    def paren_expr(self):
        self.eat("LPAREN")
        node = self.expr()
        self.eat("RPAREN")
        return node

    def expr(self):
        # Assignment is only considered when the lookahead is an identifier
        # before descending into cond; the target itself is checked by the compiler.
        if self.current_token.type != "IDENT":
            return self.cond()

        tok = self.current_token
        node = self.cond()
        if self.current_token.type == "EQUAL":
            self.eat("EQUAL")
            return self.located(Assign(node, self.expr()), tok)
        return node

    def cond(self):
        node = self.sum()
        if self.current_token.type == "LT":
            op_token = self.eat("LT")
            node = self.located(LessThan(node, self.sum()), op_token)
        return node

    def sum(self):
        node = self.term()

        while self.current_token.type in ("PLUS", "MINUS"):
            op_token = self.eat(self.current_token.type)
            right = self.term()
            op = "+" if op_token.type == "PLUS" else "-"
            node = self.located(Binary(node, op, right), op_token)

        return node

    def term(self):
        tok = self.current_token

        if tok.type == "IDENT":
            self.eat("IDENT")
            return self.located(Var(tok.value), tok)

        if tok.type == "INT":
            self.eat("INT")
            return self.located(Const(tok.value), tok)

        return self.paren_expr()


def parse(text):
    return Parser(Lexer(text)).parse()
