from typing import NamedTuple

from errors import LexicalError


class SourcePosition(NamedTuple):
    line: int
    column: int


KEYWORDS = {
    "do": "DO",
    "else": "ELSE",
    "if": "IF",
    "while": "WHILE",
}

PUNCTUATION = {
    "{": "LBRACE",
    "}": "RBRACE",
    "(": "LPAREN",
    ")": "RPAREN",
    "+": "PLUS",
    "-": "MINUS",
    "<": "LT",
    ";": "SEMI",
    "=": "EQUAL",
}


class Token:
    def __init__(self, type, value=None, line=1, column=1):
        self.type = type
        self.value = value
        self.line = line
        self.column = column

    @property
    def pos(self) -> SourcePosition:
        return SourcePosition(self.line, self.column)

    def __repr__(self):
        if self.value is not None:
            return f"{self.type}({self.value})"
        return f"{self.type}"


class Lexer:
    """Pull-based tokenizer for Tiny-C source.

    Only spaces and newlines count as whitespace. Identifiers are runs of
    lowercase letters and underscores; the code generator decides which of
    them name a global. Once the input is exhausted every call returns EOI.
    """

    def __init__(self, text):
        self.text = text
        self.pos = 0
        self.current_char = text[0] if text else None
        self.line = 1
        self.column = 1

    def advance(self):
        # track line/column based on current_char before moving
        if self.current_char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.pos += 1
        if self.pos >= len(self.text):
            self.current_char = None
        else:
            self.current_char = self.text[self.pos]

    def skip_whitespace(self):
        while self.current_char is not None and self.current_char in " \n":
            self.advance()

    def read_identifier(self):
        start_line, start_col = self.line, self.column
        result = ""
        while self.current_char is not None and ("a" <= self.current_char <= "z" or self.current_char == "_"):
            result += self.current_char
            self.advance()

        kind = KEYWORDS.get(result)
        if kind is not None:
            return Token(kind, line=start_line, column=start_col)
        return Token("IDENT", result, line=start_line, column=start_col)

    def read_number(self):
        start_line, start_col = self.line, self.column
        value = 0
        while self.current_char is not None and "0" <= self.current_char <= "9":
            value = value * 10 + (ord(self.current_char) - ord("0"))
            self.advance()
        return Token("INT", value, line=start_line, column=start_col)

    def get_next_token(self):
        self.skip_whitespace()

        if self.current_char is None:
            return Token("EOI", line=self.line, column=self.column)

        ch = self.current_char

        if "a" <= ch <= "z":
            return self.read_identifier()

        if "0" <= ch <= "9":
            return self.read_number()

        kind = PUNCTUATION.get(ch)
        if kind is not None:
            start_line, start_col = self.line, self.column
            self.advance()
            return Token(kind, line=start_line, column=start_col)

        raise LexicalError(f"illegal character {ch!r}", self.line, self.column)

    def next(self):
        tok = self.get_next_token()
        return tok.pos, tok


def tokenize(text):
    lexer = Lexer(text)
    tokens = []
    while True:
        tok = lexer.get_next_token()
        tokens.append(tok)
        if tok.type == "EOI":
            return tokens
