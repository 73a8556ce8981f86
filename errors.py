class TinyCError(Exception):
    pass


class SourceError(TinyCError):
    # Errors tied to a source location, reported as input:<line>:<col>:<message>
    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def format(self) -> str:
        return f"input:{self.line or 0}:{self.column or 0}:{self.message}"

    def __str__(self) -> str:
        return self.format()


class LexicalError(SourceError):
    pass


class TinyCSyntaxError(SourceError):
    pass


class TinyCRuntimeError(TinyCError):
    def __init__(self, message: str, ip: int | None = None, line: int | None = None, column: int | None = None):
        super().__init__(message)
        self.message = message
        self.ip = ip
        self.line = line
        self.column = column

    def format(self, indent: str = "") -> str:
        lines = [f"{indent}Runtime error: {self.message}"]
        if self.ip is not None:
            loc = f"ip={self.ip:04d}"
            if self.line is not None:
                loc += f" (input:{self.line}:{self.column})"
            lines.append(f"{indent}  {loc}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.format()
