import sys
import traceback

from vm import VM
from compiler import compile_source
from ast_nodes import seq_statements
from errors import TinyCError, TinyCSyntaxError
from lexer import Lexer
from parser import Parser


USAGE = """Usage:
  python cli.py              read one program per line from stdin
  python cli.py run <file.tc>
  python cli.py parse <file.tc>
  python cli.py build <file.tc>
  python cli.py repl         interactive; reports an error and continues with the next line
  (optional) --trace to print every executed instruction
  (optional) --debug to show Python traceback"""


# AST printer for `cli.py parse`: one node per line, tagged with its line:col
def ast_to_dict(node):
    if node is None:
        return None

    t = node.__class__.__name__
    d = {"type": t}
    if node.line is not None:
        d["pos"] = f"{node.line}:{node.column}"

    if t == "Program":
        d["body"] = ast_to_dict(node.body)
    elif t == "Var":
        d["name"] = node.name
    elif t == "Const":
        d["value"] = node.value
    elif t == "Binary":
        d["op"] = node.op
        d["left"] = ast_to_dict(node.left)
        d["right"] = ast_to_dict(node.right)
    elif t == "LessThan":
        d["left"] = ast_to_dict(node.left)
        d["right"] = ast_to_dict(node.right)
    elif t == "Assign":
        d["target"] = ast_to_dict(node.target)
        d["value"] = ast_to_dict(node.value)
    elif t == "If":
        d["condition"] = ast_to_dict(node.condition)
        d["then_branch"] = ast_to_dict(node.then_branch)
        d["else_branch"] = ast_to_dict(node.else_branch)
    elif t == "While":
        d["condition"] = ast_to_dict(node.condition)
        d["body"] = ast_to_dict(node.body)
    elif t == "DoWhile":
        d["body"] = ast_to_dict(node.body)
        d["condition"] = ast_to_dict(node.condition)
    elif t == "Seq":
        d["statements"] = [ast_to_dict(s) for s in seq_statements(node)]
    elif t == "ExprStmt":
        d["expr"] = ast_to_dict(node.expr)
    elif t == "Empty":
        pass
    else:
        d["raw"] = str(node)

    return d


SCALAR_FIELDS = ("name", "value", "op")


def render_tree(d, indent=0):
    sp = "  " * indent
    head = d["type"]
    for key in SCALAR_FIELDS:
        if key in d:
            head += f" {key}={d[key]}"
    if "pos" in d:
        head += f" @{d['pos']}"
    lines = [sp + head]

    for key, child in d.items():
        if isinstance(child, dict):
            lines.append(f"{sp}  {key}:")
            lines.extend(render_tree(child, indent + 2))
        elif isinstance(child, list):
            lines.append(f"{sp}  {key}:")
            for item in child:
                lines.extend(render_tree(item, indent + 2))
    return lines


def render_program(program):
    try:
        return "\n".join(render_tree(ast_to_dict(program)))
    except RecursionError:
        raise TinyCSyntaxError("program nested too deeply", program.line, program.column)


def compile_and_run(vm, code):
    # Globals of `vm` survive; a failed compile leaves them untouched.
    bc = compile_source(code)
    vm.run(bc)
    return vm.format_globals()


def report(e, debug: bool = False):
    if debug:
        traceback.print_exc()
    else:
        print(str(e), file=sys.stderr)


def read_file(path):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        print(f"Cannot read {path}: {e.strerror}", file=sys.stderr)
        sys.exit(1)


def cmd_parse(path, debug: bool = False):
    code = read_file(path)
    try:
        program = Parser(Lexer(code)).parse()
        text = render_program(program)
    except TinyCError as e:
        report(e, debug)
        sys.exit(1)

    print(text)


def cmd_build(path, debug: bool = False):
    code = read_file(path)
    try:
        bc = compile_source(code)
    except TinyCError as e:
        report(e, debug)
        sys.exit(1)

    print("INSTRUCTIONS:")
    for i, ins in enumerate(bc.instructions):
        print(f"  {i:04d}  {ins}")


def cmd_run(path, debug: bool = False, trace: bool = False):
    code = read_file(path)
    vm = VM()
    vm.trace_enabled = trace
    try:
        lines = compile_and_run(vm, code)
    except TinyCError as e:
        report(e, debug)
        sys.exit(1)

    for line in lines:
        print(line)


def cmd_lines(stream, debug: bool = False, trace: bool = False):
    # One complete program per input line, all sharing a single VM.
    vm = VM()
    vm.trace_enabled = trace
    for raw in stream:
        line = raw.rstrip("\n")
        if not line.strip():
            continue
        try:
            out = compile_and_run(vm, line)
        except TinyCError as e:
            report(e, debug)
            sys.exit(1)
        for text in out:
            print(text)
        sys.stdout.flush()


def cmd_repl(debug: bool = False, trace: bool = False):
    vm = VM()
    vm.trace_enabled = trace

    print("Tiny-C REPL. Type :q to quit.")

    while True:
        try:
            line = input("tinyc> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break

        stripped = line.strip()
        if stripped in (":q", ":quit", "quit", "exit"):
            break
        if not stripped:
            continue

        try:
            out = compile_and_run(vm, line)
        except TinyCError as e:
            report(e, debug)
            continue

        for text in out:
            print(text)


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)

    debug = False
    if "--debug" in args:
        debug = True
        args.remove("--debug")

    trace = False
    if "--trace" in args:
        trace = True
        args.remove("--trace")

    if not args or args == ["-"]:
        cmd_lines(sys.stdin, debug=debug, trace=trace)
        return

    cmd = args[0]

    if cmd == "repl":
        if len(args) != 1:
            print(USAGE)
            sys.exit(1)
        cmd_repl(debug=debug, trace=trace)
        return

    if cmd not in ("run", "parse", "build"):
        print(f"Unknown command: {cmd}")
        print(USAGE)
        sys.exit(1)

    if len(args) != 2:
        print(USAGE)
        sys.exit(1)

    path = args[1]

    if cmd == "parse":
        cmd_parse(path, debug=debug)
    elif cmd == "build":
        cmd_build(path, debug=debug)
    else:
        cmd_run(path, debug=debug, trace=trace)


if __name__ == "__main__":
    main()
