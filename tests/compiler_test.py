import string

import pytest

from ast_nodes import Var, ExprStmt
from bytecode import JUMPS, OPCODES
from compiler import Compiler, compile_source
from errors import TinyCSyntaxError
from parser import parse


EXAMPLES = [
    "a=b=c=2<3;",
    "{ i=1; while (i<100) i=i+i; }",
    "{ i=125; j=100; while (i-j) if (i<j) j=j-i; else i=i-j; }",
    "{ i=1; do i=i+10; while (i<50); }",
    "{ i=1; while ((i=i+10)<50) ; }",
    "{ i=7; if (i<5) x=1; if (i<10) y=2; }",
    "{ m=n=1;k=10; while (0 < k) { t = m; m = n; n = t + n; k = k - 1; }}",
]


def code(text):
    return compile_source(text).instructions


def test_assignment():
    assert code("a = 42;") == [
        ("PUSH", 42),
        ("STORE", 0),
        ("POP", None),
        ("HALT", None),
    ]


@pytest.mark.parametrize("name", list(string.ascii_lowercase))
def test_global_index_is_letter_offset(name):
    instructions = code(f"{name} = {name};")
    assert instructions[0] == ("FETCH", ord(name) - ord("a"))
    assert instructions[1] == ("STORE", ord(name) - ord("a"))


def test_expressions_are_post_order():
    assert code("a + 2 - b < 3;") == [
        ("FETCH", 0),
        ("PUSH", 2),
        ("ADD", None),
        ("FETCH", 1),
        ("SUB", None),
        ("PUSH", 3),
        ("LT", None),
        ("POP", None),
        ("HALT", None),
    ]


def test_chained_assignment_stores_innermost_first():
    assert code("a=b=1;") == [
        ("PUSH", 1),
        ("STORE", 1),
        ("STORE", 0),
        ("POP", None),
        ("HALT", None),
    ]


def test_if_without_else_has_no_jmp():
    assert code("if (a) b = 1;") == [
        ("FETCH", 0),
        ("JZ", 5),
        ("PUSH", 1),
        ("STORE", 1),
        ("POP", None),
        ("HALT", None),
    ]


def test_if_with_else():
    assert code("if (a) b = 1; else b = 2;") == [
        ("FETCH", 0),
        ("JZ", 6),
        ("PUSH", 1),
        ("STORE", 1),
        ("POP", None),
        ("JMP", 9),
        ("PUSH", 2),
        ("STORE", 1),
        ("POP", None),
        ("HALT", None),
    ]


def test_while_jumps_back_to_test():
    assert code("while (i<3) i=i+1;") == [
        ("FETCH", 8),
        ("PUSH", 3),
        ("LT", None),
        ("JZ", 10),
        ("FETCH", 8),
        ("PUSH", 1),
        ("ADD", None),
        ("STORE", 8),
        ("POP", None),
        ("JMP", 0),
        ("HALT", None),
    ]


def test_do_while_uses_jnz():
    assert code("do i=i+1; while (i<3);") == [
        ("FETCH", 8),
        ("PUSH", 1),
        ("ADD", None),
        ("STORE", 8),
        ("POP", None),
        ("FETCH", 8),
        ("PUSH", 3),
        ("LT", None),
        ("JNZ", 0),
        ("HALT", None),
    ]


def test_empty_statements_emit_nothing():
    assert code(";") == [("HALT", None)]
    assert code("{}") == [("HALT", None)]
    assert code("{ ; {} ; }") == [("HALT", None)]


def test_labels_are_absolute_inside_nested_code():
    instructions = code("{ a = 1; while (a) a = 0; }")
    # the loop restarts after the 3-instruction prologue
    assert instructions[3] == ("FETCH", 0)
    assert ("JMP", 3) in instructions


@pytest.mark.parametrize("src", EXAMPLES)
def test_jump_targets_are_patched_and_in_range(src):
    instructions = code(src)
    assert instructions[-1] == ("HALT", None)
    for opcode, arg in instructions:
        assert opcode in OPCODES
        if opcode in JUMPS:
            assert isinstance(arg, int)
            assert 0 <= arg < len(instructions)


def test_debug_info_is_aligned():
    bc = compile_source("{\n x = 1;\n}")
    assert len(bc.debug) == len(bc.instructions)
    assert bc.debug[0] == {"line": 2, "column": 6}


def test_assigning_to_non_variable():
    with pytest.raises(TinyCSyntaxError) as excinfo:
        compile_source("a+1=3;")
    assert excinfo.value.message == "cannot assign to this expression"


def test_multi_letter_target_is_unsupported():
    with pytest.raises(TinyCSyntaxError) as excinfo:
        compile_source("ab=1;")
    assert str(excinfo.value) == "input:1:1:unsupported variable 'ab'"


def test_multi_letter_reference_is_unsupported():
    with pytest.raises(TinyCSyntaxError) as excinfo:
        compile_source("x = foo;")
    assert str(excinfo.value) == "input:1:5:unsupported variable 'foo'"


def test_compiler_requires_program():
    with pytest.raises(TinyCSyntaxError):
        Compiler().compile(ExprStmt(Var("a")))


def test_compile_accepts_parsed_program():
    bc = Compiler().compile(parse("b = 7;"))
    assert bc.instructions[0] == ("PUSH", 7)


def test_long_block_compiles_without_deep_recursion():
    instructions = code("{ " + "a = a + 1; " * 2000 + "}")
    assert len(instructions) == 5 * 2000 + 1
    assert instructions[:5] == [
        ("FETCH", 0),
        ("PUSH", 1),
        ("ADD", None),
        ("STORE", 0),
        ("POP", None),
    ]
    assert instructions[-1] == ("HALT", None)


def test_nested_blocks_keep_statement_order():
    assert code("{ { a = 1; b = 2; } c = 3; }") == [
        ("PUSH", 1), ("STORE", 0), ("POP", None),
        ("PUSH", 2), ("STORE", 1), ("POP", None),
        ("PUSH", 3), ("STORE", 2), ("POP", None),
        ("HALT", None),
    ]


def test_deeply_nested_parentheses():
    src = "a = " + "(" * 400 + "1" + ")" * 400 + ";"
    try:
        instructions = code(src)
    except TinyCSyntaxError as e:
        assert e.message == "program nested too deeply"
        assert str(e).startswith("input:1:")
    else:
        assert instructions[0] == ("PUSH", 1)


def test_deep_expression_tree_reports_nesting():
    # parsing a long sum is a loop, but the resulting tree is left-deep
    src = "a = " + " + ".join(["1"] * 3000) + ";"
    try:
        instructions = code(src)
    except TinyCSyntaxError as e:
        assert e.message == "program nested too deeply"
    else:
        assert instructions.count(("ADD", None)) == 2999
