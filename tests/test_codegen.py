import pytest

from nexa import ast as A
from nexa.codegen_rust import CodeGenRust
from nexa.errors import EmitError
from nexa.pipeline import compile_source


def body_lines(source):
    """Generated statements of main(), without the wrapper or indentation."""
    lines = compile_source(source).splitlines()
    assert lines[0] == "fn main() {"
    assert lines[-1] == "}"
    return [line.strip() for line in lines[1:-1]]


def test_round_trip_program(round_trip_source):
    assert compile_source(round_trip_source) == (
        "fn main() {\n"
        "    let mut i = 1;\n"
        "    while (i < 3) {\n"
        '        println!("{}", i);\n'
        "        i = (i + 1);\n"
        "    }\n"
        "}\n"
    )


def test_float_declaration_gets_fractional_literal():
    assert body_lines("var z: float = 42") == ["let mut z: f64 = 42.0;"]
    assert body_lines("var z: float = -3") == ["let mut z: f64 = -3.0;"]


def test_string_declaration_becomes_owned():
    assert body_lines('var s: string = "hi"') == ['let mut s: String = ("hi").to_string();']


@pytest.mark.parametrize("source,expected", [
    ("var x: int = 5", "let mut x: i32 = 5;"),
    ("var b: bool = true", "let mut b: bool = true;"),
    ("var f = 2.5", "let mut f = 2.5;"),
    ("var n = x", "let mut n = x;"),
])
def test_declarations(source, expected):
    assert body_lines(source) == [expected]


def test_multi_argument_print_unfolds_in_order():
    assert body_lines("print(1, 2)") == ['print!("{} {}", 1, 2);']
    assert body_lines('print(a, "b", 3)') == ['print!("{} {} {}", a, "b", 3);']


def test_real_addition_inside_print_is_not_unfolded():
    assert body_lines("print(1 + 2, 3)") == ['print!("{} {}", (1 + 2), 3);']
    assert body_lines("print 1 + 2") == ['print!("{}", (1 + 2));']


def test_print_of_string_literal_uses_it_as_template():
    assert body_lines('print "hello"') == ['print!("hello");']
    assert body_lines('print "set {x}"') == ['print!("set {{x}}");']


def test_println_fans_out_one_line_per_argument():
    assert body_lines("println(1, 2)") == ['println!("{}", 1);', 'println!("{}", 2);']


def test_if_else_indentation():
    code = compile_source("if x < 1 { print 1 } else { print 2 }")
    assert code == (
        "fn main() {\n"
        "    if (x < 1) {\n"
        '        print!("{}", 1);\n'
        "    } else {\n"
        '        print!("{}", 2);\n'
        "    }\n"
        "}\n"
    )


def test_for_iterates_characters():
    assert body_lines('for c in "ab" { println(c) }') == [
        'for c in ("ab").chars() {',
        'println!("{}", c);',
        "}",
    ]


def test_for_over_range():
    assert body_lines("for i in (1, 4) { println(i) }") == [
        "for i in 1..4 {",
        'println!("{}", i);',
        "}",
    ]


def test_operators_render_as_rust_symbols():
    assert body_lines("x = 1 le 2") == ["x = (1 <= 2);"]
    assert body_lines("x = a = b") == ["x = (a == b);"]
    assert body_lines("x = 6 div 2 sub 1") == ["x = ((6 / 2) - 1);"]


def test_expression_statement():
    assert body_lines("1 + 2") == ["(1 + 2);"]


def test_negation():
    assert body_lines("x = -y * 2") == ["x = (-y * 2);"]


def test_unsupported_unary_operator():
    program = A.Program([A.ExprStmt(A.Unary(A.Operator.ADD, A.Number(1)))])
    with pytest.raises(EmitError, match="unsupported unary operator"):
        CodeGenRust().generate(program)


def test_unknown_statement_shape():
    with pytest.raises(EmitError, match="cannot generate code for statement"):
        CodeGenRust().generate(A.Program([A.Stmt()]))


def test_empty_program():
    assert compile_source("") == "fn main() {\n}\n"


def test_backslashes_stay_literal():
    assert body_lines('println("C:\\temp")') == ['println!("{}", "C:\\\\temp");']
    assert body_lines('print "a\\b"') == ['print!("a\\\\b");']
