## seqalt — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from seqalt.api import Runtime
from seqalt.parser import tokenize, parse
from seqalt.interpreter import evaluate_expr, take_by_name, truthy
from seqalt.types import Closure, StringLiteral, SymbolRef, Sequence
from seqalt.errors import UnboundNameError, TypeMismatchError


def run(src: str):
    return Runtime(log=lambda _: None).evaluate(src)


def test_fold_is_strictly_left_to_right():
    assert run("3 + 10 - 2") == 11
    assert run("2 + 3 * 4") == 20
    assert run("2 + (3 * 4)") == 14


def test_empty_groups():
    assert run("") is None
    assert run("()") is None
    assert run("[]") == []
    assert run("{}") is None


def test_array_literal_wraps_first_value():
    assert run("[1, 2, 3]") == [1, 2, 3]
    assert run("[7]") == [7]
    assert run("[[1, 2], 3]") == [[1, 2], 3]
    assert run("[(1 + 2), 3]") == [3, 3]


def test_paren_pair_builds_two_element_array():
    assert run("1, 2") == [1, 2]
    assert run("(1, 2), 3") == [1, 2, 3]


def test_trailing_operator_gets_undefined_operand():
    assert run("1 ;") is None
    assert run("5 #") == 5


def test_assignment_then_use():
    assert run("a = 5; a + 3") == 8
    # Each evaluation starts from a fresh root environment.
    assert run("a = 5; a + 3") == 8
    with pytest.raises(UnboundNameError):
        run("a + 3")


def test_chained_assignments():
    assert run("x = 1; y = 2; x + y") == 3
    assert run("a = 5; a = (a + 3); a") == 8


def test_unbound_symbol_is_an_error_with_position():
    with pytest.raises(UnboundNameError) as info:
        run("1 +\n  nope")
    assert info.value.token == "nope"
    assert (info.value.line, info.value.column) == (2, 3)


def test_calling_a_non_function_is_a_type_mismatch():
    with pytest.raises(TypeMismatchError):
        run("1 2 3")


def test_closure_called_as_operator_receives_right_operand():
    assert run("double = (x => (x * 2)); () double 21") == 42
    assert run("add = ((a, b) => (a + b)); () add (3, 4)") == 7


def test_closure_single_param_takes_whole_array():
    assert run("count = (xs => (() length xs)); () count [1, 2, 3]") == 3


def test_closure_sees_left_operand_through_args():
    src = "fn = (() => ((args.l) - (args.r))); (10) fn (4)"
    assert run(src) == 6


def test_closure_without_params_ignores_argument():
    assert run("f = (() => 42); () f 1") == 42


def test_recursive_closure():
    src = """
    fib = (n => (
      (n < 2) ? n : ((() fib (n - 1)) + (() fib (n - 2)))
    ));
    () fib 15
    """
    assert run(src) == 610


def test_closure_captures_environment_by_reference():
    src = """
    counter = 0;
    bump = (() => (counter = (counter + 1)));
    () bump (); () bump (); counter
    """
    assert run(src) == 2


def test_closures_keep_their_defining_scope():
    src = """
    make = (n => (() => (n * 10)));
    f = (() make 3);
    g = (() make 4);
    (() f ()) + (() g ())
    """
    assert run(src) == 70


def test_var_shadows_instead_of_mutating_outer():
    src = """
    x = 1;
    f = (() => (() var x = 2; x));
    inner = (() f ());
    [inner, x]
    """
    assert run(src) == [2, 1]


def test_plain_assignment_mutates_outer_binding():
    src = """
    x = 1;
    f = (() => (x = 5));
    () f ();
    x
    """
    assert run(src) == 5


def test_assignment_to_unbound_name_in_closure_stays_local():
    src = """
    f = (() => (fresh = 5; fresh));
    () f ();
    fresh
    """
    with pytest.raises(UnboundNameError):
        run(src)


def test_then_branch_symbol_is_evaluated_not_taken_by_name():
    assert run("v = 9; 1 ? v : 0") == 9
    assert run("v = 9; 0 ? 0 : v") == 9


def test_take_by_name_rewrites_parameter_lists_only():
    [group] = parse(tokenize("(a, b)")).children
    assert take_by_name(group) is group
    named = take_by_name(group, params=True)
    assert named.children[0] == StringLiteral("a", 1, 2)
    assert isinstance(named.children[1], SymbolRef)
    assert named.children[2] == StringLiteral("b", 1, 5)
    assert take_by_name(SymbolRef("x")) == StringLiteral("x")
    brace = Sequence("{", (SymbolRef("k"),))
    assert take_by_name(brace, params=True) is brace


def test_right_operand_is_evaluated_in_callers_environment():
    rt = Runtime(log=lambda _: None)
    env = rt.root_environment()
    tree = parse(tokenize("y = 3; f = (x => (x + 1)); () f y"))
    assert evaluate_expr(env, tree) == 4
    assert isinstance(env.lookup('f'), Closure)


def test_truthiness():
    for value in (None, False, 0, ""):
        assert not truthy(value)
    for value in (True, 1, "0", [], {}, [0]):
        assert truthy(value)


def test_stats_count_steps_and_calls():
    stats = {}
    Runtime(log=lambda _: None).evaluate("f = (x => x); () f 1; () f 2", stats=stats)
    assert stats['calls'] == 2
    assert stats['steps'] > 0


def test_verbose_traces_each_fold_step(capsys):
    Runtime().evaluate("1 + 2 - 3", verbosity=1)
    out = capsys.readouterr().out
    assert out.count("\n") == 2
    assert "+" in out and "-" in out
