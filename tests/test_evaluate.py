import pytest

from brainf_machine import (
    BackwardBoundaryUnderflow,
    ExecutionError,
    InputExhausted,
    MachineConfig,
    ParseError,
    UndefinedCommand,
    UnmatchedCloseBracket,
    UnterminatedLoop,
    evaluate,
)

HELLO_WORLD = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]>>.>---.+++++++..+++."
    ">>.<-.<.+++.------.--------.>>+.>++."
)


def test_empty_program():
    assert evaluate("") == b""


def test_output_uninitialized_cell():
    assert evaluate(".") == b"\x00"


def test_input():
    assert evaluate(",.", "5") == b"5"


def test_io_sequence():
    assert evaluate(",.>,.>,.", "123") == b"123"


def test_increment_and_decrement():
    assert evaluate("+++.") == b"\x03"
    assert evaluate(",---.", b"\x05") == b"\x02"


def test_wraparound():
    assert evaluate(",+.", b"\xff") == b"\x00"
    assert evaluate(",-.", b"\x00") == b"\xff"


def test_move_forward_and_back():
    assert evaluate(",>+++.", "z") == b"\x03"
    assert evaluate(",>+++<.", "z") == b"z"
    assert evaluate(",>,>,+.<++.<+++.", "abc") == b"ddd"


def test_loop_skipped_on_zero():
    assert evaluate("[+++].") == b"\x00"
    assert evaluate(">[,.,.]++++.", "no") == b"\x04"
    assert evaluate("[+++++]") == b""
    assert evaluate("[[-]]") == b""
    assert evaluate(">>[+++++]") == b""


def test_conditional_loops():
    assert evaluate("+[>+++<-]>.") == b"\x03"
    assert evaluate("+[,.,.,.>]", "yes") == b"yes"
    assert evaluate(",[+.>]<+", "y") == b"z"


def test_arithmetic_loops():
    assert evaluate("+++[>]<.") == b"\x03"
    assert evaluate(",[>++<-]>.", b"\x04") == b"\x08"
    assert evaluate(",>,[<+>-]<.", bytes([7, 8])) == bytes([15])
    assert evaluate(",>[-]>[-]<<[->+>+<<]>.>.", "J") == b"JJ"
    assert evaluate("++++++++++[>++++++<-]>+++++.") == b"A"
    assert evaluate(",>,<[>[->+>+<<]>>[-<<+>>]<<<-]>>.", bytes([6, 7])) == bytes([42])


def test_hello_world():
    assert evaluate(HELLO_WORLD) == b"Hello World!\n"
    assert evaluate(
        "++++++++++[>+++++++>++++++++++>+++>+<<<<-]>++.>+.+++++++..+++.>++."
        "<<+++++++++++++++.>.+++.------.--------.>+.>."
    ) == b"Hello World!\n"


def test_echo_until_sentinel():
    assert evaluate(",+[-.,+]", b"Good luck\xff") == b"Good luck"
    assert evaluate(",[.[-],]", b"brain_luck\x00") == b"brain_luck"


def test_backward_boundary():
    with pytest.raises(BackwardBoundaryUnderflow):
        evaluate(",<<<.", "S")


def test_input_exhausted():
    with pytest.raises(InputExhausted):
        evaluate(",.", "")


def test_structural_errors():
    with pytest.raises(UnterminatedLoop):
        evaluate(">>[+++++")
    with pytest.raises(UnmatchedCloseBracket):
        evaluate(">>]+++++")
    with pytest.raises(ParseError):
        evaluate(">>+++++]")


def test_parse_errors_win_over_runtime_errors():
    # the bracket check happens before anything runs
    with pytest.raises(UnmatchedCloseBracket):
        evaluate("x]")


def test_undefined_command():
    with pytest.raises(UndefinedCommand) as excinfo:
        evaluate("++AbCd123.&")
    assert excinfo.value.command == ord("A")
    assert excinfo.value.position == 2
    assert "Available commands are: .,+-><[]" in str(excinfo.value)


def test_whitespace_is_not_a_comment():
    with pytest.raises(UndefinedCommand):
        evaluate("+ .")


def test_illegal_bytes_in_skipped_loop_are_never_checked():
    assert evaluate("[this is never run].") == b"\x00"


def test_illegal_bytes_after_failure_point_are_irrelevant():
    with pytest.raises(InputExhausted):
        evaluate(",oops")


def test_execution_errors_are_runtime_errors():
    with pytest.raises(RuntimeError):
        evaluate("<")
    with pytest.raises(ExecutionError):
        evaluate("?")


def test_deterministic():
    first = evaluate(HELLO_WORLD)
    assert all(evaluate(HELLO_WORLD) == first for _ in range(3))
    assert evaluate(",[.-]", "d") == evaluate(",[.-]", "d")


@pytest.mark.parametrize("chunk_size", [1, 3, 100, 4096])
def test_chunk_size_is_not_observable(chunk_size):
    config = MachineConfig(chunk_size=chunk_size)
    assert evaluate(HELLO_WORLD, config=config) == b"Hello World!\n"
    assert evaluate(">" * 250 + "+." + "<" * 250 + ".", config=config) == b"\x01\x00"


def test_long_running_loop():
    # 255 outer trips, each running the inner loop 255 times
    assert evaluate("-[>-[-]<-]>.") == b"\x00"
    assert evaluate("-[>-[-]<-]+.") == b"\x01"


def test_deeply_nested_loops():
    depth = 3000
    program = "+" + "[" * depth + "-" + "]" * depth + "."
    assert evaluate(program) == b"\x00"


def test_text_encoding():
    assert evaluate(",.,.", "é") == "é".encode("utf-8")
    assert evaluate(",.", "é", config=MachineConfig(encoding="latin-1")) == b"\xe9"
