"""
Tests for the instruction mix analyzer.
"""

import pytest

from chipsim.cpu import (
    MAX_INSTRUCTIONS,
    InstructionMix,
    analyze_program,
    classify_instructions,
    get_program,
    is_memory_op,
    parse_program,
    random_register_file,
)


class TestParseProgram:

    def test_drops_blank_and_comment_lines(self):
        text = "# header\n\n  li x1, 1\n   # indented comment\nadd x2, x1, x1\n"
        assert parse_program(text) == ["  li x1, 1", "add x2, x1, x1"]

    def test_keeps_trailing_comment(self):
        assert parse_program("li x1, 1 # base") == ["li x1, 1 # base"]

    def test_empty(self):
        assert parse_program("") == []
        assert parse_program("# only\n#comments") == []


class TestIsMemoryOp:

    def test_loads_and_stores(self):
        assert is_memory_op("lw x8, 0(x7)")
        assert is_memory_op("  sw x9, 4(x7)")

    def test_arithmetic(self):
        assert not is_memory_op("add x1, x2, x3")
        assert not is_memory_op("li a0, 1000")

    def test_substring_match_includes_labels(self):
        # Matching is textual: a label containing "sw" counts
        assert is_memory_op("no_swap:")
        assert is_memory_op("ble x8, x9, no_swap")

    def test_byte_ops_are_not_matched(self):
        assert not is_memory_op("lb t2, 0(t1)")
        assert not is_memory_op("sb t2, 0(t1)")


class TestClassifyInstructions:

    def test_counts(self):
        mix = classify_instructions(["lw x1, 0(x2)", "add x1, x1, x1", "sw x1, 0(x2)"])
        assert mix.memory_ops == 2
        assert mix.non_memory_ops == 1
        assert mix.total == 3
        assert mix.memory_ratio == pytest.approx(2 / 3)
        assert not mix.truncated

    def test_empty_stream(self):
        mix = classify_instructions([])
        assert mix.total == 0
        assert mix.memory_ratio == 0.0

    def test_cap(self, caplog):
        lines = ["lw x1, 0(x2)"] * 25
        with caplog.at_level("WARNING"):
            mix = classify_instructions(lines, max_instructions=10)
        assert mix.total == 10
        assert mix.truncated
        assert "cap of 10" in caplog.text

    def test_exactly_at_cap_is_not_truncated(self):
        mix = classify_instructions(["nop"] * 10, max_instructions=10)
        assert mix.total == 10
        assert not mix.truncated

    def test_default_cap(self):
        assert MAX_INSTRUCTIONS == 10_000
        mix = classify_instructions(["nop"] * (MAX_INSTRUCTIONS + 5))
        assert mix.total == MAX_INSTRUCTIONS
        assert mix.truncated


class TestAnalyzeProgram:

    def test_bubble_sort_mix(self):
        mix = analyze_program(get_program("bubble_sort").code)
        assert mix.memory_ops == 6
        assert mix.non_memory_ops == 13
        assert mix.total == 19

    def test_to_dict(self):
        data = InstructionMix(memory_ops=3, non_memory_ops=5).to_dict()
        assert data == {"memory_ops": 3, "non_memory_ops": 5, "total": 8, "truncated": False}


class TestRandomRegisterFile:

    def test_shape_and_range(self):
        regs = random_register_file(seed=1)
        assert len(regs) == 32
        assert regs["x0"] == 0
        for i in range(1, 32):
            assert 0 <= regs[f"x{i}"] < 1000

    def test_seeded_is_reproducible(self):
        assert random_register_file(seed=5) == random_register_file(seed=5)
