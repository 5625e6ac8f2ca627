"""
Instruction Mix Analyzer

Classifies an assembly-like instruction stream into memory and non-memory
operations. This is a text heuristic, not an ISA decoder: a line counts as a
memory operation when its text contains a load/store mnemonic substring.

The register file helper at the bottom of this module is for display only.
It has no bearing on any performance metric.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)


# Hard cap on classified instructions, bounds worst-case runtime
MAX_INSTRUCTIONS = 10_000

# Substrings that mark a memory operation (RV32 word load/store)
MEMORY_MNEMONICS: Tuple[str, ...] = ('lw', 'sw')

COMMENT_PREFIX = '#'
NUM_REGISTERS = 32


@dataclass(frozen=True)
class InstructionMix:
    """
    Result of classifying an instruction stream.

    Attributes:
        memory_ops: Lines classified as loads/stores
        non_memory_ops: All other counted lines
        truncated: True if the stream exceeded the instruction cap
    """
    memory_ops: int = 0
    non_memory_ops: int = 0
    truncated: bool = False

    @property
    def total(self) -> int:
        return self.memory_ops + self.non_memory_ops

    @property
    def memory_ratio(self) -> float:
        """Fraction of counted instructions that are memory ops (0 for an empty stream)."""
        return self.memory_ops / self.total if self.total > 0 else 0.0

    def to_dict(self) -> Dict[str, object]:
        return {
            "memory_ops": self.memory_ops,
            "non_memory_ops": self.non_memory_ops,
            "total": self.total,
            "truncated": self.truncated,
        }


def parse_program(text: str) -> List[str]:
    """
    Split program text into instruction lines.

    Blank lines and full-line comments are dropped. Trailing comments stay on
    the line (and take part in classification).
    """
    lines = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIX):
            continue
        lines.append(line)
    return lines


def is_memory_op(line: str) -> bool:
    """
    Substring test for a load/store mnemonic.

    Approximate: any label, register alias or trailing comment containing
    'lw' or 'sw' also matches (e.g. a branch to 'no_swap').
    """
    return any(mnemonic in line for mnemonic in MEMORY_MNEMONICS)


def classify_instructions(
    lines: Iterable[str],
    max_instructions: int = MAX_INSTRUCTIONS,
) -> InstructionMix:
    """
    Count memory and non-memory operations, up to max_instructions.

    Args:
        lines: Instruction lines (see parse_program)
        max_instructions: Execution cap; lines past it are not counted

    Returns:
        InstructionMix with truncated=True if the cap was hit
    """
    memory_ops = 0
    non_memory_ops = 0
    truncated = False

    for executed, line in enumerate(lines):
        if executed >= max_instructions:
            truncated = True
            break
        if is_memory_op(line):
            memory_ops += 1
        else:
            non_memory_ops += 1

    if truncated:
        logger.warning(
            "Instruction stream exceeds cap of %d instructions; remaining lines ignored",
            max_instructions,
        )

    return InstructionMix(
        memory_ops=memory_ops,
        non_memory_ops=non_memory_ops,
        truncated=truncated,
    )


def analyze_program(text: str, max_instructions: int = MAX_INSTRUCTIONS) -> InstructionMix:
    """parse_program followed by classify_instructions."""
    return classify_instructions(parse_program(text), max_instructions=max_instructions)


def random_register_file(seed: Optional[int] = None) -> Dict[str, int]:
    """
    Fill a display register file with pseudo-random values.

    x0 is hardwired to zero; x1..x31 get values in [0, 1000). Pass a seed
    for a reproducible fill.
    """
    rng = np.random.default_rng(seed)
    values = rng.integers(0, 1000, size=NUM_REGISTERS - 1)
    registers = {'x0': 0}
    for i, value in enumerate(values, start=1):
        registers[f'x{i}'] = int(value)
    return registers
