"""
Tape inspection utilities.
Structural checks and summaries of a recorded computation graph.
"""

from collections import Counter
from typing import Dict

import numpy as np

from .kinds import OperationKind
from .tape import Tape


def check_topological(tape: Tape) -> None:
    """
    Verify that every operand index is strictly below the index of the entry
    using it. Raises ValueError on the first violation.
    """
    for index, entry in enumerate(tape):
        for operand in entry.operands():
            if not 0 <= operand < index:
                raise ValueError(
                    f"entry {index} ({entry.kind.tag}) uses operand {operand}, "
                    f"expected an index in [0, {index})"
                )


def tape_summary(tape: Tape, verbose: bool = False) -> Dict:
    """
    Summary statistics of a tape.

    Args:
        tape: the tape to inspect
        verbose: print a table of the statistics and, for small tapes, every entry

    Returns:
        dict with keys 'entries', 'inputs', 'edges', 'max_fan_out', 'ops'
        ('ops' maps kind tag -> count)
    """
    n_entries = tape.size()
    if n_entries == 0:
        if verbose:
            print("Empty tape")
        return {'entries': 0, 'inputs': 0, 'edges': 0, 'max_fan_out': 0, 'ops': {}}

    fan_outs = np.zeros(n_entries, dtype=int)
    for entry in tape:
        for operand in entry.operands():
            fan_outs[operand] += 1

    op_counter = Counter(entry.kind.tag for entry in tape)
    stats = {
        'entries': n_entries,
        'inputs': op_counter.get(OperationKind.INPUT.tag, 0),
        'edges': int(fan_outs.sum()),
        'max_fan_out': int(fan_outs.max()),
        'ops': dict(op_counter),
    }

    if verbose:
        print("\n" + "=" * 60)
        print("TAPE SUMMARY")
        print("=" * 60)
        print(f"Total entries:      {stats['entries']:,}")
        print(f"Inputs:             {stats['inputs']:,}")
        print(f"Total edges:        {stats['edges']:,}")
        print(f"Max fan-out:        {stats['max_fan_out']}")
        print(f"Interpreted:        {tape.interpreted}")
        print()
        print("Operation breakdown:")
        for tag, count in op_counter.most_common():
            pct = 100.0 * count / n_entries
            print(f"  {tag:12s}: {count:6,} ({pct:5.1f}%)")
        if n_entries <= 100:
            print()
            for i, entry in enumerate(tape):
                args = ", ".join(str(o) for o in entry.operands())
                print(f"  [{i:3d}] {entry.kind.tag:10s} <- [{args}]  "
                      f"value={entry.value:.6g}  adjoint={entry.adjoint:.6g}")
        print("=" * 60 + "\n")

    return stats
