"""
Visibility of earlier lines for each proof step.

A step may cite any line at its own or an enclosing depth that precedes it.
A sub-proof, once closed, collapses into a single marker in its parent's
frame: it can be cited as a unit but none of its lines can be cited alone.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from .proof import ProofStep, SubProof

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Visibility:
    lines: Tuple[int, ...] = ()
    subproofs: Tuple[int, ...] = ()

    def can_cite_line(self, number: int) -> bool:
        return number in self.lines

    def can_cite_subproof(self, number: int) -> bool:
        return number in self.subproofs


class _Frame:
    def __init__(self):
        self.lines: List[int] = []
        self.subproofs: List[int] = []


class ScopeResolver:
    """Computes the visibility set of every regular and assume step.

    One resolver serves one run; the frame stack is not shared.
    """

    def __init__(self):
        self._frames: List[_Frame] = []

    def resolve(self, steps: Sequence[ProofStep]) -> Dict[int, Visibility]:
        table: Dict[int, Visibility] = {}
        self._frames = []
        self._walk(steps, table)
        return table

    def _snapshot(self) -> Visibility:
        lines, subproofs = [], []
        for frame in self._frames:
            lines.extend(frame.lines)
            subproofs.extend(frame.subproofs)
        return Visibility(tuple(lines), tuple(subproofs))

    def _walk(self, steps: Sequence[ProofStep], table: Dict[int, Visibility]):
        self._frames.append(_Frame())
        for step in steps:
            if isinstance(step, SubProof):
                self._walk(step.steps, table)
                # Discharged: only the sub-proof number survives.
                self._frames[-1].subproofs.append(step.number)
            else:
                table[step.line] = self._snapshot()
                logger.debug("line %d sees lines %s and sub-proofs %s",
                             step.line, table[step.line].lines, table[step.line].subproofs)
                self._frames[-1].lines.append(step.line)
        self._frames.pop()
