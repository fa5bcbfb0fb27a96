"""
Proof data model and the builder that validates proof shape.

A proof is a list of steps. Regular steps carry a claim and a justification;
sub-proofs carry their own number and a nested list of steps that opens with
an assumption. Everything here is immutable: verification results live in
the rule engine, never on the steps.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from .claims import Claim, render, to_dict as claim_to_dict
from .errors import MalformedProof

logger = logging.getLogger(__name__)

LINE = "line"
SUBPROOF = "subproof"


class Rule(Enum):
    """Inference rules, valued by their canonical symbol."""
    PREMISE = "premise"
    AND_INTRODUCTION = "∧i"
    AND_ELIMINATION_1 = "∧e1"
    AND_ELIMINATION_2 = "∧e2"
    OR_INTRODUCTION_1 = "∨i1"
    OR_INTRODUCTION_2 = "∨i2"
    OR_ELIMINATION = "∨e"
    IMPLICATION_INTRODUCTION = "→i"
    IMPLICATION_ELIMINATION = "→e"
    NEGATION_INTRODUCTION = "¬i"
    NEGATION_ELIMINATION = "¬e"
    CONTRADICTION_ELIMINATION = "⊥e"
    PROOF_BY_CONTRADICTION = "pbc"

    @property
    def operands(self) -> Tuple[str, ...]:
        return RULE_OPERANDS[self]

    @property
    def arity(self) -> int:
        return len(RULE_OPERANDS[self])

    @property
    def symbol(self) -> str:
        return self.value


# What each reference position of a rule must name.
RULE_OPERANDS = {
    Rule.PREMISE: (),
    Rule.AND_INTRODUCTION: (LINE, LINE),
    Rule.AND_ELIMINATION_1: (LINE,),
    Rule.AND_ELIMINATION_2: (LINE,),
    Rule.OR_INTRODUCTION_1: (LINE,),
    Rule.OR_INTRODUCTION_2: (LINE,),
    Rule.OR_ELIMINATION: (LINE, SUBPROOF, SUBPROOF),
    Rule.IMPLICATION_INTRODUCTION: (SUBPROOF,),
    Rule.IMPLICATION_ELIMINATION: (LINE, LINE),
    Rule.NEGATION_INTRODUCTION: (SUBPROOF,),
    Rule.NEGATION_ELIMINATION: (LINE, LINE),
    Rule.CONTRADICTION_ELIMINATION: (LINE,),
    Rule.PROOF_BY_CONTRADICTION: (SUBPROOF,),
}

RULES_BY_SYMBOL = {rule.symbol: rule for rule in Rule}


@dataclass(frozen=True)
class Justification:
    rule: Rule
    refs: Tuple[int, ...] = ()

    def __str__(self):
        if not self.refs:
            return self.rule.symbol
        return f"{self.rule.symbol}({', '.join(str(r) for r in self.refs)})"


@dataclass(frozen=True)
class Sequent:
    premises: Tuple[Claim, ...]
    goal: Claim

    def __str__(self):
        premises = ", ".join(render(p) for p in self.premises)
        return f"{premises} ⊢ {render(self.goal)}".strip()


@dataclass(frozen=True)
class RegularStep:
    line: int
    claim: Claim
    justification: Justification


@dataclass(frozen=True)
class AssumeStep:
    line: int
    claim: Claim


@dataclass(frozen=True)
class SubProof:
    number: int
    steps: Tuple["ProofStep", ...]

    @property
    def line(self) -> int:
        return self.number

    @property
    def assume(self) -> Optional[AssumeStep]:
        if self.steps and isinstance(self.steps[0], AssumeStep):
            return self.steps[0]
        return None

    @property
    def conclusion(self) -> Optional["ProofStep"]:
        return self.steps[-1] if self.steps else None


ProofStep = Union[RegularStep, AssumeStep, SubProof]


@dataclass(frozen=True)
class Proof:
    """A validated proof: sequent, top-level steps, and an index by number."""
    sequent: Sequent
    steps: Tuple[ProofStep, ...]
    index: Dict[int, ProofStep] = field(compare=False, repr=False)


def step_to_dict(step: ProofStep) -> Dict[str, Any]:
    if isinstance(step, SubProof):
        return {"subproof": step.number, "steps": [step_to_dict(s) for s in step.steps]}
    if isinstance(step, AssumeStep):
        return {"line": step.line, "claim": claim_to_dict(step.claim), "rule": "assume", "refs": []}
    return {
        "line": step.line,
        "claim": claim_to_dict(step.claim),
        "rule": step.justification.rule.symbol,
        "refs": list(step.justification.refs),
    }


def iter_steps(steps: Sequence[ProofStep]):
    """Yield every step and sub-proof in textual order, depth first."""
    for step in steps:
        yield step
        if isinstance(step, SubProof):
            yield from iter_steps(step.steps)


def _index(steps: Sequence[ProofStep]) -> Dict[int, ProofStep]:
    index = {}
    for step in iter_steps(steps):
        if step.line in index:
            raise MalformedProof(f"line number {step.line} is used more than once")
        index[step.line] = step
    return index


def _check_shape(steps: Sequence[ProofStep], in_subproof: bool = False):
    for position, step in enumerate(steps):
        if isinstance(step, SubProof):
            if step.assume is None:
                raise MalformedProof(f"sub-proof {step.number} does not open with an assumption")
            if len(step.steps) < 2:
                raise MalformedProof(f"sub-proof {step.number} has no steps after its assumption")
            _check_shape(step.steps, in_subproof=True)
        elif isinstance(step, AssumeStep):
            if not (in_subproof and position == 0):
                raise MalformedProof(f"line {step.line}: assumptions may only open a sub-proof")
        elif isinstance(step, RegularStep):
            just = step.justification
            if len(just.refs) != just.rule.arity:
                raise MalformedProof(
                    f"line {step.line}: {just.rule.symbol} takes {just.rule.arity} "
                    f"reference(s), got {len(just.refs)}"
                )
        else:
            raise MalformedProof(f"not a proof step: {step!r}")


def _dependencies(step: ProofStep) -> Tuple[int, ...]:
    if isinstance(step, RegularStep):
        return step.justification.refs
    if isinstance(step, SubProof):
        return tuple(s.line for s in step.steps)
    return ()


def _check_acyclic(index: Dict[int, ProofStep]):
    """Depth-first search for a cycle in the citation graph."""
    visiting, done = set(), set()

    def visit(number, path):
        if number in done or number not in index:
            return
        if number in visiting:
            cycle = path[path.index(number):] + [number]
            raise MalformedProof("referential cycle: " + " -> ".join(str(n) for n in cycle))
        visiting.add(number)
        path.append(number)
        for dep in _dependencies(index[number]):
            visit(dep, path)
        path.pop()
        visiting.discard(number)
        done.add(number)

    for number in index:
        visit(number, [])


def build_proof(sequent: Sequent, steps: Sequence[ProofStep]) -> Proof:
    """Validate the static shape of a proof before any rule is checked.

    Raises:
        MalformedProof: duplicate line numbers, a sub-proof without a leading
            assumption, a stray assumption, wrong reference counts, an empty
            proof, or a cycle of references.
    """
    steps = tuple(steps)
    if not steps:
        raise MalformedProof("proof has no steps")
    _check_shape(steps)
    index = _index(steps)
    _check_acyclic(index)
    logger.debug("built proof with %d numbered entries", len(index))
    return Proof(sequent=sequent, steps=steps, index=index)
