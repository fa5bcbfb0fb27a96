"""
Proof Checker - Natural Deduction Rule Engine

Walks a proof once, depth first, in textual order. Each regular step is
checked against the rule named by its justification using only the lines
it can see. A failing step is recorded with its reason and the walk goes
on; steps that cite it then fail as unproved dependencies.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .claims import FALSE, Claim, Conjunction, Disjunction, Implication, Negation, render
from .config import CheckerConfig
from .errors import JustificationMismatch, KindError, LineNotFound, LineNotVisible, \
    MalformedProof, UnprovedDependency, VerificationError
from .kinds import KindEnvironment, check_kinds
from .parser import parse, parse_file
from .proof import AssumeStep, Proof, ProofStep, RegularStep, Rule, Sequent, \
    SubProof, build_proof, iter_steps
from .scope import ScopeResolver, Visibility

logger = logging.getLogger(__name__)

PROVED = "proved"
DISPROVED = "disproved"
MALFORMED = "malformed"


@dataclass(frozen=True)
class StepOutcome:
    line: int
    depth: int
    claim: Claim
    rule: str
    proved: bool
    error: Optional[VerificationError] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "step": self.line,
            "depth": self.depth,
            "claim": render(self.claim),
            "rule": self.rule,
            "ok": self.proved,
            "status": PROVED if self.proved else DISPROVED,
        }
        if self.error is not None:
            result["error"] = type(self.error).__name__
            result["message"] = str(self.error)
        return result


@dataclass
class VerificationResult:
    """Outcome of one verification run.

    status is "proved", "disproved" or "malformed"; steps holds one outcome
    per regular or assume step in textual order.
    """
    status: str
    steps: List[StepOutcome] = field(default_factory=list)
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == PROVED

    @property
    def failures(self) -> List[StepOutcome]:
        return [s for s in self.steps if not s.proved]

    def outcome(self, line: int) -> StepOutcome:
        for step in self.steps:
            if step.line == line:
                return step
        raise KeyError(line)

    def to_dict(self) -> Dict[str, Any]:
        response = {"ok": self.ok, "status": self.status}
        if self.reason:
            response["message"] = self.reason
        if self.steps:
            response["step_results"] = [s.to_dict() for s in self.steps]
        return response


class Verifier:
    """Checks every step of one proof. Not reusable across proofs."""

    def __init__(self, proof: Proof, visibility: Dict[int, Visibility]):
        self.proof = proof
        self.visibility = visibility
        self.proved: Dict[int, bool] = {}
        self.outcomes: List[StepOutcome] = []

    def run(self) -> VerificationResult:
        self._visit(self.proof.steps, depth=0)

        failures = [o for o in self.outcomes if not o.proved]
        final = self.proof.steps[-1]
        goal = self.proof.sequent.goal

        if isinstance(final, SubProof):
            reason = "the proof ends in a sub-proof instead of the goal"
        elif final.claim != goal:
            reason = f"the last line proves {render(final.claim)}, not the goal {render(goal)}"
        elif failures:
            lines = ", ".join(str(o.line) for o in failures)
            reason = f"unproved line(s): {lines}"
        else:
            reason = None

        if reason is None:
            logger.info("proof of %s is valid", self.proof.sequent)
            return VerificationResult(PROVED, list(self.outcomes))

        logger.info("proof of %s is not valid: %s", self.proof.sequent, reason)
        return VerificationResult(DISPROVED, list(self.outcomes), reason)

    def _record(self, step: ProofStep, depth: int, rule: str, error: Optional[VerificationError]):
        assert step.line not in self.proved, f"line {step.line} checked twice"
        proved = error is None
        self.proved[step.line] = proved
        self.outcomes.append(StepOutcome(step.line, depth, step.claim, rule, proved, error))
        if proved:
            logger.debug("line %d: %s by %s", step.line, render(step.claim), rule)
        else:
            logger.debug("line %d: %s by %s failed: %s", step.line, render(step.claim), rule, error)

    def _visit(self, steps: Sequence[ProofStep], depth: int):
        for step in steps:
            if isinstance(step, SubProof):
                self._visit(step.steps, depth + 1)
            elif isinstance(step, AssumeStep):
                self._record(step, depth, "assume", None)
            else:
                try:
                    self._check(step)
                    error = None
                except VerificationError as e:
                    error = e
                self._record(step, depth, str(step.justification), error)

    # -- references -----------------------------------------------------

    def _lookup(self, number: int) -> ProofStep:
        target = self.proof.index.get(number)
        if target is None:
            raise LineNotFound(number)
        return target

    def _cite_line(self, step: RegularStep, number: int) -> Claim:
        """Claim of a visible, proved line."""
        target = self._lookup(number)
        if isinstance(target, SubProof):
            raise JustificationMismatch("a proof line", f"sub-proof {number}")
        if not self.visibility[step.line].can_cite_line(number):
            raise LineNotVisible(number)
        if not self.proved.get(number, False):
            raise UnprovedDependency(number)
        return target.claim

    def _cite_subproof(self, step: RegularStep, number: int) -> Tuple[Claim, Claim]:
        """Assumption and conclusion of a visible, closed sub-proof."""
        target = self._lookup(number)
        if not isinstance(target, SubProof):
            raise JustificationMismatch("a sub-proof", f"line {number}")
        if not self.visibility[step.line].can_cite_subproof(number):
            raise LineNotVisible(number)
        conclusion = target.conclusion
        if isinstance(conclusion, SubProof):
            raise JustificationMismatch(f"sub-proof {number} to end in a claim",
                                        f"sub-proof {conclusion.number}")
        if not self.proved.get(conclusion.line, False):
            raise UnprovedDependency(conclusion.line,
                                     f"sub-proof {number} ends in unproved line {conclusion.line}")
        return target.assume.claim, conclusion.claim

    # -- shapes ---------------------------------------------------------

    @staticmethod
    def _same(expected: Claim, found: Claim):
        if expected != found:
            raise JustificationMismatch(render(expected), render(found))

    @staticmethod
    def _shaped(claim: Claim, shape: type, description: str):
        if not isinstance(claim, shape):
            raise JustificationMismatch(description, render(claim))
        return claim

    # -- rules ----------------------------------------------------------

    def _check(self, step: RegularStep):
        """Raise a VerificationError unless the step's rule accepts it."""
        rule = step.justification.rule
        refs = step.justification.refs
        claim = step.claim

        if rule is Rule.PREMISE:
            premises = self.proof.sequent.premises
            if claim not in premises:
                listed = ", ".join(render(p) for p in premises) or "(none)"
                raise JustificationMismatch(f"one of the premises {listed}", render(claim))
            return

        if rule is Rule.AND_INTRODUCTION:
            left = self._cite_line(step, refs[0])
            right = self._cite_line(step, refs[1])
            self._same(Conjunction(left, right), claim)
            return

        if rule in (Rule.AND_ELIMINATION_1, Rule.AND_ELIMINATION_2):
            conj = self._shaped(self._cite_line(step, refs[0]), Conjunction, "a conjunction")
            self._same(conj.left if rule is Rule.AND_ELIMINATION_1 else conj.right, claim)
            return

        if rule in (Rule.OR_INTRODUCTION_1, Rule.OR_INTRODUCTION_2):
            cited = self._cite_line(step, refs[0])
            disj = self._shaped(claim, Disjunction, f"a disjunction containing {render(cited)}")
            side = disj.left if rule is Rule.OR_INTRODUCTION_1 else disj.right
            self._same(cited, side)
            return

        if rule is Rule.OR_ELIMINATION:
            disj = self._shaped(self._cite_line(step, refs[0]), Disjunction, "a disjunction")
            left_assume, left_result = self._cite_subproof(step, refs[1])
            right_assume, right_result = self._cite_subproof(step, refs[2])
            self._same(disj.left, left_assume)
            self._same(disj.right, right_assume)
            self._same(left_result, right_result)
            self._same(left_result, claim)
            return

        if rule is Rule.IMPLICATION_INTRODUCTION:
            assumed, concluded = self._cite_subproof(step, refs[0])
            self._same(Implication(assumed, concluded), claim)
            return

        if rule is Rule.IMPLICATION_ELIMINATION:
            # →e(i, j): line i proves a, line j proves a → b.
            antecedent = self._cite_line(step, refs[0])
            impl = self._shaped(self._cite_line(step, refs[1]), Implication, "an implication")
            self._same(impl.antecedent, antecedent)
            self._same(impl.consequent, claim)
            return

        if rule is Rule.NEGATION_INTRODUCTION:
            assumed, concluded = self._cite_subproof(step, refs[0])
            self._same(FALSE, concluded)
            self._same(Negation(assumed), claim)
            return

        if rule is Rule.NEGATION_ELIMINATION:
            neg = self._shaped(self._cite_line(step, refs[0]), Negation, "a negation")
            self._same(neg.operand, self._cite_line(step, refs[1]))
            self._same(FALSE, claim)
            return

        if rule is Rule.CONTRADICTION_ELIMINATION:
            self._same(FALSE, self._cite_line(step, refs[0]))
            return

        if rule is Rule.PROOF_BY_CONTRADICTION:
            assumed, concluded = self._cite_subproof(step, refs[0])
            self._same(Negation(claim), assumed)
            self._same(FALSE, concluded)
            return

        raise ValueError(f"Unknown rule: {rule}")


def _check_claim_kinds(proof: Proof, env: KindEnvironment):
    claims = list(proof.sequent.premises) + [proof.sequent.goal]
    claims.extend(step.claim for step in iter_steps(proof.steps) if not isinstance(step, SubProof))
    for claim in claims:
        check_kinds(claim, env)


def verify(sequent: Sequent, steps: Sequence[ProofStep],
           env: KindEnvironment = None) -> VerificationResult:
    """Check a proof of ``sequent``.

    Args:
        sequent: Premises and goal
        steps: Top-level proof steps, sub-proofs nested inside
        env: Variable kinds; defaults to a lenient environment where every
            identifier is Bool

    Returns a VerificationResult:
    - proved: every step checks and the last one proves the goal
    - disproved: some step failed or the goal was not reached
    - malformed: the proof's shape is invalid or some claim is ill-kinded;
      no rule was checked
    """
    try:
        proof = build_proof(sequent, steps)
    except MalformedProof as e:
        logger.warning("malformed proof: %s", e.reason)
        return VerificationResult(MALFORMED, reason=e.reason)

    try:
        _check_claim_kinds(proof, env if env is not None else KindEnvironment())
    except KindError as e:
        logger.warning("ill-kinded proof: %s", e)
        return VerificationResult(MALFORMED, reason=f"ill-kinded claim: {e}")

    visibility = ScopeResolver().resolve(proof.steps)
    return Verifier(proof, visibility).run()


def check_source(source: str, config: CheckerConfig = None) -> VerificationResult:
    """Parse, kind-check and verify proof source text.

    Raises:
        ParseError, KindError: the source could not be read as a proof
    """
    config = config or CheckerConfig()
    document = parse(source, strict=config.strict)
    return verify(document.sequent, document.steps, document.kind_environment())


def check_file(filename: str, config: CheckerConfig = None) -> VerificationResult:
    config = config or CheckerConfig()
    document = parse_file(filename, strict=config.strict)
    return verify(document.sequent, document.steps, document.kind_environment())
