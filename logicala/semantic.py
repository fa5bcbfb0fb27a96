"""
Proof Checker - Semantic Validity Check

Asks z3 whether a sequent holds under every truth assignment. This is a
cross-check on the sequent itself: it says whether a proof could exist,
never what the proof is.
"""

import logging

from z3 import Bool, BoolVal, Solver, Not, And, Or, Implies, is_true, sat, unsat

from .claims import BoolLiteral, Claim, Conjunction, Disjunction, Identifier, \
    Implication, IntLiteral, Negation, fold
from .errors import KindMismatch
from .kinds import Kind
from .proof import Sequent

logger = logging.getLogger(__name__)


def claim_to_z3(claim: Claim, env):
    """Convert a claim to a z3 Boolean expression.

    Args:
        claim: Claim to convert
        env: Variable environment mapping names to z3 constants; filled in
            as new identifiers are met
    """
    def convert(node, args):
        if isinstance(node, BoolLiteral):
            return BoolVal(node.value)

        if isinstance(node, Identifier):
            if node.name not in env:
                env[node.name] = Bool(node.name)
            return env[node.name]

        if isinstance(node, Negation):
            return Not(args[0])

        if isinstance(node, Conjunction):
            return And(args[0], args[1])

        if isinstance(node, Disjunction):
            return Or(args[0], args[1])

        if isinstance(node, Implication):
            return Implies(args[0], args[1])

        if isinstance(node, IntLiteral):
            line, col = node.pos or (None, None)
            raise KindMismatch(Kind.BOOL, Kind.INT, line, col)

        raise TypeError(f"Not a claim: {node!r}")

    return fold(claim, convert)


def format_counterexample(model, env):
    """Format a z3 model as a human-readable counterexample."""
    lines = ["Counterexample found:"]
    for name, var in sorted(env.items()):
        value = model.eval(var, model_completion=True)
        lines.append(f"  {name} = {value}")
    return "\n".join(lines)


def check_sequent(sequent: Sequent):
    """Decide whether the premises entail the goal.

    Returns a dict with:
    - ok: True if the sequent is valid
    - status: "valid", "invalid" or "unknown"
    - model: variable assignments making the premises true and the goal
      false (if invalid)
    - message: counterexample text (if invalid)
    """
    env = {}
    s = Solver()
    for premise in sequent.premises:
        s.add(claim_to_z3(premise, env))
    s.add(Not(claim_to_z3(sequent.goal, env)))

    result = s.check()

    if result == unsat:
        logger.debug("sequent %s is valid", sequent)
        return {"ok": True, "status": "valid"}

    if result == sat:
        m = s.model()
        model_out = {
            name: is_true(m.eval(v, model_completion=True))
            for name, v in sorted(env.items())
        }
        logger.debug("sequent %s has counterexample %s", sequent, model_out)
        return {
            "ok": False,
            "status": "invalid",
            "model": model_out,
            "message": format_counterexample(m, env),
        }

    return {
        "ok": False,
        "status": "unknown",
        "message": "z3 could not decide the sequent",
    }
