"""
Kind checking for claims.

Every logical connective takes Bool operands and yields Bool. Integer
literals and variables declared ``Int`` exist so that ill-kinded input can
be written down and rejected; no inference rule ever accepts them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .claims import BoolLiteral, Claim, Identifier, IntLiteral
from .errors import KindMismatch, UnknownIdentifier


class Kind(Enum):
    BOOL = "Bool"
    INT = "Int"

    def __str__(self):
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "Kind":
        for kind in cls:
            if kind.value == name:
                return kind
        raise ValueError(f"Unknown kind: {name}")


@dataclass(frozen=True)
class KindedClaim:
    """A claim annotated with its kind, operands annotated recursively."""
    claim: Claim
    kind: Kind
    operands: Tuple["KindedClaim", ...] = ()


class KindEnvironment:
    """Kinds of declared variables.

    In strict mode every identifier must be declared; otherwise undeclared
    identifiers are taken to be Bool.
    """

    def __init__(self, declarations: Optional[Dict[str, Kind]] = None, strict: bool = False):
        self.declarations = dict(declarations or {})
        self.strict = strict

    def lookup(self, identifier: Identifier) -> Kind:
        kind = self.declarations.get(identifier.name)
        if kind is not None:
            return kind
        if self.strict:
            line, col = identifier.pos or (None, None)
            raise UnknownIdentifier(identifier.name, line, col)
        return Kind.BOOL


def _annotate_leaf(claim: Claim, env: KindEnvironment) -> KindedClaim:
    if isinstance(claim, BoolLiteral):
        return KindedClaim(claim, Kind.BOOL)
    if isinstance(claim, IntLiteral):
        return KindedClaim(claim, Kind.INT)
    if isinstance(claim, Identifier):
        return KindedClaim(claim, env.lookup(claim))
    raise TypeError(f"Not a claim: {claim!r}")


def _annotate(claim: Claim, env: KindEnvironment) -> KindedClaim:
    # Each frame holds a node and the annotations of the operands finished so
    # far. An operand is checked as soon as it is finished, left to right.
    stack = [(claim, [])]
    while True:
        node, done = stack[-1]
        if len(done) < len(node.operands):
            stack.append((node.operands[len(done)], []))
            continue

        stack.pop()
        if node.operands:
            # Every connective takes Bool operands and yields Bool.
            annotated = KindedClaim(node, Kind.BOOL, tuple(done))
        else:
            annotated = _annotate_leaf(node, env)
        if not stack:
            return annotated

        parent, siblings = stack[-1]
        if annotated.kind is not Kind.BOOL:
            line, col = node.pos or parent.pos or (None, None)
            raise KindMismatch(Kind.BOOL, annotated.kind, line, col)
        siblings.append(annotated)


def check_kinds(claim: Claim, env: KindEnvironment = None,
                expected: Optional[Kind] = Kind.BOOL) -> KindedClaim:
    """Annotate ``claim`` with kinds, raising on the first violation.

    Args:
        claim: Claim to check
        env: Variable kinds; defaults to a lenient empty environment
        expected: Kind the whole claim must have, or None for any kind
    """
    if env is None:
        env = KindEnvironment()
    annotated = _annotate(claim, env)
    if expected is not None and annotated.kind is not expected:
        line, col = claim.pos or (None, None)
        raise KindMismatch(expected, annotated.kind, line, col)
    return annotated
