"""
Claim AST for propositional logic.

Claims are frozen dataclasses with structural equality: same node class and
equal fields at every position. Source positions ride along for diagnostics
but never take part in equality or hashing.

A long chain such as ``p ∧ p ∧ ... ∧ p`` parses into a tree as deep as the
chain is long, so every walk over a claim here uses an explicit stack.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

Position = Tuple[int, int]


class Claim:
    """Base class for claim nodes."""

    @property
    def operands(self) -> Tuple["Claim", ...]:
        return ()

    @property
    def atom(self) -> Any:
        """Value that distinguishes two leaves of the same class."""
        return None

    def __eq__(self, other):
        if not isinstance(other, Claim):
            return NotImplemented
        pairs = [(self, other)]
        while pairs:
            left, right = pairs.pop()
            if left is right:
                continue
            if type(left) is not type(right) or left.atom != right.atom:
                return False
            pairs.extend(zip(left.operands, right.operands))
        return True

    def __hash__(self):
        return fold(self, lambda node, args: hash((type(node).__name__, node.atom) + tuple(args)))

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True, eq=False)
class BoolLiteral(Claim):
    value: bool
    pos: Optional[Position] = field(default=None, compare=False, repr=False)

    @property
    def atom(self):
        return self.value


@dataclass(frozen=True, eq=False)
class IntLiteral(Claim):
    value: int
    pos: Optional[Position] = field(default=None, compare=False, repr=False)

    @property
    def atom(self):
        return self.value


@dataclass(frozen=True, eq=False)
class Identifier(Claim):
    name: str
    pos: Optional[Position] = field(default=None, compare=False, repr=False)

    @property
    def atom(self):
        return self.name


@dataclass(frozen=True, eq=False)
class Negation(Claim):
    operand: Claim
    pos: Optional[Position] = field(default=None, compare=False, repr=False)

    @property
    def operands(self):
        return (self.operand,)


@dataclass(frozen=True, eq=False)
class Conjunction(Claim):
    left: Claim
    right: Claim
    pos: Optional[Position] = field(default=None, compare=False, repr=False)

    @property
    def operands(self):
        return (self.left, self.right)


@dataclass(frozen=True, eq=False)
class Disjunction(Claim):
    left: Claim
    right: Claim
    pos: Optional[Position] = field(default=None, compare=False, repr=False)

    @property
    def operands(self):
        return (self.left, self.right)


@dataclass(frozen=True, eq=False)
class Implication(Claim):
    antecedent: Claim
    consequent: Claim
    pos: Optional[Position] = field(default=None, compare=False, repr=False)

    @property
    def operands(self):
        return (self.antecedent, self.consequent)


TRUE = BoolLiteral(True)
FALSE = BoolLiteral(False)

BINARY_SYMBOLS = {
    Conjunction: "∧",
    Disjunction: "∨",
    Implication: "→",
}

JSON_TYPES = {
    Conjunction: "and",
    Disjunction: "or",
    Implication: "implies",
}


def postorder(claim: Claim) -> Iterator[Claim]:
    """Yield every node of ``claim``, operands left to right before their parent."""
    stack = [(claim, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded or not node.operands:
            yield node
            continue
        stack.append((node, True))
        for operand in reversed(node.operands):
            stack.append((operand, False))


def fold(claim: Claim, combine: Callable[[Claim, List[Any]], Any]) -> Any:
    """Combine ``claim`` bottom-up: ``combine(node, operand_results)``."""
    values: List[Any] = []
    for node in postorder(claim):
        arity = len(node.operands)
        args = values[len(values) - arity:] if arity else []
        if arity:
            del values[len(values) - arity:]
        values.append(combine(node, args))
    return values.pop()


def _render_node(claim: Claim, args: List[str]) -> str:
    if isinstance(claim, BoolLiteral):
        return "⊤" if claim.value else "⊥"
    if isinstance(claim, IntLiteral):
        return str(claim.value)
    if isinstance(claim, Identifier):
        return claim.name
    if isinstance(claim, Negation):
        return "¬" + args[0]
    symbol = BINARY_SYMBOLS.get(type(claim))
    if symbol is None:
        raise TypeError(f"Not a claim: {claim!r}")
    return f"({args[0]} {symbol} {args[1]})"


def render(claim: Claim) -> str:
    """Render a claim as fully parenthesized text that parses back to itself."""
    return fold(claim, _render_node)


def _dict_node(claim: Claim, args: List[Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(claim, BoolLiteral):
        return {"type": "bool", "value": claim.value}
    if isinstance(claim, IntLiteral):
        return {"type": "num", "value": claim.value}
    if isinstance(claim, Identifier):
        return {"type": "var", "name": claim.name}
    if isinstance(claim, Negation):
        return {"type": "not", "arg": args[0]}
    ty = JSON_TYPES.get(type(claim))
    if ty is None:
        raise TypeError(f"Not a claim: {claim!r}")
    return {"type": ty, "lhs": args[0], "rhs": args[1]}


def to_dict(claim: Claim) -> Dict[str, Any]:
    """Convert a claim to the JSON AST shape used by ``--json`` and the web API."""
    return fold(claim, _dict_node)
