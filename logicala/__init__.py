"""Natural-deduction proof checker for propositional logic."""

from .claims import BoolLiteral, Claim, Conjunction, Disjunction, Identifier, \
    Implication, IntLiteral, Negation, render
from .errors import JustificationMismatch, KindError, KindMismatch, LineNotFound, \
    LineNotVisible, MalformedProof, NestingTooDeep, ParseError, ProofCheckError, \
    ReservedIdentifier, StructureError, UnexpectedEnd, UnexpectedToken, \
    UnknownIdentifier, UnmatchedParenthesis, UnprovedDependency, VerificationError
from .kinds import Kind, KindEnvironment, check_kinds
from .parser import parse, parse_claim, parse_claim_text, parse_file
from .proof import AssumeStep, Justification, RegularStep, Rule, Sequent, SubProof, \
    build_proof
from .prover import VerificationResult, check_file, check_source, verify

__version__ = "0.1.0"
