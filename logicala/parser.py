"""
Proof Checker - Logika-style Proof Parser

Parses a propositional sequent and its natural-deduction proof.

Syntax:
    # Comments start with # or //
    let p, q: Bool       Optional declarations (kind defaults to Bool)
    p, p → q ⊢ q         Sequent: premises, turnstile, goal
    {
      1. p        premise
      2. p → q    premise
      3. q        →e 1 2       (or: →e(1, 2))
      4. {
           5. r   assume
           6. ...
         }
    }

Claim syntax (loosest to tightest):
    p → q        (or: p -> q, p implies q)     right-associative
    p ∨ q        (or: p | q, p or q)
    p ∧ q        (or: p & q, p and q)
    ¬p           (or: ~p, !p, not p)
    ⊤, ⊥         (or: true, false, _|_)
    (p)

Reserved words (never identifiers):
    true false not neg and or implies let premise assume pbc

Rules:
    premise  assume  ∧i  ∧e1  ∧e2  ∨i1  ∨i2  ∨e  →i  →e  ¬i  ¬e  ⊥e  pbc
    ASCII spellings replace the symbol: &i, |e, ->i, ~e, _|_e, ...
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from .claims import BoolLiteral, Claim, Conjunction, Disjunction, Identifier, \
    Implication, IntLiteral, Negation, to_dict as claim_to_dict
from .errors import NestingTooDeep, ParseError, ReservedIdentifier, UnexpectedEnd, \
    UnexpectedToken, UnmatchedParenthesis
from .kinds import Kind, KindEnvironment, check_kinds
from .proof import RULES_BY_SYMBOL, AssumeStep, Justification, ProofStep, \
    RegularStep, Sequent, SubProof, iter_steps, step_to_dict

# Words that can never name a proposition. Most of them lex as operators,
# rules or keywords; ``neg`` is held back for future use.
RESERVED = {
    'true', 'false', 'not', 'neg', 'and', 'or', 'implies',
    'let', 'premise', 'assume', 'pbc',
}

# A rule symbol must be followed by its references, which keeps ``¬i``
# (the negation of i) apart from the ``¬i`` rule.
_RULE_SUFFIX_END = r'(?![A-Za-z0-9_])(?=[ \t]*[\d(])'
RULE_PATTERN = (
    r'(?:(?:∧|&)(?:i|e1|e2)'
    r'|(?:∨|\|)(?:i1|i2|e)'
    r'|(?:→|->)(?:i|e)'
    r'|(?:¬|~|!)(?:i|e)'
    r'|(?:⊥|_\|_)e)' + _RULE_SUFFIX_END
)

# ASCII rule prefixes and their canonical symbol.
RULE_PREFIXES = (
    ('_|_', '⊥'),
    ('->', '→'),
    ('&', '∧'),
    ('|', '∨'),
    ('~', '¬'),
    ('!', '¬'),
)


def canonical_rule(text: str) -> str:
    for ascii_prefix, symbol in RULE_PREFIXES:
        if text.startswith(ascii_prefix):
            return symbol + text[len(ascii_prefix):]
    return text


@dataclass
class Token:
    type: str
    value: str
    line: int
    col: int


class Lexer:
    """Tokenizer for sequents and proofs."""

    KEYWORDS = {
        'true': 'TRUE',
        'false': 'FALSE',
        'not': 'NOT',
        'and': 'AND',
        'or': 'OR',
        'implies': 'IMPLIES',
        'let': 'LET',
        # Word-shaped rules
        'premise': 'RULE',
        'assume': 'RULE',
        'pbc': 'RULE',
    }

    TOKEN_PATTERNS = [
        ('WHITESPACE', r'[ \t\r]+'),
        ('NEWLINE', r'\n'),
        ('COMMENT', r'(?:#|//)[^\n]*'),
        ('RULE', RULE_PATTERN),
        ('TURNSTILE', r'⊢|\|-'),
        ('IMPLIES', r'→|->'),
        ('FALSE', r'⊥|_\|_'),
        ('TRUE', r'⊤'),
        ('NOT', r'¬|~|!'),
        ('AND', r'∧|&'),
        ('OR', r'∨|\|'),
        ('NUMBER', r'\d+'),
        ('IDENT', r'[a-zA-Z_][a-zA-Z0-9_]*'),
        ('LPAREN', r'\('),
        ('RPAREN', r'\)'),
        ('LBRACE', r'\{'),
        ('RBRACE', r'\}'),
        ('COMMA', r','),
        ('DOT', r'\.'),
        ('COLON', r':'),
    ]

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.col = 1
        self.pattern = '|'.join(f'(?P<{name}>{pat})' for name, pat in self.TOKEN_PATTERNS)
        self.regex = re.compile(self.pattern)

    def tokenize(self) -> List[Token]:
        tokens = []

        while self.pos < len(self.source):
            match = self.regex.match(self.source, self.pos)

            if not match:
                raise UnexpectedToken(f"Unexpected character: {self.source[self.pos]!r}", self.line, self.col)

            token_type = match.lastgroup
            token_value = match.group()

            if token_type == 'NEWLINE':
                tokens.append(Token('NEWLINE', '\n', self.line, self.col))
                self.line += 1
                self.col = 1
                self.pos = match.end()
                continue
            elif token_type in ('WHITESPACE', 'COMMENT'):
                pass
            elif token_type == 'RULE':
                tokens.append(Token('RULE', canonical_rule(token_value), self.line, self.col))
            elif token_type == 'IDENT' and token_value in self.KEYWORDS:
                tokens.append(Token(self.KEYWORDS[token_value], token_value, self.line, self.col))
            else:
                tokens.append(Token(token_type, token_value, self.line, self.col))

            self.col += len(token_value)
            self.pos = match.end()

        tokens.append(Token('EOF', '', self.line, self.col))
        return tokens


@dataclass
class ProofDocument:
    """A parsed proof file: declarations, sequent and top-level steps."""
    declarations: Dict[str, Kind]
    sequent: Sequent
    steps: Tuple[ProofStep, ...]
    strict: bool = field(default=False)

    def claims(self):
        yield from self.sequent.premises
        yield self.sequent.goal
        for step in iter_steps(self.steps):
            if not isinstance(step, SubProof):
                yield step.claim

    def kind_environment(self) -> KindEnvironment:
        return KindEnvironment(self.declarations, strict=self.strict)

    def check_kinds(self):
        """Kind-check every claim, stopping at the first error."""
        env = self.kind_environment()
        for claim in self.claims():
            check_kinds(claim, env)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "declarations": {name: str(kind) for name, kind in self.declarations.items()},
            "premises": [claim_to_dict(p) for p in self.sequent.premises],
            "goal": claim_to_dict(self.sequent.goal),
            "steps": [step_to_dict(s) for s in self.steps],
        }


class Parser:
    """Recursive descent parser for claims and proofs."""

    END_TYPES = ('EOF', 'NEWLINE')

    def __init__(self, tokens: List[Token]):
        tokens = list(tokens)
        if not tokens or tokens[-1].type != 'EOF':
            last = tokens[-1] if tokens else Token('EOF', '', 1, 1)
            tokens.append(Token('EOF', '', last.line, last.col + len(last.value)))
        self.tokens = tokens
        self.pos = 0
        self.paren_depth = 0

    def current(self) -> Token:
        # A parenthesized claim may span lines.
        while self.paren_depth and self.pos < len(self.tokens) and self.tokens[self.pos].type == 'NEWLINE':
            self.pos += 1
        return self.tokens[self.pos] if self.pos < len(self.tokens) else self.tokens[-1]

    def advance(self) -> Token:
        tok = self.current()
        self.pos += 1
        return tok

    def expect(self, token_type: str, what: str = None) -> Token:
        tok = self.current()
        if tok.type != token_type:
            self.fail(f"Expected {what or token_type}", tok)
        return self.advance()

    def match(self, *token_types: str) -> bool:
        return self.current().type in token_types

    def skip_newlines(self):
        while self.match('NEWLINE'):
            self.advance()

    def fail(self, message: str, tok: Token):
        if tok.type in self.END_TYPES:
            where = "end of input" if tok.type == 'EOF' else "end of line"
            raise UnexpectedEnd(f"{message}, reached {where}", tok.line, tok.col)
        raise UnexpectedToken(f"{message}, got {tok.type} ({tok.value!r})", tok.line, tok.col)

    # -- claims ---------------------------------------------------------

    def parse_claim(self) -> Claim:
        """Parse a complete claim; nothing but newlines may follow it."""
        self.skip_newlines()
        claim = self.parse_formula()
        self.skip_newlines()
        if not self.match('EOF'):
            tok = self.current()
            raise UnexpectedToken(f"Unexpected token after claim: {tok.type} ({tok.value!r})", tok.line, tok.col)
        return claim

    def parse_formula(self) -> Claim:
        """Parse a claim (implication has the lowest precedence)."""
        return self.parse_implies()

    def parse_implies(self) -> Claim:
        """Parse implication (right-associative)."""
        operands = [self.parse_or()]
        arrows = []

        while self.match('IMPLIES'):
            arrows.append(self.advance())
            operands.append(self.parse_or())

        claim = operands.pop()
        while arrows:
            tok = arrows.pop()
            claim = Implication(operands.pop(), claim, pos=(tok.line, tok.col))
        return claim

    def parse_or(self) -> Claim:
        """Parse disjunction (left-associative)."""
        left = self.parse_and()

        while self.match('OR'):
            tok = self.advance()
            left = Disjunction(left, self.parse_and(), pos=(tok.line, tok.col))

        return left

    def parse_and(self) -> Claim:
        """Parse conjunction (left-associative)."""
        left = self.parse_not()

        while self.match('AND'):
            tok = self.advance()
            left = Conjunction(left, self.parse_not(), pos=(tok.line, tok.col))

        return left

    def parse_not(self) -> Claim:
        """Parse negation."""
        negations = []
        while self.match('NOT'):
            negations.append(self.advance())

        claim = self.parse_atom()
        for tok in reversed(negations):
            claim = Negation(claim, pos=(tok.line, tok.col))
        return claim

    def parse_atom(self) -> Claim:
        """Parse literal, identifier or parenthesized claim."""
        tok = self.current()

        if tok.type in ('TRUE', 'FALSE'):
            self.advance()
            return BoolLiteral(tok.type == 'TRUE', pos=(tok.line, tok.col))

        if tok.type == 'NUMBER':
            self.advance()
            return IntLiteral(int(tok.value), pos=(tok.line, tok.col))

        if tok.value in RESERVED:
            raise ReservedIdentifier(tok.value, tok.line, tok.col)

        if tok.type == 'IDENT':
            self.advance()
            return Identifier(tok.value, pos=(tok.line, tok.col))

        if tok.type == 'LPAREN':
            self.advance()
            self.paren_depth += 1
            claim = self.parse_formula()
            if not self.match('RPAREN'):
                self.paren_depth -= 1
                raise UnmatchedParenthesis("'(' is never closed", tok.line, tok.col)
            self.paren_depth -= 1
            self.advance()
            return claim

        self.fail("Expected a claim", tok)

    # -- proofs ---------------------------------------------------------

    def parse_document(self) -> ProofDocument:
        """Parse declarations, the sequent and the proof block."""
        self.skip_newlines()

        declarations = {}
        while self.match('LET'):
            self.parse_declaration(declarations)
            self.skip_newlines()

        sequent = self.parse_sequent()
        self.skip_newlines()
        steps = self.parse_block()
        self.skip_newlines()

        if not self.match('EOF'):
            tok = self.current()
            raise UnexpectedToken(f"Unexpected token after proof: {tok.type} ({tok.value!r})", tok.line, tok.col)

        return ProofDocument(declarations, sequent, tuple(steps))

    def parse_identifier(self) -> str:
        tok = self.current()
        if tok.value in RESERVED:
            raise ReservedIdentifier(tok.value, tok.line, tok.col)
        if tok.type != 'IDENT':
            self.fail("Expected an identifier", tok)
        return self.advance().value

    def parse_declaration(self, declarations: Dict[str, Kind]):
        """Parse ``let p, q: Bool``."""
        self.expect('LET')
        names = [self.parse_identifier()]
        while self.match('COMMA'):
            self.advance()
            names.append(self.parse_identifier())

        kind = Kind.BOOL
        if self.match('COLON'):
            self.advance()
            kind_tok = self.expect('IDENT', "a kind name")
            try:
                kind = Kind.from_name(kind_tok.value)
            except ValueError:
                raise UnexpectedToken(f"Unknown kind {kind_tok.value!r}", kind_tok.line, kind_tok.col)

        if not self.match(*self.END_TYPES):
            self.fail("Expected end of declaration", self.current())

        for name in names:
            declarations[name] = kind

    def parse_sequent(self) -> Sequent:
        """Parse ``premise, premise ⊢ goal``. The premise list may be empty."""
        premises = []
        if not self.match('TURNSTILE'):
            premises.append(self.parse_formula())
            while self.match('COMMA'):
                self.advance()
                premises.append(self.parse_formula())

        self.expect('TURNSTILE', "'⊢'")
        goal = self.parse_formula()
        return Sequent(tuple(premises), goal)

    def parse_block(self) -> List[ProofStep]:
        """Parse a braced list of steps."""
        opening = self.expect('LBRACE', "'{'")
        self.skip_newlines()

        steps = []
        while not self.match('RBRACE'):
            if self.match('EOF'):
                raise UnexpectedEnd("'{' is never closed", opening.line, opening.col)
            steps.append(self.parse_step())
            self.skip_newlines()

        self.advance()
        return steps

    def parse_step(self) -> ProofStep:
        """Parse ``N. claim rule refs`` or ``N. { ... }``."""
        number = int(self.expect('NUMBER', "a line number").value)
        self.expect('DOT', "'.' after line number")

        if self.match('LBRACE'):
            return SubProof(number, tuple(self.parse_block()))

        claim = self.parse_formula()

        rule_tok = self.current()
        if rule_tok.type != 'RULE':
            self.fail(f"Expected a justification for line {number}", rule_tok)
        self.advance()
        refs = self.parse_refs()

        if not self.match('NEWLINE', 'RBRACE', 'EOF'):
            tok = self.current()
            raise UnexpectedToken(f"Unexpected token after justification: {tok.type} ({tok.value!r})",
                                  tok.line, tok.col)

        if rule_tok.value == 'assume':
            if refs:
                raise UnexpectedToken("assume takes no references", rule_tok.line, rule_tok.col)
            return AssumeStep(number, claim)

        rule = RULES_BY_SYMBOL[rule_tok.value]
        if len(refs) != rule.arity:
            error = UnexpectedEnd if len(refs) < rule.arity else UnexpectedToken
            raise error(f"{rule.symbol} takes {rule.arity} reference(s), got {len(refs)}",
                        rule_tok.line, rule_tok.col)
        return RegularStep(number, claim, Justification(rule, tuple(refs)))

    def parse_refs(self) -> List[int]:
        """Parse ``1 2`` or ``(1, 2)``."""
        refs = []
        if self.match('LPAREN'):
            opening = self.advance()
            if not self.match('RPAREN'):
                refs.append(int(self.expect('NUMBER', "a line number").value))
                while self.match('COMMA'):
                    self.advance()
                    refs.append(int(self.expect('NUMBER', "a line number").value))
            if not self.match('RPAREN'):
                raise UnmatchedParenthesis("'(' is never closed", opening.line, opening.col)
            self.advance()
            return refs

        while self.match('NUMBER'):
            refs.append(int(self.advance().value))
        return refs


NESTING_MESSAGE = "parentheses are nested too deeply"


def parse_claim(tokens: List[Token]) -> Claim:
    """Parse a classified token stream into a claim."""
    try:
        return Parser(tokens).parse_claim()
    except RecursionError:
        raise NestingTooDeep(NESTING_MESSAGE) from None


def parse_claim_text(source: str) -> Claim:
    """Parse claim text such as ``p ∧ q → r``."""
    return parse_claim(Lexer(source).tokenize())


def parse_sequent_text(source: str) -> Sequent:
    """Parse a lone sequent such as ``p, p → q ⊢ q``."""
    parser = Parser(Lexer(source).tokenize())
    parser.skip_newlines()
    try:
        sequent = parser.parse_sequent()
    except RecursionError:
        raise NestingTooDeep(NESTING_MESSAGE) from None
    parser.skip_newlines()
    if not parser.match('EOF'):
        tok = parser.current()
        raise UnexpectedToken(f"Unexpected token after sequent: {tok.type} ({tok.value!r})", tok.line, tok.col)
    return sequent


def parse(source: str, strict: bool = False) -> ProofDocument:
    """Parse and kind-check a proof document.

    Raises:
        ParseError: on the first syntax error, or NestingTooDeep when
            parentheses nest beyond the interpreter's recursion limit
        KindError: on the first ill-kinded claim
    """
    lexer = Lexer(source)
    tokens = lexer.tokenize()
    try:
        document = Parser(tokens).parse_document()
    except RecursionError:
        raise NestingTooDeep(NESTING_MESSAGE) from None
    document.strict = strict
    document.check_kinds()
    return document


def parse_file(filename: str, strict: bool = False) -> ProofDocument:
    """Parse a proof file."""
    with open(filename, 'r', encoding='utf-8') as f:
        source = f.read()
    return parse(source, strict)


__all__ = [
    'Lexer', 'Parser', 'ParseError', 'ProofDocument', 'Token',
    'parse', 'parse_claim', 'parse_claim_text', 'parse_file', 'parse_sequent_text',
]
