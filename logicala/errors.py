"""
Error taxonomy for the proof checker.

ParseError and KindError abort parsing at the first problem. StructureError
aborts before verification starts. VerificationError never escapes the rule
engine: it is recorded against the offending step.
"""


class ProofCheckError(Exception):
    """Base exception for everything the checker reports."""
    pass


class LocatedError(ProofCheckError):
    """Error with optional source location information."""
    def __init__(self, message: str, line: int = None, col: int = None):
        self.line = line
        self.col = col
        if line is not None:
            loc = f"line {line}"
            if col is not None:
                loc += f", col {col}"
            message = f"{loc}: {message}"
        super().__init__(message)


class ParseError(LocatedError):
    """Error while turning tokens into claims or proof structure."""
    pass


class UnexpectedToken(ParseError):
    pass


class UnmatchedParenthesis(ParseError):
    pass


class ReservedIdentifier(ParseError):
    def __init__(self, name: str, line: int = None, col: int = None):
        self.name = name
        super().__init__(f"{name!r} is a reserved word and cannot be used as an identifier", line, col)


class UnexpectedEnd(ParseError):
    pass


class NestingTooDeep(ParseError):
    """Parentheses nested deeper than the parser can follow."""
    pass


class KindError(LocatedError):
    """A claim is not well-kinded."""
    pass


class KindMismatch(KindError):
    def __init__(self, expected, found, line: int = None, col: int = None):
        self.expected = expected
        self.found = found
        super().__init__(f"expected {expected}, found {found}", line, col)

    @property
    def position(self):
        return (self.line, self.col)


class UnknownIdentifier(KindError):
    def __init__(self, name: str, line: int = None, col: int = None):
        self.name = name
        super().__init__(f"undeclared identifier {name!r}", line, col)


class StructureError(ProofCheckError):
    pass


class MalformedProof(StructureError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class VerificationError(ProofCheckError):
    """A single step failed to check. Local to that step."""
    pass


class UnprovedDependency(VerificationError):
    def __init__(self, line: int, message: str = None):
        self.line = line
        super().__init__(message or f"line {line} is not proved")


class LineNotFound(UnprovedDependency):
    def __init__(self, line: int):
        super().__init__(line, f"line {line} does not exist")


class LineNotVisible(UnprovedDependency):
    def __init__(self, line: int):
        super().__init__(line, f"line {line} is not visible from here")


class JustificationMismatch(VerificationError):
    def __init__(self, expected_shape: str, found: str):
        self.expected_shape = expected_shape
        self.found = found
        super().__init__(f"expected {expected_shape}, found {found}")
