#!/usr/bin/env python3
"""
Proof Checker - Command Line Interface

Usage:
    logicala <file.proof>              Verify a proof file
    logicala --repl                    Interactive REPL mode
    logicala --json <file.proof>       Parse and output JSON AST
    logicala --semantic <file.proof>   Also check the sequent with z3
"""

import sys
import argparse
import json

from .claims import render
from .config import configure_logging, load_config
from .errors import KindError, ParseError
from .kinds import KindEnvironment, check_kinds
from .parser import Lexer, parse_claim_text, parse_file, parse_sequent_text
from .prover import verify
from .semantic import check_sequent


def colorize(text: str, color: str) -> str:
    """Add ANSI color to text."""
    colors = {
        'green': '\033[92m',
        'red': '\033[91m',
        'yellow': '\033[93m',
        'blue': '\033[94m',
        'bold': '\033[1m',
        'reset': '\033[0m'
    }
    return f"{colors.get(color, '')}{text}{colors['reset']}"


def print_result(result, verbose: bool = True):
    """Pretty-print a verification result."""
    if verbose and result.steps:
        print("Proof Steps:")
        for outcome in result.steps:
            indent = "  " * (outcome.depth + 1)
            label = f"{indent}{outcome.line}. {render(outcome.claim)}  [{outcome.rule}]"
            if outcome.proved:
                print(f"{label} {colorize('✓', 'green')}")
            else:
                print(f"{label} {colorize('✗ ' + str(outcome.error), 'red')}")
        print()

    if result.ok:
        print(colorize("✓ Proof successful!", "green"))
    elif result.status == "malformed":
        print(colorize(f"✗ Malformed proof: {result.reason}", "red"))
    else:
        print(colorize(f"✗ Proof failed: {result.reason}", "red"))


def print_semantic(report: dict):
    """Pretty-print a z3 sequent check."""
    if report["ok"]:
        print(colorize("The sequent is semantically valid.", "blue"))
    elif report["status"] == "invalid":
        print(colorize("The sequent is not valid, so no proof exists.", "yellow"))
        print(report["message"])
    else:
        print(colorize(f"? {report['message']}", "yellow"))


def verify_file(filename: str, config, verbose: bool = True, json_output: bool = False):
    """Verify a proof file."""
    try:
        document = parse_file(filename, strict=config.strict)

        if json_output:
            print(json.dumps(document.to_dict(), indent=2, ensure_ascii=False))
            return True

        if verbose:
            print(colorize(f"Verifying: {filename}", "blue"))
            print(f"  Sequent: {document.sequent}")
            print()

        result = verify(document.sequent, document.steps, document.kind_environment())
        print_result(result, verbose)

        if config.semantic_check:
            print_semantic(check_sequent(document.sequent))

        return result.ok

    except ParseError as e:
        print(colorize(f"Parse error: {e}", "red"))
        return False
    except KindError as e:
        print(colorize(f"Kind error: {e}", "red"))
        return False
    except FileNotFoundError:
        print(colorize(f"File not found: {filename}", "red"))
        return False


def repl(config):
    """Interactive REPL for claims and sequents."""
    import readline  # For REPL history/editing  # noqa: F401

    print(colorize("Proof Checker REPL", "bold"))
    print("Enter a claim or a sequent. Type 'help' for commands, 'quit' to exit.")
    print()

    def show_help():
        print("""
Commands:
    <claim>              Show the claim fully parenthesized, with its kind
    <premises> ⊢ <goal>  Check whether the sequent is valid (z3)
    check <file>         Verify a proof file
    help                 Show this help
    quit, exit           Exit the REPL

Examples:
    p ∧ q → r
    p, p -> q |- q
        """)

    env = KindEnvironment(strict=config.strict)

    while True:
        try:
            line = input(colorize("proof> ", "blue")).strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye!")
            break

        if not line:
            continue

        if line in ('quit', 'exit'):
            print("Goodbye!")
            break

        if line == 'help':
            show_help()
            continue

        if line.startswith('check '):
            verify_file(line[len('check '):].strip(), config)
            continue

        try:
            if any(tok.type == "TURNSTILE" for tok in Lexer(line).tokenize()):
                sequent = parse_sequent_text(line)
                for claim in sequent.premises + (sequent.goal,):
                    check_kinds(claim, env)
                print_semantic(check_sequent(sequent))
            else:
                claim = parse_claim_text(line)
                kinded = check_kinds(claim, env, expected=None)
                print(f"  {render(claim)} : {kinded.kind}")
        except ParseError as e:
            print(colorize(f"Parse error: {e}", "red"))
        except KindError as e:
            print(colorize(f"Kind error: {e}", "red"))


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Proof Checker CLI - Verify natural deduction proofs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    logicala proof.txt              Verify a proof file
    logicala --repl                 Start interactive mode
    logicala --json proof.txt       Output JSON AST
        """
    )

    parser.add_argument('file', nargs='?', help='Proof file to verify')
    parser.add_argument('--repl', action='store_true', help='Start interactive REPL')
    parser.add_argument('--json', action='store_true', help='Output JSON AST instead of verifying')
    parser.add_argument('--strict', action='store_true', default=None,
                        help='Require every identifier to be declared with let')
    parser.add_argument('--semantic', action='store_true', default=None,
                        help='Also check the sequent for semantic validity with z3')
    parser.add_argument('-q', '--quiet', action='store_true', help='Quiet mode (less output)')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Log rule checks (-v for info, -vv for debug)')

    args = parser.parse_args(argv)

    log_level = {0: None, 1: "INFO"}.get(args.verbose, "DEBUG")
    config = load_config(strict=args.strict, semantic_check=args.semantic, log_level=log_level)
    configure_logging(config.log_level)

    if args.repl:
        repl(config)
    elif args.file:
        success = verify_file(args.file, config, verbose=not args.quiet, json_output=args.json)
        sys.exit(0 if success else 1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
