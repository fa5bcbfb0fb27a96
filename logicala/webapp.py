#!/usr/bin/env python3
"""
Web API for the Proof Checker
Simple Flask server that checks proofs and parses claims via REST.
"""

import logging

from flask import Flask, request, jsonify

from .claims import render, to_dict as claim_to_dict
from .config import configure_logging, load_config, parse_flag
from .errors import KindError, ParseError
from .kinds import check_kinds
from .parser import parse, parse_claim_text
from .prover import verify
from .semantic import check_sequent

logger = logging.getLogger(__name__)

EXAMPLES = [
    {
        'name': 'Modus Ponens',
        'code': '''# Implication elimination: antecedent first, then the implication
p, p → q ⊢ q
{
  1. p        premise
  2. p → q    premise
  3. q        →e 1 2
}'''
    },
    {
        'name': 'Commuting a Conjunction',
        'code': '''p ∧ q ⊢ q ∧ p
{
  1. p ∧ q    premise
  2. p        ∧e1 1
  3. q        ∧e2 1
  4. q ∧ p    ∧i 3 2
}'''
    },
    {
        'name': 'Chaining Implications',
        'code': '''p → q, q → r ⊢ p → r
{
  1. p → q      premise
  2. q → r      premise
  3. {
       4. p     assume
       5. q     →e 4 1
       6. r     →e 5 2
     }
  7. p → r      →i 3
}'''
    },
    {
        'name': 'Proof by Cases',
        'code': '''p ∨ q ⊢ q ∨ p
{
  1. p ∨ q          premise
  2. {
       3. p         assume
       4. q ∨ p     ∨i2 3
     }
  5. {
       6. q         assume
       7. q ∨ p     ∨i1 6
     }
  8. q ∨ p          ∨e 1 2 5
}'''
    },
    {
        'name': 'Double Negation',
        'code': '''¬¬p ⊢ p
{
  1. ¬¬p          premise
  2. {
       3. ¬p      assume
       4. ⊥       ¬e 1 3
     }
  5. p            pbc 2
}'''
    },
]


def request_option(data, key, default):
    """Read a boolean option from a JSON body; strings such as "false" are parsed."""
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, str):
        return parse_flag(value)
    return bool(value)


def create_app(config=None) -> Flask:
    config = config or load_config()
    configure_logging(config.log_level)
    app = Flask(__name__)

    @app.route('/api/check', methods=['POST'])
    def check_proof():
        """
        Check a proof and return the result.

        Request body: { "code": "p ⊢ p\n{\n 1. p premise\n}", "strict": false, "semantic": false }

        Response: {
            "ok": true/false,
            "status": "proved" | "disproved" | "malformed" | "error",
            "message": "...",
            "step_results": [...],   // one entry per step
            "sequent": {...}         // z3 validity, if "semantic" was set
        }
        """
        data = request.get_json(silent=True)
        if not data or 'code' not in data:
            return jsonify({
                'ok': False,
                'status': 'error',
                'message': 'Missing "code" in request body'
            }), 400

        strict = request_option(data, 'strict', config.strict)
        semantic = request_option(data, 'semantic', config.semantic_check)

        try:
            document = parse(data['code'], strict=strict)
            result = verify(document.sequent, document.steps, document.kind_environment())
            response = result.to_dict()
            if result.ok:
                response['message'] = 'The proof is valid.'
            if semantic:
                response['sequent'] = check_sequent(document.sequent)
            return jsonify(response)

        except ParseError as e:
            return jsonify({
                'ok': False,
                'status': 'error',
                'message': f'Parse error: {e}'
            })
        except KindError as e:
            return jsonify({
                'ok': False,
                'status': 'error',
                'message': f'Kind error: {e}'
            })
        except Exception as e:
            logger.exception("internal error while checking a proof")
            return jsonify({
                'ok': False,
                'status': 'error',
                'message': f'Internal error: {e}'
            }), 500

    @app.route('/api/parse', methods=['POST'])
    def parse_single_claim():
        """Parse one claim: { "claim": "p ∧ q" } -> rendering, AST and kind."""
        data = request.get_json(silent=True)
        if not data or 'claim' not in data:
            return jsonify({
                'ok': False,
                'status': 'error',
                'message': 'Missing "claim" in request body'
            }), 400

        try:
            claim = parse_claim_text(data['claim'])
            kinded = check_kinds(claim, expected=None)
        except (ParseError, KindError) as e:
            return jsonify({
                'ok': False,
                'status': 'error',
                'message': str(e)
            })

        return jsonify({
            'ok': True,
            'claim': render(claim),
            'ast': claim_to_dict(claim),
            'kind': str(kinded.kind),
        })

    @app.route('/api/examples', methods=['GET'])
    def get_examples():
        """Return a list of example proofs."""
        return jsonify(EXAMPLES)

    return app


if __name__ == '__main__':
    print("Proof Checker API")
    print("   Listening on http://localhost:5050")
    print()
    create_app().run(host='0.0.0.0', port=5050, debug=True)
