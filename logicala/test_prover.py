import pytest

from logicala.claims import Conjunction, Disjunction, Identifier, Implication, IntLiteral
from logicala.errors import JustificationMismatch, LineNotFound, LineNotVisible, \
    ParseError, UnprovedDependency
from logicala.kinds import Kind, KindEnvironment
from logicala.parser import parse
from logicala.prover import DISPROVED, MALFORMED, PROVED, check_source, verify
from logicala.proof import Justification, RegularStep, Rule, Sequent

p, q = Identifier("p"), Identifier("q")


def premise(line, claim):
    return RegularStep(line, claim, Justification(Rule.PREMISE))


def check(text):
    return check_source(text)


class TestRules:
    def test_premise(self):
        result = verify(Sequent((p,), p), [premise(1, p)])
        assert result.ok is True
        assert result.status == PROVED

    def test_premise_not_in_sequent(self):
        result = verify(Sequent((p,), q), [premise(1, q)])
        assert result.status == DISPROVED
        assert isinstance(result.outcome(1).error, JustificationMismatch)

    def test_and_introduction(self):
        steps = [
            premise(1, p),
            premise(2, q),
            RegularStep(3, Conjunction(p, q), Justification(Rule.AND_INTRODUCTION, (1, 2))),
        ]
        assert verify(Sequent((p, q), Conjunction(p, q)), steps).ok is True

    def test_and_introduction_does_not_commute(self):
        steps = [
            premise(1, p),
            premise(2, q),
            RegularStep(3, Conjunction(q, p), Justification(Rule.AND_INTRODUCTION, (1, 2))),
        ]
        result = verify(Sequent((p, q), Conjunction(q, p)), steps)
        assert result.status == DISPROVED
        err = result.outcome(3).error
        assert isinstance(err, JustificationMismatch)
        assert err.expected_shape == "(p ∧ q)"
        assert err.found == "(q ∧ p)"

    def test_and_elimination(self):
        result = check("""
        p ∧ q ⊢ q ∧ p
        {
          1. p ∧ q    premise
          2. p        ∧e1 1
          3. q        ∧e2 1
          4. q ∧ p    ∧i 3 2
        }
        """)
        assert result.ok is True

    def test_and_elimination_needs_conjunction(self):
        result = check("p ⊢ p\n{\n 1. p premise\n 2. p ∧e1 1\n}")
        assert result.status == DISPROVED
        assert isinstance(result.outcome(2).error, JustificationMismatch)

    def test_and_elimination_wrong_side(self):
        result = check("p ∧ q ⊢ q\n{\n 1. p ∧ q premise\n 2. q ∧e1 1\n}")
        assert isinstance(result.outcome(2).error, JustificationMismatch)

    def test_or_introduction(self):
        result = check("""
        p ⊢ (p ∨ q) ∧ (q ∨ p)
        {
          1. p                   premise
          2. p ∨ q               ∨i1 1
          3. q ∨ p               ∨i2 1
          4. (p ∨ q) ∧ (q ∨ p)   ∧i 2 3
        }
        """)
        assert result.ok is True

    def test_or_introduction_wrong_side(self):
        result = check("p ⊢ q ∨ p\n{\n 1. p premise\n 2. q ∨ p ∨i1 1\n}")
        assert isinstance(result.outcome(2).error, JustificationMismatch)

    def test_or_elimination(self):
        result = check("""
        p ∨ q ⊢ q ∨ p
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
        }
        """)
        assert result.ok is True

    def test_or_elimination_cases_in_wrong_order(self):
        result = check("""
        p ∨ q ⊢ q ∨ p
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
          8. q ∨ p          ∨e 1 5 2
        }
        """)
        assert result.status == DISPROVED
        assert isinstance(result.outcome(8).error, JustificationMismatch)

    def test_implication_introduction(self):
        result = check("""
        p → q, q → r ⊢ p → r
        {
          1. p → q      premise
          2. q → r      premise
          3. {
               4. p     assume
               5. q     →e 4 1
               6. r     →e 5 2
             }
          7. p → r      →i 3
        }
        """)
        assert result.ok is True

    def test_implication_introduction_wrong_claim(self):
        result = check("""
        q ⊢ q → p
        {
          1. q          premise
          2. {
               3. p     assume
               4. q ∧ q ∧i 1 1
               5. q     ∧e1 4
             }
          6. q → p      →i 2
        }
        """)
        assert isinstance(result.outcome(6).error, JustificationMismatch)

    def test_negation_introduction_and_elimination(self):
        result = check("""
        p → q, ¬q ⊢ ¬p
        {
          1. p → q      premise
          2. ¬q         premise
          3. {
               4. p     assume
               5. q     →e 4 1
               6. ⊥     ¬e 2 5
             }
          7. ¬p         ¬i 3
        }
        """)
        assert result.ok is True

    def test_negation_introduction_needs_contradiction(self):
        result = check("""
        q ⊢ ¬p
        {
          1. q          premise
          2. {
               3. p     assume
               4. p ∧ q ∧i 3 1
             }
          5. ¬p         ¬i 2
        }
        """)
        assert isinstance(result.outcome(5).error, JustificationMismatch)

    def test_contradiction_elimination(self):
        result = check("""
        p, ¬p ⊢ q
        {
          1. p      premise
          2. ¬p     premise
          3. ⊥      ¬e 2 1
          4. q      ⊥e 3
        }
        """)
        assert result.ok is True

    def test_contradiction_elimination_needs_bottom(self):
        result = check("p ⊢ q\n{\n 1. p premise\n 2. q ⊥e 1\n}")
        assert isinstance(result.outcome(2).error, JustificationMismatch)

    def test_proof_by_contradiction(self):
        result = check("""
        ¬¬p ⊢ p
        {
          1. ¬¬p          premise
          2. {
               3. ¬p      assume
               4. ⊥       ¬e 1 3
             }
          5. p            pbc 2
        }
        """)
        assert result.ok is True

    def test_proof_by_contradiction_wrong_assumption(self):
        result = check("""
        ¬¬p ⊢ p
        {
          1. ¬¬p          premise
          2. {
               3. ¬p      assume
               4. ⊥       ¬e 1 3
             }
          5. q            pbc 2
        }
        """)
        assert isinstance(result.outcome(5).error, JustificationMismatch)


class TestEndToEnd:
    MODUS_PONENS = """
    p, p → q ⊢ q
    {
      1. p        premise
      2. p → q    premise
      3. q        →e(1, 2)
    }
    """

    def test_modus_ponens(self):
        result = check(self.MODUS_PONENS)
        assert result.status == PROVED
        assert all(o.proved for o in result.steps)

    def test_modus_ponens_with_swapped_references(self):
        result = check(self.MODUS_PONENS.replace("→e(1, 2)", "→e(2, 1)"))
        assert result.status == DISPROVED
        assert isinstance(result.outcome(3).error, JustificationMismatch)

    def test_last_line_must_be_goal(self):
        result = check("p, q ⊢ q\n{\n 1. q premise\n 2. p premise\n}")
        assert result.status == DISPROVED
        assert all(o.proved for o in result.steps)
        assert "not the goal" in result.reason

    def test_proof_ending_in_sub_proof(self):
        result = check("""
        p ⊢ p
        {
          1. p          premise
          2. {
               3. q     assume
               4. p ∧ q ∧i 1 3
             }
        }
        """)
        assert result.status == DISPROVED
        assert "sub-proof" in result.reason

    def test_any_unproved_step_disproves(self):
        result = check("p ⊢ p\n{\n 1. q premise\n 2. p premise\n}")
        assert result.status == DISPROVED
        assert [o.line for o in result.failures] == [1]

    def test_malformed(self):
        result = verify(Sequent((p,), p), [premise(1, p), premise(1, p)])
        assert result.status == MALFORMED
        assert result.steps == []
        assert "more than once" in result.reason

    def test_ill_kinded_claim_is_malformed(self):
        p_or_3 = Disjunction(p, IntLiteral(3))
        steps = [premise(1, p), RegularStep(2, p_or_3, Justification(Rule.OR_INTRODUCTION_1, (1,)))]
        result = verify(Sequent((p,), p_or_3), steps)
        assert result.status == MALFORMED
        assert result.steps == []
        assert "ill-kinded" in result.reason

    def test_declared_kinds_are_honoured(self):
        n = Identifier("n")
        steps = [premise(1, p), RegularStep(2, Disjunction(p, n), Justification(Rule.OR_INTRODUCTION_1, (1,)))]
        sequent = Sequent((p,), Disjunction(p, n))
        assert verify(sequent, steps).status == PROVED
        assert verify(sequent, steps, KindEnvironment({"n": Kind.INT})).status == MALFORMED

    def test_long_conjunction_chain(self):
        chain = " ∧ ".join(["p"] * 2000)
        result = check(f"{chain} ⊢ {chain}\n{{\n 1. {chain} premise\n}}")
        assert result.status == PROVED
        assert result.outcome(1).proved

    def test_parse_errors_propagate(self):
        with pytest.raises(ParseError):
            check("p ⊢ \n{\n 1. p premise\n}")

    def test_to_dict(self):
        data = check(self.MODUS_PONENS.replace("→e(1, 2)", "→e(2, 1)")).to_dict()
        assert data["ok"] is False
        assert data["status"] == DISPROVED
        assert [s["ok"] for s in data["step_results"]] == [True, True, False]
        assert data["step_results"][2]["error"] == "JustificationMismatch"

    def test_runs_are_independent(self):
        doc = parse(self.MODUS_PONENS)
        first = verify(doc.sequent, doc.steps)
        second = verify(doc.sequent, doc.steps)
        assert first.status == second.status == PROVED
        assert first.steps == second.steps


class TestReferences:
    def test_internal_line_of_closed_sub_proof_is_not_visible(self):
        result = check("""
        p ⊢ q ∧ p
        {
          1. p            premise
          2. {
               3. q       assume
               4. q ∧ p   ∧i 3 1
             }
          5. q ∧ p        ∧i 3 1
        }
        """)
        err = result.outcome(5).error
        assert isinstance(err, LineNotVisible)
        assert isinstance(err, UnprovedDependency)
        assert err.line == 3

    def test_sibling_sub_proof_lines_are_not_visible(self):
        result = check("""
        p ⊢ p
        {
          1. p            premise
          2. {
               3. q       assume
               4. q ∧ p   ∧i 3 1
             }
          5. {
               6. q       assume
               7. q ∧ p   ∧e1 4
             }
          8. p            premise
        }
        """)
        assert isinstance(result.outcome(7).error, LineNotVisible)

    def test_forward_reference_is_not_visible(self):
        result = check("p ⊢ p\n{\n 1. p ∧e1 2\n 2. p ∧ p premise\n 3. p premise\n}")
        assert isinstance(result.outcome(1).error, LineNotVisible)

    def test_missing_line(self):
        result = check("p ⊢ p ∧ p\n{\n 1. p premise\n 2. p ∧ p ∧i 1 9\n}")
        err = result.outcome(2).error
        assert isinstance(err, LineNotFound)
        assert err.line == 9

    def test_failures_cascade(self):
        result = check("p ⊢ q ∧ p\n{\n 1. p premise\n 2. q premise\n 3. q ∧ p ∧i 2 1\n}")
        err = result.outcome(3).error
        assert type(err) is UnprovedDependency
        assert err.line == 2
        assert [o.line for o in result.failures] == [2, 3]

    def test_line_cited_as_sub_proof(self):
        result = check("p ⊢ p → p\n{\n 1. p premise\n 2. p → p →i 1\n}")
        assert isinstance(result.outcome(2).error, JustificationMismatch)

    def test_sub_proof_cited_as_line(self):
        result = check("""
        p ⊢ p
        {
          1. p          premise
          2. {
               3. q     assume
               4. q ∧ p ∧i 3 1
             }
          5. q          ∧e1 2
          6. p          premise
        }
        """)
        assert isinstance(result.outcome(5).error, JustificationMismatch)

    def test_sub_proof_with_unproved_conclusion(self):
        result = check("""
        p ⊢ q → r
        {
          1. p          premise
          2. {
               3. q     assume
               4. r     premise
             }
          5. q → r      →i 2
        }
        """)
        err = result.outcome(5).error
        assert type(err) is UnprovedDependency
        assert err.line == 4

    def test_nested_sub_proof_visible_inside_enclosing_sub_proof(self):
        result = check("""
        ⊢ p → (q → p)
        {
          1. {
               2. p                 assume
               3. {
                    4. q            assume
                    5. p ∧ p        ∧i 2 2
                    6. p            ∧e1 5
                  }
               7. q → p             →i 3
             }
          8. p → (q → p)            →i 1
        }
        """)
        assert result.ok is True

    def test_no_alpha_renaming(self):
        result = verify(Sequent((Implication(p, p),), Implication(q, q)),
                        [premise(1, Implication(q, q))])
        assert isinstance(result.outcome(1).error, JustificationMismatch)
