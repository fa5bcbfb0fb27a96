import json

import pytest

from logicala.cli import main

VALID = """p, p → q ⊢ q
{
  1. p        premise
  2. p → q    premise
  3. q        →e 1 2
}
"""


def write_proof(tmp_path, text, name="proof.txt"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def run(argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    return excinfo.value.code


class TestCli:
    def test_valid_proof(self, tmp_path, capsys):
        assert run([write_proof(tmp_path, VALID)]) == 0
        assert "Proof successful" in capsys.readouterr().out

    def test_invalid_proof(self, tmp_path, capsys):
        assert run([write_proof(tmp_path, VALID.replace("→e 1 2", "→e 2 1"))]) == 1
        out = capsys.readouterr().out
        assert "Proof failed" in out
        assert "expected an implication" in out

    def test_json_output(self, tmp_path, capsys):
        assert run(["--json", write_proof(tmp_path, VALID)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["goal"] == {"type": "var", "name": "q"}
        assert len(data["steps"]) == 3

    def test_parse_error(self, tmp_path, capsys):
        assert run([write_proof(tmp_path, "p ⊢ (q\n{\n}\n")]) == 1
        assert "Parse error" in capsys.readouterr().out

    def test_strict_kind_error(self, tmp_path, capsys):
        assert run(["--strict", write_proof(tmp_path, VALID)]) == 1
        assert "Kind error" in capsys.readouterr().out

    def test_semantic_report(self, tmp_path, capsys):
        text = "p ⊢ q\n{\n 1. q premise\n}\n"
        assert run(["--semantic", "-q", write_proof(tmp_path, text)]) == 1
        out = capsys.readouterr().out
        assert "not valid" in out
        assert "p = True" in out

    def test_long_conjunction_chain(self, tmp_path, capsys):
        chain = " ∧ ".join(["p"] * 2000)
        text = f"{chain} ⊢ {chain}\n{{\n 1. {chain} premise\n}}\n"
        assert run(["-q", write_proof(tmp_path, text)]) == 0
        assert "Proof successful" in capsys.readouterr().out

    def test_deep_parentheses(self, tmp_path, capsys):
        text = "p ⊢ " + "(" * 5000 + "p" + ")" * 5000 + "\n{\n 1. p premise\n}\n"
        assert run([write_proof(tmp_path, text)]) == 1
        assert "nested too deeply" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert run([str(tmp_path / "nope.txt")]) == 1
        assert "File not found" in capsys.readouterr().out

    def test_no_arguments(self, capsys):
        assert run([]) == 1
