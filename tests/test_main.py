import json

from click.testing import CliRunner

from regfa.main import entry

AB_OR_A_STAR = '{"repeat": {"choose": [{"concatenate": ["a", "b"]}, "a"]}}'


def test_match_texts():
    result = CliRunner().invoke(
        entry, [AB_OR_A_STAR, "--text", "aab", "-t", "abb", "-t", ""]
    )
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"aab": True, "abb": False, "": True}


def test_render():
    result = CliRunner().invoke(entry, [AB_OR_A_STAR, "--render"])
    assert result.exit_code == 0, result.output
    assert result.output == "(ab|a)*\n"


def test_json_export():
    result = CliRunner().invoke(entry, ['{"concatenate": ["a", "b"]}', "--json"])
    assert result.exit_code == 0, result.output
    exported = json.loads(result.output)
    assert exported["symbols"] == ["a", "b"]
    assert len(exported["accept_states"]) == 1
    assert len(exported["transitions"]) == 3


def test_input_file():
    runner = CliRunner()
    with runner.isolated_filesystem():
        with open("inputs.txt", "w") as f:
            f.write("a\nb\naa\n")
        result = runner.invoke(entry, ['{"repeat": "a"}', "--input-file", "inputs.txt"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"a": True, "b": False, "aa": True}


def test_output_file():
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(entry, ['"a"', "-t", "a", "--out", "results.json"])
        assert result.exit_code == 0, result.output
        with open("results.json") as f:
            assert json.load(f) == {"a": True}


def test_malformed_pattern_is_a_usage_error():
    result = CliRunner().invoke(entry, ['{"star": "a"}', "-t", "a"])
    assert result.exit_code == 2
    assert "PATTERN" in result.output


def test_invalid_json_is_a_usage_error():
    result = CliRunner().invoke(entry, ["{not json"])
    assert result.exit_code == 2
