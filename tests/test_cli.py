import json

from click.testing import CliRunner

from datatree.cli import cli


def test_cli_registers_commands():
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    for name in ("show", "value", "move", "remove"):
        assert name in result.output


def test_show_with_selection(regions_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["show", str(regions_file), "--select", "3"])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0] == "[-] 1 China"
    assert lines[1] == "  [x] 3 North"
    assert lines[2] == "    [x] 12 Beijing"
    assert "  [ ] 4 Northeast" in lines
    assert "[ ] 2 Abroad" in lines


def test_value_modes(regions_file):
    runner = CliRunner()

    result = runner.invoke(cli, ["value", str(regions_file), "-s", "3", "-s", "11"])
    assert result.exit_code == 0
    assert result.output.split() == ["3", "12", "13", "14", "15", "16", "2", "11"]

    result = runner.invoke(
        cli, ["value", str(regions_file), "-s", "3", "-s", "11", "--mode", "only-parent"]
    )
    assert result.output.split() == ["3", "2"]

    result = runner.invoke(
        cli, ["value", str(regions_file), "-s", "3", "--mode", "only-leaf"]
    )
    assert result.output.split() == ["12", "13", "14", "15", "16"]


def test_move(regions_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["move", str(regions_file), "11", "1"])
    assert result.exit_code == 0
    assert result.output.splitlines()[-2:] == ["  [ ] 11 Japan", "[ ] 2 Abroad"]


def test_move_into_descendant_fails(regions_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["move", str(regions_file), "1", "12"])
    assert result.exit_code != 0
    assert "Cannot move '1' to '12'" in result.output


def test_remove(regions_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["remove", str(regions_file), "1"])
    assert result.exit_code == 0
    assert result.output.splitlines() == ["[ ] 2 Abroad", "  [ ] 11 Japan"]


def test_remove_unknown_fails(regions_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["remove", str(regions_file), "404"])
    assert result.exit_code != 0
    assert "Node '404' not found." in result.output


def test_key_options_and_string_ids(tmp_path):
    path = tmp_path / "tree.json"
    path.write_text(json.dumps([
        {"uuid": "a", "name": "Alpha"},
        {"uuid": "b", "name": "Beta", "parentId": "a"},
    ]))
    runner = CliRunner()
    result = runner.invoke(
        cli, ["show", str(path), "--id-key", "uuid", "--pid-key", "parentId", "-s", "b"]
    )
    assert result.exit_code == 0
    assert result.output.splitlines() == ["[x] a Alpha", "  [x] b Beta"]


def test_config_file(tmp_path):
    path = tmp_path / "tree.json"
    path.write_text(json.dumps([{"key": 1, "items": [{"key": 2, "title": "Two"}]}]))
    config = tmp_path / "datatree.json"
    config.write_text(json.dumps({"id_key": "key", "child_key": "items", "indent_width": 4}))
    runner = CliRunner()
    result = runner.invoke(cli, ["show", str(path), "--config", str(config)])
    assert result.exit_code == 0
    assert result.output.splitlines() == ["[ ] 1", "    [ ] 2 Two"]


def test_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    runner = CliRunner()
    result = runner.invoke(cli, ["show", str(path)])
    assert result.exit_code != 0
    assert "Could not read" in result.output


def test_empty_tree(tmp_path):
    path = tmp_path / "empty.json"
    path.write_text("[]")
    runner = CliRunner()
    result = runner.invoke(cli, ["show", str(path)])
    assert result.exit_code == 0
    assert "(empty tree)" in result.output
