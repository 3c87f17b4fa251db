import json

import yaml

from astrowheel import cli


def test_layout_command_prints_located_points(natal_data, write_json, capsys):
    path = write_json("natal.json", natal_data)
    assert cli.main(["layout", str(path), "--min-separation", "6"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["min_separation"] == 6.0
    assert [item["id"] for item in payload["points"]] == list(natal_data["planets"])
    assert payload["degraded"] is False


def test_aspects_command(natal_data, write_json, capsys):
    natal_data["points_of_interest"] = {"As": [300.0]}
    path = write_json("natal.json", natal_data)
    assert cli.main(["aspects", str(path)]) == 0
    matches = json.loads(capsys.readouterr().out)
    pairs = {(m["source"], m["target"], m["aspect"]) for m in matches}
    assert ("Sun", "As", "conjunction") in pairs


def test_aspects_command_with_minor_and_transit(natal_data, write_json, capsys):
    natal = write_json("natal.json", natal_data)
    transit = write_json("transit.json", {"planets": {"Sun": [150.2, 1.0]}})
    assert cli.main(["aspects", str(natal), "--minor", "--transit", str(transit)]) == 0
    matches = json.loads(capsys.readouterr().out)
    assert {(m["source"], m["target"], m["aspect"]) for m in matches} >= {
        ("Sun", "Sun", "quincunx"),
        ("Sun", "Jupiter", "square"),
    }


def test_chart_command_emits_full_layout(natal_data, write_json, capsys):
    path = write_json("natal.json", natal_data)
    assert cli.main(["chart", str(path), "--radius", "250"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["shift"] == 60.0
    assert len(payload["cusps"]) == 12
    assert len(payload["ruler"]) == 72


def test_config_file_is_honoured(natal_data, write_json, tmp_path, capsys):
    config = tmp_path / "settings.yaml"
    config.write_text(yaml.safe_dump({"aspects": {"enabled": ["square"]}}), encoding="utf-8")
    path = write_json("natal.json", natal_data)
    assert cli.main(["--config", str(config), "aspects", str(path)]) == 0
    matches = json.loads(capsys.readouterr().out)
    assert matches
    assert {m["aspect"] for m in matches} == {"square"}


def test_invalid_payload_exits_with_status_two(write_json, capsys):
    path = write_json("bad.json", {"planets": {"Sun": ["nope"]}})
    assert cli.main(["layout", str(path)]) == cli.EXIT_INVALID
    assert "Sun" in capsys.readouterr().err


def test_invalid_settings_exit_with_status_two(natal_data, write_json, tmp_path, capsys):
    config = tmp_path / "settings.yaml"
    config.write_text(yaml.safe_dump({"layout": {"ruler_ratio": -1}}), encoding="utf-8")
    path = write_json("natal.json", natal_data)
    assert cli.main(["--config", str(config), "chart", str(path)]) == cli.EXIT_INVALID
    assert "ruler_ratio" in capsys.readouterr().err


def test_malformed_json_exits_with_status_two(tmp_path, capsys):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    assert cli.main(["chart", str(path)]) == cli.EXIT_INVALID
    assert "invalid JSON" in capsys.readouterr().err


def test_missing_file_exits_with_status_two(tmp_path, capsys):
    assert cli.main(["chart", str(tmp_path / "missing.json")]) == cli.EXIT_INVALID
    assert capsys.readouterr().err.startswith("error:")


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 0
    assert "usage" in capsys.readouterr().out
