import json

import pytest
from pydantic import ValidationError

from conftest import SCENARIO_CORRUPTION
from mekd.gateway.api.settings import DEFAULT_CORS_ORIGINS, ServerSettings
from mekd.run import build_parser, collect_form, load_form_file, main


def form_args(form: dict) -> list:
    args = []
    for key, value in form.items():
        args += [f"--{key}", value]
    return args


def test_main_writes_results(tmp_path, scenario_form):
    output = tmp_path / "hasil.json"

    with pytest.raises(SystemExit) as exit_info:
        main(form_args(scenario_form) + ["--output", str(output)])

    assert exit_info.value.code == 0
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["success"] is True
    assert data["meta"]["form"]["tipe"] == "kota"
    estimate = data["results"]["outputs"]["estimate"]
    assert estimate["corruption_estimate"] == pytest.approx(SCENARIO_CORRUPTION, rel=1e-9)


def test_main_exits_nonzero_on_rejected_input(capsys, scenario_form):
    scenario_form["pdrb"] = "0"

    with pytest.raises(SystemExit) as exit_info:
        main(form_args(scenario_form) + ["--json"])

    assert exit_info.value.code == 1
    captured = capsys.readouterr()
    assert json.loads(captured.out)["success"] is False
    assert "- PDRB" in captured.err


def test_input_file_with_option_override(tmp_path, scenario_form):
    source = tmp_path / "daerah.yaml"
    source.write_text(
        "\n".join(f'{key}: "{value}"' for key, value in scenario_form.items()),
        encoding="utf-8",
    )

    args = build_parser().parse_args(["--input", str(source), "--tipe", "kabupaten"])
    form = collect_form(args)

    assert form["pad"] == "1.000.000"
    assert form["tipe"] == "kabupaten"


def test_load_form_file_rejects_non_mapping(tmp_path):
    source = tmp_path / "list.json"
    source.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError, match="expected a mapping"):
        load_form_file(str(source))


def test_empty_form_file(tmp_path):
    source = tmp_path / "empty.yaml"
    source.write_text("", encoding="utf-8")

    assert load_form_file(str(source)) == {}


def test_settings_defaults():
    settings = ServerSettings.from_env({})

    assert settings.host == "0.0.0.0"
    assert settings.port == 8080
    assert settings.log_level == "INFO"
    assert settings.cors_origins == DEFAULT_CORS_ORIGINS


def test_settings_from_env():
    settings = ServerSettings.from_env({
        "MEKD_PORT": "9000",
        "MEKD_LOG_LEVEL": "debug",
        "MEKD_CORS_ORIGINS": "http://a.test, http://b.test",
    })

    assert settings.port == 9000
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ["http://a.test", "http://b.test"]


@pytest.mark.parametrize("env", [{"MEKD_PORT": "0"}, {"MEKD_LOG_LEVEL": "chatty"}])
def test_settings_reject_bad_values(env):
    with pytest.raises(ValidationError):
        ServerSettings.from_env(env)
