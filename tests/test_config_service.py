import json
import pytest

from boardflash import config_service
from boardflash.config_service import (
    CONFIG_FILENAME, load_config, make_board_config, save_config
)
from boardflash.errors import ConfigError


def test_defaults_use_board_preset(tmp_path, monkeypatch):
    monkeypatch.delenv("OPENOCD", raising=False)
    board = make_board_config(load_config(str(tmp_path)))
    assert board.platform == "stm32f412gdiscovery"
    assert board.target == "thumbv7em-none-eabihf"
    assert board.board_config == "board/stm32f412g-disco.cfg"
    assert board.openocd_path == "openocd"
    assert board.build_command("release") is None


def test_openocd_env_override(tmp_path, monkeypatch):
    monkeypatch.setenv("OPENOCD", "/opt/xpack/bin/openocd")
    assert load_config(str(tmp_path))["openocd_path"] == "/opt/xpack/bin/openocd"


def test_file_values_override_defaults(tmp_path):
    (tmp_path / CONFIG_FILENAME).write_text(json.dumps({
        "root_dir": "/src/tock",
        "build_commands": {"release": "make release"},
    }))
    board = make_board_config(load_config(str(tmp_path)))
    assert board.root_dir == "/src/tock"
    assert board.build_command("release") == "make release"
    assert board.build_command("debug") is None


def test_broken_file_falls_back_to_defaults(tmp_path, caplog):
    (tmp_path / CONFIG_FILENAME).write_text("{not json")
    cfg = load_config(str(tmp_path))
    assert cfg["board"] == config_service.DEFAULT_BOARD
    assert "using defaults" in caplog.text


def test_unknown_board_needs_explicit_settings():
    with pytest.raises(ConfigError) as exc:
        make_board_config({"board": "nucleo_f429zi"})
    assert "target" in str(exc.value)

    board = make_board_config({
        "board": "nucleo_f429zi",
        "target": "thumbv7em-none-eabihf",
        "board_config": "board/st_nucleo_f4.cfg",
    })
    assert board.platform == "nucleo_f429zi"


def test_save_then_load(tmp_path):
    cfg = load_config(str(tmp_path))
    cfg["root_dir"] = "/work"
    save_config(str(tmp_path), cfg)
    assert load_config(str(tmp_path))["root_dir"] == "/work"


def test_mixed_case_board_uses_preset_platform():
    board = make_board_config({"board": "STM32F412GDiscovery"})
    assert board.platform == "stm32f412gdiscovery"
    assert board.board_config == "board/stm32f412g-disco.cfg"


def test_explicit_platform_keeps_its_case():
    board = make_board_config({"board": "STM32F412GDiscovery", "platform": "MyBoard"})
    assert board.platform == "MyBoard"


@pytest.mark.parametrize("build_commands", ["make", ["make"], {"release": ["cargo", "build"]}])
def test_bad_build_commands_are_config_errors(build_commands):
    with pytest.raises(ConfigError) as exc:
        make_board_config({"board": "stm32f412gdiscovery", "build_commands": build_commands})
    assert "build_commands" in str(exc.value)


def test_non_string_setting_is_config_error():
    with pytest.raises(ConfigError) as exc:
        make_board_config({"board": "stm32f412gdiscovery", "root_dir": 7})
    assert "root_dir" in str(exc.value)


def test_non_object_file_falls_back_to_defaults(tmp_path, caplog):
    (tmp_path / CONFIG_FILENAME).write_text("[1]")
    cfg = load_config(str(tmp_path))
    assert cfg["board"] == config_service.DEFAULT_BOARD
    assert "using defaults" in caplog.text
