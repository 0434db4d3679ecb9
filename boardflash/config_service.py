# config_service.py
import os
import json
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from boardflash.errors import ConfigError

logger = logging.getLogger(__name__)

OPENOCD_DEFAULT = "openocd"
CONFIG_FILENAME = "boardflash.json"
DEFAULT_BOARD = "stm32f412gdiscovery"

BOARD_PRESETS = {
    "stm32f412gdiscovery": {
        "board_config": "board/stm32f412g-disco.cfg",
        "target": "thumbv7em-none-eabihf",
    },
}


@dataclass(frozen=True)
class BoardConfig:
    """Everything the path template and the OpenOCD preamble need for one board."""
    platform: str
    target: str
    board_config: str
    root_dir: str = "."
    openocd_path: str = OPENOCD_DEFAULT
    build_commands: Dict[str, Optional[str]] = field(default_factory=dict)

    def build_command(self, profile: str) -> Optional[str]:
        cmd = self.build_commands.get(profile)
        return cmd.strip() if cmd and cmd.strip() else None


def get_default_config() -> dict:
    return {
        "board": DEFAULT_BOARD,
        "root_dir": ".",
        # Filled from the board preset when left empty
        "platform": "",
        "target": "",
        "board_config": "",
        "openocd_path": os.environ.get("OPENOCD", "").strip() or OPENOCD_DEFAULT,
        "build_commands": {"release": None, "debug": None},
    }


def load_config(base_dir: str) -> dict:
    """Load boardflash.json from base_dir; merge with defaults."""
    config = get_default_config()
    path = os.path.join(base_dir, CONFIG_FILENAME)
    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                file_cfg = json.load(f)
            if not isinstance(file_cfg, dict):
                raise TypeError(f"expected a JSON object, got {type(file_cfg).__name__}")
            config.update(file_cfg)
        except (OSError, ValueError, TypeError) as e:
            logger.warning("Failed to load %s (%s); using defaults.", path, e)
    return config


def save_config(base_dir: str, cfg: dict) -> str:
    """Write boardflash.json to base_dir and return its path."""
    path = os.path.join(base_dir, CONFIG_FILENAME)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(cfg, f, indent=2)
    return path


def make_board_config(cfg: dict) -> BoardConfig:
    """Resolve a merged config dict against the board presets."""
    board = _text(cfg, "board")
    key = board.lower()
    preset = BOARD_PRESETS.get(key, {})
    if board and not preset:
        logger.debug("No preset for board %r; relying on explicit settings", board)

    # Preset keys are the platform directory and ELF names
    platform = _text(cfg, "platform") or (key if preset else board)
    target = _text(cfg, "target") or preset.get("target", "")
    board_config = _text(cfg, "board_config") or preset.get("board_config", "")

    missing = [name for name, value in (
        ("platform", platform), ("target", target), ("board_config", board_config)
    ) if not value]
    if missing:
        raise ConfigError(f"Board '{board}' is missing settings: {', '.join(missing)}")

    return BoardConfig(
        platform=platform,
        target=target,
        board_config=board_config,
        root_dir=_text(cfg, "root_dir") or ".",
        openocd_path=_text(cfg, "openocd_path") or OPENOCD_DEFAULT,
        build_commands=_build_commands(cfg.get("build_commands")),
    )


def _text(cfg: dict, name: str) -> str:
    value = cfg.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigError(f"'{name}' must be a string, got {type(value).__name__}")
    return value.strip()


def _build_commands(raw) -> Dict[str, Optional[str]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("'build_commands' must map a profile name to a command string")
    for profile, cmd in raw.items():
        if cmd is not None and not isinstance(cmd, str):
            raise ConfigError(f"'build_commands.{profile}' must be a command string or null")
    return dict(raw)
