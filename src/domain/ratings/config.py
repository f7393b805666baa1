"""Load Elo system definitions from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from domain.config_base import BaseSystemConfig, load_system_configs
from domain.ratings.calculator import EloParameters

ROOT_DIR = Path(__file__).resolve().parents[3]
DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "ratings" / "elo"
DEFAULT_SYSTEM_NAME = "foosball_default"


@dataclass(frozen=True)
class EloSystemConfig(BaseSystemConfig):
    """Configuration for one Elo rating system."""

    parameters: EloParameters

    def as_config_json(self) -> dict[str, Any]:
        return {
            "initial_rating": self.parameters.initial_rating,
            "scale_factor": self.parameters.scale_factor,
            "novice_k_factor": self.parameters.novice_k_factor,
            "intermediate_k_factor": self.parameters.intermediate_k_factor,
            "veteran_k_factor": self.parameters.veteran_k_factor,
            "intermediate_after_matches": self.parameters.intermediate_after_matches,
            "veteran_after_matches": self.parameters.veteran_after_matches,
            "margin_step": self.parameters.margin_step,
            "max_margin_factor": self.parameters.max_margin_factor,
            "team_size_weight": self.parameters.team_size_weight,
        }


def load_elo_system_configs(config_dir: Path = DEFAULT_CONFIG_DIR) -> list[EloSystemConfig]:
    """Load and validate all Elo system TOML config files in a directory."""
    return load_system_configs(
        config_dir,
        _parse_elo_system_config,
        duplicate_name_label="elo",
    )


def load_elo_system_config(
    name: str = DEFAULT_SYSTEM_NAME,
    config_dir: Path = DEFAULT_CONFIG_DIR,
) -> EloSystemConfig:
    """Return the config whose [system].name matches ``name``."""
    for config in load_elo_system_configs(config_dir):
        if config.name == name:
            return config
    raise ValueError(f"No elo system named '{name}' found in {config_dir}")


def _parse_elo_system_config(raw: dict[str, Any], file_path: Path) -> EloSystemConfig:
    system_raw = raw.get("system", {})
    elo_raw = raw.get("elo", {})

    name = str(system_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [system].name is required")

    description_value = system_raw.get("description")
    description = None if description_value is None else str(description_value)

    parameters = EloParameters(
        initial_rating=int(elo_raw.get("initial_rating", 1200)),
        scale_factor=float(elo_raw.get("scale_factor", 400.0)),
        novice_k_factor=int(elo_raw.get("novice_k_factor", 40)),
        intermediate_k_factor=int(elo_raw.get("intermediate_k_factor", 32)),
        veteran_k_factor=int(elo_raw.get("veteran_k_factor", 24)),
        intermediate_after_matches=int(elo_raw.get("intermediate_after_matches", 10)),
        veteran_after_matches=int(elo_raw.get("veteran_after_matches", 20)),
        margin_step=float(elo_raw.get("margin_step", 0.1)),
        max_margin_factor=float(elo_raw.get("max_margin_factor", 2.0)),
        team_size_weight=float(elo_raw.get("team_size_weight", 50.0)),
    )
    _validate_parameters(file_path=file_path, parameters=parameters)

    return EloSystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        parameters=parameters,
    )


def _validate_parameters(*, file_path: Path, parameters: EloParameters) -> None:
    if parameters.initial_rating <= 0:
        raise ValueError(f"{file_path}: [elo].initial_rating must be > 0")
    if parameters.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].scale_factor must be > 0")
    if parameters.novice_k_factor <= 0:
        raise ValueError(f"{file_path}: [elo].novice_k_factor must be > 0")
    if parameters.intermediate_k_factor <= 0:
        raise ValueError(f"{file_path}: [elo].intermediate_k_factor must be > 0")
    if parameters.veteran_k_factor <= 0:
        raise ValueError(f"{file_path}: [elo].veteran_k_factor must be > 0")
    if parameters.intermediate_after_matches < 0:
        raise ValueError(f"{file_path}: [elo].intermediate_after_matches must be >= 0")
    if parameters.veteran_after_matches < parameters.intermediate_after_matches:
        raise ValueError(
            f"{file_path}: [elo].veteran_after_matches must be >= intermediate_after_matches"
        )
    if parameters.margin_step < 0.0:
        raise ValueError(f"{file_path}: [elo].margin_step must be >= 0")
    if parameters.max_margin_factor < 1.0:
        raise ValueError(f"{file_path}: [elo].max_margin_factor must be >= 1")
    if parameters.team_size_weight < 0.0:
        raise ValueError(f"{file_path}: [elo].team_size_weight must be >= 0")
