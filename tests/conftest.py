"""Core test fixtures for the fwmatrix project."""

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import yaml
from typer.testing import CliRunner

from fwmatrix.config.settings import MatrixSettings
from fwmatrix.matrix.models import MatrixDefinition


# ---- Base Fixtures ----


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings() -> MatrixSettings:
    """Default settings, independent of the environment."""
    return MatrixSettings()


# ---- Test Isolation Fixtures ----


@pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Keep settings files and FWMATRIX_ variables from leaking into tests.

    - Clears any FWMATRIX_ environment variables
    - Points XDG_CONFIG_HOME at a temporary directory
    - Runs the test from an empty working directory
    """
    for key in list(os.environ):
        if key.startswith("FWMATRIX_"):
            monkeypatch.delenv(key)

    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(workdir)
    yield workdir


# ---- Matrix Fixtures ----


@pytest.fixture
def firmware_matrix() -> dict[str, Any]:
    """Matrix block of the firmware CI workflow build job."""
    return {
        "mcu": ["mcu-esp32c3", "mcu-esp32", "mcu-nrf52840", "mcu-nrf52832"],
        "imu": ["imu-stubbed"],
        "net": ["net-stubbed", "net-wifi"],
        "log": ["log-rtt", "log-usb-serial", "log-uart"],
        "include": [
            {"mcu": "mcu-esp32c3", "target": "riscv32imc-unknown-none-elf"},
            {
                "mcu": "mcu-esp32",
                "target": "xtensa-esp32-none-elf",
                "espname": "esp32",
            },
            {
                "mcu": "mcu-nrf52840",
                "target": "thumbv7em-none-eabihf",
                "boot": "nrf-boot-s140",
            },
            {
                "mcu": "mcu-nrf52832",
                "target": "thumbv7em-none-eabihf",
                "boot": "nrf-boot-s132",
            },
            {
                "mcu": "mcu-esp32c3",
                "net": "net-stubbed",
                "log": "log-uart",
                "target": "riscv32imc-unknown-none-elf",
                "imu": "imu-mpu6050",
            },
            {
                "mcu": "mcu-esp32c3",
                "net": "net-stubbed",
                "log": "log-uart",
                "target": "riscv32imc-unknown-none-elf",
                "imu": "imu-bmi160",
            },
        ],
        "exclude": [
            {"mcu": "mcu-esp32", "log": "log-usb-serial"},
            {"mcu": "mcu-esp32", "log": "log-rtt"},
            {"mcu": "mcu-nrf52832", "log": "log-usb-serial"},
            {"mcu": "mcu-nrf52840", "net": "net-wifi"},
            {"mcu": "mcu-nrf52832", "net": "net-wifi"},
        ],
    }


@pytest.fixture
def firmware_workflow(firmware_matrix: dict[str, Any]) -> dict[str, Any]:
    """Firmware CI workflow with a format job and a matrix build job."""
    return {
        "name": "Firmware CI",
        "jobs": {
            "fmt": {
                "name": "Format",
                "runs-on": "ubuntu-latest",
                "steps": [{"run": "cargo fmt --check"}],
            },
            "build": {
                "name": "Build",
                "runs-on": "ubuntu-latest",
                "continue-on-error": "${{ matrix.mcu == 'mcu-esp32' }}",
                "strategy": {"matrix": firmware_matrix},
                "steps": [{"run": "cargo build"}],
            },
        },
    }


@pytest.fixture
def firmware_definition(firmware_matrix: dict[str, Any]) -> MatrixDefinition:
    return MatrixDefinition.from_mapping({"matrix": firmware_matrix})


@pytest.fixture
def write_yaml(tmp_path: Path) -> Callable[[str, Any], Path]:
    """Write data as YAML below tmp_path and return the file path."""

    def _write(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False)
        return path

    return _write
