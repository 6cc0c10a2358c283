"""Test matrix CLI commands."""

import json

import pytest

from fwmatrix.cli import app


@pytest.fixture
def workflow_file(write_yaml, firmware_workflow):
    return write_yaml("firmware-ci.yml", firmware_workflow)


@pytest.fixture
def simple_matrix_file(write_yaml):
    return write_yaml(
        "matrix.yaml",
        {
            "matrix": {
                "mcu": ["A", "B"],
                "log": ["X", "Y"],
                "include": [
                    {"mcu": "A", "target": "thumbv7em-none-eabihf"},
                    {"mcu": "B", "target": "xtensa-esp32-none-elf", "espname": "esp32"},
                ],
                "exclude": [{"mcu": "B", "log": "X"}],
            }
        },
    )


class TestResolveCommand:
    """Test the resolve command."""

    def test_json_output(self, cli_runner, simple_matrix_file):
        result = cli_runner.invoke(
            app, ["resolve", str(simple_matrix_file), "--format", "json"]
        )

        assert result.exit_code == 0, result.output
        jobs = json.loads(result.output)
        assert [job["features"] for job in jobs] == ["A,X", "A,Y", "B,Y"]
        assert jobs[2]["vendor_alias"] == "esp32"

    def test_records_output(self, cli_runner, simple_matrix_file):
        result = cli_runner.invoke(
            app, ["resolve", str(simple_matrix_file), "-f", "records"]
        )

        assert result.exit_code == 0, result.output
        records = json.loads(result.output)
        assert records[0] == {
            "feature_flag_string": "A,X",
            "target_triple": "thumbv7em-none-eabihf",
            "vendor_alias": None,
            "bootloader_id": None,
        }

    def test_github_output_for_workflow(self, cli_runner, workflow_file):
        result = cli_runner.invoke(
            app, ["resolve", str(workflow_file), "--format", "github"]
        )

        assert result.exit_code == 0, result.output
        matrix = json.loads(result.output)
        assert len(matrix["include"]) == 15
        esp32 = [e for e in matrix["include"] if e["mcu"] == "mcu-esp32"]
        assert all(entry["allow_failure"] for entry in esp32)
        assert esp32[0]["espname"] == "esp32"

    def test_output_file(self, cli_runner, simple_matrix_file, tmp_path):
        output = tmp_path / "out" / "jobs.json"

        result = cli_runner.invoke(
            app, ["resolve", str(simple_matrix_file), "--output", str(output)]
        )

        assert result.exit_code == 0, result.output
        assert len(json.loads(output.read_text(encoding="utf-8"))) == 3

    def test_table_output(self, cli_runner, simple_matrix_file):
        result = cli_runner.invoke(
            app, ["--no-emoji", "resolve", str(simple_matrix_file)]
        )

        assert result.exit_code == 0, result.output
        assert "Build Jobs" in result.output

    def test_explicit_job(self, cli_runner, workflow_file):
        result = cli_runner.invoke(
            app, ["resolve", str(workflow_file), "--job", "fmt", "-f", "json"]
        )

        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_missing_file_is_usage_error(self, cli_runner, tmp_path):
        result = cli_runner.invoke(app, ["resolve", str(tmp_path / "nope.yml")])
        assert result.exit_code == 2


class TestValidateCommand:
    """Test the validate command."""

    def test_valid_matrix(self, cli_runner, workflow_file):
        result = cli_runner.invoke(app, ["--no-emoji", "validate", str(workflow_file)])

        assert result.exit_code == 0, result.output
        assert "Matrix is valid: 15 jobs" in result.output

    def test_missing_target(self, cli_runner, write_yaml):
        path = write_yaml(
            "matrix.yaml",
            {"matrix": {"mcu": ["A", "B"], "include": [{"mcu": "A", "target": "t"}]}},
        )

        result = cli_runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 1
        assert "Matrix error" in result.output

    def test_unknown_axis(self, cli_runner, write_yaml):
        path = write_yaml(
            "matrix.yaml", {"matrix": {"mcu": ["A"], "exclude": [{"net": "wifi"}]}}
        )

        result = cli_runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 1
        assert "Unknown axis 'net'" in result.output

    def test_empty_exclude(self, cli_runner, write_yaml):
        path = write_yaml("matrix.yaml", {"matrix": {"mcu": ["A"], "exclude": [{}]}})

        result = cli_runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 1
        assert "Matrix error" in result.output

    def test_ambiguous_include(self, cli_runner, write_yaml):
        path = write_yaml(
            "matrix.yaml", {"matrix": {"mcu": ["A"], "include": [{"target": "t"}]}}
        )

        result = cli_runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 1
        assert "Matrix error" in result.output


class TestAxesCommand:
    """Test the axes command."""

    def test_json(self, cli_runner, workflow_file):
        result = cli_runner.invoke(app, ["axes", str(workflow_file), "-f", "json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert list(data["axes"]) == ["mcu", "imu", "net", "log"]
        assert data["combinations"] == 24
        assert data["include_rules"] == 6
        assert data["exclude_rules"] == 5

    def test_table(self, cli_runner, workflow_file):
        result = cli_runner.invoke(app, ["axes", str(workflow_file)])

        assert result.exit_code == 0, result.output
        assert "Matrix Axes" in result.output
        assert "24 combinations" in result.output

    def test_unknown_format_rejected(self, cli_runner, workflow_file):
        result = cli_runner.invoke(app, ["axes", str(workflow_file), "-f", "xml"])

        assert result.exit_code == 2
        assert "Matrix Axes" not in result.output


class TestPlanCommand:
    """Test the plan command."""

    def test_shell(self, cli_runner, workflow_file):
        result = cli_runner.invoke(app, ["plan", str(workflow_file), "-f", "shell"])

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == (
            "# mcu-esp32c3 / imu-stubbed / net-stubbed / log-rtt (stable)"
        )
        assert lines[2] == (
            "cargo build --target riscv32imc-unknown-none-elf --no-default-features "
            "--features mcu-esp32c3,imu-stubbed,net-stubbed,log-rtt"
        )

    def test_json(self, cli_runner, workflow_file):
        result = cli_runner.invoke(app, ["plan", str(workflow_file), "-f", "json"])

        assert result.exit_code == 0, result.output
        plans = json.loads(result.output)
        esp32 = [p for p in plans if p["toolchain"] == "esp"]
        assert len(esp32) == 2
        assert all(p["vendor_build_targets"] == "esp32" for p in esp32)
        assert all(p["allow_failure"] for p in esp32)

    def test_config_file_settings(self, cli_runner, workflow_file, tmp_path):
        config_file = tmp_path / "fwmatrix.yaml"
        config_file.write_text("cargo_command: cross\n", encoding="utf-8")

        result = cli_runner.invoke(
            app, ["-c", str(config_file), "plan", str(workflow_file), "-f", "json"]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)[0]["build_command"][0] == "cross"


class TestGlobalOptions:
    """Test global callback options."""

    def test_version(self, cli_runner):
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.startswith("fwmatrix v")

    def test_verbose_enables_debug_logging(
        self, cli_runner, workflow_file, mock_setup_logging
    ):
        result = cli_runner.invoke(app, ["-vv", "validate", str(workflow_file)])

        assert result.exit_code == 0, result.output
        assert mock_setup_logging.call_args.kwargs["log_level_name"] == "DEBUG"

    def test_default_log_level_from_settings(
        self, cli_runner, workflow_file, mock_setup_logging, monkeypatch
    ):
        monkeypatch.setenv("FWMATRIX_LOG_LEVEL", "error")

        result = cli_runner.invoke(app, ["validate", str(workflow_file)])

        assert result.exit_code == 0, result.output
        assert mock_setup_logging.call_args.kwargs["log_level_name"] == "ERROR"

    def test_missing_config_file(self, cli_runner, workflow_file, tmp_path):
        result = cli_runner.invoke(
            app, ["-c", str(tmp_path / "missing.yaml"), "validate", str(workflow_file)]
        )

        assert result.exit_code == 1
        assert "Configuration error" in result.output
