"""Tests for the ``haile doctor`` command (cli/doctor.py).

Coverage:
* Individual check functions return correct tuples.
* Doctor returns SUCCESS when everything is present.
* Doctor returns GENERAL_ERROR when requests or a unit is missing.
* Plain output when Rich is unavailable.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from haile.cli import exit_codes
from haile.exceptions import UnitNotFoundError


# ---------------------------------------------------------------------------
# Individual check functions
# ---------------------------------------------------------------------------

class TestHaileVersionCheck:
    def test_returns_current_version(self) -> None:
        from haile.cli.doctor import _haile_version_check
        from haile.version import __version__

        label, value, status = _haile_version_check()
        assert label == "haile"
        assert value == __version__
        assert "OK" in status


class TestPythonVersionCheck:
    def test_returns_tuple(self) -> None:
        from haile.cli.doctor import _python_version_check

        label, value, status = _python_version_check()
        assert label == "Python"
        assert isinstance(value, str)
        assert "OK" in status


class TestRequestsCheck:
    def test_installed(self) -> None:
        import requests

        from haile.cli.doctor import _requests_version_check

        label, value, status = _requests_version_check()
        assert label == "requests"
        assert value == requests.__version__
        assert "OK" in status

    @patch.dict("sys.modules", {"requests": None})
    def test_not_installed(self) -> None:
        from haile.cli.doctor import _requests_version_check

        label, value, status = _requests_version_check()
        assert label == "requests"
        assert value == "NOT INSTALLED"
        assert "FAIL" in status


class TestUnitsCheck:
    def test_lists_loaded_units(self) -> None:
        from haile.cli.doctor import _units_check

        label, value, status = _units_check()
        assert label == "units"
        assert value == "version, client, response"
        assert "OK" in status

    @patch("haile.cli.doctor.bootstrap.namespace")
    def test_failed_load(self, mock_namespace: MagicMock) -> None:
        from haile.cli.doctor import _units_check

        mock_namespace.side_effect = UnitNotFoundError(
            "Required unit haile.client was not found.", unit="haile.client",
        )
        _label, value, status = _units_check()
        assert "haile.client" in value
        assert "FAIL" in status


class TestOsCheck:
    def test_returns_tuple(self) -> None:
        from haile.cli.doctor import _os_check

        label, value, status = _os_check()
        assert label == "OS"
        assert isinstance(value, str)
        assert "OK" in status

    @patch("haile.cli.doctor.platform.machine", return_value="arm64")
    @patch("haile.cli.doctor.platform.release", return_value="23.4.0")
    @patch("haile.cli.doctor.platform.system", return_value="Darwin")
    def test_darwin_is_displayed_as_macos(
        self,
        _mock_system: MagicMock,
        _mock_release: MagicMock,
        _mock_machine: MagicMock,
    ) -> None:
        from haile.cli.doctor import _os_check

        _label, value, _status = _os_check()
        assert value == "macOS 23.4.0 (arm64)"


# ---------------------------------------------------------------------------
# run_doctor integration
# ---------------------------------------------------------------------------

class TestRunDoctor:
    def test_all_pass_returns_success(self) -> None:
        from haile.cli.doctor import run_doctor

        assert run_doctor() == exit_codes.SUCCESS

    @patch.dict("sys.modules", {"requests": None})
    def test_missing_requests_returns_error(self) -> None:
        from haile.cli.doctor import run_doctor

        assert run_doctor() == exit_codes.GENERAL_ERROR

    @patch.dict("sys.modules", {"rich": None, "rich.table": None, "rich.console": None})
    def test_plain_output_without_rich(self, capsys: pytest.CaptureFixture[str]) -> None:
        from haile.cli.doctor import run_doctor

        code = run_doctor()
        captured = capsys.readouterr()

        assert code == exit_codes.SUCCESS
        assert "haile doctor" in captured.err
        assert "requests" in captured.err
        assert "All checks passed." in captured.err

    @patch("haile.cli.doctor.bootstrap.namespace")
    @patch.dict("sys.modules", {"rich": None, "rich.table": None, "rich.console": None})
    def test_plain_output_reports_failure(
        self,
        mock_namespace: MagicMock,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        from haile.cli.doctor import run_doctor

        mock_namespace.side_effect = UnitNotFoundError("gone", unit="haile.response")
        code = run_doctor()

        assert code == exit_codes.GENERAL_ERROR
        assert "Some checks failed." in capsys.readouterr().err


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestDoctorRouting:
    @patch("haile.cli.doctor.run_doctor", return_value=exit_codes.SUCCESS)
    def test_doctor_dispatches(self, mock_run: MagicMock) -> None:
        from haile.cli.app import main

        code = main(["doctor"])
        assert code == exit_codes.SUCCESS
        mock_run.assert_called_once()

    @patch("haile.cli.doctor.run_doctor", return_value=exit_codes.GENERAL_ERROR)
    def test_doctor_failure_propagates(self, mock_run: MagicMock) -> None:
        from haile.cli.app import main

        assert main(["DOCTOR"]) == exit_codes.GENERAL_ERROR
