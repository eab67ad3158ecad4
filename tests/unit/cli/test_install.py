"""Unit tests for install and update commands.

Tests for the CLI install/update command implementation.
"""

from spmctl.cli.main import app
from spmctl.models.package import InstalledPackage
from typer.testing import CliRunner

from tests.fakes import CliEnv, flat

runner = CliRunner()


class TestInstallCommand:
    """Tests for spmctl install command."""

    def test_install_help(self) -> None:
        """Install command shows help."""
        result = runner.invoke(app, ["install", "--help"])
        assert result.exit_code == 0
        assert "Install a catalog package" in result.stdout

    def test_install_not_installed_package(self, cli_env: CliEnv) -> None:
        """Installing B runs the backend and re-syncs the catalog."""
        cli_env.backend.provides["git+https://example.com/b.git"] = InstalledPackage(
            name="B", version="2.0"
        )

        result = runner.invoke(app, ["install", "B"])

        assert result.exit_code == 0
        assert cli_env.backend.add_calls == ["git+https://example.com/b.git"]
        output = flat(result.output)
        assert "Installed B" in output
        assert "2 packages: 2 up to date" in output
        # Initial fetch plus the refresh after the install
        assert len(cli_env.fetcher.urls) == 2
        assert cli_env.backend.list_calls == 2

    def test_install_already_installed(self, cli_env: CliEnv) -> None:
        """Installing an up-to-date package is refused without --force."""
        result = runner.invoke(app, ["install", "A"])

        assert result.exit_code == 1
        assert "is up to date; use --force to install anyway" in flat(result.output)
        assert cli_env.backend.add_calls == []

    def test_install_force(self, cli_env: CliEnv) -> None:
        """--force skips the status check."""
        result = runner.invoke(app, ["install", "A", "--force"])

        assert result.exit_code == 0
        assert cli_env.backend.add_calls == ["git+https://example.com/a.git"]

    def test_install_unknown_package(self, cli_env: CliEnv) -> None:
        """Names missing from the catalog are reported."""
        result = runner.invoke(app, ["install", "missing"])

        assert result.exit_code == 1
        assert "Package 'missing' is not in the catalog" in flat(result.output)

    def test_install_backend_failure(self, cli_env: CliEnv) -> None:
        """A failed install reports the backend error."""
        cli_env.backend.add_error = "Repository not found"

        result = runner.invoke(app, ["install", "B"])

        assert result.exit_code == 1
        assert "Failed to install 'B': Repository not found" in flat(result.output)
        # The catalog is still refreshed after the failure
        assert len(cli_env.fetcher.urls) == 2

    def test_install_without_catalog(self, cli_env: CliEnv) -> None:
        """Nothing is installed when the manifest cannot be fetched."""
        cli_env.fetcher.body = None

        result = runner.invoke(app, ["install", "B"])

        assert result.exit_code == 1
        assert "Could not load the package catalog" in flat(result.output)
        assert cli_env.backend.add_calls == []

    def test_install_backend_unavailable(self, cli_env: CliEnv) -> None:
        """A missing backend is reported before anything is fetched."""
        cli_env.backend.available = False

        result = runner.invoke(app, ["install", "B"])

        assert result.exit_code == 1
        assert "The fake backend is not available" in flat(result.output)
        assert cli_env.fetcher.urls == []
        assert cli_env.backend.list_calls == 0
        assert cli_env.backend.add_calls == []

    def test_install_version_mismatch_warns(self, cli_env: CliEnv) -> None:
        """A package that still does not match after install triggers a warning."""
        result = runner.invoke(app, ["install", "B"])

        assert result.exit_code == 0
        output = flat(result.output)
        assert "Installed B" in output
        assert "reports status not_installed" in output

    def test_quiet_skips_table(self, cli_env: CliEnv) -> None:
        """--quiet prints only the result line."""
        cli_env.backend.provides["git+https://example.com/b.git"] = InstalledPackage(
            name="B", version="2.0"
        )

        result = runner.invoke(app, ["-q", "install", "B"])

        assert result.exit_code == 0
        assert "Installed B" in result.stdout
        assert "packages:" not in result.stdout


class TestUpdateCommand:
    """Tests for spmctl update command."""

    def test_update_outdated_package(self, cli_env: CliEnv) -> None:
        """Updating an outdated package brings it up to date."""
        cli_env.backend.installed = [InstalledPackage(name="A", version="0.9")]
        cli_env.backend.provides["git+https://example.com/a.git"] = InstalledPackage(
            name="A", version="1.0"
        )

        result = runner.invoke(app, ["update", "A"])

        assert result.exit_code == 0
        assert cli_env.backend.add_calls == ["git+https://example.com/a.git"]
        assert "Updated A" in flat(result.output)

    def test_update_not_outdated(self, cli_env: CliEnv) -> None:
        """Updating a package that is not outdated is refused."""
        result = runner.invoke(app, ["update", "B"])

        assert result.exit_code == 1
        assert "is not installed; use --force to update anyway" in flat(result.output)
        assert cli_env.backend.add_calls == []
