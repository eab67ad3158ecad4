"""Unit tests for formatting utilities."""

import pytest
from spmctl.models.package import CatalogPackage, PackageStatus
from spmctl.utils.formatting import STATUS_DISPLAY, create_catalog_table, format_catalog_row


class TestStatusDisplay:
    """Tests for the status label mapping."""

    def test_every_status_has_a_label(self) -> None:
        """No status is missing from the display mapping."""
        assert set(STATUS_DISPLAY) == set(PackageStatus)

    @pytest.mark.parametrize(
        ("status", "action"),
        [
            (PackageStatus.NOT_INSTALLED, "install"),
            (PackageStatus.OUTDATED, "update"),
            (PackageStatus.UP_TO_DATE, ""),
            (PackageStatus.UNKNOWN, ""),
        ],
    )
    def test_action_per_status(self, status: PackageStatus, action: str) -> None:
        """Only actionable statuses offer an action."""
        assert STATUS_DISPLAY[status][1] == action


class TestCatalogTable:
    """Tests for create_catalog_table and format_catalog_row."""

    def test_columns(self) -> None:
        """The table has package, version, status and action columns."""
        table = create_catalog_table()

        assert [c.header for c in table.columns] == ["Package", "Version", "Status", "Action"]

    def test_row_markup(self) -> None:
        """Rows carry the status style and label."""
        pkg = CatalogPackage(
            name="shusmo-core",
            version="1.2.0",
            url="https://example.com/core.git",
            status=PackageStatus.OUTDATED,
        )

        name, version, status, action = format_catalog_row(pkg)

        assert "shusmo-core" in name
        assert "1.2.0" in version
        assert status == "[status.outdated]outdated[/]"
        assert action == "update"
