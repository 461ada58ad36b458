"""Tests for stack file reading and writing."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from stacksniff.catalog.models import Catalog
from stacksniff.stackfile import StackFileError, read_stack_file, render_section, write_stack_file

RESULTS = {
    "stripe": "https://dashboard.stripe.com",
    "repo": "https://github.com/acme/shop",
    "github-actions": "https://github.com/acme/shop/actions",
}


class TestRenderSection:
    """Tests for render_section."""

    def test_repository_first(self, catalog: Catalog) -> None:
        section = render_section(RESULTS, catalog)
        assert list(section) == ["Repository", "Stripe", "GitHub Actions"]


class TestWriteStackFile:
    """Tests for write_stack_file and read_stack_file."""

    def test_write_then_read(self, tmp_path: Path, catalog: Catalog) -> None:
        path = tmp_path / "stacksniff.yml"

        write_stack_file(path, "shop", RESULTS, catalog)

        assert read_stack_file(path, "shop", catalog) == RESULTS

    def test_document_shape(self, tmp_path: Path, catalog: Catalog) -> None:
        path = tmp_path / "stacksniff.yml"
        write_stack_file(path, "shop", RESULTS, catalog)

        data = yaml.safe_load(path.read_text())

        assert data == {
            "shop": {
                "Repository": "https://github.com/acme/shop",
                "Stripe": "https://dashboard.stripe.com",
                "GitHub Actions": "https://github.com/acme/shop/actions",
            }
        }

    def test_keeps_other_projects_and_manual_keys(self, tmp_path: Path, catalog: Catalog) -> None:
        path = tmp_path / "stacksniff.yml"
        path.write_text(
            "blog:\n  Repository: https://github.com/acme/blog\n"
            "shop:\n  Stripe: https://old.example.com\n  Status Page: https://status.acme.io\n"
        )

        write_stack_file(path, "shop", {"stripe": "https://dashboard.stripe.com"}, catalog)
        data = yaml.safe_load(path.read_text())

        assert data["blog"] == {"Repository": "https://github.com/acme/blog"}
        assert data["shop"] == {
            "Stripe": "https://dashboard.stripe.com",
            "Status Page": "https://status.acme.io",
        }

    def test_invalid_existing_file(self, tmp_path: Path, catalog: Catalog) -> None:
        path = tmp_path / "stacksniff.yml"
        path.write_text("shop: [unclosed\n")

        with pytest.raises(StackFileError):
            write_stack_file(path, "shop", RESULTS, catalog)

    def test_read_missing(self, tmp_path: Path, catalog: Catalog) -> None:
        assert read_stack_file(tmp_path / "nope.yml", "shop", catalog) == {}

    def test_read_unknown_display_name(self, tmp_path: Path, catalog: Catalog) -> None:
        path = tmp_path / "stacksniff.yml"
        path.write_text("shop:\n  Status Page: https://status.acme.io\n")

        assert read_stack_file(path, "shop", catalog) == {"status page": "https://status.acme.io"}
