"""End-to-end detection scenarios against the bundled catalog.

The git remote is patched; everything else (catalog, manifests, file
patterns, coordinator) runs for real.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
from unittest.mock import patch

import pytest

from stacksniff.catalog import Catalog, load_catalog
from stacksniff.config.ignore import load_exclude_patterns
from stacksniff.core.models import DetectionReport
from stacksniff.detection import build_default_coordinator
from stacksniff.detection.languages import detect_languages
from stacksniff.stackfile import read_stack_file, write_stack_file


@pytest.fixture(scope="module")
def bundled() -> Catalog:
    return load_catalog()


def _sniff(root: Path, catalog: Catalog, remote_url: Optional[str]) -> DetectionReport:
    exclude = load_exclude_patterns(root)
    with patch("stacksniff.detection.repository.git.get_remote_url", return_value=remote_url):
        return build_default_coordinator(catalog, exclude=exclude).run(root)


class TestScenarios:
    """Detection scenarios for typical projects."""

    def test_ruby_project_with_stripe(self, make_project, bundled: Catalog) -> None:
        root = make_project({"Gemfile": "gem 'stripe', '~> 5.0'\ngem 'rails'\n"})

        report = _sniff(root, bundled, None)

        assert detect_languages(root, bundled) == {"ruby"}
        assert report.results == {"stripe": "https://dashboard.stripe.com"}
        assert report.ok

    def test_hosting_decides_between_ci_systems(self, make_project, bundled: Catalog) -> None:
        root = make_project({".github/workflows/ci.yml": "on: push\n", ".gitlab-ci.yml": "test:\n"})

        report = _sniff(root, bundled, "git@gitlab.com:acme/shop.git")

        assert report.results == {
            "repo": "https://gitlab.com/acme/shop",
            "gitlab-ci": "https://gitlab.com/acme/shop/-/pipelines",
        }

    def test_no_remote_falls_back(self, make_project, bundled: Catalog) -> None:
        root = make_project({".github/workflows/ci.yml": "", ".github/dependabot.yml": ""})

        report = _sniff(root, bundled, None)

        assert "repo" not in report.results
        assert report.results["github-actions"] == bundled.technologies["github-actions"].fallback_url
        assert report.results["dependabot"] == bundled.technologies["dependabot"].fallback_url

    def test_project_without_manifests(self, make_project, bundled: Catalog) -> None:
        root = make_project({"Dockerfile": "FROM scratch\n", "README.md": "stripe\n"})

        report = _sniff(root, bundled, "https://github.com/acme/infra.git")

        assert detect_languages(root, bundled) == set()
        assert report.results["repo"] == "https://github.com/acme/infra"
        assert "docker" in report.results
        assert "stripe" not in report.results

    def test_multi_language_monorepo(self, make_project, bundled: Catalog) -> None:
        root = make_project({
            "package.json": '{"dependencies": {"@stripe/stripe-js": "^2", "@sentry/node": "^7"}}',
            "requirements.txt": "stripe>=7\n",
            "node_modules/twilio/package.json": '{"dependencies": {"twilio": "*"}}',
        })

        report = _sniff(root, bundled, None)

        assert report.results["stripe"] == "https://dashboard.stripe.com"
        assert "sentry" in report.results
        assert "twilio" not in report.results

    def test_stack_file_round_trip(self, make_project, bundled: Catalog, tmp_path: Path) -> None:
        root = make_project({"Gemfile": "gem 'stripe'\n", ".github/workflows/": ""})
        report = _sniff(root, bundled, "git@github.com:acme/shop.git")
        path = tmp_path / "stacksniff.yml"

        write_stack_file(path, "shop", report.results, bundled)

        assert read_stack_file(path, "shop", bundled) == report.results
