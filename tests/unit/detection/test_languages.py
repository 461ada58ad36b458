"""Tests for language detection."""

from __future__ import annotations

from stacksniff.catalog.models import Catalog
from stacksniff.config.ignore import ExcludePatterns
from stacksniff.detection.languages import (
    detect_languages,
    detect_package_managers,
    order_languages,
    primary_language,
    profile_stack,
)


class TestDetectLanguages:
    """Tests for detect_languages."""

    def test_no_manifests(self, make_project, catalog: Catalog) -> None:
        root = make_project({"README.md": "# hi"})
        assert detect_languages(root, catalog) == set()

    def test_single_language(self, make_project, catalog: Catalog) -> None:
        root = make_project({"Gemfile": "gem 'rails'"})
        assert detect_languages(root, catalog) == {"ruby"}

    def test_any_manager_pattern_is_enough(self, make_project, catalog: Catalog) -> None:
        root = make_project({"app.gemspec": "", "yarn.lock": ""})
        assert detect_languages(root, catalog) == {"ruby", "nodejs"}

    def test_excluded_manifests_do_not_count(self, make_project, catalog: Catalog) -> None:
        root = make_project({"vendor/Gemfile": "", "requirements.txt": ""})
        # patterns are rooted, so vendor/Gemfile never matched in the first place
        assert detect_languages(root, catalog) == {"python"}
        exclude = ExcludePatterns(["requirements.txt"])
        assert detect_languages(root, catalog, exclude) == set()


class TestPackageManagers:
    """Tests for detect_package_managers and profile_stack."""

    def test_catalog_order(self, make_project, catalog: Catalog) -> None:
        root = make_project({"package.json": "{}", "yarn.lock": ""})
        assert detect_package_managers(root, catalog.languages["nodejs"]) == ["yarn", "npm"]

    def test_profile_stack(self, make_project, catalog: Catalog) -> None:
        root = make_project({"package.json": "{}", "requirements.txt": "flask\n"})

        profile = profile_stack(root, catalog)

        assert profile.languages == ("nodejs", "python")
        assert profile.language == "nodejs"
        assert profile.package_manager == "npm"

    def test_profile_without_languages(self, make_project, catalog: Catalog) -> None:
        profile = profile_stack(make_project({}), catalog)
        assert profile.languages == ()
        assert profile.package_manager is None


class TestOrdering:
    """Tests for order_languages and primary_language."""

    def test_catalog_order(self, catalog: Catalog) -> None:
        assert order_languages({"python", "ruby"}, catalog) == ["ruby", "python"]
        assert primary_language({"python", "nodejs"}, catalog) == "nodejs"
        assert primary_language(set(), catalog) is None
