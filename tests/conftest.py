"""Shared fixtures: a small synthetic catalog and project tree helpers."""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict

import pytest

from stacksniff.catalog.models import (
    Catalog,
    LanguageEntry,
    PackageManagerEntry,
    ServiceEntry,
    TechnologyEntry,
)
from stacksniff.core.logging import PACKAGE_LOGGER


def _language(language_id: str, **managers) -> LanguageEntry:
    return LanguageEntry(
        id=language_id,
        package_managers=MappingProxyType({
            manager_id: PackageManagerEntry(id=manager_id, files=tuple(files))
            for manager_id, files in managers.items()
        }),
    )


def _service(service_id: str, name: str, url: str, **stacks) -> ServiceEntry:
    return ServiceEntry(
        id=service_id,
        display_name=name,
        url=url,
        packages=MappingProxyType({lang: frozenset(pkgs) for lang, pkgs in stacks.items()}),
    )


@pytest.fixture
def catalog() -> Catalog:
    """A catalog with three languages, two services and a few technologies."""
    return Catalog.build(
        languages=[
            _language("ruby", bundler=["Gemfile", "Gemfile.lock", "*.gemspec"]),
            _language("nodejs", yarn=["yarn.lock"], npm=["package.json", "package-lock.json"]),
            _language("python", pip=["requirements.txt", "pyproject.toml"]),
        ],
        services=[
            _service(
                "stripe",
                "Stripe",
                "https://dashboard.stripe.com",
                ruby=["stripe"],
                nodejs=["stripe", "@stripe/stripe-js"],
                python=["stripe"],
            ),
            _service("sentry", "Sentry", "", ruby=["sentry-ruby"], python=["sentry-sdk"]),
        ],
        technologies=[
            TechnologyEntry(
                id="github-actions",
                display_name="GitHub Actions",
                files=(".github/workflows/",),
                category="ci",
                url_template="{repo}/actions",
                hosting_match="github.com",
                fallback_url="https://github.com/features/actions",
            ),
            TechnologyEntry(
                id="gitlab-ci",
                display_name="GitLab CI",
                files=(".gitlab-ci.yml",),
                category="ci",
                url_template="{repo}/-/pipelines",
                hosting_match="gitlab.com",
                fallback_url="https://docs.gitlab.com/ee/ci/",
            ),
            TechnologyEntry(
                id="jenkins",
                display_name="Jenkins",
                files=("Jenkinsfile",),
                category="ci",
            ),
            TechnologyEntry(
                id="terraform",
                display_name="Terraform",
                files=("*.tf",),
                fallback_url="https://developer.hashicorp.com/terraform",
            ),
        ],
    )


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
    """Create a project tree from a mapping of relative path to content.

    Paths ending in "/" create empty directories.
    """

    def _make(files: Dict[str, str]) -> Path:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        for rel_path, content in files.items():
            target = root / rel_path
            if rel_path.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """CLI runs change the package log level; keep tests independent of that."""
    yield
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.NOTSET)
