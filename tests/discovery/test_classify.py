"""Tests for path classification."""

from __future__ import annotations

import pytest

from slnsync.discovery.classify import (
    ProjectCategory,
    classify_category,
    classify_path,
    derive_display_name,
    split_segments,
)

ABBREVIATIONS = {"ai": "AI"}


class TestClassifyPath:
    """Category and folder path for project paths."""

    def test_extension_with_prefix_and_abbreviation(self) -> None:
        result = classify_path(
            "Source/Extensions/Zonit.Extensions.Ai/Source/Zonit.Extensions.Ai.csproj",
            prefix="Zonit", abbreviations=ABBREVIATIONS,
        )
        assert result.category is ProjectCategory.EXTENSIONS
        assert result.folder_path == "Extensions\\AI"

    def test_service_name_stripped(self) -> None:
        result = classify_path(
            "Source/Services/Zonit.Services.Dashboard/Dashboard.csproj", prefix="Zonit",
        )
        assert result.category is ProjectCategory.SERVICES
        assert result.folder_path == "Services\\Dashboard"

    def test_category_match_is_case_insensitive(self) -> None:
        result = classify_path("source/PLUGINS/zonit.plugins.seo/a.csproj", prefix="Zonit")
        assert result.category is ProjectCategory.PLUGINS
        assert result.folder_path == "Plugins\\Seo"

    def test_backslash_paths(self) -> None:
        result = classify_path("Source\\Extensions\\Zonit.Extensions.Ai", prefix="Zonit")
        assert result.category is ProjectCategory.EXTENSIONS

    @pytest.mark.parametrize("path, category", [
        ("Source/Tests/Foo/Foo.Tests.csproj", ProjectCategory.TESTS),
        ("samples/Demo/Demo.csproj", ProjectCategory.SAMPLES),
        ("Build/Tools/Gen/Gen.csproj", ProjectCategory.TOOLS),
    ])
    def test_bucket_segments(self, path: str, category: ProjectCategory) -> None:
        result = classify_path(path)
        assert result.category is category
        assert result.folder_path == category.value

    def test_named_category_wins_over_bucket(self) -> None:
        result = classify_path("Tests/Extensions/Zonit.Extensions.X/x.csproj", prefix="Zonit")
        assert result.category is ProjectCategory.EXTENSIONS
        assert result.folder_path == "Extensions\\X"

    def test_fallback_is_other(self) -> None:
        result = classify_path("lib/Foo/Foo.csproj")
        assert result.category is ProjectCategory.OTHER
        assert result.folder_path == "Other"

    def test_trailing_category_segment_is_not_a_pair(self) -> None:
        assert classify_path("Source/Services").category is ProjectCategory.OTHER


class TestClassifyCategory:
    """Category of a submodule path."""

    def test_trailing_segment_counts(self) -> None:
        assert classify_category("Source/Services") is ProjectCategory.SERVICES

    def test_named_segment(self) -> None:
        assert classify_category("Source/Extensions/Zonit.Extensions.Ai") is ProjectCategory.EXTENSIONS

    def test_bucket(self) -> None:
        assert classify_category("Tools/Generator") is ProjectCategory.TOOLS

    def test_other(self) -> None:
        assert classify_category("Libs/Common") is ProjectCategory.OTHER


class TestDeriveDisplayName:
    """Name shortening."""

    def test_strips_category_prefix(self) -> None:
        name = derive_display_name("Zonit.Extensions.Cms", ProjectCategory.EXTENSIONS, "Zonit")
        assert name == "Cms"

    def test_strips_bare_prefix(self) -> None:
        name = derive_display_name("Zonit.Common", ProjectCategory.EXTENSIONS, "Zonit")
        assert name == "Common"

    def test_capitalizes_without_prefix(self) -> None:
        assert derive_display_name("myLib", ProjectCategory.PLUGINS) == "MyLib"

    def test_name_equal_to_prefix_is_kept(self) -> None:
        assert derive_display_name("Zonit", ProjectCategory.SERVICES, "Zonit") == "Zonit"


def test_split_segments_mixed_separators() -> None:
    assert split_segments("./Source\\Extensions/Ai/") == ["Source", "Extensions", "Ai"]
