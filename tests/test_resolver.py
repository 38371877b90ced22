"""Tests for reusebom.resolver."""

from __future__ import annotations

import pytest

from reusebom.dep5 import PackageConfigError
from reusebom.models import NOASSERTION
from reusebom.resolver import SourceResolver, sidecar_path
from tests._fixtures.repo_builder import RepoBuilder


def _precedence_repo(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "src/app.py": """
                # SPDX-FileCopyrightText: Embedded
                # SPDX-FileContributor: Embedded Contributor
                print("hello")
            """,
            "src/app.py.license": """
                SPDX-FileCopyrightText: Sidecar
                SPDX-FileContributor: Sidecar Contributor
            """,
        }
    )
    repo_builder.write_dep5(
        """
        Upstream-Name: example

        Files: src/app.py
        Copyright: Config
        License: Apache-2.0
        """
    )


def test_embedded_comment_has_highest_precedence(repo_builder: RepoBuilder) -> None:
    _precedence_repo(repo_builder)

    record = repo_builder.resolver().resolve("src/app.py")

    assert record.copyright_text == "Embedded"
    assert record.license_info_in_files == ["Apache-2.0"]
    assert record.file_contributors == ["Sidecar Contributor", "Embedded Contributor"]


def test_sidecar_overrides_package_configuration(repo_builder: RepoBuilder) -> None:
    _precedence_repo(repo_builder)
    repo_builder.write({"src/app.py": "print('no header')\n"})

    record = repo_builder.resolver().resolve("src/app.py")

    assert record.copyright_text == "Sidecar"


def test_stanza_overrides_header_defaults(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "src/main.py": "print('main')\n",
            "docs/guide.py": "print('guide')\n",
        }
    )
    repo_builder.write_dep5(
        """
        Upstream-Name: example
        Copyright: 2023 Header Holder
        License: MIT

        Files: src/*
        Copyright: 2023 Source Holder
        License: GPL-2.0-only
        """
    )
    resolver = repo_builder.resolver()

    matched = resolver.resolve("src/main.py")
    unmatched = resolver.resolve("docs/guide.py")

    assert matched.copyright_text == "2023 Source Holder"
    assert matched.license_info_in_files == ["GPL-2.0-only"]
    assert unmatched.copyright_text == "2023 Header Holder"
    assert unmatched.license_info_in_files == ["MIT"]


def test_licenses_accumulate_after_package_configuration(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"lib.py": "# SPDX-License-Identifier: MIT\n"})
    repo_builder.write_dep5(
        """
        Upstream-Name: example
        License: Apache-2.0
        """
    )

    record = repo_builder.resolver().resolve("lib.py")

    assert record.license_info_in_files == ["Apache-2.0", "MIT"]


def test_missing_sources_match_disabled_package_config(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "lib.py": """
                # SPDX-FileCopyrightText: 2023 Jane
                # SPDX-License-Identifier: MIT
            """
        }
    )

    with_missing = SourceResolver("does-not-exist").resolve("lib.py")
    disabled = SourceResolver(None).resolve("lib.py")

    assert with_missing.to_dict() == disabled.to_dict()
    assert with_missing.copyright_text == "2023 Jane"


def test_repeated_contributors_keep_source_order(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "lib.ts": """
                /*
                 * SPDX-FileContributor: First
                 * SPDX-FileContributor: Second
                 */
                export const x = 1;
            """
        }
    )

    record = SourceResolver(None).resolve("lib.ts")

    assert record.file_contributors == ["First", "Second"]


def test_unsupported_syntax_falls_back_to_plain_text(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "data.xyzzy": """
                some payload
                SPDX-FileCopyrightText: 2023 Plain
                SPDX-License-Identifier: CC0-1.0
            """,
            "README.txt": "SPDX-License-Identifier: MIT\n",
        }
    )
    resolver = SourceResolver(None)

    record = resolver.resolve("data.xyzzy")

    assert record.copyright_text == "2023 Plain"
    assert record.license_info_in_files == ["CC0-1.0"]
    assert resolver.resolve("README.txt").license_info_in_files == ["MIT"]


def test_markdown_html_comment_header_is_read(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "README.md": (
                "<!--\n"
                "SPDX-FileCopyrightText: 2023 Md\n"
                "SPDX-License-Identifier: MIT\n"
                "-->\n"
                "# Title\n"
            ),
        }
    )

    record = SourceResolver(None).resolve("README.md")

    assert record.copyright_text == "2023 Md"
    assert record.license_info_in_files == ["MIT"]


def test_tags_after_ignore_marker_are_skipped(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "lib.py": """
                # SPDX-FileContributor: Alice
                # REUSE-IgnoreStart SPDX-License-Identifier: MIT
                x = 1
            """,
        }
    )

    record = SourceResolver(None).resolve("lib.py")

    assert record.file_contributors == ["Alice"]
    assert record.license_info_in_files == [NOASSERTION]


def test_tags_outside_comments_are_ignored_for_supported_syntax(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"lib.py": 'LICENSE = "SPDX-License-Identifier: MIT"\n'})

    record = SourceResolver(None).resolve("lib.py")

    assert record.license_info_in_files == [NOASSERTION]


def test_binary_file_without_metadata(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"logo.png": b"\x89PNG\r\n\x1a\n\x00\xff\xfe"})

    record = SourceResolver(None).resolve("logo.png")

    assert record.copyright_text == NOASSERTION
    assert record.license_info_in_files == [NOASSERTION]


def test_sidecar_describes_binary_file(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "logo.png": b"\x89PNG\r\n\x1a\n\x00",
            "logo.png.license": """
                SPDX-FileCopyrightText: 2023 Designer
                SPDX-License-Identifier: CC-BY-4.0
                SPDX-FileType: IMAGE
            """,
        }
    )

    record = SourceResolver(None).resolve("logo.png")

    assert sidecar_path("logo.png").name == "logo.png.license"
    assert record.copyright_text == "2023 Designer"
    assert record.license_info_in_files == ["CC-BY-4.0"]
    assert record.file_types == ["IMAGE"]


def test_unreadable_file_fails_resolution(repo_builder: RepoBuilder) -> None:
    with pytest.raises(FileNotFoundError):
        SourceResolver(None).resolve("missing.py")


def test_malformed_package_configuration_propagates(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "lib.py": "x = 1\n",
            ".reuse/dep5": "Upstream-Name: broken\n",
        }
    )

    with pytest.raises(PackageConfigError):
        repo_builder.resolver().resolve("lib.py")


def test_resolution_is_deterministic(repo_builder: RepoBuilder) -> None:
    _precedence_repo(repo_builder)
    resolver = repo_builder.resolver()

    assert resolver.resolve("src/app.py").to_dict() == resolver.resolve("src/app.py").to_dict()
