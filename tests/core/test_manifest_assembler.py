"""Tests for fragment-based manifest assembly."""

from itertools import permutations

import pytest

from rosmanifest.core.errors import ManifestStateError
from rosmanifest.core.manifest import (
    BUILD_DEPENDS,
    EXPORT_BEGIN,
    EXPORT_DECLARATIONS,
    EXPORT_END,
    RUN_DEPENDS,
    ManifestAssembler,
    ManifestHandle,
)

HANDLE = ManifestHandle(owner="nav_core", filename="package.xml")

FRAGMENTS = [
    (BUILD_DEPENDS, "", ["  <build_depend>a</build_depend>"]),
    (RUN_DEPENDS, "", ["  <run_depend>b</run_depend>"]),
    (EXPORT_BEGIN, "", ["  <export>"]),
    (EXPORT_DECLARATIONS, "x", ['    <x plugin="p"/>']),
    (EXPORT_END, "", ["  </export>"]),
]


def _opened() -> ManifestAssembler:
    assembler = ManifestAssembler()
    assembler.open(HANDLE, ["<package>"], ["</package>"])
    return assembler


def test_assemble_orders_fragments_by_key() -> None:
    """Test that the assembled text is independent of the write order."""
    expected: str | None = None
    for order in permutations(FRAGMENTS):
        assembler = _opened()
        for category, sub_order, lines in order:
            assembler.write_fragment(HANDLE, category, sub_order, lines)

        text = assembler.assemble(HANDLE)

        if expected is None:
            expected = text
        assert text == expected

    assert expected == (
        "<package>\n"
        "  <build_depend>a</build_depend>\n"
        "  <run_depend>b</run_depend>\n"
        "  <export>\n"
        '    <x plugin="p"/>\n'
        "  </export>\n"
        "</package>\n"
    )


def test_rewriting_a_fragment_replaces_it() -> None:
    assembler = _opened()

    assembler.write_fragment(HANDLE, RUN_DEPENDS, "", ["  <run_depend>a</run_depend>"])
    assembler.write_fragment(
        HANDLE,
        RUN_DEPENDS,
        "",
        ["  <run_depend>a</run_depend>", "  <run_depend>b</run_depend>"],
    )

    assert assembler.assemble(HANDLE).count("<run_depend>a</run_depend>") == 1


def test_envelope_is_written_once() -> None:
    """Test that repeated envelope writes keep a single open and close tag."""
    assembler = _opened()

    for decl_type in ("a", "b", "c"):
        assembler.write_envelope(
            HANDLE, begin=(EXPORT_BEGIN, ["  <export>"]), end=(EXPORT_END, ["  </export>"])
        )
        assembler.write_fragment(HANDLE, EXPORT_DECLARATIONS, decl_type, [f"    <{decl_type}/>"])

    text = assembler.assemble(HANDLE)
    assert text.count("<export>") == 1
    assert text.count("</export>") == 1
    assert "    <a/>\n    <b/>\n    <c/>\n" in text


def test_envelope_write_reports_ignored_fragment() -> None:
    assembler = _opened()

    assert assembler.write_fragment(HANDLE, EXPORT_BEGIN, "", ["  <export>"]) is True
    assert assembler.write_fragment(HANDLE, EXPORT_BEGIN, "", ["  <other>"]) is False


def test_assemble_is_pure() -> None:
    assembler = _opened()
    assembler.write_fragment(HANDLE, RUN_DEPENDS, "", ["  <run_depend>a</run_depend>"])

    assert assembler.assemble(HANDLE) == assembler.assemble(HANDLE)


def test_writing_unopened_document_fails() -> None:
    assembler = ManifestAssembler()

    with pytest.raises(ManifestStateError, match="has not been opened"):
        assembler.write_fragment(HANDLE, RUN_DEPENDS, "", [])


def test_opening_twice_fails() -> None:
    assembler = _opened()

    with pytest.raises(ManifestStateError, match="already open"):
        assembler.open(HANDLE, ["<package>"], ["</package>"])


def test_handles_follow_open_order() -> None:
    assembler = ManifestAssembler()
    second = ManifestHandle(owner="a_pkg", filename="package.xml")
    assembler.open(HANDLE, [], [])
    assembler.open(second, [], [])

    assert assembler.handles() == [HANDLE, second]


def test_fragments_are_listed_in_assembly_order() -> None:
    assembler = _opened()
    assembler.write_fragment(HANDLE, RUN_DEPENDS, "", ["  <run_depend>b</run_depend>"])
    assembler.write_fragment(HANDLE, BUILD_DEPENDS, "", ["  <build_depend>a</build_depend>"])

    fragments = assembler.fragments(HANDLE)

    assert [key.category for key in fragments] == ["00-head", BUILD_DEPENDS, RUN_DEPENDS, "99-tail"]
    fragments.clear()
    assert len(assembler.fragments(HANDLE)) == 4
