"""Incremental manifest assembly from ordered fragments.

A manifest document is built from fragments contributed at different points
of a resolution pass: the header and footer when a unit is declared,
dependency sections whenever dependencies are added, export declarations
when plugins are declared. Fragments are keyed by ``(category, sub_order)``
and concatenated in lexical key order by :meth:`ManifestAssembler.assemble`,
so the order in which they were written does not matter.

Example:
    >>> assembler = ManifestAssembler()
    >>> handle = ManifestHandle(owner="nav_core", filename="package.xml")
    >>> _ = assembler.open(handle, ["<package>"], ["</package>"])
    >>> _ = assembler.write_fragment(handle, RUN_DEPENDS, "", ["  <run_depend>a</run_depend>"])
    >>> print(assembler.assemble(handle), end="")
    <package>
      <run_depend>a</run_depend>
    </package>
"""

from collections.abc import Sequence
from dataclasses import dataclass
from xml.sax.saxutils import escape

from rosmanifest.core.errors import ManifestStateError

HEAD = "00-head"
STACK_DEPENDS = "50-depends"
BUILD_DEPENDS = "50-build_depends"
EXTRA_BUILD_DEPENDS = "51-extra_build_depends"
RUN_DEPENDS = "52-run_depends"
EXTRA_RUN_DEPENDS = "54-extra_run_depends"
EXPORT_BEGIN = "60-export-begin"
EXPORT_DECLARATIONS = "61-export-declarations"
EXPORT_END = "62-export-end"
PLUGIN_CLASSES = "50-classes"
TAIL = "99-tail"

# Categories written at most once; later writes are ignored.
ENVELOPE_CATEGORIES = frozenset({HEAD, EXPORT_BEGIN, EXPORT_END, TAIL})


def xml_text(value: str) -> str:
    return escape(value, {'"': "&quot;"})


@dataclass(frozen=True, order=True)
class ManifestHandle:
    """Identifies one manifest document, e.g. a unit's package.xml."""

    owner: str
    filename: str

    @property
    def relative_path(self) -> str:
        return f"{self.owner}/{self.filename}"


@dataclass(frozen=True, order=True)
class FragmentKey:
    category: str
    sub_order: str = ""


class ManifestAssembler:
    """In-memory fragment store for every manifest of a resolution pass."""

    def __init__(self) -> None:
        self._documents: dict[ManifestHandle, dict[FragmentKey, tuple[str, ...]]] = {}

    def open(
        self,
        handle: ManifestHandle,
        head: Sequence[str],
        tail: Sequence[str],
    ) -> ManifestHandle:
        """Create a document and write its header and footer.

        Raises:
            ManifestStateError: If the document is already open
        """
        if handle in self._documents:
            raise ManifestStateError(f"Manifest {handle.relative_path} is already open.")
        self._documents[handle] = {
            FragmentKey(HEAD): tuple(head),
            FragmentKey(TAIL): tuple(tail),
        }
        return handle

    def is_open(self, handle: ManifestHandle) -> bool:
        return handle in self._documents

    def handles(self) -> list[ManifestHandle]:
        """All open documents in the order they were opened."""
        return list(self._documents)

    def write_fragment(
        self,
        handle: ManifestHandle,
        category: str,
        sub_order: str,
        lines: Sequence[str],
    ) -> bool:
        """Store or overwrite the fragment at ``(category, sub_order)``.

        Envelope categories are written once; a second write is a no-op.

        Returns:
            True if the fragment was stored, False if it was ignored
        """
        fragments = self._fragments_of(handle)
        key = FragmentKey(category, sub_order)
        if category in ENVELOPE_CATEGORIES and key in fragments:
            return False
        fragments[key] = tuple(lines)
        return True

    def write_envelope(
        self,
        handle: ManifestHandle,
        begin: tuple[str, Sequence[str]],
        end: tuple[str, Sequence[str]],
    ) -> None:
        """Write an envelope's open and close fragments if not yet present."""
        self.write_fragment(handle, begin[0], "", begin[1])
        self.write_fragment(handle, end[0], "", end[1])

    def fragments(self, handle: ManifestHandle) -> dict[FragmentKey, tuple[str, ...]]:
        """Copy of a document's fragments in assembly order."""
        fragments = self._fragments_of(handle)
        return {key: fragments[key] for key in sorted(fragments)}

    def assemble(self, handle: ManifestHandle) -> str:
        """Concatenate a document's fragments in key order.

        Pure: repeated calls return the same text until another fragment is
        written.
        """
        fragments = self._fragments_of(handle)
        lines: list[str] = []
        for key in sorted(fragments):
            lines.extend(fragments[key])
        return "".join(f"{line}\n" for line in lines)

    def _fragments_of(self, handle: ManifestHandle) -> dict[FragmentKey, tuple[str, ...]]:
        if handle not in self._documents:
            raise ManifestStateError(f"Manifest {handle.relative_path} has not been opened.")
        return self._documents[handle]
