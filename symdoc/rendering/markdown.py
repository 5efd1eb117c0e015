"""Turns raw doc comments into HTML summaries and bodies."""

from __future__ import annotations

import re
import xml.etree.ElementTree as etree
from typing import List, Optional, Sequence, Union

import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from ..nodes import ConstantNode, MacroNode, MethodNode, TypeNode

Documented = Union[TypeNode, ConstantNode, MethodNode, MacroNode]

DEFAULT_EXTENSIONS: Sequence[str] = ("fenced_code", "tables")

_SENTENCE_END = re.compile(r"\.($|\s)")
_FENCE = re.compile(r"^\s*(```|~~~)")
# Lines that start their own markdown block and never absorb a soft wrap.
_BLOCK_START = re.compile(r"^(?: {4}|\t|\s*(?:[-*+]|\d+[.)])\s|\s*#|\s*>|\s*\|)")
_NO_CONTINUATION = re.compile(r"^(?: {4}|\t|\s*#|\s*\|)")

_TYPE_PATH = r"(?:::)?[A-Z]\w*(?:::[A-Z]\w*)*"
_TYPE_REF = re.compile(rf"^(?P<type>{_TYPE_PATH})(?:\(.*\))?$")
_MEMBER_REF = re.compile(
    rf"^(?P<type>{_TYPE_PATH})?(?P<sep>[#.])(?P<name>[A-Za-z_]\w*[?!=]?)(?:\(.*\))?$"
)


def fetch_doc_lines(doc: str) -> str:
    """Rebuild paragraphs from comment lines.

    A single line break inside prose is a soft wrap and becomes a space; any
    run of blank lines becomes one paragraph break. Fenced code, indented
    code, headings, list items, quotes and tables keep their lines.
    """
    output: List[str] = []
    in_fence = False
    joinable = False
    pending_break = False
    for line in doc.splitlines():
        if in_fence or _FENCE.match(line):
            if _FENCE.match(line):
                if not in_fence and pending_break and output:
                    output.append("")
                pending_break = False
                in_fence = not in_fence
            output.append(line)
            joinable = False
            continue
        if not line.strip():
            pending_break = True
            joinable = False
            continue
        if pending_break and output:
            output.append("")
        pending_break = False
        if joinable and not _BLOCK_START.match(line):
            output[-1] = f"{output[-1]} {line.strip()}"
            continue
        output.append(line.rstrip())
        joinable = not _NO_CONTINUATION.match(line)
    return "\n".join(output)


def context_of(obj: Documented) -> TypeNode:
    """The type whose scope resolves cross-references for ``obj``."""
    if isinstance(obj, TypeNode):
        return obj
    return obj.context


class CrossReferenceProcessor(Treeprocessor):
    """Wraps inline code spans naming documented symbols in links."""

    def __init__(self, md: markdown.Markdown | None = None) -> None:
        super().__init__(md)
        self.context: Optional[TypeNode] = None

    def run(self, root: etree.Element) -> None:
        if self.context is None:
            return None
        for parent in list(root.iter()):
            if parent.tag in {"pre", "a"}:
                continue
            for index, child in enumerate(list(parent)):
                if child.tag != "code" or not child.text:
                    continue
                href = self.resolve(child.text.strip())
                if href is None:
                    continue
                link = etree.Element("a", {"href": href})
                link.tail = child.tail
                child.tail = None
                parent.remove(child)
                link.append(child)
                parent.insert(index, link)
        return None

    def resolve(self, text: str) -> Optional[str]:
        context = self.context
        if context is None:
            return None

        match = _MEMBER_REF.match(text)
        if match:
            owner = context
            if match.group("type"):
                owner = context.lookup_type(_split_path(match.group("type")))
                if owner is None:
                    return None
            name = match.group("name")
            class_method = match.group("sep") == "."
            member = owner.lookup_method(name, class_method=class_method) or owner.lookup_macro(name)
            if member is None:
                return None
            return context.href_to(owner, member.anchor)

        match = _TYPE_REF.match(text)
        if match:
            target = context.lookup_type(_split_path(match.group("type")))
            if target is None:
                return None
            return context.href_to(target)
        return None


def _split_path(path: str) -> List[str]:
    return [part for part in path.split("::") if part]


class CrossReferenceExtension(Extension):
    """Registers :class:`CrossReferenceProcessor` after inline parsing."""

    def __init__(self, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self.processor = CrossReferenceProcessor()

    def extendMarkdown(self, md: markdown.Markdown) -> None:  # noqa: N802 - markdown API
        self.processor.md = md
        md.treeprocessors.register(self.processor, "symdoc_xref", 15)


class DocRenderer:
    """Renders doc comments to HTML fragments with cross-reference links."""

    def __init__(self, extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> None:
        self._xref = CrossReferenceExtension()
        self._md = markdown.Markdown(extensions=[*extensions, self._xref])

    def summary(self, obj: Documented, context: Optional[TypeNode] = None) -> Optional[str]:
        """First sentence of ``obj``'s doc.

        Links are relative to ``context`` when given, which must be the page
        the summary is shown on; otherwise to ``obj``'s own scope.
        """
        doc = obj.doc
        if not doc:
            return None
        return self.summary_text(context if context is not None else context_of(obj), doc)

    def doc(self, obj: Documented) -> Optional[str]:
        doc = obj.doc
        if not doc:
            return None
        return self.doc_text(context_of(obj), doc)

    def summary_text(self, context: TypeNode, string: str) -> Optional[str]:
        lines = fetch_doc_lines(string).strip().splitlines()
        if not lines:
            return None
        line = lines[0]
        match = _SENTENCE_END.search(line)
        if match:
            line = line[: match.start() + 1]
        return self.render(context, line)

    def doc_text(self, context: TypeNode, string: str) -> str:
        return self.render(context, fetch_doc_lines(string))

    def render(self, context: TypeNode, text: str) -> str:
        processor = self._xref.processor
        processor.context = context
        try:
            return self._md.reset().convert(text)
        finally:
            processor.context = None


__all__ = [
    "CrossReferenceExtension",
    "CrossReferenceProcessor",
    "DocRenderer",
    "context_of",
    "fetch_doc_lines",
]
