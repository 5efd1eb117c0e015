"""Doc-comment rendering."""

from .markdown import DocRenderer, fetch_doc_lines

__all__ = ["DocRenderer", "fetch_doc_lines"]
