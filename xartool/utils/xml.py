"""
xartool XML helpers
Thin navigation layer over defusedxml's ElementTree: lookup by local
name, first-text reads and parse-or-zero integers.
"""
import re
from typing import Iterator, Optional
from xml.etree.ElementTree import Element

import defusedxml
import defusedxml.ElementTree as et

from ..diagnostics import DiagnosticLog, INVALID_NUMBER

ParseError = et.ParseError
# defusedxml refuses entity and DTD tricks with its own exception family
PARSE_ERRORS = (et.ParseError, defusedxml.DefusedXmlException)

UINT64_MAX = (1 << 64) - 1
_UNSIGNED = re.compile(r'\+?[0-9]+')


def parse_document(text: str) -> Element:
    """Parse manifest text, raising ParseError on malformed input"""
    return et.fromstring(text, forbid_dtd=False)


def local_name(elt: Element) -> str:
    """Tag without any {namespace} prefix"""
    tag = elt.tag
    if not isinstance(tag, str):
        return ''
    if tag.startswith('{'):
        return tag.rsplit('}', 1)[1]
    return tag


def child_elements(elt: Element) -> Iterator[Element]:
    # comments and processing instructions have non-string tags
    for child in elt:
        if isinstance(child.tag, str):
            yield child


def find_child(elt: Optional[Element], name: str) -> Optional[Element]:
    if elt is None:
        return None
    for child in child_elements(elt):
        if local_name(child) == name:
            return child
    return None


def element_text(elt: Optional[Element]) -> str:
    """Content of the first text node directly under elt, or an empty string"""
    if elt is None:
        return ''
    if elt.text is not None:
        return elt.text
    for child in elt:
        if child.tail is not None:
            return child.tail
    return ''


def child_text(elt: Optional[Element], name: str) -> str:
    return element_text(find_child(elt, name))


def child_int(elt: Optional[Element], name: str, diagnostics: DiagnosticLog = None) -> int:
    """
    Parse a child element's text as an unsigned 64-bit integer.

    A missing child or empty text quietly yields 0. Text that is present
    but not a valid unsigned integer also yields 0, and is reported as a
    diagnostic since it usually means a truncated or damaged manifest.
    """
    child = find_child(elt, name)
    if child is None:
        return 0
    text = element_text(child)
    if not text:
        return 0
    if _UNSIGNED.fullmatch(text):
        value = int(text)
        if value <= UINT64_MAX:
            return value
    if diagnostics is not None:
        parent = local_name(elt) if elt is not None else '?'
        diagnostics.warn(INVALID_NUMBER, f"invalid number {text!r} in <{parent}>/<{name}>, using 0")
    return 0


def attribute(elt: Optional[Element], name: str) -> str:
    if elt is None:
        return ''
    return elt.get(name, '')


__all__ = [
    "ParseError",
    "PARSE_ERRORS",
    "parse_document",
    "local_name",
    "child_elements",
    "find_child",
    "element_text",
    "child_text",
    "child_int",
    "attribute",
]
