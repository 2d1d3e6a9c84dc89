from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from xml.etree import ElementTree as ET

from ..errors import MalformedDocument

"""ResourceDocument codec (.resx).

Document shape::

    <?xml version="1.0" encoding="UTF-8"?>
    <root>
        <resheader name="resmimetype">
            <value>text/microsoft-resx</value>
        </resheader>
        ... version / reader / writer ...
        <data name="Greeting" xml:space="preserve">
            <value>Hello</value>
            <comment>Salutation</comment>
        </data>
    </root>

The header block is fixed; it is not configurable.
"""

__all__ = [
    "ResxData",
    "RESX_HEADERS",
    "parse_resx",
    "read_resx",
    "serialize_resx",
]

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'
XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"
ROOT_TAG = "root"
INDENT = "    "

# XML 1.0 で使えない文字 (制御文字, サロゲート, U+FFFE/U+FFFF)
INVALID_XML_CHARS = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")
REPLACEMENT_CHAR = "\ufffd"

RESX_HEADERS: tuple[tuple[str, str], ...] = (
    ("resmimetype", "text/microsoft-resx"),
    ("version", "2.0"),
    (
        "reader",
        "System.Resources.ResXResourceReader, System.Windows.Forms, Version=4.0.0.0, "
        "Culture=neutral, PublicKeyToken=b77a5c561934e089",
    ),
    (
        "writer",
        "System.Resources.ResXResourceWriter, System.Windows.Forms, Version=4.0.0.0, "
        "Culture=neutral, PublicKeyToken=b77a5c561934e089",
    ),
)


@dataclass(frozen=True)
class ResxData:
    """One ``data`` element: key / value / comment triple."""
    name: str
    value: str
    comment: str = ""


def parse_resx(content: bytes | str, source: str = "<resx>") -> list[ResxData]:
    """Parse .resx markup into data triples, in document order.

    Raises:
        MalformedDocument: invalid markup or a root element other than ``root``
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise MalformedDocument(source, f"invalid XML: {e}") from e
    if root.tag != ROOT_TAG:
        raise MalformedDocument(source, f"expected <{ROOT_TAG}> element, got <{root.tag}>")

    items: list[ResxData] = []
    for elem in root.findall("data"):
        name = elem.get("name")
        if name is None:
            raise MalformedDocument(source, "data element without name attribute")
        items.append(
            ResxData(
                name=name,
                value=elem.findtext("value", default="") or "",
                comment=elem.findtext("comment", default="") or "",
            )
        )
    return items


def read_resx(path: Path) -> list[ResxData]:
    """Read and parse a .resx file; unreadable files count as malformed."""
    try:
        content = path.read_bytes()
    except OSError as e:
        raise MalformedDocument(path, e) from e
    return parse_resx(content, source=str(path))


def _xml_text(text: str) -> str:
    return INVALID_XML_CHARS.sub(REPLACEMENT_CHAR, text)


def serialize_resx(items: Iterable[ResxData]) -> bytes:
    """Serialize data triples to .resx bytes.

    Entries with an empty value are dropped; empty comments are omitted.
    Characters that XML cannot carry are replaced with U+FFFD.
    """
    root = ET.Element(ROOT_TAG)
    for key, value in RESX_HEADERS:
        header = ET.SubElement(root, "resheader", {"name": key})
        ET.SubElement(header, "value").text = value

    for item in items:
        if not item.value:
            continue
        data = ET.SubElement(root, "data", {"name": _xml_text(item.name), XML_SPACE: "preserve"})
        ET.SubElement(data, "value").text = _xml_text(item.value)
        if item.comment:
            ET.SubElement(data, "comment").text = _xml_text(item.comment)

    ET.indent(root, space=INDENT)
    body = ET.tostring(root, encoding="unicode")
    return (XML_DECLARATION + body + "\n").encode("utf-8")
