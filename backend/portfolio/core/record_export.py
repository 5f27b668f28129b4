"""Record Export — JSON / CSV / XML serialization of a record collection.

Invariants:
    - json: pretty-printed list of record.to_dict(); json.loads gives it back
    - csv: header row + exactly one physical line per record; every cell quoted;
      list cells joined with "; "; line breaks inside a cell become spaces
    - xml: one root element, exactly one child element per record, fixed
      element order; text and attributes escape all five predefined entities
    - Unknown format raises UnsupportedFormatError (the only raising path)

Design Decisions:
    - Column and element order come from an ExportLayout supplied per record kind
    - XML is written as text (like the CSV), not through ElementTree, so the
      apostrophe and quote entities are emitted in text content too
"""

import csv
import io
import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Union
from xml.sax.saxutils import escape

from portfolio.core.domain_types import ExportFormat
from portfolio.core.errors import UnsupportedFormatError

LIST_SEPARATOR = "; "
_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}

# (tag, text) or (tag, children)
XmlNode = tuple[str, Union[str, list["XmlNode"]]]


@dataclass(frozen=True)
class ExportLayout:
    root_tag: str
    item_tag: str
    csv_columns: tuple[tuple[str, Callable[[object], object]], ...]
    xml_children: Callable[[object], list[XmlNode]]


def xml_escape(text: str) -> str:
    return escape(text, _XML_ENTITIES)


def csv_cell(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        value = LIST_SEPARATOR.join(str(v) for v in value)
    return str(value).replace("\r\n", " ").replace("\n", " ").replace("\r", " ")


def export_json(records: list) -> str:
    return json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False)


def export_csv(records: list, layout: ExportLayout) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([header for header, _ in layout.csv_columns])
    for record in records:
        writer.writerow([csv_cell(extract(record)) for _, extract in layout.csv_columns])
    return buffer.getvalue().rstrip("\n")


def _render_xml_node(node: XmlNode, depth: int) -> str:
    tag, value = node
    pad = "  " * depth
    if isinstance(value, list):
        inner = "".join(_render_xml_node(child, depth + 1) for child in value)
        return f"{pad}<{tag}>\n{inner}{pad}</{tag}>\n"
    return f"{pad}<{tag}>{xml_escape(value)}</{tag}>\n"


def export_xml(records: list, layout: ExportLayout) -> str:
    parts = ['<?xml version="1.0" encoding="UTF-8"?>\n', f"<{layout.root_tag}>\n"]
    for record in records:
        record_id = xml_escape(str(getattr(record, "id", "")))
        parts.append(f'  <{layout.item_tag} id="{record_id}">\n')
        for child in layout.xml_children(record):
            parts.append(_render_xml_node(child, 2))
        parts.append(f"  </{layout.item_tag}>\n")
    parts.append(f"</{layout.root_tag}>")
    return "".join(parts)


def export_records(records: list, fmt: ExportFormat | str, layout: ExportLayout) -> str:
    try:
        fmt = ExportFormat(fmt)
    except ValueError:
        raise UnsupportedFormatError(str(fmt)) from None
    if fmt == ExportFormat.JSON:
        return export_json(records)
    if fmt == ExportFormat.CSV:
        return export_csv(records, layout)
    return export_xml(records, layout)
