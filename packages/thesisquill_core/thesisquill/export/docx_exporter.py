"""
DOCX exporter - packages a structured thesis into a DOCX file.

Uses WordMLWriter to generate the WordprocessingML parts and packages
everything into an OPC package (ZIP) with relationships and
[Content_Types].xml. Output is deterministic: ZIP entries carry a fixed
timestamp and a fixed order, and the core properties take their dates
from the snapshot, never from the clock.
"""

from __future__ import annotations

import hashlib
import io
import logging
import threading
import xml.etree.ElementTree as ET
import zipfile
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from ..assembly.builder import StructuredDocument
from ..config import ExportOptions
from ..exceptions import ExportError
from ..models.blocks import ImageBlock
from ..version import __version__
from .wordml import WordMLWriter

logger = logging.getLogger(__name__)

# OPC namespaces
OPC_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
CONTENT_TYPES_NS = "http://schemas.openxmlformats.org/package/2006/content-types"
EXTENDED_PROPERTIES_NS = "http://schemas.openxmlformats.org/officeDocument/2006/extended-properties"
CORE_NAMESPACES = {
    "cp": "http://schemas.openxmlformats.org/package/2006/metadata/core-properties",
    "dc": "http://purl.org/dc/elements/1.1/",
    "dcterms": "http://purl.org/dc/terms/",
    "dcmitype": "http://purl.org/dc/dcmitype/",
    "xsi": "http://www.w3.org/2001/XMLSchema-instance",
}

REL_TYPE_BASE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
REL_OFFICE_DOCUMENT = f"{REL_TYPE_BASE}/officeDocument"
REL_EXTENDED_PROPERTIES = f"{REL_TYPE_BASE}/extended-properties"
REL_CORE_PROPERTIES = "http://schemas.openxmlformats.org/package/2006/relationships/metadata/core-properties"
REL_STYLES = f"{REL_TYPE_BASE}/styles"
REL_SETTINGS = f"{REL_TYPE_BASE}/settings"
REL_NUMBERING = f"{REL_TYPE_BASE}/numbering"
REL_HEADER = f"{REL_TYPE_BASE}/header"
REL_FOOTER = f"{REL_TYPE_BASE}/footer"
REL_IMAGE = f"{REL_TYPE_BASE}/image"

WORDML_CT = "application/vnd.openxmlformats-officedocument.wordprocessingml"
PART_CONTENT_TYPES = {
    "word/document.xml": f"{WORDML_CT}.document.main+xml",
    "word/styles.xml": f"{WORDML_CT}.styles+xml",
    "word/settings.xml": f"{WORDML_CT}.settings+xml",
    "word/numbering.xml": f"{WORDML_CT}.numbering+xml",
    "word/header1.xml": f"{WORDML_CT}.header+xml",
    "word/footer1.xml": f"{WORDML_CT}.footer+xml",
    "docProps/core.xml": "application/vnd.openxmlformats-package.core-properties+xml",
    "docProps/app.xml": "application/vnd.openxmlformats-officedocument.extended-properties+xml",
}

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# Earliest timestamp a ZIP entry can carry
ZIP_TIMESTAMP = (1980, 1, 1, 0, 0, 0)

_DEFAULT_NAMESPACE_LOCK = threading.Lock()

for _prefix, _uri in CORE_NAMESPACES.items():
    ET.register_namespace(_prefix, _uri)


def _serialize(root: ET.Element, default_namespace: Optional[str] = None) -> bytes:
    ET.indent(root, space="  ")
    if default_namespace is None:
        return ET.tostring(root, encoding="utf-8", xml_declaration=True)
    # The empty prefix is global ElementTree state; hold it while serializing
    with _DEFAULT_NAMESPACE_LOCK:
        ET.register_namespace("", default_namespace)
        return ET.tostring(root, encoding="utf-8", xml_declaration=True)


class DOCXExporter:
    """
    DOCX Exporter - creates DOCX packages from a StructuredDocument.

    Parts, relationships, content types and media are collected in
    dictionaries first and written to the ZIP in one pass.
    """

    def __init__(self, document: StructuredDocument, options: Optional[ExportOptions] = None):
        """
        Initializes DOCX exporter.

        Args:
            document: Built document (blocks plus page layout)
            options: Export options; defaults apply when omitted
        """
        if document is None:
            raise ValueError("Document cannot be None")
        self.document = document
        self.options = options or ExportOptions()
        self._reset()
        logger.debug("DOCXExporter initialized")

    def _reset(self) -> None:
        self.writer = WordMLWriter(self.options)
        # Package parts (part_name -> content)
        self._parts: Dict[str, bytes] = {}
        # Relationships (rels path -> [(rel_id, rel_type, target)])
        self._relationships: Dict[str, List[Tuple[str, str, str]]] = {}
        # Override content types (part_name -> content_type)
        self._content_types: Dict[str, str] = {}
        # Default content types (extension -> content_type)
        self._default_content_types: Dict[str, str] = {}
        # Media files (part_name -> content)
        self._media: Dict[str, bytes] = {}
        self._rel_id_counters: Dict[str, int] = {}

    def export(self, output_path: Union[str, Path]) -> Path:
        """
        Exports the document to a DOCX file.

        Args:
            output_path: Path to output DOCX file

        Returns:
            The written path

        Raises:
            ExportError: If the package cannot be generated or written
        """
        output_path = Path(output_path)
        content = self.export_to_bytes()
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(content)
        except OSError as e:
            raise ExportError(f"Failed to write DOCX file {output_path}", str(e)) from e
        logger.info(f"Document exported to DOCX: {output_path}")
        return output_path

    def export_to_bytes(self) -> bytes:
        """
        Exports the document to DOCX bytes.

        Raises:
            ExportError: If the package cannot be generated
        """
        self._reset()
        try:
            # 1. Media and relationship ids (document.xml references both)
            media_rel_ids = self._prepare_media()
            header_rel_id, footer_rel_id = self._prepare_relationships()

            # 2. Parts
            self._prepare_parts(media_rel_ids, header_rel_id, footer_rel_id)

            # 3. [Content_Types].xml
            self._prepare_content_types()

            # 4. ZIP
            buffer = io.BytesIO()
            self._write_package(buffer)
        except (KeyError, TypeError, ValueError) as e:
            raise ExportError("Failed to build DOCX package", str(e)) from e

        logger.debug(
            f"DOCX package built: {len(self._parts)} parts, {len(self._media)} media files, "
            f"{self.writer.ordered_list_runs} ordered list runs"
        )
        return buffer.getvalue()

    def _prepare_media(self) -> Dict[int, str]:
        """Registers image payloads as media parts; identical payloads share a part."""
        document_rels = self._get_relationship_path("word/document.xml")
        by_digest: Dict[str, str] = {}
        media_rel_ids: Dict[int, str] = {}

        for index, block in enumerate(self.document.blocks):
            if not isinstance(block, ImageBlock):
                continue
            digest = hashlib.sha1(block.data).hexdigest()
            if digest not in by_digest:
                media_name = f"word/media/image{len(by_digest) + 1}.{block.extension}"
                self._media[media_name] = block.data
                self._default_content_types[block.extension] = block.content_type
                rel_id = self._add_relationship(document_rels, REL_IMAGE, media_name[len("word/"):])
                by_digest[digest] = rel_id
            media_rel_ids[index] = by_digest[digest]
        return media_rel_ids

    def _prepare_relationships(self) -> Tuple[Optional[str], Optional[str]]:
        """Package and document relationships; returns header/footer ids."""
        package_rels = "_rels/.rels"
        self._add_relationship(package_rels, REL_OFFICE_DOCUMENT, "word/document.xml")
        self._add_relationship(package_rels, REL_CORE_PROPERTIES, "docProps/core.xml")
        self._add_relationship(package_rels, REL_EXTENDED_PROPERTIES, "docProps/app.xml")

        document_rels = self._get_relationship_path("word/document.xml")
        self._add_relationship(document_rels, REL_STYLES, "styles.xml")
        self._add_relationship(document_rels, REL_SETTINGS, "settings.xml")
        self._add_relationship(document_rels, REL_NUMBERING, "numbering.xml")

        layout = self.document.layout
        header_rel_id = self._add_relationship(document_rels, REL_HEADER, "header1.xml") if layout.has_header else None
        footer_rel_id = self._add_relationship(document_rels, REL_FOOTER, "footer1.xml") if layout.has_footer else None
        return header_rel_id, footer_rel_id

    def _prepare_parts(self, media_rel_ids: Dict[int, str], header_rel_id: Optional[str],
                       footer_rel_id: Optional[str]) -> None:
        layout = self.document.layout
        self._parts["word/document.xml"] = self.writer.document_xml(
            self.document.blocks, layout, media_rel_ids, header_rel_id, footer_rel_id
        )
        self._parts["word/styles.xml"] = self.writer.styles_xml()
        self._parts["word/settings.xml"] = self.writer.settings_xml()
        # After document.xml: ordered list runs are allocated while writing it
        self._parts["word/numbering.xml"] = self.writer.numbering_xml()
        if header_rel_id:
            self._parts["word/header1.xml"] = self.writer.header_xml(layout)
        if footer_rel_id:
            self._parts["word/footer1.xml"] = self.writer.footer_xml(layout)
        self._parts["docProps/core.xml"] = self._generate_core_properties_xml()
        self._parts["docProps/app.xml"] = self._generate_app_properties_xml()

    def _prepare_content_types(self) -> None:
        """Prepares [Content_Types].xml entries."""
        self._default_content_types.setdefault("rels", "application/vnd.openxmlformats-package.relationships+xml")
        self._default_content_types.setdefault("xml", "application/xml")
        for part_name in self._parts:
            self._content_types[part_name] = PART_CONTENT_TYPES[part_name]

    def _write_package(self, stream) -> None:
        """Writes the DOCX package to a ZIP stream."""
        files_to_write: Dict[str, bytes] = {}

        # 1. [Content_Types].xml
        files_to_write["[Content_Types].xml"] = self._generate_content_types_xml()

        # 2. Main relationships
        files_to_write["_rels/.rels"] = self._generate_relationships_xml(self._relationships["_rels/.rels"])

        # 3. Parts
        for part_name in sorted(self._parts):
            files_to_write[part_name] = self._parts[part_name]

        # 4. Part relationships
        for rels_path in sorted(self._relationships):
            if rels_path != "_rels/.rels":
                files_to_write[rels_path] = self._generate_relationships_xml(self._relationships[rels_path])

        # 5. Media
        for media_name in sorted(self._media):
            files_to_write[media_name] = self._media[media_name]

        with zipfile.ZipFile(stream, "w", zipfile.ZIP_DEFLATED) as zip_file:
            for file_name, content in files_to_write.items():
                info = zipfile.ZipInfo(file_name, date_time=ZIP_TIMESTAMP)
                info.compress_type = zipfile.ZIP_DEFLATED
                info.external_attr = 0o644 << 16
                zip_file.writestr(info, content)

    def _generate_content_types_xml(self) -> bytes:
        """Generates [Content_Types].xml."""
        root = ET.Element(f"{{{CONTENT_TYPES_NS}}}Types")
        for ext in sorted(self._default_content_types):
            ET.SubElement(root, f"{{{CONTENT_TYPES_NS}}}Default", {
                "Extension": ext, "ContentType": self._default_content_types[ext],
            })
        for part_name in sorted(self._content_types):
            ET.SubElement(root, f"{{{CONTENT_TYPES_NS}}}Override", {
                "PartName": f"/{part_name}", "ContentType": self._content_types[part_name],
            })
        return _serialize(root, default_namespace=CONTENT_TYPES_NS)

    def _generate_relationships_xml(self, relationships: List[Tuple[str, str, str]]) -> bytes:
        """Generates relationships XML."""
        root = ET.Element(f"{{{OPC_NS}}}Relationships")
        for rel_id, rel_type, target in relationships:
            ET.SubElement(root, f"{{{OPC_NS}}}Relationship", {"Id": rel_id, "Type": rel_type, "Target": target})
        return _serialize(root, default_namespace=OPC_NS)

    def _generate_core_properties_xml(self) -> bytes:
        cp = f"{{{CORE_NAMESPACES['cp']}}}"
        dc = f"{{{CORE_NAMESPACES['dc']}}}"
        dcterms = f"{{{CORE_NAMESPACES['dcterms']}}}"
        xsi = f"{{{CORE_NAMESPACES['xsi']}}}"
        metadata = self.document.metadata

        root = ET.Element(f"{cp}coreProperties")
        fields = [
            (f"{dc}title", self.document.title),
            (f"{dc}creator", metadata.author_name),
            (f"{dc}description", metadata.description),
            (f"{cp}keywords", ", ".join(metadata.keywords)),
            (f"{dc}language", metadata.language),
        ]
        for tag, value in fields:
            if value:
                ET.SubElement(root, tag).text = value
        if metadata.created_at:
            for tag in ("created", "modified"):
                element = ET.SubElement(root, f"{dcterms}{tag}", {f"{xsi}type": "dcterms:W3CDTF"})
                element.text = metadata.created_at
        return _serialize(root)

    def _generate_app_properties_xml(self) -> bytes:
        ns = f"{{{EXTENDED_PROPERTIES_NS}}}"
        root = ET.Element(f"{ns}Properties")
        ET.SubElement(root, f"{ns}Application").text = f"ThesisQuill {__version__}"
        ET.SubElement(root, f"{ns}DocSecurity").text = "0"
        if self.document.metadata.university_name:
            ET.SubElement(root, f"{ns}Company").text = self.document.metadata.university_name
        return _serialize(root, default_namespace=EXTENDED_PROPERTIES_NS)

    def _add_relationship(self, rels_path: str, rel_type: str, target: str) -> str:
        rel_id = self._get_next_rel_id(rels_path)
        self._relationships.setdefault(rels_path, []).append((rel_id, rel_type, target))
        return rel_id

    def _get_next_rel_id(self, source: str) -> str:
        """Generates next relationship ID for source."""
        self._rel_id_counters[source] = self._rel_id_counters.get(source, 0) + 1
        return f"rId{self._rel_id_counters[source]}"

    @staticmethod
    def _get_relationship_path(part_name: str) -> str:
        """Determines relationship file path for part."""
        # word/document.xml -> word/_rels/document.xml.rels
        if "/" in part_name:
            dir_part, file_part = part_name.rsplit("/", 1)
            return f"{dir_part}/_rels/{file_part}.rels"
        return f"_rels/{part_name}.rels"
