"""Read the application's AppStream metainfo document.

The descriptor is the single source of truth for the application id, the
one-line summary and the maintainer shown in native packages.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from appstage.errors import DescriptorError, MissingDescriptorError, MissingFieldError

logger = logging.getLogger(__name__)

DESCRIPTOR_PATTERN = "*.xml"

CORE_FIELDS = ("app_id", "summary", "developer_name", "contact_email")

_XML_LANG = "{http://www.w3.org/XML/1998/namespace}lang"


class PackageDescriptor(BaseModel):
    app_id: str = Field(
        default="",
        description="Reverse-DNS application id (<id>)",
    )

    summary: str = Field(
        default="",
        description="One-line human summary (<summary>)",
    )

    developer_name: str = Field(
        default="",
        description="Developer name (<developer><name>)",
    )

    contact_email: str = Field(
        default="",
        description="Maintainer contact address (<update_contact>)",
    )

    binary: str = Field(
        default="",
        description="Executable name advertised under <provides>",
    )

    source: Optional[Path] = Field(
        default=None,
        description="Descriptor file the fields were read from",
    )

    @property
    def maintainer(self) -> str:
        return f"{self.developer_name} <{self.contact_email}>"

    def require(self, *fields: str) -> "PackageDescriptor":
        for field_name in fields:
            if not getattr(self, field_name):
                raise MissingFieldError(field_name, self.source)
        return self

    class Config:
        frozen = True


def discover_descriptor(resource_dir: Path) -> Path:
    if not resource_dir.is_dir():
        raise MissingDescriptorError(
            f"Resource directory not found: {resource_dir}"
        )

    candidates = sorted(
        path for path in resource_dir.glob(DESCRIPTOR_PATTERN) if path.is_file()
    )
    if not candidates:
        raise MissingDescriptorError(
            f"No descriptor ({DESCRIPTOR_PATTERN}) found in {resource_dir}"
        )

    return candidates[0]


def read_descriptor(
    resource_dir: Path,
    *,
    required: Iterable[str] = CORE_FIELDS,
) -> PackageDescriptor:
    """Parse the first descriptor in ``resource_dir``.

    Elements that are absent are read as empty strings; only the names in
    ``required`` are enforced, so callers that can live without a contact
    address (flatpak, plain install) pass a shorter list.
    """

    path = discover_descriptor(resource_dir)
    logger.debug("Reading descriptor %s", path)

    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as exc:
        raise DescriptorError(
            f"Malformed descriptor {path}: {exc}"
        ) from exc
    except OSError as exc:
        raise DescriptorError(
            f"Failed to read descriptor: {path}"
        ) from exc

    descriptor = PackageDescriptor(
        app_id=_text(root.find("id")),
        summary=_untranslated_text(root.findall("summary")),
        developer_name=_developer_name(root),
        contact_email=_text(root.find("update_contact")),
        binary=_text(root.find("provides/binary")),
        source=path,
    )

    return descriptor.require(*required)


def _text(element: Optional[ET.Element]) -> str:
    if element is None or element.text is None:
        return ""
    return element.text.strip()


def _untranslated_text(elements: list[ET.Element]) -> str:
    for element in elements:
        if _XML_LANG not in element.attrib:
            return _text(element)
    return _text(elements[0]) if elements else ""


def _developer_name(root: ET.Element) -> str:
    developer = root.find("developer")
    if developer is not None:
        name = _untranslated_text(developer.findall("name"))
        if name:
            return name

    # Pre-1.0 AppStream spelling
    return _untranslated_text(root.findall("developer_name"))
