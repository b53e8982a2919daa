from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Protocol
from urllib.parse import quote

from .normalization import strip_spaces, strip_whitespace

if TYPE_CHECKING:
    from .card import ContactCard

logger = logging.getLogger(__name__)

DATA_URI_PREFIX = "data:text/x-vcard;charset=utf-8,"
VCARD_CONTENT_TYPE = "text/x-vcard"
WHATSAPP_URL_PREFIX = "https://wa.me/"

Responder = Callable[[str, int, Dict[str, str]], Any]


class FileReader(Protocol):
    def exists(self, path: str) -> bool:
        ...

    def read_bytes(self, path: str) -> bytes:
        ...


class LocalFileReader:
    def exists(self, path: str) -> bool:
        return bool(path) and Path(path).is_file()

    def read_bytes(self, path: str) -> bytes:
        return Path(path).read_bytes()


@dataclass
class RenderSettings:
    version: str = "4.0"
    uppercase_type: bool = True
    emit_role: bool = True
    emit_empty_fields: bool = False


@dataclass
class DownloadResponse:
    body: str
    status: int = 200
    headers: Dict[str, str] = field(default_factory=dict)


class VcfRenderer:
    """
    Render a ContactCard into vCard text.

    Lines are emitted in a fixed order and joined with ``\\n``. Values are
    written as given: no folding and no escaping of ``;``, ``,`` or newlines.
    """

    def __init__(
        self,
        settings: Optional[RenderSettings] = None,
        file_reader: Optional[FileReader] = None,
    ):
        self.settings = settings or RenderSettings()
        self.file_reader = file_reader or LocalFileReader()

    def _type_label(self, label: str) -> str:
        return label.upper() if self.settings.uppercase_type else label

    def _wants(self, value: Optional[str]) -> bool:
        if value is None:
            return False
        return bool(value) or self.settings.emit_empty_fields

    def _photo_line(self, path: str) -> Optional[str]:
        if not path:
            return None
        try:
            if not self.file_reader.exists(path):
                logger.debug("Profile image not found: %s", path)
                return None
            payload = self.file_reader.read_bytes(path)
        except OSError as exc:
            logger.warning("Unable to read profile image %s: %s", path, exc)
            return None
        return "PHOTO;TYPE=PNG;ENCODING=b:" + base64.b64encode(payload).decode("ascii")

    def render_lines(self, card: "ContactCard") -> List[str]:
        lines = ["BEGIN:VCARD", f"VERSION:{self.settings.version}"]

        if self._wants(card.full_name):
            lines.append(f"FN:{card.full_name}")
            lines.append(f"N:{card.full_name}")
        if self._wants(card.title):
            lines.append(f"TITLE:{card.title}")
            if self.settings.emit_role:
                lines.append(f"ROLE:{card.title}")
        if self._wants(card.company):
            lines.append(f"ORG:{card.company}")
        if self._wants(card.description):
            lines.append(f"NOTE:{card.description}")

        for phone in card.phones:
            lines.append(f"TEL;TYPE={self._type_label(phone.type)}:{strip_whitespace(phone.value)}")
        for email in card.emails:
            lines.append(f"EMAIL;TYPE={self._type_label(email.type)}:{email.value}")

        if self._wants(card.address):
            lines.append(f"ADR:;;{card.address};;;")
        for address in card.addresses:
            lines.append(f"ADR;TYPE={self._type_label(address.type)}:{address.value}")

        for platform, url in card.social.items():
            if platform == "whatsapp":
                lines.append(f"URL;TYPE=WHATSAPP:{WHATSAPP_URL_PREFIX}{strip_spaces(url)}")
            else:
                lines.append(f"URL;TYPE={self._type_label(platform)}:{url}")
        for link in card.links:
            lines.append(f"URL;TYPE={self._type_label(link.type)}:{link.value}")

        photo = self._photo_line(card.profile_image)
        if photo:
            lines.append(photo)

        lines.append("END:VCARD")
        return lines

    def render_text(self, card: "ContactCard") -> str:
        return "\n".join(self.render_lines(card))

    def to_base64(self, card: "ContactCard") -> str:
        return base64.b64encode(self.render_text(card).encode("utf-8")).decode("ascii")

    def to_data_uri(self, card: "ContactCard") -> str:
        # RFC 3986 unreserved characters only; "+" and space are percent-encoded.
        return DATA_URI_PREFIX + quote(self.render_text(card), safe="")

    def download_headers(self, card: "ContactCard") -> Dict[str, str]:
        return {
            "Content-Type": VCARD_CONTENT_TYPE,
            "Content-Disposition": f'attachment; filename="{card.full_name or ""}.vcf"',
        }

    def to_download_response(
        self, card: "ContactCard", responder: Optional[Responder] = None
    ) -> Any:
        body = self.render_text(card)
        headers = self.download_headers(card)
        if responder is not None:
            return responder(body, 200, headers)
        return DownloadResponse(body=body, status=200, headers=headers)
