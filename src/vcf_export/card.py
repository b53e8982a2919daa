from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from .models import Address, Email, Link, Phone, entry_fields
from .renderer import Responder, VcfRenderer

logger = logging.getLogger(__name__)


@dataclass
class ContactCard:
    """
    Fluent builder collecting the fields of one contact card.

    Setters store values as given and return the card, so calls can be
    chained. Nothing is validated here; see ``normalization.is_valid_email``
    and ``normalization.is_valid_phone_number`` for opt-in checks.
    """

    full_name: Optional[str] = None
    title: str = ""
    company: str = ""
    description: str = ""
    address: str = ""
    profile_image: str = ""
    phones: List[Phone] = field(default_factory=list)
    emails: List[Email] = field(default_factory=list)
    addresses: List[Address] = field(default_factory=list)
    links: List[Link] = field(default_factory=list)
    social: Dict[str, str] = field(default_factory=dict)

    def set_full_name(self, full_name: str) -> "ContactCard":
        self.full_name = full_name
        return self

    def set_title(self, title: str) -> "ContactCard":
        self.title = title
        return self

    def set_company(self, company: str) -> "ContactCard":
        self.company = company
        return self

    def set_description(self, description: str) -> "ContactCard":
        self.description = description
        return self

    def set_profile_image(self, path: str) -> "ContactCard":
        self.profile_image = path
        return self

    def set_phone_number(self, phone: str, kind: str) -> "ContactCard":
        self.phones.append(Phone(value=phone, type=kind))
        return self

    def set_email(self, email: str, kind: str) -> "ContactCard":
        self.emails.append(Email(value=email, type=kind))
        return self

    def set_address(self, address: str) -> "ContactCard":
        self.address = address
        return self

    def add_address(self, address: str, kind: str) -> "ContactCard":
        self.addresses.append(Address(value=address, type=kind))
        return self

    def add_website(self, url: str, kind: str) -> "ContactCard":
        self.links.append(Link(value=url, type=kind))
        return self

    def set_facebook(self, url: str) -> "ContactCard":
        self.social["facebook"] = url
        return self

    def set_twitter(self, url: str) -> "ContactCard":
        self.social["twitter"] = url
        return self

    def set_linkedin(self, url: str) -> "ContactCard":
        self.social["linkedin"] = url
        return self

    def set_youtube(self, url: str) -> "ContactCard":
        self.social["youtube"] = url
        return self

    def set_instagram(self, url: str) -> "ContactCard":
        self.social["instagram"] = url
        return self

    def set_website(self, url: str) -> "ContactCard":
        self.social["website"] = url
        return self

    def set_skype(self, url: str) -> "ContactCard":
        self.social["skype"] = url
        return self

    def set_whatsapp(self, number: str) -> "ContactCard":
        self.social["whatsapp"] = number
        return self

    def clear(self) -> "ContactCard":
        self.full_name = None
        self.title = ""
        self.company = ""
        self.description = ""
        self.address = ""
        self.profile_image = ""
        self.phones = []
        self.emails = []
        self.addresses = []
        self.links = []
        self.social = {}
        return self

    def _forward_entries(self, key: str, values: Any, setter: Callable[[str, str], Any]) -> None:
        if not isinstance(values, (list, tuple)):
            logger.debug("Ignoring %s: expected a sequence, got %r", key, type(values))
            return
        for entry in values:
            try:
                entry_value, entry_type = entry_fields(entry)
            except (AttributeError, TypeError):
                logger.debug("Ignoring malformed %s entry: %r", key, entry)
                continue
            setter(entry_value, entry_type)

    def _apply_social(self, values: Any) -> None:
        if not isinstance(values, Mapping):
            logger.debug("Ignoring social: expected a mapping, got %r", type(values))
            return
        for platform, url in values.items():
            setter = SOCIAL_SETTERS.get(str(platform).lower())
            if setter is None:
                logger.debug("Ignoring unknown social platform: %s", platform)
                continue
            if url is None:
                logger.debug("Ignoring social platform %s with no URL", platform)
                continue
            setter(self, url)

    def apply_attributes(self, attributes: Mapping[str, Any]) -> "ContactCard":
        """
        Set several fields at once from a mapping of field name to value.

        Plural fields (``email``, ``phone``, ``website`` and a list-valued
        ``address``) take sequences of ``{"value", "type"}`` records; ``social``
        takes a platform -> URL mapping. Unknown keys, unknown platforms and
        malformed values are skipped.
        """
        for key, value in attributes.items():
            if key in SCALAR_SETTERS:
                SCALAR_SETTERS[key](self, value)
            elif key == "email":
                self._forward_entries(key, value, self.set_email)
            elif key == "phone":
                self._forward_entries(key, value, self.set_phone_number)
            elif key == "address":
                if isinstance(value, str):
                    self.set_address(value)
                else:
                    self._forward_entries(key, value, self.add_address)
            elif key == "website":
                self._forward_entries(key, value, self.add_website)
            elif key == "social":
                self._apply_social(value)
            else:
                logger.debug("Ignoring unknown attribute: %s", key)
        return self

    def render_text(self, renderer: Optional[VcfRenderer] = None) -> str:
        return (renderer or VcfRenderer()).render_text(self)

    def to_base64(self, renderer: Optional[VcfRenderer] = None) -> str:
        return (renderer or VcfRenderer()).to_base64(self)

    def to_data_uri(self, renderer: Optional[VcfRenderer] = None) -> str:
        return (renderer or VcfRenderer()).to_data_uri(self)

    def to_download_response(
        self, responder: Optional[Responder] = None, renderer: Optional[VcfRenderer] = None
    ) -> Any:
        return (renderer or VcfRenderer()).to_download_response(self, responder=responder)


SCALAR_SETTERS: Dict[str, Callable[[ContactCard, Any], ContactCard]] = {
    "full_name": ContactCard.set_full_name,
    "title": ContactCard.set_title,
    "company": ContactCard.set_company,
    "description": ContactCard.set_description,
    "profile_image": ContactCard.set_profile_image,
}

SOCIAL_SETTERS: Dict[str, Callable[[ContactCard, str], ContactCard]] = {
    "facebook": ContactCard.set_facebook,
    "twitter": ContactCard.set_twitter,
    "linkedin": ContactCard.set_linkedin,
    "youtube": ContactCard.set_youtube,
    "instagram": ContactCard.set_instagram,
    "website": ContactCard.set_website,
    "skype": ContactCard.set_skype,
    "whatsapp": ContactCard.set_whatsapp,
}
