"""Login identifier types."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class UserIdentifier:
    """Identifies a user by Matrix user ID or localpart."""

    user: str
    id_type: str = "m.id.user"

    def type(self) -> str:
        return "m.id.user"

    def to_dict(self) -> dict:
        return {"type": self.id_type, "user": self.user}


@dataclass
class ThirdpartyIdentifier:
    """Identifies a user by a third-party identifier such as an e-mail address."""

    medium: str
    address: str
    id_type: str = "m.id.thirdparty"

    def type(self) -> str:
        return "m.id.thirdparty"

    def to_dict(self) -> dict:
        return {"type": self.id_type, "medium": self.medium, "address": self.address}


@dataclass
class PhoneIdentifier:
    """Identifies a user by a phone number and country code."""

    country: str
    phone: str
    id_type: str = "m.id.phone"

    def type(self) -> str:
        return "m.id.phone"

    def to_dict(self) -> dict:
        return {"type": self.id_type, "country": self.country, "phone": self.phone}


def new_user_identifier(user: str) -> UserIdentifier:
    return UserIdentifier(user=user)


def new_thirdparty_identifier(medium: str, address: str) -> ThirdpartyIdentifier:
    return ThirdpartyIdentifier(medium=medium, address=address)


def new_phone_identifier(country: str, phone: str) -> PhoneIdentifier:
    return PhoneIdentifier(country=country, phone=phone)