from mxclient.identifiers import (
    PhoneIdentifier,
    ThirdpartyIdentifier,
    UserIdentifier,
    new_phone_identifier,
    new_thirdparty_identifier,
    new_user_identifier,
)


def test_user_identifier():
    ident = new_user_identifier("alice")
    assert ident.type() == "m.id.user"
    assert ident.id_type == ident.type()
    assert ident.to_dict() == {"type": "m.id.user", "user": "alice"}


def test_thirdparty_identifier():
    ident = new_thirdparty_identifier("email", "alice@example.com")
    assert ident.type() == "m.id.thirdparty"
    assert ident.to_dict() == {
        "type": "m.id.thirdparty",
        "medium": "email",
        "address": "alice@example.com",
    }


def test_phone_identifier():
    ident = new_phone_identifier("GB", "0000")
    assert ident.type() == "m.id.phone"
    assert ident.to_dict() == {"type": "m.id.phone", "country": "GB", "phone": "0000"}


def test_constructors_match_direct_instantiation():
    assert new_user_identifier("bob") == UserIdentifier(user="bob")
    assert new_thirdparty_identifier("msisdn", "x") == ThirdpartyIdentifier("msisdn", "x")
    assert new_phone_identifier("DE", "1") == PhoneIdentifier("DE", "1")


def test_type_is_fixed_by_class():
    ident = UserIdentifier(user="carol", id_type="custom")
    assert ident.type() == "m.id.user"
    assert ident.to_dict()["type"] == "custom"