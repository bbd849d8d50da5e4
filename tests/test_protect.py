import pytest
from cryptography.fernet import Fernet

from machine_enroll.exceptions import ProtectionException
from machine_enroll.protect import FernetPasswordProtector


def test_protect_roundtrip(protector):
    token = protector.protect("s3cret")
    assert token != "s3cret"
    assert protector.unprotect(token) == "s3cret"


def test_generated_key_when_unset():
    protector = FernetPasswordProtector()
    assert protector.unprotect(protector.protect("pw")) == "pw"


def test_wrong_key_cannot_unprotect(protector):
    other = FernetPasswordProtector(Fernet.generate_key().decode())
    with pytest.raises(ProtectionException):
        other.unprotect(protector.protect("pw"))


def test_invalid_key():
    with pytest.raises(ProtectionException):
        FernetPasswordProtector("not-a-key")
