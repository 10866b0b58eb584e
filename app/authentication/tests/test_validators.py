"""
Tests for CPF, phone and password validators.
"""

import pytest
from django.core.exceptions import ValidationError

from authentication.tests.factories import cpf_for
from authentication.validators import (
    is_valid_cpf,
    validate_cpf,
    validate_mobile_phone,
    validate_password_strength,
)


class TestCpf:
    """Tests for is_valid_cpf() / validate_cpf()."""

    @pytest.mark.parametrize(
        "value",
        ["52998224725", "529.982.247-25", "11144477735", "111.444.777-35"],
    )
    def test_accepts_valid_cpf(self, value):
        assert is_valid_cpf(value) is True

    @pytest.mark.parametrize(
        "value",
        [
            "52998224724",  # wrong second check digit
            "52998224715",  # wrong first check digit
            "11111111111",  # repeated digits
            "5299822472",  # too short
            "",
        ],
    )
    def test_rejects_invalid_cpf(self, value):
        with pytest.raises(ValidationError):
            validate_cpf(value)

    def test_factory_cpfs_are_valid(self):
        """Sequence CPFs used by UserFactory pass the checksum."""
        assert all(is_valid_cpf(cpf_for(n)) for n in range(50))


class TestMobilePhone:
    """Tests for validate_mobile_phone()."""

    @pytest.mark.parametrize("value", ["11987654321", "(11) 98765-4321", "1133334444"])
    def test_accepts_valid_numbers(self, value):
        validate_mobile_phone(value)

    @pytest.mark.parametrize("value", ["11887654321", "123", "119876543210"])
    def test_rejects_invalid_numbers(self, value):
        with pytest.raises(ValidationError):
            validate_mobile_phone(value)


class TestPasswordStrength:
    """Tests for validate_password_strength()."""

    def test_accepts_mixed_password(self):
        validate_password_strength("Secret1")

    @pytest.mark.parametrize(
        "value,code",
        [
            ("Ab1", "password_too_short"),
            ("secret123", "password_too_weak"),
            ("SECRET123", "password_too_weak"),
            ("SecretPass", "password_too_weak"),
        ],
    )
    def test_rejects_weak_password(self, value, code):
        with pytest.raises(ValidationError) as exc_info:
            validate_password_strength(value)

        assert exc_info.value.code == code
