import pytest

from cnd_monitor.formatters import clean_digits, format_cnpj, format_phone, is_cnpj_masked


@pytest.mark.parametrize("raw, expected", [
    ("11222333000181", "11.222.333/0001-81"),
    ("1", "1"),
    ("", ""),
    ("112", "11.2"),
    ("112223", "11.222.3"),
    ("112223330", "11.222.333/0"),
    ("1122233300018", "11.222.333/0001-8"),
    ("11.222.333/0001-81", "11.222.333/0001-81"),
    ("11a222b333c0001d81", "11.222.333/0001-81"),
    ("1122233300018199", "11.222.333/0001-81"),
])
def test_format_cnpj(raw, expected):
    assert format_cnpj(raw) == expected


def test_format_cnpj_is_idempotent():
    once = format_cnpj("11222333000181")
    assert format_cnpj(once) == once


def test_format_cnpj_never_exceeds_mask_length():
    assert len(format_cnpj("9" * 30)) == 18


@pytest.mark.parametrize("raw, expected", [
    ("11987654321", "(11) 98765-4321"),
    ("1132654321", "(11) 3265-4321"),
    ("(11) 98765-4321", "(11) 98765-4321"),
    ("119876", "119876"),
])
def test_format_phone(raw, expected):
    assert format_phone(raw) == expected


def test_format_phone_too_many_digits_returns_input():
    raw = "+55 11 98765-4321"
    assert format_phone(raw) == raw


def test_clean_digits():
    assert clean_digits("11.222.333/0001-81") == "11222333000181"
    assert clean_digits(None) == ""


def test_is_cnpj_masked():
    assert is_cnpj_masked("11.222.333/0001-81")
    assert not is_cnpj_masked("11222333000181")
    assert not is_cnpj_masked("11.222.333/0001-8")
    assert not is_cnpj_masked("")
