"""
Formatação de CNPJ e telefone para exibição
"""
import re

CNPJ_MASK_REGEX = re.compile(r'^\d{2}\.\d{3}\.\d{3}/\d{4}-\d{2}$')
PHONE_REGEX = re.compile(r'^(\d{2})(\d{4,5})(\d{4})$')

# Posição (em dígitos) e separador inserido antes dela
_CNPJ_SEPARATORS = ((2, '.'), (5, '.'), (8, '/'), (12, '-'))
CNPJ_FORMATTED_LENGTH = 18


def clean_digits(value: str) -> str:
    """Remove tudo que não for dígito"""
    if not value:
        return ""
    return re.sub(r'\D', '', value)


def format_cnpj(value: str) -> str:
    """
    Aplica a máscara XX.XXX.XXX/XXXX-XX conforme o usuário digita.

    Entradas incompletas ficam parcialmente formatadas: separadores só
    entram quando existe dígito depois deles.
    """
    digits = clean_digits(value)
    formatted = []
    for index, digit in enumerate(digits):
        for position, separator in _CNPJ_SEPARATORS:
            if index == position:
                formatted.append(separator)
        formatted.append(digit)
    return "".join(formatted)[:CNPJ_FORMATTED_LENGTH]


def format_phone(value: str) -> str:
    """Formata telefone para (XX) XXXXX-XXXX; acima de 11 dígitos devolve o valor original"""
    digits = clean_digits(value)
    if len(digits) > 11:
        return value
    return PHONE_REGEX.sub(r'(\1) \2-\3', digits)


def is_cnpj_masked(value: str) -> bool:
    return bool(value) and CNPJ_MASK_REGEX.match(value) is not None
