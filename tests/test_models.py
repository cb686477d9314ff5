import pytest

from cnd_monitor.models import (
    Cliente,
    ClienteDraft,
    ClienteField,
    ClienteFieldUpdate,
    EmpresaField,
    EmpresaFieldUpdate,
    SchemaError,
    apply_field_update,
    parse_periodicidade,
)

API_RECORD = {
    'id': 7,
    'cnpj': '11.222.333/0001-81',
    'periodicidade': 15,
    'statusCliente': 'ativo',
    'nacional': True,
    'municipal': False,
    'estadual': True,
    'empresa': {'idEmpresa': 'EMP7', 'nomeEmpresa': 'Acme', 'cnpj': '44.555.666/0001-77'},
}


def test_cliente_from_dict_reads_camel_case():
    cliente = Cliente.from_dict(API_RECORD)

    assert cliente.id == 7
    assert cliente.status_cliente == 'ativo'
    assert cliente.estadual is True
    assert cliente.empresa.id_empresa == 'EMP7'
    assert cliente.empresa.nome_empresa == 'Acme'


def test_cliente_to_dict_restores_wire_format():
    assert Cliente.from_dict(API_RECORD).to_dict() == API_RECORD


def test_draft_to_dict_has_no_id():
    draft = Cliente.from_dict(API_RECORD).to_draft()
    assert 'id' not in draft.to_dict()
    assert draft.to_dict()['empresa']['idEmpresa'] == 'EMP7'


def test_legacy_schema_is_rejected():
    with pytest.raises(SchemaError, match='esquema antigo'):
        Cliente.from_dict({'id': 1, 'nome': 'Fulano', 'email': 'f@x.com', 'telefone': '', 'cnpj': ''})


def test_record_without_id_is_rejected():
    record = dict(API_RECORD)
    del record['id']
    with pytest.raises(SchemaError):
        Cliente.from_dict(record)


def test_record_with_invalid_empresa_is_rejected():
    record = dict(API_RECORD, empresa='EMP7')
    with pytest.raises(SchemaError):
        Cliente.from_dict(record)


def test_default_draft():
    draft = ClienteDraft()
    assert draft.periodicidade == 30
    assert draft.status_cliente == 'ativo'
    assert (draft.nacional, draft.municipal, draft.estadual) == (True, False, False)
    assert draft.empresa.id_empresa == ''


def test_draft_copy_does_not_share_empresa():
    draft = ClienteDraft()
    copy = draft.copy()
    copy.empresa.nome_empresa = 'Outra'
    assert draft.empresa.nome_empresa == ''


def test_display_helpers():
    cliente = Cliente.from_dict(dict(API_RECORD, statusCliente='inativo', municipal=True))
    assert cliente.display_name == 'Acme (11.222.333/0001-81)'
    assert cliente.status_label == 'Inativo'
    assert not cliente.is_active
    assert cliente.cnd_badges == 'N M E'


def test_apply_top_level_update():
    draft = ClienteDraft()
    updated = apply_field_update(draft, ClienteFieldUpdate(ClienteField.STATUS_CLIENTE, 'inativo'))

    assert updated.status_cliente == 'inativo'
    assert draft.status_cliente == 'ativo'


def test_apply_nested_update():
    draft = ClienteDraft()
    updated = apply_field_update(draft, EmpresaFieldUpdate(EmpresaField.NOME_EMPRESA, 'Acme'))

    assert updated.empresa.nome_empresa == 'Acme'
    assert draft.empresa.nome_empresa == ''


def test_apply_flag_update_coerces_bool():
    updated = apply_field_update(ClienteDraft(), ClienteFieldUpdate(ClienteField.ESTADUAL, 1))
    assert updated.estadual is True


def test_error_keys_use_dotted_path():
    assert ClienteFieldUpdate(ClienteField.CNPJ, '').error_key == 'cnpj'
    assert EmpresaFieldUpdate(EmpresaField.CNPJ, '').error_key == 'empresa.cnpj'
    assert EmpresaFieldUpdate(EmpresaField.ID_EMPRESA, '').error_key == 'empresa.idEmpresa'


def test_apply_unknown_update_type():
    with pytest.raises(TypeError):
        apply_field_update(ClienteDraft(), ('cnpj', 'x'))


@pytest.mark.parametrize("value, expected", [("30", 30), (" 7 ", 7), ("", 0), ("abc", 0), (None, 0), ("-3", -3)])
def test_parse_periodicidade(value, expected):
    assert parse_periodicidade(value) == expected


@pytest.mark.parametrize("value", ["false", "true", 0, 1])
def test_non_boolean_flag_is_rejected(value):
    with pytest.raises(SchemaError, match='nacional'):
        Cliente.from_dict(dict(API_RECORD, nacional=value))


def test_missing_or_null_flag_is_false():
    record = dict(API_RECORD, municipal=None)
    del record['estadual']

    cliente = Cliente.from_dict(record)

    assert cliente.municipal is False
    assert cliente.estadual is False
