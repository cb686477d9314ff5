import threading

import pytest
import requests

from cnd_monitor.cliente_client import (
    ApiError,
    BulkDeleteError,
    ClienteClient,
    InvalidArgumentError,
    NetworkError,
    NotFoundError,
)
from cnd_monitor.models import Empresa

from .conftest import make_response

RECORD = {
    'id': 1,
    'cnpj': '11.222.333/0001-81',
    'periodicidade': 30,
    'statusCliente': 'ativo',
    'nacional': True,
    'municipal': False,
    'estadual': False,
    'empresa': {'idEmpresa': 'EMP01', 'nomeEmpresa': 'Acme', 'cnpj': '44.555.666/0001-77'},
}


def _call(session):
    args, kwargs = session.request.call_args
    return args[0], args[1], kwargs


def test_base_url_trailing_slash_is_removed(api):
    assert api.base_url == 'http://api.test'


def test_list_all(api, session):
    session.request.return_value = make_response(200, [RECORD, dict(RECORD, id=2)])

    clientes = api.list_all()

    assert [c.id for c in clientes] == [1, 2]
    method, url, kwargs = _call(session)
    assert (method, url) == ('GET', 'http://api.test/clientes')
    assert kwargs['headers']['Content-Type'] == 'application/json'
    assert kwargs['timeout'] == 5


def test_list_all_unwraps_data_envelope(api, session):
    session.request.return_value = make_response(200, {'data': [RECORD]})
    assert [c.id for c in api.list_all()] == [1]


def test_list_all_rejects_unexpected_payload(api, session):
    session.request.return_value = make_response(200, {'total': 3})
    with pytest.raises(ApiError):
        api.list_all()


def test_get_by_id(api, session):
    session.request.return_value = make_response(200, {'data': RECORD})

    cliente = api.get_by_id(1)

    assert cliente.empresa.id_empresa == 'EMP01'
    assert _call(session)[:2] == ('GET', 'http://api.test/clientes/1')


def test_get_by_id_not_found(api, session):
    session.request.return_value = make_response(404, {'error': 'Cliente não encontrado'}, reason='Not Found')

    with pytest.raises(NotFoundError) as exc_info:
        api.get_by_id(99)

    assert exc_info.value.status_code == 404
    assert str(exc_info.value) == 'Cliente não encontrado'


def test_create_posts_draft_without_id(api, session, valid_draft):
    session.request.return_value = make_response(201, dict(RECORD, id=10))

    cliente = api.create(valid_draft)

    assert cliente.id == 10
    method, url, kwargs = _call(session)
    assert (method, url) == ('POST', 'http://api.test/clientes')
    assert 'id' not in kwargs['json']
    assert kwargs['json']['statusCliente'] == 'ativo'
    assert kwargs['json']['empresa']['idEmpresa'] == 'EMP01'


def test_update_uses_id_empresa_as_key(api, session, valid_draft):
    session.request.return_value = make_response(200, RECORD)

    api.update(valid_draft)

    method, url, kwargs = _call(session)
    assert (method, url) == ('PUT', 'http://api.test/clientes/EMP01')
    assert kwargs['json'] == valid_draft.to_dict()


def test_update_with_explicit_key(api, session, valid_draft):
    session.request.return_value = make_response(200, RECORD)

    api.update(valid_draft, id_empresa='OLD01')

    assert _call(session)[1] == 'http://api.test/clientes/OLD01'


def test_update_without_key_fails_locally(api, session, valid_draft):
    valid_draft.empresa = Empresa(id_empresa='  ', nome_empresa='Acme', cnpj='')

    with pytest.raises(InvalidArgumentError):
        api.update(valid_draft)

    session.request.assert_not_called()


def test_delete_accepts_no_content(api, session):
    session.request.return_value = make_response(204, reason='No Content')

    assert api.delete(3) is None
    assert _call(session)[:2] == ('DELETE', 'http://api.test/clientes/3')


def test_error_message_falls_back_to_status(api, session):
    session.request.return_value = make_response(500, raw=b'<html>boom</html>', reason='Internal Server Error')

    with pytest.raises(ApiError) as exc_info:
        api.list_all()

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == 'Erro na requisição: 500 Internal Server Error'


def test_error_message_uses_message_field(api, session):
    session.request.return_value = make_response(400, {'message': 'CNPJ duplicado'}, reason='Bad Request')

    with pytest.raises(ApiError, match='CNPJ duplicado'):
        api.list_all()


def test_connection_error_becomes_network_error(api, session):
    session.request.side_effect = requests.exceptions.ConnectionError('recusada')

    with pytest.raises(NetworkError):
        api.list_all()


def test_timeout_becomes_network_error(api, session):
    session.request.side_effect = requests.exceptions.Timeout('lento')

    with pytest.raises(NetworkError):
        api.delete(1)


def test_test_connection(api, session):
    session.request.return_value = make_response(200, [])
    assert api.test_connection() is True

    session.request.side_effect = requests.exceptions.ConnectionError('recusada')
    assert api.test_connection() is False


def test_delete_many_success(api, session):
    session.request.return_value = make_response(204)

    results = api.delete_many([5, 6, 7])

    assert [r.cliente_id for r in results] == [5, 6, 7]
    assert all(r.success for r in results)
    urls = sorted(call.args[1] for call in session.request.call_args_list)
    assert urls == ['http://api.test/clientes/5', 'http://api.test/clientes/6', 'http://api.test/clientes/7']


def test_delete_many_empty_makes_no_request(api, session):
    assert api.delete_many([]) == []
    session.request.assert_not_called()


def test_delete_many_reports_partial_failure(api, session):
    def respond(method, url, **kwargs):
        if url.endswith('/6'):
            return make_response(409, {'error': 'Cliente em uso'}, reason='Conflict')
        return make_response(204)

    session.request.side_effect = respond

    with pytest.raises(BulkDeleteError) as exc_info:
        api.delete_many([5, 6, 7])

    error = exc_info.value
    assert error.failed_ids == [6]
    assert error.deleted_ids == [5, 7]
    assert 'Cliente em uso' in str(error)


def test_delete_many_runs_concurrently(session):
    api = ClienteClient(base_url='http://api.test', session=session, max_workers=3)
    barrier = threading.Barrier(3, timeout=5)

    def respond(method, url, **kwargs):
        # Só passa se as três requisições estiverem em andamento ao mesmo tempo
        barrier.wait()
        return make_response(204)

    session.request.side_effect = respond

    assert len(api.delete_many([1, 2, 3])) == 3


def test_unsupported_method(api):
    with pytest.raises(ValueError):
        api._make_request('PATCH', 'clientes')
