import json
from unittest.mock import MagicMock

import pytest
import requests

from cnd_monitor.cliente_client import ClienteClient
from cnd_monitor.models import Cliente, ClienteDraft, Empresa


def make_cliente(cliente_id, nome, cnpj, status='ativo', id_empresa=None,
                 nacional=True, municipal=False, estadual=False):
    return Cliente(
        id=cliente_id,
        cnpj=cnpj,
        periodicidade=30,
        status_cliente=status,
        nacional=nacional,
        municipal=municipal,
        estadual=estadual,
        empresa=Empresa(
            id_empresa=id_empresa or f"E{cliente_id:03d}",
            nome_empresa=nome,
            cnpj=cnpj,
        ),
    )


def make_response(status_code, body=None, reason='OK', raw=None):
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    if raw is not None:
        response._content = raw
    elif body is not None:
        response._content = json.dumps(body).encode('utf-8')
    else:
        response._content = b''
    return response


@pytest.fixture
def clientes():
    return [
        make_cliente(1, 'Acme Comércio Ltda', '11.222.333/0001-81'),
        make_cliente(2, 'Beta Serviços SA', '22.333.444/0001-92', status='inativo', municipal=True),
        make_cliente(3, 'ACME Filial Sul', '33.444.555/0001-03', estadual=True),
        make_cliente(4, 'Gamma Indústria', '11.222.999/0001-44'),
    ]


@pytest.fixture
def valid_draft():
    return ClienteDraft(
        cnpj='11.222.333/0001-81',
        periodicidade=15,
        status_cliente='ativo',
        nacional=True,
        municipal=True,
        estadual=False,
        empresa=Empresa(id_empresa='EMP01', nome_empresa='Acme Comércio Ltda', cnpj='44.555.666/0001-77'),
    )


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def api(session):
    return ClienteClient(base_url='http://api.test/', session=session, timeout=5, max_workers=4)


@pytest.fixture
def fake_client(clientes):
    """Dublê do ClienteClient com lista mutável no lugar do servidor"""
    client = MagicMock(spec=ClienteClient)
    server = {'clientes': list(clientes)}

    def list_all():
        return list(server['clientes'])

    def delete(cliente_id):
        server['clientes'] = [c for c in server['clientes'] if c.id != cliente_id]

    def delete_many(ids):
        for cliente_id in ids:
            delete(cliente_id)
        return []

    client.list_all.side_effect = list_all
    client.delete.side_effect = delete
    client.delete_many.side_effect = delete_many
    client.server = server
    return client
