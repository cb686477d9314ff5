"""
Cliente para interação com a API de clientes do Monitoramento CND
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

import requests

from .config import active_config
from .models import Cliente, ClienteDraft

logger = logging.getLogger(__name__)


class ClienteApiError(Exception):
    """Erro base de comunicação com a API de clientes"""


class ApiError(ClienteApiError):
    """Resposta HTTP fora da faixa 2xx"""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class NotFoundError(ApiError):
    """Registro não encontrado (HTTP 404)"""


class NetworkError(ClienteApiError):
    """A requisição não pôde ser concluída (conexão, timeout)"""


class InvalidArgumentError(ClienteApiError):
    """Argumento inválido detectado antes de qualquer chamada de rede"""


@dataclass
class DeleteResult:
    cliente_id: int
    success: bool
    error: Optional[str] = None


class BulkDeleteError(ApiError):
    """Uma ou mais exclusões do lote falharam; `results` traz o resultado por ID"""

    def __init__(self, results: List[DeleteResult]):
        failed = [r for r in results if not r.success]
        message = f"{len(failed)} de {len(results)} exclusão(ões) falharam"
        for result in failed:
            if result.error:
                message += f"; ID {result.cliente_id}: {result.error}"
        super().__init__(0, message)
        self.results = results

    @property
    def failed_ids(self) -> List[int]:
        return [r.cliente_id for r in self.results if not r.success]

    @property
    def deleted_ids(self) -> List[int]:
        return [r.cliente_id for r in self.results if r.success]


class ClienteClient:
    SUPPORTED_METHODS = ('GET', 'POST', 'PUT', 'DELETE')

    def __init__(self, base_url: str = None, session: requests.Session = None,
                 timeout: float = None, max_workers: int = None):
        self.base_url = (base_url or active_config.CND_API_URL).rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else active_config.CND_API_TIMEOUT
        self.max_workers = max_workers or active_config.CND_BULK_DELETE_WORKERS

        if not self.base_url:
            raise ValueError("CND_API_URL não configurado")

    def _make_request(self, method: str, endpoint: str, data: Dict = None) -> Any:
        """
        Faz requisição para a API de clientes

        Returns:
            JSON decodificado, ou None para respostas sem corpo (204)

        Raises:
            NotFoundError, ApiError, NetworkError
        """
        if method not in self.SUPPORTED_METHODS:
            raise ValueError(f"Método HTTP não suportado: {method}")

        url = f"{self.base_url}/{endpoint}"

        headers = {
            'Content-Type': 'application/json',
            'Accept': 'application/json'
        }

        try:
            response = self.session.request(method, url, json=data, headers=headers, timeout=self.timeout)

        except requests.exceptions.Timeout as e:
            error_msg = f"Timeout na requisição {method} {url}: {e}"
            logger.error(error_msg)
            raise NetworkError(error_msg) from e

        except requests.exceptions.ConnectionError as e:
            error_msg = f"Erro de conexão {method} {url}: {e}"
            logger.error(error_msg)
            raise NetworkError(error_msg) from e

        except requests.exceptions.RequestException as e:
            error_msg = f"Erro na requisição {method} {url}: {e}"
            logger.error(error_msg)
            raise NetworkError(error_msg) from e

        if response.status_code >= 400:
            error_message = self._extract_error_message(response)
            logger.error(f"Erro na requisição {method} {url}: {error_message}")
            logger.error(f"Status Code: {response.status_code}")

            if response.status_code == 404:
                raise NotFoundError(response.status_code, error_message)
            raise ApiError(response.status_code, error_message)

        # 204 No Content não tem corpo
        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError:
            logger.warning(f"Resposta não-JSON para {method} {url}: {response.text}")
            return None

    @staticmethod
    def _extract_error_message(response: requests.Response) -> str:
        """Usa a mensagem do backend quando existir, senão '<status> <reason>'"""
        fallback = f"Erro na requisição: {response.status_code} {response.reason}"
        try:
            error_data = response.json()
        except ValueError:
            return fallback

        if isinstance(error_data, dict):
            message = error_data.get('error') or error_data.get('message')
            if message:
                return str(message)
        return fallback

    @staticmethod
    def _unwrap(payload: Any) -> Any:
        """Remove o envelope {"data": ...} quando presente"""
        if isinstance(payload, dict) and 'data' in payload and 'id' not in payload:
            return payload['data']
        return payload

    def _to_cliente(self, payload: Any, context: str) -> Cliente:
        payload = self._unwrap(payload)
        if not isinstance(payload, dict):
            raise ApiError(0, f"Resposta inesperada da API ao {context}: {payload!r}")
        return Cliente.from_dict(payload)

    def test_connection(self) -> bool:
        """Testa conexão com a API"""
        try:
            self._make_request('GET', 'clientes')
            logger.info(f"Conexão com a API de clientes OK: {self.base_url}")
            return True
        except ClienteApiError as e:
            logger.error(f"Falha ao conectar na API de clientes: {e}")
            return False

    # GET /clientes
    def list_all(self) -> List[Cliente]:
        logger.info("Buscando lista de clientes")
        payload = self._unwrap(self._make_request('GET', 'clientes'))

        if payload is None:
            return []
        if not isinstance(payload, list):
            raise ApiError(0, f"Resposta inesperada da API ao listar clientes: {payload!r}")

        clientes = [Cliente.from_dict(item) for item in payload]
        logger.info(f"{len(clientes)} cliente(s) carregado(s)")
        return clientes

    # GET /clientes/{clienteId}
    def get_by_id(self, cliente_id: int) -> Cliente:
        logger.info(f"Buscando cliente ID: {cliente_id}")
        payload = self._make_request('GET', f'clientes/{cliente_id}')
        return self._to_cliente(payload, f"buscar cliente {cliente_id}")

    # POST /clientes
    def create(self, draft: ClienteDraft) -> Cliente:
        logger.info(f"Criando cliente: {draft.empresa.nome_empresa} ({draft.cnpj})")
        payload = self._make_request('POST', 'clientes', data=draft.to_dict())
        cliente = self._to_cliente(payload, "criar cliente")
        logger.info(f"Cliente criado com sucesso: ID {cliente.id}")
        return cliente

    # PUT /clientes/{idEmpresa}
    def update(self, draft: ClienteDraft, id_empresa: str = None) -> Cliente:
        """
        Atualiza cliente existente

        O backend endereça a atualização pelo ID da empresa, não pelo ID
        numérico do cliente.

        Args:
            draft: Dados completos do cliente
            id_empresa: Chave do registro a atualizar; quando omitida usa
                draft.empresa.idEmpresa

        Raises:
            InvalidArgumentError: nenhuma chave disponível
        """
        if not id_empresa and draft.empresa:
            id_empresa = draft.empresa.id_empresa
        id_empresa = (id_empresa or '').strip()
        if not id_empresa:
            raise InvalidArgumentError("idEmpresa é obrigatório para atualizar um cliente.")

        logger.info(f"Atualizando cliente da empresa: {id_empresa}")
        logger.debug(f"Dados enviados para atualização: {draft.to_dict()}")

        payload = self._make_request('PUT', f'clientes/{id_empresa}', data=draft.to_dict())
        cliente = self._to_cliente(payload, f"atualizar cliente {id_empresa}")
        logger.info(f"Cliente atualizado com sucesso: ID {cliente.id}")
        return cliente

    # DELETE /clientes/{clienteId}
    def delete(self, cliente_id: int) -> None:
        logger.info(f"Excluindo cliente ID: {cliente_id}")
        self._make_request('DELETE', f'clientes/{cliente_id}')
        logger.info(f"Cliente {cliente_id} excluído com sucesso")

    def delete_many(self, cliente_ids: Iterable[int]) -> List[DeleteResult]:
        """
        Exclui vários clientes em paralelo

        O backend não possui endpoint de exclusão em lote: é feita uma
        requisição DELETE por ID e todas são aguardadas.

        Returns:
            Resultado por ID, na ordem recebida

        Raises:
            BulkDeleteError: se ao menos uma exclusão falhar
        """
        ids = list(cliente_ids)
        if not ids:
            return []

        logger.info(f"Excluindo {len(ids)} cliente(s) em lote")
        results: Dict[int, DeleteResult] = {}

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(ids))) as executor:
            future_to_id = {executor.submit(self.delete, cliente_id): cliente_id for cliente_id in ids}

            for future in as_completed(future_to_id):
                cliente_id = future_to_id[future]
                try:
                    future.result()
                    results[cliente_id] = DeleteResult(cliente_id, True)
                except ClienteApiError as e:
                    results[cliente_id] = DeleteResult(cliente_id, False, str(e))

        ordered = [results[cliente_id] for cliente_id in ids]
        failed = [r for r in ordered if not r.success]

        if failed:
            logger.error(f"Exclusão em lote: {len(failed)} de {len(ordered)} falharam")
            raise BulkDeleteError(ordered)

        logger.info(f"Exclusão em lote concluída: {len(ordered)} cliente(s)")
        return ordered
