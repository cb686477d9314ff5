"""
Tela principal do Monitoramento de Certidões (CND)

Controla a lista de clientes, os filtros de busca, a seleção múltipla e
os fluxos de cadastro, edição e exclusão. Não conhece widgets: a GUI
apenas lê este estado e encaminha as ações do usuário.

Toda escrita bem-sucedida recarrega a lista completa da API; não há
atualização local incremental.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set

from .cliente_client import BulkDeleteError, ClienteApiError, ClienteClient, InvalidArgumentError
from .cliente_form import ClienteForm
from .delete_confirm import DeleteConfirmation
from .models import Cliente, ClienteDraft, SchemaError

logger = logging.getLogger(__name__)

VARIANT_DEFAULT = 'default'
VARIANT_DESTRUCTIVE = 'destructive'


@dataclass
class Notification:
    title: str
    description: str
    variant: str = VARIANT_DEFAULT

    @property
    def is_error(self) -> bool:
        return self.variant == VARIANT_DESTRUCTIVE


def filter_clientes(clientes: List[Cliente], search_empresa: str, search_cnpj: str) -> List[Cliente]:
    """
    Nome da empresa: substring sem diferenciar maiúsculas (vazio casa tudo).
    CNPJ do cliente: substring, aplicado só quando o filtro não está vazio.
    """
    empresa_term = (search_empresa or '').lower()
    cnpj_term = search_cnpj or ''

    filtered = []
    for cliente in clientes:
        matches_empresa = empresa_term in cliente.empresa.nome_empresa.lower()
        matches_cnpj = not cnpj_term or cnpj_term in cliente.cnpj
        if matches_empresa and matches_cnpj:
            filtered.append(cliente)
    return filtered


class MonitoramentoScreen:
    def __init__(self, client: ClienteClient, notify: Callable[[Notification], None] = None):
        self.client = client
        self.notify = notify or (lambda notification: None)

        self.clientes: List[Cliente] = []
        self.loading = False
        self.search_empresa = ''
        self.search_cnpj = ''
        self.selected: Set[int] = set()

        self.form = ClienteForm(on_submit=self.submit_form)
        self.delete_confirmation = DeleteConfirmation(on_confirm=self.confirm_delete)

        self._mounted = False

    # ========== CARGA ==========

    def mount(self):
        """Carrega a lista uma única vez na abertura da tela"""
        if self._mounted:
            return
        self._mounted = True
        self.load()

    def load(self):
        """Recarrega a lista completa; em caso de erro notifica e fica com lista vazia"""
        self.loading = True
        try:
            self.clientes = self.client.list_all()
        except (ClienteApiError, SchemaError) as e:
            logger.error(f"Erro ao carregar clientes: {e}")
            self._error(
                "Erro ao carregar clientes",
                "Não foi possível carregar a lista de clientes. Verifique a conexão com a API."
            )
            self.clientes = []
        finally:
            self.loading = False
        self.selected = set()

    # ========== FILTROS E SELEÇÃO ==========

    def set_search_empresa(self, value: str):
        self.search_empresa = value or ''

    def set_search_cnpj(self, value: str):
        self.search_cnpj = value or ''

    @property
    def filtered(self) -> List[Cliente]:
        return filter_clientes(self.clientes, self.search_empresa, self.search_cnpj)

    def toggle_select(self, cliente_id: int, checked: bool):
        if checked:
            self.selected.add(cliente_id)
        else:
            self.selected.discard(cliente_id)

    def select_all(self, checked: bool):
        """Marca exatamente os clientes filtrados, ou limpa a seleção"""
        self.selected = {c.id for c in self.filtered} if checked else set()

    @property
    def header_checked(self) -> bool:
        filtered = self.filtered
        return len(filtered) > 0 and len(self.selected) == len(filtered)

    def is_selected(self, cliente_id: int) -> bool:
        return cliente_id in self.selected

    @property
    def selected_names(self) -> List[str]:
        return [c.display_name for c in self.clientes if c.id in self.selected]

    @property
    def stats(self) -> Dict[str, int]:
        return {
            'total': len(self.clientes),
            'filtrados': len(self.filtered),
            'selecionados': len(self.selected),
        }

    @property
    def empty_message(self) -> Optional[str]:
        if self.filtered:
            return None
        if not self.clientes:
            return 'Nenhum cliente cadastrado ainda.'
        return 'Nenhum cliente encontrado com os filtros aplicados.'

    @property
    def form_loading(self) -> bool:
        return self.form.is_submitting

    @property
    def delete_loading(self) -> bool:
        return self.delete_confirmation.is_loading

    # ========== FLUXOS ==========

    def start_create(self):
        self.form.open(None)

    def start_edit(self, cliente: Cliente):
        self.form.open(cliente)

    def start_delete(self, cliente_id: int = None) -> bool:
        """
        Exclusão pela linha substitui a seleção pelo ID clicado; a exclusão
        em lote usa a seleção atual sem alterá-la.
        """
        if cliente_id is not None:
            self.selected = {cliente_id}

        if not self.selected:
            logger.warning("Exclusão solicitada sem clientes selecionados")
            return False

        self.delete_confirmation.open(self.selected_names, len(self.selected) > 1)
        return True

    def submit_form(self, draft: ClienteDraft):
        """Callback do formulário: cria ou atualiza, recarrega a lista ou propaga o erro"""
        editing = self.form.cliente
        try:
            if editing is not None:
                self.client.update(draft, id_empresa=editing.empresa.id_empresa)
                self._success("Cliente atualizado", "Os dados do cliente foram atualizados com sucesso.")
            else:
                self.client.create(draft)
                self._success("Cliente cadastrado", "O novo cliente foi cadastrado com sucesso.")
        except (ClienteApiError, SchemaError) as e:
            self._error("Erro ao salvar cliente", str(e) or "Não foi possível salvar os dados do cliente.")
            raise

        self.load()

    def confirm_delete(self):
        """Callback da confirmação: exclui a seleção, recarrega a lista ou propaga o erro"""
        ids = sorted(self.selected)
        if not ids:
            message = "Nenhum cliente selecionado para exclusão."
            self._error("Erro ao excluir cliente(s)", message)
            raise InvalidArgumentError(message)

        try:
            if len(ids) > 1:
                self.client.delete_many(ids)
                self._success("Clientes excluídos", f"{len(ids)} cliente(s) foram excluídos com sucesso.")
            else:
                self.client.delete(ids[0])
                self._success("Cliente excluído", "O cliente foi excluído com sucesso.")
        except BulkDeleteError as e:
            self._error(
                "Erro ao excluir cliente(s)",
                f"{len(e.deleted_ids)} cliente(s) excluído(s), {len(e.failed_ids)} com falha."
            )
            # Parte do lote foi aplicada: a lista é recarregada e apenas os
            # clientes que falharam continuam selecionados
            self.load()
            self.selected = {cid for cid in e.failed_ids if any(c.id == cid for c in self.clientes)}
            if self.selected:
                self.delete_confirmation.names = self.selected_names
                self.delete_confirmation.is_multiple = len(self.selected) > 1
            else:
                # Nenhum cliente com falha segue na lista: não há o que repetir
                self.delete_confirmation.close()
            raise
        except ClienteApiError as e:
            self._error(
                "Erro ao excluir cliente(s)",
                str(e) or "Não foi possível excluir o(s) cliente(s) selecionado(s)."
            )
            raise

        self.load()
        self.selected = set()

    # ========== NOTIFICAÇÕES ==========

    def _success(self, title: str, description: str):
        logger.info(f"{title}: {description}")
        self.notify(Notification(title, description))

    def _error(self, title: str, description: str):
        logger.error(f"{title}: {description}")
        self.notify(Notification(title, description, VARIANT_DESTRUCTIVE))
