"""
Formulário de cadastro/edição de cliente

Mantém o rascunho, valida todos os campos de uma vez e só chama o
callback de envio quando o rascunho é válido. Não acessa a rede.
"""
import logging
from enum import Enum
from typing import Callable, Dict, Optional

from .formatters import format_cnpj, is_cnpj_masked
from .models import (
    Cliente,
    ClienteDraft,
    ClienteField,
    ClienteFieldUpdate,
    EmpresaField,
    EmpresaFieldUpdate,
    FieldUpdate,
    apply_field_update,
)

logger = logging.getLogger(__name__)

ID_EMPRESA_MAX_LENGTH = 6

# Mensagens de validação por campo (chave = caminho com ponto)
ERROR_MESSAGES = {
    'cnpj': 'CNPJ do Cliente inválido. Use o formato XX.XXX.XXX/XXXX-XX.',
    'empresa.cnpj': 'CNPJ da Empresa inválido. Use o formato XX.XXX.XXX/XXXX-XX.',
    'empresa.idEmpresa.required': 'ID da Empresa é obrigatório.',
    'empresa.idEmpresa.length': f'ID da Empresa não pode ter mais de {ID_EMPRESA_MAX_LENGTH} caracteres.',
    'empresa.nomeEmpresa': 'Nome da Empresa é obrigatório.',
    'periodicidade': 'Periodicidade deve ser um número positivo.',
    'statusCliente': 'Status do Cliente é obrigatório.',
}


class ClienteValidationError(ValueError):
    """Rascunho com erros de validação"""

    def __init__(self, errors: Dict[str, str]):
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


class FormState(Enum):
    CLOSED = 'closed'
    OPEN = 'open'
    SUBMITTING = 'submitting'


def validate_draft(draft: ClienteDraft) -> Dict[str, str]:
    """Retorna todos os erros do rascunho de uma vez (vazio = válido)"""
    errors = {}

    if not draft.cnpj.strip() or not is_cnpj_masked(draft.cnpj):
        errors['cnpj'] = ERROR_MESSAGES['cnpj']

    if not draft.empresa.cnpj.strip() or not is_cnpj_masked(draft.empresa.cnpj):
        errors['empresa.cnpj'] = ERROR_MESSAGES['empresa.cnpj']

    if not draft.empresa.id_empresa.strip():
        errors['empresa.idEmpresa'] = ERROR_MESSAGES['empresa.idEmpresa.required']
    elif len(draft.empresa.id_empresa) > ID_EMPRESA_MAX_LENGTH:
        errors['empresa.idEmpresa'] = ERROR_MESSAGES['empresa.idEmpresa.length']

    if not draft.empresa.nome_empresa.strip():
        errors['empresa.nomeEmpresa'] = ERROR_MESSAGES['empresa.nomeEmpresa']

    periodicidade = draft.periodicidade
    if isinstance(periodicidade, bool) or not isinstance(periodicidade, int) or periodicidade <= 0:
        errors['periodicidade'] = ERROR_MESSAGES['periodicidade']

    if not draft.status_cliente.strip():
        errors['statusCliente'] = ERROR_MESSAGES['statusCliente']

    return errors


class ClienteForm:
    """
    Estado do modal de cliente

    CLOSED -> OPEN -> SUBMITTING -> CLOSED (sucesso)
                   \\-> OPEN com erros (validação ou envio rejeitado)
    """

    # Campos que recebem a máscara de CNPJ ao serem editados
    CNPJ_FIELDS = (ClienteField.CNPJ, EmpresaField.CNPJ)

    def __init__(self, on_submit: Callable[[ClienteDraft], None]):
        self.on_submit = on_submit
        self.state = FormState.CLOSED
        self.cliente: Optional[Cliente] = None
        self.draft = ClienteDraft()
        self.errors: Dict[str, str] = {}

    @property
    def is_open(self) -> bool:
        return self.state != FormState.CLOSED

    @property
    def is_submitting(self) -> bool:
        return self.state == FormState.SUBMITTING

    @property
    def is_edit_mode(self) -> bool:
        return self.cliente is not None

    @property
    def title(self) -> str:
        return 'Editar Cliente' if self.is_edit_mode else 'Cadastrar Novo Cliente'

    @property
    def submit_label(self) -> str:
        return 'Atualizar' if self.is_edit_mode else 'Cadastrar'

    def open(self, cliente: Optional[Cliente] = None):
        """Abre o formulário; rascunho e erros são sempre reiniciados"""
        self.cliente = cliente
        self.draft = cliente.to_draft() if cliente else ClienteDraft()
        self.errors = {}
        self.state = FormState.OPEN
        logger.debug(f"Formulário aberto em modo {'edição' if cliente else 'cadastro'}")

    def close(self):
        self.state = FormState.CLOSED
        self.cliente = None
        self.errors = {}

    def update_field(self, update: FieldUpdate):
        """Aplica a alteração e limpa apenas o erro daquele campo"""
        if update.field in self.CNPJ_FIELDS and isinstance(update.value, str):
            if isinstance(update, EmpresaFieldUpdate):
                update = EmpresaFieldUpdate(update.field, format_cnpj(update.value))
            else:
                update = ClienteFieldUpdate(update.field, format_cnpj(update.value))

        self.draft = apply_field_update(self.draft, update)
        self.errors.pop(update.error_key, None)

    def validate(self) -> bool:
        self.errors = validate_draft(self.draft)
        if self.errors:
            logger.info(f"Formulário com {len(self.errors)} erro(s) de validação: {list(self.errors)}")
        return not self.errors

    def require_valid(self) -> ClienteDraft:
        if not self.validate():
            raise ClienteValidationError(dict(self.errors))
        return self.draft.copy()

    def begin_submit(self) -> Optional[ClienteDraft]:
        """
        Valida e entra em SUBMITTING

        Returns:
            Cópia do rascunho a enviar, ou None se inválido/já enviando
        """
        if self.state != FormState.OPEN:
            return None

        if not self.validate():
            return None

        self.state = FormState.SUBMITTING
        return self.draft.copy()

    def complete_submit(self):
        self.close()

    def fail_submit(self, error: Exception):
        # O chamador já exibiu o erro; o rascunho é mantido
        logger.error(f"Erro ao enviar formulário: {error}")
        self.state = FormState.OPEN

    def submit(self) -> bool:
        """
        Valida e envia o rascunho pelo callback

        Returns:
            True se o envio foi concluído e o formulário fechado
        """
        draft = self.begin_submit()
        if draft is None:
            return False

        try:
            self.on_submit(draft)
        except Exception as e:
            self.fail_submit(e)
            return False

        self.complete_submit()
        return True
