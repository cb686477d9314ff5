"""
Modelos de dados do Monitoramento CND

Esquema canônico da API de clientes:

    {
        "id": 1,
        "cnpj": "11.222.333/0001-81",
        "periodicidade": 30,
        "statusCliente": "ativo",
        "nacional": true, "municipal": false, "estadual": false,
        "empresa": {"idEmpresa": "EMP001", "nomeEmpresa": "...", "cnpj": "..."}
    }

O esquema antigo ({nome, email, telefone, cnpj}) não é aceito.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Union

from .config import active_config


class SchemaError(ValueError):
    """Registro recebido da API fora do esquema canônico"""


@dataclass
class Empresa:
    id_empresa: str = ""
    nome_empresa: str = ""
    cnpj: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Empresa':
        if not isinstance(data, dict):
            raise SchemaError(f"Campo 'empresa' inválido: {data!r}")
        return cls(
            id_empresa=str(data.get('idEmpresa') or ''),
            nome_empresa=str(data.get('nomeEmpresa') or ''),
            cnpj=str(data.get('cnpj') or ''),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'idEmpresa': self.id_empresa,
            'nomeEmpresa': self.nome_empresa,
            'cnpj': self.cnpj,
        }


@dataclass
class ClienteDraft:
    """Dados editáveis de um cliente (payload de criação e atualização)"""
    cnpj: str = ""
    periodicidade: int = active_config.DEFAULT_PERIODICIDADE
    status_cliente: str = active_config.DEFAULT_STATUS_CLIENTE
    nacional: bool = True
    municipal: bool = False
    estadual: bool = False
    empresa: Empresa = field(default_factory=Empresa)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'cnpj': self.cnpj,
            'periodicidade': self.periodicidade,
            'statusCliente': self.status_cliente,
            'nacional': self.nacional,
            'municipal': self.municipal,
            'estadual': self.estadual,
            'empresa': self.empresa.to_dict(),
        }

    def copy(self) -> 'ClienteDraft':
        return replace(self, empresa=replace(self.empresa))


def _read_flag(data: Dict[str, Any], key: str) -> bool:
    """Flags de CND precisam ser booleanos JSON; ausente equivale a false"""
    value = data.get(key, False)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise SchemaError(f"Campo '{key}' deve ser booleano: {value!r}")
    return value


@dataclass
class Cliente:
    id: int
    cnpj: str
    periodicidade: int
    status_cliente: str
    nacional: bool
    municipal: bool
    estadual: bool
    empresa: Empresa

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Cliente':
        """Converte um registro da API; rejeita registros do esquema antigo"""
        if not isinstance(data, dict):
            raise SchemaError(f"Registro de cliente inválido: {data!r}")

        if 'empresa' not in data:
            if 'nome' in data or 'email' in data:
                raise SchemaError("Registro no esquema antigo (nome/email/telefone) não é suportado")
            raise SchemaError(f"Registro sem o campo 'empresa': {data!r}")

        if data.get('id') is None:
            raise SchemaError(f"Registro sem 'id': {data!r}")

        empresa = Empresa.from_dict(data['empresa'])

        try:
            return cls(
                id=int(data['id']),
                cnpj=str(data.get('cnpj') or ''),
                periodicidade=int(data.get('periodicidade') or 0),
                status_cliente=str(data.get('statusCliente') or ''),
                nacional=_read_flag(data, 'nacional'),
                municipal=_read_flag(data, 'municipal'),
                estadual=_read_flag(data, 'estadual'),
                empresa=empresa,
            )
        except (TypeError, ValueError) as e:
            raise SchemaError(f"Registro de cliente inválido: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        data = {'id': self.id}
        data.update(self.to_draft().to_dict())
        return data

    def to_draft(self) -> ClienteDraft:
        return ClienteDraft(
            cnpj=self.cnpj,
            periodicidade=self.periodicidade,
            status_cliente=self.status_cliente,
            nacional=self.nacional,
            municipal=self.municipal,
            estadual=self.estadual,
            empresa=replace(self.empresa),
        )

    @property
    def display_name(self) -> str:
        """Nome usado na confirmação de exclusão"""
        return f"{self.empresa.nome_empresa} ({self.cnpj})"

    @property
    def status_label(self) -> str:
        status = self.status_cliente
        return status[:1].upper() + status[1:]

    @property
    def is_active(self) -> bool:
        return self.status_cliente.lower() == 'ativo'

    @property
    def cnd_badges(self) -> str:
        """Tipos de CND monitorados: N (nacional), M (municipal), E (estadual)"""
        badges = []
        if self.nacional:
            badges.append('N')
        if self.municipal:
            badges.append('M')
        if self.estadual:
            badges.append('E')
        return " ".join(badges)


# ========== ATUALIZAÇÃO DE CAMPOS DO FORMULÁRIO ==========

class ClienteField(Enum):
    CNPJ = 'cnpj'
    PERIODICIDADE = 'periodicidade'
    STATUS_CLIENTE = 'statusCliente'
    NACIONAL = 'nacional'
    MUNICIPAL = 'municipal'
    ESTADUAL = 'estadual'


class EmpresaField(Enum):
    ID_EMPRESA = 'idEmpresa'
    NOME_EMPRESA = 'nomeEmpresa'
    CNPJ = 'cnpj'


@dataclass(frozen=True)
class ClienteFieldUpdate:
    """Alteração de um campo de primeiro nível do cliente"""
    field: ClienteField
    value: Any

    @property
    def error_key(self) -> str:
        return self.field.value


@dataclass(frozen=True)
class EmpresaFieldUpdate:
    """Alteração de um campo da empresa vinculada"""
    field: EmpresaField
    value: str

    @property
    def error_key(self) -> str:
        return f"empresa.{self.field.value}"


FieldUpdate = Union[ClienteFieldUpdate, EmpresaFieldUpdate]


def apply_field_update(draft: ClienteDraft, update: FieldUpdate) -> ClienteDraft:
    """Retorna um novo rascunho com a alteração aplicada"""
    if isinstance(update, EmpresaFieldUpdate):
        if update.field is EmpresaField.ID_EMPRESA:
            empresa = replace(draft.empresa, id_empresa=update.value)
        elif update.field is EmpresaField.NOME_EMPRESA:
            empresa = replace(draft.empresa, nome_empresa=update.value)
        elif update.field is EmpresaField.CNPJ:
            empresa = replace(draft.empresa, cnpj=update.value)
        else:
            raise ValueError(f"Campo de empresa desconhecido: {update.field}")
        return replace(draft, empresa=empresa)

    if isinstance(update, ClienteFieldUpdate):
        if update.field is ClienteField.CNPJ:
            return replace(draft, cnpj=update.value)
        if update.field is ClienteField.PERIODICIDADE:
            return replace(draft, periodicidade=update.value)
        if update.field is ClienteField.STATUS_CLIENTE:
            return replace(draft, status_cliente=update.value)
        if update.field is ClienteField.NACIONAL:
            return replace(draft, nacional=bool(update.value))
        if update.field is ClienteField.MUNICIPAL:
            return replace(draft, municipal=bool(update.value))
        if update.field is ClienteField.ESTADUAL:
            return replace(draft, estadual=bool(update.value))
        raise ValueError(f"Campo de cliente desconhecido: {update.field}")

    raise TypeError(f"Tipo de atualização não suportado: {type(update).__name__}")


def parse_periodicidade(value: Optional[str]) -> int:
    """Converte o texto digitado em inteiro; valores inválidos viram 0"""
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0
