"""
Confirmação de exclusão de clientes
"""
import logging
from typing import Callable, List

logger = logging.getLogger(__name__)

IRREVERSIBLE_WARNING = "Esta ação não pode ser desfeita!"


class DeleteConfirmation:
    """Só executa a ação destrutiva após confirmação explícita"""

    def __init__(self, on_confirm: Callable[[], None]):
        self.on_confirm = on_confirm
        self.is_open = False
        self.is_loading = False
        self.names: List[str] = []
        self.is_multiple = False

    def open(self, names: List[str], is_multiple: bool):
        self.names = list(names)
        self.is_multiple = is_multiple
        self.is_loading = False
        self.is_open = True

    def close(self):
        self.is_open = False
        self.is_loading = False

    @property
    def title(self) -> str:
        return "Confirmar Exclusão"

    @property
    def message(self) -> str:
        if self.is_multiple:
            lines = [f"Você está prestes a excluir {len(self.names)} cliente(s):", ""]
            lines.extend(f"• {name}" for name in self.names)
        else:
            lines = ["Você está prestes a excluir o cliente:", ""]
            if self.names:
                lines.append(self.names[0])
        lines.extend(["", IRREVERSIBLE_WARNING])
        return "\n".join(lines)

    @property
    def confirm_label(self) -> str:
        if self.is_multiple:
            return f"Excluir {len(self.names)} Cliente(s)"
        return "Excluir Cliente"

    def begin_confirm(self) -> bool:
        if not self.is_open or self.is_loading:
            return False
        self.is_loading = True
        return True

    def complete_confirm(self):
        self.close()

    def fail_confirm(self, error: Exception):
        # Permanece aberto; o chamador já exibiu o erro
        logger.error(f"Erro durante a exclusão: {error}")
        self.is_loading = False

    def confirm(self) -> bool:
        """
        Executa a ação de exclusão

        Returns:
            True se a ação foi concluída e o modal fechado
        """
        if not self.begin_confirm():
            return False

        try:
            self.on_confirm()
        except Exception as e:
            self.fail_confirm(e)
            return False

        self.complete_confirm()
        return True
