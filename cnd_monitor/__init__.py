"""
Pacote principal do Monitoramento de Certidões (CND)

Contém os módulos principais do sistema:
- cliente_client: Cliente da API REST de clientes
- monitoramento: Tela principal (lista, filtros, seleção e fluxos)
- cliente_form: Formulário de cadastro/edição com validação
- delete_confirm: Confirmação de exclusão
- formatters: Máscaras de CNPJ e telefone
- excel_export: Exportação da lista para Excel
- config: Configurações do sistema
"""

__version__ = "1.0.0"
__author__ = "Monitoramento CND"
__description__ = "Console de clientes e monitoramento de certidões negativas de débito"
