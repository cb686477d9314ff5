"""
Monitoramento de Certidões (CND) - Arquivo Principal

Console administrativo de clientes e da configuração de monitoramento
de certidões negativas de débito (nacional, municipal, estadual).

MODOS DE USO:
==============

1. INTERFACE GRÁFICA (padrão):
   python main.py
   python main.py --modo gui

2. CONSOLE:
   python main.py --modo listar                       # Lista clientes
   python main.py --modo listar --empresa acme        # Lista filtrando por empresa
   python main.py --modo exportar --cnpj 11.222       # Exporta a lista filtrada para Excel

3. DIAGNÓSTICO:
   python main.py --config-test                       # Testar configurações e conexão

CONFIGURAÇÃO (arquivo .env):
- CND_API_URL=http://localhost:8080
"""

import argparse

from cnd_monitor.config import active_config
from cnd_monitor.cliente_client import ClienteClient
from cnd_monitor.excel_export import ClienteExcelExporter
from cnd_monitor.monitoramento import MonitoramentoScreen, Notification

# Configurar logging com arquivo de log com timestamp
logger = active_config.setup_logging('main_system')


def main():
    """
    Função principal do sistema
    """
    parser = argparse.ArgumentParser(
        description='Monitoramento de Certidões (CND) - Clientes',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXEMPLOS DE USO:
  python main.py                              # Interface gráfica (padrão)
  python main.py --modo listar --empresa acme # Listar clientes filtrados
  python main.py --modo exportar              # Exportar clientes para Excel
  python main.py --config-test                # Testar configurações
        """
    )

    parser.add_argument('--modo',
                        choices=['gui', 'listar', 'exportar'],
                        default='gui',
                        help='Modo: gui=interface gráfica (padrão), listar=console, exportar=Excel')

    # Filtros
    parser.add_argument('--empresa', default='', help='Filtro por nome da empresa')
    parser.add_argument('--cnpj', default='', help='Filtro por CNPJ do cliente')

    # Exportação
    parser.add_argument('--arquivo', help='Nome do arquivo Excel gerado')

    # Testes
    parser.add_argument('--config-test', action='store_true', help='Testar configurações do sistema')

    args = parser.parse_args()

    try:
        if args.config_test:
            ok = test_configuration()
            raise SystemExit(0 if ok else 1)
        elif args.modo == 'gui':
            from gui_main import main as gui_main
            gui_main()
        elif args.modo == 'listar':
            listar_clientes(args.empresa, args.cnpj)
        elif args.modo == 'exportar':
            exportar_clientes(args.empresa, args.cnpj, args.arquivo)
    except KeyboardInterrupt:
        print("\n⏹️  Execução interrompida pelo usuário")


def test_configuration():
    """
    Testa configurações do sistema
    """
    logger.info("=== TESTE DE CONFIGURAÇÃO ===")

    if not active_config.validate_config():
        logger.error("❌ Configuração inválida")
        return False

    logger.info(f"✅ CND_API_URL: {active_config.CND_API_URL}")

    client = ClienteClient()
    if client.test_connection():
        logger.info("✅ Conexão com a API de clientes estabelecida")
    else:
        logger.error("❌ Falha na conexão com a API de clientes")
        return False

    logger.info("✅ Todas as configurações estão corretas!")
    return True


def _print_notification(notification: Notification):
    prefix = "❌" if notification.is_error else "✅"
    print(f"{prefix} {notification.title}: {notification.description}")


def _carregar_tela(empresa: str, cnpj: str) -> MonitoramentoScreen:
    screen = MonitoramentoScreen(ClienteClient(), notify=_print_notification)
    screen.set_search_empresa(empresa)
    screen.set_search_cnpj(cnpj)
    screen.mount()
    return screen


def listar_clientes(empresa: str = '', cnpj: str = ''):
    """
    Lista clientes no console aplicando os mesmos filtros da tela
    """
    logger.info("=== LISTAGEM DE CLIENTES ===")
    screen = _carregar_tela(empresa, cnpj)

    clientes = screen.filtered
    if not clientes:
        print(screen.empty_message)
        return

    print(f"{'ID':>5}  {'Empresa':<40} {'CNPJ do Cliente':<20} {'Status':<10} CND")
    print("-" * 90)
    for cliente in clientes:
        print(f"{cliente.id:>5}  {cliente.empresa.nome_empresa[:40]:<40} "
              f"{cliente.cnpj:<20} {cliente.status_label:<10} {cliente.cnd_badges}")

    stats = screen.stats
    print("-" * 90)
    print(f"Total: {stats['total']} | Filtrados: {stats['filtrados']}")


def exportar_clientes(empresa: str = '', cnpj: str = '', arquivo: str = None):
    """
    Exporta para Excel os clientes que passam nos filtros
    """
    logger.info("=== EXPORTAÇÃO DE CLIENTES ===")
    screen = _carregar_tela(empresa, cnpj)

    clientes = screen.filtered
    if not clientes:
        logger.warning(f"⚠️ {screen.empty_message}")
        return None

    exporter = ClienteExcelExporter()
    filepath = exporter.export_clientes_to_excel(clientes, arquivo)
    logger.info(f"📊 Arquivo gerado: {filepath}")
    logger.info(f"Resumo: {exporter.get_export_summary(filepath)}")
    return filepath


if __name__ == "__main__":
    main()
