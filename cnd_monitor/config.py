"""
Configurações do sistema de Monitoramento de Certidões (CND)
"""
import os
from dotenv import load_dotenv

# Carregar variáveis do arquivo .env
load_dotenv()


class Config:
    # Configurações da API de clientes
    CND_API_URL = os.getenv('CND_API_URL', 'http://localhost:8080')
    CND_API_TIMEOUT = float(os.getenv('CND_API_TIMEOUT', '30'))

    # Quantidade máxima de exclusões simultâneas na exclusão em lote
    CND_BULK_DELETE_WORKERS = int(os.getenv('CND_BULK_DELETE_WORKERS', '8'))

    # Configurações de arquivos
    EXCEL_OUTPUT_FOLDER = os.getenv('EXCEL_OUTPUT_FOLDER', './output/excel_export')

    # Configurações de log
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOGS_FOLDER = os.getenv('LOGS_FOLDER', './logs')

    # Valores padrão do formulário de cliente
    DEFAULT_PERIODICIDADE = 30
    DEFAULT_STATUS_CLIENTE = 'ativo'

    @classmethod
    def setup_logging(cls, script_name: str = 'cnd_monitor'):
        """
        Configura o sistema de logging com arquivo de log com timestamp

        Args:
            script_name: Nome do script para identificar o log
        """
        import logging
        from datetime import datetime

        # Criar pasta logs se não existir
        os.makedirs(cls.LOGS_FOLDER, exist_ok=True)

        # Gerar nome do arquivo com timestamp
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_filename = f"{script_name}_{timestamp}.log"
        log_filepath = os.path.join(cls.LOGS_FOLDER, log_filename)

        # Configurar logging
        logging.basicConfig(
            level=getattr(logging, cls.LOG_LEVEL.upper(), logging.INFO),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=[
                logging.FileHandler(log_filepath, encoding='utf-8'),
                logging.StreamHandler()  # Também mostra no console
            ]
        )

        # Log inicial
        logger = logging.getLogger(__name__)
        logger.info("=== INICIANDO MONITORAMENTO CND ===")
        logger.info(f"Arquivo de log: {log_filepath}")
        logger.info(f"Nível de log: {cls.LOG_LEVEL}")
        logger.info(f"API de clientes: {cls.CND_API_URL}")

        return logger

    @classmethod
    def validate_config(cls) -> bool:
        """Valida se as configurações obrigatórias estão definidas"""
        if not cls.CND_API_URL:
            print("ERRO: CND_API_URL não está definido!")
            return False

        if not cls.CND_API_URL.startswith(('http://', 'https://')):
            print(f"ERRO: CND_API_URL inválida: {cls.CND_API_URL}")
            print("A URL deve começar com http:// ou https://")
            return False

        if cls.CND_API_TIMEOUT <= 0:
            print(f"AVISO: CND_API_TIMEOUT deve ser positivo (atual: {cls.CND_API_TIMEOUT})")
            return False

        if cls.CND_BULK_DELETE_WORKERS < 1:
            print(f"AVISO: CND_BULK_DELETE_WORKERS deve ser ao menos 1 (atual: {cls.CND_BULK_DELETE_WORKERS})")
            return False

        return True


# Configurações específicas por ambiente
class DevelopmentConfig(Config):
    DEBUG = True


class ProductionConfig(Config):
    DEBUG = False


# Configuração ativa (definida pela variável CND_ENV)
active_config = ProductionConfig() if os.getenv('CND_ENV', '').lower() == 'production' else DevelopmentConfig()
