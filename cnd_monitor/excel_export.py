"""
Exportação da lista de clientes CND para planilha Excel
"""
import logging
import os
from datetime import datetime
from typing import Any, Dict, List

import pandas as pd

from .config import active_config
from .models import Cliente

logger = logging.getLogger(__name__)

CLIENTES_SHEET = 'Clientes'
RESUMO_SHEET = 'Resumo'


class ClienteExcelExporter:
    """Exporta clientes e resumo do monitoramento para .xlsx"""

    def __init__(self, output_folder: str = None):
        self.output_folder = output_folder or active_config.EXCEL_OUTPUT_FOLDER
        self._ensure_output_folder()

    def _ensure_output_folder(self):
        """Cria pasta de saída se não existir"""
        os.makedirs(self.output_folder, exist_ok=True)

    def export_clientes_to_excel(self, clientes: List[Cliente], filename: str = None) -> str:
        """
        Exporta clientes para planilha

        Args:
            clientes: Clientes a exportar (normalmente a visão filtrada)
            filename: Nome do arquivo (opcional)

        Returns:
            Caminho do arquivo gerado
        """
        if not clientes:
            raise ValueError("Nenhum cliente fornecido para exportação")

        logger.info(f"Iniciando exportação de {len(clientes)} cliente(s) para Excel")

        # Gerar nome do arquivo se não fornecido
        if not filename:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"clientes_cnd_{timestamp}.xlsx"

        # Garantir extensão .xlsx
        if not filename.endswith('.xlsx'):
            filename += '.xlsx'

        filepath = os.path.join(self.output_folder, filename)

        try:
            clientes_df = pd.DataFrame(self._prepare_export_data(clientes))
            resumo_df = self._create_resumo_dataframe(clientes)

            with pd.ExcelWriter(filepath, engine='openpyxl') as writer:
                clientes_df.to_excel(writer, sheet_name=CLIENTES_SHEET, index=False)
                resumo_df.to_excel(writer, sheet_name=RESUMO_SHEET, index=False)

                self._apply_excel_formatting(writer)

            logger.info(f"Arquivo Excel gerado com sucesso: {filepath}")
            return filepath

        except Exception as e:
            logger.error(f"Erro ao gerar arquivo Excel: {e}")
            raise

    def _prepare_export_data(self, clientes: List[Cliente]) -> List[Dict[str, Any]]:
        export_data = []
        data_exportacao = datetime.now().strftime("%d/%m/%Y %H:%M:%S")

        for cliente in clientes:
            export_data.append({
                'ID': cliente.id,
                'ID da Empresa': cliente.empresa.id_empresa,
                'Nome da Empresa': cliente.empresa.nome_empresa,
                'CNPJ da Empresa': cliente.empresa.cnpj,
                'CNPJ do Cliente': cliente.cnpj,
                'Status': cliente.status_label,
                'Periodicidade (dias)': cliente.periodicidade,
                'CND Nacional': 'Sim' if cliente.nacional else 'Não',
                'CND Municipal': 'Sim' if cliente.municipal else 'Não',
                'CND Estadual': 'Sim' if cliente.estadual else 'Não',
                'DATA_EXPORTACAO': data_exportacao,
            })

        return export_data

    def _create_resumo_dataframe(self, clientes: List[Cliente]) -> pd.DataFrame:
        """Totais por status e por tipo de CND"""
        df = pd.DataFrame([{
            'status': cliente.status_label,
            'nacional': cliente.nacional,
            'municipal': cliente.municipal,
            'estadual': cliente.estadual,
        } for cliente in clientes])

        linhas = [{'Indicador': 'Total de clientes', 'Quantidade': len(df)}]

        for status, quantidade in df['status'].value_counts().sort_index().items():
            linhas.append({'Indicador': f'Status: {status}', 'Quantidade': int(quantidade)})

        linhas.append({'Indicador': 'CND Nacional', 'Quantidade': int(df['nacional'].sum())})
        linhas.append({'Indicador': 'CND Municipal', 'Quantidade': int(df['municipal'].sum())})
        linhas.append({'Indicador': 'CND Estadual', 'Quantidade': int(df['estadual'].sum())})

        return pd.DataFrame(linhas)

    def _apply_excel_formatting(self, writer):
        """Aplica formatação ao arquivo Excel"""
        from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
        from openpyxl.utils import get_column_letter

        header_fill = PatternFill(start_color='366092', end_color='366092', fill_type='solid')
        header_font = Font(color='FFFFFF', bold=True)

        thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        for sheet_name in writer.sheets:
            worksheet = writer.sheets[sheet_name]

            # Formatar cabeçalho
            for cell in worksheet[1]:
                cell.font = header_font
                cell.fill = header_fill
                cell.alignment = Alignment(horizontal='center', vertical='center')
                cell.border = thin_border

            # Auto-ajustar largura das colunas
            for column in worksheet.columns:
                column_letter = get_column_letter(column[0].column)
                max_length = max(len(str(cell.value)) for cell in column if cell.value is not None)
                worksheet.column_dimensions[column_letter].width = min(max_length + 2, 50)

            # Congelar primeira linha
            worksheet.freeze_panes = 'A2'

    def get_export_summary(self, filepath: str) -> Dict[str, Any]:
        """
        Retorna resumo da exportação

        Args:
            filepath: Caminho do arquivo exportado
        """
        if not os.path.exists(filepath):
            return {'error': 'Arquivo não encontrado'}

        df = pd.read_excel(filepath, sheet_name=CLIENTES_SHEET)
        file_stats = os.stat(filepath)

        return {
            'arquivo': os.path.basename(filepath),
            'caminho_completo': filepath,
            'total_registros': len(df),
            'status': df['Status'].value_counts().to_dict(),
            'tamanho_bytes': file_stats.st_size,
            'data_criacao': datetime.fromtimestamp(file_stats.st_ctime).strftime("%d/%m/%Y %H:%M:%S"),
        }
