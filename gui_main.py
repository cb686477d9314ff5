"""
GUI Principal do Monitoramento de Certidões (CND)
Interface moderna usando CustomTkinter
"""

import customtkinter as ctk
import tkinter as tk
from tkinter import ttk, messagebox
import threading
import os
from datetime import datetime
import queue

from cnd_monitor.config import active_config
from cnd_monitor.cliente_client import ClienteClient
from cnd_monitor.dialogs import ClienteFormDialog, DeleteConfirmDialog
from cnd_monitor.excel_export import ClienteExcelExporter
from cnd_monitor.monitoramento import MonitoramentoScreen, Notification

# Configurar tema do CustomTkinter
ctk.set_appearance_mode("dark")  # Modes: "System" (standard), "Dark", "Light"
ctk.set_default_color_theme("blue")  # Themes: "blue" (standard), "green", "dark-blue"

CHECKED = "☑"
UNCHECKED = "☐"


class CNDMonitorGUI:
    def __init__(self, client: ClienteClient = None):
        self.root = ctk.CTk()
        self.root.title("Monitoramento de Certidões (CND)")
        self.root.geometry("1200x800")
        self.root.minsize(1000, 600)

        # Variáveis
        self.search_empresa = tk.StringVar()
        self.search_cnpj = tk.StringVar()
        self.header_var = tk.BooleanVar(value=False)
        self.log_queue = queue.Queue()
        self.ui_queue = queue.Queue()

        self.client = client or ClienteClient()
        self.screen = MonitoramentoScreen(self.client, notify=self.notify)
        self.excel_exporter = ClienteExcelExporter()

        # Configurar interface
        self.setup_ui()
        self.setup_logging()
        self.process_ui_queue()

        self.root.protocol("WM_DELETE_WINDOW", self.on_closing)

        # Carga inicial (uma única vez)
        self.status_label.configure(text="⏳ Carregando clientes...")
        self.run_in_background(self.screen.mount, lambda error: self.refresh_table())

    def on_closing(self):
        """Tratamento de fechamento da aplicação"""
        if self.screen.form_loading or self.screen.delete_loading:
            if not messagebox.askyesno("Confirmar Saída",
                                       "Existe uma operação em andamento. Deseja realmente sair?"):
                return
        self.root.destroy()

    # ========== EXECUÇÃO EM SEGUNDO PLANO ==========

    def run_in_background(self, task, on_done):
        """
        Executa `task` em thread separada e chama `on_done(erro)` na thread
        da interface (erro é None em caso de sucesso)
        """
        def worker():
            try:
                task()
            except Exception as e:
                # `e` deixa de existir ao fim do except; fixa o valor no lambda
                self.ui_queue.put(lambda error=e: on_done(error))
            else:
                self.ui_queue.put(lambda: on_done(None))

        thread = threading.Thread(target=worker)
        thread.daemon = True
        thread.start()

    def process_ui_queue(self):
        """Executa na thread da interface os callbacks vindos das threads"""
        try:
            while True:
                callback = self.ui_queue.get_nowait()
                callback()
        except queue.Empty:
            pass
        finally:
            # A fila continua sendo consumida mesmo se um callback falhar
            self.root.after(100, self.process_ui_queue)

    def notify(self, notification: Notification):
        """Recebe notificações da tela (de qualquer thread)"""
        self.ui_queue.put(lambda: self.show_notification(notification))

    def show_notification(self, notification: Notification):
        self.status_label.configure(text=f"{notification.title}: {notification.description}")
        if notification.is_error:
            self.log_message(f"❌ {notification.title}: {notification.description}")
            messagebox.showerror(notification.title, notification.description)
        else:
            self.log_message(f"✅ {notification.title}: {notification.description}")

    # ========== INTERFACE ==========

    def setup_ui(self):
        """Configura a interface principal"""
        main_frame = ctk.CTkFrame(self.root)
        main_frame.pack(fill="both", expand=True, padx=10, pady=10)

        title_label = ctk.CTkLabel(
            main_frame,
            text="📄 Monitoramento de Certidões (CND)",
            font=ctk.CTkFont(size=24, weight="bold")
        )
        title_label.pack(pady=(20, 5))

        ctk.CTkLabel(
            main_frame,
            text="Gerencie e monitore os clientes e suas certidões",
            font=ctk.CTkFont(size=14)
        ).pack(pady=(0, 15))

        self.notebook = ctk.CTkTabview(main_frame)
        self.notebook.pack(fill="both", expand=True, padx=20, pady=10)

        self.create_clientes_tab()
        self.create_logs_tab()
        self.create_config_tab()

    def create_clientes_tab(self):
        """Aba principal com filtros, indicadores e tabela de clientes"""
        tab = self.notebook.add("📋 Clientes")

        # Filtros e ações
        filter_frame = ctk.CTkFrame(tab)
        filter_frame.pack(fill="x", padx=10, pady=(10, 5))

        ctk.CTkLabel(filter_frame, text="🔍 Filtros e Ações", font=ctk.CTkFont(size=16)).grid(
            row=0, column=0, columnspan=3, sticky="w", padx=10, pady=(10, 5))

        ctk.CTkLabel(filter_frame, text="Nome da Empresa").grid(row=1, column=0, sticky="w", padx=10)
        ctk.CTkLabel(filter_frame, text="CNPJ do Cliente").grid(row=1, column=1, sticky="w", padx=10)

        empresa_entry = ctk.CTkEntry(filter_frame, textvariable=self.search_empresa,
                                     placeholder_text="Buscar por nome da empresa...", width=300)
        empresa_entry.grid(row=2, column=0, sticky="ew", padx=10, pady=(0, 10))

        cnpj_entry = ctk.CTkEntry(filter_frame, textvariable=self.search_cnpj,
                                  placeholder_text="Buscar por CNPJ do cliente...", width=300)
        cnpj_entry.grid(row=2, column=1, sticky="ew", padx=10, pady=(0, 10))

        self.search_empresa.trace_add("write", lambda *args: self.on_filter_change())
        self.search_cnpj.trace_add("write", lambda *args: self.on_filter_change())

        ctk.CTkButton(
            filter_frame,
            text="➕ Cadastrar Novo Cliente",
            command=self.open_create_form,
            fg_color="green",
            hover_color="darkgreen",
            height=35
        ).grid(row=2, column=2, sticky="ew", padx=10, pady=(0, 10))

        filter_frame.grid_columnconfigure((0, 1, 2), weight=1)

        # Barra de seleção
        selection_frame = ctk.CTkFrame(tab)
        selection_frame.pack(fill="x", padx=10, pady=5)

        self.header_checkbox = ctk.CTkCheckBox(
            selection_frame,
            text="Selecionar todos",
            variable=self.header_var,
            command=self.on_select_all
        )
        self.header_checkbox.pack(side="left", padx=10, pady=10)

        self.selection_label = ctk.CTkLabel(selection_frame, text="")
        self.selection_label.pack(side="left", padx=10)

        self.bulk_delete_btn = ctk.CTkButton(
            selection_frame,
            text="🗑️ Excluir Selecionados",
            command=self.open_bulk_delete,
            fg_color="red",
            hover_color="darkred",
            state="disabled"
        )
        self.bulk_delete_btn.pack(side="right", padx=10, pady=10)

        ctk.CTkButton(
            selection_frame,
            text="📊 Exportar Excel",
            command=self.export_to_excel,
            fg_color="#4ECDC4",
            hover_color="#45B7B8"
        ).pack(side="right", padx=(0, 10), pady=10)

        ctk.CTkButton(
            selection_frame,
            text="🔄 Atualizar",
            command=self.load_clientes,
            width=120
        ).pack(side="right", padx=(0, 10), pady=10)

        # Indicadores
        stats_frame = ctk.CTkFrame(tab)
        stats_frame.pack(fill="x", padx=10, pady=5)

        self.stats_labels = {}
        for key, label in (('total', "Total de Clientes"),
                           ('filtrados', "Clientes Filtrados"),
                           ('selecionados', "Selecionados")):
            card = ctk.CTkFrame(stats_frame)
            card.pack(side="left", fill="x", expand=True, padx=5, pady=5)
            ctk.CTkLabel(card, text=label).pack(anchor="w", padx=10, pady=(5, 0))
            value_label = ctk.CTkLabel(card, text="0", font=ctk.CTkFont(size=24, weight="bold"))
            value_label.pack(anchor="w", padx=10, pady=(0, 5))
            self.stats_labels[key] = value_label

        # Tabela
        table_frame = ctk.CTkFrame(tab)
        table_frame.pack(fill="both", expand=True, padx=10, pady=5)

        self._style_treeview()

        columns = ("sel", "empresa", "cnpj", "status", "tipos")
        self.tree = ttk.Treeview(table_frame, columns=columns, show="headings",
                                 style="Custom.Treeview", selectmode="browse")
        headings = {
            "sel": "",
            "empresa": "Nome da Empresa",
            "cnpj": "CNPJ do Cliente",
            "status": "Status",
            "tipos": "Tipos de CND",
        }
        for col, text in headings.items():
            self.tree.heading(col, text=text)
        self.tree.column("sel", width=40, anchor="center", stretch=False)
        self.tree.column("empresa", width=350)
        self.tree.column("cnpj", width=180)
        self.tree.column("status", width=100)
        self.tree.column("tipos", width=120)

        scrollbar = ttk.Scrollbar(table_frame, orient="vertical", command=self.tree.yview)
        self.tree.configure(yscrollcommand=scrollbar.set)
        self.tree.pack(side="left", fill="both", expand=True)
        scrollbar.pack(side="right", fill="y")

        self.tree.bind("<Button-1>", self.on_tree_click)
        self.tree.bind("<Double-1>", self.on_tree_double_click)
        self.tree.bind("<Delete>", lambda e: self.open_row_delete())

        # Ações da linha + status
        actions_frame = ctk.CTkFrame(tab)
        actions_frame.pack(fill="x", padx=10, pady=(5, 10))

        ctk.CTkButton(actions_frame, text="✏️ Editar", command=self.open_edit_form, width=120).pack(
            side="left", padx=(10, 10), pady=10)
        ctk.CTkButton(actions_frame, text="🗑️ Excluir", command=self.open_row_delete, width=120).pack(
            side="left", padx=(0, 10), pady=10)

        self.status_label = ctk.CTkLabel(actions_frame, text="Pronto")
        self.status_label.pack(side="left", padx=10, pady=10)

    def _style_treeview(self):
        style = ttk.Style()
        dark = ctk.get_appearance_mode() == "Dark"
        bg_color = "#2b2b2b" if dark else "#ffffff"
        text_color = "#dce4ee" if dark else "#1a1a1a"
        header_bg = "#333333" if dark else "#e5e5e5"
        theme_to_use = "clam" if "clam" in style.theme_names() else "default"
        style.theme_use(theme_to_use)
        style.configure("Custom.Treeview", background=bg_color, foreground=text_color,
                        fieldbackground=bg_color, borderwidth=0, rowheight=28)
        style.map("Custom.Treeview", background=[('selected', "#1f6aa5")])
        style.configure("Custom.Treeview.Heading", background=header_bg, foreground=text_color, relief="flat")
        self.tree_style = style

    def create_logs_tab(self):
        """Aba de logs"""
        tab = self.notebook.add("📝 Logs")

        logs_frame = ctk.CTkFrame(tab)
        logs_frame.pack(fill="both", expand=True, padx=20, pady=10)

        controls_frame = ctk.CTkFrame(logs_frame)
        controls_frame.pack(fill="x", padx=10, pady=(10, 5))

        ctk.CTkButton(
            controls_frame,
            text="🔄 Atualizar Logs",
            command=self.refresh_logs,
            width=120
        ).pack(side="left", padx=(10, 10), pady=10)

        ctk.CTkButton(
            controls_frame,
            text="🗑️ Limpar Logs",
            command=self.clear_logs,
            width=120
        ).pack(side="left", padx=(0, 10), pady=10)

        self.logs_text = ctk.CTkTextbox(logs_frame, height=500)
        self.logs_text.pack(fill="both", expand=True, padx=10, pady=(0, 10))

    def create_config_tab(self):
        """Aba de configuração"""
        tab = self.notebook.add("⚙️ Configuração")

        config_frame = ctk.CTkFrame(tab)
        config_frame.pack(fill="both", expand=True, padx=20, pady=10)

        ctk.CTkLabel(config_frame, text="Configurações do Sistema:", font=ctk.CTkFont(size=16)).pack(
            anchor="w", padx=10, pady=(10, 5))

        ctk.CTkLabel(config_frame, text="URL da API de clientes (CND_API_URL):").pack(anchor="w", padx=10, pady=(10, 5))
        api_entry = ctk.CTkEntry(config_frame, width=400)
        api_entry.pack(anchor="w", padx=10, pady=(0, 10))
        api_entry.insert(0, self.client.base_url)
        api_entry.configure(state="disabled")

        ctk.CTkButton(
            config_frame,
            text="🔍 Testar Conexão",
            command=self.test_connection,
            width=150
        ).pack(anchor="w", padx=10, pady=10)

        self.config_info_text = ctk.CTkTextbox(config_frame, height=150)
        self.config_info_text.pack(fill="x", padx=10, pady=(0, 10))
        self.update_config_info()

    def update_config_info(self):
        info_text = f"API: {self.client.base_url}\n"
        info_text += f"Timeout: {self.client.timeout}s\n"
        info_text += f"Exclusões simultâneas: {self.client.max_workers}\n"
        info_text += f"Pasta de Exportação: {self.excel_exporter.output_folder}\n"
        info_text += f"Pasta de Logs: {active_config.LOGS_FOLDER}\n"
        info_text += f"Nível de Log: {active_config.LOG_LEVEL}\n"
        self.config_info_text.delete("1.0", "end")
        self.config_info_text.insert("1.0", info_text)

    # ========== LOGS ==========

    def setup_logging(self):
        """Configura o sistema de logging usando as configurações do config.py"""
        self.logger = active_config.setup_logging('gui_main')
        self.update_logs()

    def update_logs(self):
        """Atualiza os logs periodicamente"""
        try:
            while True:
                log_entry = self.log_queue.get_nowait()
                self.logs_text.insert("end", log_entry + "\n")
                self.logs_text.see("end")
        except queue.Empty:
            pass

        self.root.after(100, self.update_logs)

    def log_message(self, message):
        """Adiciona mensagem ao log da interface e ao logger"""
        timestamp = datetime.now().strftime("%H:%M:%S")
        self.log_queue.put(f"[{timestamp}] {message}")

        if hasattr(self, 'logger'):
            self.logger.info(message)

    def refresh_logs(self):
        """Recarrega o arquivo de log mais recente"""
        logs_dir = active_config.LOGS_FOLDER
        self.logs_text.delete("1.0", "end")

        if not os.path.exists(logs_dir):
            self.logs_text.insert("1.0", f"Diretório de logs não encontrado: {logs_dir}")
            return

        log_files = [f for f in os.listdir(logs_dir) if f.endswith('.log')]
        if not log_files:
            self.logs_text.insert("1.0", "Nenhum arquivo de log encontrado")
            return

        latest_log = max(log_files, key=lambda x: os.path.getctime(os.path.join(logs_dir, x)))
        try:
            with open(os.path.join(logs_dir, latest_log), 'r', encoding='utf-8') as f:
                self.logs_text.insert("1.0", f.read())
            self.logs_text.see("end")
        except OSError as e:
            self.logs_text.insert("1.0", f"Erro ao carregar logs: {e}")

    def clear_logs(self):
        if messagebox.askyesno("Confirmar", "Deseja limpar os logs?"):
            self.logs_text.delete("1.0", "end")

    # ========== LISTA ==========

    def load_clientes(self):
        self.status_label.configure(text="⏳ Carregando clientes...")
        self.log_message("Carregando lista de clientes")
        self.run_in_background(self.screen.load, lambda error: self.refresh_table())

    def refresh_table(self):
        """Redesenha tabela, indicadores e seleção a partir do estado da tela"""
        self.tree.delete(*self.tree.get_children())

        for cliente in self.screen.filtered:
            self.tree.insert("", "end", iid=str(cliente.id), values=(
                CHECKED if self.screen.is_selected(cliente.id) else UNCHECKED,
                cliente.empresa.nome_empresa,
                cliente.cnpj,
                cliente.status_label,
                cliente.cnd_badges,
            ))

        empty_message = self.screen.empty_message
        if empty_message and not self.screen.loading:
            self.status_label.configure(text=empty_message)
        elif not self.screen.loading and self.status_label.cget("text").startswith("⏳"):
            self.status_label.configure(text="Pronto")

        stats = self.screen.stats
        for key, label in self.stats_labels.items():
            label.configure(text=str(stats[key]))

        self.header_var.set(self.screen.header_checked)

        selecionados = stats['selecionados']
        if selecionados:
            self.selection_label.configure(text=f"{selecionados} cliente(s) selecionado(s)")
            self.bulk_delete_btn.configure(state="normal")
        else:
            self.selection_label.configure(text="")
            self.bulk_delete_btn.configure(state="disabled")

    def on_filter_change(self):
        self.screen.set_search_empresa(self.search_empresa.get())
        self.screen.set_search_cnpj(self.search_cnpj.get())
        self.refresh_table()

    def on_select_all(self):
        self.screen.select_all(self.header_var.get())
        self.refresh_table()

    def on_tree_click(self, event):
        """Clique na coluna de seleção marca/desmarca a linha"""
        if self.tree.identify_region(event.x, event.y) != "cell":
            return
        if self.tree.identify_column(event.x) != "#1":
            return
        row_id = self.tree.identify_row(event.y)
        if not row_id:
            return
        cliente_id = int(row_id)
        self.screen.toggle_select(cliente_id, not self.screen.is_selected(cliente_id))
        self.refresh_table()

    def on_tree_double_click(self, event):
        row_id = self.tree.identify_row(event.y)
        if row_id:
            self.tree.selection_set(row_id)
            self.open_edit_form()

    def _focused_cliente(self):
        selection = self.tree.selection()
        if not selection:
            messagebox.showwarning("Aviso", "Selecione um cliente na tabela primeiro")
            return None
        cliente_id = int(selection[0])
        return next((c for c in self.screen.clientes if c.id == cliente_id), None)

    # ========== MODAIS ==========

    def open_create_form(self):
        self.screen.start_create()
        ClienteFormDialog(self.root, self, self.screen.form)

    def open_edit_form(self):
        cliente = self._focused_cliente()
        if cliente is None:
            return
        self.screen.start_edit(cliente)
        ClienteFormDialog(self.root, self, self.screen.form)

    def open_row_delete(self):
        cliente = self._focused_cliente()
        if cliente is None:
            return
        if self.screen.start_delete(cliente.id):
            self.refresh_table()
            DeleteConfirmDialog(self.root, self, self.screen.delete_confirmation)

    def open_bulk_delete(self):
        if self.screen.start_delete():
            DeleteConfirmDialog(self.root, self, self.screen.delete_confirmation)

    # ========== UTILITÁRIOS ==========

    def export_to_excel(self):
        """Exporta a visão filtrada para Excel"""
        clientes = self.screen.filtered
        if not clientes:
            messagebox.showwarning("Aviso", "Nenhum cliente para exportar")
            return

        try:
            filepath = self.excel_exporter.export_clientes_to_excel(clientes)
            self.log_message(f"📊 Excel gerado: {filepath}")
            messagebox.showinfo("Sucesso", f"Arquivo Excel gerado com sucesso!\n\n{filepath}")
        except (OSError, ValueError) as e:
            self.log_message(f"❌ Erro ao exportar Excel: {e}")
            messagebox.showerror("Erro", f"Erro ao exportar Excel: {e}")

    def test_connection(self):
        def on_done(error):
            if self._connection_ok:
                messagebox.showinfo("Conexão", f"✅ Conexão com a API OK\n\n{self.client.base_url}")
            else:
                messagebox.showerror("Conexão", f"❌ Não foi possível conectar na API\n\n{self.client.base_url}")

        def task():
            self._connection_ok = self.client.test_connection()

        self._connection_ok = False
        self.run_in_background(task, on_done)

    def run(self):
        """Executa a GUI"""
        self.root.mainloop()


def main():
    """Função principal"""
    app = CNDMonitorGUI()
    app.run()


if __name__ == "__main__":
    main()
