"""
Janelas modais da GUI: formulário de cliente e confirmação de exclusão
"""
import logging
import tkinter as tk

import customtkinter as ctk

from .cliente_form import ClienteForm
from .delete_confirm import DeleteConfirmation
from .models import (
    ClienteField,
    ClienteFieldUpdate,
    EmpresaField,
    EmpresaFieldUpdate,
    parse_periodicidade,
)

logger = logging.getLogger(__name__)

ERROR_COLOR = "#E74C3C"


def center_window(window):
    window.update_idletasks()
    width = window.winfo_width()
    height = window.winfo_height()
    x = (window.winfo_screenwidth() // 2) - (width // 2)
    y = (window.winfo_screenheight() // 2) - (height // 2)
    window.geometry(f"{width}x{height}+{x}+{y}")


class ClienteFormDialog(ctk.CTkToplevel):
    """Modal de cadastro/edição ligado a um ClienteForm já aberto"""

    # (chave de erro, rótulo, fábrica da atualização)
    TEXT_FIELDS = [
        ('cnpj', "CNPJ do Cliente * (XX.XXX.XXX/XXXX-XX)",
         lambda v: ClienteFieldUpdate(ClienteField.CNPJ, v)),
        ('empresa.idEmpresa', "ID da Empresa * (até 6 caracteres)",
         lambda v: EmpresaFieldUpdate(EmpresaField.ID_EMPRESA, v)),
        ('empresa.cnpj', "CNPJ da Empresa * (XX.XXX.XXX/XXXX-XX)",
         lambda v: EmpresaFieldUpdate(EmpresaField.CNPJ, v)),
        ('empresa.nomeEmpresa', "Nome da Empresa *",
         lambda v: EmpresaFieldUpdate(EmpresaField.NOME_EMPRESA, v)),
        ('periodicidade', "Periodicidade (dias) *",
         lambda v: ClienteFieldUpdate(ClienteField.PERIODICIDADE, parse_periodicidade(v))),
        ('statusCliente', "Status do Cliente * (ativo/inativo)",
         lambda v: ClienteFieldUpdate(ClienteField.STATUS_CLIENTE, v)),
    ]

    CHECK_FIELDS = [
        (ClienteField.NACIONAL, "Nacional"),
        (ClienteField.MUNICIPAL, "Municipal"),
        (ClienteField.ESTADUAL, "Estadual"),
    ]

    def __init__(self, parent, app, form: ClienteForm):
        super().__init__(parent)
        self.app = app
        self.form = form

        self.title(form.title)
        self.geometry("560x640")
        self.transient(parent)
        self.grab_set()
        self.bind("<Escape>", lambda e: self.cancel())
        self.protocol("WM_DELETE_WINDOW", self.cancel)

        self.text_vars = {}
        self.last_values = {}
        self.error_labels = {}
        self.check_vars = {}
        self._populating = False

        self._create_widgets()
        self._populate()

        self.after(100, lambda: center_window(self))

    def _create_widgets(self):
        ctk.CTkLabel(
            self,
            text=self.form.title,
            font=ctk.CTkFont(size=18, weight="bold")
        ).pack(anchor="w", padx=20, pady=(20, 10))

        fields_frame = ctk.CTkScrollableFrame(self)
        fields_frame.pack(fill="both", expand=True, padx=20, pady=(0, 10))

        for error_key, label, make_update in self.TEXT_FIELDS:
            ctk.CTkLabel(fields_frame, text=label).pack(anchor="w", padx=10, pady=(8, 2))
            var = tk.StringVar(value="")
            ctk.CTkEntry(fields_frame, textvariable=var).pack(fill="x", padx=10)
            var.trace_add("write", lambda *args, k=error_key, f=make_update: self.on_text_change(k, f))
            self.text_vars[error_key] = var
            self.last_values[error_key] = ""

            error_label = ctk.CTkLabel(fields_frame, text="", text_color=ERROR_COLOR, font=ctk.CTkFont(size=11))
            error_label.pack(anchor="w", padx=10)
            self.error_labels[error_key] = error_label

        ctk.CTkLabel(fields_frame, text="Tipos de CND *").pack(anchor="w", padx=10, pady=(8, 2))
        checks_frame = ctk.CTkFrame(fields_frame, fg_color="transparent")
        checks_frame.pack(fill="x", padx=10)

        for field, label in self.CHECK_FIELDS:
            var = tk.BooleanVar(value=False)
            ctk.CTkCheckBox(
                checks_frame,
                text=label,
                variable=var,
                command=lambda f=field, v=var: self.form.update_field(ClienteFieldUpdate(f, v.get()))
            ).pack(side="left", padx=(0, 15), pady=5)
            self.check_vars[field] = var

        buttons_frame = ctk.CTkFrame(self, fg_color="transparent")
        buttons_frame.pack(fill="x", padx=20, pady=(0, 20))

        self.submit_btn = ctk.CTkButton(
            buttons_frame,
            text=f"💾 {self.form.submit_label}",
            command=self.submit,
            fg_color="green",
            hover_color="darkgreen"
        )
        self.submit_btn.pack(side="right", padx=(10, 0))

        self.cancel_btn = ctk.CTkButton(
            buttons_frame,
            text="❌ Cancelar",
            command=self.cancel,
            fg_color="gray50",
            hover_color="gray40"
        )
        self.cancel_btn.pack(side="right")

    def _populate(self):
        draft = self.form.draft
        values = {
            'cnpj': draft.cnpj,
            'empresa.idEmpresa': draft.empresa.id_empresa,
            'empresa.cnpj': draft.empresa.cnpj,
            'empresa.nomeEmpresa': draft.empresa.nome_empresa,
            'periodicidade': str(draft.periodicidade),
            'statusCliente': draft.status_cliente,
        }
        self._populating = True
        try:
            for error_key, value in values.items():
                self.last_values[error_key] = value
                self.text_vars[error_key].set(value)
        finally:
            self._populating = False

        self.check_vars[ClienteField.NACIONAL].set(draft.nacional)
        self.check_vars[ClienteField.MUNICIPAL].set(draft.municipal)
        self.check_vars[ClienteField.ESTADUAL].set(draft.estadual)

    def on_text_change(self, error_key: str, make_update):
        """Chamado a cada escrita no StringVar do campo"""
        if self._populating:
            return

        var = self.text_vars[error_key]
        value = var.get()
        if value == self.last_values[error_key]:
            return

        self.form.update_field(make_update(value))

        # CNPJ recebe a máscara enquanto é digitado
        if error_key in ('cnpj', 'empresa.cnpj'):
            value = self.form.draft.cnpj if error_key == 'cnpj' else self.form.draft.empresa.cnpj
            self.last_values[error_key] = value
            if var.get() != value:
                var.set(value)
        else:
            self.last_values[error_key] = value

        self._show_errors()

    def _show_errors(self):
        for error_key, label in self.error_labels.items():
            label.configure(text=self.form.errors.get(error_key, ""))

    def _set_busy(self, busy: bool):
        state = "disabled" if busy else "normal"
        self.submit_btn.configure(state=state, text="⏳ Salvando..." if busy else f"💾 {self.form.submit_label}")
        self.cancel_btn.configure(state=state)

    def submit(self):
        draft = self.form.begin_submit()
        self._show_errors()
        if draft is None:
            return

        self._set_busy(True)
        self.app.run_in_background(lambda: self.form.on_submit(draft), self._on_submit_done)

    def _on_submit_done(self, error):
        if error is not None:
            self.form.fail_submit(error)
            self._set_busy(False)
            return

        self.form.complete_submit()
        self.app.refresh_table()
        self.destroy()

    def cancel(self):
        if self.form.is_submitting:
            return
        self.form.close()
        self.destroy()


class DeleteConfirmDialog(ctk.CTkToplevel):
    """Modal de confirmação ligado a um DeleteConfirmation já aberto"""

    def __init__(self, parent, app, confirmation: DeleteConfirmation):
        super().__init__(parent)
        self.app = app
        self.confirmation = confirmation

        self.title(confirmation.title)
        self.geometry("480x360")
        self.transient(parent)
        self.grab_set()
        self.bind("<Escape>", lambda e: self.cancel())
        self.protocol("WM_DELETE_WINDOW", self.cancel)

        self._create_widgets()
        self.after(100, lambda: center_window(self))

    def _create_widgets(self):
        ctk.CTkLabel(
            self,
            text=f"⚠️ {self.confirmation.title}",
            text_color=ERROR_COLOR,
            font=ctk.CTkFont(size=18, weight="bold")
        ).pack(anchor="w", padx=20, pady=(20, 10))

        self.message_text = ctk.CTkTextbox(self, height=180)
        self.message_text.pack(fill="both", expand=True, padx=20, pady=(0, 10))
        self._render_message()

        buttons_frame = ctk.CTkFrame(self, fg_color="transparent")
        buttons_frame.pack(fill="x", padx=20, pady=(0, 20))

        self.confirm_btn = ctk.CTkButton(
            buttons_frame,
            text=f"🗑️ {self.confirmation.confirm_label}",
            command=self.confirm,
            fg_color="red",
            hover_color="darkred"
        )
        self.confirm_btn.pack(side="right", padx=(10, 0))

        self.cancel_btn = ctk.CTkButton(
            buttons_frame,
            text="❌ Cancelar",
            command=self.cancel,
            fg_color="gray50",
            hover_color="gray40"
        )
        self.cancel_btn.pack(side="right")

    def _render_message(self):
        self.message_text.configure(state="normal")
        self.message_text.delete("1.0", "end")
        self.message_text.insert("1.0", self.confirmation.message)
        self.message_text.configure(state="disabled")

    def _set_busy(self, busy: bool):
        state = "disabled" if busy else "normal"
        label = "⏳ Excluindo..." if busy else f"🗑️ {self.confirmation.confirm_label}"
        self.confirm_btn.configure(state=state, text=label)
        self.cancel_btn.configure(state=state)

    def confirm(self):
        if not self.confirmation.begin_confirm():
            return
        self._set_busy(True)
        self.app.run_in_background(self.confirmation.on_confirm, self._on_confirm_done)

    def _on_confirm_done(self, error):
        self.app.refresh_table()

        if error is not None:
            self.confirmation.fail_confirm(error)
            if not self.confirmation.is_open:
                # Nada restou para excluir
                self.destroy()
                return
            # A exclusão em lote pode ter sido parcial: mostra o que restou
            self._render_message()
            self._set_busy(False)
            return

        self.confirmation.complete_confirm()
        self.destroy()

    def cancel(self):
        if self.confirmation.is_loading:
            return
        self.confirmation.close()
        self.destroy()
