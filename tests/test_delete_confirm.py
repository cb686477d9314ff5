from unittest.mock import MagicMock

import pytest

from cnd_monitor.delete_confirm import DeleteConfirmation


@pytest.fixture
def on_confirm():
    return MagicMock()


@pytest.fixture
def confirmation(on_confirm):
    return DeleteConfirmation(on_confirm=on_confirm)


def test_single_message(confirmation):
    confirmation.open(['Acme (11.222.333/0001-81)'], is_multiple=False)

    assert confirmation.title == 'Confirmar Exclusão'
    assert confirmation.message == (
        "Você está prestes a excluir o cliente:\n"
        "\n"
        "Acme (11.222.333/0001-81)\n"
        "\n"
        "Esta ação não pode ser desfeita!"
    )
    assert confirmation.confirm_label == 'Excluir Cliente'


def test_multiple_message(confirmation):
    confirmation.open(['Acme', 'Beta', 'Gamma'], is_multiple=True)

    assert confirmation.message.splitlines() == [
        "Você está prestes a excluir 3 cliente(s):",
        "",
        "• Acme",
        "• Beta",
        "• Gamma",
        "",
        "Esta ação não pode ser desfeita!",
    ]
    assert confirmation.confirm_label == 'Excluir 3 Cliente(s)'


def test_confirm_success_closes(confirmation, on_confirm):
    confirmation.open(['Acme'], is_multiple=False)

    assert confirmation.confirm() is True

    on_confirm.assert_called_once_with()
    assert not confirmation.is_open
    assert not confirmation.is_loading


def test_confirm_failure_keeps_dialog_open(confirmation, on_confirm):
    on_confirm.side_effect = RuntimeError('falhou')
    confirmation.open(['Acme'], is_multiple=False)

    assert confirmation.confirm() is False

    assert confirmation.is_open
    assert not confirmation.is_loading


def test_confirm_when_closed_does_nothing(confirmation, on_confirm):
    assert confirmation.confirm() is False
    on_confirm.assert_not_called()


def test_begin_confirm_blocks_while_loading(confirmation):
    confirmation.open(['Acme'], is_multiple=False)

    assert confirmation.begin_confirm() is True
    assert confirmation.is_loading
    assert confirmation.begin_confirm() is False


def test_cancel_runs_nothing(confirmation, on_confirm):
    confirmation.open(['Acme', 'Beta'], is_multiple=True)
    confirmation.close()

    assert not confirmation.is_open
    on_confirm.assert_not_called()
