"""
test_server.py - Testes para o adaptador pygls

Propósito:
    Validar que os handlers pygls despacham no Router e emitem o payload
    correto (publish_diagnostics, log), e que erros do pipeline não viram
    diagnósticos vazios.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from liquid_language_server.errors import ConfigLoadError
from liquid_language_server.messages import Exit, Log, Notification, Response
from liquid_language_server.router import Router


def _fake_server(offenses=None, error=None):
    """Mock mínimo de LiquidLanguageServer com pipeline falso."""
    pipeline = MagicMock()
    if error is not None:
        pipeline.offenses.side_effect = error
    else:
        pipeline.offenses.return_value = offenses or []
    ls = MagicMock()
    ls.router = Router(pipeline)
    return ls


def _doc_params(uri="file:///proj/a.liquid"):
    return SimpleNamespace(text_document=SimpleNamespace(uri=uri))


# --- emit_payload ---

def test_emit_publish_diagnostics():
    from liquid_language_server.server import emit_payload

    ls = MagicMock()
    payload = Notification(
        method="textDocument/publishDiagnostics",
        params={"uri": "file:///proj/a.liquid", "diagnostics": []},
    )

    assert emit_payload(ls, payload) is None
    ls.publish_diagnostics.assert_called_once_with("file:///proj/a.liquid", [])


def test_emit_other_notification():
    from liquid_language_server.server import emit_payload

    ls = MagicMock()
    emit_payload(ls, Notification(method="window/showMessage", params={"type": 3, "message": "oi"}))
    ls.send_notification.assert_called_once_with("window/showMessage", {"type": 3, "message": "oi"})
    ls.publish_diagnostics.assert_not_called()


def test_emit_log():
    from liquid_language_server.server import emit_payload

    ls = MagicMock()
    emit_payload(ls, Log(message="initialized!"))
    ls.show_message_log.assert_called_once_with("initialized!")


def test_emit_response_returns_result():
    from liquid_language_server.server import emit_payload

    assert emit_payload(MagicMock(), Response(id=1, result={"ok": True})) == {"ok": True}


def test_emit_exit():
    from liquid_language_server.server import emit_payload

    ls = MagicMock()
    assert emit_payload(ls, Exit()) is None
    ls.publish_diagnostics.assert_not_called()


def test_emit_unknown_payload():
    from liquid_language_server.server import emit_payload

    with pytest.raises(TypeError):
        emit_payload(MagicMock(), object())


# --- Handlers ---

def test_did_open_publishes_diagnostics():
    from liquid_language_server.server import did_open

    ls = _fake_server()
    did_open(ls, _doc_params())

    ls.router.pipeline.offenses.assert_called_once_with("/proj/a.liquid")
    ls.publish_diagnostics.assert_called_once_with("file:///proj/a.liquid", [])


def test_did_save_publishes_diagnostics():
    from liquid_language_server.server import did_save

    ls = _fake_server()
    did_save(ls, _doc_params("file:///proj/b.liquid"))

    ls.publish_diagnostics.assert_called_once_with("file:///proj/b.liquid", [])


def test_did_save_error_is_not_swallowed():
    """ConfigLoadError sobe ao pygls e nada é publicado."""
    from liquid_language_server.server import did_save

    ls = _fake_server(error=ConfigLoadError(None, "quebrado"))

    with pytest.raises(ConfigLoadError):
        did_save(ls, _doc_params())

    ls.publish_diagnostics.assert_not_called()


def test_did_close_and_change_only_log():
    from liquid_language_server.server import did_change, did_close

    ls = _fake_server()
    did_close(ls, _doc_params())
    did_change(ls, _doc_params())

    ls.publish_diagnostics.assert_not_called()
    ls.router.pipeline.offenses.assert_not_called()
    messages = [c.args[0] for c in ls.show_message_log.call_args_list]
    assert messages == [
        "Document closed. file:///proj/a.liquid",
        "Did change sent. file:///proj/a.liquid",
    ]


def test_initialized_and_shutdown_log():
    from liquid_language_server.server import initialized, shutdown

    ls = _fake_server()
    initialized(ls, SimpleNamespace())
    shutdown(ls, None)

    messages = [c.args[0] for c in ls.show_message_log.call_args_list]
    assert messages == ["initialized!", "shutting down"]


# --- Instância global ---

def test_server_shares_resolver_with_router():
    from liquid_language_server.server import LiquidLanguageServer, server

    assert isinstance(server, LiquidLanguageServer)
    assert server.router.pipeline.resolver is server.resolver
    assert server.resolver.is_resolved is False


# --- initialize via pygls ---

def test_initialize_reply_uses_router_capabilities():
    """A resposta real do pygls anuncia o textDocumentSync do Router."""
    from lsprotocol.types import ClientCapabilities, InitializeParams

    from liquid_language_server.server import LiquidLanguageServer, LiquidLanguageServerProtocol

    ls = LiquidLanguageServer("teste", "v0")
    assert isinstance(ls.lsp, LiquidLanguageServerProtocol)

    result = ls.lsp.lsp_initialize(
        InitializeParams(process_id=None, root_uri=None, capabilities=ClientCapabilities())
    )
    sync = ls.lsp._converter.unstructure(result)["capabilities"]["textDocumentSync"]

    assert sync["openClose"] is True
    assert sync["change"] == 0
    assert sync["willSave"] is False
    assert sync["save"] is True


def test_sync_options_maps_change_flag():
    from lsprotocol.types import TextDocumentSyncKind

    from liquid_language_server.router import CAPABILITIES
    from liquid_language_server.server import sync_options

    options = sync_options(CAPABILITIES)
    assert options.change == TextDocumentSyncKind.None_
    assert options.will_save is False

    enabled = {"textDocumentSync": dict(CAPABILITIES["textDocumentSync"], change=True)}
    assert sync_options(enabled).change == TextDocumentSyncKind.Full


def test_handle_does_not_log_pipeline_errors(caplog):
    """O erro sobe uma vez ao pygls, sem log duplicado no adaptador."""
    from liquid_language_server.server import did_open

    ls = _fake_server(error=ConfigLoadError(None, "quebrado"))

    with caplog.at_level("ERROR", logger="liquid_language_server.server"):
        with pytest.raises(ConfigLoadError):
            did_open(ls, _doc_params())

    assert not [r for r in caplog.records if r.levelname == "ERROR"]


def test_package_all_names_exist():
    import liquid_language_server as pkg

    for name in pkg.__all__:
        assert hasattr(pkg, name), name
