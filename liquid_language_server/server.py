"""
server.py - Servidor LSP principal para temas Liquid usando pygls

Propósito:
    Liga o transporte pygls (JSON-RPC via STDIO) ao Router: cada
    notificação recebida é despachada e o payload resultante é emitido
    (publishDiagnostics, log ou encerramento).

Componentes principais:
    - LiquidLanguageServerProtocol: initialize com as capabilities do Router
    - LiquidLanguageServer: Servidor pygls com ConfigResolver e Router
    - emit_payload: Payload do Router → chamada pygls
    - Event handlers: initialized, shutdown, did_open, did_save,
      did_change, did_close

Dependências críticas:
    - pygls: Framework LSP (framing, initialize/exit)
    - liquid_language_server.router: Despacho e pipeline de diagnósticos

Exemplo de uso:
    python -m liquid_language_server

Notas de implementação:
    - Comunica via STDIO (entrada/saída padrão)
    - Sincronização de mudanças desabilitada (TextDocumentSyncKind.None_):
      diagnósticos só em didOpen/didSave
    - initialize: resposta montada pelo pygls com textDocumentSync
      substituído pelas capabilities do Router
    - exit é tratado pelo próprio pygls
    - Erros do pipeline sobem ao pygls, que os loga e reporta;
      nunca viram uma lista vazia de diagnósticos
"""

from __future__ import annotations

import logging
import sys

from lsprotocol.types import (
    INITIALIZE,
    INITIALIZED,
    SHUTDOWN,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DID_SAVE,
    TEXT_DOCUMENT_PUBLISH_DIAGNOSTICS,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DidSaveTextDocumentParams,
    InitializedParams,
    InitializeParams,
    InitializeResult,
    TextDocumentSyncKind,
    TextDocumentSyncOptions,
)
from pygls.protocol import LanguageServerProtocol, lsp_method
from pygls.server import LanguageServer

from liquid_language_server import __version__
from liquid_language_server.checks import load_plugin_checks, registered_checks
from liquid_language_server.config import ConfigResolver
from liquid_language_server.messages import Exit, Log, Notification, Payload, Response
from liquid_language_server.router import DiagnosticsPipeline, Method, Router

# Configuração de logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def sync_options(capabilities: dict) -> TextDocumentSyncOptions:
    """textDocumentSync do Router → TextDocumentSyncOptions do lsprotocol."""
    sync = capabilities["textDocumentSync"]
    # change é um TextDocumentSyncKind no protocolo: false vira None (0)
    change = TextDocumentSyncKind.Full if sync["change"] else TextDocumentSyncKind.None_
    return TextDocumentSyncOptions(
        open_close=sync["openClose"],
        change=change,
        will_save=sync["willSave"],
        save=sync["save"],
    )


class LiquidLanguageServerProtocol(LanguageServerProtocol):
    """Protocolo pygls cujo initialize anuncia as capabilities do Router."""

    @lsp_method(INITIALIZE)
    def lsp_initialize(self, params: InitializeParams) -> InitializeResult:
        result = super().lsp_initialize(params)
        payload = self._server.router.dispatch(Method.INITIALIZE.value, None, {})
        result.capabilities.text_document_sync = sync_options(payload.result["capabilities"])
        return result


class LiquidLanguageServer(LanguageServer):
    """
    Servidor LSP para temas Liquid.

    Attributes:
        resolver: ConfigResolver da sessão (uma Config por processo)
        router: Router que produz os payloads de cada método
    """

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("protocol_cls", LiquidLanguageServerProtocol)
        kwargs.setdefault("text_document_sync_kind", TextDocumentSyncKind.None_)
        super().__init__(*args, **kwargs)
        self.resolver: ConfigResolver = ConfigResolver()
        self.router: Router = Router(DiagnosticsPipeline(self.resolver))


# Instância global do servidor
server = LiquidLanguageServer("liquid-language-server", f"v{__version__}")


def emit_payload(ls: LiquidLanguageServer, payload: Payload):
    """
    Emite um payload do Router pelo transporte pygls.

    Returns:
        result para Response; None para os demais
    """
    if isinstance(payload, Response):
        return payload.result

    if isinstance(payload, Notification):
        if payload.method == TEXT_DOCUMENT_PUBLISH_DIAGNOSTICS:
            diagnostics = payload.params["diagnostics"]
            logger.debug(f"Publicando {len(diagnostics)} diagnósticos para {payload.params['uri']}")
            ls.publish_diagnostics(payload.params["uri"], diagnostics)
        else:
            ls.send_notification(payload.method, payload.params)
        return None

    if isinstance(payload, Log):
        logger.info(payload.message)
        ls.show_message_log(payload.message)
        return None

    if isinstance(payload, Exit):
        logger.info("Encerramento solicitado pelo cliente")
        return None

    raise TypeError(f"Payload desconhecido: {payload!r}")


def handle(ls: LiquidLanguageServer, method: Method, params: dict):
    """Despacha no Router e emite o payload; erros sobem ao pygls."""
    payload = ls.router.dispatch(method.value, None, params)
    return emit_payload(ls, payload)


def _document_params(params) -> dict:
    return {"textDocument": {"uri": params.text_document.uri}}


@server.feature(INITIALIZED)
def initialized(ls: LiquidLanguageServer, params: InitializedParams) -> None:
    handle(ls, Method.INITIALIZED, {})


@server.feature(SHUTDOWN)
def shutdown(ls: LiquidLanguageServer, params) -> None:
    handle(ls, Method.SHUTDOWN, {})


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LiquidLanguageServer, params: DidOpenTextDocumentParams) -> None:
    """Analisa o documento aberto e publica diagnósticos."""
    logger.info(f"Documento aberto: {params.text_document.uri}")
    handle(ls, Method.DID_OPEN, _document_params(params))


@server.feature(TEXT_DOCUMENT_DID_SAVE)
def did_save(ls: LiquidLanguageServer, params: DidSaveTextDocumentParams) -> None:
    """Reanalisa o documento salvo e publica diagnósticos."""
    logger.info(f"Documento salvo: {params.text_document.uri}")
    handle(ls, Method.DID_SAVE, _document_params(params))


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LiquidLanguageServer, params: DidChangeTextDocumentParams) -> None:
    handle(ls, Method.DID_CHANGE, _document_params(params))


@server.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: LiquidLanguageServer, params: DidCloseTextDocumentParams) -> None:
    handle(ls, Method.DID_CLOSE, _document_params(params))


def main() -> None:
    """
    Ponto de entrada principal do servidor.

    Carrega plugins de checks e inicia o servidor em modo STDIO.
    """
    logger.info("Iniciando Liquid Language Server...")
    logger.info("Python executable: %s", sys.executable)
    load_plugin_checks()
    logger.info("Checks registrados: %s", ", ".join(registered_checks()) or "<nenhum>")
    server.start_io()


if __name__ == "__main__":
    main()
