"""
router.py - Despacho de métodos LSP para handlers

Propósito:
    Recebe método, id e params já decodificados pelo transporte e devolve
    exatamente um payload (Response, Notification, Log ou Exit). Para
    didOpen/didSave executa o pipeline de diagnósticos.

Componentes principais:
    - Method: Enumeração fechada dos métodos suportados
    - DiagnosticsPipeline: Config → ProjectView → análise → Diagnostics
    - Router: Tabela método → handler
    - uri_to_path: Remove o esquema file:// de uma URI

Exemplo de uso:
    router = Router(DiagnosticsPipeline(ConfigResolver()))
    payload = router.dispatch("textDocument/didSave", None, params)

Notas de implementação:
    - O Router não guarda estado; só o ConfigResolver memoiza
    - Erros do pipeline não são capturados aqui: sobem ao transporte e
      nenhuma notificação é emitida
    - Lista de diagnósticos vazia é publicada (limpa diagnósticos antigos)
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import unquote, urlparse

from lsprotocol.types import (
    EXIT,
    INITIALIZE,
    INITIALIZED,
    SHUTDOWN,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DID_SAVE,
    TEXT_DOCUMENT_PUBLISH_DIAGNOSTICS,
)

from liquid_language_server.analyzer import analyze
from liquid_language_server.config import ConfigResolver
from liquid_language_server.converters import build_diagnostics
from liquid_language_server.errors import UnknownMethodError
from liquid_language_server.messages import Exit, Log, Notification, Payload, Response
from liquid_language_server.project import build_view

CAPABILITIES = {
    "textDocumentSync": {
        "openClose": True,
        "change": False,
        "willSave": False,
        "save": True,
    },
}


class Method(str, Enum):
    INITIALIZE = INITIALIZE
    INITIALIZED = INITIALIZED
    SHUTDOWN = SHUTDOWN
    EXIT = EXIT
    DID_OPEN = TEXT_DOCUMENT_DID_OPEN
    DID_CHANGE = TEXT_DOCUMENT_DID_CHANGE
    DID_SAVE = TEXT_DOCUMENT_DID_SAVE
    DID_CLOSE = TEXT_DOCUMENT_DID_CLOSE


def uri_to_path(uri: str) -> str:
    """
    Converte URI file:// em caminho do sistema de arquivos.

    URIs sem esquema file:// são devolvidas sem alteração.
    """
    if not uri.startswith("file://"):
        return uri

    parsed = urlparse(uri)
    path_str = unquote(parsed.path or "")

    # file://localhost/path equivale a file:///path
    host = "" if parsed.netloc.lower() == "localhost" else parsed.netloc

    # UNC paths: file://server/share/path -> //server/share/path
    if host:
        return f"//{host}{path_str}"

    # Windows drive: /d:/path -> d:/path (/a:b/x é caminho POSIX)
    if (
        len(path_str) >= 3
        and path_str[0] == "/"
        and path_str[1].isalpha()
        and path_str[2] == ":"
        and (len(path_str) == 3 or path_str[3] == "/")
    ):
        path_str = path_str[1:]

    return path_str


class DiagnosticsPipeline:
    """
    Encadeia ConfigResolver → build_view → analyze para um arquivo.

    Attributes:
        resolver: ConfigResolver da sessão (compartilhado)
    """

    def __init__(
        self,
        resolver: Optional[ConfigResolver] = None,
        view_builder: Callable = build_view,
        runner: Callable = analyze,
    ):
        self.resolver = resolver or ConfigResolver()
        self._build_view = view_builder
        self._analyze = runner

    def offenses(self, file_path: str) -> list:
        config = self.resolver.resolve(file_path)
        view = self._build_view(config.root, config.ignore)
        if view.is_empty:
            return []
        return self._analyze(view, config, Path(file_path))


class Router:
    """Dispatcher de mensagens LSP por nome de método."""

    def __init__(self, pipeline: Optional[DiagnosticsPipeline] = None):
        self.pipeline = pipeline or DiagnosticsPipeline()
        self._handlers: dict[Method, Callable[[object, dict], Payload]] = {
            Method.INITIALIZE: self.on_initialize,
            Method.INITIALIZED: self.on_initialized,
            Method.SHUTDOWN: self.on_shutdown,
            Method.EXIT: self.on_exit,
            Method.DID_CLOSE: self.on_text_document_did_close,
            Method.DID_CHANGE: self.on_text_document_did_change,
            Method.DID_OPEN: self.on_text_document_did_open,
            Method.DID_SAVE: self.on_text_document_did_save,
        }

    def dispatch(self, method: str, id=None, params: Optional[dict] = None) -> Payload:
        """
        Despacha uma mensagem para o handler do método.

        Raises:
            UnknownMethodError: método fora da enumeração suportada
        """
        try:
            key = Method(method)
        except ValueError:
            return self.on_unknown_method(method)
        return self._handlers[key](id, params or {})

    def on_unknown_method(self, method: str) -> Payload:
        raise UnknownMethodError(method)

    def on_initialize(self, id, _params) -> Response:
        return Response(id=id, result={"capabilities": CAPABILITIES})

    def on_initialized(self, _id, _params) -> Log:
        return Log(message="initialized!")

    def on_shutdown(self, _id, _params) -> Log:
        return Log(message="shutting down")

    def on_exit(self, _id, _params) -> Exit:
        return Exit()

    def on_text_document_did_close(self, _id, params) -> Log:
        return Log(message=f"Document closed. {params['textDocument']['uri']}")

    def on_text_document_did_change(self, _id, params) -> Log:
        return Log(message=f"Did change sent. {params['textDocument']['uri']}")

    def on_text_document_did_open(self, _id, params) -> Notification:
        return self._prepare_diagnostics_for_params(params)

    def on_text_document_did_save(self, _id, params) -> Notification:
        return self._prepare_diagnostics_for_params(params)

    def _prepare_diagnostics_for_params(self, params) -> Notification:
        return self.prepare_diagnostics(params["textDocument"]["uri"])

    def prepare_diagnostics(self, uri: str) -> Notification:
        findings = self.pipeline.offenses(uri_to_path(uri))
        return Notification(
            method=TEXT_DOCUMENT_PUBLISH_DIAGNOSTICS,
            params={
                "uri": uri,
                "diagnostics": build_diagnostics(findings),
            },
        )
