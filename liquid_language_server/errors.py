"""
errors.py - Exceções do servidor de linguagem

Todas sobem até a fronteira de transporte (pygls), que decide como
reportá-las ao cliente. Nenhum componente do pipeline as captura.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class LanguageServerError(Exception):
    """Base para erros do liquid_language_server."""


class ConfigLoadError(LanguageServerError):
    """Configuração malformada ou ilegível na raiz resolvida."""

    def __init__(self, path: Optional[Path], reason: str):
        self.path = path
        self.reason = reason
        where = str(path) if path else "<desconhecido>"
        super().__init__(f"Configuração inválida em {where}: {reason}")


class AnalysisEngineError(LanguageServerError):
    """Falha durante a análise (arquivo ilegível, check com erro, etc.)."""


class UnknownMethodError(LanguageServerError):
    """Método sem handler registrado no Router."""

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"Método não suportado: {method}")
