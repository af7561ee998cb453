"""
checks.py - Registro de checks do analisador

Propósito:
    Os checks (regras) não fazem parte deste pacote; são registrados por
    plugins. Este módulo define a interface que um check implementa e o
    registro ordenado consultado pela configuração e pelo analisador.

Componentes principais:
    - ThemeFile: Arquivo do tema com conteúdo já lido
    - Check: Classe base de um check
    - register_check: Decorator que adiciona um check ao registro
    - load_plugin_checks: Carrega checks via entry points
    - checks_for: Instancia checks habilitados na ordem da configuração

Exemplo de uso:
    @register_check
    class TrailingWhitespace(Check):
        name = "TrailingWhitespace"
        severity = Severity.STYLE

        def analyze(self, theme_file):
            ...

Notas de implementação:
    - Entry points no grupo "liquid_language_server.checks"
    - Plugin quebrado é logado e ignorado; não derruba o servidor
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import metadata
from pathlib import Path
from typing import Iterable, Sequence

from liquid_language_server.errors import AnalysisEngineError
from liquid_language_server.findings import Finding, Severity

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "liquid_language_server.checks"

_REGISTRY: dict[str, type["Check"]] = {}
_plugins_loaded = False


@dataclass(frozen=True)
class ThemeFile:
    path: Path
    source: str

    @property
    def lines(self) -> list[str]:
        return self.source.split("\n")


class Check:
    """
    Classe base para checks.

    Subclasses definem `name` (código publicado no Diagnostic),
    `severity` padrão e implementam analyze().
    """

    name: str = ""
    severity: Severity = Severity.SUGGESTION
    doc: str = ""

    def analyze(self, theme_file: ThemeFile) -> Iterable[Finding]:
        raise NotImplementedError

    def offense(
        self,
        theme_file: ThemeFile,
        message: str,
        start: tuple[int, int],
        end: tuple[int, int],
    ) -> Finding:
        """Cria um Finding para este check (posições 0-based)."""
        return Finding(
            code=self.name,
            message=message,
            severity=self.severity,
            start_line=start[0],
            start_column=start[1],
            end_line=end[0],
            end_column=end[1],
            path=theme_file.path,
        )


def register_check(cls: type[Check]) -> type[Check]:
    """Registra um check pelo nome. Nomes duplicados são rejeitados."""
    name = cls.name or cls.__name__
    if name in _REGISTRY and _REGISTRY[name] is not cls:
        raise ValueError(f"Check já registrado: {name}")
    cls.name = name
    _REGISTRY[name] = cls
    return cls


def unregister_check(name: str) -> None:
    _REGISTRY.pop(name, None)


def registered_checks() -> list[str]:
    """Nomes dos checks registrados, na ordem de registro."""
    return list(_REGISTRY)


def load_plugin_checks() -> list[str]:
    """
    Importa checks declarados em entry points (uma vez por processo).

    Returns:
        Nomes dos entry points carregados com sucesso
    """
    global _plugins_loaded
    if _plugins_loaded:
        return []
    _plugins_loaded = True

    loaded = []
    for entry_point in metadata.entry_points(group=ENTRY_POINT_GROUP):
        try:
            obj = entry_point.load()
        except Exception as e:
            logger.warning(f"Falha ao carregar plugin {entry_point.name}: {e}", exc_info=True)
            continue
        if isinstance(obj, type) and issubclass(obj, Check):
            register_check(obj)
        loaded.append(entry_point.name)

    if loaded:
        logger.info(f"Plugins de checks carregados: {', '.join(loaded)}")
    return loaded


def checks_for(names: Sequence[str]) -> list[Check]:
    """Instancia os checks nomeados, na ordem dada."""
    checks = []
    for name in names:
        cls = _REGISTRY.get(name)
        if cls is None:
            raise AnalysisEngineError(f"Check não registrado: {name}")
        checks.append(cls())
    return checks
