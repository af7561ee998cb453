"""
analyzer.py - Execução dos checks sobre um arquivo do tema

Propósito:
    Rodar os checks habilitados na Config contra um único arquivo e
    devolver somente os Findings daquele arquivo.

Componentes principais:
    - Analyzer: Motor construído por chamada com os checks habilitados
    - analyze: Ponto de entrada usado pelo pipeline de diagnósticos

Notas de implementação:
    - Projeto vazio não chega a construir o Analyzer
    - Somente leitura: nenhum arquivo é escrito
    - Arquivo fora do ProjectView (ignore, fora da raiz) não é analisado
    - Falhas de leitura ou de checks viram AnalysisEngineError
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from liquid_language_server.checks import Check, ThemeFile, checks_for
from liquid_language_server.config import Config
from liquid_language_server.errors import AnalysisEngineError
from liquid_language_server.findings import Finding
from liquid_language_server.project import ProjectView

logger = logging.getLogger(__name__)


class Analyzer:
    """Motor de análise escopado a um ProjectView e a um conjunto de checks."""

    def __init__(self, view: ProjectView, checks: Sequence[Check]):
        self.view = view
        self.checks = list(checks)

    def analyze_file(self, file_path) -> list[Finding]:
        path = Path(file_path)
        if path not in self.view:
            logger.debug(f"{path} fora do projeto (ignorado ou fora da raiz)")
            return []

        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise AnalysisEngineError(f"Não foi possível ler {path}: {e}") from e

        theme_file = ThemeFile(path=path, source=source)
        findings: list[Finding] = []
        for check in self.checks:
            try:
                results = list(check.analyze(theme_file))
            except AnalysisEngineError:
                raise
            except Exception as e:
                raise AnalysisEngineError(f"Check {check.name} falhou em {path}: {e}") from e
            findings.extend(results)

        # Checks podem reportar outros arquivos do projeto; só o alvo interessa
        return [f for f in findings if f.path is None or Path(f.path) == path]


def analyze(view: ProjectView, config: Config, target_file) -> list[Finding]:
    """
    Analisa `target_file` com os checks de `config.enabled_checks`.

    Returns:
        Findings do arquivo alvo; lista vazia se o projeto não tem arquivos
    """
    if view.is_empty:
        logger.debug(f"Projeto vazio em {view.root}, análise ignorada")
        return []

    analyzer = Analyzer(view, checks_for(config.enabled_checks))
    findings = analyzer.analyze_file(target_file)
    logger.debug(f"{len(findings)} findings para {target_file}")
    return findings
