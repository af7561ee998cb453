"""
converters.py - Conversão entre Findings e tipos LSP

Propósito:
    Converter resultados do analisador para Diagnostics do protocolo LSP.

Componentes principais:
    - convert_severity: Severity → DiagnosticSeverity
    - convert_range: Finding → Range
    - build_diagnostic: Finding → Diagnostic
    - build_diagnostics: Sequence[Finding] → List[Diagnostic]

Dependências críticas:
    - lsprotocol.types: Tipos do protocolo LSP

Notas de implementação:
    - Coordenadas dos Findings já são 0-based: cópia direta, sem ajuste
    - Qualquer severidade desconhecida vira Hint (4)
"""

from __future__ import annotations

from typing import Iterable, List

from lsprotocol.types import (
    Diagnostic,
    DiagnosticSeverity,
    Position,
    Range,
)

from liquid_language_server.findings import Finding, Severity

DIAGNOSTIC_SOURCE = "theme-check"

_SEVERITY_MAP = {
    Severity.ERROR: DiagnosticSeverity.Error,
    Severity.SUGGESTION: DiagnosticSeverity.Warning,
    Severity.STYLE: DiagnosticSeverity.Information,
}


def convert_severity(severity) -> DiagnosticSeverity:
    """
    Mapeia Severity para DiagnosticSeverity do LSP.

    Mapeamento:
        ERROR      → DiagnosticSeverity.Error (1)
        SUGGESTION → DiagnosticSeverity.Warning (2)
        STYLE      → DiagnosticSeverity.Information (3)
        outros     → DiagnosticSeverity.Hint (4)
    """
    return _SEVERITY_MAP.get(Severity.coerce(severity), DiagnosticSeverity.Hint)


def convert_range(finding: Finding) -> Range:
    return Range(
        start=Position(line=finding.start_line, character=finding.start_column),
        end=Position(line=finding.end_line, character=finding.end_column),
    )


def build_diagnostic(finding: Finding) -> Diagnostic:
    """Converte um Finding em Diagnostic do LSP."""
    return Diagnostic(
        range=convert_range(finding),
        severity=convert_severity(finding.severity),
        code=finding.code,
        source=DIAGNOSTIC_SOURCE,
        message=finding.message,
    )


def build_diagnostics(findings: Iterable[Finding]) -> List[Diagnostic]:
    return [build_diagnostic(finding) for finding in findings]
