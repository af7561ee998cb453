"""
findings.py - Resultados de análise antes da tradução para LSP

Componentes principais:
    - Severity: Severidades produzidas pelos checks
    - Finding: Um problema encontrado em um arquivo do tema

Notas de implementação:
    - Coordenadas são 0-based, fim exclusivo (mesma convenção do LSP)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class Severity(Enum):
    ERROR = "error"
    SUGGESTION = "suggestion"
    STYLE = "style"
    OTHER = "other"

    @classmethod
    def coerce(cls, value) -> "Severity":
        """Aceita Severity ou string; qualquer outra coisa vira OTHER."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class Finding:
    """Resultado de um check sobre um arquivo."""

    code: str
    message: str
    severity: Severity
    start_line: int
    start_column: int
    end_line: int
    end_column: int
    path: Optional[Path] = None
