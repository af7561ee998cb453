"""
project.py - Visão dos arquivos analisáveis de um tema

Propósito:
    Listar os arquivos sob a raiz do projeto que fazem parte do tema
    (templates .liquid e arquivos .json de config/locales).

Componentes principais:
    - ProjectView: Listagem imutável de arquivos sob a raiz
    - build_view: Busca recursiva respeitando padrões de ignore

Notas de implementação:
    - Raiz inexistente gera visão vazia (não é erro)
    - Padrões de ignore são globs relativos à raiz (fnmatch)
"""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator

logger = logging.getLogger(__name__)

THEME_EXTENSIONS = (".liquid", ".json")


@dataclass(frozen=True)
class ProjectView:
    """Arquivos de um tema sob `root`."""

    root: Path
    files: tuple[Path, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.files

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self) -> Iterator[Path]:
        return iter(self.files)

    def __contains__(self, path) -> bool:
        return Path(path) in self.files


def build_view(root: Path, ignore: Iterable[str] = ()) -> ProjectView:
    """
    Constrói a visão do projeto para a raiz resolvida.

    Args:
        root: Diretório raiz do tema
        ignore: Globs relativos à raiz (ex: "node_modules/*")

    Returns:
        ProjectView, possivelmente vazia
    """
    root = Path(root)
    if not root.is_dir():
        logger.warning(f"Raiz do projeto não existe: {root}")
        return ProjectView(root=root)

    patterns = tuple(ignore)
    files = []
    for ext in THEME_EXTENSIONS:
        for path in root.rglob(f"*{ext}"):
            if not path.is_file():
                continue
            if _is_ignored(path, root, patterns):
                continue
            files.append(path)

    logger.debug(f"{len(files)} arquivos de tema em {root}")
    return ProjectView(root=root, files=tuple(sorted(files)))


def _is_ignored(path: Path, root: Path, patterns: tuple[str, ...]) -> bool:
    relative = path.relative_to(root).as_posix()
    return any(fnmatch.fnmatch(relative, pattern) for pattern in patterns)
