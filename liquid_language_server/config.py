"""
config.py - Descoberta e memoização da configuração do projeto

Propósito:
    Encontrar a raiz do tema a partir de qualquer arquivo dentro dele,
    ler o .theme-check.yml e manter a Config resolvida durante a sessão.

Componentes principais:
    - Config: Configuração imutável (raiz, checks habilitados, ignore)
    - find_root: Busca ascendente por arquivo/diretório marcador
    - load_config: Lê e valida o .theme-check.yml de uma raiz
    - ConfigResolver: Resolve uma única vez e reutiliza

Dependências críticas:
    - PyYAML: safe_load do arquivo de configuração

Notas de implementação:
    - Marcador primário: .theme-check.yml; secundário: .git
    - Sem marcador, o próprio caminho indica a raiz (diretório do arquivo)
    - A primeira Config resolvida vale para o processo inteiro, mesmo para
      arquivos de outro projeto (limitação conhecida, sem multi-root)
    - Erro de carga não é cacheado: a próxima requisição tenta de novo
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from liquid_language_server.checks import registered_checks
from liquid_language_server.errors import ConfigLoadError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".theme-check.yml"
VCS_MARKER = ".git"

# Chaves de topo que não são nomes de checks
_RESERVED_KEYS = {"root", "ignore"}


@dataclass(frozen=True)
class Config:
    """Configuração resolvida do projeto."""

    root: Path
    enabled_checks: tuple[str, ...] = field(default_factory=tuple)
    ignore: tuple[str, ...] = field(default_factory=tuple)
    config_path: Optional[Path] = None


def find_root(path, marker: str = CONFIG_FILENAME) -> Optional[Path]:
    """
    Procura `marker` subindo a partir de `path`.

    Returns:
        Diretório que contém o marcador, ou None
    """
    start = Path(path)
    candidates = [start] if start.is_dir() else []
    candidates.extend(start.parents)
    for directory in candidates:
        if (directory / marker).exists():
            return directory
    return None


def load_config(root: Path) -> Config:
    """
    Carrega a Config da raiz encontrada.

    Raises:
        ConfigLoadError: YAML malformado, ilegível ou com estrutura inválida
    """
    root = Path(root)
    config_path = root / CONFIG_FILENAME
    data = _read_yaml(config_path) if config_path.is_file() else {}

    config_root = root
    if "root" in data:
        if not isinstance(data["root"], str):
            raise ConfigLoadError(config_path, "'root' deve ser uma string")
        config_root = Path(os.path.normpath(root / data["root"]))

    ignore = data.get("ignore") or []
    if not isinstance(ignore, list) or not all(isinstance(p, str) for p in ignore):
        raise ConfigLoadError(config_path, "'ignore' deve ser uma lista de strings")

    disabled = set()
    known = registered_checks()
    for name, section in data.items():
        if name in _RESERVED_KEYS:
            continue
        if section is None:
            section = {}
        if not isinstance(section, dict):
            raise ConfigLoadError(config_path, f"seção '{name}' deve ser um mapeamento")
        if name not in known:
            logger.warning(f"Check desconhecido em {config_path}: {name}")
            continue
        if section.get("enabled", True) is False:
            disabled.add(name)

    enabled = tuple(name for name in known if name not in disabled)
    return Config(
        root=config_root,
        enabled_checks=enabled,
        ignore=tuple(ignore),
        config_path=config_path if config_path.is_file() else None,
    )


def _read_yaml(config_path: Path) -> dict:
    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigLoadError(config_path, str(e)) from e
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigLoadError(config_path, str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(config_path, "conteúdo deve ser um mapeamento YAML")
    return data


class ConfigResolver:
    """
    Resolve a Config da sessão na primeira chamada e a reutiliza.

    Attributes:
        config: Config resolvida, ou None enquanto não resolvida
    """

    def __init__(self, loader=load_config):
        self._loader = loader
        self._config: Optional[Config] = None
        self._lock = threading.Lock()

    @property
    def config(self) -> Optional[Config]:
        return self._config

    @property
    def is_resolved(self) -> bool:
        return self._config is not None

    def resolve(self, file_path) -> Config:
        """Retorna a Config da sessão; `file_path` só importa na primeira vez."""
        if self._config is not None:
            return self._config

        with self._lock:
            if self._config is None:
                root = self._discover_root(file_path)
                logger.info(f"Raiz do projeto: {root}")
                self._config = self._loader(root)
        return self._config

    @staticmethod
    def _discover_root(file_path) -> Path:
        path = Path(file_path)
        root = find_root(path, CONFIG_FILENAME) or find_root(path, VCS_MARKER)
        if root is not None:
            return root
        return path if path.is_dir() else path.parent
