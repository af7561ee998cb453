"""
liquid_language_server - Language Server Protocol para temas Liquid

Propósito:
    Servidor LSP que publica diagnósticos theme-check para arquivos de
    temas Liquid no VSCode e outros editores compatíveis com LSP.

Componentes principais:
    - server: Servidor principal usando pygls
    - router: Despacho de métodos LSP → payloads
    - config: Descoberta e memoização da configuração do projeto
    - analyzer: Execução dos checks sobre um arquivo
    - converters: Conversão Finding → LSP Diagnostic

Dependências críticas:
    - pygls: Framework LSP
    - lsprotocol: Tipos do protocolo
    - PyYAML: Leitura do .theme-check.yml

Exemplo de uso:
    python -m liquid_language_server

Notas de implementação:
    - Comunica via STDIO com o cliente
    - Configuração resolvida uma única vez por sessão
"""
from importlib.metadata import PackageNotFoundError, version as _pkg_version
from pathlib import Path
import re


def _read_version_from_pyproject() -> str:
    pyproject = Path(__file__).resolve().parents[1] / "pyproject.toml"
    try:
        text = pyproject.read_text(encoding="utf-8")
    except OSError:
        return "0.0.0"
    match = re.search(r'(?m)^version = "([^"]+)"\s*$', text)
    return match.group(1) if match else "0.0.0"


try:
    __version__ = _pkg_version("liquid-language-server")
except PackageNotFoundError:
    __version__ = _read_version_from_pyproject()

__all__ = ["__version__"]
