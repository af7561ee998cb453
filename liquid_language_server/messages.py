"""
messages.py - Payloads produzidos pelo Router

Cada handler do Router devolve exatamente um destes:
    - Response: resposta a uma requisição (mesmo id)
    - Notification: notificação servidor → cliente (sem id)
    - Log: mensagem informativa, não enviada como resposta
    - Exit: intenção de encerrar o processo
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union


@dataclass(frozen=True)
class Response:
    id: Optional[Union[int, str]]
    result: Any
    type: str = field(default="response", init=False)


@dataclass(frozen=True)
class Notification:
    method: str
    params: dict
    type: str = field(default="notification", init=False)


@dataclass(frozen=True)
class Log:
    message: str
    type: str = field(default="log", init=False)


@dataclass(frozen=True)
class Exit:
    type: str = field(default="exit", init=False)


Payload = Union[Response, Notification, Log, Exit]
