from __future__ import annotations
from dataclasses import dataclass
from typing import Any


class SSEError(RuntimeError):
    """Error base de la librería."""


@dataclass(slots=True)
class DecodeError(SSEError, ValueError):
    """
    Secuencia de bytes inválida en el cuerpo del stream.

    Es fatal: el stream termina al propagarse. Todas las líneas completas
    anteriores a la línea inválida ya fueron entregadas.
    """
    message: str
    line: bytes = b""
    reason: str | None = None

    def __str__(self) -> str:
        parts = [f"DecodeError(message={self.message!r}"]
        if self.reason:
            parts.append(f", reason={self.reason!r}")
        parts.append(f", line={len(self.line)} bytes)")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convierte el error a dict para logging estructurado."""
        return {
            "message": self.message,
            "reason": self.reason,
            "line": self.line.decode("utf-8", "replace"),
        }


@dataclass(slots=True)
class EventSourceError(SSEError):
    """
    La respuesta HTTP no es un event stream utilizable.

    Solo se lanza cuando el caller pide la validación explícitamente
    (status distinto de 200 o Content-Type distinto de text/event-stream).
    """
    message: str
    status_code: int | None = None
    content_type: str | None = None
    body: str | None = None

    def __str__(self) -> str:
        parts = [f"EventSourceError(message={self.message!r}"]
        if self.status_code is not None:
            parts.append(f", status_code={self.status_code}")
        if self.content_type is not None:
            parts.append(f", content_type={self.content_type!r}")
        if self.body:
            parts.append(f", body={len(self.body)} chars")
        parts.append(")")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convierte el error a dict para logging estructurado."""
        return {
            "message": self.message,
            "status_code": self.status_code,
            "content_type": self.content_type,
            "body": self.body,
        }

    @property
    def is_bad_status(self) -> bool:
        """True si el servidor no respondió 200."""
        return self.status_code is not None and self.status_code != 200

    @property
    def is_bad_content_type(self) -> bool:
        """True si el status era correcto pero el Content-Type no."""
        return self.status_code == 200
