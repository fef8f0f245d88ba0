'''
clase Diagnostic, errores fatales del ensamblador y helpers
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Literal

# Severidad de los diagnósticos (en español)
Severity = Literal["error", "advertencia"]

_SEV_TO_LABEL = {
    "error": "ERROR",
    "advertencia": "ADVERTENCIA",
}

@dataclass(frozen=True)
class Diagnostic:
    """Estructura de un diagnóstico para reportar problemas.

    Abarca errores y advertencias, con ubicación opcional (archivo y línea)
    y un mensaje de ayuda (pista) para orientar la corrección.
    """
    severity: Severity
    message: str
    line: Optional[int] = None
    hint: Optional[str] = None
    file: Optional[str] = None

    def __str__(self) -> str:
        loc = ""
        if self.file is not None:
            loc += f"{self.file}:"
        if self.line is not None:
            loc += f"{self.line}"
        if loc:
            loc += ": "
        sev = _SEV_TO_LABEL.get(self.severity, str(self.severity).upper())
        core = f"{sev}: {self.message}"
        if self.hint:
            core += f"  (pista: {self.hint})"
        return loc + core

def error(message: str, *, line: int | None = None,
          file: str | None = None, hint: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo error."""
    return Diagnostic("error", message, line, hint, file)

def warning(message: str, *, line: int | None = None,
            file: str | None = None, hint: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo advertencia."""
    return Diagnostic("advertencia", message, line, hint, file)

# ---- Errores fatales ----

class AssemblyError(Exception):
    """Error que aborta el ensamblado en la primera ocurrencia.

    Las capas bajas (códec numérico, codificador) lo lanzan sin línea;
    el parser la añade con `at` antes de relanzarlo.
    """
    kind = "AssemblyError"

    def __init__(self, message: str, *, line: int | None = None,
                 file: str | None = None, hint: str | None = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.file = file
        self.hint = hint

    def at(self, line: int | None, file: str | None = None) -> "AssemblyError":
        """Completa la ubicación si aún no la tiene y devuelve el propio error."""
        if self.line is None:
            self.line = line
        if self.file is None:
            self.file = file
        return self

    @property
    def diagnostic(self) -> Diagnostic:
        return error(self.message, line=self.line, file=self.file, hint=self.hint)

    def __str__(self) -> str:
        return str(self.diagnostic)

class InvalidLabelName(AssemblyError):
    kind = "InvalidLabelName"

class UnknownInstruction(AssemblyError):
    """Mnemónico o tipo de dato no reconocido."""
    kind = "UnknownInstruction"

class WrongOperandCount(AssemblyError):
    kind = "WrongOperandCount"

class IllegalOperands(AssemblyError):
    """Combinación de formas de operando que la familia no admite."""
    kind = "IllegalOperands"

class DestinationMismatch(AssemblyError):
    """Marcador de destino presente donde está prohibido, o ausente donde es obligatorio."""
    kind = "DestinationMismatch"

class InvalidNumeralLiteral(AssemblyError):
    kind = "InvalidNumeralLiteral"

class ValueOutOfRange(AssemblyError):
    kind = "ValueOutOfRange"

class UndefinedLabel(AssemblyError):
    kind = "UndefinedLabel"

class DuplicateLabel(AssemblyError):
    kind = "DuplicateLabel"
