'''
dataclases de operandos, huecos de tryte y unidades de ensamblado
'''

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Literal, Optional, Tuple, Union

Section = Literal["code", "data"]

# ---- Operandos ----

@dataclass(frozen=True)
class Reg:
    """Registro canónico ('RZ','R0','R1') con su trit."""
    name: str
    trit: str

@dataclass(frozen=True)
class Imm:
    """Inmediato literal ya codificado en un tryte; conserva el texto original."""
    tryte: str
    text: str

@dataclass(frozen=True)
class Sym:
    """Etiqueta referenciada; se resuelve en el enlazado."""
    name: str

@dataclass(frozen=True)
class Mem:
    """Acceso a memoria: [registro] o [inmediato]."""
    target: Union[Reg, Imm, Sym]

Operand = Union[Reg, Imm, Sym, Mem]

# ---- Huecos de tryte ----

@dataclass(frozen=True)
class Resolved:
    tryte: str

@dataclass(frozen=True)
class AbsoluteRef:
    """Dirección absoluta de la etiqueta (más la base de direcciones)."""
    label: str

@dataclass(frozen=True)
class RelativeRef:
    """Desplazamiento desde el final de la instrucción hasta la etiqueta."""
    label: str

Slot = Union[Resolved, AbsoluteRef, RelativeRef]

# ---- Unidades y programa ----

@dataclass(frozen=True)
class Unit:
    """Una línea de fuente ya codificada: instrucción o directiva de datos."""
    section: Section
    slots: Tuple[Slot, ...]
    line: int
    text: str
    label: Optional[str] = None
    address: Optional[int] = None   # asignada en la pasada 1

    @property
    def size(self) -> int:
        return len(self.slots)

    @property
    def resolved(self) -> bool:
        return all(isinstance(s, Resolved) for s in self.slots)

    def trytes(self) -> List[str]:
        """Trytes finales; exige que la pasada 2 ya haya resuelto todo."""
        out: List[str] = []
        for s in self.slots:
            if not isinstance(s, Resolved):
                raise ValueError(f"referencia sin resolver en línea {self.line}: {s.label}")
            out.append(s.tryte)
        return out

@dataclass(frozen=True)
class Program:
    """Arena ordenada de unidades (orden de fuente) y tabla etiqueta -> índice."""
    units: Tuple[Unit, ...]
    labels: Dict[str, int] = field(default_factory=dict)
    filename: Optional[str] = None

    def section(self, name: Section) -> Iterator[Unit]:
        return (u for u in self.units if u.section == name)

    def image_order(self) -> List[Unit]:
        """Código primero, luego datos; orden de fuente dentro de cada segmento."""
        return list(self.section("code")) + list(self.section("data"))

    @property
    def size(self) -> int:
        return sum(u.size for u in self.units)
