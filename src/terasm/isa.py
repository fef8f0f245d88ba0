'''
tabla de familias de instrucciones, trits selectores y tipos de dato
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Tuple

from .diagnostics import UnknownInstruction

# Dirección 0 se codifica como el tryte mínimo (λλλλλλ = -364)
ADDRESS_BASE = -364

@dataclass(frozen=True)
class Family:
    """Familia de mnemónicos que comparten tabla de formas.

    - kind: 'mov','fill','xti','adx','cmp','jxx','restart','alu'
    - ident: prefijo/sufijo con el que se reconoce el mnemónico ('' = comodín)
    - selectors: mnemónico exacto -> trits que eligen la operación
    - destination: True si exige marcador de destino, False si lo prohíbe
    - arity: (mínimo, máximo) de operandos contando el destino
    """
    kind: str
    ident: str
    selectors: Dict[str, Tuple[str, ...]]
    destination: bool
    arity: Tuple[int, int]

# El orden importa: gana la primera familia cuyo ident encaja
FAMILIES: List[Family] = [
    Family("mov", "mov", {"mov": ()}, True, (2, 2)),
    Family("fill", "fill", {
        "filln": ("λ",), "fillz": ("0",), "fillp": ("1",),
    }, False, (1, 2)),
    Family("xti", "ti", {
        "nti": ("λ",), "sti": ("0",), "pti": ("1",),
    }, True, (2, 2)),
    Family("adx", "ad", {
        "add": ("λ",), "adc": ("1",),
    }, True, (3, 3)),
    Family("cmp", "cmp", {"cmp": ()}, False, (2, 2)),
    # (tipo, sentido)
    Family("jxx", "j", {
        "jmp": ("λ", "0"),
        "jl":  ("0", "λ"),
        "je":  ("0", "0"),
        "jg":  ("0", "1"),
        "jeg": ("1", "λ"), "jnl": ("1", "λ"),
        "jlg": ("1", "0"), "jne": ("1", "0"),
        "jle": ("1", "1"), "jng": ("1", "1"),
    }, False, (1, 2)),
    Family("restart", "restart", {"restart": ()}, False, (0, 0)),
    # (al0, al1); sólo por nombre exacto
    Family("alu", "", {
        "nand": ("0", "λ"),
        "nor":  ("0", "0"),
        "ncon": ("0", "1"),
        "nany": ("1", "λ"),
        "tmul": ("1", "1"),
    }, True, (3, 3)),
]

# Tipos de dato: nombre largo y corto -> ancho en trytes
DATA_WIDTHS: Dict[str, int] = {
    "tryte": 1, "dt": 1,
    "pair": 2, "dp": 2,
    "triple": 3, "d3": 3,
    "quad": 4, "dq": 4,
}

def family_of(mnemonic: str) -> Family:
    """Primera familia cuyo ident es prefijo o sufijo del mnemónico."""
    m = mnemonic.lower()
    for fam in FAMILIES:
        if m.startswith(fam.ident) or m.endswith(fam.ident):
            return fam
    # inalcanzable mientras exista la familia comodín
    raise UnknownInstruction(f"Instrucción desconocida: {mnemonic}")

def lookup(mnemonic: str) -> Tuple[Family, Tuple[str, ...]]:
    """Devuelve (familia, trits selectores) o lanza UnknownInstruction."""
    fam = family_of(mnemonic)
    sel = fam.selectors.get(mnemonic.lower())
    if sel is None:
        allowed = ", ".join(name.upper() for name in fam.selectors)
        raise UnknownInstruction(f"Instrucción desconocida: {mnemonic}",
                                 hint=f"en esta familia: {allowed}")
    return fam, sel

def data_width(type_name: str) -> int:
    """Ancho en trytes de un tipo de dato o lanza UnknownInstruction."""
    t = type_name.lower()
    if t not in DATA_WIDTHS:
        raise UnknownInstruction(f"Tipo de dato desconocido: {type_name}",
                                 hint="tryte/dt, pair/dp, triple/d3, quad/dq")
    return DATA_WIDTHS[t]
