'''
manejo de trits (símbolos, trytes, rangos balanceados)
'''

from __future__ import annotations
from typing import Dict, List

# Símbolo del trit negativo
NEG = "λ"

TRIT_VALUES: Dict[str, int] = {NEG: -1, "0": 0, "1": 1}
VALUE_TRITS: Dict[int, str] = {-1: NEG, 0: "0", 1: "1"}

# Trits por tryte
TRYTE_TRITS = 6

def max_value(ntrits: int) -> int:
    """Máximo representable con n trits balanceados: (3^n - 1) / 2."""
    if ntrits <= 0:
        raise ValueError("ntrits debe ser positivo")
    return (3 ** ntrits - 1) // 2

def fits(value: int, ntrits: int) -> bool:
    """Devuelve True si value está en [-(3^n-1)/2, (3^n-1)/2]."""
    limit = max_value(ntrits)
    return -limit <= value <= limit

def is_trits(s: str) -> bool:
    """Indica si la cadena sólo contiene símbolos de trit."""
    return all(ch in TRIT_VALUES for ch in s)

def is_tryte(s: str) -> bool:
    """Un tryte son exactamente 6 símbolos de trit."""
    return len(s) == TRYTE_TRITS and is_trits(s)

def trits_to_int(s: str) -> int:
    """Valor entero de una cadena de trits (el más significativo primero)."""
    acc = 0
    for ch in s:
        if ch not in TRIT_VALUES:
            raise ValueError(f"Trit inválido: {ch!r}")
        acc = acc * 3 + TRIT_VALUES[ch]
    return acc

def split_trytes(s: str) -> List[str]:
    """Parte una cadena de trits (longitud múltiplo de 6) en trytes."""
    if len(s) % TRYTE_TRITS != 0:
        raise ValueError("la longitud debe ser múltiplo de 6 trits")
    return [s[i:i + TRYTE_TRITS] for i in range(0, len(s), TRYTE_TRITS)]
