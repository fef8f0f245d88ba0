'''
códec numérico: literales 0t (ternario), 0x (base 27) y decimales -> trytes
'''

from __future__ import annotations
import re
from typing import Dict, List, Sequence

from .trits import (
    TRIT_VALUES, VALUE_TRITS, TRYTE_TRITS,
    fits, is_trits, is_tryte, max_value, split_trytes, trits_to_int,
)
from .diagnostics import InvalidNumeralLiteral, ValueOutOfRange

TERNARY_PREFIX = "0t"
SEPT_PREFIX = "0x"

DEC_RE = re.compile(r"^[+-]?[0-9]+$")

# Dígitos en base 27 (valores -13..13 en este orden) y su código de 3 trits
SEPT_DIGITS: Dict[str, str] = {
    "F": "λλλ", "G": "λλ0", "H": "λλ1",
    "K": "λ0λ", "N": "λ00", "P": "λ01",
    "R": "λ1λ", "S": "λ10", "T": "λ11",
    "U": "0λλ", "V": "0λ0", "Y": "0λ1",
    "Z": "00λ", "0": "000", "1": "001",
    "2": "01λ", "3": "010", "4": "011",
    "5": "1λλ", "6": "1λ0", "7": "1λ1",
    "8": "10λ", "9": "100", "A": "101",
    "B": "11λ", "C": "110", "D": "111",
}

def _check_width(width: int) -> None:
    if width <= 0:
        raise ValueError("width debe ser positivo")

def encode_int(value: int, width: int = 1) -> List[str]:
    """Codifica un entero en `width` trytes de ternario balanceado (el más significativo primero)."""
    _check_width(width)
    n = width * TRYTE_TRITS
    if not fits(value, n):
        raise ValueOutOfRange(f"valor {value} demasiado grande para {width} tryte(s) (±{max_value(n)})")
    negative = value < 0
    mag = -value if negative else value
    # Dígitos del menos significativo al más; la posición extra recibe el último acarreo
    digits = [0] * (n + 1)
    for i in range(n):
        digits[i] += mag % 3
        mag //= 3
        if digits[i] > 1:
            digits[i] -= 3
            digits[i + 1] += 1
        if negative:
            digits[i] = -digits[i]
    trits = "".join(VALUE_TRITS[d] for d in reversed(digits[:n]))
    return split_trytes(trits)

def _encode_ternary(digits: str, width: int, literal: str) -> List[str]:
    n = width * TRYTE_TRITS
    if not is_trits(digits):
        raise InvalidNumeralLiteral(f"literal ternario inválido: '{literal}'",
                                    hint=f"sólo se admiten los trits {''.join(TRIT_VALUES)}")
    if len(digits) > n:
        raise ValueOutOfRange(f"valor '{literal}' demasiado grande para {width} tryte(s) (máx. {n} trits)")
    return split_trytes(digits.rjust(n, "0"))

def _encode_sept(digits: str, width: int, literal: str) -> List[str]:
    n = width * 2
    digits = digits.upper()
    for d in digits:
        if d not in SEPT_DIGITS:
            raise InvalidNumeralLiteral(f"dígito en base 27 inválido '{d}' en '{literal}'")
    if len(digits) > n:
        raise ValueOutOfRange(f"valor '{literal}' demasiado grande para {width} tryte(s) (máx. {n} dígitos)")
    digits = digits.rjust(n, "0")
    # Cada par (alto, bajo) forma un tryte: código alto seguido del código bajo
    return [SEPT_DIGITS[digits[i]] + SEPT_DIGITS[digits[i + 1]] for i in range(0, n, 2)]

def encode(literal: str, width: int = 1) -> List[str]:
    """Codifica un literal numérico en `width` trytes.

    - '0t...': trits crudos, rellenados con ceros a la izquierda.
    - '0x...': dígitos en base 27, dos por tryte.
    - decimal con signo opcional: conversión a ternario balanceado.
    """
    _check_width(width)
    t = literal.strip()
    if t.startswith(TERNARY_PREFIX):
        return _encode_ternary(t[len(TERNARY_PREFIX):], width, t)
    if t.startswith(SEPT_PREFIX):
        return _encode_sept(t[len(SEPT_PREFIX):], width, t)
    if DEC_RE.match(t):
        return encode_int(int(t), width)
    raise InvalidNumeralLiteral(f"literal numérico inválido: '{literal}'")

def decode(trytes: Sequence[str]) -> int:
    """Valor entero de una secuencia de trytes (el más significativo primero)."""
    for t in trytes:
        if not is_tryte(t):
            raise ValueError(f"tryte inválido: {t!r}")
    return trits_to_int("".join(trytes))
