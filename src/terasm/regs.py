'''
registros de la arquitectura (RZ, R0, R1) y su trit
'''

from __future__ import annotations
from typing import Dict

# Nombre canónico -> trit que lo codifica
REG_TRITS: Dict[str, str] = {
    "rz": "λ",
    "r0": "0",
    "r1": "1",
}

def is_reg(token: str) -> bool:
    """Indica si el token nombra un registro (sin distinguir mayúsculas)."""
    return token.strip().lower() in REG_TRITS

def normalize_reg(token: str) -> str:
    """Devuelve el nombre canónico en mayúsculas ('RZ', 'R0', 'R1') o lanza ValueError."""
    t = token.strip().lower()
    if t not in REG_TRITS:
        raise ValueError(f"Registro inválido: {token}")
    return t.upper()

def reg_trit(token: str) -> str:
    """Devuelve el trit ('λ', '0' o '1') que codifica el registro."""
    return REG_TRITS[normalize_reg(token).lower()]
