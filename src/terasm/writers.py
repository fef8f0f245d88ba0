from __future__ import annotations
from typing import List
from .ast import Program

def to_text_lines(program: Program) -> List[str]:
    return [" ".join(u.trytes()) for u in program.image_order() if u.size]

def to_listing_lines(program: Program) -> List[str]:
    """Dirección decimal, trytes y texto de fuente de cada unidad."""
    out = []
    for u in program.image_order():
        if not u.size:
            continue
        head = f"{u.label}: " if u.label else ""
        out.append(f"{u.address:>5}  {' '.join(u.trytes()):<34}  {head}{u.text}")
    return out

def write_text(program: Program, path: str) -> None:
    lines = to_text_lines(program)
    with open(path, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")

def write_listing(program: Program, path: str) -> None:
    lines = to_listing_lines(program)
    with open(path, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")
