from __future__ import annotations
import argparse, logging, os, sys

from .ast import Program
from .isa import ADDRESS_BASE
from .lexer import COMMENT_MARKER
from .parser import parse
from .linker import first_pass, second_pass
from .writers import write_text, write_listing
from .diagnostics import AssemblyError

OUTPUT_SUFFIX = ".ter"

def assemble_text(text: str, *, filename: str | None = None, comment: str = COMMENT_MARKER,
                  origin: int = 0, address_base: int = ADDRESS_BASE,
                  allow_redefinition: bool = False) -> Program:
    """Parsea, hace PASADA 1 y PASADA 2.
    Devuelve el programa enlazado o lanza AssemblyError en el primer fallo."""
    program = parse(text, filename=filename, comment=comment,
                    allow_redefinition=allow_redefinition)
    program = first_pass(program, origin=origin)
    return second_pass(program, address_base=address_base)

def default_destination(source: str) -> str:
    root, ext = os.path.splitext(source)
    return (root if ext == ".asm" else source) + OUTPUT_SUFFIX

def _discard(*paths: str | None) -> None:
    """Borra las salidas que existan; tras un fallo no queda ninguna imagen."""
    for path in paths:
        if path and os.path.isfile(path):
            os.remove(path)

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="TerASM: ensamblador de dos pasadas para ternario balanceado")
    ap.add_argument("source", help="archivo .asm de entrada")
    ap.add_argument("destination", nargs="?", help="archivo de salida con trytes (por defecto: <source>.ter)")
    ap.add_argument("--listing", help="archivo de listado con direcciones")
    ap.add_argument("--comment", default=COMMENT_MARKER, help="marcador de comentario (por defecto ';')")
    ap.add_argument("--origin", type=int, default=0, help="dirección de la primera unidad de código")
    ap.add_argument("--base", type=int, default=ADDRESS_BASE, help="base sumada a las direcciones absolutas")
    ap.add_argument("--allow-redefinition", action="store_true",
                    help="permitir redefinir etiquetas (gana la última)")
    ap.add_argument("-v", "--verbose", action="store_true", help="trazas de depuración")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    destination = args.destination or default_destination(args.source)

    try:
        with open(args.source, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as ex:
        print(f"ERROR: no pude leer {args.source}: {ex}", file=sys.stderr)
        _discard(destination, args.listing)
        return 2

    try:
        program = assemble_text(text, filename=args.source, comment=args.comment,
                                origin=args.origin, address_base=args.base,
                                allow_redefinition=args.allow_redefinition)
    except AssemblyError as ex:
        print(ex.diagnostic, file=sys.stderr)
        _discard(destination, args.listing)
        return 1

    try:
        write_text(program, destination)
        if args.listing:
            write_listing(program, args.listing)
    except OSError as ex:
        print(f"ERROR al escribir salidas: {ex}", file=sys.stderr)
        _discard(destination, args.listing)
        return 3

    print(f"OK: {program.size} trytes → {destination}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
