"""
Console client for the cryptogram solver.

Usage:
    python -m scripts.solve_cryptogram [cryptogram] [--dictionary PATH]

Examples:
    python -m scripts.solve_cryptogram "xyz"
    python -m scripts.solve_cryptogram --dictionary /usr/share/dict/words
    python -m scripts.solve_cryptogram "qr st" --timeout 30 --allow-fixed-points

Input should be letters and spaces only; it is lowercased before solving.
With no cryptogram argument the client prompts for one on stdin.
Solutions are printed the moment they are found, then listed again with the
total count and elapsed time.
"""
import argparse
import logging
import sys
import time
from pathlib import Path

# Ensure project root is on path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from app.settings import settings
from app.metrics import Deadline
from app.solver import CryptogramSolver, MalformedCiphertextError
from app.trie import load_trie

logger = logging.getLogger("cryptogram")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Cryptogram Solver")
    parser.add_argument("cryptogram", nargs="?", default=None,
                        help="Cryptogram to solve (prompted for when omitted)")
    parser.add_argument("--dictionary", type=str, default=str(settings.DICTIONARY_PATH),
                        help=f"Word list, one word per line (default: {settings.DICTIONARY_PATH})")
    parser.add_argument("--allow-fixed-points", action="store_true",
                        default=settings.ALLOW_FIXED_POINTS,
                        help="Allow a letter to decrypt to itself")
    parser.add_argument("--timeout", type=float, default=settings.SOLVE_TIMEOUT_SECONDS,
                        help="Stop searching after this many seconds (default: no limit)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log dictionary statistics and search details")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")

    try:
        trie = load_trie(args.dictionary, settings.MIN_WORD_LENGTH)
    except OSError as e:
        print(f"Error: could not read dictionary {args.dictionary}: {e}")
        return 1

    cryptogram = args.cryptogram
    if cryptogram is None:
        print("Please enter a cryptogram to solve (alphabetical characters and spaces only):")
        cryptogram = sys.stdin.readline()
    cryptogram = cryptogram.strip().lower()

    print("\nSolutions derived (listed as soon as they're found):")
    solver = CryptogramSolver(trie, args.allow_fixed_points)
    deadline = Deadline(args.timeout)
    start = time.perf_counter()
    try:
        solutions = solver.solve(
            cryptogram,
            on_solution=lambda s: print(f"SOLUTION FOUND: {s.plaintext}", flush=True),
            should_stop=deadline,
        )
    except MalformedCiphertextError as e:
        print(f"Error: {e}")
        return 2
    elapsed_ms = (time.perf_counter() - start) * 1000

    print("\n-----------------------------------")
    print("Compiled solution list:")
    for solution in solutions:
        print(solution)
    print(f"{len(solutions)} solutions derived in {elapsed_ms:.0f} ms")
    if deadline.expired:
        print(f"(search stopped after {args.timeout:g}s; the list may be incomplete)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
