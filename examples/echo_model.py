#!/usr/bin/env python3
"""Stand-in for the quantitative model that echoes its inputs back.

Usage: ``echo_model.py <input-file>``. Parameters whose low and high are equal
are printed as ``name,value``; all others as ``name,low,high``.
"""

import sys


def main(argv):
    if len(argv) != 2:
        print("usage: echo_model.py <input-file>", file=sys.stderr)
        return 1
    with open(argv[1], encoding="utf-8") as handle:
        for line in handle:
            line = line.strip()
            if not line:
                continue
            name, low, high = line.split(",")
            if float(low) == float(high):
                print(f"{name},{low}")
            else:
                print(f"{name},{low},{high}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
