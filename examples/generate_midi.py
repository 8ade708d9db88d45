#!/usr/bin/env python3
"""
Example: Compile MML parts to a MIDI file.

This demonstrates the MIDI export pipeline - notation strings compiled
to Events, then written as one channel per part.

Usage:
    python examples/generate_midi.py
    # Creates: examples/output/canon.mid
"""

from pathlib import Path

from chuk_mcp_mml import compile_batch
from chuk_mcp_mml.compiler import ScoreIR, parts_to_midi

PARTS = [
    "T90 O5 F#4 E4 D4 C#4 O4 B4 A4 B4 O5 C#4",
    "T90 O4 DF#A2 O3 AC#E2 BDF#2 F#A2",
    "T90 O3 D2 O2 A2 B2 F#2 G2 D2 G2 A2",
]


def main() -> None:
    """Generate an example MIDI file."""
    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    compiled = compile_batch(PARTS)
    score = ScoreIR.from_compiled(PARTS, compiled, name="canon")
    print(f"Compiled: {score.summary()}")

    mid = parts_to_midi(compiled)
    mid.save(str(output_dir / "canon.mid"))
    print(f"  Created: {output_dir / 'canon.mid'}")


if __name__ == "__main__":
    main()
