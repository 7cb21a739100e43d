from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--width", "200", "--height", "150"]


@dataclass
class Example:
    name: str
    args: list[str]
    output: Path

    def full_args(self) -> list[str]:
        return [sys.executable, "explore.py", *BASE_ARGS, *self.args, "--output", str(self.output)]


def _example(name: str, filename: str, *args: str) -> Example:
    return Example(name=name, args=list(args), output=EXAMPLES_ROOT / name / filename)


EXAMPLES: list[Example] = [
    _example("mode", "julia.png", "--mode", "julia"),
    _example("power", "cubic.png", "--power", "3"),
    _example("fractional-power", "power-2.5.png", "--power", "2.5"),
    _example("negative-power", "power-minus-2.png", "--power", "-2"),
    _example("julia-seed", "dendrite.png", "--mode", "julia", "--julia-re", "0", "--julia-im", "1"),
    _example("center", "seahorse-valley.png", "--center-x", "-0.75", "--center-y", "0.1", "--side", "0.05"),
    _example("side", "wide.png", "--side", "4"),
    _example("colormap", "inferno.png", "--colormap", "inferno"),
    _example("backend", "tensorflow.png", "--backend", "tensorflow"),
    _example("workers", "single-thread.png", "--workers", "1"),
    _example("format", "mandelbrot.jpg", "--format", "jpg"),
    _example("show-coordinates", "annotated.png", "--show-coordinates"),
    _example("verbose", "diagnostic.png", "--verbose"),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            shutil.rmtree(path)


def _verify(example: Example) -> None:
    if not example.output.is_file():
        raise RuntimeError(f"Expected file {example.output} was not created")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _ensure_clean([example.output.parent])
        example.output.parent.mkdir(parents=True, exist_ok=True)
        subprocess.run(example.full_args(), check=True)
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
