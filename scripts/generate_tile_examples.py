from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

EXAMPLES_ROOT = Path("examples/tiles")


@dataclass
class Example:
    name: str
    args: list[str]
    expected: Path

    def full_args(self) -> list[str]:
        return [sys.executable, "tileserver.py", *self.args, "--output", str(self.expected)]


EXAMPLES: list[Example] = [
    Example(name="root", args=["--render", "0/0/0"], expected=EXAMPLES_ROOT / "root.png"),
    Example(name="seahorse-valley", args=["--render", "3/2/3"], expected=EXAMPLES_ROOT / "seahorse-valley.png"),
    Example(name="antenna", args=["--render", "4/2/7"], expected=EXAMPLES_ROOT / "antenna.png"),
    Example(
        name="low-iterations",
        args=["--render", "2/1/1", "--max-iterations", "50"],
        expected=EXAMPLES_ROOT / "low-iterations.png",
    ),
    Example(
        name="mandelbox",
        args=["--render", "0/0/0", "--evaluator", "mandelbox", "--extent-scale", "16"],
        expected=EXAMPLES_ROOT / "mandelbox.png",
    ),
    Example(
        name="jpeg",
        args=["--render", "1/0/1", "--format", "jpeg"],
        expected=EXAMPLES_ROOT / "jpeg.jpeg",
    ),
]


def main() -> None:
    if EXAMPLES_ROOT.exists():
        shutil.rmtree(EXAMPLES_ROOT)
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[tile-example] {example.name}")
        subprocess.run(example.full_args(), check=True)
        if not example.expected.is_file():
            raise RuntimeError(f"Expected file {example.expected} was not created")
    print("\nAll tile examples generated successfully.")


if __name__ == "__main__":
    main()
