"""Generator pipeline data types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from . import constants


@dataclass(frozen=True)
class GeneratorConfig:
    """Groups code generation configuration."""

    output_dir: Path = Path(constants.DEFAULT_OUTPUT_DIR)
    timestamp: bool = False
    class_name: str = constants.THEME_CLASS_NAME
    namespace: str = constants.THEME_NAMESPACE
    basename: str = constants.GENERATED_BASENAME


@dataclass
class GenerationStats:
    """Sizes and timings collected while generating files."""

    color_count: int = 0
    key_count: int = 0
    trie_node_count: int = 0
    min_key_length: int = 0
    total_time: float = 0.0
    written: list[Path] = field(default_factory=list)

    def report(self) -> str:
        lines = [
            "═══ Generation Statistics ═══",
            f"  Colors        : {self.color_count}",
            f"  Matcher keys  : {self.key_count}",
            f"  Trie nodes    : {self.trie_node_count}",
            f"  Shortest key  : {self.min_key_length}",
            f"  Total time    : {self.total_time * 1000:.1f}ms",
        ]
        lines.extend(f"  Wrote {path}" for path in self.written)
        return "\n".join(lines)
