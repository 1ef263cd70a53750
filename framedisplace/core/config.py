"""Run configuration for frame displacement."""

from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .displacement import DEFAULT_STEP, STRATEGIES, TAIL_POLICIES
from .frames import count_frames


@dataclass
class DisplaceConfig:
    """Everything the pipeline needs to turn one frame sequence into another.

    YAML config format:
    ```yaml
    input_dir: ./input
    output_dir: ./output
    frame_count: 300        # omit to count 0001.png, 0002.png, ... on disk
    strategy: row           # row | col | rowcol
    step: 2
    tail: skip              # skip | clamp
    extension: png
    num_workers: 4
    ```
    """
    input_dir: str = "./input"
    output_dir: str = "./output"
    frame_count: Optional[int] = None
    strategy: str = "row"
    step: int = DEFAULT_STEP
    tail: str = "skip"
    extension: str = "png"
    num_workers: int = 1

    def validate(self) -> "DisplaceConfig":
        if self.strategy not in STRATEGIES:
            raise ValueError(f"Unknown strategy: {self.strategy} (expected one of {', '.join(STRATEGIES)})")
        if self.tail not in TAIL_POLICIES:
            raise ValueError(f"Unknown tail policy: {self.tail} (expected one of {', '.join(TAIL_POLICIES)})")
        if self.step <= 0:
            raise ValueError(f"step must be positive, got {self.step}")
        if self.frame_count is not None and self.frame_count <= 0:
            raise ValueError(f"frame_count must be positive, got {self.frame_count}")
        if self.num_workers < 1:
            raise ValueError(f"num_workers must be at least 1, got {self.num_workers}")
        return self

    def resolve_frame_count(self) -> int:
        """Configured frame count, or the number of frames found in ``input_dir``."""
        if self.frame_count is not None:
            return self.frame_count
        return count_frames(self.input_dir, self.extension)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DisplaceConfig":
        valid_keys = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "DisplaceConfig":
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)
