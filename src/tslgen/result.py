"""
Read-only aggregation over an ordered list of generated frames.
"""

from dataclasses import dataclass, field
from typing import Iterator, List

from tslgen.frames import TestFrame
from tslgen.model import FrameType


@dataclass
class GeneratorResult:
    """
    Outcome of one FrameGenerator.generate() call.

    Behaves like the ordered frame list (len, iteration, indexing) and adds
    counts, per-type filters and text renderings. It makes no decisions.
    """

    frames: List[TestFrame] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.frames)

    def __iter__(self) -> Iterator[TestFrame]:
        return iter(self.frames)

    def __getitem__(self, index):
        return self.frames[index]

    def _of_type(self, frame_type: FrameType) -> List[TestFrame]:
        return [frame for frame in self.frames if frame.frame_type == frame_type]

    @property
    def total_frames(self) -> int:
        return len(self.frames)

    @property
    def normal_frames(self) -> int:
        return len(self._of_type(FrameType.NORMAL))

    @property
    def single_frames(self) -> int:
        return len(self._of_type(FrameType.SINGLE))

    @property
    def error_frames(self) -> int:
        return len(self._of_type(FrameType.ERROR))

    @property
    def normal_frames_list(self) -> List[TestFrame]:
        return self._of_type(FrameType.NORMAL)

    @property
    def single_frames_list(self) -> List[TestFrame]:
        return self._of_type(FrameType.SINGLE)

    @property
    def error_frames_list(self) -> List[TestFrame]:
        return self._of_type(FrameType.ERROR)

    @property
    def keys(self) -> List[str]:
        """Keys of the normal frames, in generation order."""
        return [frame.key for frame in self.normal_frames_list]

    def to_summary_string(self) -> str:
        return (
            f"Generated {self.total_frames} test frames:\n"
            f"- Normal frames: {self.normal_frames}\n"
            f"- Single frames: {self.single_frames}\n"
            f"- Error frames: {self.error_frames}\n"
        )

    def to_frames_string(self) -> str:
        """Every frame followed by a blank line; empty string without frames."""
        return "".join(f"{frame}\n\n" for frame in self.frames)

    def __str__(self) -> str:
        return f"{self.to_summary_string()}\n{self.to_frames_string()}"


__all__ = ["GeneratorResult"]
