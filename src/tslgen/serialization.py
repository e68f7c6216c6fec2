"""
Serialization helpers for generated frames.

Produces a flat frame listing as plain dicts, JSON or YAML. The listing is
an output format only; nothing in this package reads it back.

Listing structure:
    summary: {total, normal, single, error}
    frames:
      - number: 1
        type: normal
        key: "2.1"
        branch: null
        entries:
          - {category: Size, choice: Not empty.}
          - {category: Count, choice: None.}
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml

from tslgen.frames import TestFrame
from tslgen.result import GeneratorResult


def frame_to_dict(frame: TestFrame) -> Dict[str, Any]:
    return {
        "number": frame.number,
        "type": frame.frame_type.value,
        "key": frame.key or None,
        "branch": frame.branch,
        "entries": [
            {"category": category.name, "choice": choice.name if choice is not None else None}
            for category, choice in frame.entries.items()
        ],
    }


def frames_to_dicts(frames: List[TestFrame]) -> List[Dict[str, Any]]:
    return [frame_to_dict(frame) for frame in frames]


def summary_to_dict(result: GeneratorResult) -> Dict[str, int]:
    return {
        "total": result.total_frames,
        "normal": result.normal_frames,
        "single": result.single_frames,
        "error": result.error_frames,
    }


def result_to_dict(result: GeneratorResult) -> Dict[str, Any]:
    return {
        "summary": summary_to_dict(result),
        "frames": frames_to_dicts(result.frames),
    }


def result_to_json(result: GeneratorResult) -> str:
    return json.dumps(result_to_dict(result), sort_keys=True, indent=2)


def result_to_yaml(result: GeneratorResult) -> str:
    return yaml.safe_dump(result_to_dict(result), sort_keys=False)


__all__ = [
    "frame_to_dict",
    "frames_to_dicts",
    "summary_to_dict",
    "result_to_dict",
    "result_to_json",
    "result_to_yaml",
]
