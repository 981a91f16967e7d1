"""
Fixed batch driver.
Wires the named input files to the ten named operations and writes
part1.tga ... part10.tga (task 8 writes three files).
Optionally compares each output with a same-named reference file.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from dotenv import load_dotenv
from tqdm import tqdm

from ..errors import TgaBlendError
from ..models.blend_mode import BlendMode, Channel
from ..models.image import PixelBuffer
from ..services.channel_adjustment_service import ChannelAdjustmentService
from ..services.channel_service import ChannelService
from ..services.compositing_service import CompositingService
from ..services.image_service import ImageService

# Load environment variables
load_dotenv()
INPUT_DIR = os.getenv("TGABLEND_INPUT_DIR", "input")
OUTPUT_DIR = os.getenv("TGABLEND_OUTPUT_DIR", "output")
EXAMPLES_DIR = os.getenv("TGABLEND_EXAMPLES_DIR") or None

logger = logging.getLogger(__name__)

Loader = Callable[[str], PixelBuffer]
blend = CompositingService.apply


# ─── Task bodies ───────────────────────────────────────────────────
# Each takes a loader (file name -> decoded buffer) and returns
# {output file name: buffer}.
def _task_1(load: Loader) -> Dict[str, PixelBuffer]:
    return {"part1.tga": blend(load("pattern1.tga"), load("layer1.tga"), BlendMode.MULTIPLY)}


def _task_2(load: Loader) -> Dict[str, PixelBuffer]:
    return {"part2.tga": blend(load("car.tga"), load("layer2.tga"), BlendMode.SUBTRACT)}


def _task_3(load: Loader) -> Dict[str, PixelBuffer]:
    product = blend(load("pattern2.tga"), load("layer1.tga"), BlendMode.MULTIPLY)
    return {"part3.tga": blend(load("text.tga"), product, BlendMode.SCREEN)}


def _task_4(load: Loader) -> Dict[str, PixelBuffer]:
    product = blend(load("circles.tga"), load("layer2.tga"), BlendMode.MULTIPLY)
    return {"part4.tga": blend(product, load("pattern2.tga"), BlendMode.SUBTRACT)}


def _task_5(load: Loader) -> Dict[str, PixelBuffer]:
    return {"part5.tga": blend(load("pattern1.tga"), load("layer1.tga"), BlendMode.OVERLAY)}


def _task_6(load: Loader) -> Dict[str, PixelBuffer]:
    car = load("car.tga").copy()
    ChannelAdjustmentService.add_to_channel(car, Channel.GREEN, 200)
    return {"part6.tga": car}


def _task_7(load: Loader) -> Dict[str, PixelBuffer]:
    car = load("car.tga").copy()
    ChannelAdjustmentService.scale_channel(car, Channel.RED, 4)
    ChannelAdjustmentService.scale_channel(car, Channel.BLUE, 0)
    return {"part7.tga": car}


def _task_8(load: Loader) -> Dict[str, PixelBuffer]:
    red, green, blue = ChannelService.split_rgb(load("car.tga"))
    return {"part8_r.tga": red, "part8_g.tga": green, "part8_b.tga": blue}


def _task_9(load: Loader) -> Dict[str, PixelBuffer]:
    combined = ChannelService.combine_rgb(
        load("layer_red.tga"), load("layer_green.tga"), load("layer_blue.tga")
    )
    return {"part9.tga": combined}


def _task_10(load: Loader) -> Dict[str, PixelBuffer]:
    return {"part10.tga": ChannelService.rotate180(load("text2.tga"))}


@dataclass(frozen=True)
class BatchTask:
    number: int
    description: str
    run: Callable[[Loader], Dict[str, PixelBuffer]]


TASKS: List[BatchTask] = [
    BatchTask(1, "multiply layer1 onto pattern1", _task_1),
    BatchTask(2, "subtract layer2 from car", _task_2),
    BatchTask(3, "screen (layer1 x pattern2) onto text", _task_3),
    BatchTask(4, "subtract pattern2 from (layer2 x circles)", _task_4),
    BatchTask(5, "overlay layer1 onto pattern1", _task_5),
    BatchTask(6, "add 200 to car's green channel", _task_6),
    BatchTask(7, "scale car's red by 4 and blue by 0", _task_7),
    BatchTask(8, "split car into red/green/blue", _task_8),
    BatchTask(9, "combine layer_red/layer_green/layer_blue", _task_9),
    BatchTask(10, "rotate text2 by 180 degrees", _task_10),
]


@dataclass
class TaskResult:
    number: int
    outputs: List[Path] = field(default_factory=list)
    # output name -> differing samples vs. the reference (None = no reference file)
    differences: Dict[str, Optional[int]] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and not any(self.differences.values())


class _CachedLoader:
    """Decode each input once; hand out the shared (read-only by convention) buffer."""

    def __init__(self, input_dir: Path, image_service: ImageService):
        self.input_dir = input_dir
        self.image_service = image_service
        self._cache: Dict[str, PixelBuffer] = {}

    def __call__(self, name: str) -> PixelBuffer:
        if name not in self._cache:
            self._cache[name] = self.image_service.load(self.input_dir / name)
        return self._cache[name]


def _compare(
    name: str,
    image: PixelBuffer,
    examples_dir: Path,
    image_service: ImageService,
) -> Optional[int]:
    reference_path = examples_dir / name
    if not reference_path.is_file():
        return None
    reference = image_service.load(reference_path)
    return image_service.count_differences(image, reference)


def run_batch(
    input_dir: str | Path = INPUT_DIR,
    output_dir: str | Path = OUTPUT_DIR,
    *,
    examples_dir: str | Path | None = EXAMPLES_DIR,
    only: Iterable[int] | None = None,
    image_service: ImageService | None = None,
    progress: bool = True,
) -> List[TaskResult]:
    """
    Run the fixed task table.

    Args:
        input_dir: Folder holding car.tga, layer1.tga, ... .
        output_dir: Created if missing; receives partN.tga.
        examples_dir: Optional folder of reference outputs to diff against.
        only: Task numbers to run (default: all).

    Returns:
        List[TaskResult]: one entry per task run, in table order. A failing
        task is recorded and later tasks still run.
    """
    image_service = image_service or ImageService()
    input_dir, output_dir = Path(input_dir), Path(output_dir)
    examples_dir = Path(examples_dir) if examples_dir else None
    output_dir.mkdir(parents=True, exist_ok=True)

    selected = set(only) if only is not None else None
    unknown = (selected or set()) - {task.number for task in TASKS}
    if unknown:
        raise ValueError(f"Unknown task number(s): {sorted(unknown)}")
    tasks = [t for t in TASKS if selected is None or t.number in selected]

    load = _CachedLoader(input_dir, image_service)
    results = []
    for task in tqdm(tasks, desc="tasks", ncols=70, disable=not progress):
        result = TaskResult(task.number)
        try:
            outputs = task.run(load)
            for name, image in outputs.items():
                result.outputs.append(image_service.save(image, output_dir / name))
                if examples_dir is not None:
                    result.differences[name] = _compare(name, image, examples_dir, image_service)
        except (TgaBlendError, ValueError) as err:
            logger.error("Task %d (%s) failed: %s", task.number, task.description, err)
            result.error = str(err)
        else:
            for name, diff in result.differences.items():
                if diff:
                    logger.warning("Task %d: %s differs from reference in %d samples", task.number, name, diff)
            logger.info("Task %d (%s): %s", task.number, task.description,
                        "passed" if result.ok else "FAILED")
        results.append(result)

    return results
