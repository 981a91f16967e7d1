from .blend_files import blend_files
from .batch_tasks import TASKS, BatchTask, TaskResult, run_batch
from .gallery_blend import blend_gallery

__all__ = ["blend_files", "TASKS", "BatchTask", "TaskResult", "run_batch", "blend_gallery"]
