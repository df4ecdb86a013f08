"""
Preprocessing step classes with a common interface.

Each step implements PreprocessStep and is pure: it takes an input image
and returns a new output without mutating the original array. Candidate
representations are built by chaining steps in a Pipeline.

Usage:
    from preprocessing.steps import GrayscaleStep, EqualizeStep, Pipeline

    pipeline = Pipeline(steps=[
        GrayscaleStep(),
        EqualizeStep(),
    ])
    result = pipeline.run(image)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import cv2
import numpy as np

from config import THRESHOLD_BLOCK_SIZE, THRESHOLD_BIAS

from .contrast import equalize_histogram
from .normalization import to_grayscale, resize_by_factor
from .threshold import adaptive_threshold


class PreprocessStep(ABC):
    """Base class for preprocessing steps.

    Steps can optionally produce metadata (like the scale factor or the
    share of foreground pixels) that is kept alongside the output image.
    """

    @abstractmethod
    def apply(self, img: np.ndarray) -> np.ndarray:
        """Apply this preprocessing step to an image.

        Must be pure: never mutates the input image.
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for logging and debugging."""
        pass

    def get_metadata(self) -> dict[str, Any]:
        """Return any metadata produced by the last apply() call."""
        return {}


@dataclass(frozen=True)
class GrayscaleStep(PreprocessStep):
    """Convert an RGB, RGBA or grayscale image to single-channel uint8."""

    def apply(self, img: np.ndarray) -> np.ndarray:
        return to_grayscale(img)

    @property
    def name(self) -> str:
        return "grayscale"


@dataclass
class ScaleStep(PreprocessStep):
    """Resample by a linear factor with a Lanczos filter.

    Works on color or grayscale input. Output dimensions are truncated,
    never rounded.

    Attributes:
        factor: Linear scale factor applied to width and height.
        interpolation: OpenCV interpolation flag.
    """

    factor: float
    interpolation: int = cv2.INTER_LANCZOS4
    _output_size: tuple[int, int] | None = field(default=None, init=False, repr=False)

    def apply(self, img: np.ndarray) -> np.ndarray:
        resized = resize_by_factor(img, self.factor, self.interpolation)
        height, width = resized.shape[:2]
        self._output_size = (width, height)
        return resized

    @property
    def name(self) -> str:
        return f"scale({self.factor})"

    def get_metadata(self) -> dict[str, Any]:
        return {"scale_factor": self.factor, "output_size": self._output_size}


@dataclass(frozen=True)
class EqualizeStep(PreprocessStep):
    """Global histogram equalization. Requires grayscale input."""

    def apply(self, img: np.ndarray) -> np.ndarray:
        return equalize_histogram(img)

    @property
    def name(self) -> str:
        return "equalize"


@dataclass
class AdaptiveThresholdStep(PreprocessStep):
    """Local-mean binarization. Requires grayscale input.

    Attributes:
        block_size: Window diameter.
        bias: Constant subtracted from the local mean.
    """

    block_size: int = THRESHOLD_BLOCK_SIZE
    bias: int = THRESHOLD_BIAS
    _foreground_ratio: float | None = field(default=None, init=False, repr=False)

    def apply(self, img: np.ndarray) -> np.ndarray:
        binary = adaptive_threshold(img, self.block_size, self.bias)
        self._foreground_ratio = (
            float(np.count_nonzero(binary == 0)) / binary.size if binary.size else 0.0
        )
        return binary

    @property
    def name(self) -> str:
        return f"threshold({self.block_size})"

    def get_metadata(self) -> dict[str, Any]:
        return {
            "step_metrics": {
                "block_size": self.block_size,
                "bias": self.bias,
                "foreground_ratio": self._foreground_ratio,
            }
        }


@dataclass
class StepResult:
    """Result of applying a single preprocessing step.

    Attributes:
        name: Name of the step that produced this result.
        image: Output image from the step.
        metadata: Any metadata produced by the step.
        artifact_path: Path where the image was saved (if artifact saving enabled).
    """

    name: str
    image: np.ndarray
    metadata: dict[str, Any] = field(default_factory=dict)
    artifact_path: str | None = None


@dataclass
class PipelineStepResults:
    """Results from running a preprocessing pipeline.

    Attributes:
        original: The original input image.
        steps: List of StepResult for each step in order.
        original_artifact_path: Path where the original was saved (if enabled).
    """

    original: np.ndarray
    steps: list[StepResult] = field(default_factory=list)
    original_artifact_path: str | None = None

    @property
    def final(self) -> np.ndarray:
        """Get the final processed image."""
        if not self.steps:
            return self.original
        return self.steps[-1].image

    def get_intermediate(self, step_name: str) -> np.ndarray | None:
        """Get intermediate image by step name (e.g. "grayscale", "scale(1.5)")."""
        for step in self.steps:
            if step.name == step_name:
                return step.image
        return None

    def get_metadata(self, key: str) -> Any | None:
        """Get the first metadata value stored under key by any step."""
        for step in self.steps:
            if key in step.metadata:
                return step.metadata[key]
        return None

    @property
    def artifact_paths(self) -> dict[str, str]:
        """Map normalized step names ("scale", "threshold", ...) to saved paths."""
        paths = {}
        if self.original_artifact_path:
            paths["original"] = self.original_artifact_path
        for step in self.steps:
            if step.artifact_path:
                key = step.name.split("(")[0]
                paths[key] = step.artifact_path
        return paths


def save_image(img: np.ndarray, path: str) -> None:
    """Write an RGB or grayscale image to disk, creating parent directories."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    if img.ndim == 3 and img.shape[2] == 3:
        img = cv2.cvtColor(img, cv2.COLOR_RGB2BGR)
    elif img.ndim == 3 and img.shape[2] == 4:
        img = cv2.cvtColor(img, cv2.COLOR_RGBA2BGRA)
    cv2.imwrite(path, img)


@dataclass
class Pipeline:
    """A sequence of preprocessing steps applied in order.

    The output of one step is the input of the next; every intermediate
    result is preserved.

    Attributes:
        steps: List of PreprocessStep instances to apply in order.
    """

    steps: list[PreprocessStep]

    def run(
        self,
        img: np.ndarray,
        artifact_dir: str | None = None,
    ) -> PipelineStepResults:
        """Run the pipeline on an image.

        Args:
            img: Input image as numpy array.
            artifact_dir: Optional directory to save intermediate images.
                         If provided, saves original.png and each step's output.

        Returns:
            PipelineStepResults containing all intermediate images and metadata.
        """
        result = PipelineStepResults(original=img.copy())
        current = result.original

        if artifact_dir:
            original_path = f"{artifact_dir}/original.png"
            save_image(img, original_path)
            result.original_artifact_path = original_path

        for step in self.steps:
            output = step.apply(current)
            metadata = step.get_metadata()

            artifact_path = None
            if artifact_dir:
                step_key = step.name.split("(")[0]
                artifact_path = f"{artifact_dir}/{step_key}.png"
                save_image(output, artifact_path)

            result.steps.append(
                StepResult(
                    name=step.name,
                    image=output,
                    metadata=metadata,
                    artifact_path=artifact_path,
                )
            )
            current = output

        return result

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)
