"""Generation plans and backend response parsing."""

from collections.abc import Callable, Iterator
from dataclasses import dataclass

PROMPT_TEMPLATE = (
    "A realistic portrait of {model_name}, matching the pose/outfit of the "
    "reference, ultra realistic, cinematic lighting, consistent face, "
    "photo quality."
)


@dataclass(frozen=True)
class GenerationPlan:
    """Batch of backend calls derived from a session."""

    model_name: str
    base_image: str
    references: tuple[str, ...]
    variations_per_ref: int

    @property
    def total(self) -> int:
        """Number of images requested by the plan."""
        return len(self.references) * self.variations_per_ref

    @property
    def prompt(self) -> str:
        """Prompt sent with every call of the batch."""
        return PROMPT_TEMPLATE.format(model_name=self.model_name)

    def calls(self) -> Iterator[str]:
        """Yield the reference image for each call, in request order."""
        for reference in self.references:
            for _ in range(self.variations_per_ref):
                yield reference


@dataclass(frozen=True)
class GenerationReport:
    """Outcome of an executed batch."""

    requested: int
    produced: int

    @property
    def failed(self) -> int:
        """Number of requested images that were not produced."""
        return self.requested - self.produced


def _data_image_url(response: dict) -> object:
    data = response.get("data")
    return data.get("image_url") if isinstance(data, dict) else None


def _data_outputs(response: dict) -> object:
    data = response.get("data")
    if isinstance(data, dict):
        outputs = data.get("outputs")
        if isinstance(outputs, list) and outputs:
            return outputs[0]
    return None


def _data_list_url(response: dict) -> object:
    data = response.get("data")
    if isinstance(data, list) and data and isinstance(data[0], dict):
        return data[0].get("url")
    return None


def _output_list_url(response: dict) -> object:
    output = response.get("output")
    if isinstance(output, list) and output and isinstance(output[0], dict):
        return output[0].get("url")
    return None


_EXTRACTORS: tuple[Callable[[dict], object], ...] = (
    _data_image_url,
    _data_list_url,
    _data_outputs,
    _output_list_url,
)


def extract_image_url(response: object) -> str | None:
    """Return the first image URL found in a backend response, if any."""
    if not isinstance(response, dict):
        return None
    for extractor in _EXTRACTORS:
        candidate = extractor(response)
        if isinstance(candidate, str) and candidate:
            return candidate
    return None
