# src/Sigflow/infrastructure/pipeline_config.py
# -*- coding: utf-8 -*-
"""
Pipeline document persistence.

A pipeline document is plain JSON::

    {
      "pipeline": [
        {"id": "...", "kind": "median", "name": "Median Filter",
         "enabled": true, "params": {"kernel": 5}}
      ],
      "samplingRate": 250
    }

Older files use ``"type"`` instead of ``"kind"`` and ``butterworth_*`` kind
names; both are accepted on load. Fields not listed above are ignored on
load and not written back.
"""
import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from Sigflow.core.filter_stages import FilterStage, params_from_mapping, params_to_mapping, parse_kind
from Sigflow.core.processing_pipeline import FilterChain
from Sigflow.shared.error_handling import ConfigurationError, ExportError, FileReadError

log = logging.getLogger(__name__)


@dataclass
class PipelineDocument:
    """Deserialized pipeline file."""

    stages: List[FilterStage] = field(default_factory=list)
    sampling_rate: Optional[float] = None

    def to_chain(self, chain: Optional[FilterChain] = None) -> FilterChain:
        """Load the stages into ``chain`` (a new chain if omitted)."""
        chain = chain if chain is not None else FilterChain()
        chain.set_stages(self.stages)
        return chain


def stage_to_dict(stage: FilterStage) -> Dict[str, Any]:
    return {
        "id": stage.id,
        "kind": stage.kind.value,
        "name": stage.name,
        "enabled": stage.enabled,
        "params": params_to_mapping(stage.params),
    }


def stage_from_dict(entry: Any, position: int = 0) -> FilterStage:
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Pipeline entry {position} must be an object, got {type(entry).__name__}")

    kind_name = entry.get("kind", entry.get("type"))
    if kind_name is None:
        raise ConfigurationError(f"Pipeline entry {position} has no 'kind'")
    kind = parse_kind(kind_name)
    params = params_from_mapping(kind, entry.get("params", {}))

    enabled = entry.get("enabled", True)
    if not isinstance(enabled, bool):
        raise ConfigurationError(f"Pipeline entry {position}: 'enabled' must be true/false, got {enabled!r}")

    stage_id = entry.get("id")
    if stage_id is None:
        return FilterStage(kind=kind, params=params, enabled=enabled)
    return FilterStage(kind=kind, params=params, enabled=enabled, id=str(stage_id))


def chain_to_document(chain: FilterChain, sampling_rate: Optional[float] = None) -> Dict[str, Any]:
    document: Dict[str, Any] = {"pipeline": [stage_to_dict(stage) for stage in chain]}
    if sampling_rate is not None:
        document["samplingRate"] = sampling_rate
    return document


def document_from_dict(data: Any) -> PipelineDocument:
    """Validate a parsed JSON object. Raises ConfigurationError; nothing is partially applied."""
    if not isinstance(data, dict):
        raise ConfigurationError(f"Pipeline document must be a JSON object, got {type(data).__name__}")

    entries = data.get("pipeline", [])
    if not isinstance(entries, list):
        raise ConfigurationError("'pipeline' must be a list of stages")
    stages = [stage_from_dict(entry, i) for i, entry in enumerate(entries)]

    ids = [stage.id for stage in stages]
    if len(ids) != len(set(ids)):
        raise ConfigurationError(f"Duplicate stage ids in pipeline document: {ids}")

    sampling_rate = data.get("samplingRate")
    if sampling_rate is not None:
        if (
            isinstance(sampling_rate, bool)
            or not isinstance(sampling_rate, (int, float))
            or not math.isfinite(sampling_rate)
            or sampling_rate <= 0
        ):
            raise ConfigurationError(f"'samplingRate' must be a positive number, got {sampling_rate!r}")
        sampling_rate = float(sampling_rate)

    return PipelineDocument(stages=stages, sampling_rate=sampling_rate)


def dumps_pipeline(chain: FilterChain, sampling_rate: Optional[float] = None) -> str:
    return json.dumps(chain_to_document(chain, sampling_rate), indent=2)


def loads_pipeline(text: str) -> PipelineDocument:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Malformed pipeline JSON: {e}") from e
    return document_from_dict(data)


def save_pipeline(chain: FilterChain, path: Union[str, Path], sampling_rate: Optional[float] = None) -> Path:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dumps_pipeline(chain, sampling_rate), encoding="utf-8")
    except OSError as e:
        log.error(f"Failed to save pipeline to {path}: {e}")
        raise ExportError(f"Could not write pipeline file {path}: {e}") from e
    log.info(f"Saved pipeline with {len(chain)} stage(s) to {path}")
    return path


def load_pipeline(path: Union[str, Path]) -> PipelineDocument:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        log.error(f"Failed to read pipeline file {path}: {e}")
        raise FileReadError(f"Could not read pipeline file {path}: {e}") from e
    document = loads_pipeline(text)
    log.info(f"Loaded pipeline with {len(document.stages)} stage(s) from {path}")
    return document
