# tests/infrastructure/test_pipeline_config.py
"""
Tests for pipeline JSON persistence.
"""

import json

import pytest

from Sigflow.core.filter_stages import StageKind
from Sigflow.core.processing_pipeline import FilterChain
from Sigflow.infrastructure.pipeline_config import (
    dumps_pipeline,
    load_pipeline,
    loads_pipeline,
    save_pipeline,
)
from Sigflow.shared.error_handling import ConfigurationError, FileReadError


@pytest.fixture
def chain():
    chain = FilterChain()
    chain.append("median", kernel=7)
    notch = chain.append("notch", frequency=60)
    chain.append("bandpass", low=0.5, high=40)
    chain.toggle(notch.id)
    return chain


class TestRoundTrip:

    def test_dumps_loads_restores_chain(self, chain):
        document = loads_pipeline(dumps_pipeline(chain, sampling_rate=250))
        restored = document.to_chain()
        assert restored.get_stages() == chain.get_stages()
        assert document.sampling_rate == 250.0

    def test_written_document_layout(self, chain):
        data = json.loads(dumps_pipeline(chain))
        assert "samplingRate" not in data
        first = data["pipeline"][0]
        assert first["kind"] == "median"
        assert first["name"] == "Median Filter"
        assert first["enabled"] is True
        assert first["params"] == {"kernel": 7.0}
        assert data["pipeline"][1]["enabled"] is False

    def test_file_round_trip(self, chain, tmp_path):
        path = save_pipeline(chain, tmp_path / "configs" / "pipeline_config.json", sampling_rate=500)
        assert path.exists()
        document = load_pipeline(path)
        assert [s.kind for s in document.stages] == [StageKind.MEDIAN, StageKind.NOTCH, StageKind.BANDPASS]
        assert document.sampling_rate == 500.0

    def test_to_chain_replaces_existing_stages(self, chain):
        target = FilterChain()
        target.append("detrend")
        loads_pipeline(dumps_pipeline(chain)).to_chain(target)
        assert len(target) == 3


class TestLegacyAndDefaults:

    def test_legacy_type_key_and_kind_names(self):
        text = json.dumps({
            "pipeline": [
                {"type": "butterworth_bandstop", "name": "Butterworth Bandstop",
                 "params": {"low": 45, "high": 55, "order": 4}, "color": "#ff0000"},
                {"id": "abc", "type": "moving_average", "params": {"window": 9}, "enabled": False},
            ],
            "samplingRate": 250,
            "createdWith": "older build",
        })
        document = loads_pipeline(text)
        bandstop, average = document.stages
        assert bandstop.kind is StageKind.BANDSTOP
        assert bandstop.params.low == 45.0
        assert bandstop.enabled is True
        assert bandstop.id
        assert average.id == "abc"
        assert average.enabled is False

    def test_empty_document(self):
        assert loads_pipeline("{}").stages == []


class TestValidation:

    @pytest.mark.parametrize("text", [
        "{not json",
        "[]",
        '{"pipeline": {}}',
        '{"pipeline": [{"kind": "wavelet", "params": {}}]}',
        '{"pipeline": [{"kind": "median", "params": {"kernel": 5, "sigma": 1}}]}',
        '{"pipeline": [{"kind": "median", "params": {}}]}',
        '{"pipeline": [{"params": {"kernel": 5}}]}',
        '{"pipeline": [{"kind": "median", "params": {"kernel": 5}, "enabled": "yes"}]}',
        '{"pipeline": [], "samplingRate": -1}',
        '{"pipeline": [], "samplingRate": "fast"}',
        '{"pipeline": [], "samplingRate": NaN}',
        '{"pipeline": [], "samplingRate": Infinity}',
    ])
    def test_invalid_documents(self, text):
        with pytest.raises(ConfigurationError):
            loads_pipeline(text)

    def test_duplicate_ids(self):
        entry = {"id": "same", "kind": "detrend", "params": {}}
        with pytest.raises(ConfigurationError, match="Duplicate"):
            loads_pipeline(json.dumps({"pipeline": [entry, entry]}))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileReadError):
            load_pipeline(tmp_path / "nope.json")
