"""
Tests for the Score IR.
"""

import json

import pytest

from chuk_mcp_mml import REST, ErrorPolicy, compile_batch
from chuk_mcp_mml.compiler.score_ir import SCHEMA_VERSION, IRPart, ScoreIR

NOTATIONS = ["T120 O4 CEG4 R4", "T120 O4 C5", "T60 O3 A2"]


@pytest.fixture
def score() -> ScoreIR:
    compiled = compile_batch(NOTATIONS, policy=ErrorPolicy.CONTINUE)
    return ScoreIR.from_compiled(NOTATIONS, compiled, name="demo")


class TestScoreIR:
    """Tests for ScoreIR."""

    def test_from_compiled(self, score: ScoreIR) -> None:
        assert score.schema == SCHEMA_VERSION
        assert [part.index for part in score.parts] == [0, 2]
        assert score.failed == [1]
        assert score.parts[1].source == "T60 O3 A2"

    def test_duration_is_longest_part(self, score: ScoreIR) -> None:
        assert score.parts[0].duration == pytest.approx(1.0)
        assert score.duration == pytest.approx(2.0)

    def test_counts(self, score: ScoreIR) -> None:
        assert score.event_count() == 3
        assert score.parts[0].tone_count() == 3

    def test_events_by_part(self, score: ScoreIR) -> None:
        by_part = score.events_by_part()
        assert sorted(by_part) == [0, 2]
        assert by_part[0][1].indices == (REST,)

    def test_to_dict_names(self, score: ScoreIR) -> None:
        data = score.to_dict()
        assert data["schema"] == "mml_score/v1"
        assert data["parts"][0]["events"][0]["names"] == ["C4", "E3", "G3"]
        assert data["parts"][0]["events"][1]["names"] == ["R"]

    def test_json_round_trip(self, score: ScoreIR) -> None:
        restored = ScoreIR.from_json(score.to_json())
        assert restored.name == "demo"
        assert restored.failed == [1]
        assert restored.events_by_part() == score.events_by_part()

    def test_json_is_deterministic(self, score: ScoreIR) -> None:
        again = ScoreIR.from_compiled(
            NOTATIONS, compile_batch(NOTATIONS, policy=ErrorPolicy.CONTINUE), name="demo"
        )
        assert json.loads(score.to_json()) == json.loads(again.to_json())

    def test_summary(self, score: ScoreIR) -> None:
        summary = score.summary()
        assert summary["parts"] == 2
        assert summary["failed"] == [1]
        assert summary["total_events"] == 3
        assert summary["index_range"] == (31, 39)

    def test_empty(self) -> None:
        empty = ScoreIR()
        assert empty.duration == 0.0
        assert empty.summary()["index_range"] == (0, 0)


class TestIRPart:
    """Tests for IRPart."""

    def test_from_dict(self) -> None:
        part = IRPart.from_dict(
            {
                "index": 4,
                "source": "T120 O4 C4",
                "events": [
                    {
                        "indices": [39],
                        "frequencies": [261.63],
                        "start": 0.0,
                        "duration": 0.5,
                        "stop": 0.5,
                    }
                ],
            }
        )
        assert part.index == 4
        assert part.events[0].indices == (39,)
        assert part.duration == 0.5
