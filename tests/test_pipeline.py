"""Tests for the pipeline, application state, report models and CLI."""
import json
import sys

import pytest

import cli
from lanemerge.errors import OverpassError
from lanemerge.inference.tags import TagId
from lanemerge.pipeline import LaneMergePipeline
from lanemerge.state.app import AppState


class TestPipeline:
    """Tests for LaneMergePipeline."""

    def test_process_response(self, config, overpass_response):
        pipeline = LaneMergePipeline(config)
        report = pipeline.process_response(overpass_response)

        assert report.relation_id == 9000
        assert report.name == "A1"
        assert [way.id for way in report.ways] == [100, 101]
        assert report.failed_ways == {}

    def test_way_report(self, config, overpass_response):
        report = LaneMergePipeline(config).process_response(overpass_response)
        main_street, oneway = report.ways

        assert main_street.name == "Main Street"
        assert main_street.highway == "primary"
        assert main_street.tags.lanes == 3
        assert "lanes" not in main_street.inferred
        assert [w.kind for w in main_street.warnings] == ["lanesUnequalToForwardBackward"]
        assert main_street.osm_tags["lanes"] == "3"
        assert len(main_street.lanes) == 3

        assert oneway.tags.oneway is True
        assert oneway.tags.turn_lanes_forward == [["left"], ["through", "right"]]
        assert oneway.osm_tags["turn:lanes:forward"] == "left|through;right"
        assert report.warning_count == len(main_street.warnings) + len(oneway.warnings)

    def test_state_is_updated(self, config, overpass_response):
        state = AppState()
        LaneMergePipeline(config, state=state).process_response(overpass_response)

        assert state.current_relation_id.get() == 9000
        assert set(state.data.get()) == {100, 101}
        assert state.selected.get() is None

        state.selected_way.set(101)
        assert state.selected.get().id == 101

    def test_run_uses_collector(self, config, overpass_response):
        pipeline = LaneMergePipeline(config)
        pipeline.collector.fetch_raw = lambda term: overpass_response

        report = pipeline.run("A1")
        assert report.relation_id == 9000

    def test_run_propagates_search_errors(self, config):
        with pytest.raises(OverpassError):
            LaneMergePipeline(config).run('"')

    def test_save(self, config, overpass_response, tmp_path):
        pipeline = LaneMergePipeline(config)
        report = pipeline.process_response(overpass_response)
        output = tmp_path / "out" / "report.json"

        pipeline.save(report, str(output))
        saved = json.loads(output.read_text(encoding="utf-8"))
        assert saved["relation_id"] == 9000
        assert saved["ways"][0]["tags"]["lanes"] == 3
        assert "generated_at" in saved


class TestAppState:
    """Tests for AppState computed values."""

    def test_empty_state(self):
        state = AppState()
        assert state.bounds.get() is None
        assert state.warning_count.get() == 0
        assert state.selected_way.get() == -1

    def test_computed_values_follow_data(self, config, overpass_response):
        state = AppState()
        report = LaneMergePipeline(config, state=state).process_response(overpass_response)

        bounds = state.bounds.get()
        assert bounds.min_lat == 51.50
        assert bounds.max_lat == 51.53
        assert bounds.centre == pytest.approx((51.515, -0.115))
        assert state.warning_count.get() == report.warning_count

    def test_load_clears_selection(self, config, overpass_response):
        state = AppState()
        pipeline = LaneMergePipeline(config, state=state)
        pipeline.process_response(overpass_response)
        state.selected_way.set(100)

        pipeline.process_response(overpass_response)
        assert state.selected_way.get() == -1


class TestCLI:
    """Tests for the command-line interface."""

    @pytest.fixture
    def response_file(self, tmp_path, overpass_response):
        path = tmp_path / "response.json"
        path.write_text(json.dumps(overpass_response), encoding="utf-8")
        return path

    def run_cli(self, monkeypatch, *args):
        monkeypatch.setattr(sys, "argv", ["cli.py", *args])
        return cli.main()

    def test_process(self, monkeypatch, response_file, tmp_path):
        output = tmp_path / "report.json"
        code = self.run_cli(monkeypatch, "process", "--input", str(response_file), "--output", str(output))

        assert code == 0
        assert json.loads(output.read_text(encoding="utf-8"))["name"] == "A1"

    def test_process_left_hand_traffic(self, monkeypatch, response_file, tmp_path):
        output = tmp_path / "report.json"
        code = self.run_cli(
            monkeypatch, "--left-hand-traffic", "process", "--input", str(response_file), "-o", str(output)
        )

        assert code == 0
        report = json.loads(output.read_text(encoding="utf-8"))
        assert report["left_hand_traffic"] is True
        assert report["ways"][0]["lanes"][0]["direction"] == "forward"

    def test_missing_input(self, monkeypatch, tmp_path):
        assert self.run_cli(monkeypatch, "process", "--input", str(tmp_path / "missing.json")) == 1

    def test_warnings(self, monkeypatch, response_file, capsys):
        code = self.run_cli(monkeypatch, "warnings", "--input", str(response_file))

        assert code == 2
        out = capsys.readouterr().out
        assert "Way 100 (Main Street):" in out
        assert f"[{TagId.LANES.value}]" in out

    def test_no_command(self, monkeypatch):
        assert self.run_cli(monkeypatch) == 1

    def test_search_error(self, monkeypatch):
        assert self.run_cli(monkeypatch, "search", '"quoted"') == 1
