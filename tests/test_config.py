"""Tests for the key=value configuration file."""

from pathlib import Path

import pytest

from lpj2nc.config import ConversionConfig, default_output_path, parse_config_file
from lpj2nc.store import OUTPUT_MODES


class TestDefaultOutputPath:
    def test_strips_everything_after_first_dot(self):
        assert default_output_path(Path("/data/cpool.out.gz")) == Path("/data/cpool.nc")

    def test_no_suffix(self):
        assert default_output_path("run/mnpp") == Path("run/mnpp.nc")

    def test_hidden_file(self):
        assert default_output_path(".cpool") == Path(".cpool.nc")


class TestConversionConfig:
    def test_defaults(self):
        cfg = ConversionConfig(input_path="cpool.out", grid="0.5")
        assert cfg.output_path == Path("cpool.nc")
        assert cfg.unit == "unknown"
        assert cfg.mode == "create"
        assert cfg.validate_order is True
        assert cfg.monthly is False

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            ConversionConfig(input_path="cpool.out", grid="0.5", mode="append")

    @pytest.mark.parametrize("mode", OUTPUT_MODES)
    def test_accepts_store_modes(self, mode):
        assert ConversionConfig(input_path="cpool.out", grid="0.5", mode=mode).mode == mode


class TestParseConfigFile:
    def test_full_file(self, tmp_path):
        path = tmp_path / "convert.cfg"
        path.write_text(
            "# conversion settings\n"
            "input = /data/mnpp.out\n"
            "output = /data/out/mnpp.nc\n"
            "grid = 60,-10,40,20,0.5,0.5\n"
            "unit = gC/m2/month\n"
            "year = 1901\n"
            "Monthly = true\n"
            "invert_latitude = yes\n"
            "cell_centered = false\n"
            "mode = Overwrite\n"
            "validate_order = false\n"
            "this line is ignored\n"
        )
        cfg = parse_config_file(path)
        assert cfg.input_path == Path("/data/mnpp.out")
        assert cfg.output_path == Path("/data/out/mnpp.nc")
        assert cfg.grid == "60,-10,40,20,0.5,0.5"
        assert cfg.unit == "gC/m2/month"
        assert cfg.year == 1901
        assert cfg.monthly is True
        assert cfg.invert_latitude is True
        assert cfg.cell_centered is False
        assert cfg.mode == "overwrite"
        assert cfg.validate_order is False

    def test_minimal_file(self, tmp_path):
        path = tmp_path / "convert.cfg"
        path.write_text("input = cpool.out\n")
        cfg = parse_config_file(path)
        assert cfg.output_path == Path("cpool.nc")
        assert cfg.grid == ""
        assert cfg.year is None

    def test_missing_input(self, tmp_path):
        path = tmp_path / "convert.cfg"
        path.write_text("grid = 2\n")
        with pytest.raises(ValueError, match="input"):
            parse_config_file(path)

    def test_bad_boolean(self, tmp_path):
        path = tmp_path / "convert.cfg"
        path.write_text("input = a.out\nmonthly = maybe\n")
        with pytest.raises(ValueError, match="monthly"):
            parse_config_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            parse_config_file(tmp_path / "absent.cfg")
