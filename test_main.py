"""Tests for the command line entry point."""

import logging

import cv2
import numpy as np
import pytest

from colorchecker import main as cli
from colorchecker.serialization import parse
from conftest import blank_image, expected_record, paint_chart

BOX = "10,10,110,10,110,80,10,80"


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("colorchecker")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def test_no_arguments_prints_usage(capsys):
    assert cli.main([]) == 0
    assert "--input" in capsys.readouterr().out


def test_help_exits_successfully(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--help"])
    assert exc.value.code == 0
    assert "--outputColorData" in capsys.readouterr().out


def test_missing_output_is_a_configuration_error(capsys):
    assert cli.main(["--input", "image.jpg"]) == 1
    captured = capsys.readouterr()
    assert "Usage" in captured.out and "--input" in captured.out
    assert "ERROR" in captured.err


def test_both_outputs_are_rejected(capsys):
    assert cli.main(["--input", "a.jpg", "--output", "o", "--outputColorData", "c.txt"]) == 1


def test_invalid_verbose_level(capsys):
    assert cli.main(["--input", "a.jpg", "--output", "o", "--verboseLevel", "loud"]) == 1


def test_verbose_level_is_case_insensitive(tmp_path, chart_image_path):
    code = cli.main(["-i", str(chart_image_path), "-o", str(tmp_path / "out"),
                     "--chartBox", BOX, "--verboseLevel", "INFO"])
    assert code == 0
    assert logging.getLogger("colorchecker").level == logging.INFO


def test_unresolvable_input(tmp_path):
    assert cli.main(["--input", str(tmp_path / "missing_####.jpg"), "--output", str(tmp_path)]) == 1


def test_unreadable_scene(tmp_path):
    scene = tmp_path / "scene.sfm"
    scene.write_text("not json")
    assert cli.main(["--input", str(scene), "--output", str(tmp_path / "out")]) == 1


def test_single_image_to_color_data_file(tmp_path, chart_image_path):
    target = tmp_path / "result" / "colors.txt"
    code = cli.main(["--input", str(chart_image_path), "--outputColorData", str(target),
                     "--chartBox", BOX, "--verboseLevel", "error"])
    assert code == 0
    assert np.allclose(parse(target), expected_record(), atol=0.5 / 255)


def test_debug_folder_output(tmp_path, chart_image_path):
    out = tmp_path / "out"
    code = cli.main(["-i", str(chart_image_path), "-o", str(out), "--chartBox", BOX, "--debug"])
    assert code == 0
    assert sorted(p.name for p in out.iterdir()) == ["chart.jpg", "chart.svg", "chart.txt"]


def test_debug_accepts_explicit_value(tmp_path, chart_image_path):
    out = tmp_path / "out"
    code = cli.main(["-i", str(chart_image_path), "-o", str(out), "--chartBox", BOX, "--debug", "0"])
    assert code == 0
    assert sorted(p.name for p in out.iterdir()) == ["chart.txt"]


def test_scene_batch_with_color_data_file(tmp_path, three_view_scene):
    target = tmp_path / "out" / "colors.txt"
    code = cli.main(["-i", str(three_view_scene), "--outputColorData", str(target), "--chartBox", BOX])
    assert code == 0
    # The uniform view still "contains" the fixed box, so all three get a file
    assert sorted(p.name for p in target.parent.iterdir()) == [
        "view_001_colors.txt", "view_002_colors.txt", "view_003_colors.txt"]


@pytest.mark.parametrize("value", ["1,2,3", "a,b,c,d,e,f,g,h"])
def test_invalid_chart_box(value):
    assert cli.main(["-i", "a.jpg", "-o", "out", "--chartBox", value]) == 1


def test_parse_box():
    assert cli.parse_box("0,0;10,0;10,5;0,5") == [[0, 0], [10, 0], [10, 5], [0, 5]]


@pytest.mark.parametrize("output", [["--outputColorData", "colors.txt"], ["-o", "."]])
def test_debug_output_beside_a_jpeg_source(tmp_path, output):
    source = tmp_path / "IMG_1.jpg"
    cv2.imwrite(str(source), paint_chart(blank_image()))
    original = source.read_bytes()
    output = [output[0], str(tmp_path / output[1])]

    code = cli.main(["-i", str(source), *output, "--chartBox", BOX, "--debug"])

    assert code == 0
    assert source.read_bytes() == original
    assert (tmp_path / "IMG_1_overlay.jpg").is_file()
    assert (tmp_path / "IMG_1.svg").is_file()
