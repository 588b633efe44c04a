import json
import os

import pytest
from PIL import Image

from spine_placeholder.cli import main
from spine_placeholder.generator import (
    GENERATED_JSON_NAME,
    GenerationResult,
    GeneratorOptions,
    SpineInputError,
    clear_images_directory,
    generate_placeholders,
    resolve_images_dir,
    resolve_template,
    run,
    write_generated_json,
)
from spine_placeholder.placeholder_png import METADATA_KEYWORD

SCENARIO_A = {
    "skeleton": {"spine": "3.8.99", "images": "./art/"},
    "skins": {"default": {"slotA": {"attach1": {"width": 10, "height": 20}}}},
}


def _load_generated(tmp_path):
    return json.loads((tmp_path / GENERATED_JSON_NAME).read_text(encoding="utf-8"))


def test_region_attachment_scenario(tmp_path, write_spine):
    path = write_spine(SCENARIO_A)
    result = run(GeneratorOptions(input_path=path), log_callback=lambda msg: None)

    assert result.created == 1
    image = tmp_path / "art" / "attach1.png"
    with Image.open(image) as im:
        assert im.size == (10, 20)
        meta = json.loads(im.info[METADATA_KEYWORD])
        assert meta == {"attachment": "attach1", "width": 10, "height": 20}

    out = _load_generated(tmp_path)
    assert out["skins"]["default"]["slotA"]["attach1"] == {"width": 10, "height": 20}
    assert out["skeleton"]["images"] == "./images/"
    assert result.output_json == str(tmp_path / GENERATED_JSON_NAME)


def test_mesh_attachment_scenario(tmp_path, write_spine):
    mesh = {"type": "mesh", "vertices": [1, 2, 3]}
    path = write_spine({"skins": {"default": {"slotA": {"attach1": mesh}}}})
    run(GeneratorOptions(input_path=path), log_callback=lambda msg: None)

    out = _load_generated(tmp_path)
    assert out["skins"]["default"]["slotA"]["attach1"] == mesh
    # no positive size anywhere, so the placeholder falls back to 1x1
    with Image.open(tmp_path / "images" / "attach1.png") as im:
        assert im.size == (1, 1)


def test_reserved_characters_in_file_names(tmp_path, write_spine):
    path = write_spine({"skins": {"default": {"slot": {"icons/star": {"width": 2, "height": 2}}}}})
    run(GeneratorOptions(input_path=path), log_callback=lambda msg: None)
    assert (tmp_path / "images" / "icons_star.png").is_file()


def test_force_version(tmp_path, write_spine):
    path = write_spine(SCENARIO_A)
    run(GeneratorOptions(input_path=path, force_version="4.3.39-beta"), log_callback=lambda msg: None)
    assert _load_generated(tmp_path)["skeleton"]["spine"] == "4.3.39-beta"


def test_no_skins_warns_and_omits_skins(tmp_path, write_spine):
    lines = []
    path = write_spine({"skeleton": {}, "bones": [{"name": "root"}]})
    result = run(GeneratorOptions(input_path=path), log_callback=lines.append)

    assert result.processed == 0
    assert result.created == 0
    assert any(line.startswith("WARNING: No attachment names") for line in lines)
    assert os.listdir(tmp_path / "images") == []
    assert "skins" not in _load_generated(tmp_path)


def test_non_default_skin_attachments_get_images(tmp_path, write_spine):
    doc = {"skins": {
        "default": {"s": {"a": {"width": 1, "height": 1}}},
        "red": {"s": {"b": {"width": 3, "height": 4}}},
    }}
    path = write_spine(doc)
    result = run(GeneratorOptions(input_path=path), log_callback=lambda msg: None)
    assert result.created == 2
    with Image.open(tmp_path / "images" / "b.png") as im:
        assert im.size == (3, 4)
    assert "red" not in _load_generated(tmp_path)["skins"]


def test_explicit_out_dir_is_written_back(tmp_path, write_spine):
    path = write_spine(SCENARIO_A)
    result = run(GeneratorOptions(input_path=path, out_dir="gen\\pngs"), log_callback=lambda msg: None)
    assert result.images_dir == str(tmp_path / "gen" / "pngs")
    assert (tmp_path / "gen" / "pngs" / "attach1.png").is_file()
    assert _load_generated(tmp_path)["skeleton"]["images"] == "gen/pngs/"


def test_skeleton_block_created_when_missing(tmp_path, write_spine):
    path = write_spine({"skins": {"default": {}}})
    run(GeneratorOptions(input_path=path, force_version="4.2.43"), log_callback=lambda msg: None)
    assert _load_generated(tmp_path)["skeleton"] == {"spine": "4.2.43"}


def test_existing_images_are_cleared(tmp_path, write_spine):
    images = tmp_path / "art"
    images.mkdir()
    (images / "old.PNG").write_bytes(b"x")
    (images / "old.jpg").write_bytes(b"x")
    (images / "notes.txt").write_text("keep")
    path = write_spine(SCENARIO_A)
    run(GeneratorOptions(input_path=path), log_callback=lambda msg: None)
    assert sorted(os.listdir(images)) == ["attach1.png", "notes.txt"]


def test_second_run_recreates_same_files(tmp_path, write_spine):
    path = write_spine(SCENARIO_A)
    first = run(GeneratorOptions(input_path=path), log_callback=lambda msg: None)
    before = sorted(os.listdir(tmp_path / "art"))
    second = run(GeneratorOptions(input_path=path), log_callback=lambda msg: None)
    assert sorted(os.listdir(tmp_path / "art")) == before
    assert first.created == second.created == 1


def test_existing_file_skipped_without_overwrite(tmp_path):
    images = tmp_path / "images"
    images.mkdir()
    (images / "a.png").write_bytes(b"keep me")
    doc = {"skins": {"default": {"s": {"a": {"width": 2, "height": 2}, "b": {}}}}}

    result = generate_placeholders(doc, str(images), GenerationResult(), log_callback=lambda msg: None)
    assert (result.processed, result.created, result.skipped) == (2, 1, 1)
    assert result.created_files == [str(images / "b.png")]
    assert (images / "a.png").read_bytes() == b"keep me"

    result = generate_placeholders(doc, str(images), GenerationResult(), overwrite=True,
                                   log_callback=lambda msg: None)
    assert (result.created, result.skipped) == (2, 0)
    assert (images / "a.png").read_bytes() != b"keep me"


def test_failed_image_is_logged_and_loop_continues(tmp_path):
    images = tmp_path / "images"
    images.mkdir()
    # a directory where the PNG should go makes that one write fail
    (images / "a.png").mkdir()
    doc = {"skins": {"default": {"s": {"a": {}, "b": {}}}}}
    lines = []
    result = generate_placeholders(doc, str(images), GenerationResult(), overwrite=True,
                                   log_callback=lines.append)
    assert (result.created, result.skipped, result.failed) == (1, 0, 1)
    assert any("Failed creating image for attachment 'a'" in line for line in lines)
    assert (images / "b.png").is_file()


def test_template_mode(tmp_path, write_spine):
    template_dir = tmp_path / "dummyPixel"
    template_dir.mkdir()
    Image.new("RGBA", (1, 1), (0, 255, 0, 255)).save(template_dir / "dummyOnePixel.png")
    assert resolve_template() == str(template_dir / "dummyOnePixel.png")

    path = write_spine(SCENARIO_A)
    run(GeneratorOptions(input_path=path), log_callback=lambda msg: None)
    with Image.open(tmp_path / "art" / "attach1.png") as im:
        assert im.size == (1, 1)
        assert im.getpixel((0, 0)) == (0, 255, 0, 255)
        assert json.loads(im.info[METADATA_KEYWORD])["attachment"] == "attach1"


def test_no_template_by_default():
    assert resolve_template() is None


def test_resolve_images_dir(tmp_path):
    input_path = str(tmp_path / "sub" / "skel.json")
    assert resolve_images_dir(input_path, {}) == str(tmp_path / "sub" / "images")
    assert resolve_images_dir(input_path, {"skeleton": {"images": "../pics/"}}) == str(tmp_path / "pics")
    assert resolve_images_dir(input_path, {"skeleton": {"images": "x"}}, "out") == str(tmp_path / "sub" / "out")


def test_clear_missing_directory_only_warns(tmp_path):
    lines = []
    assert clear_images_directory(str(tmp_path / "missing"), lines.append) == 0
    assert lines and lines[0].startswith("WARNING:")


def test_missing_input_is_fatal(tmp_path):
    with pytest.raises(SpineInputError):
        run(GeneratorOptions(input_path=str(tmp_path / "nope.json")), log_callback=lambda msg: None)


def test_bad_json_is_fatal(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SpineInputError):
        run(GeneratorOptions(input_path=str(path)), log_callback=lambda msg: None)
    assert not (tmp_path / GENERATED_JSON_NAME).exists()


def test_output_write_failure_only_warns(tmp_path, write_spine):
    path = write_spine(SCENARIO_A)
    # a directory in place of the output file makes the write fail
    (tmp_path / GENERATED_JSON_NAME).mkdir()
    lines = []

    assert write_generated_json({}, path, log_callback=lines.append) is None
    assert any(line.startswith("WARNING: Could not write minimal structure file") for line in lines)

    result = run(GeneratorOptions(input_path=path), log_callback=lambda msg: None)
    assert result.output_json is None
    assert result.created == 1
    assert result.created_files == [str(tmp_path / "art" / "attach1.png")]
    assert main([path]) == 0


def _refuse_remove(path):
    raise PermissionError(f"locked: {path}")


def test_delete_failure_during_clear_only_warns(tmp_path, write_spine, monkeypatch):
    images = tmp_path / "art"
    images.mkdir()
    (images / "attach1.png").write_bytes(b"stale")

    monkeypatch.setattr(os, "remove", _refuse_remove)
    lines = []
    path = write_spine(SCENARIO_A)
    result = run(GeneratorOptions(input_path=path, overwrite=True), log_callback=lines.append)

    assert any(line.startswith("WARNING: Could not remove") for line in lines)
    assert result.created == 1
    with Image.open(images / "attach1.png") as im:
        assert im.size == (10, 20)


def test_surviving_file_skipped_when_clear_fails(tmp_path, write_spine, monkeypatch):
    images = tmp_path / "art"
    images.mkdir()
    (images / "attach1.png").write_bytes(b"stale")
    monkeypatch.setattr(os, "remove", _refuse_remove)
    path = write_spine(SCENARIO_A)
    result = run(GeneratorOptions(input_path=path), log_callback=lambda msg: None)
    assert (result.created, result.skipped) == (0, 1)
    assert (images / "attach1.png").read_bytes() == b"stale"
