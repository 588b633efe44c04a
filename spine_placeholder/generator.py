"""Runs a full placeholder pass for one Spine JSON file.

Steps:
1. load the JSON (fatal on failure)
2. reduce it with extract_minimal_structure()
3. resolve and clear the images folder
4. write one placeholder PNG per attachment name found in any skin
5. write generated_spine.json next to the input

Progress goes through `log_callback` (print by default, the GUI log panel
otherwise). Only step 1 can abort a run; everything else logs and moves on.
"""
import json
import os
from dataclasses import dataclass, field
from typing import Optional

from .minimal import DEFAULT_IMAGES_PATH, extract_minimal_structure
from .placeholder_png import (
    create_blank_png,
    create_png_from_template,
    sanitize_filename,
)
from .skins import collect_attachment_names, find_attachment_size

GENERATED_JSON_NAME = "generated_spine.json"
DEFAULT_TEMPLATE = os.path.join("dummyPixel", "dummyOnePixel.png")
IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg')


class SpineInputError(Exception):
    """The input JSON is missing or unreadable; nothing was generated."""


@dataclass
class GeneratorOptions:
    input_path: str
    out_dir: Optional[str] = None
    overwrite: bool = False
    force_version: Optional[str] = None
    template_path: Optional[str] = None


@dataclass
class GenerationResult:
    images_dir: str = ""
    output_json: Optional[str] = None
    processed: int = 0
    created: int = 0
    skipped: int = 0
    failed: int = 0
    created_files: list = field(default_factory=list)


def load_spine_json(path):
    if not os.path.isfile(path):
        raise SpineInputError(f"Input file not found: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as fh:
            return json.load(fh)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SpineInputError(f"Failed to read/parse JSON: {e}") from e


def _declared_images_path(spine_json):
    skel = spine_json.get('skeleton') if isinstance(spine_json, dict) else None
    if isinstance(skel, dict) and isinstance(skel.get('images'), str):
        return skel['images']
    return None


def images_field_for(spine_json, out_dir=None):
    """The images path as written in JSON terms (forward slashes)."""
    images_field = out_dir or _declared_images_path(spine_json) or DEFAULT_IMAGES_PATH
    return images_field.replace('\\', '/')


def resolve_images_dir(input_path, spine_json, out_dir=None):
    images_field = images_field_for(spine_json, out_dir)
    base = os.path.dirname(os.path.abspath(input_path))
    return os.path.normpath(os.path.join(base, images_field))


def clear_images_directory(images_dir, log_callback=print):
    """Delete existing raster files in `images_dir`. Returns the count removed."""
    removed = 0
    try:
        entries = list(os.scandir(images_dir))
    except OSError as e:
        log_callback(f"WARNING: Could not clear images directory '{images_dir}': {e}")
        return removed
    for entry in entries:
        if not entry.is_file():
            continue
        if os.path.splitext(entry.name)[1].lower() not in IMAGE_EXTENSIONS:
            continue
        try:
            os.remove(entry.path)
            removed += 1
        except OSError as e:
            log_callback(f"WARNING: Could not remove '{entry.path}': {e}")
    if removed > 0:
        log_callback(f"Cleared {removed} existing image(s) from: {images_dir}")
    return removed


def resolve_template(template_path=None):
    """Explicit template if given, else the default one when it exists."""
    if template_path:
        return os.path.abspath(template_path)
    default = os.path.abspath(DEFAULT_TEMPLATE)
    return default if os.path.isfile(default) else None


def generate_placeholders(spine_json, images_dir, result, overwrite=False,
                          template_path=None, log_callback=print):
    """Write one PNG per attachment name into `images_dir`, updating `result`."""
    names = collect_attachment_names(spine_json)
    if not names:
        log_callback("WARNING: No attachment names found in skins.")

    for attach_name in sorted(names):
        result.processed += 1
        out_path = os.path.join(images_dir, sanitize_filename(attach_name) + '.png')

        if os.path.exists(out_path) and not overwrite:
            result.skipped += 1
            continue

        width, height = find_attachment_size(spine_json, attach_name)
        metadata = {'attachment': attach_name, 'width': width, 'height': height}
        try:
            if template_path:
                create_png_from_template(template_path, out_path, metadata)
            else:
                create_blank_png(out_path, width, height, metadata)
        except (OSError, ValueError) as e:
            result.failed += 1
            log_callback(f"ERROR: Failed creating image for attachment '{attach_name}': {e}")
            continue
        result.created += 1
        result.created_files.append(out_path)
    return result


def write_generated_json(output_json, input_path, images_field=None,
                         force_version=None, log_callback=print):
    """Write the reduced document next to the input. Returns the path or None."""
    skel = output_json.setdefault('skeleton', {})
    if force_version:
        skel['spine'] = str(force_version)
    if images_field:
        skel['images'] = images_field if images_field.endswith('/') else images_field + '/'

    output_path = os.path.join(os.path.dirname(os.path.abspath(input_path)), GENERATED_JSON_NAME)
    try:
        with open(output_path, 'w', encoding='utf-8') as fh:
            json.dump(output_json, fh, indent=2, ensure_ascii=False)
    except (OSError, TypeError, ValueError) as e:
        log_callback(f"WARNING: Could not write minimal structure file: {e}")
        return None
    log_callback(f"Generated spine written to: {output_path}")
    return output_path


def run(options, log_callback=print):
    """Full pass for `options`. Raises SpineInputError if the input is unusable."""
    input_path = os.path.abspath(options.input_path)
    spine_json = load_spine_json(input_path)
    if not isinstance(spine_json, dict):
        raise SpineInputError(f"Expected a JSON object at the top level of {input_path}")

    output_json = extract_minimal_structure(spine_json)

    images_dir = resolve_images_dir(input_path, spine_json, options.out_dir)
    os.makedirs(images_dir, exist_ok=True)
    clear_images_directory(images_dir, log_callback)

    template = resolve_template(options.template_path)
    if template:
        log_callback(f"Using template image: {template}")

    result = GenerationResult(images_dir=images_dir)
    generate_placeholders(
        spine_json,
        images_dir,
        result,
        overwrite=options.overwrite,
        template_path=template,
        log_callback=log_callback,
    )

    log_callback(f"Images directory: {images_dir}")
    log_callback(
        f"Attachments processed: {result.processed}, created: {result.created}, "
        f"skipped (exists): {result.skipped}"
    )

    images_field = images_field_for(spine_json, options.out_dir) if options.out_dir else None
    result.output_json = write_generated_json(
        output_json,
        input_path,
        images_field=images_field,
        force_version=options.force_version,
        log_callback=log_callback,
    )
    return result
