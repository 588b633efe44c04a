"""Builds the reduced Spine JSON written next to the input as generated_spine.json.

Only the structure Spine needs to import the skeleton with placeholder art is
kept: skeleton metadata, bone/slot hierarchy, the default skin and the
constraint/animation/event data that animations reference.
"""
import math

from .skins import skin_container

DEFAULT_HASH = "ANDAzG2KBFVqeVmU+LDx0cn5rt0"
DEFAULT_SPINE_VERSION = "3.7.94"
DEFAULT_IMAGES_PATH = "./images/"

# Any of these keys means the attachment carries geometry (mesh, path,
# clipping...) and has to be written back untouched.
COMPLEX_ATTACHMENT_KEYS = frozenset((
    'type',
    'lengths',
    'vertexCount',
    'vertices',
    'uvs',
    'triangles',
    'hull',
    'edges',
    'weights',
    'path',
    'end',
    'closed',
    'constantSpeed',
    'color',
    'clipping',
    'mask',
    'paths',
))

PASSTHROUGH_KEYS = ('ik', 'transform', 'path', 'animations', 'events')


def is_complex_attachment(payload) -> bool:
    if not isinstance(payload, dict):
        return False
    return any(key in COMPLEX_ATTACHMENT_KEYS for key in payload)


def _number_or_zero(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if math.isnan(value):
        return 0
    return value or 0


def reduce_attachment(payload):
    if is_complex_attachment(payload):
        return payload
    if not isinstance(payload, dict):
        payload = {}
    return {
        'width': _number_or_zero(payload.get('width')),
        'height': _number_or_zero(payload.get('height')),
    }


def _reduce_skeleton(skel):
    return {
        'hash': skel.get('hash') or DEFAULT_HASH,
        'spine': skel.get('spine') or DEFAULT_SPINE_VERSION,
        'width': skel.get('width') or 0,
        'height': skel.get('height') or 0,
        # always point at the sibling images folder; run() may override it
        'images': DEFAULT_IMAGES_PATH,
        'audio': skel.get('audio') or "",
    }


def _reduce_bones(bones):
    out = []
    for bone in bones:
        if not isinstance(bone, dict):
            continue
        bone_obj = {'name': bone.get('name')}
        if bone.get('parent'):
            bone_obj['parent'] = bone['parent']
        out.append(bone_obj)
    return out


def _reduce_slots(slots):
    out = []
    for slot in slots:
        if not isinstance(slot, dict):
            continue
        slot_obj = {'name': slot.get('name')}
        if 'bone' in slot:
            slot_obj['bone'] = slot['bone']
        out.append(slot_obj)
    return out


def _reduce_default_skin(default_skin):
    reduced = {}
    for slot_name, attachments in default_skin.items():
        reduced[slot_name] = {}
        if not isinstance(attachments, dict):
            continue
        for attach_name, payload in attachments.items():
            reduced[slot_name][attach_name] = reduce_attachment(payload)
    return reduced


def extract_minimal_structure(spine_json):
    """Return the reduced copy of a parsed Spine document.

    The input is never modified. Complex attachments are shared by reference
    with the input rather than deep-copied.
    """
    result = {}

    skel = spine_json.get('skeleton')
    if isinstance(skel, dict):
        result['skeleton'] = _reduce_skeleton(skel)
    elif skel:
        result['skeleton'] = _reduce_skeleton({})

    if isinstance(spine_json.get('bones'), list):
        result['bones'] = _reduce_bones(spine_json['bones'])

    if isinstance(spine_json.get('slots'), list):
        result['slots'] = _reduce_slots(spine_json['slots'])

    container = skin_container(spine_json.get('skins'))
    if container is not None:
        default_skin = container.default_skin()
        if isinstance(default_skin, dict):
            result['skins'] = container.wrap_default(_reduce_default_skin(default_skin))

    for key in PASSTHROUGH_KEYS:
        if key in spine_json:
            result[key] = spine_json[key]

    return result
