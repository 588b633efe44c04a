"""Walks the `skins` section of a Spine JSON document.

Spine exports skins in two shapes:
- 3.7 and older: a dict of skinName -> {slotName: {attachmentName: {...}}}
- 3.8 and newer: a list of {"name": ..., "attachments": {slotName: {...}}}

`skin_container()` picks the right wrapper once and everything else iterates
through it without caring which shape the file used.
"""


class OrderedSkinList:
    """List-shaped skins (Spine 3.8+)."""

    def __init__(self, skins):
        self.skins = skins

    def iter_skins(self):
        for index, skin in enumerate(self.skins):
            if not isinstance(skin, dict):
                continue
            attachments = skin['attachments'] if 'attachments' in skin else skin
            name = skin.get('name', str(index))
            yield name, attachments

    def iter_attachments(self):
        return _iter_attachments(self.iter_skins())

    def default_skin(self):
        # the entry's own fields (name, bones, ...) are never slots here
        for skin in self.skins:
            if isinstance(skin, dict) and skin.get('name') == 'default':
                return skin.get('attachments', {})
        return None

    def wrap_default(self, slots):
        return [{'name': 'default', 'attachments': slots}]


class NamedSkinMap:
    """Dict-shaped skins (Spine 3.7 and older)."""

    def __init__(self, skins):
        self.skins = skins

    def iter_skins(self):
        for name, slots in self.skins.items():
            yield name, slots

    def iter_attachments(self):
        return _iter_attachments(self.iter_skins())

    def default_skin(self):
        return self.skins.get('default')

    def wrap_default(self, slots):
        return {'default': slots}


def _iter_attachments(skins):
    for skin_name, slots in skins:
        if not isinstance(slots, dict):
            continue
        for slot_name, attachments in slots.items():
            if not isinstance(attachments, dict):
                continue
            for attach_name, payload in attachments.items():
                yield skin_name, slot_name, attach_name, payload


def skin_container(skins):
    """Return the wrapper matching the shape of `skins`, or None."""
    if isinstance(skins, list):
        return OrderedSkinList(skins)
    if isinstance(skins, dict):
        return NamedSkinMap(skins)
    return None


def container_for(doc):
    if not isinstance(doc, dict):
        return None
    return skin_container(doc.get('skins'))


def collect_attachment_names(doc):
    """Every distinct attachment name referenced in any skin."""
    container = container_for(doc)
    if container is None:
        return set()
    return {name for _, _, name, _ in container.iter_attachments() if name}


def _positive_number(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value if value > 0 else None


def find_attachment_size(doc, name):
    """(width, height) of the first attachment called `name` with a real size.

    Skins, slots and attachments are scanned in document order; the first
    match whose width and height are both > 0 wins. (0, 0) when none has one.
    """
    container = container_for(doc)
    if container is None:
        return 0, 0
    for _, _, attach_name, payload in container.iter_attachments():
        if attach_name != name or not isinstance(payload, dict):
            continue
        width = _positive_number(payload.get('width'))
        height = _positive_number(payload.get('height'))
        if width and height:
            return width, height
    return 0, 0
