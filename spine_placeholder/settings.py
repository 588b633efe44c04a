"""Persistent settings for the GUI (last used paths and options)."""
import json
import os


def load_config(path):
    try:
        if os.path.exists(path):
            with open(path, "r", encoding="utf-8") as fh:
                config = json.load(fh)
            if isinstance(config, dict):
                return config
    except (OSError, ValueError):
        pass
    return {}


def save_config(path, config):
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(config, fh, indent=2)
