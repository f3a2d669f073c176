import json
import os
import sys

from lib import tlog


def resource_path(relative_path):
    """Get absolute path to resource, works for dev and for PyInstaller"""
    base_path = getattr(sys, "_MEIPASS", os.path.abspath("."))
    return os.path.join(base_path, relative_path)


class FileManager:
    _instance = None

    @classmethod
    def get(cls):
        if cls._instance is None:
            cls._instance = FileManager()
        return cls._instance

    def exists(self, path: str) -> bool:
        return os.path.exists(resource_path(path))

    def load_json(self, path: str) -> dict | None:
        full_path = resource_path(path)
        try:
            with open(full_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            tlog.err(f"FileManager: Failed to load JSON {full_path}: {e}")
            return None
