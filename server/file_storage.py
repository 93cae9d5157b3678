"""File-based storage implementation."""

import json
import os

from core.interfaces import KeyValueStorage

CONFIG_DIR = os.path.expanduser('~/.config/chytanka')


class FileStorage(KeyValueStorage):
    """Key-value storage kept in a single JSON file, plus config loading."""

    def __init__(self, storage_file: str = None, config_file: str = None):
        self.storage_file = storage_file or os.path.join(CONFIG_DIR, 'storage.json')
        self.config_file = config_file or os.path.join(CONFIG_DIR, 'config.json')

    def load_config(self) -> dict:
        if not os.path.exists(self.config_file):
            raise FileNotFoundError(
                f"Config file not found at {self.config_file}\n"
                f'Please create it with: {{"gemini_api_key": "YOUR_API_KEY_HERE"}}'
            )
        with open(self.config_file, 'r') as f:
            return json.load(f)

    def _load_all(self) -> dict:
        if not os.path.exists(self.storage_file):
            return {}
        with open(self.storage_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Storage file {self.storage_file} does not hold an object")
        return data

    def _save_all(self, data: dict) -> None:
        directory = os.path.dirname(self.storage_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_file = self.storage_file + '.tmp'
        with open(tmp_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_file, self.storage_file)

    def get(self, key: str) -> str | None:
        value = self._load_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load_all()
        data[key] = value
        self._save_all(data)
