"""
xartool Configuration
Single source of truth for all settings.
Load once at startup, pass to all components.
"""
import json
from pathlib import Path
from .utils.logger import logger


# Default config values
DEFAULTS = {
    "header": {
        "strict": False  # True = abort open on bad magic/version/checksum id
    },
    "manifest": {
        "strict_tree": False,  # True = reject data on directories, children on files
        "strip_encoding_declaration": True
    },
    "batch": {
        "max_workers": None,  # None = auto detect
        "patterns": ["*.xar", "*.safariextz", "*.pkg"]
    },
    "extract": {
        "overwrite": False
    }
}


class XarToolConfig:
    def __init__(self, config_path: str = None):
        self._config = self._deep_copy(DEFAULTS)

        if config_path:
            self.config_path = Path(config_path)
        else:
            # Look for config in project root
            self.config_path = Path(__file__).parent.parent / 'xartool.config.json'

        if self.config_path.exists():
            self._load()
        else:
            logger.debug(f"No config file found at {self.config_path}, using defaults")

    def _load(self):
        """Load and merge config file over defaults"""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                user_config = json.load(f)
            self._deep_merge(self._config, user_config)
            logger.debug(f"Loaded config from {self.config_path}")
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in config file: {e}, using defaults")
        except OSError as e:
            logger.error(f"Failed to load config: {e}, using defaults")

    def save(self, path: str = None):
        """Save current config to file"""
        out_path = Path(path) if path else self.config_path
        with open(out_path, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2)
        logger.info(f"Config saved to {out_path}")

    def get(self, *keys, default=None):
        """
        Get a nested config value by key path.
        e.g. config.get('manifest', 'strict_tree')
        """
        value = self._config
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def set(self, *keys_and_value):
        """
        Set a nested config value.
        e.g. config.set('header', 'strict', True)
        """
        *keys, value = keys_and_value
        target = self._config
        for key in keys[:-1]:
            target = target.setdefault(key, {})
        target[keys[-1]] = value

    # ── Convenience properties ─────────────────────────────────────────────

    @property
    def strict_header(self) -> bool:
        return bool(self.get('header', 'strict', default=False))

    @property
    def strict_tree(self) -> bool:
        return bool(self.get('manifest', 'strict_tree', default=False))

    @property
    def strip_encoding_declaration(self) -> bool:
        return bool(self.get('manifest', 'strip_encoding_declaration', default=True))

    @property
    def max_workers(self):
        return self.get('batch', 'max_workers', default=None)

    @property
    def batch_patterns(self) -> list:
        return list(self.get('batch', 'patterns', default=['*.xar']))

    @property
    def overwrite(self) -> bool:
        return bool(self.get('extract', 'overwrite', default=False))

    # ── Helpers ────────────────────────────────────────────────────────────

    @staticmethod
    def _deep_copy(d: dict) -> dict:
        import copy
        return copy.deepcopy(d)

    @staticmethod
    def _deep_merge(base: dict, override: dict):
        """Merge override into base recursively, modifies base in place"""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                XarToolConfig._deep_merge(base[key], value)
            else:
                base[key] = value


# Singleton, import this everywhere
config = XarToolConfig()

__all__ = ["XarToolConfig", "config"]
