"""
Preset persistence on top of an injected codec.

Each preset is one file in a folder owned by the caller:

    <folder>/<sanitized name>.json

Listing and deleting presets is left to the host application.
"""

import logging
import os
import re
from typing import Any, Optional, Tuple

from structext.codec import BundledJsonCodec, JsonCodec
from structext.errors import InputTypeError, SourceDecodeError, SourceOpenError, StructextError
from structext.model import is_table
from structext.textio import open_for_write, read_text

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^\w\-]", re.ASCII)


class PresetStore:
    """
    Saves and loads named presets.

    Args:
        folder: Directory holding the preset files (created on first save)
        codec: Codec strategy, BundledJsonCodec when not given
    """

    def __init__(self, folder: str, codec: Optional[JsonCodec] = None):
        self.folder = folder
        self.codec = codec or BundledJsonCodec()

    def preset_path(self, name: str) -> str:
        """Path of the preset file, with unsafe name characters replaced by "_"."""
        safe_name = _UNSAFE_CHARS.sub("_", name)
        return os.path.join(self.folder, safe_name + self.codec.extension)

    def save(self, name: str, data: Any) -> Tuple[bool, Optional[str]]:
        """
        Encode data and write it as a preset.

        Returns:
            (True, None) on success, (False, message) otherwise
        """
        if not name:
            return False, "Preset name cannot be empty"

        try:
            if not is_table(data):
                raise InputTypeError("Preset data must be a table")
            text = self.codec.encode(data)
            if not text:
                return False, "Failed to encode preset data"

            os.makedirs(self.folder, exist_ok=True)
            path = self.preset_path(name)
            logger.debug("saving preset %r to %s with %s codec", name, path, self.codec.name)
            with open_for_write(path) as f:
                f.write(text)
        except StructextError as e:
            logger.warning("could not save preset %r: %s", name, e)
            return False, str(e)
        except OSError as e:
            logger.warning("could not save preset %r: %s", name, e)
            return False, f"Could not write preset file: {name}"

        return True, None

    def load(self, name: str) -> Tuple[Any, Optional[str]]:
        """
        Read and decode a preset.

        Returns:
            (data, None) on success, (None, message) otherwise
        """
        if not name:
            return None, "Preset name cannot be empty"

        path = self.preset_path(name)
        logger.debug("loading preset %r from %s", name, path)
        try:
            content = read_text(path)
        except SourceDecodeError as e:
            logger.warning("could not decode preset %r: %s", name, e)
            return None, f"Preset file is not valid text: {name}"
        except SourceOpenError:
            return None, f"Preset file not found: {name}"

        if content == "":
            return None, f"Preset file is empty: {name}"

        try:
            data = self.codec.decode(content)
        except StructextError as e:
            logger.warning("could not parse preset %r: %s", name, e)
            return None, f"Failed to parse preset JSON: {e}"

        if data is None:
            return None, f"Failed to parse preset JSON: no value in {name}"

        return data, None
