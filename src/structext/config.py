"""
Settings for structext, loaded from a YAML file.

Example settings.yaml:

    delimiter: ";"
    utf8_bom: true
    quote_mode: rfc4180
    log_level: DEBUG
    preset_codec: stdlib

Every key is optional. STRUCTEXT_LOG_LEVEL overrides log_level.
"""

import dataclasses
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml

from structext.codec import JsonCodec, get_codec
from structext.errors import InputTypeError, SourceDecodeError, SourceOpenError
from structext.model import QuoteMode, ReadOptions, WriteOptions
from structext.textio import read_text

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "STRUCTEXT_LOG_LEVEL"


@dataclass
class Settings:
    delimiter: str = ","
    skip_empty_lines: bool = True
    trim_fields: bool = True
    quote_mode: QuoteMode = QuoteMode.TOGGLE
    utf8_bom: bool = False
    underscore_whitespace: bool = True
    keep_json_nulls: bool = False
    log_level: str = "WARNING"
    preset_codec: str = "bundled"

    def read_options(self) -> ReadOptions:
        return ReadOptions(
            delimiter=self.delimiter,
            skip_empty_lines=self.skip_empty_lines,
            trim_fields=self.trim_fields,
            quote_mode=self.quote_mode,
        )

    def write_options(self) -> WriteOptions:
        return WriteOptions(
            delimiter=self.delimiter,
            utf8_bom=self.utf8_bom,
            underscore_whitespace=self.underscore_whitespace,
        )

    def codec(self) -> JsonCodec:
        if self.preset_codec == "bundled":
            return get_codec("bundled", keep_nulls=self.keep_json_nulls)
        return get_codec(self.preset_codec)


def settings_from_dict(d: Dict[str, Any]) -> Settings:
    """
    Build Settings from a plain mapping.

    Raises:
        InputTypeError: On unknown keys or a bad quote_mode / delimiter
    """
    if not isinstance(d, dict):
        raise InputTypeError(f"Settings must be a mapping, got {type(d).__name__}")

    known = {f.name for f in dataclasses.fields(Settings)}
    unknown = sorted(set(d) - known)
    if unknown:
        raise InputTypeError(f"Unknown settings: {unknown}")

    values = dict(d)
    if "quote_mode" in values and not isinstance(values["quote_mode"], QuoteMode):
        try:
            values["quote_mode"] = QuoteMode(str(values["quote_mode"]).lower())
        except ValueError:
            raise InputTypeError(f"Invalid quote_mode: {values['quote_mode']!r}") from None
    if "delimiter" in values and len(str(values["delimiter"])) != 1:
        raise InputTypeError(f"Delimiter must be a single character: {values['delimiter']!r}")

    return Settings(**values)


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Load settings from a YAML file.

    A missing path or missing file gives the defaults.

    Raises:
        InputTypeError: If the file is not readable YAML
        InputTypeError: If the content is not a mapping of known settings
    """
    data: Dict[str, Any] = {}
    if path:
        try:
            data = yaml.safe_load(read_text(path)) or {}
        except SourceDecodeError as e:
            raise InputTypeError(str(e)) from e
        except yaml.YAMLError as e:
            raise InputTypeError(f"Invalid settings YAML in {path}: {e}") from e
        except SourceOpenError:
            logger.debug("no settings file at %s, using defaults", path)

    settings = settings_from_dict(data)

    env_level = os.environ.get(LOG_LEVEL_ENV)
    if env_level:
        settings.log_level = env_level.upper()
    return settings


def configure_logging(settings: Settings) -> None:
    """Opt-in root logger setup for scripts. The library never calls this itself."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
