"""
Codec strategies for persisting nested configuration values.

A codec is chosen once, when the consumer is constructed, and used for
every call after that:

    store = PresetStore(folder, codec=StdlibJsonCodec())

Implementations:
    - BundledJsonCodec: the compact encoder / recursive-descent decoder
      in this package (null collapses to absence)
    - StdlibJsonCodec: the json module, for hosts that provide their own
      codec (null is kept as None)
    - YamlCodec: PyYAML safe_dump / safe_load
"""

import json
from typing import Any, Dict, Type

import yaml

from structext.backends.json_encoder import encode_json
from structext.errors import InputTypeError, StructureError
from structext.json_decoder import JSONDecoder


class JsonCodec:
    """Base class. Subclasses implement encode and decode."""

    name = ""
    extension = ".json"

    def encode(self, value: Any) -> str:
        """
        Raises:
            StructureError: If the value cannot be encoded
        """
        raise NotImplementedError

    def decode(self, text: str) -> Any:
        """
        Raises:
            StructureError: If the text cannot be decoded
        """
        raise NotImplementedError


class BundledJsonCodec(JsonCodec):
    name = "bundled"

    def __init__(self, keep_nulls: bool = False):
        self._decoder = JSONDecoder(keep_nulls=keep_nulls)

    def encode(self, value: Any) -> str:
        return encode_json(value)

    def decode(self, text: str) -> Any:
        return self._decoder.decode(text)


class StdlibJsonCodec(JsonCodec):
    name = "stdlib"

    def encode(self, value: Any) -> str:
        try:
            return json.dumps(value, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            raise StructureError(str(e)) from e

    def decode(self, text: str) -> Any:
        try:
            return json.loads(text)
        except ValueError as e:
            raise StructureError(str(e)) from e


class YamlCodec(JsonCodec):
    name = "yaml"
    extension = ".yaml"

    def encode(self, value: Any) -> str:
        try:
            return yaml.safe_dump(value)
        except yaml.YAMLError as e:
            raise StructureError(str(e)) from e

    def decode(self, text: str) -> Any:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise StructureError(str(e)) from e


CODECS: Dict[str, Type[JsonCodec]] = {
    BundledJsonCodec.name: BundledJsonCodec,
    StdlibJsonCodec.name: StdlibJsonCodec,
    YamlCodec.name: YamlCodec,
}


def get_codec(name: str, **kwargs: Any) -> JsonCodec:
    """
    Build a codec by name ("bundled", "stdlib" or "yaml").

    Raises:
        InputTypeError: If the name is unknown
    """
    try:
        codec_cls = CODECS[name]
    except KeyError:
        raise InputTypeError(f"Unknown codec: {name!r} (expected one of {sorted(CODECS)})") from None
    return codec_cls(**kwargs)
