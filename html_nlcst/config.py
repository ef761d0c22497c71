"""
This module contains variables that can be tweaked by the system environment, for example the size
of the tokenizer cache. Constants do NOT belong in this module; settings that should not be altered
without a code change, like the sets of element names the converter recognizes, live next to the
code that uses them.
"""

import os
from dataclasses import dataclass


@dataclass
class ENVConfig:
    """class for configuring environment parameters"""

    def _get_string(self, var: str, default_value: str = "") -> str:
        """attempt to get the value of var from the os environment; if not present return the
        default_value"""
        return os.environ.get(var, default_value)

    def _get_int(self, var: str, default_value: int) -> int:
        if value := self._get_string(var):
            return int(value)
        return default_value

    def _get_float(self, var: str, default_value: float) -> float:
        if value := self._get_string(var):
            return float(value)
        return default_value

    def _get_bool(self, var: str, default_value: bool) -> bool:
        if value := self._get_string(var):
            return value.lower() in ("true", "1", "t")
        return default_value

    @property
    def TOKENIZE_CACHE_MAX_SIZE(self) -> int:
        """number of distinct text values whose token spans are kept by the default tokenizer"""
        return self._get_int("TOKENIZE_CACHE_MAX_SIZE", 128)

    @property
    def ENCODING_CONFIDENCE_THRESHOLD(self) -> float:
        """minimum chardet confidence before falling back to trying common encodings in turn"""
        return self._get_float("ENCODING_CONFIDENCE_THRESHOLD", 0.8)

    @property
    def HTTP_TIMEOUT(self) -> float:
        """seconds to wait on the server when an HTML document is loaded from a URL"""
        return self._get_float("HTTP_TIMEOUT", 10.0)

    @property
    def HTTP_SSL_VERIFY(self) -> bool:
        """default for SSL certificate verification when loading an HTML document from a URL"""
        return self._get_bool("HTTP_SSL_VERIFY", True)


env_config = ENVConfig()
