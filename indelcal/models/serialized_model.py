"""
Base class for models that are loaded from a JSON calibration document.
"""

__all__ = [
    "SerializedModel"
]

import logging

from ..common import HEADER_KEYS
from .errors import ModelConsistencyError

_LOG = logging.getLogger(__name__)


class SerializedModel:
    """
    Holds the header fields shared by every serialized model. Subclasses set `_model_type` to the value they
    expect in the document's "Type" field. Loaders call `read_header` before checking their own parameters
    and `set_header` once the whole document has been accepted.
    """
    _model_type: str | None = None

    def __init__(self):
        self.name: str | None = None
        self.model_type: str | None = self._model_type
        self.version: str | None = None
        self.date: str | None = None

    def read_header(self, document: dict) -> dict[str, str]:
        """
        Read and check the header fields without touching the model. All of them are optional.

        :param document: The decoded calibration document
        :return: The header values found, keyed by attribute name
        """
        if not isinstance(document, dict):
            raise ModelConsistencyError(
                f"Expected a JSON object for {self.__class__.__name__}, found {type(document).__name__}"
            )

        header = {attribute: str(document[key]) for key, attribute in HEADER_KEYS.items()
                  if document.get(key) is not None}

        model_type = header.get('model_type', self._model_type)
        if self._model_type and model_type != self._model_type:
            raise ModelConsistencyError(
                f"Calibration document has type '{model_type}', expected '{self._model_type}'"
            )
        return header

    def set_header(self, header: dict[str, str]):
        """Store header values returned by `read_header`"""
        for attribute, value in header.items():
            setattr(self, attribute, value)

    def describe(self) -> str:
        """One line summary of the header"""
        return (f"{self.name or 'unnamed'} ({self.model_type or 'untyped'}, "
                f"version {self.version or 'unknown'}, dated {self.date or 'unknown'})")
