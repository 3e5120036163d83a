"""
Parser Manager
==============

Keeps the registry of calibration source formats. Parser classes in this
package that define FORMAT_INFO are discovered automatically; others can
be added with register_parser().
"""

import importlib
import inspect
import os
from typing import Any, Dict, List, Type

from .base import CalibrationParser


class CalibrationParserManager:
    """Manager for discovery and registration of calibration parsers."""

    def __init__(self):
        """Initialize parser manager."""
        self.parsers: Dict[str, Type[CalibrationParser]] = {}
        self._discover_parsers()

    def _discover_parsers(self):
        """Register every parser class found in this package."""
        parsers_dir = os.path.dirname(__file__)

        for filename in sorted(os.listdir(parsers_dir)):
            if (filename.endswith('.py') and
                not filename.startswith('_') and
                filename not in ['base.py', 'manager.py']):

                module = importlib.import_module(f'.{filename[:-3]}', __package__)

                for name, obj in inspect.getmembers(module, inspect.isclass):
                    if (issubclass(obj, CalibrationParser) and
                        obj is not CalibrationParser and
                        obj.FORMAT_INFO.get('id')):
                        self.parsers[obj.FORMAT_INFO['id']] = obj

    def register_parser(self, format_id: str, parser_class: Type[CalibrationParser]):
        """
        Manually register a parser.

        Args:
            format_id: Unique identifier for the calibration format
            parser_class: Parser class to register
        """
        self.parsers[format_id] = parser_class

    def get_parser_class(self, format_id: str) -> Type[CalibrationParser]:
        """
        Get parser class by format ID.

        Raises:
            ValueError: If the format is not registered
        """
        if format_id not in self.parsers:
            raise ValueError(f"Unknown calibration format: {format_id}. "
                             f"Available formats: {self.get_available_formats()}")
        return self.parsers[format_id]

    def create_parser(self, format_id: str, verbose: bool = False) -> CalibrationParser:
        return self.get_parser_class(format_id)(verbose=verbose)

    def get_available_formats(self) -> List[str]:
        return sorted(self.parsers.keys())

    def get_format_info(self) -> Dict[str, Dict[str, Any]]:
        return {format_id: cls.get_info() for format_id, cls in self.parsers.items()}


# Global parser manager instance
_parser_manager = None

def get_parser_manager() -> CalibrationParserManager:
    """Get the global parser manager instance."""
    global _parser_manager
    if _parser_manager is None:
        _parser_manager = CalibrationParserManager()
    return _parser_manager
