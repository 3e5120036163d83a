"""
Tests package for Camera Parameters Toolkit

This package contains all test modules for the toolkit,
organized by test type:

- unit/: Unit tests for individual modules and classes
- integration/: Parsing workflows on the sample calibration files and the CLI
"""
