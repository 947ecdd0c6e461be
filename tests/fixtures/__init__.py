"""Test fixtures for cmakekit tests.

This package provides reusable pytest fixtures and builders:

- catalogs: Installable catalog documents (the 3.20.0 scenario, multi-platform)
- archives: Extracted CMake trees and archives in the vendor layouts

Import fixtures in your tests using:
    from tests.fixtures.catalogs import catalog_3_20
    from tests.fixtures.archives import make_cmake_tree
"""

__all__ = [
    "catalogs",
    "archives",
]
