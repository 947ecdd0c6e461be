"""
cmakekit - install CMake versions from the published installable catalog.
"""
