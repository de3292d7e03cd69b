"""
KickOffHub
Fußball-Referenzdaten als REST API, modular aufgebaut (Module Loader + DI Container)
"""

__version__ = "1.0.0"
__author__ = "KickOffHub Team"

# NOTE:
# Avoid importing heavy modules (like configuration) at package import time to
# keep "import kickoffhub" lightweight and side-effect free, particularly for
# the worker process and unit tests that only need the bootstrap helpers.

__all__ = []
