"""Release metadata of the deploy-sentry distribution, read by setup.py"""

__version__ = "1.0.0"
__version_info__ = tuple(int(part) for part in __version__.split("."))
__author__ = "vistart"
__email__ = "i@vistart.me"
__license__ = "MIT"
