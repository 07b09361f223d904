from toolflow.api.app import create_app
from toolflow.api.server import HttpToolServer

__all__ = ["HttpToolServer", "create_app"]
