"""Application entry point - reference host serving the demonstration flows."""

from toolflow.api import create_app
from toolflow.api.dependencies import get_config
from toolflow.demo import build_demo_tools

config = get_config()

app = create_app(build_demo_tools(config.flow.max_iterations), config)
