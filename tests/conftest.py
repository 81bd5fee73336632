import os

# Set the environment before anything loads config, so tests never pick up
# DEVELOPMENT_* / PRODUCTION_* overrides from the developer's shell
os.environ["APP_ENVIRONMENT"] = "test"

from tests.fixtures import *  # noqa: E402,F401,F403
