import os

DATA_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_CONFIG = os.path.join(DATA_DIR, "default_config.yaml")
