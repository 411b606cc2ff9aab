# Pre-production engine: model output recovery, script breakdown, generation client
__version__ = "0.1.0"
