from shortlinker.utils import initialize_logging


initialize_logging()
