"""
Command line interface of srrclient.
"""

import logging

# urllib3 logs every connection at DEBUG; keep --verbose readable
logging.getLogger("urllib3").setLevel(logging.WARNING)
