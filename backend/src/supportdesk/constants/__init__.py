"""Configuration constants.

Re-exports all constants for convenient importing:
    from supportdesk.constants import EMBEDDING_DIM, STOP_WORDS
"""

from supportdesk.constants.ranking import *  # noqa: F403
from supportdesk.constants.messages import *  # noqa: F403
