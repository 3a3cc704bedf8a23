"""Purpose catalogue and classifier."""

from .catalogue import PURPOSE_CATEGORIES, get_category
from .classifier import PurposeClassifier

__all__ = ["PURPOSE_CATEGORIES", "PurposeClassifier", "get_category"]
