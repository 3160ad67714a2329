"""Name classifier engine: stdlib/local filtering and alias mapping."""

from pyreqs.engines.name_classifier.classifier import NameClassifier, NameKind
from pyreqs.engines.name_classifier.tables import LookupTables

__all__ = ["LookupTables", "NameClassifier", "NameKind"]
