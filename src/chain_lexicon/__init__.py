"""chain-lexicon: learn word chains from text and generate replies from them."""

from .brain import Brain, BrainConsistencyError, BrainStats
from .chain import CHAIN_LENGTH, Chain
from .config import ChainLexiconConfig, GenerationConfig, load_config
from .conversation import Conversation
from .sets import ChainSet, EmptySetError, WordSet
from .snapshot import SnapshotError, load_brain, load_brain_file, save_brain, save_brain_file
from .words import EXCLAMATION_MARK, PERIOD, QUESTION_MARK, Sentence, TagCategory, Word, classify_tag

__all__ = [
    "Brain",
    "BrainConsistencyError",
    "BrainStats",
    "CHAIN_LENGTH",
    "Chain",
    "ChainLexiconConfig",
    "ChainSet",
    "Conversation",
    "EXCLAMATION_MARK",
    "EmptySetError",
    "GenerationConfig",
    "PERIOD",
    "QUESTION_MARK",
    "Sentence",
    "SnapshotError",
    "TagCategory",
    "Word",
    "WordSet",
    "classify_tag",
    "load_brain",
    "load_brain_file",
    "load_config",
    "save_brain",
    "save_brain_file",
]

__version__ = "0.1.0"
