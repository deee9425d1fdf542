import glob
import logging
import os
from typing import Any, Dict, List

import pandas as pd

from .quiz import dump_pairs

logger = logging.getLogger(__name__)

DEFAULT_TOPIC = "default"

DEFAULT_WORDS: List[Dict[str, str]] = [
    {"word": "Encourage", "translation": "Поощрять"},
    {"word": "Sustainable", "translation": "Устойчивый"},
    {"word": "Development", "translation": "Развитие"},
    {"word": "Goal", "translation": "Цель"},
    {"word": "Decision", "translation": "Решение"},
]


class VocabularyManager:
    """Loads preset word lists from CSV files in a directory."""

    def __init__(self, directory: str):
        self.directory = directory
        self.vocab_sets: Dict[str, List[Dict[str, str]]] = {}

    def load_all(self):
        self.vocab_sets = {}
        if not os.path.exists(self.directory):
            logger.warning(f"Vocabulary directory {self.directory} not found.")
        else:
            for file_path in sorted(glob.glob(os.path.join(self.directory, "*.csv"))):
                self._load_file(file_path)

        if not self.vocab_sets:
            logger.info("No CSV presets found. Using the built-in word list.")
            self.vocab_sets[DEFAULT_TOPIC] = [dict(w) for w in DEFAULT_WORDS]

    def _load_file(self, file_path: str):
        file_name = os.path.splitext(os.path.basename(file_path))[0]
        try:
            df = pd.read_csv(file_path, encoding="utf-8", dtype=str)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load {file_path}: {e}")
            return

        if "word" not in df.columns or "translation" not in df.columns:
            logger.error(f"Skipping {file_name}: Missing columns.")
            return

        df = df[["word", "translation"]].fillna("")
        df["word"] = df["word"].str.strip()
        df = df[df["word"] != ""].drop_duplicates(subset="word")
        self.vocab_sets[file_name] = df.to_dict("records")
        logger.info(f"Loaded {len(df)} words from {file_name}")

    def get_words(self, topic: str) -> List[Dict[str, str]]:
        return self.vocab_sets.get(topic, [])

    def get_topics(self) -> List[Dict[str, Any]]:
        topics = []
        for key, words in self.vocab_sets.items():
            display_name = key.replace("_", " ").title()
            topics.append({"id": key, "name": display_name, "count": len(words)})
        topics.sort(key=lambda x: x["name"])
        return topics

    def as_json(self, topic: str) -> str:
        """Editor text for a preset; raises KeyError for unknown topics."""
        if topic not in self.vocab_sets:
            raise KeyError(topic)
        return dump_pairs(self.vocab_sets[topic])
