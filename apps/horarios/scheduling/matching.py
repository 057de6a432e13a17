"""
Subject resolution: map the free-text class names a professor teaches
to subject records.

Strategies run in a configurable order (default exact, partial, fuzzy);
the first strategy that finds a subject wins.
"""

import json
import logging
from dataclasses import dataclass, field
from difflib import SequenceMatcher
from typing import Callable, Dict, List, Optional, Sequence

from .records import Subject, normalize_text

logger = logging.getLogger(__name__)

DEFAULT_MATCH_ORDER = ('exact', 'partial', 'fuzzy')
DEFAULT_FUZZY_THRESHOLD = 0.8


def parse_class_list(classes_text) -> List[str]:
    """
    Parse a professor's class list.

    Accepts a JSON array ('["Cálculo", "Física"]'), a comma separated
    string ('Cálculo, Física') or an already parsed list.
    """
    if not classes_text:
        return []
    if isinstance(classes_text, (list, tuple)):
        names = [str(name) for name in classes_text]
    else:
        text = str(classes_text).strip()
        names = None
        if text.startswith('['):
            try:
                parsed = json.loads(text)
            except json.JSONDecodeError:
                logger.warning(f"Class list looks like JSON but does not parse: {text!r}")
            else:
                if isinstance(parsed, list):
                    names = [str(name) for name in parsed]
        if names is None:
            names = text.strip('[]').split(',')
    return [name.strip().strip('"\'').strip() for name in names if name and name.strip()]


@dataclass
class ClassResolution:
    """Subjects resolved from one class list"""
    subject_ids: List[int] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)


class SubjectResolver:
    """
    Resolves class names against a subject catalog.

    exact    normalized names are equal
    partial  every word of the shorter name is a word of the longer one;
             the candidate sharing the most words wins, ties by catalog order
    fuzzy    best difflib ratio at or above the threshold
    """

    def __init__(self, subjects: Sequence[Subject], match_order=DEFAULT_MATCH_ORDER,
                 fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD):
        self._catalog = [(subject, normalize_text(subject.name)) for subject in subjects]
        self.fuzzy_threshold = fuzzy_threshold

        strategies: Dict[str, Callable[[str], Optional[Subject]]] = {
            'exact': self._match_exact,
            'partial': self._match_partial,
            'fuzzy': self._match_fuzzy,
        }
        unknown = [name for name in match_order if name not in strategies]
        if unknown:
            raise ValueError(f"Unknown subject match strategies: {', '.join(unknown)}")
        self.match_order = list(match_order)
        self._strategies = [(name, strategies[name]) for name in self.match_order]

    def resolve(self, class_name: str) -> Optional[int]:
        subject = self.resolve_subject(class_name)
        return subject.subject_id if subject else None

    def resolve_subject(self, class_name: str) -> Optional[Subject]:
        if not class_name or not class_name.strip():
            return None
        query = normalize_text(class_name)
        for name, strategy in self._strategies:
            subject = strategy(query)
            if subject is not None:
                logger.debug(f"'{class_name}' -> {subject.name} ({name} match)")
                return subject
        logger.debug(f"'{class_name}' did not match any subject")
        return None

    def resolve_classes(self, classes_text) -> ClassResolution:
        result = ClassResolution()
        seen_names = set()
        for class_name in parse_class_list(classes_text):
            key = normalize_text(class_name)
            if key in seen_names:
                continue
            seen_names.add(key)

            subject_id = self.resolve(class_name)
            if subject_id is None:
                result.unresolved.append(class_name)
            elif subject_id not in result.subject_ids:
                result.subject_ids.append(subject_id)
        return result

    # ======================== STRATEGIES ========================

    def _match_exact(self, query: str) -> Optional[Subject]:
        for subject, name in self._catalog:
            if name == query:
                return subject
        return None

    def _match_partial(self, query: str) -> Optional[Subject]:
        query_words = set(query.split())
        best, best_overlap = None, 0
        for subject, name in self._catalog:
            words = set(name.split())
            shorter, longer = (query_words, words) if len(query_words) <= len(words) else (words, query_words)
            if not shorter or not shorter <= longer:
                continue
            overlap = len(shorter)
            if overlap > best_overlap:
                best, best_overlap = subject, overlap
        return best

    def _match_fuzzy(self, query: str) -> Optional[Subject]:
        best, best_ratio = None, 0.0
        for subject, name in self._catalog:
            ratio = SequenceMatcher(None, query, name).ratio()
            if ratio >= self.fuzzy_threshold and ratio > best_ratio:
                best, best_ratio = subject, ratio
        return best
