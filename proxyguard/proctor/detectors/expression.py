"""
Expression helpers - dominant label selection and DeepFace label mapping
"""

from typing import Dict, Iterator, Mapping, Tuple

from ..types import EXPRESSION_LABELS

# DeepFace emotion names -> face-api style labels
DEEPFACE_LABELS: Dict[str, str] = {
    "neutral": "neutral",
    "happy": "happy",
    "sad": "sad",
    "angry": "angry",
    "fear": "fearful",
    "disgust": "disgusted",
    "surprise": "surprised",
}


def _ordered_items(scores: Mapping[str, float]) -> Iterator[Tuple[str, float]]:
    for label in EXPRESSION_LABELS:
        if label in scores:
            yield label, scores[label]
    for label, value in scores.items():
        if label not in EXPRESSION_LABELS:
            yield label, value


def most_likely_expression(scores: Mapping[str, float]) -> str:
    """
    Pick the label with the highest score.

    Ties go to the label that comes first in EXPRESSION_LABELS. A score has
    to be above zero to win, so an empty or all-zero mapping gives "".
    """
    best_label, best_value = "", 0.0
    for label, value in _ordered_items(scores):
        if value > best_value:
            best_label, best_value = label, value
    return best_label


def normalize_deepface_emotions(emotion: Mapping[str, float]) -> Dict[str, float]:
    """
    Convert a DeepFace ``emotion`` dict (percentages) to probabilities
    keyed by the face-api label set.
    """
    scores = {}
    for name, value in emotion.items():
        label = DEEPFACE_LABELS.get(name, name)
        scores[label] = max(0.0, min(1.0, float(value) / 100.0))
    return scores
