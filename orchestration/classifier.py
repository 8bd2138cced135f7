"""
Command Classifier
Decides whether a canvas command goes to the fast provider tier or the complex one.

Pure pattern matching, no I/O:
- FAST_PATH: single template-like commands ("create a red circle", "move shape 3 to 100, 200")
- COMPLEX_PATH: several operations, unresolved references, multi-part components, layouts
"""
import re

from utils import get_logger
from .types import Classification

logger = get_logger(__name__)


class CommandClassifier:
    """
    Static triage of command text.

    Checks run in order and the first match wins, so a command that fits a
    simple template is never sent to the complex tier.
    """

    # Single-action templates
    SIMPLE_PATTERNS = [
        r"^(create|make|add|draw) (a |an )?(\w+ ){0,2}(rectangle|circle|square|shape|box)e?s?\b(?!.*\b(and|then)\b)",
        r"^(create|make|add|write) (a |an )?(text|label|heading|title)\b",
        r"^move .+ (to|by) -?\d+,\s*-?\d+$",
        r"^resize .+ to \d+\s*x\s*\d+$",
        r"^make .+ \d+\s*x\s*\d+$",
        r"^scale .+ to \d+%?$",
        r"^(delete|remove) (the )?(object|shape|item|element) \w+$",
    ]

    ACTION_VERBS = ["create", "move", "delete", "resize", "add", "make", "remove", "draw"]

    CONJUNCTIONS = [" and ", " then ", ", and ", ", then "]

    CONTEXT_WORDS = ["this", "that", "these", "those", "selected", "selection", "them", "it"]

    COMPONENT_WORDS = [
        "login form", "signup form", "sign up form", "registration form", "form",
        "navbar", "nav bar", "navigation bar", "navigation",
        "sidebar", "side bar", "menu", "card", "button group", "buttons",
        "dashboard", "layout", "panel", "header", "footer",
    ]

    LAYOUT_WORDS = [
        "arrange", "align", "distribute", "space", "grid", "row", "column",
        "stack", "center", "organize", "layout", "horizontal", "vertical", "evenly",
    ]

    def __init__(self):
        self._simple = [re.compile(p) for p in self.SIMPLE_PATTERNS]
        self._verbs = re.compile(r"\b(" + "|".join(self.ACTION_VERBS) + r")\b")
        self._context = re.compile(r"\b(" + "|".join(self.CONTEXT_WORDS) + r")\b")
        self._components = re.compile(r"\b(" + "|".join(re.escape(w) for w in self.COMPONENT_WORDS) + r")s?\b")
        self._layout = re.compile(r"\b(" + "|".join(self.LAYOUT_WORDS) + r")\w*\b")

    def classify(self, text, selected_ids=()) -> Classification:
        """Classify command text; never raises"""
        classification, reason = self._classify(text, selected_ids)
        logger.info(f"Classified as {classification.value} ({reason}): {str(text)[:50]}")
        return classification

    def explain(self, text, selected_ids=()) -> str:
        """Which rule decided the classification, for logs and tuning"""
        classification, reason = self._classify(text, selected_ids)
        return f"{classification.value}: {reason}"

    def _classify(self, text, selected_ids) -> tuple[Classification, str]:
        if not isinstance(text, str) or not text.strip():
            return Classification.FAST_PATH, "empty"

        normalized = " ".join(text.lower().split())

        # 1. Simple templates
        for pattern in self._simple:
            if pattern.search(normalized):
                return Classification.FAST_PATH, f"simple pattern {pattern.pattern}"

        # 2. Multiple operations
        verbs = self._verbs.findall(normalized)
        if len(verbs) > 1:
            return Classification.COMPLEX_PATH, f"multiple operations ({', '.join(verbs)})"
        if verbs and any(c in normalized for c in self.CONJUNCTIONS):
            return Classification.COMPLEX_PATH, "operation with conjunction"

        # 3. Contextual references nobody resolved for us
        match = self._context.search(normalized)
        if match and not selected_ids:
            return Classification.COMPLEX_PATH, f"unresolved reference '{match.group(1)}'"

        # 4. Multi-part components
        match = self._components.search(normalized)
        if match:
            return Classification.COMPLEX_PATH, f"component '{match.group(1)}'"

        # 5. Layout operations
        match = self._layout.search(normalized)
        if match:
            return Classification.COMPLEX_PATH, f"layout '{match.group(1)}'"

        return Classification.FAST_PATH, "default"


# Singleton instance
_classifier: CommandClassifier | None = None


def get_classifier() -> CommandClassifier:
    """Get or create classifier singleton"""
    global _classifier
    if _classifier is None:
        _classifier = CommandClassifier()
    return _classifier
