"""
Organization name extraction from article text.

A lightweight, rule-based pass: a lexicon of well-known AI/tech companies
plus a pattern for capitalised names ending in a corporate suffix. No
model, no training. The extractor is pluggable so another strategy can
be swapped in without touching the resolver.
"""

import re
from collections import Counter
from typing import Iterable, Protocol


# Spans this short are noise
MIN_NAME_LENGTH = 3

DEFAULT_ORGANIZATION_LIMIT = 50


# Matched case-sensitively on word boundaries
KNOWN_ORGANIZATIONS = [
    # AI labs and model providers
    "OpenAI", "Anthropic", "DeepMind", "Google DeepMind", "Mistral AI", "Cohere",
    "Hugging Face", "Perplexity", "Stability AI", "Scale AI", "Databricks", "xAI",
    "Inflection AI", "Character.AI",
    # Large-cap technology
    "Nvidia", "NVIDIA", "Microsoft", "Google", "Alphabet", "Meta", "Apple", "Amazon",
    "IBM", "Intel", "AMD", "Qualcomm", "Broadcom", "Oracle", "Salesforce", "Adobe",
    "Tesla", "Cisco", "Dell", "Micron", "TSMC", "Samsung", "Sony", "Netflix", "Uber",
    "ServiceNow", "Snowflake", "Palantir", "Super Micro", "Supermicro", "CoreWeave",
    "Baidu", "Alibaba", "Tencent", "ByteDance", "Huawei", "SoftBank",
    # Smaller listed AI names
    "C3.ai", "SoundHound", "BigBear.ai", "UiPath", "Upstart", "Veritone",
    "Cerence", "Innodata", "Lemonade", "Duolingo", "Symbotic",
]

CORPORATE_SUFFIXES = [
    r"Inc\.?", r"Corp\.?", "Corporation", r"Ltd\.?", "LLC", r"Co\.", "Company",
    "Technologies", "Technology", "Labs", "Systems", "Group", "Holdings",
    "Networks", "Robotics", "Semiconductor", "Software", "AI",
]

# Capitalised words that commonly precede a name without being part of it
LEADING_STOPWORDS = {
    "A", "An", "And", "As", "At", "But", "By", "For", "From", "In", "On", "Of",
    "The", "To", "With", "When", "While", "After", "Before", "Today", "Yesterday",
    "Meanwhile", "Startup", "Rival", "Generative", "Agentic", "Conversational",
    "Responsible", "Open", "How", "Why", "What", "This", "That",
}

_NAME_WORD = r"[A-Z](?:[\w&'-]|\.(?=\w))*"

_SUFFIX_PATTERN = re.compile(
    r"(?<![\w.])((?:" + _NAME_WORD + r"[ \t]+){1,4})"
    r"(" + "|".join(CORPORATE_SUFFIXES) + r")(?![\w])"
)

_LEXICON_PATTERN = re.compile(
    r"(?<![\w.])("
    + "|".join(re.escape(name) for name in sorted(KNOWN_ORGANIZATIONS, key=len, reverse=True))
    + r")(?![\w])"
)


class OrganizationExtractor(Protocol):
    """Anything that can pull organization-name spans out of text."""

    def extract(self, text: str) -> list[str]:
        ...


class RuleBasedOrganizationExtractor:
    """Lexicon and suffix-pattern organization extractor."""

    def _suffix_spans(self, text: str) -> list[tuple[int, int, str]]:
        spans = []
        for match in _SUFFIX_PATTERN.finditer(text):
            words = list(re.finditer(r"\S+", match.group(1)))
            while words and words[0].group() in LEADING_STOPWORDS:
                words.pop(0)
            if not words:
                continue
            start = match.start(1) + words[0].start()
            name = " ".join(text[start:match.end()].split())
            spans.append((start, match.end(), name))
        return spans

    def _lexicon_spans(self, text: str) -> list[tuple[int, int, str]]:
        return [(m.start(), m.end(), m.group(1)) for m in _LEXICON_PATTERN.finditer(text)]

    def extract(self, text: str) -> list[str]:
        """
        Return organization spans in order of appearance.

        Overlapping matches are resolved in favour of the earliest, then
        the longest span.
        """
        if not text:
            return []

        spans = self._suffix_spans(text) + self._lexicon_spans(text)
        spans.sort(key=lambda span: (span[0], -(span[1] - span[0])))

        names = []
        last_end = -1
        for start, end, name in spans:
            if start < last_end:
                continue
            names.append(name)
            last_end = end
        return names


def count_organizations(
    texts: Iterable[str],
    extractor: OrganizationExtractor,
) -> Counter:
    """
    Count organization mentions across texts.

    Spans are trimmed and anything of MIN_NAME_LENGTH - 1 characters or
    fewer is dropped. Counter keeps first-seen order for equal counts.
    """
    counts: Counter = Counter()
    for text in texts:
        if not text:
            continue
        for span in extractor.extract(text):
            name = span.strip()
            if len(name) >= MIN_NAME_LENGTH:
                counts[name] += 1
    return counts


def rank_organizations(counts: Counter, limit: int = DEFAULT_ORGANIZATION_LIMIT) -> list[str]:
    """Names by descending count, ties in first-encountered order."""
    return [name for name, _ in counts.most_common(limit)]
