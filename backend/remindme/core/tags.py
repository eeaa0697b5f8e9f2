"""
Hashtag extraction and the derived tag usage index.
"""
import re
from collections import Counter
from typing import Dict, Iterable, Iterator

from remindme.models.reminder import Reminder


TAG_PATTERN = re.compile(r"#\w+")


def extract_tags(text: str) -> Iterator[str]:
    """Yield every ``#word`` token in ``text``, lowercased."""
    for match in TAG_PATTERN.finditer(text or ""):
        yield match.group(0).lower()


def rebuild_tag_index(reminders: Iterable[Reminder]) -> Dict[str, int]:
    """Count tag usage across the title and notes of every reminder."""
    counts: Counter = Counter()
    for reminder in reminders:
        counts.update(extract_tags(reminder.text))
    return dict(counts)
