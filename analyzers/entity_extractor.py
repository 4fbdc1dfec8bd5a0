# analyzers/entity_extractor.py
# Naive named-entity extraction from capitalized word pairs

import re
from typing import Iterable, List, Mapping

from models import Entities

BIGRAM_PATTERN = re.compile(r"(?=\b([A-Z][a-z]+)\s+([A-Z][a-z]+)\b)")
ORGANIZATION_MARKERS = ("Inc", "Corp", "Ltd")

MAX_PERSONS = 5
MAX_ORGANIZATIONS = 3
MAX_LOCATIONS = 3

# Remote NER entity groups mapped onto our buckets
NER_GROUPS = {
    "PER": "persons",
    "ORG": "organizations",
    "LOC": "locations",
}


class EntityExtractor:
    """
    Scans adjacent capitalized words ("Maria Santos", "Acme Corp").
    Pairs whose second word carries a company marker are organizations,
    everything else is a person. No location heuristic.
    """

    def extract(self, text: str) -> Entities:
        persons: List[str] = []
        organizations: List[str] = []
        seen = set()

        for first, second in BIGRAM_PATTERN.findall(text):
            name = f"{first} {second}"
            if name in seen:
                continue
            seen.add(name)

            if any(marker in second for marker in ORGANIZATION_MARKERS):
                organizations.append(name)
            else:
                persons.append(name)

        return Entities(
            persons=tuple(persons[:MAX_PERSONS]),
            organizations=tuple(organizations[:MAX_ORGANIZATIONS]),
            locations=(),
        )


def merge_entities(entities: Entities, ner_results: Iterable[Mapping]) -> Entities:
    """Fold remote NER output into the naive buckets, deduplicated."""
    buckets = entities.to_dict()
    for item in ner_results:
        bucket = NER_GROUPS.get(str(item.get("entity_group", "")).upper())
        word = str(item.get("word", "")).strip()
        if not bucket or not word or word.startswith("##"):
            continue
        if word.lower() not in (existing.lower() for existing in buckets[bucket]):
            buckets[bucket].append(word)

    return Entities(
        persons=tuple(buckets["persons"][:MAX_PERSONS]),
        organizations=tuple(buckets["organizations"][:MAX_ORGANIZATIONS]),
        locations=tuple(buckets["locations"][:MAX_LOCATIONS]),
    )
