import re
from dataclasses import dataclass
from typing import List, Tuple

ONSITE_TERMS = [
    'SPA (Product)',
    'Catapult (Native-Fixed)',
    'Banner (Display)',
    'Attributed Sales',
    'Featured ROAS',
    'Halo ROAS',
    'rdROAS',
    'Total Customers',
    '% NTB Customers',
    'AOV',
]

OFFSITE_TERMS = [
    'Paid Social',
    'Paid Search',
    'PLA',
    'DPA',
    'DABA',
    'Brand Revenues',
    'Brand ROAS',
    'NTB%',
]

GENERIC_TERMS = [
    'Impressions',
    'Clicks',
    'CTR',
    'CPM',
    'CPC',
    'Orders',
    'Ad Spend',
    'Spend',
    'Revenue',
    'ROAS',
]

CANDIDATE_TERMS = ONSITE_TERMS + OFFSITE_TERMS + GENERIC_TERMS


def contains_term(text: str, term: str) -> bool:
    # Terms such as 'SPA (Product)' or 'NTB%' must match literally
    return re.search(re.escape(term), text, re.IGNORECASE) is not None


@dataclass(frozen=True)
class TermWhitelist:
    allowed: Tuple[str, ...]
    forbidden: Tuple[str, ...]

    def allowed_list(self) -> str:
        return ', '.join(self.allowed) or 'none'

    def find_violations(self, text: str) -> List[str]:
        return [term for term in self.forbidden if contains_term(text, term)]


def build_term_whitelist(text: str, candidates: List[str] = None) -> TermWhitelist:
    """Split the candidate vocabulary into terms found in the text and terms that are not."""
    candidates = CANDIDATE_TERMS if candidates is None else candidates
    allowed = tuple(term for term in candidates if contains_term(text, term))
    forbidden = tuple(term for term in candidates if term not in allowed)
    return TermWhitelist(allowed=allowed, forbidden=forbidden)
