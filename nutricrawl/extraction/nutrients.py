"""
Nutrient Extractor

Recovers the analytical constituents (protein, fat, fiber, ash, moisture,
carbohydrates, energy) and the additive declaration from a text fragment.

Label synonyms are kept per locale (German, English, French, Italian)
and tried in that order; the first pattern that matches a nutrient wins.
When the fragment is table markup, a table-cell pattern set is tried for
every nutrient still unresolved.

Unmatched nutrients stay 0.0 ("no claim found"), never None.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Pattern

from ..common.text_utils import clean_text, parse_decimal, strip_tags
from ..models import NutrientProfile
from .parsers.document import HtmlDocument

logger = logging.getLogger(__name__)

# Label alternations per nutrient, ordered de, en, fr, it
NUTRIENT_LABELS: Dict[str, List[str]] = {
    'protein': [
        r'(?:roh)?protein|(?:rohes?\s+)?eiwei(?:ß|ss)',
        r'(?:crude\s+)?proteins?',
        r'prot[ée]ines?(?:\s+brutes?)?',
        r'protein[ae](?:\s+grezz[ae])?',
    ],
    'fat': [
        r'(?:roh)?fett(?:gehalt)?|[öo]le?\s+und\s+fette?',
        r'(?:crude\s+)?(?:oils?\s+and\s+)?fats?(?:\s+content)?',
        r'mati[èe]res?\s+grasses?(?:\s+brutes?)?',
        r'(?:oli\s+e\s+)?grass[io](?:\s+grezz[io])?',
    ],
    'fiber': [
        r'(?:roh)?fasern?|ballaststoffe?',
        r'(?:crude\s+)?fib(?:er|re)s?',
        r'(?:cellulose|fibres?)(?:\s+brutes?)?',
        r'(?:fibra|cellulosa)(?:\s+grezza)?',
    ],
    'ash': [
        r'(?:roh)?asche|aschgehalt|mineralstoffe?',
        r'(?:crude\s+)?ash|inorganic\s+matter',
        r'cendres?(?:\s+brutes?)?|mati[èe]res?\s+min[ée]rales?',
        r'ceneri(?:\s+grezze)?',
    ],
    'moisture': [
        r'feuchtigkeit|feuchte(?:gehalt)?|wassergehalt|wasser',
        r'moisture|water',
        r'humidit[ée]',
        r'umidit[àa]',
    ],
    'carbohydrates': [
        r'kohlenhydrate|stickstofffreie\s+extraktstoffe|nfe',
        r'carbohydrates?',
        r'glucides?',
        r'carboidrati',
    ],
}

NUTRIENT_ORDER = ['protein', 'fat', 'fiber', 'ash', 'moisture', 'carbohydrates']

_NOT_LETTER = r'(?<![a-zäöüßéèàç])'
_NUMBER = r'(\d+(?:[.,]\d+)?)'
# Optional "(min.)", ":", "min." and "ca." between label and value
_QUALIFIER = r'\s*(?:\((?:min|max|mind|ca)[^)]{0,12}\)\s*)?[:=]?\s*(?:(?:min(?:imum)?|max(?:imum)?|mind|ca)\.?\s*)?'
_TAGS = r'(?:<[^>]+>\s*)*'

ENERGY_PATTERNS: List[Pattern] = [
    re.compile(
        _NOT_LETTER + r'(?:umsetzbare\s+energie|energie(?:gehalt)?|(?:metaboli[sz]able\s+)?energy|[ée]nergie|energia)'
        r'(?:[^0-9%]{0,12}?\s(?:pro|per|je)\s*(100\s*g|kg)(?![a-z]))?'
        r'[^0-9%]{0,30}?' + _NUMBER + r'\s*kcal(?:\s*(?:/|je|pro|per)\s*(100\s*g|kg))?',
        re.IGNORECASE,
    ),
]

_SENTENCE = r'((?:[^.]|(?<=\d)\.(?=\d))+\.?)'

ADDITIVE_PATTERNS: List[Pattern] = [
    re.compile(
        _NOT_LETTER + r'(?:zusatzstoffe|additives|additifs|additivi)'
        r'(?:\s*(?:/|je|pro|per)\s*kg)?\s*:?\s*' + _SENTENCE,
        re.IGNORECASE,
    ),
]
_VITAMIN_SENTENCE = re.compile(r'(?<![a-z])vitamin(?:[^.]|(?<=\d)\.(?=\d))+\.', re.IGNORECASE)

SECTION_MARKERS: List[str] = [
    r'analytische\s+bestandteile',
    r'analytical\s+constituents?',
    r'composants\s+analytiques',
    r'constituants\s+analytiques',
    r'componenti\s+analitici',
    r'analisi\s+garantita',
    r'guaranteed\s+analysis',
    r'nutritional\s+analysis',
]
_MARKER_RE = re.compile('|'.join(SECTION_MARKERS), re.IGNORECASE)
_PROTEIN_TOKEN = re.compile(r'protein|eiwei|prot[ée]ine|fett', re.IGNORECASE)
_NUTRIENT_TOKEN = re.compile(r'protein|fett|faser|asche|feuchte|fat|fib|ash|moisture', re.IGNORECASE)

_STRUCTURED_ADDITIVE_PATTERNS: List[Pattern] = [
    re.compile(r'vitamine?\s+[A-E][0-9]*\b', re.IGNORECASE),
    re.compile(r'\bE[0-9]{3}[a-z]?\b'),
    re.compile(r'minerals?\s*:\s*[^,]+', re.IGNORECASE),
    re.compile(r'trace\s+elements?', re.IGNORECASE),
]


def _prose_patterns(labels: Iterable[str]) -> List[Pattern]:
    return [
        re.compile(_NOT_LETTER + r'(?:' + label + r')' + _QUALIFIER + _NUMBER + r'\s*%', re.IGNORECASE)
        for label in labels
    ]


def _table_patterns(labels: Iterable[str]) -> List[Pattern]:
    return [
        re.compile(
            r'<td[^>]*>\s*' + _TAGS + r'(?:' + label + r')\s*' + _TAGS + r'</td>\s*'
            r'<td[^>]*>\s*' + _TAGS + _NUMBER + r'\s*' + _TAGS + r'%',
            re.IGNORECASE,
        )
        for label in labels
    ]


PROSE_PATTERNS: Dict[str, List[Pattern]] = {
    name: _prose_patterns(labels) for name, labels in NUTRIENT_LABELS.items()
}
TABLE_PATTERNS: Dict[str, List[Pattern]] = {
    name: _table_patterns(labels) for name, labels in NUTRIENT_LABELS.items()
}


@dataclass
class NutrientResult:
    """Extracted profile plus which strategy resolved each nutrient."""
    profile: NutrientProfile = field(default_factory=NutrientProfile)
    additives: Optional[str] = None
    extraction_method: Dict[str, str] = field(default_factory=dict)


class NutrientExtractor:
    """
    Extracts analytical constituents from free text or a markup fragment.

    Usage:
        extractor = NutrientExtractor()
        block = extractor.locate_block(doc, selectors)
        result = extractor.extract(block)
        result.profile.protein  # 28.5
    """

    def extract(self, text: str) -> NutrientResult:
        """
        Extract the nutrient profile and additives from a fragment.

        Args:
            text: Prose or table markup containing the analytical block

        Returns:
            NutrientResult (zero-valued fields for unmatched nutrients)
        """
        result = NutrientResult()
        if not text:
            return result

        has_table = '<td' in text.lower()
        prose = strip_tags(text) if '<' in text else clean_text(text)
        values: Dict[str, float] = {}

        for name in NUTRIENT_ORDER:
            value = self._first_value(PROSE_PATTERNS[name], prose)
            if value:
                values[name] = value
                result.extraction_method[name] = 'prose'

        if has_table:
            for name in NUTRIENT_ORDER:
                if values.get(name):
                    continue
                value = self._first_value(TABLE_PATTERNS[name], text)
                if value:
                    values[name] = value
                    result.extraction_method[name] = 'table'

        energy = self.extract_energy(prose)
        if energy:
            values['energy'] = energy
            result.extraction_method['energy'] = 'prose'

        result.profile = NutrientProfile(**values)
        result.additives = self.extract_additives(prose)
        return result

    def extract_from_ingredients(self, text: str) -> NutrientProfile:
        """
        Extract a profile from ingredient prose that embeds an analytical
        section ("Analytical constituents: protein 25%, ...").

        Returns an empty profile when no section marker is present.
        """
        section = self.extract_constituents_section(text)
        if not section:
            return NutrientProfile()
        return self.extract(section).profile

    @staticmethod
    def extract_constituents_section(text: str) -> str:
        """Cut the analytical section out of prose, up to the next sentence end."""
        if not text:
            return ""
        match = re.search(
            r'(?:' + '|'.join(SECTION_MARKERS) + r')\s*:?\s*' + _SENTENCE,
            text,
            re.IGNORECASE,
        )
        return match.group(1).strip() if match else ""

    @staticmethod
    def extract_energy(text: str) -> float:
        """Energy in kcal/100g; per-kg declarations are scaled down."""
        for pattern in ENERGY_PATTERNS:
            match = pattern.search(text or "")
            if match:
                raw = match.group(2)
                unit = re.sub(r'\s+', '', match.group(1) or match.group(3) or "").lower()
                if unit == 'kg':
                    # "3.850 kcal/kg" uses a thousands separator
                    if re.fullmatch(r'\d{1,2}[.,]\d{3}', raw):
                        raw = raw.replace('.', '').replace(',', '')
                    value = parse_decimal(raw) / 10
                else:
                    value = parse_decimal(raw)
                return round(value, 2)
        return 0.0

    @staticmethod
    def extract_additives(text: str) -> Optional[str]:
        """
        Capture the additive declaration as free text.

        Tries the explicit marker first, then falls back to sentences that
        start with "vitamin".
        """
        if not text:
            return None
        for pattern in ADDITIVE_PATTERNS:
            match = pattern.search(text)
            if match:
                additives = clean_text(match.group(1))
                if additives:
                    return additives
        vitamins = _VITAMIN_SENTENCE.findall(text)
        if vitamins:
            return clean_text(' '.join(vitamins))
        return None

    @staticmethod
    def extract_additive_list(ingredients_text: str) -> Optional[str]:
        """
        Collect additive mentions from ingredient prose into a list.

        Returns:
            Comma-joined mentions (vitamins, E-numbers, minerals), or None
        """
        if not ingredients_text:
            return None
        additives: List[str] = []
        for pattern in _STRUCTURED_ADDITIVE_PATTERNS:
            additives.extend(clean_text(m) for m in pattern.findall(ingredients_text))
        return ', '.join(additives) if additives else None

    def locate_block(self, doc: HtmlDocument, selectors: Iterable[str]) -> str:
        """
        Find the analytical constituents block on a page.

        Scans candidate regions for a language marker, or for a percent
        sign together with a protein token. Falls back to the raw markup.

        Returns:
            Fragment text, or '' when no block is locatable
        """
        for selector in selectors:
            for text in doc.texts(selector):
                if _MARKER_RE.search(text) or ('%' in text and _PROTEIN_TOKEN.search(text)):
                    return text
        return self.locate_in_raw(doc.raw)

    @staticmethod
    def locate_in_raw(raw: str) -> str:
        """Raw-markup fallback: a table after the marker, else a bounded window."""
        if not raw:
            return ""
        table = re.search(
            r'(?:' + '|'.join(SECTION_MARKERS) + r')[\s\S]{0,2000}?<table[\s\S]*?</table>',
            raw,
            re.IGNORECASE,
        )
        if table:
            return table.group(0)
        window = re.search(
            r'(?:' + '|'.join(SECTION_MARKERS) + r')[\s\S]{0,1000}?(?:' + _NUTRIENT_TOKEN.pattern + r')[\s\S]{0,1000}',
            raw,
            re.IGNORECASE,
        )
        return window.group(0) if window else ""

    @staticmethod
    def _first_value(patterns: List[Pattern], text: str) -> float:
        for pattern in patterns:
            match = pattern.search(text)
            if match:
                value = parse_decimal(match.group(1))
                if value > 0:
                    return value
        return 0.0
