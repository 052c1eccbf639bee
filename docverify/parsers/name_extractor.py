"""
Extracció del nom del titular d'un document d'identitat indi

Els documents indis (Aadhaar, PAN) rarament porten etiqueta "Name:". El nom
sol aparèixer sol en una línia, just sobre la data de naixement.

Estratègies per text (ordre de prioritat, la primera que troba guanya):
  1. declared_name_hint      : el nom declarat per l'usuari apareix literalment
  2. standalone_line         : línia de 2-4 paraules capitalitzades
  3. date_of_birth_proximity : paraules capitalitzades just abans de la DOB
  4. explicit_label          : "Name:", "Full Name:", "Given Name:", "Holder Name:"
  5. header_proximity        : entre capçalera institucional i número del document

Estratègia per posició (si el motor OCR dona caixes de paraules):
  word_layout : línies del 40% superior de la pàgina amb confiança > 0.6
"""
import re
import logging
from typing import Optional, List
from docverify.models.verification import CandidateName
from docverify.models.ocr_result import WordLayout, WordBox
from docverify.matching.fuzzy import compare_names, corrected_equal
from docverify.utils.redact import redact_name

log = logging.getLogger("docverify.names")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

INSTITUTIONAL_WORDS = (
    "GOVT", "GOVERNMENT", "INDIA", "DEPARTMENT", "AUTHORITY", "UNIQUE",
    "IDENTIFICATION", "AADHAAR", "UID", "UIDAI", "INCOME", "TAX", "PASSPORT",
    "LICENSE", "LICENCE", "PERMANENT", "ACCOUNT", "NUMBER", "REPUBLIC",
)
_INSTITUTIONAL_RE = re.compile(r"\b(?:" + "|".join(INSTITUTIONAL_WORDS) + r")\b", re.IGNORECASE)
_STRIPPABLE_RE = re.compile(r"\b(?:OF|" + "|".join(INSTITUTIONAL_WORDS) + r")\b", re.IGNORECASE)

# Paraula de nom: "Arnav" o "ARNAV" (PAN i permisos imprimeixen en majúscules)
_NAME_WORD = r"(?:[A-Z][a-z]+|[A-Z]{2,})"

_NAME_LINE_RE = re.compile(rf"^({_NAME_WORD}(?:\s+{_NAME_WORD}){{1,3}})$")
_CAPITALIZED_RUN_RE = re.compile(rf"{_NAME_WORD}(?:[ \t]+{_NAME_WORD}){{1,3}}")

_DOB_RE = re.compile(
    r"(?:DOB|Date\s+of\s+Birth|Date\s+Birth|Birth)\s*:?\s*\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}",
    re.IGNORECASE,
)
_BEFORE_DOB_RE = re.compile(
    rf"({_NAME_WORD}(?:[ \t]+{_NAME_WORD}){{1,3}})"
    r"(?=[ \t]*(?:\n|\r|(?i:DOB|Date|Gender|Male|Female|Address)|$))"
)
DOB_LOOKBEHIND_CHARS = 200

_LABEL_RE = re.compile(
    r"(?<![A-Za-z]'s )(?<!Father )(?<!Mother )"
    r"\b(?i:Full\s+Name|Given\s+Name|Holder\s+Name|Name\s+of\s+(?:the\s+)?Holder|Name)"
    r"[ \t]*:?[ \t]*([A-Z][a-zA-Z]+(?:[ \t]+[A-Z][a-zA-Z]+)*)"
)

_HEADER_RE = re.compile(
    r"(?i:Government|GOVT|Unique\s+Identification|UIDAI|Aadhaar|Income\s+Tax|Department)"
)
_NUMBER_TOKEN_RE = re.compile(r"\d{4}\s?\d{4}\s?\d{4}|\b[A-Z]{5}\d{4}[A-Z]\b|\d{10}")
_GOV_HEADER_RE = re.compile(
    r"Government\s+of\s+India|GOVT\.?\s+OF\s+INDIA|UIDAI|Unique\s+Identification", re.IGNORECASE
)
HEADER_FOLLOWING_LINES = 5

# Posició
TOP_REGION_RATIO = 0.4
WORD_CONFIDENCE_FLOOR = 0.6
LINE_MIN_GAP_PX = 10
HINT_OVERLAP_RATIO = 0.8
HINT_SIMILARITY_FLOOR = 0.70

# Confiança assignada per estratègia
_STRATEGY_CONFIDENCE = {
    "declared_name_hint": 0.95,
    "standalone_line": 0.8,
    "explicit_label": 0.75,
    "date_of_birth_proximity": 0.7,
    "header_proximity": 0.6,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _lines(text: str) -> List[str]:
    return [line.strip() for line in re.split(r"[\n\r]", text or "") if line.strip()]


def _collapse(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()


def is_institutional(value: str) -> bool:
    return bool(_INSTITUTIONAL_RE.search(value))


def _strip_institutional(value: str) -> str:
    return _collapse(_STRIPPABLE_RE.sub(" ", value))


def _acceptable(name: Optional[str]) -> bool:
    """Nom plausible: ≥ 3 caràcters, ≥ 2 paraules, només lletres i espais, sense paraules institucionals."""
    if not name or len(name) < 3:
        return False
    if not re.fullmatch(r"[A-Za-z ]+", name):
        return False
    if is_institutional(name):
        return False
    return len(name.split(" ")) >= 2


def _hint_words(declared_name: Optional[str]) -> List[str]:
    return [w for w in (declared_name or "").upper().split() if w]


def _candidate(text: str, source: str, confidence: Optional[float] = None) -> CandidateName:
    if confidence is None:
        confidence = _STRATEGY_CONFIDENCE[source]
    return CandidateName(text=text, source=source, confidence=round(confidence, 4))


# ---------------------------------------------------------------------------
# Extractor
# ---------------------------------------------------------------------------

class NameExtractor:

    # --- Estratègies per text ---------------------------------------------

    @staticmethod
    def from_declared_name(text: str, declared_name: Optional[str]) -> Optional[CandidateName]:
        words = _hint_words(declared_name)
        if len(words) < 2:
            return None
        upper = text.upper()
        if not all(w in upper for w in words):
            return None
        pattern = re.compile(r"\s+".join(re.escape(w) for w in words), re.IGNORECASE)
        m = pattern.search(text)
        if not m:
            return None
        return _candidate(_collapse(m.group(0)), "declared_name_hint")

    @staticmethod
    def from_standalone_lines(text: str, declared_name: Optional[str] = None) -> Optional[CandidateName]:
        candidates = []
        for line in _lines(text):
            m = _NAME_LINE_RE.match(line)
            if m and _acceptable(_collapse(m.group(1))):
                candidates.append(_collapse(m.group(1)))

        if not candidates:
            return None

        if declared_name:
            for name in candidates:
                result = compare_names(declared_name, name)
                if result.match or result.similarity >= HINT_SIMILARITY_FLOOR:
                    return _candidate(name, "standalone_line")

        return _candidate(candidates[0], "standalone_line")

    @staticmethod
    def from_date_of_birth(text: str) -> Optional[CandidateName]:
        dob = _DOB_RE.search(text)
        if not dob:
            return None

        window = text[max(0, dob.start() - DOB_LOOKBEHIND_CHARS):dob.start()]
        for m in _BEFORE_DOB_RE.finditer(window):
            name = _strip_institutional(m.group(1))
            if _acceptable(name):
                return _candidate(name, "date_of_birth_proximity")

        # Línia immediatament anterior a la DOB
        previous = text[:dob.start()].rstrip().splitlines()
        if previous:
            m = _NAME_LINE_RE.match(previous[-1].strip())
            if m and _acceptable(_collapse(m.group(1))):
                return _candidate(_collapse(m.group(1)), "date_of_birth_proximity")
        return None

    @staticmethod
    def from_label(text: str) -> Optional[CandidateName]:
        for m in _LABEL_RE.finditer(text):
            name = _strip_institutional(m.group(1))
            if _acceptable(name):
                return _candidate(name, "explicit_label")
        return None

    @staticmethod
    def from_header(text: str) -> Optional[CandidateName]:
        header = _HEADER_RE.search(text)
        if header:
            number = _NUMBER_TOKEN_RE.search(text, header.end())
            if number:
                segment = text[header.end():number.start()]
                for m in _CAPITALIZED_RUN_RE.finditer(segment):
                    name = _collapse(m.group(0))
                    if _acceptable(name):
                        return _candidate(name, "header_proximity")

        gov = _GOV_HEADER_RE.search(text)
        if gov:
            following = re.split(r"[\n\r]", text[gov.end():])[:HEADER_FOLLOWING_LINES]
            for line in following:
                m = _NAME_LINE_RE.match(line.strip())
                if m and _acceptable(_collapse(m.group(1))):
                    return _candidate(_collapse(m.group(1)), "header_proximity")
        return None

    @staticmethod
    def extract(text: str, declared_name: Optional[str] = None) -> Optional[CandidateName]:
        """Prova les estratègies per ordre de prioritat; la primera que troba guanya."""
        if not text:
            return None

        strategies = (
            lambda: NameExtractor.from_declared_name(text, declared_name),
            lambda: NameExtractor.from_standalone_lines(text, declared_name),
            lambda: NameExtractor.from_date_of_birth(text),
            lambda: NameExtractor.from_label(text),
            lambda: NameExtractor.from_header(text),
        )
        for strategy in strategies:
            candidate = strategy()
            if candidate:
                log.info("name_extracted", extra={
                    "source": candidate.source,
                    "name_redacted": redact_name(candidate.text),
                })
                return candidate

        log.info("name_not_found")
        return None

    # --- Estratègia per posició -------------------------------------------

    @staticmethod
    def group_words_by_line(words: List[WordBox]) -> List[List[WordBox]]:
        """Agrupa paraules en línies per proximitat vertical (y0)."""
        if not words:
            return []

        ordered = sorted(words, key=lambda w: w.bbox[1])
        lines: List[List[WordBox]] = []
        current = [ordered[0]]
        for word in ordered[1:]:
            last = current[-1]
            threshold = max(LINE_MIN_GAP_PX, last.height * 0.5)
            if abs(word.bbox[1] - last.bbox[1]) < threshold:
                current.append(word)
            else:
                lines.append(current)
                current = [word]
        lines.append(current)

        return [sorted(line, key=lambda w: w.bbox[0]) for line in lines]

    @staticmethod
    def _overlaps_hint(name: str, hint_words: List[str]) -> bool:
        words = name.upper().split()
        matched = [
            hw for hw in hint_words
            if any(w == hw or corrected_equal(w, hw) or w in hw or hw in w for w in words)
        ]
        return len(matched) >= len(hint_words) * HINT_OVERLAP_RATIO

    @staticmethod
    def extract_from_layout(
        layout: Optional[WordLayout],
        declared_name: Optional[str] = None,
        top_region_ratio: float = TOP_REGION_RATIO,
        confidence_floor: float = WORD_CONFIDENCE_FLOOR,
    ) -> Optional[CandidateName]:
        """
        Nom per posició: només paraules del terç superior (40%) amb confiança
        suficient, agrupades en línies i filtrades amb el patró de 2-4 paraules.
        Amb nom declarat → el candidat que hi solapi; si no → més confiança.
        """
        if layout is None or not layout.words:
            return None

        limit = layout.page_height * top_region_ratio
        top_words = [
            w for w in layout.words
            if w.center_y < limit and w.confidence > confidence_floor
        ]

        candidates: List[CandidateName] = []
        for line in NameExtractor.group_words_by_line(top_words):
            line_text = " ".join(w.text for w in line).strip()
            m = _NAME_LINE_RE.match(line_text)
            if not m or not _acceptable(m.group(1)):
                continue
            avg = sum(w.confidence for w in line) / len(line)
            candidates.append(_candidate(m.group(1), "word_layout", avg))

        if not candidates:
            return None

        hint_words = _hint_words(declared_name)
        if hint_words:
            for candidate in candidates:
                if NameExtractor._overlaps_hint(candidate.text, hint_words):
                    return candidate

        return max(candidates, key=lambda c: c.confidence)


# Singleton
name_extractor = NameExtractor()
