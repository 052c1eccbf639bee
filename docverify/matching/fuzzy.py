"""
Comparació aproximada de noms tolerant a errors OCR

Tres nivells, de més simple a més específic:
  (a) edit_similarity():       1 - distància Levenshtein / longitud màxima
  (b) ocr_corrected() + best_edit_distance() + positional_similarity():
      hipòtesi de correcció "rn" llegit com "m" (l'error OCR més freqüent)
  (c) compare_words():         comparador de paraules construït sobre (a) i (b)

compare_names() combina els tres amb prioritat al primer nom.
"""
import re
from typing import Tuple
from rapidfuzz.distance import Levenshtein
from docverify.models.verification import NameMatchResult

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_RN_AS_M = re.compile(r"([A-Z])M(?=[A-Z])", re.IGNORECASE)

OCR_CORRECTION_SIMILARITY = 0.95
RN_PARTIAL_CREDIT = 0.8

EDIT_WEIGHT = 0.6
POSITIONAL_WEIGHT = 0.4

FIRST_NAME_THRESHOLD = 0.85
FIRST_NAME_WEIGHT = 0.7
LAST_NAME_WEIGHT = 0.3

WORD_SET_THRESHOLD = 0.75
WORD_TOLERANCE_RATIO = 0.3

OVERALL_THRESHOLD = 0.80


# ---------------------------------------------------------------------------
# (a) Similitud per distància d'edició
# ---------------------------------------------------------------------------

def normalize_name(name: str) -> str:
    """Majúscules, espais col·lapsats i retallats."""
    return re.sub(r"\s+", " ", (name or "").upper()).strip()


def edit_similarity(a: str, b: str) -> float:
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 0.0
    return 1 - Levenshtein.distance(a, b) / max_len


# ---------------------------------------------------------------------------
# (b) Correcció OCR rn -> m
# ---------------------------------------------------------------------------

def ocr_corrected(text: str) -> str:
    """<lletra>M<lletra> → <lletra>RN<lletra> (ex: "AMAV" → "ARNAV")."""
    return _RN_AS_M.sub(lambda m: m.group(1) + "RN", text)


def corrected_equal(a: str, b: str) -> bool:
    """Cert si alguna variant corregida d'un costat iguala l'altre (o la seva correcció)."""
    ca, cb = ocr_corrected(a), ocr_corrected(b)
    return ca == cb or ca == b or a == cb


def best_edit_distance(a: str, b: str) -> int:
    """Mínima distància Levenshtein entre les 4 combinacions original/corregit."""
    ca, cb = ocr_corrected(a), ocr_corrected(b)
    return min(
        Levenshtein.distance(a, b),
        Levenshtein.distance(ca, b),
        Levenshtein.distance(a, cb),
        Levenshtein.distance(ca, cb),
    )


def positional_similarity(a: str, b: str) -> float:
    """
    Coincidència caràcter a caràcter per posició.
    Crèdit parcial (0.8) on un costat llegeix "RN" i l'altre "M".
    """
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 0.0
    matches = 0.0
    for i in range(min(len(a), len(b))):
        if a[i] == b[i]:
            matches += 1
        elif a[i:i + 2] == "RN" and b[i] == "M":
            matches += RN_PARTIAL_CREDIT
        elif b[i:i + 2] == "RN" and a[i] == "M":
            matches += RN_PARTIAL_CREDIT
    return matches / max_len


def _blended(a: str, b: str) -> Tuple[float, int]:
    """0.6 × similitud d'edició (millor de 4) + 0.4 × similitud posicional."""
    distance = best_edit_distance(a, b)
    max_len = max(len(a), len(b))
    edit = 1 - distance / max_len if max_len else 0.0
    return EDIT_WEIGHT * edit + POSITIONAL_WEIGHT * positional_similarity(a, b), distance


# ---------------------------------------------------------------------------
# (c) Comparador de paraules
# ---------------------------------------------------------------------------

def compare_words(a: str, b: str) -> float:
    a, b = normalize_name(a), normalize_name(b)
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    if corrected_equal(a, b):
        return OCR_CORRECTION_SIMILARITY
    score, _ = _blended(a, b)
    return score


def _word_score(w1: str, w2: str) -> float:
    if w1 == w2:
        return 1.0
    if corrected_equal(w1, w2):
        return OCR_CORRECTION_SIMILARITY
    return edit_similarity(w1, w2)


def _word_close(w1: str, w2: str) -> bool:
    if w1 == w2 or corrected_equal(w1, w2):
        return True
    tolerance = max(1, int(max(len(w1), len(w2)) * WORD_TOLERANCE_RATIO))
    return Levenshtein.distance(w1, w2) <= tolerance


def _all_words_in(words: list, others: list) -> bool:
    return all(any(_word_close(w, o) for o in others) for w in words)


# ---------------------------------------------------------------------------
# Comparació de noms complets
# ---------------------------------------------------------------------------

def compare_names(name1: str, name2: str) -> NameMatchResult:
    """
    Decideix si dos noms coincideixen tolerant soroll OCR.

    Ordre:
      1. exacte                                → 1.0
      2. correcció rn/m sobre el nom complet   → 0.95
      3. primer nom (≥ 0.85), barrejat 70/30 amb el cognom
      4. contenció de conjunts de paraules     → match si mitjana ≥ 0.75
      5. similitud global                      → match si ≥ 0.80 o distància ≤ 1
    """
    n1, n2 = normalize_name(name1), normalize_name(name2)
    if not n1 or not n2:
        return NameMatchResult(match=False, similarity=0.0)

    if n1 == n2:
        return NameMatchResult(match=True, similarity=1.0, strategy="exact")

    if corrected_equal(n1, n2):
        return NameMatchResult(match=True, similarity=OCR_CORRECTION_SIMILARITY, strategy="ocr_correction")

    words1, words2 = n1.split(" "), n2.split(" ")

    first = compare_words(words1[0], words2[0])
    if first >= FIRST_NAME_THRESHOLD:
        similarity = first
        if len(words1) > 1 and len(words2) > 1:
            last = compare_words(words1[-1], words2[-1])
            similarity = first * FIRST_NAME_WEIGHT + last * LAST_NAME_WEIGHT
        return NameMatchResult(match=True, similarity=round(similarity, 4), strategy="first_name")

    if _all_words_in(words1, words2) or _all_words_in(words2, words1):
        total = sum(max(_word_score(w1, w2) for w2 in words2) for w1 in words1)
        similarity = total / max(len(words1), len(words2))
        return NameMatchResult(
            match=similarity >= WORD_SET_THRESHOLD,
            similarity=round(min(similarity, 1.0), 4),
            strategy="word_set",
        )

    combined, distance = _blended(n1, n2)
    return NameMatchResult(
        match=combined >= OVERALL_THRESHOLD or distance <= 1,
        similarity=round(max(0.0, min(combined, 1.0)), 4),
        strategy="overall",
    )
