"""
Tests de l'extracció del nom del titular
"""
from docverify.models.ocr_result import WordBox, WordLayout
from docverify.parsers.name_extractor import NameExtractor, is_institutional


def _word(text, x0, y0, x1, y1, conf=0.9):
    return WordBox(text=text, bbox=(x0, y0, x1, y1), confidence=conf)


# ---------------------------------------------------------------------------
# Estratègies per text
# ---------------------------------------------------------------------------

class TestDeclaredNameHint:
    def test_hint_wins_over_other_lines(self):
        text = "Rahul Verma\nArnav Mehta\n"
        result = NameExtractor.extract(text, declared_name="Arnav Mehta")
        assert result.text == "Arnav Mehta"
        assert result.source == "declared_name_hint"

    def test_hint_case_insensitive(self):
        result = NameExtractor.from_declared_name("ARNAV   MEHTA\n", "arnav mehta")
        assert result.text == "ARNAV MEHTA"

    def test_single_word_hint_ignored(self):
        assert NameExtractor.from_declared_name("Arnav Mehta", "Arnav") is None

    def test_hint_absent_from_text(self):
        assert NameExtractor.from_declared_name("Rahul Verma", "Arnav Mehta") is None


class TestStandaloneLine:
    def test_aadhaar_without_hint(self, aadhaar_text):
        result = NameExtractor.extract(aadhaar_text)
        assert result.text == "Arnav Mehta"
        assert result.source == "standalone_line"

    def test_prefers_line_close_to_hint(self):
        # "Arnav" llegit com "Amav": el nom declarat no apareix literal
        text = "Rahul Verma\nAmav Mehta\n"
        result = NameExtractor.from_standalone_lines(text, declared_name="Arnav Mehta")
        assert result.text == "Amav Mehta"

    def test_first_candidate_without_hint(self):
        result = NameExtractor.from_standalone_lines("Rahul Verma\nAmav Mehta\n")
        assert result.text == "Rahul Verma"

    def test_institutional_lines_rejected(self):
        assert NameExtractor.from_standalone_lines("Income Tax Department\nGovernment Of India") is None

    def test_all_caps_pan_name(self):
        text = (
            "INCOME TAX DEPARTMENT\nGOVT. OF INDIA\nRAHUL SHARMA\nRAMESH SHARMA\n"
            "01/01/1990\nPermanent Account Number\nABCDE1234F\n"
        )
        result = NameExtractor.extract(text)
        assert result.text == "RAHUL SHARMA"
        assert result.source == "standalone_line"

    def test_all_caps_institutional_line_rejected(self):
        assert NameExtractor.from_standalone_lines("INCOME TAX DEPARTMENT\nREPUBLIC OF INDIA") is None


class TestDateOfBirthProximity:
    def test_line_before_dob(self):
        text = "INCOME TAX DEPARTMENT\nJOHN\nRavi Kumar Singh\nDOB: 12/05/1990\n"
        result = NameExtractor.from_date_of_birth(text)
        assert result.text == "Ravi Kumar Singh"
        assert result.source == "date_of_birth_proximity"

    def test_name_on_same_line_as_dob(self):
        text = "Government of India\nSita Ram Gupta DOB: 02/03/1985\n"
        result = NameExtractor.extract(text)
        assert result.text == "Sita Ram Gupta"
        assert result.source == "date_of_birth_proximity"

    def test_all_caps_before_dob(self):
        text = "INCOME TAX DEPARTMENT\nRAHUL SHARMA\nDOB: 01/01/1990\n"
        result = NameExtractor.from_date_of_birth(text)
        assert result.text == "RAHUL SHARMA"

    def test_no_dob(self):
        assert NameExtractor.from_date_of_birth("Ravi Kumar Singh") is None


class TestExplicitLabel:
    def test_skips_father_name(self):
        text = "Father's Name: Robert Doe\nName: John Doe\n"
        result = NameExtractor.extract(text)
        assert result.text == "John Doe"
        assert result.source == "explicit_label"

    def test_driving_license(self, dl_text):
        result = NameExtractor.extract(dl_text)
        assert result.text == "Rahul Sharma"

    def test_surname_is_not_a_label(self):
        assert NameExtractor.from_label("Surname: Johnson") is None

    def test_single_word_label_rejected(self):
        assert NameExtractor.from_label("Given Name: Robert\nSurname: Johnson\n") is None

    def test_all_caps_label(self):
        assert NameExtractor.from_label("Name: RAHUL SHARMA\n").text == "RAHUL SHARMA"


class TestHeaderProximity:
    def test_between_header_and_number(self):
        text = "Unique Identification Authority of India\nRavi Kumar\n1234 5678 9012"
        result = NameExtractor.from_header(text)
        assert result.text == "Ravi Kumar"
        assert result.source == "header_proximity"

    def test_no_header(self):
        assert NameExtractor.from_header("Ravi Kumar\n1234 5678 9012") is None


class TestExtract:
    def test_no_name(self):
        assert NameExtractor.extract("1234 5678 9012") is None

    def test_empty_text(self):
        assert NameExtractor.extract("") is None

    def test_is_institutional(self):
        assert is_institutional("Government of India")
        assert not is_institutional("Guido Rossi")


# ---------------------------------------------------------------------------
# Estratègia per posició
# ---------------------------------------------------------------------------

class TestWordLayout:
    def _layout(self):
        return WordLayout(page_height=1000, words=[
            _word("India", 300, 21, 380, 50),
            _word("Government", 100, 20, 250, 50),
            _word("of", 260, 22, 290, 50),
            _word("Mehta", 210, 102, 300, 130),
            _word("Arnav", 100, 100, 200, 130),
            _word("Rahul", 100, 200, 200, 230, conf=0.5),
            _word("Sharma", 210, 200, 300, 230, conf=0.5),
            _word("Priya", 100, 800, 200, 830),
            _word("Singh", 210, 800, 300, 830),
        ])

    def test_top_region_high_confidence(self):
        result = NameExtractor.extract_from_layout(self._layout())
        assert result.text == "Arnav Mehta"
        assert result.source == "word_layout"
        assert result.confidence == 0.9

    def test_hint_overlap_preferred(self):
        layout = WordLayout(page_height=1000, words=[
            _word("Arnav", 100, 100, 200, 130, conf=0.7),
            _word("Mehta", 210, 100, 300, 130, conf=0.7),
            _word("Priya", 100, 200, 200, 230, conf=0.95),
            _word("Singh", 210, 200, 300, 230, conf=0.95),
        ])
        assert NameExtractor.extract_from_layout(layout).text == "Priya Singh"
        assert NameExtractor.extract_from_layout(layout, declared_name="Arnav Mehta").text == "Arnav Mehta"

    def test_groups_words_by_line(self):
        lines = NameExtractor.group_words_by_line(self._layout().words[:5])
        assert [" ".join(w.text for w in line) for line in lines] == [
            "Government of India",
            "Arnav Mehta",
        ]

    def test_all_caps_line(self):
        layout = WordLayout(page_height=1000, words=[
            _word("RAHUL", 100, 100, 200, 130),
            _word("SHARMA", 210, 100, 300, 130),
        ])
        assert NameExtractor.extract_from_layout(layout).text == "RAHUL SHARMA"

    def test_no_layout(self):
        assert NameExtractor.extract_from_layout(None) is None
        assert NameExtractor.extract_from_layout(WordLayout()) is None
