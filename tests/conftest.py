"""Pytest configuration and shared fixtures."""

import pytest
import sys
from pathlib import Path

# Add src to path so we can import lovvelger
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from lovvelger.parser import parse_law  # noqa: E402


HUSLEIELOVEN_PAYLOAD = {
    "base": "LOV-1999-03-26-17",
    "title": "Lov om husleieavtaler (husleieloven)",
    "shortTitle": "Husleieloven",
    "chapters": [
        {
            "id": "kapittel-3",
            "title": "Kapittel 3. Depositum og garanti",
            "paragraphs": [
                {
                    "id": "kapittel-3-paragraf-5",
                    "number": "§ 3-5",
                    "content": "§ 3-5. Depositum. Det kan avtales at leieren skal stille sikkerhet.",
                },
                {
                    "id": "kapittel-3-paragraf-6",
                    "number": "§ 3-6",
                    "content": "§ 3-6. Garanti. Leieren kan stille garanti fra bank.",
                },
            ],
        },
        {
            "id": "kapittel-9",
            "title": "Kapittel 9. Opphør",
            "paragraphs": [
                {
                    "id": "kapittel-9-paragraf-6",
                    "number": "§ 9-6",
                    "content": "§ 9-6. Oppsigelsesfrist. Fristen er tre måneder.",
                },
                {
                    "id": "kapittel-9-paragraf-7",
                    "number": "§ 9-7",
                    "content": "§ 9-7. Formkrav. Oppsigelsen skal være skriftlig.",
                },
            ],
        },
    ],
}

EXAMPLE_PAYLOAD = {
    "base": "LOV-2005-1",
    "title": "Eksempel",
    "chapters": [
        {
            "title": "Kapittel 2",
            "paragraphs": [{"content": "§ 3. Virkeområde. Denne paragrafen gjelder alle."}],
        }
    ],
}


@pytest.fixture
def husleieloven():
    return parse_law(HUSLEIELOVEN_PAYLOAD)


@pytest.fixture
def example_law():
    return parse_law(EXAMPLE_PAYLOAD)
