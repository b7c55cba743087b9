import pytest

from mindcheck_assessment.question_bank import DATA_DIR, QuestionBank, load_yaml


@pytest.fixture(scope="session")
def bank():
    """The packaged question bank, loaded once for the whole run."""
    return QuestionBank().load()


@pytest.fixture
def bank_data():
    """Fresh parsed copy of the packaged question bank YAML (safe to mutate)."""
    return load_yaml(DATA_DIR / "question_bank.yaml")
