"""Shared fixtures for the job sheet extraction tests."""
import pytest

from config import ConfigurationManager


JOB_SHEET = (
    "Customer: John Jerrime\n"
    "Phone: 0411 056 876\n"
    "Bike: Trek Marlin 7\n"
    "Work Required: Fork service\n"
    "Work Done: Fork Service\n"
    "Hub clean\n"
    "Labor: $80\n"
    "Parts: $210\n"
    "Notes: S/T 27/6/2023"
)


@pytest.fixture(autouse=True)
def _reset_config():
    """Each test starts from the shipped settings.yaml."""
    ConfigurationManager.reset()
    yield
    ConfigurationManager.reset()


@pytest.fixture
def job_sheet_text():
    return JOB_SHEET
