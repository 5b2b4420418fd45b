"""
Test Configuration and Fixtures
"""
import io
import os

import pytest
from PIL import Image
from PyPDF2 import PdfWriter

from lexscan import create_app


SAMPLE_ANALYSIS = (
    "KEY IMPORTANT POINTS:\n- Payment due in 30 days\n"
    "SUSPICIOUS ELEMENTS:\n- None found\n"
    "RISK ASSESSMENT:\nLow\n"
    "RECOMMENDATIONS:\n- Review clause 4"
)


@pytest.fixture(scope='session')
def app(tmp_path_factory):
    """Create application for testing"""
    os.environ['FLASK_ENV'] = 'testing'

    app = create_app('testing')
    app.config['TESTING'] = True
    app.config['UPLOAD_FOLDER'] = str(tmp_path_factory.mktemp('uploads'))
    yield app


@pytest.fixture(scope='function')
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture
def upload_dir(app):
    """Upload folder, checked empty after each test that uses it"""
    folder = app.config['UPLOAD_FOLDER']
    yield folder
    assert os.listdir(folder) == []


@pytest.fixture
def sample_analysis():
    return SAMPLE_ANALYSIS


@pytest.fixture(scope='session')
def pdf_bytes():
    writer = PdfWriter()
    writer.add_blank_page(width=72, height=72)
    writer.add_blank_page(width=72, height=72)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


@pytest.fixture(scope='session')
def png_bytes():
    buf = io.BytesIO()
    Image.new('RGB', (4, 3), color=(255, 255, 255)).save(buf, 'PNG')
    return buf.getvalue()


@pytest.fixture
def fake_analyzer(monkeypatch):
    """Replace the OpenAI call; records every call it receives"""
    from datetime import datetime, timezone
    from lexscan.services.openai_service import AnalysisDocument
    from lexscan.services.upload_service import file_extension

    calls = []
    result = {'text': SAMPLE_ANALYSIS, 'error': ''}

    def analyze(path, filename):
        calls.append({'path': path, 'filename': filename, 'existed': os.path.exists(path)})
        if result['error']:
            return None, result['error']
        return AnalysisDocument(
            text=result['text'],
            file_name=filename,
            file_type=file_extension(filename),
            completed_at=datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
        ), ""

    monkeypatch.setattr('lexscan.api.analyze_document', analyze)
    analyze.calls = calls
    analyze.result = result
    return analyze
