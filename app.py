import logging
from datetime import datetime, timezone

from flask import Flask, jsonify, request
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge
from werkzeug.utils import secure_filename

from config import Settings
from logging_setup import setup_logging
from models import History, make_session
from schemas import MAX_TEXT_LENGTH, GenerationRequest
from services import extract_text
from services.orchestrator import build_orchestrator
from services.study_kit import generate_one, generate_study_kit

LOGGER = logging.getLogger("edubridge.app")

DEMO_TEXT = """
Photosynthesis is a complex biological process that occurs in plants, algae, and some bacteria. This process converts light energy, usually from the sun, into chemical energy in the form of glucose. The overall equation for photosynthesis is: 6CO2 + 6H2O + light energy -> C6H12O6 + 6O2. The process occurs in two main stages: the light-dependent reactions (also called the photo part) and the light-independent reactions (also called the Calvin cycle). During the light-dependent reactions, chlorophyll absorbs light energy and uses it to split water molecules, releasing oxygen as a byproduct. The energy captured is used to produce ATP and NADPH. In the Calvin cycle, CO2 from the atmosphere is fixed into organic molecules using the ATP and NADPH produced in the first stage.
"""


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _validation_message(err: ValidationError) -> str:
    first = err.errors()[0]
    field = first.get("loc", ("",))[0]
    if field == "text" and first.get("type") == "string_too_long":
        limit = first.get("ctx", {}).get("max_length", MAX_TEXT_LENGTH)
        return f"Text too long. Maximum {limit:,} characters allowed."
    if field == "text":
        return "Text content is required"
    if field == "level":
        return "Invalid level. Use middle-school, high-school or college."
    if field == "kind":
        return "Invalid kind. Use summary, quiz or flashcards."
    return first.get("msg", "Invalid request")


def create_app(settings: Settings = None, orchestrator=None) -> Flask:
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)
    orchestrator = orchestrator or build_orchestrator(settings)
    Session = make_session(settings.database_url)

    app = Flask(__name__)
    app.config['MAX_CONTENT_LENGTH'] = settings.max_upload_bytes

    LOGGER.info("Providers configured: %s",
                [p.name for p in orchestrator.providers if p.is_configured()] or "none (heuristic fallback only)")

    def kit_response(text, level, **metadata):
        kit = generate_study_kit(text, level, orchestrator,
                                 spacing=settings.request_spacing,
                                 max_text_length=settings.max_text_length, **metadata)
        return jsonify({'success': True, 'data': kit.to_dict()})

    @app.teardown_appcontext
    def remove_session(exc=None):
        Session.remove()

    @app.get('/api/health')
    def health():
        return jsonify({'status': 'OK', 'timestamp': _now_iso()})

    @app.post('/api/process-text')
    def process_text():
        body = _json_body()
        text = body.get('text') or ''
        level = body.get('level') or 'high-school'
        if not isinstance(text, str) or not text.strip():
            return jsonify({'error': 'Text content is required'}), 400
        if len(text) > settings.max_text_length:
            return jsonify({'error': f'Text too long. Maximum {settings.max_text_length:,} characters allowed.'}), 400
        try:
            return kit_response(text, level)
        except ValidationError as e:
            return jsonify({'error': _validation_message(e)}), 400

    @app.post('/api/process-file')
    def process_file():
        upload = request.files.get('file')
        if not upload or not upload.filename:
            return jsonify({'error': 'No file uploaded'}), 400
        level = request.form.get('level') or 'high-school'

        data = upload.read()
        try:
            text = extract_text.from_upload(upload.filename, upload.mimetype, data)
        except extract_text.UnsupportedFileType:
            return jsonify({'error': 'Unsupported file type'}), 400

        if not text or not text.strip():
            return jsonify({'error': 'No text could be extracted from the file'}), 400
        if len(text) > settings.max_text_length:
            # keep the result within the request limit including the marker
            text = text[:settings.max_text_length - 3] + '...'

        try:
            return kit_response(text, level, filename=secure_filename(upload.filename),
                                file_size=len(data))
        except ValidationError as e:
            return jsonify({'error': _validation_message(e)}), 400

    @app.post('/api/generate')
    def generate():
        body = _json_body()
        try:
            req = GenerationRequest.with_limit(settings.max_text_length,
                                               text=body.get('text') or '',
                                               level=body.get('level') or 'high-school',
                                               kind=body.get('kind') or 'summary')
        except ValidationError as e:
            return jsonify({'error': _validation_message(e)}), 400
        artifact, source = generate_one(req, orchestrator)
        if isinstance(artifact, list):
            artifact = [item.model_dump(mode='json', by_alias=True) for item in artifact]
        return jsonify({'success': True, 'data': {'kind': req.kind.value, 'result': artifact,
                                                  'source': source}})

    @app.get('/api/demo')
    def demo():
        return kit_response(DEMO_TEXT, 'high-school', is_demo=True)

    @app.post('/api/history')
    def save_history():
        body = _json_body()
        summary, quiz, cards = body.get('summary'), body.get('quiz'), body.get('flashcards')
        if not summary or not quiz or not cards:
            return jsonify({'error': 'Missing fields'}), 400
        s = Session()
        item = History(summary=summary, quiz=quiz, flashcards=cards,
                       original_text=body.get('originalText') or '',
                       level=body.get('level'))
        s.add(item)
        s.commit()
        return jsonify({'success': True, 'item': item.to_dict()})

    @app.get('/api/history')
    def list_history():
        s = Session()
        items = s.query(History).order_by(History.created_at.desc(), History.id.desc()).all()
        return jsonify({'success': True, 'items': [i.to_dict() for i in items]})

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(e):
        mb = settings.max_upload_bytes // (1024 * 1024)
        return jsonify({'error': f'File too large. Maximum size is {mb}MB.'}), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': 'Route not found'}), 404

    @app.errorhandler(Exception)
    def unhandled(e):
        if isinstance(e, HTTPException):
            return jsonify({'error': e.description}), e.code
        LOGGER.exception("Unhandled error")
        return jsonify({'error': 'Internal server error'}), 500

    return app


if __name__ == '__main__':
    create_app().run(debug=True, threaded=True)
