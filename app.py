# app.py
# Flask application exposing the credibility analysis pipeline

import logging

from flask import Flask, request, jsonify
from flask_cors import CORS

import config
from database import AnalysisHistory
from models import TEXT, AnalysisRequest
from pipeline import AnalysisPipeline

logging.basicConfig(level=config.LOG_LEVEL, format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')
logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50


def create_app(pipeline: AnalysisPipeline = None, history: AnalysisHistory = None) -> Flask:
    app = Flask(__name__)
    CORS(app, origins=config.CORS_ORIGINS)

    # Initialize components
    pipeline = pipeline or AnalysisPipeline()
    history = history or AnalysisHistory()
    app.config['PIPELINE'] = pipeline
    app.config['HISTORY'] = history

    enabled = [name for name, on in pipeline.integrations().items() if on]
    logger.info("🔌 Optional integrations enabled: %s", ", ".join(enabled) or "none")

    @app.route('/api/analyze', methods=['POST'])
    def analyze():
        """
        Analyze text, a URL or extracted file text
        Returns: AnalysisResult JSON (verdict may be ERROR for rejected input)
        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({'error': 'Request body must be JSON'}), 400

        content = data.get('content')
        if not isinstance(content, str) or not content.strip():
            return jsonify({'error': 'No content provided'}), 400

        analysis_request = AnalysisRequest(
            content=content,
            input_type=str(data.get('type') or TEXT).lower(),
            file_name=data.get('fileName'),
        )

        try:
            result = pipeline.analyze(analysis_request)
        except Exception:
            logger.exception("❌ Analysis failed")
            return jsonify({'error': 'Analysis failed'}), 500

        payload = result.to_dict()
        if not result.is_error:
            try:
                payload['id'] = history.append(analysis_request, result)
            except Exception:
                logger.exception("⚠️ Could not save analysis to history")

        return jsonify(payload)

    @app.route('/api/history', methods=['GET'])
    def list_history():
        """Most recent analyses first"""
        limit = request.args.get('limit', DEFAULT_HISTORY_LIMIT, type=int)
        records = history.list_recent(limit)
        return jsonify({'items': records, 'count': len(records)})

    @app.route('/api/history/<record_id>', methods=['GET'])
    def get_history(record_id):
        record = history.get(record_id)
        if not record:
            return jsonify({'error': 'Analysis not found'}), 404
        return jsonify(record)

    @app.route('/api/history', methods=['DELETE'])
    def clear_history():
        deleted = history.clear()
        logger.info("🗑️ Cleared %d history records", deleted)
        return jsonify({'deleted': deleted})

    @app.route('/api/stats', methods=['GET'])
    def get_stats():
        """Verdict counts and average confidence"""
        return jsonify(history.stats())

    @app.route('/api/health', methods=['GET'])
    def health():
        return jsonify({'ok': True, 'integrations': pipeline.integrations()})

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def internal_error(e):
        return jsonify({'error': 'Internal server error'}), 500

    return app


if __name__ == '__main__':
    logger.info("=" * 60)
    logger.info("🔍 Fake News Detector - Starting Server")
    logger.info("Database: %s", config.DATABASE_NAME)
    logger.info("Features: %s", dict(config.FEATURES))
    logger.info("=" * 60)
    create_app().run(debug=True, port=5000)
