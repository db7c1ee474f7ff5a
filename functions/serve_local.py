#!/usr/bin/env python3
"""Local development server for BlockPlane Python functions.

This server mimics the Firebase Functions endpoints under plain /api paths.

Usage:
    cd functions
    source venv/bin/activate
    python serve_local.py

This will start a Flask server that handles:
- POST /api/insight -> insight function
- POST /api/insight/canonical -> canonical_insight function
- POST /api/compare -> compare function
"""

import os

# Set environment for local development
os.environ.setdefault('FUNCTIONS_EMULATOR', 'true')
os.environ.setdefault('GCLOUD_PROJECT', 'blockplane-dev')
os.environ.setdefault('USE_FIREBASE_EMULATORS', 'true')

from flask import Flask, request, jsonify
from flask_cors import CORS

# Import the main module after setting env vars
from main import (
    insight,
    canonical_insight,
    compare,
)

app = Flask(__name__)
CORS(app)


class MockRequest:
    """Mock Firebase request object to wrap Flask request."""

    def __init__(self, flask_request):
        self._request = flask_request
        self._json_data = None
        self.method = flask_request.method
        self.headers = dict(flask_request.headers)

    def get_json(self, force=False):
        if self._json_data is None:
            self._json_data = self._request.get_json(force=force)
        return self._json_data


def wrap_firebase_function(firebase_fn):
    """Wrap a Firebase function to work with Flask."""
    def wrapper():
        mock_req = MockRequest(request)
        response = firebase_fn(mock_req)
        return response.get_data(), response.status_code, dict(response.headers)
    return wrapper


@app.route('/api/insight', methods=['POST', 'OPTIONS'])
def handle_insight():
    return wrap_firebase_function(insight)()


@app.route('/api/insight/canonical', methods=['POST', 'OPTIONS'])
def handle_canonical_insight():
    return wrap_firebase_function(canonical_insight)()


@app.route('/api/compare', methods=['POST', 'OPTIONS'])
def handle_compare():
    return wrap_firebase_function(compare)()


# Health check
@app.route('/health', methods=['GET'])
def health():
    return jsonify({'status': 'ok', 'service': 'blockplane-python-functions'})


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5002))
    print(f"""
╔════════════════════════════════════════════════════════════════╗
║  BlockPlane Python Functions - Local Development Server        ║
╠════════════════════════════════════════════════════════════════╣
║                                                                ║
║  Server running on: http://127.0.0.1:{port}                     ║
║                                                                ║
║  Endpoints:                                                    ║
║  • POST /api/insight                                           ║
║  • POST /api/insight/canonical                                 ║
║  • POST /api/compare                                           ║
║                                                                ║
╚════════════════════════════════════════════════════════════════╝
""")
    app.run(host='127.0.0.1', port=port, debug=True, threaded=True)
